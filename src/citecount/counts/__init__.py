"""
Citation count resolution.

Extracts identifiers from records, queries a provider for each identifier
kind in turn, and returns the resolved count or the error to report. The
batch processor (``citecount.counts.batch_processor``) and the auto-retrieve
hook (``citecount.counts.autoretrieve``) build on these and depend on the
services package, so they are imported from their own modules.
"""

from citecount.counts.resolution_types import (
    AttemptError,
    AttemptErrorKind,
    IdentifierKind,
    LookupAttempt,
    ResolutionResult,
    ResolutionStatus,
)
from citecount.counts.extra_field import get_citation_count, set_citation_count
from citecount.counts.transport import FetchResponse, HttpTransport
from citecount.counts.validator import ResponseValidator, redact_url
from citecount.counts.resolution_chain import CitationCountResolver, select_final_error

__all__ = [
    'AttemptError',
    'AttemptErrorKind',
    'CitationCountResolver',
    'FetchResponse',
    'HttpTransport',
    'IdentifierKind',
    'LookupAttempt',
    'ResolutionResult',
    'ResolutionStatus',
    'ResponseValidator',
    'get_citation_count',
    'redact_url',
    'select_final_error',
    'set_citation_count',
]
