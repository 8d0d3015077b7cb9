"""
Citation Count Resolution Type Definitions

This module defines the core types used throughout citation count resolution.
They give the resolver, the response validator and the batch processor one
shared vocabulary for lookup keys, attempt outcomes and final results.

Key Types:
    - IdentifierKind: Lookup keys a provider may accept
    - AttemptErrorKind: Classified failure of one lookup attempt
    - AttemptError: A classified failure with diagnostic context
    - LookupAttempt: Outcome of one (record, identifier kind) lookup
    - ResolutionResult: Final outcome for one (record, provider) pair
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional  # noqa: UP035

from pydantic import BaseModel, Field, model_validator


class IdentifierKind(str, Enum):
    """
    Lookup key used to query a provider.

    Attributes:
        DOI: Digital Object Identifier
        PREPRINT: arXiv preprint identifier
        TITLE_AUTHOR_YEAR: Title plus first author and/or year search
    """

    DOI = 'doi'
    PREPRINT = 'arxiv'
    TITLE_AUTHOR_YEAR = 'title_author_year'

    @property
    def label(self) -> str:
        """Label used in the ``<Provider>/<Label>`` source string."""
        return _KIND_LABELS[self]


_KIND_LABELS = {
    IdentifierKind.DOI: 'DOI',
    IdentifierKind.PREPRINT: 'arXiv',
    IdentifierKind.TITLE_AUTHOR_YEAR: 'Title',
}

# Precedence order used whenever a provider supports several kinds
KIND_PRECEDENCE = (
    IdentifierKind.DOI,
    IdentifierKind.PREPRINT,
    IdentifierKind.TITLE_AUTHOR_YEAR,
)


class AttemptErrorKind(str, Enum):
    """
    Classified failure of a single lookup attempt.

    Soft kinds (missing identifier, insufficient metadata, not found, no
    citation count) are routine. Hard kinds point at a transient or
    configuration problem and outrank soft kinds when the final error for a
    record is chosen.

    NO_RESULTS_ALL_ATTEMPTS never comes out of a single attempt. It is the
    terminal error of providers that run an exhaustive DOI/arXiv/title
    fallback and got nothing but soft failures.
    """

    MISSING_IDENTIFIER = 'missing_identifier'
    INSUFFICIENT_METADATA = 'insufficient_metadata'
    NOT_FOUND = 'not_found'
    NO_CITATION_COUNT = 'no_citation_count'
    RATE_LIMITED = 'rate_limited'
    AUTH_FAILURE = 'auth_failure'
    SERVER_ERROR = 'server_error'
    BAD_REQUEST = 'bad_request'
    NETWORK_FAILURE = 'network_failure'
    UNKNOWN = 'unknown'
    NO_RESULTS_ALL_ATTEMPTS = 'no_results_all_attempts'


SOFT_ERROR_KINDS = frozenset(
    {
        AttemptErrorKind.MISSING_IDENTIFIER,
        AttemptErrorKind.INSUFFICIENT_METADATA,
        AttemptErrorKind.NOT_FOUND,
        AttemptErrorKind.NO_CITATION_COUNT,
        AttemptErrorKind.NO_RESULTS_ALL_ATTEMPTS,
    }
)

# Higher rank wins when choosing the error reported for a record
SEVERITY_RANK = {
    AttemptErrorKind.NETWORK_FAILURE: 6,
    AttemptErrorKind.SERVER_ERROR: 5,
    AttemptErrorKind.AUTH_FAILURE: 4,
    AttemptErrorKind.RATE_LIMITED: 3,
    AttemptErrorKind.BAD_REQUEST: 2,
    AttemptErrorKind.UNKNOWN: 1,
    **{kind: 0 for kind in SOFT_ERROR_KINDS},
}


class AttemptError(BaseModel):
    """
    A classified lookup failure.

    Attributes:
        kind: Classified error kind
        provider: Display name of the provider that was queried
        identifier_kind: Identifier kind the attempt used
        status_code: HTTP status code, when a response was received
        detail: Free-text diagnostic detail for logs
    """

    kind: AttemptErrorKind = Field(description='Classified error kind')
    provider: Optional[str] = Field(  # noqa: UP007
        default=None, description='Provider display name'
    )
    identifier_kind: Optional[IdentifierKind] = Field(  # noqa: UP007
        default=None, description='Identifier kind used by the attempt'
    )
    status_code: Optional[int] = Field(  # noqa: UP007
        default=None, description='HTTP status code if a response was received'
    )
    detail: Optional[str] = Field(  # noqa: UP007
        default=None, description='Diagnostic detail'
    )

    @property
    def is_soft(self) -> bool:
        return self.kind in SOFT_ERROR_KINDS

    @property
    def severity(self) -> int:
        return SEVERITY_RANK[self.kind]


class LookupAttempt(BaseModel):
    """
    Outcome of looking up one record by one identifier kind.

    Carries either a non-negative count plus its source label, or an error.
    """

    kind: IdentifierKind = Field(description='Identifier kind that was tried')
    count: Optional[int] = Field(  # noqa: UP007
        default=None, ge=0, description='Citation count on success'
    )
    source: Optional[str] = Field(  # noqa: UP007
        default=None, description="Source label, e.g. 'Crossref/DOI'"
    )
    error: Optional[AttemptError] = Field(  # noqa: UP007
        default=None, description='Classified failure'
    )

    @model_validator(mode='after')
    def check_outcome(self) -> 'LookupAttempt':
        """Exactly one of count or error must be set."""
        if (self.count is None) == (self.error is None):
            raise ValueError('LookupAttempt needs either a count or an error')
        return self

    @property
    def succeeded(self) -> bool:
        return self.error is None


class ResolutionStatus(str, Enum):
    """Outcome of resolving one record against one provider."""

    SUCCESS = 'success'
    FAILURE = 'failure'


class ResolutionResult(BaseModel):
    """
    Final result of resolving a record's citation count with one provider.

    Attributes:
        provider: Display name of the provider
        status: SUCCESS or FAILURE
        count: Non-negative citation count on success
        source: Source label on success, e.g. 'NASA ADS/arXiv'
        error: The reported error on failure
        attempts: Every lookup attempt made, in attempt order
        resolved_at: Timestamp when resolution completed
    """

    provider: str = Field(description='Provider display name')
    status: ResolutionStatus = Field(description='Resolution outcome')
    count: Optional[int] = Field(default=None, ge=0)  # noqa: UP007
    source: Optional[str] = Field(default=None)  # noqa: UP007
    error: Optional[AttemptError] = Field(default=None)  # noqa: UP007
    attempts: List[LookupAttempt] = Field(default_factory=list)  # noqa: UP006
    resolved_at: datetime = Field(default_factory=datetime.utcnow)

    @model_validator(mode='after')
    def check_status(self) -> 'ResolutionResult':
        """Success carries a count and source; failure carries an error."""
        if self.status == ResolutionStatus.SUCCESS:
            if self.count is None or self.source is None:
                raise ValueError('Successful resolution needs count and source')
        elif self.error is None:
            raise ValueError('Failed resolution needs an error')
        return self

    @classmethod
    def success(
        cls,
        provider: str,
        count: int,
        source: str,
        attempts: List[LookupAttempt] | None = None,  # noqa: UP006
    ) -> 'ResolutionResult':
        return cls(
            provider=provider,
            status=ResolutionStatus.SUCCESS,
            count=count,
            source=source,
            attempts=attempts or [],
        )

    @classmethod
    def failure(
        cls,
        provider: str,
        error: AttemptError,
        attempts: List[LookupAttempt] | None = None,  # noqa: UP006
    ) -> 'ResolutionResult':
        return cls(
            provider=provider,
            status=ResolutionStatus.FAILURE,
            error=error,
            attempts=attempts or [],
        )

    @property
    def succeeded(self) -> bool:
        return self.status == ResolutionStatus.SUCCESS
