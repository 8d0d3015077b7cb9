"""
Crossref citation counts.

Crossref only resolves DOIs; the count is the work's
``is-referenced-by-count`` in its CSL-JSON rendering.
"""

from typing import Any

from citecount.counts.providers.base import CitationProvider, Identifier
from citecount.counts.resolution_types import IdentifierKind


class CrossrefProvider(CitationProvider):
    """DOI-indexed registry with public, unauthenticated access."""

    key = 'crossref'
    name = 'Crossref'
    host = 'api.crossref.org'
    supported_kinds = (IdentifierKind.DOI,)

    BASE_URL = 'https://api.crossref.org/works'

    def build_url(self, kind: IdentifierKind, identifier: Identifier) -> str:
        if kind is not IdentifierKind.DOI:
            raise self._unsupported(kind)
        return (
            f'{self.BASE_URL}/{identifier}'
            '/transform/application/vnd.citationstyles.csl+json'
        )

    async def parse(self, kind: IdentifierKind, payload: Any) -> Any:
        return payload['is-referenced-by-count']
