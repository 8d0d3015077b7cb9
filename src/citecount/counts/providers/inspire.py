"""INSPIRE-HEP citation counts, looked up by DOI or arXiv identifier."""

from typing import Any

from citecount.counts.providers.base import CitationProvider, Identifier
from citecount.counts.resolution_types import IdentifierKind


class InspireProvider(CitationProvider):
    """High-energy physics literature index."""

    key = 'inspire'
    name = 'INSPIRE-HEP'
    host = 'inspirehep.net'
    supported_kinds = (IdentifierKind.DOI, IdentifierKind.PREPRINT)

    BASE_URL = 'https://inspirehep.net/api'

    def build_url(self, kind: IdentifierKind, identifier: Identifier) -> str:
        if not self.supports(kind):
            raise self._unsupported(kind)
        # INSPIRE's path segments match the identifier kind values: doi, arxiv
        return f'{self.BASE_URL}/{kind.value}/{identifier}'

    async def parse(self, kind: IdentifierKind, payload: Any) -> Any:
        return payload['metadata']['citation_count']
