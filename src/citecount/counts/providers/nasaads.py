"""
NASA ADS citation counts.

The astronomy literature index needs an API token (sent as a Bearer header
by the response validator) and supports DOI, arXiv and title/author/year
queries. It is the one provider where an exhaustive three-way fallback is
reported with its own terminal error.
"""

from typing import Any
from urllib.parse import urlencode

from loguru import logger

from citecount.counts.identifiers import TitleAuthorYear
from citecount.counts.providers.base import CitationProvider, Identifier
from citecount.counts.resolution_types import IdentifierKind
from citecount.errors import ProviderNoResultsError

API_KEY_PREFERENCE = 'nasaadsApiKey'


class NasaAdsProvider(CitationProvider):
    """Astrophysics Data System search API."""

    key = 'nasaads'
    name = 'NASA ADS'
    host = 'api.adsabs.harvard.edu'
    supported_kinds = (
        IdentifierKind.DOI,
        IdentifierKind.PREPRINT,
        IdentifierKind.TITLE_AUTHOR_YEAR,
    )
    credential_preference = API_KEY_PREFERENCE
    exhaustive_fallback = True

    BASE_URL = 'https://api.adsabs.harvard.edu/v1/search/query'

    def build_url(self, kind: IdentifierKind, identifier: Identifier) -> str:
        if kind in (IdentifierKind.DOI, IdentifierKind.PREPRINT):
            # identifier is already URL-encoded; ADS field names match kind values
            return f'{self.BASE_URL}?q={kind.value}:{identifier}&fl=citation_count'
        if kind is IdentifierKind.TITLE_AUTHOR_YEAR and isinstance(
            identifier, TitleAuthorYear
        ):
            terms = [f'title:"{identifier.title}"']
            if identifier.author:
                terms.append(f'author:"{identifier.author}"')
            if identifier.year:
                terms.append(f'year:{identifier.year}')
            query = urlencode({'q': ' '.join(terms), 'fl': 'citation_count'})
            return f'{self.BASE_URL}?{query}'
        raise self._unsupported(kind)

    async def parse(self, kind: IdentifierKind, payload: Any) -> Any:
        response = payload.get('response') or {}
        docs = response.get('docs') or []
        num_found = response.get('numFound', len(docs))

        if not docs or num_found == 0:
            raise ProviderNoResultsError(self.name)
        if num_found > 1:
            logger.debug(f'NASA ADS query returned {num_found} results, using the first one')

        return docs[0].get('citation_count')
