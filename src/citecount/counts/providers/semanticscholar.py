"""
Semantic Scholar citation counts.

Supports direct DOI and arXiv paper lookups and a keyword search built from
title, first author and year. The public API is strictly rate limited, so
every parsed response is followed by a mandatory pause before its count is
handed back.
"""

import asyncio
from typing import Any
from urllib.parse import urlencode

from loguru import logger

from citecount.counts.identifiers import TitleAuthorYear
from citecount.counts.providers.base import CitationProvider, Identifier
from citecount.counts.resolution_types import IdentifierKind
from citecount.errors import ProviderNoResultsError

DEFAULT_DELAY_SECONDS = 3.0


class SemanticScholarProvider(CitationProvider):
    """General scholarly graph with a throttled public API."""

    key = 'semanticscholar'
    name = 'Semantic Scholar'
    host = 'api.semanticscholar.org'
    supported_kinds = (
        IdentifierKind.DOI,
        IdentifierKind.PREPRINT,
        IdentifierKind.TITLE_AUTHOR_YEAR,
    )

    BASE_URL = 'https://api.semanticscholar.org/graph/v1/paper'

    def __init__(self, delay_seconds: float = DEFAULT_DELAY_SECONDS) -> None:
        """
        Initialize the provider.

        Args:
            delay_seconds: Minimum wait after each response before the count
                is returned
        """
        if delay_seconds < 0:
            raise ValueError('delay_seconds cannot be negative')
        self.delay_seconds = delay_seconds

    def build_url(self, kind: IdentifierKind, identifier: Identifier) -> str:
        if kind is IdentifierKind.DOI:
            return f'{self.BASE_URL}/DOI:{identifier}?fields=citationCount'
        if kind is IdentifierKind.PREPRINT:
            return f'{self.BASE_URL}/arXiv:{identifier}?fields=citationCount'
        if kind is IdentifierKind.TITLE_AUTHOR_YEAR and isinstance(
            identifier, TitleAuthorYear
        ):
            terms = [identifier.title]
            if identifier.author:
                terms.append(identifier.author)
            params = {
                'query': ' '.join(terms),
                'fields': 'citationCount,externalIds',
                'limit': 1,
            }
            if identifier.year:
                params['year'] = identifier.year
            return f'{self.BASE_URL}/search?{urlencode(params)}'
        raise self._unsupported(kind)

    async def parse(self, kind: IdentifierKind, payload: Any) -> Any:
        # Throttle before any return, including the no-result paths
        await asyncio.sleep(self.delay_seconds)

        if 'data' in payload:
            results = payload['data'] or []
            if not results:
                raise ProviderNoResultsError(self.name)
            if len(results) > 1:
                logger.debug(
                    f'Semantic Scholar search returned {len(results)} results, '
                    'using the first one'
                )
            return results[0].get('citationCount')

        return payload.get('citationCount')
