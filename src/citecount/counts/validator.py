"""
Response validation for citation count lookups.

Turns one HTTP request against one provider into a ``LookupAttempt``:
either a non-negative count with its source label, or a classified
``AttemptError``. Nothing in here raises for provider or network problems;
every failure becomes data the resolver can rank.

Classification:
--------------
- No response (DNS, connect, timeout)  -> NETWORK_FAILURE
- 401 / 403                            -> AUTH_FAILURE
- 400 and other unexpected statuses    -> BAD_REQUEST
- 404                                  -> NOT_FOUND
- 429                                  -> RATE_LIMITED
- 5xx                                  -> SERVER_ERROR
- Body is not JSON                     -> NO_CITATION_COUNT
- Parser reports zero search results   -> NOT_FOUND
- Count missing, malformed or negative -> NO_CITATION_COUNT
"""

import json
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from loguru import logger

from citecount.counts.providers.base import CitationProvider
from citecount.counts.resolution_types import (
    AttemptError,
    AttemptErrorKind,
    IdentifierKind,
    LookupAttempt,
)
from citecount.counts.transport import HttpTransport
from citecount.errors import ProviderNoResultsError, TransportError
from citecount.services.preferences import PreferenceStore

SENSITIVE_QUERY_PARAMS = frozenset({'api_key', 'apikey', 'key', 'token', 'access_token'})


def redact_url(url: str) -> str:
    """Drop credential query parameters from ``url`` before it is logged."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [
        (name, value)
        for name, value in parse_qsl(parts.query, keep_blank_values=True)
        if name.lower() not in SENSITIVE_QUERY_PARAMS
    ]
    return urlunsplit(parts._replace(query=urlencode(query)))


def classify_status(status: int) -> AttemptErrorKind | None:
    """Map an HTTP status to an error kind, or ``None`` for 2xx."""
    if 200 <= status < 300:
        return None
    if status in (401, 403):
        return AttemptErrorKind.AUTH_FAILURE
    if status == 404:
        return AttemptErrorKind.NOT_FOUND
    if status == 429:
        return AttemptErrorKind.RATE_LIMITED
    if 500 <= status < 600:
        return AttemptErrorKind.SERVER_ERROR
    return AttemptErrorKind.BAD_REQUEST


def coerce_count(value: Any) -> int | None:
    """
    Coerce a parsed count to a non-negative int.

    Returns ``None`` for anything that is not a whole, non-negative number:
    booleans, fractional floats, non-numeric strings, containers and
    negative values.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        count = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        count = int(value)
    elif isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text[:1] in ('+', '-') else text
        if not digits.isdigit() or not digits.isascii():
            return None
        count = int(text)
    else:
        return None
    return count if count >= 0 else None


class ResponseValidator:
    """
    Fetches a lookup URL and validates the response.

    Attributes:
        transport: HTTP transport used for requests
        preferences: Preference store read for provider credentials
    """

    def __init__(self, transport: HttpTransport, preferences: PreferenceStore):
        self.transport = transport
        self.preferences = preferences

    def build_headers(self, provider: CitationProvider, url: str) -> dict[str, str]:
        """Attach the provider's API key for credentialed hosts only."""
        if not provider.requires_credentials(url):
            return {}
        api_key = self.preferences.get(provider.credential_preference)
        if not api_key:
            logger.warning(f'{provider.name}: no API key configured')
            return {}
        return {'Authorization': f'Bearer {api_key}'}

    def _error(
        self,
        provider: CitationProvider,
        kind: IdentifierKind,
        error_kind: AttemptErrorKind,
        status: int | None = None,
        detail: str | None = None,
    ) -> LookupAttempt:
        return LookupAttempt(
            kind=kind,
            error=AttemptError(
                kind=error_kind,
                provider=provider.name,
                identifier_kind=kind,
                status_code=status,
                detail=detail,
            ),
        )

    async def validate(
        self, provider: CitationProvider, kind: IdentifierKind, url: str
    ) -> LookupAttempt:
        """
        Request ``url`` and classify the outcome.

        Args:
            provider: Provider the URL was built by
            kind: Identifier kind the URL encodes
            url: Fully built lookup URL

        Returns:
            LookupAttempt with a count on success, or an AttemptError
        """
        safe_url = redact_url(url)
        logger.debug(f'{provider.name}/{kind.label}: requesting {safe_url}')

        try:
            response = await self.transport.fetch(url, self.build_headers(provider, url))
        except TransportError as e:
            logger.warning(f'{provider.name}/{kind.label}: network failure for {safe_url}: {e.message}')
            return self._error(provider, kind, AttemptErrorKind.NETWORK_FAILURE, detail=e.message)

        error_kind = classify_status(response.status)
        if error_kind is not None:
            logger.warning(
                f'{provider.name}/{kind.label}: HTTP {response.status} for {safe_url} '
                f'({error_kind.value})'
            )
            return self._error(provider, kind, error_kind, status=response.status)

        try:
            payload = json.loads(response.body)
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning(f'{provider.name}/{kind.label}: invalid JSON from {safe_url}: {e}')
            return self._error(
                provider,
                kind,
                AttemptErrorKind.NO_CITATION_COUNT,
                status=response.status,
                detail='Response body is not JSON',
            )

        try:
            raw_count = await provider.parse(kind, payload)
        except ProviderNoResultsError as e:
            logger.info(f'{provider.name}/{kind.label}: {e.message}')
            return self._error(
                provider, kind, AttemptErrorKind.NOT_FOUND, status=response.status, detail=e.message
            )
        except Exception as e:
            logger.warning(f'{provider.name}/{kind.label}: could not parse response: {e!r}')
            return self._error(
                provider,
                kind,
                AttemptErrorKind.NO_CITATION_COUNT,
                status=response.status,
                detail=repr(e),
            )

        count = coerce_count(raw_count)
        if count is None:
            logger.info(f'{provider.name}/{kind.label}: no usable citation count ({raw_count!r})')
            return self._error(
                provider,
                kind,
                AttemptErrorKind.NO_CITATION_COUNT,
                status=response.status,
                detail=f'Unusable count value: {raw_count!r}',
            )

        source = provider.source_label(kind)
        logger.info(f'{source}: {count} citations')
        return LookupAttempt(kind=kind, count=count, source=source)
