"""
HTTP transport for citation count lookups.

Wraps a shared ``httpx.AsyncClient``. Network level problems (DNS, connect,
read, timeout) surface as ``TransportError``; any HTTP status, including
4xx/5xx, is returned to the caller for classification.
"""

from dataclasses import dataclass

import httpx
from loguru import logger

from citecount.config import CitecountSettings, get_settings
from citecount.errors import TransportError


@dataclass(frozen=True)
class FetchResponse:
    """Status code and raw body of an HTTP response."""

    status: int
    body: bytes


class HttpTransport:
    """Async GET transport built on httpx."""

    def __init__(
        self,
        timeout: float | None = None,
        user_agent: str | None = None,
        settings: CitecountSettings | None = None,
    ):
        settings = settings or get_settings()
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.user_agent = user_agent or settings.user_agent
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={'User-Agent': self.user_agent, 'Accept': 'application/json'},
                follow_redirects=True,
            )
        return self._client

    async def fetch(self, url: str, headers: dict[str, str] | None = None) -> FetchResponse:
        """
        GET ``url`` and return its status and body.

        Raises:
            TransportError: If no HTTP response was received.
        """
        try:
            response = await self.client.get(url, headers=headers or {})
        except httpx.TimeoutException as e:
            raise TransportError(url, f'Request timed out: {e}') from e
        except httpx.RequestError as e:
            raise TransportError(url, f'Request failed: {e}') from e
        logger.trace(f'GET {response.request.url.host} -> {response.status_code}')
        return FetchResponse(status=response.status_code, body=response.content)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> 'HttpTransport':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
