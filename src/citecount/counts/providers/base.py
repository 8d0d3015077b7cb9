"""
Base class for citation count providers.

Each provider declares which identifier kinds it accepts, in precedence
order, and implements one URL builder and one response parser covering
those kinds. The resolver only talks to providers through this interface.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar
from urllib.parse import urlparse

from citecount.counts.identifiers import TitleAuthorYear
from citecount.counts.resolution_types import KIND_PRECEDENCE, IdentifierKind
from citecount.errors import ConfigurationError

Identifier = str | TitleAuthorYear


class CitationProvider(ABC):
    """
    A citation-data source queried for a single citation count.

    Class attributes:
        key: Stable key used in preferences and on the command line
        name: Display name, also the first half of the source label
        host: Host name requests are sent to
        supported_kinds: Identifier kinds in the order they are attempted
        credential_preference: Preference key holding a Bearer token, if the
            provider requires one
        exhaustive_fallback: Whether an all-soft failure is reported with the
            dedicated "no results across all attempts" error
    """

    key: ClassVar[str]
    name: ClassVar[str]
    host: ClassVar[str]
    supported_kinds: ClassVar[tuple[IdentifierKind, ...]]
    credential_preference: ClassVar[str | None] = None
    exhaustive_fallback: ClassVar[bool] = False

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        kinds = getattr(cls, 'supported_kinds', ())
        if list(kinds) != [k for k in KIND_PRECEDENCE if k in kinds]:
            raise ConfigurationError(
                'PROVIDER_KIND_ORDER',
                f'{cls.__name__}.supported_kinds must follow DOI, arXiv, Title order',
            )

    def supports(self, kind: IdentifierKind) -> bool:
        return kind in self.supported_kinds

    def source_label(self, kind: IdentifierKind) -> str:
        """Return the ``<Provider>/<Kind>`` label stored next to a count."""
        return f'{self.name}/{kind.label}'

    def requires_credentials(self, url: str) -> bool:
        """Whether a request to ``url`` must carry this provider's token."""
        if not self.credential_preference:
            return False
        return urlparse(url).hostname == self.host

    @abstractmethod
    def build_url(self, kind: IdentifierKind, identifier: Identifier) -> str:
        """
        Build the request URL for an identifier of the given kind.

        Args:
            kind: Identifier kind, one of ``supported_kinds``
            identifier: URL-encoded DOI/arXiv id, or a ``TitleAuthorYear``

        Returns:
            Absolute request URL
        """

    @abstractmethod
    async def parse(self, kind: IdentifierKind, payload: Any) -> Any:
        """
        Pull the raw citation count out of a decoded JSON response.

        The return value is validated and coerced by the caller; returning
        ``None`` means the response carried no usable count. Raise
        ``ProviderNoResultsError`` when a search matched nothing.
        """

    def _unsupported(self, kind: IdentifierKind) -> ConfigurationError:
        return ConfigurationError(
            'UNSUPPORTED_IDENTIFIER_KIND',
            f'{self.name} does not support {kind.label} lookups',
            context={'provider': self.key, 'kind': kind.value},
        )

    def __repr__(self) -> str:
        kinds = ', '.join(kind.label for kind in self.supported_kinds)
        return f'<{type(self).__name__} {self.name!r} [{kinds}]>'
