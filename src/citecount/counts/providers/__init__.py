"""
Citation count providers.

``PROVIDER_CLASSES`` is the static provider table, in menu order.
``get_provider`` builds a provider for a key, applying preference overrides
such as the Semantic Scholar delay.
"""

from typing import TYPE_CHECKING

from citecount.counts.providers.base import CitationProvider, Identifier
from citecount.counts.providers.crossref import CrossrefProvider
from citecount.counts.providers.inspire import InspireProvider
from citecount.counts.providers.nasaads import NasaAdsProvider
from citecount.counts.providers.semanticscholar import (
    DEFAULT_DELAY_SECONDS,
    SemanticScholarProvider,
)
from citecount.errors import UnknownProviderError

if TYPE_CHECKING:
    from citecount.services.preferences import PreferenceStore

SEMANTICSCHOLAR_DELAY_PREFERENCE = 'semanticscholarDelay'

PROVIDER_CLASSES: tuple[type[CitationProvider], ...] = (
    CrossrefProvider,
    InspireProvider,
    SemanticScholarProvider,
    NasaAdsProvider,
)

PROVIDER_KEYS = tuple(cls.key for cls in PROVIDER_CLASSES)


def _delay_override(preferences: 'PreferenceStore | None') -> float:
    if preferences is None:
        return DEFAULT_DELAY_SECONDS
    value = preferences.get(SEMANTICSCHOLAR_DELAY_PREFERENCE)
    if value is None or value == '':
        return DEFAULT_DELAY_SECONDS
    try:
        return max(float(value), 0.0)
    except (TypeError, ValueError):
        return DEFAULT_DELAY_SECONDS


def get_provider(
    key: str, preferences: 'PreferenceStore | None' = None
) -> CitationProvider:
    """
    Build the provider registered under ``key``.

    Raises:
        UnknownProviderError: If no provider uses that key.
    """
    for cls in PROVIDER_CLASSES:
        if cls.key == key:
            if cls is SemanticScholarProvider:
                return SemanticScholarProvider(
                    delay_seconds=_delay_override(preferences)
                )
            return cls()
    raise UnknownProviderError(key)


def list_providers(
    preferences: 'PreferenceStore | None' = None,
) -> list[CitationProvider]:
    """Build every registered provider, in menu order."""
    return [get_provider(key, preferences) for key in PROVIDER_KEYS]


__all__ = [
    'PROVIDER_CLASSES',
    'PROVIDER_KEYS',
    'SEMANTICSCHOLAR_DELAY_PREFERENCE',
    'CitationProvider',
    'CrossrefProvider',
    'Identifier',
    'InspireProvider',
    'NasaAdsProvider',
    'SemanticScholarProvider',
    'get_provider',
    'list_providers',
]
