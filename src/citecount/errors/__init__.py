"""citecount error system."""

from citecount.errors.base import (
    CitecountError,
    ConfigurationError,
    ErrorHandler,
    IdentifierError,
    InsufficientMetadataError,
    MissingIdentifierError,
    ProviderError,
    ProviderNoResultsError,
    RecordStoreError,
    TransportError,
    UnknownProviderError,
)

__all__ = [
    'CitecountError',
    'ConfigurationError',
    'ErrorHandler',
    'IdentifierError',
    'InsufficientMetadataError',
    'MissingIdentifierError',
    'ProviderError',
    'ProviderNoResultsError',
    'RecordStoreError',
    'TransportError',
    'UnknownProviderError',
]
