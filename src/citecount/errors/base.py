"""Structured error classes for citecount."""

from __future__ import annotations

from typing import Any

from loguru import logger


class CitecountError(Exception):
    """Base exception for citecount errors."""

    def __init__(
        self,
        error_code: str,
        message: str,
        recoverable: bool = False,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.recoverable = recoverable
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize error details to a dictionary."""
        return {
            'error_code': self.error_code,
            'message': self.message,
            'recoverable': self.recoverable,
            'context': self.context,
        }


class IdentifierError(CitecountError):
    """A record does not carry the identifier a lookup needs."""


class MissingIdentifierError(IdentifierError):
    """The record has no DOI or preprint identifier to look up."""

    def __init__(self, identifier_kind: str, message: str | None = None) -> None:
        super().__init__(
            'MISSING_IDENTIFIER',
            message or f'Record has no {identifier_kind} identifier',
            recoverable=True,
            context={'identifier_kind': identifier_kind},
        )
        self.identifier_kind = identifier_kind


class InsufficientMetadataError(IdentifierError):
    """Title/author/year search lacks the fields it needs."""

    def __init__(self, message: str = 'Insufficient metadata for title search') -> None:
        super().__init__('INSUFFICIENT_METADATA', message, recoverable=True)


class TransportError(CitecountError):
    """DNS, connect, read or timeout failure below the HTTP status layer."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(
            'TRANSPORT_FAILURE', message, recoverable=True, context={'url': url}
        )
        self.url = url


class ProviderError(CitecountError):
    """Error raised for provider lookup and parsing problems."""


class ProviderNoResultsError(ProviderError):
    """A provider search matched no records."""

    def __init__(self, provider: str, message: str | None = None) -> None:
        super().__init__(
            'PROVIDER_NO_RESULTS',
            message or f'{provider} returned no results',
            recoverable=True,
            context={'provider': provider},
        )


class UnknownProviderError(ProviderError):
    """No provider is registered under the requested key."""

    def __init__(self, key: str) -> None:
        super().__init__(
            'UNKNOWN_PROVIDER', f'Unknown citation provider: {key!r}', context={'key': key}
        )


class RecordStoreError(CitecountError):
    """Error raised when records cannot be read or written."""


class ConfigurationError(CitecountError):
    """Error raised for invalid configuration."""


class ErrorHandler:
    """Centralized error handler for citecount."""

    def __init__(self) -> None:
        self.errors: list[CitecountError] = []

    def handle(self, error: CitecountError) -> bool:
        """Handle an error and return whether it is recoverable."""
        logger.error(f'{error.error_code}: {error.message}')
        self.errors.append(error)
        return error.recoverable

    def serialize_errors(self) -> list[dict[str, Any]]:
        """Serialize stored errors to a list of dictionaries."""
        return [err.to_dict() for err in self.errors]

    def clear(self) -> None:
        """Clear stored errors."""
        self.errors.clear()
