"""
Citation Count Resolution Chain

This module resolves one record's citation count against one provider by
walking the provider's identifier kinds in precedence order.

Resolution Flow:
---------------
1. For each supported kind (DOI, then arXiv, then title/author/year):
   extract the identifier, skipping to the next kind if it is missing
2. Build the lookup URL and validate the response
3. Stop at the first successful attempt
4. If every attempt failed, report the most severe error; ties go to the
   earliest attempt
5. Providers with an exhaustive fallback report a single "no results across
   all attempts" error when every failure was soft

Features:
---------
- Short-circuits on the first success, so later kinds are never requested
- Deterministic error selection through ``SEVERITY_RANK``
- Per-provider resolution statistics
"""

from collections.abc import Sequence

from loguru import logger

from citecount.counts.identifiers import extract_identifier
from citecount.counts.providers.base import CitationProvider
from citecount.counts.resolution_types import (
    AttemptError,
    AttemptErrorKind,
    LookupAttempt,
    ResolutionResult,
)
from citecount.counts.validator import ResponseValidator
from citecount.errors import InsufficientMetadataError, MissingIdentifierError
from citecount.services.record_store import RecordStore
from citecount.utilities.schemas import BibliographicRecord


def select_final_error(errors: Sequence[AttemptError]) -> AttemptError | None:
    """
    Pick the error reported for a record whose attempts all failed.

    The most severe error wins; among equally severe errors the earliest
    one wins. Returns ``None`` for an empty sequence.
    """
    final = None
    for error in errors:
        if final is None or error.severity > final.severity:
            final = error
    return final


class CitationCountResolver:
    """
    Citation count resolver.

    Resolves records against a single provider at a time. Requests go
    through the shared ``ResponseValidator``, so one resolver can serve
    every provider.

    Attributes:
        validator: Response validator used for every lookup
    """

    def __init__(self, validator: ResponseValidator):
        self.validator = validator
        self._stats = {
            'total_processed': 0,
            'resolved': 0,
            'failed': 0,
            'requests': 0,
        }

    async def resolve(
        self,
        record: BibliographicRecord,
        provider: CitationProvider,
        store: RecordStore | None = None,
    ) -> ResolutionResult:
        """
        Resolve the citation count of ``record`` with ``provider``.

        Args:
            record: Record to look up
            provider: Provider to query
            store: Record store the identifiers are read through; the
                record's own fields are used when omitted

        Returns:
            ResolutionResult with the count and source, or the final error
        """
        self._stats['total_processed'] += 1
        attempts: list[LookupAttempt] = []

        for kind in provider.supported_kinds:
            try:
                identifier = extract_identifier(record, kind, store)
            except (MissingIdentifierError, InsufficientMetadataError) as e:
                error_kind = (
                    AttemptErrorKind.MISSING_IDENTIFIER
                    if isinstance(e, MissingIdentifierError)
                    else AttemptErrorKind.INSUFFICIENT_METADATA
                )
                logger.debug(f'[{record.key}] {provider.name}/{kind.label}: {e.message}')
                attempts.append(
                    LookupAttempt(
                        kind=kind,
                        error=AttemptError(
                            kind=error_kind,
                            provider=provider.name,
                            identifier_kind=kind,
                            detail=e.message,
                        ),
                    )
                )
                continue

            url = provider.build_url(kind, identifier)
            self._stats['requests'] += 1
            attempt = await self.validator.validate(provider, kind, url)
            attempts.append(attempt)

            if attempt.succeeded:
                self._stats['resolved'] += 1
                logger.info(
                    f'[{record.key}] resolved via {attempt.source}: {attempt.count}'
                )
                return ResolutionResult.success(
                    provider=provider.name,
                    count=attempt.count,
                    source=attempt.source,
                    attempts=attempts,
                )

        self._stats['failed'] += 1
        error = self._final_error(provider, attempts)
        logger.info(f'[{record.key}] {provider.name} failed: {error.kind.value}')
        return ResolutionResult.failure(
            provider=provider.name, error=error, attempts=attempts
        )

    def _final_error(
        self, provider: CitationProvider, attempts: list[LookupAttempt]
    ) -> AttemptError:
        errors = [attempt.error for attempt in attempts if attempt.error is not None]

        if not errors:
            return AttemptError(
                kind=AttemptErrorKind.UNKNOWN,
                provider=provider.name,
                detail='Provider supports no identifier kinds',
            )

        if provider.exhaustive_fallback and all(error.is_soft for error in errors):
            return AttemptError(
                kind=AttemptErrorKind.NO_RESULTS_ALL_ATTEMPTS,
                provider=provider.name,
                detail='; '.join(f'{e.identifier_kind.label}: {e.kind.value}' for e in errors),
            )

        return select_final_error(errors)

    def get_statistics(self) -> dict[str, int]:
        """Get resolution statistics."""
        return self._stats.copy()
