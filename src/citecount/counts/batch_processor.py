"""
Batch Citation Count Processor

Runs a provider over a list of records and writes each resolved count back
into the record's ``extra`` field:
- Feed items are skipped
- Records are processed strictly one after another, in list order
- Each record gets exactly one success or one localized failure report
- A failure on one record never stops the batch
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from loguru import logger

from citecount.counts.extra_field import set_citation_count
from citecount.counts.providers.base import CitationProvider
from citecount.counts.resolution_chain import CitationCountResolver
from citecount.counts.resolution_types import AttemptErrorKind, ResolutionResult
from citecount.services.localization import Localizer, message_key_for
from citecount.services.progress import ProgressReporter
from citecount.services.record_store import RecordStore
from citecount.utilities.schemas import BibliographicRecord


@dataclass
class BatchStatistics:
    """
    Statistics for one batch run.

    Attributes:
        provider: Display name of the provider used
        total_records: Records handed to the batch, feed items included
        skipped_feed_items: Feed items dropped before processing
        processed_records: Records that received a report
        successful_updates: Records whose count was written
        failed_updates: Records reported as failures
        errors_by_kind: Failure counts keyed by error kind
    """

    provider: str = ''
    total_records: int = 0
    skipped_feed_items: int = 0
    processed_records: int = 0
    successful_updates: int = 0
    failed_updates: int = 0
    errors_by_kind: dict[str, int] = field(default_factory=dict)
    start_time: datetime | None = None
    end_time: datetime | None = None

    def record_failure(self, kind: AttemptErrorKind) -> None:
        self.failed_updates += 1
        self.errors_by_kind[kind.value] = self.errors_by_kind.get(kind.value, 0) + 1

    @property
    def processing_time_seconds(self) -> float:
        if self.start_time is None or self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert statistics to dictionary."""
        return {
            'provider': self.provider,
            'total_records': self.total_records,
            'skipped_feed_items': self.skipped_feed_items,
            'processed_records': self.processed_records,
            'successful_updates': self.successful_updates,
            'failed_updates': self.failed_updates,
            'errors_by_kind': dict(self.errors_by_kind),
            'processing_time_seconds': self.processing_time_seconds,
        }


class CitationCountBatchProcessor:
    """
    Sequential batch processor for citation count retrieval.

    Attributes:
        resolver: Resolver used for each record
        store: Record store the counts are written to
        progress: Progress reporter for this batch
        localizer: Localizer used for failure messages
    """

    def __init__(
        self,
        resolver: CitationCountResolver,
        store: RecordStore,
        progress: ProgressReporter,
        localizer: Localizer | None = None,
        today: date | None = None,
    ):
        self.resolver = resolver
        self.store = store
        self.progress = progress
        self.localizer = localizer or Localizer()
        self.today = today

    def _failure_message(self, kind: AttemptErrorKind, provider: CitationProvider) -> str:
        return self.localizer.format(message_key_for(kind), {'provider': provider.name})

    def _write_count(self, record: BibliographicRecord, result: ResolutionResult) -> None:
        extra = self.store.get_field(record, 'extra')
        updated = set_citation_count(extra, result.source, result.count, self.today)
        self.store.set_field(record, 'extra', updated)
        self.store.commit(record)

    async def run(
        self, records: list[BibliographicRecord], provider: CitationProvider
    ) -> BatchStatistics:
        """
        Resolve and store citation counts for ``records``.

        Args:
            records: Records selected by the user, in display order
            provider: Provider to query

        Returns:
            BatchStatistics for the run
        """
        stats = BatchStatistics(provider=provider.name, total_records=len(records))
        eligible = [record for record in records if not record.is_feed_item]
        stats.skipped_feed_items = len(records) - len(eligible)

        if not eligible:
            logger.info(f'No eligible records for {provider.name}, nothing to do')
            return stats

        stats.start_time = datetime.now()
        logger.info(f'Retrieving citation counts for {len(eligible)} records from {provider.name}')

        for record in eligible:
            stats.processed_records += 1
            try:
                self.progress.report_start(record, record.display_label)
                result = await self.resolver.resolve(record, provider, self.store)
                if result.succeeded:
                    self._write_count(record, result)
                    self.progress.report_success(record)
                    stats.successful_updates += 1
                    continue
                error_kind = result.error.kind
            except Exception as e:
                logger.exception(f'[{record.key}] unexpected error: {e}')
                error_kind = AttemptErrorKind.UNKNOWN

            stats.record_failure(error_kind)
            self.progress.report_failure(record, self._failure_message(error_kind, provider))

        self.progress.report_batch_complete()
        stats.end_time = datetime.now()
        logger.info(
            f'{provider.name}: {stats.successful_updates} updated, '
            f'{stats.failed_updates} failed in {stats.processing_time_seconds:.2f}s'
        )
        return stats
