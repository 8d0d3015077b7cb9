"""
Progress reporting collaborators.

One reporter instance belongs to one batch; it is told when each record
starts, how it ended, and when the batch is complete.
"""

from dataclasses import dataclass, field
from typing import Protocol

from loguru import logger

from citecount.utilities.schemas import BibliographicRecord


class ProgressReporter(Protocol):
    def report_start(self, record: BibliographicRecord, display_label: str) -> None: ...

    def report_success(self, record: BibliographicRecord) -> None: ...

    def report_failure(self, record: BibliographicRecord, message: str) -> None: ...

    def report_batch_complete(self) -> None: ...


class LoggingProgressReporter:
    """Reports progress through loguru."""

    def __init__(
        self, headline: str | None = None, finished_headline: str | None = None
    ) -> None:
        self.headline = headline
        self.finished_headline = finished_headline
        self._done = 0
        self._failed = 0

    def report_start(self, record: BibliographicRecord, display_label: str) -> None:
        if self.headline and self._done + self._failed == 0:
            logger.info(self.headline)
        logger.info(f'[{record.key}] {display_label}')

    def report_success(self, record: BibliographicRecord) -> None:
        self._done += 1
        logger.success(f'[{record.key}] citation count updated')

    def report_failure(self, record: BibliographicRecord, message: str) -> None:
        self._failed += 1
        logger.warning(f'[{record.key}] {message}')

    def report_batch_complete(self) -> None:
        logger.info(
            f'{self.finished_headline or "Batch complete"}: '
            f'{self._done} updated, {self._failed} failed'
        )


@dataclass
class RecordingProgressReporter:
    """Collects progress events in order, for callers that render them later."""

    events: list[tuple[str, str | None, str | None]] = field(default_factory=list)

    def report_start(self, record: BibliographicRecord, display_label: str) -> None:
        self.events.append(('start', record.key, display_label))

    def report_success(self, record: BibliographicRecord) -> None:
        self.events.append(('success', record.key, None))

    def report_failure(self, record: BibliographicRecord, message: str) -> None:
        self.events.append(('failure', record.key, message))

    def report_batch_complete(self) -> None:
        self.events.append(('complete', None, None))
