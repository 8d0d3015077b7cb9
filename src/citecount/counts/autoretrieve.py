"""
Automatic retrieval for newly added records.

When the ``autoretrieve`` preference names a provider, records added to the
library are run through the batch processor with that provider.
"""

from loguru import logger

from citecount.counts.batch_processor import BatchStatistics, CitationCountBatchProcessor
from citecount.counts.providers import PROVIDER_KEYS, get_provider
from citecount.services.preferences import PreferenceStore
from citecount.utilities.schemas import BibliographicRecord

AUTORETRIEVE_PREFERENCE = 'autoretrieve'
AUTORETRIEVE_DISABLED = 'none'


class AutoRetrieveHook:
    """Runs the configured provider over records as they are added."""

    def __init__(self, processor: CitationCountBatchProcessor, preferences: PreferenceStore):
        self.processor = processor
        self.preferences = preferences

    def configured_provider_key(self) -> str | None:
        key = self.preferences.get(AUTORETRIEVE_PREFERENCE)
        if not key or key == AUTORETRIEVE_DISABLED:
            return None
        if key not in PROVIDER_KEYS:
            logger.warning(f'Ignoring unknown autoretrieve provider {key!r}')
            return None
        return key

    async def on_records_added(
        self, records: list[BibliographicRecord]
    ) -> BatchStatistics | None:
        """Retrieve counts for ``records`` if auto-retrieve is enabled."""
        key = self.configured_provider_key()
        if key is None or not records:
            return None
        provider = get_provider(key, self.preferences)
        logger.info(f'Auto-retrieving citation counts for {len(records)} new records from {provider.name}')
        return await self.processor.run(records, provider)
