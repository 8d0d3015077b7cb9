"""Unit tests for auto-retrieval of counts for newly added records."""

from unittest.mock import AsyncMock, Mock

import pytest

from citecount.counts.autoretrieve import AutoRetrieveHook
from citecount.counts.batch_processor import BatchStatistics, CitationCountBatchProcessor
from citecount.counts.providers import InspireProvider, SemanticScholarProvider
from citecount.services.preferences import DictPreferenceStore

from tests.fixtures.record_fixtures import record_with_doi


@pytest.fixture
def mock_processor():
    processor = Mock(spec=CitationCountBatchProcessor)
    processor.run = AsyncMock(return_value=BatchStatistics(provider='INSPIRE-HEP'))
    return processor


class TestAutoRetrieveHook:
    """Test the record-added hook."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize('value', [None, '', 'none', 'scopus'])
    async def test_disabled(self, mock_processor, value):
        hook = AutoRetrieveHook(mock_processor, DictPreferenceStore({'autoretrieve': value}))

        assert await hook.on_records_added([record_with_doi()]) is None
        mock_processor.run.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_runs_configured_provider(self, mock_processor):
        records = [record_with_doi(), record_with_doi(key='REC2')]
        hook = AutoRetrieveHook(mock_processor, DictPreferenceStore({'autoretrieve': 'inspire'}))

        stats = await hook.on_records_added(records)

        assert stats.provider == 'INSPIRE-HEP'
        passed_records, provider = mock_processor.run.await_args.args
        assert passed_records == records
        assert isinstance(provider, InspireProvider)

    @pytest.mark.asyncio
    async def test_preferences_applied_to_provider(self, mock_processor):
        hook = AutoRetrieveHook(
            mock_processor,
            DictPreferenceStore({'autoretrieve': 'semanticscholar', 'semanticscholarDelay': 1.5}),
        )

        await hook.on_records_added([record_with_doi()])

        provider = mock_processor.run.await_args.args[1]
        assert isinstance(provider, SemanticScholarProvider)
        assert provider.delay_seconds == 1.5

    @pytest.mark.asyncio
    async def test_no_records(self, mock_processor):
        hook = AutoRetrieveHook(mock_processor, DictPreferenceStore({'autoretrieve': 'crossref'}))

        assert await hook.on_records_added([]) is None
        mock_processor.run.assert_not_awaited()
