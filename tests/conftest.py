"""Pytest configuration and shared fixtures."""

import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio

from citecount.config import CitecountSettings, get_settings
from citecount.counts.resolution_chain import CitationCountResolver
from citecount.counts.transport import HttpTransport
from citecount.counts.validator import ResponseValidator
from citecount.services.preferences import DictPreferenceStore


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch):
    """Keep environment-derived settings out of every test."""
    for name in (
        'CITECOUNT_NASAADS_API_KEY',
        'CITECOUNT_AUTORETRIEVE',
        'CITECOUNT_LOG_LEVEL',
        'CITECOUNT_SEMANTICSCHOLAR_DELAY_SECONDS',
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings():
    """Settings that never read a .env file."""
    return CitecountSettings(_env_file=None, request_timeout=5.0)


@pytest.fixture
def preferences():
    """Preference store with a NASA ADS key and no Semantic Scholar delay."""
    return DictPreferenceStore({'nasaadsApiKey': 'test-ads-token', 'semanticscholarDelay': 0})


@pytest_asyncio.fixture
async def transport(test_settings):
    """HTTP transport closed after the test."""
    transport = HttpTransport(settings=test_settings)
    yield transport
    await transport.close()


@pytest.fixture
def validator(transport, preferences):
    return ResponseValidator(transport, preferences)


@pytest.fixture
def resolver(validator):
    return CitationCountResolver(validator)


@pytest.fixture
def no_sleep():
    """Skip the Semantic Scholar throttle pause."""
    with patch(
        'citecount.counts.providers.semanticscholar.asyncio.sleep', new=AsyncMock()
    ) as mock_sleep:
        yield mock_sleep
