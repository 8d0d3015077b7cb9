"""
Unit tests for the response validator.

Tests:
- HTTP status classification
- Network failures and malformed bodies
- Count coercion and non-negativity
- Bearer credentials for NASA ADS only
- URL redaction for logs
"""

import httpx
import pytest
import respx
from loguru import logger

from citecount.counts.providers import (
    CrossrefProvider,
    InspireProvider,
    NasaAdsProvider,
    SemanticScholarProvider,
)
from citecount.counts.resolution_types import AttemptErrorKind, IdentifierKind
from citecount.counts.validator import classify_status, coerce_count, redact_url

from tests.fixtures.record_fixtures import (
    MOCK_CROSSREF_CSL,
    MOCK_NASAADS_RESPONSE,
    MOCK_SEMANTIC_SCHOLAR_EMPTY_SEARCH,
)

DOI = IdentifierKind.DOI
CROSSREF_URL = CrossrefProvider().build_url(DOI, '10.1038%2Fnature12345')
ADS_URL = NasaAdsProvider().build_url(DOI, '10.1038%2Fnature12345')


class TestRedactUrl:
    """Test credential redaction."""

    def test_removes_credential_params(self):
        url = 'https://api.example.org/v1/search?q=dark&api_key=SECRET&token=T&fl=count'
        assert redact_url(url) == 'https://api.example.org/v1/search?q=dark&fl=count'

    @pytest.mark.parametrize('param', ['apikey', 'key', 'access_token', 'API_KEY'])
    def test_all_credential_names(self, param):
        assert 'SECRET' not in redact_url(f'https://x.org/a?{param}=SECRET')

    def test_url_without_query_unchanged(self):
        assert redact_url(CROSSREF_URL) == CROSSREF_URL


class TestCoerceCount:
    """Test count coercion."""

    @pytest.mark.parametrize(
        'value,expected',
        [
            (0, 0),
            (42, 42),
            (7.0, 7),
            ('15', 15),
            (' 15 ', 15),
            ('+3', 3),
        ],
    )
    def test_accepted(self, value, expected):
        assert coerce_count(value) == expected

    @pytest.mark.parametrize(
        'value',
        [None, True, False, -1, -3.0, 2.5, '-4', '12a', '', '1.5', '١٢', [], {}, float('nan')],
    )
    def test_rejected(self, value):
        assert coerce_count(value) is None


class TestClassifyStatus:
    """Test HTTP status classification."""

    @pytest.mark.parametrize(
        'status,kind',
        [
            (200, None),
            (204, None),
            (400, AttemptErrorKind.BAD_REQUEST),
            (401, AttemptErrorKind.AUTH_FAILURE),
            (403, AttemptErrorKind.AUTH_FAILURE),
            (404, AttemptErrorKind.NOT_FOUND),
            (418, AttemptErrorKind.BAD_REQUEST),
            (429, AttemptErrorKind.RATE_LIMITED),
            (500, AttemptErrorKind.SERVER_ERROR),
            (503, AttemptErrorKind.SERVER_ERROR),
        ],
    )
    def test_status(self, status, kind):
        assert classify_status(status) == kind


class TestValidate:
    """Test validate() against mocked provider APIs."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_crossref_success(self, validator):
        route = respx.get(host='api.crossref.org').mock(
            return_value=httpx.Response(200, json=MOCK_CROSSREF_CSL)
        )

        attempt = await validator.validate(CrossrefProvider(), DOI, CROSSREF_URL)

        assert attempt.succeeded
        assert attempt.count == 42
        assert attempt.source == 'Crossref/DOI'
        assert route.call_count == 1
        assert 'Authorization' not in route.calls.last.request.headers

    @pytest.mark.asyncio
    @respx.mock
    @pytest.mark.parametrize(
        'status,kind',
        [
            (400, AttemptErrorKind.BAD_REQUEST),
            (401, AttemptErrorKind.AUTH_FAILURE),
            (404, AttemptErrorKind.NOT_FOUND),
            (429, AttemptErrorKind.RATE_LIMITED),
            (502, AttemptErrorKind.SERVER_ERROR),
        ],
    )
    async def test_http_errors(self, validator, status, kind):
        respx.get(host='api.crossref.org').mock(return_value=httpx.Response(status))

        attempt = await validator.validate(CrossrefProvider(), DOI, CROSSREF_URL)

        assert not attempt.succeeded
        assert attempt.error.kind == kind
        assert attempt.error.status_code == status
        assert attempt.error.provider == 'Crossref'
        assert attempt.error.identifier_kind == DOI

    @pytest.mark.asyncio
    @respx.mock
    @pytest.mark.parametrize(
        'exc', [httpx.ConnectTimeout('timed out'), httpx.ConnectError('refused')]
    )
    async def test_network_failure(self, validator, exc):
        respx.get(host='api.crossref.org').mock(side_effect=exc)

        attempt = await validator.validate(CrossrefProvider(), DOI, CROSSREF_URL)

        assert attempt.error.kind == AttemptErrorKind.NETWORK_FAILURE
        assert attempt.error.status_code is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_json(self, validator):
        respx.get(host='api.crossref.org').mock(
            return_value=httpx.Response(200, text='<html>maintenance</html>')
        )

        attempt = await validator.validate(CrossrefProvider(), DOI, CROSSREF_URL)

        assert attempt.error.kind == AttemptErrorKind.NO_CITATION_COUNT

    @pytest.mark.asyncio
    @respx.mock
    @pytest.mark.parametrize('payload', [{'title': 'no count'}, [1, 2], 'text'])
    async def test_parser_failure(self, validator, payload):
        respx.get(host='api.crossref.org').mock(return_value=httpx.Response(200, json=payload))

        attempt = await validator.validate(CrossrefProvider(), DOI, CROSSREF_URL)

        assert attempt.error.kind == AttemptErrorKind.NO_CITATION_COUNT

    @pytest.mark.asyncio
    @respx.mock
    @pytest.mark.parametrize('count', [-1, 'many', 3.5, True, None])
    async def test_unusable_count(self, validator, count):
        """Malformed or negative counts never become a successful attempt."""
        respx.get(host='inspirehep.net').mock(
            return_value=httpx.Response(200, json={'metadata': {'citation_count': count}})
        )

        attempt = await validator.validate(
            InspireProvider(), DOI, 'https://inspirehep.net/api/doi/10.1%2Fx'
        )

        assert attempt.count is None
        assert attempt.error.kind == AttemptErrorKind.NO_CITATION_COUNT

    @pytest.mark.asyncio
    @respx.mock
    async def test_string_count_accepted(self, validator):
        respx.get(host='inspirehep.net').mock(
            return_value=httpx.Response(200, json={'metadata': {'citation_count': '17'}})
        )

        attempt = await validator.validate(
            InspireProvider(), IdentifierKind.PREPRINT, 'https://inspirehep.net/api/arxiv/1706.03762'
        )

        assert attempt.count == 17
        assert attempt.source == 'INSPIRE-HEP/arXiv'

    @pytest.mark.asyncio
    @respx.mock
    async def test_empty_search_is_not_found(self, validator):
        respx.get(host='api.semanticscholar.org').mock(
            return_value=httpx.Response(200, json=MOCK_SEMANTIC_SCHOLAR_EMPTY_SEARCH)
        )
        provider = SemanticScholarProvider(delay_seconds=0)

        attempt = await validator.validate(
            provider,
            IdentifierKind.TITLE_AUTHOR_YEAR,
            'https://api.semanticscholar.org/graph/v1/paper/search?query=x&limit=1',
        )

        assert attempt.error.kind == AttemptErrorKind.NOT_FOUND


class TestCredentials:
    """Test NASA ADS bearer token handling."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_bearer_token_sent(self, validator):
        route = respx.get(host='api.adsabs.harvard.edu').mock(
            return_value=httpx.Response(200, json=MOCK_NASAADS_RESPONSE)
        )

        attempt = await validator.validate(NasaAdsProvider(), DOI, ADS_URL)

        assert attempt.count == 314
        assert route.calls.last.request.headers['Authorization'] == 'Bearer test-ads-token'

    @pytest.mark.asyncio
    @respx.mock
    async def test_token_read_on_every_request(self, validator, preferences):
        route = respx.get(host='api.adsabs.harvard.edu').mock(
            return_value=httpx.Response(200, json=MOCK_NASAADS_RESPONSE)
        )
        provider = NasaAdsProvider()

        await validator.validate(provider, DOI, ADS_URL)
        preferences.values['nasaadsApiKey'] = 'rotated-token'
        await validator.validate(provider, DOI, ADS_URL)

        headers = [call.request.headers['Authorization'] for call in route.calls]
        assert headers == ['Bearer test-ads-token', 'Bearer rotated-token']

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_token_yields_auth_failure(self, validator, preferences):
        del preferences.values['nasaadsApiKey']
        route = respx.get(host='api.adsabs.harvard.edu').mock(return_value=httpx.Response(401))

        attempt = await validator.validate(NasaAdsProvider(), DOI, ADS_URL)

        assert 'Authorization' not in route.calls.last.request.headers
        assert attempt.error.kind == AttemptErrorKind.AUTH_FAILURE

    @pytest.mark.asyncio
    @respx.mock
    async def test_token_never_logged(self, validator):
        respx.get(host='api.adsabs.harvard.edu').mock(return_value=httpx.Response(500))
        messages = []
        sink_id = logger.add(messages.append, level='TRACE', format='{message}')
        try:
            await validator.validate(NasaAdsProvider(), DOI, ADS_URL + '&api_key=test-ads-token')
        finally:
            logger.remove(sink_id)

        assert messages
        assert not any('test-ads-token' in str(message) for message in messages)
