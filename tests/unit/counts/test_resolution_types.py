"""Unit tests for citation count resolution types."""

import pytest
from pydantic import ValidationError

from citecount.counts.resolution_types import (
    SEVERITY_RANK,
    SOFT_ERROR_KINDS,
    AttemptError,
    AttemptErrorKind,
    IdentifierKind,
    LookupAttempt,
    ResolutionResult,
    ResolutionStatus,
)


class TestSeverity:
    """Test the severity table."""

    def test_every_kind_ranked(self):
        assert set(SEVERITY_RANK) == set(AttemptErrorKind)

    def test_order(self):
        ranked = sorted(
            (kind for kind in AttemptErrorKind if kind not in SOFT_ERROR_KINDS),
            key=SEVERITY_RANK.get,
            reverse=True,
        )
        assert ranked == [
            AttemptErrorKind.NETWORK_FAILURE,
            AttemptErrorKind.SERVER_ERROR,
            AttemptErrorKind.AUTH_FAILURE,
            AttemptErrorKind.RATE_LIMITED,
            AttemptErrorKind.BAD_REQUEST,
            AttemptErrorKind.UNKNOWN,
        ]

    def test_soft_kinds_rank_lowest(self):
        assert all(SEVERITY_RANK[kind] == 0 for kind in SOFT_ERROR_KINDS)
        assert AttemptError(kind=AttemptErrorKind.NOT_FOUND).is_soft
        assert not AttemptError(kind=AttemptErrorKind.UNKNOWN).is_soft


class TestLookupAttempt:
    """Test attempt validation."""

    def test_count_xor_error(self):
        with pytest.raises(ValidationError):
            LookupAttempt(kind=IdentifierKind.DOI)
        with pytest.raises(ValidationError):
            LookupAttempt(
                kind=IdentifierKind.DOI,
                count=1,
                source='X/DOI',
                error=AttemptError(kind=AttemptErrorKind.UNKNOWN),
            )

    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError):
            LookupAttempt(kind=IdentifierKind.DOI, count=-1, source='X/DOI')


class TestResolutionResult:
    """Test result construction."""

    def test_success(self):
        result = ResolutionResult.success('Crossref', 0, 'Crossref/DOI')
        assert result.status == ResolutionStatus.SUCCESS
        assert result.succeeded
        assert result.error is None

    def test_failure_needs_error(self):
        with pytest.raises(ValidationError):
            ResolutionResult(provider='Crossref', status=ResolutionStatus.FAILURE)

    def test_success_needs_source(self):
        with pytest.raises(ValidationError):
            ResolutionResult(provider='Crossref', status=ResolutionStatus.SUCCESS, count=3)

    def test_kind_labels(self):
        assert [kind.label for kind in IdentifierKind] == ['DOI', 'arXiv', 'Title']
