"""Unit tests for common utils (pure functions only)."""
from datetime import datetime, timedelta, timezone

import pytest

from learnpath.utils.common import (
    as_naive_utc,
    elapsed_seconds,
    elapsed_whole_minutes,
    round_half_up,
    utcnow,
)
from learnpath.utils.errors import RecordStoreError, WriteResult


@pytest.mark.unit
class TestRoundHalfUp:
    def test_half_goes_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(66.5) == 67

    def test_below_half_goes_down(self):
        assert round_half_up(66.4999) == 66

    def test_two_thirds(self):
        assert round_half_up(200 / 3) == 67

    def test_integers_unchanged(self):
        assert round_half_up(0) == 0
        assert round_half_up(100) == 100


@pytest.mark.unit
class TestElapsed:
    def test_whole_minutes_drop_partial(self):
        start = datetime(2025, 1, 1, 10, 0, 0)
        assert elapsed_whole_minutes(start, start + timedelta(minutes=2, seconds=59)) == 2

    def test_clock_going_backwards_is_zero(self):
        start = datetime(2025, 1, 1, 10, 0, 0)
        assert elapsed_seconds(start, start - timedelta(seconds=30)) == 0.0
        assert elapsed_whole_minutes(start, start - timedelta(minutes=5)) == 0

    def test_mixed_aware_and_naive(self):
        start = datetime(2025, 1, 1, 10, 0, 0)
        now = datetime(2025, 1, 1, 11, 30, 0, tzinfo=timezone(timedelta(hours=1)))
        assert elapsed_seconds(start, now) == 30 * 60


@pytest.mark.unit
class TestTimestamps:
    def test_utcnow_is_naive(self):
        assert utcnow().tzinfo is None

    def test_as_naive_utc_converts_offset(self):
        aware = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert as_naive_utc(aware) == datetime(2025, 1, 1, 17, 0, 0)

    def test_as_naive_utc_keeps_naive(self):
        naive = datetime(2025, 1, 1, 12, 0, 0)
        assert as_naive_utc(naive) is naive


@pytest.mark.unit
class TestErrors:
    def test_write_result_helpers(self):
        assert WriteResult.success() == WriteResult(ok=True)
        failed = WriteResult.failure("boom")
        assert not failed.ok and failed.error == "boom"

    def test_record_store_error_message(self):
        err = RecordStoreError("fetch_progress")
        assert err.operation == "fetch_progress"
        assert str(err) == "fetch_progress: record store unavailable"
