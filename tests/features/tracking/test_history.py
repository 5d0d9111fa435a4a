"""
Tests for the bounded rank history.
"""

import pytest

from ranktracker.core.enums import Division, Tier
from ranktracker.features.tracking.history import (
    DEFAULT_CAPACITY,
    append_record,
    points_trend,
    recent_records,
)
from ranktracker.features.tracking.models import RankRecord


def record(index: int, delta=None) -> RankRecord:
    return RankRecord(
        tier=Tier.GOLD,
        division=Division.II,
        points=index % 100,
        match_id=f"m{index}",
        points_delta=delta,
    )


class TestAppendRecord:
    """Test cases for append_record."""

    def test_appends_at_end(self):
        history = append_record([record(1)], record(2))
        assert [r.match_id for r in history] == ["m1", "m2"]

    def test_bounded_fifo_eviction(self):
        history = []
        for index in range(1, 106):
            history = append_record(history, record(index))

        assert len(history) == DEFAULT_CAPACITY == 100
        assert history[0].match_id == "m6"
        assert history[-1].match_id == "m105"

    def test_does_not_mutate_input(self):
        original = [record(1)]
        append_record(original, record(2))
        assert len(original) == 1

    def test_custom_capacity(self):
        history = append_record([record(1), record(2)], record(3), capacity=2)
        assert [r.match_id for r in history] == ["m2", "m3"]

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            append_record([], record(1), capacity=0)


class TestRecentRecords:
    """Test cases for recent_records and points_trend."""

    def test_last_n_oldest_first(self):
        history = [record(i) for i in range(1, 6)]
        assert [r.match_id for r in recent_records(history, 3)] == ["m3", "m4", "m5"]

    def test_more_than_available(self):
        history = [record(1), record(2)]
        assert recent_records(history, 10) == history

    def test_non_positive_n(self):
        assert recent_records([record(1)], 0) == []

    def test_trend_skips_unknown_deltas(self):
        history = [record(1, None), record(2, 20), record(3, None), record(4, -15)]
        assert points_trend(history, 4) == 5
        assert points_trend(history, 1) == -15

    def test_trend_unknown_when_no_delta(self):
        assert points_trend([record(1), record(2)], 5) is None
        assert points_trend([], 5) is None
