"""Bounded rank history per account, oldest record first."""

from typing import List, Optional, Sequence

from .models import RankRecord

DEFAULT_CAPACITY = 100


def append_record(
    history: Sequence[RankRecord],
    record: RankRecord,
    capacity: int = DEFAULT_CAPACITY,
) -> List[RankRecord]:
    """Append a record, evicting the oldest ones beyond capacity.

    :param history: Existing records, oldest first. Not mutated.
    :param record: Record to append as the most recent entry.
    :param capacity: Maximum number of records kept.
    :returns: New history list.
    """
    if capacity < 1:
        raise ValueError("History capacity must be at least 1")
    updated = list(history)
    updated.append(record)
    overflow = len(updated) - capacity
    if overflow > 0:
        del updated[:overflow]
    return updated


def recent_records(history: Sequence[RankRecord], n: int) -> List[RankRecord]:
    """Last ``n`` records, oldest first."""
    if n <= 0:
        return []
    return list(history[-n:])


def points_trend(history: Sequence[RankRecord], n: int) -> Optional[int]:
    """Sum of the known deltas over the last ``n`` records.

    Unknown deltas are skipped; None when none of the records has one.
    """
    deltas = [
        record.points_delta
        for record in recent_records(history, n)
        if record.points_delta is not None
    ]
    if not deltas:
        return None
    return sum(deltas)
