"""Rank scalar conversion and points delta calculation.

Every (tier, division, points) triple maps onto one integer so that any
promotion raises the scalar and any demotion lowers it, even when the raw
points go the other way (Silver I 95 -> Gold IV 10 is +15, not -85).
"""

from typing import Optional

from ranktracker.core.enums import Division, Tier

from .models import RankSnapshot

TIER_WIDTH = 400
DIVISION_WIDTH = 100
UNRANKED_SCALAR = 0


def to_scalar(tier: Tier, division: Optional[Division], points: int) -> int:
    """Map a rank onto a monotonically increasing integer.

    :param tier: Rank tier; UNRANKED maps to 0.
    :param division: Division for Iron through Diamond, ignored for apex tiers.
    :param points: League points (0-99 within a division, unbounded at apex).
    :returns: Scalar rank value.
    :raises ValueError: If a divisioned tier has no division.
    """
    if tier == Tier.UNRANKED:
        return UNRANKED_SCALAR
    if tier.is_apex:
        return tier * TIER_WIDTH + points
    if division is None:
        raise ValueError(f"{tier.name} requires a division")
    return tier * TIER_WIDTH + division * DIVISION_WIDTH + points


def snapshot_scalar(snapshot: RankSnapshot) -> int:
    return to_scalar(snapshot.tier, snapshot.division, snapshot.points)


def compute_delta(
    previous: Optional[RankSnapshot], current: RankSnapshot
) -> Optional[int]:
    """Points change between two snapshots.

    :param previous: Last committed snapshot, None on first observation.
    :param current: Freshly observed snapshot.
    :returns: Scalar difference, or None when there is no previous snapshot.
    """
    if previous is None:
        return None
    return snapshot_scalar(current) - snapshot_scalar(previous)


def is_low_confidence(
    previous: Optional[RankSnapshot], current: RankSnapshot
) -> bool:
    """True when the delta goes through the Unranked scalar.

    Such deltas are reported, but the swing says little about the match.
    """
    if previous is None:
        return False
    return previous.is_unranked != current.is_unranked


def render_points_delta(delta: Optional[int]) -> str:
    """Render a delta for display; None is 'unknown', never zero."""
    if delta is None:
        return "unknown"
    if delta > 0:
        return f"+{delta} LP"
    return f"{delta} LP"
