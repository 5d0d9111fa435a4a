"""
Tests for shared enums.
"""

import pytest

from ranktracker.core.enums import (
    Division,
    JobStatus,
    QueueType,
    Region,
    RoutingRegion,
    Tier,
)


class TestTier:
    def test_from_api(self):
        assert Tier.from_api("GOLD") == Tier.GOLD
        assert Tier.from_api(" grandmaster ") == Tier.GRANDMASTER

    def test_unknown_tier(self):
        with pytest.raises(ValueError):
            Tier.from_api("WOOD")

    def test_divisions_and_apex(self):
        assert Tier.IRON.has_divisions and Tier.DIAMOND.has_divisions
        assert not Tier.MASTER.has_divisions
        assert not Tier.UNRANKED.has_divisions
        assert Tier.CHALLENGER.is_apex and not Tier.DIAMOND.is_apex


class TestDivision:
    def test_from_api(self):
        assert Division.from_api("IV") == Division.IV
        assert Division.from_api("") is None
        assert Division.from_api(None) is None

    def test_unknown_division(self):
        with pytest.raises(ValueError):
            Division.from_api("V")


@pytest.mark.parametrize(
    "region, platform, routing",
    [
        (Region.EUW, "euw1", RoutingRegion.EUROPE),
        (Region.NA, "na1", RoutingRegion.AMERICAS),
        (Region.KR, "kr", RoutingRegion.ASIA),
        (Region.LAS, "la2", RoutingRegion.AMERICAS),
    ],
)
def test_region_routing(region, platform, routing):
    assert region.platform == platform
    assert region.routing == routing


def test_every_region_is_routable():
    for region in Region:
        assert region.platform
        assert region.routing in RoutingRegion


def test_league_queue():
    assert QueueType.RANKED_SOLO_5X5.league_queue == "RANKED_SOLO_5x5"
    assert QueueType.ARAM.league_queue == ""


def test_job_statuses():
    """Every status is one a job execution can actually end in or be in."""
    assert {status.value for status in JobStatus} == {
        "RUNNING",
        "SUCCESS",
        "FAILED",
        "UNAUTHORIZED",
    }
