"""Shared enums used across features.

This module provides a single source of truth for enums used in both models and schemas.
"""

from enum import Enum, IntEnum
from typing import Optional


class Tier(IntEnum):
    """Ranked tiers in ascending order; the value is the tier's ordinal."""

    UNRANKED = -1
    IRON = 0
    BRONZE = 1
    SILVER = 2
    GOLD = 3
    PLATINUM = 4
    DIAMOND = 5
    MASTER = 6
    GRANDMASTER = 7
    CHALLENGER = 8

    @property
    def has_divisions(self) -> bool:
        """Iron through Diamond are split into four divisions."""
        return Tier.IRON <= self <= Tier.DIAMOND

    @property
    def is_apex(self) -> bool:
        """Master and above have a single open-ended ladder."""
        return self >= Tier.MASTER

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_api(cls, value: str) -> "Tier":
        """Parse a league-v4 tier string ("GOLD")."""
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown tier: {value!r}") from None


class Division(IntEnum):
    """Divisions within a tier, IV is the lowest."""

    IV = 0
    III = 1
    II = 2
    I = 3  # noqa: E741

    @classmethod
    def from_api(cls, value: Optional[str]) -> Optional["Division"]:
        """Parse a league-v4 rank string ("II"); empty means no division."""
        if not value:
            return None
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown division: {value!r}") from None


class MatchOutcome(str, Enum):
    """Result of a match from the tracked player's side."""

    WIN = "win"
    LOSS = "loss"


class JobStatus(str, Enum):
    """Enumeration of job execution statuses."""

    RUNNING = "RUNNING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    UNAUTHORIZED = "UNAUTHORIZED"


class RoutingRegion(str, Enum):
    """Riot API regional routing values (match-v5, account-v1)."""

    AMERICAS = "americas"
    ASIA = "asia"
    EUROPE = "europe"


class Region(str, Enum):
    """Server codes players register with."""

    NA = "na"
    EUW = "euw"
    EUN = "eun"
    KR = "kr"
    JP = "jp"
    OCE = "oce"
    BR = "br"
    LAN = "lan"
    LAS = "las"
    RU = "ru"
    TR = "tr"

    @property
    def platform(self) -> str:
        """Platform routing host prefix (league-v4, summoner-v4)."""
        return PLATFORM_HOSTS[self]

    @property
    def routing(self) -> RoutingRegion:
        """Regional routing cluster for match-v5."""
        return REGIONAL_ROUTING[self]


PLATFORM_HOSTS = {
    Region.NA: "na1",
    Region.EUW: "euw1",
    Region.EUN: "eun1",
    Region.KR: "kr",
    Region.JP: "jp1",
    Region.OCE: "oc1",
    Region.BR: "br1",
    Region.LAN: "la1",
    Region.LAS: "la2",
    Region.RU: "ru",
    Region.TR: "tr1",
}

REGIONAL_ROUTING = {
    Region.NA: RoutingRegion.AMERICAS,
    Region.BR: RoutingRegion.AMERICAS,
    Region.LAN: RoutingRegion.AMERICAS,
    Region.LAS: RoutingRegion.AMERICAS,
    Region.OCE: RoutingRegion.AMERICAS,
    Region.EUW: RoutingRegion.EUROPE,
    Region.EUN: RoutingRegion.EUROPE,
    Region.TR: RoutingRegion.EUROPE,
    Region.RU: RoutingRegion.EUROPE,
    Region.KR: RoutingRegion.ASIA,
    Region.JP: RoutingRegion.ASIA,
}


class QueueType(int, Enum):
    """Riot API queue ids used for match filtering."""

    RANKED_SOLO_5X5 = 420
    RANKED_FLEX_5X5 = 440
    NORMAL_DRAFT_5X5 = 400
    NORMAL_BLIND_PICK_5X5 = 430
    ARAM = 450

    @property
    def league_queue(self) -> str:
        """League-v4 queueType string for ranked queues."""
        return LEAGUE_QUEUES.get(self, "")


LEAGUE_QUEUES = {
    QueueType.RANKED_SOLO_5X5: "RANKED_SOLO_5x5",
    QueueType.RANKED_FLEX_5X5: "RANKED_FLEX_SR",
}
