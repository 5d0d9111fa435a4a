"""Pydantic domain models for rank tracking.

These are the engine's own types. Riot DTOs never cross the gateway and ORM
rows never leave the repository.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ranktracker.core.enums import Division, MatchOutcome, Region, Tier


class RankSnapshot(BaseModel):
    """Point-in-time rank reading, or the Unranked snapshot."""

    tier: Tier = Field(..., description="Rank tier, UNRANKED for no placement")
    division: Optional[Division] = Field(
        None, description="Division, only for Iron through Diamond"
    )
    points: int = Field(0, ge=0, description="League points")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_division(self) -> "RankSnapshot":
        """Divisioned tiers need a division, apex tiers and Unranked have none."""
        if self.tier.has_divisions and self.division is None:
            raise ValueError(f"{self.tier.name} requires a division")
        if not self.tier.has_divisions and self.division is not None:
            raise ValueError(f"{self.tier.name} has no divisions")
        if self.tier == Tier.UNRANKED and self.points != 0:
            raise ValueError("Unranked snapshot carries no points")
        return self

    @classmethod
    def unranked(cls) -> "RankSnapshot":
        return cls(tier=Tier.UNRANKED)

    @property
    def is_unranked(self) -> bool:
        return self.tier == Tier.UNRANKED

    @property
    def display_rank(self) -> str:
        """Human readable rank (e.g., 'Gold II', 'Master', 'Unranked')."""
        if self.division is None:
            return self.tier.display_name
        return f"{self.tier.display_name} {self.division.name}"


class RankRecord(BaseModel):
    """Immutable history entry written once per processed match."""

    tier: Tier
    division: Optional[Division] = None
    points: int = Field(0, ge=0)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    match_id: Optional[str] = None
    points_delta: Optional[int] = Field(
        None, description="Change from the previous snapshot, None when unknown"
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_snapshot(
        cls,
        snapshot: RankSnapshot,
        match_id: Optional[str] = None,
        points_delta: Optional[int] = None,
        timestamp: Optional[datetime] = None,
    ) -> "RankRecord":
        return cls(
            tier=snapshot.tier,
            division=snapshot.division,
            points=snapshot.points,
            match_id=match_id,
            points_delta=points_delta,
            timestamp=timestamp or datetime.now(timezone.utc),
        )

    @property
    def snapshot(self) -> RankSnapshot:
        return RankSnapshot(tier=self.tier, division=self.division, points=self.points)


class GameIdentity(BaseModel):
    """Riot ID (game name + tag line)."""

    game_name: str = Field(..., min_length=1)
    tag_line: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.game_name}#{self.tag_line}"


class TrackedAccount(BaseModel):
    """A registered account and the engine-owned tracking state."""

    account_ref: str = Field(..., min_length=1, description="Riot PUUID")
    owner_id: str = Field(..., description="Who registered the account")
    region: Region
    game_identity: GameIdentity
    cursor_match_id: Optional[str] = Field(
        None, description="Most recently processed match, None before first cycle"
    )
    last_snapshot: Optional[RankSnapshot] = Field(
        None, description="Last committed rank, None when never observed"
    )
    history: List[RankRecord] = Field(default_factory=list)


class MatchStats(BaseModel):
    """The tracked player's line from a match detail."""

    champion_name: str
    kills: int
    deaths: int
    assists: int
    kda: float
    creep_score: int
    cs_per_minute: float
    vision_score: Optional[float] = None
    kill_participation: Optional[float] = Field(
        None, description="Percent of team kills, None when the team had none"
    )
    game_duration_seconds: int
    queue_id: int

    model_config = ConfigDict(frozen=True)


class ProcessedMatch(BaseModel):
    """A new match resolved from its detail, before delta attribution."""

    match_id: str
    outcome: MatchOutcome
    stats: MatchStats

    model_config = ConfigDict(frozen=True)


class MatchResultEvent(BaseModel):
    """Notification payload for one processed match."""

    account_ref: str
    owner_id: str
    region: Region
    game_identity: GameIdentity
    match_id: str
    outcome: MatchOutcome
    points_delta: Optional[int] = None
    low_confidence: bool = Field(
        False, description="Delta crosses the ranked/unranked boundary"
    )
    current_snapshot: RankSnapshot
    match_stats: MatchStats

    model_config = ConfigDict(frozen=True)
