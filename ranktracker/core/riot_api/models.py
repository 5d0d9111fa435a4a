"""Pydantic models for Riot API response data."""

from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict


class AccountDTO(BaseModel):
    """Riot Account information."""

    puuid: str
    game_name: str = Field(..., alias="gameName")
    tag_line: str = Field(..., alias="tagLine")

    model_config = ConfigDict(populate_by_name=True)


class ParticipantDTO(BaseModel):
    """Match participant information."""

    puuid: str
    riot_id_game_name: Optional[str] = Field(None, alias="riotIdGameName")
    riot_id_tagline: Optional[str] = Field(None, alias="riotIdTagline")

    team_id: int = Field(..., alias="teamId")
    win: bool
    champion_name: str = Field(..., alias="championName")
    kills: int
    deaths: int
    assists: int
    vision_score: Optional[float] = Field(None, alias="visionScore")
    total_minions_killed: int = Field(0, alias="totalMinionsKilled")
    neutral_minions_killed: int = Field(0, alias="neutralMinionsKilled")

    @property
    def kda(self) -> float:
        """Calculate KDA (kills + assists) / deaths."""
        if self.deaths == 0:
            return float(self.kills + self.assists)
        return (self.kills + self.assists) / self.deaths

    @property
    def creep_score(self) -> int:
        """Lane minions plus jungle monsters."""
        return self.total_minions_killed + self.neutral_minions_killed

    model_config = ConfigDict(populate_by_name=True)


class ObjectiveDTO(BaseModel):
    """Single objective counter for a team."""

    first: bool = False
    kills: int = 0


class ObjectivesDTO(BaseModel):
    """Team objectives, only champion kills are consumed."""

    champion: ObjectiveDTO = Field(default_factory=ObjectiveDTO)


class TeamDTO(BaseModel):
    """Team summary within a match."""

    team_id: int = Field(..., alias="teamId")
    win: bool
    objectives: ObjectivesDTO = Field(default_factory=ObjectivesDTO)

    model_config = ConfigDict(populate_by_name=True)


class MatchInfoDTO(BaseModel):
    """Match information."""

    game_creation: int = Field(..., alias="gameCreation")
    game_duration: int = Field(..., alias="gameDuration")
    queue_id: int = Field(..., alias="queueId")
    game_mode: Optional[str] = Field(None, alias="gameMode")
    participants: List[ParticipantDTO]
    teams: List[TeamDTO] = Field(default_factory=list)
    platform_id: Optional[str] = Field(None, alias="platformId")

    model_config = ConfigDict(populate_by_name=True)


class MatchMetadataDTO(BaseModel):
    """Match metadata."""

    match_id: str = Field(..., alias="matchId")
    participants: List[str]

    model_config = ConfigDict(populate_by_name=True)


class MatchDTO(BaseModel):
    """Complete match data."""

    metadata: MatchMetadataDTO
    info: MatchInfoDTO

    @property
    def match_id(self) -> str:
        """Get match ID from metadata."""
        return self.metadata.match_id

    def find_participant(self, puuid: str) -> Optional[ParticipantDTO]:
        """Return the participant entry for a player, if present."""
        for participant in self.info.participants:
            if participant.puuid == puuid:
                return participant
        return None

    def find_team(self, team_id: int) -> Optional[TeamDTO]:
        """Return the team summary for a team id, if present."""
        for team in self.info.teams:
            if team.team_id == team_id:
                return team
        return None

    model_config = ConfigDict(populate_by_name=True)


class LeagueEntryDTO(BaseModel):
    """League entry information."""

    league_id: Optional[str] = Field(None, alias="leagueId")
    puuid: Optional[str] = None
    queue_type: str = Field(..., alias="queueType")
    tier: str
    rank: Optional[str] = None
    league_points: int = Field(..., alias="leaguePoints")
    wins: int = 0
    losses: int = 0
    hot_streak: bool = Field(False, alias="hotStreak")

    @property
    def win_rate(self) -> float:
        """Calculate win rate."""
        total_games = self.wins + self.losses
        if total_games == 0:
            return 0.0
        return self.wins / total_games

    model_config = ConfigDict(populate_by_name=True)
