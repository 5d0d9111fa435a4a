"""Shared fixtures for the rank tracker tests."""

import pytest

from ranktracker.core.config import Settings
from ranktracker.core.enums import Division, Region, Tier
from ranktracker.core.riot_api.models import MatchDTO
from ranktracker.features.tracking.models import (
    GameIdentity,
    RankSnapshot,
    TrackedAccount,
)

PUUID = "puuid-tracked-player"


@pytest.fixture
def puuid():
    return PUUID


@pytest.fixture
def settings():
    """Settings isolated from the developer's environment file."""
    return Settings(
        _env_file=None,
        riot_api_key="RGAPI-test",
        valid_regions="euw,na,kr",
        max_concurrent_accounts=2,
        database_url_override="sqlite+aiosqlite:///:memory:",
    )


@pytest.fixture
def match_payload():
    """Factory for match-v5 detail payloads with the tracked player on team 100."""

    def build(
        match_id: str,
        puuid: str = PUUID,
        win: bool = True,
        queue_id: int = 420,
        kills: int = 5,
        deaths: int = 2,
        assists: int = 7,
        team_kills: int = 20,
        duration: int = 1800,
    ) -> dict:
        return {
            "metadata": {"matchId": match_id, "participants": [puuid, "other"]},
            "info": {
                "gameCreation": 1700000000000,
                "gameDuration": duration,
                "queueId": queue_id,
                "gameMode": "CLASSIC",
                "platformId": "EUW1",
                "participants": [
                    {
                        "puuid": puuid,
                        "teamId": 100,
                        "win": win,
                        "championName": "Ahri",
                        "kills": kills,
                        "deaths": deaths,
                        "assists": assists,
                        "visionScore": 24,
                        "totalMinionsKilled": 200,
                        "neutralMinionsKilled": 16,
                    },
                    {
                        "puuid": "other",
                        "teamId": 200,
                        "win": not win,
                        "championName": "Zed",
                        "kills": 3,
                        "deaths": 6,
                        "assists": 1,
                    },
                ],
                "teams": [
                    {
                        "teamId": 100,
                        "win": win,
                        "objectives": {"champion": {"first": True, "kills": team_kills}},
                    },
                    {
                        "teamId": 200,
                        "win": not win,
                        "objectives": {"champion": {"first": False, "kills": 9}},
                    },
                ],
            },
        }

    return build


@pytest.fixture
def make_match(match_payload):
    """Factory for validated match DTOs."""

    def build(match_id: str, **kwargs) -> MatchDTO:
        return MatchDTO.model_validate(match_payload(match_id, **kwargs))

    return build


@pytest.fixture
def gold_ii_40():
    return RankSnapshot(tier=Tier.GOLD, division=Division.II, points=40)


@pytest.fixture
def make_account():
    """Factory for tracked accounts."""

    def build(
        account_ref: str = PUUID,
        region: Region = Region.EUW,
        game_name: str = "Faker",
        **kwargs,
    ) -> TrackedAccount:
        return TrackedAccount(
            account_ref=account_ref,
            owner_id=kwargs.pop("owner_id", "owner-1"),
            region=region,
            game_identity=GameIdentity(game_name=game_name, tag_line="EUW"),
            **kwargs,
        )

    return build
