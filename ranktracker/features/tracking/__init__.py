"""Rank progression tracking feature."""

from .gateway import RiotTrackingGateway
from .leaderboard import LeaderboardEntry, build_leaderboard
from .models import (
    GameIdentity,
    MatchResultEvent,
    MatchStats,
    RankRecord,
    RankSnapshot,
    TrackedAccount,
)
from .notifications import CollectingNotificationSink, LoggingNotificationSink
from .repository import (
    AccountRepositoryInterface,
    InMemoryAccountRepository,
    SQLAlchemyAccountRepository,
)
from .service import CycleSummary, InFlightGuard, RankTrackingService

__all__ = [
    "RiotTrackingGateway",
    "LeaderboardEntry",
    "build_leaderboard",
    "GameIdentity",
    "MatchResultEvent",
    "MatchStats",
    "RankRecord",
    "RankSnapshot",
    "TrackedAccount",
    "CollectingNotificationSink",
    "LoggingNotificationSink",
    "AccountRepositoryInterface",
    "InMemoryAccountRepository",
    "SQLAlchemyAccountRepository",
    "CycleSummary",
    "InFlightGuard",
    "RankTrackingService",
]
