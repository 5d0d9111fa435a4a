"""Leaderboard of tracked accounts ordered by their last committed rank."""

from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from ranktracker.core.enums import Region

from .history import points_trend
from .models import GameIdentity, RankSnapshot, TrackedAccount
from .ranks import snapshot_scalar

TREND_WINDOW = 10


class LeaderboardEntry(BaseModel):
    """One leaderboard row."""

    position: int
    account_ref: str
    game_identity: GameIdentity
    region: Region
    snapshot: Optional[RankSnapshot] = None
    scalar: Optional[int] = None
    recent_trend: Optional[int] = None

    model_config = ConfigDict(frozen=True)


def build_leaderboard(
    accounts: Iterable[TrackedAccount], trend_window: int = TREND_WINDOW
) -> List[LeaderboardEntry]:
    """Rank accounts by scalar, highest first.

    Unranked and never-observed accounts come last; ties are broken by
    Riot ID so the order is stable between cycles.

    :param accounts: Accounts with their committed snapshots.
    :param trend_window: Number of recent history records summed for the trend.
    """

    def sort_key(account: TrackedAccount):
        snapshot = account.last_snapshot
        ranked = snapshot is not None and not snapshot.is_unranked
        scalar = snapshot_scalar(snapshot) if ranked else 0
        return (not ranked, -scalar, str(account.game_identity).lower())

    ordered = sorted(accounts, key=sort_key)
    entries = []
    for position, account in enumerate(ordered, start=1):
        snapshot = account.last_snapshot
        entries.append(
            LeaderboardEntry(
                position=position,
                account_ref=account.account_ref,
                game_identity=account.game_identity,
                region=account.region,
                snapshot=snapshot,
                scalar=snapshot_scalar(snapshot)
                if snapshot is not None and not snapshot.is_unranked
                else None,
                recent_trend=points_trend(account.history, trend_window),
            )
        )
    return entries
