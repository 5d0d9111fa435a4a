"""Notification emitter: match results to event payloads, plus built-in sinks."""

from typing import List, Optional

import structlog

from .models import MatchResultEvent, ProcessedMatch, RankSnapshot, TrackedAccount
from .ranks import render_points_delta

logger = structlog.get_logger(__name__)


def build_event(
    account: TrackedAccount,
    match: ProcessedMatch,
    delta: Optional[int],
    *,
    snapshot: RankSnapshot,
    low_confidence: bool = False,
) -> MatchResultEvent:
    """Build the notification payload for one processed match.

    :param account: Account the match belongs to.
    :param match: Resolved match (outcome and stats).
    :param delta: Points change attributed to this match, None when unknown.
    :param snapshot: Rank observed for the account in this cycle.
    :param low_confidence: Delta crosses the ranked/unranked boundary.
    """
    return MatchResultEvent(
        account_ref=account.account_ref,
        owner_id=account.owner_id,
        region=account.region,
        game_identity=account.game_identity,
        match_id=match.match_id,
        outcome=match.outcome,
        points_delta=delta,
        low_confidence=low_confidence,
        current_snapshot=snapshot,
        match_stats=match.stats,
    )


class LoggingNotificationSink:
    """Sink that writes one structured log line per event."""

    async def publish(self, event: MatchResultEvent) -> None:
        logger.info(
            "Match result",
            account_ref=event.account_ref,
            riot_id=str(event.game_identity),
            region=event.region.value,
            match_id=event.match_id,
            outcome=event.outcome.value,
            rank=event.current_snapshot.display_rank,
            points=event.current_snapshot.points,
            points_delta=render_points_delta(event.points_delta),
            low_confidence=event.low_confidence,
            champion=event.match_stats.champion_name,
            kda=f"{event.match_stats.kills}/{event.match_stats.deaths}/{event.match_stats.assists}",
        )


class CollectingNotificationSink:
    """Sink that keeps events in memory, in publish order."""

    def __init__(self) -> None:
        self.events: List[MatchResultEvent] = []

    async def publish(self, event: MatchResultEvent) -> None:
        self.events.append(event)
