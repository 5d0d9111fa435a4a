"""Transformers for converting between layers in the tracking feature.

- Riot API DTOs -> domain models (match stats, rank snapshots)
- ORM rows <-> domain models (tracked accounts)
"""

from typing import List, Set

import structlog

from ranktracker.core.enums import Division, MatchOutcome, Region, Tier
from ranktracker.core.exceptions import MalformedDataError
from ranktracker.core.riot_api.models import LeagueEntryDTO, MatchDTO

from .models import (
    GameIdentity,
    MatchStats,
    ProcessedMatch,
    RankRecord,
    RankSnapshot,
    TrackedAccount,
)
from .orm_models import TrackedAccountORM

logger = structlog.get_logger(__name__)

# Unknown tiers already warned about
_unsupported_tiers_reported: Set[str] = set()


def match_to_processed(match: MatchDTO, account_ref: str) -> ProcessedMatch:
    """Extract the tracked player's result and stats from a match detail.

    :param match: Match detail from the match source.
    :param account_ref: PUUID of the tracked player.
    :returns: Outcome and stats for that player.
    :raises MalformedDataError: If the player is not a participant.
    """
    participant = match.find_participant(account_ref)
    if participant is None:
        raise MalformedDataError(
            "Tracked player missing from match participants",
            operation="extract match stats",
            context={"match_id": match.match_id, "account_ref": account_ref},
        )

    duration_minutes = match.info.game_duration / 60
    cs_per_minute = (
        round(participant.creep_score / duration_minutes, 1)
        if duration_minutes > 0
        else 0.0
    )

    kill_participation = None
    team = match.find_team(participant.team_id)
    if team is not None and team.objectives.champion.kills > 0:
        kill_participation = round(
            (participant.kills + participant.assists)
            / team.objectives.champion.kills
            * 100,
            1,
        )

    stats = MatchStats(
        champion_name=participant.champion_name,
        kills=participant.kills,
        deaths=participant.deaths,
        assists=participant.assists,
        kda=round(participant.kda, 2),
        creep_score=participant.creep_score,
        cs_per_minute=cs_per_minute,
        vision_score=participant.vision_score,
        kill_participation=kill_participation,
        game_duration_seconds=match.info.game_duration,
        queue_id=match.info.queue_id,
    )
    return ProcessedMatch(
        match_id=match.match_id,
        outcome=MatchOutcome.WIN if participant.win else MatchOutcome.LOSS,
        stats=stats,
    )


def league_entries_to_snapshot(
    entries: List[LeagueEntryDTO], queue_type: str
) -> RankSnapshot:
    """Pick the entry for a ranked queue, Unranked when there is none.

    :raises MalformedDataError: If the entry has an unknown tier or division.
    """
    entry = next((e for e in entries if e.queue_type == queue_type), None)
    if entry is None:
        return RankSnapshot.unranked()

    try:
        tier = Tier.from_api(entry.tier)
        division = Division.from_api(entry.rank) if tier.has_divisions else None
        return RankSnapshot(
            tier=tier, division=division, points=max(entry.league_points, 0)
        )
    except ValueError as e:
        if entry.tier.strip().upper() not in Tier.__members__:
            _warn_unsupported_tier(entry.tier)
        raise MalformedDataError(
            f"Unexpected league entry: {e}",
            operation="convert league entry",
            context={"tier": entry.tier, "rank": entry.rank},
        ) from e


def _warn_unsupported_tier(tier: str) -> None:
    """Warn once per process about a tier missing from the ladder."""
    key = tier.strip().upper()
    if key in _unsupported_tiers_reported:
        return
    _unsupported_tiers_reported.add(key)
    logger.warning(
        "Unsupported league tier, accounts in it are skipped every cycle "
        "until the tier is added to the ladder",
        tier=tier,
        supported_tiers=[t.name for t in Tier if t is not Tier.UNRANKED],
    )


def account_orm_to_domain(row: TrackedAccountORM) -> TrackedAccount:
    """Build the domain account from its database row."""
    last_snapshot = None
    if row.last_tier is not None:
        tier = Tier(row.last_tier)
        last_snapshot = RankSnapshot(
            tier=tier,
            division=Division(row.last_division)
            if row.last_division is not None
            else None,
            points=row.last_points or 0,
        )

    return TrackedAccount(
        account_ref=row.account_ref,
        owner_id=row.owner_id,
        region=Region(row.region),
        game_identity=GameIdentity(game_name=row.game_name, tag_line=row.tag_line),
        cursor_match_id=row.cursor_match_id,
        last_snapshot=last_snapshot,
        history=[RankRecord.model_validate(item) for item in row.history or []],
    )


def apply_tracking_state(row: TrackedAccountORM, account: TrackedAccount) -> None:
    """Copy the tracker-owned fields of an account onto its row."""
    row.cursor_match_id = account.cursor_match_id
    snapshot = account.last_snapshot
    row.last_tier = int(snapshot.tier) if snapshot else None
    row.last_division = (
        int(snapshot.division) if snapshot and snapshot.division is not None else None
    )
    row.last_points = snapshot.points if snapshot else None
    row.history = [record.model_dump(mode="json") for record in account.history]


def account_domain_to_orm(account: TrackedAccount) -> TrackedAccountORM:
    """Build a new row for an account (registration path)."""
    row = TrackedAccountORM(
        account_ref=account.account_ref,
        owner_id=account.owner_id,
        region=account.region.value,
        game_name=account.game_identity.game_name,
        tag_line=account.game_identity.tag_line,
    )
    apply_tracking_state(row, account)
    return row
