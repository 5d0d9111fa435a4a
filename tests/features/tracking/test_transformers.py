"""
Tests for tracking transformers.
"""

from unittest.mock import MagicMock

import pytest

from ranktracker.core.enums import Division, MatchOutcome, Tier
from ranktracker.core.exceptions import MalformedDataError
from ranktracker.core.riot_api.models import LeagueEntryDTO
from ranktracker.features.tracking import transformers
from ranktracker.features.tracking.models import RankRecord, RankSnapshot
from ranktracker.features.tracking.transformers import (
    account_domain_to_orm,
    account_orm_to_domain,
    apply_tracking_state,
    league_entries_to_snapshot,
    match_to_processed,
)


def league_entry(queue_type="RANKED_SOLO_5x5", tier="GOLD", rank="II", points=40):
    return LeagueEntryDTO(
        queueType=queue_type,
        tier=tier,
        rank=rank,
        leaguePoints=points,
        wins=10,
        losses=8,
    )


class TestMatchToProcessed:
    """Test cases for match_to_processed."""

    def test_extracts_player_line(self, make_match, puuid):
        processed = match_to_processed(make_match("EUW1_1"), puuid)

        assert processed.match_id == "EUW1_1"
        assert processed.outcome == MatchOutcome.WIN
        stats = processed.stats
        assert stats.champion_name == "Ahri"
        assert (stats.kills, stats.deaths, stats.assists) == (5, 2, 7)
        assert stats.kda == 6.0
        assert stats.creep_score == 216
        assert stats.cs_per_minute == 7.2
        assert stats.kill_participation == 60.0
        assert stats.vision_score == 24
        assert stats.game_duration_seconds == 1800
        assert stats.queue_id == 420

    def test_loss(self, make_match, puuid):
        processed = match_to_processed(make_match("EUW1_2", win=False), puuid)
        assert processed.outcome == MatchOutcome.LOSS

    def test_zero_team_kills_gives_no_kill_participation(self, make_match, puuid):
        processed = match_to_processed(
            make_match("EUW1_3", kills=0, assists=0, team_kills=0), puuid
        )
        assert processed.stats.kill_participation is None

    def test_perfect_kda_with_no_deaths(self, make_match, puuid):
        processed = match_to_processed(make_match("EUW1_4", deaths=0), puuid)
        assert processed.stats.kda == 12.0

    def test_missing_participant_is_malformed(self, make_match):
        with pytest.raises(MalformedDataError) as exc_info:
            match_to_processed(make_match("EUW1_5"), "someone-else")
        assert exc_info.value.context["match_id"] == "EUW1_5"


class TestLeagueEntriesToSnapshot:
    """Test cases for league_entries_to_snapshot."""

    def test_picks_solo_queue_entry(self):
        entries = [
            league_entry(queue_type="RANKED_FLEX_SR", tier="PLATINUM", rank="I"),
            league_entry(),
        ]
        snapshot = league_entries_to_snapshot(entries, "RANKED_SOLO_5x5")
        assert snapshot == RankSnapshot(tier=Tier.GOLD, division=Division.II, points=40)

    def test_no_entry_is_unranked(self):
        snapshot = league_entries_to_snapshot(
            [league_entry(queue_type="RANKED_FLEX_SR")], "RANKED_SOLO_5x5"
        )
        assert snapshot.is_unranked

    def test_apex_tier_drops_division(self):
        snapshot = league_entries_to_snapshot(
            [league_entry(tier="MASTER", rank="I", points=312)], "RANKED_SOLO_5x5"
        )
        assert snapshot == RankSnapshot(tier=Tier.MASTER, points=312)

    def test_unknown_tier_is_malformed(self):
        with pytest.raises(MalformedDataError):
            league_entries_to_snapshot(
                [league_entry(tier="WOOD")], "RANKED_SOLO_5x5"
            )

    def test_unsupported_tier_warned_once(self, monkeypatch):
        logger = MagicMock()
        monkeypatch.setattr(transformers, "logger", logger)
        monkeypatch.setattr(transformers, "_unsupported_tiers_reported", set())

        for _ in range(2):
            with pytest.raises(MalformedDataError):
                league_entries_to_snapshot(
                    [league_entry(tier="EMERALD", rank="III")], "RANKED_SOLO_5x5"
                )

        logger.warning.assert_called_once()
        assert logger.warning.call_args.kwargs["tier"] == "EMERALD"

    def test_unknown_division_not_reported_as_tier(self, monkeypatch):
        logger = MagicMock()
        monkeypatch.setattr(transformers, "logger", logger)
        monkeypatch.setattr(transformers, "_unsupported_tiers_reported", set())

        with pytest.raises(MalformedDataError):
            league_entries_to_snapshot(
                [league_entry(tier="GOLD", rank="V")], "RANKED_SOLO_5x5"
            )

        logger.warning.assert_not_called()


class TestAccountRows:
    """ORM row <-> domain account conversion."""

    def test_round_trip_keeps_tracking_state(self, make_account, gold_ii_40):
        account = make_account(
            cursor_match_id="EUW1_9",
            last_snapshot=gold_ii_40,
            history=[RankRecord.from_snapshot(gold_ii_40, match_id="EUW1_9", points_delta=18)],
        )

        restored = account_orm_to_domain(account_domain_to_orm(account))

        assert restored == account

    def test_never_observed_account(self, make_account):
        account = make_account()
        row = account_domain_to_orm(account)

        assert row.last_tier is None
        assert row.history == []
        assert account_orm_to_domain(row).last_snapshot is None

    def test_unranked_snapshot_is_kept(self, make_account):
        row = account_domain_to_orm(make_account())
        apply_tracking_state(
            row, make_account(last_snapshot=RankSnapshot.unranked())
        )

        assert row.last_tier == int(Tier.UNRANKED)
        assert account_orm_to_domain(row).last_snapshot.is_unranked
