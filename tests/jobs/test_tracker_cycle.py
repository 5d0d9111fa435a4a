"""
Tests for the tracker cycle job.
"""

import asyncio

import httpx
import pytest

from ranktracker.core.enums import JobStatus
from ranktracker.features.tracking.notifications import CollectingNotificationSink
from ranktracker.features.tracking.repository import InMemoryAccountRepository
from ranktracker.jobs import tracker_cycle
from ranktracker.jobs.tracker_cycle import TrackerCycleJob


@pytest.fixture
def riot_handler(match_payload, puuid):
    """Minimal Riot API: one new match and a Gold II rank for the tracked player."""

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.endswith("/ids"):
            return httpx.Response(200, json=["EUW1_2", "EUW1_1"])
        if path.startswith("/lol/match/v5/matches/"):
            match_id = path.rsplit("/", 1)[-1]
            return httpx.Response(200, json=match_payload(match_id, puuid=puuid))
        if path.startswith("/lol/league/v4/entries/by-puuid/"):
            return httpx.Response(
                200,
                json=[
                    {
                        "queueType": "RANKED_SOLO_5x5",
                        "tier": "GOLD",
                        "rank": "II",
                        "leaguePoints": 58,
                    }
                ],
            )
        return httpx.Response(404)

    return handler


class TestTrackerCycleJob:
    """Test cases for TrackerCycleJob."""

    @pytest.mark.asyncio
    async def test_run_processes_accounts(
        self, riot_handler, settings, make_account, gold_ii_40, puuid
    ):
        repository = InMemoryAccountRepository(
            [make_account(cursor_match_id="EUW1_1", last_snapshot=gold_ii_40)]
        )
        sink = CollectingNotificationSink()
        job = TrackerCycleJob(
            repository, sink, settings=settings, transport=httpx.MockTransport(riot_handler)
        )

        await job.run()

        assert job.status == JobStatus.SUCCESS
        assert [event.match_id for event in sink.events] == ["EUW1_2"]
        assert sink.events[0].points_delta == 18
        assert job.execution_log["accounts_processed"] == 1
        assert job.execution_log["events_emitted"] == 1
        assert job.metrics["api_requests_made"] == 3
        assert job.metrics["records_updated"] == 1

        stored = await repository.get_account(puuid)
        assert stored.cursor_match_id == "EUW1_2"

    @pytest.mark.asyncio
    async def test_unauthorized_marks_run(self, settings, make_account):
        repository = InMemoryAccountRepository([make_account()])
        job = TrackerCycleJob(
            repository,
            CollectingNotificationSink(),
            settings=settings,
            transport=httpx.MockTransport(lambda request: httpx.Response(401)),
        )

        await job.run()

        assert job.status == JobStatus.UNAUTHORIZED
        assert "UnauthorizedError" in job.error_message
        assert job.execution_log["accounts_total"] == 1
        assert job.execution_log["accounts_processed"] == 0

    @pytest.mark.asyncio
    async def test_guard_shared_between_runs(self, settings, make_account, puuid):
        """Accounts held by an overlapping run are skipped."""
        repository = InMemoryAccountRepository([make_account()])
        job = TrackerCycleJob(
            repository,
            CollectingNotificationSink(),
            settings=settings,
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )
        job.guard.try_acquire(puuid)

        await job.run()

        assert job.status == JobStatus.SUCCESS
        assert job.execution_log["accounts_busy"] == 1
        assert job.metrics["api_requests_made"] == 0

    @pytest.mark.asyncio
    async def test_overlapping_runs_use_own_clients(
        self, riot_handler, settings, make_account, gold_ii_40, monkeypatch
    ):
        """A run started while the previous one is still going skips its
        accounts, and each run closes only the client it opened."""
        clients = []

        class RecordingClient(tracker_cycle.RiotAPIClient):
            def __init__(self, *args, **kwargs):
                super().__init__(*args, **kwargs)
                clients.append(self)

        monkeypatch.setattr(tracker_cycle, "RiotAPIClient", RecordingClient)

        first_request = asyncio.Event()
        release = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            if not first_request.is_set():
                first_request.set()
                await release.wait()
            return riot_handler(request)

        repository = InMemoryAccountRepository(
            [make_account(cursor_match_id="EUW1_1", last_snapshot=gold_ii_40)]
        )
        sink = CollectingNotificationSink()
        job = TrackerCycleJob(
            repository, sink, settings=settings, transport=httpx.MockTransport(handler)
        )

        first_task = asyncio.create_task(job.run())
        await first_request.wait()
        second = await job.run()
        release.set()
        first = await first_task

        assert first.status == JobStatus.SUCCESS
        assert second.status == JobStatus.SUCCESS
        assert first.execution_log["accounts_processed"] == 1
        assert first.metrics["api_requests_made"] == 3
        assert second.execution_log["accounts_busy"] == 1
        assert second.metrics["api_requests_made"] == 0
        assert [event.match_id for event in sink.events] == ["EUW1_2"]

        assert len(clients) == 2
        for client in clients:
            assert client.session is None or client.session.is_closed
        assert clients[0].session is not None
