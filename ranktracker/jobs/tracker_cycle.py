"""Tracker Cycle Job - polls Riot for every tracked account and emits match results."""

from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Optional

import httpx
import structlog

from ranktracker.core.config import Settings, get_global_settings
from ranktracker.core.riot_api import RateLimiter, RiotAPIClient
from ranktracker.features.tracking.gateway import RiotTrackingGateway
from ranktracker.features.tracking.repository import AccountRepositoryInterface
from ranktracker.features.tracking.service import InFlightGuard, RankTrackingService
from ranktracker.protocols import NotificationSink

from .base import BaseJob

logger = structlog.get_logger(__name__)


class TrackerCycleJob(BaseJob):
    """Job that runs one tracking cycle per execution.

    This job:
    1. Opens a Riot API client for the duration of the run
    2. Loads all tracked accounts from the repository
    3. Runs the tracking service over them (bounded concurrency)
    4. Records the cycle summary in the execution log

    The in-flight guard and the rate limiter outlive a single run, so an
    execution that overlaps a slow previous one skips accounts still being
    processed and shares the same rate-limit budget.
    """

    name = "tracker_cycle"

    def __init__(
        self,
        repository: AccountRepositoryInterface,
        sink: NotificationSink,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize tracker cycle job.

        :param repository: Account store the cycle reads and writes.
        :param sink: Receives match result events.
        :param settings: Application settings, global settings if None.
        :param transport: Optional httpx transport for the Riot client.
        """
        super().__init__()
        self.settings = settings or get_global_settings()
        self.repository = repository
        self.sink = sink
        self.guard = InFlightGuard()
        self.rate_limiter = RateLimiter()
        self._transport = transport

    @asynccontextmanager
    async def _riot_resources(self):
        """Async context manager for Riot API resources.

        Each execution owns its client; overlapping executions close only
        their own.
        """
        api_client = RiotAPIClient(
            api_key=self.settings.riot_api_key,
            timeout=self.settings.riot_request_timeout,
            rate_limiter=self.rate_limiter,
            transport=self._transport,
            request_callback=self._record_api_request,
        )
        try:
            yield RiotTrackingGateway(api_client)
        finally:
            await api_client.close()

    def _record_api_request(self, metric: str, count: int) -> None:
        """Record API request metrics from Riot API client callbacks."""
        if metric == "requests_made":
            self.increment_metric("api_requests_made", count)

    async def execute(self) -> None:
        """Execute one tracking cycle.

        :raises UnauthorizedError: If the Riot API rejects the credential.
        """
        async with self._riot_resources() as gateway:
            service = RankTrackingService(
                repository=self.repository,
                match_source=gateway,
                rank_source=gateway,
                sink=self.sink,
                settings=self.settings,
                guard=self.guard,
            )
            try:
                await service.run_cycle()
            finally:
                if service.last_summary is not None:
                    self._log_summary_to_execution_log(service)

    def _log_summary_to_execution_log(self, service: RankTrackingService) -> None:
        summary = asdict(service.last_summary)
        for key, value in summary.items():
            self.add_log_entry(key, value)
        self.increment_metric("records_updated", summary["accounts_processed"])
