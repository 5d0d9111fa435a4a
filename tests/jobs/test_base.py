"""
Tests for the base job class.
"""

import asyncio

import pytest
from structlog import contextvars as structlog_contextvars

from ranktracker.core.enums import JobStatus
from ranktracker.core.exceptions import UnauthorizedError
from ranktracker.jobs.base import BaseJob


class ConcreteJob(BaseJob):
    """Concrete implementation of BaseJob for testing."""

    name = "concrete"

    async def execute(self) -> None:
        self.seen_context = structlog_contextvars.get_contextvars()
        self.increment_metric("records_updated", 5)
        self.increment_metric("api_requests_made", 15)
        self.add_log_entry("accounts_total", 3)


class FailingJob(BaseJob):
    """Job that always fails for testing error handling."""

    async def execute(self) -> None:
        raise ValueError("Test error")


class UnauthorizedJob(BaseJob):
    async def execute(self) -> None:
        raise UnauthorizedError("Invalid API key", operation="list recent matches")


class SlowJob(BaseJob):
    """The first run blocks until released, later runs finish at once."""

    name = "slow"

    def __init__(self) -> None:
        super().__init__()
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def execute(self) -> None:
        blocked = not self.started.is_set()
        self.add_log_entry("blocked", blocked)
        if blocked:
            self.started.set()
            await self.release.wait()
        self.increment_metric("records_updated")


class TestBaseJob:
    """Test cases for BaseJob."""

    def test_initialization(self):
        job = ConcreteJob()

        assert job.status is None
        assert job.metrics["api_requests_made"] == 0
        assert job.execution_log == {}

    @pytest.mark.asyncio
    async def test_run_success(self):
        job = ConcreteJob()

        await job.run()

        assert job.status == JobStatus.SUCCESS
        assert job.metrics["records_updated"] == 5
        assert job.metrics["api_requests_made"] == 15
        assert job.execution_log == {"accounts_total": 3}
        assert job.completed_at >= job.started_at
        assert job.error_message is None

    @pytest.mark.asyncio
    async def test_run_binds_and_clears_log_context(self):
        job = ConcreteJob()

        await job.run()

        assert job.seen_context["job_name"] == "concrete"
        assert job.seen_context["job_execution_id"] == job.execution_id
        assert "job_name" not in structlog_contextvars.get_contextvars()

    @pytest.mark.asyncio
    async def test_run_failure_does_not_raise(self):
        job = FailingJob()

        await job.run()

        assert job.status == JobStatus.FAILED
        assert job.error_message == "ValueError: Test error"

    @pytest.mark.asyncio
    async def test_run_unauthorized(self):
        job = UnauthorizedJob()

        await job.run()

        assert job.status == JobStatus.UNAUTHORIZED
        assert "Invalid API key" in job.error_message

    @pytest.mark.asyncio
    async def test_metrics_reset_between_runs(self):
        job = ConcreteJob()

        await job.run()
        first_execution = job.execution_id
        await job.run()

        assert job.metrics["records_updated"] == 5
        assert job.execution_id != first_execution

    def test_increment_unknown_metric(self):
        job = ConcreteJob()
        job.increment_metric("matches_skipped")
        job.increment_metric("matches_skipped", 2)
        assert job.metrics["matches_skipped"] == 3

    @pytest.mark.asyncio
    async def test_run_returns_execution(self):
        job = ConcreteJob()

        execution = await job.run()

        assert execution is job.last_execution
        assert execution.status == JobStatus.SUCCESS
        assert execution.execution_log == {"accounts_total": 3}

    @pytest.mark.asyncio
    async def test_overlapping_runs_keep_separate_state(self):
        job = SlowJob()

        first_task = asyncio.create_task(job.run())
        await job.started.wait()
        second = await job.run()
        job.release.set()
        first = await first_task

        assert first.execution_id != second.execution_id
        assert first.status == second.status == JobStatus.SUCCESS
        assert first.metrics["records_updated"] == 1
        assert second.metrics["records_updated"] == 1
        assert first.execution_log == {"blocked": True}
        assert second.execution_log == {"blocked": False}
