"""Scheduler module for running the tracker cycle on a fixed interval."""

from typing import Optional

import structlog
from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from .base import BaseJob

logger = structlog.get_logger(__name__)

# Global scheduler instance
_scheduler: Optional[AsyncIOScheduler] = None

# Overlapping cycles are allowed; the in-flight guard keeps them off the
# same account.
MAX_INSTANCES = 2
MISFIRE_GRACE_SECONDS = 60


def get_scheduler() -> Optional[AsyncIOScheduler]:
    """Get the global scheduler instance.

    Returns:
        The scheduler instance if initialized, None otherwise.
    """
    return _scheduler


def start_scheduler(job: BaseJob, interval_seconds: int) -> AsyncIOScheduler:
    """Initialize and start the APScheduler instance.

    Must be called from within a running event loop.

    :param job: Job whose ``run`` is scheduled.
    :param interval_seconds: Interval between executions (minimum 1).
    :returns: The initialized and started scheduler instance.
    """
    global _scheduler

    if _scheduler is not None:
        logger.warning("Scheduler already initialized")
        return _scheduler

    interval_seconds = max(int(interval_seconds), 1)

    try:
        logger.info("Initializing job scheduler")

        executors = {
            "default": AsyncIOExecutor(),
        }
        job_defaults = {
            "coalesce": True,  # Combine multiple missed runs into one
            "max_instances": MAX_INSTANCES,
            "misfire_grace_time": MISFIRE_GRACE_SECONDS,
        }

        _scheduler = AsyncIOScheduler(
            executors=executors,
            job_defaults=job_defaults,
            timezone="UTC",
        )
        _scheduler.add_job(
            job.run,
            trigger="interval",
            seconds=interval_seconds,
            id=f"job_{job.name}",
            name=job.name,
            replace_existing=True,
        )
        _scheduler.start()

        logger.info(
            "Job scheduler started successfully",
            job_name=job.name,
            interval_seconds=interval_seconds,
        )
        return _scheduler

    except Exception as e:
        logger.error(
            "Failed to start job scheduler",
            error=str(e),
            error_type=type(e).__name__,
        )
        _scheduler = None
        raise


def shutdown_scheduler() -> None:
    """Gracefully shutdown the scheduler, waiting for running jobs."""
    global _scheduler

    if _scheduler is None:
        logger.info("Scheduler is not running, nothing to shutdown")
        return

    logger.info("Shutting down job scheduler")
    try:
        _scheduler.shutdown(wait=True)
    finally:
        _scheduler = None

    logger.info("Job scheduler shut down successfully")
