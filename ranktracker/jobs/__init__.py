"""Background jobs driving the polling cycle."""

from .base import BaseJob, JobExecution
from .scheduler import get_scheduler, shutdown_scheduler, start_scheduler
from .tracker_cycle import TrackerCycleJob

__all__ = [
    "BaseJob",
    "JobExecution",
    "TrackerCycleJob",
    "get_scheduler",
    "start_scheduler",
    "shutdown_scheduler",
]
