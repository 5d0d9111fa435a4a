"""Base job class for automated background jobs."""

import uuid
from abc import ABC, abstractmethod
from collections import defaultdict
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, DefaultDict, Dict, Optional

import structlog
from structlog import contextvars as structlog_contextvars

from ranktracker.core.enums import JobStatus
from ranktracker.core.exceptions import UnauthorizedError

logger = structlog.get_logger(__name__)


def _initial_metrics() -> DefaultDict[str, int]:
    metrics: DefaultDict[str, int] = defaultdict(int)
    metrics.update({"api_requests_made": 0, "records_updated": 0})
    return metrics


@dataclass
class JobExecution:
    """State of one job execution.

    Every call to ``BaseJob.run`` gets its own instance, so executions that
    overlap never write into each other's metrics or log.
    """

    execution_id: Optional[str] = None
    metrics: DefaultDict[str, int] = field(default_factory=_initial_metrics)
    execution_log: Dict[str, Any] = field(default_factory=dict)
    status: Optional[JobStatus] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    error_message: Optional[str] = None


# Execution of the job running in the current task; child tasks inherit it.
_current_execution: ContextVar[Optional[JobExecution]] = ContextVar(
    "current_job_execution", default=None
)


class BaseJob(ABC):
    """Abstract base class for all automated jobs.

    Provides common functionality for job execution:
    - Execution tracking (status, timings, execution log)
    - Error handling and metrics collection
    - Structured logging with correlation IDs

    Subclasses must implement:
    - execute(): The main job logic

    The status, metrics and log attributes read the execution running in
    the current task, or the last finished one outside of a run.
    """

    name: str = "job"

    def __init__(self) -> None:
        self.last_execution = JobExecution()

    @abstractmethod
    async def execute(self) -> None:
        """Execute the job logic.

        This method must be implemented by subclasses.
        It should contain the main job logic and use increment_metric and
        add_log_entry to track execution statistics.

        Raises:
            Exception: If job execution fails.
        """

    @property
    def execution(self) -> JobExecution:
        """The execution of the calling task, else the last finished one."""
        current = _current_execution.get()
        return current if current is not None else self.last_execution

    @property
    def execution_id(self) -> Optional[str]:
        return self.execution.execution_id

    @property
    def metrics(self) -> DefaultDict[str, int]:
        return self.execution.metrics

    @property
    def execution_log(self) -> Dict[str, Any]:
        return self.execution.execution_log

    @property
    def status(self) -> Optional[JobStatus]:
        return self.execution.status

    @property
    def started_at(self) -> Optional[datetime]:
        return self.execution.started_at

    @property
    def completed_at(self) -> Optional[datetime]:
        return self.execution.completed_at

    @property
    def error_message(self) -> Optional[str]:
        return self.execution.error_message

    def log_start(self, execution: JobExecution) -> None:
        """Record the start of an execution."""
        execution.started_at = datetime.now(timezone.utc)
        execution.status = JobStatus.RUNNING

        logger.debug("Job execution started", job_name=self.name)

    def log_completion(self, execution: JobExecution, status: JobStatus) -> None:
        """Record the end of an execution.

        Args:
            execution: Execution that finished.
            status: Final execution status.
        """
        execution.completed_at = datetime.now(timezone.utc)
        execution.status = status
        duration = (execution.completed_at - execution.started_at).total_seconds()

        logger.info(
            "Job execution completed",
            job_name=self.name,
            status=status.value,
            duration_seconds=duration,
            api_requests=execution.metrics["api_requests_made"],
            records_updated=execution.metrics["records_updated"],
            error=execution.error_message,
        )

    def handle_error(self, execution: JobExecution, error: Exception) -> JobStatus:
        """Handle job execution error.

        Args:
            execution: Execution the error ended.
            error: Exception that was raised during job execution.

        Returns:
            The status the execution ends with.
        """
        execution.error_message = f"{type(error).__name__}: {str(error)}"

        if isinstance(error, UnauthorizedError):
            logger.error(
                "Job aborted - Riot API credential rejected, operator action required",
                job_name=self.name,
                error=execution.error_message,
            )
            return JobStatus.UNAUTHORIZED

        logger.error(
            "Job execution failed",
            job_name=self.name,
            error=execution.error_message,
            error_type=type(error).__name__,
            exc_info=True,
        )
        return JobStatus.FAILED

    async def run(self) -> JobExecution:
        """Execute the job with proper error handling and logging.

        Never raises: the scheduler keeps the job on its interval whatever
        the outcome of a single execution.

        Returns:
            The finished execution.
        """
        execution = JobExecution(execution_id=uuid.uuid4().hex)
        token = _current_execution.set(execution)
        try:
            self.log_start(execution)
            with structlog_contextvars.bound_contextvars(
                job_execution_id=execution.execution_id,
                job_name=self.name,
            ):
                try:
                    await self.execute()
                except Exception as job_error:
                    status = self.handle_error(execution, job_error)
                else:
                    status = JobStatus.SUCCESS
                self.log_completion(execution, status)
        finally:
            if execution.status == JobStatus.RUNNING:
                execution.status = JobStatus.FAILED
            self.last_execution = execution
            _current_execution.reset(token)
        return execution

    def increment_metric(self, metric_name: str, count: int = 1) -> None:
        """Increment a metric counter of the current execution."""
        self.execution.metrics[metric_name] += count

    def add_log_entry(self, key: str, value: Any) -> None:
        """Add an entry to the execution log.

        Args:
            key: Log entry key.
            value: Log entry value.
        """
        self.execution.execution_log[key] = value
