"""Tracking error kinds raised by the match source, rank source and account store.

The set is closed: the polling cycle decides what to skip based on the kind
alone, never on status codes or empty containers.
"""

from typing import Any, Dict, Optional


class TrackerError(Exception):
    """Base class for all tracking errors."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.context = context or {}

    def __str__(self) -> str:
        if self.operation:
            return f"{self.operation}: {self.message}"
        return self.message


class DataNotFoundError(TrackerError):
    """Account, match or rank data is missing remotely."""


class UnauthorizedError(TrackerError):
    """Credential invalid, expired or forbidden. Fatal for the whole cycle."""


class TransientError(TrackerError):
    """Network failure, timeout, rate limit or server error."""


class MalformedDataError(TrackerError):
    """Remote data has an unexpected shape (e.g. missing participant)."""


class PersistenceError(TrackerError):
    """The account store failed to write."""
