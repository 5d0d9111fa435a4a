"""Core infrastructure module.

This module exports core utilities used across features.
Never imports from features - only from external libraries.
"""

from .config import Settings, get_settings, get_global_settings
from .enums import (
    Tier,
    Division,
    MatchOutcome,
    JobStatus,
    Region,
    RoutingRegion,
    QueueType,
)
from .exceptions import (
    TrackerError,
    DataNotFoundError,
    UnauthorizedError,
    TransientError,
    MalformedDataError,
    PersistenceError,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "get_global_settings",
    # Enums
    "Tier",
    "Division",
    "MatchOutcome",
    "JobStatus",
    "Region",
    "RoutingRegion",
    "QueueType",
    # Exceptions
    "TrackerError",
    "DataNotFoundError",
    "UnauthorizedError",
    "TransientError",
    "MalformedDataError",
    "PersistenceError",
]
