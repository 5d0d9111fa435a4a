"""
Riot API client package for League of Legends API integration.

Provides the HTTP client used as match source and rank source, with
header-driven rate limiting and typed errors.
"""

from .client import RiotAPIClient
from .rate_limiter import RateLimiter
from ..enums import QueueType, Region, RoutingRegion
from .errors import (
    RiotAPIError,
    RateLimitError,
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    BadRequestError,
    ServiceUnavailableError,
    RequestTimeoutError,
    InvalidResponseError,
)
from .models import (
    AccountDTO,
    MatchDTO,
    LeagueEntryDTO,
)
from .endpoints import RiotAPIEndpoints

__all__ = [
    "RiotAPIClient",
    "RateLimiter",
    "QueueType",
    "Region",
    "RoutingRegion",
    "RiotAPIError",
    "RateLimitError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "BadRequestError",
    "ServiceUnavailableError",
    "RequestTimeoutError",
    "InvalidResponseError",
    "AccountDTO",
    "MatchDTO",
    "LeagueEntryDTO",
    "RiotAPIEndpoints",
]
