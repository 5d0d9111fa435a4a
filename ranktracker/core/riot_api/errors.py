"""Typed failures of the Riot API client, one class per response category."""

from typing import Any, Dict, Optional


class RiotAPIError(Exception):
    """A Riot API call that did not produce a usable response.

    ``status_code`` is None when no response arrived at all.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Dict[str, Any]] = None,
        retry_after: Optional[float] = None,
    ) -> None:
        super().__init__(message)
        self.message: str = message
        self.status_code: Optional[int] = status_code
        self.response_data: Dict[str, Any] = response_data or {}
        self.retry_after: Optional[float] = retry_after

    def __str__(self) -> str:
        if self.status_code is None:
            return f"Riot API call failed: {self.message}"
        text = f"Riot API returned {self.status_code}: {self.message}"
        if self.retry_after:
            text += f" (retry after {self.retry_after}s)"
        return text


class BadRequestError(RiotAPIError):
    """400: the request parameters were rejected."""


class AuthenticationError(RiotAPIError):
    """401: the API key is missing, invalid or expired."""


class ForbiddenError(RiotAPIError):
    """403: the key may not call this endpoint, usually a revoked dev key."""


class NotFoundError(RiotAPIError):
    """404: no such account, match or league entry."""


class RateLimitError(RiotAPIError):
    """429: app or method budget exhausted; ``retry_after`` holds the wait."""


class ServiceUnavailableError(RiotAPIError):
    """5xx: the platform could not answer this time."""


class RequestTimeoutError(RiotAPIError):
    """No response: connect or read timeout, or a transport failure."""


class InvalidResponseError(RiotAPIError):
    """A 200 whose body is not JSON or not the expected shape."""
