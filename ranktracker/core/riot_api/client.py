"""Riot API HTTP client with rate limiting, error handling, and authentication."""

import asyncio
from typing import Any, Callable, Dict, List, Optional

import httpx
import structlog
from pydantic import ValidationError

from ..config import get_global_settings
from ..enums import QueueType, Region
from .endpoints import RiotAPIEndpoints
from .errors import (
    AuthenticationError,
    BadRequestError,
    ForbiddenError,
    InvalidResponseError,
    NotFoundError,
    RateLimitError,
    RequestTimeoutError,
    RiotAPIError,
    ServiceUnavailableError,
)
from .models import AccountDTO, LeagueEntryDTO, MatchDTO
from .rate_limiter import RateLimiter

logger = structlog.get_logger(__name__)


class RiotAPIClient:
    """Riot API client with header-driven rate limiting and typed errors.

    Every call is bounded by the client's timeout and fails fast: there is no
    retry loop here, a failed call surfaces as a ``RiotAPIError`` subclass and
    the caller decides what to skip.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        default_region: Region = Region.EUW,
        timeout: Optional[float] = None,
        rate_limiter: Optional[RateLimiter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        request_callback: Optional[Callable[[str, int], None]] = None,
    ):
        """
        Initialize Riot API client.

        Args:
            api_key: Riot API key (uses config if None)
            default_region: Server code used when a call does not name one
            timeout: Per-request timeout in seconds (uses config if None)
            rate_limiter: Shared limiter, a fresh one is created if None
            transport: Optional httpx transport, used by tests
            request_callback: Optional callback for tracking API requests (metric_name, count)
        """
        settings = get_global_settings()
        self.api_key = api_key or settings.riot_api_key
        self.timeout = timeout or settings.riot_request_timeout
        self.endpoints = RiotAPIEndpoints(default_region)
        self.rate_limiter = rate_limiter or RateLimiter()
        self.request_callback = request_callback

        self._transport = transport
        self.session: Optional[httpx.AsyncClient] = None
        self._session_lock = asyncio.Lock()

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def start_session(self) -> None:
        """Start the httpx session."""
        if self.session is None or self.session.is_closed:
            async with self._session_lock:
                if self.session is None or self.session.is_closed:
                    headers = {
                        "X-Riot-Token": self.api_key,
                        "Accept": "application/json",
                        "User-Agent": "RankTracker/1.0",
                    }
                    self.session = httpx.AsyncClient(
                        headers=headers,
                        timeout=httpx.Timeout(self.timeout),
                        transport=self._transport,
                    )
                    logger.info(
                        "Riot API client session started",
                        default_region=self.endpoints.default_region.value,
                        api_key_prefix="[REDACTED]" if self.api_key else "None",
                    )

    async def close(self) -> None:
        """Close the httpx session."""
        if self.session and not self.session.is_closed:
            await self.session.aclose()
            logger.info("Riot API client session closed")

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Raise specific RiotAPIError subclass for non-200 responses."""
        status = response.status_code
        if status == 200:
            return
        if status == 400:
            raise BadRequestError("Invalid request parameters", status_code=status)
        if status == 401:
            raise AuthenticationError("Invalid API key", status_code=status)
        if status == 403:
            raise ForbiddenError("Access forbidden", status_code=status)
        if status == 404:
            raise NotFoundError("Resource not found", status_code=status)
        if status == 429:
            try:
                retry_after = float(response.headers.get("Retry-After", 1))
            except ValueError:
                retry_after = 1.0
            self.rate_limiter.record_retry_after(retry_after)
            raise RateLimitError(
                "Rate limit exceeded", status_code=status, retry_after=retry_after
            )
        if status >= 500:
            raise ServiceUnavailableError(f"Server error {status}", status_code=status)
        raise RiotAPIError(f"Unexpected status {status}", status_code=status)

    async def _make_request(
        self, url: str, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Make one rate-limited GET request.

        Returns:
            Decoded JSON body

        Raises:
            RiotAPIError: For API, transport and decoding errors
        """
        await self.start_session()
        await self.rate_limiter.wait_if_needed()

        try:
            response = await self.session.get(url, params=params)
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(f"Request timed out: {e}") from e
        except httpx.RequestError as e:
            raise RequestTimeoutError(f"Request failed: {e}") from e

        self.rate_limiter.update_limits(response.headers)
        if self.request_callback:
            self.request_callback("requests_made", 1)

        self._raise_for_status(response)
        try:
            return response.json()
        except ValueError as e:
            raise InvalidResponseError(
                f"Response is not valid JSON: {e}", status_code=response.status_code
            ) from e

    # Account endpoints
    async def get_account_by_riot_id(self, game_name: str, tag_line: str) -> AccountDTO:
        """Get account by Riot ID (gameName#tagLine)."""
        url = self.endpoints.account_by_riot_id(game_name, tag_line)
        response = await self._make_request(url)
        return self._parse(AccountDTO, response)

    # Match endpoints
    async def get_match_ids_by_puuid(
        self,
        puuid: str,
        count: int = 20,
        queue: Optional[QueueType] = None,
        region: Optional[Region] = None,
    ) -> List[str]:
        """Get the newest match ids for a player, newest first."""
        url, params = self.endpoints.match_ids_by_puuid(puuid, count, queue, region)
        response = await self._make_request(url, params=params)
        if not isinstance(response, list) or not all(
            isinstance(match_id, str) for match_id in response
        ):
            raise InvalidResponseError(
                f"Expected list of match ids, got {type(response).__name__}"
            )
        return response

    async def get_match(self, match_id: str, region: Optional[Region] = None) -> MatchDTO:
        """Get match details by match ID."""
        url = self.endpoints.match_by_id(match_id, region)
        response = await self._make_request(url)
        return self._parse(MatchDTO, response)

    # League endpoints
    async def get_league_entries_by_puuid(
        self, puuid: str, region: Optional[Region] = None
    ) -> List[LeagueEntryDTO]:
        """Get league entries by PUUID."""
        url = self.endpoints.league_entries_by_puuid(puuid, region)
        response = await self._make_request(url)

        if not isinstance(response, list):
            raise InvalidResponseError(
                f"Expected list response for league entries, got {type(response).__name__}"
            )
        return [self._parse(LeagueEntryDTO, entry) for entry in response]

    @staticmethod
    def _parse(model, payload: Any):
        """Validate a payload into a DTO, converting validation errors."""
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise InvalidResponseError(
                f"Unexpected {model.__name__} payload: {e.error_count()} validation errors"
            ) from e
