"""Rate limiting for Riot API using response headers."""

import asyncio
import time
from typing import Awaitable, Callable, Dict, Mapping, Optional
import structlog

logger = structlog.get_logger(__name__)


def parse_rate_header(value: Optional[str]) -> Dict[int, int]:
    """Parse a Riot rate header ("20:1,100:120") into {window_seconds: amount}."""
    parsed: Dict[int, int] = {}
    if not value:
        return parsed
    for pair in value.split(","):
        amount, _, window = pair.strip().partition(":")
        if amount.isdigit() and window.isdigit():
            parsed[int(window)] = int(amount)
    return parsed


class RateLimiter:
    """Header-based rate limiter that trusts Riot API response headers.

    The limiter never retries anything itself. It only delays the next
    request when the previous responses said a window is exhausted or when
    a 429 carried a Retry-After.
    """

    HEADER_PAIRS = (
        ("X-App-Rate-Limit", "X-App-Rate-Limit-Count"),
        ("X-Method-Rate-Limit", "X-Method-Rate-Limit-Count"),
    )

    def __init__(
        self,
        request_spacing: float = 0.05,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize rate limiter.

        :param request_spacing: Minimum seconds between two requests.
        :param clock: Monotonic clock, injectable for tests.
        :param sleep: Async sleep, injectable for tests.
        """
        self.request_spacing = request_spacing
        self.blocked_until = 0.0
        self.last_request_time = 0.0
        self._clock = clock
        self._sleep = sleep
        self.lock = asyncio.Lock()

    async def wait_if_needed(self) -> None:
        """Sleep until the next request is allowed."""
        async with self.lock:
            now = self._clock()
            wait_time = max(
                self.blocked_until - now,
                self.last_request_time + self.request_spacing - now,
                0.0,
            )
            if wait_time > 0:
                if wait_time > self.request_spacing:
                    logger.info("Rate limit reached, waiting", wait_time=wait_time)
                await self._sleep(wait_time)
            self.last_request_time = self._clock()

    def update_limits(self, headers: Mapping[str, str]) -> None:
        """Block until window reset when a response reports an exhausted window."""
        now = self._clock()
        for limit_header, count_header in self.HEADER_PAIRS:
            limits = parse_rate_header(headers.get(limit_header))
            counts = parse_rate_header(headers.get(count_header))
            for window, limit in limits.items():
                if counts.get(window, 0) >= limit:
                    self._block(now + window, scope=limit_header, window=window)

    def record_retry_after(self, retry_after: float) -> None:
        """Honor a Retry-After received with a 429."""
        self._block(self._clock() + retry_after, scope="Retry-After", window=None)

    def _block(self, until: float, scope: str, window: Optional[int]) -> None:
        if until > self.blocked_until:
            self.blocked_until = until
            logger.warning(
                "Rate limit window exhausted",
                scope=scope,
                window=window,
                blocked_for=until - self._clock(),
            )
