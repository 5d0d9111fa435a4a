"""
Tests for rate limiter.
"""

import pytest

from ranktracker.core.riot_api.rate_limiter import RateLimiter, parse_rate_header


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return RateLimiter(request_spacing=0.05, clock=clock, sleep=clock.sleep)


class TestParseRateHeader:
    """Test cases for parse_rate_header."""

    def test_pairs(self):
        assert parse_rate_header("20:1,100:120") == {1: 20, 120: 100}

    def test_empty_and_garbage(self):
        assert parse_rate_header(None) == {}
        assert parse_rate_header("") == {}
        assert parse_rate_header("abc,20:x") == {}


class TestRateLimiter:
    """Test cases for RateLimiter."""

    @pytest.mark.asyncio
    async def test_first_request_does_not_wait(self, limiter, clock):
        await limiter.wait_if_needed()
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_request_spacing(self, limiter, clock):
        await limiter.wait_if_needed()
        await limiter.wait_if_needed()
        assert clock.sleeps == [pytest.approx(0.05)]

    @pytest.mark.asyncio
    async def test_exhausted_window_blocks(self, limiter, clock):
        limiter.update_limits(
            {
                "X-App-Rate-Limit": "20:1,100:120",
                "X-App-Rate-Limit-Count": "5:1,100:120",
            }
        )
        assert limiter.blocked_until == clock.now + 120

        await limiter.wait_if_needed()
        assert clock.sleeps == [pytest.approx(120)]

    def test_counts_under_limit_do_not_block(self, limiter):
        limiter.update_limits(
            {
                "X-Method-Rate-Limit": "500:10",
                "X-Method-Rate-Limit-Count": "12:10",
            }
        )
        assert limiter.blocked_until == 0.0

    @pytest.mark.asyncio
    async def test_retry_after(self, limiter, clock):
        limiter.record_retry_after(3)
        await limiter.wait_if_needed()
        assert clock.sleeps == [pytest.approx(3)]

    def test_shorter_block_does_not_shorten_longer_one(self, limiter, clock):
        limiter.record_retry_after(30)
        limiter.record_retry_after(2)
        assert limiter.blocked_until == clock.now + 30
