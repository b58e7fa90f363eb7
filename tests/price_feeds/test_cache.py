"""
Tests for the TTL cache.

============================================================
PURPOSE
============================================================
- Fresh values are served without refresh
- Concurrent stale reads share one refresh
- Outages serve the last known value

============================================================
"""

import asyncio
from datetime import datetime, timezone

import pytest

from core.clock import MockClock
from price_feeds import TTLCache


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def clock():
    return MockClock(datetime(2024, 1, 1, tzinfo=timezone.utc))


class Refresher:
    """Refresh function returning queued values or raising queued errors."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []
        self.gate = None

    async def __call__(self, key):
        self.calls.append(key)
        if self.gate is not None:
            await self.gate.wait()
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result


# ============================================================
# TESTS
# ============================================================

class TestTTLCache:
    """Tests for TTLCache."""

    @pytest.mark.asyncio
    async def test_fresh_value_served_without_refresh(self, clock):
        """Test two fetches inside the window refresh once."""
        refresh = Refresher(0.03)
        cache = TTLCache(refresh, window_seconds=900, clock=clock)

        assert await cache.fetch("usd") == 0.03
        clock.advance(600)
        assert await cache.fetch("usd") == 0.03

        assert len(refresh.calls) == 1
        assert cache.refresh_count == 1

    @pytest.mark.asyncio
    async def test_stale_value_refreshed_once(self, clock):
        """Test passing the window triggers exactly one more refresh."""
        refresh = Refresher(0.03, 0.04)
        cache = TTLCache(refresh, window_seconds=900, clock=clock)

        await cache.fetch("usd")
        clock.advance(901)

        assert await cache.fetch("usd") == 0.04
        assert await cache.fetch("usd") == 0.04
        assert len(refresh.calls) == 2

    @pytest.mark.asyncio
    async def test_concurrent_fetches_share_refresh(self, clock):
        """Test concurrent callers on a stale key await a single refresh."""
        refresh = Refresher(0.05)
        refresh.gate = asyncio.Event()
        cache = TTLCache(refresh, window_seconds=900, clock=clock)

        callers = [asyncio.ensure_future(cache.fetch("usd")) for _ in range(5)]
        await asyncio.sleep(0)
        refresh.gate.set()
        results = await asyncio.gather(*callers)

        assert results == [0.05] * 5
        assert len(refresh.calls) == 1

    @pytest.mark.asyncio
    async def test_stale_served_on_failure(self, clock):
        """Test a failed refresh keeps serving the last value."""
        refresh = Refresher(0.03, ConnectionError("api down"))
        cache = TTLCache(refresh, window_seconds=900, clock=clock)

        await cache.fetch("usd")
        checked = cache.snapshot("usd").last_checked
        clock.advance(1000)

        assert await cache.fetch("usd") == 0.03
        assert cache.snapshot("usd").last_checked == checked
        assert not cache.is_fresh("usd")

    @pytest.mark.asyncio
    async def test_failure_with_nothing_cached(self, clock):
        """Test the refresh error propagates when nothing is cached."""
        cache = TTLCache(Refresher(ConnectionError("api down")), clock=clock)

        with pytest.raises(ConnectionError):
            await cache.fetch("usd")

        assert cache.peek("usd") is None

    @pytest.mark.asyncio
    async def test_last_checked_monotonic(self, clock):
        """Test last_checked never moves backwards."""
        refresh = Refresher(1.0, 2.0, 3.0)
        cache = TTLCache(refresh, window_seconds=900, clock=clock)

        await cache.fetch("usd")
        first = cache.snapshot("usd").last_checked

        clock.advance(-60)
        await cache.fetch("usd", force=True)

        assert cache.snapshot("usd").last_checked >= first

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, clock):
        """Test each key has its own freshness."""
        refresh = Refresher(1.0)
        cache = TTLCache(refresh, window_seconds=900, clock=clock)

        await cache.fetch("usd_price")
        await cache.fetch("percent_change_24h")

        assert refresh.calls == ["usd_price", "percent_change_24h"]

    @pytest.mark.asyncio
    async def test_force_and_invalidate(self, clock):
        """Test force and invalidate bypass freshness."""
        refresh = Refresher(1.0, 2.0, 3.0)
        cache = TTLCache(refresh, window_seconds=900, clock=clock)

        await cache.fetch("usd")
        assert await cache.fetch("usd", force=True) == 2.0

        cache.invalidate("usd")
        assert not cache.is_fresh("usd")
        assert cache.peek("usd") == 2.0

        assert await cache.fetch("usd") == 3.0
        assert cache.is_fresh("usd")

    def test_invalid_window(self):
        """Test a non-positive window is rejected."""
        with pytest.raises(ValueError):
            TTLCache(Refresher(1.0), window_seconds=0)
