"""
Price Feeds - TTL cache.

============================================================
RESPONSIBILITY
============================================================
Wraps a refresh coroutine with a freshness window per key.

- Fresh snapshot: served without calling refresh
- Stale or missing: refreshed, one in-flight refresh per key shared by
  every concurrent caller
- Failed refresh: the stale snapshot is kept and served; with nothing
  cached the error propagates

============================================================
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Generic, Hashable, Optional, Set, TypeVar

from core.clock import ClockFactory, ClockProtocol

from price_feeds.models import PriceSnapshot


logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")

DEFAULT_WINDOW_SECONDS = 900.0


class TTLCache(Generic[K, T]):
    """
    Keyed cache of PriceSnapshots with a freshness window.

    Usage:
        cache = TTLCache(refresh=lambda key: fetch_quantity(key))
        price = await cache.fetch("usd_price")
    """

    def __init__(
        self,
        refresh: Callable[[K], Awaitable[T]],
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        clock: Optional[ClockProtocol] = None,
    ) -> None:
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        self._refresh = refresh
        self._window_seconds = window_seconds
        self._clock = clock
        self._snapshots: Dict[K, PriceSnapshot[T]] = {}
        self._inflight: Dict[K, asyncio.Task] = {}
        self._invalidated: Set[K] = set()
        self._refresh_count = 0

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    @property
    def refresh_count(self) -> int:
        """Number of refreshes started since construction."""
        return self._refresh_count

    def _get_clock(self) -> ClockProtocol:
        return self._clock or ClockFactory.get_clock()

    def is_fresh(self, key: K) -> bool:
        snapshot = self._snapshots.get(key)
        if snapshot is None or key in self._invalidated:
            return False
        return self._get_clock().elapsed_since(snapshot.last_checked) < self._window_seconds

    def snapshot(self, key: K) -> Optional[PriceSnapshot[T]]:
        """Current snapshot, fresh or stale."""
        return self._snapshots.get(key)

    def peek(self, key: K) -> Optional[T]:
        """Cached value without any refresh, None if never fetched."""
        snapshot = self._snapshots.get(key)
        return snapshot.value if snapshot else None

    def invalidate(self, key: K) -> None:
        """Mark a key stale; the value stays available as a fallback."""
        if key in self._snapshots:
            self._invalidated.add(key)

    async def fetch(self, key: K, force: bool = False) -> T:
        """
        Get the value for ``key``, refreshing when stale.

        Args:
            key: Cached quantity
            force: Refresh even when fresh

        Raises:
            Exception: The refresh failed and nothing was cached for ``key``
        """
        if not force and self.is_fresh(key):
            return self._snapshots[key].value

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run_refresh(key))
            self._inflight[key] = task
            task.add_done_callback(lambda done, k=key: self._refresh_done(k, done))

        return await asyncio.shield(task)

    def _refresh_done(self, key: K, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        # Read the outcome so a refresh whose callers went away is not reported as unobserved
        if not task.cancelled():
            task.exception()

    async def _run_refresh(self, key: K) -> T:
        self._refresh_count += 1
        try:
            value = await self._refresh(key)
        except Exception as e:
            stale = self._snapshots.get(key)
            if stale is None:
                logger.error(f"Refresh of {key} failed with nothing cached: {e}")
                raise
            logger.warning(
                f"Refresh of {key} failed, serving value from "
                f"{stale.last_checked.isoformat()}: {e}"
            )
            return stale.value

        now = self._get_clock().now()
        previous = self._snapshots.get(key)
        if previous is not None and previous.last_checked > now:
            now = previous.last_checked
        self._snapshots[key] = PriceSnapshot(value=value, last_checked=now)
        self._invalidated.discard(key)
        logger.debug(f"Refreshed {key}: {value}")
        return value


__all__ = [
    "DEFAULT_WINDOW_SECONDS",
    "TTLCache",
]
