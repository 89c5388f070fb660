"""Time-bounded in-memory cache for market data responses."""

import threading
from typing import Any

from src.application.ports.market_data import ClockPort, MarketDataCachePort
from src.infrastructure.clock import SystemClock

DEFAULT_CACHE_SECONDS = 300.0


class MarketDataCache(MarketDataCachePort):
    """Memoize upstream responses for a fixed duration.

    Entries expire lazily: an entry read at or after ``duration`` seconds
    since it was stored counts as a miss and is replaced on the next put.
    The cache is shared by every concurrent sync in the process; concurrent
    puts on one key are last-writer-wins.
    """

    def __init__(
        self,
        duration_seconds: float = DEFAULT_CACHE_SECONDS,
        clock: ClockPort | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            duration_seconds: Lifetime of an entry in seconds.
            clock: Optional clock, defaults to the system clock.
        """
        self._duration = duration_seconds
        self._clock = clock or SystemClock()
        self._entries: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        data, timestamp = entry
        if self._clock.monotonic() - timestamp >= self._duration:
            return None
        return data

    def put(self, key: str, value: Any) -> None:
        timestamp = self._clock.monotonic()
        with self._lock:
            self._entries[key] = (value, timestamp)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["MarketDataCache", "DEFAULT_CACHE_SECONDS"]
