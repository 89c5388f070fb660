"""Global throttle for outbound market data requests."""

import threading

from src.application.ports.market_data import ClockPort, RateLimiterPort
from src.infrastructure.clock import SystemClock

DEFAULT_MIN_INTERVAL_SECONDS = 1.0


class RateLimiter(RateLimiterPort):
    """Serialize callers onto one timeline spaced by a minimum interval.

    Each caller reserves the next free slot under a lock, then sleeps until
    that slot. Slots are handed out in lock order, so acquisitions are
    monotonic and every caller is served after at most N-1 intervals. The
    lock is a thread lock so one limiter can be shared by syncs running on
    different threads and event loops.
    """

    def __init__(
        self,
        min_interval_seconds: float = DEFAULT_MIN_INTERVAL_SECONDS,
        clock: ClockPort | None = None,
    ) -> None:
        """Initialize the limiter.

        Args:
            min_interval_seconds: Minimum spacing between acquisitions.
            clock: Optional clock, defaults to the system clock.
        """
        self._interval = min_interval_seconds
        self._clock = clock or SystemClock()
        self._last_slot: float | None = None
        self._lock = threading.Lock()

    async def acquire(self) -> None:
        """Wait until at least one interval after the previous acquisition."""
        wait = self._reserve()
        if wait > 0:
            await self._clock.sleep(wait)

    def _reserve(self) -> float:
        with self._lock:
            now = self._clock.monotonic()
            if self._last_slot is None:
                slot = now
            else:
                slot = max(now, self._last_slot + self._interval)
            self._last_slot = slot
        return slot - now


__all__ = ["RateLimiter", "DEFAULT_MIN_INTERVAL_SECONDS"]
