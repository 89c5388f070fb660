"""System clock adapter."""

import asyncio
from datetime import date, datetime, timezone
import time

from src.application.ports.market_data import ClockPort


class SystemClock(ClockPort):
    """Clock backed by ``time.monotonic`` and ``asyncio.sleep``."""

    def monotonic(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    def today(self) -> date:
        return datetime.now(timezone.utc).date()


__all__ = ["SystemClock"]
