"""Shared fixtures for the test suite."""

import asyncio
from datetime import date

import pytest


class FakeClock:
    """Manually driven clock; sleeps are recorded and do not advance time."""

    def __init__(self, now: float = 0.0, today: date = date(2024, 1, 1)):
        self.now = now
        self.current_date = today
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        await asyncio.sleep(0)

    def today(self) -> date:
        return self.current_date


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
