"""Ports for market data retrieval, caching, throttling and time."""

from collections.abc import Iterable
from datetime import date
from typing import Any, Protocol

from src.domain.models import MarketQuote


class ClockPort(Protocol):
    """Port exposing time reads and suspension."""

    def monotonic(self) -> float:
        """Return a monotonic timestamp in seconds."""

    async def sleep(self, seconds: float) -> None:
        """Suspend the caller for ``seconds``."""

    def today(self) -> date:
        """Return the current UTC date."""


class MarketDataProviderPort(Protocol):
    """Port exposing the upstream market data provider."""

    async def get_markets(
        self,
        ids: list[str],
        vs_currency: str,
    ) -> list[dict[str, Any]]:
        """Return market rows (id, current_price, change, image) for ids."""

    async def get_market_chart(
        self,
        coin_id: str,
        vs_currency: str,
        days: int,
    ) -> dict[str, Any]:
        """Return the intraday series payload for one identifier."""


class MarketDataCachePort(Protocol):
    """Port exposing a time-bounded key/value cache."""

    def get(self, key: str) -> Any | None:
        """Return cached data, or None when absent or expired."""

    def put(self, key: str, value: Any) -> None:
        """Store data under key."""


class RateLimiterPort(Protocol):
    """Port exposing a global upstream throttle."""

    async def acquire(self) -> None:
        """Wait for the next upstream request slot."""


class MarketDataClientPort(Protocol):
    """Port exposing cached, throttled market data reads."""

    async def get_quotes(
        self,
        identifiers: Iterable[str],
    ) -> dict[str, MarketQuote]:
        """Return quotes keyed by pricing identifier."""

    async def get_historical_series(
        self,
        identifier: str,
        days: int = 1,
    ) -> dict[str, Any]:
        """Return the historical series payload for one identifier."""

    async def get_coin_details(self, identifier: str) -> dict[str, Any] | None:
        """Return the raw market row for one identifier, None if unknown."""


__all__ = [
    "ClockPort",
    "MarketDataProviderPort",
    "MarketDataCachePort",
    "RateLimiterPort",
    "MarketDataClientPort",
]
