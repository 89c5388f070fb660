"""Cached, rate-limited market data client."""

from collections.abc import Iterable
import copy
from types import MappingProxyType
from typing import Any

from src.application.ports.market_data import (
    MarketDataCachePort,
    MarketDataClientPort,
    MarketDataProviderPort,
    RateLimiterPort,
)
from src.domain.constants import REFERENCE_CURRENCY
from src.domain.models import MarketQuote
from src.infrastructure.logging.logger import get_app_logger
from src.utils.decimal_utils import parse_decimal


class MarketDataClient(MarketDataClientPort):
    """Serve market data from the shared cache, falling back to upstream.

    Misses acquire the shared rate limiter before issuing exactly one
    upstream request. Provider failures surface as UpstreamUnavailableError
    and are never cached.
    """

    def __init__(
        self,
        provider: MarketDataProviderPort,
        cache: MarketDataCachePort,
        rate_limiter: RateLimiterPort,
        vs_currency: str = REFERENCE_CURRENCY,
        logger=None,
    ) -> None:
        """Initialize the client.

        Args:
            provider: Upstream market data provider.
            cache: Process-wide market data cache.
            rate_limiter: Process-wide upstream throttle.
            vs_currency: Reference currency for every price.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._provider = provider
        self._cache = cache
        self._rate_limiter = rate_limiter
        self._vs_currency = vs_currency
        self._logger = logger or get_app_logger()

    @property
    def vs_currency(self) -> str:
        return self._vs_currency

    async def get_quotes(
        self,
        identifiers: Iterable[str],
    ) -> dict[str, MarketQuote]:
        """Return quotes for the identifier set in one batched request.

        Args:
            identifiers: Pricing identifiers; order and duplicates are ignored.

        Returns:
            dict[str, MarketQuote]: Quotes keyed by identifier. Identifiers
            unknown to the provider are absent.

        Raises:
            UpstreamUnavailableError: When the provider fails or times out.
        """
        ids = sorted({identifier for identifier in identifiers if identifier})
        if not ids:
            return {}
        key = self.quotes_cache_key(ids)
        cached = await self._cached_or_acquire(key)
        if cached is not None:
            self._logger.debug(f"Market data cache hit for {len(ids)} ids")
            return dict(cached)

        rows = await self._provider.get_markets(ids, self._vs_currency)
        quotes = self._parse_quotes(rows)
        self._cache.put(key, MappingProxyType(dict(quotes)))
        self._logger.info(
            f"Fetched {len(quotes)} quotes for {len(ids)} ids from upstream"
        )
        return quotes

    async def get_historical_series(
        self,
        identifier: str,
        days: int = 1,
    ) -> dict[str, Any]:
        """Return the intraday series payload for one identifier.

        Raises:
            UpstreamUnavailableError: When the provider fails or times out.
        """
        key = f"historical_data_{identifier}_{days}"
        cached = await self._cached_or_acquire(key)
        if cached is not None:
            return copy.deepcopy(cached)
        series = await self._provider.get_market_chart(
            identifier,
            self._vs_currency,
            days,
        )
        self._cache.put(key, copy.deepcopy(series))
        return series

    async def get_coin_details(self, identifier: str) -> dict[str, Any] | None:
        """Return the provider's market row for one identifier.

        Returns:
            dict | None: Raw market row, None when the provider knows no
            such identifier. Not-found answers are not cached.

        Raises:
            UpstreamUnavailableError: When the provider fails or times out.
        """
        key = f"coin_details_{identifier}"
        cached = await self._cached_or_acquire(key)
        if cached is not None:
            return copy.deepcopy(cached)
        rows = await self._provider.get_markets([identifier], self._vs_currency)
        if not rows:
            return None
        details = rows[0]
        self._cache.put(key, copy.deepcopy(details))
        return details

    async def _cached_or_acquire(self, key: str) -> Any | None:
        """Return the cached value, or None once an upstream slot is held.

        The cache is read again after the wait, since a concurrent caller
        may have filled the entry while this one was throttled.
        """
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        await self._rate_limiter.acquire()
        return self._cache.get(key)

    @staticmethod
    def quotes_cache_key(ids: Iterable[str]) -> str:
        return "market_data_" + ",".join(sorted(set(ids)))

    def _parse_quotes(
        self,
        rows: list[dict[str, Any]],
    ) -> dict[str, MarketQuote]:
        quotes: dict[str, MarketQuote] = {}
        for row in rows:
            if not isinstance(row, dict):
                continue
            coin_id = row.get("id")
            price = parse_decimal(row.get("current_price"))
            if not coin_id or price is None:
                self._logger.warning(
                    f"Skipping market row without id or price: {coin_id}"
                )
                continue
            quotes[coin_id] = MarketQuote(
                price=price,
                change_24h=parse_decimal(row.get("price_change_percentage_24h")),
                image=row.get("image"),
            )
        return quotes


__all__ = ["MarketDataClient"]
