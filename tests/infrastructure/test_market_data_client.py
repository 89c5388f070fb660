"""Tests for the cached, rate-limited market data client."""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.domain.errors import UpstreamUnavailableError
from src.infrastructure.market_data_cache import MarketDataCache
from src.infrastructure.market_data_client import MarketDataClient
from src.infrastructure.rate_limiter import RateLimiter

MARKET_ROWS = [
    {
        "id": "bitcoin",
        "current_price": 65000,
        "price_change_percentage_24h": 2.5,
        "image": "https://example.test/btc.png",
    },
    {
        "id": "ethereum",
        "current_price": "3000.5",
        "price_change_percentage_24h": None,
    },
    {"id": "broken", "current_price": None},
]


def _client(fake_clock, provider=None):
    if provider is None:
        provider = MagicMock()
        provider.get_markets = AsyncMock(return_value=MARKET_ROWS)
    limiter = RateLimiter(min_interval_seconds=1.0, clock=fake_clock)
    client = MarketDataClient(
        provider,
        MarketDataCache(duration_seconds=300, clock=fake_clock),
        limiter,
        vs_currency="usd",
        logger=MagicMock(),
    )
    return client, provider


def test_get_quotes_parses_rows(fake_clock) -> None:
    client, provider = _client(fake_clock)

    quotes = asyncio.run(client.get_quotes({"ethereum", "bitcoin", "broken"}))

    assert set(quotes) == {"bitcoin", "ethereum"}
    assert quotes["bitcoin"].price == Decimal("65000")
    assert quotes["bitcoin"].change_24h == Decimal("2.5")
    assert quotes["bitcoin"].image == "https://example.test/btc.png"
    assert quotes["ethereum"].change_24h is None
    provider.get_markets.assert_awaited_once_with(
        ["bitcoin", "broken", "ethereum"],
        "usd",
    )


def test_get_quotes_serves_identical_sets_from_cache(fake_clock) -> None:
    client, provider = _client(fake_clock)

    first = asyncio.run(client.get_quotes(["bitcoin", "ethereum"]))
    second = asyncio.run(client.get_quotes(["ethereum", "bitcoin", "bitcoin"]))

    assert first == second
    assert provider.get_markets.await_count == 1
    assert fake_clock.sleeps == []


def test_get_quotes_refetches_after_expiry(fake_clock) -> None:
    client, provider = _client(fake_clock)
    asyncio.run(client.get_quotes(["bitcoin"]))

    fake_clock.now = 301.0
    asyncio.run(client.get_quotes(["bitcoin"]))

    assert provider.get_markets.await_count == 2


def test_different_sets_use_different_entries(fake_clock) -> None:
    client, provider = _client(fake_clock)

    asyncio.run(client.get_quotes(["bitcoin"]))
    asyncio.run(client.get_quotes(["bitcoin", "ethereum"]))

    assert provider.get_markets.await_count == 2
    assert fake_clock.sleeps == [1.0]


def test_get_quotes_with_empty_ids_skips_upstream(fake_clock) -> None:
    client, provider = _client(fake_clock)

    assert asyncio.run(client.get_quotes([])) == {}
    provider.get_markets.assert_not_called()


def test_failures_are_not_cached(fake_clock) -> None:
    provider = MagicMock()
    provider.get_markets = AsyncMock(
        side_effect=[UpstreamUnavailableError("timeout"), MARKET_ROWS]
    )
    client, _ = _client(fake_clock, provider)

    with pytest.raises(UpstreamUnavailableError):
        asyncio.run(client.get_quotes(["bitcoin"]))
    quotes = asyncio.run(client.get_quotes(["bitcoin"]))

    assert quotes["bitcoin"].price == Decimal("65000")
    assert provider.get_markets.await_count == 2


def test_cached_quotes_cannot_be_mutated_by_callers(fake_clock) -> None:
    client, _ = _client(fake_clock)

    first = asyncio.run(client.get_quotes(["bitcoin"]))
    first.pop("bitcoin")
    second = asyncio.run(client.get_quotes(["bitcoin"]))

    assert "bitcoin" in second


def test_quotes_cache_key_ignores_order_and_duplicates() -> None:
    assert MarketDataClient.quotes_cache_key(
        ["ethereum", "bitcoin", "ethereum"]
    ) == "market_data_bitcoin,ethereum"


def test_coin_details_cached_and_not_found_not_cached(fake_clock) -> None:
    provider = MagicMock()
    provider.get_markets = AsyncMock(
        side_effect=[[], [MARKET_ROWS[0]], [MARKET_ROWS[1]]]
    )
    client, _ = _client(fake_clock, provider)

    assert asyncio.run(client.get_coin_details("bitcoin")) is None
    details = asyncio.run(client.get_coin_details("bitcoin"))
    again = asyncio.run(client.get_coin_details("bitcoin"))

    assert details["id"] == "bitcoin"
    assert again == details
    assert again is not details
    assert provider.get_markets.await_count == 2


def test_historical_series_is_cached_per_window(fake_clock) -> None:
    provider = MagicMock()
    provider.get_market_chart = AsyncMock(return_value={"prices": []})
    client, _ = _client(fake_clock, provider)

    asyncio.run(client.get_historical_series("bitcoin"))
    asyncio.run(client.get_historical_series("bitcoin"))
    asyncio.run(client.get_historical_series("bitcoin", days=7))

    assert provider.get_market_chart.await_count == 2
    provider.get_market_chart.assert_any_await("bitcoin", "usd", 1)
    provider.get_market_chart.assert_any_await("bitcoin", "usd", 7)


def test_cached_series_cannot_be_mutated_by_callers(fake_clock) -> None:
    provider = MagicMock()
    provider.get_market_chart = AsyncMock(
        return_value={"prices": [[0, 1.5]]}
    )
    client, _ = _client(fake_clock, provider)

    first = asyncio.run(client.get_historical_series("bitcoin"))
    first["prices"].clear()
    second = asyncio.run(client.get_historical_series("bitcoin"))

    assert second == {"prices": [[0, 1.5]]}
    assert provider.get_market_chart.await_count == 1


def test_concurrent_misses_on_same_set_call_upstream_once(fake_clock) -> None:
    async def _yielding_markets(ids, vs_currency):
        await asyncio.sleep(0)
        return MARKET_ROWS

    provider = MagicMock()
    provider.get_markets = AsyncMock(side_effect=_yielding_markets)
    client, _ = _client(fake_clock, provider)

    async def _run():
        return await asyncio.gather(
            client.get_quotes({"bitcoin"}),
            client.get_quotes({"bitcoin"}),
        )

    first, second = asyncio.run(_run())

    assert first == second
    assert provider.get_markets.await_count == 1
