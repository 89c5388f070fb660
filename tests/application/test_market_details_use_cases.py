"""Tests for the single-asset market data use cases."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.application.use_cases.get_market_details import (
    GetCoinDetailsUseCase,
    GetHistoricalSeriesUseCase,
)
from src.domain.errors import InvalidRequestError, UpstreamUnavailableError


def _client() -> MagicMock:
    client = MagicMock()
    client.get_coin_details = AsyncMock(
        return_value={"id": "bitcoin", "current_price": 65000}
    )
    client.get_historical_series = AsyncMock(
        return_value={"prices": [[1700000000000, 65000.0]]}
    )
    return client


def test_coin_details_normalizes_identifier() -> None:
    client = _client()

    details = GetCoinDetailsUseCase(client).execute(" Bitcoin ")

    assert details["id"] == "bitcoin"
    client.get_coin_details.assert_awaited_once_with("bitcoin")


def test_coin_details_returns_none_for_unknown_identifier() -> None:
    client = _client()
    client.get_coin_details = AsyncMock(return_value=None)

    assert GetCoinDetailsUseCase(client).execute("nope") is None


def test_coin_details_propagates_upstream_failure() -> None:
    client = _client()
    client.get_coin_details = AsyncMock(
        side_effect=UpstreamUnavailableError("HTTP 429")
    )

    with pytest.raises(UpstreamUnavailableError):
        GetCoinDetailsUseCase(client).execute("bitcoin")


def test_historical_series_defaults_to_one_day() -> None:
    client = _client()

    series = GetHistoricalSeriesUseCase(client).execute("bitcoin")

    assert series["prices"][0][1] == 65000.0
    client.get_historical_series.assert_awaited_once_with("bitcoin", 1)


@pytest.mark.parametrize(
    ("identifier", "days"),
    [("", 1), ("   ", 1), ("bitcoin", 0)],
)
def test_historical_series_rejects_invalid_input(identifier, days) -> None:
    client = _client()

    with pytest.raises(InvalidRequestError):
        GetHistoricalSeriesUseCase(client).execute(identifier, days)
    client.get_historical_series.assert_not_called()
