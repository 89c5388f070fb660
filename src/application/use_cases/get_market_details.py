"""Use cases reading single-asset market data."""

import asyncio
from typing import Any

from src.application.ports.market_data import MarketDataClientPort
from src.domain.errors import InvalidRequestError


def _validate_identifier(identifier: str) -> str:
    if not isinstance(identifier, str) or not identifier.strip():
        raise InvalidRequestError("A pricing identifier is required.")
    return identifier.strip().lower()


class GetCoinDetailsUseCase:
    """Fetch the current market row for one pricing identifier."""

    def __init__(self, market_data_client: MarketDataClientPort) -> None:
        self._market_data_client = market_data_client

    def execute(self, identifier: str) -> dict[str, Any] | None:
        """Return the market row, None when the identifier is unknown.

        Raises:
            InvalidRequestError: When identifier is blank.
            UpstreamUnavailableError: When the provider fails.
        """
        coin_id = _validate_identifier(identifier)
        return asyncio.run(self._market_data_client.get_coin_details(coin_id))


class GetHistoricalSeriesUseCase:
    """Fetch the intraday price series for one pricing identifier."""

    def __init__(self, market_data_client: MarketDataClientPort) -> None:
        self._market_data_client = market_data_client

    def execute(self, identifier: str, days: int = 1) -> dict[str, Any]:
        """Return the provider's series payload over ``days`` days.

        Raises:
            InvalidRequestError: When identifier is blank or days < 1.
            UpstreamUnavailableError: When the provider fails.
        """
        coin_id = _validate_identifier(identifier)
        if days < 1:
            raise InvalidRequestError(
                "The history window must be at least one day."
            )
        return asyncio.run(
            self._market_data_client.get_historical_series(coin_id, days)
        )


__all__ = ["GetCoinDetailsUseCase", "GetHistoricalSeriesUseCase"]
