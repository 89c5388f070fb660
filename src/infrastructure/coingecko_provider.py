"""CoinGecko market data provider over HTTP."""

from typing import Any

import httpx

from src.application.ports.market_data import MarketDataProviderPort
from src.domain.errors import UpstreamUnavailableError
from src.infrastructure.logging.logger import get_app_logger

DEFAULT_BASE_URL = "https://api.coingecko.com/api/v3"
DEFAULT_TIMEOUT_SECONDS = 10.0


class CoinGeckoMarketDataProvider(MarketDataProviderPort):
    """Market data provider backed by the CoinGecko REST API.

    A client is opened per request so the provider can be shared by syncs
    running on different event loops.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
        logger=None,
    ) -> None:
        """Initialize the provider.

        Args:
            base_url: API root, without trailing slash.
            api_key: Optional demo API key sent as a header.
            timeout_seconds: Bound applied to every request.
            transport: Optional transport override, used by tests.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout_seconds
        self._transport = transport
        self._logger = logger or get_app_logger()

    async def get_markets(
        self,
        ids: list[str],
        vs_currency: str,
    ) -> list[dict[str, Any]]:
        payload = await self._get(
            "/coins/markets",
            {"vs_currency": vs_currency, "ids": ",".join(ids)},
        )
        if not isinstance(payload, list):
            raise UpstreamUnavailableError(
                f"Unexpected CoinGecko markets payload: {type(payload).__name__}"
            )
        return payload

    async def get_market_chart(
        self,
        coin_id: str,
        vs_currency: str,
        days: int,
    ) -> dict[str, Any]:
        payload = await self._get(
            f"/coins/{coin_id}/market_chart",
            {"vs_currency": vs_currency, "days": str(days)},
        )
        if not isinstance(payload, dict):
            raise UpstreamUnavailableError(
                f"Unexpected CoinGecko chart payload: {type(payload).__name__}"
            )
        return payload

    async def _get(self, path: str, params: dict[str, str]) -> Any:
        url = f"{self._base_url}{path}"
        headers = {"accept": "application/json"}
        if self._api_key:
            headers["x-cg-demo-api-key"] = self._api_key
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(url, params=params, headers=headers)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as exc:
            self._logger.error(
                f"CoinGecko API error for {url}: "
                f"HTTP {exc.response.status_code}"
            )
            raise UpstreamUnavailableError(
                f"CoinGecko API error: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.TimeoutException as exc:
            self._logger.error(f"CoinGecko API timeout for {url}")
            raise UpstreamUnavailableError("CoinGecko API timeout") from exc
        except httpx.RequestError as exc:
            self._logger.error(f"CoinGecko API error for {url}: {exc}")
            raise UpstreamUnavailableError(
                f"CoinGecko API error: {exc}"
            ) from exc
        except ValueError as exc:
            self._logger.error(f"CoinGecko returned invalid JSON for {url}")
            raise UpstreamUnavailableError(
                "CoinGecko returned invalid JSON"
            ) from exc


__all__ = [
    "CoinGeckoMarketDataProvider",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT_SECONDS",
]
