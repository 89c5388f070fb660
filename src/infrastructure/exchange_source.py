"""Exchange balance source backed by ccxt."""

from typing import Any

import ccxt
import ccxt.async_support as ccxt_async

from src.application.ports.balance_sources import ExchangeBalanceSourcePort
from src.domain.errors import SourceUnavailableError

DEFAULT_EXCHANGE_ID = "binance"
DEFAULT_EXCHANGE_TIMEOUT_SECONDS = 10.0


class CcxtExchangeBalanceSource(ExchangeBalanceSourcePort):
    """Read account balances from a ccxt-supported exchange."""

    def __init__(
        self,
        exchange_id: str = DEFAULT_EXCHANGE_ID,
        sandbox: bool = True,
        timeout_seconds: float = DEFAULT_EXCHANGE_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the source.

        Args:
            exchange_id: ccxt exchange identifier (e.g. binance).
            sandbox: Whether to target the exchange testnet.
            timeout_seconds: Request timeout handed to ccxt.
        """
        self._exchange_id = exchange_id
        self._sandbox = sandbox
        self._timeout = timeout_seconds

    async def get_account_balances(
        self,
        api_key: str,
        api_secret: str,
    ) -> list[dict[str, Any]]:
        """Return ``{"asset", "free"}`` rows from the account's free balances.

        Raises:
            SourceUnavailableError: On auth, network or exchange errors.
        """
        exchange_class = getattr(ccxt_async, self._exchange_id, None)
        if exchange_class is None:
            raise SourceUnavailableError(
                f"Unsupported exchange: {self._exchange_id}"
            )
        exchange = exchange_class(
            {
                "apiKey": api_key,
                "secret": api_secret,
                "enableRateLimit": True,
                "timeout": int(self._timeout * 1000),
            }
        )
        try:
            if self._sandbox:
                exchange.set_sandbox_mode(True)
            balance = await exchange.fetch_balance()
        except ccxt.BaseError as exc:
            raise SourceUnavailableError(
                f"{self._exchange_id} balance error: {exc}"
            ) from exc
        finally:
            await exchange.close()

        free = balance.get("free") or {}
        return [{"asset": asset, "free": amount} for asset, amount in free.items()]


__all__ = [
    "CcxtExchangeBalanceSource",
    "DEFAULT_EXCHANGE_ID",
    "DEFAULT_EXCHANGE_TIMEOUT_SECONDS",
]
