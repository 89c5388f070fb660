"""Balance adapters turning source reads into normalized balances.

Both adapters degrade gracefully: any source failure or timeout is logged
and yields an empty list, and a missing configuration yields an empty list
without calling the source.
"""

import asyncio
from decimal import Decimal

from src.application.ports.balance_sources import (
    BalanceAdapterPort,
    ChainBalanceSourcePort,
    ExchangeBalanceSourcePort,
)
from src.domain.constants import DEFAULT_TOKEN_DECIMALS, NATIVE_COIN_SYMBOL
from src.domain.errors import SourceUnavailableError
from src.domain.models import Balance, Connections, TokenBalance, TokenMetadata
from src.infrastructure.logging.logger import get_app_logger
from src.utils.decimal_utils import parse_decimal

DEFAULT_SOURCE_TIMEOUT_SECONDS = 30.0
MAX_TOKEN_DECIMALS = 255


class ExchangeBalanceAdapter(BalanceAdapterPort):
    """Fetch positive free balances from the exchange account."""

    def __init__(
        self,
        source: ExchangeBalanceSourcePort,
        timeout_seconds: float = DEFAULT_SOURCE_TIMEOUT_SECONDS,
        logger=None,
    ) -> None:
        """Initialize the adapter.

        Args:
            source: Exchange balance source.
            timeout_seconds: Bound on the whole exchange call.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._source = source
        self._timeout = timeout_seconds
        self._logger = logger or get_app_logger()

    async def fetch_balances(self, connections: Connections) -> list[Balance]:
        """Return strictly positive free balances, empty on failure.

        Args:
            connections: User connections holding the exchange credentials.

        Returns:
            list[Balance]: Normalized exchange balances.
        """
        if not connections.has_exchange:
            return []
        try:
            rows = await asyncio.wait_for(
                self._source.get_account_balances(
                    connections.exchange_api_key,
                    connections.exchange_api_secret,
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            self._logger.warning(
                f"Exchange balance call timed out after {self._timeout}s"
            )
            return []
        except SourceUnavailableError as exc:
            self._logger.warning(f"Exchange source unavailable: {exc}")
            return []

        balances = []
        for row in rows:
            asset = row.get("asset")
            free = parse_decimal(row.get("free"))
            if not asset or free is None or free <= 0:
                continue
            balances.append(Balance(asset=str(asset).lower(), free=free))
        self._logger.info(f"Fetched {len(balances)} exchange balances")
        return balances


class WalletBalanceAdapter(BalanceAdapterPort):
    """Fetch native and token balances held by a wallet address."""

    def __init__(
        self,
        source: ChainBalanceSourcePort | None,
        timeout_seconds: float = DEFAULT_SOURCE_TIMEOUT_SECONDS,
        native_symbol: str = NATIVE_COIN_SYMBOL,
        logger=None,
    ) -> None:
        """Initialize the adapter.

        Args:
            source: Chain balance source, None when no chain provider is
                configured.
            timeout_seconds: Bound on the whole wallet read.
            native_symbol: Symbol recorded for the native coin.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._source = source
        self._timeout = timeout_seconds
        self._native_symbol = native_symbol
        self._logger = logger or get_app_logger()

    async def fetch_balances(self, connections: Connections) -> list[Balance]:
        """Return the native coin plus resolvable token balances.

        Tokens whose metadata cannot be fetched are dropped individually.

        Args:
            connections: User connections holding the wallet address.

        Returns:
            list[Balance]: Normalized wallet balances, empty on failure.
        """
        if not connections.has_wallet:
            return []
        if self._source is None:
            self._logger.warning(
                "Wallet address configured but no chain provider is set"
            )
            return []
        try:
            balances = await asyncio.wait_for(
                self._read_wallet(connections.wallet_address),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            self._logger.warning(
                f"Wallet balance read timed out after {self._timeout}s"
            )
            return []
        except SourceUnavailableError as exc:
            self._logger.warning(f"Chain source unavailable: {exc}")
            return []
        self._logger.info(f"Fetched {len(balances)} wallet balances")
        return balances

    async def _read_wallet(self, address: str) -> list[Balance]:
        native, tokens = await asyncio.gather(
            self._source.get_native_balance(address),
            self._source.get_token_balances(address),
        )
        balances = [Balance(asset=self._native_symbol, free=native)]

        held = [
            token
            for token in tokens
            if not token.error and token.raw_amount
        ]
        metadatas = await asyncio.gather(
            *(
                self._source.get_token_metadata(token.contract_address)
                for token in held
            ),
            return_exceptions=True,
        )
        for token, metadata in zip(held, metadatas):
            balance = self._to_balance(token, metadata)
            if balance is not None:
                balances.append(balance)
        return balances

    def _to_balance(
        self,
        token: TokenBalance,
        metadata: TokenMetadata | BaseException | None,
    ) -> Balance | None:
        if isinstance(metadata, BaseException):
            if not isinstance(metadata, Exception):
                raise metadata
            self._logger.warning(
                f"Dropping token {token.contract_address}: "
                f"metadata unavailable ({metadata})"
            )
            return None
        if metadata is None or not metadata.symbol:
            self._logger.warning(
                f"Dropping token {token.contract_address}: no symbol"
            )
            return None
        decimals = (
            metadata.decimals
            if metadata.decimals is not None
            else DEFAULT_TOKEN_DECIMALS
        )
        if not 0 <= decimals <= MAX_TOKEN_DECIMALS:
            self._logger.warning(
                f"Dropping token {token.contract_address}: "
                f"unsupported decimals {decimals}"
            )
            return None
        try:
            amount = Decimal(token.raw_amount) / (Decimal(10) ** decimals)
        except ArithmeticError as exc:
            self._logger.warning(
                f"Dropping token {token.contract_address}: "
                f"cannot scale amount ({exc!r})"
            )
            return None
        if amount <= 0:
            return None
        return Balance(asset=metadata.symbol.strip().lower(), free=amount)


__all__ = [
    "ExchangeBalanceAdapter",
    "WalletBalanceAdapter",
    "DEFAULT_SOURCE_TIMEOUT_SECONDS",
]
