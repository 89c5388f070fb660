"""Use case synchronizing a user's balances into a valued portfolio.

The sync:

* reads the user's stored connections;
* fetches exchange and wallet balances concurrently, each degrading to an
  empty list on failure;
* merges balances per symbol and resolves pricing identifiers;
* values the holdings with cached, rate-limited quotes;
* records the day's total valuation when it is positive.

Source, market data and persistence failures never escape: they turn into a
zero-valued portfolio with a status marker, or are logged and skipped.
"""

import asyncio
from decimal import Decimal

from src.application.ports.balance_sources import BalanceAdapterPort
from src.application.ports.market_data import ClockPort, MarketDataClientPort
from src.application.ports.portfolio_store import (
    ConnectionStorePort,
    ValuationStorePort,
)
from src.domain.constants import (
    MARKET_DATA_UNAVAILABLE_MESSAGE,
    MIN_ASSET_VALUE,
    NO_ASSETS_MESSAGE,
    NO_CONNECTIONS_MESSAGE,
)
from src.domain.errors import (
    InvalidRequestError,
    PersistenceError,
    UpstreamUnavailableError,
)
from src.domain.models import Balance, Connections, Portfolio, PortfolioStatus
from src.domain.services import SymbolResolver, compute_portfolio, merge_balances
from src.infrastructure.clock import SystemClock
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger


class SyncPortfolioUseCase:
    """Aggregate, value and rank a user's holdings across sources."""

    def __init__(
        self,
        connection_store: ConnectionStorePort,
        valuation_store: ValuationStorePort,
        balance_adapters: list[BalanceAdapterPort],
        market_data_client: MarketDataClientPort,
        symbol_resolver: SymbolResolver | None = None,
        clock: ClockPort | None = None,
        min_asset_value: Decimal = MIN_ASSET_VALUE,
        logger=None,
        usage_logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            connection_store: Store holding each user's source configuration.
            valuation_store: Store receiving the day's total valuation.
            balance_adapters: Degrade-gracefully balance fetchers, run
                concurrently.
            market_data_client: Shared cached, rate-limited quote client.
            symbol_resolver: Optional resolver, defaults to the built-in table.
            clock: Optional clock used for the valuation date.
            min_asset_value: Dust threshold in the reference currency.
            logger: Optional logger compatible with logging.Logger-like API.
            usage_logger: Optional logger recording which user synced.
        """
        self._connection_store = connection_store
        self._valuation_store = valuation_store
        self._balance_adapters = list(balance_adapters)
        self._market_data_client = market_data_client
        self._resolver = symbol_resolver or SymbolResolver()
        self._clock = clock or SystemClock()
        self._min_asset_value = min_asset_value
        self._logger = logger or get_app_logger()
        self._usage_logger = usage_logger or get_usage_logger()

    def execute(self, user_id: str) -> Portfolio:
        """Return the user's portfolio, blocking until the sync completes.

        Args:
            user_id: Identifier of the user whose connections are synced.

        Returns:
            Portfolio: Valued portfolio or a zero-valued portfolio carrying a
            status marker.

        Raises:
            InvalidRequestError: When user_id is blank.
        """
        return asyncio.run(self.execute_async(user_id))

    async def execute_async(self, user_id: str) -> Portfolio:
        """Async variant of :meth:`execute` for callers inside a loop."""
        user_id = self._validate_user_id(user_id)
        self._usage_logger.info(f"Portfolio sync requested by {user_id}")

        connections = await self._load_connections(user_id)
        if connections is None:
            self._logger.info(f"No connections found for user {user_id}")
            return Portfolio.empty(
                PortfolioStatus.NO_CONNECTIONS,
                NO_CONNECTIONS_MESSAGE,
            )

        balance_lists = await self._fetch_all_balances(connections)
        holdings = merge_balances(balance_lists)
        pricing_ids = self._resolver.resolve_all(
            symbol for symbol, amount in holdings.items() if amount > 0
        )
        if not pricing_ids:
            self._logger.info(f"No assets found for user {user_id}")
            return Portfolio.empty(PortfolioStatus.NO_ASSETS, NO_ASSETS_MESSAGE)

        try:
            quotes = await self._market_data_client.get_quotes(pricing_ids)
        except UpstreamUnavailableError as exc:
            self._logger.error(f"Failed to fetch market data: {exc}")
            return Portfolio.empty(
                PortfolioStatus.MARKET_DATA_UNAVAILABLE,
                MARKET_DATA_UNAVAILABLE_MESSAGE,
            )

        portfolio = compute_portfolio(
            holdings,
            quotes,
            self._resolver,
            min_asset_value=self._min_asset_value,
            logger=self._logger,
        )
        self._logger.info(
            f"Portfolio for {user_id}: total={portfolio.total_value:.2f}, "
            f"assets={len(portfolio.assets)}, "
            f"change24h={portfolio.change_24h_percent:.2f}%"
        )
        if portfolio.total_value > 0:
            await self._record_valuation(user_id, portfolio.total_value)
        return portfolio

    @staticmethod
    def _validate_user_id(user_id: str) -> str:
        if not isinstance(user_id, str) or not user_id.strip():
            raise InvalidRequestError("A non-empty user id is required.")
        return user_id.strip()

    async def _load_connections(self, user_id: str) -> Connections | None:
        try:
            return await asyncio.to_thread(
                self._connection_store.fetch_connections,
                user_id,
            )
        except PersistenceError as exc:
            self._logger.error(
                f"Connection lookup failed for {user_id}: {exc}"
            )
            return None

    async def _fetch_all_balances(
        self,
        connections: Connections,
    ) -> list[list[Balance]]:
        results = await asyncio.gather(
            *(
                adapter.fetch_balances(connections)
                for adapter in self._balance_adapters
            ),
            return_exceptions=True,
        )
        balance_lists: list[list[Balance]] = []
        for adapter, result in zip(self._balance_adapters, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                self._logger.error(
                    f"{type(adapter).__name__} failed unexpectedly: {result!r}"
                )
                balance_lists.append([])
                continue
            balance_lists.append(result)
        return balance_lists

    async def _record_valuation(self, user_id: str, total_value: Decimal) -> None:
        snapshot_date = self._clock.today()
        try:
            await asyncio.to_thread(
                self._valuation_store.upsert,
                user_id,
                snapshot_date,
                total_value,
            )
        except PersistenceError as exc:
            self._logger.error(
                f"Failed to record valuation for {user_id} "
                f"on {snapshot_date}: {exc}"
            )


__all__ = ["SyncPortfolioUseCase"]
