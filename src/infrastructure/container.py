"""Composition root for wiring infrastructure adapters.

The market data cache and rate limiter are process-wide: build them once
with :func:`build_market_data_cache` and :func:`build_rate_limiter` and pass
them to every client built afterwards.
"""

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.market_data import (
    ClockPort,
    MarketDataCachePort,
    MarketDataClientPort,
    RateLimiterPort,
)
from src.application.ports.portfolio_store import (
    ConnectionStorePort,
    ValuationStorePort,
)
from src.application.use_cases.balance_sources import (
    ExchangeBalanceAdapter,
    WalletBalanceAdapter,
)
from src.application.use_cases.sync_portfolio import SyncPortfolioUseCase
from src.infrastructure.chain_source import AlchemyChainBalanceSource
from src.infrastructure.clock import SystemClock
from src.infrastructure.coingecko_provider import CoinGeckoMarketDataProvider
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.exchange_source import CcxtExchangeBalanceSource
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.market_data_cache import MarketDataCache
from src.infrastructure.market_data_client import MarketDataClient
from src.infrastructure.portfolio_store import (
    SqlAlchemyConnectionStore,
    SqlAlchemyValuationStore,
)
from src.infrastructure.rate_limiter import RateLimiter
from src.infrastructure.settings import PortfolioSettings

# Slack added on top of the per-request timeout for multi-call reads.
EXCHANGE_TIMEOUT_SLACK_SECONDS = 5.0
WALLET_CALL_ROUNDS = 2


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_connection_store(
    db_port: DatabaseEnginePort | None = None,
) -> ConnectionStorePort:
    """Return the connections store."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyConnectionStore(resolved_db)


def build_valuation_store(
    db_port: DatabaseEnginePort | None = None,
) -> ValuationStorePort:
    """Return the daily valuations store."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyValuationStore(resolved_db)


def build_market_data_cache(
    settings: PortfolioSettings | None = None,
    clock: ClockPort | None = None,
) -> MarketDataCachePort:
    """Return a new market data cache; build once per process."""
    resolved = settings or PortfolioSettings.from_env()
    return MarketDataCache(resolved.cache_seconds, clock=clock)


def build_rate_limiter(
    settings: PortfolioSettings | None = None,
    clock: ClockPort | None = None,
) -> RateLimiterPort:
    """Return a new upstream rate limiter; build once per process."""
    resolved = settings or PortfolioSettings.from_env()
    return RateLimiter(resolved.min_request_interval, clock=clock)


def build_market_data_client(
    cache: MarketDataCachePort,
    rate_limiter: RateLimiterPort,
    settings: PortfolioSettings | None = None,
) -> MarketDataClientPort:
    """Return a market data client sharing the given cache and limiter."""
    resolved = settings or PortfolioSettings.from_env()
    logger = get_app_logger()
    provider = CoinGeckoMarketDataProvider(
        base_url=resolved.coingecko_base_url,
        api_key=resolved.coingecko_api_key,
        timeout_seconds=resolved.market_data_timeout,
        logger=logger,
    )
    return MarketDataClient(
        provider,
        cache,
        rate_limiter,
        vs_currency=resolved.vs_currency,
        logger=logger,
    )


def build_exchange_adapter(
    settings: PortfolioSettings | None = None,
) -> ExchangeBalanceAdapter:
    """Return the exchange balance adapter."""
    resolved = settings or PortfolioSettings.from_env()
    source = CcxtExchangeBalanceSource(
        exchange_id=resolved.exchange_id,
        sandbox=resolved.exchange_sandbox,
        timeout_seconds=resolved.exchange_timeout,
    )
    return ExchangeBalanceAdapter(
        source,
        timeout_seconds=resolved.exchange_timeout
        + EXCHANGE_TIMEOUT_SLACK_SECONDS,
        logger=get_app_logger(),
    )


def build_wallet_adapter(
    settings: PortfolioSettings | None = None,
) -> WalletBalanceAdapter:
    """Return the wallet balance adapter.

    Without an Alchemy key the adapter has no source and yields no balances.
    """
    resolved = settings or PortfolioSettings.from_env()
    logger = get_app_logger()
    source = None
    if resolved.alchemy_api_key:
        source = AlchemyChainBalanceSource(
            api_key=resolved.alchemy_api_key,
            network=resolved.alchemy_network,
            timeout_seconds=resolved.chain_timeout,
        )
    else:
        logger.warning("ALCHEMY_API_KEY is not set; wallets are not synced")
    return WalletBalanceAdapter(
        source,
        timeout_seconds=resolved.chain_timeout * WALLET_CALL_ROUNDS,
        logger=logger,
    )


def build_sync_portfolio_use_case(
    market_data_client: MarketDataClientPort,
    settings: PortfolioSettings | None = None,
    db_port: DatabaseEnginePort | None = None,
) -> SyncPortfolioUseCase:
    """Return the portfolio sync wired to the shared market data client."""
    resolved = settings or PortfolioSettings.from_env()
    resolved_db = db_port or build_database_adapter()
    return SyncPortfolioUseCase(
        connection_store=build_connection_store(resolved_db),
        valuation_store=build_valuation_store(resolved_db),
        balance_adapters=[
            build_exchange_adapter(resolved),
            build_wallet_adapter(resolved),
        ],
        market_data_client=market_data_client,
        clock=SystemClock(),
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_connection_store",
    "build_valuation_store",
    "build_market_data_cache",
    "build_rate_limiter",
    "build_market_data_client",
    "build_exchange_adapter",
    "build_wallet_adapter",
    "build_sync_portfolio_use_case",
]
