"""Application ports package."""

from .balance_sources import (
    BalanceAdapterPort,
    ChainBalanceSourcePort,
    ExchangeBalanceSourcePort,
)
from .database import DatabaseEnginePort
from .market_data import (
    ClockPort,
    MarketDataCachePort,
    MarketDataClientPort,
    MarketDataProviderPort,
    RateLimiterPort,
)
from .portfolio_store import ConnectionStorePort, ValuationStorePort

__all__ = [
    "BalanceAdapterPort",
    "ChainBalanceSourcePort",
    "ExchangeBalanceSourcePort",
    "DatabaseEnginePort",
    "ClockPort",
    "MarketDataCachePort",
    "MarketDataClientPort",
    "MarketDataProviderPort",
    "RateLimiterPort",
    "ConnectionStorePort",
    "ValuationStorePort",
]
