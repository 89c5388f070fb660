"""Domain models package."""

from .balances import Balance, Connections, TokenBalance, TokenMetadata
from .portfolio import (
    ConsolidatedAsset,
    MarketQuote,
    Portfolio,
    PortfolioInsights,
    PortfolioStatus,
    ValuationRecord,
)

__all__ = [
    "Balance",
    "Connections",
    "TokenBalance",
    "TokenMetadata",
    "ConsolidatedAsset",
    "MarketQuote",
    "Portfolio",
    "PortfolioInsights",
    "PortfolioStatus",
    "ValuationRecord",
]
