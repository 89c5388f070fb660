"""Application use cases package."""

from .balance_sources import ExchangeBalanceAdapter, WalletBalanceAdapter
from .generate_portfolio_insights import GeneratePortfolioInsightsUseCase
from .get_market_details import (
    GetCoinDetailsUseCase,
    GetHistoricalSeriesUseCase,
)
from .get_portfolio_history import GetPortfolioHistoryUseCase
from .sync_portfolio import SyncPortfolioUseCase

__all__ = [
    "ExchangeBalanceAdapter",
    "WalletBalanceAdapter",
    "GeneratePortfolioInsightsUseCase",
    "GetCoinDetailsUseCase",
    "GetHistoricalSeriesUseCase",
    "GetPortfolioHistoryUseCase",
    "SyncPortfolioUseCase",
]
