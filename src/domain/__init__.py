"""Domain package for valuation rules and core models."""

from .constants import (
    DEFAULT_SYMBOL_TO_PRICING_ID,
    MIN_ASSET_VALUE,
    NATIVE_COIN_SYMBOL,
)
from .errors import (
    InvalidRequestError,
    MetadataUnavailableError,
    PersistenceError,
    PortfolioError,
    SourceUnavailableError,
    UpstreamUnavailableError,
)
from .models import (
    Balance,
    ConsolidatedAsset,
    Connections,
    MarketQuote,
    Portfolio,
    PortfolioStatus,
    ValuationRecord,
)
from .services import SymbolResolver, compute_portfolio, merge_balances

__all__ = [
    "DEFAULT_SYMBOL_TO_PRICING_ID",
    "MIN_ASSET_VALUE",
    "NATIVE_COIN_SYMBOL",
    "InvalidRequestError",
    "MetadataUnavailableError",
    "PersistenceError",
    "PortfolioError",
    "SourceUnavailableError",
    "UpstreamUnavailableError",
    "Balance",
    "ConsolidatedAsset",
    "Connections",
    "MarketQuote",
    "Portfolio",
    "PortfolioStatus",
    "ValuationRecord",
    "SymbolResolver",
    "compute_portfolio",
    "merge_balances",
]
