"""Domain services package."""

from .aggregation import merge_balances
from .insights import (
    build_portfolio_insights,
    summarize_portfolio,
    validate_portfolio_payload,
)
from .symbols import SymbolResolver
from .valuation import compute_portfolio, reconstruct_prior_price

__all__ = [
    "merge_balances",
    "build_portfolio_insights",
    "summarize_portfolio",
    "validate_portfolio_payload",
    "SymbolResolver",
    "compute_portfolio",
    "reconstruct_prior_price",
]
