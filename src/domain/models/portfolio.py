"""Domain models for market quotes and the valued portfolio."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum


@dataclass(frozen=True)
class MarketQuote:
    """Current market figures for a pricing identifier.

    Attributes:
        price: Current price in the reference currency.
        change_24h: 24h change in percent, None when the provider omits it.
        image: Asset logo URL.
    """

    price: Decimal
    change_24h: Decimal | None = None
    image: str | None = None


@dataclass(frozen=True)
class ConsolidatedAsset:
    """One valued row of the portfolio, merged across sources."""

    pricing_id: str
    symbol: str
    amount: Decimal
    current_value: Decimal
    price: Decimal
    change_24h: Decimal
    image: str | None = None


class PortfolioStatus(str, Enum):
    """Outcome marker attached to a portfolio."""

    OK = "ok"
    NO_CONNECTIONS = "no_connections"
    NO_ASSETS = "no_assets"
    MARKET_DATA_UNAVAILABLE = "market_data_unavailable"


@dataclass(frozen=True)
class Portfolio:
    """Consolidated portfolio snapshot.

    Attributes:
        total_value: Sum of asset values that passed the dust filter.
        change_24h_value: total_value minus the reconstructed value 24h ago.
        change_24h_percent: change_24h_value relative to the value 24h ago.
        assets: Assets ranked by current value, highest first.
        status: Outcome marker.
        message: Explanation for non-OK statuses.
    """

    total_value: Decimal
    change_24h_value: Decimal
    change_24h_percent: Decimal
    assets: tuple[ConsolidatedAsset, ...] = field(default_factory=tuple)
    status: PortfolioStatus = PortfolioStatus.OK
    message: str | None = None

    @classmethod
    def empty(
        cls,
        status: PortfolioStatus,
        message: str | None = None,
    ) -> "Portfolio":
        """Return a zero-valued portfolio carrying a status marker."""
        return cls(
            total_value=Decimal("0"),
            change_24h_value=Decimal("0"),
            change_24h_percent=Decimal("0"),
            assets=(),
            status=status,
            message=message,
        )


@dataclass(frozen=True)
class ValuationRecord:
    """Stored daily portfolio valuation."""

    snapshot_date: date
    total_value: Decimal


@dataclass(frozen=True)
class PortfolioInsights:
    """Text summary and short insights for a portfolio."""

    summary: str
    insights: tuple[str, ...]

    def as_text(self) -> str:
        return "\n".join(f"- {insight}" for insight in self.insights)


__all__ = [
    "MarketQuote",
    "ConsolidatedAsset",
    "PortfolioStatus",
    "Portfolio",
    "ValuationRecord",
    "PortfolioInsights",
]
