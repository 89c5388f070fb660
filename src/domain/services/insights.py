"""Domain services producing rule-based portfolio insights."""

from decimal import Decimal

from src.domain.constants import MAJOR_ASSET_SYMBOLS
from src.domain.errors import InvalidRequestError
from src.domain.models import Portfolio, PortfolioInsights

HUNDRED = Decimal("100")
CONCENTRATION_THRESHOLD = Decimal("50")
SIGNIFICANT_CHANGE_PERCENT = Decimal("5")


def validate_portfolio_payload(portfolio: Portfolio | None) -> Portfolio:
    """Reject portfolios that cannot be analysed.

    Raises:
        InvalidRequestError: When the portfolio is missing, has no assets or
            has no positive total value.
    """
    if portfolio is None or not portfolio.assets:
        raise InvalidRequestError("Portfolio data is required.")
    if portfolio.total_value <= 0:
        raise InvalidRequestError("Portfolio total value must be positive.")
    return portfolio


def summarize_portfolio(portfolio: Portfolio, currency_code: str) -> str:
    """Return a one-line text summary of totals and asset weights."""
    code = currency_code.upper()
    parts = [
        f"- {asset.symbol}: {asset.current_value:.2f} {code} "
        f"({asset.current_value / portfolio.total_value * HUNDRED:.1f}%)"
        for asset in portfolio.assets
    ]
    return (
        f"Total Value: {portfolio.total_value:.2f} {code}. "
        f"24h Change: {portfolio.change_24h_value:.2f} {code} "
        f"({portfolio.change_24h_percent:.2f}%). "
        f"Assets: {', '.join(parts)}"
    )


def build_portfolio_insights(
    portfolio: Portfolio | None,
    currency_code: str,
) -> PortfolioInsights:
    """Build concentration, momentum and mix insights.

    Args:
        portfolio: Valued portfolio, assets ranked by value.
        currency_code: Reference currency code for display.

    Returns:
        PortfolioInsights: Summary line plus two or three insights.
    """
    portfolio = validate_portfolio_payload(portfolio)
    top = portfolio.assets[0]
    top_share = top.current_value / portfolio.total_value * HUNDRED

    insights = []
    if top_share >= CONCENTRATION_THRESHOLD:
        insights.append(
            f"Your portfolio is heavily weighted towards {top.symbol}, "
            f"representing {top_share:.0f}% of your holdings. "
            "Consider diversifying to reduce risk."
        )
    else:
        insights.append(
            f"Your largest position is {top.symbol} at {top_share:.0f}% "
            "of your holdings, which keeps concentration moderate."
        )

    change = portfolio.change_24h_percent
    mover = max(portfolio.assets, key=lambda asset: abs(asset.change_24h))
    if abs(change) >= SIGNIFICANT_CHANGE_PERCENT:
        insights.append(
            f"The significant 24h change of {change:.1f}% is driven mostly "
            f"by {mover.symbol} ({mover.change_24h:+.1f}%)."
        )
    else:
        insights.append(
            f"Your portfolio moved {change:.1f}% over 24h; the largest "
            f"mover was {mover.symbol} ({mover.change_24h:+.1f}%)."
        )

    symbols = {asset.symbol for asset in portfolio.assets}
    majors = symbols.intersection(MAJOR_ASSET_SYMBOLS)
    others = symbols.difference(MAJOR_ASSET_SYMBOLS)
    if majors and others:
        insights.append(
            "You hold a mix of major assets and smaller altcoins, "
            "indicating a balanced risk appetite."
        )
    elif others:
        insights.append(
            "You hold no BTC or ETH; altcoin-only portfolios tend to be "
            "more volatile."
        )

    return PortfolioInsights(
        summary=summarize_portfolio(portfolio, currency_code),
        insights=tuple(insights),
    )


__all__ = [
    "build_portfolio_insights",
    "summarize_portfolio",
    "validate_portfolio_payload",
]
