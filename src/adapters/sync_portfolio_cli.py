"""CLI adapter to synchronize and print a user's portfolio.

This module wires the SyncPortfolioUseCase to the concrete adapters and
prints the ranked assets for PORTFOLIO_USER_ID.
"""

import os

from src.domain.models import Portfolio, PortfolioStatus
from src.infrastructure.container import (
    build_market_data_cache,
    build_market_data_client,
    build_rate_limiter,
    build_sync_portfolio_use_case,
)
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import PortfolioSettings


def _format_portfolio(portfolio: Portfolio, currency_code: str) -> list[str]:
    """Render the portfolio as printable lines.

    Args:
        portfolio: Portfolio returned by the sync.
        currency_code: Reference currency code.

    Returns:
        list[str]: Header line followed by one line per asset.
    """
    code = currency_code.upper()
    lines = [
        f"Total: {portfolio.total_value:,.2f} {code} "
        f"(24h: {portfolio.change_24h_value:+,.2f} {code}, "
        f"{portfolio.change_24h_percent:+.2f}%)"
    ]
    if portfolio.status is not PortfolioStatus.OK:
        lines.append(f"Status: {portfolio.status.value} - {portfolio.message}")
    for asset in portfolio.assets:
        lines.append(
            f"{asset.symbol:<8} {asset.amount:>18.8f} "
            f"{asset.current_value:>14,.2f} {code} "
            f"({asset.change_24h:+.2f}%)"
        )
    return lines


def main() -> None:
    """Run the portfolio sync for PORTFOLIO_USER_ID."""
    logger = get_app_logger()
    user_id = os.getenv("PORTFOLIO_USER_ID", "").strip()
    if not user_id:
        logger.warning("PORTFOLIO_USER_ID is required to sync a portfolio.")
        return

    settings = PortfolioSettings.from_env()
    client = build_market_data_client(
        build_market_data_cache(settings),
        build_rate_limiter(settings),
        settings,
    )
    use_case = build_sync_portfolio_use_case(client, settings)

    portfolio = use_case.execute(user_id)

    for line in _format_portfolio(portfolio, settings.vs_currency):
        print(line)


if __name__ == "__main__":  # pragma: no cover
    main()
