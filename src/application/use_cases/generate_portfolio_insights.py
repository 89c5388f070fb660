"""Use case producing short insights for a synced portfolio."""

from src.domain.constants import REFERENCE_CURRENCY
from src.domain.models import Portfolio, PortfolioInsights
from src.domain.services import build_portfolio_insights
from src.infrastructure.logging.logger import get_app_logger


class GeneratePortfolioInsightsUseCase:
    """Summarize a portfolio and derive concentration and momentum notes."""

    def __init__(
        self,
        currency_code: str = REFERENCE_CURRENCY,
        logger=None,
    ) -> None:
        self._currency_code = currency_code
        self._logger = logger or get_app_logger()

    def execute(self, portfolio: Portfolio | None) -> PortfolioInsights:
        """Return insights for the portfolio.

        Raises:
            InvalidRequestError: When the portfolio is missing or empty.
        """
        insights = build_portfolio_insights(portfolio, self._currency_code)
        self._logger.info(f"Generated {len(insights.insights)} insights")
        return insights


__all__ = ["GeneratePortfolioInsightsUseCase"]
