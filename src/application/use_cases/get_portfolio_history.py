"""Use case to read a user's stored daily valuations."""

from src.application.ports.portfolio_store import ValuationStorePort
from src.domain.errors import InvalidRequestError
from src.domain.models import ValuationRecord
from src.infrastructure.logging.logger import get_app_logger


class GetPortfolioHistoryUseCase:
    """Fetch daily valuations recorded by portfolio syncs."""

    def __init__(
        self,
        valuation_store: ValuationStorePort,
        logger=None,
    ) -> None:
        """Initialize the use case with its required dependencies."""
        self._valuation_store = valuation_store
        self._logger = logger or get_app_logger()

    def execute(self, user_id: str) -> list[ValuationRecord]:
        """Return the user's valuations ordered by date ascending.

        Raises:
            InvalidRequestError: When user_id is blank.
            PersistenceError: When the store read fails.
        """
        if not user_id or not user_id.strip():
            raise InvalidRequestError("A non-empty user id is required.")
        records = self._valuation_store.fetch_history(user_id.strip())
        self._logger.info(
            f"Loaded {len(records)} valuation records for {user_id}"
        )
        return sorted(records, key=lambda record: record.snapshot_date)


__all__ = ["GetPortfolioHistoryUseCase"]
