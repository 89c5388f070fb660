"""CLI to validate the database connection and create portfolio tables.

This adapter is meant for local operations: it instantiates the concrete
database adapter from the infrastructure layer, runs a basic health check,
then ensures the connections and valuation tables exist.
"""

from src.infrastructure.container import (
    build_connection_store,
    build_valuation_store,
)
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.logging.logger import get_app_logger


def main() -> None:
    """Check connectivity and create the portfolio tables."""
    adapter = SqlAlchemyDatabaseEngineAdapter()
    logger = get_app_logger()

    engine = adapter.get_portfolio_engine()
    logger.info(f"Portfolio DB: {engine.url}")
    with engine.connect() as conn:
        conn.exec_driver_sql("SELECT 1")

    build_connection_store(adapter).prepare_destination()
    build_valuation_store(adapter).prepare_destination()
    logger.info("Portfolio tables are ready.")


if __name__ == "__main__":  # pragma: no cover
    main()
