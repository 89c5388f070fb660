"""SQLAlchemy-backed stores for connections and daily valuations."""

from datetime import date
from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.portfolio_store import (
    ConnectionStorePort,
    ValuationStorePort,
)
from src.domain.errors import PersistenceError
from src.domain.models import Connections, ValuationRecord
from src.utils.decimal_utils import coerce_decimal


CREATE_CONNECTIONS_SQL = """
CREATE TABLE IF NOT EXISTS connections (
    user_id TEXT PRIMARY KEY,
    exchange_api_key TEXT,
    exchange_api_secret TEXT,
    wallet_address TEXT
)
"""

SELECT_CONNECTIONS_SQL = text(
    """
    SELECT exchange_api_key, exchange_api_secret, wallet_address
    FROM connections
    WHERE user_id = :user_id
    """
)

UPSERT_CONNECTIONS_SQL = text(
    """
    INSERT INTO connections (
        user_id,
        exchange_api_key,
        exchange_api_secret,
        wallet_address
    )
    VALUES (
        :user_id,
        :exchange_api_key,
        :exchange_api_secret,
        :wallet_address
    )
    ON CONFLICT (user_id) DO UPDATE SET
        exchange_api_key = excluded.exchange_api_key,
        exchange_api_secret = excluded.exchange_api_secret,
        wallet_address = excluded.wallet_address
    """
)

CREATE_SNAPSHOTS_SQL = """
CREATE TABLE IF NOT EXISTS portfolio_snapshots (
    user_id TEXT NOT NULL,
    snapshot_date DATE NOT NULL,
    total_value NUMERIC NOT NULL,
    PRIMARY KEY (user_id, snapshot_date)
)
"""

UPSERT_SNAPSHOT_SQL = text(
    """
    INSERT INTO portfolio_snapshots (user_id, snapshot_date, total_value)
    VALUES (:user_id, :snapshot_date, :total_value)
    ON CONFLICT (user_id, snapshot_date) DO UPDATE SET
        total_value = excluded.total_value
    """
)

SELECT_SNAPSHOTS_SQL = text(
    """
    SELECT snapshot_date, total_value
    FROM portfolio_snapshots
    WHERE user_id = :user_id
    ORDER BY snapshot_date ASC
    """
)


def _coerce_date(value) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


class SqlAlchemyConnectionStore(ConnectionStorePort):
    """Connection store backed by SQLAlchemy."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the store.

        Args:
            db_port: Port providing access to the portfolio engine.
        """
        self._db_port = db_port

    def prepare_destination(self) -> None:
        """Ensure the connections table exists."""
        engine = self._db_port.get_portfolio_engine()
        with engine.begin() as conn:
            conn.exec_driver_sql(CREATE_CONNECTIONS_SQL)

    def fetch_connections(self, user_id: str) -> Connections | None:
        """Return the user's stored connections.

        Raises:
            PersistenceError: When the database read fails.
        """
        engine = self._db_port.get_portfolio_engine()
        try:
            with engine.connect() as conn:
                row = conn.execute(
                    SELECT_CONNECTIONS_SQL,
                    {"user_id": user_id},
                ).first()
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Failed to read connections: {exc.__class__.__name__}"
            ) from exc
        if row is None:
            return None
        return Connections(
            exchange_api_key=row.exchange_api_key or None,
            exchange_api_secret=row.exchange_api_secret or None,
            wallet_address=row.wallet_address or None,
        )

    def save_connections(self, user_id: str, connections: Connections) -> None:
        """Create or replace the user's connections.

        Raises:
            PersistenceError: When the database write fails.
        """
        engine = self._db_port.get_portfolio_engine()
        params = {
            "user_id": user_id,
            "exchange_api_key": connections.exchange_api_key,
            "exchange_api_secret": connections.exchange_api_secret,
            "wallet_address": connections.wallet_address,
        }
        try:
            with engine.begin() as conn:
                conn.execute(UPSERT_CONNECTIONS_SQL, params)
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Failed to save connections: {exc.__class__.__name__}"
            ) from exc


class SqlAlchemyValuationStore(ValuationStorePort):
    """Daily valuation store backed by SQLAlchemy."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the store.

        Args:
            db_port: Port providing access to the portfolio engine.
        """
        self._db_port = db_port

    def prepare_destination(self) -> None:
        """Ensure the portfolio_snapshots table exists."""
        engine = self._db_port.get_portfolio_engine()
        with engine.begin() as conn:
            conn.exec_driver_sql(CREATE_SNAPSHOTS_SQL)

    def upsert(
        self,
        user_id: str,
        snapshot_date: date,
        total_value: Decimal,
    ) -> None:
        """Record one valuation per user and day.

        Raises:
            PersistenceError: When the database write fails.
        """
        engine = self._db_port.get_portfolio_engine()
        params = {
            "user_id": user_id,
            "snapshot_date": snapshot_date.isoformat(),
            "total_value": str(total_value),
        }
        try:
            with engine.begin() as conn:
                conn.execute(UPSERT_SNAPSHOT_SQL, params)
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Failed to record valuation: {exc.__class__.__name__}"
            ) from exc

    def fetch_history(self, user_id: str) -> list[ValuationRecord]:
        """Return the user's valuations ordered by date.

        Raises:
            PersistenceError: When the database read fails.
        """
        engine = self._db_port.get_portfolio_engine()
        try:
            with engine.connect() as conn:
                rows = conn.execute(
                    SELECT_SNAPSHOTS_SQL,
                    {"user_id": user_id},
                ).all()
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Failed to read valuations: {exc.__class__.__name__}"
            ) from exc
        return [
            ValuationRecord(
                snapshot_date=_coerce_date(row.snapshot_date),
                total_value=coerce_decimal(row.total_value),
            )
            for row in rows
        ]


__all__ = [
    "SqlAlchemyConnectionStore",
    "SqlAlchemyValuationStore",
    "CREATE_CONNECTIONS_SQL",
    "CREATE_SNAPSHOTS_SQL",
    "UPSERT_SNAPSHOT_SQL",
    "UPSERT_CONNECTIONS_SQL",
]
