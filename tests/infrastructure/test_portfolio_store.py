"""Tests for the SQLAlchemy connection and valuation stores."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from src.domain.errors import PersistenceError
from src.domain.models import Connections
from src.infrastructure.portfolio_store import (
    SqlAlchemyConnectionStore,
    SqlAlchemyValuationStore,
)


class _FakeDbPort:
    def __init__(self, engine) -> None:
        self._engine = engine

    def get_portfolio_engine(self):
        return self._engine


@pytest.fixture
def db_port():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    port = _FakeDbPort(engine)
    SqlAlchemyConnectionStore(port).prepare_destination()
    SqlAlchemyValuationStore(port).prepare_destination()
    return port


def test_connections_round_trip_and_replace(db_port) -> None:
    store = SqlAlchemyConnectionStore(db_port)

    assert store.fetch_connections("user-1") is None

    store.save_connections(
        "user-1",
        Connections("key", "secret", "0xabc"),
    )
    store.save_connections("user-1", Connections(wallet_address="0xdef"))

    assert store.fetch_connections("user-1") == Connections(
        wallet_address="0xdef"
    )


def test_empty_strings_are_read_as_missing(db_port) -> None:
    store = SqlAlchemyConnectionStore(db_port)
    store.save_connections("user-1", Connections("", "", "0xabc"))

    connections = store.fetch_connections("user-1")

    assert connections.has_exchange is False
    assert connections.wallet_address == "0xabc"


def test_upsert_keeps_one_valuation_per_day(db_port) -> None:
    store = SqlAlchemyValuationStore(db_port)

    store.upsert("user-1", date(2024, 1, 2), Decimal("1500.50"))
    store.upsert("user-1", date(2024, 1, 1), Decimal("1000"))
    store.upsert("user-1", date(2024, 1, 2), Decimal("1550"))
    store.upsert("user-2", date(2024, 1, 2), Decimal("5"))

    history = store.fetch_history("user-1")

    assert [record.snapshot_date for record in history] == [
        date(2024, 1, 1),
        date(2024, 1, 2),
    ]
    assert [record.total_value for record in history] == [
        Decimal("1000"),
        Decimal("1550"),
    ]


def test_store_errors_map_to_persistence_error() -> None:
    engine = MagicMock()
    engine.connect.side_effect = OperationalError("select", {}, Exception())
    engine.begin.side_effect = OperationalError("insert", {}, Exception())
    port = _FakeDbPort(engine)

    with pytest.raises(PersistenceError):
        SqlAlchemyConnectionStore(port).fetch_connections("user-1")
    with pytest.raises(PersistenceError):
        SqlAlchemyValuationStore(port).upsert(
            "user-1",
            date(2024, 1, 1),
            Decimal("1"),
        )
    with pytest.raises(PersistenceError):
        SqlAlchemyValuationStore(port).fetch_history("user-1")
