"""Ports for persisted connections and daily valuations."""

from datetime import date
from decimal import Decimal
from typing import Protocol

from src.domain.models import Connections, ValuationRecord


class ConnectionStorePort(Protocol):
    """Port exposing a user's stored source configuration."""

    def prepare_destination(self) -> None:
        """Ensure the connections table exists."""

    def fetch_connections(self, user_id: str) -> Connections | None:
        """Return the user's connections, None when none are stored."""

    def save_connections(self, user_id: str, connections: Connections) -> None:
        """Create or replace the user's connections."""


class ValuationStorePort(Protocol):
    """Port exposing day-keyed portfolio valuations."""

    def prepare_destination(self) -> None:
        """Ensure the valuations table exists."""

    def upsert(
        self,
        user_id: str,
        snapshot_date: date,
        total_value: Decimal,
    ) -> None:
        """Record the valuation, replacing any value for the same day."""

    def fetch_history(self, user_id: str) -> list[ValuationRecord]:
        """Return the user's valuations ordered by date ascending."""


__all__ = ["ConnectionStorePort", "ValuationStorePort"]
