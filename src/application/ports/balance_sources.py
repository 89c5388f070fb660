"""Ports for the exchange and chain balance sources."""

from decimal import Decimal
from typing import Any, Protocol

from src.domain.models import (
    Balance,
    Connections,
    TokenBalance,
    TokenMetadata,
)


class ExchangeBalanceSourcePort(Protocol):
    """Port exposing an exchange account balance call."""

    async def get_account_balances(
        self,
        api_key: str,
        api_secret: str,
    ) -> list[dict[str, Any]]:
        """Return raw ``{"asset", "free"}`` rows for the account."""


class ChainBalanceSourcePort(Protocol):
    """Port exposing on-chain wallet reads."""

    async def get_native_balance(self, address: str) -> Decimal:
        """Return the native coin balance in whole coins."""

    async def get_token_balances(self, address: str) -> list[TokenBalance]:
        """Return raw token balances held by the address."""

    async def get_token_metadata(
        self,
        contract_address: str,
    ) -> TokenMetadata | None:
        """Return metadata for a token contract, None when unknown."""


class BalanceAdapterPort(Protocol):
    """Port for a degrade-gracefully balance fetcher used by the sync."""

    async def fetch_balances(self, connections: Connections) -> list[Balance]:
        """Return normalized balances, empty on any failure."""


__all__ = [
    "ExchangeBalanceSourcePort",
    "ChainBalanceSourcePort",
    "BalanceAdapterPort",
]
