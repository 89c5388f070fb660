"""Domain models for balances collected from sources."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Balance:
    """Free amount of one asset reported by a source.

    Attributes:
        asset: Lowercase asset symbol.
        free: Non-negative free amount.
    """

    asset: str
    free: Decimal


@dataclass(frozen=True)
class TokenBalance:
    """Raw ERC-20 balance as reported by the chain source."""

    contract_address: str
    raw_amount: int | None
    error: str | None = None


@dataclass(frozen=True)
class TokenMetadata:
    """Token metadata needed to scale raw balances."""

    symbol: str | None
    decimals: int | None = None


@dataclass(frozen=True)
class Connections:
    """Stored source configuration for a user."""

    exchange_api_key: str | None = None
    exchange_api_secret: str | None = None
    wallet_address: str | None = None

    @property
    def has_exchange(self) -> bool:
        return bool(self.exchange_api_key and self.exchange_api_secret)

    @property
    def has_wallet(self) -> bool:
        return bool(self.wallet_address)


__all__ = ["Balance", "TokenBalance", "TokenMetadata", "Connections"]
