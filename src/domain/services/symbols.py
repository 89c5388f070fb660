"""Mapping of trading symbols to market data pricing identifiers."""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from src.domain.constants import DEFAULT_SYMBOL_TO_PRICING_ID


class SymbolResolver:
    """Resolve asset symbols to pricing identifiers.

    Unmapped symbols are their own identifier.
    """

    def __init__(
        self,
        mapping: Mapping[str, str] | None = None,
    ) -> None:
        source = DEFAULT_SYMBOL_TO_PRICING_ID if mapping is None else mapping
        self._mapping = MappingProxyType(
            {symbol.lower(): pricing_id for symbol, pricing_id in source.items()}
        )

    @property
    def mapping(self) -> Mapping[str, str]:
        return self._mapping

    def resolve(self, symbol: str) -> str:
        """Return the pricing identifier for a symbol.

        Args:
            symbol: Asset symbol in any case.

        Returns:
            str: Mapped identifier, or the lowercase symbol itself.
        """
        normalized = symbol.strip().lower()
        return self._mapping.get(normalized, normalized)

    def resolve_all(self, symbols: Iterable[str]) -> set[str]:
        """Return the deduplicated identifiers for the given symbols."""
        return {
            pricing_id
            for pricing_id in (self.resolve(symbol) for symbol in symbols)
            if pricing_id
        }


__all__ = ["SymbolResolver"]
