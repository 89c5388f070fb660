"""Domain services merging balances across sources."""

from collections.abc import Iterable
from decimal import Decimal

from src.domain.models import Balance
from src.utils.decimal_utils import parse_decimal


def merge_balances(
    sources: Iterable[Iterable[Balance]],
) -> dict[str, Decimal]:
    """Sum free amounts per lowercase symbol across every source.

    Non-numeric amounts are skipped rather than counted as zero. The result
    does not depend on the order of sources.

    Args:
        sources: Balance lists, one per source.

    Returns:
        dict[str, Decimal]: Cumulative amount per lowercase symbol.
    """
    holdings: dict[str, Decimal] = {}
    for balances in sources:
        for balance in balances:
            amount = parse_decimal(balance.free)
            if amount is None:
                continue
            symbol = balance.asset.strip().lower()
            if not symbol:
                continue
            holdings[symbol] = holdings.get(symbol, Decimal("0")) + amount
    return holdings


__all__ = ["merge_balances"]
