"""Domain services valuing aggregated holdings."""

from collections.abc import Mapping
from decimal import Decimal
from logging import Logger

from src.domain.constants import MIN_ASSET_VALUE
from src.domain.models import (
    ConsolidatedAsset,
    MarketQuote,
    Portfolio,
    PortfolioStatus,
)
from src.domain.services.symbols import SymbolResolver

HUNDRED = Decimal("100")


def reconstruct_prior_price(
    price: Decimal,
    change_24h: Decimal | None,
    logger: Logger | None = None,
) -> Decimal:
    """Return the price 24h ago implied by the current price and change.

    A missing change counts as no change. A change of -100% or lower cannot
    be inverted and also counts as no change.

    Args:
        price: Current price.
        change_24h: 24h change in percent.
        logger: Optional logger used for warnings.

    Returns:
        Decimal: Reconstructed price 24h ago.
    """
    change = change_24h if change_24h is not None else Decimal("0")
    factor = Decimal("1") + change / HUNDRED
    if factor <= 0:
        if logger is not None:
            logger.warning(
                f"Cannot reconstruct prior price from change {change}%"
            )
        return price
    return price / factor


def compute_portfolio(
    holdings: Mapping[str, Decimal],
    quotes: Mapping[str, MarketQuote],
    resolver: SymbolResolver,
    *,
    min_asset_value: Decimal = MIN_ASSET_VALUE,
    logger: Logger | None = None,
) -> Portfolio:
    """Value holdings against quotes and rank the surviving assets.

    Symbols without a quote are skipped. Assets worth less than
    ``min_asset_value`` are excluded from both the list and the totals.
    Ties in value keep insertion order; callers should not rely on it.

    Args:
        holdings: Amount per lowercase symbol.
        quotes: Market quote per pricing identifier.
        resolver: Symbol to pricing identifier resolver.
        min_asset_value: Dust threshold in the reference currency.
        logger: Optional logger used for warnings.

    Returns:
        Portfolio: Totals, 24h change and ranked assets.
    """
    total_value = Decimal("0")
    total_value_24h_ago = Decimal("0")
    consolidated: dict[str, ConsolidatedAsset] = {}

    for symbol, amount in holdings.items():
        pricing_id = resolver.resolve(symbol)
        quote = quotes.get(pricing_id)
        if quote is None:
            continue
        current_value = amount * quote.price
        if current_value < min_asset_value:
            continue

        total_value += current_value
        prior_price = reconstruct_prior_price(
            quote.price,
            quote.change_24h,
            logger,
        )
        total_value_24h_ago += amount * prior_price

        existing = consolidated.get(pricing_id)
        if existing is not None:
            # Symbol variants (eth/weth) share one row labelled by the first.
            amount += existing.amount
            current_value += existing.current_value
        consolidated[pricing_id] = ConsolidatedAsset(
            pricing_id=pricing_id,
            symbol=existing.symbol if existing else symbol.upper(),
            amount=amount,
            current_value=current_value,
            price=quote.price,
            change_24h=(
                quote.change_24h
                if quote.change_24h is not None
                else Decimal("0")
            ),
            image=quote.image,
        )

    change_24h_value = total_value - total_value_24h_ago
    change_24h_percent = (
        change_24h_value / total_value_24h_ago * HUNDRED
        if total_value_24h_ago > 0
        else Decimal("0")
    )
    assets = sorted(
        consolidated.values(),
        key=lambda asset: asset.current_value,
        reverse=True,
    )
    return Portfolio(
        total_value=total_value,
        change_24h_value=change_24h_value,
        change_24h_percent=change_24h_percent,
        assets=tuple(assets),
        status=PortfolioStatus.OK,
    )


__all__ = ["compute_portfolio", "reconstruct_prior_price"]
