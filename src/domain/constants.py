"""Domain constants for portfolio valuation."""

from decimal import Decimal
from types import MappingProxyType

MIN_ASSET_VALUE = Decimal("1.00")

NATIVE_COIN_SYMBOL = "eth"
NATIVE_COIN_DECIMALS = 18
DEFAULT_TOKEN_DECIMALS = 18

REFERENCE_CURRENCY = "usd"

DEFAULT_SYMBOL_TO_PRICING_ID = MappingProxyType(
    {
        "btc": "bitcoin",
        "eth": "ethereum",
        "weth": "ethereum",
        "bnb": "binancecoin",
        "usdc": "usd-coin",
        "usdt": "tether",
        "link": "chainlink",
        "matic": "matic-network",
        "dogs": "the-doge-nft",
        "quick": "quickswap",
        "rune": "thorchain",
        "slp": "smooth-love-potion",
    }
)

MAJOR_ASSET_SYMBOLS = ("BTC", "ETH")

NO_CONNECTIONS_MESSAGE = (
    "No wallet or exchange connections found. "
    "Please add your connections in Settings."
)
NO_ASSETS_MESSAGE = "No assets found in your connected wallets or exchanges."
MARKET_DATA_UNAVAILABLE_MESSAGE = "Market data temporarily unavailable"


__all__ = [
    "MIN_ASSET_VALUE",
    "NATIVE_COIN_SYMBOL",
    "NATIVE_COIN_DECIMALS",
    "DEFAULT_TOKEN_DECIMALS",
    "REFERENCE_CURRENCY",
    "DEFAULT_SYMBOL_TO_PRICING_ID",
    "MAJOR_ASSET_SYMBOLS",
    "NO_CONNECTIONS_MESSAGE",
    "NO_ASSETS_MESSAGE",
    "MARKET_DATA_UNAVAILABLE_MESSAGE",
]
