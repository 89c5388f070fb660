"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os
from typing import Optional

import dotenv

from src.domain.constants import REFERENCE_CURRENCY
from src.infrastructure.chain_source import (
    DEFAULT_CHAIN_TIMEOUT_SECONDS,
    DEFAULT_NETWORK,
)
from src.infrastructure.coingecko_provider import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
)
from src.infrastructure.exchange_source import (
    DEFAULT_EXCHANGE_ID,
    DEFAULT_EXCHANGE_TIMEOUT_SECONDS,
)
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.market_data_cache import DEFAULT_CACHE_SECONDS
from src.infrastructure.rate_limiter import DEFAULT_MIN_INTERVAL_SECONDS

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class PortfolioSettings:
    """Settings for the balance sources and market data client.

    Attributes:
        alchemy_api_key: Alchemy key; without it wallets are not queried.
        alchemy_network: Alchemy network slug.
        coingecko_base_url: CoinGecko API root.
        coingecko_api_key: Optional CoinGecko demo key.
        vs_currency: Reference currency for valuations.
        market_data_timeout: Upstream request timeout in seconds.
        cache_seconds: Market data cache lifetime in seconds.
        min_request_interval: Minimum spacing of upstream requests.
        exchange_id: ccxt exchange identifier.
        exchange_sandbox: Whether the exchange testnet is used.
        exchange_timeout: Exchange call bound in seconds.
        chain_timeout: Chain call bound in seconds.
    """

    alchemy_api_key: Optional[str] = None
    alchemy_network: str = DEFAULT_NETWORK
    coingecko_base_url: str = DEFAULT_BASE_URL
    coingecko_api_key: Optional[str] = None
    vs_currency: str = REFERENCE_CURRENCY
    market_data_timeout: float = DEFAULT_TIMEOUT_SECONDS
    cache_seconds: float = DEFAULT_CACHE_SECONDS
    min_request_interval: float = DEFAULT_MIN_INTERVAL_SECONDS
    exchange_id: str = DEFAULT_EXCHANGE_ID
    exchange_sandbox: bool = True
    exchange_timeout: float = DEFAULT_EXCHANGE_TIMEOUT_SECONDS
    chain_timeout: float = DEFAULT_CHAIN_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> "PortfolioSettings":
        """Build settings from environment variables.

        Returns:
            PortfolioSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        return cls(
            alchemy_api_key=os.getenv("ALCHEMY_API_KEY") or None,
            alchemy_network=os.getenv("ALCHEMY_NETWORK", DEFAULT_NETWORK)
            .strip()
            .lower(),
            coingecko_base_url=os.getenv(
                "COINGECKO_BASE_URL",
                DEFAULT_BASE_URL,
            ).strip(),
            coingecko_api_key=os.getenv("COINGECKO_API_KEY") or None,
            vs_currency=os.getenv("PORTFOLIO_VS_CURRENCY", REFERENCE_CURRENCY)
            .strip()
            .lower(),
            market_data_timeout=cls._read_float(
                "MARKET_DATA_TIMEOUT_SECONDS",
                DEFAULT_TIMEOUT_SECONDS,
                logger,
            ),
            cache_seconds=cls._read_float(
                "MARKET_DATA_CACHE_SECONDS",
                DEFAULT_CACHE_SECONDS,
                logger,
            ),
            min_request_interval=cls._read_float(
                "MARKET_DATA_MIN_INTERVAL_SECONDS",
                DEFAULT_MIN_INTERVAL_SECONDS,
                logger,
            ),
            exchange_id=os.getenv("EXCHANGE_ID", DEFAULT_EXCHANGE_ID)
            .strip()
            .lower(),
            exchange_sandbox=cls._read_bool("EXCHANGE_SANDBOX", True, logger),
            exchange_timeout=cls._read_float(
                "EXCHANGE_TIMEOUT_SECONDS",
                DEFAULT_EXCHANGE_TIMEOUT_SECONDS,
                logger,
            ),
            chain_timeout=cls._read_float(
                "CHAIN_TIMEOUT_SECONDS",
                DEFAULT_CHAIN_TIMEOUT_SECONDS,
                logger,
            ),
        )

    @staticmethod
    def _read_float(name: str, default: float, logger) -> float:
        """Read a positive float, falling back to the default.

        Args:
            name: Environment variable name.
            default: Value used when unset or invalid.
            logger: Logger used for warnings.

        Returns:
            float: Parsed value or default.
        """
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = float(raw)
        except ValueError:
            logger.warning(f"Invalid {name}={raw!r}; using {default}")
            return default
        if value <= 0:
            logger.warning(f"Non-positive {name}={raw!r}; using {default}")
            return default
        return value

    @staticmethod
    def _read_bool(name: str, default: bool, logger) -> bool:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        lowered = raw.strip().lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSY:
            return False
        logger.warning(f"Invalid {name}={raw!r}; using {default}")
        return default


__all__ = ["PortfolioSettings"]
