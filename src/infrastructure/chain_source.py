"""Ethereum wallet source backed by the Alchemy JSON-RPC API."""

from decimal import Decimal
from itertools import count
from typing import Any

import httpx

from src.application.ports.balance_sources import ChainBalanceSourcePort
from src.domain.constants import NATIVE_COIN_DECIMALS
from src.domain.errors import MetadataUnavailableError, SourceUnavailableError
from src.domain.models import TokenBalance, TokenMetadata

DEFAULT_NETWORK = "eth-mainnet"
DEFAULT_CHAIN_TIMEOUT_SECONDS = 10.0


def parse_hex_quantity(value: Any) -> int | None:
    """Parse a JSON-RPC hex quantity such as ``0x1bc16d674ec80000``.

    Returns:
        int | None: Parsed integer, None when the value is not hex.
    """
    if not isinstance(value, str):
        return None
    try:
        return int(value, 16)
    except ValueError:
        return None


class AlchemyChainBalanceSource(ChainBalanceSourcePort):
    """Read native and ERC-20 balances through Alchemy.

    A client is opened per call so the source can be shared by syncs running
    on different event loops.
    """

    def __init__(
        self,
        api_key: str,
        network: str = DEFAULT_NETWORK,
        timeout_seconds: float = DEFAULT_CHAIN_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the source.

        Args:
            api_key: Alchemy API key.
            network: Alchemy network slug (e.g. eth-mainnet).
            timeout_seconds: Bound applied to every JSON-RPC call.
            transport: Optional transport override, used by tests.
        """
        self._url = f"https://{network}.g.alchemy.com/v2/{api_key}"
        self._network = network
        self._timeout = timeout_seconds
        self._transport = transport
        self._request_ids = count(1)

    async def get_native_balance(self, address: str) -> Decimal:
        result = await self._call("eth_getBalance", [address, "latest"])
        wei = parse_hex_quantity(result)
        if wei is None:
            raise SourceUnavailableError(f"Invalid native balance: {result!r}")
        return Decimal(wei) / (Decimal(10) ** NATIVE_COIN_DECIMALS)

    async def get_token_balances(self, address: str) -> list[TokenBalance]:
        result = await self._call("alchemy_getTokenBalances", [address, "erc20"])
        if not isinstance(result, dict):
            raise SourceUnavailableError("Invalid token balances payload")
        balances = []
        for row in result.get("tokenBalances") or []:
            contract = row.get("contractAddress")
            if not contract:
                continue
            balances.append(
                TokenBalance(
                    contract_address=contract,
                    raw_amount=parse_hex_quantity(row.get("tokenBalance")),
                    error=row.get("error"),
                )
            )
        return balances

    async def get_token_metadata(
        self,
        contract_address: str,
    ) -> TokenMetadata | None:
        try:
            result = await self._call(
                "alchemy_getTokenMetadata",
                [contract_address],
            )
        except SourceUnavailableError as exc:
            raise MetadataUnavailableError(
                f"Metadata lookup failed for {contract_address}: {exc}"
            ) from exc
        if not isinstance(result, dict):
            return None
        decimals = result.get("decimals")
        return TokenMetadata(
            symbol=result.get("symbol"),
            decimals=decimals if isinstance(decimals, int) else None,
        )

    async def _call(self, method: str, params: list[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": params,
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(self._url, json=payload)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as exc:
            raise SourceUnavailableError(
                f"Alchemy {method} failed on {self._network}: "
                f"HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            # The URL embeds the API key, so only the error type is reported.
            raise SourceUnavailableError(
                f"Alchemy {method} failed on {self._network}: "
                f"{type(exc).__name__}"
            ) from exc
        except ValueError as exc:
            raise SourceUnavailableError(
                f"Alchemy {method} returned invalid JSON"
            ) from exc
        if not isinstance(body, dict):
            raise SourceUnavailableError(f"Alchemy {method} returned no body")
        if body.get("error"):
            error = body["error"]
            message = error.get("message") if isinstance(error, dict) else error
            raise SourceUnavailableError(f"Alchemy {method} error: {message}")
        return body.get("result")


__all__ = [
    "AlchemyChainBalanceSource",
    "parse_hex_quantity",
    "DEFAULT_NETWORK",
    "DEFAULT_CHAIN_TIMEOUT_SECONDS",
]
