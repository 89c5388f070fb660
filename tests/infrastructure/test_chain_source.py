"""Tests for the Alchemy chain balance source."""

import asyncio
from decimal import Decimal
import json

import httpx
import pytest

from src.domain.errors import MetadataUnavailableError, SourceUnavailableError
from src.domain.models import TokenBalance, TokenMetadata
from src.infrastructure.chain_source import (
    AlchemyChainBalanceSource,
    parse_hex_quantity,
)


def _source(results: dict) -> tuple[AlchemyChainBalanceSource, list]:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        calls.append(body)
        result = results[body["method"]]
        if isinstance(result, httpx.Response):
            return result
        return httpx.Response(
            200,
            json={"jsonrpc": "2.0", "id": body["id"], "result": result},
        )

    source = AlchemyChainBalanceSource(
        api_key="secret-key",
        transport=httpx.MockTransport(handler),
    )
    return source, calls


def test_parse_hex_quantity() -> None:
    assert parse_hex_quantity("0x0") == 0
    assert parse_hex_quantity("0x1bc16d674ec80000") == 2 * 10**18
    assert parse_hex_quantity("nope") is None
    assert parse_hex_quantity(None) is None


def test_get_native_balance_scales_wei() -> None:
    source, calls = _source({"eth_getBalance": "0x6f05b59d3b20000"})

    balance = asyncio.run(source.get_native_balance("0xabc"))

    assert balance == Decimal("0.5")
    assert calls[0]["params"] == ["0xabc", "latest"]


def test_get_token_balances_reads_rows() -> None:
    source, calls = _source(
        {
            "alchemy_getTokenBalances": {
                "address": "0xabc",
                "tokenBalances": [
                    {"contractAddress": "0x1", "tokenBalance": "0x64"},
                    {
                        "contractAddress": "0x2",
                        "tokenBalance": None,
                        "error": "reverted",
                    },
                    {"tokenBalance": "0x1"},
                ],
            }
        }
    )

    balances = asyncio.run(source.get_token_balances("0xabc"))

    assert balances == [
        TokenBalance("0x1", 100),
        TokenBalance("0x2", None, error="reverted"),
    ]
    assert calls[0]["params"] == ["0xabc", "erc20"]


def test_get_token_metadata_returns_symbol_and_decimals() -> None:
    source, _ = _source(
        {
            "alchemy_getTokenMetadata": {
                "symbol": "USDC",
                "decimals": 6,
                "name": "USD Coin",
            }
        }
    )

    metadata = asyncio.run(source.get_token_metadata("0x1"))

    assert metadata == TokenMetadata("USDC", 6)


def test_get_token_metadata_wraps_failures() -> None:
    source, _ = _source({"alchemy_getTokenMetadata": httpx.Response(503)})

    with pytest.raises(MetadataUnavailableError):
        asyncio.run(source.get_token_metadata("0x1"))


def test_rpc_error_raises_source_unavailable() -> None:
    source, _ = _source(
        {
            "eth_getBalance": httpx.Response(
                200,
                json={"id": 1, "error": {"code": -32602, "message": "bad"}},
            )
        }
    )

    with pytest.raises(SourceUnavailableError, match="bad"):
        asyncio.run(source.get_native_balance("0xabc"))


def test_transport_errors_do_not_leak_api_key() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    source = AlchemyChainBalanceSource(
        api_key="secret-key",
        transport=httpx.MockTransport(handler),
    )

    with pytest.raises(SourceUnavailableError) as exc_info:
        asyncio.run(source.get_native_balance("0xabc"))
    assert "secret-key" not in str(exc_info.value)
    assert "ConnectError" in str(exc_info.value)
