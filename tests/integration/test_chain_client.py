import json

import httpx
import pytest

from evm_trading_mcp.chain import EthereumClient, parse_address
from evm_trading_mcp.errors import ArgumentError, ChainCallError, ConfigError

from .helpers import HOLDER_ADDRESS

RPC_URL = "http://node.test"
# Example key from the eth-account documentation
PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
EXPECTED_SIGNER = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"


def make_client(handler) -> EthereumClient:
    return EthereumClient(RPC_URL, PRIVATE_KEY, transport=httpx.MockTransport(handler))


def rpc_result(request: httpx.Request, result) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})


def test_signer_address_from_private_key():
    client = EthereumClient(RPC_URL, PRIVATE_KEY)
    assert client.signer_address.lower() == EXPECTED_SIGNER.lower()


def test_invalid_private_key():
    with pytest.raises(ConfigError, match="Invalid private key"):
        EthereumClient(RPC_URL, "0x1234")


@pytest.mark.asyncio
async def test_eth_call_request_and_result():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(json.loads(request.content))
        return rpc_result(request, "0x" + "00" * 31 + "2a")

    async with make_client(handler) as client:
        data = await client.call(HOLDER_ADDRESS, bytes.fromhex("313ce567"))

    assert data == b"\x00" * 31 + b"\x2a"
    assert seen["method"] == "eth_call"
    assert seen["params"] == [{"to": HOLDER_ADDRESS, "data": "0x313ce567"}, "latest"]


@pytest.mark.asyncio
async def test_eth_call_with_sender():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(json.loads(request.content))
        return rpc_result(request, "0x")

    async with make_client(handler) as client:
        data = await client.call(HOLDER_ADDRESS, b"\x01\x02", sender=client.signer_address)

    assert data == b""
    assert seen["params"][0]["from"] == client.signer_address


@pytest.mark.asyncio
async def test_node_error_becomes_chain_call_error():
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "jsonrpc": "2.0",
                "id": body["id"],
                "error": {"code": 3, "message": "execution reverted: STF", "data": "0x08c379a0"},
            },
        )

    async with make_client(handler) as client:
        with pytest.raises(ChainCallError, match="execution reverted: STF"):
            await client.call(HOLDER_ADDRESS, b"\x00\x00\x00\x00")


@pytest.mark.asyncio
async def test_http_error_becomes_chain_call_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    async with make_client(handler) as client:
        with pytest.raises(ChainCallError, match="transport error"):
            await client.get_native_balance(HOLDER_ADDRESS)


@pytest.mark.asyncio
async def test_connection_error_becomes_chain_call_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(ChainCallError, match="connection refused"):
            await client.call(HOLDER_ADDRESS, b"\x00\x00\x00\x00")


@pytest.mark.asyncio
async def test_get_native_balance():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(json.loads(request.content))
        return rpc_result(request, "0xde0b6b3a7640000")

    async with make_client(handler) as client:
        balance = await client.get_native_balance(HOLDER_ADDRESS)

    assert balance == 10**18
    assert seen["method"] == "eth_getBalance"
    assert seen["params"] == [HOLDER_ADDRESS, "latest"]


@pytest.mark.asyncio
async def test_malformed_balance_quantity():
    async with make_client(lambda request: rpc_result(request, "lots")) as client:
        with pytest.raises(ChainCallError, match="malformed quantity"):
            await client.get_native_balance(HOLDER_ADDRESS)


def test_parse_address_checksums():
    assert parse_address(HOLDER_ADDRESS.lower()) == HOLDER_ADDRESS


@pytest.mark.parametrize("value", ["invalid-address", "0x1234", None, 42, "d8dA6BF26964aF9D7eEd9e03E53415D37aA96045"])
def test_parse_address_rejects_malformed(value):
    with pytest.raises(ArgumentError):
        parse_address(value)
