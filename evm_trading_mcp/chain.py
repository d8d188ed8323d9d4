import itertools
import re
from typing import Any, Dict, List, Optional, Protocol

import httpx
from eth_account import Account
from web3 import Web3

from mcp.server.fastmcp.utilities.logging import get_logger

from .errors import ArgumentError, ChainCallError, ConfigError

logger = get_logger(__name__)

ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def parse_address(value: Any, field: str = "address") -> str:
    """Validate a 20-byte hex address and return it checksummed."""
    if not isinstance(value, str) or not ADDRESS_RE.match(value.strip()):
        raise ArgumentError(f"Invalid {field}: {value!r} is not a 20-byte hex address")
    return Web3.to_checksum_address(value.strip())


def same_address(a: str, b: str) -> bool:
    return a.lower() == b.lower()


class ChainClient(Protocol):
    """What tools need from the chain: read-only calls and native balances."""

    signer_address: str

    async def call(self, target: str, calldata: bytes, sender: Optional[str] = None) -> bytes:
        ...

    async def get_native_balance(self, address: str) -> int:
        ...


class EthereumClient:
    """
    Minimal Ethereum JSON-RPC client over HTTP.

    Only eth_call and eth_getBalance are used. The private key is needed just to
    know which address simulated swaps are sent from; nothing is ever signed.
    """

    def __init__(
        self,
        rpc_url: str,
        private_key: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        try:
            self.signer_address: str = Account.from_key(private_key).address
        except (ValueError, TypeError) as e:
            raise ConfigError(f"Invalid private key: {e}") from None
        self.rpc_url = rpc_url
        self._ids = itertools.count(1)
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> "EthereumClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, params: List[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        logger.debug(f"RPC -> {method} {params}")
        try:
            response = await self._http.post(self.rpc_url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            raise ChainCallError(f"{method} transport error: {e}") from e
        except ValueError as e:
            raise ChainCallError(f"{method} returned invalid JSON: {e}") from e

        if not isinstance(body, dict):
            raise ChainCallError(f"{method} returned an unexpected payload: {body!r}")
        error = body.get("error")
        if error:
            message = error.get("message", "unknown error") if isinstance(error, dict) else str(error)
            data = error.get("data") if isinstance(error, dict) else None
            if data:
                message = f"{message} (data: {data})"
            raise ChainCallError(f"{method} failed: {message}")
        if "result" not in body:
            raise ChainCallError(f"{method} response has no result")
        return body["result"]

    async def call(self, target: str, calldata: bytes, sender: Optional[str] = None) -> bytes:
        tx: Dict[str, str] = {"to": target, "data": "0x" + calldata.hex()}
        if sender is not None:
            tx["from"] = sender
        result = await self._request("eth_call", [tx, "latest"])
        if not isinstance(result, str):
            raise ChainCallError(f"eth_call returned non-hex result: {result!r}")
        try:
            return bytes.fromhex(result[2:] if result.startswith("0x") else result)
        except ValueError as e:
            raise ChainCallError(f"eth_call returned malformed hex: {e}") from e

    async def get_native_balance(self, address: str) -> int:
        result = await self._request("eth_getBalance", [address, "latest"])
        try:
            return int(result, 16)
        except (TypeError, ValueError) as e:
            raise ChainCallError(f"eth_getBalance returned malformed quantity: {result!r}") from e
