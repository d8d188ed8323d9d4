from typing import Any, Dict, List, Optional, Tuple, Union
from unittest.mock import AsyncMock, MagicMock

from eth_abi import encode as abi_encode

from evm_trading_mcp.contracts import ContractFunction
from evm_trading_mcp.errors import ChainCallError

SIGNER_ADDRESS = "0x2c7536e3605d9c16a7a3d7b1898e529396a65c23"
HOLDER_ADDRESS = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"


class FakeChain:
    """
    Scripted stand-in for EthereumClient.

    Responses are keyed by (target address, 4-byte selector); anything not
    scripted behaves like a reverted eth_call.
    """

    def __init__(self, signer_address: str = SIGNER_ADDRESS):
        self.responses: Dict[Tuple[str, bytes], Union[bytes, Exception]] = {}
        self.calls: List[Tuple[str, bytes, Optional[str]]] = []
        self.client = MagicMock()
        self.client.signer_address = signer_address
        self.client.call = AsyncMock(side_effect=self._call)
        self.client.get_native_balance = AsyncMock(return_value=0)

    def on(
        self,
        target: str,
        function: ContractFunction,
        *values: Any,
        raw: Optional[bytes] = None,
        error: Optional[Exception] = None,
    ) -> None:
        if error is not None:
            response: Union[bytes, Exception] = error
        elif raw is not None:
            response = raw
        else:
            response = abi_encode(function.outputs, list(values))
        self.responses[(target.lower(), function.selector)] = response

    def selectors_called(self) -> List[bytes]:
        return [calldata[:4] for _, calldata, _ in self.calls]

    async def _call(self, target: str, calldata: bytes, sender: Optional[str] = None) -> bytes:
        self.calls.append((target, calldata, sender))
        key = (target.lower(), bytes(calldata[:4]))
        if key not in self.responses:
            raise ChainCallError(f"eth_call failed: execution reverted (no mock for {target} 0x{calldata[:4].hex()})")
        response = self.responses[key]
        if isinstance(response, Exception):
            raise response
        return response
