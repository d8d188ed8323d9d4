from typing import Any, Dict

from mcp.server.fastmcp.utilities.logging import get_logger

from ..chain import ChainClient, parse_address
from ..contracts import BALANCE_OF, DECIMALS, SYMBOL
from ..models import BalanceResult
from ..numeric import scale_down, to_plain_string
from .base import Tool, optional_str, require_str

logger = get_logger(__name__)

NATIVE_DECIMALS = 18


class GetBalanceTool(Tool):
    name = "get_balance"
    description = "Get the balance of ETH or an ERC20 token for a specific address"
    input_schema = {
        "type": "object",
        "properties": {
            "address": {
                "type": "string",
                "description": "The wallet address to check balance for",
            },
            "token_address": {
                "type": "string",
                "description": "Optional ERC20 token contract address. If omitted, returns ETH balance.",
            },
        },
        "required": ["address"],
    }

    def __init__(self, native_symbol: str = "ETH"):
        self.native_symbol = native_symbol

    async def execute(self, client: ChainClient, arguments: Dict[str, Any]) -> Dict[str, Any]:
        address = parse_address(require_str(arguments, "address"), "address")
        token_arg = optional_str(arguments, "token_address")

        if token_arg is None:
            raw = await client.get_native_balance(address)
            logger.debug(f"Native balance of {address}: {raw}")
            return self._result(raw, NATIVE_DECIMALS, self.native_symbol)

        token = parse_address(token_arg, "token_address")
        raw = BALANCE_OF.decode_single(await client.call(token, BALANCE_OF.encode(address)))
        decimals = DECIMALS.decode_single(await client.call(token, DECIMALS.encode()))
        symbol = SYMBOL.decode_single(await client.call(token, SYMBOL.encode()))
        logger.debug(f"{symbol} balance of {address}: {raw} (decimals={decimals})")
        return self._result(raw, decimals, symbol)

    @staticmethod
    def _result(raw: int, decimals: int, symbol: str) -> Dict[str, Any]:
        return BalanceResult(
            balance=to_plain_string(scale_down(raw, decimals)),
            raw_balance=str(raw),
            symbol=symbol,
            decimals=decimals,
        ).model_dump()
