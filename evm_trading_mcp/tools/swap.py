from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from mcp.server.fastmcp.utilities.logging import get_logger

from ..chain import ChainClient, parse_address
from ..contracts import (
    EXACT_INPUT_SINGLE,
    MAX_UINT24,
    MAX_UINT256,
    QUOTE_EXACT_INPUT_SINGLE,
    UNISWAP_V3_QUOTER_V2,
    UNISWAP_V3_SWAP_ROUTER,
)
from ..errors import ArgumentError, ChainCallError, DecodeError
from ..models import SwapResult, TransactionPayload
from ..numeric import slippage_floor
from .base import Tool, require_str

logger = get_logger(__name__)

DEFAULT_FEE = 3000
DEFAULT_SLIPPAGE_PERCENT = Decimal("0.5")
NO_DEADLINE = MAX_UINT256
SIMULATION_NOTE = (
    "Gas estimate is from Quoter. Router eth_call included; "
    "actual execution still depends on approvals/balance."
)


class SwapTokensTool(Tool):
    name = "swap_tokens"
    description = "Simulate a token swap on Uniswap V3 and construct the transaction."
    input_schema = {
        "type": "object",
        "properties": {
            "from_token": {
                "type": "string",
                "description": "Address of the token to sell",
            },
            "to_token": {
                "type": "string",
                "description": "Address of the token to buy",
            },
            "amount": {
                "type": "string",
                "description": "Amount of from_token to sell (in base units)",
            },
            "fee": {
                "type": "integer",
                "description": "Pool fee tier (e.g., 500, 3000, 10000). Default 3000.",
            },
            "slippage_tolerance": {
                "type": "number",
                "description": "Slippage tolerance in percentage (e.g., 0.5 for 0.5%). Default 0.5.",
            },
        },
        "required": ["from_token", "to_token", "amount"],
    }

    async def execute(self, client: ChainClient, arguments: Dict[str, Any]) -> Dict[str, Any]:
        from_token = parse_address(require_str(arguments, "from_token"), "from_token")
        to_token = parse_address(require_str(arguments, "to_token"), "to_token")
        amount_in = parse_amount(arguments.get("amount"))
        fee = parse_fee(arguments.get("fee"))
        slippage = parse_slippage(arguments.get("slippage_tolerance"))

        logger.info(f"Simulating swap of {amount_in} {from_token} -> {to_token} (fee={fee}, slippage={slippage}%)")

        # 1. Quote; a failed call aborts, undecodable return data does not
        quote_data = await client.call(
            UNISWAP_V3_QUOTER_V2,
            QUOTE_EXACT_INPUT_SINGLE.encode((from_token, to_token, amount_in, fee, 0)),
        )
        decode_error: Optional[str] = None
        try:
            amount_out, _sqrt_price_after, _ticks_crossed, gas_estimate = QUOTE_EXACT_INPUT_SINGLE.decode(quote_data)
        except DecodeError as e:
            logger.warning(f"Quoter response could not be decoded: {e}")
            decode_error = str(e)
            amount_out, gas_estimate = 0, 0

        # 2. Minimum output
        amount_out_min = slippage_floor(amount_out, slippage)

        # 3. Router calldata, recipient is our own signer
        router_calldata = EXACT_INPUT_SINGLE.encode(
            (
                from_token,
                to_token,
                fee,
                client.signer_address,
                NO_DEADLINE,
                amount_in,
                amount_out_min,
                0,
            )
        )

        # 4. Read-only simulation of the router call
        router_simulation = await self.simulate_router_call(client, router_calldata)

        return SwapResult(
            estimated_output=str(amount_out),
            minimum_output=str(amount_out_min),
            gas_estimate_simulation=str(gas_estimate),
            transaction=TransactionPayload(
                to=UNISWAP_V3_SWAP_ROUTER,
                data="0x" + router_calldata.hex(),
                value="0",
                description="Uniswap V3 SwapRouter.exactInputSingle",
            ),
            router_call_simulation=router_simulation,
            simulation_note=SIMULATION_NOTE,
            quoter_decode_error=decode_error,
        ).model_dump()

    @staticmethod
    async def simulate_router_call(client: ChainClient, calldata: bytes) -> Dict[str, Any]:
        try:
            data = await client.call(UNISWAP_V3_SWAP_ROUTER, calldata, sender=client.signer_address)
        except ChainCallError as e:
            logger.info(f"Router simulation failed: {e}")
            return {"status": "error", "message": str(e)}
        try:
            simulated_out = EXACT_INPUT_SINGLE.decode_single(data)
        except DecodeError:
            return {"status": "ok", "message": "call succeeded"}
        return {"status": "ok", "simulated_amount_out": str(simulated_out)}


def parse_amount(value: Any) -> int:
    if value is None:
        raise ArgumentError("Missing amount")
    if isinstance(value, bool):
        raise ArgumentError("amount must be an integer string")
    if isinstance(value, int):
        amount = value
    elif isinstance(value, str):
        try:
            amount = int(value.strip(), 10)
        except ValueError:
            raise ArgumentError(f"amount must be an integer string in base units, got {value!r}") from None
    else:
        raise ArgumentError("amount must be an integer string")
    if amount < 0 or amount > MAX_UINT256:
        raise ArgumentError(f"amount out of uint256 range: {amount}")
    return amount


def parse_fee(value: Any) -> int:
    if value is None:
        return DEFAULT_FEE
    if isinstance(value, bool) or not isinstance(value, int):
        raise ArgumentError(f"fee must be an integer fee tier, got {value!r}")
    if value < 0 or value > MAX_UINT24:
        raise ArgumentError(f"fee out of uint24 range: {value}")
    return value


def parse_slippage(value: Any) -> Decimal:
    if value is None:
        return DEFAULT_SLIPPAGE_PERCENT
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ArgumentError(f"slippage_tolerance must be a number, got {value!r}")
    try:
        # str() first so 0.5 becomes Decimal("0.5"), not the binary float
        slippage = Decimal(str(value))
    except InvalidOperation:
        raise ArgumentError(f"slippage_tolerance must be a number, got {value!r}") from None
    if not slippage.is_finite() or slippage < 0 or slippage > 100:
        raise ArgumentError(f"slippage_tolerance must be between 0 and 100, got {value!r}")
    return slippage
