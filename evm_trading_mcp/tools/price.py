from decimal import Decimal, localcontext
from typing import Any, Dict

from mcp.server.fastmcp.utilities.logging import get_logger

from ..chain import ZERO_ADDRESS, ChainClient, parse_address, same_address
from ..contracts import (
    CHAINLINK_ETH_USD_FEED,
    DECIMALS,
    GET_POOL,
    KNOWN_TOKENS,
    LATEST_ANSWER,
    SLOT0,
    TOKEN0,
    UNISWAP_V3_FACTORY,
    WETH_ADDRESS,
)
from ..errors import ArgumentError, NotFoundError
from ..models import PriceQuote
from ..numeric import (
    DECIMAL_CONTEXT,
    apply_decimal_adjustment,
    round_significant,
    scale_down,
    sqrt_price_x96_to_ratio,
    to_plain_string,
)
from .base import Tool, optional_str, require_str

logger = get_logger(__name__)

POOL_FEE = 3000  # 0.3% tier
ORACLE_SYMBOL = "ETH"  # base asset of the ETH/USD feed
ORACLE_SOURCE = "Chainlink Oracle"
POOL_SOURCE = "Uniswap V3 (Derived from ETH pair)"


class GetTokenPriceTool(Tool):
    name = "get_token_price"
    description = (
        "Get the current price of a token in USD or ETH. "
        "Uses Chainlink for ETH/USD and Uniswap V3 for others."
    )
    input_schema = {
        "type": "object",
        "properties": {
            "token_symbol": {
                "type": "string",
                "description": "Symbol of the token (e.g., ETH, USDC, UNI)",
            },
            "token_address": {
                "type": "string",
                "description": "Address of the token (required for non-standard tokens)",
            },
        },
        "required": ["token_symbol"],
    }

    async def execute(self, client: ChainClient, arguments: Dict[str, Any]) -> Dict[str, Any]:
        symbol = require_str(arguments, "token_symbol").strip().upper()
        token_arg = optional_str(arguments, "token_address")

        if symbol == ORACLE_SYMBOL:
            return await self._oracle_quote(client, symbol)

        token = self.resolve_token_address(symbol, token_arg)

        # WETH is priced 1:1 with ETH
        if same_address(token, WETH_ADDRESS):
            return await self._oracle_quote(client, symbol)

        pool = GET_POOL.decode_single(
            await client.call(UNISWAP_V3_FACTORY, GET_POOL.encode(token, WETH_ADDRESS, POOL_FEE))
        )
        if same_address(pool, ZERO_ADDRESS):
            raise NotFoundError(f"No Uniswap V3 pool found for {symbol}/WETH ({POOL_FEE / 10000}%)")
        pool = parse_address(pool, "pool address")

        price_eth = await self.get_pool_price_in_eth(client, pool, token)
        eth_usd = await self.get_eth_price_usd(client)
        with localcontext(DECIMAL_CONTEXT):
            price_usd = price_eth * eth_usd

        logger.info(f"{symbol} price: {price_eth} ETH / {price_usd} USD via pool {pool}")
        return PriceQuote(
            symbol=symbol,
            price_usd=to_plain_string(round_significant(price_usd)),
            price_eth=to_plain_string(round_significant(price_eth)),
            source=POOL_SOURCE,
            pool_fee=POOL_FEE,
            pool_address=pool,
        ).model_dump()

    async def _oracle_quote(self, client: ChainClient, symbol: str) -> Dict[str, Any]:
        eth_usd = await self.get_eth_price_usd(client)
        return PriceQuote(
            symbol=symbol,
            price_usd=to_plain_string(round_significant(eth_usd)),
            price_eth="1",
            source=ORACLE_SOURCE,
        ).model_dump()

    @staticmethod
    def resolve_token_address(symbol: str, token_address: Any) -> str:
        if token_address is not None:
            return parse_address(token_address, "token_address")
        known = KNOWN_TOKENS.get(symbol)
        if known is None:
            raise ArgumentError(f"Unknown token symbol {symbol!r}. Please provide token_address.")
        return known

    @staticmethod
    async def get_eth_price_usd(client: ChainClient) -> Decimal:
        answer = LATEST_ANSWER.decode_single(await client.call(CHAINLINK_ETH_USD_FEED, LATEST_ANSWER.encode()))
        decimals = DECIMALS.decode_single(await client.call(CHAINLINK_ETH_USD_FEED, DECIMALS.encode()))
        if answer <= 0:
            raise NotFoundError(f"Oracle returned a non-positive ETH/USD answer: {answer}")
        return scale_down(answer, decimals)

    @staticmethod
    async def get_pool_price_in_eth(client: ChainClient, pool: str, token: str) -> Decimal:
        """
        Price of `token` in WETH from the pool's sqrtPriceX96.

        Pools quote token1 per token0, so the ratio is inverted when WETH is token0.
        """
        sqrt_price_x96 = SLOT0.decode(await client.call(pool, SLOT0.encode()))[0]
        token0 = TOKEN0.decode_single(await client.call(pool, TOKEN0.encode()))
        token_decimals = DECIMALS.decode_single(await client.call(token, DECIMALS.encode()))
        weth_decimals = DECIMALS.decode_single(await client.call(WETH_ADDRESS, DECIMALS.encode()))

        token_is_token0 = same_address(token0, token)
        if token_is_token0:
            decimals0, decimals1 = token_decimals, weth_decimals
        else:
            decimals0, decimals1 = weth_decimals, token_decimals

        ratio = apply_decimal_adjustment(sqrt_price_x96_to_ratio(sqrt_price_x96), decimals0, decimals1)
        if ratio == 0:
            raise NotFoundError(f"Pool {pool} has no price (not initialized)")

        if token_is_token0:
            return ratio
        with localcontext(DECIMAL_CONTEXT):
            return Decimal(1) / ratio
