"""
Ethereum mainnet contract addresses and the ABI functions the tools call.

Each ContractFunction knows its 4-byte selector and how to encode arguments and
decode return data with eth_abi.
"""

from typing import Any, Sequence, Tuple

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi.exceptions import DecodingError
from web3 import Web3

from .errors import DecodeError

# --- Mainnet addresses ---

WETH_ADDRESS = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDC_ADDRESS = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
WBTC_ADDRESS = "0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599"

CHAINLINK_ETH_USD_FEED = "0x5f4eC3Df9cbd43714FE2740f5E3616155c5b8419"
UNISWAP_V3_FACTORY = "0x1F98431c8aD98523631AE4a59f267346ea31F984"
UNISWAP_V3_QUOTER_V2 = "0x61fFE0149A332c47d847296F720a48855e9cb754"
UNISWAP_V3_SWAP_ROUTER = "0xE592427A0AEce92De3Edee1F18E0157C05861564"

KNOWN_TOKENS = {
    "USDC": USDC_ADDRESS,
    "WETH": WETH_ADDRESS,
    "WBTC": WBTC_ADDRESS,
}

MAX_UINT256 = 2**256 - 1
MAX_UINT24 = 2**24 - 1


class ContractFunction:
    def __init__(self, name: str, inputs: Sequence[str], outputs: Sequence[str]):
        self.name = name
        self.inputs = list(inputs)
        self.outputs = list(outputs)
        self.signature = f"{name}({','.join(self.inputs)})"
        self.selector = bytes(Web3.keccak(text=self.signature)[:4])

    def encode(self, *args: Any) -> bytes:
        return self.selector + abi_encode(self.inputs, list(args))

    def decode(self, data: bytes) -> Tuple[Any, ...]:
        try:
            return tuple(abi_decode(self.outputs, data))
        except (DecodingError, UnicodeDecodeError) as e:
            raise DecodeError(f"Could not decode {self.name} return data: {e}") from e

    def decode_single(self, data: bytes) -> Any:
        return self.decode(data)[0]

    def __repr__(self) -> str:
        return f"ContractFunction({self.signature})"


# ERC-20
BALANCE_OF = ContractFunction("balanceOf", ["address"], ["uint256"])
DECIMALS = ContractFunction("decimals", [], ["uint8"])
SYMBOL = ContractFunction("symbol", [], ["string"])

# Chainlink aggregator (decimals() shares the ERC-20 selector)
LATEST_ANSWER = ContractFunction("latestAnswer", [], ["int256"])

# Uniswap V3 factory and pool
GET_POOL = ContractFunction("getPool", ["address", "address", "uint24"], ["address"])
SLOT0 = ContractFunction(
    "slot0", [], ["uint160", "int24", "uint16", "uint16", "uint16", "uint8", "bool"]
)
TOKEN0 = ContractFunction("token0", [], ["address"])

# Uniswap V3 QuoterV2: params (tokenIn, tokenOut, amountIn, fee, sqrtPriceLimitX96)
QUOTE_EXACT_INPUT_SINGLE = ContractFunction(
    "quoteExactInputSingle",
    ["(address,address,uint256,uint24,uint160)"],
    ["uint256", "uint160", "uint32", "uint256"],
)

# Uniswap V3 SwapRouter: params (tokenIn, tokenOut, fee, recipient, deadline,
# amountIn, amountOutMinimum, sqrtPriceLimitX96)
EXACT_INPUT_SINGLE = ContractFunction(
    "exactInputSingle",
    ["(address,address,uint24,address,uint256,uint256,uint256,uint160)"],
    ["uint256"],
)
