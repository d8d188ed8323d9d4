"""
Fixed-point helpers for on-chain integer values.

Everything here works on `decimal.Decimal` inside DECIMAL_CONTEXT, whose
precision is wide enough to hold any uint256 exactly. Floats never appear.
"""

from decimal import ROUND_DOWN, ROUND_HALF_EVEN, Context, Decimal, localcontext
from typing import Union

DECIMAL_CONTEXT = Context(prec=120, rounding=ROUND_HALF_EVEN)
PRICE_SIGNIFICANT_DIGITS = 28

Q32 = Decimal(2**32)
MAX_UINT160 = 2**160 - 1

IntLike = Union[int, str]


def _to_int(raw: IntLike) -> int:
    if isinstance(raw, bool):
        raise ValueError(f"Not an integer literal: {raw!r}")
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip(), 10)
    except ValueError:
        raise ValueError(f"Not an integer literal: {raw!r}") from None


def pow10(exponent: int) -> Decimal:
    """Return 10**exponent exactly; negative exponents give the reciprocal."""
    with localcontext(DECIMAL_CONTEXT):
        return Decimal(1).scaleb(exponent)


def scale_down(raw: IntLike, decimals: int) -> Decimal:
    """Convert an integer amount in base units to a human-readable Decimal."""
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    value = _to_int(raw)
    with localcontext(DECIMAL_CONTEXT):
        return (Decimal(value) / pow10(decimals)).normalize()


def sqrt_price_x96_to_ratio(sqrt_price_x96: IntLike) -> Decimal:
    """
    Convert a Uniswap V3 style sqrtPriceX96 into the raw token1/token0 ratio.

    The 2**96 divisor is applied as three 2**32 steps before squaring so the
    intermediate value stays near the magnitude of the result.
    """
    value = _to_int(sqrt_price_x96)
    if value < 0 or value > MAX_UINT160:
        raise ValueError(f"sqrtPriceX96 out of uint160 range: {value}")
    with localcontext(DECIMAL_CONTEXT):
        sqrt_ratio = Decimal(value) / Q32 / Q32 / Q32
        return sqrt_ratio * sqrt_ratio


def apply_decimal_adjustment(ratio: Decimal, decimals_token0: int, decimals_token1: int) -> Decimal:
    """Express a raw pool ratio in whole-token units."""
    with localcontext(DECIMAL_CONTEXT):
        return ratio * pow10(decimals_token0 - decimals_token1)


def slippage_floor(expected_out: Union[Decimal, IntLike], slippage_percent: Decimal) -> int:
    """
    Minimum acceptable output after slippage, truncated toward zero.

    Truncation means the floor is never more generous than the tolerance.
    """
    slippage = Decimal(slippage_percent)
    if slippage < 0 or slippage > 100:
        raise ValueError(f"slippage percent must be between 0 and 100, got {slippage}")
    if not isinstance(expected_out, Decimal):
        expected_out = Decimal(_to_int(expected_out))
    with localcontext(DECIMAL_CONTEXT):
        factor = Decimal(1) - slippage / Decimal(100)
        return int((expected_out * factor).to_integral_value(rounding=ROUND_DOWN))


def round_significant(value: Decimal, digits: int = PRICE_SIGNIFICANT_DIGITS) -> Decimal:
    """Round half-even to at most `digits` significant digits."""
    if digits < 1:
        raise ValueError(f"digits must be positive, got {digits}")
    return Context(prec=digits, rounding=ROUND_HALF_EVEN).plus(value)


def to_plain_string(value: Decimal) -> str:
    """Render without exponent notation or trailing zeros (e.g. "1000", "0.5")."""
    with localcontext(DECIMAL_CONTEXT):
        normalized = value.normalize()
    text = format(normalized, "f")
    return "0" if text == "-0" else text
