"""Tick size table and the rounding rules the exchange enforces.

Each supported tick size fixes how many decimals a price, a size and a
resulting amount may carry. The set mirrors the granularities enforced by
the exchange contract and is not meant to be extended at runtime.
"""

from dataclasses import dataclass
from decimal import ROUND_DOWN, ROUND_HALF_DOWN, Decimal
from types import MappingProxyType
from typing import Mapping

from ..errors import InvalidParameterError, UnknownTickSizeError
from .utils import MAX_UINT256, TOKEN_DECIMALS, DecimalLike, to_decimal


@dataclass(frozen=True)
class RoundConfig:
    """Decimal places allowed for one tick size."""

    price: int
    """Decimals kept on the price."""

    size: int
    """Decimals kept on the share size."""

    amount: int
    """Decimals kept on a price x size product."""


ROUNDING_CONFIG: Mapping[Decimal, RoundConfig] = MappingProxyType(
    {
        Decimal("0.1"): RoundConfig(price=1, size=2, amount=3),
        Decimal("0.01"): RoundConfig(price=2, size=2, amount=4),
        Decimal("0.001"): RoundConfig(price=3, size=2, amount=5),
        Decimal("0.0001"): RoundConfig(price=4, size=2, amount=6),
    }
)


def get_round_config(tick_size: DecimalLike) -> RoundConfig:
    """Look up the rounding configuration for a tick size.

    Args:
        tick_size: Market tick size, e.g. Decimal("0.01") or "0.01"

    Returns:
        RoundConfig for the tick size

    Raises:
        UnknownTickSizeError: If the tick size is not supported
    """
    try:
        key = to_decimal(tick_size, "tick_size")
    except InvalidParameterError:
        raise UnknownTickSizeError(tick_size) from None

    config = ROUNDING_CONFIG.get(key)
    if config is None:
        raise UnknownTickSizeError(tick_size)
    return config


def _quantum(places: int) -> Decimal:
    return Decimal(1).scaleb(-places)


def round_normal(value: Decimal, places: int) -> Decimal:
    """Round to ``places`` decimals, ties toward zero."""
    return value.quantize(_quantum(places), rounding=ROUND_HALF_DOWN)


def round_down(value: Decimal, places: int) -> Decimal:
    """Truncate to ``places`` decimals."""
    return value.quantize(_quantum(places), rounding=ROUND_DOWN)


def decimal_places(value: Decimal) -> int:
    """Number of significant fractional digits, ignoring trailing zeros."""
    exponent = value.normalize().as_tuple().exponent
    return -exponent if exponent < 0 else 0


def fix_amount_rounding(amount: Decimal, round_config: RoundConfig) -> Decimal:
    """Bring a price x size product back to the amount precision.

    The product of two rounded decimals can carry more fractional digits
    than the contract accepts. Trailing zeros are dropped first, then the
    remainder is re-rounded (ties toward zero) if still too long.
    """
    amount = amount.normalize()
    if decimal_places(amount) > round_config.amount:
        amount = round_normal(amount, round_config.amount)
    return amount


def to_token_decimals(value: Decimal) -> int:
    """Scale a decimal amount to integer token units (6 decimals).

    Raises:
        InvalidParameterError: If the result is negative or exceeds uint256
    """
    scaled = value.scaleb(TOKEN_DECIMALS)
    if decimal_places(scaled) > 0:
        scaled = round_normal(scaled, 0)
    result = int(scaled)
    if result < 0 or result > MAX_UINT256:
        raise InvalidParameterError(f"Amount out of range: {value}")
    return result
