"""Market price calculation from order book depth."""

from decimal import Decimal, localcontext
from typing import Any, Iterable, Mapping, Union

from ..errors import InsufficientLiquidityError, InvalidParameterError
from .types import PriceLevel, Side
from .utils import DECIMAL_PRECISION, DecimalLike, to_decimal


def _as_level(level: Union[PriceLevel, Mapping[str, Any]]) -> PriceLevel:
    if isinstance(level, PriceLevel):
        return level
    return PriceLevel.from_dict(level)


def calculate_market_price(
    positions: Iterable[Union[PriceLevel, Mapping[str, Any]]],
    shares_to_match: DecimalLike,
    side: Union[Side, str],
) -> Decimal:
    """Calculate the volume-weighted price for a market order.

    Walks the book until enough liquidity is found to match the requested
    shares. Buys consume the asks from the lowest price up, sells consume
    the bids from the highest price down. The input is not modified.

    Args:
        positions: Levels of the side being consumed (asks for a buy, bids
            for a sell), as PriceLevel objects or ``{"price", "size"}`` dicts
        shares_to_match: Number of shares to fill
        side: Side of the market order

    Returns:
        Weighted average fill price. Tick size rounding is left to the
        amount calculation.

    Raises:
        InsufficientLiquidityError: If the book cannot fill every share
        InvalidParameterError: If shares_to_match is not positive or a level
            has a negative price or size
    """
    shares_to_match = to_decimal(shares_to_match, "shares_to_match")
    if shares_to_match <= 0:
        raise InvalidParameterError(
            f"shares_to_match must be positive, got {shares_to_match}"
        )

    side = Side.from_value(side)
    levels = sorted(
        (_as_level(level) for level in positions),
        key=lambda level: level.price,
        reverse=side == Side.SELL,
    )

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION

        remaining = shares_to_match
        total_cost = Decimal(0)
        for level in levels:
            filled = min(remaining, level.size)
            total_cost += filled * level.price
            remaining -= filled

            if remaining == 0:
                return total_cost / shares_to_match

    raise InsufficientLiquidityError(shares_to_match)


__all__ = ["calculate_market_price"]
