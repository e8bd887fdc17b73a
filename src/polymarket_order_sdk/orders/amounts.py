"""Maker/taker amount scaling.

Converts a decimal price and size into the integer token amounts signed
into an order. Sizes are truncated while prices and products are rounded
(ties toward zero); the exchange recomputes the same values, so any other
rounding produces an order whose hash no longer matches its signature.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, localcontext

from ..errors import InvalidParameterError
from .rounding import (
    RoundConfig,
    fix_amount_rounding,
    round_down,
    round_normal,
    to_token_decimals,
)
from .types import Side
from .utils import DECIMAL_PRECISION, DecimalLike, to_decimal


@dataclass(frozen=True)
class OrderAmounts:
    """Integer amounts for an order plus the price they were derived from."""

    maker_amount: int
    taker_amount: int
    price: Decimal
    """Price after rounding to the tick size precision."""


def _scale_amounts(
    side: Side,
    size: DecimalLike,
    price: DecimalLike,
    round_config: RoundConfig,
    size_name: str,
) -> OrderAmounts:
    size = to_decimal(size, size_name)
    price = to_decimal(price, "price")
    if size < 0:
        raise InvalidParameterError(f"{size_name} must be non-negative, got {size}")
    if price < 0:
        raise InvalidParameterError(f"price must be non-negative, got {price}")

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        try:
            raw_price = round_normal(price, round_config.price)
            shares = round_down(size, round_config.size)
            collateral = fix_amount_rounding(shares * raw_price, round_config)

            if side == Side.BUY:
                # Pay collateral, receive shares
                maker, taker = collateral, shares
            else:
                # Give shares, receive collateral
                maker, taker = shares, collateral

            return OrderAmounts(
                maker_amount=to_token_decimals(maker),
                taker_amount=to_token_decimals(taker),
                price=raw_price,
            )
        except InvalidOperation:
            raise InvalidParameterError(
                f"Amount out of range: {size_name}={size}, price={price}"
            ) from None


def get_order_amounts(
    side: Side,
    size: DecimalLike,
    price: DecimalLike,
    round_config: RoundConfig,
) -> OrderAmounts:
    """Compute maker/taker amounts for a limit order.

    Args:
        side: Order side
        size: Number of shares
        price: Price per share (0 to 1)
        round_config: Rounding configuration for the market's tick size

    Returns:
        OrderAmounts with integer maker/taker amounts (6 decimals)

    Raises:
        InvalidParameterError: If an input is malformed, negative or the
            amounts overflow uint256
    """
    return _scale_amounts(Side.from_value(side), size, price, round_config, "size")


def get_market_order_amounts(
    side: Side,
    amount: DecimalLike,
    price: DecimalLike,
    round_config: RoundConfig,
) -> OrderAmounts:
    """Compute maker/taker amounts for a market order.

    ``amount`` is the number of shares to match, the same quantity passed
    to :func:`calculate_market_price`. ``price`` is usually that function's
    result; it is rounded to the tick precision here.

    Raises:
        InvalidParameterError: If an input is malformed, negative or the
            amounts overflow uint256
    """
    return _scale_amounts(Side.from_value(side), amount, price, round_config, "amount")


__all__ = ["OrderAmounts", "get_order_amounts", "get_market_order_amounts"]
