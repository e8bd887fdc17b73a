"""Constants and decimal helpers shared by the order modules."""

from decimal import Decimal, InvalidOperation
from typing import Union

from ..errors import InvalidParameterError

# Zero address (order open to any taker)
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# USDC and CTF conditional tokens both use 6 decimals
TOKEN_DECIMALS = 6

MAX_UINT256 = 2**256 - 1
MAX_UINT64 = 2**64 - 1

# Decimal precision for order math; wide enough for any uint256 amount
# plus its 6 token decimals
DECIMAL_PRECISION = 100

DecimalLike = Union[Decimal, int, str]


def to_decimal(value: DecimalLike, name: str = "value") -> Decimal:
    """Convert a user supplied number to ``Decimal``.

    Floats are refused: a binary float cannot represent most prices
    exactly, and any drift changes the signed order hash.

    Args:
        value: ``Decimal``, ``int`` or decimal string (e.g. "0.55")
        name: Argument name used in the error message

    Returns:
        The value as a finite ``Decimal``

    Raises:
        InvalidParameterError: If the value is a float, bool, or not a finite number
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidParameterError(
            f"Invalid {name}: {value!r}. Pass a Decimal, int or decimal string"
        )
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value)
        except InvalidOperation:
            raise InvalidParameterError(f"Invalid {name}: {value!r}") from None
    else:
        raise InvalidParameterError(f"Invalid {name}: {value!r}")

    if not result.is_finite():
        raise InvalidParameterError(f"Invalid {name}: {value!r}")
    return result


def to_uint(value: Union[int, str], name: str, max_value: int = MAX_UINT256) -> int:
    """Parse a non-negative integer that must fit an unsigned contract field.

    Args:
        value: Integer or base-10 string
        name: Argument name used in the error message
        max_value: Largest accepted value (default: uint256 max)

    Raises:
        InvalidParameterError: If the value is not a base-10 integer or out of range
    """
    if isinstance(value, bool):
        raise InvalidParameterError(f"Invalid {name}: {value!r}")
    if isinstance(value, str):
        if not (value.isascii() and value.isdigit()):
            raise InvalidParameterError(f"Invalid {name}: {value!r}")
        value = int(value)
    if not isinstance(value, int):
        raise InvalidParameterError(f"Invalid {name}: {value!r}")
    if value < 0 or value > max_value:
        raise InvalidParameterError(f"{name} out of range: {value}")
    return value


def format_usdc(amount: int) -> str:
    """Format a 6-decimal token amount as a human readable string.

    Args:
        amount: Amount in token units (e.g., 1000000 = 1 USDC)

    Returns:
        Human readable string (e.g., "1", "0.0025")
    """
    text = f"{Decimal(amount).scaleb(-TOKEN_DECIMALS):f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
