"""Exceptions raised while building and signing orders.

None of these are retried inside the SDK. Retrying an order changes its
salt and therefore its identity, so that decision belongs to the caller.
"""

from decimal import Decimal
from typing import Any


class OrderSdkError(Exception):
    """Base class for all SDK errors."""


class MissingFieldError(OrderSdkError):
    """A required option was not supplied."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Missing required field: {field}")


class InvalidParameterError(OrderSdkError, ValueError):
    """An argument is malformed or out of range."""


class UnknownTickSizeError(InvalidParameterError):
    """The tick size is not one the exchange supports."""

    def __init__(self, tick_size: Any) -> None:
        self.tick_size = tick_size
        super().__init__(f"Invalid tick_size: {tick_size}")


class ConfigError(OrderSdkError):
    """Contract configuration is missing or malformed."""


class InsufficientLiquidityError(OrderSdkError):
    """The order book cannot fill the requested size."""

    def __init__(self, shares_to_match: Decimal) -> None:
        self.shares_to_match = shares_to_match
        super().__init__(
            f"Not enough liquidity to create market order with amount {shares_to_match}"
        )


class SigningError(OrderSdkError):
    """The signer could not produce a usable signature."""


__all__ = [
    "OrderSdkError",
    "MissingFieldError",
    "InvalidParameterError",
    "UnknownTickSizeError",
    "ConfigError",
    "InsufficientLiquidityError",
    "SigningError",
]
