"""Polymarket order SDK.

Builds, prices and signs orders for the Polymarket CTF exchange. Transport
is left to the caller: the SDK takes market metadata and order book
snapshots as input and returns signed order payloads.
"""

import logging

from .contracts import ContractConfig, get_contract_config
from .errors import (
    OrderSdkError,
    MissingFieldError,
    InvalidParameterError,
    UnknownTickSizeError,
    ConfigError,
    InsufficientLiquidityError,
    SigningError,
)
from .orders import (
    Side,
    SignatureType,
    OrderType,
    PriceLevel,
    OrderBookSummary,
    OrderArgs,
    MarketOrderArgs,
    ExtraOrderArgs,
    CreateOrderOptions,
    SignedOrderRequest,
    PostOrder,
    OrderBuilder,
    LocalAccountSigner,
    RemoteTypedDataSigner,
    TypedDataSigner,
    calculate_market_price,
    hash_order,
    verify_order_signature,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "ContractConfig",
    "get_contract_config",
    "OrderSdkError",
    "MissingFieldError",
    "InvalidParameterError",
    "UnknownTickSizeError",
    "ConfigError",
    "InsufficientLiquidityError",
    "SigningError",
    "Side",
    "SignatureType",
    "OrderType",
    "PriceLevel",
    "OrderBookSummary",
    "OrderArgs",
    "MarketOrderArgs",
    "ExtraOrderArgs",
    "CreateOrderOptions",
    "SignedOrderRequest",
    "PostOrder",
    "OrderBuilder",
    "LocalAccountSigner",
    "RemoteTypedDataSigner",
    "TypedDataSigner",
    "calculate_market_price",
    "hash_order",
    "verify_order_signature",
]
