"""Polymarket CTF Exchange Orders Module.

This module builds and signs orders for the Polymarket CTF exchange.

Key components:
- Tick size rounding table and maker/taker amount scaling
- Market price calculation from order book depth
- Order assembly and signing (EIP-712)

Example usage:
    ```python
    from decimal import Decimal
    from polymarket_order_sdk.orders import (
        OrderBuilder,
        LocalAccountSigner,
        MarketOrderArgs,
        CreateOrderOptions,
        OrderBookSummary,
        Side,
    )

    builder = OrderBuilder(LocalAccountSigner("0x..."))

    # book fetched by the caller from the /book endpoint
    book = OrderBookSummary.from_dict(book_json)
    price = book.calculate_market_price(Side.BUY, Decimal("25"))

    signed = builder.create_market_order(
        137,
        MarketOrderArgs(token_id=book.asset_id, amount=Decimal("25"), side=Side.BUY),
        price,
        options=CreateOrderOptions(tick_size=Decimal("0.01"), neg_risk=False),
    )
    ```
"""

from .types import (
    Side,
    SignatureType,
    OrderType,
    PriceLevel,
    OrderBookSummary,
    OrderArgs,
    MarketOrderArgs,
    ExtraOrderArgs,
    CreateOrderOptions,
    Order,
    SignedOrderRequest,
    PostOrder,
    ORDER_TYPES,
)
from .rounding import (
    RoundConfig,
    ROUNDING_CONFIG,
    get_round_config,
    round_normal,
    round_down,
    fix_amount_rounding,
    to_token_decimals,
)
from .amounts import OrderAmounts, get_order_amounts, get_market_order_amounts
from .price import calculate_market_price
from .signing import (
    EIP712Domain,
    TypedDataSigner,
    LocalAccountSigner,
    RemoteTypedDataSigner,
    create_eip712_domain,
    sign_order,
    hash_order,
    verify_order_signature,
)
from .builder import (
    OrderBuilder,
    OrderBuilderConfig,
    ResolvedOrderBuilderConfig,
    generate_salt,
)
from .utils import ZERO_ADDRESS, TOKEN_DECIMALS, format_usdc

__all__ = [
    # Types
    "Side",
    "SignatureType",
    "OrderType",
    "PriceLevel",
    "OrderBookSummary",
    "OrderArgs",
    "MarketOrderArgs",
    "ExtraOrderArgs",
    "CreateOrderOptions",
    "Order",
    "SignedOrderRequest",
    "PostOrder",
    "ORDER_TYPES",
    # Rounding
    "RoundConfig",
    "ROUNDING_CONFIG",
    "get_round_config",
    "round_normal",
    "round_down",
    "fix_amount_rounding",
    "to_token_decimals",
    # Amounts
    "OrderAmounts",
    "get_order_amounts",
    "get_market_order_amounts",
    # Price
    "calculate_market_price",
    # Signing
    "EIP712Domain",
    "TypedDataSigner",
    "LocalAccountSigner",
    "RemoteTypedDataSigner",
    "create_eip712_domain",
    "sign_order",
    "hash_order",
    "verify_order_signature",
    # Builder
    "OrderBuilder",
    "OrderBuilderConfig",
    "ResolvedOrderBuilderConfig",
    "generate_salt",
    # Utils
    "ZERO_ADDRESS",
    "TOKEN_DECIMALS",
    "format_usdc",
]
