"""Order types for the Polymarket CTF exchange.

User-facing arguments, the canonical pre-signature order, and the signed
request handed to a submission layer.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Any, Dict, List, Mapping, Optional, Union

from ..errors import InvalidParameterError
from .utils import ZERO_ADDRESS, DecimalLike, to_decimal


class Side(IntEnum):
    """Order side, with the numeric code signed into the order."""

    BUY = 0
    SELL = 1

    @classmethod
    def from_value(cls, value: Union["Side", str, int]) -> "Side":
        """Accept a Side, "buy"/"BUY", or the numeric code."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidParameterError(f"Invalid side: {value!r}")
        if isinstance(value, str):
            try:
                return cls[value.upper()]
            except KeyError:
                raise InvalidParameterError(f"Invalid side: {value!r}") from None
        try:
            return cls(value)
        except ValueError:
            raise InvalidParameterError(f"Invalid side: {value!r}") from None


class SignatureType(IntEnum):
    """How the exchange validates the order signature."""

    EOA = 0
    """Externally owned account signs for itself."""

    POLY_PROXY = 1
    """Key signs for a Polymarket proxy wallet."""

    POLY_GNOSIS_SAFE = 2
    """Key signs for a Gnosis Safe."""


class OrderType(str, Enum):
    """Time-in-force for a posted order."""

    GTC = "GTC"
    FOK = "FOK"
    GTD = "GTD"
    FAK = "FAK"


@dataclass(frozen=True)
class PriceLevel:
    """One rung of an order book."""

    price: Decimal
    size: Decimal

    def __post_init__(self) -> None:
        if self.price < 0:
            raise InvalidParameterError(f"price must be non-negative, got {self.price}")
        if self.size < 0:
            raise InvalidParameterError(f"size must be non-negative, got {self.size}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PriceLevel":
        """Build from the wire shape ``{"price": "0.5", "size": "10"}``."""
        return cls(
            price=to_decimal(data["price"], "price"),
            size=to_decimal(data["size"], "size"),
        )


@dataclass
class OrderBookSummary:
    """Order book snapshot for one token."""

    market: str
    asset_id: str
    bids: List[PriceLevel] = field(default_factory=list)
    asks: List[PriceLevel] = field(default_factory=list)
    hash: Optional[str] = None
    timestamp: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OrderBookSummary":
        """Build from a REST book snapshot."""
        timestamp = data.get("timestamp")
        return cls(
            market=data["market"],
            asset_id=data["asset_id"],
            bids=[PriceLevel.from_dict(level) for level in data.get("bids", [])],
            asks=[PriceLevel.from_dict(level) for level in data.get("asks", [])],
            hash=data.get("hash"),
            timestamp=int(timestamp) if timestamp is not None else None,
        )

    def calculate_market_price(
        self, side: Union[Side, str], shares_to_match: DecimalLike
    ) -> Decimal:
        """Volume-weighted price to fill ``shares_to_match`` on this book.

        Buys walk the asks, sells walk the bids.
        """
        from .price import calculate_market_price

        side = Side.from_value(side)
        levels = self.asks if side == Side.BUY else self.bids
        return calculate_market_price(levels, shares_to_match, side)


@dataclass
class OrderArgs:
    """Arguments for a limit order."""

    token_id: str
    """Conditional token ID (decimal string)."""

    price: DecimalLike
    """Price per share, 0 to 1."""

    size: DecimalLike
    """Number of shares."""

    side: Side


@dataclass
class MarketOrderArgs:
    """Arguments for a market order."""

    token_id: str
    """Conditional token ID (decimal string)."""

    amount: DecimalLike
    """Number of shares to match."""

    side: Side


@dataclass
class ExtraOrderArgs:
    """Optional order fields with their exchange defaults."""

    fee_rate_bps: int = 0
    nonce: int = 0
    """Caller-managed replay protection; never generated by the SDK."""

    taker: str = ZERO_ADDRESS
    """Zero address leaves the order open to any taker."""


@dataclass
class CreateOrderOptions:
    """Market metadata required to build an order.

    Both fields must come from live market data; they have no defaults on
    purpose, so a stale tick size cannot silently corrupt an order.
    """

    tick_size: Optional[DecimalLike] = None
    neg_risk: Optional[bool] = None


@dataclass(frozen=True)
class Order:
    """Canonical order as signed under EIP-712."""

    salt: int
    maker: str
    signer: str
    taker: str
    token_id: int
    maker_amount: int
    taker_amount: int
    expiration: int
    nonce: int
    fee_rate_bps: int
    side: Side
    signature_type: SignatureType

    def to_message(self) -> Dict[str, Any]:
        """EIP-712 message for the ``Order`` primary type."""
        return {
            "salt": self.salt,
            "maker": self.maker,
            "signer": self.signer,
            "taker": self.taker,
            "tokenId": self.token_id,
            "makerAmount": self.maker_amount,
            "takerAmount": self.taker_amount,
            "expiration": self.expiration,
            "nonce": self.nonce,
            "feeRateBps": self.fee_rate_bps,
            "side": int(self.side),
            "signatureType": int(self.signature_type),
        }


@dataclass(frozen=True)
class SignedOrderRequest:
    """Signed order ready for submission. Never mutated after creation."""

    salt: str
    maker: str
    signer: str
    taker: str
    token_id: str
    maker_amount: str
    taker_amount: str
    expiration: str
    nonce: str
    fee_rate_bps: str
    side: str
    """Either "BUY" or "SELL"."""

    signature_type: int
    signature: str
    """EIP-712 signature (65 bytes packed hex string)."""

    @classmethod
    def from_order(cls, order: Order, signature: str) -> "SignedOrderRequest":
        return cls(
            salt=str(order.salt),
            maker=order.maker,
            signer=order.signer,
            taker=order.taker,
            token_id=str(order.token_id),
            maker_amount=str(order.maker_amount),
            taker_amount=str(order.taker_amount),
            expiration=str(order.expiration),
            nonce=str(order.nonce),
            fee_rate_bps=str(order.fee_rate_bps),
            side=order.side.name,
            signature_type=int(order.signature_type),
            signature=signature,
        )

    def to_order(self) -> Order:
        """Rebuild the canonical order, e.g. to verify the signature."""
        return Order(
            salt=int(self.salt),
            maker=self.maker,
            signer=self.signer,
            taker=self.taker,
            token_id=int(self.token_id),
            maker_amount=int(self.maker_amount),
            taker_amount=int(self.taker_amount),
            expiration=int(self.expiration),
            nonce=int(self.nonce),
            fee_rate_bps=int(self.fee_rate_bps),
            side=Side[self.side],
            signature_type=SignatureType(self.signature_type),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Payload in the field casing the order endpoint expects."""
        return {
            "salt": self.salt,
            "maker": self.maker,
            "signer": self.signer,
            "taker": self.taker,
            "tokenId": self.token_id,
            "makerAmount": self.maker_amount,
            "takerAmount": self.taker_amount,
            "expiration": self.expiration,
            "nonce": self.nonce,
            "feeRateBps": self.fee_rate_bps,
            "side": self.side,
            "signatureType": self.signature_type,
            "signature": self.signature,
        }


@dataclass(frozen=True)
class PostOrder:
    """Body for posting one signed order."""

    order: SignedOrderRequest
    owner: str
    """API key of the order owner."""

    order_type: OrderType = OrderType.GTC

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order": self.order.to_dict(),
            "owner": self.owner,
            "orderType": self.order_type.value,
        }


# EIP-712 types for the CTF exchange order
ORDER_TYPES = {
    "Order": [
        {"name": "salt", "type": "uint256"},
        {"name": "maker", "type": "address"},
        {"name": "signer", "type": "address"},
        {"name": "taker", "type": "address"},
        {"name": "tokenId", "type": "uint256"},
        {"name": "makerAmount", "type": "uint256"},
        {"name": "takerAmount", "type": "uint256"},
        {"name": "expiration", "type": "uint256"},
        {"name": "nonce", "type": "uint256"},
        {"name": "feeRateBps", "type": "uint256"},
        {"name": "side", "type": "uint8"},
        {"name": "signatureType", "type": "uint8"},
    ],
}
