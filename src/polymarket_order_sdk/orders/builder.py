"""Order builder for the Polymarket CTF exchange.

Turns order intent plus live market metadata into a signed order:
1. Round price and size for the market's tick size
2. Scale them into integer maker/taker amounts
3. Resolve the exchange contract for (chain_id, neg_risk)
4. Assemble the canonical order with a fresh salt
5. Sign it (EIP-712)

Nothing here performs I/O or retries. Tick size and neg-risk flag must be
fetched by the caller from the market endpoints for every order.
"""

import logging
import random
import threading
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Tuple, TypedDict, Union

from eth_utils import is_address, to_checksum_address

from ..contracts import ContractLookup, get_contract_config
from ..errors import ConfigError, InvalidParameterError, MissingFieldError
from .amounts import OrderAmounts, get_market_order_amounts, get_order_amounts
from .price import calculate_market_price
from .rounding import RoundConfig, get_round_config
from .signing import TypedDataSigner, sign_order
from .types import (
    CreateOrderOptions,
    ExtraOrderArgs,
    MarketOrderArgs,
    Order,
    OrderArgs,
    PriceLevel,
    Side,
    SignatureType,
    SignedOrderRequest,
)
from .utils import MAX_UINT64, DecimalLike, format_usdc, to_decimal, to_uint

logger = logging.getLogger(__name__)

_salt_state = threading.local()


def _salt_rng() -> random.Random:
    rng = getattr(_salt_state, "rng", None)
    if rng is None:
        rng = random.Random()
        _salt_state.rng = rng
    return rng


def generate_salt() -> int:
    """Generate a per-order salt.

    The salt only decorrelates the hashes of otherwise identical orders;
    it is not a security nonce. Each thread draws from its own generator.

    Returns:
        Non-negative integer that fits in 64 bits
    """
    return int(time.time() * _salt_rng().random()) & MAX_UINT64


class OrderBuilderConfig(TypedDict, total=False):
    """Configuration for the order builder."""

    signature_type: SignatureType
    """Signature type. Default: SignatureType.EOA"""

    funder: str
    """Address holding the funds (proxy wallet or Safe). Default: signer address"""

    contract_lookup: ContractLookup
    """(chain_id, neg_risk) -> ContractConfig. Default: built-in registry"""


@dataclass(frozen=True)
class ResolvedOrderBuilderConfig:
    """Resolved builder configuration with all defaults applied."""

    signature_type: SignatureType
    funder: str
    signer: str
    contract_lookup: ContractLookup


class OrderBuilder:
    """Builds and signs limit and market orders.

    Instances hold only immutable configuration and can be shared across
    threads.

    Example:
        ```python
        builder = OrderBuilder(
            LocalAccountSigner(private_key),
            {"signature_type": SignatureType.POLY_GNOSIS_SAFE, "funder": safe_address},
        )

        signed = builder.create_order(
            137,
            OrderArgs(token_id="1234", price=Decimal("0.55"), size=Decimal("10"), side=Side.BUY),
            options=CreateOrderOptions(tick_size=Decimal("0.01"), neg_risk=False),
        )
        payload = signed.to_dict()
        ```
    """

    def __init__(
        self,
        signer: TypedDataSigner,
        config: Optional[OrderBuilderConfig] = None,
    ):
        """Initialize the order builder.

        Args:
            signer: Signer used for every order
            config: Optional configuration for the builder

        Raises:
            InvalidParameterError: If the signer or funder address is invalid
        """
        config = config or {}

        signer_address = signer.address()
        if not is_address(signer_address):
            raise InvalidParameterError(f"Invalid signer address: {signer_address}")

        funder = config.get("funder") or signer_address
        if not is_address(funder):
            raise InvalidParameterError(f"Invalid funder address: {funder}")

        self._signer = signer
        self._config = ResolvedOrderBuilderConfig(
            signature_type=SignatureType(
                config.get("signature_type", SignatureType.EOA)
            ),
            funder=to_checksum_address(funder),
            signer=to_checksum_address(signer_address),
            contract_lookup=config.get("contract_lookup", get_contract_config),
        )

    def get_config(self) -> ResolvedOrderBuilderConfig:
        """Get the builder configuration."""
        return self._config

    def get_sig_type(self) -> int:
        """Get the signature type as its numeric code."""
        return int(self._config.signature_type)

    def calculate_market_price(
        self,
        positions: Iterable[Union[PriceLevel, Mapping[str, Any]]],
        amount_to_match: DecimalLike,
        side: Union[Side, str],
    ) -> Decimal:
        """Weighted price for a market order; see :func:`calculate_market_price`."""
        return calculate_market_price(positions, amount_to_match, side)

    def create_order(
        self,
        chain_id: int,
        order_args: OrderArgs,
        expiration: int = 0,
        extras: Optional[ExtraOrderArgs] = None,
        options: Optional[CreateOrderOptions] = None,
    ) -> SignedOrderRequest:
        """Create and sign a limit order.

        Args:
            chain_id: Chain ID (137 for Polygon)
            order_args: Token, price, size and side
            expiration: Unix timestamp the order expires at, 0 for none
            extras: Fee rate, nonce and taker (defaults: 0, 0, open order)
            options: Tick size and neg-risk flag from live market data

        Returns:
            SignedOrderRequest

        Raises:
            MissingFieldError: If tick_size or neg_risk is missing
            InvalidParameterError: If an argument is malformed or out of range
            ConfigError: If no exchange contract is configured for the chain
        """
        tick_size, round_config, neg_risk = self._resolve_options(options)
        side = Side.from_value(order_args.side)
        price = self._checked_price(order_args.price, tick_size)

        amounts = get_order_amounts(side, order_args.size, price, round_config)
        exchange = self._exchange_address(chain_id, neg_risk)

        return self._build_signed_order(
            order_args.token_id, side, chain_id, exchange, amounts, expiration, extras
        )

    def create_market_order(
        self,
        chain_id: int,
        order_args: MarketOrderArgs,
        price: DecimalLike,
        extras: Optional[ExtraOrderArgs] = None,
        options: Optional[CreateOrderOptions] = None,
    ) -> SignedOrderRequest:
        """Create and sign a market order.

        Market orders never expire (expiration is always 0). ``price`` is
        normally the result of :meth:`calculate_market_price` on a fresh book.

        Args:
            chain_id: Chain ID (137 for Polygon)
            order_args: Token, number of shares and side
            price: Execution price
            extras: Fee rate, nonce and taker (defaults: 0, 0, open order)
            options: Tick size and neg-risk flag from live market data

        Returns:
            SignedOrderRequest

        Raises:
            MissingFieldError: If tick_size or neg_risk is missing
            InvalidParameterError: If an argument is malformed or out of range
            ConfigError: If no exchange contract is configured for the chain
        """
        tick_size, round_config, neg_risk = self._resolve_options(options)
        side = Side.from_value(order_args.side)
        price = self._checked_price(price, tick_size)

        amounts = get_market_order_amounts(side, order_args.amount, price, round_config)
        exchange = self._exchange_address(chain_id, neg_risk)

        return self._build_signed_order(
            order_args.token_id, side, chain_id, exchange, amounts, 0, extras
        )

    @staticmethod
    def _resolve_options(
        options: Optional[CreateOrderOptions],
    ) -> Tuple[Decimal, RoundConfig, bool]:
        if options is None or options.tick_size is None:
            raise MissingFieldError("tick_size")
        if options.neg_risk is None:
            raise MissingFieldError("neg_risk")
        if not isinstance(options.neg_risk, bool):
            raise InvalidParameterError(
                f"Invalid neg_risk: {options.neg_risk!r}. Must be True or False"
            )

        round_config = get_round_config(options.tick_size)
        tick_size = to_decimal(options.tick_size, "tick_size")
        return tick_size, round_config, options.neg_risk

    @staticmethod
    def _checked_price(price: DecimalLike, tick_size: Decimal) -> Decimal:
        price = to_decimal(price, "price")
        if price < tick_size or price > 1 - tick_size:
            raise InvalidParameterError(
                f"Invalid price: {price}. Must be between {tick_size} and {1 - tick_size}"
            )
        return price

    def _exchange_address(self, chain_id: int, neg_risk: bool) -> str:
        contract_config = self._config.contract_lookup(chain_id, neg_risk)
        exchange = contract_config.exchange
        if not isinstance(exchange, str) or not is_address(exchange):
            raise ConfigError(f"Invalid exchange address: {exchange}")
        return to_checksum_address(exchange)

    def _build_signed_order(
        self,
        token_id: str,
        side: Side,
        chain_id: int,
        exchange: str,
        amounts: OrderAmounts,
        expiration: int,
        extras: Optional[ExtraOrderArgs],
    ) -> SignedOrderRequest:
        extras = extras or ExtraOrderArgs()

        if not isinstance(extras.taker, str) or not is_address(extras.taker):
            raise InvalidParameterError(f"Invalid taker address: {extras.taker}")

        order = Order(
            salt=generate_salt(),
            maker=self._config.funder,
            signer=self._config.signer,
            taker=to_checksum_address(extras.taker),
            token_id=to_uint(token_id, "token_id"),
            maker_amount=amounts.maker_amount,
            taker_amount=amounts.taker_amount,
            expiration=to_uint(expiration, "expiration"),
            nonce=to_uint(extras.nonce, "nonce"),
            fee_rate_bps=to_uint(extras.fee_rate_bps, "fee_rate_bps"),
            side=side,
            signature_type=self._config.signature_type,
        )

        signature = sign_order(self._signer, order, chain_id, exchange)

        logger.debug(
            "Created %s order token_id=%s price=%s maker_amount=%s taker_amount=%s "
            "expiration=%s salt=%s",
            side.name,
            order.token_id,
            amounts.price,
            format_usdc(order.maker_amount),
            format_usdc(order.taker_amount),
            order.expiration,
            order.salt,
        )

        return SignedOrderRequest.from_order(order, signature)


__all__ = [
    "OrderBuilder",
    "OrderBuilderConfig",
    "ResolvedOrderBuilderConfig",
    "generate_salt",
]
