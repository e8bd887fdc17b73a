"""Order signing for the Polymarket CTF exchange.

Orders are signed as EIP-712 typed data bound to the chain ID and the
exchange contract. Key custody is pluggable through the TypedDataSigner
protocol:
- LocalAccountSigner (eth_account private key)
- RemoteTypedDataSigner (hardware wallet, signing service, Privy, etc.)
"""

import logging
import os
from typing import Any, Callable, Dict, Protocol, TypedDict, Union

from eth_abi import encode
from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_utils import is_address, keccak, to_checksum_address

from ..errors import ConfigError, InvalidParameterError, SigningError
from .types import ORDER_TYPES, Order, SignedOrderRequest

logger = logging.getLogger(__name__)

DOMAIN_NAME = "Polymarket CTF Exchange"
DOMAIN_VERSION = "1"

PRIVATE_KEY_ENV = "POLYMARKET_PRIVATE_KEY"

EIP712_DOMAIN_TYPE = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

DOMAIN_TYPEHASH = keccak(
    text="EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
)
ORDER_TYPEHASH = keccak(
    text=(
        "Order(uint256 salt,address maker,address signer,address taker,"
        "uint256 tokenId,uint256 makerAmount,uint256 takerAmount,"
        "uint256 expiration,uint256 nonce,uint256 feeRateBps,"
        "uint8 side,uint8 signatureType)"
    )
)

_SIGNATURE_HEX_LENGTH = 130  # r, s, v


class EIP712Domain(TypedDict):
    """EIP-712 domain separator."""

    name: str
    version: str
    chainId: int
    verifyingContract: str


class TypedDataSigner(Protocol):
    """Protocol for signers that can sign EIP-712 typed data."""

    def address(self) -> str:
        """Get the signer's address."""
        ...

    def sign_typed_data(self, params: Dict[str, Any]) -> str:
        """Sign EIP-712 typed data.

        Args:
            params: Dict with domain, types, primaryType, and message

        Returns:
            Signature as hex string
        """
        ...


class LocalAccountSigner:
    """Signs with a private key held in process."""

    def __init__(self, private_key: str):
        """
        Args:
            private_key: Private key (hex string with or without 0x prefix)

        Raises:
            SigningError: If the key is malformed
        """
        try:
            self._account = Account.from_key(private_key)
        except Exception as e:
            raise SigningError("Invalid private key") from e

    @classmethod
    def from_env(cls, env_var: str = PRIVATE_KEY_ENV) -> "LocalAccountSigner":
        """Create a signer from a private key in the environment.

        Raises:
            ConfigError: If the variable is not set
        """
        private_key = os.environ.get(env_var)
        if not private_key:
            raise ConfigError(f"Environment variable {env_var} is not set")
        return cls(private_key)

    def address(self) -> str:
        return self._account.address

    def sign_typed_data(self, params: Dict[str, Any]) -> str:
        signed_message = self._account.sign_typed_data(
            domain_data=params["domain"],
            message_types=params["types"],
            message_data=params["message"],
        )
        return "0x" + bytes(signed_message.signature).hex()

    def __repr__(self) -> str:
        return f"LocalAccountSigner(address={self._account.address})"


class RemoteTypedDataSigner:
    """Delegates signing to a callable, e.g. a hardware wallet or signing API.

    The callable receives the same ``params`` dict as
    :meth:`TypedDataSigner.sign_typed_data`. Its exceptions are not caught.
    """

    def __init__(self, address: str, sign_fn: Callable[[Dict[str, Any]], str]):
        if not is_address(address):
            raise InvalidParameterError(f"Invalid signer address: {address}")
        self._address = to_checksum_address(address)
        self._sign_fn = sign_fn

    def address(self) -> str:
        return self._address

    def sign_typed_data(self, params: Dict[str, Any]) -> str:
        return self._sign_fn(params)

    def __repr__(self) -> str:
        return f"RemoteTypedDataSigner(address={self._address})"


def create_eip712_domain(exchange_address: str, chain_id: int) -> EIP712Domain:
    """Create EIP-712 domain for the exchange contract.

    Args:
        exchange_address: Address of the exchange contract
        chain_id: Chain ID (137 for Polygon)

    Returns:
        EIP-712 domain dictionary

    Raises:
        ConfigError: If exchange address is invalid
    """
    if not isinstance(exchange_address, str) or not is_address(exchange_address):
        raise ConfigError(f"Invalid exchange address: {exchange_address}")

    return {
        "name": DOMAIN_NAME,
        "version": DOMAIN_VERSION,
        "chainId": chain_id,
        "verifyingContract": to_checksum_address(exchange_address),
    }


def _order_typed_data(order: Order, domain: EIP712Domain) -> Dict[str, Any]:
    return {
        "domain": domain,
        "types": ORDER_TYPES,
        "primaryType": "Order",
        "message": order.to_message(),
    }


def _strip_hex_prefix(value: str) -> str:
    return value[2:] if value[:2].lower() == "0x" else value


def _normalize_signature(signature: Union[str, bytes]) -> str:
    if isinstance(signature, (bytes, bytearray)):
        signature = bytes(signature).hex()
    if not isinstance(signature, str):
        raise SigningError(f"Signer returned {type(signature).__name__}, expected hex string")

    body = _strip_hex_prefix(signature)
    try:
        bytes.fromhex(body)
    except ValueError:
        raise SigningError("Signer returned a non-hex signature") from None
    if len(body) != _SIGNATURE_HEX_LENGTH:
        raise SigningError(
            f"Signer returned a {len(body) // 2}-byte signature, expected 65 bytes"
        )
    return "0x" + body.lower()


def sign_order(
    signer: TypedDataSigner,
    order: Order,
    chain_id: int,
    exchange_address: str,
) -> str:
    """Sign an order with EIP-712 using any compatible signer.

    Exceptions raised by the signer propagate unchanged; nothing is retried.

    Args:
        signer: Signer that implements TypedDataSigner protocol
        order: Canonical order to sign
        chain_id: Chain ID
        exchange_address: Exchange contract the order is bound to

    Returns:
        Signature as 0x-prefixed hex string

    Raises:
        ConfigError: If exchange address is invalid
        SigningError: If the signer returns something that is not a signature
    """
    domain = create_eip712_domain(exchange_address, chain_id)
    logger.debug(
        "Signing order salt=%s token_id=%s for %s on chain %s",
        order.salt,
        order.token_id,
        domain["verifyingContract"],
        chain_id,
    )
    signature = signer.sign_typed_data(_order_typed_data(order, domain))
    return _normalize_signature(signature)


def domain_separator(exchange_address: str, chain_id: int) -> bytes:
    """EIP-712 domain separator of the exchange contract."""
    domain = create_eip712_domain(exchange_address, chain_id)
    return keccak(
        encode(
            ["bytes32", "bytes32", "bytes32", "uint256", "address"],
            [
                DOMAIN_TYPEHASH,
                keccak(text=domain["name"]),
                keccak(text=domain["version"]),
                domain["chainId"],
                domain["verifyingContract"],
            ],
        )
    )


def order_struct_hash(order: Order) -> bytes:
    """EIP-712 struct hash of an order."""
    return keccak(
        encode(
            [
                "bytes32",
                "uint256",
                "address",
                "address",
                "address",
                "uint256",
                "uint256",
                "uint256",
                "uint256",
                "uint256",
                "uint256",
                "uint8",
                "uint8",
            ],
            [
                ORDER_TYPEHASH,
                order.salt,
                to_checksum_address(order.maker),
                to_checksum_address(order.signer),
                to_checksum_address(order.taker),
                order.token_id,
                order.maker_amount,
                order.taker_amount,
                order.expiration,
                order.nonce,
                order.fee_rate_bps,
                int(order.side),
                int(order.signature_type),
            ],
        )
    )


def hash_order(order: Order, chain_id: int, exchange_address: str) -> str:
    """Compute the order hash the exchange contract signs and tracks.

    Returns:
        bytes32 hex string
    """
    digest = keccak(
        b"\x19\x01"
        + domain_separator(exchange_address, chain_id)
        + order_struct_hash(order)
    )
    return "0x" + digest.hex()


def verify_order_signature(
    signed_order: SignedOrderRequest,
    chain_id: int,
    exchange_address: str,
    expected_signer: str,
) -> bool:
    """Verify an order signature locally (for EOA signatures).

    Note: The recovered key is the order's signer, which for proxy and
    Safe orders differs from the maker. Contract-wallet signatures
    (EIP-1271) can only be checked on-chain.

    Args:
        signed_order: Signed order request
        chain_id: Chain ID
        exchange_address: Exchange contract the order is bound to
        expected_signer: Expected signer address

    Returns:
        True if signature is valid and from expected signer
    """
    domain = create_eip712_domain(exchange_address, chain_id)
    typed_data = _order_typed_data(signed_order.to_order(), domain)
    typed_data["types"] = {"EIP712Domain": EIP712_DOMAIN_TYPE, **ORDER_TYPES}

    signature = signed_order.signature
    try:
        signable_message = encode_typed_data(full_message=typed_data)
        recovered = Account.recover_message(
            signable_message,
            signature=bytes.fromhex(
                _strip_hex_prefix(signature)
            ),
        )
    except Exception:
        return False
    return recovered.lower() == expected_signer.lower()


__all__ = [
    "DOMAIN_NAME",
    "DOMAIN_VERSION",
    "EIP712Domain",
    "TypedDataSigner",
    "LocalAccountSigner",
    "RemoteTypedDataSigner",
    "create_eip712_domain",
    "sign_order",
    "domain_separator",
    "order_struct_hash",
    "hash_order",
    "verify_order_signature",
]
