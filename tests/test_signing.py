"""Tests for EIP-712 order signing."""

import dataclasses

import pytest
from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_utils import keccak

from polymarket_order_sdk.contracts import (
    AMOY_CHAIN_ID,
    CONTRACT_CONFIG,
    POLYGON_CHAIN_ID,
    get_contract_config,
)
from polymarket_order_sdk.errors import ConfigError, SigningError
from polymarket_order_sdk.orders import (
    ORDER_TYPES,
    ZERO_ADDRESS,
    LocalAccountSigner,
    Order,
    Side,
    SignatureType,
    SignedOrderRequest,
    create_eip712_domain,
    hash_order,
    sign_order,
    verify_order_signature,
)
from polymarket_order_sdk.orders.signing import (
    EIP712_DOMAIN_TYPE,
    domain_separator,
    order_struct_hash,
)


# Test wallet (DO NOT use in production)
TEST_PRIVATE_KEY = "0x" + "ab" * 32  # Deterministic test key
TEST_ACCOUNT = Account.from_key(TEST_PRIVATE_KEY)
TEST_ADDRESS = TEST_ACCOUNT.address

EXCHANGE = get_contract_config(POLYGON_CHAIN_ID, False).exchange


def make_order(**overrides) -> Order:
    fields = dict(
        salt=123456789,
        maker=TEST_ADDRESS,
        signer=TEST_ADDRESS,
        taker=ZERO_ADDRESS,
        token_id=1234567890,
        maker_amount=5_500_000,
        taker_amount=10_000_000,
        expiration=0,
        nonce=0,
        fee_rate_bps=0,
        side=Side.BUY,
        signature_type=SignatureType.EOA,
    )
    fields.update(overrides)
    return Order(**fields)


class TestDomain:
    """Tests for the EIP-712 domain."""

    def test_create_eip712_domain(self):
        """Test domain fields for the exchange."""
        domain = create_eip712_domain(EXCHANGE.lower(), POLYGON_CHAIN_ID)

        assert domain["name"] == "Polymarket CTF Exchange"
        assert domain["version"] == "1"
        assert domain["chainId"] == 137
        assert domain["verifyingContract"].lower() == EXCHANGE.lower()
        assert domain["verifyingContract"] != EXCHANGE.lower()  # checksummed

    def test_invalid_exchange_address(self):
        """Test that a malformed exchange address raises ConfigError."""
        with pytest.raises(ConfigError, match="Invalid exchange address"):
            create_eip712_domain("invalid", POLYGON_CHAIN_ID)


class TestContracts:
    """Tests for the contract registry."""

    def test_every_entry_is_valid(self):
        """Test all registry entries hold usable exchange addresses."""
        for (chain_id, _neg_risk), config in CONTRACT_CONFIG.items():
            domain = create_eip712_domain(config.exchange, chain_id)
            assert domain["chainId"] in (POLYGON_CHAIN_ID, AMOY_CHAIN_ID)

    def test_neg_risk_has_its_own_exchange(self):
        """Test neg-risk markets use a different exchange contract."""
        assert (
            get_contract_config(POLYGON_CHAIN_ID, True).exchange
            != get_contract_config(POLYGON_CHAIN_ID, False).exchange
        )

    def test_unknown_chain(self):
        """Test that unknown chains raise ConfigError."""
        with pytest.raises(ConfigError, match="No contract configuration"):
            get_contract_config(1, False)


class TestSignOrder:
    """Tests for order signing and verification."""

    def test_sign_and_verify(self):
        """Test a locally signed order verifies."""
        order = make_order()
        signature = sign_order(
            LocalAccountSigner(TEST_PRIVATE_KEY), order, POLYGON_CHAIN_ID, EXCHANGE
        )
        signed = SignedOrderRequest.from_order(order, signature)

        assert verify_order_signature(signed, POLYGON_CHAIN_ID, EXCHANGE, TEST_ADDRESS) is True

        # Verify with wrong signer
        wrong_address = Account.create().address
        assert verify_order_signature(signed, POLYGON_CHAIN_ID, EXCHANGE, wrong_address) is False

    def test_tampered_order_fails_verification(self):
        """Test changing any signed field breaks the signature."""
        order = make_order()
        signature = sign_order(
            LocalAccountSigner(TEST_PRIVATE_KEY), order, POLYGON_CHAIN_ID, EXCHANGE
        )
        signed = SignedOrderRequest.from_order(order, signature)
        tampered = dataclasses.replace(signed, maker_amount="5500001")

        assert verify_order_signature(tampered, POLYGON_CHAIN_ID, EXCHANGE, TEST_ADDRESS) is False

    def test_wrong_chain_fails_verification(self):
        """Test signatures are bound to the chain ID."""
        order = make_order()
        signature = sign_order(
            LocalAccountSigner(TEST_PRIVATE_KEY), order, POLYGON_CHAIN_ID, EXCHANGE
        )
        signed = SignedOrderRequest.from_order(order, signature)

        assert verify_order_signature(signed, AMOY_CHAIN_ID, EXCHANGE, TEST_ADDRESS) is False

    def test_deterministic_for_fixed_salt(self):
        """Test the same canonical order always signs the same way."""
        signer = LocalAccountSigner(TEST_PRIVATE_KEY)
        order = make_order()

        first = sign_order(signer, order, POLYGON_CHAIN_ID, EXCHANGE)
        second = sign_order(signer, order, POLYGON_CHAIN_ID, EXCHANGE)

        assert first == second

    def test_bytes_signature_accepted(self):
        """Test a signer returning raw bytes is normalized to hex."""

        class BytesSigner:
            def address(self):
                return TEST_ADDRESS

            def sign_typed_data(self, params):
                return bytes.fromhex(LocalAccountSigner(TEST_PRIVATE_KEY).sign_typed_data(params)[2:])

        signature = sign_order(BytesSigner(), make_order(), POLYGON_CHAIN_ID, EXCHANGE)

        assert signature.startswith("0x")
        assert len(signature) == 132

    def test_uppercase_prefix_accepted(self):
        """Test a signer returning an uppercase 0X prefix is normalized."""

        class UpperCaseSigner:
            def address(self):
                return TEST_ADDRESS

            def sign_typed_data(self, params):
                signature = LocalAccountSigner(TEST_PRIVATE_KEY).sign_typed_data(params)
                return "0X" + signature[2:].upper()

        order = make_order()
        signature = sign_order(UpperCaseSigner(), order, POLYGON_CHAIN_ID, EXCHANGE)
        expected = sign_order(
            LocalAccountSigner(TEST_PRIVATE_KEY), order, POLYGON_CHAIN_ID, EXCHANGE
        )

        assert signature == expected

    def test_verify_uppercase_prefix(self):
        """Test verification accepts an uppercase 0X prefix."""
        order = make_order()
        signature = sign_order(
            LocalAccountSigner(TEST_PRIVATE_KEY), order, POLYGON_CHAIN_ID, EXCHANGE
        )
        signed = SignedOrderRequest.from_order(order, "0X" + signature[2:])

        assert verify_order_signature(signed, POLYGON_CHAIN_ID, EXCHANGE, TEST_ADDRESS) is True

    def test_short_signature(self):
        """Test a truncated signature raises SigningError."""

        class ShortSigner:
            def address(self):
                return TEST_ADDRESS

            def sign_typed_data(self, params):
                return "0x" + "ab" * 10

        with pytest.raises(SigningError, match="65 bytes"):
            sign_order(ShortSigner(), make_order(), POLYGON_CHAIN_ID, EXCHANGE)


class TestOrderHash:
    """Tests for the on-chain order hash."""

    def test_matches_eth_account_encoding(self):
        """Test the eth_abi digest matches eth_account's typed data encoding."""
        order = make_order(side=Side.SELL, nonce=5, fee_rate_bps=10)
        signable = encode_typed_data(
            full_message={
                "types": {"EIP712Domain": EIP712_DOMAIN_TYPE, **ORDER_TYPES},
                "primaryType": "Order",
                "domain": create_eip712_domain(EXCHANGE, POLYGON_CHAIN_ID),
                "message": order.to_message(),
            }
        )

        assert signable.header == domain_separator(EXCHANGE, POLYGON_CHAIN_ID)
        assert signable.body == order_struct_hash(order)

        expected = keccak(b"\x19\x01" + signable.header + signable.body)
        assert hash_order(order, POLYGON_CHAIN_ID, EXCHANGE) == "0x" + expected.hex()

    def test_salt_changes_hash(self):
        """Test orders differing only in salt hash differently."""
        assert hash_order(make_order(salt=1), POLYGON_CHAIN_ID, EXCHANGE) != hash_order(
            make_order(salt=2), POLYGON_CHAIN_ID, EXCHANGE
        )


class TestLocalAccountSigner:
    """Tests for the private key signer."""

    def test_address(self):
        """Test the signer exposes its checksum address."""
        assert LocalAccountSigner(TEST_PRIVATE_KEY).address() == TEST_ADDRESS

    def test_key_without_prefix(self):
        """Test keys are accepted without the 0x prefix."""
        assert LocalAccountSigner(TEST_PRIVATE_KEY[2:]).address() == TEST_ADDRESS

    def test_invalid_key(self):
        """Test that malformed keys raise SigningError."""
        with pytest.raises(SigningError, match="Invalid private key"):
            LocalAccountSigner("0x1234")

    def test_repr_hides_key(self):
        """Test the key never appears in the repr."""
        assert TEST_PRIVATE_KEY[2:] not in repr(LocalAccountSigner(TEST_PRIVATE_KEY))

    def test_from_env(self, monkeypatch):
        """Test loading the key from the environment."""
        monkeypatch.setenv("POLYMARKET_PRIVATE_KEY", TEST_PRIVATE_KEY)

        assert LocalAccountSigner.from_env().address() == TEST_ADDRESS

    def test_from_env_missing(self, monkeypatch):
        """Test a missing variable raises ConfigError."""
        monkeypatch.delenv("POLYMARKET_PRIVATE_KEY", raising=False)

        with pytest.raises(ConfigError, match="POLYMARKET_PRIVATE_KEY"):
            LocalAccountSigner.from_env()
