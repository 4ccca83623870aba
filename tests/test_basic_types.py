"""
zkLink Basic Type Tests

Tests for:
- Scalar identifier ranges and big-endian form
- BigUint decimal parsing
- Fixed-size hex values (TxHash, H256, PubKeyHash, signatures)
- ZkLinkAddress
- Boundary conversion registry

Run with:
    pytest tests/test_basic_types.py -v
"""

import pytest

from zklink_sdk.exceptions import ParseError, RangeError, SizeMismatch
from zklink_sdk.types.basic import (
    AccountId,
    BigUint,
    ChainId,
    H256,
    PriorityOpId,
    SubAccountId,
    TokenId,
    TxHash,
    ZkLinkAddress,
    format_units,
)


class TestScalarIds:

    def test_big_endian_form(self):
        assert AccountId(10).to_be_bytes() == b"\x00\x00\x00\x0a"
        assert ChainId(1).to_be_bytes() == b"\x01"
        assert PriorityOpId(1).to_be_bytes() == b"\x00" * 7 + b"\x01"

    def test_from_be_bytes(self):
        assert AccountId.from_be_bytes(b"\x00\x00\x01\x00") == 256

    def test_from_be_bytes_wrong_length(self):
        with pytest.raises(SizeMismatch):
            AccountId.from_be_bytes(b"\x00\x01")

    def test_oversized_rejected(self):
        with pytest.raises(RangeError):
            SubAccountId(256)
        with pytest.raises(RangeError):
            AccountId(2 ** 32)

    def test_negative_rejected(self):
        with pytest.raises(RangeError):
            TokenId(-1)

    def test_bool_rejected(self):
        with pytest.raises(RangeError):
            ChainId(True)

    def test_garbage_rejected(self):
        with pytest.raises(ParseError):
            AccountId("ten")

    def test_behaves_as_int(self):
        assert AccountId(5) + 1 == 6
        assert str(AccountId(5)) == "5"


class TestBigUint:

    def test_from_decimal_string(self):
        assert BigUint("1000000000000000000") == 10 ** 18
        assert str(BigUint(10 ** 30)) == "1" + "0" * 30

    @pytest.mark.parametrize("raw", ["", "-1", "1.5", "0x10", " 1", "1e18"])
    def test_rejects_non_decimal(self, raw):
        with pytest.raises(ParseError):
            BigUint.from_str(raw)

    def test_negative_rejected(self):
        with pytest.raises(RangeError):
            BigUint(-5)

    def test_to_be_bytes_overflow(self):
        with pytest.raises(RangeError):
            BigUint(2 ** 128).to_be_bytes(16)

    def test_format_units(self):
        assert format_units(1500000000000000000, 18) == "1.5"
        assert format_units(10 ** 18, 18) == "1.0"
        assert format_units(42, 0) == "42"


class TestFixedBytes:

    def test_hex_round_trip(self):
        value = bytes(range(32))
        h = TxHash(value)
        assert TxHash.from_hex(h.as_hex()).as_bytes() == value
        assert h.as_hex() == "0x" + value.hex()

    def test_missing_prefix_rejected(self):
        with pytest.raises(ParseError):
            TxHash.from_hex("ab" * 32)

    def test_h256_tolerates_missing_prefix(self):
        assert H256.from_hex("ab" * 32) == H256(b"\xab" * 32)

    def test_wrong_length_rejected(self):
        with pytest.raises(SizeMismatch):
            TxHash.from_hex("0x" + "ab" * 31)
        with pytest.raises(SizeMismatch):
            TxHash(b"\x00" * 33)

    def test_bad_hex_rejected(self):
        with pytest.raises(ParseError):
            TxHash.from_hex("0x" + "zz" * 32)

    def test_types_do_not_compare_equal(self):
        assert TxHash(b"\x01" * 32) != H256(b"\x01" * 32)


class TestZkLinkAddress:

    def test_eth_address(self):
        address = ZkLinkAddress.from_str("0xAFAFf3aD1a0425D792432D9eCD1c3e26Ef2C42E9")
        assert len(address.as_bytes()) == 20
        assert str(address) == "0xafaff3ad1a0425d792432d9ecd1c3e26ef2c42e9"
        assert address.to_fixed_bytes() == b"\x00" * 12 + address.as_bytes()

    def test_checksum(self):
        raw = "0xAFAFf3aD1a0425D792432D9eCD1c3e26Ef2C42E9"
        assert ZkLinkAddress.from_str(raw.lower()).to_checksum() == raw

    def test_32_byte_address(self):
        address = ZkLinkAddress.from_str("0x" + "11" * 32)
        assert address.to_fixed_bytes() == b"\x11" * 32

    def test_padded_addresses_compare_equal(self):
        short = ZkLinkAddress(b"\x22" * 20)
        long = ZkLinkAddress(b"\x00" * 12 + b"\x22" * 20)
        assert short == long

    def test_invalid_length(self):
        with pytest.raises(SizeMismatch):
            ZkLinkAddress.from_str("0x" + "11" * 21)

    def test_zero(self):
        assert ZkLinkAddress(b"\x00" * 20).is_zero()


class TestConvert:
    """Every core type crosses the boundary through one registry."""

    def test_fixed_int(self):
        from zklink_sdk.types.convert import WireKind, from_builtin, to_builtin, wire_kind
        assert wire_kind(AccountId) is WireKind.FIXED_INT
        assert to_builtin(AccountId(7)) == 7
        assert from_builtin(AccountId, 7) == AccountId(7)

    def test_fixed_int_rejects_string(self):
        from zklink_sdk.types.convert import from_builtin
        with pytest.raises(ParseError):
            from_builtin(AccountId, "7")

    def test_fixed_int_range(self):
        from zklink_sdk.types.convert import from_builtin
        with pytest.raises(RangeError):
            from_builtin(SubAccountId, 300)

    def test_decimal_str(self):
        from zklink_sdk.types.convert import from_builtin, to_builtin
        assert to_builtin(BigUint(10 ** 20)) == "100000000000000000000"
        assert from_builtin(BigUint, "123") == 123
        with pytest.raises(ParseError):
            from_builtin(BigUint, "12a")

    def test_hex_str(self):
        from zklink_sdk.crypto.keys import ZkLinkSignature
        from zklink_sdk.types.convert import from_builtin, to_builtin
        sig = ZkLinkSignature(bytes(range(96)))
        assert from_builtin(ZkLinkSignature, to_builtin(sig)) == sig

    def test_address(self):
        from zklink_sdk.types.convert import from_builtin, to_builtin
        address = ZkLinkAddress(b"\x33" * 20)
        assert to_builtin(address) == "0x" + "33" * 20
        assert from_builtin(ZkLinkAddress, "0x" + "33" * 20) == address

    def test_unregistered_type(self):
        from zklink_sdk.types.convert import to_builtin
        with pytest.raises(TypeError):
            to_builtin(3.5)
