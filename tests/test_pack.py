"""
zkLink Amount Packing Tests

Tests for:
- Token amount layout (5-bit exponent, 35-bit mantissa)
- Fee layout (5-bit exponent, 11-bit mantissa)
- Packability predicate and boundaries
- Closest packable helpers
- Packability validators

Run with:
    pytest tests/test_pack.py -v
"""

import pytest

from zklink_sdk.exceptions import SizeMismatch, UnpackableAmount
from zklink_sdk.types.pack import (
    FEE_AMOUNT_LAYOUT,
    TOKEN_AMOUNT_LAYOUT,
    closest_packable_fee_amount,
    closest_packable_token_amount,
    is_fee_amount_packable,
    is_token_amount_packable,
    pack_fee_amount,
    pack_token_amount,
    unpack_fee_amount,
    unpack_token_amount,
)

TOKEN_MAX = (2 ** 35 - 1) * 10 ** 31
FEE_MAX = (2 ** 11 - 1) * 10 ** 31


class TestLayouts:
    """Field widths are part of the wire format."""

    def test_token_layout(self):
        assert TOKEN_AMOUNT_LAYOUT.byte_len == 5
        assert TOKEN_AMOUNT_LAYOUT.max_value == TOKEN_MAX

    def test_fee_layout(self):
        assert FEE_AMOUNT_LAYOUT.byte_len == 2
        assert FEE_AMOUNT_LAYOUT.max_value == FEE_MAX


class TestTokenAmount:

    def test_zero_packs_to_zero_bytes(self):
        assert pack_token_amount(0) == b"\x00" * 5

    def test_small_amount_uses_zero_exponent(self):
        # 10000 << 5 | 0
        assert pack_token_amount(10000) == bytes([0, 0, 4, 226, 0])

    def test_large_amount_round_trip(self):
        amount = 10 ** 18
        assert unpack_token_amount(pack_token_amount(amount)) == amount
        assert is_token_amount_packable(amount)

    @pytest.mark.parametrize("amount", [1, 999, 34359738367, 1234500000000, 7 * 10 ** 30])
    def test_packable_round_trip(self, amount):
        assert is_token_amount_packable(amount)
        assert unpack_token_amount(pack_token_amount(amount)) == amount

    def test_lossy_amount_not_packable(self):
        amount = 2 ** 35 + 1
        assert not is_token_amount_packable(amount)
        assert unpack_token_amount(pack_token_amount(amount)) < amount

    def test_max_is_packable(self):
        assert is_token_amount_packable(TOKEN_MAX)
        assert unpack_token_amount(pack_token_amount(TOKEN_MAX)) == TOKEN_MAX

    def test_max_plus_one_unpackable(self):
        assert not is_token_amount_packable(TOKEN_MAX + 1)
        with pytest.raises(UnpackableAmount):
            pack_token_amount(TOKEN_MAX + 1)

    def test_negative_unpackable(self):
        with pytest.raises(UnpackableAmount):
            pack_token_amount(-1)

    def test_unpack_wrong_length(self):
        with pytest.raises(SizeMismatch):
            unpack_token_amount(b"\x00" * 4)

    def test_closest_packable_rounds_down(self):
        amount = 2 ** 35 + 7
        closest = closest_packable_token_amount(amount)
        assert closest <= amount
        assert is_token_amount_packable(closest)

    def test_closest_packable_caps_at_max(self):
        assert closest_packable_token_amount(TOKEN_MAX * 10) == TOKEN_MAX


class TestFeeAmount:

    def test_fee_three(self):
        assert pack_fee_amount(3) == bytes([0, 96])

    def test_fee_round_trip(self):
        for fee in (0, 1, 2047, 20470, 100 * 10 ** 15):
            assert is_fee_amount_packable(fee)
            assert unpack_fee_amount(pack_fee_amount(fee)) == fee

    def test_fee_max_boundary(self):
        assert is_fee_amount_packable(FEE_MAX)
        assert not is_fee_amount_packable(FEE_MAX + 1)
        with pytest.raises(UnpackableAmount):
            pack_fee_amount(FEE_MAX + 1)

    def test_fee_lossy(self):
        assert not is_fee_amount_packable(2049)
        assert closest_packable_fee_amount(2049) == 2040


class TestPackableValidators:
    """Validators report an error only for amounts that cannot be packed."""

    def test_amount_packable(self):
        from zklink_sdk.types.validators import amount_packable
        assert amount_packable("amount", 0) is None
        assert amount_packable("amount", TOKEN_MAX) is None
        assert "not packable" in amount_packable("amount", 2 ** 35 + 1)

    def test_non_zero_amount_packable(self):
        from zklink_sdk.types.validators import non_zero_amount_packable
        assert non_zero_amount_packable("amount", 1000) is None
        assert "non-zero" in non_zero_amount_packable("amount", 0)
        assert "not packable" in non_zero_amount_packable("amount", 2 ** 35 + 1)

    def test_fee_packable(self):
        from zklink_sdk.types.validators import fee_packable
        assert fee_packable("fee", 2040) is None
        assert "not packable" in fee_packable("fee", 2049)
