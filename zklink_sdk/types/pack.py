"""
Amount Packing

Token amounts and fees are transmitted as a lossy decimal float:
``mantissa * 10^exponent``, both fields of fixed bit width. The packed
integer is ``mantissa << exponent_bits | exponent`` written big-endian.

Packing rounds down. An amount is *packable* when the round trip is exact;
validators must reject unpackable amounts before a transaction is signed.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..constants import (
    AMOUNT_EXPONENT_BIT_WIDTH,
    AMOUNT_MANTISSA_BIT_WIDTH,
    FEE_EXPONENT_BIT_WIDTH,
    FEE_MANTISSA_BIT_WIDTH,
    PACKING_EXPONENT_BASE,
)
from ..exceptions import SizeMismatch, UnpackableAmount


@dataclass(frozen=True)
class FloatLayout:
    """Bit widths of a packed amount field."""
    exponent_bits: int
    mantissa_bits: int
    base: int = PACKING_EXPONENT_BASE

    @property
    def byte_len(self) -> int:
        return (self.exponent_bits + self.mantissa_bits) // 8

    @property
    def max_mantissa(self) -> int:
        return (1 << self.mantissa_bits) - 1

    @property
    def max_exponent(self) -> int:
        return (1 << self.exponent_bits) - 1

    @property
    def max_value(self) -> int:
        """Largest representable amount."""
        return self.max_mantissa * self.base ** self.max_exponent


TOKEN_AMOUNT_LAYOUT = FloatLayout(AMOUNT_EXPONENT_BIT_WIDTH, AMOUNT_MANTISSA_BIT_WIDTH)
FEE_AMOUNT_LAYOUT = FloatLayout(FEE_EXPONENT_BIT_WIDTH, FEE_MANTISSA_BIT_WIDTH)


def pack(amount: int, layout: FloatLayout) -> bytes:
    """
    Pack an amount, rounding the mantissa down.

    The smallest exponent that makes the mantissa fit is used, which keeps
    the most precision.

    Raises:
        UnpackableAmount: amount is negative or above ``layout.max_value``
    """
    amount = int(amount)
    if amount < 0:
        raise UnpackableAmount(f"Cannot pack negative amount {amount}")
    if amount > layout.max_value:
        raise UnpackableAmount(
            f"Amount {amount} exceeds packable maximum {layout.max_value}"
        )

    exponent = 0
    mantissa = amount
    while mantissa > layout.max_mantissa:
        exponent += 1
        mantissa = amount // layout.base ** exponent

    packed = (mantissa << layout.exponent_bits) | exponent
    return packed.to_bytes(layout.byte_len, "big")


def unpack(data: bytes, layout: FloatLayout) -> int:
    """Expand a packed field back into an amount."""
    if len(data) != layout.byte_len:
        raise SizeMismatch(
            f"Packed amount must be {layout.byte_len} bytes, got {len(data)}"
        )
    packed = int.from_bytes(data, "big")
    exponent = packed & layout.max_exponent
    mantissa = packed >> layout.exponent_bits
    return mantissa * layout.base ** exponent


def is_packable(amount: int, layout: FloatLayout) -> bool:
    """True iff ``unpack(pack(amount)) == amount``."""
    try:
        return unpack(pack(amount, layout), layout) == amount
    except UnpackableAmount:
        return False


def closest_packable(amount: int, layout: FloatLayout) -> int:
    """Largest packable amount not above ``amount``."""
    amount = min(int(amount), layout.max_value)
    return unpack(pack(amount, layout), layout)


def pack_token_amount(amount: int) -> bytes:
    return pack(amount, TOKEN_AMOUNT_LAYOUT)


def unpack_token_amount(data: bytes) -> int:
    return unpack(data, TOKEN_AMOUNT_LAYOUT)


def is_token_amount_packable(amount: int) -> bool:
    return is_packable(amount, TOKEN_AMOUNT_LAYOUT)


def closest_packable_token_amount(amount: int) -> int:
    return closest_packable(amount, TOKEN_AMOUNT_LAYOUT)


def pack_fee_amount(amount: int) -> bytes:
    return pack(amount, FEE_AMOUNT_LAYOUT)


def unpack_fee_amount(data: bytes) -> int:
    return unpack(data, FEE_AMOUNT_LAYOUT)


def is_fee_amount_packable(amount: int) -> bool:
    return is_packable(amount, FEE_AMOUNT_LAYOUT)


def closest_packable_fee_amount(amount: int) -> int:
    return closest_packable(amount, FEE_AMOUNT_LAYOUT)
