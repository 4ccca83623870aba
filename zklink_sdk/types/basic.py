"""
Basic zkLink Types

Scalar identifiers, arbitrary-precision amounts and fixed-size byte values.

Every scalar identifier is an ``int`` subclass whose width is configured by
its ``BIT_WIDTH`` class attribute; range checking and the canonical
big-endian form are implemented once in :class:`ScalarId`. Fixed-size byte
values share :class:`FixedBytes`, configured by ``SIZE``.
"""

from __future__ import annotations

import re
from typing import ClassVar, Union

from eth_utils import to_checksum_address

from ..constants import ADDRESS_BYTES_LEN, ETH_ADDRESS_BYTES_LEN
from ..exceptions import ParseError, RangeError, SizeMismatch

ZEROX_PREFIX = "0x"

_DECIMAL_PATTERN = re.compile(r"^[0-9]+$")


def decode_prefixed_hex(value: str, require_prefix: bool = True) -> bytes:
    """
    Decode a ``0x``-prefixed hex string.

    Raises:
        ParseError: missing prefix or invalid hex digits
    """
    if not isinstance(value, str):
        raise ParseError(f"Expected hex string, got {type(value).__name__}")
    if value.startswith(ZEROX_PREFIX):
        value = value[len(ZEROX_PREFIX):]
    elif require_prefix:
        raise ParseError(f"Hex string should start with {ZEROX_PREFIX}")
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise ParseError(f"Invalid hex string: {e}") from e


# ---------------------------------------------------------------------------
# Scalar identifiers
# ---------------------------------------------------------------------------

class ScalarId(int):
    """Unsigned fixed-width identifier."""

    BIT_WIDTH: ClassVar[int] = 32

    def __new__(cls, value: Union[int, str] = 0):
        if isinstance(value, bool):
            raise RangeError(f"{cls.__name__} cannot be built from a bool")
        try:
            value = int(value)
        except (TypeError, ValueError) as e:
            raise ParseError(f"Invalid {cls.__name__}: {value!r}") from e
        if value < 0 or value >= 1 << cls.BIT_WIDTH:
            raise RangeError(
                f"{cls.__name__} {value} does not fit in {cls.BIT_WIDTH} bits"
            )
        return super().__new__(cls, value)

    @classmethod
    def byte_len(cls) -> int:
        return cls.BIT_WIDTH // 8

    def to_be_bytes(self) -> bytes:
        """Canonical big-endian encoding."""
        return int(self).to_bytes(self.byte_len(), "big")

    @classmethod
    def from_be_bytes(cls, data: bytes):
        if len(data) != cls.byte_len():
            raise SizeMismatch(
                f"{cls.__name__} must be {cls.byte_len()} bytes, got {len(data)}"
            )
        return cls(int.from_bytes(data, "big"))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"

    def __str__(self) -> str:
        return str(int(self))


class ChainId(ScalarId):
    BIT_WIDTH = 8


class SubAccountId(ScalarId):
    BIT_WIDTH = 8


class PairId(ScalarId):
    BIT_WIDTH = 16


class AccountId(ScalarId):
    BIT_WIDTH = 32


class SlotId(ScalarId):
    BIT_WIDTH = 32


class TokenId(ScalarId):
    BIT_WIDTH = 32


class Nonce(ScalarId):
    BIT_WIDTH = 32


class BlockNumber(ScalarId):
    BIT_WIDTH = 32


class TimeStamp(ScalarId):
    BIT_WIDTH = 32


class PriorityOpId(ScalarId):
    BIT_WIDTH = 64


class EthBlockId(ScalarId):
    BIT_WIDTH = 64


# ---------------------------------------------------------------------------
# Arbitrary-precision amounts
# ---------------------------------------------------------------------------

class BigUint(int):
    """Unbounded unsigned integer with a base-10 string form."""

    def __new__(cls, value: Union[int, str] = 0):
        if isinstance(value, str):
            return cls.from_str(value)
        if isinstance(value, bool):
            raise RangeError("BigUint cannot be built from a bool")
        value = int(value)
        if value < 0:
            raise RangeError(f"BigUint must be non-negative, got {value}")
        return super().__new__(cls, value)

    @classmethod
    def from_str(cls, value: str) -> "BigUint":
        """Parse a canonical base-10 string."""
        if not _DECIMAL_PATTERN.match(value):
            raise ParseError(f"Invalid decimal amount: {value!r}")
        return super().__new__(cls, int(value, 10))

    def to_be_bytes(self, size: int) -> bytes:
        """Big-endian bytes of exactly ``size`` bytes."""
        if self >= 1 << (size * 8):
            raise RangeError(f"{int(self)} does not fit in {size * 8} bits")
        return int(self).to_bytes(size, "big")

    def __repr__(self) -> str:
        return f"BigUint({int(self)})"

    def __str__(self) -> str:
        return str(int(self))


def format_units(amount: int, decimals: int) -> str:
    """
    Format an integer amount as a decimal string with ``decimals`` places.

    Trailing zeros are stripped, keeping at least one fractional digit,
    e.g. ``format_units(1500000000000000000, 18) == "1.5"``.
    """
    amount = int(amount)
    if decimals == 0:
        return str(amount)
    whole, frac = divmod(amount, 10 ** decimals)
    frac_str = str(frac).rjust(decimals, "0").rstrip("0") or "0"
    return f"{whole}.{frac_str}"


# ---------------------------------------------------------------------------
# Fixed-size byte values
# ---------------------------------------------------------------------------

class FixedBytes:
    """Immutable byte value of exactly ``SIZE`` bytes with a ``0x`` hex form."""

    SIZE: ClassVar[int] = 32
    REQUIRE_PREFIX: ClassVar[bool] = True

    __slots__ = ("_data",)

    def __init__(self, data: bytes):
        if not isinstance(data, (bytes, bytearray)):
            raise ParseError(f"{type(self).__name__} expects bytes, got {type(data).__name__}")
        if len(data) != self.SIZE:
            raise SizeMismatch(
                f"{type(self).__name__} must be {self.SIZE} bytes, got {len(data)}"
            )
        self._data = bytes(data)

    @classmethod
    def from_bytes(cls, data: bytes):
        return cls(data)

    @classmethod
    def from_hex(cls, value: str):
        return cls(decode_prefixed_hex(value, require_prefix=cls.REQUIRE_PREFIX))

    @classmethod
    def zero(cls):
        return cls(b"\x00" * cls.SIZE)

    def as_bytes(self) -> bytes:
        return self._data

    def as_hex(self) -> str:
        return ZEROX_PREFIX + self._data.hex()

    def is_zero(self) -> bool:
        return not any(self._data)

    def __bytes__(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return self.SIZE

    def __eq__(self, other) -> bool:
        if not isinstance(other, FixedBytes):
            return NotImplemented
        return type(self) is type(other) and self._data == other._data

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._data))

    def __str__(self) -> str:
        return self.as_hex()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.as_hex()})"


class H256(FixedBytes):
    """Generic 32-byte hash."""
    SIZE = 32
    REQUIRE_PREFIX = False


class TxHash(FixedBytes):
    """SHA-256 of a transaction's canonical bytes."""
    SIZE = 32


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------

class ZkLinkAddress:
    """
    Chain address, 20 bytes (EVM chains) or 32 bytes.

    The string form is ``0x`` + lower-case hex. On the wire the address is
    always left-padded to 32 bytes.
    """

    __slots__ = ("_data",)

    def __init__(self, data: bytes):
        if len(data) not in (ETH_ADDRESS_BYTES_LEN, ADDRESS_BYTES_LEN):
            raise SizeMismatch(
                f"Address must be {ETH_ADDRESS_BYTES_LEN} or {ADDRESS_BYTES_LEN} bytes, got {len(data)}"
            )
        self._data = bytes(data)

    @classmethod
    def from_str(cls, value: str) -> "ZkLinkAddress":
        return cls(decode_prefixed_hex(value))

    @classmethod
    def from_slice(cls, data: bytes) -> "ZkLinkAddress":
        return cls(data)

    def as_bytes(self) -> bytes:
        return self._data

    def to_fixed_bytes(self) -> bytes:
        """Address left-padded to 32 bytes."""
        return self._data.rjust(ADDRESS_BYTES_LEN, b"\x00")

    def is_zero(self) -> bool:
        return not any(self._data)

    def is_global_account_address(self) -> bool:
        return self.is_zero()

    def to_checksum(self) -> str:
        """EIP-55 form, only defined for 20-byte addresses."""
        if len(self._data) != ETH_ADDRESS_BYTES_LEN:
            raise SizeMismatch("Checksum form requires a 20-byte address")
        return to_checksum_address(self._data)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ZkLinkAddress):
            return NotImplemented
        return self.to_fixed_bytes() == other.to_fixed_bytes()

    def __hash__(self) -> int:
        return hash(self.to_fixed_bytes())

    def __str__(self) -> str:
        return ZEROX_PREFIX + self._data.hex()

    def __repr__(self) -> str:
        return f"ZkLinkAddress({self})"
