"""
Twisted Edwards Curve over the BN254 Scalar Field

Baby Jubjub in ``a = -1`` form::

    -x^2 + y^2 = 1 + d * x^2 * y^2,   d = -168696 / 168700

The full group has order ``8 * r``; keys and signature nonces live in the
prime-order subgroup of order ``r``.

Point encoding (32 bytes): ``y`` little-endian, with bit 255 holding the
parity of ``x``.
"""

from __future__ import annotations

import hashlib
import threading
from dataclasses import dataclass
from typing import Optional

from ..exceptions import SignatureError
from .rescue import FIELD_MODULUS, GH_FIRST_BLOCK

P = FIELD_MODULUS

# Curve coefficient, -168696 / 168700 mod p
EDWARDS_D = (-168696 * pow(168700, -1, P)) % P

SUBGROUP_ORDER = 2736030358979909402780800718157159386076813972158567259200215660948447373041
COFACTOR = 8

POINT_BYTES_LEN = 32

# Personalization of the spending key generator group hash
GENERATOR_PERSONALIZATION = b"Zcash_G_"


def _inv(value: int) -> int:
    if value % P == 0:
        raise ZeroDivisionError("inverse of zero")
    return pow(value, -1, P)


def _find_non_residue() -> int:
    z = 2
    while pow(z, (P - 1) // 2, P) != P - 1:
        z += 1
    return z


# p - 1 = q * 2^s with q odd
_TS_S = ((P - 1) & -(P - 1)).bit_length() - 1
_TS_Q = (P - 1) >> _TS_S
_TS_Z = _find_non_residue()


def sqrt_mod(value: int) -> Optional[int]:
    """
    Square root in Fp by Tonelli-Shanks.

    Returns None when ``value`` is a non-residue.
    """
    value %= P
    if value == 0:
        return 0
    if pow(value, (P - 1) // 2, P) != 1:
        return None

    m = _TS_S
    c = pow(_TS_Z, _TS_Q, P)
    t = pow(value, _TS_Q, P)
    r = pow(value, (_TS_Q + 1) // 2, P)
    while t != 1:
        # Least i with t^(2^i) == 1
        i, t2 = 0, t
        while t2 != 1:
            t2 = t2 * t2 % P
            i += 1
        b = pow(c, 1 << (m - i - 1), P)
        m = i
        c = b * b % P
        t = t * c % P
        r = r * b % P
    return r


@dataclass(frozen=True)
class Point:
    """Affine point. The identity is ``(0, 1)``."""
    x: int
    y: int

    @classmethod
    def identity(cls) -> "Point":
        return cls(0, 1)

    def is_identity(self) -> bool:
        return self.x == 0 and self.y == 1

    def is_on_curve(self) -> bool:
        xx = self.x * self.x % P
        yy = self.y * self.y % P
        return (yy - xx - 1 - EDWARDS_D * xx % P * yy) % P == 0

    def negate(self) -> "Point":
        return Point((-self.x) % P, self.y)

    def add(self, other: "Point") -> "Point":
        x1, y1, x2, y2 = self.x, self.y, other.x, other.y
        t = EDWARDS_D * x1 % P * x2 % P * y1 % P * y2 % P
        # One inversion for both denominators
        den_x = (1 + t) % P
        den_y = (1 - t) % P
        inv = _inv(den_x * den_y)
        x3 = (x1 * y2 + y1 * x2) % P * den_y % P * inv % P
        y3 = (y1 * y2 + x1 * x2) % P * den_x % P * inv % P
        return Point(x3, y3)

    def double(self) -> "Point":
        return self.add(self)

    def mul(self, scalar: int) -> "Point":
        """Double-and-add scalar multiplication."""
        if scalar < 0:
            return self.negate().mul(-scalar)
        result = Point.identity()
        addend = self
        while scalar:
            if scalar & 1:
                result = result.add(addend)
            addend = addend.double()
            scalar >>= 1
        return result

    def mul_by_cofactor(self) -> "Point":
        return self.double().double().double()

    def is_in_subgroup(self) -> bool:
        return self.mul(SUBGROUP_ORDER).is_identity()

    def to_bytes(self) -> bytes:
        """Pack as ``y`` little-endian with the sign of ``x`` in bit 255."""
        packed = self.y | ((self.x & 1) << 255)
        return packed.to_bytes(POINT_BYTES_LEN, "little")

    @classmethod
    def from_bytes(cls, data: bytes) -> "Point":
        """
        Decode a packed point.

        Raises:
            SignatureError: ``y`` out of range or no matching ``x`` on the curve
        """
        if len(data) != POINT_BYTES_LEN:
            raise SignatureError(
                f"Packed point must be {POINT_BYTES_LEN} bytes, got {len(data)}"
            )
        packed = int.from_bytes(data, "little")
        sign = packed >> 255
        y = packed & ((1 << 255) - 1)
        if y >= P:
            raise SignatureError("Point y coordinate is not a field element")

        x = _x_for_y(y, sign)
        if x is None:
            raise SignatureError("Point is not on the curve")
        if x & 1 != sign:
            raise SignatureError("Non-canonical encoding of x = 0")
        return cls(x, y)

    def __repr__(self) -> str:
        return f"Point(x={hex(self.x)}, y={hex(self.y)})"


def _x_for_y(y: int, sign: int) -> Optional[int]:
    """``x`` with parity ``sign`` such that ``(x, y)`` is on the curve."""
    yy = y * y % P
    den = (1 + EDWARDS_D * yy) % P
    if den == 0:
        return None
    x = sqrt_mod((yy - 1) * _inv(den))
    if x is None:
        return None
    if x & 1 != sign:
        x = (P - x) % P
    return x


def group_hash(tag: bytes, personalization: bytes) -> Optional[Point]:
    """
    Hash ``tag`` onto the prime-order subgroup.

    Blake2s(GH_FIRST_BLOCK || tag) is read as a packed point and cleared of
    its cofactor. Returns None when the digest is not a point or clears to
    the identity.
    """
    digest = hashlib.blake2s(
        GH_FIRST_BLOCK + tag,
        digest_size=32,
        person=personalization,
    ).digest()
    packed = int.from_bytes(digest, "little")
    y = packed & ((1 << 255) - 1)
    if y >= P:
        return None
    x = _x_for_y(y, packed >> 255)
    if x is None:
        return None
    point = Point(x, y).mul_by_cofactor()
    if point.is_identity():
        return None
    return point


def find_group_hash(message: bytes, personalization: bytes) -> Point:
    """First successful :func:`group_hash` of ``message || counter``."""
    for counter in range(255):
        point = group_hash(message + bytes([counter]), personalization)
        if point is not None:
            return point
    raise SignatureError(f"No group hash found for personalization {personalization!r}")


_generator: Optional[Point] = None
_generator_lock = threading.Lock()


def generator() -> Point:
    """Spending key generator of the prime-order subgroup, derived on first use."""
    global _generator
    if _generator is None:
        with _generator_lock:
            if _generator is None:
                _generator = find_group_hash(b"", GENERATOR_PERSONALIZATION)
    return _generator
