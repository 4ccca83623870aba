"""
Musig-Rescue Signatures

Schnorr signatures over the Jubjub subgroup with Rescue as the message and
challenge hash. Wire format, 96 bytes::

    packed public key A (32) || packed R (32) || s little-endian (32)

Signing is deterministic: the nonce is an HMAC-SHA256 derivation in the
manner of RFC 6979 over the private key and the message digest, never a
random draw.
"""

import hashlib
import hmac
from typing import Tuple, Union

from ..constants import HASH_BYTES_LEN
from ..exceptions import SignatureError, SizeMismatch
from ..logger import get_logger
from .hashing import bytes_to_le_bits, le_bits, rescue_hash_bits, rescue_hash_tx_msg, sha256
from .jubjub import POINT_BYTES_LEN, SUBGROUP_ORDER, Point, generator

logger = get_logger(__name__)

PRIVATE_KEY_BYTES_LEN = 32
SIGNATURE_BYTES_LEN = 64
PACKED_SIGNATURE_BYTES_LEN = POINT_BYTES_LEN + SIGNATURE_BYTES_LEN

# Challenges are truncated so they fit below the subgroup order
CHALLENGE_BITS = 250


def parse_private_key(private_key: Union[bytes, bytearray]) -> int:
    """
    Parse a 32-byte big-endian private key scalar.

    Raises:
        SignatureError: wrong length, zero, or not below the subgroup order
    """
    if len(private_key) != PRIVATE_KEY_BYTES_LEN:
        raise SignatureError(
            f"Private key must be {PRIVATE_KEY_BYTES_LEN} bytes, got {len(private_key)}"
        )
    scalar = int.from_bytes(private_key, "big")
    if not 0 < scalar < SUBGROUP_ORDER:
        raise SignatureError("Private key is not a valid subgroup scalar")
    return scalar


def private_key_from_seed(seed: bytes) -> bytes:
    """
    Derive a private key from arbitrary seed bytes.

    SHA-256 is applied repeatedly until the digest, read big-endian, is a
    valid scalar.
    """
    if len(seed) < PRIVATE_KEY_BYTES_LEN:
        raise SignatureError("Seed must be at least 32 bytes")
    effective_seed = sha256(seed)
    while True:
        raw = sha256(effective_seed)
        if 0 < int.from_bytes(raw, "big") < SUBGROUP_ORDER:
            return raw
        effective_seed = raw


def public_key_point(scalar: int) -> Point:
    return generator().mul(scalar)


def _hmac_sha256(key: bytes, *parts: bytes) -> bytes:
    return hmac.new(key, b"".join(parts), hashlib.sha256).digest()


def _deterministic_nonce(scalar: int, digest: bytes) -> int:
    """
    Nonce for signing ``digest``.

    RFC 6979 key and value updates over ``h1 = SHA-256(digest)`` and the
    big-endian key; the first output block, read little-endian, is reduced
    modulo the subgroup order without a retry loop.
    """
    h1 = sha256(digest)
    x = scalar.to_bytes(PRIVATE_KEY_BYTES_LEN, "big")
    v = b"\x01" * 32
    k = b"\x00" * 32

    k = _hmac_sha256(k, v, b"\x00", x, h1)
    v = _hmac_sha256(k, v)
    k = _hmac_sha256(k, v, b"\x01", x, h1)
    v = _hmac_sha256(k, v)

    t = _hmac_sha256(k, v)
    return int.from_bytes(t, "little") % SUBGROUP_ORDER


def _challenge(public_key: Point, r_point: Point, digest: bytes) -> int:
    bits = le_bits(public_key.x, 256) + le_bits(r_point.x, 256) + bytes_to_le_bits(digest)
    return rescue_hash_bits(bits) & ((1 << CHALLENGE_BITS) - 1)


def sign_musig(private_key: bytes, msg: bytes) -> bytes:
    """
    Sign ``msg`` and return the 96-byte packed signature.

    Raises:
        SignatureError: malformed private key
        SizeMismatch: message too long to hash
    """
    scalar = parse_private_key(private_key)
    public_key = public_key_point(scalar)
    digest = rescue_hash_tx_msg(msg)

    k = _deterministic_nonce(scalar, digest)
    r_point = generator().mul(k)
    c = _challenge(public_key, r_point, digest)
    s = (k + c * scalar) % SUBGROUP_ORDER

    return public_key.to_bytes() + r_point.to_bytes() + s.to_bytes(HASH_BYTES_LEN, "little")


def unpack_signature(signature: bytes) -> Tuple[Point, Point, int]:
    """
    Split a 96-byte signature into ``(A, R, s)``.

    Raises:
        SizeMismatch: not exactly 96 bytes
        SignatureError: undecodable point or ``s`` not below the subgroup order
    """
    if len(signature) != PACKED_SIGNATURE_BYTES_LEN:
        raise SizeMismatch(
            f"Signature must be {PACKED_SIGNATURE_BYTES_LEN} bytes, got {len(signature)}"
        )
    public_key = Point.from_bytes(signature[:POINT_BYTES_LEN])
    r_point = Point.from_bytes(signature[POINT_BYTES_LEN:2 * POINT_BYTES_LEN])
    s = int.from_bytes(signature[2 * POINT_BYTES_LEN:], "little")
    if s >= SUBGROUP_ORDER:
        raise SignatureError("Signature scalar is not below the subgroup order")
    return public_key, r_point, s


def verify_musig(msg: bytes, signature: bytes) -> bool:
    """
    Check a packed signature over ``msg``.

    Returns False for well-formed signatures that do not verify; raises only
    on malformed input (see :func:`unpack_signature`).
    """
    public_key, r_point, s = unpack_signature(signature)
    if not (public_key.is_in_subgroup() and r_point.is_in_subgroup()):
        logger.debug("Signature point outside the prime-order subgroup")
        return False

    try:
        digest = rescue_hash_tx_msg(msg)
    except SizeMismatch:
        logger.debug("Message of %d bytes cannot be hashed", len(msg))
        return False

    c = _challenge(public_key, r_point, digest)
    # 8 * (c*A + R - s*G) == O
    lhs = public_key.mul(c).add(r_point).add(generator().mul(s).negate())
    return lhs.mul_by_cofactor().is_identity()
