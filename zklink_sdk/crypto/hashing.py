"""
zkLink Crypto Hashing Module

Provides hash functions used throughout the SDK:
- sha256: transaction hashes, signer seeds, signature nonces
- keccak256: Ethereum standard (CREATE2 addresses, auth commitments)
- rescue_*: circuit-friendly hashes over the BN254 scalar field

Bit conventions for the Rescue entry points: message bytes are expanded
MSB-first, bits are packed into field elements 253 at a time
(little-endian within the element), and a field element result is
written back as its 256 little-endian bits packed LSB-first per byte,
which is the element's 32-byte little-endian encoding.
"""

import hashlib
from typing import List, Sequence, Union

from eth_utils import keccak

from ..constants import ORDERS_BYTES, PAD_MSG_BEFORE_HASH_BITS_LEN, NEW_PUBKEY_HASH_BYTES_LEN
from ..exceptions import SizeMismatch
from .rescue import rescue_hash_elements

# Bits that fit in a BN254 field element without reduction
FIELD_CAPACITY_BITS = 253


def _to_bytes(data: Union[bytes, str]) -> bytes:
    if isinstance(data, str):
        if data.startswith('0x') or data.startswith('0X'):
            return bytes.fromhex(data[2:])
        return bytes.fromhex(data)
    return bytes(data)


def sha256(data: Union[bytes, str]) -> bytes:
    """
    Compute SHA-256 hash.

    Args:
        data: Input bytes or hex string

    Returns:
        32-byte hash
    """
    return hashlib.sha256(_to_bytes(data)).digest()


def sha256_hex(data: Union[bytes, str]) -> str:
    return '0x' + sha256(data).hex()


def keccak256(data: Union[bytes, str]) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum standard).

    Args:
        data: Input bytes or hex string

    Returns:
        32-byte hash
    """
    return keccak(_to_bytes(data))


def keccak256_hex(data: Union[bytes, str]) -> str:
    return '0x' + keccak256(data).hex()


# =============================================================================
# BIT HELPERS
# =============================================================================

def bytes_to_bits(data: bytes) -> List[int]:
    """Expand bytes into bits, most significant bit of each byte first."""
    return [(byte >> (7 - i)) & 1 for byte in data for i in range(8)]


def bytes_to_le_bits(data: bytes) -> List[int]:
    """Expand bytes into bits, least significant bit of each byte first."""
    return [(byte >> i) & 1 for byte in data for i in range(8)]


def le_bits(value: int, width: int) -> List[int]:
    """Little-endian bits of ``value`` truncated to ``width``."""
    return [(value >> i) & 1 for i in range(width)]


def pack_bits_into_bytes(bits: Sequence[int]) -> bytes:
    """Inverse of :func:`bytes_to_le_bits`; length must be a multiple of 8."""
    if len(bits) % 8:
        raise SizeMismatch(f"Bit length {len(bits)} is not a multiple of 8")
    out = bytearray()
    for start in range(0, len(bits), 8):
        byte = 0
        for i, bit in enumerate(bits[start:start + 8]):
            byte |= bit << i
        out.append(byte)
    return bytes(out)


def multipack(bits: Sequence[int]) -> List[int]:
    """Pack bits into field elements, 253 per element, little-endian."""
    elements = []
    for start in range(0, len(bits), FIELD_CAPACITY_BITS):
        chunk = bits[start:start + FIELD_CAPACITY_BITS]
        elements.append(sum(bit << i for i, bit in enumerate(chunk)))
    return elements


# =============================================================================
# RESCUE ENTRY POINTS
# =============================================================================

def rescue_hash_bits(bits: Sequence[int]) -> int:
    """Rescue sponge over multipacked bits, as a field element."""
    return rescue_hash_elements(multipack(bits))


def _fr_to_digest(value: int) -> bytes:
    return pack_bits_into_bytes(le_bits(value, 256))


def rescue_hash_tx_msg(msg: bytes) -> bytes:
    """
    Hash a transaction message for signing.

    The message is zero-padded to a fixed bit length so every transaction
    kind is hashed over the same number of field elements.

    Raises:
        SizeMismatch: message longer than the padded length
    """
    bits = bytes_to_bits(msg)
    if len(bits) > PAD_MSG_BEFORE_HASH_BITS_LEN:
        raise SizeMismatch(
            f"Message of {len(msg)} bytes exceeds "
            f"{PAD_MSG_BEFORE_HASH_BITS_LEN // 8} bytes"
        )
    bits += [0] * (PAD_MSG_BEFORE_HASH_BITS_LEN - len(bits))
    return _fr_to_digest(rescue_hash_bits(bits))


def rescue_hash_orders(msg: bytes) -> bytes:
    """Commitment to a padded maker || taker block."""
    if len(msg) != ORDERS_BYTES:
        raise SizeMismatch(f"Orders block must be {ORDERS_BYTES} bytes, got {len(msg)}")
    return _fr_to_digest(rescue_hash_bits(bytes_to_bits(msg)))


def pub_key_hash(x: int, y: int) -> bytes:
    """Low 160 bits of Rescue(x, y), big-endian."""
    digest = rescue_hash_elements([x, y])
    mask = (1 << (NEW_PUBKEY_HASH_BYTES_LEN * 8)) - 1
    return (digest & mask).to_bytes(NEW_PUBKEY_HASH_BYTES_LEN, 'big')
