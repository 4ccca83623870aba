"""
zkLink Crypto Keys Module

Musig-Rescue key management: the layer-2 signer, its packed public key,
the public key hash registered on chain, and the packed signature types.
"""

from typing import Union

from eth_utils import decode_hex

from ..constants import NEW_PUBKEY_HASH_BYTES_LEN, ZKLINK_SIGN_MESSAGE
from ..exceptions import ParseError, SignatureError
from ..logger import get_logger
from ..types.basic import FixedBytes
from .hashing import pub_key_hash
from .jubjub import POINT_BYTES_LEN, Point
from .musig import (
    PACKED_SIGNATURE_BYTES_LEN,
    PRIVATE_KEY_BYTES_LEN,
    SIGNATURE_BYTES_LEN,
    parse_private_key,
    private_key_from_seed,
    public_key_point,
    sign_musig,
    verify_musig,
)

logger = get_logger(__name__)


class PubKeyHash(FixedBytes):
    """Low 160 bits of the Rescue hash of a public key."""
    SIZE = NEW_PUBKEY_HASH_BYTES_LEN


class PackedPublicKey(FixedBytes):
    """Compressed Jubjub public key."""
    SIZE = POINT_BYTES_LEN

    def to_point(self) -> Point:
        return Point.from_bytes(self.as_bytes())

    def public_key_hash(self) -> PubKeyHash:
        """
        Hash registered on chain for this key.

        Raises:
            SignatureError: the bytes do not decode to a curve point
        """
        point = self.to_point()
        return PubKeyHash(pub_key_hash(point.x, point.y))


class PackedSignature(FixedBytes):
    """Packed ``R || s``."""
    SIZE = SIGNATURE_BYTES_LEN


class ZkLinkSignature(FixedBytes):
    """
    Public key and signature as carried by a transaction.

    The default value is all zeros, which never verifies.
    """
    SIZE = PACKED_SIGNATURE_BYTES_LEN

    @property
    def pub_key(self) -> PackedPublicKey:
        return PackedPublicKey(self.as_bytes()[:POINT_BYTES_LEN])

    @property
    def signature(self) -> PackedSignature:
        return PackedSignature(self.as_bytes()[POINT_BYTES_LEN:])

    @classmethod
    def from_parts(cls, pub_key: PackedPublicKey, signature: PackedSignature) -> "ZkLinkSignature":
        return cls(pub_key.as_bytes() + signature.as_bytes())

    def verify_musig(self, msg: bytes) -> bool:
        """
        Verify this signature over ``msg``.

        Raises:
            SignatureError: embedded point or scalar is malformed
        """
        return verify_musig(msg, self.as_bytes())


class ZkLinkSigner:
    """
    Layer-2 signing key.

    The private key never appears in ``repr`` or log output.
    """

    __slots__ = ("_private_key", "_public_key")

    def __init__(self, private_key: bytes):
        """
        Initialize from a raw 32-byte private key.

        Raises:
            SignatureError: key is not a valid subgroup scalar
        """
        scalar = parse_private_key(private_key)
        self._private_key = bytes(private_key)
        self._public_key = PackedPublicKey(public_key_point(scalar).to_bytes())

    @classmethod
    def from_bytes(cls, private_key: bytes) -> "ZkLinkSigner":
        return cls(private_key)

    @classmethod
    def from_hex(cls, hex_str: str) -> "ZkLinkSigner":
        """
        Create from hex string.

        Args:
            hex_str: Hex-encoded private key (with or without 0x prefix)
        """
        try:
            key_bytes = decode_hex(hex_str)
        except ValueError as e:
            raise ParseError(f"Invalid private key hex: {e}") from e
        if len(key_bytes) != PRIVATE_KEY_BYTES_LEN:
            raise SignatureError(
                f"Private key must be {PRIVATE_KEY_BYTES_LEN} bytes, got {len(key_bytes)}"
            )
        return cls(key_bytes)

    @classmethod
    def from_seed(cls, seed: bytes) -> "ZkLinkSigner":
        """Derive the key deterministically from seed bytes (at least 32)."""
        return cls(private_key_from_seed(seed))

    @classmethod
    def new_from_eth_signer(cls, eth_signer) -> "ZkLinkSigner":
        """
        Derive the layer-2 key from an Ethereum account.

        The seed is the account's personal-sign signature over the fixed
        zkLink key derivation message, so the same account always yields
        the same layer-2 key.
        """
        signature = eth_signer.sign_message(ZKLINK_SIGN_MESSAGE.encode())
        logger.debug("Derived layer-2 signer from %s", eth_signer.address)
        return cls.from_seed(signature.as_bytes())

    @classmethod
    def new_from_hex_eth_signer(cls, eth_hex_private_key: str) -> "ZkLinkSigner":
        from .eth import EthSigner

        return cls.new_from_eth_signer(EthSigner.from_hex(eth_hex_private_key))

    def public_key(self) -> PackedPublicKey:
        return self._public_key

    def public_key_hash(self) -> PubKeyHash:
        return self._public_key.public_key_hash()

    def sign_musig(self, msg: Union[bytes, bytearray]) -> ZkLinkSignature:
        """Sign ``msg`` (at most 92 bytes)."""
        return ZkLinkSignature(sign_musig(self._private_key, bytes(msg)))

    def __repr__(self) -> str:
        return f"ZkLinkSigner(pub_key={self._public_key.as_hex()})"
