"""
Ethereum ECDSA Signer

secp256k1 signing for layer-1 authorizations: EIP-191 personal messages
(signer derivation) and EIP-712 typed data (ChangePubKey authorization).

Signatures are packed as 65 bytes ``r || s || v`` with ``v`` in {27, 28}.
"""

from typing import Any, Dict, Union

from eth_account.messages import encode_typed_data
from eth_keys import keys as eth_keys
from eth_keys.exceptions import BadSignature, ValidationError as EthKeysValidationError
from eth_utils import decode_hex

from ..constants import ETH_SIGNATURE_BYTES_LEN
from ..exceptions import ParseError, SignatureError
from ..types.basic import FixedBytes
from .hashing import keccak256

TypedData = Dict[str, Any]

RECOVERY_ID_OFFSET = 27


class PackedEthSignature(FixedBytes):
    """65-byte ``r || s || v`` ECDSA signature."""
    SIZE = ETH_SIGNATURE_BYTES_LEN

    @classmethod
    def from_vrs(cls, v: int, r: int, s: int) -> "PackedEthSignature":
        """
        Create from v, r, s components.

        Args:
            v: Recovery parameter (27 or 28, or 0/1)
            r: R component
            s: S component
        """
        if v < RECOVERY_ID_OFFSET:
            v += RECOVERY_ID_OFFSET
        return cls(r.to_bytes(32, 'big') + s.to_bytes(32, 'big') + bytes([v]))

    def to_eth_keys(self) -> eth_keys.Signature:
        data = self.as_bytes()
        v = data[64]
        if v >= RECOVERY_ID_OFFSET:
            v -= RECOVERY_ID_OFFSET
        try:
            return eth_keys.Signature(vrs=(v, int.from_bytes(data[:32], 'big'), int.from_bytes(data[32:64], 'big')))
        except EthKeysValidationError as e:
            raise SignatureError(f"Invalid ECDSA signature: {e}") from e

    def recover_address(self, msg_hash: bytes) -> str:
        """Checksum address of the key that signed ``msg_hash``."""
        try:
            public_key = self.to_eth_keys().recover_public_key_from_msg_hash(msg_hash)
        except BadSignature as e:
            raise SignatureError(f"Cannot recover signer: {e}") from e
        return public_key.to_checksum_address()


def personal_message_hash(message: bytes) -> bytes:
    """EIP-191 ``personal_sign`` hash."""
    prefix = b'\x19Ethereum Signed Message:\n' + str(len(message)).encode()
    return keccak256(prefix + message)


def typed_data_hash(payload: TypedData) -> bytes:
    """EIP-712 hash of a full typed data payload."""
    signable = encode_typed_data(full_message=payload)
    return keccak256(b'\x19' + signable.version + signable.header + signable.body)


def recover_address_from_typed_data(payload: TypedData, signature: PackedEthSignature) -> str:
    return signature.recover_address(typed_data_hash(payload))


def recover_address_from_message(message: bytes, signature: PackedEthSignature) -> str:
    return signature.recover_address(personal_message_hash(message))


class EthSigner:
    """
    secp256k1 private key for layer-1 authorizations.

    Wraps eth-keys PrivateKey.
    """

    __slots__ = ("_key",)

    def __init__(self, key_bytes: bytes):
        """
        Initialize from raw 32-byte private key.

        Raises:
            SignatureError: If key bytes are invalid
        """
        if len(key_bytes) != 32:
            raise SignatureError(f"Private key must be 32 bytes, got {len(key_bytes)}")
        try:
            self._key = eth_keys.PrivateKey(key_bytes)
        except EthKeysValidationError as e:
            raise SignatureError(f"Invalid private key: {e}") from e

    @classmethod
    def from_hex(cls, hex_str: str) -> "EthSigner":
        """
        Create from hex string.

        Args:
            hex_str: Hex-encoded private key (with or without 0x prefix)
        """
        try:
            key_bytes = decode_hex(hex_str)
        except ValueError as e:
            raise ParseError(f"Invalid private key hex: {e}") from e
        return cls(key_bytes)

    @property
    def address(self) -> str:
        """Checksum address of this key."""
        return self._key.public_key.to_checksum_address()

    def sign_hash(self, msg_hash: bytes) -> PackedEthSignature:
        """
        Sign a 32-byte message hash.

        Args:
            msg_hash: 32-byte hash to sign
        """
        if len(msg_hash) != 32:
            raise SignatureError(f"Message hash must be 32 bytes, got {len(msg_hash)}")
        signature = self._key.sign_msg_hash(msg_hash)
        return PackedEthSignature.from_vrs(signature.v, signature.r, signature.s)

    def sign_message(self, message: Union[bytes, str]) -> PackedEthSignature:
        """
        Sign a message (Ethereum personal_sign style).

        The message is prefixed with "\\x19Ethereum Signed Message:\\n{length}"
        before hashing and signing.
        """
        if isinstance(message, str):
            message = message.encode()
        return self.sign_hash(personal_message_hash(message))

    def sign_typed_data(self, payload: TypedData) -> PackedEthSignature:
        """Sign an EIP-712 typed data payload."""
        return self.sign_hash(typed_data_hash(payload))

    def __repr__(self) -> str:
        return f"EthSigner({self.address})"
