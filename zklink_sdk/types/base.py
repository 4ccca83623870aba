"""
Shared Transaction Behaviour

Hashing, signing, signature checks and validation are identical for every
transaction kind; each kind only provides its canonical bytes and its
field validators.
"""

from __future__ import annotations

from typing import ClassVar, List, Optional

from ..crypto.hashing import sha256
from ..exceptions import RangeError, ValidationError
from ..logger import get_logger
from .basic import TxHash

logger = get_logger(__name__)


def uint_bytes(value: int, size: int, name: str) -> bytes:
    """
    Big-endian encoding of ``value`` in exactly ``size`` bytes.

    Raises:
        RangeError: value is negative or wider than the field
    """
    value = int(value)
    if value < 0 or value >= 1 << (size * 8):
        raise RangeError(f"{name} {value} does not fit in {size * 8} bits")
    return value.to_bytes(size, "big")


class ZkLinkTx:
    """Base class for every transaction kind."""

    TX_TYPE: ClassVar[int]
    BYTES_LEN: ClassVar[int]

    def get_bytes(self) -> bytes:
        """Canonical encoding: type tag followed by fixed-width fields."""
        raise NotImplementedError

    def tx_hash(self) -> TxHash:
        """SHA-256 of the canonical bytes."""
        return TxHash(sha256(self.get_bytes()))

    def validation_errors(self) -> List[str]:
        """Every field that fails its validator, as messages."""
        raise NotImplementedError

    def validate(self) -> None:
        """
        Raises:
            ValidationError: with every failing field
        """
        errors = self.validation_errors()
        if errors:
            logger.debug("%s failed validation: %s", type(self).__name__, errors)
            raise ValidationError(errors)

    def is_valid(self) -> bool:
        return not self.validation_errors()

    @staticmethod
    def _collect(*results: Optional[str]) -> List[str]:
        return [r for r in results if r is not None]


class SignedZkLinkTx(ZkLinkTx):
    """Transaction carrying its own Musig signature in ``signature``."""

    def sign(self, signer) -> None:
        """
        Sign the canonical bytes, replacing any previous signature.

        Signing does not validate; call ``validate()`` first when the fields
        come from untrusted input.
        """
        self.signature = signer.sign_musig(self.get_bytes())
        logger.debug("Signed %s %s", type(self).__name__, self.tx_hash())

    def is_signature_valid(self) -> bool:
        return self.signature.verify_musig(self.get_bytes())
