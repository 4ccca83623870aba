"""
zkLink SDK Exceptions

Custom exception classes for transaction construction, packing and signing.
"""

from typing import Iterable, List


class ZkLinkSdkError(Exception):
    """Base exception for the zkLink SDK."""
    pass


class ParseError(ZkLinkSdkError):
    """Malformed hex, decimal or address string."""
    pass


class SizeMismatch(ParseError):
    """Wrong byte length for a fixed-width value."""
    pass


class RangeError(ZkLinkSdkError):
    """Identifier or numeric field outside its protocol bit width."""
    pass


class UnpackableAmount(ZkLinkSdkError):
    """Amount cannot be represented by the packing codec."""
    pass


class SignatureError(ZkLinkSdkError):
    """Malformed key, public key, signature point or scalar."""
    pass


class AuthorizationMismatch(ZkLinkSdkError):
    """Layer-1 authorization proof does not match the account."""
    pass


class ValidationError(ZkLinkSdkError):
    """
    Transaction failed semantic validation.

    All field failures are collected in ``errors``.
    """

    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors)
        super().__init__("; ".join(self.errors) or "validation failed")


class ConfigurationError(ZkLinkSdkError):
    """Configuration error."""
    pass
