"""
Boundary Conversion

Every core value crosses the SDK boundary (JSON, other languages, user
input) in one of three wire forms:

  - FIXED_INT:   plain integer (scalar identifiers)
  - DECIMAL_STR: base-10 string (arbitrary-precision amounts)
  - HEX_STR:     ``0x``-prefixed lower-case hex (hashes, keys, signatures, addresses)

The registry maps each type to its form so the conversion is written once.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Type, Union

from ..crypto.eth import PackedEthSignature
from ..crypto.keys import PackedPublicKey, PackedSignature, PubKeyHash, ZkLinkSignature
from ..exceptions import ParseError
from .basic import (
    AccountId,
    BigUint,
    BlockNumber,
    ChainId,
    EthBlockId,
    H256,
    Nonce,
    PairId,
    PriorityOpId,
    SlotId,
    SubAccountId,
    TimeStamp,
    TokenId,
    TxHash,
    ZkLinkAddress,
)

Builtin = Union[int, str]


class WireKind(Enum):
    FIXED_INT = "fixed_int"
    DECIMAL_STR = "decimal_str"
    HEX_STR = "hex_str"


WIRE_KINDS: Dict[type, WireKind] = {}


def register(cls: type, kind: WireKind) -> None:
    WIRE_KINDS[cls] = kind


for _cls in (
    ChainId, SubAccountId, PairId, AccountId, SlotId, TokenId,
    Nonce, BlockNumber, TimeStamp, PriorityOpId, EthBlockId,
):
    register(_cls, WireKind.FIXED_INT)

register(BigUint, WireKind.DECIMAL_STR)

for _cls in (
    TxHash, H256, PubKeyHash, PackedPublicKey, PackedSignature,
    ZkLinkSignature, PackedEthSignature, ZkLinkAddress,
):
    register(_cls, WireKind.HEX_STR)


def wire_kind(cls: type) -> WireKind:
    """Wire form of ``cls``, looked up through its base classes."""
    for klass in cls.__mro__:
        if klass in WIRE_KINDS:
            return WIRE_KINDS[klass]
    raise TypeError(f"No wire form registered for {cls.__name__}")


def to_builtin(value: Any) -> Builtin:
    """Convert a core value into its wire form."""
    kind = wire_kind(type(value))
    if kind is WireKind.FIXED_INT:
        return int(value)
    if kind is WireKind.DECIMAL_STR:
        return str(int(value))
    return str(value)


def from_builtin(cls: Type, raw: Builtin):
    """
    Parse the wire form of ``cls``.

    Raises:
        ParseError: ``raw`` has the wrong Python type or is malformed
        RangeError: an integer does not fit the identifier
    """
    kind = wire_kind(cls)
    if kind is WireKind.FIXED_INT:
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise ParseError(f"{cls.__name__} expects an integer, got {type(raw).__name__}")
        return cls(raw)
    if not isinstance(raw, str):
        raise ParseError(f"{cls.__name__} expects a string, got {type(raw).__name__}")
    if kind is WireKind.DECIMAL_STR:
        return cls.from_str(raw)
    if hasattr(cls, "from_hex"):
        return cls.from_hex(raw)
    return cls.from_str(raw)
