"""
zkLink Transaction Types

Leaf value types and the amount packing codec. Transaction kinds live in
their own modules (``order_matching``, ``change_pubkey``, ``deposit``,
``transfer``) and are re-exported from the top-level package.
"""

from .basic import (
    AccountId,
    BigUint,
    BlockNumber,
    ChainId,
    EthBlockId,
    FixedBytes,
    H256,
    Nonce,
    PairId,
    PriorityOpId,
    ScalarId,
    SlotId,
    SubAccountId,
    TimeStamp,
    TokenId,
    TxHash,
    ZkLinkAddress,
    format_units,
)
from .pack import (
    FEE_AMOUNT_LAYOUT,
    TOKEN_AMOUNT_LAYOUT,
    FloatLayout,
    closest_packable_fee_amount,
    closest_packable_token_amount,
    is_fee_amount_packable,
    is_token_amount_packable,
    pack_fee_amount,
    pack_token_amount,
    unpack_fee_amount,
    unpack_token_amount,
)

__all__ = [
    "AccountId",
    "BigUint",
    "BlockNumber",
    "ChainId",
    "EthBlockId",
    "FixedBytes",
    "H256",
    "Nonce",
    "PairId",
    "PriorityOpId",
    "ScalarId",
    "SlotId",
    "SubAccountId",
    "TimeStamp",
    "TokenId",
    "TxHash",
    "ZkLinkAddress",
    "format_units",
    "FEE_AMOUNT_LAYOUT",
    "TOKEN_AMOUNT_LAYOUT",
    "FloatLayout",
    "closest_packable_fee_amount",
    "closest_packable_token_amount",
    "is_fee_amount_packable",
    "is_token_amount_packable",
    "pack_fee_amount",
    "pack_token_amount",
    "unpack_fee_amount",
    "unpack_token_amount",
]
