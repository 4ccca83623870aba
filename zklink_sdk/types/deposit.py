"""
Deposit

Priority operation created by the layer-1 contract when tokens are
deposited. It is never signed on layer 2; its hash also commits to the
layer-1 serial id and transaction hash so two deposits with equal fields
stay distinct.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ..constants import DEPOSIT_BYTES, DEPOSIT_TX_TYPE
from ..crypto.hashing import sha256
from .base import ZkLinkTx, uint_bytes
from .basic import BigUint, ChainId, H256, PriorityOpId, SubAccountId, TokenId, TxHash, ZkLinkAddress
from .validators import (
    chain_id_validator,
    deposit_amount_validator,
    sub_account_validator,
    token_validator,
    zero_address_validator,
)


@dataclass
class Deposit(ZkLinkTx):
    """Tokens moved from layer 1 into ``to`` on layer 2."""

    TX_TYPE = DEPOSIT_TX_TYPE
    BYTES_LEN = DEPOSIT_BYTES

    from_chain_id: int
    sub_account_id: int
    l2_target_token: int
    l1_source_token: int
    amount: int
    to: ZkLinkAddress
    serial_id: int = 0
    l2_hash: H256 = field(default_factory=H256.zero)

    def __post_init__(self):
        self.from_chain_id = ChainId(self.from_chain_id)
        self.sub_account_id = SubAccountId(self.sub_account_id)
        self.l2_target_token = TokenId(self.l2_target_token)
        self.l1_source_token = TokenId(self.l1_source_token)
        self.amount = BigUint(self.amount)
        if isinstance(self.to, str):
            self.to = ZkLinkAddress.from_str(self.to)
        self.serial_id = PriorityOpId(self.serial_id)
        if isinstance(self.l2_hash, str):
            self.l2_hash = H256.from_hex(self.l2_hash)

    def get_bytes(self) -> bytes:
        return b"".join([
            bytes([self.TX_TYPE]),
            self.from_chain_id.to_be_bytes(),
            self.sub_account_id.to_be_bytes(),
            uint_bytes(self.l2_target_token, 2, "l2_target_token"),
            uint_bytes(self.l1_source_token, 2, "l1_source_token"),
            self.amount.to_be_bytes(16),
            self.to.to_fixed_bytes(),
        ])

    def tx_hash(self) -> TxHash:
        """SHA-256 of the canonical bytes, serial id and layer-1 tx hash."""
        data = self.get_bytes() + self.serial_id.to_be_bytes() + self.l2_hash.as_bytes()
        return TxHash(sha256(data))

    def validation_errors(self) -> List[str]:
        return self._collect(
            chain_id_validator("from_chain_id", self.from_chain_id),
            sub_account_validator("sub_account_id", self.sub_account_id),
            token_validator("l2_target_token", self.l2_target_token),
            token_validator("l1_source_token", self.l1_source_token),
            deposit_amount_validator("amount", self.amount),
            zero_address_validator("to", self.to),
        )
