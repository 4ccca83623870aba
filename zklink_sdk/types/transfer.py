"""
Transfer

Layer-2 transfer between accounts, possibly across sub-accounts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ..constants import TRANSFER_BYTES, TRANSFER_TX_TYPE
from ..crypto.keys import ZkLinkSignature
from .base import SignedZkLinkTx, uint_bytes
from .basic import AccountId, BigUint, Nonce, SubAccountId, TimeStamp, TokenId, ZkLinkAddress
from .pack import pack_fee_amount, pack_token_amount
from .validators import (
    account_validator,
    fee_packable,
    non_zero_amount_packable,
    nonce_validator,
    sub_account_validator,
    token_validator,
    zero_address_validator,
)


@dataclass
class Transfer(SignedZkLinkTx):
    TX_TYPE = TRANSFER_TX_TYPE
    BYTES_LEN = TRANSFER_BYTES

    account_id: int
    to_address: ZkLinkAddress
    from_sub_account_id: int
    to_sub_account_id: int
    token: int
    amount: int
    fee: int
    nonce: int
    ts: int
    signature: ZkLinkSignature = field(default_factory=ZkLinkSignature.zero)

    def __post_init__(self):
        self.account_id = AccountId(self.account_id)
        if isinstance(self.to_address, str):
            self.to_address = ZkLinkAddress.from_str(self.to_address)
        self.from_sub_account_id = SubAccountId(self.from_sub_account_id)
        self.to_sub_account_id = SubAccountId(self.to_sub_account_id)
        self.token = TokenId(self.token)
        self.amount = BigUint(self.amount)
        self.fee = BigUint(self.fee)
        self.nonce = Nonce(self.nonce)
        self.ts = TimeStamp(self.ts)

    def get_bytes(self) -> bytes:
        return b"".join([
            bytes([self.TX_TYPE]),
            self.account_id.to_be_bytes(),
            self.from_sub_account_id.to_be_bytes(),
            self.to_address.to_fixed_bytes(),
            self.to_sub_account_id.to_be_bytes(),
            uint_bytes(self.token, 2, "token"),
            pack_token_amount(self.amount),
            pack_fee_amount(self.fee),
            self.nonce.to_be_bytes(),
            self.ts.to_be_bytes(),
        ])

    def validation_errors(self) -> List[str]:
        return self._collect(
            account_validator("account_id", self.account_id),
            sub_account_validator("from_sub_account_id", self.from_sub_account_id),
            sub_account_validator("to_sub_account_id", self.to_sub_account_id),
            zero_address_validator("to_address", self.to_address),
            token_validator("token", self.token),
            non_zero_amount_packable("amount", self.amount),
            fee_packable("fee", self.fee),
            nonce_validator("nonce", self.nonce),
        )
