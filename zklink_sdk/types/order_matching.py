"""
Order and OrderMatching

An ``Order`` is signed by its owner and never submitted on its own; an
``OrderMatching`` pairs a maker and a taker order and is signed by the
submitter. The matching commits to both orders through a Rescue hash of
their concatenated bytes rather than embedding them.

Expected amounts are carried as full 128-bit integers: they are often the
difference of two packable amounts, which need not be packable itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ..constants import (
    ORDER_BYTES,
    ORDER_MATCHING_BYTES,
    ORDER_MATCHING_TX_TYPE,
    ORDER_MSG_TYPE,
    ORDERS_BYTES,
)
from ..crypto.hashing import rescue_hash_orders
from ..crypto.keys import ZkLinkSignature
from ..exceptions import SizeMismatch
from .base import SignedZkLinkTx, uint_bytes
from .basic import AccountId, BigUint, Nonce, SlotId, SubAccountId, TokenId, format_units
from .pack import pack_fee_amount, pack_token_amount
from .validators import (
    account_validator,
    amount_packable,
    boolean_validator,
    fee_packable,
    fee_ratio_validator,
    order_nonce_validator,
    price_validator,
    slot_id_validator,
    sub_account_validator,
    token_validator,
    uint128_validator,
)


def pad_orders_bytes(maker_bytes: bytes, taker_bytes: bytes) -> bytes:
    """
    Concatenate maker and taker bytes, zero-padded to ``ORDERS_BYTES``.

    The padded width is fixed by the deployed circuits and may change in a
    future protocol version.

    Raises:
        SizeMismatch: the concatenation is wider than ``ORDERS_BYTES``
    """
    orders = maker_bytes + taker_bytes
    if len(orders) > ORDERS_BYTES:
        raise SizeMismatch(
            f"Maker and taker bytes total {len(orders)}, more than {ORDERS_BYTES}"
        )
    return orders.ljust(ORDERS_BYTES, b"\x00")


@dataclass
class Order(SignedZkLinkTx):
    """Limit order for ``amount`` base tokens at ``price`` quote per base."""

    TX_TYPE = ORDER_MSG_TYPE
    BYTES_LEN = ORDER_BYTES

    account_id: int
    sub_account_id: int
    slot_id: int
    nonce: int
    base_token_id: int
    quote_token_id: int
    amount: int
    price: int
    is_sell: int
    fee_ratio1: int                     # maker fee, in 1/10000
    fee_ratio2: int                     # taker fee, in 1/10000
    signature: ZkLinkSignature = field(default_factory=ZkLinkSignature.zero)

    def __post_init__(self):
        self.account_id = AccountId(self.account_id)
        self.sub_account_id = SubAccountId(self.sub_account_id)
        self.slot_id = SlotId(self.slot_id)
        self.nonce = Nonce(self.nonce)
        self.base_token_id = TokenId(self.base_token_id)
        self.quote_token_id = TokenId(self.quote_token_id)
        self.amount = BigUint(self.amount)
        self.price = BigUint(self.price)
        if isinstance(self.is_sell, bool):
            self.is_sell = int(self.is_sell)

    def get_bytes(self) -> bytes:
        return b"".join([
            bytes([self.TX_TYPE]),
            self.account_id.to_be_bytes(),
            self.sub_account_id.to_be_bytes(),
            uint_bytes(self.slot_id, 2, "slot_id"),
            uint_bytes(self.nonce, 3, "nonce"),
            uint_bytes(self.base_token_id, 2, "base_token_id"),
            uint_bytes(self.quote_token_id, 2, "quote_token_id"),
            uint_bytes(self.price, 15, "price"),
            uint_bytes(self.is_sell, 1, "is_sell"),
            uint_bytes(self.fee_ratio1, 1, "fee_ratio1"),
            uint_bytes(self.fee_ratio2, 1, "fee_ratio2"),
            pack_token_amount(self.amount),
        ])

    def validation_errors(self) -> List[str]:
        return self._collect(
            account_validator("account_id", self.account_id),
            sub_account_validator("sub_account_id", self.sub_account_id),
            slot_id_validator("slot_id", self.slot_id),
            order_nonce_validator("nonce", self.nonce),
            token_validator("base_token_id", self.base_token_id),
            token_validator("quote_token_id", self.quote_token_id),
            amount_packable("amount", self.amount),
            price_validator("price", self.price),
            boolean_validator("is_sell", self.is_sell),
            fee_ratio_validator("fee_ratio1", self.fee_ratio1),
            fee_ratio_validator("fee_ratio2", self.fee_ratio2),
        )

    def get_ethereum_sign_message(self, quote_token: str, base_token: str, decimals: int) -> str:
        """Human-readable text an Ethereum wallet shows when authorizing the order."""
        if self.amount == 0:
            message = f"Limit order for {quote_token} -> {base_token}\n"
        else:
            message = (
                f"Order for {format_units(self.amount, decimals)} "
                f"{quote_token} -> {base_token}\n"
            )
        return message + f"price: {self.price}\nNonce: {self.nonce}"


@dataclass
class OrderMatching(SignedZkLinkTx):
    """Match of a maker order against a taker order."""

    TX_TYPE = ORDER_MATCHING_TX_TYPE
    BYTES_LEN = ORDER_MATCHING_BYTES

    account_id: int
    sub_account_id: int
    taker: Order
    maker: Order
    fee: int
    fee_token: int
    # Caps on the traded volume; zero leaves the orders' own amounts in force
    expect_base_amount: int
    expect_quote_amount: int
    signature: ZkLinkSignature = field(default_factory=ZkLinkSignature.zero)

    def __post_init__(self):
        self.account_id = AccountId(self.account_id)
        self.sub_account_id = SubAccountId(self.sub_account_id)
        self.fee = BigUint(self.fee)
        self.fee_token = TokenId(self.fee_token)
        self.expect_base_amount = BigUint(self.expect_base_amount)
        self.expect_quote_amount = BigUint(self.expect_quote_amount)

    def orders_hash(self) -> bytes:
        """Rescue commitment to the maker and taker orders."""
        return rescue_hash_orders(
            pad_orders_bytes(self.maker.get_bytes(), self.taker.get_bytes())
        )

    def get_bytes(self) -> bytes:
        return b"".join([
            bytes([self.TX_TYPE]),
            self.account_id.to_be_bytes(),
            self.sub_account_id.to_be_bytes(),
            self.orders_hash(),
            uint_bytes(self.fee_token, 2, "fee_token"),
            pack_fee_amount(self.fee),
            self.expect_base_amount.to_be_bytes(16),
            self.expect_quote_amount.to_be_bytes(16),
        ])

    def validation_errors(self) -> List[str]:
        errors = self._collect(
            account_validator("account_id", self.account_id),
            sub_account_validator("sub_account_id", self.sub_account_id),
            fee_packable("fee", self.fee),
            token_validator("fee_token", self.fee_token),
            uint128_validator("expect_base_amount", self.expect_base_amount),
            uint128_validator("expect_quote_amount", self.expect_quote_amount),
        )
        errors += [f"maker.{e}" for e in self.maker.validation_errors()]
        errors += [f"taker.{e}" for e in self.taker.validation_errors()]
        return errors
