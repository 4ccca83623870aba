"""
Field Validators

Every validator takes the field name and value and returns an error
message, or None when the value is acceptable. Domain types collect the
messages so a single ``validate()`` call reports every failing field.
"""

from typing import Optional

from ..constants import (
    MAX_ACCOUNT_ID,
    MAX_AMOUNT,
    MAX_CHAIN_ID,
    MAX_FEE_RATIO,
    MAX_NONCE,
    MAX_ORDER_NONCE,
    MAX_PRICE,
    MAX_SLOT_ID,
    MAX_SUB_ACCOUNT_ID,
    MAX_TOKEN_ID,
    MIN_CHAIN_ID,
    MIN_PRICE,
)
from .pack import is_fee_amount_packable, is_token_amount_packable

ValidationResult = Optional[str]


def _in_range(name: str, value: int, low: int, high: int) -> ValidationResult:
    if isinstance(value, bool) or not isinstance(value, int):
        return f"{name} must be an integer"
    if not low <= value <= high:
        return f"{name} {value} out of range [{low}, {high}]"
    return None


def account_validator(name: str, value: int) -> ValidationResult:
    return _in_range(name, value, 0, MAX_ACCOUNT_ID)


def sub_account_validator(name: str, value: int) -> ValidationResult:
    return _in_range(name, value, 0, MAX_SUB_ACCOUNT_ID)


def chain_id_validator(name: str, value: int) -> ValidationResult:
    return _in_range(name, value, MIN_CHAIN_ID, MAX_CHAIN_ID)


def token_validator(name: str, value: int) -> ValidationResult:
    return _in_range(name, value, 0, MAX_TOKEN_ID)


def slot_id_validator(name: str, value: int) -> ValidationResult:
    return _in_range(name, value, 0, MAX_SLOT_ID)


def order_nonce_validator(name: str, value: int) -> ValidationResult:
    return _in_range(name, value, 0, MAX_ORDER_NONCE)


def nonce_validator(name: str, value: int) -> ValidationResult:
    return _in_range(name, value, 0, MAX_NONCE)


def price_validator(name: str, value: int) -> ValidationResult:
    return _in_range(name, value, MIN_PRICE, MAX_PRICE)


def fee_ratio_validator(name: str, value: int) -> ValidationResult:
    return _in_range(name, value, 0, MAX_FEE_RATIO)


def boolean_validator(name: str, value: int) -> ValidationResult:
    if value not in (0, 1):
        return f"{name} must be 0 or 1, got {value}"
    return None


def amount_packable(name: str, value: int) -> ValidationResult:
    """Token amount must survive packing unchanged."""
    if not is_token_amount_packable(value):
        return f"{name} {value} is not packable"
    return None


def non_zero_amount_packable(name: str, value: int) -> ValidationResult:
    if value == 0:
        return f"{name} must be non-zero"
    return amount_packable(name, value)


def fee_packable(name: str, value: int) -> ValidationResult:
    if not is_fee_amount_packable(value):
        return f"{name} {value} is not packable"
    return None


def uint128_validator(name: str, value: int) -> ValidationResult:
    return _in_range(name, value, 0, MAX_AMOUNT)


def deposit_amount_validator(name: str, value: int) -> ValidationResult:
    return _in_range(name, value, 1, MAX_AMOUNT)


def zero_address_validator(name: str, value) -> ValidationResult:
    if value.is_zero():
        return f"{name} must not be the zero address"
    return None
