"""
Contract Address Generation

CREATE2 address derivation used to prove that a counterfactual smart
wallet controls a layer-2 account.
"""

from typing import Union

from eth_utils import keccak, to_checksum_address

from ..constants import ETH_ADDRESS_BYTES_LEN, HASH_BYTES_LEN
from ..exceptions import SizeMismatch

CREATE2_PREFIX = b'\xff'


def _address_bytes(address: Union[str, bytes]) -> bytes:
    if isinstance(address, str):
        address = bytes.fromhex(address[2:] if address.startswith('0x') else address)
    if len(address) != ETH_ADDRESS_BYTES_LEN:
        raise SizeMismatch(f"Address must be {ETH_ADDRESS_BYTES_LEN} bytes, got {len(address)}")
    return address


def generate_contract_address_create2(
    sender: Union[str, bytes],
    salt: bytes,
    code_hash: bytes,
) -> str:
    """
    Generate contract address using CREATE2 opcode logic.

    Address = keccak256(0xff + sender + salt + code_hash)[-20:]

    Args:
        sender: Deployer (factory) address
        salt: 32-byte salt
        code_hash: keccak256 of the contract initialization bytecode

    Returns:
        Contract address (Ethereum checksum format)
    """
    sender_bytes = _address_bytes(sender)
    if len(salt) != HASH_BYTES_LEN:
        raise SizeMismatch(f"Salt must be {HASH_BYTES_LEN} bytes, got {len(salt)}")
    if len(code_hash) != HASH_BYTES_LEN:
        raise SizeMismatch(f"Code hash must be {HASH_BYTES_LEN} bytes, got {len(code_hash)}")

    hash_bytes = keccak(CREATE2_PREFIX + sender_bytes + salt + code_hash)
    return to_checksum_address(hash_bytes[-ETH_ADDRESS_BYTES_LEN:])


def account_salt(salt_arg: bytes, pubkey_hash: bytes) -> bytes:
    """Salt actually used by the account factory: keccak256(salt_arg || pubkey_hash)."""
    return keccak(salt_arg + pubkey_hash)
