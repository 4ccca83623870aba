"""
zkLink Crypto Module

This module provides the cryptographic primitives of the SDK:
- Musig-Rescue signatures over the Jubjub curve (layer-2 keys)
- secp256k1 ECDSA signing (layer-1 authorizations, EIP-191 / EIP-712)
- Hash functions (sha256, keccak256, Rescue)
- CREATE2 address derivation
"""

from .hashing import (
    keccak256,
    keccak256_hex,
    sha256,
    sha256_hex,
    rescue_hash_tx_msg,
    rescue_hash_orders,
)
from .rescue import rescue_hash_elements
from .musig import sign_musig, verify_musig, private_key_from_seed
from .keys import (
    PackedPublicKey,
    PackedSignature,
    PubKeyHash,
    ZkLinkSignature,
    ZkLinkSigner,
)
from .eth import (
    EthSigner,
    PackedEthSignature,
    recover_address_from_message,
    recover_address_from_typed_data,
)
from .contract import generate_contract_address_create2

__all__ = [
    # Hashing
    "keccak256",
    "keccak256_hex",
    "sha256",
    "sha256_hex",
    "rescue_hash_tx_msg",
    "rescue_hash_orders",
    "rescue_hash_elements",
    # Musig
    "sign_musig",
    "verify_musig",
    "private_key_from_seed",
    # Layer-2 keys
    "PackedPublicKey",
    "PackedSignature",
    "PubKeyHash",
    "ZkLinkSignature",
    "ZkLinkSigner",
    # Layer-1 keys
    "EthSigner",
    "PackedEthSignature",
    "recover_address_from_message",
    "recover_address_from_typed_data",
    # Contracts
    "generate_contract_address_create2",
]
