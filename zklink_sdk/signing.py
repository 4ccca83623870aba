"""
ChangePubKey Authorization and Submitter Signatures

Resolves how a ChangePubKey is authorized on layer 1, attaches the
resulting auth data and signs the transaction:

  - OnChain:    attached as is, nothing to compute
  - EthECDSA:   the Ethereum key signs the EIP-712 payload of the tx
  - EthCreate2: the CREATE2 address derived from the new public key hash
                must equal the account address, otherwise the whole
                operation fails

The caller's transaction is never modified; signed copies are returned.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Optional, Union

from .crypto.eth import EthSigner, PackedEthSignature
from .crypto.hashing import sha256
from .crypto.keys import ZkLinkSignature, ZkLinkSigner
from .exceptions import AuthorizationMismatch
from .logger import get_logger
from .types.base import ZkLinkTx
from .types.basic import ZkLinkAddress
from .types.change_pubkey import (
    ChangePubKey,
    ChangePubKeyAuthData,
    Create2Data,
    EthCreate2Auth,
    EthECDSAAuth,
    OnChainAuth,
)

logger = get_logger(__name__)

AddressLike = Union[ZkLinkAddress, str]


class ChangePubKeyAuthRequest:
    """Authorization method requested by the caller."""


@dataclass(frozen=True)
class OnChainRequest(ChangePubKeyAuthRequest):
    pass


@dataclass(frozen=True)
class EthECDSARequest(ChangePubKeyAuthRequest):
    pass


@dataclass(frozen=True)
class EthCreate2Request(ChangePubKeyAuthRequest):
    data: Create2Data


@dataclass
class TxSignature:
    """Signed transaction, with the layer-1 signature when one is required."""
    tx: ZkLinkTx
    eth_signature: Optional[PackedEthSignature] = None


def _address(value: AddressLike) -> ZkLinkAddress:
    return ZkLinkAddress.from_str(value) if isinstance(value, str) else value


def check_create2data(
    zklink_signer: ZkLinkSigner,
    data: Create2Data,
    account_address: AddressLike,
) -> None:
    """
    Check that the CREATE2 wallet for the signer's key is the account.

    Raises:
        AuthorizationMismatch: derived address differs from ``account_address``
    """
    pubkey_hash = zklink_signer.public_key_hash()
    derived = data.get_address(pubkey_hash.as_bytes())
    if derived != _address(account_address):
        logger.warning(
            "CREATE2 address %s does not match account address %s",
            derived, account_address,
        )
        raise AuthorizationMismatch(
            f"CREATE2 address {derived} does not match account address {account_address}"
        )


def eth_signature_of_change_pubkey(
    l1_client_id: int,
    tx: ChangePubKey,
    eth_signer: EthSigner,
    main_contract: AddressLike,
) -> PackedEthSignature:
    """ECDSA signature over the EIP-712 payload of ``tx``."""
    payload = tx.to_eip712_request_payload(l1_client_id, _address(main_contract))
    return eth_signer.sign_typed_data(payload)


def resolve_auth_data(
    tx: ChangePubKey,
    request: ChangePubKeyAuthRequest,
    eth_signer: Optional[EthSigner],
    zklink_signer: ZkLinkSigner,
    account_address: AddressLike,
    l1_client_id: int,
    main_contract: AddressLike,
) -> ChangePubKeyAuthData:
    """
    Turn an authorization request into auth data for ``tx``.

    ``l1_client_id`` and ``main_contract`` bind the EthECDSA signature to
    one layer-1 deployment and are required for every request kind.

    Raises:
        AuthorizationMismatch: EthCreate2 data does not derive the account address
    """
    if isinstance(request, OnChainRequest):
        return OnChainAuth()

    if isinstance(request, EthECDSARequest):
        if eth_signer is None:
            raise ValueError("EthECDSA authorization requires an Ethereum signer")
        eth_signature = eth_signature_of_change_pubkey(l1_client_id, tx, eth_signer, main_contract)
        return EthECDSAAuth(eth_signature)

    if isinstance(request, EthCreate2Request):
        check_create2data(zklink_signer, request.data, account_address)
        return EthCreate2Auth(request.data)

    raise TypeError(f"Unknown authorization request: {request!r}")


def create_signed_change_pubkey(
    zklink_signer: ZkLinkSigner,
    tx: ChangePubKey,
    eth_auth_data: ChangePubKeyAuthData,
) -> ChangePubKey:
    """Copy of ``tx`` with ``eth_auth_data`` attached and signed."""
    signed = dataclasses.replace(tx, eth_auth_data=eth_auth_data)
    signed.sign(zklink_signer)
    return signed


def sign_change_pubkey(
    eth_signer: Optional[EthSigner],
    zklink_signer: ZkLinkSigner,
    tx: ChangePubKey,
    account_address: AddressLike,
    auth_request: ChangePubKeyAuthRequest,
    l1_client_id: int,
    main_contract: AddressLike,
) -> TxSignature:
    """Resolve the authorization, attach it and sign a copy of ``tx``."""
    auth_data = resolve_auth_data(
        tx,
        auth_request,
        eth_signer,
        zklink_signer,
        account_address,
        l1_client_id=l1_client_id,
        main_contract=main_contract,
    )
    signed = create_signed_change_pubkey(zklink_signer, tx, auth_data)
    logger.debug("Signed ChangePubKey %s with %s", signed.tx_hash(), type(auth_data).__name__)
    return TxSignature(tx=signed)


def create_submitter_signature(tx_bytes: bytes, zklink_signer: ZkLinkSigner) -> ZkLinkSignature:
    """Submitter's signature over the SHA-256 of a transaction's bytes."""
    return zklink_signer.sign_musig(sha256(tx_bytes))
