"""
ChangePubKey

Registers a new layer-2 public key hash for an account. The change must be
authorized on layer 1 in one of three ways:

  - OnChain:    the hash was already set by a contract call
  - EthECDSA:   the account owner signed EIP-712 typed data
  - EthCreate2: the account is a CREATE2 smart wallet whose address is
                derived from the new public key hash

The canonical bytes carry the auth type and a 32-byte commitment to its
parameters, so the layer-2 signature covers the authorization method.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Union

from ..constants import (
    CHANGE_PUBKEY_BYTES,
    CHANGE_PUBKEY_TX_TYPE,
    EIP712_DOMAIN_NAME,
    EIP712_DOMAIN_VERSION,
    HASH_BYTES_LEN,
)
from ..crypto.contract import account_salt, generate_contract_address_create2
from ..crypto.eth import PackedEthSignature, recover_address_from_typed_data
from ..crypto.hashing import keccak256
from ..crypto.keys import PubKeyHash, ZkLinkSignature
from ..exceptions import SignatureError
from ..logger import get_logger
from .base import SignedZkLinkTx, uint_bytes
from .basic import AccountId, BigUint, ChainId, H256, Nonce, SubAccountId, TimeStamp, TokenId, ZkLinkAddress
from .pack import pack_fee_amount
from .validators import (
    account_validator,
    chain_id_validator,
    fee_packable,
    nonce_validator,
    sub_account_validator,
    token_validator,
)

logger = get_logger(__name__)

ZERO_COMMITMENT = b"\x00" * HASH_BYTES_LEN


# ---------------------------------------------------------------------------
# Authorization data
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Create2Data:
    """Parameters of a CREATE2 smart wallet deployment."""
    creator_address: ZkLinkAddress
    salt_arg: H256
    code_hash: H256

    def salt(self, pubkey_hash: bytes) -> bytes:
        return account_salt(self.salt_arg.as_bytes(), pubkey_hash)

    def get_address(self, pubkey_hash: bytes) -> ZkLinkAddress:
        """Wallet address the factory deploys for ``pubkey_hash``."""
        address = generate_contract_address_create2(
            self.creator_address.as_bytes(),
            self.salt(pubkey_hash),
            self.code_hash.as_bytes(),
        )
        return ZkLinkAddress.from_str(address)


class ChangePubKeyAuthData:
    """Base of the three authorization variants."""

    AUTH_TYPE: ClassVar[int]

    def commitment(self) -> bytes:
        raise NotImplementedError


@dataclass(frozen=True)
class OnChainAuth(ChangePubKeyAuthData):
    AUTH_TYPE = 0

    def commitment(self) -> bytes:
        return ZERO_COMMITMENT


@dataclass(frozen=True)
class EthECDSAAuth(ChangePubKeyAuthData):
    AUTH_TYPE = 1

    eth_signature: PackedEthSignature

    def commitment(self) -> bytes:
        return keccak256(self.eth_signature.as_bytes())


@dataclass(frozen=True)
class EthCreate2Auth(ChangePubKeyAuthData):
    AUTH_TYPE = 2

    data: Create2Data

    def commitment(self) -> bytes:
        creator = self.data.creator_address.as_bytes()
        return keccak256(creator + self.data.salt_arg.as_bytes() + self.data.code_hash.as_bytes())


# ---------------------------------------------------------------------------
# Transaction
# ---------------------------------------------------------------------------

@dataclass
class ChangePubKey(SignedZkLinkTx):
    """Set the layer-2 public key hash of an account."""

    TX_TYPE = CHANGE_PUBKEY_TX_TYPE
    BYTES_LEN = CHANGE_PUBKEY_BYTES

    chain_id: int
    account_id: int
    sub_account_id: int
    new_pk_hash: PubKeyHash
    fee_token: int
    fee: int
    nonce: int
    ts: int
    eth_auth_data: ChangePubKeyAuthData = field(default_factory=OnChainAuth)
    signature: ZkLinkSignature = field(default_factory=ZkLinkSignature.zero)

    def __post_init__(self):
        self.chain_id = ChainId(self.chain_id)
        self.account_id = AccountId(self.account_id)
        self.sub_account_id = SubAccountId(self.sub_account_id)
        if isinstance(self.new_pk_hash, str):
            self.new_pk_hash = PubKeyHash.from_hex(self.new_pk_hash)
        self.fee_token = TokenId(self.fee_token)
        self.fee = BigUint(self.fee)
        self.nonce = Nonce(self.nonce)
        self.ts = TimeStamp(self.ts)

    def get_bytes(self) -> bytes:
        return b"".join([
            bytes([self.TX_TYPE]),
            self.chain_id.to_be_bytes(),
            self.account_id.to_be_bytes(),
            self.sub_account_id.to_be_bytes(),
            self.new_pk_hash.as_bytes(),
            uint_bytes(self.fee_token, 2, "fee_token"),
            pack_fee_amount(self.fee),
            self.nonce.to_be_bytes(),
            self.ts.to_be_bytes(),
            bytes([self.eth_auth_data.AUTH_TYPE]),
            self.eth_auth_data.commitment(),
        ])

    def validation_errors(self) -> List[str]:
        return self._collect(
            chain_id_validator("chain_id", self.chain_id),
            account_validator("account_id", self.account_id),
            sub_account_validator("sub_account_id", self.sub_account_id),
            token_validator("fee_token", self.fee_token),
            fee_packable("fee", self.fee),
            nonce_validator("nonce", self.nonce),
        )

    def to_eip712_request_payload(
        self,
        l1_client_id: int,
        main_contract: Union[ZkLinkAddress, str],
    ) -> Dict[str, Any]:
        """
        EIP-712 typed data the account owner signs to authorize the change.

        Args:
            l1_client_id: chain id of the layer-1 network
            main_contract: zkLink main contract on that network
        """
        if isinstance(main_contract, str):
            main_contract = ZkLinkAddress.from_str(main_contract)
        return {
            "types": {
                "EIP712Domain": [
                    {"name": "name", "type": "string"},
                    {"name": "version", "type": "string"},
                    {"name": "chainId", "type": "uint256"},
                    {"name": "verifyingContract", "type": "address"},
                ],
                "ChangePubKey": [
                    {"name": "pubKeyHash", "type": "bytes20"},
                    {"name": "nonce", "type": "uint32"},
                    {"name": "accountId", "type": "uint32"},
                ],
            },
            "primaryType": "ChangePubKey",
            "domain": {
                "name": EIP712_DOMAIN_NAME,
                "version": EIP712_DOMAIN_VERSION,
                "chainId": int(l1_client_id),
                "verifyingContract": main_contract.to_checksum(),
            },
            "message": {
                "pubKeyHash": self.new_pk_hash.as_bytes(),
                "nonce": int(self.nonce),
                "accountId": int(self.account_id),
            },
        }

    def is_eth_auth_data_valid(
        self,
        expected_address: Union[ZkLinkAddress, str],
        l1_client_id: int,
        main_contract: Union[ZkLinkAddress, str],
    ) -> bool:
        """
        Check an EthECDSA authorization against the account's address.

        OnChain and EthCreate2 authorizations are checked elsewhere (on
        chain, and when the auth data is resolved) and always pass here.
        """
        if not isinstance(self.eth_auth_data, EthECDSAAuth):
            return True
        if isinstance(expected_address, str):
            expected_address = ZkLinkAddress.from_str(expected_address)

        payload = self.to_eip712_request_payload(l1_client_id, main_contract)
        try:
            recovered = recover_address_from_typed_data(payload, self.eth_auth_data.eth_signature)
        except SignatureError as e:
            logger.warning("Cannot recover ChangePubKey authorizer: %s", e)
            return False
        return ZkLinkAddress.from_str(recovered) == expected_address
