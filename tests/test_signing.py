"""
zkLink ChangePubKey Authorization Tests

Tests for:
- OnChain / EthECDSA / EthCreate2 resolution
- CREATE2 address derivation and mismatch handling
- Signed copies leave the caller's transaction untouched
- Submitter signatures

Run with:
    pytest tests/test_signing.py -v
"""

import hashlib

import pytest
from eth_utils import keccak

from zklink_sdk.exceptions import AuthorizationMismatch, SizeMismatch
from zklink_sdk.signing import (
    EthCreate2Request,
    EthECDSARequest,
    OnChainRequest,
    TxSignature,
    create_signed_change_pubkey,
    create_submitter_signature,
    eth_signature_of_change_pubkey,
    resolve_auth_data,
    sign_change_pubkey,
)
from zklink_sdk.types.basic import H256, ZkLinkAddress
from zklink_sdk.types.change_pubkey import (
    Create2Data,
    EthCreate2Auth,
    EthECDSAAuth,
    OnChainAuth,
)

MAIN_CONTRACT = "0x" + "00" * 20
CREATOR = b"\x22" * 20
SALT_ARG = b"\x33" * 32
CODE_HASH = b"\x44" * 32


def create2_data():
    return Create2Data(
        creator_address=ZkLinkAddress(CREATOR),
        salt_arg=H256(SALT_ARG),
        code_hash=H256(CODE_HASH),
    )


def expected_create2_address(pubkey_hash: bytes) -> ZkLinkAddress:
    salt = keccak(SALT_ARG + pubkey_hash)
    return ZkLinkAddress(keccak(b"\xff" + CREATOR + salt + CODE_HASH)[12:])


class TestCreate2Address:

    def test_matches_create2_formula(self, zklink_signer):
        pkh = zklink_signer.public_key_hash().as_bytes()
        assert create2_data().get_address(pkh) == expected_create2_address(pkh)

    def test_depends_on_pubkey_hash(self):
        data = create2_data()
        assert data.get_address(b"\x01" * 20) != data.get_address(b"\x02" * 20)

    def test_checksum_output(self):
        from zklink_sdk.crypto.contract import generate_contract_address_create2
        address = generate_contract_address_create2(CREATOR, SALT_ARG, CODE_HASH)
        assert address.startswith("0x")
        assert address != address.lower()

    def test_bad_salt_length(self):
        from zklink_sdk.crypto.contract import generate_contract_address_create2
        with pytest.raises(SizeMismatch):
            generate_contract_address_create2(CREATOR, b"\x00" * 31, CODE_HASH)


class TestResolveAuthData:

    def test_on_chain(self, change_pubkey, zklink_signer):
        auth = resolve_auth_data(change_pubkey, OnChainRequest(), None, zklink_signer, MAIN_CONTRACT, 1, MAIN_CONTRACT)
        assert auth == OnChainAuth()

    def test_eth_ecdsa(self, change_pubkey, zklink_signer, eth_signer):
        auth = resolve_auth_data(
            change_pubkey, EthECDSARequest(), eth_signer, zklink_signer, eth_signer.address,
            l1_client_id=1, main_contract=MAIN_CONTRACT,
        )
        assert isinstance(auth, EthECDSAAuth)
        assert auth.eth_signature == eth_signature_of_change_pubkey(1, change_pubkey, eth_signer, MAIN_CONTRACT)

    def test_eth_ecdsa_requires_signer(self, change_pubkey, zklink_signer):
        with pytest.raises(ValueError):
            resolve_auth_data(
                change_pubkey, EthECDSARequest(), None, zklink_signer, MAIN_CONTRACT,
                l1_client_id=1, main_contract=MAIN_CONTRACT,
            )

    def test_network_is_required(self, change_pubkey, zklink_signer, eth_signer):
        with pytest.raises(TypeError):
            resolve_auth_data(change_pubkey, EthECDSARequest(), eth_signer, zklink_signer, eth_signer.address)

    def test_signature_bound_to_given_network(self, change_pubkey, zklink_signer, eth_signer):
        auth = resolve_auth_data(
            change_pubkey, EthECDSARequest(), eth_signer, zklink_signer, eth_signer.address, 5, "0x" + "ab" * 20,
        )
        assert auth.eth_signature == eth_signature_of_change_pubkey(5, change_pubkey, eth_signer, "0x" + "ab" * 20)
        assert auth.eth_signature != eth_signature_of_change_pubkey(1, change_pubkey, eth_signer, "0x" + "ab" * 20)

    def test_eth_create2(self, change_pubkey, zklink_signer):
        pkh = zklink_signer.public_key_hash().as_bytes()
        account = expected_create2_address(pkh)
        auth = resolve_auth_data(
            change_pubkey, EthCreate2Request(create2_data()), None, zklink_signer, account, 1, MAIN_CONTRACT,
        )
        assert auth == EthCreate2Auth(create2_data())

    def test_eth_create2_mismatch(self, change_pubkey, zklink_signer):
        with pytest.raises(AuthorizationMismatch):
            resolve_auth_data(
                change_pubkey, EthCreate2Request(create2_data()), None, zklink_signer, "0x" + "55" * 20, 1, MAIN_CONTRACT,
            )

    def test_unknown_request(self, change_pubkey, zklink_signer):
        with pytest.raises(TypeError):
            resolve_auth_data(change_pubkey, object(), None, zklink_signer, MAIN_CONTRACT, 1, MAIN_CONTRACT)


class TestSignChangePubKey:

    def test_ecdsa_authorization_verifies(self, change_pubkey, zklink_signer, eth_signer):
        result = sign_change_pubkey(
            eth_signer, zklink_signer, change_pubkey, eth_signer.address, EthECDSARequest(),
            l1_client_id=1, main_contract=MAIN_CONTRACT,
        )
        assert isinstance(result, TxSignature)
        assert result.eth_signature is None
        signed = result.tx
        assert signed.is_signature_valid()
        assert signed.is_eth_auth_data_valid(eth_signer.address, 1, MAIN_CONTRACT)

    def test_ecdsa_wrong_address(self, change_pubkey, zklink_signer, eth_signer):
        signed = sign_change_pubkey(
            eth_signer, zklink_signer, change_pubkey, eth_signer.address, EthECDSARequest(),
            l1_client_id=1, main_contract=MAIN_CONTRACT,
        ).tx
        assert not signed.is_eth_auth_data_valid("0x" + "55" * 20, 1, MAIN_CONTRACT)

    def test_ecdsa_other_l1_chain(self, change_pubkey, zklink_signer, eth_signer):
        signed = sign_change_pubkey(
            eth_signer, zklink_signer, change_pubkey, eth_signer.address, EthECDSARequest(),
            l1_client_id=1, main_contract=MAIN_CONTRACT,
        ).tx
        assert not signed.is_eth_auth_data_valid(eth_signer.address, 2, MAIN_CONTRACT)

    def test_network_is_required(self, change_pubkey, zklink_signer, eth_signer):
        with pytest.raises(TypeError):
            sign_change_pubkey(eth_signer, zklink_signer, change_pubkey, eth_signer.address, EthECDSARequest())

    def test_create2_mismatch_signs_nothing(self, change_pubkey, zklink_signer):
        with pytest.raises(AuthorizationMismatch):
            sign_change_pubkey(
                None, zklink_signer, change_pubkey, "0x" + "55" * 20, EthCreate2Request(create2_data()), 1, MAIN_CONTRACT,
            )
        assert change_pubkey.signature.is_zero()

    def test_create2_signed(self, change_pubkey, zklink_signer):
        pkh = zklink_signer.public_key_hash().as_bytes()
        signed = sign_change_pubkey(
            None, zklink_signer, change_pubkey, expected_create2_address(pkh), EthCreate2Request(create2_data()),
            1, MAIN_CONTRACT,
        ).tx
        assert isinstance(signed.eth_auth_data, EthCreate2Auth)
        assert signed.get_bytes()[39] == 2
        assert signed.is_signature_valid()

    def test_original_untouched(self, change_pubkey, zklink_signer):
        before = change_pubkey.get_bytes()
        signed = create_signed_change_pubkey(
            zklink_signer, change_pubkey, EthCreate2Auth(create2_data()),
        )
        assert signed is not change_pubkey
        assert change_pubkey.signature.is_zero()
        assert isinstance(change_pubkey.eth_auth_data, OnChainAuth)
        assert change_pubkey.get_bytes() == before
        assert signed.is_signature_valid()


class TestSubmitterSignature:

    def test_signs_sha256_of_bytes(self, change_pubkey, zklink_signer):
        tx_bytes = change_pubkey.get_bytes()
        signature = create_submitter_signature(tx_bytes, zklink_signer)
        assert signature.verify_musig(hashlib.sha256(tx_bytes).digest())
        assert not signature.verify_musig(tx_bytes[:32])

    def test_signer_key_embedded(self, zklink_signer):
        signature = create_submitter_signature(b"\x01\x02", zklink_signer)
        assert signature.pub_key == zklink_signer.public_key()
