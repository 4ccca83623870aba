"""Shared fixtures for the zklink_sdk test suite."""

import pytest

# Fixed keys; never use outside tests
TEST_ZKLINK_PRIVATE_KEY = "0x" + "01" * 32
TEST_ETH_PRIVATE_KEY = "0xbe725250b123a39dab5b7579334d5888987c72a58f4508062545fe6e08ca94f4"
TEST_MAIN_CONTRACT = "0x" + "00" * 20


@pytest.fixture(scope="session")
def zklink_signer():
    from zklink_sdk.crypto.keys import ZkLinkSigner
    return ZkLinkSigner.from_hex(TEST_ZKLINK_PRIVATE_KEY)


@pytest.fixture(scope="session")
def eth_signer():
    from zklink_sdk.crypto.eth import EthSigner
    return EthSigner.from_hex(TEST_ETH_PRIVATE_KEY)


def make_order(**overrides):
    from zklink_sdk.types.order_matching import Order
    fields = dict(
        account_id=1,
        sub_account_id=0,
        slot_id=5,
        nonce=0,
        base_token_id=1,
        quote_token_id=2,
        amount="1000000000000000000",
        price="50000",
        is_sell=False,
        fee_ratio1=5,
        fee_ratio2=10,
    )
    fields.update(overrides)
    return Order(**fields)


@pytest.fixture
def order():
    return make_order()


@pytest.fixture
def change_pubkey(zklink_signer):
    from zklink_sdk.types.change_pubkey import ChangePubKey
    return ChangePubKey(
        chain_id=1,
        account_id=2,
        sub_account_id=4,
        new_pk_hash=zklink_signer.public_key_hash(),
        fee_token=1,
        fee=100,
        nonce=100,
        ts=1693472232,
    )
