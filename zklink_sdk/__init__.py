"""
zkLink SDK Package

Transaction construction, packing, Musig-Rescue signing and local
validation for the zkLink layer-2 network.

Public names are loaded lazily. For direct module access, import from
submodules:

    from zklink_sdk.crypto import ZkLinkSigner, EthSigner
    from zklink_sdk.types.order_matching import Order, OrderMatching
    from zklink_sdk.signing import sign_change_pubkey
"""

__version__ = "0.1.0"

_LAZY_EXPORTS = {
    # Transactions
    "Order": ".types.order_matching",
    "OrderMatching": ".types.order_matching",
    "ChangePubKey": ".types.change_pubkey",
    "Create2Data": ".types.change_pubkey",
    "OnChainAuth": ".types.change_pubkey",
    "EthECDSAAuth": ".types.change_pubkey",
    "EthCreate2Auth": ".types.change_pubkey",
    "Deposit": ".types.deposit",
    "Transfer": ".types.transfer",
    # Signers
    "ZkLinkSigner": ".crypto.keys",
    "ZkLinkSignature": ".crypto.keys",
    "PubKeyHash": ".crypto.keys",
    "EthSigner": ".crypto.eth",
    "PackedEthSignature": ".crypto.eth",
    # Authorization
    "OnChainRequest": ".signing",
    "EthECDSARequest": ".signing",
    "EthCreate2Request": ".signing",
    "TxSignature": ".signing",
    "sign_change_pubkey": ".signing",
    "create_submitter_signature": ".signing",
    # Configuration
    "load_config": ".config",
}


def __getattr__(name):
    """Lazy module loading keeps ``import zklink_sdk`` cheap."""
    module_name = _LAZY_EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module 'zklink_sdk' has no attribute {name!r}")
    import importlib

    module = importlib.import_module(module_name, __name__)
    return getattr(module, name)


__all__ = list(_LAZY_EXPORTS)
