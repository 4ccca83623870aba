"""
zkLink SDK Constants

This module consolidates the protocol constants (field bit widths, packing
layouts, limits) and the environment configuration used by the logging
layer. Constants are organized by category for easy reference.
"""
import ast
from dotenv import dotenv_values

# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================
# Load environment variables once at module import
_config = dotenv_values(".env")

LOGGER_DEFAULTS = {
    'LOG_LEVEL':                       'INFO',
    'LOG_FORMAT':                      '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    'LOG_DATE_FORMAT':                 '%Y-%m-%dT%H:%M:%S',
    'LOG_CONSOLE_HIGHLIGHTING':        'True',
    'LOG_FILE_OUTPUT':                 'False',
}

LOG_MAX_FILE_SIZE = 10 * 1024 * 1024 # 10MB
LOG_BACKUP_COUNT = 5


# WARNING: THE VALUES BELOW ARE PART OF THE WIRE FORMAT. CIRCUITS, VERIFIERS AND
# OTHER SDKS ENCODE THE SAME TRANSACTIONS BIT FOR BIT. CHANGING ANY OF THEM
# PRODUCES SIGNATURES THE NETWORK WILL REJECT.

# ==================================================================================
# FIELD BIT WIDTHS
# ==================================================================================
CHAIN_ID_BIT_WIDTH = 8
SUB_ACCOUNT_ID_BIT_WIDTH = 8
ACCOUNT_ID_BIT_WIDTH = 32
TOKEN_BIT_WIDTH = 16
SLOT_BIT_WIDTH = 16
NONCE_BIT_WIDTH = 32
ORDER_NONCE_BIT_WIDTH = 24
TIMESTAMP_BIT_WIDTH = 32
PRICE_BIT_WIDTH = 120
BALANCE_BIT_WIDTH = 128
FEE_RATIO_BIT_WIDTH = 8
SERIAL_ID_BIT_WIDTH = 64

NEW_PUBKEY_HASH_BYTES_LEN = 20
ADDRESS_BYTES_LEN = 32
ETH_ADDRESS_BYTES_LEN = 20
HASH_BYTES_LEN = 32
ETH_SIGNATURE_BYTES_LEN = 65


# ==================================================================================
# AMOUNT PACKING
# ==================================================================================
# Packed value = mantissa * 10^exponent
AMOUNT_EXPONENT_BIT_WIDTH = 5
AMOUNT_MANTISSA_BIT_WIDTH = 35
FEE_EXPONENT_BIT_WIDTH = 5
FEE_MANTISSA_BIT_WIDTH = 11
PACKING_EXPONENT_BASE = 10


# ==================================================================================
# LIMITS
# ==================================================================================
MIN_CHAIN_ID = 1
MAX_CHAIN_ID = (1 << CHAIN_ID_BIT_WIDTH) - 1
MAX_SUB_ACCOUNT_ID = 31
MAX_ACCOUNT_ID = (1 << ACCOUNT_ID_BIT_WIDTH) - 1
MAX_TOKEN_ID = (1 << TOKEN_BIT_WIDTH) - 1
MAX_SLOT_ID = (1 << SLOT_BIT_WIDTH) - 1
MAX_NONCE = (1 << NONCE_BIT_WIDTH) - 1
MAX_ORDER_NONCE = (1 << ORDER_NONCE_BIT_WIDTH) - 1
MIN_PRICE = 1
MAX_PRICE = (1 << PRICE_BIT_WIDTH) - 1
MAX_AMOUNT = (1 << BALANCE_BIT_WIDTH) - 1
MAX_FEE_RATIO = (1 << FEE_RATIO_BIT_WIDTH) - 1


# ==================================================================================
# TRANSACTION LAYOUT
# ==================================================================================
DEPOSIT_TX_TYPE = 0x01
TRANSFER_TX_TYPE = 0x04
CHANGE_PUBKEY_TX_TYPE = 0x06
ORDER_MATCHING_TX_TYPE = 0x08
ORDER_MSG_TYPE = 0xff

ORDER_BYTES = 38
DEPOSIT_BYTES = 55
TRANSFER_BYTES = 56
CHANGE_PUBKEY_BYTES = 72
ORDER_MATCHING_BYTES = 74

# Width the concatenated maker || taker orders are padded to before hashing.
# Matches the deployed circuits; larger than two orders on purpose.
ORDERS_BIT_WIDTH = 1424
ORDERS_BYTES = ORDERS_BIT_WIDTH // 8

# Messages are padded to this many bits before the Rescue hash.
PAD_MSG_BEFORE_HASH_BITS_LEN = 736


# ==================================================================================
# SIGNER DERIVATION
# ==================================================================================
ZKLINK_SIGN_MESSAGE = (
    "Sign this message to create a key to interact with zkLink's layer2 services.\n"
    "NOTE: This application is powered by zkLink protocol.\n"
    "\n"
    "Only sign this message for a trusted client!"
)

EIP712_DOMAIN_NAME = "ZkLink"
EIP712_DOMAIN_VERSION = "1"


# ==================================================================================
# CONFIGURATION WRAPPERS
# ==================================================================================
class ConfigString(str):
    """
    String subclass that stores a default value.
    """
    def __new__(cls, value, default):
        obj = str.__new__(cls, value)
        obj._default = default
        return obj

    def default(self):
        return self._default

class ConfigBool(int):
    """
    Int subclass acting as a boolean that stores a default value.
    """
    def __new__(cls, value, default):
        obj = int.__new__(cls, bool(value))
        obj._default = default
        return obj

    def default(self):
        return self._default

    def __repr__(self):
        return str(bool(self))

    def __str__(self):
        return str(bool(self))

    def __eq__(self, other):
        return bool(self) == other

    __hash__ = int.__hash__


# ==================================================================================
# DYNAMIC CONFIGURATION LOADING
# ==================================================================================
namespace = globals()

def parse_bool(v):
    """
    Convert "True"/"False" (any casing, with surrounding whitespace) into bool.
    Avoids exceptions by only calling ast.literal_eval for known literals.
    """
    if not isinstance(v, str):
        return v
    s = v.strip()
    if not s:
        return v
    if s.casefold() in {"true", "false"}:
        return ast.literal_eval(s.title())
    return v

for key, default_raw in LOGGER_DEFAULTS.items():
    # dotenv_values returns strings or None. None is treated as missing.
    raw = _config.get(key)
    value_raw = default_raw if raw is None else raw

    value = parse_bool(value_raw)
    default_val = parse_bool(default_raw)

    if isinstance(value, bool):
        namespace[key] = ConfigBool(value, default_val)
    else:
        namespace[key] = ConfigString(value_raw, default_val)
