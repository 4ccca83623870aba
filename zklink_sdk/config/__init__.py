"""
zkLink SDK Configuration

Loads zklink.toml; environment variables override TOML values.
"""

from .loader import (
    SDKConfig,
    NetworkConfig,
    LoggingConfig,
    load_config,
)

__all__ = [
    "SDKConfig",
    "NetworkConfig",
    "LoggingConfig",
    "load_config",
]
