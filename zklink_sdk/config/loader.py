"""
zkLink SDK TOML Configuration Loader

Loads the SDK configuration file with environment variable overrides.
Every section is a dataclass with ``from_dict`` / ``apply_env``.

Environment variable mapping:
    [network] l1_client_id  → ZKLINK_L1_CLIENT_ID
    [network] main_contract → ZKLINK_MAIN_CONTRACT
    [network] chain_id      → ZKLINK_CHAIN_ID
    [logging] level         → ZKLINK_LOG_LEVEL
    [logging] file          → ZKLINK_LOG_FILE

Private keys are never read from configuration.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib as tomli  # Python 3.11+
except ImportError:
    import tomli  # type: ignore[no-redef]

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_ADDRESS_PATTERN = re.compile(r"^0x([0-9a-fA-F]{40}|[0-9a-fA-F]{64})$")
ZERO_ADDRESS = "0x" + "00" * 20


@dataclass
class NetworkConfig:
    """[network] section."""
    l1_client_id: int = 1
    main_contract: str = ZERO_ADDRESS
    chain_id: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkConfig":
        return cls(
            l1_client_id=data.get("l1_client_id", 1),
            main_contract=data.get("main_contract", ZERO_ADDRESS),
            chain_id=data.get("chain_id", 1),
        )

    def apply_env(self) -> None:
        """Override from environment variables."""
        if v := os.environ.get("ZKLINK_L1_CLIENT_ID"):
            self.l1_client_id = int(v)
        if v := os.environ.get("ZKLINK_MAIN_CONTRACT"):
            self.main_contract = v
        if v := os.environ.get("ZKLINK_CHAIN_ID"):
            self.chain_id = int(v)

    def validate(self) -> None:
        if self.l1_client_id < 1:
            raise ConfigurationError("l1_client_id must be >= 1")
        if not 1 <= self.chain_id <= 255:
            raise ConfigurationError(f"Invalid chain_id: {self.chain_id}")
        if not _ADDRESS_PATTERN.match(self.main_contract):
            raise ConfigurationError(f"Invalid main_contract address: {self.main_contract}")


@dataclass
class LoggingConfig:
    """[logging] section."""
    level: str = "INFO"
    file: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingConfig":
        return cls(
            level=data.get("level", "INFO"),
            file=data.get("file", ""),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("ZKLINK_LOG_LEVEL"):
            self.level = v
        if v := os.environ.get("ZKLINK_LOG_FILE"):
            self.file = v

    def validate(self) -> None:
        if self.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigurationError(f"Invalid log level: {self.level}")


@dataclass
class SDKConfig:
    """
    Unified SDK configuration.

    Loads every section of the configuration file and applies environment
    variable overrides.
    """
    network: NetworkConfig = field(default_factory=NetworkConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SDKConfig":
        """Create SDKConfig from a parsed TOML dict."""
        return cls(
            network=NetworkConfig.from_dict(data.get("network", {})),
            logging=LoggingConfig.from_dict(data.get("logging", {})),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "SDKConfig":
        """
        Load configuration from a TOML file.

        Args:
            config_path: Path to zklink.toml

        Returns:
            SDKConfig instance
        """
        path = Path(config_path)
        if not path.exists():
            logger.debug("Config file not found: %s, using defaults", config_path)
            cfg = cls()
            cfg.apply_env()
            return cfg

        with open(path, "rb") as f:
            try:
                raw = tomli.load(f)
            except tomli.TOMLDecodeError as e:
                raise ConfigurationError(f"Invalid TOML in {config_path}: {e}") from e

        cfg = cls.from_dict(raw)
        cfg.apply_env()
        return cfg

    def apply_env(self) -> None:
        """Apply environment variable overrides to all sections."""
        self.network.apply_env()
        self.logging.apply_env()

    def validate(self) -> bool:
        """
        Validate all configuration sections.

        Raises:
            ConfigurationError: on invalid config
        """
        self.network.validate()
        self.logging.validate()
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict (for diagnostics, NOT for re-creating TOML)."""
        return {
            "network": {
                "l1_client_id": self.network.l1_client_id,
                "main_contract": self.network.main_contract,
                "chain_id": self.network.chain_id,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
        }


def load_config(path: Optional[str] = None) -> SDKConfig:
    """
    Load SDK configuration.

    Resolution order:
        1. Explicit *path* argument
        2. ZKLINK_CONFIG env var
        3. ./zklink.toml in current directory
        4. Defaults (with env overrides)
    """
    if path is None:
        path = os.environ.get("ZKLINK_CONFIG", "zklink.toml")

    return SDKConfig.from_file(path)
