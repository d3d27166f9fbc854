#!/usr/bin/env python3
"""
MESHWALLET - Core Configuration

Wallet configuration and environment management.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ACCOUNTS_FILE_NAME = "accounts.json"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_dotenv_loaded = False


def _ensure_dotenv() -> None:
    """Load .env file exactly once, on first call."""
    global _dotenv_loaded
    if not _dotenv_loaded:
        load_dotenv()
        _dotenv_loaded = True


@dataclass
class WalletConfig:
    """
    Everything the wallet needs to know before it opens the accounts file
    or dials the node.
    """

    # Local storage
    data_dir: str = ""

    # Node connection
    node_url: str = ""
    rpc_timeout_seconds: float = 15.0

    # Transfer defaults offered at the prompt (smallest units)
    default_gas_price: int = 1
    default_gas_limit: int = 100

    # Logging
    log_level: str = "INFO"
    log_file: str = "meshwallet.log"

    def __post_init__(self):
        """Fill env-based defaults after dataclass init."""
        _ensure_dotenv()
        if not self.data_dir:
            self.data_dir = os.getenv(
                "MESHWALLET_DATA_DIR", str(Path.home() / ".meshwallet")
            )
        if not self.node_url:
            self.node_url = os.getenv("MESHWALLET_NODE_URL", "http://localhost:9093")

    @property
    def accounts_path(self) -> Path:
        return Path(self.data_dir).expanduser() / ACCOUNTS_FILE_NAME

    def __repr__(self) -> str:
        return (
            f"WalletConfig(data_dir='{self.data_dir}', "
            f"node_url='{self.node_url}', "
            f"rpc_timeout_seconds={self.rpc_timeout_seconds})"
        )

    def validate(self) -> list[str]:
        """Collect every configuration problem instead of stopping at the first."""
        errors = []

        if not self.data_dir:
            errors.append("Data directory required (set MESHWALLET_DATA_DIR)")

        if not self.node_url:
            errors.append("Node URL required (set MESHWALLET_NODE_URL)")
        elif not self.node_url.startswith(("http://", "https://")):
            errors.append("Node URL must start with http:// or https://")

        if self.rpc_timeout_seconds <= 0:
            errors.append("RPC timeout must be positive")

        if self.default_gas_price < 0:
            errors.append("Default gas price must be non-negative")

        if self.default_gas_limit < 0:
            errors.append("Default gas limit must be non-negative")

        if self.log_level not in _LOG_LEVELS:
            errors.append(f"Log level must be one of {', '.join(_LOG_LEVELS)}")

        return errors
