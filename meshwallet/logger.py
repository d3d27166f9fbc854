#!/usr/bin/env python3
"""
MESHWALLET - Logging

Console plus rotating file output. Private keys never pass through here.
"""

import logging
from logging.handlers import RotatingFileHandler

from .config import WalletConfig


class WalletLogger:
    """Thin wrapper around the ``MESHWALLET`` stdlib logger."""

    def __init__(self, config: WalletConfig):
        self.logger = logging.getLogger("MESHWALLET")
        self.logger.setLevel(getattr(logging, config.log_level))

        # logging.getLogger returns the same instance on every call, so only
        # the first WalletLogger installs handlers.
        if not self.logger.handlers:
            console = logging.StreamHandler()
            console.setFormatter(logging.Formatter(
                '%(asctime)s | %(levelname)8s | %(message)s',
                datefmt='%H:%M:%S'
            ))
            console.setLevel(logging.WARNING)
            self.logger.addHandler(console)

            file_handler = RotatingFileHandler(
                config.log_file,
                maxBytes=10_000_000,  # 10MB
                backupCount=5
            )
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s | %(levelname)8s | %(name)s | %(message)s'
            ))
            self.logger.addHandler(file_handler)

    def account_created(self, alias: str, address: str):
        self.logger.info(f"Account created: {alias} ({address})")

    def account_selected(self, alias: str):
        self.logger.info(f"Current account: {alias}")

    def transfer_submitted(self, tx_id: str, state: str):
        self.logger.info(f"Transfer submitted: {tx_id} [{state}]")

    def error(self, context: str, error: Exception):
        self.logger.error(f"{context}: {str(error)}")

    def info(self, message: str):
        self.logger.info(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def debug(self, message: str):
        self.logger.debug(message)
