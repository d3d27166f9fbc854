#!/usr/bin/env python3
"""
MESHWALLET - Custom Exception Hierarchy

Structured error types for precise error handling.
"""


class WalletError(Exception):
    """Base exception for all MESHWALLET errors."""

    pass


class ConfigError(WalletError):
    """Invalid or missing configuration."""

    pass


class CorruptStoreError(WalletError):
    """Accounts file exists but could not be parsed."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Corrupt accounts file {path}: {reason}")


class DuplicateAliasError(WalletError):
    """An account with this alias already exists."""

    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(f"Account alias already exists: {alias!r}")


class SelectionError(WalletError):
    """Account lookup or selection failure."""

    pass


class NotFoundError(SelectionError):
    """No account with the requested alias."""

    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(f"No account with alias {alias!r}")


class IndexOutOfRangeError(SelectionError):
    """Account position outside 1..len(store)."""

    def __init__(self, position: int, size: int):
        self.position = position
        self.size = size
        super().__init__(f"Account number {position} out of range (1..{size})")


class NoCurrentAccountError(SelectionError):
    """No account has been selected in this session."""

    pass


class SigningError(WalletError):
    """Key material is invalid or corrupted."""

    pass


class StoreIOError(WalletError, OSError):
    """Accounts file could not be read or written."""

    pass


class RemoteError(WalletError):
    """Ledger node request failed, timed out or returned garbage."""

    pass
