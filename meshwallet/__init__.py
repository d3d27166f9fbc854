"""
MESHWALLET - Command Line Wallet

Local ed25519 accounts, deterministic transfer encoding and signing,
submission to a remote ledger node.

Usage:
    from meshwallet import WalletBackend, WalletConfig, WalletLogger

    config = WalletConfig(data_dir="~/.meshwallet")
    backend = WalletBackend(config, WalletLogger(config))
    backend.create_account("alice")
    backend.persist_accounts()
"""

__version__ = "1.0.0"

from meshwallet.config import WalletConfig
from meshwallet.core.account import Account, Address, verify_signature
from meshwallet.core.builder import TransactionBuilder
from meshwallet.core.client import (
    AccountState,
    LedgerNode,
    NodeClient,
    NodeStatus,
    Reward,
    TransactionState,
)
from meshwallet.core.codec import (
    TX_FORMAT_VERSION,
    SignedTransaction,
    UnsignedTransaction,
    encode_signed,
    encode_unsigned,
)
from meshwallet.core.session import SessionState, SessionStatus
from meshwallet.core.store import AccountStore
from meshwallet.exceptions import (
    ConfigError,
    CorruptStoreError,
    DuplicateAliasError,
    IndexOutOfRangeError,
    NoCurrentAccountError,
    NotFoundError,
    RemoteError,
    SelectionError,
    SigningError,
    StoreIOError,
    WalletError,
)
from meshwallet.logger import WalletLogger
from meshwallet.wallet import WalletBackend

__all__ = [
    # Config
    "WalletConfig",
    # Exceptions
    "WalletError",
    "ConfigError",
    "CorruptStoreError",
    "DuplicateAliasError",
    "SelectionError",
    "NotFoundError",
    "IndexOutOfRangeError",
    "NoCurrentAccountError",
    "SigningError",
    "StoreIOError",
    "RemoteError",
    # Logger
    "WalletLogger",
    # Core
    "Account",
    "Address",
    "verify_signature",
    "AccountStore",
    "SessionState",
    "SessionStatus",
    "UnsignedTransaction",
    "SignedTransaction",
    "TX_FORMAT_VERSION",
    "encode_unsigned",
    "encode_signed",
    "TransactionBuilder",
    "LedgerNode",
    "NodeClient",
    "AccountState",
    "TransactionState",
    "NodeStatus",
    "Reward",
    # Backend
    "WalletBackend",
]
