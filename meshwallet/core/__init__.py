"""
MESHWALLET Core - Accounts, store, codec, builder, session and node client.
"""

from .account import Account, Address, verify_signature
from .builder import TransactionBuilder
from .client import AccountState, LedgerNode, NodeClient, NodeStatus, Reward, TransactionState
from .codec import SignedTransaction, UnsignedTransaction, encode_signed, encode_unsigned
from .session import SessionState, SessionStatus
from .store import AccountStore

__all__ = [
    "Account",
    "Address",
    "verify_signature",
    "AccountStore",
    "SessionState",
    "SessionStatus",
    "UnsignedTransaction",
    "SignedTransaction",
    "encode_unsigned",
    "encode_signed",
    "TransactionBuilder",
    "LedgerNode",
    "NodeClient",
    "AccountState",
    "TransactionState",
    "NodeStatus",
    "Reward",
]
