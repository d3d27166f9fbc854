"""
MESHWALLET Test Suite - Shared Fixtures
"""

from unittest.mock import AsyncMock

import pytest

from meshwallet.config import WalletConfig
from meshwallet.core.client import AccountState, NodeStatus, Reward, TransactionState
from meshwallet.core.store import AccountStore
from meshwallet.logger import WalletLogger
from meshwallet.wallet import WalletBackend


@pytest.fixture
def wallet_config(tmp_path):
    """Configuration rooted in a throwaway data directory."""
    return WalletConfig(
        data_dir=str(tmp_path / "data"),
        node_url="http://localhost:9093",
        log_file=str(tmp_path / "meshwallet.log"),
    )


@pytest.fixture
def logger(wallet_config):
    """Logger instance for tests."""
    return WalletLogger(wallet_config)


@pytest.fixture
def store(wallet_config):
    """Empty store bound to the config's accounts path."""
    return AccountStore.load(wallet_config.accounts_path)


@pytest.fixture
def node():
    """Ledger node stand-in."""
    node = AsyncMock()
    node.submit_transaction.return_value = TransactionState(
        tx_id=bytes(range(32)), state="TRANSACTION_STATE_MEMPOOL"
    )
    node.get_account_state.side_effect = lambda address: AccountState(
        address=address,
        current_balance=1_000_000_000_000,
        current_nonce=3,
        projected_balance=900_000_000_000,
        projected_nonce=4,
    )
    node.get_account_rewards.side_effect = lambda address, offset=0, max_results=10000: (
        [Reward(layer=7, layer_reward=2_000_000_000_000, total=2_000_000_000_042, coinbase=address)],
        1,
    )
    node.get_node_status.return_value = NodeStatus(
        connected_peers=3, is_synced=True, synced_layer=10, top_layer=10, verified_layer=8
    )
    return node


@pytest.fixture
def backend(wallet_config, logger, node):
    return WalletBackend(wallet_config, logger, node=node)
