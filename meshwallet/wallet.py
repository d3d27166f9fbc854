#!/usr/bin/env python3
"""
MESHWALLET - Wallet Backend

Composes the account store, the session, the transaction builder and a
ledger node into the surface the command layer talks to.
"""

import asyncio
from typing import List, Optional, Tuple, Union

from meshwallet.config import WalletConfig
from meshwallet.core.account import Account, Address
from meshwallet.core.builder import TransactionBuilder
from meshwallet.core.client import (
    AccountState,
    LedgerNode,
    NodeClient,
    NodeStatus,
    REWARDS_PAGE_SIZE,
    Reward,
    TransactionState,
)
from meshwallet.core.session import SessionState
from meshwallet.core.store import AccountStore
from meshwallet.exceptions import ConfigError, CorruptStoreError, RemoteError
from meshwallet.logger import WalletLogger


class WalletBackend:
    """
    Everything the REPL can ask of the wallet.

    Local operations are synchronous. Anything that reaches the node is a
    coroutine and never changes local state, whatever the outcome.
    """

    def __init__(
        self,
        config: WalletConfig,
        logger: WalletLogger,
        node: Optional[LedgerNode] = None,
        store: Optional[AccountStore] = None,
    ):
        self.config = config
        self.logger = logger

        errors = config.validate()
        if errors:
            for error in errors:
                self.logger.error("Configuration error", Exception(error))
            raise ConfigError("; ".join(errors))

        self.load_error: Optional[CorruptStoreError] = None
        if store is None:
            store = self._load_store()
        self.store = store
        self.session = SessionState(self.store, logger)
        self.builder = TransactionBuilder()
        self.node: LedgerNode = node if node is not None else NodeClient(config, logger)

    def _load_store(self) -> AccountStore:
        """
        Load the accounts file. A corrupt file is reported and replaced by
        an empty in-memory store; the file itself stays on disk until the
        operator saves explicitly.
        """
        path = self.config.accounts_path
        try:
            return AccountStore.load(path)
        except CorruptStoreError as e:
            self.logger.error(f"Cannot load accounts from {path}", e)
            self.load_error = e
            return AccountStore(path=path)

    # ── Local accounts ────────────────────────────────────

    def create_account(self, alias: str) -> Account:
        account = self.session.create_account(alias)
        self.logger.account_created(account.alias, str(account.address))
        return account

    def list_accounts(self) -> List[str]:
        return self.session.list_accounts()

    def select_account(self, key: Union[str, int]) -> Account:
        return self.session.select(key)

    def current_account(self) -> Account:
        return self.session.current()

    def persist_accounts(self) -> None:
        self.store.save()
        self.load_error = None
        self.logger.info(f"Saved {len(self.store)} account(s) to {self.store.path}")

    def sign_message(self, message: bytes) -> bytes:
        """Raw signature with the current account's key."""
        return self.current_account().sign(message)

    # ── Node ──────────────────────────────────────────────

    async def build_and_submit_transfer(
        self,
        recipient: Address,
        nonce: int,
        amount: int,
        gas_price: int,
        gas_limit: int,
    ) -> TransactionState:
        """
        Sign a transfer from the current account and hand it to the node.
        ``nonce`` must come from the node's reported account state.
        """
        sender = self.current_account()
        signed_tx = self.builder.build_transfer(
            sender, recipient, nonce, amount, gas_price, gas_limit
        )
        self.logger.debug(
            f"Submitting transfer {sender.alias} -> {recipient} "
            f"amount={amount} nonce={nonce}"
        )
        try:
            state = await self.node.submit_transaction(signed_tx)
        except asyncio.TimeoutError as e:
            raise RemoteError("Transaction submission timed out") from e
        self.logger.transfer_submitted(state.tx_id_hex, state.state)
        return state

    async def account_state(self, address: Optional[Address] = None) -> AccountState:
        """Node-side state of ``address`` (default: the current account)."""
        if address is None:
            address = self.current_account().address
        return await self.node.get_account_state(address)

    async def account_rewards(
        self,
        address: Optional[Address] = None,
        offset: int = 0,
        max_results: int = REWARDS_PAGE_SIZE,
    ) -> Tuple[List[Reward], int]:
        """Rewards credited to ``address`` (default: the current account) and their count."""
        if address is None:
            address = self.current_account().address
        return await self.node.get_account_rewards(address, offset, max_results)

    async def transaction_state(self, tx_id: bytes) -> TransactionState:
        return await self.node.get_transaction_state(tx_id)

    async def node_status(self) -> NodeStatus:
        return await self.node.get_node_status()

    async def close(self):
        await self.node.close()
