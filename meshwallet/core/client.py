#!/usr/bin/env python3
"""
MESHWALLET - Node Client

The wallet's only window onto the ledger: submit signed bytes, ask for an
account's balance, nonce and rewards, poll a transaction's state.

Talks JSON to the node's HTTP API gateway. Bytes travel as base64 and
64-bit integers may arrive as strings, as the gateway renders them.
Every failure, timeouts included, surfaces as RemoteError. Nothing here
retries and nothing here touches local account state.
"""

import asyncio
import base64
from dataclasses import dataclass
from typing import List, Optional, Protocol, Tuple

import aiohttp

from meshwallet.config import WalletConfig
from meshwallet.core.account import Address
from meshwallet.exceptions import RemoteError

ACCOUNT_DATA_FLAG_REWARD = 2
ACCOUNT_DATA_FLAG_ACCOUNT = 4

REWARDS_PAGE_SIZE = 10000


@dataclass
class AccountState:
    """Balances and nonces as reported by the node."""

    address: Address
    current_balance: int
    current_nonce: int
    projected_balance: int
    projected_nonce: int


@dataclass
class TransactionState:
    """Handle returned for a submitted or queried transaction."""

    tx_id: bytes
    state: str

    @property
    def tx_id_hex(self) -> str:
        return self.tx_id.hex()


@dataclass
class Reward:
    """One reward credited to an account."""

    layer: int
    layer_reward: int
    total: int
    coinbase: Address

    @property
    def fees(self) -> int:
        """Transaction fees: the part of the total above the layer reward."""
        return self.total - self.layer_reward


@dataclass
class NodeStatus:
    connected_peers: int
    is_synced: bool
    synced_layer: int
    top_layer: int
    verified_layer: int


class LedgerNode(Protocol):
    """Capabilities the wallet backend needs from a ledger node."""

    async def submit_transaction(self, signed_tx: bytes) -> TransactionState: ...

    async def get_account_state(self, address: Address) -> AccountState: ...

    async def get_transaction_state(self, tx_id: bytes) -> TransactionState: ...

    async def get_account_rewards(
        self, address: Address, offset: int = 0, max_results: int = REWARDS_PAGE_SIZE
    ) -> Tuple[List[Reward], int]: ...

    async def get_node_status(self) -> NodeStatus: ...

    async def close(self) -> None: ...


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _unb64(text: str) -> bytes:
    return base64.b64decode(text, validate=True)


def _uint(value) -> int:
    """Gateway uint64 fields are strings; absent means zero."""
    if value is None:
        return 0
    return int(value)


def _layer(data: Optional[dict]) -> int:
    if not data:
        return 0
    return _uint(data.get("number"))


def _parse_tx_state(data: dict) -> TransactionState:
    tx_id = _unb64(data["id"]["id"])
    return TransactionState(tx_id=tx_id, state=data.get("state", "TRANSACTION_STATE_UNSPECIFIED"))


class NodeClient:
    """
    HTTP/JSON client for the ledger node.
    Satisfies the LedgerNode protocol.
    """

    def __init__(self, config: WalletConfig, logger):
        self.config = config
        self.logger = logger
        self.base_url = config.node_url.rstrip("/")
        self.timeout = config.rpc_timeout_seconds
        self.session: aiohttp.ClientSession | None = None

    async def initialize(self):
        """Start the HTTP session."""
        self.session = aiohttp.ClientSession()

    def server_info(self) -> str:
        return self.base_url

    async def _post(self, path: str, payload: dict) -> dict:
        """POST ``payload`` to ``path`` and return the decoded JSON body."""
        if not self.session:
            await self.initialize()

        url = f"{self.base_url}{path}"
        try:
            return await asyncio.wait_for(
                self._request(url, payload),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            self.logger.warning(f"RPC timeout: {path}")
            raise RemoteError(f"Node request timed out after {self.timeout}s: {path}") from e
        except aiohttp.ClientError as e:
            raise RemoteError(f"Node request failed: {path}: {e}") from e

    async def _request(self, url: str, payload: dict) -> dict:
        async with self.session.post(url, json=payload) as response:
            if response.status != 200:
                text = await response.text()
                raise RemoteError(f"Node returned HTTP {response.status}: {text[:200]}")
            try:
                data = await response.json(content_type=None)
            except ValueError as e:
                raise RemoteError(f"Node returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise RemoteError("Node returned an unexpected response shape")
        return data

    async def submit_transaction(self, signed_tx: bytes) -> TransactionState:
        data = await self._post(
            "/v1/transaction/submittransaction",
            {"transaction": _b64(signed_tx)},
        )
        try:
            return _parse_tx_state(data["txstate"])
        except (KeyError, TypeError, ValueError) as e:
            raise RemoteError(f"Malformed submit response: {e}") from e

    async def get_transaction_state(self, tx_id: bytes) -> TransactionState:
        data = await self._post(
            "/v1/transaction/transactionsstate",
            {"transactionId": [{"id": _b64(tx_id)}], "includeTransactions": False},
        )
        try:
            states = data["transactionsState"]
            if not states:
                raise RemoteError(f"Unknown transaction {tx_id.hex()}")
            return _parse_tx_state(states[0])
        except (KeyError, TypeError, ValueError) as e:
            raise RemoteError(f"Malformed transaction state response: {e}") from e

    async def get_account_state(self, address: Address) -> AccountState:
        data = await self._post(
            "/v1/globalstate/accountdataquery",
            {
                "filter": {
                    "accountId": {"address": _b64(bytes(address))},
                    "accountDataFlags": ACCOUNT_DATA_FLAG_ACCOUNT,
                },
                "maxResults": 1,
                "offset": 0,
            },
        )
        try:
            items = data.get("accountItem") or []
            if not items:
                # Never-funded accounts are absent from global state.
                return AccountState(address, 0, 0, 0, 0)
            wrapper = items[0]["accountWrapper"]
            current = wrapper.get("stateCurrent") or {}
            projected = wrapper.get("stateProjected") or {}
            return AccountState(
                address=address,
                current_balance=_uint((current.get("balance") or {}).get("value")),
                current_nonce=_uint(current.get("counter")),
                projected_balance=_uint((projected.get("balance") or {}).get("value")),
                projected_nonce=_uint(projected.get("counter")),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise RemoteError(f"Malformed account response: {e}") from e

    async def get_account_rewards(
        self, address: Address, offset: int = 0, max_results: int = REWARDS_PAGE_SIZE
    ) -> Tuple[List[Reward], int]:
        """One page of rewards credited to ``address`` and the total count."""
        data = await self._post(
            "/v1/globalstate/accountdataquery",
            {
                "filter": {
                    "accountId": {"address": _b64(bytes(address))},
                    "accountDataFlags": ACCOUNT_DATA_FLAG_REWARD,
                },
                "maxResults": max_results,
                "offset": offset,
            },
        )
        try:
            rewards = []
            for item in data.get("accountItem") or []:
                reward = item["reward"]
                rewards.append(Reward(
                    layer=_layer(reward.get("layer")),
                    layer_reward=_uint((reward.get("layerReward") or {}).get("value")),
                    total=_uint((reward.get("total") or {}).get("value")),
                    coinbase=Address(_unb64((reward.get("coinbase") or {}).get("address", ""))),
                ))
            return rewards, _uint(data.get("totalResults"))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise RemoteError(f"Malformed rewards response: {e}") from e

    async def get_node_status(self) -> NodeStatus:
        data = await self._post("/v1/node/status", {})
        try:
            status = data["status"]
            return NodeStatus(
                connected_peers=_uint(status.get("connectedPeers")),
                is_synced=bool(status.get("isSynced", False)),
                synced_layer=_layer(status.get("syncedLayer")),
                top_layer=_layer(status.get("topLayer")),
                verified_layer=_layer(status.get("verifiedLayer")),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise RemoteError(f"Malformed node status response: {e}") from e

    async def close(self):
        """Clean up resources."""
        if self.session:
            await self.session.close()
            self.session = None
