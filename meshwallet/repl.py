#!/usr/bin/env python3
"""
MESHWALLET REPL - The Command Layer

Reads a line, finds the command, runs it. Command lookup is an ordered
list matched by prefix: the first command whose name starts the input line
wins, and the rest of the line is handed to it as parameters.
"""

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

from meshwallet.config import WalletConfig
from meshwallet.core.account import Account, Address
from meshwallet.exceptions import NoCurrentAccountError, RemoteError, WalletError
from meshwallet.logger import WalletLogger
from meshwallet.ui.console import ConsoleUI
from meshwallet.wallet import WalletBackend

PROMPT = "$ "

SPLASH = "MESHWALLET - local accounts, remote ledger."


@dataclass
class Command:
    text: str
    description: str
    handler: Callable[[str], Awaitable[None]]


class Repl:
    """Interactive loop over a WalletBackend."""

    def __init__(self, backend: WalletBackend, ui: Optional[ConsoleUI] = None):
        self.backend = backend
        self.logger = backend.logger
        self.ui = ui or ConsoleUI()
        self.running = False
        self.commands: List[Command] = [
            Command("account-new", "Create a new account (key pair)", self.create_account),
            Command("account-set", "Set one of the previously created accounts as current", self.choose_account),
            Command("account-list", "List local accounts", self.list_accounts),
            Command("account-info", "Display the current account info", self.print_account_info),
            Command("account-rewards", "Display all rewards awarded to the current account", self.print_local_account_rewards),
            Command("account-sign", "Sign a hex message with the current account private key", self.sign),
            Command("account-text-sign", "Sign a text message with the current account private key", self.text_sign),
            Command("account-send-coin", "Transfer coins from current account to another account", self.submit_coin_transaction),
            Command("state-account", "Display an account balance and nonce", self.print_account_state),
            Command("state-rewards", "Display the rewards awarded to any account", self.print_any_account_rewards),
            Command("status-tx", "Display a transaction status", self.print_transaction_status),
            Command("status-node", "Display node status", self.print_node_status),
            Command("help", "List commands", self.print_help),
            Command("quit", "Quit this app", self.quit),
        ]

    # ── Dispatch ──────────────────────────────────────────

    def find_command(self, text: str) -> Optional[Command]:
        for command in self.commands:
            if text.startswith(command.text):
                return command
        return None

    async def execute(self, text: str) -> bool:
        """Run one input line. Returns False if no command matched."""
        text = text.strip()
        if not text:
            return True
        command = self.find_command(text)
        if command is None:
            self.ui.say("invalid command.")
            return False

        params = text[len(command.text):].strip()
        try:
            await command.handler(params)
        except WalletError as e:
            self.logger.error(f"{command.text} failed", e)
            self.ui.error(str(e))
        except ValueError as e:
            self.ui.error(f"Invalid input: {e}")
        return True

    async def run(self):
        self.running = True
        try:
            await self.first_time()
            while self.running:
                try:
                    line = self.ui.read_line(PROMPT)
                except (EOFError, KeyboardInterrupt):
                    break
                await self.execute(line)
        finally:
            await self.backend.close()

    async def first_time(self):
        self.ui.say(SPLASH)
        if self.backend.load_error is not None:
            self.ui.error(
                f"{self.backend.load_error}. Starting with no accounts; the file is "
                "left as is until a new account is saved."
            )
        try:
            status = await self.backend.node_status()
        except RemoteError as e:
            self.logger.error("Failed to reach node", e)
            self.ui.error(f"Node at {self.backend.config.node_url} unreachable: {e}")
            return
        self.ui.say(f"Connected to node at {self.backend.config.node_url}")
        self.ui.node_status(status)

    # ── Local accounts ────────────────────────────────────

    async def create_account(self, params: str):
        self.ui.say("Create a new account")
        alias = params or self.ui.ask_not_blank("Enter account alias")
        account = self.backend.create_account(alias)
        self.backend.persist_accounts()
        self.ui.say(f"Created account: {account.alias}, address: {account.address}")

    async def choose_account(self, params: str):
        aliases = self.backend.list_accounts()
        if not aliases:
            await self.create_account("")
            return

        if params:
            key = int(params) if params.isdigit() else params
        else:
            self.ui.say("Choose an account to load:")
            key = self.ui.multiple_choice(aliases)
            if key == 0:
                self.ui.say("none selected")
                return

        account = self.backend.select_account(key)
        self.ui.say(f"Loaded account alias: `{account.alias}`, address: {account.address}")

    async def list_accounts(self, params: str):
        try:
            current = self.backend.current_account().alias
        except NoCurrentAccountError:
            current = None
        self.ui.accounts_table(list(self.backend.store), current)

    async def _get_current(self) -> Account:
        """Current account, offering a selection once if none is set."""
        try:
            return self.backend.current_account()
        except NoCurrentAccountError:
            await self.choose_account("")
            return self.backend.current_account()

    async def print_account_info(self, params: str):
        account = await self._get_current()
        state = await self.backend.account_state(account.address)
        self.ui.account_info(account, state)

    async def sign(self, params: str):
        await self._get_current()
        message = bytes.fromhex(params or self.ui.ask_not_blank("Enter message to sign (in hex)"))
        signature = self.backend.sign_message(message)
        self.ui.say(f"signature (in hex): {signature.hex()}")

    async def text_sign(self, params: str):
        await self._get_current()
        message = params or self.ui.ask_not_blank("Enter text message to sign")
        signature = self.backend.sign_message(message.encode("utf-8"))
        self.ui.say(f"signature (in hex): {signature.hex()}")

    # ── Node ──────────────────────────────────────────────

    async def submit_coin_transaction(self, params: str):
        account = await self._get_current()
        config = self.backend.config

        recipient = Address.from_hex(self.ui.ask_not_blank("Enter recipient address"))
        amount = int(self.ui.ask_not_blank("Enter amount to transfer (in Smidge)"))

        # Default nonce comes from the node; pending txs count.
        state = await self.backend.account_state(account.address)
        nonce = int(self.ui.ask_with_default("Enter nonce", state.projected_nonce))
        gas_price = int(self.ui.ask_with_default("Enter gas price", config.default_gas_price))
        gas_limit = int(self.ui.ask_with_default("Enter gas limit", config.default_gas_limit))

        self.ui.say(
            f"Transfer {amount} Smidge from {account.alias} to {recipient} "
            f"(nonce {nonce}, gas price {gas_price}, gas limit {gas_limit})"
        )
        if not self.ui.confirm("Submit this transaction?"):
            self.ui.say("Transaction discarded.")
            return

        tx_state = await self.backend.build_and_submit_transfer(
            recipient, nonce, amount, gas_price, gas_limit
        )
        self.ui.say("Transaction submitted.")
        self.ui.transaction_state(tx_state)

    async def print_account_state(self, params: str):
        address = Address.from_hex(params or self.ui.ask_not_blank("Enter account address"))
        state = await self.backend.account_state(address)
        self.ui.account_state(state)

    async def print_local_account_rewards(self, params: str):
        account = await self._get_current()
        rewards, total = await self.backend.account_rewards(account.address)
        self.ui.rewards(rewards, total)

    async def print_any_account_rewards(self, params: str):
        address = Address.from_hex(params or self.ui.ask_not_blank("Enter account address"))
        rewards, total = await self.backend.account_rewards(address)
        self.ui.rewards(rewards, total)

    async def print_transaction_status(self, params: str):
        tx_id_hex = params or self.ui.ask_not_blank("Enter transaction id (in hex)")
        if tx_id_hex[:2].lower() == "0x":
            tx_id_hex = tx_id_hex[2:]
        tx_state = await self.backend.transaction_state(bytes.fromhex(tx_id_hex))
        self.ui.transaction_state(tx_state)

    async def print_node_status(self, params: str):
        status = await self.backend.node_status()
        self.ui.node_status(status)

    # ── Misc ──────────────────────────────────────────────

    async def print_help(self, params: str):
        for command in self.commands:
            self.ui.say(f"{command.text:<20} {command.description}")

    async def quit(self, params: str):
        self.running = False


async def main():
    """Parse arguments, build the backend, run the loop."""
    import argparse

    parser = argparse.ArgumentParser(
        description="MESHWALLET - command line wallet for a remote ledger node",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables (or use .env file):
  MESHWALLET_DATA_DIR     - Directory holding accounts.json
  MESHWALLET_NODE_URL     - Node API gateway URL (default http://localhost:9093)
        """,
    )
    parser.add_argument("--data-dir", type=str, help="Directory holding accounts.json")
    parser.add_argument("--node-url", type=str, help="Node API gateway URL")
    parser.add_argument("--timeout", type=float, help="Node request timeout in seconds")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: INFO)",
    )
    parser.add_argument("--config", type=str, help="Path to config JSON file")

    args = parser.parse_args()

    if args.config and Path(args.config).exists():
        config_data = json.loads(Path(args.config).read_text())
        config = WalletConfig(**config_data)
    else:
        config = WalletConfig()

    if args.data_dir:
        config.data_dir = args.data_dir
    if args.node_url:
        config.node_url = args.node_url
    if args.timeout:
        config.rpc_timeout_seconds = args.timeout
    if args.log_level:
        config.log_level = args.log_level

    logger = WalletLogger(config)
    backend = WalletBackend(config, logger)
    await Repl(backend).run()


def main_sync():
    """Console-script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main_sync()
