#!/usr/bin/env python3
"""
MESHWALLET - Terminal Console

Rich-based prompts and renderers for the REPL:
- free text and non-blank prompts
- numbered multiple choice
- account tables and account info panels
- coin amount formatting

Aliases, addresses and node messages are operator or network data, never
markup: they reach rich as ``Text`` or through ``escape``.
"""

from typing import Callable, List, Optional, TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from meshwallet.core.account import Account
    from meshwallet.core.client import AccountState, NodeStatus, Reward, TransactionState

PRINT_PREFIX = ">"

COIN_UNIT = 10**12
COIN_NAME = "SMH"
SMALLEST_UNIT_NAME = "Smidge"


def coin_amount(value: int) -> str:
    """Human-readable amount: whole coins above 10**10 units, raw units below."""
    if value >= COIN_UNIT:
        return f"{value // COIN_UNIT}.{value % COIN_UNIT:012d} {COIN_NAME}"
    if value >= 10**10:
        return f"0.{value % COIN_UNIT:012d} {COIN_NAME}"
    return f"{value} {SMALLEST_UNIT_NAME}"


class ConsoleUI:
    """Prompting and rendering on top of a rich Console."""

    def __init__(
        self,
        console: Optional[Console] = None,
        input_func: Optional[Callable[[str], str]] = None,
    ):
        self.console = console or Console()
        self._input = input_func or self._console_input

    def _console_input(self, prompt: str) -> str:
        # Prompts carry brackets such as "[y/N]".
        return self.console.input(Text(prompt))

    # ── Prompts ───────────────────────────────────────────

    def read_line(self, prompt: str) -> str:
        return self._input(prompt)

    def ask(self, message: str) -> str:
        return self._input(f"{PRINT_PREFIX} {message}: ").strip()

    def ask_not_blank(self, message: str) -> str:
        while True:
            answer = self.ask(message)
            if answer:
                return answer
            self.say("Please enter a non-empty value.")

    def ask_with_default(self, message: str, default) -> str:
        answer = self.ask(f"{message} (default: {default})")
        return answer or str(default)

    def confirm(self, message: str) -> bool:
        return self.ask(f"{message} [y/N]").lower() in ("y", "yes")

    def multiple_choice(self, options: List[str]) -> int:
        """
        Numbered menu. Returns the 1-based choice, or 0 when the operator
        picks nothing.
        """
        for number, option in enumerate(options, start=1):
            self.console.print(f"  [bold]{number}[/bold]) {escape(option)}", highlight=False)
        answer = self.ask(f"Enter a number (1-{len(options)}, 0 for none)")
        try:
            choice = int(answer)
        except ValueError:
            return 0
        if 1 <= choice <= len(options):
            return choice
        return 0

    # ── Output ────────────────────────────────────────────

    def say(self, message: str):
        self.console.print(f"{PRINT_PREFIX} {message}", markup=False, highlight=False)

    def error(self, message: str):
        self.console.print(Text(f"{PRINT_PREFIX} {message}", style="red"))

    def accounts_table(self, accounts: List["Account"], current_alias: Optional[str]):
        table = Table(title="Local accounts", expand=False)
        table.add_column("#", justify="right", style="bold")
        table.add_column("Alias", style="cyan")
        table.add_column("Address")
        table.add_column("Current", justify="center")
        for number, account in enumerate(accounts, start=1):
            marker = "*" if account.alias == current_alias else ""
            table.add_row(str(number), Text(account.alias), str(account.address), marker)
        self.console.print(table)

    def account_info(self, account: "Account", state: "AccountState"):
        lines = [
            f"Local alias: {account.alias}",
            f"Address: {account.address}",
            f"Balance: {coin_amount(state.current_balance)}",
            f"Nonce: {state.current_nonce}",
            f"Projected Balance: {coin_amount(state.projected_balance)}",
            f"Projected Nonce: {state.projected_nonce}",
            "Projected account state includes all pending transactions "
            "that haven't been added to the mesh yet.",
            f"Public key: 0x{account.public_key.hex()}",
            f"Private key: 0x{account.private_key.hex()}",
        ]
        self.console.print(Panel(Text("\n".join(lines)), title="Account", expand=False))

    def account_state(self, state: "AccountState"):
        lines = [
            f"Address: {state.address}",
            f"Balance: {coin_amount(state.current_balance)}",
            f"Nonce: {state.current_nonce}",
            f"Projected Balance: {coin_amount(state.projected_balance)}",
            f"Projected Nonce: {state.projected_nonce}",
        ]
        self.console.print(Panel(Text("\n".join(lines)), title="Global state", expand=False))

    def rewards(self, rewards: List["Reward"], total: int):
        self.say(f"Total rewards: {total}")
        for reward in rewards:
            self.say(f"Rewarded on layer: {reward.layer}")
            self.say(f"Layer reward: {coin_amount(reward.layer_reward)}")
            self.say(f"Transaction fees: {coin_amount(reward.fees)}")
            self.say(f"Total reward: {coin_amount(reward.total)}")
            self.say(f"Rewards account: {reward.coinbase}")
            self.say("-----")

    def transaction_state(self, state: "TransactionState"):
        self.say(f"Transaction id: 0x{state.tx_id_hex}")
        self.say(f"State: {state.state}")

    def node_status(self, status: "NodeStatus"):
        table = Table(title="Node status", show_header=False, expand=False)
        table.add_column("Field", style="bold")
        table.add_column("Value")
        table.add_row("Synced", "yes" if status.is_synced else "no")
        table.add_row("Connected peers", str(status.connected_peers))
        table.add_row("Synced layer", str(status.synced_layer))
        table.add_row("Top layer", str(status.top_layer))
        table.add_row("Verified layer", str(status.verified_layer))
        self.console.print(table)
