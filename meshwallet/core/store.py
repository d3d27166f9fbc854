#!/usr/bin/env python3
"""
MESHWALLET - Account Store

Ordered, in-memory collection of local accounts backed by a single JSON
file. Creation order is the selection order ("account number 3").

Nothing here saves implicitly: callers persist with ``save()`` after a
mutation, so a crash loses at most the unsaved creation.
"""

import json
import os
import threading
from pathlib import Path
from typing import Iterator, List, Optional

from meshwallet.core.account import Account
from meshwallet.exceptions import (
    CorruptStoreError,
    DuplicateAliasError,
    IndexOutOfRangeError,
    NotFoundError,
    SigningError,
    StoreIOError,
)

STORE_FORMAT_VERSION = 1


class AccountStore:
    """Local accounts in creation order."""

    def __init__(self, accounts: Optional[List[Account]] = None, path: Optional[Path] = None):
        self._accounts: List[Account] = list(accounts or [])
        self.path = Path(path) if path is not None else None
        self._lock = threading.Lock()

    # ── Persistence ───────────────────────────────────────

    @classmethod
    def load(cls, path) -> "AccountStore":
        """
        Read the accounts file at ``path``.

        A missing file yields an empty store bound to ``path``. A file that
        exists but cannot be parsed raises CorruptStoreError; the file is
        left untouched.
        """
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return cls(path=path)
        except OSError as e:
            raise StoreIOError(f"Cannot read accounts file {path}: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptStoreError(path, f"invalid JSON ({e})") from e

        # Older files hold the bare list.
        if isinstance(data, dict):
            entries = data.get("accounts")
        else:
            entries = data
        if not isinstance(entries, list):
            raise CorruptStoreError(path, "expected a list of accounts")

        accounts: List[Account] = []
        seen = set()
        for position, entry in enumerate(entries, start=1):
            if not isinstance(entry, dict):
                raise CorruptStoreError(path, f"account #{position} is not an object")
            try:
                account = Account.from_dict(entry)
                account.check_keys()
            except (KeyError, ValueError, TypeError) as e:
                raise CorruptStoreError(path, f"account #{position}: bad field {e}") from e
            except SigningError as e:
                raise CorruptStoreError(path, f"account #{position}: {e}") from e
            if account.alias in seen:
                raise CorruptStoreError(path, f"duplicate alias {account.alias!r}")
            seen.add(account.alias)
            accounts.append(account)

        return cls(accounts, path=path)

    def save(self, path=None) -> None:
        """
        Write every account, private keys included, to ``path`` (default:
        the path the store was loaded from). The file is replaced atomically.
        """
        target = Path(path) if path is not None else self.path
        if target is None:
            raise StoreIOError("No accounts file path to save to")

        with self._lock:
            payload = {
                "version": STORE_FORMAT_VERSION,
                "accounts": [account.to_dict() for account in self._accounts],
            }
            temp_path = target.with_name(target.name + ".tmp")
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                with temp_path.open("w", encoding="utf-8") as handle:
                    json.dump(payload, handle, indent=2)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(temp_path, target)
            except OSError as e:
                temp_path.unlink(missing_ok=True)
                raise StoreIOError(f"Cannot write accounts file {target}: {e}") from e

        if self.path is None:
            self.path = target

    # ── Mutation ──────────────────────────────────────────

    def create_account(self, alias: str) -> Account:
        """Generate and append a new account. Not persisted."""
        if not alias or not alias.strip():
            raise ValueError("Account alias must not be blank")

        with self._lock:
            if any(account.alias == alias for account in self._accounts):
                raise DuplicateAliasError(alias)
            account = Account.generate(alias)
            self._accounts.append(account)
        return account

    # ── Queries ───────────────────────────────────────────

    def list_aliases(self) -> List[str]:
        return [account.alias for account in self._accounts]

    def get_by_alias(self, alias: str) -> Account:
        for account in self._accounts:
            if account.alias == alias:
                return account
        raise NotFoundError(alias)

    def get_by_position(self, position: int) -> Account:
        """1-based lookup."""
        if position < 1 or position > len(self._accounts):
            raise IndexOutOfRangeError(position, len(self._accounts))
        return self._accounts[position - 1]

    def position_of(self, alias: str) -> int:
        for position, account in enumerate(self._accounts, start=1):
            if account.alias == alias:
                return position
        raise NotFoundError(alias)

    def __len__(self) -> int:
        return len(self._accounts)

    def __iter__(self) -> Iterator[Account]:
        return iter(list(self._accounts))
