#!/usr/bin/env python3
"""
MESHWALLET - Session State

Which account is "current". The session keeps the account's alias, not a
copy of the account, so lookups always go through the store.
"""

from enum import Enum
from typing import List, Optional, Union

from meshwallet.core.account import Account
from meshwallet.core.store import AccountStore
from meshwallet.exceptions import NoCurrentAccountError


class SessionStatus(Enum):
    NO_ACCOUNTS = "no_accounts"
    HAS_ACCOUNTS_NONE_SELECTED = "has_accounts_none_selected"
    ACCOUNT_SELECTED = "account_selected"


class SessionState:
    """Current-account selection over an AccountStore."""

    def __init__(self, store: AccountStore, logger=None):
        self.store = store
        self.logger = logger
        self._current_alias: Optional[str] = None

    @property
    def status(self) -> SessionStatus:
        if self._current_alias is not None:
            return SessionStatus.ACCOUNT_SELECTED
        if len(self.store) == 0:
            return SessionStatus.NO_ACCOUNTS
        return SessionStatus.HAS_ACCOUNTS_NONE_SELECTED

    def create_account(self, alias: str) -> Account:
        """
        Create an account in the store. Only the first account of an empty
        store becomes current; later ones leave the selection alone.
        """
        first = len(self.store) == 0 and self._current_alias is None
        account = self.store.create_account(alias)
        if first:
            self._set_current(account)
        return account

    def list_accounts(self) -> List[str]:
        return self.store.list_aliases()

    def select(self, key: Union[str, int]) -> Account:
        """
        Make an account current by alias (str) or 1-based position (int).
        On NotFoundError/IndexOutOfRangeError the selection is unchanged.
        """
        if isinstance(key, int) and not isinstance(key, bool):
            account = self.store.get_by_position(key)
        else:
            account = self.store.get_by_alias(key)
        self._set_current(account)
        return account

    def current(self) -> Account:
        """The selected account. Never picks one on the caller's behalf."""
        if self._current_alias is None:
            raise NoCurrentAccountError("No account selected")
        return self.store.get_by_alias(self._current_alias)

    def _set_current(self, account: Account) -> None:
        self._current_alias = account.alias
        if self.logger:
            self.logger.account_selected(account.alias)
