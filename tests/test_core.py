#!/usr/bin/env python3
"""
MESHWALLET - Core Test Suite

Configuration, accounts, the account store and session selection.

Run with: pytest tests/test_core.py -v
"""

import json
import os

import pytest

from meshwallet.config import WalletConfig
from meshwallet.core.account import Account, Address, verify_signature
from meshwallet.core.session import SessionState, SessionStatus
from meshwallet.core.store import AccountStore
from meshwallet.exceptions import (
    CorruptStoreError,
    DuplicateAliasError,
    IndexOutOfRangeError,
    NoCurrentAccountError,
    NotFoundError,
    SigningError,
    StoreIOError,
)


class TestWalletConfig:
    """Test configuration validation."""

    def test_default_config_valid(self, tmp_path):
        config = WalletConfig(data_dir=str(tmp_path))
        errors = config.validate()
        assert len(errors) == 0, f"Validation errors: {errors}"

    def test_accounts_path(self, tmp_path):
        config = WalletConfig(data_dir=str(tmp_path))
        assert config.accounts_path == tmp_path / "accounts.json"

    def test_bad_node_url_scheme(self, tmp_path):
        config = WalletConfig(data_dir=str(tmp_path), node_url="ftp://node")
        errors = config.validate()
        assert any("Node URL" in err for err in errors)

    def test_non_positive_timeout(self, tmp_path):
        config = WalletConfig(data_dir=str(tmp_path), rpc_timeout_seconds=0)
        errors = config.validate()
        assert any("timeout" in err for err in errors)

    def test_unknown_log_level(self, tmp_path):
        config = WalletConfig(data_dir=str(tmp_path), log_level="LOUD")
        errors = config.validate()
        assert any("Log level" in err for err in errors)

    def test_env_overrides_node_url(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MESHWALLET_NODE_URL", "https://node.example:9093")
        config = WalletConfig(data_dir=str(tmp_path))
        assert config.node_url == "https://node.example:9093"


class TestAddress:
    """Test address derivation and parsing."""

    def test_address_is_last_20_bytes_of_public_key(self):
        public_key = bytes(range(32))
        assert bytes(Address.from_public_key(public_key)) == public_key[12:]

    def test_hex_round_trip(self):
        address = Address(bytes(range(20)))
        assert str(address) == "0x" + bytes(range(20)).hex()
        assert Address.from_hex(str(address)) == address

    def test_short_input_left_padded(self):
        address = Address.from_hex("0xabc")
        assert bytes(address) == b"\x00" * 18 + b"\x0a\xbc"

    def test_rejects_non_hex(self):
        with pytest.raises(ValueError):
            Address.from_hex("0xnothex")


class TestAccount:
    """Test key material and signing."""

    def test_generate_key_sizes(self):
        account = Account.generate("alice")
        assert len(account.public_key) == 32
        assert len(account.private_key) == 64
        assert account.private_key[32:] == account.public_key

    def test_sign_then_verify(self):
        account = Account.generate("alice")
        message = b"transfer 42"
        signature = account.sign(message)

        assert len(signature) == 64
        assert verify_signature(account.public_key, message, signature)
        assert account.verify(message, signature)

    def test_signature_does_not_verify_other_message(self):
        account = Account.generate("alice")
        signature = account.sign(b"one")
        assert not account.verify(b"two", signature)

    def test_signature_does_not_verify_other_key(self):
        alice = Account.generate("alice")
        bob = Account.generate("bob")
        signature = alice.sign(b"hello")
        assert not bob.verify(b"hello", signature)

    def test_malformed_signature_fails_verification(self):
        account = Account.generate("alice")
        assert not account.verify(b"hello", b"\x01\x02")

    def test_truncated_private_key_raises_signing_error(self):
        account = Account.generate("alice")
        broken = Account("alice", account.public_key, account.private_key[:40])
        with pytest.raises(SigningError):
            broken.sign(b"hello")

    def test_mismatched_private_key_raises_signing_error(self):
        alice = Account.generate("alice")
        bob = Account.generate("bob")
        broken = Account("alice", alice.public_key, bob.private_key)
        with pytest.raises(SigningError):
            broken.sign(b"hello")

    def test_private_key_not_in_repr(self):
        account = Account.generate("alice")
        assert account.private_key.hex() not in repr(account)


class TestAccountStore:
    """Test account creation, lookup and persistence."""

    def test_load_missing_file_returns_empty_store(self, tmp_path):
        store = AccountStore.load(tmp_path / "nope" / "accounts.json")
        assert len(store) == 0
        assert store.list_aliases() == []

    def test_create_preserves_order(self, store):
        for alias in ("alice", "bob", "carol"):
            store.create_account(alias)
        assert store.list_aliases() == ["alice", "bob", "carol"]

    def test_duplicate_alias_rejected(self, store):
        store.create_account("alice")
        with pytest.raises(DuplicateAliasError):
            store.create_account("alice")
        assert len(store) == 1

    def test_alias_match_is_case_sensitive(self, store):
        store.create_account("alice")
        store.create_account("Alice")
        assert store.list_aliases() == ["alice", "Alice"]

    def test_blank_alias_rejected(self, store):
        with pytest.raises(ValueError):
            store.create_account("   ")
        assert len(store) == 0

    def test_create_does_not_persist(self, store):
        store.create_account("alice")
        assert not store.path.exists()

    def test_get_by_alias(self, store):
        bob = store.create_account("bob")
        assert store.get_by_alias("bob") is bob
        with pytest.raises(NotFoundError):
            store.get_by_alias("mallory")

    def test_get_by_position_matches_list(self, store):
        for alias in ("alice", "bob", "carol"):
            store.create_account(alias)
        aliases = store.list_aliases()
        for k in range(1, len(aliases) + 1):
            assert store.get_by_position(k).alias == aliases[k - 1]

    @pytest.mark.parametrize("position", [0, -1, 3])
    def test_get_by_position_out_of_range(self, store, position):
        store.create_account("alice")
        store.create_account("bob")
        with pytest.raises(IndexOutOfRangeError):
            store.get_by_position(position)

    def test_save_then_load_round_trip(self, store):
        created = [store.create_account(alias) for alias in ("alice", "bob")]
        store.save()

        loaded = AccountStore.load(store.path)
        assert loaded.list_aliases() == ["alice", "bob"]
        for original, restored in zip(created, loaded):
            assert restored.public_key == original.public_key
            assert restored.private_key == original.private_key

    def test_save_leaves_no_temp_file(self, store):
        store.create_account("alice")
        store.save()
        assert [p.name for p in store.path.parent.iterdir()] == ["accounts.json"]

    def test_failed_replace_keeps_previous_file(self, store, monkeypatch):
        store.create_account("alice")
        store.save()
        before = store.path.read_bytes()
        store.create_account("bob")

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", failing_replace)
        with pytest.raises(StoreIOError):
            store.save()

        assert store.path.read_bytes() == before
        assert [p.name for p in store.path.parent.iterdir()] == ["accounts.json"]

    def test_failed_write_keeps_previous_file(self, store, monkeypatch):
        store.create_account("alice")
        store.save()
        before = store.path.read_bytes()

        def failing_dump(*args, **kwargs):
            raise OSError("no space left on device")

        monkeypatch.setattr(json, "dump", failing_dump)
        with pytest.raises(StoreIOError):
            store.save()

        assert store.path.read_bytes() == before
        assert not store.path.with_name("accounts.json.tmp").exists()

    def test_saved_file_layout(self, store):
        alice = store.create_account("alice")
        store.save()
        data = json.loads(store.path.read_text())
        assert data["version"] == 1
        assert data["accounts"] == [
            {
                "alias": "alice",
                "public_key": alice.public_key.hex(),
                "private_key": alice.private_key.hex(),
            }
        ]

    def test_load_accepts_bare_list(self, tmp_path):
        alice = Account.generate("alice")
        path = tmp_path / "accounts.json"
        path.write_text(json.dumps([alice.to_dict()]))
        assert AccountStore.load(path).get_by_alias("alice") == alice

    def test_load_invalid_json_is_corrupt(self, tmp_path):
        path = tmp_path / "accounts.json"
        path.write_text("{ not json")
        with pytest.raises(CorruptStoreError):
            AccountStore.load(path)

    def test_load_bad_hex_is_corrupt(self, tmp_path):
        path = tmp_path / "accounts.json"
        path.write_text(json.dumps({"accounts": [
            {"alias": "alice", "public_key": "zz", "private_key": "zz"}
        ]}))
        with pytest.raises(CorruptStoreError):
            AccountStore.load(path)

    def test_load_mismatched_keys_is_corrupt(self, tmp_path):
        alice = Account.generate("alice")
        bob = Account.generate("bob")
        entry = alice.to_dict()
        entry["private_key"] = bob.private_key.hex()
        path = tmp_path / "accounts.json"
        path.write_text(json.dumps({"accounts": [entry]}))
        with pytest.raises(CorruptStoreError):
            AccountStore.load(path)

    def test_load_duplicate_alias_is_corrupt(self, tmp_path):
        first = Account.generate("alice").to_dict()
        second = Account.generate("alice").to_dict()
        path = tmp_path / "accounts.json"
        path.write_text(json.dumps({"accounts": [first, second]}))
        with pytest.raises(CorruptStoreError):
            AccountStore.load(path)


class TestSessionState:
    """Test current-account selection."""

    def test_initial_status_no_accounts(self, store):
        session = SessionState(store)
        assert session.status is SessionStatus.NO_ACCOUNTS
        with pytest.raises(NoCurrentAccountError):
            session.current()

    def test_first_account_becomes_current(self, store):
        session = SessionState(store)
        alice = session.create_account("alice")
        assert session.status is SessionStatus.ACCOUNT_SELECTED
        assert session.current() is alice

    def test_later_accounts_do_not_change_selection(self, store):
        session = SessionState(store)
        session.create_account("alice")
        session.create_account("bob")
        assert session.current().alias == "alice"

    def test_loaded_accounts_start_unselected(self, store):
        store.create_account("alice")
        session = SessionState(store)
        assert session.status is SessionStatus.HAS_ACCOUNTS_NONE_SELECTED
        with pytest.raises(NoCurrentAccountError):
            session.current()

    def test_creation_with_existing_accounts_does_not_select(self, store):
        store.create_account("alice")
        session = SessionState(store)
        session.create_account("bob")
        assert session.status is SessionStatus.HAS_ACCOUNTS_NONE_SELECTED

    def test_select_by_alias_and_position(self, store):
        session = SessionState(store)
        session.create_account("alice")
        session.create_account("bob")

        assert session.select("bob").alias == "bob"
        assert session.current().alias == "bob"
        assert session.select(1).alias == "alice"
        assert session.current().alias == "alice"

    def test_select_bob_keeps_alice_keys(self, store):
        session = SessionState(store)
        alice = session.create_account("alice")
        session.create_account("bob")
        public_key, private_key = alice.public_key, alice.private_key

        session.select("bob")

        assert session.current().alias == "bob"
        stored = store.get_by_alias("alice")
        assert stored.public_key == public_key
        assert stored.private_key == private_key

    def test_failed_select_leaves_state_unchanged(self, store):
        session = SessionState(store)
        session.create_account("alice")
        session.create_account("bob")
        session.select("bob")

        with pytest.raises(NotFoundError):
            session.select("mallory")
        with pytest.raises(IndexOutOfRangeError):
            session.select(3)
        assert session.current().alias == "bob"

    def test_failed_select_from_unselected_state(self, store):
        store.create_account("alice")
        session = SessionState(store)
        with pytest.raises(IndexOutOfRangeError):
            session.select(0)
        assert session.status is SessionStatus.HAS_ACCOUNTS_NONE_SELECTED
