#!/usr/bin/env python3
"""
MESHWALLET - Accounts and Addresses

A local account is an ed25519 key pair with an operator-chosen alias.
The address is never stored: it is recomputed from the public key.
"""

from dataclasses import dataclass, field

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature

from meshwallet.exceptions import SigningError

ADDRESS_LENGTH = 20
PUBLIC_KEY_LENGTH = 32
PRIVATE_KEY_LENGTH = 64
SIGNATURE_LENGTH = 64


class Address:
    """Fixed-width 20-byte ledger address."""

    __slots__ = ("_raw",)

    def __init__(self, raw: bytes):
        raw = bytes(raw)
        # Ledger rule: keep the trailing bytes, left-pad short input.
        if len(raw) > ADDRESS_LENGTH:
            raw = raw[-ADDRESS_LENGTH:]
        self._raw = raw.rjust(ADDRESS_LENGTH, b"\x00")

    @classmethod
    def from_public_key(cls, public_key: bytes) -> "Address":
        return cls(public_key)

    @classmethod
    def from_hex(cls, text: str) -> "Address":
        """Parse ``0x``-prefixed or bare hex. Raises ValueError on junk."""
        text = text.strip()
        if text[:2].lower() == "0x":
            text = text[2:]
        if len(text) % 2:
            text = "0" + text
        return cls(bytes.fromhex(text))

    def __bytes__(self) -> bytes:
        return self._raw

    def __eq__(self, other) -> bool:
        if isinstance(other, Address):
            return self._raw == other._raw
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._raw)

    def __str__(self) -> str:
        return "0x" + self._raw.hex()

    def __repr__(self) -> str:
        return f"Address({str(self)})"


def verify_signature(public_key: bytes, message: bytes, signature: bytes) -> bool:
    """Check an ed25519 signature. Malformed inputs simply fail verification."""
    try:
        sig = Signature.from_bytes(bytes(signature))
        return sig.verify(Pubkey.from_bytes(bytes(public_key)), bytes(message))
    except (ValueError, TypeError):
        return False


@dataclass
class Account:
    """
    One key pair plus its alias.

    ``private_key`` is the 64-byte ed25519 secret: the 32-byte seed followed
    by the public key.
    """

    alias: str
    public_key: bytes
    private_key: bytes = field(repr=False)

    @classmethod
    def generate(cls, alias: str) -> "Account":
        """Fresh key pair from the OS random source."""
        keypair = Keypair()
        return cls(
            alias=alias,
            public_key=bytes(keypair.pubkey()),
            private_key=bytes(keypair),
        )

    @property
    def address(self) -> Address:
        return Address.from_public_key(self.public_key)

    def _keypair(self) -> Keypair:
        if len(self.public_key) != PUBLIC_KEY_LENGTH:
            raise SigningError(
                f"Account {self.alias!r}: public key must be {PUBLIC_KEY_LENGTH} bytes"
            )
        if len(self.private_key) != PRIVATE_KEY_LENGTH:
            raise SigningError(
                f"Account {self.alias!r}: private key must be {PRIVATE_KEY_LENGTH} bytes"
            )
        try:
            keypair = Keypair.from_seed(self.private_key[:32])
        except (ValueError, TypeError) as e:
            raise SigningError(f"Account {self.alias!r}: unusable private key: {e}") from e
        if bytes(keypair.pubkey()) != self.public_key or bytes(keypair) != self.private_key:
            raise SigningError(f"Account {self.alias!r}: private key does not match public key")
        return keypair

    def check_keys(self) -> None:
        """Raise SigningError unless the key pair is internally consistent."""
        self._keypair()

    def sign(self, message: bytes) -> bytes:
        """Raw 64-byte ed25519 signature over ``message``."""
        keypair = self._keypair()
        signature = bytes(keypair.sign_message(bytes(message)))
        if len(signature) != SIGNATURE_LENGTH or not verify_signature(
            self.public_key, message, signature
        ):
            raise SigningError(f"Account {self.alias!r}: produced an invalid signature")
        return signature

    def verify(self, message: bytes, signature: bytes) -> bool:
        return verify_signature(self.public_key, message, signature)

    def to_dict(self) -> dict:
        return {
            "alias": self.alias,
            "public_key": self.public_key.hex(),
            "private_key": self.private_key.hex(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Account":
        """Inverse of to_dict. KeyError/ValueError/TypeError on bad input."""
        alias = data["alias"]
        if not isinstance(alias, str) or not alias:
            raise ValueError("alias must be a non-empty string")
        return cls(
            alias=alias,
            public_key=bytes.fromhex(data["public_key"]),
            private_key=bytes.fromhex(data["private_key"]),
        )
