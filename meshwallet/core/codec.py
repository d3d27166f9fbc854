#!/usr/bin/env python3
"""
MESHWALLET - Transaction Codec

Canonical byte encoding of coin transfers. The same bytes are the signing
payload and, with the signature appended, the wire payload the node
re-derives to verify. Layout follows XDR (RFC 4506): big-endian unsigned
hyper integers and fixed-length opaque data padded to 4 bytes.

Format version 1, unsigned part (52 bytes):
- 8 bytes: nonce
- 8 bytes: amount
- 20 bytes: recipient address
- 8 bytes: gas limit
- 8 bytes: gas price

Signed transaction (116 bytes): the unsigned part followed by
- 64 bytes: ed25519 signature

Any change to this layout breaks every signature on the network and needs
a new TX_FORMAT_VERSION.
"""

import struct
from dataclasses import dataclass

from meshwallet.core.account import ADDRESS_LENGTH, SIGNATURE_LENGTH, Address

TX_FORMAT_VERSION = 1

UINT64_MAX = 2**64 - 1

UNSIGNED_TX_LENGTH = 8 + 8 + ADDRESS_LENGTH + 8 + 8
SIGNED_TX_LENGTH = UNSIGNED_TX_LENGTH + SIGNATURE_LENGTH


def _check_uint64(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
    if not 0 <= value <= UINT64_MAX:
        raise ValueError(f"{name} out of uint64 range: {value}")
    return value


def pack_uint64(value: int) -> bytes:
    """XDR unsigned hyper."""
    return struct.pack(">Q", value)


def pack_fixed_opaque(data: bytes, length: int) -> bytes:
    """XDR fixed-length opaque: exactly ``length`` bytes, zero-padded to 4."""
    if len(data) != length:
        raise ValueError(f"expected {length} bytes, got {len(data)}")
    return data + b"\x00" * ((4 - length % 4) % 4)


@dataclass(frozen=True)
class UnsignedTransaction:
    """Signable fields of a coin transfer."""

    nonce: int
    recipient: Address
    amount: int
    gas_price: int
    gas_limit: int

    def __post_init__(self):
        for name in ("nonce", "amount", "gas_price", "gas_limit"):
            _check_uint64(name, getattr(self, name))
        if not isinstance(self.recipient, Address):
            raise ValueError("recipient must be an Address")


@dataclass(frozen=True)
class SignedTransaction:
    transaction: UnsignedTransaction
    signature: bytes

    def __post_init__(self):
        if len(self.signature) != SIGNATURE_LENGTH:
            raise ValueError(
                f"signature must be {SIGNATURE_LENGTH} bytes, got {len(self.signature)}"
            )


def encode_unsigned(tx: UnsignedTransaction) -> bytes:
    return b"".join((
        pack_uint64(tx.nonce),
        pack_uint64(tx.amount),
        pack_fixed_opaque(bytes(tx.recipient), ADDRESS_LENGTH),
        pack_uint64(tx.gas_limit),
        pack_uint64(tx.gas_price),
    ))


def encode_signed(tx: UnsignedTransaction, signature: bytes) -> bytes:
    signature = bytes(signature)
    if len(signature) != SIGNATURE_LENGTH:
        raise ValueError(f"signature must be {SIGNATURE_LENGTH} bytes, got {len(signature)}")
    return encode_unsigned(tx) + pack_fixed_opaque(signature, SIGNATURE_LENGTH)


def encode_signed_transaction(signed: SignedTransaction) -> bytes:
    return encode_signed(signed.transaction, signed.signature)
