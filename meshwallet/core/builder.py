#!/usr/bin/env python3
"""
MESHWALLET - Transaction Builder

Turns (sender, recipient, nonce, amount, fees) into signed wire bytes.
No network I/O happens here, and the nonce always comes from the caller:
the ledger tracks nonces, this wallet never guesses one.
"""

from meshwallet.core.account import Account, Address
from meshwallet.core.codec import (
    SignedTransaction,
    UnsignedTransaction,
    encode_signed_transaction,
    encode_unsigned,
)


class TransactionBuilder:
    """Assembles and signs coin transfers."""

    def build_signed(
        self,
        sender: Account,
        recipient: Address,
        nonce: int,
        amount: int,
        gas_price: int,
        gas_limit: int,
    ) -> SignedTransaction:
        """
        Sign the canonical encoding of the transfer with the sender's key.

        Raises ValueError for out-of-range fields and SigningError for
        unusable key material. Neither is retried.
        """
        tx = UnsignedTransaction(
            nonce=nonce,
            recipient=recipient,
            amount=amount,
            gas_price=gas_price,
            gas_limit=gas_limit,
        )
        signature = sender.sign(encode_unsigned(tx))
        return SignedTransaction(transaction=tx, signature=signature)

    def build_transfer(
        self,
        sender: Account,
        recipient: Address,
        nonce: int,
        amount: int,
        gas_price: int,
        gas_limit: int,
    ) -> bytes:
        """Signed transaction bytes, ready for submission."""
        signed = self.build_signed(sender, recipient, nonce, amount, gas_price, gas_limit)
        return encode_signed_transaction(signed)
