"""Deterministic deposit account derivation.

Every invoice gets its own Ed25519 account derived from the gateway's master
seed with two hard junctions::

    master / recipient public key / blake2b-256(order)

A hard step mixes the parent *secret* seed into the child, so nobody holding
only public keys can link a deposit account to its siblings, to the recipient,
or to the master key.
"""

from __future__ import annotations

import hashlib
from typing import Callable

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from .exceptions import InvalidParameterError

Account = Pubkey
Signer = Callable[[bytes], bytes]

SEED_LENGTH = 32
JUNCTION_LENGTH = 32
MAX_ORDER_LENGTH = 256

# SCALE-encoded "Ed25519HDKD" (compact length prefix 11 << 2), as used by
# Substrate's ed25519 hard derivation.
_HDKD_TAG = bytes([11 << 2]) + b"Ed25519HDKD"


class InvalidRecipientError(InvalidParameterError):
    def __init__(self, message: str = "recipient is not a valid 32-byte account") -> None:
        super().__init__("recipient", message)


class InvalidOrderError(InvalidParameterError):
    def __init__(self, message: str) -> None:
        super().__init__("orderId", message)


def parse_account(value: str | bytes, *, parameter: str = "recipient") -> Account:
    """Decode a base58, hex or raw 32-byte account into an :class:`Account`."""
    if isinstance(value, bytes):
        if len(value) != JUNCTION_LENGTH:
            raise _invalid_account(parameter)
        return Pubkey(value)

    text = value.strip()
    if not text:
        raise _invalid_account(parameter)

    hex_text = text[2:] if text[:2].lower() == "0x" else text
    if len(hex_text) == JUNCTION_LENGTH * 2:
        try:
            return Pubkey(bytes.fromhex(hex_text))
        except ValueError:
            pass

    try:
        return Pubkey.from_string(text)
    except ValueError as exc:
        raise _invalid_account(parameter) from exc


def _invalid_account(parameter: str) -> InvalidParameterError:
    if parameter == "recipient":
        return InvalidRecipientError()
    return InvalidParameterError(parameter, "not a valid 32-byte account")


def encode_order(order: str | bytes) -> bytes:
    """Map an order identifier to its fixed-length derivation junction."""
    if isinstance(order, str):
        try:
            raw = order.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise InvalidOrderError("order identifier must be valid UTF-8") from exc
    else:
        raw = bytes(order)

    if not raw:
        raise InvalidOrderError("order identifier must not be empty")
    if len(raw) > MAX_ORDER_LENGTH:
        raise InvalidOrderError(f"order identifier must be at most {MAX_ORDER_LENGTH} bytes")
    return hashlib.blake2b(raw, digest_size=JUNCTION_LENGTH).digest()


def hard_derive(seed: bytes, junction: bytes) -> bytes:
    """One hard derivation step: parent seed + 32-byte junction -> child seed."""
    if len(junction) != JUNCTION_LENGTH:
        raise ValueError("junction must be exactly 32 bytes")
    return hashlib.blake2b(_HDKD_TAG + seed + junction, digest_size=SEED_LENGTH).digest()


class AddressDeriver:
    """Derives deposit accounts from a master seed it never exposes."""

    __slots__ = ("_seed", "_master")

    def __init__(self, seed: bytes) -> None:
        if len(seed) != SEED_LENGTH:
            raise ValueError("master seed must be exactly 32 bytes")
        self._seed = bytes(seed)
        self._master = Keypair.from_seed(self._seed)

    @classmethod
    def from_hex(cls, seed_hex: str) -> "AddressDeriver":
        text = seed_hex.strip()
        if text[:2].lower() == "0x":
            text = text[2:]
        try:
            seed = bytes.fromhex(text)
        except ValueError as exc:
            raise ValueError("master seed must be hex encoded") from exc
        return cls(seed)

    def __repr__(self) -> str:
        return f"AddressDeriver(master={self._master.pubkey()})"

    @property
    def master_account(self) -> Account:
        return self._master.pubkey()

    def derive_deposit_account(self, recipient: Account, order: str | bytes) -> Account:
        return self._keypair(recipient, order).pubkey()

    def signer_for(self, recipient: Account, order: str | bytes) -> Signer:
        """Return a callable that signs messages as the deposit account."""
        keypair = self._keypair(recipient, order)

        def sign(message: bytes) -> bytes:
            return bytes(keypair.sign_message(message))

        return sign

    def _keypair(self, recipient: Account, order: str | bytes) -> Keypair:
        if not isinstance(recipient, Pubkey):
            raise InvalidRecipientError()
        child = hard_derive(self._seed, bytes(recipient))
        child = hard_derive(child, encode_order(order))
        return Keypair.from_seed(child)


__all__ = [
    "Account",
    "AddressDeriver",
    "InvalidOrderError",
    "InvalidRecipientError",
    "MAX_ORDER_LENGTH",
    "Signer",
    "encode_order",
    "hard_derive",
    "parse_account",
]
