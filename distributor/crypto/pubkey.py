"""
Crypto - Recipient Identity
A fixed-width 32-byte public-key-like identity with a base58 text form.

Ordering and equality are defined on the raw bytes, which is what fixes
claim indices deterministically after aggregation.
"""
from __future__ import annotations

from functools import total_ordering
from typing import Union

import base58

from distributor.schemas.errors import InvalidRecipientException


PUBKEY_LENGTH = 32

PubkeyLike = Union["Pubkey", bytes, bytearray, str]


@total_ordering
class Pubkey:
    """
    Immutable recipient identity.

    Accepts raw bytes, base58 text, or 0x-prefixed hex text.

    Example:
        >>> key = Pubkey(bytes(32))
        >>> str(key)
        '11111111111111111111111111111111'
    """

    __slots__ = ("_bytes",)

    def __init__(self, value: PubkeyLike) -> None:
        if isinstance(value, Pubkey):
            raw = value.to_bytes()
        elif isinstance(value, (bytes, bytearray)):
            raw = bytes(value)
        elif isinstance(value, str):
            raw = _decode_text(value)
        else:
            raise InvalidRecipientException(
                f"Unsupported recipient type: {type(value).__name__}",
                details={"type": type(value).__name__},
            )

        if len(raw) != PUBKEY_LENGTH:
            raise InvalidRecipientException(
                f"Recipient must be {PUBKEY_LENGTH} bytes, got {len(raw)}",
                details={"length": len(raw)},
            )
        object.__setattr__(self, "_bytes", raw)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Pubkey is immutable")

    @classmethod
    def from_base58(cls, text: str) -> "Pubkey":
        return cls(text)

    def to_bytes(self) -> bytes:
        return self._bytes

    def to_base58(self) -> str:
        return base58.b58encode(self._bytes).decode("ascii")

    def __bytes__(self) -> bytes:
        return self._bytes

    def __str__(self) -> str:
        return self.to_base58()

    def __repr__(self) -> str:
        return f"Pubkey({self.to_base58()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pubkey):
            return NotImplemented
        return self._bytes == other._bytes

    def __lt__(self, other: "Pubkey") -> bool:
        if not isinstance(other, Pubkey):
            return NotImplemented
        return self._bytes < other._bytes

    def __hash__(self) -> int:
        return hash(self._bytes)


def _decode_text(text: str) -> bytes:
    stripped = text.strip()
    if stripped[:2].lower() == "0x":
        try:
            return bytes.fromhex(stripped[2:])
        except ValueError as e:
            raise InvalidRecipientException(
                f"Invalid hex recipient: {text}",
                details={"recipient": text},
            ) from e
    try:
        return base58.b58decode(stripped)
    except ValueError as e:
        raise InvalidRecipientException(
            f"Invalid base58 recipient: {text}",
            details={"recipient": text},
        ) from e


__all__ = [
    "PUBKEY_LENGTH",
    "Pubkey",
    "PubkeyLike",
]
