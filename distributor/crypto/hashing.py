"""
Crypto - Hashing Utilities
Keccak-256 hashing, the commutative pair combine, and hex helpers.

This module provides:
- keccak256 for raw bytes (original Keccak, not NIST SHA3-256)
- combine_hashes: sort-then-hash pair rule used at every tree level
- Hex encoding/decoding for the published artifact

Compatibility Notes:
- The digest must match what an on-chain verifier recomputes, so the
  primitive is fixed to Keccak-256.
- Published hex is lowercase, raw byte order, no 0x prefix.
"""
from __future__ import annotations

from typing import Optional

from eth_utils import keccak

from distributor.schemas.errors import InvariantViolationException


# Size of every leaf, node and root
HASH_LENGTH = 32


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 digest of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=data)


def hash_leaf(data: bytes) -> bytes:
    """Single-input hash used for encoded leaves."""
    return keccak256(data)


def sort_and_concat(first: bytes, second: bytes) -> bytes:
    """Concatenate two byte strings in ascending byte-lexicographic order."""
    if second < first:
        return second + first
    return first + second


def combine_hashes(first: Optional[bytes], second: Optional[bytes]) -> bytes:
    """
    Combine two tree nodes into their parent.

    If one side is missing, the other is promoted unchanged (odd trailing
    node). Otherwise the pair is sorted ascending, concatenated and hashed,
    which makes the rule commutative: combine(a, b) == combine(b, a).

    Args:
        first: Left node, or None
        second: Right node, or None

    Returns:
        Parent node (32 bytes)

    Raises:
        InvariantViolationException: If both sides are missing
    """
    if first is None:
        if second is None:
            raise InvariantViolationException("second element of pair must exist")
        return second
    if second is None:
        return first

    return keccak256(sort_and_concat(first, second))


def to_hex(data: bytes, prefix: bool = False) -> str:
    """
    Convert bytes to a lowercase hexadecimal string.

    Args:
        data: Raw bytes
        prefix: Prepend "0x" (used for display only)

    Returns:
        Hex string

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        'deadbeef'
    """
    encoded = data.hex()
    return "0x" + encoded if prefix else encoded


def from_hex(hex_string: str) -> bytes:
    """
    Convert a hexadecimal string to bytes.

    An optional 0x prefix and either letter case are accepted.

    Raises:
        ValueError: If the string has odd length or invalid characters
    """
    hex_content = hex_string[2:] if hex_string[:2].lower() == "0x" else hex_string

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length, got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def hash_from_hex(hex_string: str) -> bytes:
    """Decode a hex string that must hold exactly one 32-byte digest."""
    data = from_hex(hex_string)
    if len(data) != HASH_LENGTH:
        raise ValueError(
            f"Expected a {HASH_LENGTH}-byte hash, got {len(data)} bytes"
        )
    return data


__all__ = [
    "HASH_LENGTH",
    "keccak256",
    "hash_leaf",
    "sort_and_concat",
    "combine_hashes",
    "to_hex",
    "from_hex",
    "hash_from_hex",
]
