"""
Core cryptographic utilities.

Keccak-256 hashing, the commutative pair combine used by the Merkle tree,
and the 32-byte recipient identity.
"""
from .hashing import (
    HASH_LENGTH,
    keccak256,
    hash_leaf,
    sort_and_concat,
    combine_hashes,
    to_hex,
    from_hex,
    hash_from_hex,
)
from .pubkey import PUBKEY_LENGTH, Pubkey, PubkeyLike

__all__ = [
    "HASH_LENGTH",
    "keccak256",
    "hash_leaf",
    "sort_and_concat",
    "combine_hashes",
    "to_hex",
    "from_hex",
    "hash_from_hex",
    "PUBKEY_LENGTH",
    "Pubkey",
    "PubkeyLike",
]
