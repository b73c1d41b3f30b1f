"""
Merkle - Balance Tree
Leaf encoding for (index, recipient, amount) entitlements and a Merkle
tree built over them.

Leaf Layout (compatibility contract with the on-chain verifier):
    index   : u64, 8 bytes little-endian
    recipient: 32 raw bytes
    amount  : u64, 8 bytes little-endian
    leaf = keccak256(index || recipient || amount)
"""
from __future__ import annotations

import struct
from typing import Sequence

from distributor.crypto.hashing import hash_leaf, to_hex
from distributor.crypto.pubkey import Pubkey, PubkeyLike
from distributor.merkle.merkle_tree import MerkleTree, verify_proof
from distributor.schemas.errors import AmountOutOfRangeException, DistributorException


U64_MAX = 2**64 - 1

_U64_LE = struct.Struct("<Q")


def encode_u64(value: int, field_name: str = "value") -> bytes:
    """
    Encode an unsigned integer as 8 little-endian bytes.

    Raises:
        AmountOutOfRangeException: If value is negative or above 2**64 - 1
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise AmountOutOfRangeException(field_name, value)
    if value < 0 or value > U64_MAX:
        raise AmountOutOfRangeException(field_name, value)
    return _U64_LE.pack(value)


def encode_leaf_data(index: int, recipient: PubkeyLike, amount: int) -> bytes:
    """Serialize one entitlement to the 48-byte pre-image of its leaf."""
    return (
        encode_u64(index, "index")
        + Pubkey(recipient).to_bytes()
        + encode_u64(amount, "amount")
    )


def encode_leaf(index: int, recipient: PubkeyLike, amount: int) -> bytes:
    """Hash one entitlement into its 32-byte leaf."""
    return hash_leaf(encode_leaf_data(index, recipient, amount))


class BalanceTree:
    """
    Merkle tree over an ordered list of (recipient, amount) balances.

    The list position of each balance is its claim index. Callers that
    need reproducible indices must sort the list first (see
    distributor.balances.aggregator).
    """

    def __init__(self, balances: Sequence[tuple[PubkeyLike, int]]) -> None:
        self._tree = MerkleTree(
            BalanceTree.to_node(index, recipient, amount)
            for index, (recipient, amount) in enumerate(balances)
        )

    @staticmethod
    def to_node(index: int, recipient: PubkeyLike, amount: int) -> bytes:
        return encode_leaf(index, recipient, amount)

    @staticmethod
    def verify_proof(
        index: int,
        recipient: PubkeyLike,
        amount: int,
        proof: Sequence[bytes],
        root: bytes,
    ) -> bool:
        """Recompute the leaf and fold ``proof`` up to ``root``."""
        return verify_balance_proof(index, recipient, amount, proof, root)

    @property
    def tree(self) -> MerkleTree:
        return self._tree

    @property
    def root(self) -> bytes:
        return self._tree.root

    @property
    def hex_root(self) -> str:
        return self._tree.hex_root

    def proof(self, index: int, recipient: PubkeyLike, amount: int) -> list[bytes]:
        return self._tree.proof_for(BalanceTree.to_node(index, recipient, amount))

    def hex_proof(self, index: int, recipient: PubkeyLike, amount: int) -> list[str]:
        return [to_hex(node) for node in self.proof(index, recipient, amount)]


def verify_balance_proof(
    index: int,
    recipient: PubkeyLike,
    amount: int,
    proof: Sequence[bytes],
    root: bytes,
) -> bool:
    """
    Check that (index, recipient, amount) is committed under ``root``.

    Never raises: an unencodable claim or malformed proof simply fails.
    """
    try:
        leaf = encode_leaf(index, recipient, amount)
    except (DistributorException, TypeError, ValueError):
        return False
    return verify_proof(leaf, proof, root)


__all__ = [
    "U64_MAX",
    "encode_u64",
    "encode_leaf_data",
    "encode_leaf",
    "BalanceTree",
    "verify_balance_proof",
]
