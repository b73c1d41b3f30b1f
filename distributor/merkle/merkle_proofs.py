"""
Merkle - Proof Convenience Wrappers
Class-based interfaces around the tree and balance-tree functions, plus
batch proof generation.

This module provides:
- MerkleProver: Generate proofs (one or many) from a built tree
- MerkleVerifier: Verify raw leaf proofs and balance claims

Batch generation reads the immutable tree layers from worker threads;
no synchronization is required.
"""
from __future__ import annotations

import concurrent.futures
import logging
from typing import Sequence

from distributor.crypto.pubkey import PubkeyLike
from distributor.merkle.balance_tree import verify_balance_proof
from distributor.merkle.merkle_tree import MerkleTree, verify_proof


logger = logging.getLogger(__name__)

# Leaves handed to each worker per task
DEFAULT_CHUNK_SIZE = 1024


def _proofs_for_chunk(tree: MerkleTree, leaves: Sequence[bytes]) -> list[list[bytes]]:
    return [tree.proof_for(leaf) for leaf in leaves]


def generate_proofs(
    tree: MerkleTree,
    leaves: Sequence[bytes],
    max_workers: int | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> list[list[bytes]]:
    """
    Generate proofs for many leaves.

    Args:
        tree: A built MerkleTree
        leaves: Leaves to prove; each must be in the tree
        max_workers: Thread count. None or <= 1 runs sequentially.
        chunk_size: Leaves per submitted task

    Returns:
        Proofs in the same order as ``leaves``

    Raises:
        LeafNotFoundException: If any leaf is absent from the tree
    """
    if not max_workers or max_workers <= 1 or len(leaves) <= chunk_size:
        return _proofs_for_chunk(tree, leaves)

    chunks = [leaves[i:i + chunk_size] for i in range(0, len(leaves), chunk_size)]
    logger.debug(
        "Generating %d proofs in %d chunks with %d workers",
        len(leaves), len(chunks), max_workers,
    )

    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as pool:
        results = pool.map(_proofs_for_chunk, [tree] * len(chunks), chunks)
        proofs: list[list[bytes]] = []
        for chunk_proofs in results:
            proofs.extend(chunk_proofs)
    return proofs


class MerkleProver:
    """
    Convenience class for generating Merkle proofs.

    Example:
        >>> tree = MerkleTree(leaves)
        >>> proof = MerkleProver.prove(tree, leaves[1])
    """

    @staticmethod
    def prove(tree: MerkleTree, leaf: bytes) -> list[bytes]:
        """
        Generate the proof for a single leaf.

        Raises:
            LeafNotFoundException: If the leaf is not in the tree
        """
        return tree.proof_for(leaf)

    @staticmethod
    def prove_many(
        tree: MerkleTree,
        leaves: Sequence[bytes],
        max_workers: int | None = None,
    ) -> list[list[bytes]]:
        return generate_proofs(tree, leaves, max_workers=max_workers)

    @staticmethod
    def compute_root(leaves: Sequence[bytes]) -> bytes:
        """
        Compute the root for a set of leaves.

        Raises:
            EmptyTreeException: If leaves is empty
        """
        return MerkleTree(leaves).root


class MerkleVerifier:
    """
    Convenience class for verifying proofs. Every method returns a bool
    and never raises.
    """

    @staticmethod
    def verify_leaf(leaf: bytes, proof: Sequence[bytes], root: bytes) -> bool:
        return verify_proof(leaf, proof, root)

    @staticmethod
    def verify_claim(
        index: int,
        recipient: PubkeyLike,
        amount: int,
        proof: Sequence[bytes],
        root: bytes,
    ) -> bool:
        """
        Verify an (index, recipient, amount) claim against a root.

        Args:
            index: Claimed index
            recipient: Claimed recipient
            amount: Claimed amount
            proof: Sibling hashes, leaf to root
            root: Published root

        Returns:
            True if the recomputed root matches exactly
        """
        return verify_balance_proof(index, recipient, amount, proof, root)


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "generate_proofs",
    "MerkleProver",
    "MerkleVerifier",
]
