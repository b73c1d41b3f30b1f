"""
Merkle Tree and Commitments
Deterministic Merkle tree construction + proof generation/verification.

This module provides:
- MerkleTree: Sorted, deduplicated tree over 32-byte leaves
- BalanceTree: Tree over (index, recipient, amount) entitlements
- encode_leaf: Canonical leaf encoding
- verify_proof / verify_balance_proof: Position-free proof checks
- generate_proofs: Batch (optionally threaded) proof extraction

Canonical Commitment Rules:
1. Leaf: keccak256(u64le(index) || recipient[32] || u64le(amount))
2. Parent: keccak256(min(a, b) || max(a, b))
3. Odd node: promoted unchanged
4. Empty tree: error
5. Single leaf: root = leaf

Usage:
    from distributor.merkle import BalanceTree, verify_balance_proof

    tree = BalanceTree([(recipient_a, 100), (recipient_b, 250)])
    proof = tree.proof(0, recipient_a, 100)
    assert verify_balance_proof(0, recipient_a, 100, proof, tree.root)
"""
from .merkle_tree import (
    MerkleTree,
    dedup_sorted,
    next_layer,
    pair_element,
    verify_proof,
    compute_tree_depth,
)

from .balance_tree import (
    U64_MAX,
    BalanceTree,
    encode_u64,
    encode_leaf,
    encode_leaf_data,
    verify_balance_proof,
)

from .merkle_proofs import (
    generate_proofs,
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Core types
    "MerkleTree",
    "BalanceTree",
    "U64_MAX",
    # Core functions
    "dedup_sorted",
    "next_layer",
    "pair_element",
    "verify_proof",
    "compute_tree_depth",
    "encode_u64",
    "encode_leaf",
    "encode_leaf_data",
    "verify_balance_proof",
    "generate_proofs",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
