"""
Merkle - Tree Implementation
Deterministic Merkle tree construction and proof extraction.

Canonical Commitment Rules (Hard Contracts):
1. Leaves are sorted byte-lexicographically, then adjacent duplicates are
   dropped. The tree is a function of the leaf *set*, not the input order.
2. Parent hashing: keccak256(sorted(left, right) concatenated)
3. Odd node: the trailing unpaired node is promoted unchanged (no padding)
4. Empty leaves: rejected with EmptyTreeException
5. Single leaf: root = leaf, proof = []

Determinism Notes:
- Layers are built once in __init__ and never mutated afterwards, so
  proofs may be extracted concurrently without locking.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from distributor.crypto.hashing import HASH_LENGTH, combine_hashes, to_hex
from distributor.schemas.errors import (
    EmptyTreeException,
    InvariantViolationException,
    LeafNotFoundException,
)


logger = logging.getLogger(__name__)


def dedup_sorted(elements: Sequence[bytes]) -> list[bytes]:
    """
    Drop adjacent duplicates from an already-sorted sequence.

    Only correct on sorted input, where equal values are guaranteed
    to be neighbours.
    """
    return [
        el for idx, el in enumerate(elements)
        if idx == 0 or elements[idx - 1] != el
    ]


def next_layer(elements: Sequence[bytes]) -> tuple[bytes, ...]:
    """
    Hash a layer pairwise, left to right.

    A trailing unpaired element is promoted unchanged.

    Example:
        [a, b, c] -> [combine(a, b), c]
    """
    layer: list[bytes] = []
    for i in range(0, len(elements), 2):
        pair: Optional[bytes] = elements[i + 1] if i + 1 < len(elements) else None
        layer.append(combine_hashes(elements[i], pair))
    return tuple(layer)


def pair_element(index: int, layer: Sequence[bytes]) -> Optional[bytes]:
    """Return the sibling of ``index`` within ``layer``, or None if unpaired."""
    pair_index = index ^ 1
    if pair_index < len(layer):
        return layer[pair_index]
    return None


class MerkleTree:
    """
    Immutable binary Merkle tree over a set of 32-byte leaves.

    Attributes:
        leaves: Sorted, deduplicated leaves (layer 0)
        layers: All layers, leaves first, root layer last

    Example:
        >>> tree = MerkleTree([leaf_c, leaf_a, leaf_b])
        >>> proof = tree.proof_for(leaf_a)
        >>> verify_proof(leaf_a, proof, tree.root)
        True
    """

    def __init__(self, elements: Iterable[bytes]) -> None:
        leaves = dedup_sorted(sorted(bytes(el) for el in elements))
        if not leaves:
            raise EmptyTreeException()

        self._positions: dict[bytes, int] = {
            leaf: index for index, leaf in enumerate(leaves)
        }
        self._layers: tuple[tuple[bytes, ...], ...] = self._build_layers(tuple(leaves))

        logger.debug(
            "Built Merkle tree: %d leaves, %d layers, root=%s",
            len(leaves), len(self._layers), to_hex(self.root),
        )

    @staticmethod
    def _build_layers(leaves: tuple[bytes, ...]) -> tuple[tuple[bytes, ...], ...]:
        layers = [leaves]
        while len(layers[-1]) > 1:
            layers.append(next_layer(layers[-1]))
        return tuple(layers)

    @property
    def leaves(self) -> tuple[bytes, ...]:
        return self._layers[0]

    @property
    def layers(self) -> tuple[tuple[bytes, ...], ...]:
        return self._layers

    @property
    def root(self) -> bytes:
        top = self._layers[-1]
        if len(top) != 1:
            raise InvariantViolationException(
                "Top layer must hold exactly one node",
                details={"top_layer_size": len(top)},
            )
        return top[0]

    @property
    def hex_root(self) -> str:
        return to_hex(self.root)

    @property
    def depth(self) -> int:
        """Number of layers above the leaves (0 for a single-leaf tree)."""
        return len(self._layers) - 1

    def __len__(self) -> int:
        return len(self.leaves)

    def __contains__(self, leaf: object) -> bool:
        return isinstance(leaf, (bytes, bytearray)) and bytes(leaf) in self._positions

    def contains(self, leaf: bytes) -> bool:
        return leaf in self

    def index_of(self, leaf: bytes) -> int:
        """
        Position of ``leaf`` in the sorted, deduplicated leaf layer.

        Raises:
            LeafNotFoundException: If the leaf was never inserted
        """
        try:
            return self._positions[bytes(leaf)]
        except KeyError:
            raise LeafNotFoundException(to_hex(bytes(leaf))) from None

    def proof_for(self, leaf: bytes) -> list[bytes]:
        """
        Generate the sibling path for ``leaf``, ordered leaf to root.

        No entry is emitted at levels where the node was the unpaired
        trailing element.

        Raises:
            LeafNotFoundException: If the leaf was never inserted
        """
        index = self.index_of(leaf)
        proof: list[bytes] = []

        for layer in self._layers[:-1]:
            sibling = pair_element(index, layer)
            if sibling is not None:
                proof.append(sibling)
            index //= 2

        return proof

    def hex_proof_for(self, leaf: bytes) -> list[str]:
        """Proof entries as lowercase hex strings."""
        return [to_hex(node) for node in self.proof_for(leaf)]


def _is_node(value: object) -> bool:
    return isinstance(value, (bytes, bytearray)) and len(value) == HASH_LENGTH


def verify_proof(leaf: bytes, proof: Sequence[bytes], root: bytes) -> bool:
    """
    Fold ``proof`` over ``leaf`` and compare against ``root``.

    Position-free: the commutative combine rule means no left/right flags
    are needed. Never raises; leaf, root and every proof entry must be
    32-byte binary nodes, anything else fails.
    """
    if not (_is_node(leaf) and _is_node(root)):
        return False
    try:
        siblings = list(proof)
    except TypeError:
        return False

    current = bytes(leaf)
    for sibling in siblings:
        if not _is_node(sibling):
            return False
        current = combine_hashes(current, bytes(sibling))
    return current == bytes(root)


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of layers above the leaves for ``num_leaves`` distinct leaves.

    Equal to ceil(log2(n)); also the maximum proof length.
    """
    if num_leaves <= 1:
        return 0
    depth = 0
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1
    return depth


__all__ = [
    "MerkleTree",
    "dedup_sorted",
    "next_layer",
    "pair_element",
    "verify_proof",
    "compute_tree_depth",
]
