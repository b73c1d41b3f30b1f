"""
Balances - Balance Map Parsing
Turn entitlement records into the published DistributionDescriptor.

Pipeline:
    records -> aggregate_balances -> BalanceTree -> proofs -> descriptor

The descriptor is self-sufficient: anyone holding it can rebuild the
entire tree and confirm every claim is included and nothing else is.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

from distributor.balances.aggregator import (
    BalanceAggregate,
    DuplicatePolicy,
    EntitlementRecord,
    aggregate_balances,
)
from distributor.crypto.pubkey import PubkeyLike
from distributor.merkle.balance_tree import BalanceTree
from distributor.merkle.merkle_proofs import generate_proofs
from distributor.schemas.distribution import ClaimEntry, DistributionDescriptor
from distributor.schemas.errors import (
    InvariantViolationException,
    LeafNotFoundException,
)


logger = logging.getLogger(__name__)


def build_balance_tree(aggregate: BalanceAggregate) -> BalanceTree:
    """Build the tree over aggregated entries, index = sorted position."""
    return BalanceTree(aggregate.as_balances())


def assemble_distribution(
    aggregate: BalanceAggregate,
    tree: BalanceTree,
    max_workers: int | None = None,
) -> DistributionDescriptor:
    """
    Package root, total and per-recipient claims.

    Args:
        aggregate: Output of aggregate_balances
        tree: BalanceTree built from the same aggregate
        max_workers: Threads for proof generation (None = sequential)

    Raises:
        InvariantViolationException: If an entry's leaf is missing from
            the tree, meaning aggregate and tree disagree
    """
    leaves = [
        BalanceTree.to_node(entry.index, entry.recipient, entry.amount)
        for entry in aggregate.entries
    ]
    try:
        proofs = generate_proofs(tree.tree, leaves, max_workers=max_workers)
    except LeafNotFoundException as e:
        raise InvariantViolationException(
            "Aggregated entry is missing from the Merkle tree",
            details=e.details,
        ) from e

    claims = {
        str(entry.recipient): ClaimEntry(
            index=entry.index,
            amount=entry.amount,
            proof=proof,
        )
        for entry, proof in zip(aggregate.entries, proofs)
    }

    descriptor = DistributionDescriptor(
        merkle_root=tree.root,
        token_total=aggregate.total,
        claims=claims,
    )
    logger.info(
        "Assembled distribution: root=%s total=%d claims=%d",
        descriptor.hex_root, descriptor.token_total, len(claims),
    )
    return descriptor


def parse_balance_map(
    balances: Iterable[EntitlementRecord | tuple[PubkeyLike, Any]],
    policy: DuplicatePolicy = DuplicatePolicy.REJECT,
    max_workers: int | None = None,
) -> DistributionDescriptor:
    """
    Compute the full distribution from entitlement records.

    Defaults to rejecting repeated recipients; pass DuplicatePolicy.SUM to
    merge them instead.

    Raises:
        DuplicateRecipientException, NonPositiveAmountException,
        AmountOutOfRangeException, InvalidAmountException,
        InvalidRecipientException: Input errors (batch-fatal)
        EmptyTreeException: No records
    """
    aggregate = aggregate_balances(balances, policy=policy)
    tree = build_balance_tree(aggregate)
    return assemble_distribution(aggregate, tree, max_workers=max_workers)


__all__ = [
    "build_balance_tree",
    "assemble_distribution",
    "parse_balance_map",
]
