"""
Balance aggregation and distribution assembly.

Usage:
    from distributor.balances import parse_balance_map, DuplicatePolicy

    descriptor = parse_balance_map(
        [("Ho4z...", "1000000"), ("9xQe...", 250)],
        policy=DuplicatePolicy.SUM,
    )
"""
from .aggregator import (
    DuplicatePolicy,
    parse_amount,
    EntitlementRecord,
    AggregatedEntry,
    BalanceAggregate,
    aggregate_balances,
    aggregate_balance_map,
)
from .balance_map import (
    build_balance_tree,
    assemble_distribution,
    parse_balance_map,
)
from .verifier import (
    verify_claim,
    verify_descriptor_claim,
    verify_distribution,
)

__all__ = [
    "DuplicatePolicy",
    "parse_amount",
    "EntitlementRecord",
    "AggregatedEntry",
    "BalanceAggregate",
    "aggregate_balances",
    "aggregate_balance_map",
    "build_balance_tree",
    "assemble_distribution",
    "parse_balance_map",
    "verify_claim",
    "verify_descriptor_claim",
    "verify_distribution",
]
