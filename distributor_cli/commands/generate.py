"""
CLI Generate Command

Aggregate entitlements, build the Merkle tree and write the distribution
artifact.

Usage:
    merkle-distributor generate airdrop.json --out distributor-info.json [--policy sum|reject] [--workers N] [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from distributor.balances.aggregator import DuplicatePolicy, aggregate_balances
from distributor.balances.balance_map import assemble_distribution, build_balance_tree
from distributor.io import dump_distribution, load_entitlements, save_distribution
from distributor.schemas.errors import DistributorException


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def resolve_policy(args: Namespace, map_style: bool) -> DuplicatePolicy:
    """Map-style inputs never sum; otherwise flag beats config."""
    if map_style:
        return DuplicatePolicy.REJECT
    if getattr(args, "policy", None):
        return DuplicatePolicy(args.policy)
    return DuplicatePolicy(args.cli_config.duplicate_policy)


def generate_cmd(args: Namespace) -> int:
    """Handle the generate command."""
    config = args.cli_config
    workers = args.workers if args.workers is not None else config.proof_workers

    try:
        source = load_entitlements(args.input)
        policy = resolve_policy(args, source.map_style)
        aggregate = aggregate_balances(source.records, policy=policy)
        tree = build_balance_tree(aggregate)
        descriptor = assemble_distribution(aggregate, tree, max_workers=workers)
        if args.out:
            save_distribution(descriptor, args.out, indent=config.indent)
    except DistributorException as e:
        if args.json:
            print(json.dumps(e.to_error_model().model_dump(), indent=2))
        else:
            print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if not args.out:
        sys.stdout.write(dump_distribution(descriptor, indent=config.indent))
        return EXIT_SUCCESS

    summary = {
        "out": str(args.out),
        "merkle_root": descriptor.hex_root,
        "token_total": str(descriptor.token_total),
        "num_claims": len(descriptor.claims),
        "num_records": len(source),
        "policy": policy.value,
        "depth": tree.tree.depth,
    }
    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        print(f"out: {summary['out']}")
        print(f"merkle_root: {summary['merkle_root']}")
        print(f"token_total: {summary['token_total']}")
        print(f"claims: {summary['num_claims']} (from {summary['num_records']} records, policy={summary['policy']})")
        print(f"depth: {summary['depth']}")
    return EXIT_SUCCESS
