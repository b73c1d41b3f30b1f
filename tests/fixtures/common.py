"""
Common test fixtures shared by all modules.

Provides factory functions for core distributor data structures:
- Pubkey recipients with controlled byte order
- Raw entitlement records
- Built DistributionDescriptors and their on-disk artifacts

These are the foundational building blocks used by higher-level fixtures.
"""

import json
from pathlib import Path
from typing import Any, Optional

from distributor.balances.aggregator import DuplicatePolicy
from distributor.balances.balance_map import parse_balance_map
from distributor.crypto.pubkey import Pubkey
from distributor.io import save_distribution
from distributor.schemas.distribution import DistributionDescriptor


# =============================================================================
# Recipient Factory
# =============================================================================

def make_pubkey(seed: int) -> Pubkey:
    """
    Create a deterministic recipient whose raw bytes are ``seed`` repeated.

    Larger seeds sort after smaller ones, which keeps expected indices easy
    to read in tests.
    """
    return Pubkey(bytes([seed]) * 32)


# =============================================================================
# Entitlement Factories
# =============================================================================

# Three recipients holding 1M, 2M and 3M base units
SCENARIO_AMOUNTS = (1_000_000, 2_000_000, 3_000_000)
SCENARIO_TOTAL = 6_000_000


def make_records(
    amounts: tuple[int, ...] = SCENARIO_AMOUNTS,
    seeds: Optional[tuple[int, ...]] = None,
    as_strings: bool = False,
) -> list[tuple[str, Any]]:
    """
    Create (base58 recipient, amount) records.

    Args:
        amounts: One amount per recipient
        seeds: Byte seeds for the recipients (default 1..n)
        as_strings: Render amounts as decimal strings like a JSON input
    """
    if seeds is None:
        seeds = tuple(range(1, len(amounts) + 1))
    return [
        (str(make_pubkey(seed)), str(amount) if as_strings else amount)
        for seed, amount in zip(seeds, amounts)
    ]


def make_descriptor(
    amounts: tuple[int, ...] = SCENARIO_AMOUNTS,
    seeds: Optional[tuple[int, ...]] = None,
) -> DistributionDescriptor:
    """Build a valid descriptor for ``amounts``."""
    return parse_balance_map(
        make_records(amounts, seeds),
        policy=DuplicatePolicy.REJECT,
    )


# =============================================================================
# File Factories
# =============================================================================

def write_entitlements_json(path: Path, records: list[tuple[str, Any]]) -> Path:
    """Write records as a JSON list with address/earnings keys."""
    rows = [{"address": address, "earnings": str(amount)} for address, amount in records]
    path.write_text(json.dumps(rows, indent=2))
    return path


def write_artifact(path: Path, descriptor: Optional[DistributionDescriptor] = None) -> Path:
    """Save a descriptor (default: the three-recipient scenario) to ``path``."""
    return save_distribution(descriptor or make_descriptor(), path)


def tamper_artifact(path: Path, mutate) -> Path:
    """Load the raw JSON at ``path``, apply ``mutate(data)`` and write it back."""
    data = json.loads(path.read_text())
    mutate(data)
    path.write_text(json.dumps(data, indent=2))
    return path
