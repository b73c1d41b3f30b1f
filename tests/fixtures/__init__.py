"""
Test fixtures package for distributor tests.

This package provides factory functions for creating test objects.

Usage:
    from fixtures import make_pubkey, make_descriptor

    def test_something():
        descriptor = make_descriptor((10, 20))
"""

from .common import (
    SCENARIO_AMOUNTS,
    SCENARIO_TOTAL,
    make_pubkey,
    make_records,
    make_descriptor,
    write_entitlements_json,
    write_artifact,
    tamper_artifact,
)

__all__ = [
    "SCENARIO_AMOUNTS",
    "SCENARIO_TOTAL",
    "make_pubkey",
    "make_records",
    "make_descriptor",
    "write_entitlements_json",
    "write_artifact",
    "tamper_artifact",
]
