"""
Merkle Distributor CLI

Command-line interface for building and checking airdrop distributions.

Usage:
    python -m distributor_cli generate airdrop.json --out distributor-info.json
    python -m distributor_cli verify distributor-info.json
    python -m distributor_cli proof distributor-info.json <ADDRESS>
"""

__version__ = "0.1.0"
