"""
Merkle Distributor

Commitment engine for airdrop-style distributions: aggregate
(recipient, amount) entitlements, commit to them with a Keccak-256 Merkle
root, and produce per-recipient inclusion proofs that an on-chain program
can check independently.

Subpackages:
    distributor.crypto    - hashing, pair combine, recipient identity
    distributor.merkle    - MerkleTree, BalanceTree, proofs
    distributor.balances  - aggregation, descriptor assembly, verification
    distributor.schemas   - errors, canonical JSON, result models
"""

__version__ = "0.1.0"
