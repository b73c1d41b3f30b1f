"""
Balances - Distribution Verifier
Independent checks of a published distribution.

verify_claim answers "is this one claim committed under this root?".
verify_distribution re-derives the entire tree from the artifact and
reports every discrepancy as a CheckResult. Neither ever raises.
"""
from __future__ import annotations

import logging
from typing import Sequence

from distributor.crypto.hashing import to_hex
from distributor.crypto.pubkey import Pubkey, PubkeyLike
from distributor.merkle.balance_tree import BalanceTree, verify_balance_proof
from distributor.merkle.merkle_tree import MerkleTree
from distributor.schemas.distribution import DistributionDescriptor
from distributor.schemas.errors import DistributorException, ErrorCodes
from distributor.schemas.verification import CheckResult, VerificationResult


logger = logging.getLogger(__name__)

# Cap on per-claim failures listed in a single CheckResult
MAX_REPORTED_FAILURES = 20


def verify_claim(
    index: int,
    recipient: PubkeyLike,
    amount: int,
    proof: Sequence[bytes],
    root: bytes,
) -> bool:
    """
    Recompute the leaf for (index, recipient, amount), fold ``proof`` and
    compare with ``root`` by exact byte equality.

    A malformed or wrong-length proof yields False rather than an error.
    """
    return verify_balance_proof(index, recipient, amount, proof, root)


def verify_descriptor_claim(
    descriptor: DistributionDescriptor,
    recipient: PubkeyLike,
) -> bool:
    """Verify the claim recorded for ``recipient`` against the descriptor root."""
    try:
        claim = descriptor.claim_for(recipient)
    except DistributorException:
        return False
    if claim is None:
        return False
    return verify_claim(claim.index, recipient, claim.amount, claim.proof, descriptor.merkle_root)


def _check_indices(descriptor: DistributionDescriptor) -> CheckResult:
    indices = sorted(claim.index for claim in descriptor.claims.values())
    expected = list(range(len(indices)))
    if indices != expected:
        return CheckResult.failed(
            "claim_indices",
            "Claim indices must be unique and contiguous from 0",
            details={"count": len(indices)},
        )
    return CheckResult.passed(
        "claim_indices",
        f"{len(indices)} claim indices are contiguous",
    )


def _check_total(descriptor: DistributionDescriptor) -> CheckResult:
    computed = sum(claim.amount for claim in descriptor.claims.values())
    if computed != descriptor.token_total:
        return CheckResult.failed(
            "token_total",
            f"tokenTotal {descriptor.token_total} does not match sum of claims {computed}",
            details={
                "code": ErrorCodes.TOTAL_MISMATCH,
                "declared": str(descriptor.token_total),
                "computed": str(computed),
            },
        )
    return CheckResult.passed("token_total", f"tokenTotal matches sum of claims ({computed})")


def _check_proofs(descriptor: DistributionDescriptor) -> CheckResult:
    failures: list[str] = []
    for recipient, claim in descriptor.claims.items():
        if not verify_claim(claim.index, recipient, claim.amount, claim.proof, descriptor.merkle_root):
            failures.append(recipient)

    if failures:
        return CheckResult.failed(
            "claim_proofs",
            f"{len(failures)} of {len(descriptor.claims)} claim proofs do not verify",
            details={
                "code": ErrorCodes.MERKLE_PROOF_INVALID,
                "recipients": failures[:MAX_REPORTED_FAILURES],
            },
        )
    return CheckResult.passed(
        "claim_proofs",
        f"All {len(descriptor.claims)} claim proofs verify",
    )


def _check_rebuilt_root(descriptor: DistributionDescriptor) -> CheckResult:
    ordered = sorted(
        descriptor.claims.items(),
        key=lambda item: item[1].index,
    )
    try:
        nodes = [
            BalanceTree.to_node(claim.index, recipient, claim.amount)
            for recipient, claim in ordered
        ]
        rebuilt = MerkleTree(nodes).root
    except DistributorException as e:
        return CheckResult.failed(
            "rebuilt_root",
            f"Could not rebuild tree from claims: {e.message}",
            details={"code": e.code},
        )

    if rebuilt != descriptor.merkle_root:
        return CheckResult.failed(
            "rebuilt_root",
            "Root rebuilt from all claims does not match merkleRoot",
            details={
                "code": ErrorCodes.ROOT_MISMATCH,
                "declared": descriptor.hex_root,
                "rebuilt": to_hex(rebuilt),
            },
        )
    return CheckResult.passed("rebuilt_root", "Root rebuilt from all claims matches merkleRoot")


def _check_recipient_order(descriptor: DistributionDescriptor) -> CheckResult:
    by_index = sorted(
        (claim.index, Pubkey(recipient)) for recipient, claim in descriptor.claims.items()
    )
    recipients = [recipient for _, recipient in by_index]
    if recipients != sorted(recipients):
        return CheckResult.failed(
            "recipient_order",
            "Claim indices do not follow ascending recipient byte order",
        )
    return CheckResult.passed("recipient_order", "Claim indices follow recipient byte order")


def verify_distribution(descriptor: DistributionDescriptor) -> VerificationResult:
    """
    Fully re-verify a distribution artifact.

    Checks:
        claim_indices   - indices are exactly 0..n-1
        recipient_order - index order equals recipient byte order
        token_total     - tokenTotal equals the sum of amounts
        claim_proofs    - every claim's proof folds to merkleRoot
        rebuilt_root    - a tree rebuilt from all claims has the same root
    """
    if not descriptor.claims:
        return VerificationResult.from_checks([
            CheckResult.failed("claims_present", "Distribution has no claims"),
        ])

    checks = [
        _check_indices(descriptor),
        _check_recipient_order(descriptor),
        _check_total(descriptor),
        _check_proofs(descriptor),
        _check_rebuilt_root(descriptor),
    ]
    result = VerificationResult.from_checks(checks)
    logger.info(
        "Verified distribution %s: ok=%s (%d/%d checks passed)",
        descriptor.hex_root, result.ok, result.passed_count, len(checks),
    )
    return result


__all__ = [
    "MAX_REPORTED_FAILURES",
    "verify_claim",
    "verify_descriptor_claim",
    "verify_distribution",
]
