"""
CLI Verify Command

Verify a distribution artifact offline:
- Every claim proof folds to merkleRoot
- Indices, recipient order and tokenTotal are consistent
- The root rebuilt from all claims matches

With --recipient only that one claim is checked.

Usage:
    merkle-distributor verify distributor-info.json [--recipient ADDRESS] [--json] [--debug]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

from distributor.balances.verifier import verify_descriptor_claim, verify_distribution
from distributor.io import load_distribution
from distributor.schemas.distribution import DistributionDescriptor
from distributor.schemas.errors import DistributionIOException, DistributorException
from distributor.schemas.verification import CheckResult, VerificationResult


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of artifact verification for CLI output."""
    artifact_path: str = ""
    merkle_root: str = ""
    token_total: str = ""
    num_claims: int = 0
    ok: bool = False
    recipient: str | None = None
    checks: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if self.recipient is None:
            del d["recipient"]
        if not d["checks"]:
            del d["checks"]
        if not d["errors"]:
            del d["errors"]
        return d


def verify_single_claim(descriptor: DistributionDescriptor, recipient: str) -> VerificationResult:
    """Wrap a single-recipient check as a VerificationResult."""
    try:
        claim = descriptor.claim_for(recipient)
    except DistributorException as e:
        return VerificationResult.from_checks([
            CheckResult.failed("recipient_claim", e.message, details={"code": e.code}),
        ])

    if claim is None:
        check = CheckResult.failed(
            "recipient_claim",
            f"No claim for recipient {recipient}",
            details={"recipient": recipient},
        )
    elif verify_descriptor_claim(descriptor, recipient):
        check = CheckResult.passed("recipient_claim", f"Claim for {recipient} verifies")
    else:
        check = CheckResult.failed(
            "recipient_claim",
            f"Claim for {recipient} does not verify against merkleRoot",
            details={"recipient": recipient},
        )
    return VerificationResult.from_checks([check])


def build_summary(
    artifact_path: str,
    descriptor: DistributionDescriptor,
    result: VerificationResult,
    recipient: str | None = None,
    debug: bool = False,
) -> VerifySummary:
    """Build a VerifySummary from a verification result."""
    summary = VerifySummary(
        artifact_path=artifact_path,
        merkle_root=descriptor.hex_root,
        token_total=str(descriptor.token_total),
        num_claims=len(descriptor.claims),
        ok=result.ok,
        recipient=recipient,
        errors=result.get_error_messages(),
    )

    if debug:
        summary.checks = [
            {
                "check_id": check.check_id,
                "ok": check.ok,
                "message": check.message,
                "details": check.details,
            }
            for check in result.checks
        ]

    return summary


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"artifact: {summary.artifact_path}")
    print(f"merkle_root: {summary.merkle_root}")
    print(f"token_total: {summary.token_total}")
    print(f"claims: {summary.num_claims}")
    if summary.recipient is not None:
        print(f"recipient: {summary.recipient}")
    print(f"ok: {str(summary.ok).lower()}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors[:10]:
            print(f"  ✗ {err}")

    if summary.checks:
        passed = sum(1 for c in summary.checks if c["ok"])
        failed = len(summary.checks) - passed
        print(f"\nchecks: {passed} passed, {failed} failed")
        for check in summary.checks:
            status = "✓" if check["ok"] else "✗"
            print(f"  {status} {check['check_id']}: {check['message']}")


def print_summary_json(summary: VerifySummary) -> None:
    """Print summary as JSON."""
    print(json.dumps(summary.to_dict(), indent=2))


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    artifact_path = Path(args.artifact)

    try:
        descriptor = load_distribution(artifact_path)
    except DistributionIOException as e:
        print(f"Error loading artifact: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.recipient:
        result = verify_single_claim(descriptor, args.recipient)
    else:
        result = verify_distribution(descriptor)

    summary = build_summary(
        artifact_path=str(artifact_path),
        descriptor=descriptor,
        result=result,
        recipient=args.recipient,
        debug=args.debug,
    )

    if args.json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)

    if summary.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS

    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
