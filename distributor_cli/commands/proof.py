"""
CLI Proof Command

Print the claim (index, amount, proof) for one recipient of a published
distribution.

Usage:
    merkle-distributor proof distributor-info.json <ADDRESS> [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from distributor.io import load_distribution
from distributor.schemas.errors import DistributorException


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def proof_cmd(args: Namespace) -> int:
    """Handle the proof command."""
    try:
        descriptor = load_distribution(args.artifact)
        claim = descriptor.claim_for(args.recipient)
    except DistributorException as e:
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if claim is None:
        print(f"Error: No claim for recipient {args.recipient}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    payload = {
        "merkleRoot": descriptor.hex_root,
        "recipient": args.recipient,
        **claim.model_dump(mode="json"),
    }

    if args.json:
        print(json.dumps(payload, indent=2))
    else:
        print(f"merkle_root: {payload['merkleRoot']}")
        print(f"recipient: {payload['recipient']}")
        print(f"index: {payload['index']}")
        print(f"amount: {payload['amount']}")
        print(f"proof ({len(payload['proof'])}):")
        for node in payload["proof"]:
            print(f"  {node}")
    return EXIT_SUCCESS
