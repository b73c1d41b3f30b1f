"""
Merkle Distributor CLI - Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m distributor_cli generate <input> [--out PATH] [--policy sum|reject] [--workers N] [--json]
    python -m distributor_cli verify <artifact> [--recipient ADDRESS] [--json] [--debug]
    python -m distributor_cli proof <artifact> <recipient> [--json]
    python -m distributor_cli config --init

Environment Variables:
    MERKLE_DISTRIBUTOR_DUPLICATE_POLICY  Duplicate recipient policy: sum or reject (default: sum)
    MERKLE_DISTRIBUTOR_PROOF_WORKERS     Worker threads for proof generation (default: 1)
    MERKLE_DISTRIBUTOR_INDENT            Artifact JSON indent (default: 2)
    MERKLE_DISTRIBUTOR_LOG_LEVEL         Log level (default: INFO)
    MERKLE_DISTRIBUTOR_LOG_FILE          Also log to this file
    MERKLE_DISTRIBUTOR_OUTPUT_FORMAT     human or json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from distributor import __version__
from distributor_cli.commands import generate, proof, verify
from distributor_cli.config import (
    CONFIG_FILE_NAME,
    ENV_PREFIX,
    config_to_dict,
    get_default_config_template,
    load_config,
)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="merkle-distributor",
        description="Merkle Distributor CLI - Build airdrop Merkle commitments, verify artifacts and look up proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to configuration file (default: ./{CONFIG_FILE_NAME} or ~/.config/merkle-distributor/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate command ---
    generate_parser = subparsers.add_parser(
        "generate",
        help="Build a distribution artifact from entitlements",
        description="Aggregate entitlements, build the Merkle tree and write merkleRoot, tokenTotal and claims.",
    )
    generate_parser.add_argument(
        "input",
        type=str,
        help="Entitlement file (.json list or address->amount object, or .csv)",
    )
    generate_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Output path for the artifact (default: print to stdout)",
    )
    generate_parser.add_argument(
        "--policy",
        type=str,
        choices=["sum", "reject"],
        default=None,
        help="Duplicate recipient policy for record lists (default: from config or sum)",
    )
    generate_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for proof generation (default: from config)",
    )
    generate_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    generate_parser.set_defaults(func=generate.generate_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a distribution artifact offline",
        description="Check every claim proof, indices, tokenTotal and the rebuilt root.",
    )
    verify_parser.add_argument(
        "artifact",
        type=str,
        help="Path to distribution artifact JSON",
    )
    verify_parser.add_argument(
        "--recipient", "-r",
        type=str,
        default=None,
        help="Only verify the claim of this recipient",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Include detailed checks",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Print the claim and proof of one recipient",
    )
    proof_parser.add_argument(
        "artifact",
        type=str,
        help="Path to distribution artifact JSON",
    )
    proof_parser.add_argument(
        "recipient",
        type=str,
        help="Recipient address (base58)",
    )
    proof_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    proof_parser.set_defaults(func=proof.proof_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default=CONFIG_FILE_NAME,
        help=f"Configuration file path (default: {CONFIG_FILE_NAME})",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def apply_output_format(args: argparse.Namespace) -> None:
    """Let default_output_format=json turn on --json for commands that have it."""
    if hasattr(args, "json") and not args.json:
        args.json = args.cli_config.default_output_format == "json"


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print(f"You can also use environment variables ({ENV_PREFIX}* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(config_to_dict(args.cli_config), indent=2))
        return EXIT_SUCCESS

    print("Usage: merkle-distributor config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config
    apply_output_format(args)

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
