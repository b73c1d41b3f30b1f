"""
CLI Configuration

Configuration management for the distributor CLI.
Supports a JSON configuration file, environment variables and .env files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from distributor.balances.aggregator import DuplicatePolicy

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "MERKLE_DISTRIBUTOR_"

CONFIG_FILE_NAME = "distributor.json"


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Aggregation
    duplicate_policy: str = DuplicatePolicy.SUM.value

    # Proof generation
    proof_workers: int = 1

    # Artifact output
    indent: int = 2

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"


def _env(name: str) -> str | None:
    return os.getenv(f"{ENV_PREFIX}{name}")


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    config = CLIConfig()
    config.duplicate_policy = data.get("duplicate_policy", config.duplicate_policy)
    config.proof_workers = int(data.get("proof_workers", config.proof_workers))
    config.indent = int(data.get("indent", config.indent))
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)
    config.default_output_format = data.get("default_output_format", config.default_output_format)
    return config


def apply_env_overrides(config: CLIConfig) -> CLIConfig:
    """Override config fields from MERKLE_DISTRIBUTOR_* environment variables."""
    if _env("DUPLICATE_POLICY"):
        config.duplicate_policy = _env("DUPLICATE_POLICY").lower()
    if _env("PROOF_WORKERS"):
        config.proof_workers = int(_env("PROOF_WORKERS"))
    if _env("INDENT"):
        config.indent = int(_env("INDENT"))
    if _env("LOG_LEVEL"):
        config.log_level = _env("LOG_LEVEL")
    if _env("LOG_FILE"):
        config.log_file = _env("LOG_FILE")
    if _env("OUTPUT_FORMAT"):
        config.default_output_format = _env("OUTPUT_FORMAT")
    return config


def default_config_paths() -> list[Path]:
    return [
        Path.cwd() / CONFIG_FILE_NAME,
        Path.cwd() / f".{CONFIG_FILE_NAME}",
        Path.home() / ".config" / "merkle-distributor" / "config.json",
    ]


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration

    Raises:
        ValueError: If the duplicate policy is not recognised
    """
    config = CLIConfig()

    if config_path is not None:
        if config_path.exists():
            config = load_config_from_file(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    config = apply_env_overrides(config)

    # Fail early on a bad policy string
    DuplicatePolicy(config.duplicate_policy)
    return config


def config_to_dict(config: CLIConfig) -> dict:
    return {
        "duplicate_policy": config.duplicate_policy,
        "proof_workers": config.proof_workers,
        "indent": config.indent,
        "log_level": config.log_level,
        "log_file": config.log_file,
        "default_output_format": config.default_output_format,
    }


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(config_to_dict(CLIConfig()), indent=2) + "\n"
