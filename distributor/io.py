"""
Distribution IO
File: io.py

Purpose: Read entitlement inputs from disk and save/load the published
distribution artifact.

Supported entitlement inputs:
    - JSON list:   [{"address": "...", "earnings": "..."}, ...]
                   ({"authority", "amount"} keys are accepted too)
    - JSON object: {"<address>": "<amount>", ...}  (map-style)
    - CSV:         header row with "address" and "earnings" (or "amount")
"""

from __future__ import annotations

import csv
import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from distributor.schemas.canonical import dumps_canonical
from distributor.schemas.distribution import DistributionDescriptor
from distributor.schemas.errors import (
    DistributionIOException,
    DuplicateRecipientException,
)


logger = logging.getLogger(__name__)

# Accepted (recipient, amount) key pairs for JSON/CSV records
RECORD_KEYS: tuple[tuple[str, str], ...] = (
    ("address", "earnings"),
    ("authority", "amount"),
    ("address", "amount"),
)

DEFAULT_INDENT = 2


@dataclass(frozen=True)
class EntitlementSource:
    """Raw records read from one input file."""
    records: list[tuple[str, Any]]
    map_style: bool
    path: str

    def __len__(self) -> int:
        return len(self.records)


def _reject_duplicate_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise DuplicateRecipientException(key)
        result[key] = value
    return result


def _record_from_mapping(row: dict[str, Any], position: int, path: Path) -> tuple[str, Any]:
    for recipient_key, amount_key in RECORD_KEYS:
        if recipient_key in row and amount_key in row:
            return str(row[recipient_key]).strip(), row[amount_key]
    raise DistributionIOException(
        f"Record {position} has no recognised recipient/amount fields",
        path=str(path),
        details={"position": position, "keys": sorted(row)},
    )


def _load_json_entitlements(path: Path) -> EntitlementSource:
    try:
        data = json.loads(
            path.read_text(encoding="utf-8"),
            object_pairs_hook=_reject_duplicate_keys,
        )
    except json.JSONDecodeError as e:
        raise DistributionIOException(f"Invalid JSON in {path}: {e}", path=str(path)) from e

    if isinstance(data, dict):
        return EntitlementSource(
            records=[(str(key), value) for key, value in data.items()],
            map_style=True,
            path=str(path),
        )
    if isinstance(data, list):
        records = []
        for position, row in enumerate(data):
            if not isinstance(row, dict):
                raise DistributionIOException(
                    f"Record {position} must be an object",
                    path=str(path),
                    details={"position": position},
                )
            records.append(_record_from_mapping(row, position, path))
        return EntitlementSource(records=records, map_style=False, path=str(path))

    raise DistributionIOException(
        "Entitlement JSON must be a list of records or an address->amount object",
        path=str(path),
    )


def _load_csv_entitlements(path: Path) -> EntitlementSource:
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        records = []
        for position, row in enumerate(reader):
            extra = row.pop(None, None) or []
            if any(value.strip() for value in extra):
                raise DistributionIOException(
                    f"Record {position} has more fields than the header",
                    path=str(path),
                    details={"position": position, "extra": extra},
                )
            if not any(isinstance(value, str) and value.strip() for value in row.values()):
                continue
            records.append(_record_from_mapping(row, position, path))
    return EntitlementSource(records=records, map_style=False, path=str(path))


def load_entitlements(path: str | Path) -> EntitlementSource:
    """
    Read raw entitlement records from a JSON or CSV file.

    Raises:
        DistributionIOException: If the file is missing or malformed
        DuplicateRecipientException: If a JSON object repeats a key
    """
    path = Path(path)
    if not path.exists():
        raise DistributionIOException(f"Input file not found: {path}", path=str(path))

    if path.suffix.lower() == ".csv":
        source = _load_csv_entitlements(path)
    else:
        source = _load_json_entitlements(path)

    logger.info(
        "Loaded %d entitlement records from %s (map_style=%s)",
        len(source), path, source.map_style,
    )
    return source


def dump_distribution(descriptor: DistributionDescriptor, indent: int | None = DEFAULT_INDENT) -> str:
    """Serialize a descriptor to deterministic JSON text."""
    return dumps_canonical(descriptor.to_json_dict(), indent=indent) + "\n"


def save_distribution(
    descriptor: DistributionDescriptor,
    out_path: str | Path,
    indent: int | None = DEFAULT_INDENT,
) -> Path:
    """
    Write the descriptor atomically (temp file + rename).

    Returns:
        Path to the written file
    """
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    content = dump_distribution(descriptor, indent=indent)

    fd, tmp_name = tempfile.mkstemp(dir=out_path.parent, prefix=f".{out_path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, out_path)
    except OSError as e:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise DistributionIOException(f"Failed to write {out_path}: {e}", path=str(out_path)) from e

    logger.info("Wrote distribution %s to %s", descriptor.hex_root, out_path)
    return out_path


def load_distribution(path: str | Path) -> DistributionDescriptor:
    """
    Load and validate a distribution artifact.

    Raises:
        DistributionIOException: If the file is missing, not JSON, or
            does not match the artifact schema
    """
    path = Path(path)
    if not path.exists():
        raise DistributionIOException(f"Distribution file not found: {path}", path=str(path))

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DistributionIOException(f"Invalid JSON in {path}: {e}", path=str(path)) from e

    if not isinstance(data, dict):
        raise DistributionIOException("Distribution artifact must be a JSON object", path=str(path))

    try:
        return DistributionDescriptor.from_json_dict(data)
    except ValidationError as e:
        raise DistributionIOException(
            f"Distribution artifact does not match schema: {e.error_count()} error(s)",
            path=str(path),
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e


__all__ = [
    "RECORD_KEYS",
    "DEFAULT_INDENT",
    "EntitlementSource",
    "load_entitlements",
    "dump_distribution",
    "save_distribution",
    "load_distribution",
]
