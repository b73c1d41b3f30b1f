"""
Schemas - Distribution Descriptor
File: distribution.py

Purpose: The published artifact. It holds the root, the token total and
every claim, and is sufficient for anyone to rebuild and re-verify the
whole tree.

External JSON shape:
    {
      "merkleRoot": "<hex>",
      "tokenTotal": "<decimal>",
      "claims": {
        "<base58 recipient>": {"index": 0, "amount": "<decimal>", "proof": ["<hex>", ...]}
      }
    }
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from distributor.crypto.hashing import hash_from_hex, to_hex
from distributor.crypto.pubkey import Pubkey
from distributor.merkle.balance_tree import U64_MAX
from distributor.schemas.errors import DistributorException


def _parse_decimal(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or isinstance(value, float):
        raise ValueError(f"{field_name} must be an integer or decimal string")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.isascii() and text.isdigit():
            return int(text)
    raise ValueError(f"{field_name} must be an integer or decimal string, got {value!r}")


def _parse_hash(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
        if len(raw) != 32:
            raise ValueError(f"Expected a 32-byte hash, got {len(raw)} bytes")
        return raw
    if isinstance(value, str):
        return hash_from_hex(value)
    raise ValueError(f"Expected hex string or bytes, got {type(value).__name__}")


class ClaimEntry(BaseModel):
    """One recipient's claim: index, amount and proof."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    index: int = Field(
        ...,
        ge=0,
        le=U64_MAX,
        description="Position of the recipient in the sorted entitlement list",
    )
    amount: int = Field(
        ...,
        gt=0,
        le=U64_MAX,
        description="Claimable amount in base units",
    )
    proof: list[bytes] = Field(
        default_factory=list,
        description="Sibling hashes, leaf to root",
    )

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> int:
        return _parse_decimal(value, "amount")

    @field_validator("proof", mode="before")
    @classmethod
    def _coerce_proof(cls, value: Any) -> list[bytes]:
        if not isinstance(value, (list, tuple)):
            raise ValueError("proof must be a list")
        return [_parse_hash(node) for node in value]

    @field_serializer("amount")
    def _serialize_amount(self, amount: int) -> str:
        return str(amount)

    @field_serializer("proof")
    def _serialize_proof(self, proof: list[bytes]) -> list[str]:
        return [to_hex(node) for node in proof]


class DistributionDescriptor(BaseModel):
    """
    The exported distribution artifact.

    Use ``to_json_dict`` / ``from_json_dict`` for the external camelCase
    representation.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
    )

    merkle_root: bytes = Field(
        ...,
        alias="merkleRoot",
        description="32-byte Merkle root",
    )
    token_total: int = Field(
        ...,
        alias="tokenTotal",
        ge=0,
        description="Sum of all claim amounts",
    )
    claims: dict[str, ClaimEntry] = Field(
        default_factory=dict,
        description="Claims keyed by base58 recipient",
    )

    @field_validator("merkle_root", mode="before")
    @classmethod
    def _coerce_root(cls, value: Any) -> bytes:
        return _parse_hash(value)

    @field_validator("token_total", mode="before")
    @classmethod
    def _coerce_total(cls, value: Any) -> int:
        return _parse_decimal(value, "tokenTotal")

    @field_validator("claims", mode="before")
    @classmethod
    def _normalize_recipients(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            raise ValueError("claims must be an object keyed by recipient")
        normalized: dict[str, Any] = {}
        for key, claim in value.items():
            try:
                recipient = str(Pubkey(key))
            except DistributorException as e:
                raise ValueError(e.message) from e
            if recipient in normalized:
                raise ValueError(f"Duplicate recipient in claims: {recipient}")
            normalized[recipient] = claim
        return normalized

    @field_serializer("merkle_root")
    def _serialize_root(self, root: bytes) -> str:
        return to_hex(root)

    @field_serializer("token_total")
    def _serialize_total(self, total: int) -> str:
        return str(total)

    @property
    def hex_root(self) -> str:
        return to_hex(self.merkle_root)

    def claim_for(self, recipient: Any) -> ClaimEntry | None:
        """Look up a claim by base58 text, raw bytes or Pubkey."""
        return self.claims.get(str(Pubkey(recipient)))

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_json_dict(cls, data: dict[str, Any]) -> "DistributionDescriptor":
        return cls.model_validate(data)
