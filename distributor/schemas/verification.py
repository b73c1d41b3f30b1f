"""
Schemas - Verification Results
File: verification.py

Purpose: Report format for distribution artifact checks. Artifacts are
verified routinely against adversarial input, so every discrepancy is
reported as a failed CheckResult and nothing is raised.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CheckResult(BaseModel):
    """One artifact check (claim_proofs, token_total, rebuilt_root, ...)."""

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(
        ...,
        description="Stable identifier of the check",
        min_length=1,
    )
    ok: bool = Field(
        ...,
        description="Whether the artifact passed this check",
    )
    message: str = Field(
        ...,
        description="Human-readable outcome",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Offending recipients, indices or expected values",
    )

    @classmethod
    def passed(
        cls,
        check_id: str,
        message: str = "Check passed",
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=True, message=message, details=details or {})

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=False, message=message, details=details or {})


class VerificationResult(BaseModel):
    """Outcome of verifying an artifact, or one claim of it."""

    model_config = ConfigDict(extra="forbid")

    ok: bool = Field(
        ...,
        description="True only when every check passed",
    )
    checks: list[CheckResult] = Field(
        default_factory=list,
        description="Individual check results in the order they ran",
    )

    @property
    def passed_count(self) -> int:
        return sum(1 for check in self.checks if check.ok)

    @property
    def error_count(self) -> int:
        return len(self.checks) - self.passed_count

    def get_error_messages(self) -> list[str]:
        return [check.message for check in self.checks if not check.ok]

    @classmethod
    def from_checks(cls, checks: list[CheckResult]) -> "VerificationResult":
        """Create a result whose ok flag reflects every check."""
        return cls(ok=all(check.ok for check in checks), checks=checks)
