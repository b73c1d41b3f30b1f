"""
Schemas - Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy for the distributor.
Defines a Pydantic model for structured error reporting and the
Python exceptions used for control flow.

Every exception raised while building a distribution is batch-fatal:
there is no partial-success mode.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Tree construction
    EMPTY_TREE = "EMPTY_TREE"
    LEAF_NOT_FOUND = "LEAF_NOT_FOUND"
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"

    # Balance aggregation
    DUPLICATE_RECIPIENT = "DUPLICATE_RECIPIENT"
    NON_POSITIVE_AMOUNT = "NON_POSITIVE_AMOUNT"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    AMOUNT_OUT_OF_RANGE = "AMOUNT_OUT_OF_RANGE"
    INVALID_RECIPIENT = "INVALID_RECIPIENT"

    # Serialization & IO
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    DISTRIBUTION_IO_ERROR = "DISTRIBUTION_IO_ERROR"

    # Verification (reported through CheckResult, never raised)
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"
    ROOT_MISMATCH = "ROOT_MISMATCH"
    TOTAL_MISMATCH = "TOTAL_MISMATCH"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class DistributorError(BaseModel):
    """
    Structured error model.

    Used by the CLI when emitting machine-readable failure reports.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.EMPTY_TREE],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class DistributorException(Exception):
    """
    Base exception for all distributor errors.

    Carries structured error information and can be converted to a
    DistributorError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "DISTRIBUTOR_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> DistributorError:
        """Convert this exception to a DistributorError model."""
        return DistributorError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyTreeException(DistributorException):
    """Raised when a Merkle tree is built from zero leaves."""

    def __init__(self, message: str = "Cannot build a Merkle tree from an empty leaf set") -> None:
        super().__init__(message=message, code=ErrorCodes.EMPTY_TREE)


class LeafNotFoundException(DistributorException):
    """Raised when a proof is requested for a leaf that was never inserted."""

    def __init__(self, leaf_hex: str) -> None:
        super().__init__(
            message=f"Element does not exist in Merkle tree: {leaf_hex}",
            code=ErrorCodes.LEAF_NOT_FOUND,
            details={"leaf": leaf_hex},
        )


class InvariantViolationException(DistributorException):
    """Raised when an internal consistency guarantee is broken."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVARIANT_VIOLATION,
            details=details,
        )


class DuplicateRecipientException(DistributorException):
    """Raised when a recipient repeats and summing was not requested."""

    def __init__(self, recipient: str) -> None:
        super().__init__(
            message=f"Duplicate address: {recipient}",
            code=ErrorCodes.DUPLICATE_RECIPIENT,
            details={"recipient": recipient},
        )


class NonPositiveAmountException(DistributorException):
    """Raised when a record amount is negative or an aggregated amount is not positive."""

    def __init__(self, recipient: str, amount: int) -> None:
        super().__init__(
            message=f"Invalid amount for account: {recipient}",
            code=ErrorCodes.NON_POSITIVE_AMOUNT,
            details={"recipient": recipient, "amount": str(amount)},
        )


class InvalidAmountException(DistributorException):
    """Raised when an amount cannot be parsed as an exact integer."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_AMOUNT,
            details=details,
        )


class AmountOutOfRangeException(DistributorException):
    """Raised when a value does not fit the 8-byte unsigned leaf field."""

    def __init__(self, field_name: str, value: int) -> None:
        super().__init__(
            message=f"{field_name} {value} does not fit in an unsigned 64-bit integer",
            code=ErrorCodes.AMOUNT_OUT_OF_RANGE,
            details={"field": field_name, "value": str(value)},
        )


class InvalidRecipientException(DistributorException):
    """Raised when a recipient identity cannot be decoded to 32 bytes."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_RECIPIENT,
            details=details,
        )


class CanonicalizationException(DistributorException):
    """Raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
        )


class DistributionIOException(DistributorException):
    """Raised when reading or writing inputs and artifacts fails."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if path:
            full_details["path"] = path
        super().__init__(
            message=message,
            code=ErrorCodes.DISTRIBUTION_IO_ERROR,
            details=full_details,
        )
