"""
Schemas & Canonicalization
File: __init__.py

Purpose: Export the error taxonomy, canonical serialization and
verification result models.

The distribution descriptor lives in distributor.schemas.distribution and
is imported from there directly; it depends on the crypto and merkle
packages, which themselves import the error types exported here.
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    PRETTY_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
)

# Error models and exceptions
from .errors import (
    AmountOutOfRangeException,
    CanonicalizationException,
    DistributionIOException,
    DistributorError,
    DistributorException,
    DuplicateRecipientException,
    EmptyTreeException,
    ErrorCodes,
    InvalidAmountException,
    InvalidRecipientException,
    InvariantViolationException,
    LeafNotFoundException,
    NonPositiveAmountException,
)

# Verification results
from .verification import (
    CheckResult,
    VerificationResult,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "PRETTY_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    # Errors
    "AmountOutOfRangeException",
    "CanonicalizationException",
    "DistributionIOException",
    "DistributorError",
    "DistributorException",
    "DuplicateRecipientException",
    "EmptyTreeException",
    "ErrorCodes",
    "InvalidAmountException",
    "InvalidRecipientException",
    "InvariantViolationException",
    "LeafNotFoundException",
    "NonPositiveAmountException",
    # Verification
    "CheckResult",
    "VerificationResult",
]
