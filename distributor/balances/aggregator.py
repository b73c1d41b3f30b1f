"""
Balances - Aggregator
Collapse raw (recipient, earnings) records into one sorted entitlement
per recipient.

Rules:
1. Group by recipient identity (raw bytes).
2. Repeated recipients are summed (DuplicatePolicy.SUM) or rejected
   (DuplicatePolicy.REJECT).
3. Every record amount must be nonnegative; every aggregated amount must
   be strictly positive and fit in u64.
4. Entries are sorted ascending by recipient bytes; the sorted position
   is the claim index.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

from distributor.crypto.pubkey import Pubkey, PubkeyLike
from distributor.merkle.balance_tree import U64_MAX
from distributor.schemas.errors import (
    AmountOutOfRangeException,
    DuplicateRecipientException,
    InvalidAmountException,
    NonPositiveAmountException,
)


logger = logging.getLogger(__name__)


class DuplicatePolicy(str, Enum):
    """How to treat a recipient that appears more than once."""
    SUM = "sum"
    REJECT = "reject"


def parse_amount(value: Any) -> int:
    """
    Parse an earnings value exactly.

    Accepts ints and base-10 integer strings (an optional sign is allowed
    so that negative inputs reach the positivity check). Floats, booleans,
    fractional and exponent notations are rejected.

    Raises:
        InvalidAmountException: If the value is not an exact integer
    """
    if isinstance(value, bool):
        raise InvalidAmountException(
            f"Amount must be an integer, got boolean {value!r}",
            details={"value": repr(value)},
        )
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text[:1] in ("+", "-") else text
        if digits.isascii() and digits.isdigit():
            return int(text)
    raise InvalidAmountException(
        f"Amount must be an integer or decimal string, got {value!r}",
        details={"value": repr(value), "type": type(value).__name__},
    )


@dataclass(frozen=True)
class EntitlementRecord:
    """One raw input record. Recipients may repeat across records."""
    recipient: Pubkey
    amount: int

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise NonPositiveAmountException(str(self.recipient), self.amount)

    @classmethod
    def from_raw(cls, recipient: PubkeyLike, amount: Any) -> "EntitlementRecord":
        return cls(recipient=Pubkey(recipient), amount=parse_amount(amount))


@dataclass(frozen=True)
class AggregatedEntry:
    """One unique recipient with its claim index and summed amount."""
    index: int
    recipient: Pubkey
    amount: int


@dataclass(frozen=True)
class BalanceAggregate:
    """Result of aggregation: sorted entries and their total."""
    entries: tuple[AggregatedEntry, ...]
    total: int

    def __len__(self) -> int:
        return len(self.entries)

    def as_balances(self) -> list[tuple[Pubkey, int]]:
        """(recipient, amount) pairs in index order, ready for BalanceTree."""
        return [(entry.recipient, entry.amount) for entry in self.entries]


def aggregate_balances(
    records: Iterable[EntitlementRecord | tuple[PubkeyLike, Any]],
    policy: DuplicatePolicy = DuplicatePolicy.SUM,
) -> BalanceAggregate:
    """
    Aggregate raw records into unique, sorted, indexed entries.

    Args:
        records: EntitlementRecords or (recipient, amount) tuples
        policy: Whether repeated recipients are summed or rejected

    Returns:
        BalanceAggregate with entries sorted by recipient bytes

    Raises:
        DuplicateRecipientException: Repeated recipient under REJECT
        NonPositiveAmountException: A record amount is negative, or an
            aggregated amount is <= 0
        AmountOutOfRangeException: An aggregated amount exceeds u64
        InvalidAmountException / InvalidRecipientException: Bad input
    """
    policy = DuplicatePolicy(policy)
    amounts: dict[Pubkey, int] = {}
    record_count = 0

    for record in records:
        if not isinstance(record, EntitlementRecord):
            recipient, amount = record
            record = EntitlementRecord.from_raw(recipient, amount)
        record_count += 1

        if record.recipient in amounts:
            if policy is DuplicatePolicy.REJECT:
                raise DuplicateRecipientException(str(record.recipient))
            amounts[record.recipient] += record.amount
        else:
            amounts[record.recipient] = record.amount

    for recipient, amount in amounts.items():
        if amount <= 0:
            raise NonPositiveAmountException(str(recipient), amount)
        if amount > U64_MAX:
            raise AmountOutOfRangeException("amount", amount)

    entries = tuple(
        AggregatedEntry(index=index, recipient=recipient, amount=amounts[recipient])
        for index, recipient in enumerate(sorted(amounts))
    )
    total = sum(entry.amount for entry in entries)

    logger.info(
        "Aggregated %d records into %d recipients (policy=%s, total=%d)",
        record_count, len(entries), policy.value, total,
    )
    return BalanceAggregate(entries=entries, total=total)


def aggregate_balance_map(balances: Mapping[PubkeyLike, Any]) -> BalanceAggregate:
    """
    Aggregate a map-style input (recipient -> amount).

    Distinct keys may still name the same recipient (e.g. base58 vs 0x
    hex text); that is rejected since summing was not intended.
    """
    return aggregate_balances(balances.items(), policy=DuplicatePolicy.REJECT)


__all__ = [
    "DuplicatePolicy",
    "parse_amount",
    "EntitlementRecord",
    "AggregatedEntry",
    "BalanceAggregate",
    "aggregate_balances",
    "aggregate_balance_map",
]
