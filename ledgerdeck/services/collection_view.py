"""
Derived views over a collection snapshot.

Pure functions: no I/O, no hidden state, inputs are never modified.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from ledgerdeck.models.card import CardRecord, CardStatus

StatusFilter = CardStatus | Literal["all"]

ALL_STATUSES = "all"


@dataclass(frozen=True)
class CollectionStats:
    """Dashboard figures for a snapshot."""

    total: int
    counts: dict[CardStatus, int]
    percentages: dict[CardStatus, float]


def count_by_status(records: Sequence[CardRecord]) -> dict[CardStatus, int]:
    """Count cards per status. Every status is present, possibly with 0."""
    counts = {status: 0 for status in CardStatus}
    for record in records:
        counts[record.status] += 1
    return counts


def percentage_distribution(records: Sequence[CardRecord]) -> dict[CardStatus, float]:
    """
    Share of each status in percent.

    The denominator is floored at 1, so an empty collection gives 0.0 for
    every status.
    """
    total = max(1, len(records))
    return {status: count / total * 100 for status, count in count_by_status(records).items()}


def _matches_status(record: CardRecord, status: str) -> bool:
    return status == ALL_STATUSES or record.status == status


def _matches_query(record: CardRecord, query: str) -> bool:
    needle = query.lower()
    return needle in record.name.lower() or needle in record.type.lower()


def filter_records(
    records: Sequence[CardRecord],
    query: str = "",
    status: StatusFilter | str = ALL_STATUSES,
) -> list[CardRecord]:
    """
    Filter cards by text and status, preserving order.

    Args:
        records: Snapshot records
        query: Case-insensitive substring of the name or the type
        status: ``"all"`` or a status value

    Returns:
        Matching records in their original order.
    """
    return [r for r in records if _matches_status(r, status) and _matches_query(r, query)]


def summarize(records: Sequence[CardRecord]) -> CollectionStats:
    """Total, counts and percentages in one pass over the view functions."""
    return CollectionStats(
        total=len(records),
        counts=count_by_status(records),
        percentages=percentage_distribution(records),
    )


def find_record(records: Sequence[CardRecord], record_id: str) -> CardRecord | None:
    """First record with the given id, or None."""
    return next((r for r in records if r.id == record_id), None)


def short_owner(owner: str, head: int = 6, tail: int = 4) -> str:
    """Shorten an address for display: ``0x1234...abcd``."""
    if len(owner) <= head + tail:
        return owner
    return f"{owner[:head]}...{owner[-tail:]}"
