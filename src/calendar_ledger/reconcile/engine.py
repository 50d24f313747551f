"""Reconciliation engine.

Computes the minimal set of changes that brings the stored ledger in line
with a fresh fetch from the event source.

## Rules

For each fresh record, in fetch order:

1. Compute its identity key and snapshot.
2. Key already stored with a different snapshot: **update** that row.
   Same snapshot: nothing to do.
3. Key not stored: **add** it, but only when its date already has at least
   one stored row. A refresh fetch spans every date between the earliest and
   latest stored date, and dates outside the stored set are not under
   reconciliation.
4. Every stored key the fetch did not report is **deleted**.

The engine is pure; it never touches the store. `apply_diff` in
`calendar_ledger.reconcile.applier` performs the writes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from calendar_ledger.config import SheetLayout
from calendar_ledger.models.record import Record, StoredRow
from calendar_ledger.reconcile.keyer import (
    record_key,
    record_snapshot,
    row_identity,
    row_snapshot,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExistingEntry:
    """What the engine needs to know about one stored row."""

    position: int
    snapshot: str
    date: str


@dataclass(frozen=True)
class RowUpdate:
    """Managed cells to rewrite at a position."""

    position: int
    record: Record


@dataclass
class Diff:
    """Changes needed to reconcile the store."""

    additions: list[Record] = field(default_factory=list)
    updates: list[RowUpdate] = field(default_factory=list)
    deletions: list[int] = field(default_factory=list)  # descending

    @property
    def is_empty(self) -> bool:
        return not (self.additions or self.updates or self.deletions)

    def summary(self) -> str:
        return (
            f"{len(self.additions)} to add, "
            f"{len(self.updates)} to update, "
            f"{len(self.deletions)} to delete"
        )


@dataclass
class ExistingMap:
    """Stored rows indexed by identity key."""

    entries: dict[str, ExistingEntry] = field(default_factory=dict)
    duplicates: list[int] = field(default_factory=list)

    @property
    def dates(self) -> set[str]:
        return {entry.date for entry in self.entries.values()}

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, key: str) -> ExistingEntry | None:
        return self.entries.get(key)


def build_existing_map(rows: list[StoredRow], layout: SheetLayout) -> ExistingMap:
    """Index stored rows by identity key.

    Rows without an id or with an unparseable date are not under
    reconciliation and are skipped. When a key repeats, the lowest row keeps
    it and the others are recorded as duplicates to delete.
    """
    existing = ExistingMap()
    for row in sorted(rows, key=lambda r: r.position):
        identity = row_identity(row, layout)
        if identity is None:
            continue
        key, day = identity
        if key in existing.entries:
            logger.warning(f"Duplicate key {key} at row {row.position}")
            existing.duplicates.append(row.position)
            continue
        existing.entries[key] = ExistingEntry(
            position=row.position,
            snapshot=row_snapshot(row, layout),
            date=day,
        )
    return existing


def compute_diff(
    existing: ExistingMap,
    fresh: list[Record],
    layout: SheetLayout,
) -> Diff:
    """Diff stored rows against freshly fetched records.

    Args:
        existing: Stored rows indexed by key
        fresh: Records built from a fetch spanning every stored date
        layout: Sheet layout defining managed columns

    Returns:
        Diff with updates and additions in fetch order and deletions
        sorted by descending position
    """
    diff = Diff()
    candidate_dates = existing.dates
    seen: set[str] = set()

    for record in fresh:
        key = record_key(record)
        if key in seen:
            continue
        seen.add(key)

        entry = existing.get(key)
        if entry is not None:
            if entry.snapshot != record_snapshot(record, layout):
                diff.updates.append(RowUpdate(position=entry.position, record=record))
        elif record.date in candidate_dates:
            diff.additions.append(record)

    stale = [
        entry.position
        for key, entry in existing.entries.items()
        if key not in seen
    ]
    diff.deletions = sorted(stale + existing.duplicates, reverse=True)

    logger.debug(f"Computed diff: {diff.summary()}")
    return diff
