"""Apply a reconciliation diff to a tabular store.

Order of operations:

1. Updates rewrite managed cells in place. Nothing moves.
2. Deletions run from the highest position down, so removing a row never
   shifts a position still waiting to be deleted.
3. Additions are appended after the last row, once no position-based
   operation is pending.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from calendar_ledger.config import SheetLayout
from calendar_ledger.models.record import Record
from calendar_ledger.reconcile.engine import Diff
from calendar_ledger.store.base import TabularStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeCounts:
    added: int = 0
    updated: int = 0
    deleted: int = 0


def managed_values(record: Record, layout: SheetLayout) -> list[Any]:
    """Record cells for the managed columns, in layout order."""
    return [record.cell(col) for col in layout.managed_columns]


def record_to_row(record: Record, layout: SheetLayout) -> list[Any]:
    """Full-width row for a new record; free-form cells start empty."""
    managed = set(layout.managed_columns)
    return [
        record.cell(col) if col in managed else None
        for col in range(1, layout.width + 1)
    ]


def apply_diff(store: TabularStore, diff: Diff, layout: SheetLayout) -> ChangeCounts:
    """Write a diff to the store.

    Args:
        store: Destination store
        diff: Changes computed by `compute_diff`
        layout: Sheet layout defining managed columns

    Returns:
        Counts of rows added, updated and deleted
    """
    if diff.is_empty:
        return ChangeCounts()

    for update in diff.updates:
        store.write(
            update.position,
            layout.managed_columns,
            managed_values(update.record, layout),
        )

    for position in sorted(diff.deletions, reverse=True):
        store.delete(position)

    if diff.additions:
        store.append([record_to_row(record, layout) for record in diff.additions])

    counts = ChangeCounts(
        added=len(diff.additions),
        updated=len(diff.updates),
        deleted=len(diff.deletions),
    )
    logger.info(
        f"Applied diff to {store.title}: "
        f"{counts.added} added, {counts.updated} updated, {counts.deleted} deleted"
    )
    return counts
