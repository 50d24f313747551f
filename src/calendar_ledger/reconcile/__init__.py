"""Reconciliation core.

Turns source events into ledger records and diffs them against the stored
ledger.

## Pipeline

1. `segment_event`: split events at local midnight, clipped to the window
2. `format_segment`: project each segment onto the ledger's columns
3. `record_key` / `record_snapshot`: identity and change detection
4. `compute_diff`: additions, updates, deletions
5. `apply_diff`: minimal writes, free-form columns untouched
"""

from calendar_ledger.reconcile.applier import ChangeCounts, apply_diff
from calendar_ledger.reconcile.engine import (
    Diff,
    ExistingEntry,
    ExistingMap,
    RowUpdate,
    build_existing_map,
    compute_diff,
)
from calendar_ledger.reconcile.formatter import build_records, format_segment
from calendar_ledger.reconcile.keyer import (
    identity_key,
    normalize_cell,
    record_key,
    record_snapshot,
    row_identity,
    row_snapshot,
)
from calendar_ledger.reconcile.segmenter import segment_event, segment_events

__all__ = [
    "segment_event",
    "segment_events",
    "format_segment",
    "build_records",
    "identity_key",
    "normalize_cell",
    "record_key",
    "record_snapshot",
    "row_identity",
    "row_snapshot",
    "Diff",
    "ExistingEntry",
    "ExistingMap",
    "RowUpdate",
    "build_existing_map",
    "compute_diff",
    "ChangeCounts",
    "apply_diff",
]
