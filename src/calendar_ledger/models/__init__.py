"""Domain models for calendar ledger reconciliation."""

from calendar_ledger.models.event import QueryWindow, RawEvent, Segment
from calendar_ledger.models.period import Period, parse_period_label
from calendar_ledger.models.record import (
    HEADER_LABELS,
    RECORD_COLUMNS,
    Record,
    StoredRow,
)

__all__ = [
    # Event
    "RawEvent",
    "QueryWindow",
    "Segment",
    # Record
    "Record",
    "StoredRow",
    "RECORD_COLUMNS",
    "HEADER_LABELS",
    # Period
    "Period",
    "parse_period_label",
]
