"""Identity keys and change-detection snapshots.

A row's identity is its event id plus its date; one multi-day event yields
several rows that share the id and differ by date. A snapshot joins the
managed cells of a row after normalizing each to its display string, so a
value read back from storage (a `datetime`, a float serial year, ...) compares
equal to the string freshly computed for it.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Iterable

from calendar_ledger.config import SheetLayout
from calendar_ledger.models.record import Record, StoredRow

SNAPSHOT_DELIMITER = "\x1f"  # ASCII unit separator

# Spreadsheets store a bare time of day as a datetime on their epoch.
_EPOCH_YEAR_CUTOFF = 1900


def identity_key(event_id: str, day: str) -> str:
    return f"{event_id}_{day}"


def normalize_cell(value: Any) -> str:
    """Canonical display string for a cell value."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        if value.year <= _EPOCH_YEAR_CUTOFF:
            return value.strftime("%H:%M")
        if value.time() == time.min:
            return value.date().isoformat()
        return value.strftime("%Y-%m-%d %H:%M")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, timedelta):
        minutes = int(value.total_seconds()) // 60
        return f"{minutes // 60:02d}:{minutes % 60:02d}"
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_row_date(value: Any) -> str | None:
    """Canonical date string for a date cell, or None when it is not a date."""
    text = normalize_cell(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError:
        return None


def snapshot(values: Iterable[Any]) -> str:
    return SNAPSHOT_DELIMITER.join(normalize_cell(v) for v in values)


def row_snapshot(row: StoredRow, layout: SheetLayout) -> str:
    return snapshot(row.cell(col) for col in layout.managed_columns)


def record_snapshot(record: Record, layout: SheetLayout) -> str:
    return snapshot(record.cell(col) for col in layout.managed_columns)


def record_key(record: Record) -> str:
    return identity_key(record.event_id, record.date)


def row_identity(row: StoredRow, layout: SheetLayout) -> tuple[str, str] | None:
    """Identity key and date of a stored row.

    Returns:
        ``(key, date)`` or None when the id is blank or the date is invalid
    """
    event_id = normalize_cell(row.cell(layout.id_column)).strip()
    if not event_id:
        return None
    day = parse_row_date(row.cell(layout.date_column))
    if day is None:
        return None
    return identity_key(event_id, day), day
