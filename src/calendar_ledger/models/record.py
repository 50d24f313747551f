"""Ledger record models.

A `Record` is the flat projection of one segment as it appears in the
worksheet. A `StoredRow` is what the store hands back: cell values plus the
row's current position.

## Column Layout

| # | Column      | Example            |
|---|-------------|--------------------|
| 1 | Date        | 2025-08-08         |
| 2 | Start       | 22:00              |
| 3 | End         | 24:00              |
| 4 | Title       | Night Shift        |
| 5 | Duration    | 02:00              |
| 6 | Description |                    |
| 7 | Week        | 32                 |
| 8 | Month       | August             |
| 9 | Year        | 2025               |
| 10| Weekday     | Friday             |
| 11| Link        | https://meet/...   |
| 12| Event ID    | abc                |

Columns past 12 are free-form (notes, billing codes, ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

RECORD_COLUMNS: tuple[str, ...] = (
    "date",
    "start_time",
    "end_time",
    "title",
    "duration",
    "description",
    "week",
    "month",
    "year",
    "weekday",
    "link",
    "event_id",
)

HEADER_LABELS: tuple[str, ...] = (
    "Date",
    "Start",
    "End",
    "Title",
    "Duration",
    "Description",
    "Week",
    "Month",
    "Year",
    "Weekday",
    "Link",
    "Event ID",
)


class Record(BaseModel):
    """One ledger row derived from a segment."""

    date: str = Field(..., description="Local date, yyyy-MM-dd")
    start_time: str = Field(..., description="Local start, HH:mm")
    end_time: str = Field(..., description="Local end, HH:mm (24:00 at midnight)")
    title: str
    duration: str = Field(..., description="Elapsed time, HH:MM")
    description: str = ""
    week: int = Field(..., ge=1, le=53, description="ISO week of year")
    month: str
    year: int
    weekday: str
    link: str = ""
    event_id: str

    def to_row(self) -> list[Any]:
        """Cell values in column order."""
        return [getattr(self, name) for name in RECORD_COLUMNS]

    def cell(self, column: int) -> Any:
        """Value of a 1-based column; columns past the record are empty."""
        if 1 <= column <= len(RECORD_COLUMNS):
            return getattr(self, RECORD_COLUMNS[column - 1])
        return None


@dataclass
class StoredRow:
    """A row read back from the store."""

    position: int
    values: list[Any] = field(default_factory=list)

    def cell(self, column: int) -> Any:
        if 1 <= column <= len(self.values):
            return self.values[column - 1]
        return None
