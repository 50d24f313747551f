"""Period labels carried by worksheet titles.

Each ledger worksheet is named after the period it logs. Supported forms:

- ``2025-08``: a calendar month
- ``August 2025``: a calendar month, spelled out
- ``2025-W32``: an ISO week
- ``2025``: a calendar year
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, timedelta

MONTH_NAMES: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

WEEKDAY_NAMES: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")
_WEEK_RE = re.compile(r"^(\d{4})-W(\d{1,2})$", re.IGNORECASE)
_YEAR_RE = re.compile(r"^(\d{4})$")
_NAMED_MONTH_RE = re.compile(r"^([A-Za-z]+)\s+(\d{4})$")


@dataclass(frozen=True)
class Period:
    """Inclusive date range named by a label."""

    label: str
    start: date
    end: date


def _month_period(label: str, year: int, month: int) -> Period:
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month in period label '{label}'")
    last_day = calendar.monthrange(year, month)[1]
    return Period(label, date(year, month, 1), date(year, month, last_day))


def parse_period_label(label: str) -> Period:
    """Parse a worksheet title into the period it covers.

    Raises:
        ValueError: If the label matches none of the supported forms
    """
    text = (label or "").strip()

    match = _MONTH_RE.match(text)
    if match:
        return _month_period(label, int(match.group(1)), int(match.group(2)))

    match = _NAMED_MONTH_RE.match(text)
    if match:
        name = match.group(1).capitalize()
        if name not in MONTH_NAMES:
            raise ValueError(f"Unknown month '{match.group(1)}' in period label '{label}'")
        return _month_period(label, int(match.group(2)), MONTH_NAMES.index(name) + 1)

    match = _WEEK_RE.match(text)
    if match:
        year, week = int(match.group(1)), int(match.group(2))
        try:
            monday = date.fromisocalendar(year, week, 1)
        except ValueError as e:
            raise ValueError(f"Invalid ISO week in period label '{label}'") from e
        return Period(label, monday, monday + timedelta(days=6))

    match = _YEAR_RE.match(text)
    if match:
        year = int(match.group(1))
        return Period(label, date(year, 1, 1), date(year, 12, 31))

    raise ValueError(f"Unrecognized period label '{label}'")
