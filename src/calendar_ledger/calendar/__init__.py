"""Calendar integration module.

Provides the event source the ledger is reconciled against.

## Google Calendar API

Uses the Google Calendar API v3:
- https://developers.google.com/calendar/api/v3/reference

Only timed events are reported; all-day and cancelled events never reach
the reconciliation engine.
"""

from calendar_ledger.calendar.google_calendar import (
    CalendarEvent,
    GoogleCalendarSource,
)
from calendar_ledger.calendar.source import EventSource, SourceUnavailableError

__all__ = [
    "CalendarEvent",
    "GoogleCalendarSource",
    "EventSource",
    "SourceUnavailableError",
]
