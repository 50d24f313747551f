"""Google Calendar event source.

## API Documentation

https://developers.google.com/calendar/api/v3/reference/events/list

## Event Selection

- Recurring events are expanded (`singleEvents=True`)
- Cancelled events are skipped
- All-day events (`start.date` instead of `start.dateTime`) are skipped

## Rate Limits

Google Calendar API has quotas:
- 1,000,000 queries per day (default)
- 500 queries per 100 seconds per user

A refresh fetches every stored date in one windowed listing to keep the
number of calls low.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from googleapiclient.errors import HttpError

from calendar_ledger.calendar.source import SourceUnavailableError
from calendar_ledger.google_api import execute
from calendar_ledger.models.event import QueryWindow, RawEvent

logger = logging.getLogger(__name__)


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _meeting_link(data: dict[str, Any]) -> str | None:
    """Hangouts/Meet link, or the first video entry point of a conference."""
    if data.get("hangoutLink"):
        return data["hangoutLink"]
    conference = data.get("conferenceData", {})
    for entry in conference.get("entryPoints", []):
        if entry.get("entryPointType") == "video" and entry.get("uri"):
            return entry["uri"]
    return None


@dataclass
class CalendarEvent:
    """A calendar event as returned by the API."""

    id: str
    calendar_id: str
    summary: str | None = None
    description: str | None = None
    location: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    is_all_day: bool = False
    status: str = "confirmed"  # confirmed, tentative, cancelled
    meeting_link: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any], calendar_id: str) -> CalendarEvent:
        """Create from Google Calendar API response."""
        start_data = data.get("start", {})
        end_data = data.get("end", {})

        return cls(
            id=data["id"],
            calendar_id=calendar_id,
            summary=data.get("summary"),
            description=data.get("description"),
            location=data.get("location"),
            start=_parse_datetime(start_data.get("dateTime")),
            end=_parse_datetime(end_data.get("dateTime")),
            is_all_day="date" in start_data,
            status=data.get("status", "confirmed"),
            meeting_link=_meeting_link(data),
        )

    @property
    def is_timed(self) -> bool:
        """True when the event has concrete start and end instants."""
        return not self.is_all_day and self.start is not None and self.end is not None

    def to_raw_event(self) -> RawEvent:
        return RawEvent(
            id=self.id,
            start=self.start,
            end=self.end,
            title=self.summary,
            description=self.description,
            location=self.location,
            meeting_link=self.meeting_link,
        )


class GoogleCalendarSource:
    """Event source reading one Google calendar.

    Example:
        ```python
        service = build_service("calendar", "v3", credentials)
        source = GoogleCalendarSource(service, "primary")
        events = source.query(QueryWindow(start_date=..., end_date=...))
        ```
    """

    name = "google_calendar"

    def __init__(self, service: Any, calendar_id: str = "primary", page_size: int = 250):
        """Initialize the source.

        Args:
            service: Calendar v3 service resource
            calendar_id: Calendar ID (use 'primary' for primary calendar)
            page_size: Events requested per page
        """
        self._service = service
        self.calendar_id = calendar_id
        self.page_size = page_size

    def list_events(self, time_min: datetime, time_max: datetime) -> list[CalendarEvent]:
        """List every event overlapping [time_min, time_max).

        Raises:
            HttpError: If the API call fails after retries
        """
        events: list[CalendarEvent] = []
        params: dict[str, Any] = {
            "calendarId": self.calendar_id,
            "timeMin": time_min.isoformat(),
            "timeMax": time_max.isoformat(),
            "maxResults": self.page_size,
            "singleEvents": True,  # Expand recurring events
            "orderBy": "startTime",
        }

        while True:
            result = execute(self._service.events().list(**params))
            for item in result.get("items", []):
                events.append(CalendarEvent.from_api(item, self.calendar_id))

            page_token = result.get("nextPageToken")
            if not page_token:
                break
            params["pageToken"] = page_token

        return events

    def query(self, window: QueryWindow) -> list[RawEvent]:
        """Timed, non-cancelled events overlapping the window.

        Raises:
            SourceUnavailableError: If the calendar cannot be read
        """
        try:
            events = self.list_events(window.start, window.end)
        except HttpError as e:
            raise SourceUnavailableError(
                f"Failed to list events for {self.calendar_id}: {e}",
                source=self.name,
                status_code=e.resp.status,
            ) from e

        raw_events = []
        for event in events:
            if event.status == "cancelled" or not event.is_timed:
                continue
            raw_events.append(event.to_raw_event())

        logger.info(
            f"Fetched {len(raw_events)} timed events from {self.calendar_id} "
            f"({window.start_date} to {window.end_date})"
        )
        return raw_events
