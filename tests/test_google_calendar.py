"""Tests for the Google Calendar event source."""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from googleapiclient.errors import HttpError

from calendar_ledger.calendar.google_calendar import CalendarEvent, GoogleCalendarSource
from calendar_ledger.calendar.source import SourceUnavailableError
from calendar_ledger.models.event import QueryWindow


def timed_item(event_id: str, start: str, end: str, **extra) -> dict:
    return {
        "id": event_id,
        "status": "confirmed",
        "start": {"dateTime": start},
        "end": {"dateTime": end},
        **extra,
    }


@pytest.fixture
def service():
    return MagicMock()


@pytest.fixture
def events_list(service):
    """The events().list() request; set `.execute.side_effect` per test."""
    return service.events.return_value.list


@pytest.fixture
def window():
    return QueryWindow(start_date=date(2025, 8, 8), end_date=date(2025, 8, 9))


class TestCalendarEvent:
    """Tests for parsing API items."""

    def test_timed_event(self):
        event = CalendarEvent.from_api(
            timed_item(
                "abc",
                "2025-08-08T22:00:00Z",
                "2025-08-09T02:00:00Z",
                summary="Night Shift",
                location="Depot",
            ),
            "primary",
        )

        assert event.start == datetime(2025, 8, 8, 22, 0, tzinfo=timezone.utc)
        assert event.is_timed
        raw = event.to_raw_event()
        assert raw.title == "Night Shift"
        assert raw.link == "Depot"

    def test_offset_preserved(self):
        event = CalendarEvent.from_api(
            timed_item("x", "2025-08-08T09:00:00+02:00", "2025-08-08T10:00:00+02:00"),
            "primary",
        )
        assert event.start.utcoffset() == timedelta(hours=2)

    def test_all_day_event(self):
        event = CalendarEvent.from_api(
            {"id": "holiday", "start": {"date": "2025-08-08"}, "end": {"date": "2025-08-09"}},
            "primary",
        )

        assert event.is_all_day
        assert not event.is_timed
        assert event.start is None

    def test_hangout_link(self):
        event = CalendarEvent.from_api(
            timed_item(
                "m",
                "2025-08-08T09:00:00Z",
                "2025-08-08T09:15:00Z",
                hangoutLink="https://meet.google.com/abc-defg-hij",
                location="Room 4",
            ),
            "primary",
        )
        assert event.to_raw_event().link == "https://meet.google.com/abc-defg-hij"

    def test_conference_video_entry_point(self):
        event = CalendarEvent.from_api(
            timed_item(
                "z",
                "2025-08-08T09:00:00Z",
                "2025-08-08T09:15:00Z",
                conferenceData={
                    "entryPoints": [
                        {"entryPointType": "phone", "uri": "tel:+1-555-0100"},
                        {"entryPointType": "video", "uri": "https://zoom.us/j/123"},
                    ]
                },
            ),
            "primary",
        )
        assert event.meeting_link == "https://zoom.us/j/123"


class TestQuery:
    """Tests for GoogleCalendarSource.query."""

    def test_follows_pages(self, service, events_list, window):
        events_list.return_value.execute.side_effect = [
            {
                "items": [timed_item("a", "2025-08-08T09:00:00Z", "2025-08-08T10:00:00Z")],
                "nextPageToken": "page-2",
            },
            {"items": [timed_item("b", "2025-08-09T09:00:00Z", "2025-08-09T10:00:00Z")]},
        ]
        source = GoogleCalendarSource(service, "team@example.com")

        events = source.query(window)

        assert [e.id for e in events] == ["a", "b"]
        first, second = events_list.call_args_list
        assert first.kwargs["calendarId"] == "team@example.com"
        assert first.kwargs["singleEvents"] is True
        assert first.kwargs["orderBy"] == "startTime"
        assert first.kwargs["timeMin"] == "2025-08-08T00:00:00+00:00"
        assert "pageToken" not in first.kwargs
        assert second.kwargs["pageToken"] == "page-2"

    def test_skips_cancelled_and_all_day(self, service, events_list, window):
        events_list.return_value.execute.return_value = {
            "items": [
                timed_item("keep", "2025-08-08T09:00:00Z", "2025-08-08T10:00:00Z"),
                {**timed_item("gone", "2025-08-08T11:00:00Z", "2025-08-08T12:00:00Z"),
                 "status": "cancelled"},
                {"id": "allday", "start": {"date": "2025-08-08"}, "end": {"date": "2025-08-09"}},
            ]
        }

        events = GoogleCalendarSource(service).query(window)

        assert [e.id for e in events] == ["keep"]

    def test_http_error_becomes_source_unavailable(self, service, events_list, window):
        events_list.return_value.execute.side_effect = HttpError(
            MagicMock(status=404, reason="Not Found"), b"{}"
        )

        with pytest.raises(SourceUnavailableError) as exc_info:
            GoogleCalendarSource(service).query(window)

        assert exc_info.value.status_code == 404
        assert exc_info.value.source == "google_calendar"
