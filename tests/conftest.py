"""Pytest fixtures for calendar ledger tests.

This module provides test fixtures that ensure:
1. No external API calls are made (Google Calendar, Google Sheets)
2. Ledgers live in in-memory openpyxl workbooks
3. Isolated test environment with controlled configuration
"""

import os
from datetime import date, datetime, timezone

import pytest

# Set test environment BEFORE importing application modules
os.environ.setdefault("TIMEZONE", "UTC")
os.environ.setdefault("DEBUG", "true")

from openpyxl import Workbook

from calendar_ledger.calendar.source import SourceUnavailableError
from calendar_ledger.config import SheetLayout
from calendar_ledger.models.event import QueryWindow, RawEvent
from calendar_ledger.models.record import Record, StoredRow
from calendar_ledger.reconcile.applier import record_to_row
from calendar_ledger.store.workbook import WorkbookStore, write_headers
from calendar_ledger.sync import LedgerSyncService


class FakeEventSource:
    """In-memory event source recording every query window."""

    def __init__(self, events: list[RawEvent] | None = None, error: Exception | None = None):
        self.events = list(events or [])
        self.error = error
        self.windows: list[QueryWindow] = []

    def query(self, window: QueryWindow) -> list[RawEvent]:
        self.windows.append(window)
        if self.error is not None:
            raise self.error
        return [
            event
            for event in sorted(self.events, key=lambda e: e.start)
            if event.end > window.start and event.start <= window.end
        ]


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_event(event_id: str, start: datetime, end: datetime, **kwargs) -> RawEvent:
    return RawEvent(id=event_id, start=start, end=end, **kwargs)


def make_row(position: int, record: Record, *free_form, layout: SheetLayout | None = None) -> StoredRow:
    """Stored row holding a record plus optional free-form cells."""
    values = record_to_row(record, layout or SheetLayout())
    return StoredRow(position=position, values=values + list(free_form))


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from calendar_ledger.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Domain Fixtures
# =============================================================================


@pytest.fixture
def layout() -> SheetLayout:
    """Default twelve-column layout with one header row."""
    return SheetLayout()


@pytest.fixture
def night_shift() -> RawEvent:
    """Overnight event crossing midnight UTC."""
    return make_event(
        "abc",
        utc(2025, 8, 8, 22, 0),
        utc(2025, 8, 9, 2, 0),
        title="Night Shift",
    )


@pytest.fixture
def standup() -> RawEvent:
    """Short same-day event with a meeting link."""
    return make_event(
        "standup1",
        utc(2025, 8, 8, 9, 0),
        utc(2025, 8, 8, 9, 15),
        title="Standup",
        description="Daily sync",
        location="Room 4",
        meeting_link="https://meet.google.com/abc-defg-hij",
    )


@pytest.fixture
def august_window() -> QueryWindow:
    return QueryWindow(start_date=date(2025, 8, 8), end_date=date(2025, 8, 9))


@pytest.fixture
def worksheet():
    """Empty ledger worksheet titled with a month label."""
    workbook = Workbook()
    ws = workbook.active
    ws.title = "2025-08"
    write_headers(ws)
    return ws


@pytest.fixture
def store(worksheet) -> WorkbookStore:
    return WorkbookStore(worksheet, header_rows=1)


@pytest.fixture
def source(night_shift: RawEvent, standup: RawEvent) -> FakeEventSource:
    return FakeEventSource([night_shift, standup])


@pytest.fixture
def failing_source() -> FakeEventSource:
    return FakeEventSource(error=SourceUnavailableError("backend down", source="fake"))


@pytest.fixture
def service(source: FakeEventSource, store: WorkbookStore, layout: SheetLayout) -> LedgerSyncService:
    return LedgerSyncService(source=source, store=store, layout=layout, timezone="UTC")
