"""Map segments to ledger records."""

from __future__ import annotations

from datetime import timedelta

from calendar_ledger.models.event import QueryWindow, RawEvent, Segment
from calendar_ledger.models.period import MONTH_NAMES, WEEKDAY_NAMES
from calendar_ledger.models.record import Record
from calendar_ledger.reconcile.segmenter import segment_events

DEFAULT_PLACEHOLDER_TITLE = "(No title)"


def format_duration(span: timedelta) -> str:
    """Render a span as HH:MM, flooring to whole minutes."""
    total_ms = int(span.total_seconds() * 1000)
    hours = total_ms // 3_600_000
    minutes = (total_ms % 3_600_000) // 60_000
    return f"{hours:02d}:{minutes:02d}"


def format_segment(
    segment: Segment,
    placeholder_title: str = DEFAULT_PLACEHOLDER_TITLE,
) -> Record:
    """Project a segment onto the ledger's columns."""
    event = segment.event
    day = segment.date
    end_time = "24:00" if segment.ends_at_midnight else segment.end.strftime("%H:%M")
    title = event.title if event.title and event.title.strip() else placeholder_title

    return Record(
        date=day.isoformat(),
        start_time=segment.start.strftime("%H:%M"),
        end_time=end_time,
        title=title,
        duration=format_duration(segment.duration),
        description=event.description or "",
        week=day.isocalendar()[1],
        month=MONTH_NAMES[day.month - 1],
        year=day.year,
        weekday=WEEKDAY_NAMES[day.weekday()],
        link=event.link,
        event_id=event.id,
    )


def build_records(
    events: list[RawEvent],
    window: QueryWindow,
    placeholder_title: str = DEFAULT_PLACEHOLDER_TITLE,
) -> list[Record]:
    """Segment and format a whole fetch."""
    return [
        format_segment(segment, placeholder_title)
        for segment in segment_events(events, window)
    ]
