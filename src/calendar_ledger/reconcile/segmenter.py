"""Split events into day-confined segments.

An event crossing local midnight becomes one segment per local day. Segments
are clipped to the query window at day granularity: a segment is kept only
when its start falls inside the window, and the window always spans whole
days, so the kept segments cover exactly the event's overlap with the window.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta

from calendar_ledger.models.event import QueryWindow, RawEvent, Segment


def next_local_midnight(instant: datetime) -> datetime:
    """Midnight opening the local day after ``instant``."""
    following = instant.date() + timedelta(days=1)
    return datetime.combine(following, time.min, tzinfo=instant.tzinfo)


def segment_event(event: RawEvent, window: QueryWindow) -> list[Segment]:
    """Split one event into segments, ordered by start.

    Args:
        event: Source event with concrete start and end
        window: Whole-day query window

    Returns:
        Segments confined to single local days and starting inside the window
    """
    tz = window.tzinfo
    event_end = event.end.astimezone(tz)
    cursor = event.start.astimezone(tz)

    segments: list[Segment] = []
    while cursor < event_end:
        midnight = next_local_midnight(cursor)
        segment_end = min(midnight, event_end)
        if cursor < segment_end and window.contains(cursor):
            segments.append(Segment(event=event, start=cursor, end=segment_end))
        cursor = midnight

    return segments


def segment_events(events: list[RawEvent], window: QueryWindow) -> list[Segment]:
    """Segment a whole fetch, preserving source order."""
    segments: list[Segment] = []
    for event in events:
        segments.extend(segment_event(event, window))
    return segments
