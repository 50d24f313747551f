"""Event models for calendar reconciliation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field, field_validator, model_validator


class RawEvent(BaseModel):
    """A timed event as reported by the event source.

    All-day and unscheduled events never reach this model; the source
    adapter filters them out.
    """

    id: str = Field(..., min_length=1, description="Event id in the source calendar")
    start: datetime = Field(..., description="Start instant")
    end: datetime = Field(..., description="End instant")
    title: str | None = Field(default=None, description="Event title")
    description: str | None = Field(default=None, description="Event description")
    location: str | None = Field(default=None, description="Free-text location")
    meeting_link: str | None = Field(
        default=None, description="Video meeting URL, if any"
    )

    @field_validator("start", "end")
    @classmethod
    def require_aware(cls, v: datetime) -> datetime:
        """Naive datetimes are ambiguous; treat them as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def check_order(self) -> RawEvent:
        if self.end < self.start:
            raise ValueError(f"Event {self.id} ends before it starts")
        return self

    @property
    def link(self) -> str:
        """Meeting link, falling back to the location text."""
        return self.meeting_link or self.location or ""


class QueryWindow(BaseModel):
    """An inclusive range of local calendar days."""

    start_date: date
    end_date: date
    timezone: str = "UTC"

    @model_validator(mode="after")
    def check_range(self) -> QueryWindow:
        if self.start_date > self.end_date:
            raise ValueError(
                f"Window start {self.start_date} is after end {self.end_date}"
            )
        return self

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def start(self) -> datetime:
        """Local midnight opening the first day."""
        return datetime.combine(self.start_date, time.min, tzinfo=self.tzinfo)

    @property
    def end(self) -> datetime:
        """Last millisecond of the final day (23:59:59.999)."""
        return datetime.combine(
            self.end_date, time(23, 59, 59, 999000), tzinfo=self.tzinfo
        )

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end


@dataclass(frozen=True)
class Segment:
    """Part of an event confined to a single local day."""

    event: RawEvent
    start: datetime
    end: datetime

    @property
    def date(self) -> date:
        return self.start.date()

    @property
    def duration(self) -> timedelta:
        """Elapsed time, measured in UTC so DST shifts count correctly."""
        return self.end.astimezone(timezone.utc) - self.start.astimezone(timezone.utc)

    @property
    def ends_at_midnight(self) -> bool:
        """True when the segment runs up to the following local midnight."""
        return self.end.date() > self.start.date()
