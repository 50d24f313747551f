"""Event source interface."""

from __future__ import annotations

from typing import Protocol

from calendar_ledger.models.event import QueryWindow, RawEvent


class SourceUnavailableError(Exception):
    """Raised when events cannot be fetched from the source."""

    def __init__(
        self,
        message: str,
        source: str,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.source = source
        self.status_code = status_code


class EventSource(Protocol):
    """Anything that can list timed events for a window."""

    def query(self, window: QueryWindow) -> list[RawEvent]:
        """Return timed events overlapping the window, ordered by start.

        Raises:
            SourceUnavailableError: If the fetch fails
        """
        ...
