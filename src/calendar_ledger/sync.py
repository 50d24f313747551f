"""Ledger synchronization service.

Runs the two user-facing flows against an event source and a tabular store.

## Refresh

1. Validate the worksheet title as a period label
2. Read every stored row and index it by identity key
3. Fetch events spanning the earliest to the latest stored date
4. Build fresh records, diff them against the stored rows
5. Apply updates, deletions and additions

Refresh only adds rows for dates the ledger already covers. Dates with no
stored rows yet are populated through the add flow.

## Add

1. Resolve the window (explicit dates, or the worksheet's period)
2. Fetch events for the window and build records
3. Append every record whose key is not stored yet

## Failures

Flows never raise for expected failures. They return a `SyncResult` whose
`failure` names the kind:

- **source_unavailable**: the fetch failed; nothing was written
- **invalid_context**: the worksheet title or requested window is unusable
- **empty_store**: no stored row carries an event id
- **no_candidate_dates**: stored rows exist but none has a valid id and date

Store errors raised while applying a diff propagate: the rows already
written stay written.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

from pydantic import ValidationError

from calendar_ledger.calendar.source import EventSource, SourceUnavailableError
from calendar_ledger.config import SheetLayout
from calendar_ledger.models.event import QueryWindow
from calendar_ledger.models.period import Period, parse_period_label
from calendar_ledger.models.record import Record
from calendar_ledger.reconcile.applier import ChangeCounts, apply_diff
from calendar_ledger.reconcile.engine import Diff, build_existing_map, compute_diff
from calendar_ledger.reconcile.formatter import DEFAULT_PLACEHOLDER_TITLE, build_records
from calendar_ledger.reconcile.keyer import normalize_cell, record_key, row_identity
from calendar_ledger.store.base import TabularStore

logger = logging.getLogger(__name__)


class FailureKind(str, Enum):
    """Why a flow stopped before changing the store."""

    SOURCE_UNAVAILABLE = "source_unavailable"
    INVALID_CONTEXT = "invalid_context"
    EMPTY_STORE = "empty_store"
    NO_CANDIDATE_DATES = "no_candidate_dates"


@dataclass(frozen=True)
class SyncFailure:
    kind: FailureKind
    message: str


@dataclass
class SyncResult:
    """Result of a refresh or add run."""

    sheet: str
    added: int = 0
    updated: int = 0
    deleted: int = 0
    dry_run: bool = False
    failure: SyncFailure | None = None
    synced_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def success(self) -> bool:
        return self.failure is None

    @property
    def message(self) -> str:
        if self.failure:
            return self.failure.message
        prefix = "Would apply" if self.dry_run else "Applied"
        return (
            f"{prefix} {self.added} added, {self.updated} updated, "
            f"{self.deleted} deleted on '{self.sheet}'"
        )

    @classmethod
    def failed(cls, sheet: str, kind: FailureKind, message: str) -> SyncResult:
        return cls(sheet=sheet, failure=SyncFailure(kind=kind, message=message))

    def record_counts(self, counts: ChangeCounts) -> None:
        self.added = counts.added
        self.updated = counts.updated
        self.deleted = counts.deleted


class LedgerSyncService:
    """Service reconciling one worksheet with one event source.

    Example:
        ```python
        service = LedgerSyncService(source, store, settings.sheet_layout, "Europe/Berlin")

        # Bring stored dates in line with the calendar
        result = service.refresh()

        # Pull in a new range of dates
        result = service.add_events(date(2025, 8, 1), date(2025, 8, 7))
        ```
    """

    def __init__(
        self,
        source: EventSource,
        store: TabularStore,
        layout: SheetLayout,
        timezone: str = "UTC",
        placeholder_title: str = DEFAULT_PLACEHOLDER_TITLE,
    ):
        """Initialize the sync service.

        Args:
            source: Event source to fetch from
            store: Worksheet holding the ledger
            layout: Column layout of the worksheet
            timezone: IANA timezone defining local days
            placeholder_title: Title written for untitled events
        """
        self.source = source
        self.store = store
        self.layout = layout
        self.timezone = timezone
        self.placeholder_title = placeholder_title

    def _period(self) -> Period | SyncFailure:
        try:
            return parse_period_label(self.store.title)
        except ValueError as e:
            return SyncFailure(FailureKind.INVALID_CONTEXT, str(e))

    def _fetch_records(self, window: QueryWindow) -> list[Record] | SyncFailure:
        try:
            events = self.source.query(window)
        except SourceUnavailableError as e:
            logger.exception(f"Event source unavailable: {e}")
            return SyncFailure(FailureKind.SOURCE_UNAVAILABLE, f"Could not fetch events: {e}")
        return build_records(events, window, self.placeholder_title)

    def refresh(self, dry_run: bool = False) -> SyncResult:
        """Reconcile every stored date with the event source.

        Args:
            dry_run: Compute the changes without writing them

        Returns:
            SyncResult with change counts or the failure that stopped the run
        """
        sheet = self.store.title
        period = self._period()
        if isinstance(period, SyncFailure):
            return SyncResult(sheet=sheet, failure=period)

        rows = self.store.read_rows()
        if not any(normalize_cell(row.cell(self.layout.id_column)).strip() for row in rows):
            return SyncResult.failed(
                sheet, FailureKind.EMPTY_STORE, f"No event rows found in '{sheet}'"
            )

        existing = build_existing_map(rows, self.layout)
        dates = sorted(existing.dates)
        if not dates:
            return SyncResult.failed(
                sheet,
                FailureKind.NO_CANDIDATE_DATES,
                f"No rows in '{sheet}' carry both an event id and a valid date",
            )

        window = QueryWindow(
            start_date=date.fromisoformat(dates[0]),
            end_date=date.fromisoformat(dates[-1]),
            timezone=self.timezone,
        )
        fresh = self._fetch_records(window)
        if isinstance(fresh, SyncFailure):
            return SyncResult(sheet=sheet, failure=fresh)

        diff = compute_diff(existing, fresh, self.layout)
        logger.info(
            f"Refreshing '{sheet}' ({len(dates)} dates, {len(existing)} rows): "
            f"{diff.summary()}"
        )
        return self._finish(sheet, diff, dry_run)

    def add_events(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        dry_run: bool = False,
    ) -> SyncResult:
        """Append events for a range of dates.

        Records already stored are left untouched; nothing is updated or
        deleted.

        Args:
            start_date: First day (defaults to the start of the sheet's period)
            end_date: Last day (defaults to the end of the sheet's period)
            dry_run: Count the rows without writing them
        """
        sheet = self.store.title
        if start_date is None or end_date is None:
            period = self._period()
            if isinstance(period, SyncFailure):
                return SyncResult(sheet=sheet, failure=period)
            start_date = start_date or period.start
            end_date = end_date or period.end

        try:
            window = QueryWindow(
                start_date=start_date, end_date=end_date, timezone=self.timezone
            )
        except ValidationError as e:
            return SyncResult.failed(
                sheet, FailureKind.INVALID_CONTEXT, f"Invalid date range: {e.errors()[0]['msg']}"
            )

        fresh = self._fetch_records(window)
        if isinstance(fresh, SyncFailure):
            return SyncResult(sheet=sheet, failure=fresh)

        stored_keys = set()
        for row in self.store.read_rows():
            identity = row_identity(row, self.layout)
            if identity is not None:
                stored_keys.add(identity[0])

        additions: list[Record] = []
        for record in fresh:
            key = record_key(record)
            if key not in stored_keys:
                stored_keys.add(key)
                additions.append(record)
        # sorted() is stable, so same-start records keep source order
        additions = sorted(additions, key=lambda r: (r.date, r.start_time))

        logger.info(
            f"Adding to '{sheet}' ({window.start_date} to {window.end_date}): "
            f"{len(additions)} new of {len(fresh)} fetched"
        )
        return self._finish(sheet, Diff(additions=additions), dry_run)

    def _finish(self, sheet: str, diff: Diff, dry_run: bool) -> SyncResult:
        result = SyncResult(sheet=sheet, dry_run=dry_run)
        if dry_run:
            result.record_counts(
                ChangeCounts(
                    added=len(diff.additions),
                    updated=len(diff.updates),
                    deleted=len(diff.deletions),
                )
            )
            return result
        result.record_counts(apply_diff(self.store, diff, self.layout))
        return result
