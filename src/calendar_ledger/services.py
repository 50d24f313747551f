"""Construct sources, stores and the sync service from settings."""

from __future__ import annotations

from calendar_ledger.calendar.google_calendar import GoogleCalendarSource
from calendar_ledger.calendar.source import EventSource
from calendar_ledger.config import Settings
from calendar_ledger.google_api import build_service, load_credentials
from calendar_ledger.store.base import TabularStore
from calendar_ledger.store.google_sheets import GoogleSheetsStore
from calendar_ledger.store.workbook import WorkbookStore
from calendar_ledger.sync import LedgerSyncService, SyncResult


def create_store(
    settings: Settings,
    workbook_path: str | None = None,
    sheet_name: str | None = None,
) -> TabularStore:
    """Open the ledger store.

    A workbook path (argument or setting) selects the local workbook backend;
    otherwise the Google Sheets settings are used.

    Raises:
        ValueError: If neither backend is configured
    """
    sheet = sheet_name or settings.sheet_name
    path = workbook_path or settings.workbook_path
    if path:
        if not sheet:
            raise ValueError("A sheet name is required for the workbook backend")
        return WorkbookStore.open(path, sheet, header_rows=settings.header_rows)

    if not (settings.spreadsheet_id and sheet):
        raise ValueError(
            "No store configured: set WORKBOOK_PATH or SPREADSHEET_ID and SHEET_NAME"
        )
    credentials = load_credentials(settings.google_token_file, settings.google_scopes)
    return GoogleSheetsStore(
        build_service("sheets", "v4", credentials),
        settings.spreadsheet_id,
        sheet,
        header_rows=settings.header_rows,
        read_width=max(26, settings.sheet_layout.width),
    )


def create_source(settings: Settings) -> EventSource:
    credentials = load_credentials(settings.google_token_file, settings.google_scopes)
    return GoogleCalendarSource(
        build_service("calendar", "v3", credentials),
        calendar_id=settings.google_calendar_id,
    )


def create_sync_service(
    settings: Settings,
    source: EventSource | None = None,
    store: TabularStore | None = None,
) -> LedgerSyncService:
    return LedgerSyncService(
        source=source or create_source(settings),
        store=store or create_store(settings),
        layout=settings.sheet_layout,
        timezone=settings.timezone,
        placeholder_title=settings.placeholder_title,
    )


def persist(service: LedgerSyncService, result: SyncResult) -> None:
    """Save file-backed stores after a run that changed them."""
    if not isinstance(service.store, WorkbookStore) or service.store.path is None:
        return
    if result.success and not result.dry_run and (result.added or result.updated or result.deleted):
        service.store.save()
