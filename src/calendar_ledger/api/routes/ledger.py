"""Ledger routes.

Trigger refresh and add runs and report their outcome.
"""

from __future__ import annotations

from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from calendar_ledger.api.dependencies import get_sync_service
from calendar_ledger.services import persist
from calendar_ledger.sync import FailureKind, LedgerSyncService, SyncResult

router = APIRouter()

FAILURE_STATUS: dict[FailureKind, int] = {
    FailureKind.SOURCE_UNAVAILABLE: status.HTTP_502_BAD_GATEWAY,
    FailureKind.INVALID_CONTEXT: status.HTTP_400_BAD_REQUEST,
    FailureKind.EMPTY_STORE: status.HTTP_409_CONFLICT,
    FailureKind.NO_CANDIDATE_DATES: status.HTTP_409_CONFLICT,
}


class RefreshRequest(BaseModel):
    """Refresh request."""

    dry_run: bool = False


class AddEventsRequest(BaseModel):
    """Add events request. Omitted dates default to the sheet's period."""

    start_date: date | None = None
    end_date: date | None = None
    dry_run: bool = False


class SyncResultResponse(BaseModel):
    """Sync result response."""

    sheet: str
    added: int
    updated: int
    deleted: int
    dry_run: bool
    message: str
    synced_at: datetime


def _respond(service: LedgerSyncService, result: SyncResult) -> SyncResultResponse:
    persist(service, result)
    if result.failure is not None:
        raise HTTPException(
            status_code=FAILURE_STATUS[result.failure.kind],
            detail={"kind": result.failure.kind.value, "message": result.failure.message},
        )
    return SyncResultResponse(
        sheet=result.sheet,
        added=result.added,
        updated=result.updated,
        deleted=result.deleted,
        dry_run=result.dry_run,
        message=result.message,
        synced_at=result.synced_at,
    )


@router.post("/refresh", response_model=SyncResultResponse)
def refresh_ledger(
    request: RefreshRequest | None = None,
    service: LedgerSyncService = Depends(get_sync_service),
) -> SyncResultResponse:
    """Reconcile every date already present in the ledger."""
    request = request or RefreshRequest()
    return _respond(service, service.refresh(dry_run=request.dry_run))


@router.post("/add", response_model=SyncResultResponse)
def add_events(
    request: AddEventsRequest | None = None,
    service: LedgerSyncService = Depends(get_sync_service),
) -> SyncResultResponse:
    """Append events for a range of dates."""
    request = request or AddEventsRequest()
    result = service.add_events(
        request.start_date, request.end_date, dry_run=request.dry_run
    )
    return _respond(service, result)
