"""FastAPI dependencies.

Usage in routes:
```python
from fastapi import Depends
from calendar_ledger.api.dependencies import get_sync_service

@router.post("/refresh")
def refresh(service: LedgerSyncService = Depends(get_sync_service)):
    ...
```
"""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, status

from calendar_ledger.config import Settings, get_settings
from calendar_ledger.services import create_sync_service
from calendar_ledger.store.base import StoreError
from calendar_ledger.sync import LedgerSyncService

logger = logging.getLogger(__name__)


def get_sync_service(settings: Settings = Depends(get_settings)) -> LedgerSyncService:
    """Build the sync service for the configured store and calendar.

    Raises:
        HTTPException: 503 if no store or credentials are configured
    """
    try:
        return create_sync_service(settings)
    except (ValueError, FileNotFoundError, StoreError) as e:
        logger.warning(f"Ledger not configured: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Ledger not configured: {e}",
        )
