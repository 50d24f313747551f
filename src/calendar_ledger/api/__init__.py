"""FastAPI application and routes.

Exposes the ledger flows over HTTP so a spreadsheet menu or a scheduler can
trigger them.

## API Structure

- /health - Liveness check
- /api/ledger/refresh - Reconcile every stored date
- /api/ledger/add - Append events for a range of dates
"""

from calendar_ledger.api.app import create_app

__all__ = ["create_app"]
