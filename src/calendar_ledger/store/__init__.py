"""Tabular stores holding the ledger.

## Supported Backends

- **workbook**: a worksheet in a local .xlsx file (openpyxl)
- **google_sheets**: a tab of a Google spreadsheet (Sheets API v4)
"""

from calendar_ledger.store.base import StoreError, TabularStore
from calendar_ledger.store.google_sheets import GoogleSheetsStore
from calendar_ledger.store.workbook import WorkbookStore

__all__ = [
    "TabularStore",
    "StoreError",
    "WorkbookStore",
    "GoogleSheetsStore",
]
