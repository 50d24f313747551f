"""Google Sheets store.

Uses the Sheets API v4:
- https://developers.google.com/sheets/api/reference/rest

Values are read formatted and written RAW, so what the engine writes is the
exact text it reads back on the next run.
"""

from __future__ import annotations

import logging
from itertools import groupby
from typing import Any, Sequence

from googleapiclient.errors import HttpError
from openpyxl.utils import get_column_letter

from calendar_ledger.google_api import execute
from calendar_ledger.models.record import StoredRow
from calendar_ledger.store.base import StoreError, TabularStore

logger = logging.getLogger(__name__)


def column_runs(columns: Sequence[int], values: Sequence[Any]) -> list[tuple[int, list[Any]]]:
    """Group cells into runs of consecutive columns.

    Returns:
        List of (first column, values) per run
    """
    pairs = sorted(zip(columns, values), key=lambda p: p[0])
    runs: list[tuple[int, list[Any]]] = []
    for _, group in groupby(enumerate(pairs), key=lambda item: item[1][0] - item[0]):
        cells = [pair for _, pair in group]
        runs.append((cells[0][0], [value for _, value in cells]))
    return runs


def _cell_value(value: Any) -> Any:
    return "" if value is None else value


class GoogleSheetsStore(TabularStore):
    """One worksheet (tab) of a Google spreadsheet.

    Example:
        ```python
        service = build_service("sheets", "v4", credentials)
        store = GoogleSheetsStore(service, spreadsheet_id, "2025-08")
        rows = store.read_rows()
        ```
    """

    name = "google_sheets"

    def __init__(
        self,
        service: Any,
        spreadsheet_id: str,
        sheet_name: str,
        header_rows: int = 1,
        read_width: int = 26,
    ):
        """Initialize the store.

        Args:
            service: Sheets v4 service resource
            spreadsheet_id: Spreadsheet id from its URL
            sheet_name: Worksheet title
            header_rows: Reserved header rows
            read_width: Columns fetched per row by `read_rows`
        """
        super().__init__(header_rows=header_rows)
        self._service = service
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self.read_width = read_width
        self._sheet_id: int | None = None

    @property
    def title(self) -> str:
        return self.sheet_name

    def _a1(self, cell_range: str) -> str:
        escaped = self.sheet_name.replace("'", "''")
        return f"'{escaped}'!{cell_range}"

    def _run(self, request: Any, action: str, position: int | None = None) -> dict[str, Any]:
        try:
            return execute(request)
        except HttpError as e:
            raise StoreError(
                f"Sheets API {action} failed: {e}",
                store=self.name,
                position=position,
            ) from e

    def read_rows(self) -> list[StoredRow]:
        first = self.header_rows + 1
        last_col = get_column_letter(self.read_width)
        result = self._run(
            self._service.spreadsheets()
            .values()
            .get(
                spreadsheetId=self.spreadsheet_id,
                range=self._a1(f"A{first}:{last_col}"),
                valueRenderOption="FORMATTED_VALUE",
            ),
            "read",
        )

        rows: list[StoredRow] = []
        values = result.get("values", [])
        for position, cells in enumerate(values, start=first):
            if not any(str(cell).strip() for cell in cells):
                continue
            rows.append(StoredRow(position=position, values=list(cells)))
        return rows

    def write(self, position: int, columns: Sequence[int], values: Sequence[Any]) -> None:
        if position <= self.header_rows:
            raise StoreError(
                f"Row {position} is a header row", store=self.name, position=position
            )
        self._check_lengths(columns, values)

        data = []
        for first_col, run in column_runs(columns, values):
            start = get_column_letter(first_col)
            end = get_column_letter(first_col + len(run) - 1)
            data.append(
                {
                    "range": self._a1(f"{start}{position}:{end}{position}"),
                    "values": [[_cell_value(v) for v in run]],
                }
            )

        self._run(
            self._service.spreadsheets()
            .values()
            .batchUpdate(
                spreadsheetId=self.spreadsheet_id,
                body={"valueInputOption": "RAW", "data": data},
            ),
            "write",
            position,
        )

    def append(self, rows: Sequence[Sequence[Any]]) -> None:
        if not rows:
            return
        # The API appends below the table found at the range; anchor it on the
        # last data row so blank rows higher up cannot split the table.
        stored = self.read_rows()
        anchor = stored[-1].position if stored else max(self.header_rows, 1)
        self._run(
            self._service.spreadsheets()
            .values()
            .append(
                spreadsheetId=self.spreadsheet_id,
                range=self._a1(f"A{anchor}"),
                valueInputOption="RAW",
                insertDataOption="INSERT_ROWS",
                body={"values": [[_cell_value(v) for v in row] for row in rows]},
            ),
            "append",
        )

    def delete(self, position: int) -> None:
        if position <= self.header_rows:
            raise StoreError(
                f"Row {position} is a header row", store=self.name, position=position
            )
        request = {
            "deleteDimension": {
                "range": {
                    "sheetId": self._get_sheet_id(),
                    "dimension": "ROWS",
                    "startIndex": position - 1,
                    "endIndex": position,
                }
            }
        }
        self._run(
            self._service.spreadsheets().batchUpdate(
                spreadsheetId=self.spreadsheet_id,
                body={"requests": [request]},
            ),
            "delete",
            position,
        )
        logger.debug(f"Deleted row {position} from {self.sheet_name}")

    def _get_sheet_id(self) -> int:
        """Numeric id of the worksheet, needed by structural requests."""
        if self._sheet_id is None:
            result = self._run(
                self._service.spreadsheets().get(
                    spreadsheetId=self.spreadsheet_id,
                    fields="sheets.properties",
                ),
                "metadata",
            )
            for sheet in result.get("sheets", []):
                props = sheet.get("properties", {})
                if props.get("title") == self.sheet_name:
                    self._sheet_id = props["sheetId"]
                    break
            else:
                raise StoreError(
                    f"Worksheet '{self.sheet_name}' not found", store=self.name
                )
        return self._sheet_id
