"""Excel workbook store backed by openpyxl."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font
from openpyxl.worksheet.worksheet import Worksheet

from calendar_ledger.models.record import HEADER_LABELS, StoredRow
from calendar_ledger.store.base import StoreError, TabularStore

logger = logging.getLogger(__name__)


def _is_blank(values: Sequence[Any]) -> bool:
    return all(v is None or (isinstance(v, str) and not v.strip()) for v in values)


class WorkbookStore(TabularStore):
    """One worksheet of an .xlsx workbook.

    Example:
        ```python
        store = WorkbookStore.open("ledger.xlsx", "2025-08")
        rows = store.read_rows()
        store.append([[...]])
        store.save()
        ```
    """

    name = "workbook"

    def __init__(
        self,
        worksheet: Worksheet,
        header_rows: int = 1,
        path: str | Path | None = None,
    ):
        super().__init__(header_rows=header_rows)
        self.worksheet = worksheet
        self.path = Path(path) if path else None

    @classmethod
    def open(
        cls,
        path: str | Path,
        sheet_name: str,
        header_rows: int = 1,
        create: bool = False,
    ) -> WorkbookStore:
        """Open a worksheet from a workbook file.

        Args:
            path: Workbook file path
            sheet_name: Worksheet title
            header_rows: Reserved header rows
            create: Create the workbook or worksheet when missing

        Raises:
            StoreError: If the file or sheet is missing and create is False
        """
        path = Path(path)
        if path.exists():
            workbook = load_workbook(path)
        elif create:
            workbook = Workbook()
            workbook.active.title = sheet_name
        else:
            raise StoreError(f"Workbook not found: {path}", store=cls.name)

        if sheet_name not in workbook.sheetnames:
            if not create:
                raise StoreError(
                    f"Worksheet '{sheet_name}' not found in {path}", store=cls.name
                )
            workbook.create_sheet(sheet_name)

        worksheet = workbook[sheet_name]
        if create and worksheet.max_row == 1 and worksheet.cell(row=1, column=1).value is None:
            write_headers(worksheet)
        return cls(worksheet, header_rows=header_rows, path=path)

    @property
    def title(self) -> str:
        return self.worksheet.title

    @property
    def last_row(self) -> int:
        return self.worksheet.max_row

    def read_rows(self) -> list[StoredRow]:
        rows: list[StoredRow] = []
        start = self.header_rows + 1
        for position, values in enumerate(
            self.worksheet.iter_rows(min_row=start, values_only=True), start=start
        ):
            values = list(values)
            if _is_blank(values):
                continue
            rows.append(StoredRow(position=position, values=values))
        return rows

    def write(self, position: int, columns: Sequence[int], values: Sequence[Any]) -> None:
        self._check_position(position, self.last_row)
        self._check_lengths(columns, values)
        for column, value in zip(columns, values):
            self.worksheet.cell(row=position, column=column, value=value)

    def append(self, rows: Sequence[Sequence[Any]]) -> None:
        # Worksheet.append skips past trailing formatting; anchor on real data
        next_row = max(self._last_data_row(), self.header_rows) + 1
        for offset, values in enumerate(rows):
            for col_idx, value in enumerate(values, start=1):
                self.worksheet.cell(row=next_row + offset, column=col_idx, value=value)

    def delete(self, position: int) -> None:
        self._check_position(position, self.last_row)
        self.worksheet.delete_rows(position)

    def save(self, path: str | Path | None = None) -> None:
        target = Path(path) if path else self.path
        if target is None:
            raise StoreError("No path to save the workbook to", store=self.name)
        self.worksheet.parent.save(target)
        logger.info(f"Saved workbook {target}")

    def _last_data_row(self) -> int:
        for position in range(self.worksheet.max_row, 0, -1):
            values = [cell.value for cell in self.worksheet[position]]
            if not _is_blank(values):
                return position
        return 0


def write_headers(worksheet: Worksheet) -> None:
    """Write the bold header row."""
    for col_idx, header in enumerate(HEADER_LABELS, start=1):
        cell = worksheet.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)
