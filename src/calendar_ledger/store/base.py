"""Base tabular store abstraction.

A tabular store is a single worksheet addressed by 1-based row positions.
Positions count every row including the reserved header rows, and they are
only stable until a deletion: removing a row moves every later row up by one.

## Operations

- `read_rows()`: every data row below the header rows, in order
- `write(position, columns, values)`: overwrite the given cells of one row
- `append(rows)`: add rows after the last row
- `delete(position)`: remove one row, shifting later rows up

Stores do no reconciliation of their own; `calendar_ledger.reconcile`
decides what to write.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from calendar_ledger.models.record import StoredRow


class StoreError(Exception):
    """Base exception for store errors."""

    def __init__(
        self,
        message: str,
        store: str,
        position: int | None = None,
    ):
        super().__init__(message)
        self.store = store
        self.position = position


class TabularStore(ABC):
    """Abstract base class for ledger stores.

    Attributes:
        name: Backend name used in logs and errors
        header_rows: Number of reserved rows above the data

    Example:
        ```python
        class MyStore(TabularStore):
            name = "my_store"

            def read_rows(self):
                return [StoredRow(position=2, values=[...])]
            ...
        ```
    """

    name: str

    def __init__(self, header_rows: int = 1):
        self.header_rows = header_rows

    @property
    @abstractmethod
    def title(self) -> str:
        """Worksheet title; names the period the ledger covers."""

    @abstractmethod
    def read_rows(self) -> list[StoredRow]:
        """Read every data row below the header rows."""

    @abstractmethod
    def write(self, position: int, columns: Sequence[int], values: Sequence[Any]) -> None:
        """Overwrite cells of one row.

        Args:
            position: 1-based row position
            columns: 1-based column numbers
            values: One value per column
        """

    @abstractmethod
    def append(self, rows: Sequence[Sequence[Any]]) -> None:
        """Append rows after the last row."""

    @abstractmethod
    def delete(self, position: int) -> None:
        """Delete one row; later rows move up by one."""

    def _check_position(self, position: int, last_row: int) -> None:
        if position <= self.header_rows or position > last_row:
            raise StoreError(
                f"Row {position} is outside the data rows "
                f"({self.header_rows + 1}-{last_row})",
                store=self.name,
                position=position,
            )

    @staticmethod
    def _check_lengths(columns: Sequence[int], values: Sequence[Any]) -> None:
        if len(columns) != len(values):
            raise ValueError(
                f"Got {len(values)} values for {len(columns)} columns"
            )
