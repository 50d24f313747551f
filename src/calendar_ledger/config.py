"""Application configuration.

Configuration is loaded from environment variables using pydantic-settings.
Credentials are referenced by file path and never stored in the settings
themselves.

## Environment Variables

- TIMEZONE: IANA timezone used to split events into local days (default: UTC)
- GOOGLE_TOKEN_FILE: Authorized-user token file for Google APIs
- GOOGLE_CALENDAR_ID: Calendar to reconcile against (default: primary)
- SPREADSHEET_ID / SHEET_NAME: Google Sheets target
- WORKBOOK_PATH: Local .xlsx target (alternative to Google Sheets)
- HEADER_ROWS, ID_COLUMN, DATE_COLUMN, MANAGED_COLUMNS: Sheet layout

## Example .env file

```
TIMEZONE=Europe/Berlin
GOOGLE_TOKEN_FILE=token.json
SPREADSHEET_ID=1AbC...xyz
SHEET_NAME=2025-08
MANAGED_COLUMNS=[1,2,3,4,5,6,7,8,9,10,11,12]
```
"""

from __future__ import annotations

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from calendar_ledger.models.record import RECORD_COLUMNS


class SheetLayout(BaseModel):
    """Column layout of the ledger worksheet.

    Column numbers are 1-based. Managed columns are owned by reconciliation;
    every other column is free-form and never written.
    """

    header_rows: int = Field(default=1, ge=0, description="Reserved header rows")
    id_column: int = Field(default=12, ge=1, description="Column holding the event id")
    date_column: int = Field(default=1, ge=1, description="Column holding the date")
    managed_columns: list[int] = Field(
        default_factory=lambda: list(range(1, len(RECORD_COLUMNS) + 1)),
        description="Ordered managed column numbers",
    )

    @field_validator("managed_columns")
    @classmethod
    def validate_managed_columns(cls, v: list[int]) -> list[int]:
        """Managed columns must be non-empty, positive and unique."""
        if not v:
            raise ValueError("At least one managed column is required")
        if any(col < 1 for col in v):
            raise ValueError("Column numbers are 1-based")
        if len(set(v)) != len(v):
            raise ValueError("Managed columns must be unique")
        return v

    @model_validator(mode="after")
    def check_key_columns_managed(self) -> SheetLayout:
        """Identity columns are derived from the source, so they must be managed.

        They must also be the columns records write the event id and date
        to, or rows written by one run could not be matched by the next.
        """
        for name, col, field_name in (
            ("id_column", self.id_column, "event_id"),
            ("date_column", self.date_column, "date"),
        ):
            expected = RECORD_COLUMNS.index(field_name) + 1
            if col != expected:
                raise ValueError(
                    f"{name} {col} does not match the record's {field_name} column {expected}"
                )
            if col not in self.managed_columns:
                raise ValueError(f"{name} {col} is not a managed column")
        return self

    @property
    def width(self) -> int:
        """Number of columns a managed write can touch."""
        return max(max(self.managed_columns), len(RECORD_COLUMNS))


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Calendar Ledger"
    app_version: str = "0.1.0"
    debug: bool = False

    # Local time used for day boundaries and display
    timezone: str = Field(default="UTC", description="IANA timezone name")

    # Google APIs
    google_token_file: str = "token.json"
    google_calendar_id: str = "primary"
    google_scopes: list[str] = Field(
        default=[
            "https://www.googleapis.com/auth/calendar.readonly",
            "https://www.googleapis.com/auth/spreadsheets",
        ],
        description="OAuth scopes requested for the token file",
    )
    spreadsheet_id: str | None = None
    sheet_name: str | None = None

    # Local workbook backend
    workbook_path: str | None = None

    # Sheet layout
    header_rows: int = Field(default=1, ge=0)
    id_column: int = Field(default=12, ge=1)
    date_column: int = Field(default=1, ge=1)
    managed_columns: list[int] = Field(
        default_factory=lambda: list(range(1, len(RECORD_COLUMNS) + 1))
    )
    placeholder_title: str = "(No title)"

    # HTTP API
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="CORS allowed origins",
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject names zoneinfo cannot resolve."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def sheet_layout(self) -> SheetLayout:
        """Build the explicit layout value handed to the engine."""
        return SheetLayout(
            header_rows=self.header_rows,
            id_column=self.id_column,
            date_column=self.date_column,
            managed_columns=self.managed_columns,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
    ```python
    get_settings.cache_clear()
    ```
    """
    return Settings()


def get_settings_uncached() -> Settings:
    """Get fresh settings without caching.

    Useful for testing when environment variables change.
    """
    return Settings()
