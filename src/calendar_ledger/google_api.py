"""Shared Google API plumbing.

Credentials come from an authorized-user token file (the JSON written by the
OAuth installed-app flow). Both the Calendar and Sheets adapters execute
their requests through `execute`, which retries rate limiting and server
errors with exponential backoff.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

TRANSIENT_STATUS_CODES = {429, 500, 502, 503, 504}


def is_transient(error: BaseException) -> bool:
    """True for HTTP errors worth retrying."""
    return isinstance(error, HttpError) and error.resp.status in TRANSIENT_STATUS_CODES


def load_credentials(token_file: str | Path, scopes: list[str]) -> Credentials:
    """Load and, when expired, refresh authorized-user credentials.

    Raises:
        FileNotFoundError: If the token file does not exist
    """
    path = Path(token_file)
    if not path.exists():
        raise FileNotFoundError(f"Google token file not found: {path}")

    creds = Credentials.from_authorized_user_file(str(path), scopes)
    if not creds.valid and creds.expired and creds.refresh_token:
        logger.info("Refreshing expired Google credentials")
        creds.refresh(Request())
        path.write_text(creds.to_json())
    return creds


def build_service(api: str, version: str, credentials: Credentials) -> Any:
    return build(api, version, credentials=credentials, cache_discovery=False)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception(is_transient),
    reraise=True,
)
def execute(request: Any) -> dict[str, Any]:
    """Execute an API request, retrying transient failures."""
    return request.execute()
