"""HTTP surface for the ledger flows.

Serve with any ASGI server, e.g. ``uvicorn --factory calendar_ledger.api:create_app``.
Interactive docs are only mounted when DEBUG is set.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from calendar_ledger.api.routes import ledger
from calendar_ledger.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Ledger API {app.version} ready")
    yield


def create_app() -> FastAPI:
    """Build the app with the ledger routes and a health check."""
    settings = get_settings()
    docs = settings.debug

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url="/docs" if docs else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs else None,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )
    app.include_router(ledger.router, prefix="/api/ledger", tags=["Ledger"])

    @app.get("/health", tags=["Health"])
    def health_check():
        return {"status": "healthy", "version": settings.app_version}

    return app
