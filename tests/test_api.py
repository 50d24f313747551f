"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from calendar_ledger.api import create_app
from calendar_ledger.api.dependencies import get_sync_service
from calendar_ledger.store.workbook import WorkbookStore
from calendar_ledger.sync import LedgerSyncService


@pytest.fixture
def ledger_path(tmp_path):
    path = tmp_path / "ledger.xlsx"
    WorkbookStore.open(path, "2025-08", create=True).save()
    return path


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


def override_service(app, source, store, layout):
    service = LedgerSyncService(source, store, layout)
    app.dependency_overrides[get_sync_service] = lambda: service
    return service


class TestHealth:
    """Tests for the health endpoint."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "0.1.0"}

    def test_docs_hidden_without_debug(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "false")

        with TestClient(create_app()) as client:
            assert client.get("/docs").status_code == 404
            assert client.get("/openapi.json").status_code == 404


class TestAddEndpoint:
    """Tests for POST /api/ledger/add."""

    def test_add_and_persist(self, app, client, source, layout, ledger_path):
        """Test a successful add is written back to the workbook file."""
        store = WorkbookStore.open(ledger_path, "2025-08")
        override_service(app, source, store, layout)

        response = client.post("/api/ledger/add", json={"start_date": "2025-08-08"})
        # end_date falls back to the end of the period
        assert response.status_code == 200
        data = response.json()
        assert data["added"] == 3
        assert data["sheet"] == "2025-08"
        assert data["message"] == "Applied 3 added, 0 updated, 0 deleted on '2025-08'"

        assert len(WorkbookStore.open(ledger_path, "2025-08").read_rows()) == 3

    def test_add_without_body(self, app, client, source, store, layout):
        override_service(app, source, store, layout)

        response = client.post("/api/ledger/add")

        assert response.status_code == 200
        assert response.json()["added"] == 3

    def test_dry_run_not_persisted(self, app, client, source, layout, ledger_path):
        store = WorkbookStore.open(ledger_path, "2025-08")
        override_service(app, source, store, layout)

        response = client.post("/api/ledger/add", json={"dry_run": True})

        assert response.json()["dry_run"] is True
        assert WorkbookStore.open(ledger_path, "2025-08").read_rows() == []

    def test_inverted_range(self, app, client, source, store, layout):
        override_service(app, source, store, layout)

        response = client.post(
            "/api/ledger/add",
            json={"start_date": "2025-08-09", "end_date": "2025-08-01"},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["kind"] == "invalid_context"

    def test_source_unavailable(self, app, client, failing_source, store, layout):
        override_service(app, failing_source, store, layout)

        response = client.post("/api/ledger/add")

        assert response.status_code == 502
        assert response.json()["detail"]["kind"] == "source_unavailable"


class TestRefreshEndpoint:
    """Tests for POST /api/ledger/refresh."""

    def test_refresh(self, app, client, source, store, layout):
        service = override_service(app, source, store, layout)
        service.add_events()
        source.events[0] = source.events[0].model_copy(update={"title": "Day Shift"})

        response = client.post("/api/ledger/refresh", json={})

        assert response.status_code == 200
        assert response.json()["updated"] == 2

    def test_empty_store(self, app, client, source, store, layout):
        override_service(app, source, store, layout)

        response = client.post("/api/ledger/refresh")

        assert response.status_code == 409
        assert response.json()["detail"]["kind"] == "empty_store"

    def test_invalid_sheet_title(self, app, client, source, store, layout):
        store.worksheet.title = "Sheet1"
        override_service(app, source, store, layout)

        response = client.post("/api/ledger/refresh")

        assert response.status_code == 400
        assert "Sheet1" in response.json()["detail"]["message"]

    def test_not_configured(self, client, tmp_path, monkeypatch):
        """Test a missing store configuration is reported as unavailable."""
        monkeypatch.chdir(tmp_path)
        for name in ("SPREADSHEET_ID", "SHEET_NAME", "WORKBOOK_PATH"):
            monkeypatch.delenv(name, raising=False)

        response = client.post("/api/ledger/refresh")

        assert response.status_code == 503
        assert response.json()["detail"].startswith("Ledger not configured")
