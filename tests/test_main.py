"""Tests for the app factory in main.py."""

from unittest.mock import Mock, patch

from fastapi.testclient import TestClient

from clients.postgres_client import PostgresClient
from core.services.invoice_service import InvoiceService
from core.store import PostgresInvoiceStore
import main


class TestBuildServices:

    def test_wires_postgres_store_and_creates_schema(self):
        postgres = Mock(spec=PostgresClient)

        services = main.build_services(postgres)

        service = services["invoice"]
        assert isinstance(service, InvoiceService)
        assert isinstance(service.store, PostgresInvoiceStore)
        assert "CREATE TABLE IF NOT EXISTS invoices" in postgres.execute.call_args[0][0]


class TestCreateApp:

    def test_connects_with_configured_url_and_timeout(self, monkeypatch):
        monkeypatch.setenv("DB_STATEMENT_TIMEOUT_MS", "1500")
        with patch("main.get_database_url", return_value="postgresql://localhost/invoices"), \
                patch("main.PostgresClient") as client_cls:
            main.create_app()

        client_cls.assert_called_once_with(
            "postgresql://localhost/invoices", statement_timeout_ms=1500
        )

    def test_pool_closed_on_shutdown(self):
        with patch("main.get_database_url", return_value="postgresql://localhost/invoices"), \
                patch("main.PostgresClient") as client_cls:
            app = main.create_app()
            with TestClient(app):
                pass

        client_cls.return_value.close.assert_called_once()

    def test_cors_headers(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://invoices.example.com")
        service = Mock()
        service.list_all.return_value = []
        client = TestClient(main.create_app({"invoice": service}))

        response = client.get("/api/invoices", headers={"Origin": "http://localhost:3000"})

        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


class TestCorsOrigins:

    def test_defaults_to_any(self, monkeypatch):
        monkeypatch.delenv("CORS_ORIGINS", raising=False)
        assert main._cors_origins() == ["*"]

    def test_splits_and_strips(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", " http://a.test ,http://b.test,, ")
        assert main._cors_origins() == ["http://a.test", "http://b.test"]
