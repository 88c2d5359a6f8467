"""API test fixtures — TestClient over the in-memory invoice store."""

import pytest
from fastapi.testclient import TestClient

from main import create_app


# =============================================================================
# SERVICES DICT
# =============================================================================


@pytest.fixture
def services(invoice_service):
    return {"invoice": invoice_service}


# =============================================================================
# APP & CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def app(services):
    """FastAPI app with middleware, error handlers and invoice routes."""
    return create_app(services)


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def create_invoice(client):
    """POST an invoice and return its stored data."""

    def _create(payload: dict) -> dict:
        response = client.post("/api/invoice", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create
