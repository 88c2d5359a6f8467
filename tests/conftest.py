"""Shared test fixtures for the invoice test suite."""

import copy
import itertools
from datetime import datetime, timezone

import pytest

from core.config import InvoiceConfig
from core.services.invoice_service import InvoiceService


# =============================================================================
# CONSTANTS
# =============================================================================

# Pinned "now" for every derivation under test
FIXED_NOW = datetime(2024, 3, 1, 9, 30, 0, tzinfo=timezone.utc)


# =============================================================================
# IN-MEMORY STORE
# =============================================================================


class InMemoryInvoiceStore:
    """InvoiceStore double keeping documents in a dict, in insertion order."""

    def __init__(self):
        self.documents: dict[str, dict] = {}

    def find_one(self, invoice_id):
        document = self.documents.get(invoice_id)
        return copy.deepcopy(document) if document is not None else None

    def find(self, filters=None):
        filters = filters or {}
        return [
            copy.deepcopy(doc)
            for doc in self.documents.values()
            if all(doc.get(key) == value for key, value in filters.items())
        ]

    def insert(self, document):
        if document["id"] in self.documents:
            raise AssertionError(f"duplicate insert of {document['id']}")
        self.documents[document["id"]] = copy.deepcopy(document)
        return document

    def update(self, invoice_id, document):
        self.documents[invoice_id] = copy.deepcopy(document)
        return document

    def delete(self, invoice_id):
        return self.documents.pop(invoice_id, None) is not None


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def fixed_clock():
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def sequential_ids():
    """Deterministic id factory: AA0001, AA0002, ..."""
    counter = itertools.count(1)
    return lambda: f"AA{next(counter):04d}"


@pytest.fixture
def store():
    return InMemoryInvoiceStore()


@pytest.fixture
def invoice_service(store, fixed_clock, sequential_ids):
    """InvoiceService over the in-memory store with pinned time and ids."""
    return InvoiceService(
        store,
        InvoiceConfig(),
        clock=fixed_clock,
        id_factory=sequential_ids,
    )


@pytest.fixture
def complete_payload() -> dict:
    """Wire-format payload satisfying every pending/paid requirement."""
    return {
        "status": "pending",
        "description": "Web development services",
        "paymentTerms": 7,
        "clientName": "Alex Grim",
        "clientEmail": "alexgrim@mail.com",
        "senderAddress": {
            "street": "19 Union Terrace",
            "city": "London",
            "postCode": "E1 3EZ",
            "country": "United Kingdom",
        },
        "clientAddress": {
            "street": "84 Church Way",
            "city": "Bradford",
            "postCode": "BD1 9PB",
            "country": "United Kingdom",
        },
        "items": [
            {"name": "Brand Guidelines", "quantity": 1, "price": 1800.90},
            {"name": "Email Design", "quantity": 2, "price": 200},
        ],
    }
