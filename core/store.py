"""
Invoice document storage.

The write path only needs a handful of operations keyed by invoice id, so
storage is expressed as the InvoiceStore protocol and injected into the
service. PostgresInvoiceStore keeps one JSONB document per invoice.
"""

import logging
from contextlib import contextmanager
from typing import Any, Protocol

import psycopg2

from clients.postgres_client import PostgresClient
from core.exceptions import StorageError

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS invoices (
    seq BIGSERIAL,
    id TEXT PRIMARY KEY,
    status TEXT NOT NULL,
    document JSONB NOT NULL
);
CREATE INDEX IF NOT EXISTS invoices_status_idx ON invoices (status);
CREATE INDEX IF NOT EXISTS invoices_document_idx ON invoices USING GIN (document jsonb_path_ops);
"""


class InvoiceStore(Protocol):
    """Operations the invoice service needs from a document store."""

    def find_one(self, invoice_id: str) -> dict[str, Any] | None:
        """Document with this id, or None."""

    def find(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Documents whose top-level fields equal every filter value, in insertion order."""

    def insert(self, document: dict[str, Any]) -> dict[str, Any]:
        """Store a new document and return it."""

    def update(self, invoice_id: str, document: dict[str, Any]) -> dict[str, Any]:
        """Replace the document stored under invoice_id (upsert) and return it."""

    def delete(self, invoice_id: str) -> bool:
        """Remove a document. False if nothing was stored under invoice_id."""


@contextmanager
def _storage_errors(operation: str):
    """Re-raise driver errors as StorageError."""
    try:
        yield
    except psycopg2.Error as e:
        logger.error(f"Invoice store {operation} failed: {e}")
        raise StorageError(f"Invoice store {operation} failed") from e


class PostgresInvoiceStore:
    """InvoiceStore backed by a PostgreSQL JSONB column."""

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def ensure_schema(self) -> None:
        """Create the invoices table and indexes if missing."""
        with _storage_errors("schema setup"):
            self.postgres.execute(SCHEMA_SQL)

    def find_one(self, invoice_id: str) -> dict[str, Any] | None:
        with _storage_errors("lookup"):
            row = self.postgres.execute_single(
                "SELECT document FROM invoices WHERE id = %s",
                (invoice_id,)
            )
        return row["document"] if row else None

    def find(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        # Containment against {} matches every document
        with _storage_errors("query"):
            rows = self.postgres.execute(
                "SELECT document FROM invoices WHERE document @> %s ORDER BY seq",
                (filters or {},)
            )
        return [row["document"] for row in rows]

    def insert(self, document: dict[str, Any]) -> dict[str, Any]:
        with _storage_errors("insert"):
            self.postgres.execute(
                "INSERT INTO invoices (id, status, document) VALUES (%s, %s, %s)",
                (document["id"], document["status"], document)
            )
        return document

    def update(self, invoice_id: str, document: dict[str, Any]) -> dict[str, Any]:
        with _storage_errors("update"):
            self.postgres.execute(
                """
                INSERT INTO invoices (id, status, document) VALUES (%s, %s, %s)
                ON CONFLICT (id) DO UPDATE
                SET status = EXCLUDED.status, document = EXCLUDED.document
                """,
                (invoice_id, document["status"], document)
            )
        return document

    def delete(self, invoice_id: str) -> bool:
        with _storage_errors("delete"):
            deleted = self.postgres.execute_rowcount(
                "DELETE FROM invoices WHERE id = %s",
                (invoice_id,)
            )
        return deleted > 0
