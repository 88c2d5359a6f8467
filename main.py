"""
Invoice service entry point.

    python main.py            # serve on $HOST:$PORT (default 0.0.0.0:5000)

Environment (a .env file next to this module is loaded first):
    DATABASE_URL             PostgreSQL URL; falls back to Vault when unset
    DB_STATEMENT_TIMEOUT_MS  per-statement timeout, default 5000
    CORS_ORIGINS             comma-separated origins, default "*"
    LOG_LEVEL                default INFO
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_error_handlers
from api.invoices import create_invoice_router
from api.middleware import RequestIDMiddleware
from clients.postgres_client import PostgresClient
from clients.vault_client import get_database_url
from core.config import InvoiceConfig
from core.services.invoice_service import InvoiceService
from core.store import PostgresInvoiceStore

logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def build_services(postgres: PostgresClient, config: InvoiceConfig | None = None) -> dict:
    """Wire services onto a Postgres-backed invoice store, creating the schema if needed."""
    store = PostgresInvoiceStore(postgres)
    store.ensure_schema()
    return {"invoice": InvoiceService(store, config)}


def create_app(services: dict | None = None) -> FastAPI:
    """
    Build the FastAPI app.

    Without services, connects to PostgreSQL and closes the pool on shutdown.
    Tests pass their own services dict instead.
    """
    postgres = None
    if services is None:
        postgres = PostgresClient(
            get_database_url(),
            statement_timeout_ms=int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "5000")),
        )
        services = build_services(postgres)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if postgres is not None:
            postgres.close()
            logger.info("Connection pool closed")

    app = FastAPI(title="Invoices", lifespan=lifespan)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    register_error_handlers(app)

    app.include_router(create_invoice_router(services), prefix="/api")

    return app


def main() -> None:
    load_dotenv(Path(__file__).parent / ".env")
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "5000"))
    logger.info(f"Starting invoice service on {host}:{port}")
    uvicorn.run(create_app(), host=host, port=port)


if __name__ == "__main__":
    main()
