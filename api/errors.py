"""Global exception handlers for FastAPI."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from core.exceptions import InvoiceNotFoundError, MissingFieldsError, StorageError

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the app."""

    @app.exception_handler(InvoiceNotFoundError)
    async def not_found_handler(request: Request, exc: InvoiceNotFoundError):
        return JSONResponse(
            status_code=404,
            content=error_response(
                ErrorCodes.NOT_FOUND, str(exc), request_id=_request_id(request)
            ).to_json(),
        )

    @app.exception_handler(MissingFieldsError)
    async def missing_fields_handler(request: Request, exc: MissingFieldsError):
        return JSONResponse(
            status_code=400,
            content=error_response(
                ErrorCodes.MISSING_FIELDS,
                str(exc),
                fields=exc.fields,
                request_id=_request_id(request),
            ).to_json(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        fields = [".".join(str(part) for part in err["loc"][1:]) for err in exc.errors()]
        return JSONResponse(
            status_code=422,
            content=error_response(
                ErrorCodes.VALIDATION_ERROR,
                "; ".join(err["msg"] for err in exc.errors()),
                fields=fields,
                request_id=_request_id(request),
            ).to_json(),
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"Storage failure: {exc}")
        return JSONResponse(
            status_code=500,
            content=error_response(
                ErrorCodes.STORAGE_ERROR,
                "The invoice store is unavailable",
                request_id=_request_id(request),
            ).to_json(),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return JSONResponse(
            status_code=500,
            content=error_response(
                ErrorCodes.INTERNAL_ERROR,
                "An internal error occurred",
                request_id=_request_id(request),
            ).to_json(),
        )
