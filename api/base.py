"""Unified API response format and error codes."""

from typing import Any, Literal
from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field

from utils.timezone import now_utc


class APIError(BaseModel):
    """Error details in API response."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    fields: list[str] | None = Field(None, description="Offending field names, when known")


class APIMeta(BaseModel):
    """Metadata included in every API response."""

    timestamp: datetime = Field(..., description="Response timestamp (UTC)")
    request_id: str = Field(..., serialization_alias="requestId", description="Unique request identifier for tracing")


class APIResponse(BaseModel):
    """
    Unified response format for all API endpoints.

    Success bodies look like {"status": "success", "data": ..., "message": ...};
    failures carry {"status": "error", "error": {...}}.
    """

    status: Literal["success", "error"]
    data: Any | None = None
    message: str | None = None
    error: APIError | None = None
    meta: APIMeta

    def to_json(self) -> dict:
        """JSON-ready body; empty data/message/error/fields keys are left out."""
        body = self.model_dump(mode="json", by_alias=True)
        for key in ("data", "message", "error"):
            if body[key] is None:
                del body[key]
        if "error" in body and body["error"]["fields"] is None:
            del body["error"]["fields"]
        return body


def _meta(request_id: str | None) -> APIMeta:
    return APIMeta(timestamp=now_utc(), request_id=request_id or str(uuid4()))


def success_response(
    data: Any = None,
    message: str | None = None,
    request_id: str | None = None,
) -> APIResponse:
    """Create a success response."""
    return APIResponse(
        status="success",
        data=data,
        message=message,
        meta=_meta(request_id),
    )


def error_response(
    code: str,
    message: str,
    fields: list[str] | None = None,
    request_id: str | None = None,
) -> APIResponse:
    """Create an error response."""
    return APIResponse(
        status="error",
        error=APIError(code=code, message=message, fields=fields),
        meta=_meta(request_id),
    )


class ErrorCodes:
    """Standard error codes for consistent error handling."""

    # Resource Errors
    NOT_FOUND = "NOT_FOUND"

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_FIELDS = "MISSING_FIELDS"

    # Infrastructure
    STORAGE_ERROR = "STORAGE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
