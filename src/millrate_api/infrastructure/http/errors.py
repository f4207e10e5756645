# src/millrate_api/infrastructure/http/errors.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Global HTTP error handlers and the domain error status table.

Every error body has the shape
``{"error": {"code", "http_status", "message", "details", "trace_id"}}``.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from millrate_api.domain.exceptions.assessing import (
    AssessmentYearExistsError,
    ConfigurationNotFoundError,
    ConfigurationValidationError,
    DuplicateConfigurationError,
    RecordNotFoundError,
    UnlockNotPermittedError,
    YearLockedError,
)
from millrate_api.domain.exceptions.base import DomainError
from millrate_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

DOMAIN_ERROR_STATUS: dict[type[DomainError], int] = {
    YearLockedError: 403,
    UnlockNotPermittedError: 403,
    RecordNotFoundError: 404,
    ConfigurationNotFoundError: 404,
    DuplicateConfigurationError: 409,
    AssessmentYearExistsError: 409,
    ConfigurationValidationError: 422,
}


def status_for(exc: DomainError) -> int:
    """Return the HTTP status of a domain error (400 when unmapped)."""
    for cls in type(exc).__mro__:
        if cls in DOMAIN_ERROR_STATUS:
            return DOMAIN_ERROR_STATUS[cls]
    return 400


def _trace_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def error_envelope(
    *,
    code: str,
    http_status: int,
    message: str,
    details: dict[str, Any] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    """Build the ``{"error": {...}}`` body shared by all handlers."""
    err: dict[str, Any] = {
        "code": code,
        "http_status": http_status,
        "message": message,
        "details": details or {},
    }
    if trace_id is not None:
        err["trace_id"] = trace_id
    return {"error": err}


async def handle_domain_error(request: Request, exc: DomainError) -> Response:
    """Map a domain error to its HTTP status and error envelope."""
    http_status = status_for(exc)
    payload = error_envelope(
        code=exc.code,
        http_status=http_status,
        message=exc.message or exc.code,
        details=exc.details,
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=http_status, content=jsonable_encoder(payload))


async def handle_validation_error(request: Request, exc: RequestValidationError) -> Response:
    """Render request validation failures as 422 ``VALIDATION_ERROR``."""
    payload = error_envelope(
        code="VALIDATION_ERROR",
        http_status=422,
        message="Request validation failed",
        details={"errors": exc.errors()},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=422, content=jsonable_encoder(payload))


async def handle_http_exception(request: Request, exc: HTTPException) -> Response:
    """Render framework HTTP errors in the error envelope."""
    payload = error_envelope(
        code="HTTP_ERROR",
        http_status=exc.status_code,
        message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
        details=None if isinstance(exc.detail, str) else {"detail": exc.detail},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=exc.status_code, content=payload)


async def handle_unhandled_exception(request: Request, exc: Exception) -> Response:
    """Log an unexpected error and return a 500 ``INTERNAL_ERROR``."""
    logger.error(
        "http.unhandled_exception",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"extra": {"path": request.url.path, "method": request.method}},
    )
    payload = error_envelope(
        code="INTERNAL_ERROR",
        http_status=500,
        message="Internal server error",
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=500, content=payload)
