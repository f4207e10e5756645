# src/millrate_api/adapters/routers/base_router.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Base Router (Adapters Layer).

Purpose:
    Provide a canonical APIRouter wrapper and shared utilities for HTTP
    endpoints:
        - Versioned routing with stable prefixes (e.g., "/v1/municipalities/...").
        - Standard error response mapping using ErrorEnvelope.
        - Helpers to emit presenter results with headers (ETag, X-Request-ID).
        - Domain error to ErrorEnvelope conversion.

Layer:
    adapters/routers
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from millrate_api.adapters.presenters.base_presenter import BasePresenter, PresentResult
from millrate_api.adapters.schemas.http.base import BaseHTTPSchema
from millrate_api.adapters.schemas.http.envelopes import ErrorEnvelope
from millrate_api.domain.exceptions.base import DomainError
from millrate_api.infrastructure.http.errors import status_for
from millrate_api.infrastructure.logging.logger import get_json_logger

_LOGGER = get_json_logger(__name__)

TagType = str | Enum


@runtime_checkable
class _ResponseLike(Protocol):
    """Duck-typed response that supports mutating headers."""

    headers: MutableMapping[str, str]
    status_code: int


class BaseRouter(APIRouter):
    """Canonical router wrapper for HTTP endpoints."""

    def __init__(
        self,
        *,
        version: str,
        resource: str,
        prefix: str | None = None,
        tags: Sequence[TagType] | None = None,
        dependencies: Sequence[Any] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the router with a versioned prefix and common settings.

        Args:
            version: API version segment (e.g., "v1").
            resource: Resource segment (e.g., "municipalities/{municipality_id}").
            prefix: Optional explicit prefix; defaults to f"/{version}/{resource}".
            tags: Optional default tags for the router's endpoints.
            dependencies: Optional dependencies applied to all routes.
            **kwargs: Additional keyword arguments forwarded to APIRouter.
        """
        computed_prefix = prefix or f"/{version}/{resource}"

        super().__init__(
            prefix=computed_prefix,
            tags=list(tags) if tags is not None else None,
            dependencies=list(dependencies) if dependencies is not None else None,
            **kwargs,
        )

        _LOGGER.info(
            "router_initialized",
            extra={"extra": {"prefix": computed_prefix, "tags": [str(t) for t in tags or []]}},
        )

    # ----------------------------------------------------------------------
    # Response helpers
    # ----------------------------------------------------------------------

    @staticmethod
    def trace_id(request: Request) -> str | None:
        """Return the request correlation id set by the request-id middleware."""
        return getattr(request.state, "request_id", None)

    @staticmethod
    def send_success(
        response: _ResponseLike | None,
        result: PresentResult[Any],
    ) -> BaseHTTPSchema | dict[str, Any]:
        """Apply presenter headers and status, and return the body for FastAPI.

        Args:
            response: Optional HTTP response-like object to mutate.
            result: Presenter result containing headers and a structured body.

        Returns:
            The presenter body, or an empty dict when it is None.
        """
        if response is not None:
            response.headers.update(dict(result.headers))
            if result.status_code is not None:
                response.status_code = result.status_code

        body = result.body
        if body is None:
            return {}
        if isinstance(body, Mapping):
            return dict(body)
        return body

    @staticmethod
    def domain_error(exc: DomainError, trace_id: str | None) -> JSONResponse:
        """Convert a domain error into an ErrorEnvelope response."""
        http_status = status_for(exc)
        result = BasePresenter().present_error(
            code=exc.code,
            http_status=http_status,
            message=exc.message or exc.code,
            trace_id=trace_id,
            details=jsonable_encoder(exc.details),
        )
        assert result.body is not None
        _LOGGER.info(
            "http.domain_error",
            extra={"extra": {"code": exc.code, "http_status": http_status}},
        )
        return JSONResponse(
            status_code=http_status,
            content=result.body.model_dump(mode="json"),
            headers=dict(result.headers),
        )

    # ----------------------------------------------------------------------
    # OpenAPI Error Responses
    # ----------------------------------------------------------------------

    @staticmethod
    def std_error_responses() -> dict[int | str, dict[str, Any]]:
        """Return canonical error responses."""
        return {
            403: {"model": ErrorEnvelope, "description": "Year locked or action not permitted."},
            404: {"model": ErrorEnvelope, "description": "Not found."},
            409: {"model": ErrorEnvelope, "description": "Conflict."},
            422: {"model": ErrorEnvelope, "description": "Unprocessable content."},
            500: {"model": ErrorEnvelope, "description": "Internal server error."},
        }
