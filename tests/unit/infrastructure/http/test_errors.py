# tests/unit/infrastructure/http/test_errors.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
from __future__ import annotations

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient
from pydantic import BaseModel

from millrate_api.domain.exceptions.assessing import (
    AssessmentYearExistsError,
    ConfigurationValidationError,
    DuplicateConfigurationError,
    RecordNotFoundError,
    UnlockNotPermittedError,
    YearLockedError,
)
from millrate_api.domain.exceptions.base import DomainError
from millrate_api.infrastructure.http import errors


class Payload(BaseModel):
    value: int


def test_status_table() -> None:
    assert errors.status_for(YearLockedError(2024)) == 403
    assert errors.status_for(UnlockNotPermittedError("no")) == 403
    assert errors.status_for(RecordNotFoundError("missing")) == 404
    assert errors.status_for(DuplicateConfigurationError("zone", ("R1",), 2024)) == 409
    assert errors.status_for(AssessmentYearExistsError(2025)) == 409
    assert errors.status_for(ConfigurationValidationError([])) == 422
    assert errors.status_for(DomainError("other")) == 400


def test_error_envelope_omits_missing_trace_id() -> None:
    payload = errors.error_envelope(code="X", http_status=400, message="bad")

    assert payload == {"error": {"code": "X", "http_status": 400, "message": "bad", "details": {}}}


def _app() -> FastAPI:
    app = FastAPI()
    app.add_exception_handler(DomainError, errors.handle_domain_error)
    app.add_exception_handler(RequestValidationError, errors.handle_validation_error)
    app.add_exception_handler(HTTPException, errors.handle_http_exception)
    app.add_exception_handler(Exception, errors.handle_unhandled_exception)

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):  # type: ignore[no-untyped-def]
        request.state.request_id = "trace-xyz"
        return await call_next(request)

    @app.get("/locked")
    async def locked() -> None:
        raise YearLockedError(2023)

    @app.post("/validation")
    async def validation(body: Payload) -> dict[str, int]:
        return {"value": body.value}

    @app.get("/http-exc")
    async def http_exc() -> None:
        raise HTTPException(status_code=404, detail="not found")

    @app.get("/unhandled")
    async def unhandled() -> None:
        raise RuntimeError("boom")

    return app


def test_domain_error_envelope() -> None:
    resp = TestClient(_app()).get("/locked")

    assert resp.status_code == 403
    err = resp.json()["error"]
    assert err["code"] == "YEAR_LOCKED"
    assert err["details"]["year"] == 2023
    assert err["trace_id"] == "trace-xyz"


def test_validation_error_envelope() -> None:
    resp = TestClient(_app()).post("/validation", json={"value": "not-an-int"})

    assert resp.status_code == 422
    err = resp.json()["error"]
    assert err["code"] == "VALIDATION_ERROR"
    assert "errors" in err["details"]


def test_http_exception_envelope() -> None:
    resp = TestClient(_app()).get("/http-exc")

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "HTTP_ERROR"
    assert resp.json()["error"]["message"] == "not found"


def test_unhandled_exception_envelope() -> None:
    resp = TestClient(_app(), raise_server_exceptions=False).get("/unhandled")

    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "INTERNAL_ERROR"
