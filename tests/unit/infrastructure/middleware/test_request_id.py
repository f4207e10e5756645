# tests/unit/infrastructure/middleware/test_request_id.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Unit tests for RequestIdMiddleware behavior and header rules."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from millrate_api.infrastructure.logging.logger import get_actor_id
from millrate_api.infrastructure.middleware.request_id import (
    _SAFE_RE,
    ACTOR_ID_HEADER,
    REQUEST_ID_HEADER,
    RequestIdMiddleware,
)


def _app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestIdMiddleware)

    @app.get("/echo")
    async def echo(request: Request) -> dict[str, str | None]:
        return {"rid": getattr(request.state, "request_id", None), "actor": get_actor_id()}

    return app


def test_generates_id_when_missing() -> None:
    r = TestClient(_app()).get("/echo")

    assert r.status_code == 200
    rid = r.json()["rid"]
    assert r.headers[REQUEST_ID_HEADER] == rid
    assert _SAFE_RE.match(rid)


def test_keeps_safe_incoming_id_and_replaces_unsafe() -> None:
    client = TestClient(_app())

    ok = client.get("/echo", headers={REQUEST_ID_HEADER: "abc-123_456:@Z"})
    bad = client.get("/echo", headers={REQUEST_ID_HEADER: "bad id with space"})

    assert ok.json()["rid"] == "abc-123_456:@Z"
    assert bad.headers[REQUEST_ID_HEADER] != "bad id with space"
    assert _SAFE_RE.match(bad.headers[REQUEST_ID_HEADER])


def test_actor_header_reaches_log_context() -> None:
    r = TestClient(_app()).get("/echo", headers={ACTOR_ID_HEADER: "jdoe@town"})

    assert r.json()["actor"] == "jdoe@town"
