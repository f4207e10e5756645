# src/millrate_api/infrastructure/middleware/request_id.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Request ID middleware.

Contract:
    • Reads:  X-Request-ID (optional), X-Actor-Id (optional)
    • Writes: X-Request-ID (always written)
    • Stores: request.state.request_id (str)
    • Enriches logs via contextvars (request_id, actor_id)

Error envelopes carry the request id as ``trace_id``.
"""

from __future__ import annotations

import re
import uuid
from typing import Final

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from millrate_api.infrastructure.logging.logger import set_request_context

REQUEST_ID_HEADER: Final[str] = "X-Request-ID"
ACTOR_ID_HEADER: Final[str] = "X-Actor-Id"
_SAFE_RE: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9\-_.:@]{1,128}$")


def _coerce(raw: str | None, *, generate: bool) -> str | None:
    """Return ``raw`` when it is a safe token, else a new UUID4 or None."""
    if raw and _SAFE_RE.match(raw):
        return raw
    return str(uuid.uuid4()) if generate else None


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Attach a correlation id to each request and its response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Set ``request.state.request_id`` and echo it in the response header."""
        req_id = _coerce(request.headers.get(REQUEST_ID_HEADER), generate=True)
        request.state.request_id = req_id
        set_request_context(
            request_id=req_id,
            actor_id=_coerce(request.headers.get(ACTOR_ID_HEADER), generate=False),
        )

        response: Response = await call_next(request)
        response.headers.setdefault(REQUEST_ID_HEADER, req_id or "")
        return response
