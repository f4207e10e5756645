# src/millrate_api/adapters/schemas/http/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""HTTP Schemas package (Adapters Layer).

Purpose:
    Public, adapter-facing HTTP schema surface. Re-exports the canonical
    envelopes used by routers and presenters. BaseHTTPSchema stays internal
    to this package.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from millrate_api.adapters.schemas.http.envelopes import (
    ErrorEnvelope,
    ErrorObject,
    SuccessEnvelope,
)

__all__ = [
    "ErrorEnvelope",
    "ErrorObject",
    "SuccessEnvelope",
]
