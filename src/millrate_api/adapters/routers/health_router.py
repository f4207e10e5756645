# src/millrate_api/adapters/routers/health_router.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Health endpoints (Adapters Layer).

Purpose:
    Expose liveness and readiness signals for container orchestrators and
    load balancers.

Design:
    * Probes are injected; the default provider builds a database probe.
    * A provider instance (`probe_provider`) is the DI token so overrides
      match by identity; `use_cache=False` honors late overrides.
"""

from __future__ import annotations

import asyncio
import typing as t
from enum import Enum
from typing import Annotated, Protocol

from fastapi import APIRouter, Depends, Response, status
from pydantic import Field

from millrate_api.adapters.dependencies.health_probe import get_db_probe
from millrate_api.adapters.schemas.http.base import BaseHTTPSchema
from millrate_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)
router = APIRouter()


class HealthState(str, Enum):
    """Overall service health classification."""

    OK = "ok"
    DEGRADED = "degraded"


class CheckResult(BaseHTTPSchema):
    """Result of a single dependency check.

    Attributes:
        name: Logical name for the dependency (e.g., "db").
        status: "ok" when the probe succeeded, otherwise "down".
        detail: Optional diagnostic detail (e.g., exception message).
        duration_ms: Time spent on the probe in milliseconds.
    """

    name: str = Field(..., examples=["db"])
    status: t.Literal["ok", "down"]
    detail: str | None = None
    duration_ms: float


class ReadinessResponse(BaseHTTPSchema):
    """Aggregated readiness response."""

    status: HealthState
    checks: list[CheckResult] = Field(default_factory=list)


class LivenessResponse(BaseHTTPSchema):
    """Liveness response indicating the process is running."""

    status: t.Literal["ok"] = "ok"


class HealthProbe(Protocol):
    """Minimal, non-destructive dependency checks returning ``(is_ok, detail)``."""

    async def db(self) -> tuple[bool, str | None]:
        """Probe the primary database."""
        ...


class ProbeProvider:
    """Dependency token object for readiness routes."""

    def __call__(self) -> HealthProbe:
        """Return the current health probe implementation."""
        return get_db_probe()


probe_provider = ProbeProvider()


@router.get(
    "/z",
    summary="Liveness",
    operation_id="health_liveness",
    response_model=LivenessResponse,
    status_code=status.HTTP_200_OK,
)
async def liveness() -> LivenessResponse:
    """Return a fast liveness signal (no external I/O)."""
    return LivenessResponse()


@router.get(
    "/readiness",
    summary="Readiness",
    operation_id="health_readiness",
    response_model=ReadinessResponse,
    responses={503: {"description": "Service degraded", "model": ReadinessResponse}},
)
async def readiness(
    response: Response,
    probe: Annotated[HealthProbe, Depends(probe_provider, use_cache=False)],
) -> ReadinessResponse:
    """Run the database check; HTTP 503 when it fails."""
    loop = asyncio.get_running_loop()
    start = loop.time()
    ok, detail = await probe.db()
    check = CheckResult(
        name="db",
        status="ok" if ok else "down",
        detail=detail,
        duration_ms=(loop.time() - start) * 1000.0,
    )
    if not ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    payload = ReadinessResponse(
        status=HealthState.OK if ok else HealthState.DEGRADED,
        checks=[check],
    )
    logger.info(
        "readiness_probe",
        extra={"extra": {"overall": payload.status, "checks": [check.model_dump_http()]}},
    )
    return payload
