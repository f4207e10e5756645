# src/millrate_api/adapters/routers/api_router.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""API Router Aggregator (Adapters Layer).

Purpose:
    Compose the top-level `router` that includes all feature routers.

Responsibilities:
    • Mount health endpoints under `/health`.
    • Mount configuration, assessment-year and valuation endpoints under
      `/v1/municipalities/{municipality_id}/...`.

Layer:
    adapters/routers
"""

from __future__ import annotations

from fastapi import APIRouter

from millrate_api.adapters.routers.assessment_years_router import (
    router as assessment_years_router,
)
from millrate_api.adapters.routers.configuration_router import router as configuration_router
from millrate_api.adapters.routers.health_router import router as health_router
from millrate_api.adapters.routers.valuation_router import router as valuation_router

router = APIRouter()

router.include_router(health_router, prefix="/health", tags=["Health"])
router.include_router(configuration_router)
router.include_router(assessment_years_router)
router.include_router(valuation_router)
