# src/millrate_api/adapters/routers/valuation_router.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Valuation HTTP router (v1).

Purpose:
    Expose land calculation, batch recalculation, year-ensure, validation
    and sketch area endpoints:
        - POST /v1/municipalities/{municipality_id}/land-assessments/{assessment_id}/calculate
        - POST /v1/municipalities/{municipality_id}/valuation/recalculate
        - POST /v1/municipalities/{municipality_id}/valuation/recalculate/zone-adjustments
        - POST /v1/municipalities/{municipality_id}/valuation/recalculate/affected
        - POST /v1/municipalities/{municipality_id}/valuation/ensure-year
        - GET  /v1/municipalities/{municipality_id}/valuation/validate
        - POST /v1/municipalities/{municipality_id}/sketches/effective-area

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Any, cast
from uuid import UUID

from fastapi import Body, Depends, Query, Request
from fastapi.responses import JSONResponse

from millrate_api.adapters.dependencies.assessing_uow import (
    Actor,
    get_actor,
    get_app_settings,
    get_assessing_uow,
)
from millrate_api.adapters.presenters.valuation_presenter import (
    present_calculation,
    present_sketch_area,
    present_summary,
    present_validation,
)
from millrate_api.adapters.routers.base_router import BaseRouter
from millrate_api.adapters.schemas.http.envelopes import SuccessEnvelope
from millrate_api.adapters.schemas.http.valuation_schemas import (
    CalculateLandAssessmentRequestHTTP,
    EnsureYearRequestHTTP,
    LandCalculationHTTP,
    RecalculateAffectedRequestHTTP,
    RecalculateRequestHTTP,
    RecalculationSummaryHTTP,
    SketchAreaHTTP,
    SketchAreaRequestHTTP,
    ValidationReportHTTP,
)
from millrate_api.application.schemas.dto.valuation import (
    CalculateLandAssessmentRequestDTO,
    EnsureYearRequestDTO,
    RecalculateAffectedRequestDTO,
    RecalculateRequestDTO,
    RecalculationOptions,
    SketchAreaRequestDTO,
    SketchShape,
    ValidateCalculationsRequestDTO,
)
from millrate_api.application.uow import UnitOfWork
from millrate_api.application.use_cases.valuation.calculate_land_assessment import (
    CalculateLandAssessmentUseCase,
)
from millrate_api.application.use_cases.valuation.calculate_sketch_area import (
    CalculateSketchAreaUseCase,
)
from millrate_api.application.use_cases.valuation.ensure_assessments_for_year import (
    EnsureAssessmentsForYearUseCase,
)
from millrate_api.application.use_cases.valuation.recalculate_municipality import (
    RecalculateAffectedUseCase,
    RecalculateMunicipalityUseCase,
    RecalculateWithZoneAdjustmentsUseCase,
)
from millrate_api.application.use_cases.valuation.validate_calculations import (
    ValidateCalculationsUseCase,
)
from millrate_api.config.settings import Settings
from millrate_api.domain.exceptions.base import DomainError

router = BaseRouter(
    version="v1",
    resource="municipalities/{municipality_id}",
    tags=["Valuation"],
)


def get_uow() -> UnitOfWork:
    """FastAPI dependency: return the assessing UnitOfWork."""
    return get_assessing_uow()


_UOW_DEP = Depends(get_uow)
_ACTOR_DEP = Depends(get_actor)
_SETTINGS_DEP = Depends(get_app_settings)

_CALCULATE_BODY: Any = Body(default=None)
_RECALC_BODY: Any = Body(...)
_AFFECTED_BODY: Any = Body(...)
_ENSURE_BODY: Any = Body(...)
_SKETCH_BODY: Any = Body(...)

_Q_YEAR: Any = Query(..., ge=2000, le=2099, description="Assessment year.")
_Q_SAMPLE_SIZE: Any = Query(default=None, ge=1, le=1000, description="Assessments to sample.")


def _options(body: RecalculateRequestHTTP, default_batch_size: int) -> RecalculationOptions:
    return RecalculationOptions(
        batch_size=body.batch_size or default_batch_size,
        force_clear_values=body.force_clear_values,
        save=body.save,
    )


@router.post(
    "/land-assessments/{assessment_id}/calculate",
    summary="Calculate one land assessment",
    description="Missing configuration is reported in `warnings`, never as an error.",
    response_model=cast(Any, SuccessEnvelope[LandCalculationHTTP]),
    responses=BaseRouter.std_error_responses(),
)
async def calculate_land_assessment(
    request: Request,
    municipality_id: UUID,
    assessment_id: UUID,
    body: CalculateLandAssessmentRequestHTTP | None = _CALCULATE_BODY,
    uow: UnitOfWork = _UOW_DEP,
    actor: Actor = _ACTOR_DEP,
) -> SuccessEnvelope[LandCalculationHTTP] | JSONResponse:
    """Calculate lines and totals, saving them unless ``save`` is false."""
    save = body.save if body is not None else True
    try:
        dto = await CalculateLandAssessmentUseCase(uow=uow).execute(
            CalculateLandAssessmentRequestDTO(
                municipality_id=municipality_id,
                assessment_id=assessment_id,
                save=save,
                actor=actor.actor_id,
            )
        )
    except DomainError as exc:
        return BaseRouter.domain_error(exc, BaseRouter.trace_id(request))
    return SuccessEnvelope(data=present_calculation(dto))


@router.post(
    "/valuation/recalculate",
    summary="Recalculate every land assessment of a year",
    response_model=cast(Any, SuccessEnvelope[RecalculationSummaryHTTP]),
    responses=BaseRouter.std_error_responses(),
)
async def recalculate(
    municipality_id: UUID,
    body: RecalculateRequestHTTP = _RECALC_BODY,
    uow: UnitOfWork = _UOW_DEP,
    actor: Actor = _ACTOR_DEP,
    settings: Settings = _SETTINGS_DEP,
) -> SuccessEnvelope[RecalculationSummaryHTTP]:
    """Run a full batch recalculation; failures are reported in the summary."""
    use_case = RecalculateMunicipalityUseCase(
        uow=uow, error_detail_cap=settings.recalc_error_detail_cap
    )
    summary = await use_case.execute(
        RecalculateRequestDTO(
            municipality_id=municipality_id,
            year=body.year,
            options=_options(body, settings.recalc_batch_size),
            actor=actor.actor_id,
        )
    )
    return SuccessEnvelope(data=present_summary(summary))


@router.post(
    "/valuation/recalculate/zone-adjustments",
    summary="Apply zone minimum acreage, then recalculate",
    response_model=cast(Any, SuccessEnvelope[RecalculationSummaryHTTP]),
    responses=BaseRouter.std_error_responses(),
)
async def recalculate_with_zone_adjustments(
    municipality_id: UUID,
    body: RecalculateRequestHTTP = _RECALC_BODY,
    uow: UnitOfWork = _UOW_DEP,
    actor: Actor = _ACTOR_DEP,
    settings: Settings = _SETTINGS_DEP,
) -> SuccessEnvelope[RecalculationSummaryHTTP]:
    """Redistribute acreage below each zone's minimum and recalculate."""
    use_case = RecalculateWithZoneAdjustmentsUseCase(
        uow=uow, error_detail_cap=settings.recalc_error_detail_cap
    )
    summary = await use_case.execute(
        RecalculateRequestDTO(
            municipality_id=municipality_id,
            year=body.year,
            options=_options(body, settings.zone_adjustment_batch_size),
            actor=actor.actor_id,
        )
    )
    return SuccessEnvelope(data=present_summary(summary))


@router.post(
    "/valuation/recalculate/affected",
    summary="Recalculate assessments affected by a reference-data change",
    response_model=cast(Any, SuccessEnvelope[RecalculationSummaryHTTP]),
    responses=BaseRouter.std_error_responses(),
)
async def recalculate_affected(
    request: Request,
    municipality_id: UUID,
    body: RecalculateAffectedRequestHTTP = _AFFECTED_BODY,
    uow: UnitOfWork = _UOW_DEP,
    actor: Actor = _ACTOR_DEP,
    settings: Settings = _SETTINGS_DEP,
) -> SuccessEnvelope[RecalculationSummaryHTTP] | JSONResponse:
    """Recalculate by zone, neighborhood, current-use category, or all."""
    use_case = RecalculateAffectedUseCase(
        uow=uow,
        batch_size=settings.recalc_batch_size,
        error_detail_cap=settings.recalc_error_detail_cap,
    )
    try:
        summary = await use_case.execute(
            RecalculateAffectedRequestDTO(
                municipality_id=municipality_id,
                year=body.year,
                change_type=body.change_type,
                change_key=body.change_key,
                actor=actor.actor_id,
            )
        )
    except DomainError as exc:
        return BaseRouter.domain_error(exc, BaseRouter.trace_id(request))
    return SuccessEnvelope(data=present_summary(summary))


@router.post(
    "/valuation/ensure-year",
    summary="Copy each property's latest prior assessment into a year",
    response_model=cast(Any, SuccessEnvelope[RecalculationSummaryHTTP]),
    responses=BaseRouter.std_error_responses(),
)
async def ensure_year(
    municipality_id: UUID,
    body: EnsureYearRequestHTTP = _ENSURE_BODY,
    uow: UnitOfWork = _UOW_DEP,
    actor: Actor = _ACTOR_DEP,
    settings: Settings = _SETTINGS_DEP,
) -> SuccessEnvelope[RecalculationSummaryHTTP]:
    """Create missing assessments for ``body.year``."""
    use_case = EnsureAssessmentsForYearUseCase(
        uow=uow, error_detail_cap=settings.recalc_error_detail_cap
    )
    summary = await use_case.execute(
        EnsureYearRequestDTO(municipality_id=municipality_id, year=body.year, actor=actor.actor_id)
    )
    return SuccessEnvelope(data=present_summary(summary))


@router.get(
    "/valuation/validate",
    summary="Compare cached totals against fresh calculations",
    description="Fields differing by more than 1 on a random sample are reported.",
    response_model=cast(Any, SuccessEnvelope[ValidationReportHTTP]),
    responses=BaseRouter.std_error_responses(),
)
async def validate_calculations(
    request: Request,
    municipality_id: UUID,
    year: int = _Q_YEAR,
    sample_size: int | None = _Q_SAMPLE_SIZE,
    uow: UnitOfWork = _UOW_DEP,
    settings: Settings = _SETTINGS_DEP,
) -> SuccessEnvelope[ValidationReportHTTP] | JSONResponse:
    """Run the consistency check."""
    try:
        report = await ValidateCalculationsUseCase(uow=uow).execute(
            ValidateCalculationsRequestDTO(
                municipality_id=municipality_id,
                year=year,
                sample_size=sample_size or settings.validation_sample_size,
            )
        )
    except DomainError as exc:
        return BaseRouter.domain_error(exc, BaseRouter.trace_id(request))
    return SuccessEnvelope(data=present_validation(report))


@router.post(
    "/sketches/effective-area",
    summary="Calculate sketch effective area and gross living area",
    response_model=cast(Any, SuccessEnvelope[SketchAreaHTTP]),
    responses=BaseRouter.std_error_responses(),
)
async def calculate_sketch_area(
    municipality_id: UUID,
    body: SketchAreaRequestHTTP = _SKETCH_BODY,
    uow: UnitOfWork = _UOW_DEP,
) -> SuccessEnvelope[SketchAreaHTTP]:
    """Weight each shape's area by its sub-area factors for the year."""
    result = await CalculateSketchAreaUseCase(uow=uow).execute(
        SketchAreaRequestDTO(
            municipality_id=municipality_id,
            year=body.year,
            shapes=tuple(
                SketchShape(area=s.area, descriptions=tuple(s.descriptions)) for s in body.shapes
            ),
        )
    )
    return SuccessEnvelope(data=present_sketch_area(result))
