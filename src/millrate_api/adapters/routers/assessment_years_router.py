# src/millrate_api/adapters/routers/assessment_years_router.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Assessment year HTTP router (v1).

Purpose:
    Expose year listing, creation from a prior year, lock state, privileged
    unlock, visibility and tax milestones under
    ``/v1/municipalities/{municipality_id}/assessment-years``.

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Any, cast
from uuid import UUID

from fastapi import Body, Depends, Path, Query, Request, status
from fastapi.responses import JSONResponse

from millrate_api.adapters.dependencies.assessing_uow import (
    Actor,
    get_actor,
    get_app_settings,
    get_assessing_uow,
)
from millrate_api.adapters.presenters.assessment_year_presenter import present_year
from millrate_api.adapters.routers.base_router import BaseRouter
from millrate_api.adapters.schemas.http.assessment_year_schemas import (
    AssessmentYearHTTP,
    CreateAssessmentYearRequestHTTP,
    MilestonesRequestHTTP,
    VisibilityRequestHTTP,
    YearLockStateHTTP,
)
from millrate_api.adapters.schemas.http.envelopes import SuccessEnvelope
from millrate_api.application.schemas.dto.assessment_years import (
    CreateYearFromPriorRequestDTO,
    MilestoneUpdateDTO,
    SetYearVisibilityRequestDTO,
    UpdateMilestonesRequestDTO,
    YearLockRequestDTO,
)
from millrate_api.application.uow import UnitOfWork
from millrate_api.application.use_cases.assessment_years.assessment_year_lifecycle import (
    CreateYearFromPriorUseCase,
    LockYearUseCase,
    UnlockYearUseCase,
)
from millrate_api.application.use_cases.assessment_years.assessment_year_queries import (
    GetActiveYearUseCase,
    GetYearLockStateUseCase,
    ListAssessmentYearsUseCase,
)
from millrate_api.application.use_cases.assessment_years.assessment_year_settings import (
    SetYearVisibilityUseCase,
    UpdateMilestonesUseCase,
)
from millrate_api.config.settings import Settings
from millrate_api.domain.exceptions.base import DomainError

router = BaseRouter(
    version="v1",
    resource="municipalities/{municipality_id}/assessment-years",
    tags=["Assessment Years"],
)


def get_uow() -> UnitOfWork:
    """FastAPI dependency: return the assessing UnitOfWork."""
    return get_assessing_uow()


_UOW_DEP = Depends(get_uow)
_ACTOR_DEP = Depends(get_actor)
_SETTINGS_DEP = Depends(get_app_settings)

_CREATE_BODY: Any = Body(...)
_VISIBILITY_BODY: Any = Body(...)
_MILESTONES_BODY: Any = Body(...)

_P_YEAR: Any = Path(..., ge=2000, le=2099, description="Assessment year.")
_Q_INCLUDE_HIDDEN: Any = Query(default=False, description="Include hidden years (staff).")


@router.get(
    "",
    summary="List assessment years",
    response_model=cast(Any, SuccessEnvelope[list[AssessmentYearHTTP]]),
    responses=BaseRouter.std_error_responses(),
)
async def list_assessment_years(
    municipality_id: UUID,
    include_hidden: bool = _Q_INCLUDE_HIDDEN,
    uow: UnitOfWork = _UOW_DEP,
) -> SuccessEnvelope[list[AssessmentYearHTTP]]:
    """Return years newest first; hidden years only when requested."""
    years = await ListAssessmentYearsUseCase(uow=uow).execute(
        municipality_id=municipality_id, include_hidden=include_hidden
    )
    return SuccessEnvelope(data=[present_year(y) for y in years])


@router.get(
    "/active",
    summary="Get the active assessment year",
    description="The latest unlocked, visible year; `data` is null when none qualifies.",
    response_model=cast(Any, SuccessEnvelope[AssessmentYearHTTP | None]),
    responses=BaseRouter.std_error_responses(),
)
async def get_active_year(
    municipality_id: UUID,
    uow: UnitOfWork = _UOW_DEP,
) -> SuccessEnvelope[AssessmentYearHTTP | None]:
    """Return the active year."""
    year = await GetActiveYearUseCase(uow=uow).execute(municipality_id=municipality_id)
    return SuccessEnvelope(data=present_year(year) if year is not None else None)


@router.get(
    "/{year}/lock",
    summary="Get the lock state of a year",
    response_model=cast(Any, SuccessEnvelope[YearLockStateHTTP]),
    responses=BaseRouter.std_error_responses(),
)
async def get_lock_state(
    municipality_id: UUID,
    year: int = _P_YEAR,
    uow: UnitOfWork = _UOW_DEP,
) -> SuccessEnvelope[YearLockStateHTTP]:
    """Return whether configuration writes into ``year`` are blocked."""
    locked = await GetYearLockStateUseCase(uow=uow).execute(
        municipality_id=municipality_id, year=year
    )
    return SuccessEnvelope(data=YearLockStateHTTP(year=year, is_locked=locked))


@router.post(
    "",
    summary="Create an assessment year from a prior year",
    status_code=status.HTTP_201_CREATED,
    response_model=cast(Any, SuccessEnvelope[AssessmentYearHTTP]),
    responses=BaseRouter.std_error_responses(),
)
async def create_assessment_year(
    request: Request,
    municipality_id: UUID,
    body: CreateAssessmentYearRequestHTTP = _CREATE_BODY,
    uow: UnitOfWork = _UOW_DEP,
    actor: Actor = _ACTOR_DEP,
) -> SuccessEnvelope[AssessmentYearHTTP] | JSONResponse:
    """Create ``body.target_year`` hidden and unlocked, copying the source's totals."""
    try:
        year = await CreateYearFromPriorUseCase(uow=uow).execute(
            CreateYearFromPriorRequestDTO(
                municipality_id=municipality_id,
                source_year=body.source_year,
                target_year=body.target_year,
                actor=actor.actor_id,
            )
        )
    except DomainError as exc:
        return BaseRouter.domain_error(exc, BaseRouter.trace_id(request))
    return SuccessEnvelope(data=present_year(year))


@router.post(
    "/{year}/lock",
    summary="Lock an assessment year",
    response_model=cast(Any, SuccessEnvelope[AssessmentYearHTTP]),
    responses=BaseRouter.std_error_responses(),
)
async def lock_year(
    request: Request,
    municipality_id: UUID,
    year: int = _P_YEAR,
    uow: UnitOfWork = _UOW_DEP,
    actor: Actor = _ACTOR_DEP,
) -> SuccessEnvelope[AssessmentYearHTTP] | JSONResponse:
    """Lock ``year``; a missing year is created locked."""
    try:
        result = await LockYearUseCase(uow=uow).execute(
            YearLockRequestDTO(
                municipality_id=municipality_id, year=year, actor=actor.actor_id, role=actor.role
            )
        )
    except DomainError as exc:
        return BaseRouter.domain_error(exc, BaseRouter.trace_id(request))
    return SuccessEnvelope(data=present_year(result))


@router.post(
    "/{year}/unlock",
    summary="Unlock an assessment year (privileged)",
    description="Requires an `X-Actor-Role` listed in the configured unlock roles.",
    response_model=cast(Any, SuccessEnvelope[AssessmentYearHTTP]),
    responses=BaseRouter.std_error_responses(),
)
async def unlock_year(
    request: Request,
    municipality_id: UUID,
    year: int = _P_YEAR,
    uow: UnitOfWork = _UOW_DEP,
    actor: Actor = _ACTOR_DEP,
    settings: Settings = _SETTINGS_DEP,
) -> SuccessEnvelope[AssessmentYearHTTP] | JSONResponse:
    """Unlock ``year``."""
    use_case = UnlockYearUseCase(uow=uow, allowed_roles=settings.year_unlock_roles)
    try:
        result = await use_case.execute(
            YearLockRequestDTO(
                municipality_id=municipality_id, year=year, actor=actor.actor_id, role=actor.role
            )
        )
    except DomainError as exc:
        return BaseRouter.domain_error(exc, BaseRouter.trace_id(request))
    return SuccessEnvelope(data=present_year(result))


@router.patch(
    "/{year}/visibility",
    summary="Show or hide an assessment year",
    response_model=cast(Any, SuccessEnvelope[AssessmentYearHTTP]),
    responses=BaseRouter.std_error_responses(),
)
async def set_visibility(
    request: Request,
    municipality_id: UUID,
    year: int = _P_YEAR,
    body: VisibilityRequestHTTP = _VISIBILITY_BODY,
    uow: UnitOfWork = _UOW_DEP,
    actor: Actor = _ACTOR_DEP,
) -> SuccessEnvelope[AssessmentYearHTTP] | JSONResponse:
    """Set ``is_hidden`` on ``year``."""
    try:
        result = await SetYearVisibilityUseCase(uow=uow).execute(
            SetYearVisibilityRequestDTO(
                municipality_id=municipality_id,
                year=year,
                is_hidden=body.is_hidden,
                actor=actor.actor_id,
            )
        )
    except DomainError as exc:
        return BaseRouter.domain_error(exc, BaseRouter.trace_id(request))
    return SuccessEnvelope(data=present_year(result))


@router.patch(
    "/{year}/milestones",
    summary="Update tax milestones of an assessment year",
    response_model=cast(Any, SuccessEnvelope[AssessmentYearHTTP]),
    responses=BaseRouter.std_error_responses(),
)
async def update_milestones(
    request: Request,
    municipality_id: UUID,
    year: int = _P_YEAR,
    body: MilestonesRequestHTTP = _MILESTONES_BODY,
    uow: UnitOfWork = _UOW_DEP,
    actor: Actor = _ACTOR_DEP,
) -> SuccessEnvelope[AssessmentYearHTTP] | JSONResponse:
    """Set tax rate, warrant, billing or commitment milestones."""
    try:
        result = await UpdateMilestonesUseCase(uow=uow).execute(
            UpdateMilestonesRequestDTO(
                municipality_id=municipality_id,
                year=year,
                milestones=MilestoneUpdateDTO(
                    tax_rate=body.tax_rate,
                    warrant_created_at=body.warrant_created_at,
                    bills_generated_at=body.bills_generated_at,
                    commitment_date=body.commitment_date,
                ),
                actor=actor.actor_id,
            )
        )
    except DomainError as exc:
        return BaseRouter.domain_error(exc, BaseRouter.trace_id(request))
    return SuccessEnvelope(data=present_year(result))
