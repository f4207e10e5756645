# src/millrate_api/adapters/routers/configuration_router.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Year-versioned configuration HTTP router (v1).

Purpose:
    Expose resolution, history and copy-on-write writes of configuration:
        - GET    /v1/municipalities/{municipality_id}/configuration/{kind}
        - GET    /v1/municipalities/{municipality_id}/configuration/{kind}/{record_id}/history
        - POST   /v1/municipalities/{municipality_id}/configuration/{kind}
        - PUT    /v1/municipalities/{municipality_id}/configuration/{kind}/{record_id}
        - DELETE /v1/municipalities/{municipality_id}/configuration/{kind}/{record_id}

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Any, cast
from uuid import UUID

from fastapi import Body, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse

from millrate_api.adapters.dependencies.assessing_uow import Actor, get_actor, get_assessing_uow
from millrate_api.adapters.presenters.base_presenter import BasePresenter
from millrate_api.adapters.presenters.configuration_presenter import (
    present_history,
    present_resolved,
    present_write_result,
)
from millrate_api.adapters.routers.base_router import BaseRouter
from millrate_api.adapters.schemas.http.configuration_schemas import (
    ConfigurationHistoryHTTP,
    ConfigurationWriteResultHTTP,
    CreateConfigurationRequestHTTP,
    EditConfigurationRequestHTTP,
    ResolvedConfigurationHTTP,
)
from millrate_api.adapters.schemas.http.envelopes import SuccessEnvelope
from millrate_api.application.schemas.dto.configuration import (
    ConfigurationHistoryRequestDTO,
    CreateConfigurationRequestDTO,
    DeleteConfigurationRequestDTO,
    EditConfigurationRequestDTO,
    ResolveConfigurationRequestDTO,
)
from millrate_api.application.uow import UnitOfWork
from millrate_api.application.use_cases.configuration.create_configuration import (
    CreateConfigurationUseCase,
)
from millrate_api.application.use_cases.configuration.delete_configuration import (
    DeleteConfigurationUseCase,
)
from millrate_api.application.use_cases.configuration.edit_configuration import (
    EditConfigurationUseCase,
)
from millrate_api.application.use_cases.configuration.get_configuration_history import (
    GetConfigurationHistoryUseCase,
)
from millrate_api.application.use_cases.configuration.resolve_configuration import (
    ResolveConfigurationUseCase,
)
from millrate_api.domain.enums.assessing import ConfigurationKind, WriteOutcome
from millrate_api.domain.exceptions.base import DomainError

router = BaseRouter(
    version="v1",
    resource="municipalities/{municipality_id}/configuration",
    tags=["Configuration"],
)


def get_uow() -> UnitOfWork:
    """FastAPI dependency: return the assessing UnitOfWork."""
    return get_assessing_uow()


# ---------------------------------------------------------------------------
# FastAPI dependency / parameter singletons
# (Ruff B008: avoid Query()/Body() calls in argument defaults)
# ---------------------------------------------------------------------------

_UOW_DEP = Depends(get_uow)
_ACTOR_DEP = Depends(get_actor)

_CREATE_BODY: Any = Body(...)
_EDIT_BODY: Any = Body(...)

_Q_YEAR: Any = Query(..., ge=2000, le=2099, description="Assessment year being viewed.")

_PRESENTER = BasePresenter()


@router.get(
    "/{kind}",
    summary="Resolve configuration as of a year",
    description="Return one head per business key effective in the year, plus the lock state.",
    response_model=cast(Any, SuccessEnvelope[ResolvedConfigurationHTTP]),
    responses=BaseRouter.std_error_responses(),
)
async def resolve_configuration(
    request: Request,
    response: Response,
    municipality_id: UUID,
    kind: ConfigurationKind,
    year: int = _Q_YEAR,
    uow: UnitOfWork = _UOW_DEP,
) -> Any:
    """Resolve configuration of one kind."""
    trace_id = BaseRouter.trace_id(request)
    try:
        dto = await ResolveConfigurationUseCase(uow=uow).execute(
            ResolveConfigurationRequestDTO(municipality_id=municipality_id, kind=kind, year=year)
        )
    except DomainError as exc:
        return BaseRouter.domain_error(exc, trace_id)
    result = _PRESENTER.present_success(data=present_resolved(dto), trace_id=trace_id)
    return BaseRouter.send_success(response, result)


@router.get(
    "/{kind}/{record_id}/history",
    summary="Get the version history of a configuration item",
    response_model=cast(Any, SuccessEnvelope[ConfigurationHistoryHTTP]),
    responses=BaseRouter.std_error_responses(),
)
async def get_configuration_history(
    request: Request,
    municipality_id: UUID,
    kind: ConfigurationKind,
    record_id: UUID,
    year: int = _Q_YEAR,
    uow: UnitOfWork = _UOW_DEP,
) -> SuccessEnvelope[ConfigurationHistoryHTTP] | JSONResponse:
    """Return every version of the record's item, oldest first."""
    try:
        dto = await GetConfigurationHistoryUseCase(uow=uow).execute(
            ConfigurationHistoryRequestDTO(
                municipality_id=municipality_id,
                kind=kind,
                record_id=record_id,
                viewing_year=year,
            )
        )
    except DomainError as exc:
        return BaseRouter.domain_error(exc, BaseRouter.trace_id(request))
    return SuccessEnvelope(data=present_history(dto))


@router.post(
    "/{kind}",
    summary="Create a configuration record in a year",
    status_code=status.HTTP_201_CREATED,
    response_model=cast(Any, SuccessEnvelope[ConfigurationWriteResultHTTP]),
    responses=BaseRouter.std_error_responses(),
)
async def create_configuration(
    request: Request,
    municipality_id: UUID,
    kind: ConfigurationKind,
    body: CreateConfigurationRequestHTTP = _CREATE_BODY,
    uow: UnitOfWork = _UOW_DEP,
    actor: Actor = _ACTOR_DEP,
) -> SuccessEnvelope[ConfigurationWriteResultHTTP] | JSONResponse:
    """Create a record effective from ``body.year``."""
    try:
        dto = await CreateConfigurationUseCase(uow=uow).execute(
            CreateConfigurationRequestDTO(
                municipality_id=municipality_id,
                kind=kind,
                year=body.year,
                attributes=body.attributes,
                actor=actor.actor_id,
            )
        )
    except DomainError as exc:
        return BaseRouter.domain_error(exc, BaseRouter.trace_id(request))
    return SuccessEnvelope(data=present_write_result(dto))


@router.put(
    "/{kind}/{record_id}",
    summary="Edit a configuration record while viewing a year",
    description=(
        "Edits in place when the record starts in the viewing year. Otherwise the "
        "record is forked into the viewing year (201) or the existing version for "
        "that year is updated."
    ),
    response_model=cast(Any, SuccessEnvelope[ConfigurationWriteResultHTTP]),
    responses={
        201: {
            "model": SuccessEnvelope[ConfigurationWriteResultHTTP],
            "description": "Forked into the viewing year.",
        },
        **BaseRouter.std_error_responses(),
    },
)
async def edit_configuration(
    request: Request,
    response: Response,
    municipality_id: UUID,
    kind: ConfigurationKind,
    record_id: UUID,
    year: int = _Q_YEAR,
    body: EditConfigurationRequestHTTP = _EDIT_BODY,
    uow: UnitOfWork = _UOW_DEP,
    actor: Actor = _ACTOR_DEP,
) -> SuccessEnvelope[ConfigurationWriteResultHTTP] | JSONResponse:
    """Apply ``body.changes`` through the copy-on-write resolver."""
    try:
        dto = await EditConfigurationUseCase(uow=uow).execute(
            EditConfigurationRequestDTO(
                municipality_id=municipality_id,
                kind=kind,
                record_id=record_id,
                target_year=year,
                changes=body.changes,
                actor=actor.actor_id,
            )
        )
    except DomainError as exc:
        return BaseRouter.domain_error(exc, BaseRouter.trace_id(request))
    if dto.outcome is WriteOutcome.COPY_ON_WRITE:
        response.status_code = status.HTTP_201_CREATED
    return SuccessEnvelope(data=present_write_result(dto))


@router.delete(
    "/{kind}/{record_id}",
    summary="Delete a configuration record while viewing a year",
    description=(
        "Soft-deletes a record that starts in the viewing year; otherwise ends its "
        "effectiveness at the viewing year so earlier years keep seeing it."
    ),
    response_model=cast(Any, SuccessEnvelope[ConfigurationWriteResultHTTP]),
    responses=BaseRouter.std_error_responses(),
)
async def delete_configuration(
    request: Request,
    municipality_id: UUID,
    kind: ConfigurationKind,
    record_id: UUID,
    year: int = _Q_YEAR,
    uow: UnitOfWork = _UOW_DEP,
    actor: Actor = _ACTOR_DEP,
) -> SuccessEnvelope[ConfigurationWriteResultHTTP] | JSONResponse:
    """Delete through the copy-on-write resolver."""
    try:
        dto = await DeleteConfigurationUseCase(uow=uow).execute(
            DeleteConfigurationRequestDTO(
                municipality_id=municipality_id,
                kind=kind,
                record_id=record_id,
                target_year=year,
                actor=actor.actor_id,
            )
        )
    except DomainError as exc:
        return BaseRouter.domain_error(exc, BaseRouter.trace_id(request))
    return SuccessEnvelope(data=present_write_result(dto))
