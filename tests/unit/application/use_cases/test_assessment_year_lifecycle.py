# tests/unit/application/use_cases/test_assessment_year_lifecycle.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Unit tests for year creation, lock and unlock use cases."""

from __future__ import annotations

from uuid import UUID

import pytest

from millrate_api.application.schemas.dto.assessment_years import (
    CreateYearFromPriorRequestDTO,
    YearLockRequestDTO,
)
from millrate_api.application.use_cases.assessment_years.assessment_year_lifecycle import (
    CreateYearFromPriorUseCase,
    LockYearUseCase,
    UnlockYearUseCase,
)
from millrate_api.domain.entities.assessment_year import AssessmentYear
from millrate_api.domain.exceptions.assessing import (
    AssessmentYearExistsError,
    ConfigurationValidationError,
    RecordNotFoundError,
    UnlockNotPermittedError,
)
from tests.fixtures.in_memory_uow import InMemoryUnitOfWork

ROLES = ("assessor_admin",)


def _create(mid: UUID, source: int, target: int) -> CreateYearFromPriorRequestDTO:
    return CreateYearFromPriorRequestDTO(
        municipality_id=mid, source_year=source, target_year=target, actor="admin"
    )


@pytest.mark.asyncio
async def test_create_from_prior_locks_source_and_adds_hidden_target(
    uow: InMemoryUnitOfWork, municipality_id: UUID
) -> None:
    await uow.years.add(AssessmentYear(municipality_id=municipality_id, year=2024, is_hidden=False))

    target = await CreateYearFromPriorUseCase(uow=uow).execute(
        _create(municipality_id, 2024, 2025)
    )

    assert target.year == 2025
    assert target.is_locked is False
    assert target.is_hidden is True
    assert target.source_year == 2024
    assert target.created_by == "admin"
    source = await uow.years.get(municipality_id=municipality_id, year=2024)
    assert source is not None and source.is_locked
    assert uow.commits == 1


@pytest.mark.asyncio
async def test_create_from_never_stored_source_creates_it_locked(
    uow: InMemoryUnitOfWork, municipality_id: UUID
) -> None:
    await CreateYearFromPriorUseCase(uow=uow).execute(_create(municipality_id, 2023, 2024))

    source = await uow.years.get(municipality_id=municipality_id, year=2023)
    assert source is not None and source.is_locked


@pytest.mark.asyncio
async def test_create_rejects_existing_target_and_backwards_years(
    uow: InMemoryUnitOfWork, municipality_id: UUID
) -> None:
    uc = CreateYearFromPriorUseCase(uow=uow)
    await uc.execute(_create(municipality_id, 2024, 2025))

    with pytest.raises(AssessmentYearExistsError):
        await uc.execute(_create(municipality_id, 2024, 2025))
    with pytest.raises(ConfigurationValidationError):
        await uc.execute(_create(municipality_id, 2025, 2025))


@pytest.mark.asyncio
async def test_lock_creates_missing_year_and_is_idempotent(
    uow: InMemoryUnitOfWork, municipality_id: UUID
) -> None:
    uc = LockYearUseCase(uow=uow)
    req = YearLockRequestDTO(municipality_id=municipality_id, year=2024, actor="admin")

    first = await uc.execute(req)
    second = await uc.execute(req)

    assert first.is_locked and second.is_locked
    assert len(await uow.years.list_years(municipality_id=municipality_id)) == 1


@pytest.mark.asyncio
async def test_unlock_requires_allowed_role(
    uow: InMemoryUnitOfWork, municipality_id: UUID
) -> None:
    await uow.years.add(AssessmentYear(municipality_id=municipality_id, year=2024, is_locked=True))
    uc = UnlockYearUseCase(uow=uow, allowed_roles=ROLES)

    with pytest.raises(UnlockNotPermittedError):
        await uc.execute(
            YearLockRequestDTO(municipality_id=municipality_id, year=2024, role="clerk")
        )

    unlocked = await uc.execute(
        YearLockRequestDTO(municipality_id=municipality_id, year=2024, role="Assessor_Admin")
    )
    assert unlocked.is_locked is False


@pytest.mark.asyncio
async def test_unlock_checks_permission_before_existence(
    uow: InMemoryUnitOfWork, municipality_id: UUID
) -> None:
    uc = UnlockYearUseCase(uow=uow, allowed_roles=ROLES)

    with pytest.raises(UnlockNotPermittedError):
        await uc.execute(YearLockRequestDTO(municipality_id=municipality_id, year=2030))
    with pytest.raises(RecordNotFoundError):
        await uc.execute(
            YearLockRequestDTO(municipality_id=municipality_id, year=2030, role="assessor_admin")
        )
