# tests/unit/application/use_cases/test_assessment_year_queries.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Unit tests for assessment year read use cases."""

from __future__ import annotations

from uuid import UUID

import pytest

from millrate_api.application.use_cases.assessment_years.assessment_year_queries import (
    GetActiveYearUseCase,
    GetYearLockStateUseCase,
    ListAssessmentYearsUseCase,
)
from millrate_api.domain.entities.assessment_year import AssessmentYear
from tests.fixtures.in_memory_uow import InMemoryUnitOfWork


async def _seed(uow: InMemoryUnitOfWork, mid: UUID) -> None:
    for year, locked, hidden in (
        (2022, True, False),
        (2023, False, False),
        (2024, False, False),
        (2025, False, True),
    ):
        await uow.years.add(
            AssessmentYear(municipality_id=mid, year=year, is_locked=locked, is_hidden=hidden)
        )


@pytest.mark.asyncio
async def test_list_hides_hidden_years_unless_requested(
    uow: InMemoryUnitOfWork, municipality_id: UUID
) -> None:
    await _seed(uow, municipality_id)
    uc = ListAssessmentYearsUseCase(uow=uow)

    public = await uc.execute(municipality_id=municipality_id)
    staff = await uc.execute(municipality_id=municipality_id, include_hidden=True)

    assert [y.year for y in public] == [2024, 2023, 2022]
    assert [y.year for y in staff] == [2025, 2024, 2023, 2022]


@pytest.mark.asyncio
async def test_active_year_is_latest_unlocked_visible_year(
    uow: InMemoryUnitOfWork, municipality_id: UUID
) -> None:
    uc = GetActiveYearUseCase(uow=uow)
    assert await uc.execute(municipality_id=municipality_id) is None

    await _seed(uow, municipality_id)
    active = await uc.execute(municipality_id=municipality_id)

    assert active is not None and active.year == 2024


@pytest.mark.asyncio
async def test_lock_state(uow: InMemoryUnitOfWork, municipality_id: UUID) -> None:
    await _seed(uow, municipality_id)
    uc = GetYearLockStateUseCase(uow=uow)

    assert await uc.execute(municipality_id=municipality_id, year=2022) is True
    assert await uc.execute(municipality_id=municipality_id, year=2024) is False
    assert await uc.execute(municipality_id=municipality_id, year=2040) is False
