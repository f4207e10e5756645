# tests/unit/application/use_cases/test_assessment_year_settings.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Unit tests for year visibility and milestone use cases."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest

from millrate_api.application.schemas.dto.assessment_years import (
    MilestoneUpdateDTO,
    SetYearVisibilityRequestDTO,
    UpdateMilestonesRequestDTO,
)
from millrate_api.application.use_cases.assessment_years.assessment_year_settings import (
    SetYearVisibilityUseCase,
    UpdateMilestonesUseCase,
)
from millrate_api.domain.entities.assessment_year import AssessmentYear
from millrate_api.domain.exceptions.assessing import (
    ConfigurationValidationError,
    RecordNotFoundError,
)
from tests.fixtures.in_memory_uow import InMemoryUnitOfWork


@pytest.mark.asyncio
async def test_visibility_toggle(uow: InMemoryUnitOfWork, municipality_id: UUID) -> None:
    await uow.years.add(AssessmentYear(municipality_id=municipality_id, year=2025))

    shown = await SetYearVisibilityUseCase(uow=uow).execute(
        SetYearVisibilityRequestDTO(municipality_id=municipality_id, year=2025, is_hidden=False)
    )

    assert shown.is_visible
    stored = await uow.years.get(municipality_id=municipality_id, year=2025)
    assert stored is not None and stored.is_hidden is False


@pytest.mark.asyncio
async def test_visibility_of_missing_year(uow: InMemoryUnitOfWork, municipality_id: UUID) -> None:
    with pytest.raises(RecordNotFoundError):
        await SetYearVisibilityUseCase(uow=uow).execute(
            SetYearVisibilityRequestDTO(municipality_id=municipality_id, year=2025, is_hidden=True)
        )


@pytest.mark.asyncio
async def test_milestones_update_only_given_fields(
    uow: InMemoryUnitOfWork, municipality_id: UUID
) -> None:
    await uow.years.add(
        AssessmentYear(municipality_id=municipality_id, year=2024, is_locked=True)
    )

    out = await UpdateMilestonesUseCase(uow=uow).execute(
        UpdateMilestonesRequestDTO(
            municipality_id=municipality_id,
            year=2024,
            milestones=MilestoneUpdateDTO(
                tax_rate=Decimal("18.25"), commitment_date=date(2024, 9, 1)
            ),
        )
    )

    assert out.tax_rate == Decimal("18.25")
    assert out.commitment_date == date(2024, 9, 1)
    assert out.warrant_created_at is None
    assert out.is_locked is True


@pytest.mark.asyncio
async def test_milestones_validation(uow: InMemoryUnitOfWork, municipality_id: UUID) -> None:
    uc = UpdateMilestonesUseCase(uow=uow)

    with pytest.raises(ConfigurationValidationError):
        await uc.execute(
            UpdateMilestonesRequestDTO(
                municipality_id=municipality_id, year=2024, milestones=MilestoneUpdateDTO()
            )
        )
    with pytest.raises(ConfigurationValidationError) as exc:
        await uc.execute(
            UpdateMilestonesRequestDTO(
                municipality_id=municipality_id,
                year=2024,
                milestones=MilestoneUpdateDTO(tax_rate=Decimal("-1")),
            )
        )
    assert exc.value.errors == [{"field": "tax_rate", "message": "must be >= 0"}]

    with pytest.raises(RecordNotFoundError):
        await uc.execute(
            UpdateMilestonesRequestDTO(
                municipality_id=municipality_id,
                year=2024,
                milestones=MilestoneUpdateDTO(tax_rate=Decimal("1")),
            )
        )
