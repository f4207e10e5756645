# tests/unit/application/use_cases/test_calculate_land_assessment.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Unit tests for CalculateLandAssessmentUseCase."""

from __future__ import annotations

from uuid import UUID, uuid4

import pytest

from millrate_api.application.schemas.dto.valuation import CalculateLandAssessmentRequestDTO
from millrate_api.application.use_cases.valuation.calculate_land_assessment import (
    CalculateLandAssessmentUseCase,
)
from millrate_api.domain.entities.land_assessment import LandUseLine
from millrate_api.domain.exceptions.assessing import RecordNotFoundError
from tests.fixtures.builders import assessment, valuation_records
from tests.fixtures.in_memory_uow import InMemoryUnitOfWork


def _seed_config(uow: InMemoryUnitOfWork, mid: UUID, year: int = 2024) -> None:
    for rec in valuation_records(mid, year):
        uow.configuration.records[rec.id] = rec


@pytest.mark.asyncio
async def test_calculates_and_saves_lines_and_totals(
    uow: InMemoryUnitOfWork, municipality_id: UUID
) -> None:
    _seed_config(uow, municipality_id)
    parcel = assessment(municipality_id, LandUseLine(size=3.0))
    await uow.land.add(parcel)

    out = await CalculateLandAssessmentUseCase(uow=uow).execute(
        CalculateLandAssessmentRequestDTO(
            municipality_id=municipality_id, assessment_id=parcel.id, actor="assessor"
        )
    )

    assert out.saved is True
    assert out.totals.total_market_value == 70000
    assert out.warnings == ()
    stored = uow.land.assessments[parcel.id]
    assert stored.calculated_totals == out.totals
    assert stored.land_use_lines[0].market_value == 70000
    assert stored.last_calculated == out.calculated_at
    assert stored.updated_by == "assessor"
    assert uow.commits == 1


@pytest.mark.asyncio
async def test_preview_does_not_save(uow: InMemoryUnitOfWork, municipality_id: UUID) -> None:
    _seed_config(uow, municipality_id)
    parcel = assessment(municipality_id, LandUseLine(size=3.0))
    await uow.land.add(parcel)

    out = await CalculateLandAssessmentUseCase(uow=uow).execute(
        CalculateLandAssessmentRequestDTO(
            municipality_id=municipality_id, assessment_id=parcel.id, save=False
        )
    )

    assert out.saved is False
    assert uow.land.assessments[parcel.id].calculated_totals is None
    assert uow.commits == 0


@pytest.mark.asyncio
async def test_configuration_of_the_assessment_year_is_used(
    uow: InMemoryUnitOfWork, municipality_id: UUID
) -> None:
    _seed_config(uow, municipality_id, year=2025)
    parcel = assessment(municipality_id, LandUseLine(size=3.0), year=2024)
    await uow.land.add(parcel)

    out = await CalculateLandAssessmentUseCase(uow=uow).execute(
        CalculateLandAssessmentRequestDTO(
            municipality_id=municipality_id, assessment_id=parcel.id, save=False
        )
    )

    assert [w.code for w in out.warnings] == ["ZONE_NOT_FOUND"]
    assert out.totals.total_market_value == 0


@pytest.mark.asyncio
async def test_unknown_assessment(uow: InMemoryUnitOfWork, municipality_id: UUID) -> None:
    with pytest.raises(RecordNotFoundError):
        await CalculateLandAssessmentUseCase(uow=uow).execute(
            CalculateLandAssessmentRequestDTO(
                municipality_id=municipality_id, assessment_id=uuid4()
            )
        )
