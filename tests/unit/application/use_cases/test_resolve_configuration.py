# tests/unit/application/use_cases/test_resolve_configuration.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Unit tests for ResolveConfigurationUseCase."""

from __future__ import annotations

import logging
from uuid import UUID, uuid4

import pytest

from millrate_api.application.schemas.dto.configuration import ResolveConfigurationRequestDTO
from millrate_api.application.use_cases.configuration.resolve_configuration import (
    ResolveConfigurationUseCase,
)
from millrate_api.domain.entities.assessment_year import AssessmentYear
from millrate_api.domain.enums.assessing import ConfigurationKind
from tests.fixtures.builders import record
from tests.fixtures.in_memory_uow import InMemoryUnitOfWork

KIND = ConfigurationKind.ZONE


@pytest.mark.asyncio
async def test_returns_heads_of_requested_kind_with_lock_state(
    uow: InMemoryUnitOfWork, municipality_id: UUID
) -> None:
    old = record(
        KIND,
        2020,
        {"code": "R1", "name": "Old"},
        municipality_id=municipality_id,
        effective_year_end=2023,
    )
    new = record(KIND, 2023, {"code": "R1", "name": "New"}, municipality_id=municipality_id)
    nbhd = record(
        ConfigurationKind.NEIGHBORHOOD_CODE,
        2020,
        {"code": "N1", "description": "x", "factor": 100},
        municipality_id=municipality_id,
    )
    for r in (old, new, nbhd):
        uow.configuration.records[r.id] = r
    uow.years.years[(municipality_id, 2024)] = AssessmentYear(
        municipality_id=municipality_id, year=2024, is_locked=True
    )

    uc = ResolveConfigurationUseCase(uow=uow)
    out = await uc.execute(
        ResolveConfigurationRequestDTO(municipality_id=municipality_id, kind=KIND, year=2024)
    )

    assert out.records == (new,)
    assert out.is_locked is True
    assert out.fault_count == 0

    earlier = await uc.execute(
        ResolveConfigurationRequestDTO(municipality_id=municipality_id, kind=KIND, year=2021)
    )
    assert earlier.records == (old,)
    assert earlier.is_locked is False


@pytest.mark.asyncio
async def test_ties_are_counted_and_logged(
    uow: InMemoryUnitOfWork, municipality_id: UUID, caplog: pytest.LogCaptureFixture
) -> None:
    for name in ("A", "B"):
        r = record(KIND, 2024, {"code": "R1", "name": name}, municipality_id=municipality_id)
        uow.configuration.records[r.id] = r

    with caplog.at_level(logging.WARNING):
        out = await ResolveConfigurationUseCase(uow=uow).execute(
            ResolveConfigurationRequestDTO(municipality_id=municipality_id, kind=KIND, year=2024)
        )

    assert out.records == ()
    assert out.fault_count == 1
    assert any(r.getMessage() == "configuration.resolution_fault" for r in caplog.records)


@pytest.mark.asyncio
async def test_other_municipalities_are_invisible(
    uow: InMemoryUnitOfWork, municipality_id: UUID
) -> None:
    foreign = record(KIND, 2020, {"code": "R1", "name": "x"}, municipality_id=uuid4())
    uow.configuration.records[foreign.id] = foreign

    out = await ResolveConfigurationUseCase(uow=uow).execute(
        ResolveConfigurationRequestDTO(municipality_id=municipality_id, kind=KIND, year=2024)
    )

    assert out.records == ()
