# src/millrate_api/adapters/repositories/assessment_year_repository.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Assessment years repository (SQLAlchemy)."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from millrate_api.adapters.repositories.base_repository import BaseRepository
from millrate_api.domain.entities.assessment_year import AssessmentYear, CachedYearTotals
from millrate_api.domain.exceptions.assessing import (
    AssessmentYearExistsError,
    RecordNotFoundError,
)
from millrate_api.infrastructure.database.models.assessing import AssessmentYearModel


def _totals_to_json(totals: CachedYearTotals) -> dict[str, Any]:
    data = asdict(totals)
    if totals.last_calculated is not None:
        data["last_calculated"] = totals.last_calculated.isoformat()
    return data


def _totals_from_json(data: dict[str, Any] | None) -> CachedYearTotals:
    data = dict(data or {})
    raw = data.pop("last_calculated", None)
    known = {k: v for k, v in data.items() if k in CachedYearTotals.__dataclass_fields__}
    return CachedYearTotals(
        **known, last_calculated=datetime.fromisoformat(raw) if raw else None
    )


def _to_domain(row: AssessmentYearModel) -> AssessmentYear:
    return AssessmentYear(
        id=row.id,
        municipality_id=row.municipality_id,
        year=row.year,
        is_locked=row.is_locked,
        is_hidden=row.is_hidden,
        source_year=row.source_year,
        cached_totals=_totals_from_json(row.cached_totals),
        created_by=row.created_by,
        tax_rate=row.tax_rate,
        warrant_created_at=row.warrant_created_at,
        bills_generated_at=row.bills_generated_at,
        commitment_date=row.commitment_date,
        last_recalculation_at=row.last_recalculation_at,
        last_recalculation_type=row.last_recalculation_type,
        last_recalculation_records_created=row.last_recalculation_records_created,
    )


def _apply(row: AssessmentYearModel, year: AssessmentYear) -> None:
    row.is_locked = year.is_locked
    row.is_hidden = year.is_hidden
    row.source_year = year.source_year
    row.cached_totals = _totals_to_json(year.cached_totals)
    row.tax_rate = year.tax_rate
    row.warrant_created_at = year.warrant_created_at
    row.bills_generated_at = year.bills_generated_at
    row.commitment_date = year.commitment_date
    row.last_recalculation_at = year.last_recalculation_at
    row.last_recalculation_type = year.last_recalculation_type
    row.last_recalculation_records_created = year.last_recalculation_records_created


class AssessmentYearRepository(BaseRepository[AssessmentYearModel]):
    """SQLAlchemy-backed assessment year repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository."""
        super().__init__(session=session)

    async def _row(self, municipality_id: UUID, year: int) -> AssessmentYearModel | None:
        stmt = select(AssessmentYearModel).where(
            AssessmentYearModel.municipality_id == municipality_id,
            AssessmentYearModel.year == year,
        )
        return await self.fetch_optional(stmt)

    async def get(self, *, municipality_id: UUID, year: int) -> AssessmentYear | None:
        """Return the assessment year, or None when it was never created."""
        row = await self._row(municipality_id, year)
        return _to_domain(row) if row is not None else None

    async def list_years(self, *, municipality_id: UUID) -> Sequence[AssessmentYear]:
        """Return all years of a municipality, newest first."""
        stmt = (
            select(AssessmentYearModel)
            .where(AssessmentYearModel.municipality_id == municipality_id)
            .order_by(AssessmentYearModel.year.desc())
        )
        return [_to_domain(r) for r in await self.fetch_all(stmt)]

    async def add(self, year: AssessmentYear) -> AssessmentYear:
        """Insert a new year.

        Raises:
            AssessmentYearExistsError: If (municipality, year) already exists.
        """
        row = AssessmentYearModel(
            id=year.id or uuid4(),
            municipality_id=year.municipality_id,
            year=year.year,
            created_by=year.created_by,
            updated_by=year.created_by,
        )
        _apply(row, year)
        self._session.add(row)
        await self.flush_or_raise(lambda exc: AssessmentYearExistsError(year.year))
        return _to_domain(row)

    async def update(self, year: AssessmentYear) -> AssessmentYear:
        """Overwrite the stored year.

        Raises:
            RecordNotFoundError: If the year does not exist.
        """
        row = await self._row(year.municipality_id, year.year)
        if row is None:
            raise RecordNotFoundError(
                f"Assessment year {year.year} does not exist.", details={"year": year.year}
            )
        _apply(row, year)
        row.updated_at = self.utc_now()
        await self._session.flush()
        return _to_domain(row)
