# src/millrate_api/adapters/repositories/land_assessment_repository.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Land assessments repository (SQLAlchemy).

Purpose:
    Load land assessments together with their property's views and
    waterfronts for the same year, and persist calculation results.

Layer:
    adapters/repositories
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import asdict, fields
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from millrate_api.adapters.repositories.base_repository import BaseRepository
from millrate_api.domain.entities.land_assessment import (
    CalculatedTotals,
    LandAssessment,
    LandUseLine,
    PropertyView,
    PropertyWaterfront,
)
from millrate_api.domain.enums.assessing import SizeUnit
from millrate_api.domain.exceptions.assessing import RecordNotFoundError
from millrate_api.infrastructure.database.models.assessing import (
    LandAssessmentModel,
    PropertyViewModel,
    PropertyWaterfrontModel,
)

_LINE_FIELDS = frozenset(f.name for f in fields(LandUseLine))
_TOTALS_FIELDS = frozenset(f.name for f in fields(CalculatedTotals))


def line_to_json(line: LandUseLine) -> dict[str, Any]:
    """Serialize a land-use line for the JSONB column."""
    data = asdict(line)
    data["size_unit"] = line.size_unit.value
    return data


def line_from_json(data: dict[str, Any]) -> LandUseLine:
    """Deserialize a stored land-use line; unknown keys are ignored."""
    known = {k: v for k, v in data.items() if k in _LINE_FIELDS}
    known["size_unit"] = SizeUnit(known.get("size_unit") or SizeUnit.ACRES.value)
    return LandUseLine(**known)


def _totals_from_json(data: dict[str, Any] | None) -> CalculatedTotals | None:
    if data is None:
        return None
    return CalculatedTotals(**{k: v for k, v in data.items() if k in _TOTALS_FIELDS})


class LandAssessmentRepository(BaseRepository[LandAssessmentModel]):
    """SQLAlchemy-backed land assessment repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository."""
        super().__init__(session=session)

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    async def _hydrate(self, rows: Sequence[LandAssessmentModel]) -> list[LandAssessment]:
        """Map rows to entities, attaching views and waterfronts per property/year."""
        if not rows:
            return []
        keys = {(r.property_id, r.effective_year) for r in rows}
        property_ids = list({pid for pid, _ in keys})
        years = list({year for _, year in keys})

        views: dict[tuple[UUID, int], list[PropertyView]] = defaultdict(list)
        res = await self._session.execute(
            select(PropertyViewModel).where(
                PropertyViewModel.property_id.in_(property_ids),
                PropertyViewModel.effective_year.in_(years),
            )
        )
        for v in res.scalars().all():
            views[(v.property_id, v.effective_year)].append(
                PropertyView(calculated_value=v.calculated_value, current_use=v.current_use)
            )

        waterfronts: dict[tuple[UUID, int], list[PropertyWaterfront]] = defaultdict(list)
        res = await self._session.execute(
            select(PropertyWaterfrontModel).where(
                PropertyWaterfrontModel.property_id.in_(property_ids),
                PropertyWaterfrontModel.effective_year.in_(years),
            )
        )
        for w in res.scalars().all():
            waterfronts[(w.property_id, w.effective_year)].append(
                PropertyWaterfront(
                    calculated_value=w.calculated_value,
                    assessed_value=w.assessed_value,
                    current_use=w.current_use,
                )
            )

        return [
            LandAssessment(
                id=r.id,
                municipality_id=r.municipality_id,
                property_id=r.property_id,
                effective_year=r.effective_year,
                card_number=r.card_number,
                zone_code=r.zone_code,
                neighborhood_code=r.neighborhood_code,
                site_conditions=r.site_conditions,
                driveway_type=r.driveway_type,
                road_type=r.road_type,
                land_use_lines=tuple(line_from_json(d) for d in r.land_use_lines or []),
                views=tuple(views[(r.property_id, r.effective_year)]),
                waterfronts=tuple(waterfronts[(r.property_id, r.effective_year)]),
                calculated_totals=_totals_from_json(r.calculated_totals),
                last_calculated=r.last_calculated,
                previous_assessment_id=r.previous_assessment_id,
                change_reason=r.change_reason,
                updated_by=r.updated_by,
                extra={"notes": r.notes} if r.notes else {},
            )
            for r in rows
        ]

    @staticmethod
    def _year_query(municipality_id: UUID, year: int) -> Select[Any]:
        return select(LandAssessmentModel).where(
            LandAssessmentModel.municipality_id == municipality_id,
            LandAssessmentModel.effective_year == year,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get(self, *, municipality_id: UUID, assessment_id: UUID) -> LandAssessment | None:
        """Return one assessment by id within a municipality."""
        stmt = select(LandAssessmentModel).where(
            LandAssessmentModel.id == assessment_id,
            LandAssessmentModel.municipality_id == municipality_id,
        )
        row = await self.fetch_optional(stmt)
        if row is None:
            return None
        return (await self._hydrate([row]))[0]

    async def count_for_year(self, *, municipality_id: UUID, year: int) -> int:
        """Return how many assessments exist for ``year``."""
        stmt = select(func.count()).select_from(
            self._year_query(municipality_id, year).subquery()
        )
        res = await self._session.execute(stmt)
        return int(res.scalar_one())

    async def list_for_year(
        self,
        *,
        municipality_id: UUID,
        year: int,
        offset: int = 0,
        limit: int | None = None,
        zone_code: str | None = None,
        neighborhood_code: str | None = None,
        land_use_type: str | None = None,
    ) -> Sequence[LandAssessment]:
        """Return assessments of ``year`` ordered by property and card."""
        model = LandAssessmentModel
        stmt = self._year_query(municipality_id, year)
        if zone_code is not None:
            stmt = stmt.where(model.zone_code == zone_code)
        if neighborhood_code is not None:
            stmt = stmt.where(model.neighborhood_code == neighborhood_code)
        if land_use_type is not None:
            stmt = stmt.where(model.land_use_lines.contains([{"land_use_type": land_use_type}]))
        stmt = self.order_by_pk(stmt.order_by(model.property_id, model.card_number), model.id)
        stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return await self._hydrate(await self.fetch_all(stmt))

    async def sample_for_year(
        self, *, municipality_id: UUID, year: int, size: int
    ) -> Sequence[LandAssessment]:
        """Return up to ``size`` randomly chosen assessments of ``year``."""
        stmt = self._year_query(municipality_id, year).order_by(func.random()).limit(size)
        return await self._hydrate(await self.fetch_all(stmt))

    async def list_property_ids(self, *, municipality_id: UUID) -> Sequence[UUID]:
        """Return ids of every property with any land assessment."""
        stmt = (
            select(LandAssessmentModel.property_id)
            .where(LandAssessmentModel.municipality_id == municipality_id)
            .distinct()
            .order_by(LandAssessmentModel.property_id)
        )
        res = await self._session.execute(stmt)
        return list(res.scalars().all())

    async def list_property_ids_for_year(
        self, *, municipality_id: UUID, year: int
    ) -> Sequence[UUID]:
        """Return ids of properties with an assessment in ``year``."""
        stmt = (
            select(LandAssessmentModel.property_id)
            .where(
                LandAssessmentModel.municipality_id == municipality_id,
                LandAssessmentModel.effective_year == year,
            )
            .distinct()
        )
        res = await self._session.execute(stmt)
        return list(res.scalars().all())

    async def latest_before(
        self, *, municipality_id: UUID, property_id: UUID, year: int
    ) -> Sequence[LandAssessment]:
        """Return all cards of the property's most recent year before ``year``."""
        model = LandAssessmentModel
        latest = (
            select(func.max(model.effective_year))
            .where(
                model.municipality_id == municipality_id,
                model.property_id == property_id,
                model.effective_year < year,
            )
            .scalar_subquery()
        )
        stmt = (
            select(model)
            .where(
                model.municipality_id == municipality_id,
                model.property_id == property_id,
                model.effective_year == latest,
            )
            .order_by(model.card_number)
        )
        return await self._hydrate(await self.fetch_all(stmt))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def add(self, assessment: LandAssessment) -> None:
        """Insert a new assessment."""
        notes = assessment.extra.get("notes")
        row = LandAssessmentModel(
            id=assessment.id,
            municipality_id=assessment.municipality_id,
            property_id=assessment.property_id,
            card_number=assessment.card_number,
            effective_year=assessment.effective_year,
            zone_code=assessment.zone_code,
            neighborhood_code=assessment.neighborhood_code,
            site_conditions=assessment.site_conditions,
            driveway_type=assessment.driveway_type,
            road_type=assessment.road_type,
            land_use_lines=[line_to_json(line) for line in assessment.land_use_lines],
            calculated_totals=(
                asdict(assessment.calculated_totals) if assessment.calculated_totals else None
            ),
            last_calculated=assessment.last_calculated,
            previous_assessment_id=assessment.previous_assessment_id,
            change_reason=assessment.change_reason,
            notes=str(notes) if notes else None,
            created_by=assessment.updated_by,
            updated_by=assessment.updated_by,
        )
        self._session.add(row)
        await self._session.flush()

    async def save_calculation(
        self,
        *,
        assessment_id: UUID,
        totals: CalculatedTotals,
        calculated_at: datetime,
        lines: Sequence[LandUseLine] | None = None,
        updated_by: str | None = None,
    ) -> None:
        """Persist calculated totals, and the lines when given.

        Raises:
            RecordNotFoundError: If the assessment does not exist.
        """
        row = await self._session.get(LandAssessmentModel, assessment_id)
        if row is None:
            raise RecordNotFoundError(
                f"Land assessment {assessment_id} does not exist.",
                details={"assessment_id": str(assessment_id)},
            )
        row.calculated_totals = asdict(totals)
        row.last_calculated = calculated_at
        if lines is not None:
            row.land_use_lines = [line_to_json(line) for line in lines]
        if updated_by is not None:
            row.updated_by = updated_by
        row.updated_at = self.utc_now()
        await self._session.flush()
