# tests/fixtures/in_memory_uow.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""In-memory repositories and UnitOfWork for use-case and router tests."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime
from types import TracebackType
from typing import Any
from uuid import UUID, uuid4

from millrate_api.application.uow import UnitOfWork
from millrate_api.domain.entities.assessment_year import AssessmentYear
from millrate_api.domain.entities.configuration_record import ConfigurationRecord
from millrate_api.domain.entities.land_assessment import (
    CalculatedTotals,
    LandAssessment,
    LandUseLine,
)
from millrate_api.domain.enums.assessing import ConfigurationKind
from millrate_api.domain.exceptions.assessing import (
    AssessmentYearExistsError,
    DuplicateConfigurationError,
    RecordNotFoundError,
)
from millrate_api.domain.interfaces.repositories.assessment_year_repository import (
    AssessmentYearRepository,
)
from millrate_api.domain.interfaces.repositories.configuration_repository import (
    ConfigurationRepository,
)
from millrate_api.domain.interfaces.repositories.land_assessment_repository import (
    LandAssessmentRepository,
)


class InMemoryConfigurationRepository(ConfigurationRepository):  # type: ignore[misc]
    """Configuration records keyed by id."""

    def __init__(self) -> None:
        self.records: dict[UUID, ConfigurationRecord] = {}

    def _check_unique(self, record: ConfigurationRecord) -> None:
        if not record.is_active:
            return
        for other in self.records.values():
            if (
                other.id != record.id
                and other.is_active
                and other.municipality_id == record.municipality_id
                and other.kind is record.kind
                and other.effective_year == record.effective_year
                and other.business_key == record.business_key
            ):
                raise DuplicateConfigurationError(
                    record.kind.value, record.business_key, record.effective_year
                )

    async def get(
        self, *, municipality_id: UUID, record_id: UUID
    ) -> ConfigurationRecord | None:
        record = self.records.get(record_id)
        if record is None or record.municipality_id != municipality_id:
            return None
        return record

    async def list_candidates(
        self,
        *,
        municipality_id: UUID,
        year: int,
        kinds: Sequence[ConfigurationKind] | None = None,
    ) -> Sequence[ConfigurationRecord]:
        return [
            r
            for r in self.records.values()
            if r.municipality_id == municipality_id
            and r.is_active
            and r.effective_year <= year
            and (kinds is None or r.kind in kinds)
        ]

    async def list_for_years(
        self,
        *,
        municipality_id: UUID,
        kind: ConfigurationKind,
        years: Sequence[int],
    ) -> Sequence[ConfigurationRecord]:
        return [
            r
            for r in self.records.values()
            if r.municipality_id == municipality_id
            and r.kind is kind
            and r.is_active
            and r.effective_year in years
        ]

    async def list_versions(
        self, *, municipality_id: UUID, kind: ConfigurationKind
    ) -> Sequence[ConfigurationRecord]:
        rows = [
            r
            for r in self.records.values()
            if r.municipality_id == municipality_id and r.kind is kind and r.is_active
        ]
        return sorted(rows, key=lambda r: r.effective_year)

    async def add(self, record: ConfigurationRecord) -> None:
        self._check_unique(record)
        self.records[record.id] = record

    async def update(self, record: ConfigurationRecord) -> None:
        if record.id not in self.records:
            raise RecordNotFoundError(f"Configuration record {record.id} not found.")
        self._check_unique(record)
        self.records[record.id] = record


class InMemoryAssessmentYearRepository(AssessmentYearRepository):  # type: ignore[misc]
    """Assessment years keyed by (municipality, year)."""

    def __init__(self) -> None:
        self.years: dict[tuple[UUID, int], AssessmentYear] = {}

    async def get(self, *, municipality_id: UUID, year: int) -> AssessmentYear | None:
        return self.years.get((municipality_id, year))

    async def list_years(self, *, municipality_id: UUID) -> Sequence[AssessmentYear]:
        rows = [y for (mid, _), y in self.years.items() if mid == municipality_id]
        return sorted(rows, key=lambda y: y.year, reverse=True)

    async def add(self, year: AssessmentYear) -> AssessmentYear:
        key = (year.municipality_id, year.year)
        if key in self.years:
            raise AssessmentYearExistsError(year.year)
        stored = replace(year, id=year.id or uuid4())
        self.years[key] = stored
        return stored

    async def update(self, year: AssessmentYear) -> AssessmentYear:
        key = (year.municipality_id, year.year)
        if key not in self.years:
            raise RecordNotFoundError(f"Assessment year {year.year} not found.")
        self.years[key] = year
        return year


class InMemoryLandAssessmentRepository(LandAssessmentRepository):  # type: ignore[misc]
    """Land assessments keyed by id.

    Args:
        fail_saves_for: Assessment ids whose ``save_calculation`` raises.
    """

    def __init__(self, *, fail_saves_for: set[UUID] | None = None) -> None:
        self.assessments: dict[UUID, LandAssessment] = {}
        self.fail_saves_for = fail_saves_for or set()
        self.saved_lines: dict[UUID, bool] = {}

    def _for_year(self, municipality_id: UUID, year: int) -> list[LandAssessment]:
        rows = [
            a
            for a in self.assessments.values()
            if a.municipality_id == municipality_id and a.effective_year == year
        ]
        return sorted(rows, key=lambda a: (str(a.property_id), a.card_number))

    async def get(self, *, municipality_id: UUID, assessment_id: UUID) -> LandAssessment | None:
        found = self.assessments.get(assessment_id)
        if found is None or found.municipality_id != municipality_id:
            return None
        return found

    async def count_for_year(self, *, municipality_id: UUID, year: int) -> int:
        return len(self._for_year(municipality_id, year))

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
        rows = self._for_year(municipality_id, year)
        if zone_code is not None:
            rows = [a for a in rows if a.zone_code == zone_code]
        if neighborhood_code is not None:
            rows = [a for a in rows if a.neighborhood_code == neighborhood_code]
        if land_use_type is not None:
            rows = [
                a
                for a in rows
                if any(line.land_use_type == land_use_type for line in a.land_use_lines)
            ]
        end = None if limit is None else offset + limit
        return rows[offset:end]

    async def sample_for_year(
        self, *, municipality_id: UUID, year: int, size: int
    ) -> Sequence[LandAssessment]:
        return self._for_year(municipality_id, year)[:size]

    async def list_property_ids(self, *, municipality_id: UUID) -> Sequence[UUID]:
        seen: dict[UUID, None] = {}
        for a in self.assessments.values():
            if a.municipality_id == municipality_id:
                seen.setdefault(a.property_id, None)
        return list(seen)

    async def list_property_ids_for_year(
        self, *, municipality_id: UUID, year: int
    ) -> Sequence[UUID]:
        return list({a.property_id: None for a in self._for_year(municipality_id, year)})

    async def latest_before(
        self, *, municipality_id: UUID, property_id: UUID, year: int
    ) -> Sequence[LandAssessment]:
        earlier = [
            a
            for a in self.assessments.values()
            if a.municipality_id == municipality_id
            and a.property_id == property_id
            and a.effective_year < year
        ]
        if not earlier:
            return []
        latest = max(a.effective_year for a in earlier)
        return sorted(
            (a for a in earlier if a.effective_year == latest), key=lambda a: a.card_number
        )

    async def add(self, assessment: LandAssessment) -> None:
        self.assessments[assessment.id] = assessment

    async def save_calculation(
        self,
        *,
        assessment_id: UUID,
        totals: CalculatedTotals,
        calculated_at: datetime,
        lines: Sequence[LandUseLine] | None = None,
        updated_by: str | None = None,
    ) -> None:
        if assessment_id in self.fail_saves_for:
            raise RuntimeError("simulated write failure")
        current = self.assessments[assessment_id]
        self.saved_lines[assessment_id] = lines is not None
        self.assessments[assessment_id] = replace(
            current,
            calculated_totals=totals,
            last_calculated=calculated_at,
            land_use_lines=tuple(lines) if lines is not None else current.land_use_lines,
            updated_by=updated_by,
        )


class InMemoryUnitOfWork(UnitOfWork):  # type: ignore[misc]
    """Re-enterable UnitOfWork over the in-memory repositories.

    Writes are applied immediately; ``commits`` and ``rollbacks`` count calls
    so tests can assert transactional behavior.
    """

    def __init__(self) -> None:
        self.configuration = InMemoryConfigurationRepository()
        self.years = InMemoryAssessmentYearRepository()
        self.land = InMemoryLandAssessmentRepository()
        self.commits = 0
        self.rollbacks = 0

    async def __aenter__(self) -> InMemoryUnitOfWork:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()
        return None

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1

    def get_repository(self, repo_type: type[Any]) -> Any:
        mapping: dict[Any, Any] = {
            ConfigurationRepository: self.configuration,
            AssessmentYearRepository: self.years,
            LandAssessmentRepository: self.land,
        }
        if repo_type not in mapping:
            raise KeyError(f"No repository registered for {repo_type!r}")
        return mapping[repo_type]
