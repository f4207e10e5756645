# src/millrate_api/domain/interfaces/repositories/land_assessment_repository.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Land assessment repository interface.

Purpose:
    Persistence operations for land assessments, their land-use lines and
    the property views/waterfronts that feed totals.

Layer:
    domain/interfaces/repositories

Notes:
    Returned assessments carry ``views`` and ``waterfronts`` populated for
    their property, so the calculator needs no further lookups.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol
from uuid import UUID

from millrate_api.domain.entities.land_assessment import (
    CalculatedTotals,
    LandAssessment,
    LandUseLine,
)


class LandAssessmentRepository(Protocol):
    """Protocol for repositories managing land assessments."""

    async def get(self, *, municipality_id: UUID, assessment_id: UUID) -> LandAssessment | None:
        """Return one assessment by id within a municipality."""

    async def count_for_year(self, *, municipality_id: UUID, year: int) -> int:
        """Return how many assessments exist for ``year``."""

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
        """Return assessments of ``year`` in a stable order (property, card).

        Args:
            municipality_id: Owning tenant.
            year: Assessment year.
            offset: Rows to skip.
            limit: Maximum rows; unlimited when None.
            zone_code: Only assessments in this zone.
            neighborhood_code: Only assessments in this neighborhood.
            land_use_type: Only assessments with a line of this land use type.
        """

    async def sample_for_year(
        self, *, municipality_id: UUID, year: int, size: int
    ) -> Sequence[LandAssessment]:
        """Return up to ``size`` randomly chosen assessments of ``year``."""

    async def list_property_ids(self, *, municipality_id: UUID) -> Sequence[UUID]:
        """Return ids of every property with any land assessment."""

    async def list_property_ids_for_year(
        self, *, municipality_id: UUID, year: int
    ) -> Sequence[UUID]:
        """Return ids of properties with an assessment in ``year``."""

    async def latest_before(
        self, *, municipality_id: UUID, property_id: UUID, year: int
    ) -> Sequence[LandAssessment]:
        """Return all cards of the property's most recent year before ``year``."""

    async def add(self, assessment: LandAssessment) -> None:
        """Insert a new assessment."""

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

        Args:
            assessment_id: Assessment to update.
            totals: Calculated totals to cache.
            calculated_at: Calculation timestamp stored as ``last_calculated``.
            lines: Replacement land-use lines, or None to keep stored lines.
            updated_by: Actor of the change.
        """
