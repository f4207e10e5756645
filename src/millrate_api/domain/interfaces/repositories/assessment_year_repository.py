# src/millrate_api/domain/interfaces/repositories/assessment_year_repository.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Assessment year repository interface."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol
from uuid import UUID

from millrate_api.domain.entities.assessment_year import AssessmentYear


class AssessmentYearRepository(Protocol):
    """Protocol for repositories managing assessment years."""

    async def get(self, *, municipality_id: UUID, year: int) -> AssessmentYear | None:
        """Return the assessment year, or None when it was never created."""

    async def list_years(self, *, municipality_id: UUID) -> Sequence[AssessmentYear]:
        """Return all years of a municipality, newest first."""

    async def add(self, year: AssessmentYear) -> AssessmentYear:
        """Insert a new year and return it with its persistence id.

        Raises:
            AssessmentYearExistsError: If (municipality, year) already exists.
        """

    async def update(self, year: AssessmentYear) -> AssessmentYear:
        """Overwrite the stored year.

        Raises:
            RecordNotFoundError: If the year does not exist.
        """
