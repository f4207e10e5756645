# src/millrate_api/application/use_cases/assessment_years/assessment_year_queries.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Read-only assessment year use cases."""

from __future__ import annotations

from uuid import UUID

from millrate_api.application.services.configuration_access import (
    assessment_year_repo,
    is_year_locked,
)
from millrate_api.application.uow import UnitOfWork
from millrate_api.domain.entities.assessment_year import AssessmentYear


class ListAssessmentYearsUseCase:
    """List a municipality's years, newest first.

    Args:
        uow: Application UnitOfWork.

    Returns:
        Visible years, or every year when ``include_hidden`` is set (staff).
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        """Initialize the use case."""
        self._uow = uow

    async def execute(
        self, *, municipality_id: UUID, include_hidden: bool = False
    ) -> list[AssessmentYear]:
        """Return the listing."""
        async with self._uow as tx:
            years = await assessment_year_repo(tx).list_years(municipality_id=municipality_id)
        ordered = sorted(years, key=lambda y: y.year, reverse=True)
        return [y for y in ordered if include_hidden or not y.is_hidden]


class GetActiveYearUseCase:
    """Return the latest unlocked, visible year.

    Args:
        uow: Application UnitOfWork.

    Returns:
        The active year, or None when no year qualifies.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        """Initialize the use case."""
        self._uow = uow

    async def execute(self, *, municipality_id: UUID) -> AssessmentYear | None:
        """Return the active year."""
        async with self._uow as tx:
            years = await assessment_year_repo(tx).list_years(municipality_id=municipality_id)
        candidates = [y for y in years if not y.is_locked and not y.is_hidden]
        return max(candidates, key=lambda y: y.year, default=None)


class GetYearLockStateUseCase:
    """Report whether a year is locked.

    Args:
        uow: Application UnitOfWork.

    Returns:
        True when locked; a year never created is unlocked.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        """Initialize the use case."""
        self._uow = uow

    async def execute(self, *, municipality_id: UUID, year: int) -> bool:
        """Return the lock state."""
        async with self._uow as tx:
            return await is_year_locked(tx, municipality_id, year)
