# src/millrate_api/application/use_cases/assessment_years/assessment_year_settings.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Assessment year visibility and milestone use cases."""

from __future__ import annotations

import logging
from dataclasses import replace

from millrate_api.application.schemas.dto.assessment_years import (
    SetYearVisibilityRequestDTO,
    UpdateMilestonesRequestDTO,
)
from millrate_api.application.services.configuration_access import (
    assessment_year_repo,
    require_year,
)
from millrate_api.application.uow import UnitOfWork
from millrate_api.domain.entities.assessment_year import AssessmentYear
from millrate_api.domain.exceptions.assessing import ConfigurationValidationError

logger = logging.getLogger(__name__)

_MILESTONE_FIELDS = ("tax_rate", "warrant_created_at", "bills_generated_at", "commitment_date")


class SetYearVisibilityUseCase:
    """Show or hide a year from public listings.

    Args:
        uow: Application UnitOfWork.

    Raises:
        RecordNotFoundError: If the year does not exist.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        """Initialize the use case."""
        self._uow = uow

    async def execute(self, req: SetYearVisibilityRequestDTO) -> AssessmentYear:
        """Apply the visibility flag.

        Args:
            req: Year and desired ``is_hidden``.

        Returns:
            The updated year.
        """
        async with self._uow as tx:
            stored = await require_year(tx, req.municipality_id, req.year)
            result = stored
            if stored.is_hidden != req.is_hidden:
                result = await assessment_year_repo(tx).update(
                    replace(stored, is_hidden=req.is_hidden)
                )
            await tx.commit()

        logger.info(
            "assessment_year.visibility_changed",
            extra={
                "extra": {
                    "municipality_id": str(req.municipality_id),
                    "year": req.year,
                    "is_hidden": req.is_hidden,
                    "actor": req.actor,
                }
            },
        )
        return result


class UpdateMilestonesUseCase:
    """Set tax rate and billing milestones of a year.

    Only the milestone fields can change; every other attribute of the year
    is left as stored.

    Args:
        uow: Application UnitOfWork.

    Raises:
        RecordNotFoundError: If the year does not exist.
        ConfigurationValidationError: If no milestone is provided or the tax
            rate is negative.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        """Initialize the use case."""
        self._uow = uow

    async def execute(self, req: UpdateMilestonesRequestDTO) -> AssessmentYear:
        """Apply the provided milestones.

        Args:
            req: Year and milestone changes.

        Returns:
            The updated year.
        """
        changes = {
            name: getattr(req.milestones, name)
            for name in _MILESTONE_FIELDS
            if getattr(req.milestones, name) is not None
        }
        if not changes:
            raise ConfigurationValidationError(
                [{"field": "milestones", "message": "at least one milestone is required"}]
            )
        tax_rate = changes.get("tax_rate")
        if tax_rate is not None and tax_rate < 0:
            raise ConfigurationValidationError([{"field": "tax_rate", "message": "must be >= 0"}])

        async with self._uow as tx:
            stored = await require_year(tx, req.municipality_id, req.year)
            result = await assessment_year_repo(tx).update(replace(stored, **changes))
            await tx.commit()

        logger.info(
            "assessment_year.milestones_updated",
            extra={
                "extra": {
                    "municipality_id": str(req.municipality_id),
                    "year": req.year,
                    "fields": sorted(changes),
                    "actor": req.actor,
                }
            },
        )
        return result
