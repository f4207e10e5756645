# src/millrate_api/application/use_cases/valuation/calculate_land_assessment.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Use case: calculate one land assessment.

Layer:
    application/use_cases/valuation
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from millrate_api.application.schemas.dto.valuation import (
    CalculateLandAssessmentRequestDTO,
    LandCalculationDTO,
)
from millrate_api.application.services.configuration_access import (
    land_assessment_repo,
    load_snapshot,
)
from millrate_api.application.uow import UnitOfWork
from millrate_api.domain.exceptions.assessing import RecordNotFoundError
from millrate_api.domain.services.land_valuation import LandValuationCalculator

logger = logging.getLogger(__name__)


class CalculateLandAssessmentUseCase:
    """Calculate and cache land values for a single assessment.

    Missing configuration never fails the calculation; it is reported in
    the result's warnings.

    Args:
        uow: Application UnitOfWork.

    Returns:
        LandCalculationDTO with lines, totals and warnings.

    Raises:
        RecordNotFoundError: If the assessment does not exist.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        """Initialize the use case."""
        self._uow = uow

    async def execute(self, req: CalculateLandAssessmentRequestDTO) -> LandCalculationDTO:
        """Run the calculation, saving lines and totals when requested.

        Args:
            req: Assessment id and save flag.

        Returns:
            The calculation result.
        """
        now = datetime.now(tz=UTC)
        async with self._uow as tx:
            repo = land_assessment_repo(tx)
            assessment = await repo.get(
                municipality_id=req.municipality_id, assessment_id=req.assessment_id
            )
            if assessment is None:
                raise RecordNotFoundError(
                    f"Land assessment {req.assessment_id} does not exist.",
                    details={"assessment_id": str(req.assessment_id)},
                )

            snapshot = await load_snapshot(tx, req.municipality_id, assessment.effective_year)
            result = LandValuationCalculator(snapshot).calculate(assessment)

            if req.save:
                await repo.save_calculation(
                    assessment_id=assessment.id,
                    totals=result.totals,
                    calculated_at=now,
                    lines=result.lines,
                    updated_by=req.actor,
                )
                await tx.commit()

        if result.warnings:
            logger.warning(
                "valuation.calculated_with_warnings",
                extra={
                    "extra": {
                        "assessment_id": str(assessment.id),
                        "warnings": [w.code for w in result.warnings],
                    }
                },
            )

        return LandCalculationDTO(
            assessment_id=assessment.id,
            effective_year=assessment.effective_year,
            lines=result.lines,
            totals=result.totals,
            warnings=result.warnings,
            saved=req.save,
            calculated_at=now,
        )
