# src/millrate_api/application/use_cases/valuation/validate_calculations.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Use case: check cached land totals against fresh calculations."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from millrate_api.application.schemas.dto.valuation import (
    AssessmentDiscrepancyDTO,
    ValidateCalculationsRequestDTO,
    ValidationReportDTO,
)
from millrate_api.application.services.configuration_access import (
    land_assessment_repo,
    load_snapshot,
)
from millrate_api.application.uow import UnitOfWork
from millrate_api.domain.exceptions.assessing import ConfigurationValidationError
from millrate_api.domain.services.land_valuation import LandValuationCalculator
from millrate_api.domain.services.totals_comparison import compare_totals

logger = logging.getLogger(__name__)


class ValidateCalculationsUseCase:
    """Recalculate a random sample and report totals that drifted.

    Nothing is written; a field counts as a discrepancy when stored and
    fresh values differ by more than one unit.

    Args:
        uow: Application UnitOfWork.

    Returns:
        ValidationReportDTO listing sampled assessments with discrepancies.

    Raises:
        ConfigurationValidationError: If ``sample_size`` is not positive.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        """Initialize the use case."""
        self._uow = uow

    async def execute(self, req: ValidateCalculationsRequestDTO) -> ValidationReportDTO:
        """Run the validation.

        Args:
            req: Municipality, year and sample size.

        Returns:
            The validation report.
        """
        if req.sample_size < 1:
            raise ConfigurationValidationError(
                [{"field": "sample_size", "message": "must be >= 1"}]
            )

        async with self._uow as tx:
            sample = await land_assessment_repo(tx).sample_for_year(
                municipality_id=req.municipality_id, year=req.year, size=req.sample_size
            )
            calculator = LandValuationCalculator(
                await load_snapshot(tx, req.municipality_id, req.year)
            )

        found: list[AssessmentDiscrepancyDTO] = []
        for assessment in sample:
            fresh = calculator.calculate(assessment)
            diffs = compare_totals(assessment.calculated_totals, fresh.totals)
            if diffs:
                found.append(
                    AssessmentDiscrepancyDTO(
                        assessment_id=assessment.id,
                        property_id=assessment.property_id,
                        discrepancies=tuple(diffs),
                    )
                )

        report = ValidationReportDTO(
            year=req.year,
            sample_size=len(sample),
            discrepancies=tuple(found),
            validated_at=datetime.now(tz=UTC),
        )
        logger.info(
            "valuation.validated",
            extra={
                "extra": {
                    "municipality_id": str(req.municipality_id),
                    "year": req.year,
                    "sample_size": report.sample_size,
                    "with_discrepancies": report.properties_with_discrepancies,
                }
            },
        )
        return report
