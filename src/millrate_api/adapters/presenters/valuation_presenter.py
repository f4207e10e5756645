# src/millrate_api/adapters/presenters/valuation_presenter.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Presenters for valuation HTTP responses.

Purpose:
    Map calculation results, batch summaries, validation reports and sketch
    areas to HTTP schemas.

Layer:
    adapters/presenters
"""

from __future__ import annotations

from dataclasses import asdict

from millrate_api.adapters.schemas.http.valuation_schemas import (
    AssessmentDiscrepancyHTTP,
    CalculatedTotalsHTTP,
    LandCalculationHTTP,
    LandUseLineHTTP,
    RecalculationErrorDetailHTTP,
    RecalculationSummaryHTTP,
    SketchAreaHTTP,
    TotalsDiscrepancyHTTP,
    ValidationReportHTTP,
    ValuationWarningHTTP,
)
from millrate_api.application.schemas.dto.valuation import LandCalculationDTO, ValidationReportDTO
from millrate_api.domain.entities.recalculation import RecalculationSummary
from millrate_api.domain.entities.sketch import SketchAreaResult


def present_calculation(dto: LandCalculationDTO) -> LandCalculationHTTP:
    """Map a single land calculation."""
    return LandCalculationHTTP(
        assessment_id=dto.assessment_id,
        effective_year=dto.effective_year,
        lines=[LandUseLineHTTP(**asdict(line)) for line in dto.lines],
        totals=CalculatedTotalsHTTP(**asdict(dto.totals)),
        warnings=[
            ValuationWarningHTTP(
                code=w.code,
                message=w.message,
                details=dict(w.details),
                zeroed_value=w.zeroed_value,
            )
            for w in dto.warnings
        ],
        saved=dto.saved,
        calculated_at=dto.calculated_at,
    )


def present_summary(summary: RecalculationSummary) -> RecalculationSummaryHTTP:
    """Map a batch summary."""
    return RecalculationSummaryHTTP(
        processed=summary.processed,
        updated=summary.updated,
        errors=summary.errors,
        error_details=[
            RecalculationErrorDetailHTTP(
                assessment_id=d.assessment_id,
                property_id=d.property_id,
                error=d.error,
                code=d.code,
                details=dict(d.details),
            )
            for d in summary.error_details
        ],
        zones_adjusted=summary.zones_adjusted,
        records_created=summary.records_created,
    )


def present_validation(dto: ValidationReportDTO) -> ValidationReportHTTP:
    """Map a validation report."""
    return ValidationReportHTTP(
        year=dto.year,
        sample_size=dto.sample_size,
        properties_with_discrepancies=dto.properties_with_discrepancies,
        discrepancies=[
            AssessmentDiscrepancyHTTP(
                assessment_id=d.assessment_id,
                property_id=d.property_id,
                discrepancies=[TotalsDiscrepancyHTTP(**asdict(x)) for x in d.discrepancies],
            )
            for d in dto.discrepancies
        ],
        validated_at=dto.validated_at,
    )


def present_sketch_area(result: SketchAreaResult) -> SketchAreaHTTP:
    """Map a sketch area result."""
    return SketchAreaHTTP.model_validate(
        {
            "shapes": [asdict(s) for s in result.shapes],
            "total_area": result.total_area,
            "total_effective_area": result.total_effective_area,
            "gross_living_area": result.gross_living_area,
            "description_totals": {k: asdict(v) for k, v in result.description_totals.items()},
            "unknown_labels": list(result.unknown_labels),
        }
    )
