# src/millrate_api/application/schemas/dto/valuation.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Application DTOs for valuation flows.

Purpose:
    Requests and responses of single calculation, batch recalculation,
    year-ensure, validation and sketch area use cases.

Layer:
    application/schemas/dto
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from millrate_api.domain.entities.land_assessment import CalculatedTotals, LandUseLine
from millrate_api.domain.entities.recalculation import RecalculationOptions
from millrate_api.domain.entities.sketch import SketchShape
from millrate_api.domain.entities.valuation_results import ValuationWarning
from millrate_api.domain.enums.assessing import AffectedChangeType
from millrate_api.domain.services.totals_comparison import TotalsDiscrepancy


@dataclass(frozen=True, slots=True)
class CalculateLandAssessmentRequestDTO:
    """Calculate (and optionally save) one land assessment."""

    municipality_id: UUID
    assessment_id: UUID
    save: bool = True
    actor: str | None = None


@dataclass(frozen=True, slots=True)
class LandCalculationDTO:
    """Result of a single land calculation.

    Attributes:
        assessment_id: Assessment calculated.
        effective_year: Its year.
        lines: Calculated land-use lines.
        totals: Calculated totals.
        warnings: Configuration gaps found.
        saved: Whether the result was persisted.
        calculated_at: Calculation timestamp.
    """

    assessment_id: UUID
    effective_year: int
    lines: tuple[LandUseLine, ...]
    totals: CalculatedTotals
    warnings: tuple[ValuationWarning, ...]
    saved: bool
    calculated_at: datetime


@dataclass(frozen=True, slots=True)
class RecalculateRequestDTO:
    """Recalculate every land assessment of a year."""

    municipality_id: UUID
    year: int
    options: RecalculationOptions = field(default_factory=RecalculationOptions)
    actor: str | None = None


@dataclass(frozen=True, slots=True)
class RecalculateAffectedRequestDTO:
    """Recalculate assessments affected by a reference-data change.

    Attributes:
        municipality_id: Owning tenant.
        year: Assessment year.
        change_type: What changed.
        change_key: Business key of the changed item (zone code,
            neighborhood code or current-use category code).
        actor: Actor triggering the run.
    """

    municipality_id: UUID
    year: int
    change_type: AffectedChangeType
    change_key: str | None = None
    actor: str | None = None


@dataclass(frozen=True, slots=True)
class EnsureYearRequestDTO:
    """Copy each property's latest prior assessment into ``year``."""

    municipality_id: UUID
    year: int
    actor: str | None = None


@dataclass(frozen=True, slots=True)
class ValidateCalculationsRequestDTO:
    """Compare cached totals with fresh calculations on a sample."""

    municipality_id: UUID
    year: int
    sample_size: int = 50


@dataclass(frozen=True, slots=True)
class AssessmentDiscrepancyDTO:
    """Discrepancies found for one assessment."""

    assessment_id: UUID
    property_id: UUID
    discrepancies: tuple[TotalsDiscrepancy, ...]


@dataclass(frozen=True, slots=True)
class ValidationReportDTO:
    """Result of a validation run."""

    year: int
    sample_size: int
    discrepancies: tuple[AssessmentDiscrepancyDTO, ...]
    validated_at: datetime

    @property
    def properties_with_discrepancies(self) -> int:
        """Number of sampled assessments that disagree."""
        return len(self.discrepancies)


@dataclass(frozen=True, slots=True)
class SketchAreaRequestDTO:
    """Calculate effective area for a sketch in a year."""

    municipality_id: UUID
    year: int
    shapes: tuple[SketchShape, ...]
