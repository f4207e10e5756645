# src/millrate_api/adapters/schemas/http/valuation_schemas.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""HTTP schemas for land valuation, batch recalculation and sketches.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from millrate_api.adapters.schemas.http.base import BaseHTTPSchema
from millrate_api.domain.enums.assessing import AffectedChangeType, SizeUnit

__all__ = [
    "AssessmentDiscrepancyHTTP",
    "CalculateLandAssessmentRequestHTTP",
    "CalculatedTotalsHTTP",
    "DescriptionAreaHTTP",
    "DescriptionTotalHTTP",
    "EnsureYearRequestHTTP",
    "LandCalculationHTTP",
    "LandUseLineHTTP",
    "RecalculateAffectedRequestHTTP",
    "RecalculateRequestHTTP",
    "RecalculationErrorDetailHTTP",
    "RecalculationSummaryHTTP",
    "ShapeAreaHTTP",
    "SketchAreaHTTP",
    "SketchAreaRequestHTTP",
    "SketchShapeHTTP",
    "TotalsDiscrepancyHTTP",
    "ValidationReportHTTP",
    "ValuationWarningHTTP",
]


# ---------------------------------------------------------------------------
# Single calculation
# ---------------------------------------------------------------------------


class CalculateLandAssessmentRequestHTTP(BaseHTTPSchema):
    """Body of a single calculation."""

    save: bool = Field(default=True, description="Persist lines and totals.")


class LandUseLineHTTP(BaseHTTPSchema):
    """A land-use line with its calculated values."""

    size: float
    size_unit: SizeUnit
    land_use_type: str | None = None
    is_excess_acreage: bool = False
    topography: str | None = None
    condition: float | None = None
    spi: float | None = None
    notes: str | None = None
    base_rate: float = 0.0
    base_value: float = 0.0
    neighborhood_factor: float = 0.0
    economy_of_scale_factor: float = 0.0
    site_factor: float = 0.0
    driveway_factor: float = 0.0
    road_factor: float = 0.0
    topography_factor: float = 0.0
    condition_factor: float = 0.0
    market_value: int = 0
    current_use_value: int = 0
    current_use_credit: int = 0
    assessed_value: int = 0


class CalculatedTotalsHTTP(BaseHTTPSchema):
    """Parcel-level land totals."""

    total_acreage: float = 0.0
    total_frontage: float = 0.0
    land_market_value: int = 0
    land_current_use_value: int = 0
    land_current_use_credit: int = 0
    land_assessed_value: int = 0
    view_market_value: int = 0
    view_assessed_value: int = 0
    waterfront_market_value: int = 0
    waterfront_assessed_value: int = 0
    total_market_value: int = 0
    total_current_use_value: int = 0
    total_current_use_credit: int = 0
    total_assessed_value: int = 0
    has_current_use_land: bool = False


class ValuationWarningHTTP(BaseHTTPSchema):
    """A configuration gap found during calculation."""

    code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
    zeroed_value: bool = False


class LandCalculationHTTP(BaseHTTPSchema):
    """Result of a single calculation."""

    assessment_id: UUID
    effective_year: int
    lines: list[LandUseLineHTTP]
    totals: CalculatedTotalsHTTP
    warnings: list[ValuationWarningHTTP]
    saved: bool
    calculated_at: datetime


# ---------------------------------------------------------------------------
# Batch runs
# ---------------------------------------------------------------------------


class RecalculateRequestHTTP(BaseHTTPSchema):
    """Body of a full or zone-adjustment recalculation."""

    year: int = Field(..., ge=2000, le=2099)
    batch_size: int | None = Field(default=None, ge=1, le=5000)
    force_clear_values: bool = False
    save: bool = True


class RecalculateAffectedRequestHTTP(BaseHTTPSchema):
    """Body of an affected-only recalculation."""

    year: int = Field(..., ge=2000, le=2099)
    change_type: AffectedChangeType
    change_key: str | None = Field(default=None, max_length=255)


class EnsureYearRequestHTTP(BaseHTTPSchema):
    """Body of a year-ensure run."""

    year: int = Field(..., ge=2000, le=2099)


class RecalculationErrorDetailHTTP(BaseHTTPSchema):
    """One failure or zeroed-value warning."""

    assessment_id: UUID
    property_id: UUID | None = None
    error: str
    code: str
    details: dict[str, Any] = Field(default_factory=dict)


class RecalculationSummaryHTTP(BaseHTTPSchema):
    """Partial-success summary of a batch run."""

    processed: int
    updated: int
    errors: int
    error_details: list[RecalculationErrorDetailHTTP]
    zones_adjusted: int = 0
    records_created: int = 0


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TotalsDiscrepancyHTTP(BaseHTTPSchema):
    """A totals field whose cached value disagrees with a fresh calculation."""

    field: str
    stored: float
    calculated: float
    difference: float


class AssessmentDiscrepancyHTTP(BaseHTTPSchema):
    """Discrepancies of one sampled assessment."""

    assessment_id: UUID
    property_id: UUID
    discrepancies: list[TotalsDiscrepancyHTTP]


class ValidationReportHTTP(BaseHTTPSchema):
    """Result of a validation run."""

    year: int
    sample_size: int
    properties_with_discrepancies: int
    discrepancies: list[AssessmentDiscrepancyHTTP]
    validated_at: datetime


# ---------------------------------------------------------------------------
# Sketches
# ---------------------------------------------------------------------------


class SketchShapeHTTP(BaseHTTPSchema):
    """A drawn shape with its sub-area labels."""

    area: float = Field(..., ge=0)
    descriptions: list[str] = Field(default_factory=list)


class SketchAreaRequestHTTP(BaseHTTPSchema):
    """Body of a sketch effective-area calculation."""

    year: int = Field(..., ge=2000, le=2099)
    shapes: list[SketchShapeHTTP] = Field(default_factory=list)


class DescriptionAreaHTTP(BaseHTTPSchema):
    """Effective area of one label on one shape."""

    label: str
    points: float
    effective_area: int
    living_space: bool = False


class ShapeAreaHTTP(BaseHTTPSchema):
    """Per-shape result."""

    area: float
    effective_area: int
    descriptions: list[DescriptionAreaHTTP]


class DescriptionTotalHTTP(BaseHTTPSchema):
    """Totals of one label across shapes."""

    label: str
    area: float
    effective_area: int
    living_space: bool = False


class SketchAreaHTTP(BaseHTTPSchema):
    """Sketch-level totals."""

    shapes: list[ShapeAreaHTTP]
    total_area: float
    total_effective_area: int
    gross_living_area: float
    description_totals: dict[str, DescriptionTotalHTTP]
    unknown_labels: list[str]
