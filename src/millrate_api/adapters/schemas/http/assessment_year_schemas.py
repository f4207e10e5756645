# src/millrate_api/adapters/schemas/http/assessment_year_schemas.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""HTTP schemas for assessment years.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import Field, model_validator

from millrate_api.adapters.schemas.http.base import BaseHTTPSchema

__all__ = [
    "AssessmentYearHTTP",
    "CachedYearTotalsHTTP",
    "CreateAssessmentYearRequestHTTP",
    "MilestonesRequestHTTP",
    "VisibilityRequestHTTP",
    "YearLockStateHTTP",
]


class CachedYearTotalsHTTP(BaseHTTPSchema):
    """Denormalized year rollups."""

    total_land_value: int = 0
    total_building_value: int = 0
    total_improvements_value: int = 0
    total_assessed_value: int = 0
    total_exemptions_value: int = 0
    total_taxable_value: int = 0
    parcel_count: int = 0
    last_calculated: datetime | None = None


class AssessmentYearHTTP(BaseHTTPSchema):
    """A municipality's assessment year."""

    year: int
    is_locked: bool
    is_hidden: bool
    source_year: int | None = None
    cached_totals: CachedYearTotalsHTTP = Field(default_factory=CachedYearTotalsHTTP)
    created_by: str | None = None
    tax_rate: Decimal | None = None
    warrant_created_at: datetime | None = None
    bills_generated_at: datetime | None = None
    commitment_date: date | None = None
    last_recalculation_at: datetime | None = None
    last_recalculation_type: str | None = None
    last_recalculation_records_created: int = 0


class CreateAssessmentYearRequestHTTP(BaseHTTPSchema):
    """Create ``target_year`` from ``source_year``."""

    source_year: int = Field(..., ge=2000, le=2099)
    target_year: int = Field(..., ge=2000, le=2099)


class YearLockStateHTTP(BaseHTTPSchema):
    """Lock state of a year."""

    year: int
    is_locked: bool


class VisibilityRequestHTTP(BaseHTTPSchema):
    """Show or hide a year."""

    is_hidden: bool


class MilestonesRequestHTTP(BaseHTTPSchema):
    """Milestone fields to change; omitted fields are left unchanged."""

    tax_rate: Decimal | None = Field(default=None, ge=0)
    warrant_created_at: datetime | None = None
    bills_generated_at: datetime | None = None
    commitment_date: date | None = None

    @model_validator(mode="after")
    def _require_one(self) -> MilestonesRequestHTTP:
        if all(
            v is None
            for v in (
                self.tax_rate,
                self.warrant_created_at,
                self.bills_generated_at,
                self.commitment_date,
            )
        ):
            raise ValueError("at least one milestone must be provided")
        return self
