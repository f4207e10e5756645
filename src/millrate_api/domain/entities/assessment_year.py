# src/millrate_api/domain/entities/assessment_year.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Assessment year entities.

Purpose:
    Represent a municipality's assessment year: its lock and visibility
    state, provenance, cached municipality-wide totals, and tax milestones.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

__all__ = ["AssessmentYear", "CachedYearTotals", "MIN_ASSESSMENT_YEAR", "MAX_ASSESSMENT_YEAR"]

MIN_ASSESSMENT_YEAR = 2000
MAX_ASSESSMENT_YEAR = 2099


@dataclass(frozen=True, slots=True)
class CachedYearTotals:
    """Denormalized municipality-wide rollups for one assessment year.

    Attributes:
        total_land_value: Sum of land assessed values.
        total_building_value: Sum of building values.
        total_improvements_value: Sum of improvement values.
        total_assessed_value: Sum of all assessed values.
        total_exemptions_value: Sum of exemptions.
        total_taxable_value: Assessed minus exemptions.
        parcel_count: Number of parcels rolled up.
        last_calculated: When the rollup was produced.
    """

    total_land_value: int = 0
    total_building_value: int = 0
    total_improvements_value: int = 0
    total_assessed_value: int = 0
    total_exemptions_value: int = 0
    total_taxable_value: int = 0
    parcel_count: int = 0
    last_calculated: datetime | None = None

    def __post_init__(self) -> None:
        """Reject negative parcel counts."""
        if self.parcel_count < 0:
            raise ValueError("parcel_count must be >= 0")


@dataclass(frozen=True, slots=True)
class AssessmentYear:
    """A municipality's assessment year.

    Attributes:
        municipality_id:
            Owning tenant.
        year:
            Calendar year (2000-2099).
        is_locked:
            Blocks configuration writes into this year.
        is_hidden:
            Hides the year from public (non-staff) listings.
        source_year:
            Year this one was created from, if any.
        cached_totals:
            Denormalized rollups for reporting.
        created_by:
            Actor that created the year.
        tax_rate:
            Tax rate per thousand, once set.
        warrant_created_at:
            Warrant milestone timestamp.
        bills_generated_at:
            Billing milestone timestamp.
        commitment_date:
            Commitment milestone date.
        last_recalculation_at:
            When the last batch recalculation ran for this year.
        last_recalculation_type:
            Kind of the last batch recalculation.
        last_recalculation_records_created:
            Assessments created by the last year-ensure run.
        id:
            Persistence identifier, when stored.
    """

    municipality_id: UUID
    year: int
    is_locked: bool = False
    is_hidden: bool = True
    source_year: int | None = None
    cached_totals: CachedYearTotals = field(default_factory=CachedYearTotals)
    created_by: str | None = None
    tax_rate: Decimal | None = None
    warrant_created_at: datetime | None = None
    bills_generated_at: datetime | None = None
    commitment_date: date | None = None
    last_recalculation_at: datetime | None = None
    last_recalculation_type: str | None = None
    last_recalculation_records_created: int = 0
    id: UUID | None = None

    def __post_init__(self) -> None:
        """Enforce the supported year range.

        Raises:
            ValueError: If ``year`` is outside 2000-2099.
        """
        if not MIN_ASSESSMENT_YEAR <= self.year <= MAX_ASSESSMENT_YEAR:
            raise ValueError(
                f"year must be between {MIN_ASSESSMENT_YEAR} and {MAX_ASSESSMENT_YEAR}"
            )

    @property
    def is_visible(self) -> bool:
        """True when the year is shown to the public."""
        return not self.is_hidden
