# src/millrate_api/adapters/presenters/assessment_year_presenter.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Presenters for assessment-year HTTP responses."""

from __future__ import annotations

from dataclasses import asdict

from millrate_api.adapters.schemas.http.assessment_year_schemas import (
    AssessmentYearHTTP,
    CachedYearTotalsHTTP,
)
from millrate_api.domain.entities.assessment_year import AssessmentYear


def present_year(year: AssessmentYear) -> AssessmentYearHTTP:
    """Map an assessment year."""
    return AssessmentYearHTTP(
        year=year.year,
        is_locked=year.is_locked,
        is_hidden=year.is_hidden,
        source_year=year.source_year,
        cached_totals=CachedYearTotalsHTTP(**asdict(year.cached_totals)),
        created_by=year.created_by,
        tax_rate=year.tax_rate,
        warrant_created_at=year.warrant_created_at,
        bills_generated_at=year.bills_generated_at,
        commitment_date=year.commitment_date,
        last_recalculation_at=year.last_recalculation_at,
        last_recalculation_type=year.last_recalculation_type,
        last_recalculation_records_created=year.last_recalculation_records_created,
    )
