# tests/unit/domain/services/test_totals_comparison.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Unit tests for stored vs recalculated totals comparison."""

from __future__ import annotations

from millrate_api.domain.entities.land_assessment import CalculatedTotals
from millrate_api.domain.services.totals_comparison import compare_totals


def test_differences_within_tolerance_are_ignored() -> None:
    stored = CalculatedTotals(land_market_value=1000, total_market_value=1000)
    calculated = CalculatedTotals(land_market_value=1001, total_market_value=1000)

    assert compare_totals(stored, calculated) == []


def test_reports_fields_beyond_tolerance() -> None:
    stored = CalculatedTotals(land_market_value=1000, has_current_use_land=True)
    calculated = CalculatedTotals(land_market_value=1500)

    (diff,) = compare_totals(stored, calculated)

    assert diff.field == "land_market_value"
    assert diff.stored == 1000.0
    assert diff.calculated == 1500.0
    assert diff.difference == 500.0


def test_missing_stored_totals_compare_as_zero() -> None:
    diffs = compare_totals(None, CalculatedTotals(total_acreage=3.0, total_market_value=10))

    assert {d.field for d in diffs} == {"total_acreage", "total_market_value"}
