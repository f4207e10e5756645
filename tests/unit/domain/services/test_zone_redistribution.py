# tests/unit/domain/services/test_zone_redistribution.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Unit tests for zone minimum-acreage redistribution."""

from __future__ import annotations

import pytest

from millrate_api.domain.entities.land_assessment import LandUseLine
from millrate_api.domain.entities.valuation_inputs import ZoneSettings
from millrate_api.domain.enums.assessing import SizeUnit
from millrate_api.domain.services.zone_redistribution import redistribute_zone_minimum

ZONE = ZoneSettings(code="R1", minimum_acreage=2.0)


def test_oversized_line_is_clamped_and_excess_line_created() -> None:
    line = LandUseLine(size=5.0, land_use_type="FARM", topography="Rolling", market_value=900)

    result = redistribute_zone_minimum([line], ZONE)

    assert result.adjusted and result.excess_acreage_created
    clamped, excess = result.lines
    assert clamped.size == 2.0
    assert clamped.market_value == 0
    assert excess.is_excess_acreage
    assert excess.size == pytest.approx(3.0)
    assert excess.land_use_type == "FARM"
    assert excess.topography == "Rolling"
    assert excess.condition == 100
    assert excess.notes == "Excess acreage from zone minimum adjustment (3.00 AC)"
    assert [a.kind for a in result.adjustments] == ["clamped", "excess_acreage_created"]
    assert sum(x.size for x in result.lines) == pytest.approx(5.0)


def test_excess_is_added_to_existing_excess_line() -> None:
    lines = [
        LandUseLine(size=3.5),
        LandUseLine(size=4.0, is_excess_acreage=True),
        LandUseLine(size=1.0),
    ]

    result = redistribute_zone_minimum(lines, ZONE)

    assert not result.excess_acreage_created
    assert [x.size for x in result.lines] == [2.0, 5.5, 1.0]
    assert [a.kind for a in result.adjustments] == ["clamped", "excess_acreage_updated"]
    assert result.adjustments[-1].line_index == 1


def test_created_excess_line_uses_defaults_when_contributor_has_none() -> None:
    result = redistribute_zone_minimum([LandUseLine(size=2.5)], ZONE)

    excess = result.lines[-1]
    assert excess.land_use_type == "RES"
    assert excess.topography == "Level"


def test_frontage_and_small_lines_are_untouched() -> None:
    lines = [LandUseLine(size=300.0, size_unit=SizeUnit.FRONT_FEET), LandUseLine(size=1.5)]

    result = redistribute_zone_minimum(lines, ZONE)

    assert not result.adjusted
    assert result.lines == tuple(lines)


@pytest.mark.parametrize("zone", [None, ZoneSettings(code="R2", minimum_acreage=0.0)])
def test_no_zone_or_zero_minimum_leaves_lines(zone: ZoneSettings | None) -> None:
    lines = [LandUseLine(size=9.0)]

    result = redistribute_zone_minimum(lines, zone)

    assert not result.adjusted
    assert result.lines == (lines[0],)
