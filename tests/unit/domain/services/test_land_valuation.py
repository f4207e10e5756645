# tests/unit/domain/services/test_land_valuation.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Unit tests for the land valuation calculator.

Zone R1 ladder: 1 AC -> 50,000 and 5 AC -> 90,000, so a 3 AC line has a
base value of 70,000.
"""

from __future__ import annotations

from uuid import UUID, uuid4

import pytest

from millrate_api.domain.entities.land_assessment import (
    LandUseLine,
    PropertyView,
    PropertyWaterfront,
)
from millrate_api.domain.enums.assessing import ConfigurationKind, SizeUnit
from millrate_api.domain.services.land_valuation import LandValuationCalculator, calculate_totals
from tests.fixtures.builders import ZONE_R1, assessment, record, snapshot, valuation_records


@pytest.fixture
def mid() -> UUID:
    return uuid4()


def _calculator(mid: UUID, *extra: object) -> LandValuationCalculator:
    records = valuation_records(mid) + list(extra)  # type: ignore[arg-type]
    return LandValuationCalculator(snapshot(mid, records))


def test_acreage_line_uses_interpolated_ladder_value(mid: UUID) -> None:
    result = _calculator(mid).calculate(assessment(mid, LandUseLine(size=3.0)))

    (line,) = result.lines
    assert line.base_value == 70000
    assert line.base_rate == pytest.approx(70000 / 3)
    assert line.market_value == 70000
    assert line.assessed_value == 70000
    assert line.neighborhood_factor == 1.0
    assert result.warnings == ()
    assert result.totals.land_market_value == 70000
    assert result.totals.total_acreage == 3.0
    assert result.totals.total_assessed_value == 70000


def test_neighborhood_factor_scales_market_value(mid: UUID) -> None:
    nbhd = record(
        ConfigurationKind.NEIGHBORHOOD_CODE,
        2024,
        {"code": "N1", "description": "Lakeside", "factor": 110.0},
        municipality_id=mid,
    )
    calc = _calculator(mid, nbhd)

    result = calc.calculate(assessment(mid, LandUseLine(size=3.0), neighborhood_code="n1"))

    assert result.lines[0].neighborhood_factor == pytest.approx(1.1)
    assert result.lines[0].market_value == 77000


def test_missing_neighborhood_warns_and_uses_neutral_factor(mid: UUID) -> None:
    result = _calculator(mid).calculate(
        assessment(mid, LandUseLine(size=3.0), neighborhood_code="ZZ")
    )

    assert result.lines[0].market_value == 70000
    (warning,) = result.warnings
    assert warning.code == "NEIGHBORHOOD_NOT_FOUND"
    assert not warning.zeroed_value


def test_topography_and_condition_factors_apply(mid: UUID) -> None:
    steep = record(
        ConfigurationKind.LAND_ATTRIBUTE,
        2024,
        {"attribute_type": "topography", "display_text": "Steep", "rate": 80.0},
        municipality_id=mid,
    )
    calc = _calculator(mid, steep)

    result = calc.calculate(
        assessment(
            mid,
            LandUseLine(size=3.0, topography="steep"),
            LandUseLine(size=3.0, condition=50),
            LandUseLine(size=3.0, condition=0),
        )
    )

    assert [line.market_value for line in result.lines] == [56000, 35000, 70000]
    assert result.lines[0].topography_factor == pytest.approx(0.8)
    assert result.lines[1].condition_factor == 0.5
    assert result.lines[2].condition_factor == 1.0


def test_missing_land_attribute_is_warned_once(mid: UUID) -> None:
    result = _calculator(mid).calculate(
        assessment(
            mid,
            LandUseLine(size=3.0, topography="Cliff"),
            LandUseLine(size=2.0, topography="cliff"),
        )
    )

    codes = [w.code for w in result.warnings]
    assert codes == ["LAND_ATTRIBUTE_NOT_FOUND"]
    assert all(line.topography_factor == 1.0 for line in result.lines)


def test_current_use_line_is_assessed_at_current_use_value(mid: UUID) -> None:
    farm = record(
        ConfigurationKind.CURRENT_USE_CATEGORY,
        2024,
        {"code": "FARM", "description": "Farmland", "min_rate": 100.0, "max_rate": 300.0},
        municipality_id=mid,
    )
    calc = _calculator(mid, farm)

    result = calc.calculate(
        assessment(
            mid,
            LandUseLine(size=3.0, land_use_type="farm"),
            LandUseLine(size=3.0, land_use_type="FARM", spi=100),
        )
    )

    default_spi, full_spi = result.lines
    assert default_spi.current_use_value == 600
    assert default_spi.current_use_credit == 70000 - 600
    assert default_spi.assessed_value == 600
    assert full_spi.current_use_value == 900
    totals = result.totals
    assert totals.has_current_use_land
    assert totals.land_market_value == 140000
    assert totals.land_current_use_value == 1500
    assert totals.land_assessed_value == 1500
    assert totals.total_current_use_credit == 140000 - 1500


def test_frontage_line_uses_first_tier_frontage_rate(mid: UUID) -> None:
    result = _calculator(mid).calculate(
        assessment(mid, LandUseLine(size=50.0, size_unit=SizeUnit.FRONT_FEET))
    )

    (line,) = result.lines
    assert line.base_rate == 100.0
    assert line.market_value == 5000
    assert result.totals.total_frontage == 50.0
    assert result.totals.total_acreage == 0.0


def test_excess_acreage_uses_zone_rate_and_acreage_discount(mid: UUID) -> None:
    excess = LandUseLine(size=20.0, is_excess_acreage=True)

    plain = _calculator(mid).calculate(assessment(mid, excess))
    assert plain.lines[0].base_rate == ZONE_R1["excess_land_cost_per_acre"]
    assert plain.lines[0].market_value == 20000

    discount = record(
        ConfigurationKind.ACREAGE_DISCOUNT_SETTINGS,
        2024,
        {
            "minimum_qualifying_acreage": 10.0,
            "maximum_qualifying_acreage": 200.0,
            "maximum_discount_percentage": 75.0,
        },
        municipality_id=mid,
    )
    discounted = _calculator(mid, discount).calculate(assessment(mid, excess))

    (line,) = discounted.lines
    assert line.economy_of_scale_factor == 3.95
    assert line.base_value == 19210
    assert line.market_value == 19200


def test_discount_percentage_is_reported_on_ladder_lines(mid: UUID) -> None:
    discount = record(
        ConfigurationKind.ACREAGE_DISCOUNT_SETTINGS,
        2024,
        {"minimum_qualifying_acreage": 10.0, "maximum_qualifying_acreage": 200.0},
        municipality_id=mid,
    )

    result = _calculator(mid, discount).calculate(assessment(mid, LandUseLine(size=20.0)))

    (line,) = result.lines
    assert line.economy_of_scale_factor == 3.95
    # Ladder land is not discounted; 20 AC clamps to the 5 AC tier.
    assert line.base_value == 90000
    assert line.market_value == 90000


def test_ladder_order_field_does_not_affect_interpolation(mid: UUID) -> None:
    zone = record(ConfigurationKind.ZONE, 2024, ZONE_R1, municipality_id=mid)
    tiers = [
        record(
            ConfigurationKind.LAND_LADDER_TIER,
            2024,
            {
                "zone_code": "R1",
                "acreage": 5.0,
                "value": 90000.0,
                "order": 1,
                "frontage_rate": 120.0,
            },
            municipality_id=mid,
        ),
        record(
            ConfigurationKind.LAND_LADDER_TIER,
            2024,
            {"zone_code": "R1", "acreage": 1.0, "value": 50000.0, "order": 2},
            municipality_id=mid,
        ),
    ]
    calc = LandValuationCalculator(snapshot(mid, [zone, *tiers]))

    frontage = LandUseLine(size=10.0, size_unit=SizeUnit.FRONT_FEET)
    result = calc.calculate(assessment(mid, LandUseLine(size=3.0), frontage))

    acre_line, frontage_line = result.lines
    assert acre_line.base_value == 70000
    # Frontage uses the first tier by order.
    assert frontage_line.base_rate == 120.0


def test_missing_zone_zeroes_lines(mid: UUID) -> None:
    result = _calculator(mid).calculate(
        assessment(mid, LandUseLine(size=3.0), zone_code="ZZ")
    )

    assert result.lines[0].market_value == 0
    (warning,) = result.zeroed_warnings
    assert warning.code == "ZONE_NOT_FOUND"
    assert result.totals.total_market_value == 0


def test_missing_ladder_zeroes_ladder_lines_only(mid: UUID) -> None:
    zone_only = record(ConfigurationKind.ZONE, 2024, ZONE_R1, municipality_id=mid)
    calc = LandValuationCalculator(snapshot(mid, [zone_only]))

    result = calc.calculate(
        assessment(mid, LandUseLine(size=3.0), LandUseLine(size=2.0, is_excess_acreage=True))
    )

    assert [w.code for w in result.zeroed_warnings] == ["LADDER_NOT_FOUND"]
    assert [line.market_value for line in result.lines] == [0, 2000]


def test_zero_size_lines_produce_no_zone_warning(mid: UUID) -> None:
    result = _calculator(mid).calculate(
        assessment(mid, LandUseLine(size=0.0), zone_code="ZZ")
    )

    assert result.warnings == ()


def test_override_lines_replace_stored_lines(mid: UUID) -> None:
    stored = assessment(mid, LandUseLine(size=3.0))

    result = _calculator(mid).calculate(stored, lines=[LandUseLine(size=1.0)])

    assert result.lines[0].market_value == 50000


def test_totals_roll_up_views_and_waterfronts() -> None:
    totals = calculate_totals(
        [LandUseLine(size=1.0, market_value=1000, assessed_value=1000)],
        [PropertyView(calculated_value=1000), PropertyView(calculated_value=500, current_use=True)],
        [
            PropertyWaterfront(calculated_value=2000, assessed_value=1500),
            PropertyWaterfront(calculated_value=800, current_use=True),
        ],
    )

    assert totals.view_market_value == 1500
    assert totals.view_assessed_value == 1000
    assert totals.waterfront_market_value == 2800
    assert totals.waterfront_assessed_value == 1500
    assert totals.total_market_value == 1000 + 1500 + 2800
    assert totals.total_assessed_value == 1000 + 1000 + 1500
    assert not totals.has_current_use_land
