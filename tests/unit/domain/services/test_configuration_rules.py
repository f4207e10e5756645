# tests/unit/domain/services/test_configuration_rules.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Unit tests for per-kind configuration attribute validation."""

from __future__ import annotations

import pytest

from millrate_api.domain.enums.assessing import ConfigurationKind
from millrate_api.domain.exceptions.assessing import ConfigurationValidationError
from millrate_api.domain.services.configuration_rules import validate_attributes


def _fields(exc: pytest.ExceptionInfo[ConfigurationValidationError]) -> set[str]:
    return {e["field"] for e in exc.value.errors}


def test_building_code_is_normalized() -> None:
    attrs = validate_attributes(
        ConfigurationKind.BUILDING_CODE,
        {
            "code": " r1 ",
            "description": "Ranch",
            "rate": "95.5",
            "building_type": "Residential",
            "size_adjustment_category": "residential",
            "depreciation": 0,
            "notes": "kept",
        },
    )

    assert attrs["code"] == "R1"
    assert attrs["rate"] == 95.5
    assert attrs["building_type"] == "residential"
    assert attrs["notes"] == "kept"


def test_all_field_errors_are_collected() -> None:
    with pytest.raises(ConfigurationValidationError) as exc:
        validate_attributes(
            ConfigurationKind.BUILDING_CODE,
            {"code": "TOOLONG", "rate": -1, "building_type": "castle", "depreciation": 101},
        )

    assert _fields(exc) == {
        "code",
        "description",
        "rate",
        "building_type",
        "size_adjustment_category",
        "depreciation",
    }
    assert exc.value.code == "VALIDATION_ERROR"


def test_sub_area_factor_living_space_defaults_false_and_must_be_bool() -> None:
    attrs = validate_attributes(
        ConfigurationKind.SKETCH_SUB_AREA_FACTOR,
        {"display_text": "FFL", "description": "First floor", "points": 100},
    )
    assert attrs["living_space"] is False

    with pytest.raises(ConfigurationValidationError) as exc:
        validate_attributes(
            ConfigurationKind.SKETCH_SUB_AREA_FACTOR,
            {"display_text": "FFL", "description": "x", "points": 100, "living_space": "yes"},
        )
    assert _fields(exc) == {"living_space"}


def test_ladder_tier_order_must_be_whole() -> None:
    with pytest.raises(ConfigurationValidationError) as exc:
        validate_attributes(
            ConfigurationKind.LAND_LADDER_TIER,
            {"zone_code": "r1", "acreage": 1, "value": 1000, "order": 1.5},
        )
    assert exc.value.errors == [{"field": "order", "message": "must be a whole number"}]

    attrs = validate_attributes(
        ConfigurationKind.LAND_LADDER_TIER,
        {"zone_code": "r1", "acreage": 1, "value": 1000, "order": 2.0},
    )
    assert attrs["order"] == 2
    assert attrs["zone_code"] == "R1"
    assert "frontage_rate" not in attrs


def test_zone_minimums_default_to_zero() -> None:
    attrs = validate_attributes(ConfigurationKind.ZONE, {"code": "r1", "name": "Residential"})

    assert attrs["minimum_acreage"] == 0.0
    assert attrs["excess_land_cost_per_acre"] == 0.0


def test_current_use_rate_range_must_be_ordered() -> None:
    with pytest.raises(ConfigurationValidationError) as exc:
        validate_attributes(
            ConfigurationKind.CURRENT_USE_CATEGORY,
            {"code": "FARM", "description": "Farm", "min_rate": 300, "max_rate": 100},
        )
    assert exc.value.errors == [{"field": "max_rate", "message": "must be >= min_rate"}]


def test_acreage_discount_defaults_and_range() -> None:
    attrs = validate_attributes(ConfigurationKind.ACREAGE_DISCOUNT_SETTINGS, {})
    assert attrs == {
        "minimum_qualifying_acreage": 10.0,
        "maximum_qualifying_acreage": 200.0,
        "maximum_discount_percentage": 75.0,
    }

    with pytest.raises(ConfigurationValidationError) as exc:
        validate_attributes(
            ConfigurationKind.ACREAGE_DISCOUNT_SETTINGS,
            {"minimum_qualifying_acreage": 50, "maximum_qualifying_acreage": 40},
        )
    assert _fields(exc) == {"maximum_qualifying_acreage"}

    with pytest.raises(ConfigurationValidationError) as exc:
        validate_attributes(
            ConfigurationKind.ACREAGE_DISCOUNT_SETTINGS, {"maximum_discount_percentage": 96}
        )
    assert _fields(exc) == {"maximum_discount_percentage"}


def test_land_attribute_type_and_rate_bounds() -> None:
    with pytest.raises(ConfigurationValidationError) as exc:
        validate_attributes(
            ConfigurationKind.LAND_ATTRIBUTE,
            {"attribute_type": "view", "display_text": "Good", "rate": 1001},
        )
    assert _fields(exc) == {"attribute_type", "rate"}
