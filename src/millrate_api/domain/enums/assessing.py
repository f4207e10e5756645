# src/millrate_api/domain/enums/assessing.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Assessing enums.

Purpose:
    Define the configuration kinds of the temporal store (with their business
    keys), land-line units, land attribute categories, and the outcomes the
    copy-on-write resolver reports.

Layer:
    domain/enums

Notes:
    - Pure domain types:
        * No logging.
        * No HTTP or transport concerns.
        * No persistence or gateways.
"""

from __future__ import annotations

from enum import Enum


class ConfigurationKind(str, Enum):
    """Year-versioned configuration tables."""

    BUILDING_CODE = "building_code"
    BUILDING_FEATURE_CODE = "building_feature_code"
    SKETCH_SUB_AREA_FACTOR = "sketch_sub_area_factor"
    LAND_LADDER_TIER = "land_ladder_tier"
    WATER_BODY_LADDER_TIER = "water_body_ladder_tier"
    ZONE = "zone"
    NEIGHBORHOOD_CODE = "neighborhood_code"
    LAND_ATTRIBUTE = "land_attribute"
    CURRENT_USE_CATEGORY = "current_use_category"
    ACREAGE_DISCOUNT_SETTINGS = "acreage_discount_settings"

    @property
    def business_key_fields(self) -> tuple[str, ...]:
        """Return the attribute names identifying one logical item across versions."""
        return _BUSINESS_KEY_FIELDS[self]


_BUSINESS_KEY_FIELDS: dict[ConfigurationKind, tuple[str, ...]] = {
    ConfigurationKind.BUILDING_CODE: ("code",),
    ConfigurationKind.BUILDING_FEATURE_CODE: ("display_text", "feature_type"),
    ConfigurationKind.SKETCH_SUB_AREA_FACTOR: ("display_text",),
    ConfigurationKind.LAND_LADDER_TIER: ("zone_code", "order"),
    ConfigurationKind.WATER_BODY_LADDER_TIER: ("water_body_code", "order"),
    ConfigurationKind.ZONE: ("code",),
    ConfigurationKind.NEIGHBORHOOD_CODE: ("code",),
    ConfigurationKind.LAND_ATTRIBUTE: ("attribute_type", "display_text"),
    ConfigurationKind.CURRENT_USE_CATEGORY: ("code",),
    # One settings record per municipality.
    ConfigurationKind.ACREAGE_DISCOUNT_SETTINGS: (),
}


class BuildingCategory(str, Enum):
    """Building type / size adjustment category of a building code."""

    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    EXEMPT = "exempt"
    MANUFACTURED = "manufactured"
    INDUSTRIAL = "industrial"
    UTILITY = "utility"


class FeatureType(str, Enum):
    """Category of a building feature code."""

    INTERIOR_WALL = "interior_wall"
    EXTERIOR_WALL = "exterior_wall"
    ROOFING = "roofing"
    ROOF_STYLE = "roof_style"
    FLOORING = "flooring"
    HEATING_FUEL = "heating_fuel"
    HEATING_TYPE = "heating_type"
    QUALITY = "quality"
    STORY_HEIGHT = "story_height"
    FRAME = "frame"


class LandAttributeType(str, Enum):
    """Property-level land attribute tables feeding valuation factors."""

    SITE = "site"
    DRIVEWAY = "driveway"
    ROAD = "road"
    TOPOGRAPHY = "topography"


class SizeUnit(str, Enum):
    """Unit of a land-use line."""

    ACRES = "AC"
    FRONT_FEET = "FF"


class WriteOutcome(str, Enum):
    """How the copy-on-write resolver applied an edit or delete."""

    DIRECT = "direct"
    COPY_ON_WRITE = "copyOnWrite"
    UPDATED_EXISTING_TARGET = "updatedExistingTarget"
    SOFT_DELETE = "softDelete"
    TEMPORAL_DELETE = "temporalDelete"


class AffectedChangeType(str, Enum):
    """Reference-data change types that trigger a selective recalculation."""

    ZONE = "zone"
    NEIGHBORHOOD = "neighborhood"
    CURRENT_USE = "current_use"
    ALL = "all"


__all__ = [
    "AffectedChangeType",
    "BuildingCategory",
    "ConfigurationKind",
    "FeatureType",
    "LandAttributeType",
    "SizeUnit",
    "WriteOutcome",
]
