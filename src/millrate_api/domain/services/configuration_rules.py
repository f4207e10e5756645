# src/millrate_api/domain/services/configuration_rules.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Field-level validation of configuration attributes.

Purpose:
    Validate and normalize the kind-specific attributes of configuration
    records before any write. All field errors of a payload are collected and
    raised together.

Layer:
    domain/services
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from millrate_api.domain.enums.assessing import (
    BuildingCategory,
    ConfigurationKind,
    FeatureType,
    LandAttributeType,
)
from millrate_api.domain.exceptions.assessing import ConfigurationValidationError, FieldError

__all__ = ["validate_attributes"]

_MISSING = object()


@dataclass(frozen=True, slots=True)
class _Field:
    name: str
    parse: Callable[[Any], Any]
    required: bool = True
    default: Any = _MISSING


def _text(max_len: int | None = None, *, upper: bool = False) -> Callable[[Any], Any]:
    def parse(value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("must be a non-empty string")
        text = value.strip()
        if upper:
            text = text.upper()
        if max_len is not None and len(text) > max_len:
            raise ValueError(f"must be at most {max_len} characters")
        return text

    return parse


def _number(
    lo: float | None = None, hi: float | None = None, *, integer: bool = False
) -> Callable[[Any], Any]:
    def parse(value: Any) -> float | int:
        if isinstance(value, bool) or value is None:
            raise ValueError("must be a number")
        try:
            number = float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError("must be a number") from exc
        if number != number:  # NaN
            raise ValueError("must be a number")
        if lo is not None and number < lo:
            raise ValueError(f"must be >= {lo:g}")
        if hi is not None and number > hi:
            raise ValueError(f"must be <= {hi:g}")
        if integer:
            if not number.is_integer():
                raise ValueError("must be a whole number")
            return int(number)
        return number

    return parse


def _choice(allowed: type[Any]) -> Callable[[Any], Any]:
    values = {member.value for member in allowed}

    def parse(value: Any) -> str:
        text = str(value).strip().lower() if value is not None else ""
        if text not in values:
            raise ValueError(f"must be one of: {', '.join(sorted(values))}")
        return text

    return parse


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError("must be a boolean")


_RULES: dict[ConfigurationKind, tuple[_Field, ...]] = {
    ConfigurationKind.BUILDING_CODE: (
        _Field("code", _text(4, upper=True)),
        _Field("description", _text()),
        _Field("rate", _number(0)),
        _Field("building_type", _choice(BuildingCategory)),
        _Field("size_adjustment_category", _choice(BuildingCategory)),
        _Field("depreciation", _number(0, 100)),
    ),
    ConfigurationKind.BUILDING_FEATURE_CODE: (
        _Field("display_text", _text(15)),
        _Field("description", _text()),
        _Field("points", _number(-1000, 1000)),
        _Field("feature_type", _choice(FeatureType)),
    ),
    ConfigurationKind.SKETCH_SUB_AREA_FACTOR: (
        _Field("display_text", _text(15)),
        _Field("description", _text()),
        _Field("points", _number(-1000, 1000)),
        _Field("living_space", _flag, required=False, default=False),
    ),
    ConfigurationKind.LAND_LADDER_TIER: (
        _Field("zone_code", _text(upper=True)),
        _Field("acreage", _number(0)),
        _Field("value", _number(0)),
        _Field("order", _number(0, integer=True)),
        _Field("frontage_rate", _number(0), required=False),
    ),
    ConfigurationKind.WATER_BODY_LADDER_TIER: (
        _Field("water_body_code", _text(upper=True)),
        _Field("frontage", _number(0, 10000)),
        _Field("factor", _number(0, 1000)),
        _Field("order", _number(0, integer=True)),
    ),
    ConfigurationKind.ZONE: (
        _Field("code", _text(upper=True)),
        _Field("name", _text()),
        _Field("minimum_acreage", _number(0), required=False, default=0.0),
        _Field("minimum_frontage", _number(0), required=False, default=0.0),
        _Field("excess_land_cost_per_acre", _number(0), required=False, default=0.0),
    ),
    ConfigurationKind.NEIGHBORHOOD_CODE: (
        _Field("code", _text(upper=True)),
        _Field("description", _text()),
        _Field("factor", _number(0, 1000)),
    ),
    ConfigurationKind.LAND_ATTRIBUTE: (
        _Field("attribute_type", _choice(LandAttributeType)),
        _Field("display_text", _text(15)),
        _Field("description", _text(), required=False),
        _Field("rate", _number(0, 1000)),
    ),
    ConfigurationKind.CURRENT_USE_CATEGORY: (
        _Field("code", _text(upper=True)),
        _Field("description", _text()),
        _Field("min_rate", _number(0)),
        _Field("max_rate", _number(0)),
    ),
    ConfigurationKind.ACREAGE_DISCOUNT_SETTINGS: (
        _Field("minimum_qualifying_acreage", _number(0), required=False, default=10.0),
        _Field("maximum_qualifying_acreage", _number(0), required=False, default=200.0),
        _Field("maximum_discount_percentage", _number(1, 95), required=False, default=75.0),
    ),
}


def _cross_field_errors(kind: ConfigurationKind, attrs: Mapping[str, Any]) -> list[FieldError]:
    errors: list[FieldError] = []
    if kind is ConfigurationKind.CURRENT_USE_CATEGORY:
        lo, hi = attrs.get("min_rate"), attrs.get("max_rate")
        if isinstance(lo, float) and isinstance(hi, float) and hi < lo:
            errors.append({"field": "max_rate", "message": "must be >= min_rate"})
    if kind is ConfigurationKind.ACREAGE_DISCOUNT_SETTINGS:
        lo = attrs.get("minimum_qualifying_acreage")
        hi = attrs.get("maximum_qualifying_acreage")
        if isinstance(lo, float) and isinstance(hi, float) and hi <= lo:
            errors.append(
                {
                    "field": "maximum_qualifying_acreage",
                    "message": "must be greater than minimum_qualifying_acreage",
                }
            )
    return errors


def validate_attributes(kind: ConfigurationKind, attributes: Mapping[str, Any]) -> dict[str, Any]:
    """Validate and normalize ``attributes`` for ``kind``.

    Unknown attribute names are kept unchanged so kinds can carry extra
    display fields.

    Args:
        kind: Configuration kind.
        attributes: Raw attributes (create payload, or existing merged with an edit).

    Returns:
        The normalized attributes.

    Raises:
        ConfigurationValidationError: If any field is missing or malformed.
    """
    normalized: dict[str, Any] = dict(attributes)
    errors: list[FieldError] = []

    for rule in _RULES[kind]:
        raw = attributes.get(rule.name)
        if raw is None or raw == "":
            if rule.required:
                errors.append({"field": rule.name, "message": "is required"})
            elif rule.default is not _MISSING:
                normalized[rule.name] = rule.default
            else:
                normalized.pop(rule.name, None)
            continue
        try:
            normalized[rule.name] = rule.parse(raw)
        except ValueError as exc:
            errors.append({"field": rule.name, "message": str(exc)})

    if not errors:
        errors.extend(_cross_field_errors(kind, normalized))
    if errors:
        raise ConfigurationValidationError(errors)
    return normalized
