# src/millrate_api/domain/services/land_valuation.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Land valuation calculator.

Purpose:
    Compute per-line land values and parcel totals for a land assessment from
    a resolved configuration snapshot.

Layer:
    domain/services

Notes:
    - Missing configuration never raises. Property-level gaps fall back to a
      neutral factor (1.0); a missing zone or ladder zeroes the affected lines.
      Every gap is returned as a ``ValuationWarning``.
    - Percent-valued configuration (neighborhood factor, land attribute rate)
      of 0 or absent is treated as unset.
    - Market values are rounded half up to the nearest hundred.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import Any

from millrate_api.domain.entities.configuration_record import normalize_key_part
from millrate_api.domain.entities.configuration_snapshot import ResolvedConfigurationSnapshot
from millrate_api.domain.entities.land_assessment import (
    CalculatedTotals,
    LandAssessment,
    LandUseLine,
    PropertyView,
    PropertyWaterfront,
)
from millrate_api.domain.entities.valuation_inputs import (
    CurrentUseCategory,
    LadderTier,
    ZoneSettings,
)
from millrate_api.domain.entities.valuation_results import LandValuationResult, ValuationWarning
from millrate_api.domain.enums.assessing import LandAttributeType, SizeUnit
from millrate_api.domain.services.acreage_discount import apply_discount, discount_percentage
from millrate_api.domain.services.ladder_interpolation import interpolate, round_half_up, round_to

__all__ = ["DEFAULT_SPI", "LandValuationCalculator", "calculate_totals"]

DEFAULT_SPI = 50.0


def _pct_factor(rate: float | None) -> float:
    if not rate:
        return 1.0
    return rate / 100


def _condition_factor(condition: Any) -> float:
    if isinstance(condition, bool) or not isinstance(condition, int | float) or not condition:
        return 1.0
    return condition / 100


def _frontage_rate(ladder: Sequence[LadderTier]) -> float:
    if not ladder:
        return 0.0
    first = ladder[0]
    return first.frontage_rate if first.frontage_rate else first.value


class _Warnings:
    """Collects warnings once per (code, subject)."""

    def __init__(self) -> None:
        self._items: dict[tuple[str, str], ValuationWarning] = {}

    def add(
        self,
        code: str,
        message: str,
        *,
        subject: str = "",
        zeroed: bool = False,
        **details: Any,
    ) -> None:
        key = (code, subject)
        if key not in self._items:
            self._items[key] = ValuationWarning(
                code=code, message=message, details=details, zeroed_value=zeroed
            )

    def as_tuple(self) -> tuple[ValuationWarning, ...]:
        return tuple(self._items.values())


def calculate_totals(
    lines: Iterable[LandUseLine],
    views: Iterable[PropertyView] = (),
    waterfronts: Iterable[PropertyWaterfront] = (),
    *,
    current_use_flags: Sequence[bool] | None = None,
) -> CalculatedTotals:
    """Roll calculated lines, views and waterfronts up into parcel totals.

    Args:
        lines: Land-use lines with calculated values.
        views: View inputs.
        waterfronts: Waterfront inputs.
        current_use_flags: Per-line current-use enrollment; defaults to
            "has a non-zero current-use value".
    """
    lines = list(lines)
    flags = (
        list(current_use_flags)
        if current_use_flags is not None
        else [line.current_use_value > 0 for line in lines]
    )

    land_market = sum(line.market_value for line in lines)
    land_cu_value = sum(line.current_use_value for line in lines)
    land_cu_credit = sum(line.current_use_credit for line in lines)
    land_assessed = land_market - land_cu_credit

    views = list(views)
    view_market = round_half_up(sum(v.calculated_value or 0 for v in views))
    view_assessed = round_half_up(
        sum(v.calculated_value or 0 for v in views if not v.current_use)
    )

    waterfronts = list(waterfronts)
    wf_market = round_half_up(sum(w.calculated_value or 0 for w in waterfronts))
    wf_assessed = 0.0
    for wf in waterfronts:
        if wf.assessed_value is not None:
            wf_assessed += wf.assessed_value
        elif not wf.current_use:
            wf_assessed += wf.calculated_value or 0
    wf_assessed_int = round_half_up(wf_assessed)

    return CalculatedTotals(
        total_acreage=round_to(sum(line.acreage for line in lines), 3),
        total_frontage=round_to(sum(line.frontage for line in lines), 2),
        land_market_value=land_market,
        land_current_use_value=land_cu_value,
        land_current_use_credit=land_cu_credit,
        land_assessed_value=land_assessed,
        view_market_value=view_market,
        view_assessed_value=view_assessed,
        waterfront_market_value=wf_market,
        waterfront_assessed_value=wf_assessed_int,
        total_market_value=land_market + view_market + wf_market,
        total_current_use_value=land_cu_value,
        total_current_use_credit=land_cu_credit,
        total_assessed_value=land_assessed + view_assessed + wf_assessed_int,
        has_current_use_land=any(flags),
    )


class LandValuationCalculator:
    """Calculates land assessments against one configuration snapshot.

    A calculator is cheap to build and holds no per-assessment state, so one
    instance serves a whole batch run for a (municipality, year).
    """

    def __init__(self, snapshot: ResolvedConfigurationSnapshot) -> None:
        """Initialize the calculator.

        Args:
            snapshot: Configuration heads for the assessments' year.
        """
        self._snapshot = snapshot
        self._categories: dict[str, CurrentUseCategory] = snapshot.current_use_categories()
        self._discount = snapshot.acreage_discount()

    @property
    def snapshot(self) -> ResolvedConfigurationSnapshot:
        """Snapshot the calculator reads from."""
        return self._snapshot

    def calculate(
        self,
        assessment: LandAssessment,
        *,
        lines: Sequence[LandUseLine] | None = None,
    ) -> LandValuationResult:
        """Calculate line values and totals for ``assessment``.

        Args:
            assessment: Assessment to value.
            lines: Lines to value instead of ``assessment.land_use_lines``
                (e.g. after zone redistribution).

        Returns:
            The calculated lines, totals and warnings.
        """
        warnings = _Warnings()
        source_lines = list(assessment.land_use_lines if lines is None else lines)

        zone = self._resolve_zone(assessment, source_lines, warnings)
        ladder = self._snapshot.land_ladder(assessment.zone_code)
        if zone is not None and not ladder and any(
            not line.is_excess_acreage and line.size > 0 for line in source_lines
        ):
            warnings.add(
                "LADDER_NOT_FOUND",
                f"No land ladder is configured for zone {zone.code}.",
                subject=zone.code,
                zeroed=True,
                zone_code=zone.code,
            )

        property_factor = self._property_factor(assessment, warnings)

        calculated: list[LandUseLine] = []
        flags: list[bool] = []
        for line in source_lines:
            value, enrolled = self._calculate_line(
                line.cleared(), zone, ladder, property_factor, warnings
            )
            calculated.append(value)
            flags.append(enrolled)

        totals = calculate_totals(
            calculated, assessment.views, assessment.waterfronts, current_use_flags=flags
        )
        return LandValuationResult(lines=calculated, totals=totals, warnings=warnings.as_tuple())

    def _resolve_zone(
        self,
        assessment: LandAssessment,
        lines: Sequence[LandUseLine],
        warnings: _Warnings,
    ) -> ZoneSettings | None:
        zone = self._snapshot.zone(assessment.zone_code)
        if zone is None and any(line.size > 0 for line in lines):
            code = assessment.zone_code or ""
            warnings.add(
                "ZONE_NOT_FOUND",
                f"Zone '{code}' is not configured for year {self._snapshot.year}."
                if code
                else "Assessment has no zone.",
                subject=normalize_key_part(code),
                zeroed=True,
                zone_code=assessment.zone_code,
            )
        return zone

    def _property_factor(
        self, assessment: LandAssessment, warnings: _Warnings
    ) -> dict[str, float]:
        factors: dict[str, float] = {}

        rate = self._snapshot.neighborhood_rate(assessment.neighborhood_code)
        if assessment.neighborhood_code and rate is None:
            warnings.add(
                "NEIGHBORHOOD_NOT_FOUND",
                f"Neighborhood '{assessment.neighborhood_code}' is not configured; using 100%.",
                subject=normalize_key_part(assessment.neighborhood_code),
                neighborhood_code=assessment.neighborhood_code,
            )
        factors["neighborhood"] = _pct_factor(rate)

        for name, attr_type, text in (
            ("site", LandAttributeType.SITE, assessment.site_conditions),
            ("driveway", LandAttributeType.DRIVEWAY, assessment.driveway_type),
            ("road", LandAttributeType.ROAD, assessment.road_type),
        ):
            factors[name] = self._attribute_factor(attr_type, text, warnings)
        return factors

    def _attribute_factor(
        self, attr_type: LandAttributeType, text: str | None, warnings: _Warnings
    ) -> float:
        rate = self._snapshot.land_attribute_rate(attr_type, text)
        if text and rate is None:
            warnings.add(
                "LAND_ATTRIBUTE_NOT_FOUND",
                f"{attr_type.value.capitalize()} attribute '{text}' is not configured; using 100%.",
                subject=f"{attr_type.value}:{normalize_key_part(text)}",
                attribute_type=attr_type.value,
                display_text=text,
            )
        return _pct_factor(rate)

    def _calculate_line(
        self,
        line: LandUseLine,
        zone: ZoneSettings | None,
        ladder: Sequence[LadderTier],
        property_factor: dict[str, float],
        warnings: _Warnings,
    ) -> tuple[LandUseLine, bool]:
        discount_pct = 0.0
        if line.size_unit is SizeUnit.ACRES:
            acreage = line.size
            # Reported on every acre line; reduces excess land only.
            discount_pct = discount_percentage(acreage, self._discount)
            if line.is_excess_acreage:
                base_rate = zone.excess_land_cost_per_acre if zone is not None else 0.0
                base_value: float = base_rate * acreage
                if discount_pct:
                    base_value = apply_discount(base_value, discount_pct)
            else:
                has_ladder = zone is not None and bool(ladder) and acreage > 0
                base_value = interpolate(ladder, acreage) if has_ladder else 0
                base_rate = base_value / acreage if acreage > 0 else 0.0
        else:
            base_rate = _frontage_rate(ladder) if zone is not None else 0.0
            base_value = base_rate * line.size

        if not base_value:
            return replace(line, economy_of_scale_factor=discount_pct), False

        topography = self._attribute_factor(LandAttributeType.TOPOGRAPHY, line.topography, warnings)
        condition = _condition_factor(line.condition)
        raw = (
            base_value
            * property_factor["neighborhood"]
            * property_factor["site"]
            * property_factor["driveway"]
            * property_factor["road"]
            * topography
            * condition
        )
        market = round_half_up(raw / 100) * 100

        current_use_value = 0
        credit = 0
        assessed = market
        category = self._categories.get(normalize_key_part(line.land_use_type or ""))
        enrolled = category is not None and line.size_unit is SizeUnit.ACRES
        if enrolled and category is not None:
            spi = DEFAULT_SPI if line.spi is None else line.spi
            ratio = min(max(spi / 100, 0.0), 1.0)
            rate = category.min_rate + (category.max_rate - category.min_rate) * ratio
            current_use_value = round_half_up(rate * line.size)
            credit = market - current_use_value
            assessed = current_use_value

        return (
            replace(
                line,
                base_rate=base_rate,
                base_value=base_value,
                neighborhood_factor=property_factor["neighborhood"],
                economy_of_scale_factor=discount_pct,
                site_factor=property_factor["site"],
                driveway_factor=property_factor["driveway"],
                road_factor=property_factor["road"],
                topography_factor=topography,
                condition_factor=condition,
                market_value=market,
                current_use_value=current_use_value,
                current_use_credit=credit,
                assessed_value=assessed,
            ),
            enrolled,
        )
