# src/millrate_api/domain/services/zone_redistribution.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Zone minimum-acreage redistribution.

Purpose:
    Clamp oversized land-use lines to the zone's minimum acreage and move the
    excess onto a single excess acreage line.

Layer:
    domain/services

Notes:
    - Two passes: all clamping first, then one redistribution, so the result
      does not depend on line order.
    - Total acreage is conserved and no line goes below zero.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from millrate_api.domain.entities.land_assessment import LandUseLine
from millrate_api.domain.entities.valuation_inputs import ZoneSettings
from millrate_api.domain.entities.valuation_results import RedistributionResult, ZoneAdjustment
from millrate_api.domain.enums.assessing import SizeUnit

__all__ = ["DEFAULT_LAND_USE_TYPE", "DEFAULT_TOPOGRAPHY", "redistribute_zone_minimum"]

DEFAULT_LAND_USE_TYPE = "RES"
DEFAULT_TOPOGRAPHY = "Level"


def redistribute_zone_minimum(
    lines: Sequence[LandUseLine], zone: ZoneSettings | None
) -> RedistributionResult:
    """Apply the zone minimum-acreage rule to ``lines``.

    Args:
        lines: Land-use lines of one assessment.
        zone: Zone settings; ``None`` or a zero minimum leaves lines unchanged.

    Returns:
        The redistribution result. ``lines`` itself is not modified.
    """
    result_lines = list(lines)
    if zone is None or zone.minimum_acreage <= 0:
        return RedistributionResult(lines=tuple(result_lines))

    minimum = zone.minimum_acreage
    adjustments: list[ZoneAdjustment] = []
    total_excess = 0.0
    first_contributor: LandUseLine | None = None

    for index, line in enumerate(result_lines):
        if line.size_unit is not SizeUnit.ACRES or line.is_excess_acreage:
            continue
        if line.size <= minimum:
            continue
        excess = line.size - minimum
        total_excess += excess
        if first_contributor is None:
            first_contributor = line
        result_lines[index] = replace(line.cleared(), size=minimum)
        adjustments.append(
            ZoneAdjustment(
                kind="clamped",
                line_index=index,
                original_size=line.size,
                new_size=minimum,
                excess=excess,
            )
        )

    if total_excess <= 0 or first_contributor is None:
        return RedistributionResult(lines=tuple(result_lines))

    created = False
    existing_index = next(
        (
            i
            for i, line in enumerate(result_lines)
            if line.is_excess_acreage and line.size_unit is SizeUnit.ACRES
        ),
        None,
    )
    if existing_index is not None:
        existing = result_lines[existing_index]
        new_size = existing.size + total_excess
        result_lines[existing_index] = replace(existing.cleared(), size=new_size)
        adjustments.append(
            ZoneAdjustment(
                kind="excess_acreage_updated",
                line_index=existing_index,
                original_size=existing.size,
                new_size=new_size,
                excess=total_excess,
            )
        )
    else:
        result_lines.append(
            LandUseLine(
                size=total_excess,
                size_unit=SizeUnit.ACRES,
                land_use_type=first_contributor.land_use_type or DEFAULT_LAND_USE_TYPE,
                is_excess_acreage=True,
                topography=first_contributor.topography or DEFAULT_TOPOGRAPHY,
                condition=100,
                notes=f"Excess acreage from zone minimum adjustment ({total_excess:.2f} AC)",
            )
        )
        adjustments.append(
            ZoneAdjustment(
                kind="excess_acreage_created",
                line_index=len(result_lines) - 1,
                original_size=0.0,
                new_size=total_excess,
                excess=total_excess,
            )
        )
        created = True

    return RedistributionResult(
        lines=tuple(result_lines),
        adjusted=True,
        adjustments=tuple(adjustments),
        excess_acreage_created=created,
    )
