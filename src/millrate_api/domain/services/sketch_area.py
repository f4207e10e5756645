# src/millrate_api/domain/services/sketch_area.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Sketch effective area and gross living area.

Purpose:
    Weight each sketch shape's area by the configured points of its sub-area
    labels, sum per shape and per sketch, and derive gross living area.

Layer:
    domain/services

Notes:
    - Labels match configured factors case-insensitively.
    - Unknown labels weigh 100 points and are reported in ``unknown_labels``.
    - Gross living area is the raw area of shapes carrying at least one
      living-space label, counted once per shape.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from millrate_api.domain.entities.sketch import (
    DescriptionArea,
    DescriptionTotal,
    ShapeArea,
    SketchAreaResult,
    SketchShape,
)
from millrate_api.domain.entities.valuation_inputs import SubAreaFactor
from millrate_api.domain.services.ladder_interpolation import round_half_up

__all__ = ["NEUTRAL_POINTS", "calculate_sketch_area"]

NEUTRAL_POINTS = 100.0


def calculate_sketch_area(
    shapes: Iterable[SketchShape], factors: Mapping[str, SubAreaFactor]
) -> SketchAreaResult:
    """Calculate effective area and GLA for a sketch.

    Args:
        shapes: Sketch shapes in drawing order.
        factors: Sub-area factors keyed by upper-cased label.

    Returns:
        The sketch totals.
    """
    shape_results: list[ShapeArea] = []
    totals: dict[str, DescriptionTotal] = {}
    unknown: list[str] = []
    total_area = 0.0
    total_effective = 0
    gross_living_area = 0.0

    for shape in shapes:
        described: list[DescriptionArea] = []
        is_living = False
        for label in shape.descriptions:
            key = label.strip().upper()
            if not key:
                continue
            factor = factors.get(key)
            if factor is None:
                if key not in unknown:
                    unknown.append(key)
                points, living = NEUTRAL_POINTS, False
            else:
                points, living = factor.points, factor.living_space
            effective = round_half_up(shape.area * points / 100)
            described.append(
                DescriptionArea(
                    label=label.strip(),
                    points=points,
                    effective_area=effective,
                    living_space=living,
                )
            )
            is_living = is_living or living

            current = totals.get(key, DescriptionTotal(label=key, living_space=living))
            totals[key] = DescriptionTotal(
                label=key,
                area=current.area + shape.area,
                effective_area=current.effective_area + effective,
                living_space=living,
            )

        shape_effective = sum(d.effective_area for d in described)
        shape_results.append(
            ShapeArea(area=shape.area, effective_area=shape_effective, descriptions=described)
        )
        total_area += shape.area
        total_effective += shape_effective
        if is_living:
            gross_living_area += shape.area

    return SketchAreaResult(
        shapes=tuple(shape_results),
        total_area=total_area,
        total_effective_area=total_effective,
        gross_living_area=gross_living_area,
        description_totals=totals,
        unknown_labels=tuple(unknown),
    )
