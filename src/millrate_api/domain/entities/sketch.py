# src/millrate_api/domain/entities/sketch.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Building sketch entities.

Purpose:
    Inputs and outputs of the sketch effective-area / gross-living-area
    calculation.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__ = [
    "DescriptionArea",
    "DescriptionTotal",
    "ShapeArea",
    "SketchAreaResult",
    "SketchShape",
]


@dataclass(frozen=True, slots=True)
class SketchShape:
    """A drawn sketch shape.

    Attributes:
        area: Raw area in square feet.
        descriptions: Sub-area labels attached to the shape.
    """

    area: float
    descriptions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Reject negative areas and normalize labels."""
        if self.area < 0:
            raise ValueError("shape area must be >= 0")
        object.__setattr__(self, "descriptions", tuple(self.descriptions))


@dataclass(frozen=True, slots=True)
class DescriptionArea:
    """Effective area of one label on one shape.

    Attributes:
        label: Sub-area label as written on the shape.
        points: Weight applied (percent).
        effective_area: ``round_half_up(area * points / 100)``.
        living_space: Whether the label counts toward GLA.
    """

    label: str
    points: float
    effective_area: int
    living_space: bool = False

    def __post_init__(self) -> None:
        """No invariants beyond field types."""
        return


@dataclass(frozen=True, slots=True)
class ShapeArea:
    """Per-shape result.

    Attributes:
        area: Raw shape area.
        effective_area: Sum of the shape's description effective areas.
        descriptions: Per-label breakdown.
    """

    area: float
    effective_area: int
    descriptions: tuple[DescriptionArea, ...] = ()

    def __post_init__(self) -> None:
        """Normalize sequences to tuples."""
        object.__setattr__(self, "descriptions", tuple(self.descriptions))


@dataclass(frozen=True, slots=True)
class DescriptionTotal:
    """Totals per sub-area label across all shapes.

    Attributes:
        label: Normalized label.
        area: Raw area of shapes carrying the label.
        effective_area: Effective area contributed by the label.
        living_space: Whether the label counts toward GLA.
    """

    label: str
    area: float = 0.0
    effective_area: int = 0
    living_space: bool = False

    def __post_init__(self) -> None:
        """No invariants beyond field types."""
        return


@dataclass(frozen=True, slots=True)
class SketchAreaResult:
    """Sketch-level totals.

    Attributes:
        shapes: Per-shape results, in input order.
        total_area: Sum of raw shape areas.
        total_effective_area: Sum of shape effective areas.
        gross_living_area: Raw area of shapes carrying a living-space label.
        description_totals: Totals keyed by normalized label.
        unknown_labels: Labels with no configured factor.
    """

    shapes: tuple[ShapeArea, ...] = ()
    total_area: float = 0.0
    total_effective_area: int = 0
    gross_living_area: float = 0.0
    description_totals: dict[str, DescriptionTotal] = field(default_factory=dict)
    unknown_labels: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Normalize sequences to tuples."""
        object.__setattr__(self, "shapes", tuple(self.shapes))
        object.__setattr__(self, "unknown_labels", tuple(self.unknown_labels))
