# src/millrate_api/domain/entities/valuation_inputs.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Typed valuation inputs.

Purpose:
    Typed views over resolved configuration records that the valuation
    calculator consumes: ladder tiers, zone settings, current-use categories,
    acreage discount settings and sketch sub-area factors.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "AcreageDiscountSettings",
    "CurrentUseCategory",
    "LadderTier",
    "SubAreaFactor",
    "ZoneSettings",
]


@dataclass(frozen=True, slots=True)
class LadderTier:
    """One (threshold, value) tier of a ladder.

    Attributes:
        threshold: Acreage (land) or frontage (water body) of the tier.
        value: Value at the threshold.
        order: Sort order within the ladder.
        frontage_rate: Rate per front foot, for land ladders that carry one.
    """

    threshold: float
    value: float
    order: int = 0
    frontage_rate: float | None = None

    def __post_init__(self) -> None:
        """Reject negative thresholds."""
        if self.threshold < 0:
            raise ValueError("ladder threshold must be >= 0")


@dataclass(frozen=True, slots=True)
class ZoneSettings:
    """Zone-level valuation settings.

    Attributes:
        code: Zone business key.
        name: Display name.
        minimum_acreage: Minimum lot size; larger non-excess lines are clamped.
        minimum_frontage: Minimum frontage.
        excess_land_cost_per_acre: Rate applied to excess acreage lines.
    """

    code: str
    name: str | None = None
    minimum_acreage: float = 0.0
    minimum_frontage: float = 0.0
    excess_land_cost_per_acre: float = 0.0

    def __post_init__(self) -> None:
        """Reject negative minimums."""
        if self.minimum_acreage < 0 or self.minimum_frontage < 0:
            raise ValueError("zone minimums must be >= 0")


@dataclass(frozen=True, slots=True)
class CurrentUseCategory:
    """Current-use category rate range.

    Attributes:
        code: Category code matched against ``LandUseLine.land_use_type``.
        description: Display description.
        min_rate: Per-acre rate at SPI 0.
        max_rate: Per-acre rate at SPI 100.
    """

    code: str
    description: str | None = None
    min_rate: float = 0.0
    max_rate: float = 0.0

    def __post_init__(self) -> None:
        """Ensure the rate range is ordered."""
        if self.max_rate < self.min_rate:
            raise ValueError("max_rate must be >= min_rate")


@dataclass(frozen=True, slots=True)
class AcreageDiscountSettings:
    """Municipality-level acreage discount curve.

    Attributes:
        minimum_qualifying_acreage: Below this, no discount.
        maximum_qualifying_acreage: At or above this, the maximum discount.
        maximum_discount_percentage: Discount percentage at the maximum.
    """

    minimum_qualifying_acreage: float = 10.0
    maximum_qualifying_acreage: float = 200.0
    maximum_discount_percentage: float = 75.0

    def __post_init__(self) -> None:
        """Ensure the curve is well-formed."""
        if self.maximum_qualifying_acreage <= self.minimum_qualifying_acreage:
            raise ValueError("maximum_qualifying_acreage must exceed the minimum")


@dataclass(frozen=True, slots=True)
class SubAreaFactor:
    """Sketch sub-area weighting factor.

    Attributes:
        display_text: Label used on sketch shapes.
        points: Percentage weight applied to the shape area.
        living_space: True when the label counts toward gross living area.
        description: Display description.
    """

    display_text: str
    points: float = 100.0
    living_space: bool = False
    description: str | None = None

    def __post_init__(self) -> None:
        """Reject empty labels."""
        if not self.display_text.strip():
            raise ValueError("display_text must not be empty")
