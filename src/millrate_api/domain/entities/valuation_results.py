# src/millrate_api/domain/entities/valuation_results.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Valuation results.

Purpose:
    Outputs of the land valuation calculator and the zone minimum-acreage
    redistribution, including the warnings emitted when referenced
    configuration is missing.

Layer:
    domain/entities
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from millrate_api.domain.entities.land_assessment import CalculatedTotals, LandUseLine

__all__ = [
    "LandValuationResult",
    "RedistributionResult",
    "ValuationWarning",
    "ZoneAdjustment",
]


@dataclass(frozen=True, slots=True)
class ValuationWarning:
    """A recoverable configuration gap found during calculation.

    Attributes:
        code: Machine-readable warning code (e.g. ``LADDER_NOT_FOUND``).
        message: Human-readable description.
        details: Structured context (zone code, label, line index).
        zeroed_value: True when the gap forced a line value to zero.
    """

    code: str
    message: str
    details: Mapping[str, Any] = field(default_factory=dict)
    zeroed_value: bool = False

    def __post_init__(self) -> None:
        """Require a warning code."""
        if not self.code:
            raise ValueError("warning code must not be empty")


@dataclass(frozen=True, slots=True)
class ZoneAdjustment:
    """One change made by zone minimum-acreage redistribution.

    Attributes:
        kind: ``clamped``, ``excess_acreage_updated`` or ``excess_acreage_created``.
        line_index: Index of the affected line in the resulting line list.
        original_size: Size before the change.
        new_size: Size after the change.
        excess: Acreage moved by this change.
    """

    kind: str
    line_index: int
    original_size: float
    new_size: float
    excess: float

    def __post_init__(self) -> None:
        """Reject negative sizes."""
        if self.new_size < 0:
            raise ValueError("adjusted size must be >= 0")


@dataclass(frozen=True, slots=True)
class RedistributionResult:
    """Outcome of zone minimum-acreage redistribution.

    Attributes:
        lines: Resulting land-use lines.
        adjusted: True when any line changed.
        adjustments: Per-line changes in application order.
        excess_acreage_created: True when a new excess acreage line was added.
    """

    lines: tuple[LandUseLine, ...]
    adjusted: bool = False
    adjustments: tuple[ZoneAdjustment, ...] = ()
    excess_acreage_created: bool = False

    def __post_init__(self) -> None:
        """Normalize sequences to tuples."""
        object.__setattr__(self, "lines", tuple(self.lines))
        object.__setattr__(self, "adjustments", tuple(self.adjustments))


@dataclass(frozen=True, slots=True)
class LandValuationResult:
    """Calculated land lines and totals for one assessment.

    Attributes:
        lines: Land-use lines with calculated values filled in.
        totals: Parcel-level totals.
        warnings: Configuration gaps encountered.
    """

    lines: tuple[LandUseLine, ...]
    totals: CalculatedTotals
    warnings: tuple[ValuationWarning, ...] = ()

    def __post_init__(self) -> None:
        """Normalize sequences to tuples."""
        object.__setattr__(self, "lines", tuple(self.lines))
        object.__setattr__(self, "warnings", tuple(self.warnings))

    @property
    def zeroed_warnings(self) -> tuple[ValuationWarning, ...]:
        """Warnings that forced a value to zero."""
        return tuple(w for w in self.warnings if w.zeroed_value)
