# src/millrate_api/domain/services/totals_comparison.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Compare stored and recalculated land totals."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from millrate_api.domain.entities.land_assessment import CalculatedTotals

__all__ = ["ROUNDING_TOLERANCE", "TotalsDiscrepancy", "compare_totals"]

ROUNDING_TOLERANCE = 1.0


@dataclass(frozen=True, slots=True)
class TotalsDiscrepancy:
    """A totals field whose stored and recalculated values disagree.

    Attributes:
        field: Totals field name.
        stored: Cached value (0 when absent).
        calculated: Freshly calculated value.
        difference: Absolute difference.
    """

    field: str
    stored: float
    calculated: float
    difference: float


def compare_totals(
    stored: CalculatedTotals | None,
    calculated: CalculatedTotals,
    *,
    tolerance: float = ROUNDING_TOLERANCE,
) -> list[TotalsDiscrepancy]:
    """Return numeric fields differing by more than ``tolerance``."""
    stored_values = asdict(stored) if stored is not None else {}
    out: list[TotalsDiscrepancy] = []
    for name, value in asdict(calculated).items():
        if isinstance(value, bool):
            continue
        previous = stored_values.get(name) or 0
        difference = abs(float(previous) - float(value))
        if difference > tolerance:
            out.append(
                TotalsDiscrepancy(
                    field=name,
                    stored=float(previous),
                    calculated=float(value),
                    difference=difference,
                )
            )
    return out
