# src/millrate_api/domain/services/ladder_interpolation.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Ladder interpolation and rounding helpers.

Purpose:
    Look up values on a tiered (threshold, value) ladder with clamping at both
    ends and linear interpolation between bracketing tiers.

Layer:
    domain/services

Notes:
    - Rounding is round-half-up toward positive infinity (``floor(x + 0.5)``),
      so ``-2.5`` rounds to ``-2``. Python's built-in ``round`` uses banker's
      rounding and is never used for money here.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from millrate_api.domain.entities.valuation_inputs import LadderTier

__all__ = ["interpolate", "round_half_up", "round_to"]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return math.floor(value + 0.5)


def round_to(value: float, places: int) -> float:
    """Round half up to ``places`` decimal places."""
    scale = 10**places
    return math.floor(value * scale + 0.5) / scale


def interpolate(tiers: Sequence[LadderTier], x: float) -> int:
    """Return the ladder value at ``x``.

    Args:
        tiers: Ladder tiers in any order; they are bracketed by threshold.
            Must not be empty.
        x: Input magnitude (acreage or frontage).

    Returns:
        The first tier's value at or below its threshold, the last tier's value
        at or above its threshold, otherwise the linear interpolation between
        the bracketing tiers, rounded half up.

    Raises:
        ValueError: If ``tiers`` is empty.
    """
    if not tiers:
        raise ValueError("cannot interpolate on an empty ladder")

    tiers = sorted(tiers, key=lambda t: t.threshold)
    first, last = tiers[0], tiers[-1]
    if x <= first.threshold:
        return round_half_up(first.value)
    if x >= last.threshold:
        return round_half_up(last.value)

    for lo, hi in zip(tiers, tiers[1:], strict=False):
        if lo.threshold <= x <= hi.threshold:
            span = hi.threshold - lo.threshold
            if span == 0:
                return round_half_up(hi.value)
            ratio = (x - lo.threshold) / span
            return round_half_up(lo.value + ratio * (hi.value - lo.value))

    return round_half_up(last.value)
