# src/millrate_api/domain/services/acreage_discount.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Acreage discount curve."""

from __future__ import annotations

from millrate_api.domain.entities.valuation_inputs import AcreageDiscountSettings
from millrate_api.domain.services.ladder_interpolation import round_half_up, round_to

__all__ = ["apply_discount", "discount_percentage"]


def discount_percentage(acreage: float, settings: AcreageDiscountSettings | None) -> float:
    """Return the discount percentage for ``acreage``.

    0 below the minimum qualifying acreage, the maximum discount at or above
    the maximum qualifying acreage, linear (2 decimal places) in between.
    """
    if settings is None or acreage < settings.minimum_qualifying_acreage:
        return 0.0
    if acreage >= settings.maximum_qualifying_acreage:
        return settings.maximum_discount_percentage
    span = settings.maximum_qualifying_acreage - settings.minimum_qualifying_acreage
    ratio = (acreage - settings.minimum_qualifying_acreage) / span
    return round_to(ratio * settings.maximum_discount_percentage, 2)


def apply_discount(value: float, percentage: float) -> int:
    """Reduce ``value`` by ``percentage`` percent, rounded half up."""
    return round_half_up(value - value * percentage / 100)
