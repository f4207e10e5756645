# src/millrate_api/domain/entities/land_assessment.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Land assessment entities.

Purpose:
    Represent a parcel's land assessment for one card and year: the raw
    land-use lines the calculator consumes, the per-line calculated values it
    produces, the view/waterfront inputs to totals, and the parcel-level
    calculated totals cached back onto the assessment.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from millrate_api.domain.enums.assessing import SizeUnit

__all__ = [
    "CalculatedTotals",
    "LandAssessment",
    "LandUseLine",
    "PropertyView",
    "PropertyWaterfront",
]


@dataclass(frozen=True, slots=True)
class LandUseLine:
    """One land-use line of a land assessment.

    Attributes:
        size:
            Acreage (``AC``) or front feet (``FF``).
        size_unit:
            Unit of ``size``.
        land_use_type:
            Land use code; matches a current-use category code when enrolled.
        is_excess_acreage:
            True for lines valued at the zone's excess-land rate.
        topography:
            Topography display text, matched case-insensitively.
        condition:
            Condition percentage; None means 100%.
        spi:
            Soil productivity index used by current-use valuation.
        notes:
            Free-form notes.
        base_rate:
            Calculated rate per unit.
        base_value:
            Calculated value before factors.
        neighborhood_factor:
            Applied neighborhood factor.
        economy_of_scale_factor:
            Acreage discount percentage for this line's acreage.
        site_factor:
            Applied site factor.
        driveway_factor:
            Applied driveway factor.
        road_factor:
            Applied road factor.
        topography_factor:
            Applied topography factor.
        condition_factor:
            Applied condition factor.
        market_value:
            Market value rounded to the nearest hundred.
        current_use_value:
            Current-use value for enrolled lines.
        current_use_credit:
            Market value minus current-use value for enrolled lines.
        assessed_value:
            Taxable value of the line.
    """

    size: float
    size_unit: SizeUnit = SizeUnit.ACRES
    land_use_type: str | None = None
    is_excess_acreage: bool = False
    topography: str | None = None
    condition: float | None = None
    spi: float | None = None
    notes: str | None = None
    base_rate: float = 0.0
    base_value: float = 0.0
    neighborhood_factor: float = 0.0
    economy_of_scale_factor: float = 0.0
    site_factor: float = 0.0
    driveway_factor: float = 0.0
    road_factor: float = 0.0
    topography_factor: float = 0.0
    condition_factor: float = 0.0
    market_value: int = 0
    current_use_value: int = 0
    current_use_credit: int = 0
    assessed_value: int = 0

    def __post_init__(self) -> None:
        """Reject negative sizes.

        Raises:
            ValueError: If ``size`` is negative.
        """
        if self.size < 0:
            raise ValueError("land-use line size must be >= 0")

    @property
    def acreage(self) -> float:
        """Size in acres, or 0 for frontage lines."""
        return self.size if self.size_unit is SizeUnit.ACRES else 0.0

    @property
    def frontage(self) -> float:
        """Size in front feet, or 0 for acreage lines."""
        return self.size if self.size_unit is SizeUnit.FRONT_FEET else 0.0

    def cleared(self) -> LandUseLine:
        """Return a copy with every calculated value reset to zero."""
        return LandUseLine(
            size=self.size,
            size_unit=self.size_unit,
            land_use_type=self.land_use_type,
            is_excess_acreage=self.is_excess_acreage,
            topography=self.topography,
            condition=self.condition,
            spi=self.spi,
            notes=self.notes,
        )


@dataclass(frozen=True, slots=True)
class PropertyView:
    """A view valuation attached to a property.

    Attributes:
        calculated_value: Market value of the view.
        current_use: True when the view sits on current-use land (assessed at 0).
    """

    calculated_value: float = 0.0
    current_use: bool = False

    def __post_init__(self) -> None:
        """No invariants beyond field types."""
        return


@dataclass(frozen=True, slots=True)
class PropertyWaterfront:
    """A waterfront valuation attached to a property.

    Attributes:
        calculated_value: Market value of the waterfront.
        assessed_value: Explicit assessed value; wins over ``current_use`` when set.
        current_use: True when the waterfront sits on current-use land.
    """

    calculated_value: float = 0.0
    assessed_value: float | None = None
    current_use: bool = False

    def __post_init__(self) -> None:
        """No invariants beyond field types."""
        return


@dataclass(frozen=True, slots=True)
class CalculatedTotals:
    """Parcel-level land totals produced by the valuation calculator.

    Attributes:
        total_acreage: Sum of acreage lines, 3 decimal places.
        total_frontage: Sum of frontage lines, 2 decimal places.
        land_market_value: Sum of line market values.
        land_current_use_value: Sum of line current-use values.
        land_current_use_credit: Sum of line current-use credits.
        land_assessed_value: Land market value minus current-use credit.
        view_market_value: Sum of view values.
        view_assessed_value: View values excluding current-use views.
        waterfront_market_value: Sum of waterfront values.
        waterfront_assessed_value: Waterfront assessed values.
        total_market_value: Land + view + waterfront market value.
        total_current_use_value: Land current-use value.
        total_current_use_credit: Land current-use credit.
        total_assessed_value: Land + view + waterfront assessed value.
        has_current_use_land: True when any line is enrolled in current use.
    """

    total_acreage: float = 0.0
    total_frontage: float = 0.0
    land_market_value: int = 0
    land_current_use_value: int = 0
    land_current_use_credit: int = 0
    land_assessed_value: int = 0
    view_market_value: int = 0
    view_assessed_value: int = 0
    waterfront_market_value: int = 0
    waterfront_assessed_value: int = 0
    total_market_value: int = 0
    total_current_use_value: int = 0
    total_current_use_credit: int = 0
    total_assessed_value: int = 0
    has_current_use_land: bool = False

    def __post_init__(self) -> None:
        """Reject negative measurements."""
        if self.total_acreage < 0 or self.total_frontage < 0:
            raise ValueError("total acreage/frontage must be >= 0")


@dataclass(frozen=True, slots=True)
class LandAssessment:
    """Land assessment for one parcel card and year.

    Attributes:
        id: Assessment identifier.
        municipality_id: Owning tenant.
        property_id: Parcel identifier.
        effective_year: Assessment year.
        card_number: Card number within the parcel.
        zone_code: Zone business key.
        neighborhood_code: Neighborhood business key.
        site_conditions: Site land-attribute display text.
        driveway_type: Driveway land-attribute display text.
        road_type: Road land-attribute display text.
        land_use_lines: Ordered land-use lines.
        views: View inputs to totals.
        waterfronts: Waterfront inputs to totals.
        calculated_totals: Cached output of the last calculation.
        last_calculated: When ``calculated_totals`` was produced.
        previous_assessment_id: Assessment this one was copied from.
        change_reason: Reason recorded on the last change.
        updated_by: Actor of the last change.
    """

    id: UUID
    municipality_id: UUID
    property_id: UUID
    effective_year: int
    card_number: int = 1
    zone_code: str | None = None
    neighborhood_code: str | None = None
    site_conditions: str | None = None
    driveway_type: str | None = None
    road_type: str | None = None
    land_use_lines: tuple[LandUseLine, ...] = ()
    views: tuple[PropertyView, ...] = ()
    waterfronts: tuple[PropertyWaterfront, ...] = ()
    calculated_totals: CalculatedTotals | None = None
    last_calculated: datetime | None = None
    previous_assessment_id: UUID | None = None
    change_reason: str | None = None
    updated_by: str | None = None
    extra: dict[str, object] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        """Normalize sequences and enforce card numbering.

        Raises:
            ValueError: If ``card_number`` is below 1.
        """
        if self.card_number < 1:
            raise ValueError("card_number must be >= 1")
        object.__setattr__(self, "land_use_lines", tuple(self.land_use_lines))
        object.__setattr__(self, "views", tuple(self.views))
        object.__setattr__(self, "waterfronts", tuple(self.waterfronts))
