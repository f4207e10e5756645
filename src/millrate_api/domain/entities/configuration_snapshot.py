# src/millrate_api/domain/entities/configuration_snapshot.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Resolved configuration snapshot.

Purpose:
    Hold the configuration heads active for one (municipality, year), grouped
    by kind, and expose the typed lookups the valuation calculator needs.
    Snapshots are built once per calculation run and never persisted.

Layer:
    domain/entities

Notes:
    - String lookups (zone codes, display texts, category codes) compare
      case- and whitespace-insensitively.
    - Lookups return ``None`` for absent configuration; callers decide the
      fallback.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from millrate_api.domain.entities.configuration_record import (
    ConfigurationRecord,
    normalize_key_part,
)
from millrate_api.domain.entities.valuation_inputs import (
    AcreageDiscountSettings,
    CurrentUseCategory,
    LadderTier,
    SubAreaFactor,
    ZoneSettings,
)
from millrate_api.domain.enums.assessing import ConfigurationKind, LandAttributeType

__all__ = ["ResolvedConfigurationSnapshot"]


def _num(value: Any, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True, slots=True)
class ResolvedConfigurationSnapshot:
    """Configuration heads active for one municipality and year.

    Attributes:
        municipality_id: Owning tenant.
        year: Assessment year the heads were resolved for.
        records_by_kind: Resolved heads grouped by configuration kind.
    """

    municipality_id: UUID
    year: int
    records_by_kind: Mapping[ConfigurationKind, tuple[ConfigurationRecord, ...]] = field(
        default_factory=dict
    )

    def __post_init__(self) -> None:
        """Freeze the per-kind groups into tuples."""
        object.__setattr__(
            self,
            "records_by_kind",
            {kind: tuple(records) for kind, records in self.records_by_kind.items()},
        )

    @classmethod
    def from_records(
        cls, municipality_id: UUID, year: int, records: Iterable[ConfigurationRecord]
    ) -> ResolvedConfigurationSnapshot:
        """Group already-resolved heads by kind."""
        grouped: dict[ConfigurationKind, list[ConfigurationRecord]] = {}
        for record in records:
            grouped.setdefault(record.kind, []).append(record)
        return cls(
            municipality_id=municipality_id,
            year=year,
            records_by_kind={k: tuple(v) for k, v in grouped.items()},
        )

    def records(self, kind: ConfigurationKind) -> tuple[ConfigurationRecord, ...]:
        """Return the heads of ``kind``."""
        return self.records_by_kind.get(kind, ())

    def _find(self, kind: ConfigurationKind, **match: Any) -> ConfigurationRecord | None:
        wanted = {k: normalize_key_part(v) for k, v in match.items()}
        for record in self.records(kind):
            if all(normalize_key_part(record.attributes.get(k)) == v for k, v in wanted.items()):
                return record
        return None

    def zone(self, code: str | None) -> ZoneSettings | None:
        """Return the zone settings for ``code``."""
        if not code:
            return None
        record = self._find(ConfigurationKind.ZONE, code=code)
        if record is None:
            return None
        attrs = record.attributes
        return ZoneSettings(
            code=str(attrs.get("code")),
            name=attrs.get("name"),
            minimum_acreage=_num(attrs.get("minimum_acreage")),
            minimum_frontage=_num(attrs.get("minimum_frontage")),
            excess_land_cost_per_acre=_num(attrs.get("excess_land_cost_per_acre")),
        )

    def land_ladder(self, zone_code: str | None) -> tuple[LadderTier, ...]:
        """Return the land ladder of a zone, ascending by order then acreage.

        The first tier carries the frontage rate. Interpolation brackets by
        acreage regardless of order.
        """
        if not zone_code:
            return ()
        key = normalize_key_part(zone_code)
        tiers = [
            LadderTier(
                threshold=_num(r.attributes.get("acreage")),
                value=_num(r.attributes.get("value")),
                order=int(_num(r.attributes.get("order"))),
                frontage_rate=(
                    _num(r.attributes.get("frontage_rate"))
                    if r.attributes.get("frontage_rate") is not None
                    else None
                ),
            )
            for r in self.records(ConfigurationKind.LAND_LADDER_TIER)
            if normalize_key_part(r.attributes.get("zone_code")) == key
        ]
        return tuple(sorted(tiers, key=lambda t: (t.order, t.threshold)))

    def neighborhood_rate(self, code: str | None) -> float | None:
        """Return the neighborhood factor percentage for ``code``."""
        if not code:
            return None
        record = self._find(ConfigurationKind.NEIGHBORHOOD_CODE, code=code)
        return None if record is None else _num(record.attributes.get("factor"))

    def land_attribute_rate(
        self, attribute_type: LandAttributeType, display_text: str | None
    ) -> float | None:
        """Return the percentage rate of a land attribute by display text."""
        if not display_text:
            return None
        record = self._find(
            ConfigurationKind.LAND_ATTRIBUTE,
            attribute_type=attribute_type.value,
            display_text=display_text,
        )
        return None if record is None else _num(record.attributes.get("rate"))

    def current_use_categories(self) -> dict[str, CurrentUseCategory]:
        """Return current-use categories keyed by normalized code."""
        categories: dict[str, CurrentUseCategory] = {}
        for record in self.records(ConfigurationKind.CURRENT_USE_CATEGORY):
            attrs = record.attributes
            code = str(attrs.get("code") or "")
            if not code:
                continue
            min_rate = _num(attrs.get("min_rate"))
            categories[normalize_key_part(code)] = CurrentUseCategory(
                code=code,
                description=attrs.get("description"),
                min_rate=min_rate,
                max_rate=max(min_rate, _num(attrs.get("max_rate"))),
            )
        return categories

    def acreage_discount(self) -> AcreageDiscountSettings | None:
        """Return the municipality's acreage discount settings, if configured."""
        heads = self.records(ConfigurationKind.ACREAGE_DISCOUNT_SETTINGS)
        if not heads:
            return None
        attrs = heads[0].attributes
        return AcreageDiscountSettings(
            minimum_qualifying_acreage=_num(attrs.get("minimum_qualifying_acreage"), 10.0),
            maximum_qualifying_acreage=_num(attrs.get("maximum_qualifying_acreage"), 200.0),
            maximum_discount_percentage=_num(attrs.get("maximum_discount_percentage"), 75.0),
        )

    def sub_area_factors(self) -> dict[str, SubAreaFactor]:
        """Return sketch sub-area factors keyed by normalized label."""
        factors: dict[str, SubAreaFactor] = {}
        for record in self.records(ConfigurationKind.SKETCH_SUB_AREA_FACTOR):
            attrs = record.attributes
            label = str(attrs.get("display_text") or "").strip()
            if not label:
                continue
            factors[label.upper()] = SubAreaFactor(
                display_text=label,
                points=_num(attrs.get("points"), 100.0),
                living_space=bool(attrs.get("living_space", False)),
                description=attrs.get("description"),
            )
        return factors
