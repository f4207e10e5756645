# tests/fixtures/builders.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Builders for configuration records, snapshots and assessments used in tests."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from uuid import UUID, uuid4

from millrate_api.domain.entities.configuration_record import ConfigurationRecord
from millrate_api.domain.entities.configuration_snapshot import ResolvedConfigurationSnapshot
from millrate_api.domain.entities.land_assessment import LandAssessment, LandUseLine
from millrate_api.domain.enums.assessing import ConfigurationKind

ZONE_R1 = {
    "code": "R1",
    "name": "Residential 1",
    "minimum_acreage": 2.0,
    "excess_land_cost_per_acre": 1000.0,
}
LADDER_R1 = (
    {"zone_code": "R1", "acreage": 1.0, "value": 50000.0, "order": 1, "frontage_rate": 100.0},
    {"zone_code": "R1", "acreage": 5.0, "value": 90000.0, "order": 2},
)


def record(
    kind: ConfigurationKind,
    year: int,
    attributes: Mapping[str, Any],
    *,
    municipality_id: UUID,
    **overrides: Any,
) -> ConfigurationRecord:
    """Build an active configuration record."""
    return ConfigurationRecord(
        id=overrides.pop("id", None) or uuid4(),
        municipality_id=municipality_id,
        kind=kind,
        effective_year=year,
        attributes=attributes,
        **overrides,
    )


def valuation_records(
    municipality_id: UUID, year: int = 2024
) -> list[ConfigurationRecord]:
    """Zone R1 with its two-tier ladder."""
    out = [record(ConfigurationKind.ZONE, year, ZONE_R1, municipality_id=municipality_id)]
    out += [
        record(ConfigurationKind.LAND_LADDER_TIER, year, tier, municipality_id=municipality_id)
        for tier in LADDER_R1
    ]
    return out


def snapshot(
    municipality_id: UUID,
    records: Sequence[ConfigurationRecord],
    year: int = 2024,
) -> ResolvedConfigurationSnapshot:
    return ResolvedConfigurationSnapshot.from_records(municipality_id, year, records)


def assessment(
    municipality_id: UUID,
    *lines: LandUseLine,
    year: int = 2024,
    property_id: UUID | None = None,
    **overrides: Any,
) -> LandAssessment:
    """Build a land assessment in zone R1 unless overridden."""
    overrides.setdefault("zone_code", "R1")
    return LandAssessment(
        id=overrides.pop("id", None) or uuid4(),
        municipality_id=municipality_id,
        property_id=property_id or uuid4(),
        effective_year=year,
        land_use_lines=lines,
        **overrides,
    )
