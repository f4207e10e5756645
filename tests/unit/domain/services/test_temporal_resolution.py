# tests/unit/domain/services/test_temporal_resolution.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Unit tests for resolving year-versioned configuration heads."""

from __future__ import annotations

from uuid import uuid4

from millrate_api.domain.enums.assessing import ConfigurationKind
from millrate_api.domain.services.temporal_resolution import resolve_for_year, year_history
from tests.fixtures.builders import record

KIND = ConfigurationKind.NEIGHBORHOOD_CODE


def _nbhd(code: str, factor: float) -> dict[str, object]:
    return {"code": code, "description": f"Neighborhood {code}", "factor": factor}


def test_latest_version_at_or_before_year_wins() -> None:
    mid = uuid4()
    v2020 = record(KIND, 2020, _nbhd("A", 100), municipality_id=mid, effective_year_end=2023)
    v2023 = record(KIND, 2023, _nbhd("a", 110), municipality_id=mid)

    assert resolve_for_year([v2020, v2023], 2022).records == (v2020,)
    assert resolve_for_year([v2020, v2023], 2023).records == (v2023,)
    assert resolve_for_year([v2020, v2023], 2030).records == (v2023,)
    assert resolve_for_year([v2020, v2023], 2019).records == ()


def test_end_year_is_exclusive() -> None:
    mid = uuid4()
    rec = record(KIND, 2020, _nbhd("A", 100), municipality_id=mid, effective_year_end=2022)

    assert resolve_for_year([rec], 2021).records == (rec,)
    assert resolve_for_year([rec], 2022).records == ()


def test_inactive_records_are_ignored() -> None:
    mid = uuid4()
    rec = record(KIND, 2020, _nbhd("A", 100), municipality_id=mid, is_active=False)

    assert resolve_for_year([rec], 2020).records == ()


def test_ties_are_reported_and_excluded() -> None:
    mid = uuid4()
    first = record(KIND, 2024, _nbhd("A", 100), municipality_id=mid)
    second = record(KIND, 2024, _nbhd("A", 120), municipality_id=mid)
    other = record(KIND, 2024, _nbhd("B", 90), municipality_id=mid)

    resolution = resolve_for_year([first, second, other], 2024)

    assert resolution.records == (other,)
    (fault,) = resolution.faults
    assert fault.kind is KIND
    assert fault.business_key == ("A",)
    assert fault.effective_year == 2024
    assert set(fault.record_ids) == {first.id, second.id}


def test_heads_are_ordered_by_kind_then_key() -> None:
    mid = uuid4()
    b = record(KIND, 2024, _nbhd("B", 100), municipality_id=mid)
    a = record(KIND, 2024, _nbhd("A", 100), municipality_id=mid)
    zone = record(ConfigurationKind.ZONE, 2024, {"code": "R1", "name": "R"}, municipality_id=mid)

    resolution = resolve_for_year([zone, b, a], 2024)

    assert [r.id for r in resolution.records] == [a.id, b.id, zone.id]


def test_empty_input_resolves_to_nothing() -> None:
    resolution = resolve_for_year([], 2024)
    assert resolution.records == () and resolution.faults == ()


def test_year_history_marks_inherited_and_effective_versions() -> None:
    mid = uuid4()
    v2020 = record(KIND, 2020, _nbhd("A", 100), municipality_id=mid, effective_year_end=2023)
    v2023 = record(KIND, 2023, _nbhd("A", 110), municipality_id=mid)
    deleted = record(KIND, 2025, _nbhd("A", 130), municipality_id=mid, is_active=False)
    unrelated = record(KIND, 2020, _nbhd("B", 100), municipality_id=mid)

    history = year_history([v2023, deleted, unrelated, v2020], v2020, 2024)

    assert [e.record.id for e in history] == [v2020.id, v2023.id]
    assert [e.is_inherited for e in history] == [True, True]
    assert [e.is_effective for e in history] == [False, True]
