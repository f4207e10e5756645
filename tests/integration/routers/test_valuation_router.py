# tests/integration/routers/test_valuation_router.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Valuation endpoints over the in-memory UnitOfWork."""

from __future__ import annotations

from uuid import uuid4

import pytest

from millrate_api.domain.entities.land_assessment import LandUseLine
from tests.fixtures.builders import assessment, valuation_records

pytestmark = pytest.mark.integration

MID = uuid4()
BASE = f"/v1/municipalities/{MID}"


def _seed(api, *parcels):  # type: ignore[no-untyped-def]
    for rec in valuation_records(MID):
        api.uow.configuration.records[rec.id] = rec
    for parcel in parcels:
        api.uow.land.assessments[parcel.id] = parcel


def test_calculate_one_assessment(api) -> None:  # type: ignore[no-untyped-def]
    parcel = assessment(MID, LandUseLine(size=3.0))
    _seed(api, parcel)

    r = api.client.post(f"{BASE}/land-assessments/{parcel.id}/calculate", json={"save": False})

    assert r.status_code == 200
    data = r.json()["data"]
    assert data["saved"] is False
    assert data["totals"]["total_market_value"] == 70000
    assert data["lines"][0]["market_value"] == 70000
    assert data["warnings"] == []


def test_missing_configuration_is_a_warning_not_an_error(  # type: ignore[no-untyped-def]
    api,
) -> None:
    parcel = assessment(MID, LandUseLine(size=3.0), zone_code="ZZ")
    _seed(api, parcel)

    r = api.client.post(f"{BASE}/land-assessments/{parcel.id}/calculate")

    assert r.status_code == 200
    (warning,) = r.json()["data"]["warnings"]
    assert warning["code"] == "ZONE_NOT_FOUND"
    assert warning["zeroed_value"] is True


def test_calculate_unknown_assessment_is_404(api) -> None:  # type: ignore[no-untyped-def]
    r = api.client.post(f"{BASE}/land-assessments/{uuid4()}/calculate")

    assert r.status_code == 404


def test_recalculate_reports_partial_success(api) -> None:  # type: ignore[no-untyped-def]
    _seed(
        api,
        assessment(MID, LandUseLine(size=3.0)),
        assessment(MID, LandUseLine(size=2.0), zone_code="ZZ"),
    )

    r = api.client.post(f"{BASE}/valuation/recalculate", json={"year": 2024})

    assert r.status_code == 200
    data = r.json()["data"]
    assert (data["processed"], data["updated"], data["errors"]) == (2, 2, 1)
    assert data["error_details"][0]["code"] == "ZONE_NOT_FOUND"


def test_affected_requires_change_key(api) -> None:  # type: ignore[no-untyped-def]
    r = api.client.post(
        f"{BASE}/valuation/recalculate/affected", json={"year": 2024, "change_type": "zone"}
    )

    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


def test_validate_and_sketch(api) -> None:  # type: ignore[no-untyped-def]
    _seed(api, assessment(MID, LandUseLine(size=3.0)))

    report = api.client.get(f"{BASE}/valuation/validate", params={"year": 2024})
    sketch = api.client.post(
        f"{BASE}/sketches/effective-area",
        json={"year": 2024, "shapes": [{"area": 120, "descriptions": ["DECK"]}]},
    )

    assert report.status_code == 200
    assert report.json()["data"]["sample_size"] == 1
    # Never calculated, so every nonzero total differs from the stored zero.
    assert report.json()["data"]["properties_with_discrepancies"] == 1
    assert sketch.status_code == 200
    assert sketch.json()["data"]["total_effective_area"] == 120
    assert sketch.json()["data"]["unknown_labels"] == ["DECK"]
