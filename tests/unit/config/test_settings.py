# tests/unit/config/test_settings.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Settings parsing and environment guards."""

from __future__ import annotations

import pytest

from millrate_api.config.settings import Environment, get_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("YEAR_UNLOCK_ROLES", raising=False)
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)

    s = get_settings()

    assert s.environment is Environment.TEST
    assert s.db_schema == "assessing"
    assert s.year_unlock_roles == ["assessor_admin"]
    assert s.cors_allow_origins == []
    assert s.recalc_batch_size == 500
    assert s.zone_adjustment_batch_size == 50


def test_csv_lists_are_trimmed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALLOWED_ORIGINS", " https://a.example , https://b.example,, ")
    monkeypatch.setenv("YEAR_UNLOCK_ROLES", "assessor_admin, town_manager")

    s = get_settings()

    assert s.cors_allow_origins == ["https://a.example", "https://b.example"]
    assert s.year_unlock_roles == ["assessor_admin", "town_manager"]


def test_wildcard_cors_allowed_in_test(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALLOWED_ORIGINS", "*")

    assert get_settings().cors_allow_origins == ["*"]


def test_production_rejects_wildcard_cors(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("ALLOWED_ORIGINS", "*")

    with pytest.raises(RuntimeError):
        get_settings()


def test_unlock_roles_required(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("YEAR_UNLOCK_ROLES", " , ")

    with pytest.raises(RuntimeError, match="YEAR_UNLOCK_ROLES"):
        get_settings()


def test_batch_size_bounds(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RECALC_BATCH_SIZE", "0")

    with pytest.raises(RuntimeError):
        get_settings()


def test_settings_are_cached() -> None:
    assert get_settings() is get_settings()
