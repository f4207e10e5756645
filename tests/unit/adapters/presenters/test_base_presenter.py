# tests/unit/adapters/presenters/test_base_presenter.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Envelope shaping and ETag headers."""

from __future__ import annotations

from millrate_api.adapters.presenters.base_presenter import BasePresenter


def test_success_has_quoted_stable_etag_and_request_id() -> None:
    p = BasePresenter()

    a = p.present_success(data={"year": 2024, "locked": True}, trace_id="req-1")
    b = p.present_success(data={"locked": True, "year": 2024})
    c = p.present_success(data={"year": 2025, "locked": True})

    assert a.headers["X-Request-ID"] == "req-1"
    assert a.headers["ETag"].startswith('"') and a.headers["ETag"].endswith('"')
    assert a.headers["ETag"] == b.headers["ETag"]
    assert a.headers["ETag"] != c.headers["ETag"]
    assert "X-Request-ID" not in b.headers


def test_error_has_no_etag() -> None:
    res = BasePresenter().present_error(
        code="YEAR_LOCKED", http_status=403, message="locked", trace_id="req-2"
    )

    assert res.status_code == 403
    assert "ETag" not in res.headers
    assert res.body is not None
    assert res.body.error.code == "YEAR_LOCKED"
    assert res.body.error.trace_id == "req-2"
