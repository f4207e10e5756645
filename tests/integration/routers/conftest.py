# tests/integration/routers/conftest.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""App wiring for router tests: every router's UnitOfWork is the in-memory one."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import pytest
from fastapi import FastAPI
from starlette.testclient import TestClient

from millrate_api.adapters.routers import (
    assessment_years_router,
    configuration_router,
    valuation_router,
)
from millrate_api.main import create_app
from tests.fixtures.in_memory_uow import InMemoryUnitOfWork


@dataclass
class Api:
    app: FastAPI
    client: TestClient
    uow: InMemoryUnitOfWork


@pytest.fixture
def api() -> Iterator[Api]:
    uow = InMemoryUnitOfWork()
    app = create_app()
    for module in (configuration_router, assessment_years_router, valuation_router):
        app.dependency_overrides[module.get_uow] = lambda: uow
    # No lifespan: the database engine is never started.
    yield Api(app=app, client=TestClient(app), uow=uow)
    app.dependency_overrides.clear()
