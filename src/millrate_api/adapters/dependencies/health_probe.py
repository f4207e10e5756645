# src/millrate_api/adapters/dependencies/health_probe.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Dependency wiring for health probes.

Builds a `DbProbe` bound to the app's AsyncSession factory. No probe logic
lives here, only wiring.
"""

from __future__ import annotations

from millrate_api.infrastructure.database.session import get_sessionmaker
from millrate_api.infrastructure.health.probe import DbProbe


def get_db_probe() -> DbProbe:
    """Return a `DbProbe` over the shared session factory."""
    return DbProbe(session_factory=get_sessionmaker())
