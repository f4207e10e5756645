# src/millrate_api/infrastructure/health/probe.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Readiness probe for Postgres.

Small public surface: `DbProbe.db()` returning `(success, detail)`.
"""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

__all__ = ["DbProbe"]


class DbProbe:
    """Readiness probe for the assessing database."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the probe.

        Args:
            session_factory: Async SQLAlchemy session factory bound to the DB.
        """
        self._session_factory = session_factory

    async def db(self) -> tuple[bool, str | None]:
        """Probe Postgres using a trivial ``SELECT 1``."""
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
        except Exception as exc:  # noqa: BLE001 - reported as a failed check
            return False, str(exc)
        return True, None
