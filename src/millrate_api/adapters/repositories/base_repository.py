# src/millrate_api/adapters/repositories/base_repository.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""
BaseRepository: shared foundation for Millrate repositories.

Purpose:
    Shared mechanics for all repositories:
      * Deterministic ordering helper (PK tie-breakers).
      * Safe fetch helpers (optional, all).
      * Flush helper surfacing unique violations at the failing write.
      * UTC timestamp helper for audit fields.

Layer: adapters / repositories

Notes:
    * No business logic, no domain decisions.
    * Repositories never commit; use cases own transactions.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import Select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

TModel = TypeVar("TModel")


class BaseRepository(Generic[TModel]):  # noqa: UP046
    """Base class for all repositories."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session bound to the target database.
        """
        self._session: AsyncSession = session

    @staticmethod
    def utc_now() -> datetime:
        """Return current UTC time with timezone info."""
        return datetime.now(UTC)

    @staticmethod
    def order_by_pk(stmt: Select[Any], pk_col: Any, *, ascending: bool = True) -> Select[Any]:
        """Apply ordering by primary key only, as a final tie-breaker."""
        return stmt.order_by(pk_col.asc() if ascending else pk_col.desc())

    async def fetch_optional(self, stmt: Select[Any]) -> TModel | None:
        """Execute a statement and return zero or one row."""
        res = await self._session.execute(stmt)
        return res.scalars().first()

    async def fetch_all(self, stmt: Select[Any]) -> list[TModel]:
        """Execute a statement and return all rows as a list."""
        res = await self._session.execute(stmt)
        return list(res.scalars().all())

    async def flush_or_raise(self, on_conflict: Callable[[IntegrityError], Exception]) -> None:
        """Flush pending writes, translating unique violations.

        Args:
            on_conflict: Builds the domain error raised for an IntegrityError.
        """
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise on_conflict(exc) from exc
