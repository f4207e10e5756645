# src/millrate_api/application/uow.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Unit of Work (Application Layer).

Purpose:
    Define the abstract Unit-of-Work boundary used by assessing use cases to
    coordinate transactional work across the configuration, assessment-year
    and land-assessment repositories.

    This module is infrastructure-agnostic: no SQLAlchemy, DB or HTTP
    imports, only the protocol. The concrete
    SQLAlchemy-backed UoW lives in the adapters layer.

Layer:
    application
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from types import TracebackType
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class UnitOfWork(Protocol, AbstractAsyncContextManager["UnitOfWork"]):
    """Abstract Unit-of-Work contract for application use cases."""

    async def __aenter__(self) -> UnitOfWork:
        """Enter the transactional scope and return the active UoW."""
        raise NotImplementedError

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool | None:
        """Exit the transactional scope, rolling back on error."""
        raise NotImplementedError

    async def commit(self) -> None:
        """Commit all pending changes for this UnitOfWork."""
        raise NotImplementedError

    async def rollback(self) -> None:
        """Roll back any pending changes for this UnitOfWork."""
        raise NotImplementedError

    def get_repository(self, repo_type: type[Any]) -> Any:
        """Return a repository instance for the given key/type.

        Args:
            repo_type:
                Repository port (Protocol) or concrete repository class.
        """
        raise NotImplementedError

