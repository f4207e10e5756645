# src/millrate_api/adapters/uow/sqlalchemy_uow.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""SQLAlchemy-backed Unit of Work implementation.

Purpose:
    Provide a concrete implementation of the application-layer UnitOfWork
    protocol using SQLAlchemy's AsyncSession. This UoW coordinates the
    assessing repositories within a single transactional scope.

Layer:
    adapters/uow
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import TracebackType
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from millrate_api.adapters.repositories.assessment_year_repository import (
    AssessmentYearRepository,
)
from millrate_api.adapters.repositories.configuration_repository import (
    ConfigurationRepository,
)
from millrate_api.adapters.repositories.land_assessment_repository import (
    LandAssessmentRepository,
)
from millrate_api.application.uow import UnitOfWork
from millrate_api.domain.interfaces.repositories.assessment_year_repository import (
    AssessmentYearRepository as AssessmentYearRepositoryProtocol,
)
from millrate_api.domain.interfaces.repositories.configuration_repository import (
    ConfigurationRepository as ConfigurationRepositoryProtocol,
)
from millrate_api.domain.interfaces.repositories.land_assessment_repository import (
    LandAssessmentRepository as LandAssessmentRepositoryProtocol,
)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy-based UnitOfWork implementation.

    One instance may be entered repeatedly, one scope at a time; each scope
    opens a fresh AsyncSession:

        async with uow as tx:
            repo = tx.get_repository(ConfigurationRepositoryProtocol)
            ...
            await tx.commit()
    """

    def __init__(
        self,
        *,
        session_factory: async_sessionmaker[AsyncSession],
        repo_factories: Mapping[type[Any], Callable[[AsyncSession], Any]] | None = None,
    ) -> None:
        """Initialize the UnitOfWork.

        Args:
            session_factory:
                Factory for creating new AsyncSession instances.
            repo_factories:
                Optional overrides mapping a repository type to a factory
                taking an AsyncSession.
        """
        self._session_factory = session_factory
        self._session: AsyncSession | None = None

        # Interface and concrete class both resolve to the SQLAlchemy repository.
        default_factories: dict[type[Any], Callable[[AsyncSession], Any]] = {
            ConfigurationRepositoryProtocol: lambda s: ConfigurationRepository(session=s),
            ConfigurationRepository: lambda s: ConfigurationRepository(session=s),
            AssessmentYearRepositoryProtocol: lambda s: AssessmentYearRepository(session=s),
            AssessmentYearRepository: lambda s: AssessmentYearRepository(session=s),
            LandAssessmentRepositoryProtocol: lambda s: LandAssessmentRepository(session=s),
            LandAssessmentRepository: lambda s: LandAssessmentRepository(session=s),
        }

        self._repo_factories: dict[type[Any], Callable[[AsyncSession], Any]] = {
            **default_factories,
            **(dict(repo_factories) if repo_factories is not None else {}),
        }

        self._repos: dict[type[Any], Any] = {}
        self._committed = False
        self._rolled_back = False

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        """Open a new AsyncSession.

        Raises:
            RuntimeError: If a session is already active (nested usage).
        """
        if self._session is not None:
            raise RuntimeError("UnitOfWork is already active; nested usage is not supported.")

        self._session = self._session_factory()
        self._committed = False
        self._rolled_back = False
        self._repos.clear()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool | None:
        """Roll back on error, then close the session.

        Exceptions raised in the scope are propagated.
        """
        try:
            if exc_type is not None and not self._rolled_back:
                await self.rollback()
        finally:
            if self._session is not None:
                await self._session.close()
                self._session = None
            self._repos.clear()
        return None

    async def commit(self) -> None:
        """Commit the current transaction; a no-op after commit or rollback.

        Raises:
            RuntimeError: If called without an active session.
        """
        if self._session is None:
            raise RuntimeError("Cannot commit: UnitOfWork has no active session.")

        if self._committed or self._rolled_back:
            return

        await self._session.commit()
        self._committed = True

    async def rollback(self) -> None:
        """Roll back the current transaction; a no-op when nothing is active."""
        if self._session is None:
            return

        if self._rolled_back or self._committed:
            return

        await self._session.rollback()
        self._rolled_back = True

    def get_repository(self, repo_type: type[Any]) -> Any:
        """Return the repository for ``repo_type``, cached per scope.

        Raises:
            RuntimeError: If called outside of an active UnitOfWork scope.
            KeyError: If no factory is registered for ``repo_type``.
        """
        if self._session is None:
            raise RuntimeError(
                "get_repository() called outside of an active UnitOfWork scope. "
                "Use 'async with uow:' before requesting repositories.",
            )

        if repo_type in self._repos:
            return self._repos[repo_type]

        try:
            factory = self._repo_factories[repo_type]
        except KeyError as exc:
            raise KeyError(
                f"No repository factory registered for type {repo_type!r}.",
            ) from exc

        repo = factory(self._session)
        self._repos[repo_type] = repo
        return repo
