# src/millrate_api/application/use_cases/assessment_years/assessment_year_lifecycle.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Assessment year lifecycle use cases.

Purpose:
    Create a year from its predecessor (locking the source), lock a year,
    and perform the privileged, audited unlock.

Layer:
    application/use_cases/assessment_years

Notes:
    - Lock and unlock emit ``assessment_year.locked`` / ``assessment_year.unlocked``
      audit events naming the actor.
"""

from __future__ import annotations

import logging
from collections.abc import Collection

from millrate_api.application.schemas.dto.assessment_years import (
    CreateYearFromPriorRequestDTO,
    YearLockRequestDTO,
)
from millrate_api.application.services.configuration_access import (
    assessment_year_repo,
    require_year,
)
from millrate_api.application.uow import UnitOfWork
from millrate_api.domain.entities.assessment_year import AssessmentYear
from millrate_api.domain.exceptions.assessing import (
    AssessmentYearExistsError,
    ConfigurationValidationError,
    UnlockNotPermittedError,
)
from millrate_api.domain.services.year_lock import ensure_unlock_permitted, lock, unlock

logger = logging.getLogger(__name__)


def _audit(event: str, req: YearLockRequestDTO, *, changed: bool) -> None:
    logger.info(
        event,
        extra={
            "extra": {
                "municipality_id": str(req.municipality_id),
                "year": req.year,
                "actor": req.actor,
                "role": req.role,
                "changed": changed,
            }
        },
    )


class CreateYearFromPriorUseCase:
    """Create ``target_year`` from ``source_year``.

    The source is locked (created locked if it was never stored) and the
    target is created unlocked and hidden, recording its source.

    Args:
        uow: Application UnitOfWork.

    Returns:
        The created target AssessmentYear.

    Raises:
        AssessmentYearExistsError: If the target year already exists.
        ConfigurationValidationError: If the target does not follow the source.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        """Initialize the use case."""
        self._uow = uow

    async def execute(self, req: CreateYearFromPriorRequestDTO) -> AssessmentYear:
        """Create the new year.

        Args:
            req: Source and target years.

        Returns:
            The stored target year.
        """
        if req.target_year <= req.source_year:
            raise ConfigurationValidationError(
                [{"field": "target_year", "message": "must be greater than source_year"}]
            )

        async with self._uow as tx:
            repo = assessment_year_repo(tx)
            if await repo.get(municipality_id=req.municipality_id, year=req.target_year):
                raise AssessmentYearExistsError(req.target_year)

            source = await repo.get(municipality_id=req.municipality_id, year=req.source_year)
            if source is None:
                await repo.add(
                    AssessmentYear(
                        municipality_id=req.municipality_id,
                        year=req.source_year,
                        is_locked=True,
                        created_by=req.actor,
                    )
                )
            elif not source.is_locked:
                await repo.update(lock(source))

            target = await repo.add(
                AssessmentYear(
                    municipality_id=req.municipality_id,
                    year=req.target_year,
                    is_locked=False,
                    is_hidden=True,
                    source_year=req.source_year,
                    created_by=req.actor,
                )
            )
            await tx.commit()

        logger.info(
            "assessment_year.created",
            extra={
                "extra": {
                    "municipality_id": str(req.municipality_id),
                    "year": req.target_year,
                    "source_year": req.source_year,
                    "actor": req.actor,
                }
            },
        )
        return target


class LockYearUseCase:
    """Lock a year, creating it locked when absent.

    Args:
        uow: Application UnitOfWork.

    Returns:
        The locked AssessmentYear.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        """Initialize the use case."""
        self._uow = uow

    async def execute(self, req: YearLockRequestDTO) -> AssessmentYear:
        """Lock ``req.year``.

        Args:
            req: Year and actor.

        Returns:
            The year in its locked state.
        """
        async with self._uow as tx:
            repo = assessment_year_repo(tx)
            stored = await repo.get(municipality_id=req.municipality_id, year=req.year)
            changed = stored is None or not stored.is_locked
            if stored is None:
                result = await repo.add(
                    AssessmentYear(
                        municipality_id=req.municipality_id,
                        year=req.year,
                        is_locked=True,
                        created_by=req.actor,
                    )
                )
            elif changed:
                result = await repo.update(lock(stored))
            else:
                result = stored
            await tx.commit()

        _audit("assessment_year.locked", req, changed=changed)
        return result


class UnlockYearUseCase:
    """Privileged unlock of a year.

    Args:
        uow: Application UnitOfWork.
        allowed_roles: Actor roles permitted to unlock.

    Returns:
        The unlocked AssessmentYear.

    Raises:
        UnlockNotPermittedError: If the actor role is not allowed.
        RecordNotFoundError: If the year does not exist.
    """

    def __init__(self, *, uow: UnitOfWork, allowed_roles: Collection[str]) -> None:
        """Initialize the use case."""
        self._uow = uow
        self._allowed_roles = tuple(allowed_roles)

    async def execute(self, req: YearLockRequestDTO) -> AssessmentYear:
        """Unlock ``req.year``.

        Args:
            req: Year, actor and actor role.

        Returns:
            The year in its unlocked state.
        """
        try:
            ensure_unlock_permitted(req.role, self._allowed_roles, req.year)
        except UnlockNotPermittedError:
            logger.warning(
                "assessment_year.unlock_denied",
                extra={
                    "extra": {
                        "municipality_id": str(req.municipality_id),
                        "year": req.year,
                        "actor": req.actor,
                        "role": req.role,
                    }
                },
            )
            raise

        async with self._uow as tx:
            repo = assessment_year_repo(tx)
            stored = await require_year(tx, req.municipality_id, req.year)
            changed = stored.is_locked
            result = await repo.update(unlock(stored)) if changed else stored
            await tx.commit()

        _audit("assessment_year.unlocked", req, changed=changed)
        return result
