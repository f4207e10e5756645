# src/millrate_api/application/use_cases/configuration/edit_configuration.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Use case: edit a configuration record through the copy-on-write resolver.

Purpose:
    Load the record, its successor version, the lock state of its year and
    the viewing year, and the active peers of its kind in both years. The
    domain resolver plans the write, which is applied in the same unit of
    work.

Layer:
    application/use_cases/configuration

Notes:
    - The application-level duplicate check is an optimization. The store's
      unique index is the safety net for concurrent forks; the repository
      turns its violation into ``DuplicateConfigurationError``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from millrate_api.application.schemas.dto.configuration import (
    ConfigurationWriteResultDTO,
    EditConfigurationRequestDTO,
)
from millrate_api.application.services.configuration_access import (
    configuration_repo,
    get_record,
    is_year_locked,
)
from millrate_api.application.uow import UnitOfWork
from millrate_api.domain.entities.write_plan import WritePlan
from millrate_api.domain.services.copy_on_write import plan_edit

logger = logging.getLogger(__name__)


async def apply_plan(tx: Any, plan: WritePlan) -> None:
    """Apply a write plan: inserts first, then updates."""
    repo = configuration_repo(tx)
    for record in plan.creates:
        await repo.add(record)
    for record in plan.updates:
        await repo.update(record)


class EditConfigurationUseCase:
    """Edit a configuration record as seen from a target year.

    Args:
        uow: Application UnitOfWork.
        id_factory: Identifier generator for forked records.

    Returns:
        ConfigurationWriteResultDTO naming the outcome (``direct``,
        ``copyOnWrite`` or ``updatedExistingTarget``).

    Raises:
        RecordNotFoundError: If the record does not exist for the municipality.
        YearLockedError: If the year that would be written is locked.
        ConfigurationValidationError: If the merged attributes are invalid.
        DuplicateConfigurationError: If the resulting business key collides.
    """

    def __init__(self, *, uow: UnitOfWork, id_factory: Callable[[], UUID] = uuid4) -> None:
        """Initialize the use case."""
        self._uow = uow
        self._id_factory = id_factory

    async def execute(self, req: EditConfigurationRequestDTO) -> ConfigurationWriteResultDTO:
        """Plan and apply the edit.

        Args:
            req: Record, target year and attribute changes.

        Returns:
            The write result.
        """
        async with self._uow as tx:
            record = await get_record(tx, req.municipality_id, req.kind, req.record_id)
            source_locked = await is_year_locked(tx, req.municipality_id, record.effective_year)
            target_locked = (
                source_locked
                if record.effective_year == req.target_year
                else await is_year_locked(tx, req.municipality_id, req.target_year)
            )
            peers = await configuration_repo(tx).list_for_years(
                municipality_id=req.municipality_id,
                kind=req.kind,
                years=sorted({record.effective_year, req.target_year}),
            )
            successor = (
                await configuration_repo(tx).get(
                    municipality_id=req.municipality_id, record_id=record.next_version_id
                )
                if record.next_version_id is not None
                else None
            )
            plan = plan_edit(
                record,
                req.target_year,
                req.changes,
                source_locked=source_locked,
                target_locked=target_locked,
                peers=peers,
                new_id=self._id_factory(),
                now=datetime.now(tz=UTC),
                actor=req.actor,
                successor=successor,
            )
            await apply_plan(tx, plan)
            await tx.commit()

        logger.info(
            "configuration.edited",
            extra={
                "extra": {
                    "municipality_id": str(req.municipality_id),
                    "kind": req.kind.value,
                    "record_id": str(req.record_id),
                    "result_id": str(plan.record.id),
                    "target_year": req.target_year,
                    "outcome": plan.outcome.value,
                    "actor": req.actor,
                }
            },
        )
        return ConfigurationWriteResultDTO(
            outcome=plan.outcome,
            record=plan.record,
            previous_version_id=plan.previous_version_id,
            message=plan.message,
        )
