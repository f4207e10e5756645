# src/millrate_api/application/use_cases/configuration/delete_configuration.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Use case: delete a configuration record as seen from a target year.

Layer:
    application/use_cases/configuration
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from millrate_api.application.schemas.dto.configuration import (
    ConfigurationWriteResultDTO,
    DeleteConfigurationRequestDTO,
)
from millrate_api.application.services.configuration_access import get_record, is_year_locked
from millrate_api.application.uow import UnitOfWork
from millrate_api.application.use_cases.configuration.edit_configuration import apply_plan
from millrate_api.domain.services.copy_on_write import plan_delete

logger = logging.getLogger(__name__)


class DeleteConfigurationUseCase:
    """Soft-delete a record in its own year, or end it temporally.

    Args:
        uow: Application UnitOfWork.

    Returns:
        ConfigurationWriteResultDTO with outcome ``softDelete`` or
        ``temporalDelete``.

    Raises:
        RecordNotFoundError: If the record does not exist or no longer applies.
        YearLockedError: If the year that would be written is locked.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        """Initialize the use case."""
        self._uow = uow

    async def execute(self, req: DeleteConfigurationRequestDTO) -> ConfigurationWriteResultDTO:
        """Plan and apply the delete.

        Args:
            req: Record and target year.

        Returns:
            The write result.
        """
        async with self._uow as tx:
            record = await get_record(tx, req.municipality_id, req.kind, req.record_id)
            source_locked = await is_year_locked(tx, req.municipality_id, record.effective_year)
            target_locked = await is_year_locked(tx, req.municipality_id, req.target_year)
            plan = plan_delete(
                record,
                req.target_year,
                source_locked=source_locked,
                target_locked=target_locked,
                now=datetime.now(tz=UTC),
                actor=req.actor,
            )
            await apply_plan(tx, plan)
            await tx.commit()

        logger.info(
            "configuration.deleted",
            extra={
                "extra": {
                    "municipality_id": str(req.municipality_id),
                    "kind": req.kind.value,
                    "record_id": str(req.record_id),
                    "target_year": req.target_year,
                    "outcome": plan.outcome.value,
                    "actor": req.actor,
                }
            },
        )
        return ConfigurationWriteResultDTO(
            outcome=plan.outcome, record=plan.record, message=plan.message
        )
