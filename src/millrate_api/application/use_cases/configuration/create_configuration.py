# src/millrate_api/application/use_cases/configuration/create_configuration.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Use case: create a configuration record in a year.

Layer:
    application/use_cases/configuration
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID, uuid4

from millrate_api.application.schemas.dto.configuration import (
    ConfigurationWriteResultDTO,
    CreateConfigurationRequestDTO,
)
from millrate_api.application.services.configuration_access import (
    configuration_repo,
    is_year_locked,
)
from millrate_api.application.uow import UnitOfWork
from millrate_api.domain.enums.assessing import WriteOutcome
from millrate_api.domain.services.copy_on_write import plan_create

logger = logging.getLogger(__name__)


class CreateConfigurationUseCase:
    """Create a new configuration head in an unlocked year.

    Args:
        uow: Application UnitOfWork.
        id_factory: Identifier generator, injectable for tests.

    Raises:
        YearLockedError: If the year is locked.
        ConfigurationValidationError: If attributes are invalid.
        DuplicateConfigurationError: If the business key exists in the year.
    """

    def __init__(self, *, uow: UnitOfWork, id_factory: Callable[[], UUID] = uuid4) -> None:
        """Initialize the use case."""
        self._uow = uow
        self._id_factory = id_factory

    async def execute(self, req: CreateConfigurationRequestDTO) -> ConfigurationWriteResultDTO:
        """Validate, check uniqueness and insert.

        Args:
            req: Kind, year and raw attributes.

        Returns:
            The created record with outcome ``direct``.
        """
        async with self._uow as tx:
            repo = configuration_repo(tx)
            locked = await is_year_locked(tx, req.municipality_id, req.year)
            peers = await repo.list_for_years(
                municipality_id=req.municipality_id, kind=req.kind, years=(req.year,)
            )
            record = plan_create(
                municipality_id=req.municipality_id,
                kind=req.kind,
                year=req.year,
                attributes=req.attributes,
                year_locked=locked,
                peers=peers,
                new_id=self._id_factory(),
                now=datetime.now(tz=UTC),
                actor=req.actor,
            )
            await repo.add(record)
            await tx.commit()

        logger.info(
            "configuration.created",
            extra={
                "extra": {
                    "municipality_id": str(req.municipality_id),
                    "kind": req.kind.value,
                    "record_id": str(record.id),
                    "year": req.year,
                    "actor": req.actor,
                }
            },
        )
        return ConfigurationWriteResultDTO(
            outcome=WriteOutcome.DIRECT,
            record=record,
            message=f"Created {req.kind.value.replace('_', ' ')} for year {req.year}",
        )
