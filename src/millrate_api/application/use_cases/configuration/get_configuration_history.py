# src/millrate_api/application/use_cases/configuration/get_configuration_history.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Use case: version chain of a configuration item."""

from __future__ import annotations

from millrate_api.application.schemas.dto.configuration import (
    ConfigurationHistoryDTO,
    ConfigurationHistoryRequestDTO,
)
from millrate_api.application.services.configuration_access import (
    configuration_repo,
    get_record,
)
from millrate_api.application.uow import UnitOfWork
from millrate_api.domain.services.temporal_resolution import year_history


class GetConfigurationHistoryUseCase:
    """Return every active version of a record's item.

    Args:
        uow: Application UnitOfWork.

    Raises:
        RecordNotFoundError: If the record does not exist for the municipality.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        """Initialize the use case."""
        self._uow = uow

    async def execute(self, req: ConfigurationHistoryRequestDTO) -> ConfigurationHistoryDTO:
        """Load the chain ordered by effective year.

        Args:
            req: Record and viewing year.

        Returns:
            History entries flagged relative to the viewing year.
        """
        async with self._uow as tx:
            record = await get_record(tx, req.municipality_id, req.kind, req.record_id)
            versions = await configuration_repo(tx).list_versions(
                municipality_id=req.municipality_id, kind=req.kind
            )

        entries = year_history(versions, record, req.viewing_year)
        return ConfigurationHistoryDTO(
            kind=req.kind, viewing_year=req.viewing_year, entries=tuple(entries)
        )
