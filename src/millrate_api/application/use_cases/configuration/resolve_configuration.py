# src/millrate_api/application/use_cases/configuration/resolve_configuration.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Use case: resolve configuration of one kind as of a year.

Layer:
    application/use_cases/configuration
"""

from __future__ import annotations

from millrate_api.application.schemas.dto.configuration import (
    ResolveConfigurationRequestDTO,
    ResolvedConfigurationDTO,
)
from millrate_api.application.services.configuration_access import (
    is_year_locked,
    resolve_configuration,
)
from millrate_api.application.uow import UnitOfWork


class ResolveConfigurationUseCase:
    """Return the configuration heads effective in a year.

    Args:
        uow: Application UnitOfWork used to resolve repositories.

    Returns:
        ResolvedConfigurationDTO with one record per business key and the
        year's lock state.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        """Initialize the use case."""
        self._uow = uow

    async def execute(self, req: ResolveConfigurationRequestDTO) -> ResolvedConfigurationDTO:
        """Resolve heads for ``req.year``.

        Args:
            req: Municipality, kind and year.

        Returns:
            The resolved heads. Items with integrity faults are left out and
            counted in ``fault_count``.
        """
        async with self._uow as tx:
            resolution = await resolve_configuration(
                tx, req.municipality_id, req.year, kinds=(req.kind,)
            )
            locked = await is_year_locked(tx, req.municipality_id, req.year)

        return ResolvedConfigurationDTO(
            kind=req.kind,
            year=req.year,
            is_locked=locked,
            records=tuple(r for r in resolution.records if r.kind is req.kind),
            fault_count=len(resolution.faults),
        )
