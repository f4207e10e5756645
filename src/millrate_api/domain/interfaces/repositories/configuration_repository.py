# src/millrate_api/domain/interfaces/repositories/configuration_repository.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Configuration repository interface.

Purpose:
    Persistence operations for year-versioned configuration records of every
    kind, scoped by municipality.

Layer:
    domain/interfaces/repositories

Notes:
    Implementations must translate store-level unique violations on
    (municipality, kind, business key, effective year) among active rows
    into ``DuplicateConfigurationError``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol
from uuid import UUID

from millrate_api.domain.entities.configuration_record import ConfigurationRecord
from millrate_api.domain.enums.assessing import ConfigurationKind


class ConfigurationRepository(Protocol):
    """Protocol for repositories managing configuration records."""

    async def get(
        self, *, municipality_id: UUID, record_id: UUID
    ) -> ConfigurationRecord | None:
        """Return one record by id within a municipality."""

    async def list_candidates(
        self,
        *,
        municipality_id: UUID,
        year: int,
        kinds: Sequence[ConfigurationKind] | None = None,
    ) -> Sequence[ConfigurationRecord]:
        """Return active records that could be effective in ``year``.

        Implementations may pre-filter on ``effective_year <= year`` and
        ``effective_year_end`` being null or greater than ``year``; the
        domain resolver applies the full rule.

        Args:
            municipality_id: Owning tenant.
            year: Year being resolved.
            kinds: Restrict to these kinds; all kinds when None.
        """

    async def list_for_years(
        self,
        *,
        municipality_id: UUID,
        kind: ConfigurationKind,
        years: Sequence[int],
    ) -> Sequence[ConfigurationRecord]:
        """Return active records of ``kind`` whose ``effective_year`` is in ``years``."""

    async def list_versions(
        self, *, municipality_id: UUID, kind: ConfigurationKind
    ) -> Sequence[ConfigurationRecord]:
        """Return all active records of ``kind``, ordered by effective year."""

    async def add(self, record: ConfigurationRecord) -> None:
        """Insert a new record.

        Raises:
            DuplicateConfigurationError: On a unique violation.
        """

    async def update(self, record: ConfigurationRecord) -> None:
        """Overwrite the stored record with the same id.

        Raises:
            RecordNotFoundError: If no record has ``record.id``.
            DuplicateConfigurationError: On a unique violation.
        """
