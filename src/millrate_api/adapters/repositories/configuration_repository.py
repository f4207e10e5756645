# src/millrate_api/adapters/repositories/configuration_repository.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Configuration records repository (SQLAlchemy).

Purpose:
    Store and query year-versioned configuration records of every kind in
    ``assessing.configuration_records``.

Layer:
    adapters/repositories

Notes:
    The partial unique index on active (municipality, kind, business key,
    effective year) rows backs the application duplicate check; violations
    surface as ``DuplicateConfigurationError``.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from millrate_api.adapters.repositories.base_repository import BaseRepository
from millrate_api.domain.entities.configuration_record import ConfigurationRecord
from millrate_api.domain.enums.assessing import ConfigurationKind
from millrate_api.domain.exceptions.assessing import (
    DuplicateConfigurationError,
    RecordNotFoundError,
)
from millrate_api.infrastructure.database.models.assessing import ConfigurationRecordModel

BUSINESS_KEY_SEPARATOR = "|"


def storage_business_key(record: ConfigurationRecord) -> str:
    """Return the stored form of a record's normalized business key."""
    return BUSINESS_KEY_SEPARATOR.join(
        "" if part is None else str(part) for part in record.business_key
    )


def _to_domain(row: ConfigurationRecordModel) -> ConfigurationRecord:
    return ConfigurationRecord(
        id=row.id,
        municipality_id=row.municipality_id,
        kind=ConfigurationKind(row.kind),
        effective_year=row.effective_year,
        attributes=dict(row.attributes or {}),
        effective_year_end=row.effective_year_end,
        previous_version_id=row.previous_version_id,
        next_version_id=row.next_version_id,
        is_active=row.is_active,
        created_at=row.created_at,
        updated_at=row.updated_at,
        created_by=row.created_by,
        updated_by=row.updated_by,
    )


def _apply(row: ConfigurationRecordModel, record: ConfigurationRecord) -> None:
    row.municipality_id = record.municipality_id
    row.kind = record.kind.value
    row.business_key = storage_business_key(record)
    row.effective_year = record.effective_year
    row.effective_year_end = record.effective_year_end
    row.previous_version_id = record.previous_version_id
    row.next_version_id = record.next_version_id
    row.is_active = record.is_active
    row.attributes = dict(record.attributes)
    row.updated_by = record.updated_by


class ConfigurationRepository(BaseRepository[ConfigurationRecordModel]):
    """SQLAlchemy-backed configuration repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository."""
        super().__init__(session=session)

    async def get(self, *, municipality_id: UUID, record_id: UUID) -> ConfigurationRecord | None:
        """Return one record by id within a municipality."""
        stmt = select(ConfigurationRecordModel).where(
            ConfigurationRecordModel.id == record_id,
            ConfigurationRecordModel.municipality_id == municipality_id,
        )
        row = await self.fetch_optional(stmt)
        return _to_domain(row) if row is not None else None

    async def list_candidates(
        self,
        *,
        municipality_id: UUID,
        year: int,
        kinds: Sequence[ConfigurationKind] | None = None,
    ) -> Sequence[ConfigurationRecord]:
        """Return active records whose window covers ``year``."""
        model = ConfigurationRecordModel
        stmt = select(model).where(
            model.municipality_id == municipality_id,
            model.is_active.is_(True),
            model.effective_year <= year,
            or_(model.effective_year_end.is_(None), model.effective_year_end > year),
        )
        if kinds:
            stmt = stmt.where(model.kind.in_([k.value for k in kinds]))
        stmt = self.order_by_pk(stmt.order_by(model.kind, model.effective_year), model.id)
        return [_to_domain(r) for r in await self.fetch_all(stmt)]

    async def list_for_years(
        self,
        *,
        municipality_id: UUID,
        kind: ConfigurationKind,
        years: Sequence[int],
    ) -> Sequence[ConfigurationRecord]:
        """Return active records of ``kind`` starting in one of ``years``."""
        model = ConfigurationRecordModel
        stmt = select(model).where(
            model.municipality_id == municipality_id,
            model.kind == kind.value,
            model.is_active.is_(True),
            model.effective_year.in_(list(years)),
        )
        return [_to_domain(r) for r in await self.fetch_all(stmt)]

    async def list_versions(
        self, *, municipality_id: UUID, kind: ConfigurationKind
    ) -> Sequence[ConfigurationRecord]:
        """Return all active records of ``kind`` ordered by effective year."""
        model = ConfigurationRecordModel
        stmt = select(model).where(
            model.municipality_id == municipality_id,
            model.kind == kind.value,
            model.is_active.is_(True),
        )
        stmt = self.order_by_pk(stmt.order_by(model.effective_year), model.id)
        return [_to_domain(r) for r in await self.fetch_all(stmt)]

    async def add(self, record: ConfigurationRecord) -> None:
        """Insert a new record.

        Raises:
            DuplicateConfigurationError: On a unique violation.
        """
        row = ConfigurationRecordModel(id=record.id, created_by=record.created_by)
        _apply(row, record)
        self._session.add(row)
        await self.flush_or_raise(lambda exc: self._duplicate(record))

    async def update(self, record: ConfigurationRecord) -> None:
        """Overwrite the stored record with the same id.

        Raises:
            RecordNotFoundError: If no record has ``record.id``.
            DuplicateConfigurationError: On a unique violation.
        """
        row = await self._session.get(ConfigurationRecordModel, record.id)
        if row is None or row.municipality_id != record.municipality_id:
            raise RecordNotFoundError(
                f"Configuration record {record.id} does not exist.",
                details={"record_id": str(record.id)},
            )
        _apply(row, record)
        await self.flush_or_raise(lambda exc: self._duplicate(record))

    @staticmethod
    def _duplicate(record: ConfigurationRecord) -> DuplicateConfigurationError:
        return DuplicateConfigurationError(
            record.kind.value, record.business_key, record.effective_year
        )
