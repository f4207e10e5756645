# src/millrate_api/adapters/presenters/configuration_presenter.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Presenters for configuration HTTP responses.

Purpose:
    Map configuration DTOs and records to HTTP schemas.

Layer:
    adapters/presenters
"""

from __future__ import annotations

from millrate_api.adapters.schemas.http.configuration_schemas import (
    ConfigurationHistoryEntryHTTP,
    ConfigurationHistoryHTTP,
    ConfigurationRecordHTTP,
    ConfigurationWriteResultHTTP,
    ResolvedConfigurationHTTP,
)
from millrate_api.application.schemas.dto.configuration import (
    ConfigurationHistoryDTO,
    ConfigurationWriteResultDTO,
    ResolvedConfigurationDTO,
)
from millrate_api.domain.entities.configuration_record import ConfigurationRecord


def present_record(record: ConfigurationRecord) -> ConfigurationRecordHTTP:
    """Map one configuration record."""
    return ConfigurationRecordHTTP(
        id=record.id,
        kind=record.kind,
        effective_year=record.effective_year,
        effective_year_end=record.effective_year_end,
        previous_version_id=record.previous_version_id,
        next_version_id=record.next_version_id,
        is_active=record.is_active,
        attributes=dict(record.attributes),
        created_at=record.created_at,
        updated_at=record.updated_at,
        created_by=record.created_by,
        updated_by=record.updated_by,
    )


def present_resolved(dto: ResolvedConfigurationDTO) -> ResolvedConfigurationHTTP:
    """Map resolved heads of one kind."""
    return ResolvedConfigurationHTTP(
        kind=dto.kind,
        year=dto.year,
        is_locked=dto.is_locked,
        records=[present_record(r) for r in dto.records],
        fault_count=dto.fault_count,
    )


def present_write_result(dto: ConfigurationWriteResultDTO) -> ConfigurationWriteResultHTTP:
    """Map the outcome of a create, edit or delete."""
    return ConfigurationWriteResultHTTP(
        outcome=dto.outcome,
        record=present_record(dto.record),
        previous_version_id=dto.previous_version_id,
        message=dto.message,
    )


def present_history(dto: ConfigurationHistoryDTO) -> ConfigurationHistoryHTTP:
    """Map an item's version chain."""
    return ConfigurationHistoryHTTP(
        kind=dto.kind,
        viewing_year=dto.viewing_year,
        entries=[
            ConfigurationHistoryEntryHTTP(
                record=present_record(e.record),
                is_inherited=e.is_inherited,
                is_effective=e.is_effective,
            )
            for e in dto.entries
        ],
    )
