# src/millrate_api/adapters/schemas/http/configuration_schemas.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""HTTP schemas for year-versioned configuration.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from millrate_api.adapters.schemas.http.base import BaseHTTPSchema
from millrate_api.domain.enums.assessing import ConfigurationKind, WriteOutcome

__all__ = [
    "ConfigurationHistoryEntryHTTP",
    "ConfigurationHistoryHTTP",
    "ConfigurationRecordHTTP",
    "ConfigurationWriteResultHTTP",
    "CreateConfigurationRequestHTTP",
    "EditConfigurationRequestHTTP",
    "ResolvedConfigurationHTTP",
]


class ConfigurationRecordHTTP(BaseHTTPSchema):
    """One version of a configuration item."""

    id: UUID
    kind: ConfigurationKind
    effective_year: int
    effective_year_end: int | None = None
    previous_version_id: UUID | None = None
    next_version_id: UUID | None = None
    is_active: bool = True
    attributes: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None


class ResolvedConfigurationHTTP(BaseHTTPSchema):
    """Configuration heads of one kind as of a year."""

    kind: ConfigurationKind
    year: int
    is_locked: bool
    records: list[ConfigurationRecordHTTP]
    fault_count: int = 0


class CreateConfigurationRequestHTTP(BaseHTTPSchema):
    """Body of a configuration create."""

    year: int = Field(..., ge=2000, le=2099, description="Year the record takes effect.")
    attributes: dict[str, Any] = Field(..., description="Kind-specific fields.")


class EditConfigurationRequestHTTP(BaseHTTPSchema):
    """Body of a configuration edit: the fields to change."""

    changes: dict[str, Any] = Field(default_factory=dict)


class ConfigurationWriteResultHTTP(BaseHTTPSchema):
    """Outcome of a create, edit or delete."""

    outcome: WriteOutcome
    record: ConfigurationRecordHTTP
    previous_version_id: UUID | None = None
    message: str = ""


class ConfigurationHistoryEntryHTTP(BaseHTTPSchema):
    """One version in an item's history as seen from a viewing year."""

    record: ConfigurationRecordHTTP
    is_inherited: bool
    is_effective: bool


class ConfigurationHistoryHTTP(BaseHTTPSchema):
    """Version chain of one configuration item, oldest first."""

    kind: ConfigurationKind
    viewing_year: int
    entries: list[ConfigurationHistoryEntryHTTP]
