# src/millrate_api/application/schemas/dto/configuration.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Application DTOs for temporal configuration flows.

Purpose:
    Transport-agnostic requests and responses of the configuration use
    cases. Presenters map them to HTTP schemas.

Layer:
    application/schemas/dto
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from millrate_api.domain.entities.configuration_record import ConfigurationRecord
from millrate_api.domain.enums.assessing import ConfigurationKind, WriteOutcome
from millrate_api.domain.services.temporal_resolution import HistoryEntry


@dataclass(frozen=True, slots=True)
class ResolveConfigurationRequestDTO:
    """Request the configuration heads of one kind for a year."""

    municipality_id: UUID
    kind: ConfigurationKind
    year: int


@dataclass(frozen=True, slots=True)
class ResolvedConfigurationDTO:
    """Configuration heads of one kind as of a year.

    Attributes:
        kind: Configuration kind.
        year: Year resolved for.
        is_locked: Lock state of ``year``.
        records: One head per business key.
        fault_count: Number of integrity faults skipped while resolving.
    """

    kind: ConfigurationKind
    year: int
    is_locked: bool
    records: tuple[ConfigurationRecord, ...]
    fault_count: int = 0


@dataclass(frozen=True, slots=True)
class CreateConfigurationRequestDTO:
    """Create a configuration record in a year."""

    municipality_id: UUID
    kind: ConfigurationKind
    year: int
    attributes: Mapping[str, Any]
    actor: str | None = None


@dataclass(frozen=True, slots=True)
class EditConfigurationRequestDTO:
    """Edit a record while viewing ``target_year``."""

    municipality_id: UUID
    kind: ConfigurationKind
    record_id: UUID
    target_year: int
    changes: Mapping[str, Any] = field(default_factory=dict)
    actor: str | None = None


@dataclass(frozen=True, slots=True)
class DeleteConfigurationRequestDTO:
    """Delete a record while viewing ``target_year``."""

    municipality_id: UUID
    kind: ConfigurationKind
    record_id: UUID
    target_year: int
    actor: str | None = None


@dataclass(frozen=True, slots=True)
class ConfigurationWriteResultDTO:
    """Outcome of a configuration write.

    Attributes:
        outcome: How the write was applied.
        record: Resulting record.
        previous_version_id: Predecessor, for forks and twins.
        message: Human-readable summary.
    """

    outcome: WriteOutcome
    record: ConfigurationRecord
    previous_version_id: UUID | None = None
    message: str = ""


@dataclass(frozen=True, slots=True)
class ConfigurationHistoryRequestDTO:
    """Request the version chain of a record's item."""

    municipality_id: UUID
    kind: ConfigurationKind
    record_id: UUID
    viewing_year: int


@dataclass(frozen=True, slots=True)
class ConfigurationHistoryDTO:
    """Version chain of one configuration item."""

    kind: ConfigurationKind
    viewing_year: int
    entries: tuple[HistoryEntry, ...]
