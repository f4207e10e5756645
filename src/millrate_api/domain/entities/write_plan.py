# src/millrate_api/domain/entities/write_plan.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Copy-on-write plan.

Purpose:
    Describe the writes the copy-on-write resolver decided on, so the
    application layer can apply them through repositories in one unit of
    work.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from millrate_api.domain.entities.configuration_record import ConfigurationRecord
from millrate_api.domain.enums.assessing import WriteOutcome

__all__ = ["WritePlan"]


@dataclass(frozen=True, slots=True)
class WritePlan:
    """Records to update and create for one edit or delete.

    Attributes:
        outcome: How the write is applied.
        record: The record the caller should see as the result.
        updates: Existing records to overwrite (by id).
        creates: New records to insert.
        previous_version_id: Predecessor of a forked record.
        message: Human-readable summary.
    """

    outcome: WriteOutcome
    record: ConfigurationRecord
    updates: tuple[ConfigurationRecord, ...] = ()
    creates: tuple[ConfigurationRecord, ...] = ()
    previous_version_id: UUID | None = None
    message: str = ""

    def __post_init__(self) -> None:
        """Require at least one write."""
        object.__setattr__(self, "updates", tuple(self.updates))
        object.__setattr__(self, "creates", tuple(self.creates))
        if not self.updates and not self.creates:
            raise ValueError("a write plan must update or create at least one record")
