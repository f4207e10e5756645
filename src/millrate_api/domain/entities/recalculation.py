# src/millrate_api/domain/entities/recalculation.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Batch recalculation entities.

Purpose:
    Options and partial-success summaries for municipality-wide land
    recalculation runs.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

__all__ = ["RecalculationErrorDetail", "RecalculationOptions", "RecalculationSummary"]


@dataclass(frozen=True, slots=True)
class RecalculationOptions:
    """Options of a batch recalculation.

    Attributes:
        batch_size: Assessments processed per batch.
        force_clear_values: Zero calculated line values before recalculating.
        save: Persist results; when False the run is a dry run.
    """

    batch_size: int = 500
    force_clear_values: bool = False
    save: bool = True

    def __post_init__(self) -> None:
        """Require a positive batch size."""
        if self.batch_size < 1:
            raise ValueError("batch_size must be >= 1")


@dataclass(frozen=True, slots=True)
class RecalculationErrorDetail:
    """One per-assessment failure or zeroed-value warning.

    Attributes:
        assessment_id: Affected assessment.
        property_id: Affected parcel.
        error: Human-readable reason.
        code: Machine-readable reason.
        details: Structured context.
    """

    assessment_id: UUID
    property_id: UUID | None
    error: str
    code: str = "RECALCULATION_FAILED"
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Require a reason."""
        if not self.error:
            raise ValueError("error must not be empty")


@dataclass(frozen=True, slots=True)
class RecalculationSummary:
    """Partial-success summary of a batch run.

    Attributes:
        processed: Assessments examined.
        updated: Assessments whose results were saved.
        errors: Failures and zeroed-value warnings counted.
        error_details: Capped list of details.
        zones_adjusted: Assessments changed by redistribution, for zone runs.
        records_created: Assessments created, for year-ensure runs.
    """

    processed: int = 0
    updated: int = 0
    errors: int = 0
    error_details: tuple[RecalculationErrorDetail, ...] = ()
    zones_adjusted: int = 0
    records_created: int = 0

    def __post_init__(self) -> None:
        """Reject negative counters."""
        if min(self.processed, self.updated, self.errors) < 0:
            raise ValueError("counters must be >= 0")
        object.__setattr__(self, "error_details", tuple(self.error_details))
