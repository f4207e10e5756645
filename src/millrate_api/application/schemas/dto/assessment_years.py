# src/millrate_api/application/schemas/dto/assessment_years.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Application DTOs for assessment-year lifecycle flows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True, slots=True)
class CreateYearFromPriorRequestDTO:
    """Create ``target_year`` from ``source_year``."""

    municipality_id: UUID
    source_year: int
    target_year: int
    actor: str | None = None


@dataclass(frozen=True, slots=True)
class YearLockRequestDTO:
    """Lock or unlock a year."""

    municipality_id: UUID
    year: int
    actor: str | None = None
    role: str | None = None


@dataclass(frozen=True, slots=True)
class SetYearVisibilityRequestDTO:
    """Show or hide a year."""

    municipality_id: UUID
    year: int
    is_hidden: bool
    actor: str | None = None


@dataclass(frozen=True, slots=True)
class MilestoneUpdateDTO:
    """Milestone fields to change; ``None`` leaves a field unchanged.

    Attributes:
        tax_rate: Tax rate per thousand.
        warrant_created_at: Warrant milestone.
        bills_generated_at: Billing milestone.
        commitment_date: Commitment milestone.
    """

    tax_rate: Decimal | None = None
    warrant_created_at: datetime | None = None
    bills_generated_at: datetime | None = None
    commitment_date: date | None = None


@dataclass(frozen=True, slots=True)
class UpdateMilestonesRequestDTO:
    """Update the milestones of a year."""

    municipality_id: UUID
    year: int
    milestones: MilestoneUpdateDTO
    actor: str | None = None
