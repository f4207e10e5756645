# src/millrate_api/domain/exceptions/assessing.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Assessing domain exceptions.

Purpose:
    Error taxonomy for temporal configuration writes, assessment-year
    lifecycle operations, and valuation lookups.

Layer:
    domain/exceptions

Notes:
    - Messages are safe to surface to API clients.
    - ``details`` carries the structured context (years, keys, field errors)
      that adapters copy into the HTTP error envelope.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from millrate_api.domain.exceptions.base import DomainError

__all__ = [
    "AssessmentYearExistsError",
    "ConfigurationNotFoundError",
    "ConfigurationValidationError",
    "DuplicateConfigurationError",
    "FieldError",
    "RecordNotFoundError",
    "UnlockNotPermittedError",
    "YearLockedError",
]

type FieldError = dict[str, Any]


class YearLockedError(DomainError):
    """Raised when a write targets a locked assessment year."""

    code = "YEAR_LOCKED"

    def __init__(self, year: int, *, municipality_id: UUID | None = None) -> None:
        """Initialize the error for the locked year.

        Args:
            year: The locked assessment year.
            municipality_id: Owning municipality, when known.
        """
        super().__init__(
            f"Configuration for year {year} is locked and cannot be modified.",
            details={
                "year": year,
                "municipality_id": str(municipality_id) if municipality_id else None,
            },
        )
        self.year = year


class DuplicateConfigurationError(DomainError):
    """Raised when a business key already exists within (municipality, year)."""

    code = "DUPLICATE_CONFIGURATION"

    def __init__(self, kind: str, business_key: Sequence[Any], year: int) -> None:
        """Initialize the error naming the conflicting key.

        Args:
            kind: Configuration kind (e.g. ``"building_code"``).
            business_key: Business-key values of the conflicting record.
            year: Effective year in which the collision occurs.
        """
        key_text = "/".join(str(part) for part in business_key) or "<singleton>"
        super().__init__(
            f"A {kind} with key '{key_text}' already exists for year {year}.",
            details={"kind": kind, "business_key": [str(p) for p in business_key], "year": year},
        )
        self.kind = kind
        self.business_key = tuple(business_key)
        self.year = year


class ConfigurationNotFoundError(DomainError):
    """Raised (or recorded as a warning) when referenced configuration is absent."""

    code = "CONFIGURATION_NOT_FOUND"


class ConfigurationValidationError(DomainError):
    """Raised when configuration attributes fail field-level validation."""

    code = "VALIDATION_ERROR"

    def __init__(self, errors: Sequence[FieldError]) -> None:
        """Initialize with field-level errors.

        Args:
            errors: Sequence of ``{"field": ..., "message": ...}`` mappings.
        """
        super().__init__("Configuration validation failed.", details={"errors": list(errors)})
        self.errors = list(errors)


class RecordNotFoundError(DomainError):
    """Raised when a requested record does not exist for the municipality."""

    code = "NOT_FOUND"


class AssessmentYearExistsError(DomainError):
    """Raised when creating an assessment year that already exists."""

    code = "ASSESSMENT_YEAR_EXISTS"

    def __init__(self, year: int) -> None:
        """Initialize the error for the existing year."""
        super().__init__(f"Assessment year {year} already exists.", details={"year": year})
        self.year = year


class UnlockNotPermittedError(DomainError):
    """Raised when an actor without an unlock role attempts to unlock a year."""

    code = "UNLOCK_NOT_PERMITTED"
