# src/millrate_api/domain/entities/configuration_record.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Year-versioned configuration record.

Purpose:
    Represent one version of a logical configuration item (a building code,
    a sub-area factor, a land ladder tier, ...) in a storage-agnostic way.
    Versions of the same item share a business key and are linked through
    ``previous_version_id`` / ``next_version_id``.

Layer:
    domain/entities
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any
from uuid import UUID

from millrate_api.domain.enums.assessing import ConfigurationKind

__all__ = ["ConfigurationRecord", "business_key_for", "normalize_key_part"]


def normalize_key_part(value: Any) -> Any:
    """Normalize one business-key component for comparison.

    Strings compare case- and whitespace-insensitively; everything else is
    compared as-is.
    """
    if isinstance(value, str):
        return value.strip().upper()
    return value


def business_key_for(kind: ConfigurationKind, attributes: Mapping[str, Any]) -> tuple[Any, ...]:
    """Return the normalized business key of ``attributes`` for ``kind``."""
    return tuple(normalize_key_part(attributes.get(name)) for name in kind.business_key_fields)


@dataclass(frozen=True, slots=True)
class ConfigurationRecord:
    """One version of a configuration item.

    Attributes:
        id:
            Opaque record identifier.
        municipality_id:
            Owning tenant.
        kind:
            Configuration table this record belongs to.
        effective_year:
            Assessment year from which this version applies.
        attributes:
            Kind-specific domain fields (rate, points, description, ...).
        effective_year_end:
            Exclusive year at which this version stops applying, or None for
            an open-ended head.
        previous_version_id:
            Record this version was forked from, if any.
        next_version_id:
            Record that superseded this version, if any.
        is_active:
            Soft-delete flag, independent of the temporal end.
        created_at:
            Creation timestamp (UTC), when persisted.
        updated_at:
            Last modification timestamp (UTC), when persisted.
        created_by:
            Actor that created the record.
        updated_by:
            Actor that last modified the record.
    """

    id: UUID
    municipality_id: UUID
    kind: ConfigurationKind
    effective_year: int
    attributes: Mapping[str, Any] = field(default_factory=dict)
    effective_year_end: int | None = None
    previous_version_id: UUID | None = None
    next_version_id: UUID | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None

    def __post_init__(self) -> None:
        """Freeze attributes and enforce the temporal window invariant.

        Raises:
            ValueError: If ``effective_year_end`` does not follow ``effective_year``.
        """
        if self.effective_year_end is not None and self.effective_year_end <= self.effective_year:
            raise ValueError(
                f"effective_year_end ({self.effective_year_end}) must be greater than "
                f"effective_year ({self.effective_year})"
            )
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    @property
    def business_key(self) -> tuple[Any, ...]:
        """Normalized business key identifying the logical item."""
        return business_key_for(self.kind, self.attributes)

    @property
    def is_head(self) -> bool:
        """True when this version has no temporal end."""
        return self.effective_year_end is None

    def is_effective_in(self, year: int) -> bool:
        """Return True when this version applies to ``year``."""
        if not self.is_active or self.effective_year > year:
            return False
        return self.effective_year_end is None or self.effective_year_end > year
