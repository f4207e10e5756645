# src/millrate_api/domain/services/copy_on_write.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Copy-on-write resolver for year-versioned configuration.

Purpose:
    Decide how an edit or delete of a configuration record, requested while
    viewing a target year, is applied: in place, onto an existing target-year
    twin, or by forking a new version linked to its predecessor.

Layer:
    domain/services

Notes:
    - Planning is pure. The caller loads the lock states and the active peers
      of the record's kind in the source and target years, then applies the
      returned ``WritePlan`` in one unit of work.
    - Forking rewrites only the chain links of the superseded record
      (``effective_year_end``, ``next_version_id``). A superseded record whose
      own year is unlocked can still be edited in place; the change applies
      to the years before its successor.
    - Forking a record that already has a successor inserts the fork into
      the chain: the fork inherits the record's end year and forward link,
      and the successor's back link moves to the fork.
    - Inactive (soft-deleted) records cannot be edited or deleted.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import datetime
from typing import Any
from uuid import UUID

from millrate_api.domain.entities.configuration_record import (
    ConfigurationRecord,
    business_key_for,
)
from millrate_api.domain.entities.write_plan import WritePlan
from millrate_api.domain.enums.assessing import ConfigurationKind, WriteOutcome
from millrate_api.domain.exceptions.assessing import (
    DuplicateConfigurationError,
    RecordNotFoundError,
)
from millrate_api.domain.services.configuration_rules import validate_attributes
from millrate_api.domain.services.year_lock import ensure_writable

__all__ = ["ensure_unique", "find_twin", "plan_create", "plan_delete", "plan_edit"]


def _label(kind: ConfigurationKind) -> str:
    return kind.value.replace("_", " ")


def _require_active(record: ConfigurationRecord) -> None:
    if not record.is_active:
        raise RecordNotFoundError(
            f"No {_label(record.kind)} with id {record.id}.",
            details={"record_id": str(record.id), "kind": record.kind.value},
        )


def find_twin(
    record: ConfigurationRecord, target_year: int, peers: Iterable[ConfigurationRecord]
) -> ConfigurationRecord | None:
    """Return the active record of ``record``'s item starting at ``target_year``."""
    for peer in peers:
        if (
            peer.id != record.id
            and peer.is_active
            and peer.kind is record.kind
            and peer.effective_year == target_year
            and peer.business_key == record.business_key
        ):
            return peer
    return None


def ensure_unique(
    kind: ConfigurationKind,
    attributes: Mapping[str, Any],
    year: int,
    peers: Iterable[ConfigurationRecord],
    *,
    exclude: Iterable[UUID] = (),
) -> None:
    """Reject a business key already used by an active record in ``year``.

    Raises:
        DuplicateConfigurationError: If an active peer other than ``exclude``
            has the same key in ``year``.
    """
    key = business_key_for(kind, attributes)
    skip = set(exclude)
    for peer in peers:
        if (
            peer.id not in skip
            and peer.is_active
            and peer.kind is kind
            and peer.effective_year == year
            and peer.business_key == key
        ):
            raise DuplicateConfigurationError(kind.value, key, year)


def plan_create(
    *,
    municipality_id: UUID,
    kind: ConfigurationKind,
    year: int,
    attributes: Mapping[str, Any],
    year_locked: bool,
    peers: Iterable[ConfigurationRecord],
    new_id: UUID,
    now: datetime,
    actor: str | None = None,
) -> ConfigurationRecord:
    """Validate and build a new head record in ``year``.

    Raises:
        YearLockedError: If ``year`` is locked.
        ConfigurationValidationError: If attributes are invalid.
        DuplicateConfigurationError: If the business key is taken in ``year``.
    """
    ensure_writable(year, year_locked, municipality_id=municipality_id)
    normalized = validate_attributes(kind, attributes)
    ensure_unique(kind, normalized, year, peers)
    return ConfigurationRecord(
        id=new_id,
        municipality_id=municipality_id,
        kind=kind,
        effective_year=year,
        attributes=normalized,
        created_at=now,
        updated_at=now,
        created_by=actor,
        updated_by=actor,
    )


def plan_edit(
    record: ConfigurationRecord,
    target_year: int,
    changes: Mapping[str, Any],
    *,
    source_locked: bool,
    target_locked: bool,
    peers: Iterable[ConfigurationRecord],
    new_id: UUID,
    now: datetime,
    actor: str | None = None,
    successor: ConfigurationRecord | None = None,
) -> WritePlan:
    """Plan an edit of ``record`` requested while viewing ``target_year``.

    Args:
        record: Record being edited.
        target_year: Year the edit applies from.
        changes: Attribute changes merged over the record's attributes.
        source_locked: Lock state of ``record.effective_year``.
        target_locked: Lock state of ``target_year``.
        peers: Active records of the same kind in the source and target years.
        new_id: Identifier to use if a fork is created.
        now: Write timestamp.
        actor: Actor performing the edit.
        successor: The record named by ``record.next_version_id``, if any.

    Returns:
        The write plan.

    Raises:
        YearLockedError: If the year that would be written is locked.
        ConfigurationValidationError: If the merged attributes are invalid.
        DuplicateConfigurationError: If the merged business key collides.
        RecordNotFoundError: If ``record`` is inactive, or does not apply to
            ``target_year`` and no target-year twin exists.
    """
    _require_active(record)
    peers = list(peers)
    source_year = record.effective_year
    inherited = source_year != target_year
    merged = validate_attributes(record.kind, {**record.attributes, **changes})
    label = _label(record.kind)

    if not inherited and not source_locked:
        ensure_unique(record.kind, merged, source_year, peers, exclude=(record.id,))
        updated = replace(record, attributes=merged, updated_at=now, updated_by=actor)
        return WritePlan(
            outcome=WriteOutcome.DIRECT,
            record=updated,
            updates=(updated,),
            message=f"Updated {label} for year {source_year}",
        )

    ensure_writable(target_year, target_locked, municipality_id=record.municipality_id)

    twin = find_twin(record, target_year, peers)
    if twin is not None:
        ensure_unique(record.kind, merged, target_year, peers, exclude=(twin.id, record.id))
        twin_merged = validate_attributes(record.kind, {**twin.attributes, **changes})
        updated_twin = replace(twin, attributes=twin_merged, updated_at=now, updated_by=actor)
        return WritePlan(
            outcome=WriteOutcome.UPDATED_EXISTING_TARGET,
            record=updated_twin,
            updates=(updated_twin,),
            previous_version_id=updated_twin.previous_version_id,
            message=f"Updated existing {label} for year {target_year}",
        )

    if not record.is_effective_in(target_year):
        raise RecordNotFoundError(
            f"The {label} {record.id} does not apply to year {target_year}.",
            details={"record_id": str(record.id), "year": target_year},
        )

    ensure_unique(record.kind, merged, target_year, peers, exclude=(record.id,))
    fork = ConfigurationRecord(
        id=new_id,
        municipality_id=record.municipality_id,
        kind=record.kind,
        effective_year=target_year,
        attributes=merged,
        effective_year_end=record.effective_year_end,
        previous_version_id=record.id,
        next_version_id=record.next_version_id,
        created_at=now,
        updated_at=now,
        created_by=actor,
        updated_by=actor,
    )
    superseded = replace(
        record,
        effective_year_end=target_year,
        next_version_id=fork.id,
        updated_at=now,
        updated_by=actor,
    )
    updates = [superseded]
    if successor is not None and successor.id == record.next_version_id:
        updates.append(
            replace(successor, previous_version_id=fork.id, updated_at=now, updated_by=actor)
        )
    return WritePlan(
        outcome=WriteOutcome.COPY_ON_WRITE,
        record=fork,
        updates=tuple(updates),
        creates=(fork,),
        previous_version_id=record.id,
        message=f"Created new {label} version for year {target_year}",
    )


def plan_delete(
    record: ConfigurationRecord,
    target_year: int,
    *,
    source_locked: bool,
    target_locked: bool,
    now: datetime,
    actor: str | None = None,
) -> WritePlan:
    """Plan a delete of ``record`` requested while viewing ``target_year``.

    A record owned by the (unlocked) viewing year is soft-deleted. Otherwise
    the record is temporally ended at ``target_year`` and stays visible to
    earlier years.

    Raises:
        YearLockedError: If the year that would be written is locked.
        RecordNotFoundError: If the record is inactive or no longer applies to
            ``target_year``.
    """
    _require_active(record)
    source_year = record.effective_year
    inherited = source_year != target_year
    label = _label(record.kind)

    if not inherited and not source_locked:
        deleted = replace(record, is_active=False, updated_at=now, updated_by=actor)
        return WritePlan(
            outcome=WriteOutcome.SOFT_DELETE,
            record=deleted,
            updates=(deleted,),
            message=f"Deleted {label} for year {source_year}",
        )

    ensure_writable(target_year, target_locked, municipality_id=record.municipality_id)

    if not record.is_effective_in(target_year):
        raise RecordNotFoundError(
            f"The {label} {record.id} does not apply to year {target_year}.",
            details={"record_id": str(record.id), "year": target_year},
        )

    ended = replace(record, effective_year_end=target_year, updated_at=now, updated_by=actor)
    return WritePlan(
        outcome=WriteOutcome.TEMPORAL_DELETE,
        record=ended,
        updates=(ended,),
        message=f"Removed {label} from year {target_year} forward",
    )
