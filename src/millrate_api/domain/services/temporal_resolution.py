# src/millrate_api/domain/services/temporal_resolution.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Temporal resolution of year-versioned configuration.

Purpose:
    Select, for a given assessment year, the single effective head of each
    logical configuration item, and expose an item's version chain.

Layer:
    domain/services

Notes:
    - Ties on ``effective_year`` within one business key are data-integrity
      faults. They are returned, never resolved; none of the tied records
      is included in the result.
    - The function is pure; callers log faults.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from millrate_api.domain.entities.configuration_record import ConfigurationRecord
from millrate_api.domain.enums.assessing import ConfigurationKind

__all__ = [
    "HistoryEntry",
    "Resolution",
    "ResolutionFault",
    "resolve_for_year",
    "year_history",
]

type GroupKey = tuple[ConfigurationKind, tuple[Any, ...]]


@dataclass(frozen=True, slots=True)
class ResolutionFault:
    """Two or more effective records tie on ``effective_year`` for one key.

    Attributes:
        kind: Configuration kind.
        business_key: Normalized business key.
        effective_year: The tied year.
        record_ids: Ids of the tied records.
    """

    kind: ConfigurationKind
    business_key: tuple[Any, ...]
    effective_year: int
    record_ids: tuple[UUID, ...]


@dataclass(frozen=True, slots=True)
class Resolution:
    """Result of resolving records for a year.

    Attributes:
        records: One head per business key, ordered by kind then key.
        faults: Integrity faults found while resolving.
    """

    records: tuple[ConfigurationRecord, ...] = ()
    faults: tuple[ResolutionFault, ...] = ()


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """One version of an item's chain, seen from a viewing year.

    Attributes:
        record: The version.
        is_inherited: True when the version started before the viewing year.
        is_effective: True when the version applies to the viewing year.
    """

    record: ConfigurationRecord
    is_inherited: bool
    is_effective: bool


def _sort_key(group: GroupKey) -> tuple[str, str]:
    kind, key = group
    return kind.value, "/".join("" if p is None else str(p) for p in key)


def resolve_for_year(records: Iterable[ConfigurationRecord], year: int) -> Resolution:
    """Resolve the effective head per business key for ``year``.

    Args:
        records: Candidate records for one municipality, any kinds.
        year: Assessment year to resolve for.

    Returns:
        The resolution. Empty input yields an empty resolution.
    """
    groups: dict[GroupKey, list[ConfigurationRecord]] = defaultdict(list)
    for record in records:
        if record.is_effective_in(year):
            groups[(record.kind, record.business_key)].append(record)

    heads: list[ConfigurationRecord] = []
    faults: list[ResolutionFault] = []
    for group in sorted(groups, key=_sort_key):
        candidates = groups[group]
        latest = max(r.effective_year for r in candidates)
        winners = [r for r in candidates if r.effective_year == latest]
        if len(winners) > 1:
            faults.append(
                ResolutionFault(
                    kind=group[0],
                    business_key=group[1],
                    effective_year=latest,
                    record_ids=tuple(sorted((r.id for r in winners), key=str)),
                )
            )
            continue
        heads.append(winners[0])

    return Resolution(records=tuple(heads), faults=tuple(faults))


def year_history(
    records: Iterable[ConfigurationRecord],
    target: ConfigurationRecord,
    viewing_year: int,
) -> Sequence[HistoryEntry]:
    """Return the active version chain of ``target``'s item ordered by year.

    Args:
        records: Candidate records of the same municipality and kind.
        target: Any version of the item.
        viewing_year: Year the history is viewed from.
    """
    key = target.business_key
    chain = sorted(
        (r for r in records if r.kind is target.kind and r.is_active and r.business_key == key),
        key=lambda r: r.effective_year,
    )
    return [
        HistoryEntry(
            record=r,
            is_inherited=r.effective_year < viewing_year,
            is_effective=r.is_effective_in(viewing_year),
        )
        for r in chain
    ]
