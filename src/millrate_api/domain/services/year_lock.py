# src/millrate_api/domain/services/year_lock.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Year lock guard.

Purpose:
    Encode the ``Unlocked <-> Locked`` state machine of assessment years and
    the checks configuration writes must pass before touching a year.

Layer:
    domain/services

Notes:
    - A year without a stored record is unlocked.
    - Unlocking is privileged: the actor role must be in the allowed set.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import replace
from uuid import UUID

from millrate_api.domain.entities.assessment_year import AssessmentYear
from millrate_api.domain.exceptions.assessing import UnlockNotPermittedError, YearLockedError

__all__ = [
    "ensure_unlock_permitted",
    "ensure_writable",
    "is_locked",
    "lock",
    "unlock",
]


def is_locked(year: AssessmentYear | None) -> bool:
    """Return the lock state of a (possibly absent) assessment year."""
    return year is not None and year.is_locked


def ensure_writable(year: int, locked: bool, *, municipality_id: UUID | None = None) -> None:
    """Reject writes into a locked year.

    Raises:
        YearLockedError: If ``locked`` is true.
    """
    if locked:
        raise YearLockedError(year, municipality_id=municipality_id)


def ensure_unlock_permitted(role: str | None, allowed_roles: Collection[str], year: int) -> None:
    """Reject unlocks by actors outside ``allowed_roles``.

    Role names compare case-insensitively.

    Raises:
        UnlockNotPermittedError: If ``role`` is not allowed.
    """
    allowed = {r.strip().lower() for r in allowed_roles}
    if not role or role.strip().lower() not in allowed:
        raise UnlockNotPermittedError(
            f"Unlocking assessment year {year} requires one of the roles: "
            f"{', '.join(sorted(allowed)) or '<none>'}.",
            details={"year": year, "role": role},
        )


def lock(year: AssessmentYear) -> AssessmentYear:
    """Return ``year`` in the locked state."""
    return year if year.is_locked else replace(year, is_locked=True)


def unlock(year: AssessmentYear) -> AssessmentYear:
    """Return ``year`` in the unlocked state."""
    return replace(year, is_locked=False) if year.is_locked else year
