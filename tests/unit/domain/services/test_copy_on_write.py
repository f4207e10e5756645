# tests/unit/domain/services/test_copy_on_write.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Unit tests for the copy-on-write write planner.

Covers:
    - direct edits in an unlocked owning year
    - forks into a later year and the version chain they build
    - writes onto an existing target-year twin
    - lock, effectiveness and uniqueness rejections
    - soft and temporal deletes
"""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from millrate_api.domain.enums.assessing import ConfigurationKind, WriteOutcome
from millrate_api.domain.exceptions.assessing import (
    ConfigurationValidationError,
    DuplicateConfigurationError,
    RecordNotFoundError,
    YearLockedError,
)
from millrate_api.domain.services.copy_on_write import plan_create, plan_delete, plan_edit
from tests.fixtures.builders import record

NOW = datetime(2024, 3, 1, tzinfo=UTC)
KIND = ConfigurationKind.BUILDING_CODE
ATTRS = {
    "code": "R1",
    "description": "Ranch",
    "rate": 100.0,
    "building_type": "residential",
    "size_adjustment_category": "residential",
    "depreciation": 10.0,
}


@pytest.fixture
def mid() -> UUID:
    return uuid4()


def test_edit_in_owning_unlocked_year_is_direct(mid: UUID) -> None:
    rec = record(KIND, 2024, ATTRS, municipality_id=mid)

    plan = plan_edit(
        rec,
        2024,
        {"rate": 120},
        source_locked=False,
        target_locked=False,
        peers=[rec],
        new_id=uuid4(),
        now=NOW,
        actor="alice",
    )

    assert plan.outcome is WriteOutcome.DIRECT
    assert plan.creates == ()
    assert plan.record.id == rec.id
    assert plan.record.attributes["rate"] == 120.0
    assert plan.record.updated_by == "alice"


def test_edit_from_later_year_forks_and_links_chain(mid: UUID) -> None:
    rec = record(KIND, 2023, ATTRS, municipality_id=mid)
    new_id = uuid4()

    plan = plan_edit(
        rec,
        2025,
        {"rate": 150},
        source_locked=True,
        target_locked=False,
        peers=[rec],
        new_id=new_id,
        now=NOW,
    )

    assert plan.outcome is WriteOutcome.COPY_ON_WRITE
    (fork,) = plan.creates
    (superseded,) = plan.updates
    assert fork.id == new_id
    assert fork.effective_year == 2025
    assert fork.effective_year_end is None
    assert fork.previous_version_id == rec.id
    assert fork.attributes["rate"] == 150.0
    assert superseded.id == rec.id
    assert superseded.effective_year_end == 2025
    assert superseded.next_version_id == new_id
    # The superseded version keeps its values.
    assert superseded.attributes["rate"] == 100.0
    assert plan.previous_version_id == rec.id


def test_edit_of_locked_owning_year_viewed_from_same_year_is_rejected(mid: UUID) -> None:
    rec = record(KIND, 2024, ATTRS, municipality_id=mid)

    with pytest.raises(YearLockedError) as exc:
        plan_edit(
            rec,
            2024,
            {"rate": 1},
            source_locked=True,
            target_locked=True,
            peers=[rec],
            new_id=uuid4(),
            now=NOW,
        )
    assert exc.value.year == 2024
    assert exc.value.code == "YEAR_LOCKED"


def test_edit_into_locked_target_is_rejected(mid: UUID) -> None:
    rec = record(KIND, 2023, ATTRS, municipality_id=mid)

    with pytest.raises(YearLockedError):
        plan_edit(
            rec,
            2024,
            {"rate": 1},
            source_locked=False,
            target_locked=True,
            peers=[rec],
            new_id=uuid4(),
            now=NOW,
        )


def test_edit_updates_existing_target_year_twin(mid: UUID) -> None:
    older = record(KIND, 2023, ATTRS, municipality_id=mid, effective_year_end=2024)
    twin = record(
        KIND,
        2024,
        {**ATTRS, "code": "r1", "rate": 110.0},
        municipality_id=mid,
        previous_version_id=older.id,
    )

    plan = plan_edit(
        older,
        2024,
        {"description": "Ranch style"},
        source_locked=True,
        target_locked=False,
        peers=[older, twin],
        new_id=uuid4(),
        now=NOW,
    )

    assert plan.outcome is WriteOutcome.UPDATED_EXISTING_TARGET
    assert plan.record.id == twin.id
    assert plan.record.attributes["description"] == "Ranch style"
    assert plan.record.attributes["rate"] == 110.0
    assert plan.creates == ()
    assert plan.previous_version_id == older.id


def test_edit_of_record_ended_before_target_is_not_found(mid: UUID) -> None:
    rec = record(KIND, 2020, ATTRS, municipality_id=mid, effective_year_end=2022)

    with pytest.raises(RecordNotFoundError):
        plan_edit(
            rec,
            2024,
            {"rate": 1},
            source_locked=False,
            target_locked=False,
            peers=[rec],
            new_id=uuid4(),
            now=NOW,
        )


def test_edit_validates_merged_attributes(mid: UUID) -> None:
    rec = record(KIND, 2024, ATTRS, municipality_id=mid)

    with pytest.raises(ConfigurationValidationError) as exc:
        plan_edit(
            rec,
            2024,
            {"rate": -1},
            source_locked=False,
            target_locked=False,
            peers=[rec],
            new_id=uuid4(),
            now=NOW,
        )
    assert exc.value.errors == [{"field": "rate", "message": "must be >= 0"}]


def test_direct_edit_to_taken_business_key_is_duplicate(mid: UUID) -> None:
    rec = record(KIND, 2024, ATTRS, municipality_id=mid)
    other = record(KIND, 2024, {**ATTRS, "code": "C1"}, municipality_id=mid)

    with pytest.raises(DuplicateConfigurationError):
        plan_edit(
            rec,
            2024,
            {"code": "c1"},
            source_locked=False,
            target_locked=False,
            peers=[rec, other],
            new_id=uuid4(),
            now=NOW,
        )


def test_create_checks_lock_validation_and_uniqueness(mid: UUID) -> None:
    existing = record(KIND, 2024, ATTRS, municipality_id=mid)

    created = plan_create(
        municipality_id=mid,
        kind=KIND,
        year=2024,
        attributes={**ATTRS, "code": " c2 "},
        year_locked=False,
        peers=[existing],
        new_id=uuid4(),
        now=NOW,
        actor="bob",
    )
    assert created.attributes["code"] == "C2"
    assert created.is_head and created.is_active
    assert created.created_by == "bob"

    with pytest.raises(YearLockedError):
        plan_create(
            municipality_id=mid,
            kind=KIND,
            year=2024,
            attributes={"rate": -5},
            year_locked=True,
            peers=[],
            new_id=uuid4(),
            now=NOW,
        )

    with pytest.raises(DuplicateConfigurationError) as dup:
        plan_create(
            municipality_id=mid,
            kind=KIND,
            year=2024,
            attributes={**ATTRS, "code": "r1"},
            year_locked=False,
            peers=[existing],
            new_id=uuid4(),
            now=NOW,
        )
    assert dup.value.business_key == ("R1",)


def test_delete_in_owning_year_is_soft(mid: UUID) -> None:
    rec = record(KIND, 2024, ATTRS, municipality_id=mid)

    plan = plan_delete(rec, 2024, source_locked=False, target_locked=False, now=NOW)

    assert plan.outcome is WriteOutcome.SOFT_DELETE
    assert plan.record.is_active is False
    assert plan.record.effective_year_end is None


def test_delete_of_inherited_record_ends_it_at_target(mid: UUID) -> None:
    rec = record(KIND, 2022, ATTRS, municipality_id=mid)

    plan = plan_delete(rec, 2024, source_locked=True, target_locked=False, now=NOW)

    assert plan.outcome is WriteOutcome.TEMPORAL_DELETE
    assert plan.record.is_active is True
    assert plan.record.effective_year_end == 2024
    assert plan.record.is_effective_in(2023)
    assert not plan.record.is_effective_in(2024)


def test_delete_rejects_locked_target_and_ended_records(mid: UUID) -> None:
    rec = record(KIND, 2022, ATTRS, municipality_id=mid)
    with pytest.raises(YearLockedError):
        plan_delete(rec, 2024, source_locked=False, target_locked=True, now=NOW)

    ended = record(KIND, 2020, ATTRS, municipality_id=mid, effective_year_end=2021)
    with pytest.raises(RecordNotFoundError):
        plan_delete(ended, 2024, source_locked=False, target_locked=False, now=NOW)


def test_inactive_record_cannot_be_edited_or_deleted(mid: UUID) -> None:
    deleted = record(KIND, 2023, ATTRS, municipality_id=mid, is_active=False)
    live_twin = record(KIND, 2025, ATTRS, municipality_id=mid)

    with pytest.raises(RecordNotFoundError):
        plan_edit(
            deleted,
            2023,
            {"rate": 80},
            source_locked=False,
            target_locked=False,
            peers=[deleted],
            new_id=uuid4(),
            now=NOW,
        )
    # A deleted id must not reach the live version of the same item.
    with pytest.raises(RecordNotFoundError):
        plan_edit(
            deleted,
            2025,
            {"rate": 80},
            source_locked=False,
            target_locked=False,
            peers=[deleted, live_twin],
            new_id=uuid4(),
            now=NOW,
        )
    with pytest.raises(RecordNotFoundError):
        plan_delete(deleted, 2023, source_locked=False, target_locked=False, now=NOW)


def test_fork_before_an_existing_successor_is_spliced_into_the_chain(mid: UUID) -> None:
    successor_id, fork_id = uuid4(), uuid4()
    rec = record(
        KIND,
        2020,
        ATTRS,
        municipality_id=mid,
        effective_year_end=2024,
        next_version_id=successor_id,
    )
    successor = record(
        KIND,
        2024,
        {**ATTRS, "rate": 140.0},
        municipality_id=mid,
        id=successor_id,
        previous_version_id=rec.id,
    )

    plan = plan_edit(
        rec,
        2022,
        {"rate": 120},
        source_locked=True,
        target_locked=False,
        peers=[rec],
        new_id=fork_id,
        now=NOW,
        successor=successor,
    )

    assert plan.outcome is WriteOutcome.COPY_ON_WRITE
    (fork,) = plan.creates
    superseded, relinked = plan.updates
    assert (fork.effective_year, fork.effective_year_end) == (2022, 2024)
    assert fork.previous_version_id == rec.id
    assert fork.next_version_id == successor_id
    assert (superseded.effective_year_end, superseded.next_version_id) == (2022, fork_id)
    assert relinked.id == successor_id
    assert relinked.previous_version_id == fork_id
    assert relinked.effective_year_end is None
    assert relinked.attributes["rate"] == 140.0
