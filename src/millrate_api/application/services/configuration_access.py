# src/millrate_api/application/services/configuration_access.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Shared configuration reads for use cases.

Purpose:
    Resolve configuration heads and year lock state inside an active
    UnitOfWork, logging temporal integrity faults the domain reports.

Layer:
    application/services
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, cast
from uuid import UUID

from millrate_api.domain.entities.assessment_year import AssessmentYear
from millrate_api.domain.entities.configuration_record import ConfigurationRecord
from millrate_api.domain.entities.configuration_snapshot import ResolvedConfigurationSnapshot
from millrate_api.domain.enums.assessing import ConfigurationKind
from millrate_api.domain.exceptions.assessing import RecordNotFoundError
from millrate_api.domain.interfaces.repositories.assessment_year_repository import (
    AssessmentYearRepository as AssessmentYearRepositoryPort,
)
from millrate_api.domain.interfaces.repositories.configuration_repository import (
    ConfigurationRepository as ConfigurationRepositoryPort,
)
from millrate_api.domain.interfaces.repositories.land_assessment_repository import (
    LandAssessmentRepository as LandAssessmentRepositoryPort,
)
from millrate_api.domain.services.temporal_resolution import Resolution, resolve_for_year
from millrate_api.domain.services.year_lock import is_locked

logger = logging.getLogger(__name__)

VALUATION_KINDS: tuple[ConfigurationKind, ...] = (
    ConfigurationKind.ZONE,
    ConfigurationKind.LAND_LADDER_TIER,
    ConfigurationKind.NEIGHBORHOOD_CODE,
    ConfigurationKind.LAND_ATTRIBUTE,
    ConfigurationKind.CURRENT_USE_CATEGORY,
    ConfigurationKind.ACREAGE_DISCOUNT_SETTINGS,
)


def configuration_repo(tx: Any) -> ConfigurationRepositoryPort:
    """Resolve the configuration repository from an active UnitOfWork."""
    return cast(ConfigurationRepositoryPort, tx.get_repository(ConfigurationRepositoryPort))


def assessment_year_repo(tx: Any) -> AssessmentYearRepositoryPort:
    """Resolve the assessment-year repository from an active UnitOfWork."""
    return cast(AssessmentYearRepositoryPort, tx.get_repository(AssessmentYearRepositoryPort))


async def is_year_locked(tx: Any, municipality_id: UUID, year: int) -> bool:
    """Return the lock state of ``year``; a year never created is unlocked."""
    stored = await assessment_year_repo(tx).get(municipality_id=municipality_id, year=year)
    return is_locked(stored)


async def resolve_configuration(
    tx: Any,
    municipality_id: UUID,
    year: int,
    kinds: Sequence[ConfigurationKind] | None = None,
) -> Resolution:
    """Resolve configuration heads for ``year`` and log integrity faults."""
    candidates = await configuration_repo(tx).list_candidates(
        municipality_id=municipality_id, year=year, kinds=kinds
    )
    resolution = resolve_for_year(candidates, year)
    for fault in resolution.faults:
        logger.warning(
            "configuration.resolution_fault",
            extra={
                "extra": {
                    "municipality_id": str(municipality_id),
                    "kind": fault.kind.value,
                    "business_key": [str(p) for p in fault.business_key],
                    "effective_year": fault.effective_year,
                    "record_ids": [str(r) for r in fault.record_ids],
                }
            },
        )
    return resolution


async def load_snapshot(
    tx: Any,
    municipality_id: UUID,
    year: int,
    kinds: Sequence[ConfigurationKind] | None = VALUATION_KINDS,
) -> ResolvedConfigurationSnapshot:
    """Build the resolved configuration snapshot for valuation."""
    resolution = await resolve_configuration(tx, municipality_id, year, kinds)
    return ResolvedConfigurationSnapshot.from_records(municipality_id, year, resolution.records)


async def get_record(
    tx: Any, municipality_id: UUID, kind: ConfigurationKind, record_id: UUID
) -> ConfigurationRecord:
    """Return an active record of ``kind`` owned by the municipality.

    Raises:
        RecordNotFoundError: If it does not exist, belongs to another
            municipality, is of another kind, or has been soft-deleted.
    """
    record = await configuration_repo(tx).get(
        municipality_id=municipality_id, record_id=record_id
    )
    if record is None or record.kind is not kind or not record.is_active:
        raise RecordNotFoundError(
            f"No {kind.value.replace('_', ' ')} with id {record_id}.",
            details={"record_id": str(record_id), "kind": kind.value},
        )
    return record


async def require_year(tx: Any, municipality_id: UUID, year: int) -> AssessmentYear:
    """Return a stored assessment year.

    Raises:
        RecordNotFoundError: If the year was never created.
    """
    stored = await assessment_year_repo(tx).get(municipality_id=municipality_id, year=year)
    if stored is None:
        raise RecordNotFoundError(
            f"Assessment year {year} does not exist.", details={"year": year}
        )
    return stored


def land_assessment_repo(tx: Any) -> LandAssessmentRepositoryPort:
    """Resolve the land-assessment repository from an active UnitOfWork."""
    return cast(LandAssessmentRepositoryPort, tx.get_repository(LandAssessmentRepositoryPort))
