# src/millrate_api/application/use_cases/valuation/ensure_assessments_for_year.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Use case: create missing year assessments from prior years.

Purpose:
    Give every property that has a land assessment in any year an assessment
    for the target year, copied from its most recent earlier year.

Layer:
    application/use_cases/valuation

Notes:
    Copies keep land-use lines and attributes, get new ids and point back to
    their source via ``previous_assessment_id``. Source assessments are never
    modified.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

from millrate_api.application.schemas.dto.valuation import EnsureYearRequestDTO
from millrate_api.application.services.configuration_access import (
    assessment_year_repo,
    land_assessment_repo,
)
from millrate_api.application.uow import UnitOfWork
from millrate_api.domain.entities.land_assessment import LandAssessment
from millrate_api.domain.entities.recalculation import (
    RecalculationErrorDetail,
    RecalculationSummary,
)

logger = logging.getLogger(__name__)

YEAR_CREATION_REASON = "mass_recalculation_year_creation"


def copy_to_year(
    source: LandAssessment,
    year: int,
    *,
    new_id: UUID,
    actor: str | None,
) -> LandAssessment:
    """Return a copy of ``source`` for ``year`` linked back to its source."""
    return replace(
        source,
        id=new_id,
        effective_year=year,
        previous_assessment_id=source.id,
        change_reason=YEAR_CREATION_REASON,
        updated_by=actor,
        extra={
            **source.extra,
            "notes": (
                f"Auto-created for {year} mass recalculation from "
                f"{source.effective_year} assessment"
            ),
        },
    )


class EnsureAssessmentsForYearUseCase:
    """Copy each property's latest prior assessment into a year.

    Properties that already have an assessment for the year are skipped.
    A property with no earlier assessment, or whose copy fails to save, is
    reported as an error and the run continues.

    Args:
        uow: Application UnitOfWork.
        id_factory: Callable producing new assessment ids.
        error_detail_cap: Maximum number of ``error_details`` entries.

    Returns:
        RecalculationSummary whose ``records_created`` counts new assessments.

    Raises:
        None. Per-property failures are reported in the summary.
    """

    def __init__(
        self,
        *,
        uow: UnitOfWork,
        id_factory: Callable[[], UUID] = uuid4,
        error_detail_cap: int = 10,
    ) -> None:
        """Initialize the use case."""
        self._uow = uow
        self._id_factory = id_factory
        self._cap = error_detail_cap

    async def execute(self, req: EnsureYearRequestDTO) -> RecalculationSummary:
        """Create the missing assessments.

        Args:
            req: Municipality and target year.

        Returns:
            Counts of properties examined, assessments created and errors.
        """
        async with self._uow as tx:
            repo = land_assessment_repo(tx)
            all_ids = await repo.list_property_ids(municipality_id=req.municipality_id)
            existing = set(
                await repo.list_property_ids_for_year(
                    municipality_id=req.municipality_id, year=req.year
                )
            )
        missing = [pid for pid in all_ids if pid not in existing]

        created = 0
        errors = 0
        details: list[RecalculationErrorDetail] = []

        def record_error(property_id: UUID, message: str, code: str) -> None:
            nonlocal errors
            errors += 1
            if len(details) < self._cap:
                details.append(
                    RecalculationErrorDetail(
                        assessment_id=property_id,
                        property_id=property_id,
                        error=message,
                        code=code,
                    )
                )

        for property_id in missing:
            try:
                async with self._uow as tx:
                    repo = land_assessment_repo(tx)
                    sources = await repo.latest_before(
                        municipality_id=req.municipality_id,
                        property_id=property_id,
                        year=req.year,
                    )
                    if not sources:
                        record_error(
                            property_id,
                            f"No land assessment before {req.year} to copy from.",
                            "NO_PRIOR_ASSESSMENT",
                        )
                        continue
                    for source in sources:
                        await repo.add(
                            copy_to_year(
                                source, req.year, new_id=self._id_factory(), actor=req.actor
                            )
                        )
                    await tx.commit()
                created += len(sources)
            except Exception as exc:  # noqa: BLE001 - remaining properties are still copied
                logger.exception(
                    "valuation.year_copy_failed",
                    extra={"extra": {"property_id": str(property_id), "year": req.year}},
                )
                record_error(property_id, str(exc) or type(exc).__name__, "WRITE_FAILED")

        if created:
            await self._record_run(req.municipality_id, req.year, created)

        logger.info(
            "valuation.year_ensured",
            extra={
                "extra": {
                    "municipality_id": str(req.municipality_id),
                    "year": req.year,
                    "properties_missing": len(missing),
                    "records_created": created,
                    "errors": errors,
                    "actor": req.actor,
                }
            },
        )
        return RecalculationSummary(
            processed=len(missing),
            updated=0,
            errors=errors,
            error_details=tuple(details),
            records_created=created,
        )

    async def _record_run(self, municipality_id: UUID, year: int, created: int) -> None:
        async with self._uow as tx:
            repo = assessment_year_repo(tx)
            stored = await repo.get(municipality_id=municipality_id, year=year)
            if stored is None:
                return
            await repo.update(
                replace(
                    stored,
                    last_recalculation_at=datetime.now(tz=UTC),
                    last_recalculation_type="year_creation",
                    last_recalculation_records_created=created,
                )
            )
            await tx.commit()
