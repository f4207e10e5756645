# src/millrate_api/application/use_cases/valuation/recalculate_municipality.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Batch land recalculation use cases.

Purpose:
    Recalculate every land assessment of a municipality and year, optionally
    applying zone minimum-acreage redistribution first, or only the
    assessments affected by a reference-data change.

Layer:
    application/use_cases/valuation

Notes:
    - Assessments are processed in bounded batches. Each batch's
      calculations run concurrently with ``asyncio.gather``; the batch's
      writes are committed before the next batch is read.
    - A failing assessment never aborts the run. Failures and zeroed-value
      warnings are counted in ``errors`` and listed (capped) in
      ``error_details``.
    - A batch whose writes fail is rolled back and all its assessments are
      counted as errors.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from millrate_api.application.schemas.dto.valuation import (
    RecalculateAffectedRequestDTO,
    RecalculateRequestDTO,
)
from millrate_api.application.services.configuration_access import (
    assessment_year_repo,
    land_assessment_repo,
    load_snapshot,
)
from millrate_api.application.uow import UnitOfWork
from millrate_api.domain.entities.land_assessment import LandAssessment, LandUseLine
from millrate_api.domain.entities.recalculation import (
    RecalculationErrorDetail,
    RecalculationOptions,
    RecalculationSummary,
)
from millrate_api.domain.entities.valuation_results import LandValuationResult
from millrate_api.domain.enums.assessing import AffectedChangeType
from millrate_api.domain.exceptions.assessing import ConfigurationValidationError
from millrate_api.domain.services.land_valuation import LandValuationCalculator
from millrate_api.domain.services.zone_redistribution import redistribute_zone_minimum

logger = logging.getLogger(__name__)

DEFAULT_ERROR_DETAIL_CAP = 10


@dataclass(slots=True)
class _Outcome:
    assessment: LandAssessment
    result: LandValuationResult | None = None
    adjusted: bool = False
    error: str | None = None


@dataclass(slots=True)
class _Tally:
    cap: int
    processed: int = 0
    updated: int = 0
    errors: int = 0
    zones_adjusted: int = 0
    details: list[RecalculationErrorDetail] = field(init=False)

    def __post_init__(self) -> None:
        self.details: list[RecalculationErrorDetail] = []

    def record(self, detail: RecalculationErrorDetail) -> None:
        self.errors += 1
        if len(self.details) < self.cap:
            self.details.append(detail)

    def summary(self) -> RecalculationSummary:
        return RecalculationSummary(
            processed=self.processed,
            updated=self.updated,
            errors=self.errors,
            error_details=tuple(self.details),
            zones_adjusted=self.zones_adjusted,
        )


class _BatchRecalculator:
    """Shared batch loop of the recalculation use cases."""

    def __init__(self, *, uow: UnitOfWork, error_detail_cap: int) -> None:
        self._uow = uow
        self._cap = error_detail_cap

    async def run(
        self,
        *,
        municipality_id: UUID,
        year: int,
        options: RecalculationOptions,
        actor: str | None,
        run_type: str,
        apply_zone_minimum: bool = False,
        filters: dict[str, Any] | None = None,
    ) -> RecalculationSummary:
        filters = filters or {}
        async with self._uow as tx:
            calculator = LandValuationCalculator(await load_snapshot(tx, municipality_id, year))

        tally = _Tally(cap=self._cap)
        offset = 0
        batch_number = 0
        while True:
            async with self._uow as tx:
                repo = land_assessment_repo(tx)
                batch = await repo.list_for_year(
                    municipality_id=municipality_id,
                    year=year,
                    offset=offset,
                    limit=options.batch_size,
                    **filters,
                )
            if not batch:
                break
            batch_number += 1
            offset += len(batch)

            outcomes = await asyncio.gather(
                *(self._calculate(calculator, a, apply_zone_minimum) for a in batch)
            )
            await self._write_batch(outcomes, options, actor, tally, apply_zone_minimum)
            logger.info(
                "valuation.batch_completed",
                extra={
                    "extra": {
                        "municipality_id": str(municipality_id),
                        "year": year,
                        "batch": batch_number,
                        "size": len(batch),
                        "processed": tally.processed,
                        "errors": tally.errors,
                    }
                },
            )
            if len(batch) < options.batch_size:
                break

        if options.save and tally.processed:
            await self._record_run(municipality_id, year, run_type)

        summary = tally.summary()
        logger.info(
            "valuation.recalculation_completed",
            extra={
                "extra": {
                    "municipality_id": str(municipality_id),
                    "year": year,
                    "run_type": run_type,
                    "processed": summary.processed,
                    "updated": summary.updated,
                    "errors": summary.errors,
                    "zones_adjusted": summary.zones_adjusted,
                    "actor": actor,
                }
            },
        )
        return summary

    async def _calculate(
        self,
        calculator: LandValuationCalculator,
        assessment: LandAssessment,
        apply_zone_minimum: bool,
    ) -> _Outcome:
        try:
            lines: tuple[LandUseLine, ...] | None = None
            adjusted = False
            if apply_zone_minimum:
                zone = calculator.snapshot.zone(assessment.zone_code)
                redistribution = redistribute_zone_minimum(assessment.land_use_lines, zone)
                lines, adjusted = redistribution.lines, redistribution.adjusted
            result = calculator.calculate(assessment, lines=lines)
            return _Outcome(assessment=assessment, result=result, adjusted=adjusted)
        except Exception as exc:  # noqa: BLE001 - one bad parcel must not abort the batch
            logger.exception(
                "valuation.assessment_failed",
                extra={"extra": {"assessment_id": str(assessment.id)}},
            )
            return _Outcome(assessment=assessment, error=str(exc) or type(exc).__name__)

    async def _write_batch(
        self,
        outcomes: list[_Outcome],
        options: RecalculationOptions,
        actor: str | None,
        tally: _Tally,
        apply_zone_minimum: bool,
    ) -> None:
        now = datetime.now(tz=UTC)
        to_save: list[_Outcome] = []
        for outcome in outcomes:
            tally.processed += 1
            assessment = outcome.assessment
            if outcome.result is None:
                tally.record(
                    RecalculationErrorDetail(
                        assessment_id=assessment.id,
                        property_id=assessment.property_id,
                        error=outcome.error or "calculation failed",
                    )
                )
                continue
            if outcome.adjusted:
                tally.zones_adjusted += 1
            zeroed = outcome.result.zeroed_warnings
            if zeroed:
                tally.record(
                    RecalculationErrorDetail(
                        assessment_id=assessment.id,
                        property_id=assessment.property_id,
                        error=zeroed[0].message,
                        code=zeroed[0].code,
                        details={"warnings": [w.code for w in zeroed]},
                    )
                )
            to_save.append(outcome)

        if not options.save or not to_save:
            return

        try:
            async with self._uow as tx:
                repo = land_assessment_repo(tx)
                for outcome in to_save:
                    assert outcome.result is not None
                    write_lines = options.force_clear_values or apply_zone_minimum
                    await repo.save_calculation(
                        assessment_id=outcome.assessment.id,
                        totals=outcome.result.totals,
                        calculated_at=now,
                        lines=outcome.result.lines if write_lines else None,
                        updated_by=actor,
                    )
                await tx.commit()
        except Exception as exc:  # noqa: BLE001 - the run continues with the next batch
            logger.exception(
                "valuation.batch_write_failed",
                extra={"extra": {"size": len(to_save)}},
            )
            for outcome in to_save:
                tally.record(
                    RecalculationErrorDetail(
                        assessment_id=outcome.assessment.id,
                        property_id=outcome.assessment.property_id,
                        error=str(exc) or type(exc).__name__,
                        code="WRITE_FAILED",
                    )
                )
            return
        tally.updated += len(to_save)

    async def _record_run(self, municipality_id: UUID, year: int, run_type: str) -> None:
        async with self._uow as tx:
            repo = assessment_year_repo(tx)
            stored = await repo.get(municipality_id=municipality_id, year=year)
            if stored is None:
                return
            await repo.update(
                replace(
                    stored,
                    last_recalculation_at=datetime.now(tz=UTC),
                    last_recalculation_type=run_type,
                )
            )
            await tx.commit()


class RecalculateMunicipalityUseCase:
    """Recalculate every land assessment of a year.

    Args:
        uow: Application UnitOfWork.
        error_detail_cap: Maximum number of ``error_details`` entries.

    Returns:
        RecalculationSummary with ``processed``, ``updated``, ``errors`` and
        ``error_details``.
    """

    def __init__(
        self, *, uow: UnitOfWork, error_detail_cap: int = DEFAULT_ERROR_DETAIL_CAP
    ) -> None:
        """Initialize the use case."""
        self._runner = _BatchRecalculator(uow=uow, error_detail_cap=error_detail_cap)

    async def execute(self, req: RecalculateRequestDTO) -> RecalculationSummary:
        """Run the batch recalculation.

        Args:
            req: Municipality, year and options.

        Returns:
            The partial-success summary.
        """
        return await self._runner.run(
            municipality_id=req.municipality_id,
            year=req.year,
            options=req.options,
            actor=req.actor,
            run_type="full",
        )


class RecalculateWithZoneAdjustmentsUseCase:
    """Apply zone minimum-acreage redistribution, then recalculate.

    Lines are always written back when saving, since redistribution may
    change their sizes.

    Args:
        uow: Application UnitOfWork.
        error_detail_cap: Maximum number of ``error_details`` entries.

    Returns:
        RecalculationSummary including ``zones_adjusted``.
    """

    def __init__(
        self, *, uow: UnitOfWork, error_detail_cap: int = DEFAULT_ERROR_DETAIL_CAP
    ) -> None:
        """Initialize the use case."""
        self._runner = _BatchRecalculator(uow=uow, error_detail_cap=error_detail_cap)

    async def execute(self, req: RecalculateRequestDTO) -> RecalculationSummary:
        """Run the redistribution and recalculation.

        Args:
            req: Municipality, year and options.

        Returns:
            The partial-success summary.
        """
        return await self._runner.run(
            municipality_id=req.municipality_id,
            year=req.year,
            options=req.options,
            actor=req.actor,
            run_type="zone_adjustment",
            apply_zone_minimum=True,
        )


class RecalculateAffectedUseCase:
    """Recalculate only assessments referencing a changed item.

    Args:
        uow: Application UnitOfWork.
        batch_size: Assessments processed per batch.
        error_detail_cap: Maximum number of ``error_details`` entries.

    Returns:
        RecalculationSummary of the affected assessments.

    Raises:
        ConfigurationValidationError: If a change key is missing for a
            selective change type.
    """

    def __init__(
        self,
        *,
        uow: UnitOfWork,
        batch_size: int = RecalculationOptions().batch_size,
        error_detail_cap: int = DEFAULT_ERROR_DETAIL_CAP,
    ) -> None:
        """Initialize the use case."""
        self._runner = _BatchRecalculator(uow=uow, error_detail_cap=error_detail_cap)
        self._options = RecalculationOptions(batch_size=batch_size)

    async def execute(self, req: RecalculateAffectedRequestDTO) -> RecalculationSummary:
        """Select and recalculate affected assessments.

        Args:
            req: Change type and the changed item's business key.

        Returns:
            The partial-success summary.
        """
        filters: dict[str, Any] = {}
        if req.change_type is not AffectedChangeType.ALL:
            key = (req.change_key or "").strip()
            if not key:
                raise ConfigurationValidationError(
                    [{"field": "change_key", "message": "is required for this change type"}]
                )
            field_name = {
                AffectedChangeType.ZONE: "zone_code",
                AffectedChangeType.NEIGHBORHOOD: "neighborhood_code",
                AffectedChangeType.CURRENT_USE: "land_use_type",
            }[req.change_type]
            filters[field_name] = key

        return await self._runner.run(
            municipality_id=req.municipality_id,
            year=req.year,
            options=self._options,
            actor=req.actor,
            run_type=f"affected:{req.change_type.value}",
            filters=filters,
        )
