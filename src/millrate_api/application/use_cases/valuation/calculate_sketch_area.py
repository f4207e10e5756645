# src/millrate_api/application/use_cases/valuation/calculate_sketch_area.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Use case: sketch effective area and gross living area for a year."""

from __future__ import annotations

import logging

from millrate_api.application.schemas.dto.valuation import SketchAreaRequestDTO
from millrate_api.application.services.configuration_access import load_snapshot
from millrate_api.application.uow import UnitOfWork
from millrate_api.domain.entities.sketch import SketchAreaResult
from millrate_api.domain.enums.assessing import ConfigurationKind
from millrate_api.domain.services.sketch_area import calculate_sketch_area

logger = logging.getLogger(__name__)


class CalculateSketchAreaUseCase:
    """Weight sketch shapes by the year's sub-area factors.

    Args:
        uow: Application UnitOfWork.

    Returns:
        SketchAreaResult with per-shape, per-label and sketch totals.

    Raises:
        None. Unknown labels weigh 100 points and are listed in the result.
    """

    def __init__(self, *, uow: UnitOfWork) -> None:
        """Initialize the use case."""
        self._uow = uow

    async def execute(self, req: SketchAreaRequestDTO) -> SketchAreaResult:
        """Calculate the sketch areas."""
        async with self._uow as tx:
            snapshot = await load_snapshot(
                tx,
                req.municipality_id,
                req.year,
                kinds=(ConfigurationKind.SKETCH_SUB_AREA_FACTOR,),
            )

        result = calculate_sketch_area(req.shapes, snapshot.sub_area_factors())
        if result.unknown_labels:
            logger.warning(
                "valuation.sketch_unknown_labels",
                extra={
                    "extra": {
                        "municipality_id": str(req.municipality_id),
                        "year": req.year,
                        "labels": list(result.unknown_labels),
                    }
                },
            )
        return result
