# src/millrate_api/dependencies/core/bootstrap.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Core bootstrap for infrastructure (logging, database).

This module owns the lifecycle of shared infrastructure used by the FastAPI
app. Configuration is read from Settings; the work is delegated to the
infrastructure modules.

The single public surface is :func:`bootstrap`, an async context manager that
yields a state object with the resolved Settings.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI

from millrate_api.config.settings import Settings, get_settings
from millrate_api.infrastructure.logging.logger import configure_root_logging, get_json_logger

logger = get_json_logger(__name__)


@dataclass
class BootstrapState:
    """State yielded by the bootstrap context manager."""

    settings: Settings


@asynccontextmanager
async def bootstrap(app: FastAPI) -> AsyncGenerator[BootstrapState, None]:
    """Initialize and tear down shared infrastructure.

    Args:
        app: FastAPI application instance.

    Yields:
        BootstrapState: Resolved settings.
    """
    settings: Settings = get_settings()
    configure_root_logging(settings.log_level)
    logger.info("bootstrap.start", extra={"extra": {"service": settings.service_name}})

    # Imported here so tests can monkeypatch the session functions.
    import millrate_api.infrastructure.database.session as db_session

    db_session.init_engine_and_sessionmaker(settings)
    state = BootstrapState(settings=settings)

    try:
        yield state
    finally:
        try:
            await db_session.dispose_engine()
        except Exception:
            logger.exception("bootstrap.db_dispose_failed")

        logger.info("bootstrap.stop")
