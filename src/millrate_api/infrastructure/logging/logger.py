# src/millrate_api/infrastructure/logging/logger.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Structured JSON logging.

An idempotent root configurator plus a per-module logger factory. Every line
is one JSON object with the stable keys ``ts``, ``level``, ``logger`` and
``message``, enriched with the current ``request_id`` and ``actor_id`` from
contextvars and with the fields passed as ``extra={"extra": {...}}``.

Typical usage:
    configure_root_logging()
    log = get_json_logger(__name__)
    log.info("configuration.forked", extra={"extra": {"year": 2025}})
"""

from __future__ import annotations

import json
import logging
import os
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

__all__ = [
    "configure_root_logging",
    "get_json_logger",
    "get_actor_id",
    "get_request_id",
    "set_request_context",
]

_REQUEST_ID_ENV_KEY = "REQUEST_ID"

_REQUEST_ID_CTX: ContextVar[str | None] = ContextVar("millrate_request_id", default=None)
_ACTOR_ID_CTX: ContextVar[str | None] = ContextVar("millrate_actor_id", default=None)


def set_request_context(*, request_id: str | None = None, actor_id: str | None = None) -> None:
    """Set correlation fields for the current request.

    Only the provided values are updated.

    Args:
        request_id: Correlation id from ``X-Request-ID``.
        actor_id: Acting user from ``X-Actor-Id``.
    """
    if request_id is not None:
        _REQUEST_ID_CTX.set(request_id)
    if actor_id is not None:
        _ACTOR_ID_CTX.set(actor_id)


def get_request_id() -> str | None:
    """Return the current request id, if any."""
    return _REQUEST_ID_CTX.get(None)


def get_actor_id() -> str | None:
    """Return the current actor id, if any."""
    return _ACTOR_ID_CTX.get(None)


class _JsonFormatter(logging.Formatter):
    """JSON log formatter emitting stable keys and optional extras."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a JSON object.

        Args:
            record: Logging record.

        Returns:
            JSON-encoded log line.
        """
        payload: dict[str, Any] = {
            "ts": datetime.now(tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        rid = (
            getattr(record, "request_id", None)
            or _REQUEST_ID_CTX.get(None)
            or os.getenv(_REQUEST_ID_ENV_KEY)
        )
        if rid:
            payload["request_id"] = rid
        actor = _ACTOR_ID_CTX.get(None)
        if actor:
            payload["actor_id"] = actor

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            if exc_type is not None:
                payload["exc_type"] = exc_type.__name__
            if exc_value is not None:
                payload["exc_message"] = str(exc_value)

        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)

        # UUIDs, dates and Decimals in extras are rendered as strings.
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)


def configure_root_logging(level: str | int | None = None) -> None:
    """Install a JSON stream handler on the root logger (idempotent).

    Args:
        level: Logging level or level name. If ``None``, use env ``LOG_LEVEL`` or ``INFO``.
    """
    root = logging.getLogger()

    env_level = os.getenv("LOG_LEVEL")
    resolved: int | str = (
        level if level is not None else (env_level.upper() if env_level else "INFO")
    )
    root.setLevel(resolved.upper() if isinstance(resolved, str) else resolved)

    if any(isinstance(h.formatter, _JsonFormatter) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(_JsonFormatter())
    root.addHandler(handler)


def get_json_logger(name: str) -> logging.Logger:
    """Return a module logger that defers to the JSON root handler.

    Call :func:`configure_root_logging` once at startup; this function does
    not configure the root logger.

    Args:
        name: Logger name, typically ``__name__`` of the caller.

    Returns:
        The logger.
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger
