# src/millrate_api/adapters/dependencies/assessing_uow.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Assessing UnitOfWork and request-context dependency wiring.

Purpose:
    Provide a SQLAlchemy-backed UnitOfWork for assessing use cases, the
    audit actor taken from request headers, and the settings used to size
    batch runs.

Layer:
    adapters/dependencies
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Header
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from millrate_api.adapters.uow import SqlAlchemyUnitOfWork
from millrate_api.config.settings import Settings, get_settings
from millrate_api.infrastructure.database.session import (
    get_sessionmaker,
    init_engine_and_sessionmaker,
)


def get_assessing_uow() -> SqlAlchemyUnitOfWork:
    """Construct a UnitOfWork instance for assessing use cases.

    Behavior:
        - Ensures the global engine/sessionmaker are initialized
          (idempotent, safe to call multiple times).
        - Returns a fresh SqlAlchemyUnitOfWork bound to the session factory.
    """
    # Lazy-init to support test transports that skip lifespan.
    init_engine_and_sessionmaker(get_settings())

    session_factory: async_sessionmaker[AsyncSession] = get_sessionmaker()
    return SqlAlchemyUnitOfWork(session_factory=session_factory)


def get_app_settings() -> Settings:
    """FastAPI dependency: return the cached application settings."""
    return get_settings()


@dataclass(frozen=True, slots=True)
class Actor:
    """Caller identity used for audit fields and privileged actions.

    Attributes:
        actor_id: Value of ``X-Actor-Id``, if sent.
        role: Value of ``X-Actor-Role``, if sent.
    """

    actor_id: str | None = None
    role: str | None = None


_ACTOR_ID_HEADER = Header(default=None, alias="X-Actor-Id", max_length=128)
_ACTOR_ROLE_HEADER = Header(default=None, alias="X-Actor-Role", max_length=64)


def get_actor(
    actor_id: str | None = _ACTOR_ID_HEADER,
    role: str | None = _ACTOR_ROLE_HEADER,
) -> Actor:
    """FastAPI dependency: read the actor from request headers."""
    return Actor(
        actor_id=actor_id.strip() or None if actor_id else None,
        role=role.strip() or None if role else None,
    )
