# src/millrate_api/infrastructure/database/models/base.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Declarative Base and persistence mixins for Millrate.

This module defines:
    - A project-wide SQLAlchemy Declarative Base with deterministic naming
      conventions (for stable Alembic diffs).
    - Mixins for identity (UUIDv4), audit timestamps (UTC) and audit actor.

Persistence only; no domain behavior lives here.
"""

from __future__ import annotations

import os
import uuid
from datetime import UTC, datetime

from sqlalchemy import MetaData
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func
from sqlalchemy.types import DateTime, String

__all__ = [
    "ASSESSING_SCHEMA",
    "AuditActorMixin",
    "Base",
    "IdentityMixin",
    "JSONBType",
    "TimestampMixin",
    "metadata",
    "now_utc",
]

#: Schema holding the assessing tables.
ASSESSING_SCHEMA: str = os.getenv("DB_SCHEMA", "assessing") or "assessing"

#: Deterministic naming conventions for Alembic-friendly diffs.
#: Ref: https://alembic.sqlalchemy.org/en/latest/naming.html
NAMING_CONVENTIONS: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTIONS, schema=ASSESSING_SCHEMA)

JSONBType = JSONB


def now_utc() -> datetime:
    """Return the current UTC time with timezone info."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Declarative Base for all ORM models."""

    metadata = metadata


class IdentityMixin:
    """Mixin providing a UUIDv4 primary key ``id`` column."""

    id: Mapped[uuid.UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )


class TimestampMixin:
    """Mixin providing ``created_at`` and ``updated_at`` timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=now_utc,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=now_utc,
        onupdate=now_utc,
        server_default=func.now(),
    )


class AuditActorMixin:
    """Mixin for tracking the actor responsible for changes."""

    created_by: Mapped[str | None] = mapped_column(String(length=255), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(length=255), nullable=True)
