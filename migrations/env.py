# migrations/env.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Alembic environment for the assessing schema.

Design:
    - Loads env vars from .env and .env.<ENVIRONMENT> without overriding
      exported vars.
    - Resolves the database URL from DATABASE_URL, SQLALCHEMY_DATABASE_URI or
      alembic.ini, in that order.
    - Refuses to run without ENVIRONMENT and enforces an allowlist of database
      names per environment.
    - Online runs use an async engine with NullPool.
    - The version table lives in public.alembic_version.

Usage:
    ENVIRONMENT=test alembic upgrade head --sql
    ENVIRONMENT=test alembic -x show_url=1 upgrade head
"""

from __future__ import annotations

import asyncio
import logging
import logging.config
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import urlparse, urlunparse

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from millrate_api.infrastructure.database.models import assessing as _assessing_models  # noqa: F401
from millrate_api.infrastructure.database.models.base import metadata as BaseMetadata

config = context.config

if config.config_file_name is not None:
    logging.config.fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

_VERSION_TABLE = "alembic_version"
_VERSION_TABLE_SCHEMA = "public"

_ALLOWED_DATABASES: dict[str, set[str]] = {
    "test": {"millrate_test"},
    "development": {"millrate"},
    "docker": {"millrate"},
}


def _load_env_files() -> None:
    """Load .env, then .env.<ENVIRONMENT>, never overriding exported vars."""
    root = Path(__file__).resolve().parents[1]
    base = root / ".env"
    if base.exists():
        load_dotenv(base, override=False)

    env = (os.getenv("ENVIRONMENT") or "").strip().lower()
    if env:
        env_file = root / f".env.{env}"
        if env_file.exists():
            load_dotenv(env_file, override=False)


_load_env_files()


def _xargs() -> Mapping[str, str]:
    return dict(getattr(config, "x", {}) or {})


def _mask_url(url: str) -> str:
    """Return the URL with its password masked."""
    parts = urlparse(url)
    user = parts.username or ""
    host = parts.hostname or ""
    port = f":{parts.port}" if parts.port else ""
    auth = f"{user}:****@" if user else ""
    return urlunparse((parts.scheme, f"{auth}{host}{port}", parts.path or "", "", "", ""))


def _get_db_url() -> str:
    env_url = os.getenv("DATABASE_URL") or os.getenv("SQLALCHEMY_DATABASE_URI")
    if env_url:
        return env_url
    ini_url = config.get_main_option("sqlalchemy.url")
    if ini_url:
        return ini_url
    raise RuntimeError(
        "Database URL not configured (DATABASE_URL/SQLALCHEMY_DATABASE_URI/sqlalchemy.url)."
    )


def _require_environment() -> str:
    env = (os.getenv("ENVIRONMENT") or "").strip().lower()
    if not env:
        raise RuntimeError(
            "ENVIRONMENT is required for migrations (e.g., ENVIRONMENT=test). "
            "Refusing to run without an explicit environment."
        )
    return env


def _assert_safe_db(url: str, *, env: str) -> None:
    """Refuse to migrate a database not allowlisted for ``env``."""
    dbname = (urlparse(url).path or "").lstrip("/")
    allowed = _ALLOWED_DATABASES.get(env)
    if allowed is None:
        raise RuntimeError(
            f"Unsupported ENVIRONMENT={env!r} for migrations. "
            f"Supported: {sorted(_ALLOWED_DATABASES)}"
        )
    if dbname not in allowed:
        raise RuntimeError(
            "Refusing to run migrations against an unexpected database.\n"
            f"ENVIRONMENT={env!r}\n"
            f"database={dbname!r}\n"
            f"allowed={sorted(allowed)}\n"
            f"url={_mask_url(url)}"
        )


def _resolve_url() -> str:
    env = _require_environment()
    url = _get_db_url()
    _assert_safe_db(url, env=env)
    if _xargs().get("show_url") == "1" or os.getenv("ALEMBIC_SHOW_URL") == "1":
        logger.info("Using DATABASE_URL (masked): %s", _mask_url(url))
    return url


target_metadata = BaseMetadata


def _context_kwargs() -> dict[str, Any]:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "compare_server_default": True,
        "include_schemas": True,
        "version_table": _VERSION_TABLE,
        "version_table_schema": _VERSION_TABLE_SCHEMA,
    }


def run_migrations_offline() -> None:
    """Emit the migration SQL without connecting."""
    context.configure(
        url=_resolve_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_context_kwargs(),
    )
    with context.begin_transaction():
        context.run_migrations()


def _configure_and_run(connection: Connection) -> None:
    context.configure(connection=connection, **_context_kwargs())
    with context.begin_transaction():
        context.run_migrations()


async def _run_migrations_async() -> None:
    echo_sql = os.getenv("ECHO_SQL") == "1"
    connectable: AsyncEngine = create_async_engine(
        _resolve_url(), echo=echo_sql, poolclass=pool.NullPool
    )
    async with connectable.connect() as connection:
        await connection.run_sync(_configure_and_run)
    await connectable.dispose()


def run_migrations_online() -> None:
    """Apply migrations over an async connection."""
    asyncio.run(_run_migrations_async())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
