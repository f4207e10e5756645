# src/millrate_api/adapters/uow/__init__.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""
Unit of Work implementations (Adapters Layer)

Application code depends only on the `UnitOfWork` protocol from
`millrate_api.application.uow`.

Exports:
    - SqlAlchemyUnitOfWork: SQLAlchemy-backed UnitOfWork used by the FastAPI
      dependencies.
"""

from __future__ import annotations

from .sqlalchemy_uow import SqlAlchemyUnitOfWork

__all__ = ["SqlAlchemyUnitOfWork"]
