# src/millrate_api/infrastructure/database/models/assessing.py
# Copyright (c) Millrate.
# SPDX-License-Identifier: MIT
"""Assessing models: configuration records, assessment years, land assessments.

Schema:
    assessing.configuration_records
    assessing.assessment_years
    assessing.land_assessments
    assessing.property_views
    assessing.property_waterfronts

Notes:
    - ``configuration_records.business_key`` holds the normalized business key
      of the record's kind joined with ``|``; the partial unique index on
      active rows is the store-level guard against duplicate versions.
    - Land-use lines are embedded in ``land_assessments.land_use_lines`` as a
      JSONB array in line order.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from millrate_api.infrastructure.database.models.base import (
    AuditActorMixin,
    Base,
    IdentityMixin,
    JSONBType,
    TimestampMixin,
)

__all__ = [
    "AssessmentYearModel",
    "ConfigurationRecordModel",
    "LandAssessmentModel",
    "PropertyViewModel",
    "PropertyWaterfrontModel",
]


class ConfigurationRecordModel(IdentityMixin, TimestampMixin, AuditActorMixin, Base):
    """One version of a year-versioned configuration item."""

    __tablename__ = "configuration_records"
    __table_args__ = (
        CheckConstraint(
            "effective_year_end IS NULL OR effective_year_end > effective_year",
            name="effective_window",
        ),
        Index(
            "uq_configuration_records_active_key_year",
            "municipality_id",
            "kind",
            "business_key",
            "effective_year",
            unique=True,
            postgresql_where=text("is_active"),
        ),
        Index(
            "ix_configuration_records_lookup",
            "municipality_id",
            "kind",
            "effective_year",
        ),
    )

    municipality_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    kind: Mapped[str] = mapped_column(String(40), nullable=False)
    business_key: Mapped[str] = mapped_column(String(255), nullable=False)
    effective_year: Mapped[int] = mapped_column(Integer, nullable=False)
    effective_year_end: Mapped[int | None] = mapped_column(Integer, nullable=True)
    previous_version_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True), nullable=True
    )
    next_version_id: Mapped[UUID | None] = mapped_column(PG_UUID(as_uuid=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
    attributes: Mapped[dict[str, Any]] = mapped_column(
        JSONBType, nullable=False, default=dict, server_default=text("'{}'::jsonb")
    )


class AssessmentYearModel(IdentityMixin, TimestampMixin, AuditActorMixin, Base):
    """Lock, visibility and milestone state of a municipality's year."""

    __tablename__ = "assessment_years"
    __table_args__ = (
        UniqueConstraint("municipality_id", "year", name="uq_assessment_years_municipality_year"),
        CheckConstraint("year BETWEEN 2000 AND 2099", name="year_range"),
    )

    municipality_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    is_locked: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    is_hidden: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
    source_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cached_totals: Mapped[dict[str, Any]] = mapped_column(
        JSONBType, nullable=False, default=dict, server_default=text("'{}'::jsonb")
    )
    tax_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 4), nullable=True)
    warrant_created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    bills_generated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    commitment_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_recalculation_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_recalculation_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    last_recalculation_records_created: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )


class LandAssessmentModel(IdentityMixin, TimestampMixin, AuditActorMixin, Base):
    """Land assessment of one property card for one year."""

    __tablename__ = "land_assessments"
    __table_args__ = (
        UniqueConstraint(
            "municipality_id",
            "property_id",
            "card_number",
            "effective_year",
            name="uq_land_assessments_property_card_year",
        ),
        Index("ix_land_assessments_year", "municipality_id", "effective_year", "zone_code"),
    )

    municipality_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    property_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    card_number: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1, server_default=text("1")
    )
    effective_year: Mapped[int] = mapped_column(Integer, nullable=False)
    zone_code: Mapped[str | None] = mapped_column(String(32), nullable=True)
    neighborhood_code: Mapped[str | None] = mapped_column(String(32), nullable=True)
    site_conditions: Mapped[str | None] = mapped_column(String(64), nullable=True)
    driveway_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    road_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    land_use_lines: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONBType, nullable=False, default=list, server_default=text("'[]'::jsonb")
    )
    calculated_totals: Mapped[dict[str, Any] | None] = mapped_column(JSONBType, nullable=True)
    last_calculated: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    previous_assessment_id: Mapped[UUID | None] = mapped_column(
        PG_UUID(as_uuid=True), nullable=True
    )
    change_reason: Mapped[str | None] = mapped_column(String(64), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class PropertyViewModel(IdentityMixin, TimestampMixin, Base):
    """View value of a property in a year."""

    __tablename__ = "property_views"
    __table_args__ = (
        Index("ix_property_views_property_year", "property_id", "effective_year"),
    )

    municipality_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    property_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    effective_year: Mapped[int] = mapped_column(Integer, nullable=False)
    calculated_value: Mapped[float] = mapped_column(
        Float, nullable=False, default=0.0, server_default=text("0")
    )
    current_use: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )


class PropertyWaterfrontModel(IdentityMixin, TimestampMixin, Base):
    """Waterfront value of a property in a year."""

    __tablename__ = "property_waterfronts"
    __table_args__ = (
        Index("ix_property_waterfronts_property_year", "property_id", "effective_year"),
    )

    municipality_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    property_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    effective_year: Mapped[int] = mapped_column(Integer, nullable=False)
    calculated_value: Mapped[float] = mapped_column(
        Float, nullable=False, default=0.0, server_default=text("0")
    )
    assessed_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    current_use: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
