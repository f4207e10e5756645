"""Assessing core: configuration records, assessment years, land assessments.

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19

This migration:
  * Creates schema: assessing.
  * Creates assessing.configuration_records with the partial unique index on
    active versions (municipality, kind, business key, effective year).
  * Creates assessing.assessment_years (one row per municipality and year).
  * Creates assessing.land_assessments with embedded JSONB land-use lines.
  * Creates assessing.property_views and assessing.property_waterfronts.
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

SCHEMA = "assessing"


def _audit_columns(*, actor: bool = True) -> list[sa.Column]:
    cols = [
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]
    if actor:
        cols += [
            sa.Column("created_by", sa.String(255), nullable=True),
            sa.Column("updated_by", sa.String(255), nullable=True),
        ]
    return cols


def upgrade() -> None:
    """Apply the migration."""
    op.execute(f"CREATE SCHEMA IF NOT EXISTS {SCHEMA}")

    op.create_table(
        "configuration_records",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("municipality_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("kind", sa.String(40), nullable=False),
        sa.Column("business_key", sa.String(255), nullable=False),
        sa.Column("effective_year", sa.Integer, nullable=False),
        sa.Column("effective_year_end", sa.Integer, nullable=True),
        sa.Column("previous_version_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("next_version_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column(
            "attributes",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        *_audit_columns(),
        sa.CheckConstraint(
            "effective_year_end IS NULL OR effective_year_end > effective_year",
            name="ck_configuration_records_effective_window",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_configuration_records"),
        schema=SCHEMA,
    )
    op.create_index(
        "uq_configuration_records_active_key_year",
        "configuration_records",
        ["municipality_id", "kind", "business_key", "effective_year"],
        unique=True,
        schema=SCHEMA,
        postgresql_where=sa.text("is_active"),
    )
    op.create_index(
        "ix_configuration_records_lookup",
        "configuration_records",
        ["municipality_id", "kind", "effective_year"],
        schema=SCHEMA,
    )

    op.create_table(
        "assessment_years",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("municipality_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("is_locked", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("is_hidden", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("source_year", sa.Integer, nullable=True),
        sa.Column(
            "cached_totals",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("tax_rate", sa.Numeric(12, 4), nullable=True),
        sa.Column("warrant_created_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("bills_generated_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("commitment_date", sa.Date, nullable=True),
        sa.Column("last_recalculation_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("last_recalculation_type", sa.String(64), nullable=True),
        sa.Column(
            "last_recalculation_records_created",
            sa.Integer,
            nullable=False,
            server_default=sa.text("0"),
        ),
        *_audit_columns(),
        sa.UniqueConstraint(
            "municipality_id", "year", name="uq_assessment_years_municipality_year"
        ),
        sa.CheckConstraint("year BETWEEN 2000 AND 2099", name="ck_assessment_years_year_range"),
        sa.PrimaryKeyConstraint("id", name="pk_assessment_years"),
        schema=SCHEMA,
    )

    op.create_table(
        "land_assessments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("municipality_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("property_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("card_number", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.Column("effective_year", sa.Integer, nullable=False),
        sa.Column("zone_code", sa.String(32), nullable=True),
        sa.Column("neighborhood_code", sa.String(32), nullable=True),
        sa.Column("site_conditions", sa.String(64), nullable=True),
        sa.Column("driveway_type", sa.String(64), nullable=True),
        sa.Column("road_type", sa.String(64), nullable=True),
        sa.Column(
            "land_use_lines",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("calculated_totals", postgresql.JSONB, nullable=True),
        sa.Column("last_calculated", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("previous_assessment_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("change_reason", sa.String(64), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        *_audit_columns(),
        sa.UniqueConstraint(
            "municipality_id",
            "property_id",
            "card_number",
            "effective_year",
            name="uq_land_assessments_property_card_year",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_land_assessments"),
        schema=SCHEMA,
    )
    op.create_index(
        "ix_land_assessments_year",
        "land_assessments",
        ["municipality_id", "effective_year", "zone_code"],
        schema=SCHEMA,
    )

    for table, extra in (
        ("property_views", []),
        ("property_waterfronts", [sa.Column("assessed_value", sa.Float, nullable=True)]),
    ):
        op.create_table(
            table,
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
            sa.Column("municipality_id", postgresql.UUID(as_uuid=True), nullable=False),
            sa.Column("property_id", postgresql.UUID(as_uuid=True), nullable=False),
            sa.Column("effective_year", sa.Integer, nullable=False),
            sa.Column(
                "calculated_value", sa.Float, nullable=False, server_default=sa.text("0")
            ),
            *extra,
            sa.Column(
                "current_use", sa.Boolean, nullable=False, server_default=sa.text("false")
            ),
            *_audit_columns(actor=False),
            sa.PrimaryKeyConstraint("id", name=f"pk_{table}"),
            schema=SCHEMA,
        )
        op.create_index(
            f"ix_{table}_property_year",
            table,
            ["property_id", "effective_year"],
            schema=SCHEMA,
        )


def downgrade() -> None:
    """Revert the migration."""
    for table in (
        "property_waterfronts",
        "property_views",
        "land_assessments",
        "assessment_years",
        "configuration_records",
    ):
        op.drop_table(table, schema=SCHEMA)
    op.execute(f"DROP SCHEMA IF EXISTS {SCHEMA}")
