"""Reservations and admin settings.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "reservations",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("reservation_type", sa.String(length=16), nullable=False),
        sa.Column(
            "status",
            sa.String(length=16),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("reservation_date", sa.Date(), nullable=False),
        sa.Column("reservation_time", sa.Time(), nullable=False),
        sa.Column("party_size", sa.Integer(), nullable=False),
        sa.Column("customer_name", sa.String(length=255), nullable=False),
        sa.Column("customer_email", sa.String(length=320)),
        sa.Column("customer_phone", sa.String(length=32)),
        sa.Column("special_requests", sa.String(length=1024)),
        sa.Column("notes", sa.String(length=1024)),
        sa.Column("confirmation_code", sa.String(length=16), unique=True),
        sa.Column("duration_minutes", sa.Integer()),
        *_timestamps(),
    )
    op.create_index(
        "ix_reservations_reservation_type", "reservations", ["reservation_type"]
    )
    op.create_index(
        "ix_reservations_reservation_date", "reservations", ["reservation_date"]
    )

    op.create_table(
        "admin_settings",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("setting_key", sa.String(length=64), nullable=False, unique=True),
        sa.Column("setting_value", sa.JSON(), nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("admin_settings")
    op.drop_index("ix_reservations_reservation_date", table_name="reservations")
    op.drop_index("ix_reservations_reservation_type", table_name="reservations")
    op.drop_table("reservations")
