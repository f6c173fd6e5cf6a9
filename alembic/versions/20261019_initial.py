"""initial schema

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "20261019_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    staff_role_enum = sa.Enum("admin", "staff", "artist", name="staff_role")

    op.create_table(
        "staff",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", staff_role_enum, nullable=False, server_default="staff"),
        sa.Column("permissions", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_staff_username"), "staff", ["username"], unique=True)

    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("reservation_number", sa.Integer(), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("appointment_date", sa.Date(), nullable=False),
        sa.Column("appointment_time", sa.Time(), nullable=False),
        sa.Column("total_price", sa.Numeric(precision=10, scale=2), nullable=False, server_default="0"),
        sa.Column("deposit_paid", sa.Numeric(precision=10, scale=2), nullable=False, server_default="0"),
        sa.Column("is_paid", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deposit_paid_status", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("rest_paid_status", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("design_images", sa.JSON(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("artist_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_reservations_id"), "reservations", ["id"], unique=False)
    op.create_index(op.f("ix_reservations_reservation_number"), "reservations", ["reservation_number"], unique=True)
    op.create_index(op.f("ix_reservations_appointment_date"), "reservations", ["appointment_date"], unique=False)
    op.create_index(op.f("ix_reservations_artist_id"), "reservations", ["artist_id"], unique=False)

    op.create_table(
        "reservation_counters",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("last_number", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade():
    op.drop_table("reservation_counters")
    op.drop_index(op.f("ix_reservations_artist_id"), table_name="reservations")
    op.drop_index(op.f("ix_reservations_appointment_date"), table_name="reservations")
    op.drop_index(op.f("ix_reservations_reservation_number"), table_name="reservations")
    op.drop_index(op.f("ix_reservations_id"), table_name="reservations")
    op.drop_table("reservations")
    op.drop_index(op.f("ix_staff_username"), table_name="staff")
    op.drop_table("staff")
    sa.Enum(name="staff_role").drop(op.get_bind(), checkfirst=True)
