"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Creates all initial tables for the HaulBook platform:
- Users
- Driver profiles and vehicles
- Bookings and trips
- Notifications
"""

from typing import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== USERS ====================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("phone_number", sa.String(20), unique=True, index=True),
        sa.Column("full_name", sa.String(100), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="CUSTOMER", index=True),
        sa.Column("is_active", sa.Boolean, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ==================== DRIVERS ====================
    op.create_table(
        "driver_profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False),
        sa.Column("license_number", sa.String(50), unique=True),
        sa.Column("experience_years", sa.Integer, server_default="0"),
        sa.Column("is_online", sa.Boolean, server_default=sa.false()),
        sa.Column("is_verified", sa.Boolean, server_default=sa.false()),
        sa.Column("current_latitude", sa.Float),
        sa.Column("current_longitude", sa.Float),
        sa.Column("last_location_update", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "vehicles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("driver_profile_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("driver_profiles.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("vehicle_type", sa.String(20), nullable=False),
        sa.Column("vehicle_number", sa.String(20), unique=True, nullable=False),
        sa.Column("vehicle_model", sa.String(100)),
        sa.Column("is_active", sa.Boolean, server_default=sa.true()),
        sa.Column("is_verified", sa.Boolean, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("booking_number", sa.String(20), unique=True, nullable=False, index=True),
        sa.Column("customer_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("driver_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("driver_profiles.id"), index=True),
        sa.Column("vehicle_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("vehicles.id")),
        sa.Column("service_type", sa.String(30), nullable=False),
        sa.Column("pickup_address", sa.Text, nullable=False),
        sa.Column("pickup_latitude", sa.Float, nullable=False),
        sa.Column("pickup_longitude", sa.Float, nullable=False),
        sa.Column("dropoff_address", sa.Text, nullable=False),
        sa.Column("dropoff_latitude", sa.Float, nullable=False),
        sa.Column("dropoff_longitude", sa.Float, nullable=False),
        sa.Column("pickup_datetime", sa.DateTime(timezone=True), nullable=False),
        sa.Column("vehicle_type", sa.String(20)),
        sa.Column("vehicle_name", sa.String(100)),
        sa.Column("notes", sa.Text),
        sa.Column("estimated_fare", sa.Float, nullable=False),
        sa.Column("actual_fare", sa.Float),
        sa.Column("payment_method", sa.String(20), server_default="CASH"),
        sa.Column("payment_status", sa.String(20), server_default="PENDING"),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING", index=True),
        sa.Column("cancellation_reason", sa.Text),
        sa.Column("picked_up_at", sa.DateTime(timezone=True)),
        sa.Column("delivered_at", sa.DateTime(timezone=True)),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "(driver_id IS NOT NULL) = (status IN "
            "('DRIVER_ASSIGNED', 'DRIVER_ARRIVED', 'IN_PROGRESS', 'COMPLETED'))",
            name="ck_bookings_driver_matches_status",
        ),
    )

    op.create_table(
        "trips",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("bookings.id"), unique=True, nullable=False),
        sa.Column("driver_profile_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("driver_profiles.id"), nullable=False, index=True),
        sa.Column("vehicle_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="STARTED"),
        sa.Column("start_time", sa.DateTime(timezone=True)),
        sa.Column("end_time", sa.DateTime(timezone=True)),
        sa.Column("end_latitude", sa.Float),
        sa.Column("end_longitude", sa.Float),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ==================== NOTIFICATIONS ====================
    op.create_table(
        "notifications",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("notification_type", sa.String(50), nullable=False),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("bookings.id")),
        sa.Column("is_read", sa.Boolean, server_default=sa.false()),
        sa.Column("read_at", sa.DateTime(timezone=True)),
        sa.Column("email_sent", sa.Boolean, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # Driver dashboards filter by driver and status together
    op.create_index("ix_bookings_driver_status", "bookings", ["driver_id", "status"])


def downgrade() -> None:
    """Drop all database tables in reverse order."""
    op.drop_index("ix_bookings_driver_status", table_name="bookings")
    op.drop_table("notifications")
    op.drop_table("trips")
    op.drop_table("bookings")
    op.drop_table("vehicles")
    op.drop_table("driver_profiles")
    op.drop_table("users")
