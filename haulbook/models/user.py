"""User, driver profile and vehicle database models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from haulbook.database import Base

if TYPE_CHECKING:
    from haulbook.models.booking import Booking, Trip
    from haulbook.models.notification import Notification


class User(Base):
    """User account model."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    phone_number: Mapped[str | None] = mapped_column(String(20), unique=True, index=True)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="CUSTOMER", index=True
    )  # CUSTOMER, DRIVER, ADMIN, SUPER_ADMIN
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    driver_profile: Mapped["DriverProfile | None"] = relationship(
        "DriverProfile", back_populates="user", uselist=False
    )
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="customer")
    notifications: Mapped[list["Notification"]] = relationship(
        "Notification", back_populates="user", cascade="all, delete-orphan"
    )


class DriverProfile(Base):
    """Driver operational record: verification, online state, live location."""

    __tablename__ = "driver_profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    license_number: Mapped[str | None] = mapped_column(String(50), unique=True)
    experience_years: Mapped[int] = mapped_column(Integer, default=0)

    # Status
    is_online: Mapped[bool] = mapped_column(Boolean, default=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)

    # Live location (last write wins)
    current_latitude: Mapped[float | None] = mapped_column(Float)
    current_longitude: Mapped[float | None] = mapped_column(Float)
    last_location_update: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="driver_profile")
    vehicles: Mapped[list["Vehicle"]] = relationship(
        "Vehicle", back_populates="driver_profile", order_by="Vehicle.created_at"
    )
    trips: Mapped[list["Trip"]] = relationship("Trip", back_populates="driver_profile")


class Vehicle(Base):
    """Vehicle owned by exactly one driver."""

    __tablename__ = "vehicles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    driver_profile_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("driver_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    vehicle_type: Mapped[str] = mapped_column(
        String(20), nullable=False
    )  # BIKE, AUTO, CAR, TRUCK, VAN, TEMPO
    vehicle_number: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    vehicle_model: Mapped[str | None] = mapped_column(String(100))

    # Independent of the driver's own verification
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    driver_profile: Mapped["DriverProfile"] = relationship(
        "DriverProfile", back_populates="vehicles"
    )

    @property
    def is_assignable(self) -> bool:
        """Vehicle can be the target of an assignment."""
        return bool(self.is_active and self.is_verified)
