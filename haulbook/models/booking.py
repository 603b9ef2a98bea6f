"""Booking and trip database models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from haulbook.database import Base

if TYPE_CHECKING:
    from haulbook.models.user import DriverProfile, User, Vehicle


class Booking(Base):
    """Booking model."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint(
            "(driver_id IS NOT NULL) = (status IN "
            "('DRIVER_ASSIGNED', 'DRIVER_ARRIVED', 'IN_PROGRESS', 'COMPLETED'))",
            name="ck_bookings_driver_matches_status",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    booking_number: Mapped[str] = mapped_column(
        String(20), unique=True, nullable=False, index=True
    )  # BKXXXXXXYYYY
    customer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    driver_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("driver_profiles.id"), index=True
    )
    vehicle_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("vehicles.id")
    )

    # Itinerary
    service_type: Mapped[str] = mapped_column(
        String(30), nullable=False
    )  # BIKE_DELIVERY, AUTO_RIDE, CAR_RIDE, TRUCK_DELIVERY, PACKERS_MOVERS
    pickup_address: Mapped[str] = mapped_column(Text, nullable=False)
    pickup_latitude: Mapped[float] = mapped_column(Float, nullable=False)
    pickup_longitude: Mapped[float] = mapped_column(Float, nullable=False)
    dropoff_address: Mapped[str] = mapped_column(Text, nullable=False)
    dropoff_latitude: Mapped[float] = mapped_column(Float, nullable=False)
    dropoff_longitude: Mapped[float] = mapped_column(Float, nullable=False)
    pickup_datetime: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    vehicle_type: Mapped[str | None] = mapped_column(String(20))
    vehicle_name: Mapped[str | None] = mapped_column(String(100))
    notes: Mapped[str | None] = mapped_column(Text)

    # Commercial
    estimated_fare: Mapped[float] = mapped_column(Float, nullable=False)
    actual_fare: Mapped[float | None] = mapped_column(Float)
    payment_method: Mapped[str] = mapped_column(
        String(20), default="CASH"
    )  # CASH, CARD, UPI, WALLET, NET_BANKING
    payment_status: Mapped[str] = mapped_column(
        String(20), default="PENDING"
    )  # PENDING, COMPLETED, FAILED, REFUNDED

    # Status
    status: Mapped[str] = mapped_column(String(20), default="PENDING", nullable=False, index=True)

    # Cancellation
    cancellation_reason: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    picked_up_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    delivered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    customer: Mapped["User"] = relationship("User", back_populates="bookings")
    driver: Mapped["DriverProfile | None"] = relationship("DriverProfile")
    vehicle: Mapped["Vehicle | None"] = relationship("Vehicle")
    trip: Mapped["Trip | None"] = relationship("Trip", back_populates="booking", uselist=False)


class Trip(Base):
    """Operational record of a driver executing an assigned booking."""

    __tablename__ = "trips"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    booking_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("bookings.id"), unique=True, nullable=False
    )
    driver_profile_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("driver_profiles.id"), nullable=False, index=True
    )
    vehicle_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("vehicles.id"), nullable=False
    )

    # Projection of Booking.status, written together with it
    status: Mapped[str] = mapped_column(
        String(20), default="STARTED", nullable=False
    )  # STARTED, IN_PROGRESS, COMPLETED, CANCELLED

    start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Last known location
    end_latitude: Mapped[float | None] = mapped_column(Float)
    end_longitude: Mapped[float | None] = mapped_column(Float)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    booking: Mapped["Booking"] = relationship("Booking", back_populates="trip")
    driver_profile: Mapped["DriverProfile"] = relationship(
        "DriverProfile", back_populates="trips"
    )
