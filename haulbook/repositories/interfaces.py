"""Repository interfaces for dependency injection."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime
from typing import Any
from uuid import UUID

from haulbook.models import Booking, DriverProfile, Notification, Trip, User, Vehicle


class BookingRepository(ABC):
    """Interface for the booking store.

    Every status change goes through ``transition`` or ``assign_driver``,
    both of which are compare-and-set on the current status.
    """

    @abstractmethod
    async def create(self, booking: Booking) -> Booking:
        """Persist a new booking."""

    @abstractmethod
    async def get(self, booking_id: UUID) -> Booking | None:
        """Get booking by ID."""

    @abstractmethod
    async def booking_number_exists(self, booking_number: str) -> bool:
        """Check whether a booking number is already taken."""

    @abstractmethod
    async def list_for_customer(self, customer_id: UUID) -> list[Booking]:
        """List a customer's bookings, newest first."""

    @abstractmethod
    async def list_for_driver(
        self,
        driver_id: UUID,
        statuses: Sequence[str] | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Booking], int]:
        """List bookings assigned to a driver, with the total count."""

    @abstractmethod
    async def list_all(
        self,
        status: str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Booking], int]:
        """List every booking, with the total count."""

    @abstractmethod
    async def transition(
        self,
        booking_id: UUID,
        expected_status: str,
        values: dict[str, Any],
        trip_values: dict[str, Any] | None = None,
        create_trip: bool = False,
    ) -> Booking | None:
        """Apply ``values`` only if the booking is still in ``expected_status``.

        ``trip_values`` are written to the booking's trip in the same
        transaction. With ``create_trip`` a missing trip is created from the
        booking's driver and vehicle.

        Returns None when the booking was no longer in the expected status.
        """

    @abstractmethod
    async def assign_driver(
        self,
        booking_id: UUID,
        driver_id: UUID,
        vehicle_id: UUID,
        assigned_at: datetime,
    ) -> Booking | None:
        """Bind driver and vehicle to a PENDING booking and create or rebind its trip.

        Both writes commit together or not at all. Returns None when the
        booking was no longer PENDING.
        """

    @abstractmethod
    async def get_trip(self, booking_id: UUID) -> Trip | None:
        """Get the trip of a booking."""

    @abstractmethod
    async def update_trip_location(
        self, booking_id: UUID, latitude: float, longitude: float
    ) -> Trip | None:
        """Record the trip's last known coordinates."""


class DriverRepository(ABC):
    """Interface for driver profiles and their vehicles."""

    @abstractmethod
    async def get(self, driver_id: UUID) -> DriverProfile | None:
        """Get driver profile by ID."""

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> DriverProfile | None:
        """Get driver profile of a user."""

    @abstractmethod
    async def list_assignable_vehicles(self, driver_id: UUID) -> list[Vehicle]:
        """List the driver's active and verified vehicles."""

    @abstractmethod
    async def update_location(
        self, driver_id: UUID, latitude: float, longitude: float, at: datetime
    ) -> DriverProfile | None:
        """Overwrite the driver's live position."""

    @abstractmethod
    async def set_online(self, driver_id: UUID, is_online: bool) -> DriverProfile | None:
        """Toggle the driver's online flag."""


class NotificationRepository(ABC):
    """Interface for in-app notifications."""

    @abstractmethod
    async def create(self, notification: Notification) -> Notification:
        """Persist a notification."""

    @abstractmethod
    async def get(self, notification_id: UUID) -> Notification | None:
        """Get notification by ID."""

    @abstractmethod
    async def list_for_user(
        self,
        user_id: UUID,
        is_read: bool | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Notification], int]:
        """List a user's notifications, newest first, with the total count."""

    @abstractmethod
    async def count_unread(self, user_id: UUID) -> int:
        """Count a user's unread notifications."""

    @abstractmethod
    async def mark_read(self, notification_id: UUID, at: datetime) -> Notification | None:
        """Mark one notification as read."""

    @abstractmethod
    async def mark_all_read(self, user_id: UUID, at: datetime) -> int:
        """Mark all of a user's notifications as read; returns how many changed."""

    @abstractmethod
    async def mark_email_sent(self, notification_ids: list[UUID]) -> int:
        """Flag notifications whose event email went out."""

    @abstractmethod
    async def delete(self, notification_id: UUID) -> bool:
        """Delete a notification."""


class UserRepository(ABC):
    """Interface for user accounts."""

    @abstractmethod
    async def get(self, user_id: UUID) -> User | None:
        """Get user by ID."""

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        """Get user by email."""

    @abstractmethod
    async def list_admins(self) -> list[User]:
        """List active ADMIN and SUPER_ADMIN users."""
