"""In-memory fake repository implementations.

Reads return detached snapshots and then yield to the event loop, like a
database round-trip would, so concurrent coroutines interleave. Every
compare-and-set runs without an intervening await, which makes it atomic
under asyncio just like the conditional UPDATE is in PostgreSQL.
"""

import asyncio
import uuid
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import inspect

from haulbook.core.permissions import ADMIN_ROLES
from haulbook.domain.booking_state import BookingStatus, TripStatus
from haulbook.models import Booking, DriverProfile, Notification, Trip, User, Vehicle
from haulbook.repositories.interfaces import (
    BookingRepository,
    DriverRepository,
    NotificationRepository,
    UserRepository,
)


def _copy(obj):
    """Detached copy of a model's column values."""
    mapper = inspect(type(obj))
    return type(obj)(**{attr.key: getattr(obj, attr.key) for attr in mapper.column_attrs})


def _plain(value: Any) -> Any:
    return getattr(value, "value", value)


class FakeBookingRepository(BookingRepository):
    """In-memory fake implementation of the booking store."""

    def __init__(self):
        self._bookings: dict[uuid.UUID, Booking] = {}
        self._trips: dict[uuid.UUID, Trip] = {}
        self.trips_created = 0

    # Test helpers
    def stored(self, booking_id: uuid.UUID) -> Booking:
        return self._snapshot(booking_id)

    def trip_count(self) -> int:
        return len(self._trips)

    async def create(self, booking: Booking) -> Booking:
        now = datetime.now(UTC)
        booking.id = booking.id or uuid.uuid4()
        booking.created_at = now
        booking.updated_at = now
        self._bookings[booking.id] = _copy(booking)
        return await self._read(booking.id)

    async def get(self, booking_id: uuid.UUID) -> Booking | None:
        return await self._read(booking_id)

    async def booking_number_exists(self, booking_number: str) -> bool:
        await asyncio.sleep(0)
        return any(b.booking_number == booking_number for b in self._bookings.values())

    async def list_for_customer(self, customer_id: uuid.UUID) -> list[Booking]:
        items = [b for b in self._bookings.values() if b.customer_id == customer_id]
        result = [self._snapshot(b.id) for b in self._newest_first(items)]
        await asyncio.sleep(0)
        return result

    async def list_for_driver(
        self,
        driver_id: uuid.UUID,
        statuses: Sequence[str] | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Booking], int]:
        items = [b for b in self._bookings.values() if b.driver_id == driver_id]
        if statuses:
            wanted = {_plain(s) for s in statuses}
            items = [b for b in items if b.status in wanted]
        return await self._page(items, offset, limit)

    async def list_all(
        self,
        status: str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Booking], int]:
        items = list(self._bookings.values())
        if status:
            items = [b for b in items if b.status == _plain(status)]
        return await self._page(items, offset, limit)

    async def transition(
        self,
        booking_id: uuid.UUID,
        expected_status: str,
        values: dict[str, Any],
        trip_values: dict[str, Any] | None = None,
        create_trip: bool = False,
    ) -> Booking | None:
        booking = self._bookings.get(booking_id)
        if booking is None or booking.status != _plain(expected_status):
            return None

        for key, value in values.items():
            setattr(booking, key, _plain(value))
        booking.updated_at = datetime.now(UTC)

        if trip_values is not None:
            trip = self._trips.get(booking_id)
            if trip is None and create_trip and booking.driver_id and booking.vehicle_id:
                trip = self._new_trip(booking_id, booking.driver_id, booking.vehicle_id)
            if trip is not None:
                for key, value in trip_values.items():
                    setattr(trip, key, _plain(value))

        return await self._read(booking_id)

    async def assign_driver(
        self,
        booking_id: uuid.UUID,
        driver_id: uuid.UUID,
        vehicle_id: uuid.UUID,
        assigned_at: datetime,
    ) -> Booking | None:
        booking = self._bookings.get(booking_id)
        if booking is None or booking.status != BookingStatus.PENDING.value:
            return None

        booking.driver_id = driver_id
        booking.vehicle_id = vehicle_id
        booking.status = BookingStatus.DRIVER_ASSIGNED.value
        booking.updated_at = datetime.now(UTC)

        trip = self._trips.get(booking_id) or self._new_trip(booking_id, driver_id, vehicle_id)
        trip.driver_profile_id = driver_id
        trip.vehicle_id = vehicle_id
        trip.status = TripStatus.STARTED.value
        trip.start_time = assigned_at
        trip.end_time = None
        trip.end_latitude = None
        trip.end_longitude = None

        return await self._read(booking_id)

    async def get_trip(self, booking_id: uuid.UUID) -> Trip | None:
        trip = self._trips.get(booking_id)
        result = _copy(trip) if trip else None
        await asyncio.sleep(0)
        return result

    async def update_trip_location(
        self, booking_id: uuid.UUID, latitude: float, longitude: float
    ) -> Trip | None:
        trip = self._trips.get(booking_id)
        if trip is None:
            return None
        trip.end_latitude = latitude
        trip.end_longitude = longitude
        return _copy(trip)

    def _new_trip(self, booking_id, driver_id, vehicle_id) -> Trip:
        trip = Trip(
            id=uuid.uuid4(),
            booking_id=booking_id,
            driver_profile_id=driver_id,
            vehicle_id=vehicle_id,
            status=TripStatus.STARTED.value,
        )
        self._trips[booking_id] = trip
        self.trips_created += 1
        return trip

    def _snapshot(self, booking_id: uuid.UUID) -> Booking | None:
        booking = self._bookings.get(booking_id)
        if booking is None:
            return None
        clone = _copy(booking)
        trip = self._trips.get(booking_id)
        if trip is not None:
            clone.trip = _copy(trip)
        return clone

    async def _read(self, booking_id: uuid.UUID) -> Booking | None:
        # Snapshot first, then yield: the caller acts on what it read
        snapshot = self._snapshot(booking_id)
        await asyncio.sleep(0)
        return snapshot

    @staticmethod
    def _newest_first(items: list[Booking]) -> list[Booking]:
        return sorted(items, key=lambda b: b.created_at, reverse=True)

    async def _page(self, items, offset, limit) -> tuple[list[Booking], int]:
        ordered = self._newest_first(items)
        result = [self._snapshot(b.id) for b in ordered[offset : offset + limit]]
        await asyncio.sleep(0)
        return result, len(ordered)


class FakeDriverRepository(DriverRepository):
    """In-memory fake implementation of the driver store."""

    def __init__(self):
        self._drivers: dict[uuid.UUID, DriverProfile] = {}
        self._vehicles: dict[uuid.UUID, Vehicle] = {}

    # Test helpers
    def add_driver(self, user_id: uuid.UUID, is_verified: bool = True) -> DriverProfile:
        driver = DriverProfile(
            id=uuid.uuid4(),
            user_id=user_id,
            is_online=False,
            is_verified=is_verified,
        )
        self._drivers[driver.id] = driver
        return driver

    def add_vehicle(
        self,
        driver_id: uuid.UUID,
        vehicle_number: str | None = None,
        is_active: bool = True,
        is_verified: bool = True,
    ) -> Vehicle:
        vehicle = Vehicle(
            id=uuid.uuid4(),
            driver_profile_id=driver_id,
            vehicle_type="TRUCK",
            vehicle_number=vehicle_number or f"KA01{uuid.uuid4().hex[:6].upper()}",
            is_active=is_active,
            is_verified=is_verified,
            created_at=datetime.now(UTC),
        )
        self._vehicles[vehicle.id] = vehicle
        return vehicle

    def stored(self, driver_id: uuid.UUID) -> DriverProfile:
        return self._drivers[driver_id]

    async def get(self, driver_id: uuid.UUID) -> DriverProfile | None:
        await asyncio.sleep(0)
        return self._drivers.get(driver_id)

    async def get_by_user_id(self, user_id: uuid.UUID) -> DriverProfile | None:
        await asyncio.sleep(0)
        return next((d for d in self._drivers.values() if d.user_id == user_id), None)

    async def list_assignable_vehicles(self, driver_id: uuid.UUID) -> list[Vehicle]:
        await asyncio.sleep(0)
        vehicles = [
            v
            for v in self._vehicles.values()
            if v.driver_profile_id == driver_id and v.is_active and v.is_verified
        ]
        return sorted(vehicles, key=lambda v: v.created_at)

    async def update_location(
        self, driver_id: uuid.UUID, latitude: float, longitude: float, at: datetime
    ) -> DriverProfile | None:
        driver = self._drivers.get(driver_id)
        if driver is None:
            return None
        driver.current_latitude = latitude
        driver.current_longitude = longitude
        driver.last_location_update = at
        return driver

    async def set_online(self, driver_id: uuid.UUID, is_online: bool) -> DriverProfile | None:
        driver = self._drivers.get(driver_id)
        if driver is None:
            return None
        driver.is_online = is_online
        return driver


class FakeNotificationRepository(NotificationRepository):
    """In-memory fake implementation of the notification store."""

    def __init__(self):
        self._notifications: dict[uuid.UUID, Notification] = {}
        self.fail_writes = False

    # Test helpers
    def add(self, user_id: uuid.UUID, title: str = "Booking Status Updated") -> Notification:
        notification = Notification(
            id=uuid.uuid4(),
            user_id=user_id,
            title=title,
            message="Your item is being delivered",
            notification_type="STATUS_UPDATE",
            is_read=False,
            email_sent=False,
            created_at=datetime.now(UTC),
        )
        self._notifications[notification.id] = notification
        return notification

    def for_user(self, user_id: uuid.UUID) -> list[Notification]:
        return [n for n in self._notifications.values() if n.user_id == user_id]

    def all(self) -> list[Notification]:
        return list(self._notifications.values())

    async def create(self, notification: Notification) -> Notification:
        await asyncio.sleep(0)
        if self.fail_writes:
            raise RuntimeError("notifications table unavailable")
        notification.id = notification.id or uuid.uuid4()
        notification.created_at = datetime.now(UTC)
        self._notifications[notification.id] = notification
        return notification

    async def get(self, notification_id: uuid.UUID) -> Notification | None:
        return self._notifications.get(notification_id)

    async def list_for_user(
        self,
        user_id: uuid.UUID,
        is_read: bool | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Notification], int]:
        items = self.for_user(user_id)
        if is_read is not None:
            items = [n for n in items if n.is_read == is_read]
        items.sort(key=lambda n: n.created_at, reverse=True)
        return items[offset : offset + limit], len(items)

    async def count_unread(self, user_id: uuid.UUID) -> int:
        return sum(1 for n in self.for_user(user_id) if not n.is_read)

    async def mark_read(self, notification_id: uuid.UUID, at: datetime) -> Notification | None:
        notification = self._notifications.get(notification_id)
        if notification is None:
            return None
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = at
        return notification

    async def mark_all_read(self, user_id: uuid.UUID, at: datetime) -> int:
        updated = 0
        for notification in self.for_user(user_id):
            if not notification.is_read:
                notification.is_read = True
                notification.read_at = at
                updated += 1
        return updated

    async def mark_email_sent(self, notification_ids: list[uuid.UUID]) -> int:
        updated = 0
        for notification_id in notification_ids:
            notification = self._notifications.get(notification_id)
            if notification is not None:
                notification.email_sent = True
                updated += 1
        return updated

    async def delete(self, notification_id: uuid.UUID) -> bool:
        return self._notifications.pop(notification_id, None) is not None


class FakeUserRepository(UserRepository):
    """In-memory fake implementation of the user store."""

    def __init__(self):
        self._users: dict[uuid.UUID, User] = {}

    def add(self, email: str, role: str, full_name: str = "Test User", is_active: bool = True) -> User:
        user = User(
            id=uuid.uuid4(),
            email=email,
            full_name=full_name,
            role=role,
            is_active=is_active,
        )
        self._users[user.id] = user
        return user

    async def get(self, user_id: uuid.UUID) -> User | None:
        return self._users.get(user_id)

    async def get_by_email(self, email: str) -> User | None:
        return next((u for u in self._users.values() if u.email == email.lower()), None)

    async def list_admins(self) -> list[User]:
        admin_roles = {role.value for role in ADMIN_ROLES}
        return [u for u in self._users.values() if u.role in admin_roles and u.is_active]
