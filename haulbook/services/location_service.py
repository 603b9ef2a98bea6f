"""Driver location updates.

Positions are last-write-wins; nothing here takes a lock or compares
timestamps.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from haulbook.core.exceptions import (
    AuthorizationError,
    BookingNotFound,
    DriverNotFound,
    ValidationError,
)
from haulbook.core.permissions import Actor
from haulbook.domain.booking_state import BookingStatus
from haulbook.models import DriverProfile, Trip
from haulbook.repositories.interfaces import BookingRepository, DriverRepository
from haulbook.utils.validators import assert_valid_coordinates

logger = logging.getLogger(__name__)


class LocationService:
    def __init__(self, bookings: BookingRepository, drivers: DriverRepository) -> None:
        self.bookings = bookings
        self.drivers = drivers

    async def update_trip_location(
        self, actor: Actor, booking_id: UUID, latitude: float, longitude: float
    ) -> Trip | None:
        """Record a position for an in-progress trip.

        Writes the trip's last known coordinates and the driver's live
        position.

        Raises:
            InvalidCoordinates: If the pair is out of range
            BookingNotFound: If the booking does not exist
            AuthorizationError: If the caller is not the assigned driver
            ValidationError: If the trip is not in progress
        """
        assert_valid_coordinates(latitude, longitude)

        booking = await self.bookings.get(booking_id)
        if booking is None:
            raise BookingNotFound(str(booking_id))
        if actor.driver_id is None or booking.driver_id != actor.driver_id:
            raise AuthorizationError("Only the assigned driver can update this trip's location")
        if booking.status != BookingStatus.IN_PROGRESS.value:
            raise ValidationError(
                f"Location updates are only accepted while the trip is in progress "
                f"(booking is {booking.status})"
            )

        trip = await self.bookings.update_trip_location(booking_id, latitude, longitude)
        await self.drivers.update_location(actor.driver_id, latitude, longitude, datetime.now(UTC))
        return trip

    async def update_driver_location(
        self, actor: Actor, latitude: float, longitude: float
    ) -> DriverProfile:
        """Update the driver's live position outside of any trip."""
        assert_valid_coordinates(latitude, longitude)
        driver = await self.drivers.update_location(
            self._driver_id(actor), latitude, longitude, datetime.now(UTC)
        )
        if driver is None:
            raise DriverNotFound(str(actor.driver_id))
        return driver

    async def set_online_status(self, actor: Actor, is_online: bool) -> DriverProfile:
        driver = await self.drivers.set_online(self._driver_id(actor), is_online)
        if driver is None:
            raise DriverNotFound(str(actor.driver_id))
        logger.info(f"Driver {driver.id} is now {'online' if is_online else 'offline'}")
        return driver

    @staticmethod
    def _driver_id(actor: Actor) -> UUID:
        if actor.driver_id is None:
            raise AuthorizationError("Driver profile required")
        return actor.driver_id
