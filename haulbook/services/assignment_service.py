"""Assignment coordinator: binds a driver and vehicle to a pending booking."""

import logging
from datetime import UTC, datetime
from uuid import UUID

from haulbook.core.exceptions import (
    BookingAlreadyAssigned,
    BookingNotFound,
    DriverHasNoActiveVehicle,
    DriverNotFound,
    ValidationError,
)
from haulbook.core.permissions import Actor
from haulbook.domain.booking_state import BookingStatus, assert_booking_transition
from haulbook.models import Booking, DriverProfile, Vehicle
from haulbook.repositories.interfaces import BookingRepository, DriverRepository
from haulbook.services.notification_service import NotificationDispatcher

logger = logging.getLogger(__name__)


class AssignmentCoordinator:
    def __init__(
        self,
        bookings: BookingRepository,
        drivers: DriverRepository,
        notifier: NotificationDispatcher,
    ) -> None:
        self.bookings = bookings
        self.drivers = drivers
        self.notifier = notifier

    async def assign(
        self,
        actor: Actor,
        booking_id: UUID,
        driver_id: UUID,
        vehicle_id: UUID | None = None,
    ) -> Booking:
        """Assign a driver to a PENDING booking.

        The booking update and the trip write happen in one transaction.
        When no vehicle is named, the driver's oldest assignable vehicle is
        used. Re-assigning the same driver to a booking they already hold
        returns the booking unchanged.

        Args:
            actor: Admin performing the assignment
            booking_id: Booking to assign
            driver_id: DriverProfile ID
            vehicle_id: Optional vehicle of that driver

        Returns:
            Booking: The booking in DRIVER_ASSIGNED

        Raises:
            BookingNotFound: If the booking does not exist
            BookingAlreadyAssigned: If another driver holds it, including
                losing a race against a concurrent assignment
            InvalidTransitionError: If the booking is past assignment
            DriverNotFound: If the driver does not exist
            DriverHasNoActiveVehicle: If the driver has nothing to drive
        """
        booking = await self.bookings.get(booking_id)
        if booking is None:
            raise BookingNotFound(str(booking_id))

        if booking.status == BookingStatus.DRIVER_ASSIGNED.value:
            if booking.driver_id == driver_id and vehicle_id in (None, booking.vehicle_id):
                return booking
            raise BookingAlreadyAssigned(str(booking_id))

        assert_booking_transition(
            booking.status, BookingStatus.DRIVER_ASSIGNED, actor.role, is_owner_or_assignee=True
        )

        driver = await self.drivers.get(driver_id)
        if driver is None:
            raise DriverNotFound(str(driver_id))
        vehicle = await self._pick_vehicle(driver, vehicle_id)

        assigned = await self.bookings.assign_driver(
            booking_id, driver.id, vehicle.id, datetime.now(UTC)
        )
        if assigned is None:
            raise BookingAlreadyAssigned(str(booking_id))

        logger.info(
            f"Booking {assigned.booking_number} assigned to driver {driver.id} "
            f"(vehicle {vehicle.vehicle_number}) by {actor.user_id}"
        )

        await self.notifier.driver_assigned(assigned, driver)
        return assigned

    async def _pick_vehicle(self, driver: DriverProfile, vehicle_id: UUID | None) -> Vehicle:
        vehicles = await self.drivers.list_assignable_vehicles(driver.id)
        if not vehicles:
            raise DriverHasNoActiveVehicle(str(driver.id))
        if vehicle_id is None:
            return vehicles[0]

        for vehicle in vehicles:
            if vehicle.id == vehicle_id:
                return vehicle
        raise ValidationError(
            f"Vehicle '{vehicle_id}' is not an active verified vehicle of driver '{driver.id}'"
        )
