"""Booking lifecycle service.

Every status change runs the same three steps: decide with the transition
table, persist with a compare-and-set on the status that was read, then
notify. Losing the compare-and-set to a concurrent request is a
ConflictError; re-issuing a transition the booking already went through
returns the booking untouched.
"""

import logging
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from haulbook.core.exceptions import (
    AuthorizationError,
    BookingNotFound,
    ConflictError,
    ValidationError,
)
from haulbook.core.permissions import Actor, UserRole
from haulbook.domain.booking_state import (
    ACTIVE_TRIP_STATUSES,
    BookingStatus,
    assert_booking_transition,
    trip_status_for,
)
from haulbook.models import Booking
from haulbook.repositories.interfaces import BookingRepository
from haulbook.schemas.booking import BookingCreate
from haulbook.services.notification_service import NotificationDispatcher
from haulbook.utils.booking_number import generate_booking_number
from haulbook.utils.validators import assert_valid_coordinates

logger = logging.getLogger(__name__)

# Statuses a driver may report through the generic driver-status endpoint
DRIVER_REPORTABLE_STATUSES = (BookingStatus.IN_PROGRESS, BookingStatus.COMPLETED)


class BookingLifecycleService:
    """Creates bookings and moves them through their lifecycle."""

    def __init__(self, bookings: BookingRepository, notifier: NotificationDispatcher) -> None:
        self.bookings = bookings
        self.notifier = notifier

    # ==================== CREATE / READ ====================

    async def create_booking(self, actor: Actor, data: BookingCreate) -> Booking:
        """Create a PENDING booking for the calling customer."""
        assert_valid_coordinates(data.pickup_latitude, data.pickup_longitude)
        assert_valid_coordinates(data.dropoff_latitude, data.dropoff_longitude)

        booking = Booking(
            booking_number=await generate_booking_number(self.bookings),
            customer_id=actor.user_id,
            service_type=data.service_type.value,
            pickup_address=data.pickup_address,
            pickup_latitude=data.pickup_latitude,
            pickup_longitude=data.pickup_longitude,
            dropoff_address=data.dropoff_address,
            dropoff_latitude=data.dropoff_latitude,
            dropoff_longitude=data.dropoff_longitude,
            pickup_datetime=data.pickup_datetime,
            vehicle_type=data.vehicle_type.value if data.vehicle_type else None,
            vehicle_name=data.vehicle_name,
            notes=data.notes,
            estimated_fare=data.estimated_fare,
            payment_method=data.payment_method.value,
            payment_status="PENDING",
            status=BookingStatus.PENDING.value,
        )
        booking = await self.bookings.create(booking)
        logger.info(f"Booking {booking.booking_number} created by customer {actor.user_id}")

        await self.notifier.booking_created(booking)
        return booking

    async def get_booking(self, actor: Actor, booking_id: UUID) -> Booking:
        """Get a booking visible to the actor.

        Raises:
            BookingNotFound: If the booking does not exist
            AuthorizationError: If the actor is not owner, assignee or admin
        """
        booking = await self._get(booking_id)
        if not (actor.is_admin or self._is_related(actor, booking)):
            raise AuthorizationError("Not authorized to view this booking")
        return booking

    async def list_customer_bookings(self, actor: Actor) -> list[Booking]:
        return await self.bookings.list_for_customer(actor.user_id)

    async def list_driver_bookings(
        self, actor: Actor, status: BookingStatus | None, offset: int, limit: int
    ) -> tuple[list[Booking], int]:
        statuses = [status.value] if status else None
        return await self.bookings.list_for_driver(
            self._driver_id(actor), statuses, offset, limit
        )

    async def list_available_bookings(self, actor: Actor) -> list[Booking]:
        """Bookings assigned to the driver and waiting for them to accept."""
        bookings, _ = await self.bookings.list_for_driver(
            self._driver_id(actor), [BookingStatus.DRIVER_ASSIGNED.value], 0, 100
        )
        return bookings

    async def list_active_bookings(self, actor: Actor) -> list[Booking]:
        bookings, _ = await self.bookings.list_for_driver(
            self._driver_id(actor), [s.value for s in ACTIVE_TRIP_STATUSES], 0, 100
        )
        return bookings

    async def list_all_bookings(
        self, status: BookingStatus | None, offset: int, limit: int
    ) -> tuple[list[Booking], int]:
        return await self.bookings.list_all(status.value if status else None, offset, limit)

    # ==================== CUSTOMER / ADMIN ====================

    async def cancel_booking(
        self, actor: Actor, booking_id: UUID, reason: str | None = None
    ) -> Booking:
        now = datetime.now(UTC)
        return await self._transition(
            actor,
            booking_id,
            BookingStatus.CANCELLED,
            values={
                "cancelled_at": now,
                "cancellation_reason": reason or "Cancelled by user",
            },
            trip_values={"end_time": now},
        )

    async def admin_update_status(
        self, actor: Actor, booking_id: UUID, status: BookingStatus
    ) -> Booking:
        """Generic admin status change, still bound by the transition table."""
        if status is BookingStatus.DRIVER_ASSIGNED:
            raise ValidationError("Use the assign-driver endpoint to assign a driver")
        if status is BookingStatus.CANCELLED:
            return await self.cancel_booking(actor, booking_id, "Cancelled by admin")
        return await self._transition(actor, booking_id, status)

    # ==================== DRIVER ====================

    async def accept_booking(self, actor: Actor, booking_id: UUID) -> Booking:
        """Driver accepts the assignment and heads to, or is at, pickup."""
        return await self._transition(actor, booking_id, BookingStatus.DRIVER_ARRIVED)

    async def mark_arrived(self, actor: Actor, booking_id: UUID) -> Booking:
        return await self._transition(actor, booking_id, BookingStatus.DRIVER_ARRIVED)

    async def reject_booking(self, actor: Actor, booking_id: UUID) -> Booking:
        """Driver hands the booking back to the PENDING pool."""
        driver_id = self._driver_id(actor)
        booking = await self._transition(actor, booking_id, BookingStatus.PENDING)
        await self.notifier.booking_rejected(booking, driver_id)
        return booking

    async def start_trip(self, actor: Actor, booking_id: UUID) -> Booking:
        now = datetime.now(UTC)
        return await self._transition(
            actor,
            booking_id,
            BookingStatus.IN_PROGRESS,
            values={"picked_up_at": now},
            trip_values={"start_time": now},
            create_trip=True,
        )

    async def complete_trip(
        self, actor: Actor, booking_id: UUID, actual_fare: float | None = None
    ) -> Booking:
        booking = await self._get(booking_id)
        now = datetime.now(UTC)
        fare = actual_fare if actual_fare is not None else booking.estimated_fare
        return await self._transition(
            actor,
            booking_id,
            BookingStatus.COMPLETED,
            values={"actual_fare": fare, "delivered_at": now},
            trip_values={"end_time": now},
            booking=booking,
        )

    async def report_driver_status(
        self, actor: Actor, booking_id: UUID, status: BookingStatus
    ) -> Booking:
        if status is BookingStatus.IN_PROGRESS:
            return await self.start_trip(actor, booking_id)
        if status is BookingStatus.COMPLETED:
            return await self.complete_trip(actor, booking_id)
        raise ValidationError(
            f"Drivers can only report {', '.join(s.value for s in DRIVER_REPORTABLE_STATUSES)}"
        )

    # ==================== INTERNALS ====================

    async def _transition(
        self,
        actor: Actor,
        booking_id: UUID,
        requested: BookingStatus,
        values: dict[str, Any] | None = None,
        trip_values: dict[str, Any] | None = None,
        create_trip: bool = False,
        booking: Booking | None = None,
    ) -> Booking:
        if booking is None:
            booking = await self._get(booking_id)
        current = BookingStatus(booking.status)

        decision = assert_booking_transition(
            current, requested, actor.role, self._is_related(actor, booking)
        )
        if decision.noop:
            logger.info(f"Booking {booking.booking_number} already {requested.value}")
            return booking

        updates: dict[str, Any] = {"status": requested.value, **(values or {})}
        previous_driver_id = booking.driver_id
        if requested in (BookingStatus.PENDING, BookingStatus.CANCELLED):
            updates["driver_id"] = None
            updates["vehicle_id"] = None

        trip_status = trip_status_for(requested)
        trip_updates = None
        if trip_status is not None:
            trip_updates = {"status": trip_status.value, **(trip_values or {})}

        updated = await self.bookings.transition(
            booking_id, current.value, updates, trip_updates, create_trip=create_trip
        )
        if updated is None:
            raise ConflictError(
                f"Booking {booking.booking_number} changed while moving "
                f"{current.value} → {requested.value}; re-fetch and retry"
            )

        logger.info(
            f"Booking {updated.booking_number}: {current.value} → {requested.value} "
            f"by {actor.role.value} {actor.user_id}"
        )

        if decision.notifies:
            await self.notifier.status_changed(
                updated,
                requested,
                previous_driver_id=previous_driver_id
                if requested is BookingStatus.CANCELLED
                else None,
            )
        return updated

    async def _get(self, booking_id: UUID) -> Booking:
        booking = await self.bookings.get(booking_id)
        if booking is None:
            raise BookingNotFound(str(booking_id))
        return booking

    @staticmethod
    def _is_related(actor: Actor, booking: Booking) -> bool:
        if actor.role is UserRole.DRIVER:
            return actor.driver_id is not None and booking.driver_id == actor.driver_id
        return booking.customer_id == actor.user_id

    @staticmethod
    def _driver_id(actor: Actor) -> UUID:
        if actor.driver_id is None:
            raise AuthorizationError("Driver profile required")
        return actor.driver_id
