"""SQLAlchemy booking store."""

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from haulbook.domain.booking_state import BookingStatus, TripStatus
from haulbook.models import Booking, Trip
from haulbook.repositories.interfaces import BookingRepository

logger = logging.getLogger(__name__)


class SQLBookingRepository(BookingRepository):
    """Booking store backed by PostgreSQL.

    Status writes are single conditional UPDATE statements, so the row
    lock taken by the database decides which of two racing callers wins.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(self, booking: Booking) -> Booking:
        self.db.add(booking)
        await self.db.flush()
        return await self._reload(booking.id)

    async def get(self, booking_id: UUID) -> Booking | None:
        result = await self.db.execute(
            select(Booking).options(selectinload(Booking.trip)).where(Booking.id == booking_id)
        )
        return result.scalar_one_or_none()

    async def booking_number_exists(self, booking_number: str) -> bool:
        result = await self.db.execute(
            select(Booking.id).where(Booking.booking_number == booking_number)
        )
        return result.scalar_one_or_none() is not None

    async def list_for_customer(self, customer_id: UUID) -> list[Booking]:
        result = await self.db.execute(
            select(Booking)
            .options(selectinload(Booking.trip))
            .where(Booking.customer_id == customer_id)
            .order_by(Booking.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_for_driver(
        self,
        driver_id: UUID,
        statuses: Sequence[str] | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Booking], int]:
        query = select(Booking).where(Booking.driver_id == driver_id)
        if statuses:
            query = query.where(Booking.status.in_([BookingStatus(s).value for s in statuses]))
        return await self._paginate(query, offset, limit)

    async def list_all(
        self,
        status: str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Booking], int]:
        query = select(Booking)
        if status:
            query = query.where(Booking.status == BookingStatus(status).value)
        return await self._paginate(query, offset, limit)

    async def transition(
        self,
        booking_id: UUID,
        expected_status: str,
        values: dict[str, Any],
        trip_values: dict[str, Any] | None = None,
        create_trip: bool = False,
    ) -> Booking | None:
        async with self.db.begin_nested():
            result = await self.db.execute(
                update(Booking)
                .where(
                    Booking.id == booking_id,
                    Booking.status == BookingStatus(expected_status).value,
                )
                .values(**_plain(values))
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                logger.info(
                    f"Booking {booking_id} left {expected_status} before the write landed"
                )
                return None

            if trip_values is not None:
                await self._write_trip(booking_id, _plain(trip_values), create_trip)

        return await self._reload(booking_id)

    async def assign_driver(
        self,
        booking_id: UUID,
        driver_id: UUID,
        vehicle_id: UUID,
        assigned_at: datetime,
    ) -> Booking | None:
        async with self.db.begin_nested():
            result = await self.db.execute(
                update(Booking)
                .where(
                    Booking.id == booking_id,
                    Booking.status == BookingStatus.PENDING.value,
                )
                .values(
                    driver_id=driver_id,
                    vehicle_id=vehicle_id,
                    status=BookingStatus.DRIVER_ASSIGNED.value,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                return None

            trip = await self.get_trip(booking_id)
            if trip is None:
                self.db.add(
                    Trip(
                        booking_id=booking_id,
                        driver_profile_id=driver_id,
                        vehicle_id=vehicle_id,
                        status=TripStatus.STARTED.value,
                        start_time=assigned_at,
                    )
                )
            else:
                # Left over from a rejected assignment
                trip.driver_profile_id = driver_id
                trip.vehicle_id = vehicle_id
                trip.status = TripStatus.STARTED.value
                trip.start_time = assigned_at
                trip.end_time = None
                trip.end_latitude = None
                trip.end_longitude = None
            await self.db.flush()

        return await self._reload(booking_id)

    async def get_trip(self, booking_id: UUID) -> Trip | None:
        result = await self.db.execute(select(Trip).where(Trip.booking_id == booking_id))
        return result.scalar_one_or_none()

    async def update_trip_location(
        self, booking_id: UUID, latitude: float, longitude: float
    ) -> Trip | None:
        trip = await self.get_trip(booking_id)
        if trip is None:
            return None
        trip.end_latitude = latitude
        trip.end_longitude = longitude
        await self.db.flush()
        return trip

    async def _write_trip(
        self, booking_id: UUID, trip_values: dict[str, Any], create_trip: bool
    ) -> None:
        trip = await self.get_trip(booking_id)
        if trip is None:
            if not create_trip:
                return
            booking = await self._reload(booking_id)
            if booking.driver_id is None or booking.vehicle_id is None:
                logger.warning(f"Booking {booking_id} has no driver/vehicle to build a trip from")
                return
            self.db.add(
                Trip(
                    booking_id=booking_id,
                    driver_profile_id=booking.driver_id,
                    vehicle_id=booking.vehicle_id,
                    **trip_values,
                )
            )
        else:
            for key, value in trip_values.items():
                setattr(trip, key, value)
        await self.db.flush()

    async def _reload(self, booking_id: UUID) -> Booking:
        result = await self.db.execute(
            select(Booking)
            .options(selectinload(Booking.trip))
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def _paginate(self, query, offset: int, limit: int) -> tuple[list[Booking], int]:
        count_result = await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )
        total = count_result.scalar() or 0

        result = await self.db.execute(
            query.options(selectinload(Booking.trip))
            .order_by(Booking.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total


def _plain(values: dict[str, Any]) -> dict[str, Any]:
    """Unwrap enum members so asyncpg binds them as text."""
    return {key: getattr(value, "value", value) for key, value in values.items()}
