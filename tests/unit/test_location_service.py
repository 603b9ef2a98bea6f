"""Tests for LocationService."""

import uuid

import pytest

from haulbook.core.exceptions import (
    AuthorizationError,
    BookingNotFound,
    InvalidCoordinates,
    ValidationError,
)


class TestTripLocation:
    async def test_records_trip_and_driver_position(
        self, locations, bookings, drivers, driver, in_progress_booking
    ):
        trip = await locations.update_trip_location(
            driver, in_progress_booking.id, 12.9730, 77.6200
        )

        assert (trip.end_latitude, trip.end_longitude) == (12.9730, 77.6200)
        stored = bookings.stored(in_progress_booking.id)
        assert (stored.trip.end_latitude, stored.trip.end_longitude) == (12.9730, 77.6200)
        profile = drivers.stored(driver.driver_id)
        assert (profile.current_latitude, profile.current_longitude) == (12.9730, 77.6200)
        assert profile.last_location_update is not None

    async def test_last_write_wins(self, locations, bookings, driver, in_progress_booking):
        await locations.update_trip_location(driver, in_progress_booking.id, 12.0, 77.0)
        await locations.update_trip_location(driver, in_progress_booking.id, 13.0, 78.0)

        trip = bookings.stored(in_progress_booking.id).trip
        assert (trip.end_latitude, trip.end_longitude) == (13.0, 78.0)

    @pytest.mark.parametrize(
        "latitude,longitude", [(90.5, 77.0), (-91.0, 77.0), (12.0, 180.1), (12.0, -181.0)]
    )
    async def test_out_of_range(self, locations, driver, in_progress_booking, latitude, longitude):
        with pytest.raises(InvalidCoordinates) as exc_info:
            await locations.update_trip_location(
                driver, in_progress_booking.id, latitude, longitude
            )

        assert exc_info.value.code == "INVALID_COORDINATES"

    async def test_bounds_are_inclusive(self, locations, driver, in_progress_booking):
        trip = await locations.update_trip_location(driver, in_progress_booking.id, -90.0, 180.0)

        assert trip.end_latitude == -90.0

    async def test_only_assigned_driver(self, locations, second_driver, in_progress_booking):
        with pytest.raises(AuthorizationError):
            await locations.update_trip_location(
                second_driver, in_progress_booking.id, 12.0, 77.0
            )

    async def test_trip_not_in_progress(self, locations, bookings, driver, arrived_booking):
        with pytest.raises(ValidationError):
            await locations.update_trip_location(driver, arrived_booking.id, 12.0, 77.0)

        assert bookings.stored(arrived_booking.id).trip.end_latitude is None

    async def test_unknown_booking(self, locations, driver):
        with pytest.raises(BookingNotFound):
            await locations.update_trip_location(driver, uuid.uuid4(), 12.0, 77.0)


class TestDriverPresence:
    async def test_live_position(self, locations, driver):
        profile = await locations.update_driver_location(driver, 28.6139, 77.2090)

        assert (profile.current_latitude, profile.current_longitude) == (28.6139, 77.2090)

    async def test_live_position_out_of_range(self, locations, driver):
        with pytest.raises(InvalidCoordinates):
            await locations.update_driver_location(driver, 100.0, 77.0)

    async def test_online_toggle(self, locations, drivers, driver):
        await locations.set_online_status(driver, True)
        assert drivers.stored(driver.driver_id).is_online is True

        await locations.set_online_status(driver, False)
        assert drivers.stored(driver.driver_id).is_online is False

    async def test_customer_has_no_driver_profile(self, locations, customer):
        with pytest.raises(AuthorizationError):
            await locations.set_online_status(customer, True)
