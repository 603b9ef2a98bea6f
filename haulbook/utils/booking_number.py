"""Booking number generation."""

import random
import string
import time

from haulbook.repositories.interfaces import BookingRepository


def make_booking_number() -> str:
    """Build a booking number like 'BK482913K7QZ'.

    Last six digits of the millisecond clock, then four random uppercase
    alphanumerics.
    """
    timestamp_part = str(int(time.time() * 1000))[-6:]
    random_part = "".join(random.choices(string.ascii_uppercase + string.digits, k=4))
    return f"BK{timestamp_part}{random_part}"


async def generate_booking_number(bookings: BookingRepository) -> str:
    """Generate a booking number that is not taken yet.

    Args:
        bookings: Booking store for the uniqueness check

    Returns:
        str: Unique booking number
    """
    while True:
        booking_number = make_booking_number()
        if not await bookings.booking_number_exists(booking_number):
            return booking_number
