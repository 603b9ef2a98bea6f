"""Database models."""

from haulbook.models.booking import Booking, Trip
from haulbook.models.notification import Notification
from haulbook.models.user import DriverProfile, User, Vehicle

__all__ = [
    # User
    "User",
    "DriverProfile",
    "Vehicle",
    # Booking
    "Booking",
    "Trip",
    # Notification
    "Notification",
]
