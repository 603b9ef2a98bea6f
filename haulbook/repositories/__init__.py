"""Persistence layer: repository interfaces and their SQLAlchemy implementations."""

from haulbook.repositories.bookings import SQLBookingRepository
from haulbook.repositories.drivers import SQLDriverRepository
from haulbook.repositories.interfaces import (
    BookingRepository,
    DriverRepository,
    NotificationRepository,
    UserRepository,
)
from haulbook.repositories.notifications import SQLNotificationRepository
from haulbook.repositories.users import SQLUserRepository

__all__ = [
    "BookingRepository",
    "DriverRepository",
    "NotificationRepository",
    "UserRepository",
    "SQLBookingRepository",
    "SQLDriverRepository",
    "SQLNotificationRepository",
    "SQLUserRepository",
]
