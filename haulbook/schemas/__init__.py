"""Pydantic schemas for API validation."""

from haulbook.schemas.booking import (
    AdminStatusUpdate,
    AssignDriverRequest,
    BookingCancel,
    BookingComplete,
    BookingCreate,
    BookingResponse,
    DriverStatusUpdate,
    LocationUpdate,
    TripLocationResponse,
    TripResponse,
)
from haulbook.schemas.common import ApiResponse, Page
from haulbook.schemas.driver import DriverStatusResponse, OnlineStatusUpdate
from haulbook.schemas.notification import (
    MarkAllReadResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from haulbook.schemas.support import SupportRequest

__all__ = [
    # Common
    "ApiResponse",
    "Page",
    # Booking
    "BookingCreate",
    "BookingResponse",
    "BookingCancel",
    "BookingComplete",
    "LocationUpdate",
    "DriverStatusUpdate",
    "AssignDriverRequest",
    "AdminStatusUpdate",
    "TripResponse",
    "TripLocationResponse",
    # Driver
    "OnlineStatusUpdate",
    "DriverStatusResponse",
    # Notification
    "NotificationResponse",
    "UnreadCountResponse",
    "MarkAllReadResponse",
    # Support
    "SupportRequest",
]
