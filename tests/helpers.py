"""Request builders and assertions shared across test modules."""

from datetime import UTC, datetime, timedelta

from haulbook.core.security import create_user_token
from haulbook.domain.booking_state import ASSIGNED_STATUSES, BookingStatus
from haulbook.schemas.booking import ServiceType


def booking_payload(**overrides) -> dict:
    """Valid booking body; pickup two hours from now."""
    payload = {
        "service_type": ServiceType.TRUCK_DELIVERY.value,
        "pickup_address": "12 MG Road, Bengaluru, Karnataka",
        "pickup_latitude": 12.9756,
        "pickup_longitude": 77.6050,
        "dropoff_address": "48 Indiranagar 100 Ft Road, Bengaluru",
        "dropoff_latitude": 12.9719,
        "dropoff_longitude": 77.6412,
        "pickup_datetime": (datetime.now(UTC) + timedelta(hours=2)).isoformat(),
        "estimated_fare": 450.0,
    }
    payload.update(overrides)
    return payload


def auth_headers(user) -> dict:
    token = create_user_token(str(user.id), user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


def assert_driver_matches_status(booking) -> None:
    """driver_id is set exactly when the status implies an assignment."""
    assigned = BookingStatus(booking.status) in ASSIGNED_STATUSES
    assert (booking.driver_id is not None) == assigned
    assert (booking.vehicle_id is not None) == assigned
