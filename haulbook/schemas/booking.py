"""Booking-related Pydantic schemas."""

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from haulbook.domain.booking_state import BookingStatus


class ServiceType(str, Enum):
    BIKE_DELIVERY = "BIKE_DELIVERY"
    AUTO_RIDE = "AUTO_RIDE"
    CAR_RIDE = "CAR_RIDE"
    TRUCK_DELIVERY = "TRUCK_DELIVERY"
    PACKERS_MOVERS = "PACKERS_MOVERS"


class VehicleType(str, Enum):
    BIKE = "BIKE"
    AUTO = "AUTO"
    CAR = "CAR"
    TRUCK = "TRUCK"
    VAN = "VAN"
    TEMPO = "TEMPO"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    CARD = "CARD"
    UPI = "UPI"
    WALLET = "WALLET"
    NET_BANKING = "NET_BANKING"


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    service_type: ServiceType
    pickup_address: str = Field(..., min_length=10, max_length=500)
    pickup_latitude: float = Field(..., ge=-90, le=90)
    pickup_longitude: float = Field(..., ge=-180, le=180)
    dropoff_address: str = Field(..., min_length=10, max_length=500)
    dropoff_latitude: float = Field(..., ge=-90, le=90)
    dropoff_longitude: float = Field(..., ge=-180, le=180)
    pickup_datetime: datetime
    vehicle_type: VehicleType | None = None
    vehicle_name: str | None = Field(None, max_length=100)
    estimated_fare: float = Field(..., ge=0)
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: str | None = Field(None, max_length=500)

    @field_validator("pickup_datetime")
    @classmethod
    def validate_pickup_datetime(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            v = v.replace(tzinfo=UTC)
        if v < datetime.now(UTC):
            raise ValueError("pickup_datetime cannot be in the past")
        return v


class BookingCancel(BaseModel):
    reason: str | None = Field(None, max_length=500)


class BookingComplete(BaseModel):
    actual_fare: float | None = Field(None, ge=0)


class LocationUpdate(BaseModel):
    """Schema for a GPS position. Range is checked by the location service."""

    latitude: float
    longitude: float


class DriverStatusUpdate(BaseModel):
    status: BookingStatus

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: BookingStatus) -> BookingStatus:
        if v not in (BookingStatus.IN_PROGRESS, BookingStatus.COMPLETED):
            raise ValueError("status must be IN_PROGRESS or COMPLETED")
        return v


class AssignDriverRequest(BaseModel):
    """Schema for assigning a driver. ``driver_id`` is a driver profile ID."""

    booking_id: UUID
    driver_id: UUID
    vehicle_id: UUID | None = None


class AdminStatusUpdate(BaseModel):
    booking_id: UUID
    status: BookingStatus


class TripResponse(BaseModel):
    """Schema for trip response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    driver_profile_id: UUID
    vehicle_id: UUID
    status: str
    start_time: datetime | None
    end_time: datetime | None
    end_latitude: float | None
    end_longitude: float | None


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_number: str
    customer_id: UUID
    driver_id: UUID | None
    vehicle_id: UUID | None

    # Itinerary
    service_type: str
    pickup_address: str
    pickup_latitude: float
    pickup_longitude: float
    dropoff_address: str
    dropoff_latitude: float
    dropoff_longitude: float
    pickup_datetime: datetime
    vehicle_type: str | None
    vehicle_name: str | None
    notes: str | None

    # Commercial
    estimated_fare: float
    actual_fare: float | None
    payment_method: str
    payment_status: str

    # Status
    status: str
    cancellation_reason: str | None

    # Timestamps
    picked_up_at: datetime | None
    delivered_at: datetime | None
    cancelled_at: datetime | None
    created_at: datetime | None
    updated_at: datetime | None

    trip: TripResponse | None = None


class TripLocationResponse(BaseModel):
    booking_id: UUID
    latitude: float
    longitude: float
    recorded_at: datetime
