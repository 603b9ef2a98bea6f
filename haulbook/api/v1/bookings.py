"""Booking endpoints."""

from datetime import UTC, datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from haulbook.api.deps import (
    get_assignment_coordinator,
    get_lifecycle_service,
    get_location_service,
    require_assign_driver,
    require_cancel_booking,
    require_create_booking,
    require_driver,
    require_location_update,
    require_update_status,
    require_view_all_bookings,
    require_view_booking,
)
from haulbook.core.middleware import booking_limiter
from haulbook.core.permissions import Actor
from haulbook.domain.booking_state import BookingStatus
from haulbook.models import Booking
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
)
from haulbook.schemas.common import ApiResponse, Page
from haulbook.services.assignment_service import AssignmentCoordinator
from haulbook.services.booking_service import BookingLifecycleService
from haulbook.services.location_service import LocationService

router = APIRouter()

Lifecycle = Annotated[BookingLifecycleService, Depends(get_lifecycle_service)]
DriverActor = Annotated[Actor, Depends(require_driver)]
StatusFilter = Annotated[BookingStatus | None, Query(alias="status")]
PageNumber = Annotated[int, Query(ge=1)]
PageSize = Annotated[int, Query(ge=1, le=100)]


def _one(booking: Booking, message: str) -> ApiResponse[BookingResponse]:
    return ApiResponse[BookingResponse](
        message=message, data=BookingResponse.model_validate(booking)
    )


def _many(bookings: list[Booking], message: str) -> ApiResponse[list[BookingResponse]]:
    return ApiResponse[list[BookingResponse]](
        message=message, data=[BookingResponse.model_validate(b) for b in bookings]
    )


def _page(
    bookings: list[Booking], total: int, page: int, limit: int, message: str
) -> ApiResponse[Page[BookingResponse]]:
    return ApiResponse[Page[BookingResponse]](
        message=message,
        data=Page[BookingResponse].build(
            [BookingResponse.model_validate(b) for b in bookings], total, page, limit
        ),
    )


# ==================== CUSTOMER ====================


@router.post(
    "",
    response_model=ApiResponse[BookingResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(booking_limiter)],
)
async def create_booking(
    request: BookingCreate,
    actor: Annotated[Actor, Depends(require_create_booking)],
    service: Lifecycle,
) -> ApiResponse[BookingResponse]:
    """Create a booking. It starts PENDING until an admin assigns a driver."""
    booking = await service.create_booking(actor, request)
    return _one(booking, "Booking created successfully")


@router.get("/my-bookings", response_model=ApiResponse[list[BookingResponse]])
async def get_my_bookings(
    actor: Annotated[Actor, Depends(require_create_booking)],
    service: Lifecycle,
) -> ApiResponse[list[BookingResponse]]:
    bookings = await service.list_customer_bookings(actor)
    return _many(bookings, "Bookings retrieved successfully")


# ==================== DRIVER ====================


@router.get("/driver/my-bookings", response_model=ApiResponse[Page[BookingResponse]])
async def get_driver_bookings(
    actor: DriverActor,
    service: Lifecycle,
    status_filter: StatusFilter = None,
    page: PageNumber = 1,
    limit: PageSize = 10,
) -> ApiResponse[Page[BookingResponse]]:
    bookings, total = await service.list_driver_bookings(
        actor, status_filter, (page - 1) * limit, limit
    )
    return _page(bookings, total, page, limit, "Driver bookings retrieved successfully")


@router.get("/driver/available", response_model=ApiResponse[list[BookingResponse]])
async def get_available_bookings(
    actor: DriverActor,
    service: Lifecycle,
) -> ApiResponse[list[BookingResponse]]:
    """Bookings assigned to the driver that still wait for acceptance."""
    bookings = await service.list_available_bookings(actor)
    return _many(bookings, "Available bookings retrieved successfully")


@router.get("/driver/active", response_model=ApiResponse[list[BookingResponse]])
async def get_active_bookings(
    actor: DriverActor,
    service: Lifecycle,
) -> ApiResponse[list[BookingResponse]]:
    bookings = await service.list_active_bookings(actor)
    return _many(bookings, "Active bookings retrieved successfully")


# ==================== ADMIN ====================


@router.get("/admin/all", response_model=ApiResponse[Page[BookingResponse]])
async def get_all_bookings(
    actor: Annotated[Actor, Depends(require_view_all_bookings)],
    service: Lifecycle,
    status_filter: StatusFilter = None,
    page: PageNumber = 1,
    limit: PageSize = 10,
) -> ApiResponse[Page[BookingResponse]]:
    bookings, total = await service.list_all_bookings(status_filter, (page - 1) * limit, limit)
    return _page(bookings, total, page, limit, "Bookings retrieved successfully")


@router.post("/admin/assign-driver", response_model=ApiResponse[BookingResponse])
async def assign_driver(
    request: AssignDriverRequest,
    actor: Annotated[Actor, Depends(require_assign_driver)],
    coordinator: Annotated[AssignmentCoordinator, Depends(get_assignment_coordinator)],
) -> ApiResponse[BookingResponse]:
    """Assign a driver (and one of their vehicles) to a pending booking."""
    booking = await coordinator.assign(
        actor, request.booking_id, request.driver_id, request.vehicle_id
    )
    return _one(booking, "Driver assigned successfully")


@router.put("/admin/status", response_model=ApiResponse[BookingResponse])
async def update_booking_status(
    request: AdminStatusUpdate,
    actor: Annotated[Actor, Depends(require_update_status)],
    service: Lifecycle,
) -> ApiResponse[BookingResponse]:
    booking = await service.admin_update_status(actor, request.booking_id, request.status)
    return _one(booking, "Booking status updated successfully")


# ==================== SINGLE BOOKING ====================


@router.get("/{booking_id}", response_model=ApiResponse[BookingResponse])
async def get_booking(
    booking_id: UUID,
    actor: Annotated[Actor, Depends(require_view_booking)],
    service: Lifecycle,
) -> ApiResponse[BookingResponse]:
    booking = await service.get_booking(actor, booking_id)
    return _one(booking, "Booking retrieved successfully")


@router.put("/{booking_id}/cancel", response_model=ApiResponse[BookingResponse])
async def cancel_booking(
    booking_id: UUID,
    actor: Annotated[Actor, Depends(require_cancel_booking)],
    service: Lifecycle,
    request: BookingCancel | None = None,
) -> ApiResponse[BookingResponse]:
    reason = request.reason if request else None
    booking = await service.cancel_booking(actor, booking_id, reason)
    return _one(booking, "Booking cancelled successfully")


@router.put("/{booking_id}/accept", response_model=ApiResponse[BookingResponse])
async def accept_booking(
    booking_id: UUID, actor: DriverActor, service: Lifecycle
) -> ApiResponse[BookingResponse]:
    booking = await service.accept_booking(actor, booking_id)
    return _one(booking, "Booking accepted successfully")


@router.put("/{booking_id}/reject", response_model=ApiResponse[BookingResponse])
async def reject_booking(
    booking_id: UUID, actor: DriverActor, service: Lifecycle
) -> ApiResponse[BookingResponse]:
    """Hand the booking back; it returns to PENDING for reassignment."""
    booking = await service.reject_booking(actor, booking_id)
    return _one(booking, "Booking rejected successfully")


@router.put("/{booking_id}/arrived", response_model=ApiResponse[BookingResponse])
async def mark_arrived(
    booking_id: UUID, actor: DriverActor, service: Lifecycle
) -> ApiResponse[BookingResponse]:
    booking = await service.mark_arrived(actor, booking_id)
    return _one(booking, "Arrival recorded successfully")


@router.put("/{booking_id}/start", response_model=ApiResponse[BookingResponse])
async def start_trip(
    booking_id: UUID, actor: DriverActor, service: Lifecycle
) -> ApiResponse[BookingResponse]:
    booking = await service.start_trip(actor, booking_id)
    return _one(booking, "Trip started successfully")


@router.put("/{booking_id}/complete", response_model=ApiResponse[BookingResponse])
async def complete_trip(
    booking_id: UUID,
    actor: DriverActor,
    service: Lifecycle,
    request: BookingComplete | None = None,
) -> ApiResponse[BookingResponse]:
    """Complete the trip. Without an actual fare the estimate is charged."""
    actual_fare = request.actual_fare if request else None
    booking = await service.complete_trip(actor, booking_id, actual_fare)
    return _one(booking, "Trip completed successfully")


@router.put("/{booking_id}/driver-status", response_model=ApiResponse[BookingResponse])
async def update_driver_status(
    booking_id: UUID,
    request: DriverStatusUpdate,
    actor: DriverActor,
    service: Lifecycle,
) -> ApiResponse[BookingResponse]:
    booking = await service.report_driver_status(actor, booking_id, request.status)
    return _one(booking, "Booking status updated successfully")


@router.put("/{booking_id}/update-location", response_model=ApiResponse[TripLocationResponse])
async def update_trip_location(
    booking_id: UUID,
    request: LocationUpdate,
    actor: Annotated[Actor, Depends(require_location_update)],
    locations: Annotated[LocationService, Depends(get_location_service)],
) -> ApiResponse[TripLocationResponse]:
    await locations.update_trip_location(actor, booking_id, request.latitude, request.longitude)
    return ApiResponse[TripLocationResponse](
        message="Location updated successfully",
        data=TripLocationResponse(
            booking_id=booking_id,
            latitude=request.latitude,
            longitude=request.longitude,
            recorded_at=datetime.now(UTC),
        ),
    )
