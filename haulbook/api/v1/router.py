"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from haulbook.api.v1 import bookings, drivers, notifications, support

api_router = APIRouter()

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Drivers
api_router.include_router(drivers.router, prefix="/drivers", tags=["Drivers"])

# Notifications
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])

# Support
api_router.include_router(support.router, prefix="/support", tags=["Support"])
