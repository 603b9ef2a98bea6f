"""Driver endpoints: online toggle and live position outside of trips."""

from typing import Annotated

from fastapi import APIRouter, Depends

from haulbook.api.deps import get_location_service, require_driver, require_location_update
from haulbook.core.permissions import Actor
from haulbook.schemas.booking import LocationUpdate
from haulbook.schemas.common import ApiResponse
from haulbook.schemas.driver import DriverStatusResponse, OnlineStatusUpdate
from haulbook.services.location_service import LocationService

router = APIRouter()

Locations = Annotated[LocationService, Depends(get_location_service)]


@router.put("/status", response_model=ApiResponse[DriverStatusResponse])
async def update_online_status(
    request: OnlineStatusUpdate,
    actor: Annotated[Actor, Depends(require_driver)],
    locations: Locations,
) -> ApiResponse[DriverStatusResponse]:
    driver = await locations.set_online_status(actor, request.is_online)
    return ApiResponse[DriverStatusResponse](
        message=f"Driver is now {'online' if driver.is_online else 'offline'}",
        data=DriverStatusResponse.model_validate(driver),
    )


@router.put("/location", response_model=ApiResponse[DriverStatusResponse])
async def update_location(
    request: LocationUpdate,
    actor: Annotated[Actor, Depends(require_location_update)],
    locations: Locations,
) -> ApiResponse[DriverStatusResponse]:
    driver = await locations.update_driver_location(actor, request.latitude, request.longitude)
    return ApiResponse[DriverStatusResponse](
        message="Location updated successfully",
        data=DriverStatusResponse.model_validate(driver),
    )
