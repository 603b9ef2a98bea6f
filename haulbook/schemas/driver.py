"""Driver schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class OnlineStatusUpdate(BaseModel):
    is_online: bool


class DriverStatusResponse(BaseModel):
    """Schema for a driver's online state and live position."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    is_online: bool
    is_verified: bool
    current_latitude: float | None
    current_longitude: float | None
    last_location_update: datetime | None
