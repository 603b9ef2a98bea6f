"""SQLAlchemy driver profile and vehicle store."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from haulbook.models import DriverProfile, Vehicle
from haulbook.repositories.interfaces import DriverRepository


class SQLDriverRepository(DriverRepository):
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, driver_id: UUID) -> DriverProfile | None:
        result = await self.db.execute(select(DriverProfile).where(DriverProfile.id == driver_id))
        return result.scalar_one_or_none()

    async def get_by_user_id(self, user_id: UUID) -> DriverProfile | None:
        result = await self.db.execute(
            select(DriverProfile).where(DriverProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def list_assignable_vehicles(self, driver_id: UUID) -> list[Vehicle]:
        result = await self.db.execute(
            select(Vehicle)
            .where(
                Vehicle.driver_profile_id == driver_id,
                Vehicle.is_active.is_(True),
                Vehicle.is_verified.is_(True),
            )
            .order_by(Vehicle.created_at)
        )
        return list(result.scalars().all())

    async def update_location(
        self, driver_id: UUID, latitude: float, longitude: float, at: datetime
    ) -> DriverProfile | None:
        driver = await self.get(driver_id)
        if driver is None:
            return None
        driver.current_latitude = latitude
        driver.current_longitude = longitude
        driver.last_location_update = at
        await self.db.flush()
        return driver

    async def set_online(self, driver_id: UUID, is_online: bool) -> DriverProfile | None:
        driver = await self.get(driver_id)
        if driver is None:
            return None
        driver.is_online = is_online
        await self.db.flush()
        return driver
