"""Rows the integration tests build on."""

from haulbook.core.permissions import UserRole
from haulbook.models import DriverProfile, User, Vehicle


async def add_user(session, email: str, role: UserRole, full_name: str = "Test User") -> User:
    user = User(email=email, full_name=full_name, role=role.value, is_active=True)
    session.add(user)
    await session.flush()
    return user


async def add_driver(session, email: str, vehicle_number: str, full_name: str) -> DriverProfile:
    """Verified driver with one active verified truck."""
    user = await add_user(session, email, UserRole.DRIVER, full_name)
    profile = DriverProfile(user_id=user.id, is_online=False, is_verified=True)
    session.add(profile)
    await session.flush()
    session.add(
        Vehicle(
            driver_profile_id=profile.id,
            vehicle_type="TRUCK",
            vehicle_number=vehicle_number,
            is_active=True,
            is_verified=True,
        )
    )
    await session.flush()
    return profile
