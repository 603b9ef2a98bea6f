"""API dependencies: authentication, authorization and service wiring.

Services get their repositories and notifier through these factories, so
tests replace a single factory in ``app.dependency_overrides`` to run the
API against in-memory fakes.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from haulbook.core.exceptions import AuthenticationError, AuthorizationError
from haulbook.core.permissions import Actor, Permission, UserRole, has_permission
from haulbook.core.security import verify_token
from haulbook.database import get_db
from haulbook.models import User
from haulbook.repositories import (
    BookingRepository,
    DriverRepository,
    NotificationRepository,
    SQLBookingRepository,
    SQLDriverRepository,
    SQLNotificationRepository,
    SQLUserRepository,
    UserRepository,
)
from haulbook.services.assignment_service import AssignmentCoordinator
from haulbook.services.booking_service import BookingLifecycleService
from haulbook.services.email_service import EmailService, SendGridTransport
from haulbook.services.location_service import LocationService
from haulbook.services.notification_service import NotificationDispatcher, NotificationInbox

# Security scheme; missing credentials are reported as our own 401
security = HTTPBearer(auto_error=False)

# Shared across requests so the HTTP connection pool is reused
email_transport = SendGridTransport()


# ==================== REPOSITORIES ====================


def get_booking_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingRepository:
    return SQLBookingRepository(db)


def get_driver_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DriverRepository:
    return SQLDriverRepository(db)


def get_notification_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> NotificationRepository:
    return SQLNotificationRepository(db)


def get_user_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRepository:
    return SQLUserRepository(db)


# ==================== SERVICES ====================


def get_email_service() -> EmailService:
    return EmailService(email_transport)


def get_notification_dispatcher(
    notifications: Annotated[NotificationRepository, Depends(get_notification_repository)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
    drivers: Annotated[DriverRepository, Depends(get_driver_repository)],
    email: Annotated[EmailService, Depends(get_email_service)],
) -> NotificationDispatcher:
    return NotificationDispatcher(notifications, users, drivers, email)


def get_lifecycle_service(
    bookings: Annotated[BookingRepository, Depends(get_booking_repository)],
    notifier: Annotated[NotificationDispatcher, Depends(get_notification_dispatcher)],
) -> BookingLifecycleService:
    return BookingLifecycleService(bookings, notifier)


def get_assignment_coordinator(
    bookings: Annotated[BookingRepository, Depends(get_booking_repository)],
    drivers: Annotated[DriverRepository, Depends(get_driver_repository)],
    notifier: Annotated[NotificationDispatcher, Depends(get_notification_dispatcher)],
) -> AssignmentCoordinator:
    return AssignmentCoordinator(bookings, drivers, notifier)


def get_location_service(
    bookings: Annotated[BookingRepository, Depends(get_booking_repository)],
    drivers: Annotated[DriverRepository, Depends(get_driver_repository)],
) -> LocationService:
    return LocationService(bookings, drivers)


def get_notification_inbox(
    notifications: Annotated[NotificationRepository, Depends(get_notification_repository)],
) -> NotificationInbox:
    return NotificationInbox(notifications)


# ==================== AUTHENTICATION ====================


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
) -> User:
    """Get the current authenticated user from JWT token."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    payload = verify_token(credentials.credentials, token_type="access")
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token payload")
    try:
        user_uuid = UUID(user_id)
    except ValueError:
        raise AuthenticationError("Invalid token payload")

    user = await users.get(user_uuid)
    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("User account is deactivated")

    return user


async def get_current_actor(
    current_user: Annotated[User, Depends(get_current_user)],
    drivers: Annotated[DriverRepository, Depends(get_driver_repository)],
) -> Actor:
    """Resolve the caller's role and, for drivers, their driver profile."""
    role = UserRole(current_user.role)
    driver_id = None
    if role is UserRole.DRIVER:
        profile = await drivers.get_by_user_id(current_user.id)
        driver_id = profile.id if profile else None
    return Actor(user_id=current_user.id, role=role, driver_id=driver_id)


class PermissionChecker:
    """Require the caller's role to grant a permission."""

    def __init__(self, permission: Permission):
        self.permission = permission

    async def __call__(
        self,
        actor: Annotated[Actor, Depends(get_current_actor)],
    ) -> Actor:
        if not has_permission(actor.role, self.permission):
            raise AuthorizationError(
                f"Role {actor.role.value} cannot {self.permission.value.replace('_', ' ')}"
            )
        return actor


# Convenience instances
require_create_booking = PermissionChecker(Permission.CREATE_BOOKING)
require_view_booking = PermissionChecker(Permission.VIEW_BOOKING)
require_cancel_booking = PermissionChecker(Permission.CANCEL_BOOKING)
require_driver = PermissionChecker(Permission.DRIVE_TRIP)
require_location_update = PermissionChecker(Permission.UPDATE_DRIVER_LOCATION)
require_view_all_bookings = PermissionChecker(Permission.VIEW_ALL_BOOKINGS)
require_assign_driver = PermissionChecker(Permission.ASSIGN_DRIVER)
require_update_status = PermissionChecker(Permission.UPDATE_BOOKING_STATUS)

CurrentActor = Annotated[Actor, Depends(get_current_actor)]
