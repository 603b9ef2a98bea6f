"""Role-based access control and permissions."""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    """User roles in the system."""

    CUSTOMER = "CUSTOMER"
    DRIVER = "DRIVER"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


ADMIN_ROLES = frozenset({UserRole.ADMIN, UserRole.SUPER_ADMIN})


class Permission(str, Enum):
    """System permissions."""

    # Booking permissions
    CREATE_BOOKING = "create_booking"
    VIEW_BOOKING = "view_booking"
    CANCEL_BOOKING = "cancel_booking"

    # Driver permissions
    DRIVE_TRIP = "drive_trip"
    UPDATE_DRIVER_LOCATION = "update_driver_location"

    # Admin permissions
    VIEW_ALL_BOOKINGS = "view_all_bookings"
    ASSIGN_DRIVER = "assign_driver"
    UPDATE_BOOKING_STATUS = "update_booking_status"


ROLE_PERMISSIONS: dict[UserRole, set[Permission]] = {
    UserRole.CUSTOMER: {
        Permission.CREATE_BOOKING,
        Permission.VIEW_BOOKING,
        Permission.CANCEL_BOOKING,
    },
    UserRole.DRIVER: {
        Permission.VIEW_BOOKING,
        Permission.DRIVE_TRIP,
        Permission.UPDATE_DRIVER_LOCATION,
    },
    UserRole.ADMIN: {
        Permission.CREATE_BOOKING,
        Permission.VIEW_BOOKING,
        Permission.CANCEL_BOOKING,
        Permission.VIEW_ALL_BOOKINGS,
        Permission.ASSIGN_DRIVER,
        Permission.UPDATE_BOOKING_STATUS,
    },
    UserRole.SUPER_ADMIN: {
        # Super admins have all permissions
        perm for perm in Permission
    },
}


def is_admin(role: UserRole | str) -> bool:
    """Check if a role has admin privileges."""
    return UserRole(role) in ADMIN_ROLES


def has_permission(role: UserRole | str, permission: Permission) -> bool:
    """Check if a role has a specific permission."""
    return permission in ROLE_PERMISSIONS.get(UserRole(role), set())


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of a lifecycle command.

    ``driver_id`` is the caller's DriverProfile id; only drivers carry one.
    """

    user_id: UUID
    role: UserRole
    driver_id: UUID | None = None

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES
