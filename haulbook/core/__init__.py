"""Core utilities and security modules."""

from haulbook.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    BookingAlreadyAssigned,
    BookingNotFound,
    ConflictError,
    DriverHasNoActiveVehicle,
    DriverNotFound,
    ExternalServiceError,
    InvalidCoordinates,
    InvalidTransitionError,
    NotFoundError,
    RateLimitExceeded,
    ValidationError,
)
from haulbook.core.permissions import Actor, Permission, UserRole
from haulbook.core.security import create_access_token, create_user_token, verify_token

__all__ = [
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "BookingAlreadyAssigned",
    "BookingNotFound",
    "ConflictError",
    "DriverHasNoActiveVehicle",
    "DriverNotFound",
    "ExternalServiceError",
    "InvalidCoordinates",
    "InvalidTransitionError",
    "NotFoundError",
    "RateLimitExceeded",
    "ValidationError",
    "Actor",
    "Permission",
    "UserRole",
    "create_access_token",
    "create_user_token",
    "verify_token",
]
