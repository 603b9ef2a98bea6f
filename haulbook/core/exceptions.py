"""Custom application exceptions.

Every exception carries a stable ``code`` that the API layer puts in the
``error`` field of the response envelope.
"""

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        if code:
            self.code = code


class ValidationError(AppException):
    """Malformed or missing input."""

    code = "VALIDATION_ERROR"

    def __init__(self, detail: str = "Validation failed") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InvalidCoordinates(ValidationError):
    """Latitude/longitude outside the valid range."""

    code = "INVALID_COORDINATES"

    def __init__(self, latitude: float, longitude: float) -> None:
        super().__init__(
            f"Invalid coordinates ({latitude}, {longitude}): latitude must be within "
            "[-90, 90] and longitude within [-180, 180]"
        )


class DriverHasNoActiveVehicle(ValidationError):
    """Driver cannot be assigned without an active, verified vehicle."""

    code = "DRIVER_HAS_NO_ACTIVE_VEHICLE"

    def __init__(self, driver_id: str) -> None:
        super().__init__(f"Driver '{driver_id}' has no active verified vehicle")


class InvalidTransitionError(AppException):
    """Status change not permitted from the current state."""

    code = "INVALID_TRANSITION"

    def __init__(self, current: str, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid booking transition: {current} → {requested}",
        )


class NotFoundError(AppException):
    """Resource not found exception."""

    code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class BookingNotFound(NotFoundError):
    def __init__(self, booking_id: str) -> None:
        super().__init__("Booking", booking_id)


class DriverNotFound(NotFoundError):
    def __init__(self, driver_id: str) -> None:
        super().__init__("Driver", driver_id)


class AuthenticationError(AppException):
    """Authentication failed exception."""

    code = "AUTHENTICATION_FAILED"

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(AppException):
    """Authorization denied exception."""

    code = "FORBIDDEN"

    def __init__(self, detail: str = "You don't have permission to access this resource") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ConflictError(AppException):
    """Lost a race on a conditional update; re-fetch and retry."""

    code = "CONFLICT"

    def __init__(self, detail: str = "The booking was modified by another request") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class BookingAlreadyAssigned(ConflictError):
    code = "BOOKING_ALREADY_ASSIGNED"

    def __init__(self, booking_id: str) -> None:
        super().__init__(f"Booking '{booking_id}' is already assigned to a driver")


class RateLimitExceeded(AppException):
    """Rate limit exceeded exception."""

    code = "RATE_LIMITED"

    def __init__(self, detail: str = "Too many requests. Please try again later.") -> None:
        super().__init__(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=detail)


class ExternalServiceError(AppException):
    """External service error."""

    code = "EXTERNAL_SERVICE_ERROR"

    def __init__(self, service: str, detail: str | None = None) -> None:
        message = f"External service '{service}' is unavailable"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=message)
