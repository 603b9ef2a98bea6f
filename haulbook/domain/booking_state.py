"""Booking state machine.

States:
- PENDING: Created by a customer, waiting for an admin to assign a driver
- CONFIRMED: Legacy state, only reachable by data import; admin may cancel
- DRIVER_ASSIGNED: Driver and vehicle bound, waiting for the driver
- DRIVER_ARRIVED: Driver accepted and is at the pickup location
- IN_PROGRESS: Goods/passenger picked up
- COMPLETED / CANCELLED / FAILED: Terminal

Every caller that changes a booking's status goes through
``decide_transition``; no handler keeps its own transition map.
"""

from dataclasses import dataclass
from enum import Enum

from haulbook.core.exceptions import AppException, AuthorizationError, InvalidTransitionError
from haulbook.core.permissions import ADMIN_ROLES, UserRole


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    DRIVER_ASSIGNED = "DRIVER_ASSIGNED"
    DRIVER_ARRIVED = "DRIVER_ARRIVED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    FAILED = "FAILED"


class TripStatus(str, Enum):
    STARTED = "STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


TERMINAL_STATUSES = frozenset(
    {BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.FAILED}
)

# driver_id is set exactly when the booking is in one of these
ASSIGNED_STATUSES = frozenset(
    {
        BookingStatus.DRIVER_ASSIGNED,
        BookingStatus.DRIVER_ARRIVED,
        BookingStatus.IN_PROGRESS,
        BookingStatus.COMPLETED,
    }
)

ACTIVE_TRIP_STATUSES = (
    BookingStatus.DRIVER_ASSIGNED,
    BookingStatus.DRIVER_ARRIVED,
    BookingStatus.IN_PROGRESS,
)

# Transitions into these statuses notify the customer
NOTIFIED_STATUSES = frozenset(
    {
        BookingStatus.DRIVER_ASSIGNED,
        BookingStatus.DRIVER_ARRIVED,
        BookingStatus.IN_PROGRESS,
        BookingStatus.COMPLETED,
        BookingStatus.CANCELLED,
    }
)

_DRIVER = frozenset({UserRole.DRIVER})
_CUSTOMER = frozenset({UserRole.CUSTOMER})


@dataclass(frozen=True)
class TransitionRule:
    """One row of the transition table.

    ``source=None`` matches any non-terminal status. ``requires_relationship``
    means the actor must own (customer) or be assigned to (driver) the booking.
    """

    source: BookingStatus | None
    target: BookingStatus
    roles: frozenset[UserRole]
    requires_relationship: bool = False

    def matches(self, current: BookingStatus, requested: BookingStatus) -> bool:
        if self.target is not requested:
            return False
        if self.source is None:
            return current not in TERMINAL_STATUSES
        return self.source is current

    def permits(self, actor_role: UserRole, is_owner_or_assignee: bool) -> bool:
        if actor_role not in self.roles:
            return False
        return is_owner_or_assignee or not self.requires_relationship


BOOKING_TRANSITIONS: tuple[TransitionRule, ...] = (
    TransitionRule(BookingStatus.PENDING, BookingStatus.DRIVER_ASSIGNED, ADMIN_ROLES),
    TransitionRule(BookingStatus.PENDING, BookingStatus.CANCELLED, _CUSTOMER, True),
    TransitionRule(BookingStatus.DRIVER_ASSIGNED, BookingStatus.DRIVER_ARRIVED, _DRIVER, True),
    TransitionRule(BookingStatus.DRIVER_ASSIGNED, BookingStatus.PENDING, _DRIVER, True),
    TransitionRule(BookingStatus.DRIVER_ARRIVED, BookingStatus.IN_PROGRESS, _DRIVER, True),
    TransitionRule(BookingStatus.IN_PROGRESS, BookingStatus.COMPLETED, _DRIVER, True),
    TransitionRule(None, BookingStatus.CANCELLED, ADMIN_ROLES),
)


@dataclass(frozen=True)
class Allowed:
    current: BookingStatus
    requested: BookingStatus
    noop: bool = False

    @property
    def notifies(self) -> bool:
        return not self.noop and self.requested in NOTIFIED_STATUSES


@dataclass(frozen=True)
class Denied:
    current: BookingStatus
    requested: BookingStatus
    reason: str  # "invalid_transition" or "forbidden"

    def to_exception(self) -> AppException:
        if self.reason == "forbidden":
            return AuthorizationError(
                f"Not permitted to move booking from {self.current.value} "
                f"to {self.requested.value}"
            )
        return InvalidTransitionError(self.current.value, self.requested.value)


Decision = Allowed | Denied


def decide_transition(
    current: BookingStatus | str,
    requested: BookingStatus | str,
    actor_role: UserRole | str,
    is_owner_or_assignee: bool,
) -> Decision:
    """Decide whether ``actor_role`` may move a booking from current to requested.

    Re-requesting the current status is an idempotent no-op as long as the
    actor could legally have made that transition.
    """
    current = BookingStatus(current)
    requested = BookingStatus(requested)
    actor_role = UserRole(actor_role)

    if current is requested:
        candidates = [rule for rule in BOOKING_TRANSITIONS if rule.target is requested]
        if any(rule.permits(actor_role, is_owner_or_assignee) for rule in candidates):
            return Allowed(current, requested, noop=True)
        return Denied(current, requested, "forbidden" if candidates else "invalid_transition")

    candidates = [rule for rule in BOOKING_TRANSITIONS if rule.matches(current, requested)]
    if not candidates:
        return Denied(current, requested, "invalid_transition")
    if not any(rule.permits(actor_role, is_owner_or_assignee) for rule in candidates):
        return Denied(current, requested, "forbidden")
    return Allowed(current, requested)


def assert_booking_transition(
    current: BookingStatus | str,
    requested: BookingStatus | str,
    actor_role: UserRole | str,
    is_owner_or_assignee: bool,
) -> Allowed:
    """Validate a booking transition.

    Raises:
        InvalidTransitionError: If the pair is not in the transition table
        AuthorizationError: If the pair is legal but not for this actor
    """
    decision = decide_transition(current, requested, actor_role, is_owner_or_assignee)
    if isinstance(decision, Denied):
        raise decision.to_exception()
    return decision


def trip_status_for(status: BookingStatus | str) -> TripStatus | None:
    """Project a booking status onto its trip status.

    Trip.status is never set independently; returns None for statuses that
    have no trip counterpart.
    """
    return {
        BookingStatus.DRIVER_ASSIGNED: TripStatus.STARTED,
        BookingStatus.DRIVER_ARRIVED: TripStatus.STARTED,
        BookingStatus.IN_PROGRESS: TripStatus.IN_PROGRESS,
        BookingStatus.COMPLETED: TripStatus.COMPLETED,
        BookingStatus.CANCELLED: TripStatus.CANCELLED,
    }.get(BookingStatus(status))
