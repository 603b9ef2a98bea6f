"""Notification dispatch and the per-user notification inbox.

Dispatch is strictly downstream of the booking lifecycle: every failure is
logged and swallowed here so the booking operation that triggered it still
reports success. The support form is the one caller for which email is the
primary operation, so it gets an exception back.
"""

import logging
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID

from haulbook.config import settings
from haulbook.core.exceptions import ExternalServiceError, NotFoundError
from haulbook.domain.booking_state import BookingStatus
from haulbook.models import Booking, DriverProfile, Notification
from haulbook.repositories.interfaces import (
    DriverRepository,
    NotificationRepository,
    UserRepository,
)
from haulbook.services.email_service import DispatchFailure, EmailService

logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    BOOKING_CREATED = "BOOKING_CREATED"
    TRIP_ASSIGNED = "TRIP_ASSIGNED"
    DRIVER_ASSIGNED = "DRIVER_ASSIGNED"
    STATUS_UPDATE = "STATUS_UPDATE"
    BOOKING_REJECTED = "BOOKING_REJECTED"


STATUS_MESSAGES: dict[BookingStatus, str] = {
    BookingStatus.DRIVER_ASSIGNED: "Your booking has been assigned to a driver",
    BookingStatus.DRIVER_ARRIVED: "Your driver has arrived at pickup location",
    BookingStatus.IN_PROGRESS: "Your item is being delivered",
    BookingStatus.COMPLETED: "Your item has been delivered",
    BookingStatus.CANCELLED: "Your booking has been cancelled",
}


class NotificationDispatcher:
    """Turns lifecycle events into notification rows and emails."""

    def __init__(
        self,
        notifications: NotificationRepository,
        users: UserRepository,
        drivers: DriverRepository,
        email: EmailService,
    ) -> None:
        self.notifications = notifications
        self.users = users
        self.drivers = drivers
        self.email = email

    # ==================== LIFECYCLE EVENTS ====================

    async def booking_created(self, booking: Booking) -> None:
        """Tell every admin about a new booking and email the admin inbox."""
        title = "New Booking Request"
        message = (
            f"New booking {booking.booking_number} from "
            f"{booking.pickup_address} to {booking.dropoff_address}"
        )
        stored = []
        for admin in await self._admins():
            notification = await self._notify(
                admin.id, title, message, NotificationType.BOOKING_CREATED, booking.id
            )
            if notification is not None:
                stored.append(notification)

        html = self.email.render(
            title,
            message,
            rows={
                "Booking number": booking.booking_number,
                "Service": booking.service_type,
                "Pickup time": booking.pickup_datetime.isoformat(),
                "Estimated fare": f"{booking.estimated_fare:.2f}",
                "Payment method": booking.payment_method,
            },
        )
        if await self._email(settings.admin_email, f"{title} - {booking.booking_number}", html):
            await self._mark_email_sent(stored)

    async def driver_assigned(self, booking: Booking, driver: DriverProfile) -> None:
        await self._notify(
            driver.user_id,
            "New Booking Assignment",
            f"You have been assigned booking {booking.booking_number}. "
            f"Pickup: {booking.pickup_address}",
            NotificationType.TRIP_ASSIGNED,
            booking.id,
        )
        await self._notify(
            booking.customer_id,
            "Driver Assigned",
            STATUS_MESSAGES[BookingStatus.DRIVER_ASSIGNED],
            NotificationType.DRIVER_ASSIGNED,
            booking.id,
        )

    async def status_changed(
        self,
        booking: Booking,
        status: BookingStatus,
        previous_driver_id: UUID | None = None,
    ) -> None:
        """Notify the customer of a new status.

        ``previous_driver_id`` is the driver that lost the booking through a
        cancellation; they are told as well.
        """
        message = STATUS_MESSAGES.get(status)
        if message is None:
            return

        await self._notify(
            booking.customer_id,
            "Booking Status Updated",
            message,
            NotificationType.STATUS_UPDATE,
            booking.id,
        )

        if status is BookingStatus.CANCELLED and previous_driver_id is not None:
            user_id = await self._driver_user_id(previous_driver_id)
            if user_id is not None:
                await self._notify(
                    user_id,
                    "Booking Cancelled",
                    f"Booking {booking.booking_number} has been cancelled",
                    NotificationType.STATUS_UPDATE,
                    booking.id,
                )

    async def booking_rejected(self, booking: Booking, driver_id: UUID) -> None:
        """Tell admins a driver handed a booking back."""
        for admin in await self._admins():
            await self._notify(
                admin.id,
                "Booking Rejected by Driver",
                f"Booking {booking.booking_number} was rejected by driver {driver_id} "
                f"and needs to be reassigned",
                NotificationType.BOOKING_REJECTED,
                booking.id,
            )

    # ==================== SUPPORT ====================

    async def support_request(
        self,
        name: str,
        email: str,
        issue_type: str,
        subject: str,
        message: str,
        phone: str | None = None,
    ) -> None:
        """Forward a support form to the admin inbox.

        Raises:
            ExternalServiceError: If the email could not be delivered
        """
        html = self.email.render(
            f"Support Request: {subject}",
            message,
            rows={
                "Name": name,
                "Email": email,
                "Phone": phone or "Not provided",
                "Issue type": issue_type,
            },
        )
        try:
            await self.email.send(
                settings.admin_email, f"[Support - {issue_type}] {subject}", html
            )
        except DispatchFailure as e:
            logger.error(f"Support request from {email} not delivered: {e}")
            raise ExternalServiceError("email", "Failed to send support request") from e

    # ==================== HELPERS ====================

    async def _notify(
        self,
        user_id: UUID,
        title: str,
        message: str,
        notification_type: NotificationType,
        booking_id: UUID | None = None,
    ) -> Notification | None:
        try:
            return await self.notifications.create(
                Notification(
                    user_id=user_id,
                    title=title,
                    message=message,
                    notification_type=notification_type.value,
                    booking_id=booking_id,
                    is_read=False,
                    email_sent=False,
                )
            )
        except Exception:
            logger.error(
                f"Failed to store {notification_type.value} notification for user {user_id}",
                exc_info=True,
            )
            return None

    async def _email(self, to: str, subject: str, html: str) -> bool:
        try:
            await self.email.send(to, subject, html)
        except DispatchFailure as e:
            logger.warning(f"Email dispatch failed: {e}")
            return False
        return True

    async def _mark_email_sent(self, notifications: list[Notification]) -> None:
        if not notifications:
            return
        try:
            await self.notifications.mark_email_sent([n.id for n in notifications])
        except Exception:
            logger.error("Failed to flag notifications as emailed", exc_info=True)

    async def _admins(self):
        try:
            return await self.users.list_admins()
        except Exception:
            logger.error("Failed to load admin recipients", exc_info=True)
            return []

    async def _driver_user_id(self, driver_id: UUID) -> UUID | None:
        try:
            driver = await self.drivers.get(driver_id)
        except Exception:
            logger.error(f"Failed to load driver {driver_id}", exc_info=True)
            return None
        return driver.user_id if driver else None


class NotificationInbox:
    """A user's own notifications."""

    def __init__(self, notifications: NotificationRepository) -> None:
        self.notifications = notifications

    async def list_notifications(
        self, user_id: UUID, is_read: bool | None, offset: int, limit: int
    ) -> tuple[list[Notification], int]:
        return await self.notifications.list_for_user(user_id, is_read, offset, limit)

    async def unread_count(self, user_id: UUID) -> int:
        return await self.notifications.count_unread(user_id)

    async def mark_read(self, user_id: UUID, notification_id: UUID) -> Notification:
        await self._get_owned(user_id, notification_id)
        notification = await self.notifications.mark_read(notification_id, datetime.now(UTC))
        if notification is None:
            raise NotFoundError("Notification", str(notification_id))
        return notification

    async def mark_all_read(self, user_id: UUID) -> int:
        return await self.notifications.mark_all_read(user_id, datetime.now(UTC))

    async def delete(self, user_id: UUID, notification_id: UUID) -> None:
        await self._get_owned(user_id, notification_id)
        await self.notifications.delete(notification_id)

    async def _get_owned(self, user_id: UUID, notification_id: UUID) -> Notification:
        notification = await self.notifications.get(notification_id)
        # Someone else's notification looks the same as a missing one
        if notification is None or notification.user_id != user_id:
            raise NotFoundError("Notification", str(notification_id))
        return notification
