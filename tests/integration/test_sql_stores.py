"""Driver, notification and user stores against a real database."""

from datetime import UTC, datetime

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from haulbook.core.permissions import UserRole
from haulbook.models import Notification, Vehicle
from haulbook.schemas.booking import BookingCreate
from tests.helpers import booking_payload
from tests.integration.seed import add_user

NOW = datetime(2025, 3, 1, 9, 30, tzinfo=UTC)


class TestDriverStore:
    async def test_only_active_verified_vehicles_are_assignable(
        self, drivers, session, driver_profile
    ):
        session.add_all(
            [
                Vehicle(
                    driver_profile_id=driver_profile.id,
                    vehicle_type="VAN",
                    vehicle_number="KA01RETIRED",
                    is_active=False,
                    is_verified=True,
                ),
                Vehicle(
                    driver_profile_id=driver_profile.id,
                    vehicle_type="BIKE",
                    vehicle_number="KA01PENDING",
                    is_active=True,
                    is_verified=False,
                ),
            ]
        )
        await session.flush()

        vehicles = await drivers.list_assignable_vehicles(driver_profile.id)

        assert [v.vehicle_number for v in vehicles] == ["KA01AB1234"]

    async def test_presence_and_live_location(self, drivers, driver_profile):
        await drivers.set_online(driver_profile.id, True)
        updated = await drivers.update_location(driver_profile.id, 19.076, 72.8777, NOW)

        assert updated.is_online is True
        assert (updated.current_latitude, updated.current_longitude) == (19.076, 72.8777)
        assert updated.last_location_update is not None

        by_user = await drivers.get_by_user_id(driver_profile.user_id)
        assert by_user.id == driver_profile.id


class TestNotificationStore:
    async def test_inbox_round(self, inbox, notifications, customer, in_progress_booking):
        items, total = await inbox.list_notifications(customer.user_id, None, 0, 10)
        assert total == len(items) > 1
        assert await inbox.unread_count(customer.user_id) == total

        await inbox.mark_read(customer.user_id, items[0].id)
        assert await inbox.unread_count(customer.user_id) == total - 1

        assert await inbox.mark_all_read(customer.user_id) == total - 1
        assert await inbox.unread_count(customer.user_id) == 0

        await inbox.delete(customer.user_id, items[0].id)
        _, remaining = await notifications.list_for_user(customer.user_id)
        assert remaining == total - 1

    async def test_booking_created_rows_flagged_as_emailed(
        self, lifecycle, session, transport, customer, admin_user
    ):
        booking = await lifecycle.create_booking(customer, BookingCreate(**booking_payload()))

        result = await session.execute(
            select(Notification.notification_type, Notification.email_sent).where(
                Notification.booking_id == booking.id
            )
        )
        assert result.all() == [("BOOKING_CREATED", True)]
        assert len(transport.sent) == 1

    async def test_failed_insert_leaves_the_session_usable(self, notifications, customer_user):
        untitled = Notification(
            user_id=customer_user.id, message="x", notification_type="STATUS_UPDATE"
        )

        with pytest.raises(IntegrityError):
            await notifications.create(untitled)

        assert await notifications.count_unread(customer_user.id) == 0


class TestUserStore:
    async def test_admins_are_active_admin_roles(self, users, session, admin_user):
        await add_user(session, "root@example.com", UserRole.SUPER_ADMIN)
        retired = await add_user(session, "gone@example.com", UserRole.ADMIN)
        retired.is_active = False
        await add_user(session, "rider@example.com", UserRole.CUSTOMER)
        await session.flush()

        admins = await users.list_admins()

        assert sorted(u.email for u in admins) == ["ops@example.com", "root@example.com"]

    async def test_lookup_by_email_is_case_insensitive(self, users, customer_user):
        found = await users.get_by_email("Customer@Example.com")

        assert found.id == customer_user.id
