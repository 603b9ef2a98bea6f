"""Shared fixtures: in-memory repositories, services and seeded actors."""

import pytest
from fastapi.testclient import TestClient

from haulbook.api.deps import (
    get_booking_repository,
    get_driver_repository,
    get_email_service,
    get_notification_repository,
    get_user_repository,
)
from haulbook.core.permissions import Actor, UserRole
from haulbook.main import app
from haulbook.schemas.booking import BookingCreate
from haulbook.services.assignment_service import AssignmentCoordinator
from haulbook.services.booking_service import BookingLifecycleService
from haulbook.services.email_service import EmailService
from haulbook.services.location_service import LocationService
from haulbook.services.notification_service import NotificationDispatcher, NotificationInbox
from tests.fakes.email import RecordingTransport
from tests.fakes.repositories import (
    FakeBookingRepository,
    FakeDriverRepository,
    FakeNotificationRepository,
    FakeUserRepository,
)
from tests.helpers import booking_payload


# ==================== REPOSITORIES ====================


@pytest.fixture
def bookings():
    return FakeBookingRepository()


@pytest.fixture
def drivers():
    return FakeDriverRepository()


@pytest.fixture
def notifications():
    return FakeNotificationRepository()


@pytest.fixture
def users():
    return FakeUserRepository()


@pytest.fixture
def transport():
    return RecordingTransport()


# ==================== SERVICES ====================


@pytest.fixture
def email_service(transport):
    return EmailService(transport, timeout=0.05)


@pytest.fixture
def dispatcher(notifications, users, drivers, email_service):
    return NotificationDispatcher(notifications, users, drivers, email_service)


@pytest.fixture
def lifecycle(bookings, dispatcher):
    return BookingLifecycleService(bookings, dispatcher)


@pytest.fixture
def coordinator(bookings, drivers, dispatcher):
    return AssignmentCoordinator(bookings, drivers, dispatcher)


@pytest.fixture
def locations(bookings, drivers):
    return LocationService(bookings, drivers)


@pytest.fixture
def inbox(notifications):
    return NotificationInbox(notifications)


# ==================== ACTORS ====================


@pytest.fixture
def customer_user(users):
    return users.add("customer@example.com", UserRole.CUSTOMER.value, "Asha Customer")


@pytest.fixture
def customer(customer_user):
    return Actor(user_id=customer_user.id, role=UserRole.CUSTOMER)


@pytest.fixture
def other_customer(users):
    user = users.add("other@example.com", UserRole.CUSTOMER.value)
    return Actor(user_id=user.id, role=UserRole.CUSTOMER)


@pytest.fixture
def admin_user(users):
    return users.add("ops@example.com", UserRole.ADMIN.value, "Ops Desk")


@pytest.fixture
def admin(admin_user):
    return Actor(user_id=admin_user.id, role=UserRole.ADMIN)


@pytest.fixture
def driver_user(users):
    return users.add("driver@example.com", UserRole.DRIVER.value, "Ravi Driver")


@pytest.fixture
def driver_profile(drivers, driver_user):
    profile = drivers.add_driver(driver_user.id)
    drivers.add_vehicle(profile.id, vehicle_number="KA01AB1234")
    return profile


@pytest.fixture
def driver(driver_user, driver_profile):
    return Actor(user_id=driver_user.id, role=UserRole.DRIVER, driver_id=driver_profile.id)


@pytest.fixture
def second_driver(users, drivers):
    user = users.add("driver2@example.com", UserRole.DRIVER.value, "Imran Driver")
    profile = drivers.add_driver(user.id)
    drivers.add_vehicle(profile.id, vehicle_number="KA05XY9876")
    return Actor(user_id=user.id, role=UserRole.DRIVER, driver_id=profile.id)


# ==================== BOOKINGS ====================


@pytest.fixture
async def pending_booking(lifecycle, customer):
    return await lifecycle.create_booking(customer, BookingCreate(**booking_payload()))


@pytest.fixture
async def assigned_booking(coordinator, admin, driver, pending_booking):
    return await coordinator.assign(admin, pending_booking.id, driver.driver_id)


@pytest.fixture
async def arrived_booking(lifecycle, driver, assigned_booking):
    return await lifecycle.accept_booking(driver, assigned_booking.id)


@pytest.fixture
async def in_progress_booking(lifecycle, driver, arrived_booking):
    return await lifecycle.start_trip(driver, arrived_booking.id)


# ==================== API ====================


@pytest.fixture
def client(bookings, drivers, notifications, users, email_service):
    """TestClient whose repositories and email are the in-memory fakes."""
    app.dependency_overrides[get_booking_repository] = lambda: bookings
    app.dependency_overrides[get_driver_repository] = lambda: drivers
    app.dependency_overrides[get_notification_repository] = lambda: notifications
    app.dependency_overrides[get_user_repository] = lambda: users
    app.dependency_overrides[get_email_service] = lambda: email_service
    yield TestClient(app)
    app.dependency_overrides.clear()
