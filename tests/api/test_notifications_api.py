"""Tests for the notification inbox and driver presence endpoints."""

import uuid

import pytest

from haulbook.core.permissions import UserRole
from tests.helpers import auth_headers

BASE = "/api/v1/notifications"


@pytest.fixture
def asha(users, notifications):
    """A customer with three unread notifications."""
    user = users.add("asha@haulbook.in", UserRole.CUSTOMER.value)
    for n in range(3):
        notifications.add(user.id, title=f"Update {n}")
    return user


class TestInbox:
    def test_list(self, client, asha):
        response = client.get(BASE, headers=auth_headers(asha))

        assert response.status_code == 200
        page = response.json()["data"]
        assert page["total"] == 3
        assert all(item["is_read"] is False for item in page["items"])

    def test_unread_count_and_mark_read(self, client, asha, notifications):
        headers = auth_headers(asha)
        target = notifications.for_user(asha.id)[0]

        response = client.put(f"{BASE}/{target.id}/read", headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["is_read"] is True

        count = client.get(f"{BASE}/unread-count", headers=headers).json()["data"]
        assert count == {"unread_count": 2}

        unread = client.get(BASE, params={"is_read": False}, headers=headers).json()["data"]
        assert unread["total"] == 2

    def test_read_all(self, client, asha):
        headers = auth_headers(asha)

        response = client.put(f"{BASE}/mark-all-read", headers=headers)

        assert response.json()["data"] == {"updated": 3}
        count = client.get(f"{BASE}/unread-count", headers=headers).json()["data"]
        assert count["unread_count"] == 0

    def test_delete(self, client, asha, notifications):
        target = notifications.for_user(asha.id)[0]

        response = client.delete(f"{BASE}/{target.id}", headers=auth_headers(asha))

        assert response.status_code == 200
        assert len(notifications.for_user(asha.id)) == 2

    def test_someone_elses_notification_is_not_found(self, client, asha, users, notifications):
        target = notifications.for_user(asha.id)[0]
        other = users.add("other@haulbook.in", UserRole.CUSTOMER.value)

        response = client.put(f"{BASE}/{target.id}/read", headers=auth_headers(other))

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"
        assert notifications.for_user(asha.id)[0].is_read is False

    def test_unknown_notification(self, client, asha):
        response = client.delete(f"{BASE}/{uuid.uuid4()}", headers=auth_headers(asha))

        assert response.status_code == 404

    def test_requires_authentication(self, client):
        assert client.get(BASE).status_code == 401


class TestDriverPresence:
    @pytest.fixture
    def ravi(self, users, drivers):
        user = users.add("ravi@haulbook.in", UserRole.DRIVER.value)
        drivers.add_driver(user.id)
        return user

    def test_online_toggle(self, client, ravi):
        response = client.put(
            "/api/v1/drivers/status", json={"is_online": True}, headers=auth_headers(ravi)
        )

        assert response.status_code == 200
        assert response.json()["data"]["is_online"] is True
        assert response.json()["message"] == "Driver is now online"

    def test_live_location(self, client, ravi):
        response = client.put(
            "/api/v1/drivers/location",
            json={"latitude": 19.0760, "longitude": 72.8777},
            headers=auth_headers(ravi),
        )

        assert response.status_code == 200
        assert response.json()["data"]["current_latitude"] == 19.0760

    def test_live_location_out_of_range(self, client, ravi):
        response = client.put(
            "/api/v1/drivers/location",
            json={"latitude": 19.0, "longitude": 190.0},
            headers=auth_headers(ravi),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_COORDINATES"

    def test_customers_have_no_presence(self, client, users):
        customer = users.add("asha@haulbook.in", UserRole.CUSTOMER.value)

        response = client.put(
            "/api/v1/drivers/status",
            json={"is_online": True},
            headers=auth_headers(customer),
        )

        assert response.status_code == 403
