"""Tests for the support contact form and health check."""

URL = "/api/v1/support/contact"


def support_form(**overrides) -> dict:
    form = {
        "name": "Asha Rao",
        "email": "asha.rao@gmail.com",
        "phone": "98765 43210",
        "issue_type": "Delivery",
        "subject": "Parcel not delivered",
        "message": "Booking BK123456ABCD shows completed but nothing arrived.",
    }
    form.update(overrides)
    return form


class TestSupportContact:
    def test_sends_email_to_support_inbox(self, client, transport):
        response = client.post(URL, json=support_form())

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert len(transport.sent) == 1
        sent = transport.sent[0]
        assert sent.subject == "[Support - delivery] Parcel not delivered"
        assert "+919876543210" in sent.html

    def test_no_authentication_needed(self, client):
        response = client.post(URL, json=support_form(phone=None))

        assert response.status_code == 200

    def test_unknown_issue_type(self, client, transport):
        response = client.post(URL, json=support_form(issue_type="lottery"))

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"
        assert transport.sent == []

    def test_invalid_phone(self, client):
        response = client.post(URL, json=support_form(phone="12345"))

        assert response.status_code == 400

    def test_invalid_email(self, client):
        response = client.post(URL, json=support_form(email="not-an-email"))

        assert response.status_code == 400

    def test_delivery_failure_is_503(self, client, transport):
        transport.error = ConnectionError("relay unreachable")

        response = client.post(URL, json=support_form())

        assert response.status_code == 503
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "EXTERNAL_SERVICE_ERROR"


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
