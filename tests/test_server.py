"""Tests for the call service and its HTTP API."""

import pytest
import requests
from fastapi.testclient import TestClient
from twilio.base.exceptions import TwilioException

from flowguide.config import CallSettings
from flowguide.server import app, get_call_service
from flowguide.services.calls import (
    MISSING_CREDENTIALS_MESSAGE,
    CallConfigurationError,
    CallService,
    CallServiceError,
)


CONFIGURED = CallSettings(
    account_sid="AC123",
    auth_token="token",
    from_number="+15550000000",
)


class FakeCall:
    sid = "CA-fake-sid"


class FakeCalls:
    def __init__(self, error=None):
        self.error = error
        self.requests = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error:
            raise self.error
        return FakeCall()


class FakeClient:
    def __init__(self, error=None):
        self.calls = FakeCalls(error)


def service_with(client, settings=CONFIGURED):
    return CallService(settings, client_factory=lambda sid, token: client)


@pytest.fixture
def http():
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestCallService:
    def test_place_call_uses_settings(self):
        client = FakeClient()
        sid = service_with(client).place_call("+15551234567")

        assert sid == "CA-fake-sid"
        assert client.calls.requests == [{
            "to": "+15551234567",
            "from_": "+15550000000",
            "url": "http://demo.twilio.com/docs/voice.xml",
        }]

    def test_missing_credentials(self):
        service = service_with(FakeClient(), CallSettings(account_sid=None, auth_token=None, from_number=None))

        with pytest.raises(CallConfigurationError):
            service.place_call("+15551234567")

    def test_provider_error_is_wrapped(self):
        service = service_with(FakeClient(error=TwilioException("invalid number")))

        with pytest.raises(CallServiceError, match="invalid number"):
            service.place_call("+1")

    def test_transport_error_is_wrapped(self):
        error = requests.exceptions.ConnectionError("dns down")
        service = service_with(FakeClient(error=error))

        with pytest.raises(CallServiceError, match="dns down"):
            service.place_call("+15551234567")


class TestCallEndpoint:
    """POST /call and GET /."""

    def test_root_describes_service(self, http):
        response = http.get("/")

        assert response.status_code == 200
        assert response.json() == {"message": "Twilio call service (example). POST /call"}

    def test_missing_to_returns_400(self, http):
        app.dependency_overrides[get_call_service] = lambda: service_with(FakeClient())

        response = http.post("/call", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing `to` phone number"}

    def test_missing_credentials_returns_500(self, http):
        unconfigured = CallSettings(account_sid=None, auth_token=None, from_number=None)
        app.dependency_overrides[get_call_service] = lambda: service_with(FakeClient(), unconfigured)

        response = http.post("/call", json={"to": "+15551234567"})

        assert response.status_code == 500
        assert response.json() == {"error": MISSING_CREDENTIALS_MESSAGE}

    def test_successful_call(self, http):
        app.dependency_overrides[get_call_service] = lambda: service_with(FakeClient())

        response = http.post("/call", json={"to": "+15551234567"})

        assert response.status_code == 200
        assert response.json() == {"message": "Call initiated", "sid": "CA-fake-sid"}

    def test_provider_failure_returns_500_with_details(self, http):
        client = FakeClient(error=TwilioException("rejected"))
        app.dependency_overrides[get_call_service] = lambda: service_with(client)

        response = http.post("/call", json={"to": "+15551234567"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create call", "details": "rejected"}

    def test_unreachable_provider_returns_500_with_details(self, http):
        client = FakeClient(error=requests.exceptions.ConnectionError("dns down"))
        app.dependency_overrides[get_call_service] = lambda: service_with(client)

        response = http.post("/call", json={"to": "+15551234567"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create call", "details": "dns down"}

    @pytest.mark.parametrize("body", ["+15551234567", ["+15551234567"], None])
    def test_non_object_body_returns_400(self, http, body):
        app.dependency_overrides[get_call_service] = lambda: service_with(FakeClient())

        response = http.post("/call", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing `to` phone number"}
