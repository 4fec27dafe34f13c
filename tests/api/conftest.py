"""API test fixtures - TestClient over the real app wired to in-memory doubles."""

import pytest
from starlette.testclient import TestClient

from main import create_app


@pytest.fixture
def app(booking_service):
    return create_app(booking_service)


@pytest.fixture
def client(app):
    """Unhandled errors come back as 500 responses instead of raising."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def booking_payload(service_ids, tomorrow_at_ten):
    """Factory for camelCase creation bodies."""

    def _make(*names, **overrides):
        payload = {
            "userId": "user-1",
            "serviceIds": [str(service_ids[n]) for n in names or ("haircut",)],
            "dateTime": tomorrow_at_ten.isoformat(),
            "guests": 0,
            "notes": None,
        }
        payload.update(overrides)
        return payload

    return _make
