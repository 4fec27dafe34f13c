"""
Tests for CatalogueClient.

The catalogue is mocked at the HTTP layer; tests check how each kind of
response is classified.
"""

from uuid import uuid4

import pytest
import requests
import responses

from clients.catalogue_client import CatalogueClient
from core.exceptions import CatalogueLookupFailed, CatalogueUnavailable

BASE_URL = "http://catalogue.test"


def _payload(service_id, **overrides):
    payload = {
        "id": str(service_id),
        "name": "Haircut",
        "description": "Wash and cut",
        "price": 70.0,
        "durationInMinutes": 30,
        "active": True,
    }
    payload.update(overrides)
    return payload


class TestCatalogueClientInit:
    """Fail-fast on invalid config."""

    def test_rejects_empty_base_url(self):
        with pytest.raises(ValueError, match="base_url"):
            CatalogueClient("")

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValueError, match="timeout"):
            CatalogueClient(BASE_URL, timeout=0)

    def test_strips_trailing_slash(self):
        assert CatalogueClient(BASE_URL + "/").base_url == BASE_URL


class TestGetService:
    """Response classification."""

    @responses.activate
    def test_returns_record(self):
        service_id = uuid4()
        responses.add(
            responses.GET,
            f"{BASE_URL}/services/{service_id}",
            json=_payload(service_id),
            status=200,
        )

        record = CatalogueClient(BASE_URL).get_service(service_id)

        assert record.id == service_id
        assert record.name == "Haircut"
        assert record.price_cents == 7000
        assert record.duration_in_minutes == 30
        assert responses.calls[0].request.headers["Accept"] == "application/json"

    @responses.activate
    def test_inactive_record_returned_as_is(self):
        """Activity is judged by the caller, not the client."""
        service_id = uuid4()
        responses.add(
            responses.GET,
            f"{BASE_URL}/services/{service_id}",
            json=_payload(service_id, active=False),
        )

        assert CatalogueClient(BASE_URL).get_service(service_id).active is False

    @responses.activate
    def test_404_is_lookup_failure(self):
        service_id = uuid4()
        responses.add(responses.GET, f"{BASE_URL}/services/{service_id}", status=404)

        with pytest.raises(CatalogueLookupFailed, match="HTTP 404") as exc_info:
            CatalogueClient(BASE_URL).get_service(service_id)

        assert exc_info.value.service_id == service_id

    @responses.activate
    def test_500_is_unavailable(self):
        service_id = uuid4()
        responses.add(responses.GET, f"{BASE_URL}/services/{service_id}", status=503)

        with pytest.raises(CatalogueUnavailable):
            CatalogueClient(BASE_URL).get_service(service_id)

    @responses.activate
    def test_timeout_is_unavailable(self):
        service_id = uuid4()
        responses.add(
            responses.GET,
            f"{BASE_URL}/services/{service_id}",
            body=requests.exceptions.ReadTimeout("read timed out"),
        )

        with pytest.raises(CatalogueUnavailable, match="timed out") as exc_info:
            CatalogueClient(BASE_URL).get_service(service_id)

        assert isinstance(exc_info.value.__cause__, requests.exceptions.Timeout)

    @responses.activate
    def test_connection_error_is_unavailable(self):
        service_id = uuid4()
        responses.add(
            responses.GET,
            f"{BASE_URL}/services/{service_id}",
            body=requests.exceptions.ConnectionError("refused"),
        )

        with pytest.raises(CatalogueUnavailable):
            CatalogueClient(BASE_URL).get_service(service_id)

    @responses.activate
    def test_unreadable_body_is_unavailable(self):
        service_id = uuid4()
        responses.add(
            responses.GET,
            f"{BASE_URL}/services/{service_id}",
            body="<html>gateway</html>",
            status=200,
        )

        with pytest.raises(CatalogueUnavailable, match="invalid response"):
            CatalogueClient(BASE_URL).get_service(service_id)

    @responses.activate
    def test_incomplete_record_is_unavailable(self):
        service_id = uuid4()
        responses.add(
            responses.GET,
            f"{BASE_URL}/services/{service_id}",
            json={"id": str(service_id), "name": "Haircut"},
        )

        with pytest.raises(CatalogueUnavailable):
            CatalogueClient(BASE_URL).get_service(service_id)
