"""
Service catalogue HTTP client.

The catalogue is an external service exposing `GET /services/{id}`. A 4xx
means the service does not exist; a 5xx, timeout or connection failure means
the catalogue itself is unavailable. These two outcomes are reported with
different exceptions because callers message and retry them differently.
"""

import logging
from uuid import UUID

import requests
from pydantic import ValidationError

from core.exceptions import CatalogueLookupFailed, CatalogueUnavailable
from core.models import ServiceCatalogueRecord

logger = logging.getLogger(__name__)


class CatalogueClient:
    """Fetch canonical service records from the catalogue service."""

    def __init__(self, base_url: str, timeout: float = 5.0):
        """
        Initialize with catalogue location.

        Args:
            base_url: Catalogue base URL, e.g. "http://catalogue:8080"
            timeout: Per-request timeout in seconds

        Raises:
            ValueError: If base_url is empty or timeout is not positive
        """
        if not base_url:
            raise ValueError("base_url is required")
        if timeout <= 0:
            raise ValueError("timeout must be positive")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def get_service(self, service_id: UUID) -> ServiceCatalogueRecord:
        """
        Fetch one service record.

        Args:
            service_id: Catalogue identifier

        Returns:
            Parsed catalogue record (active or not - callers decide)

        Raises:
            CatalogueLookupFailed: Catalogue answered 4xx
            CatalogueUnavailable: Catalogue unreachable, timed out, answered
                5xx, or returned an unreadable body
        """
        url = f"{self.base_url}/services/{service_id}"
        logger.info(f"Fetching details for service ID: {service_id}")

        try:
            response = requests.get(
                url,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"Catalogue request for service {service_id} timed out: {e}")
            raise CatalogueUnavailable("Service catalogue timed out.") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Catalogue connection failed for service {service_id}: {e}")
            raise CatalogueUnavailable("Service catalogue is currently unavailable.") from e

        if 400 <= response.status_code < 500:
            raise CatalogueLookupFailed(
                service_id, f"not found in catalogue (HTTP {response.status_code})"
            )

        if response.status_code >= 500:
            logger.error(
                f"Catalogue returned HTTP {response.status_code} for service {service_id}"
            )
            raise CatalogueUnavailable("Service catalogue is currently unavailable.")

        try:
            return ServiceCatalogueRecord.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Catalogue returned invalid payload for service {service_id}: {e}")
            raise CatalogueUnavailable("Service catalogue returned an invalid response.") from e
