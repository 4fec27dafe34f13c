"""
Concurrent resolution of requested services against the catalogue.

Each identifier is looked up on its own worker thread. The result is all or
nothing: a single missing or inactive service fails the whole request.
"""

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Sequence
from uuid import UUID

from clients.catalogue_client import CatalogueClient
from core.exceptions import (
    CatalogueLookupFailed,
    CatalogueUnavailable,
    ServiceInactive,
    ValidationFailed,
)
from core.models import ServiceCatalogueRecord

logger = logging.getLogger(__name__)


class CatalogueResolver:
    """Resolve service identifiers into validated, name-ordered catalogue records."""

    def __init__(self, catalogue: CatalogueClient, max_workers: int = 8):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.catalogue = catalogue
        self.max_workers = max_workers

    def resolve(self, service_ids: Sequence[UUID]) -> list[ServiceCatalogueRecord]:
        """
        Fetch and validate every requested service.

        Args:
            service_ids: Requested identifiers, at least one

        Returns:
            One active record per identifier, sorted by name

        Raises:
            ValidationFailed: No identifiers given
            CatalogueLookupFailed: A service is missing, or identifiers
                collapse onto fewer distinct records than requested
            ServiceInactive: A service exists but is inactive
            CatalogueUnavailable: The catalogue could not answer
        """
        if not service_ids:
            raise ValidationFailed("At least one service ID must be provided")

        records = self._fetch_all(service_ids)
        self._check_complete(service_ids, records)
        return sorted(records, key=lambda r: (r.name, str(r.id)))

    def _fetch_all(self, service_ids: Sequence[UUID]) -> list[ServiceCatalogueRecord]:
        """
        Fan out one lookup per identifier and join them all.

        Not-found and inactive results raise immediately and cancel lookups
        that have not started yet. Unavailability is held until every lookup
        has finished, so a definitive failure elsewhere still wins.
        """
        records: list[ServiceCatalogueRecord] = []
        unavailable: CatalogueUnavailable | None = None

        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(service_ids)),
            thread_name_prefix="catalogue",
        )
        try:
            futures = {
                executor.submit(self.catalogue.get_service, service_id): service_id
                for service_id in service_ids
            }
            for future in as_completed(futures):
                service_id = futures[future]
                try:
                    record = future.result()
                except CatalogueUnavailable as e:
                    if unavailable is None:
                        unavailable = e
                    continue

                if not record.active:
                    raise ServiceInactive(service_id, record.name)
                records.append(record)
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

        if unavailable is not None:
            raise unavailable

        return records

    def _check_complete(
        self,
        service_ids: Sequence[UUID],
        records: list[ServiceCatalogueRecord]
    ) -> None:
        """Every requested identifier must map to its own distinct record."""
        distinct = {record.id for record in records}
        if len(distinct) == len(service_ids):
            return

        duplicates = [sid for sid, count in Counter(service_ids).items() if count > 1]
        missing = [sid for sid in service_ids if sid not in distinct]
        culprit = (duplicates or missing or list(service_ids))[0]

        raise CatalogueLookupFailed(
            culprit,
            f"expected {len(service_ids)} distinct services, catalogue returned {len(distinct)}",
        )
