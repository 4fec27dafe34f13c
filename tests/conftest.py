"""Shared test fixtures for the booking test suite.

The booking service is exercised against in-memory doubles for its two
external collaborators: the catalogue (HTTP) and the appointment repository
(PostgreSQL). The real clients have their own tests with HTTP and driver
mocks.
"""

import threading
import time
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest

from core.config import BookingConfig
from core.exceptions import CatalogueLookupFailed, CatalogueUnavailable
from core.models import Appointment, ServiceCatalogueRecord, ServiceLineItem
from core.repository import StaleVersionError
from core.services.booking_service import BookingService
from core.services.catalogue_resolver import CatalogueResolver
from utils.timezone import now_utc


# =============================================================================
# CATALOGUE CONSTANTS
# =============================================================================

HAIRCUT_ID = UUID("00000000-0000-0000-0000-0000000000a1")
BEARD_TRIM_ID = UUID("00000000-0000-0000-0000-0000000000a2")
MANICURE_ID = UUID("00000000-0000-0000-0000-0000000000a3")
FACIAL_ID = UUID("00000000-0000-0000-0000-0000000000a4")


# =============================================================================
# DOUBLES
# =============================================================================


class FakeCatalogue:
    """In-memory stand-in for CatalogueClient."""

    def __init__(self, records=()):
        self.records: dict[UUID, ServiceCatalogueRecord] = {r.id: r for r in records}
        self.unavailable: set[UUID] = set()
        self.delays: dict[UUID, float] = {}
        self.calls: list[UUID] = []

    def get_service(self, service_id: UUID) -> ServiceCatalogueRecord:
        self.calls.append(service_id)
        delay = self.delays.get(service_id)
        if delay:
            time.sleep(delay)
        if service_id in self.unavailable:
            raise CatalogueUnavailable("Service catalogue is currently unavailable.")
        record = self.records.get(service_id)
        if record is None:
            raise CatalogueLookupFailed(service_id, "not found in catalogue (HTTP 404)")
        return record


class InMemoryAppointmentRepository:
    """
    In-memory stand-in for AppointmentRepository.

    Honors the same contract: stored copies are isolated from callers, and
    update() is conditional on the caller's version.
    """

    def __init__(self):
        self._rows: dict[UUID, Appointment] = {}
        self._lock = threading.Lock()
        self.failures: dict[str, Exception] = {}

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.failures:
            raise self.failures[operation]

    def insert(self, appointment: Appointment) -> Appointment:
        self._maybe_fail("insert")
        with self._lock:
            self._rows[appointment.id] = appointment.model_copy(deep=True)
        return appointment

    def update(self, appointment: Appointment) -> Appointment:
        self._maybe_fail("update")
        with self._lock:
            stored = self._rows.get(appointment.id)
            if stored is None or stored.version != appointment.version:
                raise StaleVersionError(appointment.id, appointment.version)
            saved = appointment.model_copy(update={"version": stored.version + 1}, deep=True)
            self._rows[appointment.id] = saved
        return saved.model_copy(deep=True)

    def get_by_id(self, appointment_id: UUID) -> Appointment | None:
        self._maybe_fail("get_by_id")
        with self._lock:
            stored = self._rows.get(appointment_id)
        return stored.model_copy(deep=True) if stored else None

    def list_all(self) -> list[Appointment]:
        self._maybe_fail("list_all")
        with self._lock:
            rows = list(self._rows.values())
        return [a.model_copy(deep=True) for a in sorted(rows, key=lambda a: a.date_time)]

    def list_between(self, start: datetime, end: datetime) -> list[Appointment]:
        self._maybe_fail("list_between")
        return [a for a in self.list_all() if start <= a.date_time < end]

    def exists(self, appointment_id: UUID) -> bool:
        self._maybe_fail("exists")
        with self._lock:
            return appointment_id in self._rows

    def delete(self, appointment_id: UUID) -> bool:
        self._maybe_fail("delete")
        with self._lock:
            return self._rows.pop(appointment_id, None) is not None


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def make_record():
    """Build a catalogue record."""

    def _make(
        service_id: UUID | None = None,
        name: str = "Service",
        price: float = 10.0,
        duration: int = 30,
        active: bool = True,
        description: str | None = None,
    ) -> ServiceCatalogueRecord:
        return ServiceCatalogueRecord(
            id=service_id or uuid4(),
            name=name,
            description=description,
            price=price,
            duration_in_minutes=duration,
            active=active,
        )

    return _make


@pytest.fixture
def make_appointment():
    """Build a stored-looking appointment with line items of the given durations."""

    def _make(
        start: datetime,
        durations: list[int] = (30,),
        prices_cents: list[int] | None = None,
        version: int = 0,
    ) -> Appointment:
        appointment_id = uuid4()
        prices = prices_cents or [1000] * len(durations)
        now = now_utc()
        return Appointment(
            id=appointment_id,
            user_id="user-1",
            services=[
                ServiceLineItem(
                    id=uuid4(),
                    appointment_id=appointment_id,
                    service_catalogue_id=uuid4(),
                    name=f"Service {i}",
                    description=None,
                    price_cents=price,
                    duration_minutes=duration,
                )
                for i, (duration, price) in enumerate(zip(durations, prices))
            ],
            date_time=start,
            guests=0,
            notes=None,
            status="Pending",
            created_at=now,
            updated_at=now,
            version=version,
        )

    return _make


# =============================================================================
# CATALOGUE FIXTURES
# =============================================================================


@pytest.fixture
def catalogue_records(make_record) -> dict[str, ServiceCatalogueRecord]:
    """A small catalogue: three active services and one inactive."""
    return {
        "haircut": make_record(HAIRCUT_ID, "Haircut", 70.0, 30, description="Wash and cut"),
        "beard_trim": make_record(BEARD_TRIM_ID, "Beard Trim", 15.0, 15, active=False),
        "manicure": make_record(MANICURE_ID, "Manicure", 25.5, 40),
        "facial": make_record(FACIAL_ID, "Facial", 45.0, 45),
    }


@pytest.fixture
def catalogue(catalogue_records) -> FakeCatalogue:
    return FakeCatalogue(catalogue_records.values())


@pytest.fixture
def resolver(catalogue) -> CatalogueResolver:
    return CatalogueResolver(catalogue, max_workers=4)


# =============================================================================
# BOOKING FIXTURES
# =============================================================================


@pytest.fixture
def repository() -> InMemoryAppointmentRepository:
    return InMemoryAppointmentRepository()


@pytest.fixture
def config() -> BookingConfig:
    return BookingConfig(catalogue_base_url="http://catalogue.test")


@pytest.fixture
def booking_service(repository, resolver, config) -> BookingService:
    return BookingService(repository=repository, resolver=resolver, config=config)


@pytest.fixture
def tomorrow_at_ten() -> datetime:
    """Tomorrow 10:00 UTC - always in the future."""
    tomorrow = (now_utc() + timedelta(days=1)).date()
    return datetime(tomorrow.year, tomorrow.month, tomorrow.day, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def service_ids(catalogue_records) -> dict[str, UUID]:
    """Catalogue ids by short name."""
    return {key: record.id for key, record in catalogue_records.items()}
