"""
Booking service: the appointment lifecycle.

Create and update resolve the requested services against the live catalogue,
assemble the aggregate in memory and persist it as one unit. Updates use
optimistic concurrency: the version read at load time must still be current
when the write happens, otherwise the caller gets ConcurrencyConflict.

Failures are never retried. Each is logged once where it is wrapped into a
booking error and re-raised with the original as __cause__.
"""

import logging
from datetime import date
from uuid import UUID

from core.aggregate import apply_changes, assemble, replace_services
from core.config import BookingConfig
from core.exceptions import (
    CatalogueLookupFailed,
    ConcurrencyConflict,
    CreationFailed,
    NotFoundError,
    RetrievalFailed,
    ServiceInactive,
    UnexpectedError,
    UpdateFailed,
    ValidationFailed,
)
from core.models import Appointment, AppointmentCreate, AppointmentUpdate
from core.repository import AppointmentRepository, StaleVersionError
from core.services.catalogue_resolver import CatalogueResolver
from core.slots import occupied_slots
from utils.timezone import day_bounds

logger = logging.getLogger(__name__)

# Resolution outcomes that mean "this request cannot be booked as asked".
# CatalogueUnavailable is not listed and propagates unchanged.
_REJECTIONS = (CatalogueLookupFailed, ServiceInactive, ValidationFailed)


class BookingService:
    """Service for appointment booking operations."""

    def __init__(
        self,
        repository: AppointmentRepository,
        resolver: CatalogueResolver,
        config: BookingConfig,
    ):
        self.repository = repository
        self.resolver = resolver
        self.config = config

    def create(self, data: AppointmentCreate) -> Appointment:
        """
        Book a new appointment.

        Args:
            data: Appointment creation data

        Returns:
            Stored appointment at version 0

        Raises:
            CreationFailed: Services could not be resolved, or the write failed
            CatalogueUnavailable: The catalogue could not be reached
        """
        try:
            services = self.resolver.resolve(data.service_ids)
        except _REJECTIONS as e:
            logger.warning(f"Appointment creation rejected for user {data.user_id}: {e}")
            raise CreationFailed(str(e)) from e

        appointment = assemble(
            user_id=data.user_id,
            date_time=data.date_time,
            notes=data.notes,
            guests=data.guests,
            services=services,
            status=self.config.initial_status,
        )

        try:
            saved = self.repository.insert(appointment)
        except Exception as e:
            logger.error(
                f"Failed to create appointment for user {data.user_id}: {e}", exc_info=True
            )
            raise CreationFailed(
                "An unexpected error occurred during appointment creation."
            ) from e

        logger.info(f"Successfully created appointment {saved.id} for user {data.user_id}")
        return saved

    def update(self, appointment_id: UUID, data: AppointmentUpdate) -> Appointment:
        """
        Replace an appointment's services and scalar fields.

        Args:
            appointment_id: Appointment UUID
            data: New service set and fields

        Returns:
            Stored appointment with version incremented by one

        Raises:
            NotFoundError: Appointment does not exist
            ConcurrencyConflict: Appointment changed since it was loaded, or
                the supplied version is not the current one
            UpdateFailed: Services could not be resolved, or the write failed
            CatalogueUnavailable: The catalogue could not be reached
        """
        try:
            current = self.repository.get_by_id(appointment_id)
        except Exception as e:
            logger.error(f"Failed to load appointment {appointment_id} for update: {e}", exc_info=True)
            raise UpdateFailed("An unexpected error occurred during appointment update.") from e

        if current is None:
            raise NotFoundError(f"Appointment with ID {appointment_id} not found.")

        if data.version is not None and data.version != current.version:
            logger.warning(
                f"Update of appointment {appointment_id} sent version {data.version}, "
                f"stored version is {current.version}"
            )
            raise ConcurrencyConflict(appointment_id)

        try:
            services = self.resolver.resolve(data.service_ids)
        except _REJECTIONS as e:
            logger.warning(f"Update of appointment {appointment_id} rejected: {e}")
            raise UpdateFailed(str(e)) from e

        changed = apply_changes(replace_services(current, services), data)

        try:
            saved = self.repository.update(changed)
        except StaleVersionError as e:
            logger.warning(f"Concurrent modification of appointment {appointment_id}: {e}")
            raise ConcurrencyConflict(appointment_id) from e
        except Exception as e:
            logger.error(f"Failed to update appointment {appointment_id}: {e}", exc_info=True)
            raise UpdateFailed("An unexpected error occurred during appointment update.") from e

        logger.info(f"Successfully updated appointment {saved.id} to version {saved.version}")
        return saved

    def delete(self, appointment_id: UUID) -> None:
        """
        Delete an appointment and its line items.

        Raises:
            NotFoundError: Nothing to delete
            UnexpectedError: The delete failed
        """
        logger.info(f"Deleting appointment with ID: {appointment_id}")

        try:
            exists = self.repository.exists(appointment_id)
            deleted = exists and self.repository.delete(appointment_id)
        except Exception as e:
            logger.error(f"Failed to delete appointment {appointment_id}: {e}", exc_info=True)
            raise UnexpectedError(f"Could not delete appointment {appointment_id}.") from e

        if not deleted:
            raise NotFoundError(f"Cannot delete. Appointment with ID {appointment_id} not found.")

        logger.info(f"Successfully deleted appointment {appointment_id}")

    def get_by_id(self, appointment_id: UUID) -> Appointment:
        """
        Get appointment with its services.

        Raises:
            NotFoundError: Appointment does not exist
            RetrievalFailed: The read failed
        """
        logger.info(f"Fetching appointment by ID with services: {appointment_id}")

        try:
            appointment = self.repository.get_by_id(appointment_id)
        except Exception as e:
            logger.error(f"Failed to fetch appointment {appointment_id}: {e}", exc_info=True)
            raise RetrievalFailed(f"Error retrieving appointment {appointment_id}.") from e

        if appointment is None:
            raise NotFoundError(f"Appointment with ID {appointment_id} not found.")
        return appointment

    def list_all(self) -> list[Appointment]:
        """
        List all appointments with their services.

        Raises:
            RetrievalFailed: The read failed
        """
        logger.info("Fetching all appointments with their services")

        try:
            return self.repository.list_all()
        except Exception as e:
            logger.error(f"Failed to list appointments: {e}", exc_info=True)
            raise RetrievalFailed("Error retrieving appointments.") from e

    def booked_slots(self, day: date) -> list[str]:
        """
        Occupied 30-minute slot labels for a calendar day.

        Args:
            day: Day in the configured business timezone

        Returns:
            Sorted "HH:MM" labels

        Raises:
            RetrievalFailed: The read failed
        """
        tz_name = self.config.business_timezone
        start, end = day_bounds(day, tz_name)

        try:
            appointments = self.repository.list_between(start, end)
        except Exception as e:
            logger.error(f"Failed to retrieve booked slots for {day}: {e}", exc_info=True)
            raise RetrievalFailed(f"Error retrieving booked slots for date {day}.") from e

        logger.info(f"Found {len(appointments)} appointment(s) on {day}")
        slots = occupied_slots(appointments, day, tz_name)
        logger.info(f"Completed booked slot calculation for {day}: {len(slots)} booked slot(s)")
        return slots
