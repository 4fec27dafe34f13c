"""Typed exceptions for booking failures.

Every failure that reaches a caller is one of these. Lower-layer errors
(network, database) are wrapped with ``raise ... from e`` so the root cause
stays on ``__cause__``.
"""

from uuid import UUID


class BookingError(Exception):
    """Base class for all booking engine errors."""


class NotFoundError(BookingError):
    """Requested appointment does not exist."""


class ConcurrencyConflict(BookingError):
    """
    Another writer updated the appointment between load and save.

    The caller should reload the appointment and retry.
    """

    def __init__(self, appointment_id: UUID):
        self.appointment_id = appointment_id
        super().__init__(
            f"Appointment {appointment_id} has been modified by another user. "
            "Please retrieve the latest version and try again."
        )


class CatalogueLookupFailed(BookingError):
    """A requested service could not be resolved in the catalogue."""

    def __init__(self, service_id: UUID | str, reason: str | None = None):
        self.service_id = service_id
        self.reason = reason
        message = f"Service with ID {service_id} could not be resolved in the catalogue"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ServiceInactive(BookingError):
    """A requested service exists but is not currently bookable."""

    def __init__(self, service_id: UUID | str, name: str):
        self.service_id = service_id
        self.name = name
        super().__init__(f"Service '{name}' ({service_id}) is currently inactive.")


class CatalogueUnavailable(BookingError):
    """The catalogue itself is unreachable or erroring. Retry later."""


class CreationFailed(BookingError):
    """Appointment could not be created."""


class UpdateFailed(BookingError):
    """Appointment could not be updated."""


class RetrievalFailed(BookingError):
    """Appointments could not be read."""


class ValidationFailed(BookingError):
    """Input violated a domain rule."""


class UnexpectedError(BookingError):
    """Failure that fits no other category."""
