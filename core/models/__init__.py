"""Core domain models."""

from core.models.catalogue import ServiceCatalogueRecord
from core.models.line_item import ServiceLineItem
from core.models.appointment import (
    Appointment,
    AppointmentCreate,
    AppointmentUpdate,
    AppointmentStatus,
)

__all__ = [
    # Catalogue
    "ServiceCatalogueRecord",
    # LineItem
    "ServiceLineItem",
    # Appointment
    "Appointment", "AppointmentCreate", "AppointmentUpdate", "AppointmentStatus",
]
