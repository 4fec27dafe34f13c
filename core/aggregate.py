"""
Pure construction and mutation of the appointment aggregate.

No I/O happens here. Every function returns a new Appointment; callers never
observe an aggregate whose line items and total cost disagree.
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID, uuid4

from core.exceptions import ValidationFailed
from core.models import (
    Appointment,
    AppointmentStatus,
    AppointmentUpdate,
    ServiceCatalogueRecord,
    ServiceLineItem,
)
from utils.timezone import now_utc, to_utc


def build_line_items(
    appointment_id: UUID,
    services: Sequence[ServiceCatalogueRecord]
) -> list[ServiceLineItem]:
    """Snapshot each catalogue record into a fresh line item owned by the appointment."""
    if not services:
        raise ValidationFailed("At least one service must be booked")

    return [
        ServiceLineItem(
            id=uuid4(),
            appointment_id=appointment_id,
            service_catalogue_id=record.id,
            name=record.name,
            description=record.description,
            price_cents=record.price_cents,
            duration_minutes=record.duration_in_minutes,
        )
        for record in services
    ]


def assemble(
    user_id: str,
    date_time: datetime,
    notes: str | None,
    guests: int,
    services: Sequence[ServiceCatalogueRecord],
    status: AppointmentStatus | str = AppointmentStatus.PENDING,
) -> Appointment:
    """
    Build a new appointment from resolved catalogue records.

    Args:
        user_id: Customer identifier
        date_time: Requested start (timezone-aware)
        notes: Free-text notes
        guests: Guest count
        services: Resolved, validated catalogue records in display order
        status: Initial status

    Returns:
        Unsaved appointment at version 0

    Raises:
        ValidationFailed: If no services are given
    """
    appointment_id = uuid4()
    now = now_utc()

    return Appointment(
        id=appointment_id,
        user_id=user_id,
        services=build_line_items(appointment_id, services),
        date_time=to_utc(date_time),
        guests=guests,
        notes=notes,
        status=status.value if isinstance(status, AppointmentStatus) else status,
        created_at=now,
        updated_at=now,
        version=0,
    )


def replace_services(
    appointment: Appointment,
    services: Sequence[ServiceCatalogueRecord]
) -> Appointment:
    """
    Discard all current line items and install a new set.

    The previous items are not carried over, even when the same catalogue
    service is booked again: each gets a new line item with a fresh snapshot.
    """
    return appointment.model_copy(
        update={
            "services": build_line_items(appointment.id, services),
            "updated_at": now_utc(),
        }
    )


def apply_changes(appointment: Appointment, data: AppointmentUpdate) -> Appointment:
    """Apply scalar field changes from an update request and refresh updated_at."""
    updates = {
        "notes": data.notes,
        "status": data.status,
        "updated_at": now_utc(),
    }
    if data.date_time is not None:
        updates["date_time"] = to_utc(data.date_time)
    if data.guests is not None:
        updates["guests"] = data.guests

    return appointment.model_copy(update=updates)
