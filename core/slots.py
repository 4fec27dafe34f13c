"""
Booked slot calculation.

Slots are 30 minutes long and anchored to each appointment's own start time,
not to a fixed :00/:30 grid. An appointment starting at 10:07 occupies 10:07,
10:37, ... for as long as a full slot still fits before it ends.
"""

import logging
from datetime import date, timedelta
from typing import Iterable

from core.models import Appointment
from utils.timezone import to_local

logger = logging.getLogger(__name__)

SLOT_MINUTES = 30
SLOT_FORMAT = "%H:%M"


def appointment_slots(appointment: Appointment, tz_name: str = "UTC") -> list[str]:
    """
    Slot-start labels occupied by a single appointment.

    A slot starting at `s` is occupied when `s <= end - 30min`. A zero-duration
    appointment therefore occupies nothing. Slots step on UTC instants;
    only the labels are rendered in local time.
    """
    step = timedelta(minutes=SLOT_MINUTES)
    start = appointment.date_time
    end = start + timedelta(minutes=appointment.total_duration_minutes)
    last_start = end - step

    labels = []
    slot = start
    while slot <= last_start:
        labels.append(to_local(slot, tz_name).strftime(SLOT_FORMAT))
        slot += step
    return labels


def occupied_slots(
    appointments: Iterable[Appointment],
    day: date,
    tz_name: str = "UTC"
) -> list[str]:
    """
    Sorted, de-duplicated slot labels occupied on `day`.

    Args:
        appointments: Appointments scheduled on the day
        day: Calendar day in the business timezone
        tz_name: IANA timezone used for labels and the day boundary

    Returns:
        "HH:MM" labels sorted ascending
    """
    booked: set[str] = set()

    for appointment in appointments:
        local_start = to_local(appointment.date_time, tz_name)
        if local_start.date() != day:
            logger.debug(
                f"Skipping appointment {appointment.id} starting {local_start.isoformat()}, not on {day}"
            )
            continue

        slots = appointment_slots(appointment, tz_name)
        logger.debug(
            f"Appointment {appointment.id}: start {local_start.time()}, "
            f"{appointment.total_duration_minutes} min, slots {slots}"
        )
        booked.update(slots)

    return sorted(booked)
