"""
Appointment persistence.

An appointment and its line items are written and read as one unit. Writes
run inside a single transaction; reads materialize the whole aggregate with
one joined query. Updates are conditional on the version the caller loaded.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List
from uuid import UUID

from clients.postgres_client import PostgresClient
from core.models import Appointment, ServiceLineItem

logger = logging.getLogger(__name__)


class StaleVersionError(Exception):
    """Conditional update matched no row: the stored version has moved on."""

    def __init__(self, appointment_id: UUID, expected_version: int):
        self.appointment_id = appointment_id
        self.expected_version = expected_version
        super().__init__(
            f"Appointment {appointment_id} is no longer at version {expected_version}"
        )


_SELECT_AGGREGATE = """
    SELECT
        a.id, a.user_id, a.date_time, a.guests, a.notes, a.status,
        a.created_at, a.updated_at, a.version,
        s.id AS line_item_id,
        s.service_catalogue_id,
        s.name AS service_name,
        s.description AS service_description,
        s.price_cents,
        s.duration_minutes
    FROM appointments a
    LEFT JOIN appointment_services s ON s.appointment_id = a.id
"""

_INSERT_LINE_ITEM = """
    INSERT INTO appointment_services (
        id, appointment_id, service_catalogue_id, position,
        name, description, price_cents, duration_minutes
    ) VALUES (
        %s, %s, %s, %s,
        %s, %s, %s, %s
    )
"""


class AppointmentRepository:
    """PostgreSQL storage for appointment aggregates."""

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def insert(self, appointment: Appointment) -> Appointment:
        """
        Store a new appointment with all its line items.

        Args:
            appointment: Unsaved aggregate

        Returns:
            The stored aggregate
        """
        with self.postgres.transaction() as cur:
            cur.execute(
                """
                INSERT INTO appointments (
                    id, user_id, date_time, guests, notes, status,
                    total_cost_cents, created_at, updated_at, version
                ) VALUES (
                    %s, %s, %s, %s, %s, %s,
                    %s, %s, %s, %s
                )
                """,
                (
                    appointment.id, appointment.user_id, appointment.date_time,
                    appointment.guests, appointment.notes, appointment.status,
                    appointment.total_cost_cents, appointment.created_at,
                    appointment.updated_at, appointment.version
                )
            )
            self._insert_line_items(cur, appointment)

        logger.debug(f"Inserted appointment {appointment.id} with {len(appointment.services)} services")
        return appointment

    def update(self, appointment: Appointment) -> Appointment:
        """
        Write a modified aggregate if nobody else has since.

        The appointment row is updated only where the stored version equals
        `appointment.version`. On success the version is incremented and the
        line items are replaced wholesale, in the same transaction.

        Args:
            appointment: Aggregate carrying the version it was loaded at

        Returns:
            Stored aggregate with the new version

        Raises:
            StaleVersionError: Stored version differs (or the row is gone)
        """
        with self.postgres.transaction() as cur:
            cur.execute(
                """
                UPDATE appointments
                SET date_time = %s, guests = %s, notes = %s, status = %s,
                    total_cost_cents = %s, updated_at = %s,
                    version = version + 1
                WHERE id = %s AND version = %s
                RETURNING version
                """,
                (
                    appointment.date_time, appointment.guests, appointment.notes,
                    appointment.status, appointment.total_cost_cents,
                    appointment.updated_at, appointment.id, appointment.version
                )
            )
            row = cur.fetchone()
            if row is None:
                raise StaleVersionError(appointment.id, appointment.version)

            cur.execute(
                "DELETE FROM appointment_services WHERE appointment_id = %s",
                (appointment.id,)
            )
            self._insert_line_items(cur, appointment)

        return appointment.model_copy(update={"version": row["version"]})

    def get_by_id(self, appointment_id: UUID) -> Appointment | None:
        """
        Get appointment with its line items.

        Returns:
            Appointment if found, None otherwise.
        """
        rows = self.postgres.execute(
            _SELECT_AGGREGATE + "WHERE a.id = %s ORDER BY s.position ASC",
            (appointment_id,)
        )
        appointments = _rows_to_appointments(rows)
        return appointments[0] if appointments else None

    def list_all(self) -> list[Appointment]:
        """
        List every appointment with its line items.

        Returns:
            Appointments ordered by start time
        """
        rows = self.postgres.execute(
            _SELECT_AGGREGATE + "ORDER BY a.date_time ASC, a.id ASC, s.position ASC"
        )
        return _rows_to_appointments(rows)

    def list_between(self, start: datetime, end: datetime) -> list[Appointment]:
        """
        List appointments starting in [start, end).

        Args:
            start: Range start (inclusive)
            end: Range end (exclusive)
        """
        rows = self.postgres.execute(
            _SELECT_AGGREGATE
            + "WHERE a.date_time >= %s AND a.date_time < %s "
            + "ORDER BY a.date_time ASC, a.id ASC, s.position ASC",
            (start, end)
        )
        return _rows_to_appointments(rows)

    def exists(self, appointment_id: UUID) -> bool:
        """Whether an appointment with this id is stored."""
        found = self.postgres.execute_scalar(
            "SELECT EXISTS (SELECT 1 FROM appointments WHERE id = %s)",
            (appointment_id,)
        )
        return bool(found)

    def delete(self, appointment_id: UUID) -> bool:
        """
        Delete an appointment and its line items.

        Returns:
            True if deleted, False if not found
        """
        with self.postgres.transaction() as cur:
            cur.execute(
                "DELETE FROM appointment_services WHERE appointment_id = %s",
                (appointment_id,)
            )
            cur.execute(
                "DELETE FROM appointments WHERE id = %s RETURNING id",
                (appointment_id,)
            )
            deleted = cur.fetchone() is not None

        return deleted

    def _insert_line_items(self, cur, appointment: Appointment) -> None:
        cur.executemany(
            _INSERT_LINE_ITEM,
            [
                (
                    item.id, appointment.id, item.service_catalogue_id, position,
                    item.name, item.description, item.price_cents, item.duration_minutes
                )
                for position, item in enumerate(appointment.services)
            ]
        )


def _rows_to_appointments(rows: List[Dict[str, Any]]) -> list[Appointment]:
    """Fold joined appointment/line-item rows into aggregates, preserving row order."""
    grouped: Dict[Any, Dict[str, Any]] = {}

    for row in rows:
        appointment_id = row["id"]
        if appointment_id not in grouped:
            grouped[appointment_id] = {
                "id": appointment_id,
                "user_id": row["user_id"],
                "date_time": row["date_time"],
                "guests": row["guests"],
                "notes": row["notes"],
                "status": row["status"],
                "created_at": row["created_at"],
                "updated_at": row["updated_at"],
                "version": row["version"],
                "services": [],
            }

        if row["line_item_id"] is not None:
            grouped[appointment_id]["services"].append(
                ServiceLineItem(
                    id=row["line_item_id"],
                    appointment_id=appointment_id,
                    service_catalogue_id=row["service_catalogue_id"],
                    name=row["service_name"],
                    description=row["service_description"],
                    price_cents=row["price_cents"],
                    duration_minutes=row["duration_minutes"],
                )
            )

    return [Appointment.model_validate(data) for data in grouped.values()]
