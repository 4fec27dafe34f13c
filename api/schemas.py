"""Wire shapes for the appointments API (camelCase JSON)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from core.models import Appointment, ServiceLineItem


class _CamelModel(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class ServiceLineItemResponse(_CamelModel):
    id: UUID
    service_catalogue_id: UUID
    name: str
    description: str | None
    price: float
    duration_in_minutes: int

    @classmethod
    def from_line_item(cls, item: ServiceLineItem) -> "ServiceLineItemResponse":
        return cls(
            id=item.id,
            service_catalogue_id=item.service_catalogue_id,
            name=item.name,
            description=item.description,
            price=item.price_dollars,
            duration_in_minutes=item.duration_minutes,
        )


class AppointmentResponse(_CamelModel):
    id: UUID
    user_id: str
    services: list[ServiceLineItemResponse]
    date_time: datetime
    guests: int
    notes: str | None
    status: str
    created_at: datetime
    updated_at: datetime
    total_cost: float
    version: int

    @classmethod
    def from_appointment(cls, appointment: Appointment) -> "AppointmentResponse":
        return cls(
            id=appointment.id,
            user_id=appointment.user_id,
            services=[ServiceLineItemResponse.from_line_item(s) for s in appointment.services],
            date_time=appointment.date_time,
            guests=appointment.guests,
            notes=appointment.notes,
            status=appointment.status,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
            total_cost=appointment.total_cost_dollars,
            version=appointment.version,
        )


class SlotsResponse(_CamelModel):
    booked_slots: list[str]
