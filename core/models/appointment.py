"""Appointment aggregate and request models."""

from datetime import datetime, timedelta
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from core.models.line_item import ServiceLineItem
from utils.timezone import now_utc, to_utc

# Requests stamped "now" arrive slightly in the past
_PRESENT_TOLERANCE = timedelta(minutes=1)


class AppointmentStatus(str, Enum):
    """Known appointment statuses. Updates may also set free-form values."""

    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"
    COMPLETED = "Completed"


def _not_blank(value: str | None, message: str) -> str | None:
    if value is not None and not value.strip():
        raise ValueError(message)
    return value


class AppointmentCreate(BaseModel):
    """Data required to book an appointment."""

    user_id: str = Field(..., max_length=255)
    service_ids: list[UUID] = Field(..., min_length=1)
    date_time: datetime
    guests: int = Field(0, ge=0)
    notes: str | None = Field(None, max_length=2000)

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    @field_validator("user_id")
    @classmethod
    def user_id_not_blank(cls, value: str) -> str:
        return _not_blank(value, "User ID is mandatory")

    @field_validator("date_time")
    @classmethod
    def date_time_in_future(cls, value: datetime) -> datetime:
        """Normalize to UTC and require a future instant."""
        value = to_utc(value)
        if value <= now_utc():
            raise ValueError("Appointment date and time must be in the future")
        return value


class AppointmentUpdate(BaseModel):
    """
    Data accepted when updating an appointment.

    The service set is always replaced. `date_time` and `guests` keep their
    current values when omitted; `notes` is written as given. When `version`
    is supplied it must match the stored version.
    """

    service_ids: list[UUID] = Field(..., min_length=1)
    date_time: datetime | None = None
    guests: int | None = Field(None, ge=0)
    notes: str | None = Field(None, max_length=2000)
    status: str = Field(..., max_length=50)
    version: int | None = Field(None, ge=0)

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    @field_validator("status")
    @classmethod
    def status_not_blank(cls, value: str) -> str:
        return _not_blank(value, "Status must not be blank").strip()

    @field_validator("date_time")
    @classmethod
    def date_time_not_past(cls, value: datetime | None) -> datetime | None:
        if value is None:
            return None
        value = to_utc(value)
        if value < now_utc() - _PRESENT_TOLERANCE:
            raise ValueError("Appointment date and time must be in the future or present")
        return value


class Appointment(BaseModel):
    """
    Appointment together with its exclusively-owned line items.

    Total cost is computed from the line items and cannot be set directly.
    """

    id: UUID
    user_id: str
    services: list[ServiceLineItem] = Field(default_factory=list)
    date_time: datetime
    guests: int
    notes: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime
    version: int = Field(0, ge=0)

    model_config = {"from_attributes": True, "frozen": True}

    @model_validator(mode="after")
    def check_ownership(self) -> "Appointment":
        """Every line item must point back at this appointment, once."""
        seen = set()
        for item in self.services:
            if item.appointment_id != self.id:
                raise ValueError(
                    f"Line item {item.id} belongs to appointment {item.appointment_id}, not {self.id}"
                )
            if item.id in seen:
                raise ValueError(f"Line item {item.id} appears more than once")
            seen.add(item.id)
        return self

    @computed_field
    @property
    def total_cost_cents(self) -> int:
        """Sum of line item prices in cents."""
        return sum(item.price_cents for item in self.services)

    @property
    def total_cost_dollars(self) -> float:
        """Total cost in dollars for display."""
        return self.total_cost_cents / 100

    @property
    def total_duration_minutes(self) -> int:
        """Minutes the appointment occupies."""
        return sum(item.duration_minutes for item in self.services)
