"""Service line item domain model.

All prices are stored in cents (integer) to avoid floating point issues.
$10.00 = 1000 cents.
"""

from uuid import UUID

from pydantic import BaseModel, Field


class ServiceLineItem(BaseModel):
    """
    Snapshot of a catalogue service taken at booking time.

    Price and duration are copied from the catalogue when the line item is
    created and never re-fetched. Owned by exactly one appointment.
    """

    id: UUID
    appointment_id: UUID
    service_catalogue_id: UUID
    name: str
    description: str | None = None
    price_cents: int = Field(..., ge=0)
    duration_minutes: int = Field(0, ge=0)

    model_config = {"from_attributes": True, "frozen": True}

    @property
    def price_dollars(self) -> float:
        """Price in dollars for display."""
        return self.price_cents / 100
