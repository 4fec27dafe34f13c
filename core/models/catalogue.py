"""Read-only view of a service as published by the external catalogue."""

from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID

from pydantic import BaseModel, Field


class ServiceCatalogueRecord(BaseModel):
    """
    Canonical catalogue record for a bookable service.

    Prices arrive in dollars as floats on the wire; `price_cents` is the
    integer form used everywhere inside the booking engine.
    """

    id: UUID
    name: str
    description: str | None = None
    price: float = Field(..., ge=0)
    duration_in_minutes: int = Field(0, ge=0, alias="durationInMinutes")
    active: bool

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @property
    def price_cents(self) -> int:
        """Price in cents, rounded half-up."""
        cents = (Decimal(str(self.price)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return int(cents)
