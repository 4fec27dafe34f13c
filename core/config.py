"""Booking engine configuration."""

import os

from pydantic import BaseModel, Field, field_validator

from core.models import AppointmentStatus
from utils.timezone import get_zone


class BookingConfig(BaseModel):
    """
    Booking engine configuration.

    Timeouts are in seconds. The business timezone decides what "a day" means
    for slot queries and how slot labels are rendered.
    """

    catalogue_base_url: str = Field(
        ...,
        min_length=1,
        description="Base URL of the service catalogue",
    )
    catalogue_timeout_seconds: float = Field(
        default=5.0,
        description="Per-request timeout for catalogue lookups",
        gt=0,
        le=60,
    )
    catalogue_max_workers: int = Field(
        default=8,
        description="Upper bound on concurrent catalogue lookups per request",
        ge=1,
        le=64,
    )
    business_timezone: str = Field(
        default="UTC",
        description="IANA timezone for slot labels and day boundaries",
    )
    initial_status: AppointmentStatus = Field(
        default=AppointmentStatus.PENDING,
        description="Status given to newly created appointments",
    )

    @field_validator("business_timezone")
    @classmethod
    def known_timezone(cls, value: str) -> str:
        get_zone(value)
        return value


_ENV_FIELDS = {
    "CATALOGUE_BASE_URL": "catalogue_base_url",
    "CATALOGUE_TIMEOUT_SECONDS": "catalogue_timeout_seconds",
    "CATALOGUE_MAX_WORKERS": "catalogue_max_workers",
    "BUSINESS_TIMEZONE": "business_timezone",
    "INITIAL_APPOINTMENT_STATUS": "initial_status",
}


def load_config() -> BookingConfig:
    """
    Build configuration from environment variables.

    Unset variables fall back to field defaults. CATALOGUE_BASE_URL is
    required; pydantic raises ValidationError when it is missing.
    """
    values = {
        field: os.environ[env_name]
        for env_name, field in _ENV_FIELDS.items()
        if os.getenv(env_name)
    }
    return BookingConfig(**values)
