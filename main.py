"""
Application entry point.

    uvicorn main:create_default_app --factory

Reads .env, configures logging, and wires the booking service from
environment configuration and the Vault-held database URL.
"""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI

from api.appointments import create_appointments_router
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from clients.catalogue_client import CatalogueClient
from clients.postgres_client import PostgresClient
from clients.vault_client import get_database_url
from core.config import BookingConfig, load_config
from core.repository import AppointmentRepository
from core.services.booking_service import BookingService
from core.services.catalogue_resolver import CatalogueResolver


def configure_logging(level: str | None = None) -> None:
    """Install a single stream handler on the root logger."""
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )

    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)


def build_booking_service(config: BookingConfig, postgres: PostgresClient) -> BookingService:
    """Wire the booking service from its collaborators."""
    catalogue = CatalogueClient(
        config.catalogue_base_url,
        timeout=config.catalogue_timeout_seconds,
    )
    return BookingService(
        repository=AppointmentRepository(postgres),
        resolver=CatalogueResolver(catalogue, max_workers=config.catalogue_max_workers),
        config=config,
    )


def create_app(booking: BookingService) -> FastAPI:
    """FastAPI app with middleware, error handlers and the appointments routes."""
    app = FastAPI(title="Appointment Booking", version="1.0.0")
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    app.include_router(create_appointments_router(booking), prefix="/api/v1")

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


def create_default_app() -> FastAPI:
    """Build the production app from the environment."""
    load_dotenv()
    configure_logging(os.getenv("LOG_LEVEL"))

    config = load_config()
    postgres = PostgresClient(get_database_url())
    return create_app(build_booking_service(config, postgres))

