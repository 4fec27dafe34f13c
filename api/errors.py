"""Global exception handlers for FastAPI."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from api.base import error_response, ErrorTitles
from core.exceptions import (
    BookingError,
    CatalogueUnavailable,
    ConcurrencyConflict,
    CreationFailed,
    NotFoundError,
    RetrievalFailed,
    UpdateFailed,
    ValidationFailed,
)

logger = logging.getLogger(__name__)

# Most specific first; the first isinstance match wins.
_BOOKING_ERRORS: list[tuple[type[BookingError], int, str]] = [
    (NotFoundError, 404, ErrorTitles.NOT_FOUND),
    (ConcurrencyConflict, 409, ErrorTitles.CONCURRENCY_CONFLICT),
    (ValidationFailed, 400, ErrorTitles.VALIDATION_ERROR),
    (CatalogueUnavailable, 503, ErrorTitles.SERVICE_UNAVAILABLE),
    (CreationFailed, 500, ErrorTitles.CREATION_ERROR),
    (UpdateFailed, 500, ErrorTitles.UPDATE_ERROR),
    (RetrievalFailed, 500, ErrorTitles.RETRIEVAL_ERROR),
]


def _json(status: int, title: str, message: str, request: Request) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content=error_response(status, title, message, request.url.path).model_dump(mode="json"),
    )


def classify(exc: BookingError) -> tuple[int, str]:
    """HTTP status and title for a booking error."""
    for error_type, status, title in _BOOKING_ERRORS:
        if isinstance(exc, error_type):
            return status, title
    return 500, ErrorTitles.INTERNAL_ERROR


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the app."""

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError):
        status, title = classify(exc)
        return _json(status, title, str(exc), request)

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return _json(400, ErrorTitles.INVALID_ARGUMENT, str(exc), request)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
            for error in exc.errors()
        )
        return _json(
            400,
            ErrorTitles.VALIDATION_ERROR,
            f"Validation failed for request: {details}",
            request,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        title = ErrorTitles.NOT_FOUND if exc.status_code == 404 else str(exc.detail)
        return _json(exc.status_code, title, str(exc.detail), request)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
        return _json(
            500,
            ErrorTitles.INTERNAL_ERROR,
            "An unexpected error occurred",
            request,
        )
