"""Error response format shared by every endpoint."""

from datetime import datetime

from pydantic import BaseModel, Field

from utils.timezone import now_utc


class ErrorResponse(BaseModel):
    """
    Body returned for every failed request.

    Clients branch on `status` and `error`; `message` is for humans.
    """

    timestamp: datetime = Field(..., description="Response timestamp (UTC)")
    status: int = Field(..., description="HTTP status code")
    error: str = Field(..., description="Short error title")
    message: str = Field(..., description="Human-readable explanation")
    path: str = Field(..., description="Request path that failed")


def error_response(status: int, title: str, message: str, path: str) -> ErrorResponse:
    """Create an error response."""
    return ErrorResponse(
        timestamp=now_utc(),
        status=status,
        error=title,
        message=message,
        path=path,
    )


class ErrorTitles:
    """Stable error titles. Clients may match on these."""

    CREATION_ERROR = "Booking Creation Error"
    UPDATE_ERROR = "Appointment Update Error"
    RETRIEVAL_ERROR = "Booking Retrieval Error"
    CONCURRENCY_CONFLICT = "Concurrency Conflict"
    NOT_FOUND = "Not Found"
    VALIDATION_ERROR = "Validation Error"
    INVALID_ARGUMENT = "Invalid Argument"
    SERVICE_UNAVAILABLE = "Service Unavailable"
    INTERNAL_ERROR = "Internal Server Error"
