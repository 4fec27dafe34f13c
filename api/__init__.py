"""API modules for HTTP interface."""

from api.base import (
    ErrorResponse,
    ErrorTitles,
    error_response,
)
