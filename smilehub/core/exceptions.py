"""Domain exceptions and their HTTP rendering.

Services raise these; the request layer turns them into
``{"error": ..., "details": ...}`` JSON bodies with the matching status.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from smilehub.core.logging import get_logger

logger = get_logger(__name__)


class SmileHubError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(SmileHubError):
    """Malformed or out-of-range input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class ImageIndexError(ValidationError):
    default_message = "Invalid image index"


class LastImageError(ValidationError):
    default_message = "Cannot delete the last remaining image"


class InvalidPasswordError(ValidationError):
    default_message = "Current password is incorrect"


class AuthenticationError(SmileHubError):
    """Missing credentials or credential mismatch."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class InvalidTokenError(SmileHubError):
    """Bearer token has a bad signature, is malformed or expired."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid or expired token"


class NotFoundError(SmileHubError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(SmileHubError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class StorageError(SmileHubError):
    """The database rejected or failed a statement."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Database error"


def _validation_message(exc: RequestValidationError) -> str:
    """Pick a short message for a request validation failure."""
    for error in exc.errors():
        loc = tuple(error.get("loc", ()))
        if loc[:2] == ("path", "patient_id"):
            return "Invalid patient ID"
        if loc[:2] == ("path", "index"):
            return "Invalid image index"
    return "Invalid request"


def register_exception_handlers(app: FastAPI, debug: bool = False) -> None:
    """Install the JSON error handlers on an application."""

    @app.exception_handler(SmileHubError)
    async def smilehub_error_handler(request: Request, exc: SmileHubError):
        if exc.status_code >= 500:
            logger.error(
                "request_failed",
                method=request.method,
                error=exc.message,
                exc_info=exc,
            )
        headers = None
        if isinstance(exc, AuthenticationError):
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": _validation_message(exc),
                "details": jsonable_encoder(exc.errors(), exclude={"input", "ctx"}),
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            "unhandled_exception",
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        body: dict[str, Any] = {"error": "Internal server error"}
        if debug:
            body["details"] = str(exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)
