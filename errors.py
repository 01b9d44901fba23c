"""
errors.py
---------
Domain exceptions and the handlers that turn them into JSON responses.
Every error leaves the API as ``{"error": "<message>"}``.
"""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from logger import get_logger

logger = get_logger(__name__)


class ExpenseTrackerError(Exception):
    """Base class for errors reported to API callers."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ExpenseTrackerError):
    """Malformed or missing input."""


class ConflictError(ExpenseTrackerError):
    """Duplicate username."""


class AuthError(ExpenseTrackerError):
    """Bad credentials (400) or a missing/invalid session (401)."""


class NotFoundError(ExpenseTrackerError):
    status_code = status.HTTP_404_NOT_FOUND


class InfrastructureError(ExpenseTrackerError):
    """The database could not be reached or rejected the statement."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


async def _tracker_error_handler(request: Request, exc: ExpenseTrackerError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _request_validation_handler(request: Request, exc: RequestValidationError):
    # Report only the first problem, e.g. "amount: Input should be a valid number"
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if field:
        message = f"{field}: {message}"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"error": message}
    )


async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ExpenseTrackerError, _tracker_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
