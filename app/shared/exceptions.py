"""Custom exception hierarchy and handlers."""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""

    status_code = 400
    code = "app_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationException(AppException):
    """Raised when required input is missing or malformed."""

    status_code = 400
    code = "validation_error"


class AuthRequiredException(AppException):
    """Raised when the caller identity could not be resolved."""

    status_code = 401
    code = "auth_required"


class ForbiddenException(AppException):
    """Raised when user has no rights for operation."""

    status_code = 403
    code = "forbidden"


class NotFoundException(AppException):
    """Raised when entity is not found."""

    status_code = 404
    code = "not_found"


class ConflictException(AppException):
    """Raised when entity conflicts with current state."""

    status_code = 409
    code = "conflict"


class SlotUnavailableException(AppException):
    """Raised when a requested slot is taken, inactive or does not exist."""

    status_code = 409
    code = "slot_unavailable"


class TransportException(AppException):
    """Raised when a collaborator call fails on the network or database."""

    status_code = 503
    code = "transport_error"


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


async def app_exception_handler(_: Request, exc: AppException) -> JSONResponse:
    """Handle custom domain exceptions."""
    return _error_response(exc.status_code, exc.code, exc.message)


async def http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions in unified shape."""
    return _error_response(exc.status_code, "http_error", str(exc.detail))


async def database_exception_handler(_: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle database failures that escaped the service layer."""
    logger.exception("Database error: %s", exc)
    return _error_response(TransportException.status_code, TransportException.code, "Database error")


async def unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("Unhandled error: %s", exc)
    return _error_response(500, "internal_error", "Internal server error")


def register_exception_handlers(app) -> None:
    """Register global exception handlers."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
