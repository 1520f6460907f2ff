"""
Application exception types and their FastAPI handlers.

Services raise these exceptions; ``register_exception_handlers`` turns
them into JSON bodies of the form::

    {"type": "EntityNotFoundException", "message": "...", "status": 404}

Request validation failures (missing query parameters, unparsable
bodies) are reported the same way with status 400.
"""

import logging
from typing import Any, Iterable, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
    ):
        self.message = message
        self.status_code = status_code or status.HTTP_500_INTERNAL_SERVER_ERROR
        self.details = details
        super().__init__(message)


class EntityNotFoundException(AppException):
    """Raised when no row with the requested id exists."""

    def __init__(self, entity_name: str, entity_id: Any):
        self.entity_name = entity_name
        self.entity_id = entity_id
        super().__init__(
            f"{entity_name} with id {entity_id} not found",
            status.HTTP_404_NOT_FOUND,
        )


class BadRequestException(AppException):
    def __init__(self, message: str = "Bad request.", details: Optional[Any] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class AuthenticationException(AppException):
    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class ForbiddenException(AppException):
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class ConflictException(AppException):
    def __init__(self, message: str = "Resource already exists."):
        super().__init__(message, status.HTTP_409_CONFLICT)


def exception_body(exc: AppException) -> dict:
    body = {
        "type": exc.__class__.__name__,
        "message": exc.message,
        "status": exc.status_code,
    }
    if exc.details is not None:
        body["details"] = exc.details
    return body


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render any ``AppException`` as structured JSON.

    Client errors are logged at WARNING, anything else at ERROR.
    """
    if exc.status_code < 500:
        logger.warning("%s on %s %s: %s", exc.__class__.__name__, request.method, request.url.path, exc.message)
    else:
        logger.error("%s on %s %s: %s", exc.__class__.__name__, request.method, request.url.path, exc.message)
    headers = None
    if isinstance(exc, AuthenticationException):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=exception_body(exc), headers=headers)


def bad_request_from_errors(errors: Iterable[dict]) -> BadRequestException:
    """Build a ``BadRequestException`` from pydantic/FastAPI error dicts."""
    details = [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg")}
        for error in errors
    ]
    message = "; ".join(f"{'.'.join(item['loc'])}: {item['msg']}" for item in details)
    return BadRequestException(message or "Invalid request", details=details)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation errors as a 400 ``BadRequestException``."""
    return await app_exception_handler(request, bad_request_from_errors(exc.errors()))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)


__all__ = [
    "AppException",
    "EntityNotFoundException",
    "BadRequestException",
    "AuthenticationException",
    "ForbiddenException",
    "ConflictException",
    "bad_request_from_errors",
    "exception_body",
    "register_exception_handlers",
]
