"""
Global exception handling for the application.
Every error leaves the API as the standard ``{success, message, errors}`` envelope.
"""

from typing import Any, Dict, List, Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from users_api.domain.errors import DuplicateKeyError, StoreError

logger = structlog.get_logger(__name__)

INVALID_DATA = "Invalid data"
INVALID_ID = "ID must be a positive integer"
USER_NOT_FOUND = "User not found"
EMAIL_CONFLICT = "Email already registered"
INTERNAL_ERROR = "Internal server error"
ROUTE_NOT_FOUND = "Route not found"
HIDDEN_DETAIL = "Something went wrong"


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        errors: Optional[List[str]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.errors = errors or []
        super().__init__(self.message)


class ValidationException(AppError):
    """Client sent unusable input."""
    def __init__(self, message: str = INVALID_DATA, errors: Optional[List[str]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, errors)


class EntityNotFoundException(AppError):
    """Resource not found error."""
    def __init__(self, message: str = USER_NOT_FOUND):
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class ConflictException(AppError):
    """Write would break a uniqueness rule."""
    def __init__(self, message: str = EMAIL_CONFLICT):
        super().__init__(message, status.HTTP_409_CONFLICT)


def envelope(success: bool, message: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": success, "message": message}
    body.update({key: value for key, value in extra.items() if value is not None})
    return body


def _show_detail(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return settings is None or settings.is_development


def _internal_error(request: Request, exc: Exception) -> JSONResponse:
    detail = str(exc) if _show_detail(request) else HIDDEN_DETAIL
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=envelope(False, INTERNAL_ERROR, error=detail),
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log("Request rejected", path=request.url.path, status_code=exc.status_code, reason=exc.message, errors=exc.errors or None)
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope(False, exc.message, errors=exc.errors or None),
    )


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    if isinstance(exc, DuplicateKeyError):
        logger.warning("Duplicate key", path=request.url.path, field=exc.field, error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=envelope(False, EMAIL_CONFLICT),
        )
    logger.error("Store fault", path=request.url.path, error=str(exc), exc_info=exc)
    return _internal_error(request, exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        errors.append(f"{location}: {error.get('msg')}" if location else error.get("msg", INVALID_DATA))
    logger.warning("Malformed request", path=request.url.path, errors=errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=envelope(False, INVALID_DATA, errors=errors),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        logger.warning("Route not found", method=request.method, path=request.url.path)
        return JSONResponse(
            status_code=exc.status_code,
            content=envelope(False, ROUTE_NOT_FOUND, path=request.url.path),
        )
    logger.warning("HTTP error", path=request.url.path, status_code=exc.status_code, detail=exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope(False, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""
    logger.error("Unhandled error", path=request.url.path, error=str(exc), exc_info=exc)
    return _internal_error(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
