"""
Error handling for the FastAPI application.
Domain exceptions map to fixed HTTP statuses; anything else is logged
and returned as a 500.
"""

import logging
import traceback
from typing import Any, Dict

from fastapi import status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from timetrack.config import settings
from timetrack.domain.models.base import (
    AuthorizationError,
    BusinessRuleViolation,
    ConflictError,
    DomainException,
    InvalidIntervalError,
    NotFoundError,
    StorageUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Checked in order; subclasses first.
DOMAIN_ERROR_STATUS = (
    (ConflictError, status.HTTP_409_CONFLICT, "Conflict"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "Not Found"),
    (InvalidIntervalError, status.HTTP_422_UNPROCESSABLE_ENTITY, "Invalid Interval"),
    (AuthorizationError, status.HTTP_403_FORBIDDEN, "Forbidden"),
    (ValidationError, status.HTTP_400_BAD_REQUEST, "Bad Request"),
    (BusinessRuleViolation, status.HTTP_422_UNPROCESSABLE_ENTITY, "Business Rule Violation"),
    (StorageUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE, "Service Unavailable"),
)


def format_domain_error(exc: DomainException) -> Dict[str, Any]:
    """Body for a domain exception."""
    for exc_type, status_code, error in DOMAIN_ERROR_STATUS:
        if isinstance(exc, exc_type):
            break
    else:
        status_code, error = status.HTTP_400_BAD_REQUEST, "Bad Request"

    body = {
        "error": error,
        "message": exc.message,
        "code": exc.code,
        "status_code": status_code,
    }
    field = getattr(exc, "field", None)
    if field:
        body["details"] = {"field": field}
    return body


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    body = format_domain_error(exc)
    if body["status_code"] >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.code}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {body['status_code']} {exc.code}")
    return JSONResponse(status_code=body["status_code"], content=body)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle all uncaught exceptions and format error responses.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return await self.handle_exception(request, exc)

    async def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        if isinstance(exc, DomainException):
            return await domain_exception_handler(request, exc)

        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                "request_path": request.url.path,
                "request_method": request.method,
                "client_host": request.client.host if request.client else None
            }
        )

        error_response: Dict[str, Any] = {
            "error": "Internal Server Error",
            "message": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
        }

        if settings.debug:
            error_response["debug"] = {
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc().split("\n")
            }

        return JSONResponse(status_code=error_response["status_code"], content=error_response)
