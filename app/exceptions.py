# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error leaves the API in the same envelope the client expects:
#   {"success": false, "error": "<message>", "code": "<CODE>"}
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Server error"


class EnzoLearnException(Exception):
    """
    Base exception for the EnzoLearn API.

    All custom exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: str = "ENZOLEARN_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.headers = headers

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "code": self.code,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Request Exceptions
# =============================================================================

class BadRequestError(EnzoLearnException):
    """Raised when required input is missing or malformed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="BAD_REQUEST",
            status_code=400,
            details=details,
        )


class NotFoundError(EnzoLearnException):
    """
    Raised when a row doesn't exist or belongs to another user.

    Both cases share one response so ownership is never revealed.
    """

    def __init__(self, resource: str):
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            status_code=404,
        )


class RateLimitExceededError(EnzoLearnException):
    """Raised when a client exceeds its request quota."""

    def __init__(self, retry_after: int):
        super().__init__(
            message="Too many requests, please try again later.",
            code="RATE_LIMITED",
            status_code=429,
            headers={"Retry-After": str(retry_after)},
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class AuthenticationError(EnzoLearnException):
    """Raised when a request cannot be authenticated."""

    def __init__(self, message: str = "Invalid token."):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidCredentialsError(AuthenticationError):
    """Raised on a failed login; never says which half was wrong."""

    def __init__(self):
        super().__init__("Invalid credentials")


# =============================================================================
# Backend Exceptions
# =============================================================================

class DatabaseError(EnzoLearnException):
    """Raised when a database write or read fails for a known operation."""

    def __init__(self, message: str, error: str | None = None):
        super().__init__(
            message=message,
            code="DATABASE_ERROR",
            status_code=500,
        )
        self.error = error


class StorageUploadError(EnzoLearnException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message="Error uploading audio file",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
        )
        self.error = error


class VendorError(EnzoLearnException):
    """
    Raised when an external AI or speech vendor call fails.

    The vendor's message is logged, not returned.
    """

    def __init__(self, vendor: str, error: str, message: str = GENERIC_ERROR_MESSAGE):
        super().__init__(
            message=message,
            code="VENDOR_ERROR",
            status_code=500,
        )
        self.vendor = vendor
        self.error = error


# =============================================================================
# Exception Handlers
# =============================================================================

async def enzolearn_exception_handler(
    request: Request,
    exc: EnzoLearnException
) -> JSONResponse:
    """Convert EnzoLearnException to the JSON envelope."""
    if exc.status_code >= 500:
        cause = getattr(exc, "error", None)
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}" + (f" ({cause})" if cause else ""))
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Wrap framework HTTP errors (404 route, 405 method) in the envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": str(exc.detail),
            "code": "HTTP_ERROR",
        },
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors.

    Malformed bodies are client errors, reported as 400 like the
    field-level checks in the routers.
    """
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request body",
            "code": "VALIDATION_ERROR",
            "details": {"errors": errors},
        }
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Log anything unexpected and answer with the generic message."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": GENERIC_ERROR_MESSAGE,
            "code": "INTERNAL_ERROR",
        }
    )


async def database_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle database failures that no service translated.

    The cause is logged; the client only sees the generic message.
    """
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": GENERIC_ERROR_MESSAGE,
            "code": "DATABASE_ERROR",
        }
    )
