# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the admin API.
# Every failure leaves the API as {"error": str, "code": str, "details"?: str}
# with a matching non-2xx status.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

# Backend diagnostics surfaced to clients are cut to this length
MAX_DIAGNOSTIC_LENGTH = 200


class OMRHubException(Exception):
    """
    Base exception for the OMR Hub admin API.

    All custom exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: str = "OMRHUB_ERROR",
        status_code: int = 500,
        details: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {
            "error": self.message,
            "code": self.code,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Access Exceptions
# =============================================================================

class UnauthorizedError(OMRHubException):
    """Raised when no valid session accompanies the request."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401,
        )


class ForbiddenError(OMRHubException):
    """Raised when the caller is authenticated but not an administrator."""

    def __init__(self, message: str = "Administrator access required"):
        super().__init__(
            message=message,
            code="FORBIDDEN",
            status_code=403,
        )


# =============================================================================
# Request Exceptions
# =============================================================================

class InvalidRequestError(OMRHubException):
    """Raised when a required field is missing or malformed."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            details=f"field: {field}" if field else None,
        )
        self.field = field


class ConflictingStateError(OMRHubException):
    """Raised when a mutation is refused because of related rows."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="CONFLICTING_STATE",
            status_code=400,
        )


class ResourceNotFoundError(OMRHubException):
    """Raised when an ID (or scoped ID) matches no row."""

    def __init__(self, resource: str, resource_id: str | None = None):
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            status_code=404,
            details=f"id: {resource_id}" if resource_id else None,
        )
        self.resource = resource
        self.resource_id = resource_id


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(OMRHubException):
    """Raised when uploaded content type is not in the allow-list."""

    def __init__(self, content_type: str | None, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {content_type or 'unknown'}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            details=f"allowed types: {', '.join(allowed)}",
        )
        self.allowed = allowed


class FileTooLargeError(OMRHubException):
    """Raised when uploaded file exceeds the byte ceiling."""

    def __init__(self, size_bytes: int, max_bytes: int):
        max_mb = max_bytes / (1024 * 1024)
        super().__init__(
            message=f"File size exceeds {max_mb:g}MB limit",
            code="FILE_TOO_LARGE",
            status_code=400,
            details=f"size: {size_bytes} bytes, max: {max_bytes} bytes",
        )


class EmptyFileError(OMRHubException):
    """Raised when an upload carries no bytes."""

    def __init__(self):
        super().__init__(
            message="File is empty",
            code="EMPTY_FILE",
            status_code=400,
        )


# =============================================================================
# Backend Exceptions
# =============================================================================

class BackendError(OMRHubException):
    """
    Raised when a database or storage call fails.

    The full error is logged where it is caught; clients only ever see the
    generic message plus a truncated diagnostic.
    """

    def __init__(self, message: str, error: Exception | str | None = None):
        diagnostic = str(error)[:MAX_DIAGNOSTIC_LENGTH] if error else None
        super().__init__(
            message=message,
            code="BACKEND_ERROR",
            status_code=500,
            details=diagnostic,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def omrhub_exception_handler(
    request: Request,
    exc: OMRHubException
) -> JSONResponse:
    """Convert OMRHubException to JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors.

    Reports the first offending field by name as a 400.
    """
    errors = exc.errors()
    field = None
    message = "Invalid request"
    if errors:
        first = errors[0]
        location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path", "form")]
        field = ".".join(location) or None
        if first.get("type") == "missing":
            message = f"{field} is required" if field else "Missing required field"
        else:
            message = f"Invalid value for {field}: {first.get('msg')}" if field else str(first.get("msg"))

    return JSONResponse(
        status_code=400,
        content=InvalidRequestError(message, field=field).to_dict()
    )
