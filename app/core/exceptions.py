"""
Error taxonomy and exception classes shared by every app.

Expected failures travel as ServiceResult error codes (see core.services);
the codes and their HTTP status mapping are declared here once so REST views,
the realtime consumer and tests agree on them.

Error Codes:
    NOT_FOUND           404  Profile, group, request or object absent
    FORBIDDEN           403  Actor may not perform the mutation/read
    ALREADY_EXISTS      409  Duplicate account, request, edge or membership
    INVALID_CREDENTIAL  401  Login rejected
    WEAK_CREDENTIAL     400  Password policy violation
    EMPTY_MESSAGE       400  Message without text and image
    INVALID_OPERATION   400  Structurally impossible request
    SELF_REQUEST        400  Friend request to oneself
    TRANSIENT           503  Storage/transport hiccup, safe to retry
    CONFLICT            409  Lost race on a concurrent write
    VALIDATION_ERROR    400  Malformed input

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError
    ├── NotFoundError
    ├── PermissionDeniedError
    ├── ConflictError
    └── TransientError

Usage:
    from core.exceptions import ErrorCode, TransientError

    raise TransientError(
        "Channel layer unavailable",
        details={"topic": "friends:..."},
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from rest_framework import status

if TYPE_CHECKING:
    from typing import Any

    from rest_framework.response import Response

logger = logging.getLogger(__name__)


class ErrorCode:
    """Machine-readable error codes returned to API and websocket clients."""

    NOT_FOUND: Final[str] = "NOT_FOUND"
    FORBIDDEN: Final[str] = "FORBIDDEN"
    ALREADY_EXISTS: Final[str] = "ALREADY_EXISTS"
    INVALID_CREDENTIAL: Final[str] = "INVALID_CREDENTIAL"
    WEAK_CREDENTIAL: Final[str] = "WEAK_CREDENTIAL"
    EMPTY_MESSAGE: Final[str] = "EMPTY_MESSAGE"
    INVALID_OPERATION: Final[str] = "INVALID_OPERATION"
    SELF_REQUEST: Final[str] = "SELF_REQUEST"
    TRANSIENT: Final[str] = "TRANSIENT"
    CONFLICT: Final[str] = "CONFLICT"
    VALIDATION_ERROR: Final[str] = "VALIDATION_ERROR"


ERROR_STATUS_CODES: Final[dict[str, int]] = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_CREDENTIAL: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.WEAK_CREDENTIAL: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EMPTY_MESSAGE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_OPERATION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.SELF_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorCode.TRANSIENT: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
}

# Only these codes may be retried by a caller.
RETRYABLE_ERROR_CODES: Final[frozenset[str]] = frozenset({ErrorCode.TRANSIENT})


def status_for_error_code(error_code: str | None) -> int:
    """Return the HTTP status for an error code (400 when unknown)."""
    return ERROR_STATUS_CODES.get(error_code or "", status.HTTP_400_BAD_REQUEST)


class BaseApplicationError(Exception):
    """
    Base exception for application errors that must be raised, not returned.

    Attributes:
        message: Human-readable error description
        error_code: One of ErrorCode
        details: Additional context (ids, field errors)
    """

    default_error_code: str = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    @property
    def status_code(self) -> int:
        """HTTP status matching the error code."""
        return status_for_error_code(self.error_code)

    @property
    def retryable(self) -> bool:
        """Whether a caller may safely retry the operation."""
        return self.error_code in RETRYABLE_ERROR_CODES

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to the API error payload.

        Example:
            {"error": "Group not found", "error_code": "NOT_FOUND"}
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        if self.retryable:
            result["retryable"] = True
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """Input failed validation (malformed path, oversized upload, ...)."""

    default_error_code: str = ErrorCode.VALIDATION_ERROR


class NotFoundError(BaseApplicationError):
    """A referenced resource does not exist."""

    default_error_code: str = ErrorCode.NOT_FOUND


class PermissionDeniedError(BaseApplicationError):
    """The actor is not allowed to perform the operation."""

    default_error_code: str = ErrorCode.FORBIDDEN


class ConflictError(BaseApplicationError):
    """
    The operation lost a race or collides with existing state.

    Example:
        raise ConflictError(
            "User is already a member",
            error_code=ErrorCode.ALREADY_EXISTS,
        )
    """

    default_error_code: str = ErrorCode.CONFLICT


class TransientError(BaseApplicationError):
    """
    A dependency (channel layer, storage, database) failed temporarily.

    The operation did not apply and may be retried with backoff.
    """

    default_error_code: str = ErrorCode.TRANSIENT


def api_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    DRF exception handler rendering application errors.

    BaseApplicationError subclasses become `{"error", "error_code", ...}`
    with their mapped status; everything else falls through to DRF's
    default handler.
    """
    if isinstance(exc, BaseApplicationError):
        from rest_framework.response import Response

        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.warning(f"Request failed with {exc!s}")
        return Response(exc.to_dict(), status=exc.status_code)

    # Imported here: rest_framework.views pulls in the authentication
    # classes, which need the app registry.
    from rest_framework.views import exception_handler

    return exception_handler(exc, context)
