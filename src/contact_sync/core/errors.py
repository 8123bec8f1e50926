"""Application error types.

AppError carries a category (ErrorType), a machine-readable code and a free-form
details payload. StorageError is the one error kind storage adapters raise for
backend failures, whatever the backend.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorType(str, Enum):
    """Error categories used throughout the application."""

    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    RATE_LIMIT = "RATE_LIMIT"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    DATABASE_ERROR = "DATABASE_ERROR"


class ErrorCode(str, Enum):
    """Machine-readable error codes callers may branch on."""

    DATABASE_ERROR = "DATABASE_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    VALIDATION_ERROR = "VALIDATION_ERROR"


ERROR_STATUS_CODES: dict[ErrorType, int] = {
    ErrorType.BAD_REQUEST: 400,
    ErrorType.UNAUTHORIZED: 401,
    ErrorType.FORBIDDEN: 403,
    ErrorType.NOT_FOUND: 404,
    ErrorType.CONFLICT: 409,
    ErrorType.RATE_LIMIT: 429,
    ErrorType.INTERNAL_ERROR: 500,
    ErrorType.SERVICE_UNAVAILABLE: 503,
    ErrorType.DATABASE_ERROR: 500,
}


class AppError(Exception):
    """Application error with a category, code and diagnostic details.

    Args:
        message: Human-readable message.
        error_type: Error category. Defaults to INTERNAL_ERROR.
        code: Machine-readable code.
        details: Diagnostic payload (text or structured).
    """

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.INTERNAL_ERROR,
        *,
        code: ErrorCode | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.code = code
        self.details = details

    @property
    def status(self) -> int:
        return ERROR_STATUS_CODES.get(self.error_type, 500)

    def to_dict(self) -> dict[str, Any]:
        """Structured representation for logs and API responses."""
        return {
            "message": self.message,
            "type": self.error_type.value,
            "code": self.code.value if self.code else None,
            "details": self.details,
        }


class StorageError(AppError):
    """Backend failure re-signaled at the storage adapter boundary.

    ``details`` holds the original backend error message.
    """

    def __init__(self, message: str, *, details: str | None = None) -> None:
        super().__init__(
            message,
            ErrorType.DATABASE_ERROR,
            code=ErrorCode.DATABASE_ERROR,
            details=details,
        )
