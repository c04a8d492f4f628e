"""Error Hierarchy — typed, categorized exceptions for all Worksite failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - A missing row and a row owned by another tenant raise the SAME ResourceNotFoundError
    - StorageError messages never carry driver or SQL detail
    - LogWriteFailure is only ever logged, never returned to a caller

Design Decisions:
    - Single hierarchy with WorksiteError base: FastAPI global handler catches all
    - ErrorContext as dataclass: the raise time travels with the error, so the
      response timestamp is when it failed rather than when it was rendered
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """When the error was raised; echoed in the response envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class WorksiteError(Exception):
    """Base exception for all Worksite errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


# ─── Access Errors (401/403) ────────────────────────────────────

class UnauthenticatedError(WorksiteError):
    """Identity could not be resolved from the request."""
    def __init__(
        self, message: str = "Authentication required",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(WorksiteError):
    """Caller is authenticated but lacks the required role."""
    def __init__(
        self, message: str = "Insufficient privileges",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


# ─── Domain Errors (400-level) ──────────────────────────────────

class PayloadValidationError(WorksiteError):
    """Create/update payload is missing required fields or holds malformed values."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["details"] = [
            {"field": self.field, "message": self.message},
        ]
        return response


class ResourceNotFoundError(WorksiteError):
    """Requested resource does not exist or is not visible to the caller."""
    def __init__(
        self, resource_type: str, resource_id: int | str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class DuplicateAccountError(WorksiteError):
    """Registration attempted with a username or email already in use."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Username or email already registered",
            "DUPLICATE_ACCOUNT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageError(WorksiteError):
    """Persistence operation failed."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(
            "A storage error occurred. Please try again later.",
            "STORAGE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class LogWriteFailure(WorksiteError):
    """Activity log entry could not be persisted. Internal only."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Activity log write failed: {reason}",
            "LOG_WRITE_FAILURE", ErrorCategory.INTERNAL,
            ErrorSeverity.WARNING, context, 500,
        )
        self.reason = reason
