"""Error Hierarchy — typed, categorized exceptions for all service failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) carry the offending field/parameter when one exists
    - to_response() produces the REST error envelope: {"error": {...}, "details": [...]?}
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with OpportunityServiceError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - details is a list of {field, message} dicts so query and body validation share one shape
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    opportunity_id: str | None = None
    user_id: str | None = None
    details: list[dict[str, Any]] | None = None


class OpportunityServiceError(Exception):
    """Base exception for all service errors."""

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
        response: dict[str, Any] = {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }
        if self.context.details:
            response["details"] = self.context.details
        return response


# ─── Client Errors (400-level) ──────────────────────────────────

class InvalidQueryParameterError(OpportunityServiceError):
    """A query-string parameter could not be parsed or is not allowed."""
    def __init__(
        self, parameter: str, message: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        if ctx.details is None:
            ctx.details = [{"field": parameter, "message": message}]
        super().__init__(
            f"Invalid query parameter '{parameter}': {message}",
            "INVALID_QUERY_PARAMETER", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, ctx, 400,
        )
        self.parameter = parameter


class UnauthenticatedError(OpportunityServiceError):
    """No usable credential was presented, or it names no identity."""
    def __init__(
        self, message: str = "Authentication required",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class InvalidCredentialError(OpportunityServiceError):
    """Credential failed signature or structural verification."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid token", "INVALID_CREDENTIAL", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class CredentialExpiredError(OpportunityServiceError):
    """Credential was valid but its expiry has passed."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Token expired, please login again", "CREDENTIAL_EXPIRED",
            ErrorCategory.AUTHENTICATION, ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(OpportunityServiceError):
    """Authenticated identity does not own the target record."""
    def __init__(self, action: str, context: ErrorContext | None = None):
        super().__init__(
            f"You do not have permission to {action} this opportunity",
            "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )
        self.action = action


class ResourceNotFoundError(OpportunityServiceError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(OpportunityServiceError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class ConfigurationError(OpportunityServiceError):
    """Server is missing configuration required to serve the request."""
    def __init__(self, setting: str, context: ErrorContext | None = None):
        super().__init__(
            "Server configuration error", "CONFIGURATION_ERROR",
            ErrorCategory.CONFIGURATION, ErrorSeverity.CRITICAL, context, 500,
        )
        self.setting = setting
