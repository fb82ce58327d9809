"""Error Hierarchy - typed, categorized exceptions for all Octopus failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Request errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope used by every handler
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with OctopusError base: one FastAPI handler catches all
    - CookieError never reaches a client: a bad cookie means "anonymous"
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


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
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    address: str | None = None
    debug_info: dict[str, Any] | None = None


class OctopusError(Exception):
    """Base exception for all Octopus errors."""

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


# ─── Request Errors (400-level) ─────────────────────────────────

class RequestDecodeError(OctopusError):
    """Request body could not be decoded."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "BAD_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class NotAuthenticatedError(OctopusError):
    """Request requires a logged-in user."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Error: Not Authenticated", "NOT_AUTHENTICATED",
            ErrorCategory.AUTHENTICATION, ErrorSeverity.WARNING, context, 401,
        )


class ResourceNotFoundError(OctopusError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class BusinessRuleError(OctopusError):
    """Well-formed request rejected by a business rule."""
    def __init__(
        self, message: str, code: str = "UNPROCESSABLE",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 422,
        )


class CookieError(OctopusError):
    """Cookie missing, tampered, legacy or stale."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_COOKIE", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.INFO, context, 401,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(OctopusError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class ChainQueryError(OctopusError):
    """Chain REST/RPC query failed."""
    def __init__(self, message: str, path: str, context: ErrorContext | None = None):
        super().__init__(
            f"Chain query {path} failed: {message}",
            "CHAIN_QUERY_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.path = path


class PushGatewayError(OctopusError):
    """Push notification gateway rejected or failed a request."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Push gateway error: {message}",
            "PUSH_GATEWAY_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )
