"""Error Hierarchy: typed, categorized exceptions for all enumforge failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope
    - No driver messages leaked in user-facing messages

Design Decisions:
    - Single hierarchy with EnumForgeError base: the global handler catches all of it
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence
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
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Context attached to an error for debugging and the response body."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    strategy: str | None = None
    table: str | None = None
    field_name: str | None = None
    allowed_values: list[str] | None = None
    debug_info: dict[str, Any] | None = None


class EnumForgeError(Exception):
    """Base exception for all enumforge errors."""

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
                "context": {
                    "strategy": self.context.strategy,
                    "table": self.context.table,
                    "field": self.context.field_name,
                    "allowed_values": self.context.allowed_values,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidEnumValueError(EnumForgeError):
    """Value is not a member of the allowed set."""
    def __init__(
        self,
        value: str,
        allowed: Sequence[str],
        field: str = "status",
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.field_name = field
        ctx.allowed_values = list(allowed)
        super().__init__(
            f"'{value}' is not a valid {field}. Allowed: {', '.join(allowed)}",
            "INVALID_ENUM_VALUE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 422,
        )
        self.value = value
        self.allowed = tuple(allowed)


class ConstraintViolationError(EnumForgeError):
    """The database rejected a value (CHECK violation or invalid enum literal)."""
    def __init__(self, table: str, strategy: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.table = table
        ctx.strategy = strategy
        super().__init__(
            f"Database rejected a value written to '{table}'",
            "ENUM_CONSTRAINT_VIOLATION", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 422,
        )


class DuplicateReferenceError(EnumForgeError):
    """Order reference already used in the target table."""
    def __init__(self, reference: str, table: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.table = table
        super().__init__(
            f"Order reference '{reference}' already exists",
            "DUPLICATE_REFERENCE", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.reference = reference


class MigrationPlanError(EnumForgeError):
    """Requested value change is inconsistent."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_MIGRATION_PLAN", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class UnsupportedMigrationError(EnumForgeError):
    """Strategy/dialect pair cannot be changed in place."""
    def __init__(self, strategy: str, dialect: str, reason: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.strategy = strategy
        super().__init__(
            f"Cannot migrate {strategy} on {dialect}: {reason}",
            "UNSUPPORTED_MIGRATION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.dialect = dialect


class ResourceNotFoundError(EnumForgeError):
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

class DatabaseError(EnumForgeError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
