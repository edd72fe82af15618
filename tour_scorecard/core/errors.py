"""Error Hierarchy - typed, categorized exceptions for shell-level failures.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST error envelope
    - Scoring, eligibility and mutations never raise these: a refused mutation is a no-op

Design Decisions:
    - Single hierarchy with ScorecardError base: one FastAPI handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging
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
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    game_id: str | None = None
    operation: str | None = None
    hole_number: int | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class ScorecardError(Exception):
    """Base exception for all scorecard shell errors."""

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
                    "game_id": self.context.game_id,
                    "operation": self.context.operation,
                    "hole_number": self.context.hole_number,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(ScorecardError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class CourseValidationError(ScorecardError):
    """Custom course fails structural checks."""
    def __init__(self, problems: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Course is not playable: {'; '.join(problems)}",
            "COURSE_INVALID", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.problems = problems


class ScorecardImportError(ScorecardError):
    """Import file yielded no scorecards."""
    def __init__(self, warnings: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Nothing imported: {'; '.join(warnings)}",
            "IMPORT_EMPTY", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.warnings = warnings


class OperationRejectedError(ScorecardError):
    """Strict-mode caller asked for a mutation that does not apply."""
    def __init__(self, rejection: dict, context: ErrorContext | None = None):
        super().__init__(
            rejection.get("message", "Operation does not apply"),
            rejection.get("error_code", "OPERATION_REJECTED"), ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 409,
        )
        self.rejection = rejection


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(ScorecardError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class CourseLookupError(ScorecardError):
    """Remote course search failed."""
    def __init__(
        self,
        message: str,
        lookup_error_type: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            f"Course lookup error ({lookup_error_type}): {message}",
            "COURSE_LOOKUP_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.lookup_error_type = lookup_error_type
