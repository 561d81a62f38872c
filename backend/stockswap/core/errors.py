"""Error Hierarchy — typed, categorized exceptions for all StockSwap failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Request errors (400/404) are recoverable; persistence errors (500) are critical
    - to_response() produces the REST envelope with the message under "error"
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with StockSwapError base: FastAPI global handler catches all
    - ErrorContext as dataclass: reconciliation data travels with the error,
      not with the logging framework
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
    PERSISTENCE = "persistence"
    EXTERNAL_SYSTEM = "external_system"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Context for error observability and manual reconciliation."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    record_id: str | None = None
    from_owner: str | None = None
    to_owner: str | None = None
    debug_info: dict[str, Any] | None = None


class StockSwapError(Exception):
    """Base exception for all StockSwap errors."""

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
            "error": self.message,
            "code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
        }


# ─── Request Errors (400-level) ─────────────────────────────────

class InvalidRequestError(StockSwapError):
    """Malformed or missing request input."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class RecordNotFoundError(StockSwapError):
    """Requested record does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class OwnershipMismatchError(StockSwapError):
    """Record is not owned by the principal named as the current owner."""
    def __init__(self, record_id: str, claimed_owner: str, context: ErrorContext | None = None):
        super().__init__(
            "Stock is not owned by the specified user",
            "OWNERSHIP_MISMATCH", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )
        self.record_id = record_id
        self.claimed_owner = claimed_owner


# ─── Infrastructure Errors (500-level) ──────────────────────────

class PersistenceError(StockSwapError):
    """Writing the record store back to its document failed."""
    def __init__(self, message: str, path: str, context: ErrorContext | None = None):
        super().__init__(
            f"Failed to persist record store: {message}",
            "PERSISTENCE_FAILURE", ErrorCategory.PERSISTENCE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.path = path


class DeadlockDetectedError(StockSwapError):
    """Simulated database reported a deadlock (transient)."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Deadlock detected",
            "DEADLOCK_DETECTED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 503,
        )
