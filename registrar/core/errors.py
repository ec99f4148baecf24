"""Error Hierarchy — typed, categorized exceptions for registrar failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - NotFound and Conflict are NOT exceptions: the Store signals them with None / False
    - Persistence errors are the only class raised across the storage boundary
    - to_log_extra() produces the structured fields consumed by JSONFormatter

Design Decisions:
    - Single hierarchy with RegistrarError base: callers catch one type at the seam
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    PERSISTENCE = "persistence"
    OBSERVER = "observer"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    collection: str | None = None
    entity_key: str | None = None
    path: str | None = None
    debug_info: dict[str, Any] | None = None


class RegistrarError(Exception):
    """Base exception for all registrar errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_log_extra(self) -> dict:
        """Flatten into `extra=` fields for structured logging."""
        extra = {
            "error_code": self.code,
            "error_category": self.category.value,
            "severity": self.severity.value,
        }
        if self.context.collection is not None:
            extra["collection"] = self.context.collection
        if self.context.entity_key is not None:
            extra["entity_key"] = self.context.entity_key
        if self.context.path is not None:
            extra["path"] = self.context.path
        return extra


# ─── Infrastructure Errors ──────────────────────────────────────

class PersistenceError(RegistrarError):
    """Writing a collection to durable storage failed."""
    def __init__(self, message: str, collection: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.collection = collection
        super().__init__(
            f"Saving {collection} failed: {message}",
            "PERSISTENCE_WRITE_FAILED", ErrorCategory.PERSISTENCE,
            ErrorSeverity.CRITICAL, ctx,
        )


class StorageCorruptedError(RegistrarError):
    """A stored collection exists but cannot be read or decoded."""
    def __init__(self, message: str, collection: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.collection = collection
        super().__init__(
            f"Loading {collection} failed: {message}",
            "PERSISTENCE_READ_FAILED", ErrorCategory.PERSISTENCE,
            ErrorSeverity.CRITICAL, ctx,
        )


class ObserverError(RegistrarError):
    """An observer callback raised during fan-out (logged, never propagated)."""
    def __init__(self, observer: str, cause: Exception, context: ErrorContext | None = None):
        super().__init__(
            f"Observer {observer} failed: {cause!r}",
            "OBSERVER_FAILED", ErrorCategory.OBSERVER,
            ErrorSeverity.WARNING, context,
        )
        self.observer = observer
        self.cause = cause

    def to_log_extra(self) -> dict:
        extra = super().to_log_extra()
        extra["observer"] = self.observer
        return extra
