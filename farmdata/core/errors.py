"""Error Hierarchy — typed, categorized exceptions for every farmdata failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Input/data errors (400/404/409) are recoverable; infrastructure errors (5xx) are critical
    - to_response() produces the REST envelope used by the global handler
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with FarmDataError base: one FastAPI handler catches all
    - ErrorContext as dataclass: population/year/farm ids travel with the error for logging
    - Data gaps in simulation inputs (missing year, missing closing value) are conflicts (409),
      not 404s: the addressed resource exists but its state cannot serve the request
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
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Identifiers attached to an error for observability."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    population_id: int | None = None
    year: int | None = None
    farm_id: int | None = None
    simulation_run_id: int | None = None
    debug_info: dict[str, Any] | None = None


class FarmDataError(Exception):
    """Base exception for all farmdata errors."""

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
                    "population_id": self.context.population_id,
                    "year": self.context.year,
                    "farm_id": self.context.farm_id,
                    "simulation_run_id": self.context.simulation_run_id,
                },
            }
        }


# ─── Input Errors (400-level) ───────────────────────────────────

class InvalidInputError(FarmDataError):
    """Request payload is structurally valid but semantically unusable."""
    def __init__(self, message: str, field: str | None = None, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_INPUT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class EmptyResultError(FarmDataError):
    """A data export produced no values for the requested year."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "EMPTY_RESULT", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )


class ResourceNotFoundError(FarmDataError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: Any, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class DataConflictError(FarmDataError):
    """Stored data cannot satisfy the operation (missing year, closing value, policy...)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "DATA_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class DuplicateEntityError(FarmDataError):
    """Entity violates a uniqueness rule."""
    def __init__(self, entity: str, key: str, context: ErrorContext | None = None):
        super().__init__(
            f"{entity} with {key} already exists",
            "DUPLICATE_ENTITY", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.entity = entity


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(FarmDataError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class SimulationManagerError(FarmDataError):
    """Simulation manager rejected or did not answer a task request."""
    def __init__(self, message: str, status_code: int | None = None, context: ErrorContext | None = None):
        super().__init__(
            f"Simulation manager error: {message}",
            "SIMULATION_MANAGER_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.status_code = status_code


class ScenarioCreationError(FarmDataError):
    """A simulation scenario could not be assembled; its population copy was removed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "SCENARIO_CREATION_FAILED", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
