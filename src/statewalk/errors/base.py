"""Custom exception hierarchy for statewalk.

statewalk errors carry:
- Structured error codes for programmatic handling
- Context describing where in a run the error happened
- Actionable suggestions for recovery

All statewalk errors inherit from StatewalkError and include:
- error_code: A unique ErrorCode enum for categorization
- context: ErrorContext with engine/state/operator details
- suggestions: List of actionable steps to resolve the issue

Example:
    try:
        engine.search()
    except StatewalkError as e:
        print(f"Error [{e.error_code.value}]: {e.message}")
        for suggestion in e.suggestions:
            print(f"  - {suggestion}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for statewalk.

    Error codes are organized by category:
    - E2xx: Validation errors (configuration, task files)
    - E3xx: Engine lifecycle errors
    - E9xx: Internal invariant violations
    """

    # Validation errors (E2xx)
    VALIDATION_FAILED = "E201"
    INVALID_CONFIG = "E202"
    INVALID_TASK = "E203"

    # Engine lifecycle errors (E3xx)
    ENGINE_NOT_INITIALIZED = "E301"
    ENGINE_TERMINATED = "E302"

    # Internal errors (E9xx)
    INVARIANT_VIOLATED = "E901"
    UNKNOWN = "E999"

    @property
    def category(self) -> str:
        """Get the error category name."""
        code_num = int(self.value[1:])
        if 200 <= code_num < 300:
            return "validation"
        elif 300 <= code_num < 400:
            return "engine"
        return "internal"


@dataclass
class ErrorContext:
    """Structured context for error logging and debugging.

    Attributes:
        engine: Name of the search engine that raised the error
        state_id: State the engine was looking at
        operator: Operator being applied, if any
        extra: Additional context-specific information
        timestamp: When the error occurred
    """

    engine: str | None = None
    state_id: int | None = None
    operator: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for serialization."""
        result = {
            "engine": self.engine,
            "state_id": self.state_id,
            "operator": self.operator,
            "extra": self.extra,
            "timestamp": self.timestamp.isoformat(),
        }
        return {k: v for k, v in result.items() if v is not None}

    def format_location(self) -> str:
        """Format the error location as a readable string."""
        parts = []
        if self.engine:
            parts.append(f"engine={self.engine}")
        if self.state_id is not None:
            parts.append(f"state={self.state_id}")
        if self.operator:
            parts.append(f"operator={self.operator}")
        return " > ".join(parts) if parts else "unknown location"


class StatewalkError(Exception):
    """Base exception for all statewalk errors.

    Attributes:
        error_code: Unique ErrorCode for this error type
        message: Human-readable error description
        context: ErrorContext with execution details
        suggestions: List of actionable steps to resolve the issue
        recoverable: Whether the run can continue after this error
        cause: The underlying exception (if any)
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN
    default_message: str = "An unexpected error occurred"
    default_suggestions: list[str] = []
    recoverable: bool = True

    def __init__(
        self,
        message: str | None = None,
        error_code: ErrorCode | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
        recoverable: bool | None = None,
        suggestions: list[str] | None = None,
        **extra_context: Any,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.error_code
        self.context = context or ErrorContext()
        self.cause = cause
        if recoverable is not None:
            self.recoverable = recoverable
        self._suggestions = suggestions

        if extra_context:
            self.context.extra.update(extra_context)

        super().__init__(self.message)

    @property
    def suggestions(self) -> list[str]:
        """Get actionable suggestions for resolving this error."""
        if self._suggestions is not None:
            return self._suggestions
        return self.default_suggestions.copy()

    def __str__(self) -> str:
        parts = [f"[{self.error_code.value}] {self.message}"]

        location = self.context.format_location()
        if location != "unknown location":
            parts.append(f"at {location}")

        return " | ".join(parts)

    def format_verbose(self) -> str:
        """Format error with full details including suggestions."""
        lines = [
            f"Error [{self.error_code.value}]: {self.message}",
            "",
        ]

        location = self.context.format_location()
        if location != "unknown location":
            lines.append(f"Location: {location}")

        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  - {suggestion}")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_code": self.error_code.value,
            "error_type": self.__class__.__name__,
            "message": self.message,
            "recoverable": self.recoverable,
            "suggestions": self.suggestions,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }


class ValidationError(StatewalkError):
    """Validation failed for a configuration value or task definition.

    Check the 'field' and 'value' attributes for specific details.
    """

    error_code = ErrorCode.VALIDATION_FAILED
    default_message = "Validation failed"
    recoverable = False
    default_suggestions = [
        "Check the field name and value mentioned in the error",
        "Run 'statewalk validate <task>' to check a task file",
    ]

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        value: Any = None,
        expected: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.field = field
        self.value = value
        self.expected = expected
        super().__init__(message=message, **kwargs)

    def __str__(self) -> str:
        base = super().__str__()
        if self.field:
            base = f"{base} (field: {self.field})"
        return base

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["field"] = self.field
        result["value"] = repr(self.value)
        if self.expected:
            result["expected"] = self.expected
        return result


class ConfigValidationError(ValidationError):
    """Walk configuration is invalid.

    Raised before a run starts, e.g. for a missing evaluator list,
    a negative bound or an evaluator name nobody registered.
    """

    error_code = ErrorCode.INVALID_CONFIG
    default_message = "Invalid configuration"
    default_suggestions = [
        "Provide at least one evaluator name under 'evals'",
        "Use 'statewalk engines' to list the registered evaluators",
        "The bound must be a non-negative integer or null",
    ]


class TaskLoadError(ValidationError):
    """A task file could not be parsed into a transition system."""

    error_code = ErrorCode.INVALID_TASK
    default_message = "Invalid task definition"
    default_suggestions = [
        "Every precondition, effect, initial and goal entry must name a declared variable",
        "Values must come from the variable's declared domain",
        "Operator costs must be non-negative integers",
    ]


class EngineStateError(StatewalkError):
    """A search engine was driven outside its lifecycle.

    step() is only legal between initialize() and the first terminal status.
    """

    error_code = ErrorCode.ENGINE_TERMINATED
    default_message = "Search engine is not in progress"
    recoverable = False
    default_suggestions = [
        "Call initialize() before the first step()",
        "Stop stepping once step() returned SOLVED or FAILED",
    ]


class InvariantViolationError(StatewalkError):
    """An internal invariant does not hold.

    This is a defect in a collaborator (successor generator, open list) or in
    the engine itself, never a condition to recover from.
    """

    error_code = ErrorCode.INVARIANT_VIOLATED
    default_message = "Search invariant violated"
    recoverable = False
