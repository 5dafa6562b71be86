"""statewalk error handling.

Custom exception hierarchy with error codes, structured context and
troubleshooting suggestions.
"""

from statewalk.errors.base import (
    ConfigValidationError,
    EngineStateError,
    ErrorCode,
    ErrorContext,
    InvariantViolationError,
    StatewalkError,
    TaskLoadError,
    ValidationError,
)

__all__ = [
    "StatewalkError",
    "ErrorCode",
    "ErrorContext",
    "ValidationError",
    "ConfigValidationError",
    "TaskLoadError",
    "EngineStateError",
    "InvariantViolationError",
]
