"""
Error taxonomy for the scheduling core.

Every error raised by the core derives from SchedulingError and carries
structured information for callers and the HTTP adapter:
- code: error category (e.g., 'INVALID_TASK', 'INVALID_RULE')
- message: human-readable error description
- details: optional dict with debug information
"""

from typing import Any


class SchedulingError(Exception):
    """Base class for all recoverable scheduling errors."""

    code = "SCHEDULING_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(f"{self.code}: {message}")


class ValidationError(SchedulingError, ValueError):
    """A task could not be created (bad duration, empty or duplicate name)."""

    code = "INVALID_TASK"


class InvalidRuleError(SchedulingError, ValueError):
    """Unknown dispatch rule identifier."""

    code = "INVALID_RULE"


class InvalidObjectiveError(SchedulingError, ValueError):
    """Unknown optimization objective."""

    code = "INVALID_OBJECTIVE"


class EmptyTaskSetError(SchedulingError):
    """A batch was requested on an empty task set under the 'error' policy."""

    code = "EMPTY_TASK_SET"


class NoResultsError(SchedulingError):
    """A recommendation was requested without any method results."""

    code = "NO_RESULTS"


class TaskNotFoundError(SchedulingError, KeyError):
    """Lookup of a task that is not in the repository."""

    code = "TASK_NOT_FOUND"

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return f"{self.code}: {self.message}"


class ConfigError(SchedulingError):
    """An environment setting holds an unsupported value."""

    code = "INVALID_CONFIG"
