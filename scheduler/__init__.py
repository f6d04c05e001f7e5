"""
Single-machine job scheduling under classic dispatch rules.

Pipeline: TaskRepository -> sequence() -> evaluate() -> compute_metrics() -> recommend()
"""

from .errors import (
    EmptyTaskSetError,
    InvalidObjectiveError,
    InvalidRuleError,
    SchedulingError,
    ValidationError,
)
from .models import DispatchRule, MethodResult, Objective, Recommendation, ScheduleBatch, Task
from .orchestrator import SchedulerService, run_schedules
from .recommender import recommend
from .repository import TaskRepository

__all__ = [
    "DispatchRule",
    "EmptyTaskSetError",
    "InvalidObjectiveError",
    "InvalidRuleError",
    "MethodResult",
    "Objective",
    "Recommendation",
    "ScheduleBatch",
    "SchedulerService",
    "SchedulingError",
    "Task",
    "TaskRepository",
    "ValidationError",
    "recommend",
    "run_schedules",
]
