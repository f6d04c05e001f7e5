"""
Core data models for the single-machine scheduler.

These models define the domain objects used throughout the system:
- Task records and dispatch rules
- Timed schedule rows and aggregated metrics
- Per-rule method results, batches, and recommendations
"""

import math
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class DispatchRule(str, Enum):
    """Static ordering heuristics applied before timing."""
    FIFO = "FIFO"
    SPT = "SPT"
    LPT = "LPT"
    DP = "DP"
    RC = "RC"


# Fixed scan order used for "compute all" and for tie-breaking.
CANONICAL_RULE_ORDER: tuple[DispatchRule, ...] = (
    DispatchRule.FIFO,
    DispatchRule.SPT,
    DispatchRule.LPT,
    DispatchRule.DP,
    DispatchRule.RC,
)


class Objective(str, Enum):
    """Optimization objectives the recommender understands."""
    CMAX = "Cmax"
    TARDINESS = "Tardiness"


class Task(BaseModel):
    """A job waiting for the single machine. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique task name within the active set")
    duration: float = Field(..., description="Processing time in the caller's normalized unit")
    due_date: Optional[float] = Field(default=None, description="Deadline, or None for no deadline")
    predecessor: Optional[str] = Field(default=None, description="Name of a task that must finish first")

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be empty")
        return value

    @field_validator("duration", "due_date", mode="before")
    @classmethod
    def reject_non_numeric(cls, value):
        # Lax mode would coerce True to 1.0 and "5" to 5.0
        if isinstance(value, (bool, str, bytes)):
            raise ValueError(f"must be a number (got {type(value).__name__})")
        return value

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, value: float) -> float:
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"duration must be a positive number (got {value})")
        return value

    @field_validator("due_date")
    @classmethod
    def validate_due_date(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and not math.isfinite(value):
            raise ValueError(f"due_date must be finite (got {value})")
        return value

    @field_validator("predecessor")
    @classmethod
    def validate_predecessor(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class ScheduledRow(BaseModel):
    """One task placed on the machine timeline."""
    task: Task = Field(..., description="The task this row times")
    start: float = Field(..., description="Start time (>= 0)")
    end: float = Field(..., description="End time, start + duration")
    tardiness: float = Field(..., description="max(0, end - due_date), or 0 without a due date")

    @property
    def name(self) -> str:
        return self.task.name

    @property
    def duration(self) -> float:
        return self.task.duration

    @property
    def due_date(self) -> Optional[float]:
        return self.task.due_date

    @property
    def late(self) -> bool:
        return self.tardiness > 0


class ScheduleMetrics(BaseModel):
    """Aggregate performance indices for one timed schedule."""

    makespan: float = Field(..., description="Completion time of the last task")
    mean_flow_time: float = Field(..., description="Average completion time")
    mean_number_in_system: float = Field(..., description="(n / makespan) * mean_flow_time")
    total_tardiness: float = Field(..., description="Sum of task tardiness")
    mean_tardiness: float = Field(..., description="total_tardiness / n")
    late_task_count: int = Field(default=0, description="Number of tasks finishing after their due date")

    @model_validator(mode="after")
    def validate_metrics(self):
        """Validate metrics constraints."""
        for field_name in (
            "makespan",
            "mean_flow_time",
            "mean_number_in_system",
            "total_tardiness",
            "mean_tardiness",
            "late_task_count",
        ):
            if getattr(self, field_name) < 0:
                raise ValueError(f"{field_name} must be non-negative")
        return self


class MethodResult(BaseModel):
    """Timed rows and metrics for a single dispatch rule."""
    rule: DispatchRule = Field(..., description="Rule that produced the sequence")
    rows: list[ScheduledRow] = Field(..., description="Timed rows in sequence order")
    metrics: ScheduleMetrics = Field(..., description="Indices aggregated from rows")
    machine_free_at: float = Field(..., description="Time the machine becomes free after the last row")


class RuleFailure(BaseModel):
    """A rule whose computation aborted within a batch."""
    rule: str = Field(..., description="Rule identifier as supplied by the caller")
    code: str = Field(..., description="Error code, e.g. INVALID_RULE")
    message: str = Field(..., description="Human-readable reason")


class ScheduleBatch(BaseModel):
    """Outcome of evaluating several rules against one task snapshot."""
    results: dict[DispatchRule, MethodResult] = Field(
        default_factory=dict, description="Rule -> result, in canonical rule order"
    )
    failures: list[RuleFailure] = Field(
        default_factory=list, description="Rules that could not be computed"
    )
    task_count: int = Field(default=0, description="Number of tasks in the evaluated snapshot")


class RuleScore(BaseModel):
    """One entry in a ranking of rules under an objective."""
    rule: DispatchRule
    value: float


class Recommendation(BaseModel):
    """
    Structured comparison of method results.

    Carries the best rule for the chosen objective plus the independent
    best-for-throughput and best-for-due-dates rules, so a presentation
    layer can explain the trade-off (or the lack of one).
    """

    objective: Objective = Field(..., description="Objective the best rule minimizes")
    best_rule: DispatchRule = Field(..., description="Winner under the objective")
    best_value: float = Field(..., description="Objective value of the winner")
    ranking: list[RuleScore] = Field(..., description="All rules, best first")

    best_flow_time_rule: DispatchRule = Field(..., description="Rule minimizing mean flow time")
    best_flow_time: float = Field(..., description="Its mean flow time")
    best_tardiness_rule: DispatchRule = Field(..., description="Rule minimizing total tardiness")
    best_total_tardiness: float = Field(..., description="Its total tardiness")

    flow_time_gap: float = Field(..., description="|mean flow time| difference between the two secondary bests")
    tardiness_gap: float = Field(..., description="|total tardiness| difference between the two secondary bests")
    trade_off: bool = Field(..., description="True if the secondary bests are different rules")
    rationale: str = Field(..., description="One-sentence explanation")
