"""
Invariant validation helpers for the scheduling evaluation harness.

These functions check properties of schedules and metrics without raising exceptions,
returning a list of human-readable violation messages instead.
"""

import math
from collections import Counter

from scheduler.metrics import compute_metrics
from scheduler.models import MethodResult, Task

TOLERANCE = 1e-9


def check_schedule_invariants(tasks: list[Task], result: MethodResult) -> list[str]:
    """
    Validate a MethodResult's rows against the task set it was computed from.

    Args:
        tasks: The task snapshot passed to the scheduler.
        result: The method result to validate.

    Returns:
        List of violation messages. Empty list means all invariants passed.
    """
    violations = []
    rule = result.rule.value

    # Invariant 1: rows are a permutation of the input tasks
    input_names = Counter(t.name for t in tasks)
    row_names = Counter(r.name for r in result.rows)
    if input_names != row_names:
        missing = sorted((input_names - row_names).elements())
        extra = sorted((row_names - input_names).elements())
        violations.append(f"{rule}: rows are not a permutation of tasks (missing={missing}, extra={extra})")

    # Invariant 2: end = start + duration, times non-negative
    for row in result.rows:
        if row.start < 0:
            violations.append(f"{rule}: {row.name} starts at negative time {row.start}")
        if not math.isclose(row.end, row.start + row.duration, abs_tol=TOLERANCE):
            violations.append(
                f"{rule}: {row.name} end={row.end} != start {row.start} + duration {row.duration}"
            )

    # Invariant 3: single machine, no overlap
    for prev, nxt in zip(result.rows, result.rows[1:]):
        if nxt.start < prev.end - TOLERANCE:
            violations.append(f"{rule}: {nxt.name} starts at {nxt.start} before {prev.name} ends at {prev.end}")

    # Invariant 4: tardiness matches due date
    for row in result.rows:
        expected = max(0.0, row.end - row.due_date) if row.due_date is not None else 0.0
        if not math.isclose(row.tardiness, expected, abs_tol=TOLERANCE):
            violations.append(f"{rule}: {row.name} tardiness={row.tardiness}, expected {expected}")

    # Invariant 5: predecessors timed earlier finish before the dependent starts
    end_by_name: dict[str, float] = {}
    for row in result.rows:
        pred = row.task.predecessor
        if pred is not None and pred in end_by_name and row.start < end_by_name[pred] - TOLERANCE:
            violations.append(
                f"{rule}: {row.name} starts at {row.start} before predecessor {pred} ends at {end_by_name[pred]}"
            )
        end_by_name[row.name] = row.end

    # Invariant 6: machine_free_at is the last end (0 when empty)
    expected_free = result.rows[-1].end if result.rows else 0.0
    if not math.isclose(result.machine_free_at, expected_free, abs_tol=TOLERANCE):
        violations.append(f"{rule}: machine_free_at={result.machine_free_at}, expected {expected_free}")

    return violations


def check_metrics_invariants(result: MethodResult) -> list[str]:
    """
    Validate that a result's metrics agree with a fresh aggregation of its rows.

    Returns:
        List of violation messages. Empty list means all invariants passed.
    """
    violations = []
    rule = result.rule.value
    recomputed = compute_metrics(result.rows)

    for field_name in type(recomputed).model_fields:
        stored = getattr(result.metrics, field_name)
        fresh = getattr(recomputed, field_name)
        if not math.isclose(stored, fresh, abs_tol=TOLERANCE):
            violations.append(f"{rule}: metrics.{field_name}={stored}, rows give {fresh}")

    if result.rows and not math.isclose(result.metrics.makespan, result.rows[-1].end, abs_tol=TOLERANCE):
        violations.append(
            f"{rule}: makespan={result.metrics.makespan} != last row end {result.rows[-1].end}"
        )

    return violations
