"""
Metrics Computation Module

Computes aggregate performance indices from a timed schedule.

- compute_metrics(rows) -> ScheduleMetrics: pure function to compute metrics
- aggregate: alias of compute_metrics

Metrics computed:
- makespan: completion time of the last task
- mean_flow_time: average completion time
- mean_number_in_system: (n / makespan) * mean_flow_time, 0 when makespan is 0
- total_tardiness / mean_tardiness: sum and average of per-task tardiness
- late_task_count: tasks finishing after their due date

An empty row list yields all-zero metrics. Rows whose times overflow to
inf raise ValidationError instead of producing inf or nan indices.
"""

import logging
import math
from typing import Sequence

from .errors import ValidationError
from .models import ScheduledRow, ScheduleMetrics

logger = logging.getLogger(__name__)


def compute_metrics(rows: Sequence[ScheduledRow]) -> ScheduleMetrics:
    """
    Compute aggregate metrics for a single timed schedule.

    Pure function: does not mutate inputs, no I/O.

    Args:
        rows: ScheduledRow list from evaluate()

    Returns:
        ScheduleMetrics with aggregated performance data

    Raises:
        ValidationError: if any index is not finite
    """
    n = len(rows)
    if n == 0:
        return ScheduleMetrics(
            makespan=0.0,
            mean_flow_time=0.0,
            mean_number_in_system=0.0,
            total_tardiness=0.0,
            mean_tardiness=0.0,
            late_task_count=0,
        )

    makespan = max(row.end for row in rows)
    mean_flow_time = sum(row.end for row in rows) / n
    mean_number_in_system = (n / makespan) * mean_flow_time if makespan > 0 else 0.0
    total_tardiness = sum(row.tardiness for row in rows)
    mean_tardiness = total_tardiness / n
    late_task_count = sum(1 for row in rows if row.tardiness > 0)

    values = (makespan, mean_flow_time, mean_number_in_system, total_tardiness, mean_tardiness)
    if not all(math.isfinite(v) for v in values):
        raise ValidationError(
            "schedule times overflow; durations are too large to aggregate",
            details={"task_count": n},
        )

    metrics = ScheduleMetrics(
        makespan=makespan,
        mean_flow_time=mean_flow_time,
        mean_number_in_system=mean_number_in_system,
        total_tardiness=total_tardiness,
        mean_tardiness=mean_tardiness,
        late_task_count=late_task_count,
    )

    logger.debug(
        "compute_metrics: makespan=%.2f flow=%.2f tardiness=%.2f late=%d",
        metrics.makespan,
        metrics.mean_flow_time,
        metrics.total_tardiness,
        metrics.late_task_count,
    )

    return metrics


aggregate = compute_metrics
