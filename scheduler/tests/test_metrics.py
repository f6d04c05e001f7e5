"""
Tests for metrics computation.

Tests verify:
- Each index on the four-task FIFO and SPT schedules
- Makespan equals the last row's end
- Empty schedules give all-zero metrics without dividing by zero
- Aggregation is idempotent and does not mutate rows
"""

import pytest

from scheduler.errors import ValidationError
from scheduler.metrics import aggregate, compute_metrics
from scheduler.models import ScheduledRow, ScheduleMetrics, Task
from scheduler.sim import simulate


class TestFifoIndices:
    """Test every index on the four-task FIFO schedule."""

    def test_makespan(self, four_tasks):
        """Verify FIFO makespan is 23 and equals the last end."""
        rows, _ = simulate("FIFO", four_tasks)
        metrics = compute_metrics(rows)
        assert metrics.makespan == 23
        assert metrics.makespan == rows[-1].end

    def test_mean_flow_time(self, four_tasks):
        """Verify FIFO mean flow time is 55/4."""
        rows, _ = simulate("FIFO", four_tasks)
        assert compute_metrics(rows).mean_flow_time == pytest.approx(55 / 4)

    def test_mean_number_in_system(self, four_tasks):
        """Verify mean number in system is (n / makespan) * mean flow time."""
        rows, _ = simulate("FIFO", four_tasks)
        assert compute_metrics(rows).mean_number_in_system == pytest.approx((4 / 23) * (55 / 4))

    def test_tardiness(self, four_tasks):
        """Verify FIFO total and mean tardiness and the late count."""
        rows, _ = simulate("FIFO", four_tasks)
        metrics = compute_metrics(rows)
        assert metrics.total_tardiness == 11
        assert metrics.mean_tardiness == pytest.approx(11 / 4)
        assert metrics.late_task_count == 2


class TestSptIndices:
    """Test SPT against FIFO on the four-task set."""

    def test_spt_beats_fifo_on_total_tardiness(self, four_tasks):
        """Verify SPT total tardiness is 5, below FIFO's."""
        spt = compute_metrics(simulate("SPT", four_tasks)[0])
        fifo = compute_metrics(simulate("FIFO", four_tasks)[0])
        assert spt.total_tardiness == 5
        assert spt.total_tardiness < fifo.total_tardiness

    def test_spt_minimizes_mean_flow_time(self, four_tasks):
        """Verify SPT has the lowest mean flow time of all rules."""
        spt = compute_metrics(simulate("SPT", four_tasks)[0])
        assert spt.mean_flow_time == pytest.approx(49 / 4)
        for rule in ("FIFO", "LPT", "DP", "RC"):
            other = compute_metrics(simulate(rule, four_tasks)[0])
            assert spt.mean_flow_time <= other.mean_flow_time


class TestEdgeCases:
    """Test empty input and purity."""

    def test_empty_rows_all_zero(self):
        """Verify an empty schedule gives all-zero metrics."""
        metrics = compute_metrics([])
        assert metrics == ScheduleMetrics(
            makespan=0,
            mean_flow_time=0,
            mean_number_in_system=0,
            total_tardiness=0,
            mean_tardiness=0,
            late_task_count=0,
        )

    def test_aggregate_is_alias(self):
        """Verify aggregate is compute_metrics."""
        assert aggregate is compute_metrics

    def test_idempotent(self, four_tasks):
        """Verify aggregating twice gives equal metrics and leaves rows intact."""
        rows, _ = simulate("RC", four_tasks)
        snapshot = [r.model_copy() for r in rows]
        assert compute_metrics(rows) == compute_metrics(rows)
        assert rows == snapshot

    def test_makespan_is_max_end_with_single_row(self):
        """Verify every index on a single late row."""
        row = ScheduledRow(task=Task(name="A", duration=4, due_date=1), start=0, end=4, tardiness=3)
        metrics = compute_metrics([row])
        assert metrics.makespan == 4
        assert metrics.mean_flow_time == 4
        assert metrics.mean_number_in_system == 1
        assert metrics.mean_tardiness == 3

    def test_overflowing_times_rejected(self):
        """Verify rows whose end times sum to inf raise instead of returning inf."""
        big = 8e307
        rows = [
            ScheduledRow(task=Task(name="A", duration=big), start=0, end=big, tardiness=0),
            ScheduledRow(task=Task(name="B", duration=big), start=big, end=2 * big, tardiness=0),
        ]
        with pytest.raises(ValidationError, match="overflow"):
            compute_metrics(rows)
