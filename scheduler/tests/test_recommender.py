"""
Tests for the Recommender.

Tests verify:
- Objective parsing and InvalidObjectiveError
- Best rule per objective, with canonical tie-breaking
- Secondary best-for-flow-time and best-for-tardiness analysis
- Trade-off flag, gaps, and rationale wording
- Empty input raises NoResultsError
"""

import pytest

from scheduler.errors import InvalidObjectiveError, NoResultsError
from scheduler.models import DispatchRule, MethodResult, Objective, ScheduleMetrics
from scheduler.orchestrator import run_schedules
from scheduler.recommender import best_rule_for, parse_objective, rank_results, recommend


def make_result(rule, makespan, flow=10.0, tardiness=0.0):
    """Build a MethodResult carrying only the metrics the recommender reads."""
    return MethodResult(
        rule=rule,
        rows=[],
        metrics=ScheduleMetrics(
            makespan=makespan,
            mean_flow_time=flow,
            mean_number_in_system=0,
            total_tardiness=tardiness,
            mean_tardiness=0,
        ),
        machine_free_at=makespan,
    )


class TestParseObjective:
    """Test objective identifiers."""

    @pytest.mark.parametrize(
        "identifier,expected",
        [
            ("Cmax", Objective.CMAX),
            ("cmax", Objective.CMAX),
            ("makespan", Objective.CMAX),
            ("Tardiness", Objective.TARDINESS),
            ("TOTAL_TARDINESS", Objective.TARDINESS),
            (Objective.TARDINESS, Objective.TARDINESS),
        ],
    )
    def test_known(self, identifier, expected):
        """Verify objective names and aliases resolve."""
        assert parse_objective(identifier) == expected

    def test_unknown_objective_raises(self):
        """Verify an unknown objective raises INVALID_OBJECTIVE."""
        with pytest.raises(InvalidObjectiveError) as exc_info:
            parse_objective("Throughput")
        assert exc_info.value.code == "INVALID_OBJECTIVE"

    def test_recommend_with_unknown_objective_raises(self):
        """Verify recommend() rejects an unknown objective."""
        results = {DispatchRule.FIFO: make_result(DispatchRule.FIFO, 28)}
        with pytest.raises(InvalidObjectiveError):
            recommend(results, "Lateness")


class TestBestRule:
    """Test best rule selection and ties."""

    def test_cmax_picks_smaller_makespan(self):
        """Verify Cmax picks the rule with the smaller makespan."""
        results = {
            DispatchRule.FIFO: make_result(DispatchRule.FIFO, 28),
            DispatchRule.SPT: make_result(DispatchRule.SPT, 23),
        }
        rec = recommend(results, "Cmax")
        assert rec.best_rule == DispatchRule.SPT
        assert rec.best_value == 23

    def test_tie_goes_to_canonically_earlier_rule(self):
        """Verify ties go to the canonically earlier rule."""
        results = {
            DispatchRule.RC: make_result(DispatchRule.RC, 10),
            DispatchRule.LPT: make_result(DispatchRule.LPT, 10),
            DispatchRule.DP: make_result(DispatchRule.DP, 10),
        }
        rule, value = best_rule_for(results, lambda m: m.makespan)
        assert rule == DispatchRule.LPT
        assert value == 10

    def test_string_keys_accepted(self):
        """Verify results keyed by rule strings are accepted."""
        results = {
            "FIFO": make_result(DispatchRule.FIFO, 28),
            "SPT": make_result(DispatchRule.SPT, 23),
        }
        assert recommend(results, "Cmax").best_rule == DispatchRule.SPT

    def test_empty_results_raise(self):
        """Verify empty results raise NoResultsError."""
        with pytest.raises(NoResultsError):
            recommend({}, "Cmax")

    def test_ranking_best_first_with_stable_ties(self):
        """Verify the ranking is ascending with canonical order on ties."""
        results = {
            DispatchRule.FIFO: make_result(DispatchRule.FIFO, 30),
            DispatchRule.SPT: make_result(DispatchRule.SPT, 20),
            DispatchRule.LPT: make_result(DispatchRule.LPT, 30),
            DispatchRule.DP: make_result(DispatchRule.DP, 20),
        }
        ranking = rank_results(results, "Cmax")
        assert [s.rule for s in ranking] == [
            DispatchRule.SPT,
            DispatchRule.DP,
            DispatchRule.FIFO,
            DispatchRule.LPT,
        ]


class TestSecondaryAnalysis:
    """Test best-for-flow-time and best-for-tardiness on real batches."""

    def test_four_tasks_no_trade_off(self, four_tasks):
        """Verify SPT wins both secondary analyses on the four-task set."""
        batch = run_schedules(None, four_tasks)
        rec = recommend(batch.results, "Tardiness")
        assert rec.best_rule == DispatchRule.SPT
        assert rec.best_value == 5
        assert rec.best_flow_time_rule == DispatchRule.SPT
        assert rec.best_tardiness_rule == DispatchRule.SPT
        assert rec.trade_off is False
        assert rec.flow_time_gap == 0
        assert rec.tardiness_gap == 0
        assert "strong on both" in rec.rationale

    def test_four_tasks_cmax_all_tie(self, four_tasks):
        """Verify an all-way makespan tie resolves to FIFO."""
        batch = run_schedules(None, four_tasks)
        rec = recommend(batch.results, "Cmax")
        # every rule finishes at 23 on a single machine without idle time
        assert rec.best_rule == DispatchRule.FIFO
        assert [s.value for s in rec.ranking] == [23] * 5
        assert rec.best_flow_time_rule == DispatchRule.SPT

    def test_trade_off_between_throughput_and_due_dates(self, trade_off_tasks):
        """Verify differing secondary bests produce gaps and a trade-off rationale."""
        batch = run_schedules(None, trade_off_tasks)
        rec = recommend(batch.results, Objective.TARDINESS)
        assert rec.best_flow_time_rule == DispatchRule.SPT
        assert rec.best_flow_time == pytest.approx(6.0)
        assert rec.best_tardiness_rule == DispatchRule.FIFO
        assert rec.best_total_tardiness == 0
        assert rec.trade_off is True
        assert rec.flow_time_gap == pytest.approx(4.5)
        assert rec.tardiness_gap == pytest.approx(1.0)
        assert "throughput" in rec.rationale
        assert "due-date" in rec.rationale

    def test_recommend_does_not_mutate_results(self, four_tasks):
        """Verify recommend() leaves its input unchanged."""
        batch = run_schedules(None, four_tasks)
        before = batch.model_copy(deep=True)
        recommend(batch.results, "Cmax")
        assert batch == before
