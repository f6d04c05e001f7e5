"""
Recommendation Module

Compares already-computed method results and picks a rule for an objective.

- parse_objective(): resolve 'Cmax' / 'Tardiness' (and aliases)
- best_rule_for(): minimal rule for a metric, ties go to the canonically earlier rule
- rank_results(): every rule ordered by an objective
- recommend(): best rule plus best-for-flow-time and best-for-tardiness analysis

No scheduling happens here; inputs are MethodResults from the orchestrator.
"""

import logging
from typing import Callable, Mapping, Union

from .errors import InvalidObjectiveError, NoResultsError
from .models import (
    CANONICAL_RULE_ORDER,
    DispatchRule,
    MethodResult,
    Objective,
    Recommendation,
    RuleScore,
    ScheduleMetrics,
)
from .sim import parse_rule

logger = logging.getLogger(__name__)

OBJECTIVE_ALIASES: dict[str, Objective] = {
    "cmax": Objective.CMAX,
    "makespan": Objective.CMAX,
    "tardiness": Objective.TARDINESS,
    "total_tardiness": Objective.TARDINESS,
}

MetricKey = Callable[[ScheduleMetrics], float]

OBJECTIVE_METRIC: dict[Objective, MetricKey] = {
    Objective.CMAX: lambda m: m.makespan,
    Objective.TARDINESS: lambda m: m.total_tardiness,
}


def parse_objective(objective: Union[str, Objective]) -> Objective:
    """
    Resolve an objective identifier.

    Raises:
        InvalidObjectiveError: for anything other than Cmax or Tardiness.
    """
    if isinstance(objective, Objective):
        return objective
    key = str(objective).strip().lower()
    if key not in OBJECTIVE_ALIASES:
        raise InvalidObjectiveError(
            f"unknown objective '{objective}'",
            details={"objective": str(objective), "known": [o.value for o in Objective]},
        )
    return OBJECTIVE_ALIASES[key]


def _canonical_items(results: Mapping[DispatchRule, MethodResult]) -> list[tuple[DispatchRule, MethodResult]]:
    return [(rule, results[rule]) for rule in CANONICAL_RULE_ORDER if rule in results]


def best_rule_for(
    results: Mapping[DispatchRule, MethodResult],
    metric: MetricKey,
) -> tuple[DispatchRule, float]:
    """
    Return the rule with the smallest metric value.

    Rules are scanned in canonical order and only a strictly smaller value
    replaces the current best, so ties keep the earlier rule.

    Raises:
        NoResultsError: if results is empty.
    """
    items = _canonical_items(results)
    if not items:
        raise NoResultsError("no method results to compare")

    best_rule, best_result = items[0]
    best_value = metric(best_result.metrics)
    for rule, result in items[1:]:
        value = metric(result.metrics)
        if value < best_value:
            best_rule, best_value = rule, value
    return best_rule, best_value


def rank_results(
    results: Mapping[DispatchRule, MethodResult],
    objective: Union[str, Objective],
) -> list[RuleScore]:
    """Return every rule's objective value, best first (stable on ties)."""
    metric = OBJECTIVE_METRIC[parse_objective(objective)]
    scores = [RuleScore(rule=rule, value=metric(r.metrics)) for rule, r in _canonical_items(results)]
    return sorted(scores, key=lambda s: s.value)


def _rationale(
    objective: Objective,
    best_rule: DispatchRule,
    best_flow_rule: DispatchRule,
    best_tardiness_rule: DispatchRule,
) -> str:
    target = "makespan" if objective == Objective.CMAX else "total tardiness"
    if best_flow_rule == best_tardiness_rule:
        return (
            f"{best_rule.value} minimizes {target}; {best_flow_rule.value} is strong on both "
            f"mean flow time and total tardiness, so there is no trade-off."
        )
    return (
        f"{best_rule.value} minimizes {target}; {best_flow_rule.value} is best for throughput "
        f"(mean flow time) while {best_tardiness_rule.value} is best for due-date compliance "
        f"(total tardiness)."
    )


def recommend(
    results: Mapping[DispatchRule, MethodResult],
    objective: Union[str, Objective],
) -> Recommendation:
    """
    Recommend a dispatch rule for an objective.

    Args:
        results: Rule -> MethodResult, as produced by run_schedules
        objective: Cmax (minimize makespan) or Tardiness (minimize total tardiness)

    Returns:
        Recommendation with the winner, a ranking, and secondary analysis

    Raises:
        InvalidObjectiveError: if the objective is unknown
        NoResultsError: if results is empty
    """
    resolved = parse_objective(objective)
    results = {parse_rule(rule): result for rule, result in results.items()}

    best_rule, best_value = best_rule_for(results, OBJECTIVE_METRIC[resolved])
    flow_rule, flow_value = best_rule_for(results, lambda m: m.mean_flow_time)
    tardy_rule, tardy_value = best_rule_for(results, lambda m: m.total_tardiness)

    flow_time_gap = abs(
        results[tardy_rule].metrics.mean_flow_time - results[flow_rule].metrics.mean_flow_time
    )
    tardiness_gap = abs(
        results[tardy_rule].metrics.total_tardiness - results[flow_rule].metrics.total_tardiness
    )

    recommendation = Recommendation(
        objective=resolved,
        best_rule=best_rule,
        best_value=best_value,
        ranking=rank_results(results, resolved),
        best_flow_time_rule=flow_rule,
        best_flow_time=flow_value,
        best_tardiness_rule=tardy_rule,
        best_total_tardiness=tardy_value,
        flow_time_gap=flow_time_gap,
        tardiness_gap=tardiness_gap,
        trade_off=flow_rule != tardy_rule,
        rationale=_rationale(resolved, best_rule, flow_rule, tardy_rule),
    )

    logger.info(
        "recommend %s: best=%s (%.2f) flow=%s tardiness=%s",
        resolved.value,
        best_rule.value,
        best_value,
        flow_rule.value,
        tardy_rule.value,
    )
    return recommendation
