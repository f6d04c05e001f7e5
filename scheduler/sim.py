"""
Simulation Engine Module

Implements the two scheduling stages that run before metrics:
- Sequencer: order a task set by a dispatch rule (FIFO, SPT, LPT, DP/EDD, RC)
- Timeline Evaluator: time an ordered task list on one non-preemptive machine,
  honoring each task's single named predecessor

Predecessor lookup is single-pass: only predecessors already timed earlier in
the sequence constrain a task. A predecessor that is missing from the set, or
that appears later in the order, is treated as no constraint.
"""

import logging
import math
from typing import Iterable, Sequence, Union

from .errors import InvalidRuleError
from .models import DispatchRule, ScheduledRow, Task

logger = logging.getLogger(__name__)

RULE_ALIASES: dict[str, DispatchRule] = {
    "EDD": DispatchRule.DP,
}


def parse_rule(rule: Union[str, DispatchRule]) -> DispatchRule:
    """
    Resolve a rule identifier to a DispatchRule.

    Accepts enum members, any-case names, and the alias EDD for DP.

    Raises:
        InvalidRuleError: if the identifier names no known rule.
    """
    if isinstance(rule, DispatchRule):
        return rule
    key = str(rule).strip().upper()
    if key in RULE_ALIASES:
        return RULE_ALIASES[key]
    try:
        return DispatchRule(key)
    except ValueError:
        raise InvalidRuleError(
            f"unknown dispatch rule '{rule}'",
            details={"rule": str(rule), "known": [r.value for r in DispatchRule]},
        ) from None


def _due_or_inf(task: Task) -> float:
    return task.due_date if task.due_date is not None else math.inf


def _critical_ratio(task: Task) -> float:
    # duration > 0 is guaranteed by Task validation
    return _due_or_inf(task) / task.duration


def sequence(rule: Union[str, DispatchRule], tasks: Iterable[Task]) -> list[Task]:
    """
    Order tasks according to a dispatch rule.

    Sorting is stable, so equal keys keep their input order. Tasks without a
    due date sort last under DP and RC.

    Args:
        rule: Dispatch rule or its identifier
        tasks: Tasks in arrival order (never mutated)

    Returns:
        A new list with the same tasks in dispatch order

    Raises:
        InvalidRuleError: if the rule is unknown
    """
    resolved = parse_rule(rule)
    seq = list(tasks)

    if resolved == DispatchRule.FIFO:
        ordered = seq
    elif resolved == DispatchRule.SPT:
        ordered = sorted(seq, key=lambda t: t.duration)
    elif resolved == DispatchRule.LPT:
        ordered = sorted(seq, key=lambda t: t.duration, reverse=True)
    elif resolved == DispatchRule.DP:
        ordered = sorted(seq, key=_due_or_inf)
    elif resolved == DispatchRule.RC:
        ordered = sorted(seq, key=_critical_ratio)
    else:
        raise InvalidRuleError(f"no sequencer for rule '{resolved.value}'")

    logger.debug("sequence %s: %s", resolved.value, [t.name for t in ordered])
    return ordered


def evaluate(ordered_tasks: Sequence[Task]) -> tuple[list[ScheduledRow], float]:
    """
    Time an ordered task list on a single machine.

    Scheduling algorithm:
    1. Look up the predecessor's end time if it was already scheduled, else 0
    2. Start at the later of machine availability and predecessor end
    3. End at start + duration; tardiness is max(0, end - due_date)
    4. Record the end time under the task name and advance the machine

    Args:
        ordered_tasks: Tasks in the order they are dispatched

    Returns:
        (rows, machine_free_at); machine_free_at is 0 for an empty sequence
    """
    machine_available = 0.0
    end_by_name: dict[str, float] = {}
    rows: list[ScheduledRow] = []

    for task in ordered_tasks:
        predecessor_end = 0.0
        if task.predecessor is not None:
            predecessor_end = end_by_name.get(task.predecessor, 0.0)

        start = max(machine_available, predecessor_end)
        end = start + task.duration
        if task.due_date is not None:
            tardiness = max(0.0, end - task.due_date)
        else:
            tardiness = 0.0

        rows.append(ScheduledRow(task=task, start=start, end=end, tardiness=tardiness))
        end_by_name[task.name] = end
        machine_available = end

    return rows, machine_available


def simulate(rule: Union[str, DispatchRule], tasks: Iterable[Task]) -> tuple[list[ScheduledRow], float]:
    """
    High-level scheduling entrypoint: sequence by rule, then evaluate.

    Raises:
        InvalidRuleError: if the rule is unknown
    """
    rows, machine_free_at = evaluate(sequence(rule, tasks))
    logger.debug("simulate %s: %d rows, makespan=%s", rule, len(rows), machine_free_at)
    return rows, machine_free_at
