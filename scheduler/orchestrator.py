"""
Orchestrator module - batch scheduling and the session facade.

run_schedules() runs sequence -> evaluate -> aggregate once per rule against a
single task snapshot. A rule that fails is reported in the batch's failures
list and omitted from its results; the remaining rules still complete.

SchedulerService bundles a TaskRepository with the last computed batch and is
the in-process API consumed by the HTTP adapter and the CLI.
"""

import logging
from typing import Iterable, Optional, Union

from .config import get_default_objective, get_empty_task_policy
from .errors import EmptyTaskSetError, SchedulingError
from .metrics import compute_metrics
from .models import (
    CANONICAL_RULE_ORDER,
    DispatchRule,
    MethodResult,
    Objective,
    Recommendation,
    RuleFailure,
    ScheduleBatch,
    Task,
)
from .recommender import recommend
from .repository import TaskRepository
from .sim import parse_rule, simulate
from .world import build_example_tasks

logger = logging.getLogger(__name__)

RuleId = Union[str, DispatchRule]


def run_method(rule: RuleId, tasks: Iterable[Task]) -> MethodResult:
    """
    Compute one rule's schedule and metrics.

    Raises:
        InvalidRuleError: if the rule is unknown
    """
    resolved = parse_rule(rule)
    rows, machine_free_at = simulate(resolved, tasks)
    return MethodResult(
        rule=resolved,
        rows=rows,
        metrics=compute_metrics(rows),
        machine_free_at=machine_free_at,
    )


def run_schedules(
    rules: Optional[Iterable[RuleId]],
    tasks: Iterable[Task],
    empty_policy: Optional[str] = None,
) -> ScheduleBatch:
    """
    Evaluate several dispatch rules against the same task snapshot.

    Args:
        rules: Rule identifiers to evaluate; None means every rule
        tasks: Task set in arrival order (copied, never mutated)
        empty_policy: 'zero' or 'error'; defaults to configuration

    Returns:
        ScheduleBatch with results in canonical rule order and any failures

    Raises:
        EmptyTaskSetError: if tasks is empty under the 'error' policy
    """
    snapshot = list(tasks)
    requested = list(CANONICAL_RULE_ORDER) if rules is None else list(rules)

    policy = empty_policy or get_empty_task_policy()
    if not snapshot and policy == "error":
        raise EmptyTaskSetError("no tasks to schedule")

    computed: dict[DispatchRule, MethodResult] = {}
    failures: list[RuleFailure] = []
    for rule in requested:
        try:
            result = run_method(rule, snapshot)
        except SchedulingError as exc:
            logger.warning("rule %r failed: %s", rule, exc)
            failures.append(RuleFailure(rule=str(getattr(rule, "value", rule)), code=exc.code, message=exc.message))
            continue
        computed[result.rule] = result

    # Mapping keyed naturally by rule, in canonical order regardless of request order
    results = {rule: computed[rule] for rule in CANONICAL_RULE_ORDER if rule in computed}

    logger.info(
        "run_schedules: %d tasks, %d rules ok, %d failed",
        len(snapshot),
        len(results),
        len(failures),
    )
    return ScheduleBatch(results=results, failures=failures, task_count=len(snapshot))


class SchedulerService:
    """
    Task repository plus the last computed batch.

    Any change to the task set discards the cached batch. A new batch is
    published only after every requested rule has been computed.
    """

    def __init__(self, repository: Optional[TaskRepository] = None):
        self.repository = repository if repository is not None else TaskRepository()
        self._last_batch: Optional[ScheduleBatch] = None

    @property
    def last_batch(self) -> Optional[ScheduleBatch]:
        return self._last_batch

    def _invalidate(self) -> None:
        self._last_batch = None

    def add_task(
        self,
        duration: float,
        name: Optional[str] = None,
        due_date: Optional[float] = None,
        predecessor: Optional[str] = None,
    ) -> Task:
        task = self.repository.add(
            duration=duration, name=name, due_date=due_date, predecessor=predecessor
        )
        self._invalidate()
        return task

    def remove_task(self, name: str) -> None:
        self.repository.remove(name)
        self._invalidate()

    def clear_tasks(self) -> None:
        self.repository.clear()
        self._invalidate()

    def load_example(self) -> list[Task]:
        self.repository.load(build_example_tasks())
        self._invalidate()
        return self.repository.snapshot()

    def list_tasks(self) -> list[Task]:
        return self.repository.snapshot()

    def run_schedules(self, rules: Optional[Iterable[RuleId]] = None) -> ScheduleBatch:
        batch = run_schedules(rules, self.repository.snapshot())
        self._last_batch = batch
        return batch

    def recommend(
        self,
        objective: Union[str, Objective, None] = None,
        batch: Optional[ScheduleBatch] = None,
    ) -> Recommendation:
        """
        Recommend a rule from the given batch, the cached batch, or a fresh
        batch over every rule when nothing is cached.
        """
        if batch is None:
            batch = self._last_batch or self.run_schedules()
        return recommend(batch.results, objective or get_default_objective())
