"""
CLI Entrypoint Module

Compares dispatch rules on a task set and prints the result:
- Builds a task set from --task arguments (or the example set with --example)
- Runs run_schedules() for the selected rules (all rules by default)
- Prints one schedule table per rule, the performance indices, and a recommendation

Usage:
    python -m scheduler.main --example
    python -m scheduler.main --task A:5:12 --task B:7:16 --task C:3::B --rule SPT --rule EDD
    python -m scheduler.main --example --objective Tardiness
"""

import argparse
import logging
from typing import Optional

from .config import get_default_objective, get_log_level
from .errors import SchedulingError
from .models import MethodResult, Recommendation, ScheduleBatch
from .orchestrator import SchedulerService
from .serializer import INDEX_COLUMNS, indices_table


def parse_task_arg(text: str) -> dict:
    """
    Parse NAME:DURATION[:DUE[:PREDECESSOR]] into add_task keyword arguments.

    Empty fields are treated as absent, so 'C:3::B' has a predecessor but no due date.
    """
    parts = text.split(":")
    if len(parts) < 2 or len(parts) > 4:
        raise argparse.ArgumentTypeError(
            f"expected NAME:DURATION[:DUE[:PREDECESSOR]], got {text!r}"
        )
    parts += [""] * (4 - len(parts))
    name, duration, due, predecessor = (p.strip() for p in parts)
    try:
        return {
            "name": name or None,
            "duration": float(duration),
            "due_date": float(due) if due else None,
            "predecessor": predecessor or None,
        }
    except ValueError:
        raise argparse.ArgumentTypeError(f"non-numeric duration or due date in {text!r}") from None


def _fmt(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{value:g}"


def format_method(result: MethodResult) -> str:
    lines = [f"--- {result.rule.value} ---", "task       dur    start    end      due      late"]
    for row in result.rows:
        lines.append(
            f"{row.name:<10} {_fmt(row.duration):<6} {_fmt(row.start):<8} "
            f"{_fmt(row.end):<8} {_fmt(row.due_date):<8} {_fmt(row.tardiness)}"
        )
    return "\n".join(lines)


def format_indices(batch: ScheduleBatch) -> str:
    lines = ["rule  " + "  ".join(f"{c:>21}" for c in INDEX_COLUMNS)]
    for entry in indices_table(batch):
        lines.append(f"{entry['rule']:<5} " + "  ".join(f"{entry[c]:>21.2f}" for c in INDEX_COLUMNS))
    return "\n".join(lines)


def format_recommendation(rec: Recommendation) -> str:
    return "\n".join([
        f"objective: {rec.objective.value}",
        f"best rule: {rec.best_rule.value} ({rec.best_value:.2f})",
        "ranking:   " + ", ".join(f"{s.rule.value}={s.value:.2f}" for s in rec.ranking),
        f"best for mean flow time:  {rec.best_flow_time_rule.value} ({rec.best_flow_time:.2f})",
        f"best for total tardiness: {rec.best_tardiness_rule.value} ({rec.best_total_tardiness:.2f})",
        f"gaps: flow time {rec.flow_time_gap:.2f}, tardiness {rec.tardiness_gap:.2f}",
        rec.rationale,
    ])


def main(argv: Optional[list[str]] = None) -> int:
    """Run the scheduler CLI.

    Returns:
        0 on success, 1 on input errors.
    """
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(
        description="Single-machine dispatch rule comparison (sequence → timing → indices → recommendation)."
    )
    parser.add_argument(
        "--task",
        action="append",
        default=[],
        metavar="NAME:DUR[:DUE[:PRED]]",
        help="Task as NAME:DURATION[:DUE[:PREDECESSOR]]; may be repeated.",
    )
    parser.add_argument(
        "--example",
        action="store_true",
        help="Start from the six-task example set (A-F).",
    )
    parser.add_argument(
        "--rule",
        action="append",
        dest="rules",
        help="Dispatch rule to evaluate (FIFO, SPT, LPT, DP/EDD, RC); may be repeated. Default: all.",
    )
    parser.add_argument(
        "--objective",
        default=None,
        help="Cmax or Tardiness (default from SCHEDULER_DEFAULT_OBJECTIVE, else Cmax).",
    )
    args = parser.parse_args(argv)

    # A malformed --task is an input error (exit 1)
    try:
        task_args = [parse_task_arg(text) for text in args.task]
    except argparse.ArgumentTypeError as exc:
        print(f"\nERROR: {exc}")
        return 1

    service = SchedulerService()
    try:
        if args.example:
            service.load_example()
        for task_kwargs in task_args:
            service.add_task(**task_kwargs)

        if not service.list_tasks():
            print("no tasks given; use --task or --example.")
            return 1

        batch = service.run_schedules(args.rules)
        for failure in batch.failures:
            print(f"skipped {failure.rule}: {failure.message}")
        if not batch.results:
            print("no rule could be evaluated.")
            return 1

        recommendation = service.recommend(args.objective or get_default_objective(), batch=batch)
    except SchedulingError as exc:
        logging.getLogger(__name__).debug("input rejected", exc_info=True)
        print(f"\nERROR: {exc}")
        return 1

    for result in batch.results.values():
        print(format_method(result))
        print()

    print("=== PERFORMANCE INDICES ===")
    print(format_indices(batch))
    print("\n=== RECOMMENDATION ===")
    print(format_recommendation(recommendation))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
