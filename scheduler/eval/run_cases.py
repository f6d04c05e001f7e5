"""
Scheduling Regression Harness CLI

Replays the scenarios in cases.yaml through run_schedules() and recommend(),
checks expected values and structural invariants, and optionally writes a
JSON report per case.

Usage:
    python -m scheduler.eval.run_cases [OPTIONS]

Options:
    --case-id ID        Run only specific case(s); may be repeated
    --cases FILE        YAML file with cases (default: scheduler/eval/cases.yaml)
    --out-dir DIR       Write one JSON report per case into a timestamped subdirectory
    --help              Show this message and exit
"""

import argparse
import json
import math
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import yaml

from scheduler.errors import SchedulingError
from scheduler.eval.invariants import (
    check_metrics_invariants,
    check_schedule_invariants,
)
from scheduler.models import MethodResult, Task
from scheduler.orchestrator import run_schedules
from scheduler.recommender import recommend
from scheduler.serializer import serialize_batch
from scheduler.sim import parse_rule

ROW_FIELDS = {
    "starts": "start",
    "ends": "end",
    "tardiness": "tardiness",
}


def load_cases(yaml_path: str) -> list[dict[str, Any]]:
    """Load regression cases from YAML file."""
    with open(yaml_path) as f:
        data = yaml.safe_load(f)
    return data.get("cases", [])


def build_tasks(case: dict[str, Any]) -> list[Task]:
    return [Task(**entry) for entry in case.get("tasks", [])]


def _close(a: float, b: float) -> bool:
    return math.isclose(float(a), float(b), abs_tol=1e-9)


def check_expectations(result: MethodResult, expected: dict[str, Any]) -> list[str]:
    """Compare one rule's result with the case's expected values."""
    problems = []
    rule = result.rule.value

    if "order" in expected:
        order = [row.name for row in result.rows]
        if order != list(expected["order"]):
            problems.append(f"{rule}: order {order} != expected {expected['order']}")

    for key, attr in ROW_FIELDS.items():
        if key not in expected:
            continue
        actual = [getattr(row, attr) for row in result.rows]
        want = expected[key]
        if len(actual) != len(want) or not all(_close(a, b) for a, b in zip(actual, want)):
            problems.append(f"{rule}: {key} {actual} != expected {want}")

    for key in ("makespan", "mean_flow_time", "total_tardiness", "mean_tardiness"):
        if key in expected and not _close(getattr(result.metrics, key), expected[key]):
            problems.append(
                f"{rule}: {key}={getattr(result.metrics, key)} != expected {expected[key]}"
            )

    return problems


def run_case(case: dict[str, Any]) -> tuple[dict[str, Any], str]:
    """
    Run a single case and return (report, status_line).
    """
    case_id = case["id"]
    report: dict[str, Any] = {"case": {"id": case_id, "description": case.get("description", "")}}
    problems: list[str] = []

    try:
        tasks = build_tasks(case)
        expected = case.get("expect", {})
        rules = list(expected) or None
        batch = run_schedules(rules, tasks, empty_policy="zero")
    except (SchedulingError, ValueError) as exc:
        report["error"] = str(exc)
        return report, f"[ERROR] {case_id}: {exc}"

    for failure in batch.failures:
        problems.append(f"{failure.rule}: {failure.code} {failure.message}")

    for rule_id, want in expected.items():
        rule = parse_rule(rule_id)
        if rule not in batch.results:
            continue
        result = batch.results[rule]
        problems.extend(check_schedule_invariants(tasks, result))
        problems.extend(check_metrics_invariants(result))
        problems.extend(check_expectations(result, want or {}))

    recommendations = {}
    wanted = case.get("recommend") or {}
    # Recommendations compare every rule, not only those with expectations
    full = run_schedules(None, tasks, empty_policy="zero") if wanted else None
    for objective, want_rule in wanted.items():
        rec = recommend(full.results, objective)
        recommendations[objective] = rec.best_rule.value
        if rec.best_rule != parse_rule(want_rule):
            problems.append(f"recommend {objective}: {rec.best_rule.value} != expected {want_rule}")

    report["batch"] = serialize_batch(batch)
    report["recommendations"] = recommendations
    report["problems"] = problems

    if problems:
        return report, f"[FAIL]  {case_id}: {len(problems)} problem(s); first: {problems[0]}"
    return report, f"[OK]    {case_id}"


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Replay scheduling regression cases.")
    parser.add_argument(
        "--case-id",
        action="append",
        dest="case_ids",
        help="Run only specific case(s); may be repeated",
    )
    parser.add_argument(
        "--cases",
        default=str(Path(__file__).parent / "cases.yaml"),
        help="YAML file with cases",
    )
    parser.add_argument(
        "--out-dir",
        default=None,
        help="Directory for JSON reports (default: no reports written)",
    )
    args = parser.parse_args(argv)

    cases_yaml = Path(args.cases)
    if not cases_yaml.exists():
        print(f"ERROR: Cases file not found: {cases_yaml}", file=sys.stderr)
        return 1

    all_cases = load_cases(str(cases_yaml))
    print(f"Loaded {len(all_cases)} cases from {cases_yaml}")

    if args.case_ids:
        case_ids_set = set(args.case_ids)
        selected_cases = [c for c in all_cases if c["id"] in case_ids_set]
        if not selected_cases:
            print(
                f"WARNING: No cases matched specified IDs: {args.case_ids}",
                file=sys.stderr,
            )
            return 1
    else:
        selected_cases = all_cases

    reports = []
    ok_count = 0
    for case in selected_cases:
        report, status_line = run_case(case)
        reports.append(report)
        print(status_line)
        if status_line.startswith("[OK]"):
            ok_count += 1

    if args.out_dir:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        report_dir = Path(args.out_dir) / timestamp
        report_dir.mkdir(parents=True, exist_ok=True)
        for report in reports:
            report_path = report_dir / f"{report['case']['id']}.json"
            with open(report_path, "w") as f:
                json.dump(report, f, indent=2, default=str)
        print(f"Reports written to {report_dir}")

    print()
    print(f"{ok_count}/{len(selected_cases)} case(s) passed")
    return 0 if ok_count == len(selected_cases) else 1


if __name__ == "__main__":
    raise SystemExit(main())
