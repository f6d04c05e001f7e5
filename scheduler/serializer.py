"""
Serialization utilities for making scheduling outputs JSON-friendly.

Converts Pydantic models and enums to plain dicts and native Python types
for the presentation layer (HTTP adapter, CLI, reports).
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel

from .models import ScheduleBatch, ScheduledRow

INDEX_COLUMNS = (
    "makespan",
    "mean_flow_time",
    "mean_number_in_system",
    "total_tardiness",
    "mean_tardiness",
)


def serialize_row(row: ScheduledRow) -> dict:
    """Flatten a timed row into the columns of a schedule table."""
    return {
        "name": row.name,
        "duration": row.duration,
        "start": row.start,
        "end": row.end,
        "due_date": row.due_date,
        "predecessor": row.task.predecessor,
        "tardiness": row.tardiness,
    }


def serialize_batch(batch: ScheduleBatch) -> dict:
    """
    Convert a ScheduleBatch to JSON-serializable format.

    Rows are flattened via serialize_row; everything else goes through
    _serialize_value. Results stay keyed by rule name.
    """
    results = {}
    for rule, result in batch.results.items():
        results[rule.value] = {
            "rule": rule.value,
            "rows": [serialize_row(row) for row in result.rows],
            "metrics": _serialize_value(result.metrics),
            "machine_free_at": result.machine_free_at,
        }
    return {
        "task_count": batch.task_count,
        "results": results,
        "failures": _serialize_value(batch.failures),
        "indices": indices_table(batch),
    }


def indices_table(batch: ScheduleBatch) -> list[dict]:
    """One row per rule with the five performance indices, in canonical order."""
    table = []
    for rule, result in batch.results.items():
        entry: dict[str, Any] = {"rule": rule.value}
        for column in INDEX_COLUMNS:
            entry[column] = getattr(result.metrics, column)
        table.append(entry)
    return table


def serialize(value: Any) -> Any:
    """Public entrypoint for arbitrary models, enums and containers."""
    return _serialize_value(value)


def _serialize_value(value):
    """
    Recursively serialize a single value.

    Handles:
    - Pydantic BaseModel instances → dict
    - Enum instances → string value
    - Lists → list of serialized items
    - Dicts → dict of serialized key-value pairs (enum keys become their value)
    - Primitives (str, int, float, bool, None) → pass through
    """
    if isinstance(value, BaseModel):
        return _serialize_value(value.model_dump())

    if isinstance(value, Enum):
        return value.value

    if isinstance(value, (list, tuple)):
        return [_serialize_value(item) for item in value]

    if isinstance(value, dict):
        return {_serialize_value(k): _serialize_value(v) for k, v in value.items()}

    return value
