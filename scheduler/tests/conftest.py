"""Shared fixtures for scheduler tests."""

import pytest

from scheduler.models import Task


@pytest.fixture
def four_tasks():
    """A(5,12) B(7,16) C(3,9) D(8,18) in arrival order."""
    return [
        Task(name="A", duration=5, due_date=12),
        Task(name="B", duration=7, due_date=16),
        Task(name="C", duration=3, due_date=9),
        Task(name="D", duration=8, due_date=18),
    ]


@pytest.fixture
def trade_off_tasks():
    """
    Y(10, due 10) arrives before X(1, due 100).

    SPT (X first) gives the lowest mean flow time but makes Y late;
    FIFO keeps everything on time. The two secondary bests differ.
    """
    return [
        Task(name="Y", duration=10, due_date=10),
        Task(name="X", duration=1, due_date=100),
    ]


@pytest.fixture(autouse=True)
def clean_policy_env(monkeypatch):
    """Keep tests independent of a developer's .env or shell settings."""
    for var in (
        "SCHEDULER_EMPTY_TASK_POLICY",
        "SCHEDULER_DUPLICATE_NAME_POLICY",
        "SCHEDULER_DEFAULT_OBJECTIVE",
    ):
        monkeypatch.delenv(var, raising=False)
