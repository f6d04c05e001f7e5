"""
Example Task Set Module

This module defines the example job set used to seed a new session:
- Function: build_example_tasks() -> list[Task]
- 6 jobs (A-F) with integer durations and due dates
- Tight enough due dates that the dispatch rules disagree on tardiness
"""

from .models import Task


def build_example_tasks() -> list[Task]:
    """
    Build the six-job example set.

    Total processing time is 38, while the latest due date is 20, so every
    rule leaves some jobs late and the comparison is informative.

    Returns:
        list[Task]: tasks in arrival (FIFO) order
    """
    return [
        Task(name="A", duration=5, due_date=12),
        Task(name="B", duration=7, due_date=16),
        Task(name="C", duration=3, due_date=9),
        Task(name="D", duration=8, due_date=18),
        Task(name="E", duration=5, due_date=14),
        Task(name="F", duration=10, due_date=20),
    ]
