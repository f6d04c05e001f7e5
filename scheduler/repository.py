"""
Task Repository Module

Owns the mutable, insertion-ordered set of Task records.

- add(): validate and insert a task, resolving blank names and name collisions
- remove() / remove_at() / clear(): drop tasks
- snapshot(): read-only copy handed to the scheduling pipeline

A rejected mutation leaves the repository unchanged.
"""

import logging
import math
from typing import Iterable, Iterator, Optional

import pydantic

from .config import get_duplicate_name_policy
from .errors import TaskNotFoundError, ValidationError
from .models import Task

logger = logging.getLogger(__name__)


class TaskRepository:
    """Insertion-ordered collection of uniquely named tasks."""

    def __init__(self, tasks: Iterable[Task] = ()):
        self._tasks: list[Task] = []
        for task in tasks:
            self.add_task(task)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.snapshot())

    def __contains__(self, name: object) -> bool:
        return any(t.name == name for t in self._tasks)

    def names(self) -> list[str]:
        return [t.name for t in self._tasks]

    def add(
        self,
        duration: float,
        name: Optional[str] = None,
        due_date: Optional[float] = None,
        predecessor: Optional[str] = None,
        duplicate_policy: Optional[str] = None,
    ) -> Task:
        """
        Create a task and append it to the repository.

        A blank or missing name becomes the first free T{k}, counting up from
        T{n+1}. A given name that collides with an existing task is suffixed
        (-2, -3, ...) or rejected, depending on the duplicate name policy.

        Raises:
            ValidationError: if the task data is invalid or a duplicate is rejected.
        """
        requested = (name or "").strip()
        if requested:
            resolved = self._resolve_name(requested, duplicate_policy)
        else:
            resolved = self._auto_name()

        try:
            task = Task(
                name=resolved,
                duration=duration,
                due_date=due_date,
                predecessor=predecessor,
            )
        except pydantic.ValidationError as exc:
            errors = [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            ]
            raise ValidationError(
                f"invalid task '{resolved}': {'; '.join(errors)}",
                details={"name": resolved, "errors": errors},
            ) from exc

        total = sum(t.duration for t in self._tasks) + task.duration
        if not math.isfinite(total):
            raise ValidationError(
                f"invalid task '{resolved}': total duration overflows",
                details={"name": resolved, "errors": ["duration: total duration is not finite"]},
            )

        self._tasks.append(task)
        logger.debug("added task %s (duration=%s due=%s pred=%s)",
                     task.name, task.duration, task.due_date, task.predecessor)
        return task

    def add_task(self, task: Task, duplicate_policy: Optional[str] = None) -> Task:
        """Insert an existing Task record, applying the same name rules as add()."""
        return self.add(
            duration=task.duration,
            name=task.name,
            due_date=task.due_date,
            predecessor=task.predecessor,
            duplicate_policy=duplicate_policy,
        )

    def _auto_name(self) -> str:
        existing = set(self.names())
        k = len(self._tasks) + 1
        while f"T{k}" in existing:
            k += 1
        return f"T{k}"

    def _resolve_name(self, name: str, duplicate_policy: Optional[str]) -> str:
        existing = set(self.names())
        if name not in existing:
            return name

        policy = duplicate_policy or get_duplicate_name_policy()
        if policy == "reject":
            raise ValidationError(
                f"task name '{name}' already exists",
                details={"name": name},
            )

        suffix = 2
        while f"{name}-{suffix}" in existing:
            suffix += 1
        resolved = f"{name}-{suffix}"
        logger.info("task name '%s' already taken; using '%s'", name, resolved)
        return resolved

    def get(self, name: str) -> Task:
        for task in self._tasks:
            if task.name == name:
                return task
        raise TaskNotFoundError(f"task '{name}' not found", details={"name": name})

    def remove(self, name: str) -> None:
        """Remove the task with this name. Unknown names are ignored."""
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.name != name]
        if len(self._tasks) == before:
            logger.warning("remove: task '%s' not in repository; nothing removed", name)

    def remove_at(self, index: int) -> Task:
        """Remove the task at a display position and return it."""
        if not 0 <= index < len(self._tasks):
            raise TaskNotFoundError(
                f"no task at position {index} (have {len(self._tasks)})",
                details={"index": index},
            )
        return self._tasks.pop(index)

    def clear(self) -> None:
        self._tasks = []

    def load(self, tasks: Iterable[Task]) -> None:
        """
        Replace the repository contents with the given tasks.

        All tasks are validated against a scratch repository first, so a
        failure leaves the current contents untouched.
        """
        staged = TaskRepository()
        for task in tasks:
            staged.add_task(task)
        self._tasks = staged._tasks

    def list_tasks(self) -> list[Task]:
        return self.snapshot()

    def snapshot(self) -> list[Task]:
        """Return a copy of the tasks in insertion order."""
        return list(self._tasks)
