"""Tasks that make up an autograder level.

A task only decides *when* it is complete. Scoring and ordering belong to the
level controller, which enables one task at a time and is told about
completion through ``complete_task(task)``.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class TaskListener(Protocol):
    def complete_task(self, task: "Task") -> bool: ...


class Task(Protocol):
    points: float

    def attach(self, listener: TaskListener) -> None: ...

    def enable(self) -> None: ...

    def disable(self) -> None: ...

    def update(self) -> None: ...


class BaseTask:
    """Enable/disable bookkeeping shared by the task variants."""

    def __init__(self, points: float, name: Optional[str] = None) -> None:
        self.points = float(points)
        self.name = name or type(self).__name__
        self._enabled = False
        self._listener: Optional[TaskListener] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, points={self.points})"

    @property
    def enabled(self) -> bool:
        return self._enabled

    def attach(self, listener: TaskListener) -> None:
        self._listener = listener

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        self._enabled = False

    def update(self) -> None:
        """Called once per tick while this is the active task."""

    def complete(self) -> bool:
        """Report this task as complete. Returns True if the controller accepted it."""
        if self._listener is None:
            logger.error("[%s::complete] Task %r is not attached to a level, completion ignored.", type(self).__name__, self)
            return False
        return self._listener.complete_task(self)


class ManualTask(BaseTask):
    """Completed by the host calling :meth:`complete` (e.g. from a trigger callback)."""


class ConditionTask(BaseTask):
    """Completes itself on the first update where ``condition()`` is true."""

    def __init__(self, points: float, condition: Callable[[], bool], name: Optional[str] = None) -> None:
        super().__init__(points, name)
        self._condition = condition

    def update(self) -> None:
        if self._enabled and self._condition():
            self.complete()
