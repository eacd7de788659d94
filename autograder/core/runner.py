from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Sequence

from autograder.core.controller import LevelRunController, Telemetry
from autograder.core.hud import AutograderHud
from autograder.core.levels import LevelInfo
from autograder.core.session import RunSession, RunSummary
from autograder.core.tasks import Task

logger = logging.getLogger(__name__)

TaskFactory = Callable[[int, LevelInfo], Sequence[Task]]


class AutograderRunner:
    """Plays the levels of one lab back to back.

    The runner is the transition target of every :class:`LevelRunController`
    it creates: when a level finishes it either starts the next one with a
    fresh set of tasks or ends the run.
    """

    def __init__(
        self,
        levels: Sequence[LevelInfo],
        task_factory: TaskFactory,
        hud: AutograderHud,
        telemetry: Optional[Telemetry] = None,
        clock: Callable[[], float] = time.monotonic,
        session: Optional[RunSession] = None,
    ) -> None:
        if not levels:
            raise ValueError("An autograder run needs at least one level")
        self._levels = list(levels)
        self._task_factory = task_factory
        self._hud = hud
        self._telemetry = telemetry
        self._clock = clock
        self.session = session or RunSession()
        self._controller: Optional[LevelRunController] = None
        self._finished = False
        self._finished_callbacks: List[Callable[[RunSummary], None]] = []

    @property
    def level_count(self) -> int:
        return len(self._levels)

    @property
    def controller(self) -> Optional[LevelRunController]:
        """Controller of the level being played (or the last one, once finished)."""
        return self._controller

    @property
    def is_finished(self) -> bool:
        return self._finished

    def add_finished_callback(self, callback: Callable[[RunSummary], None]) -> None:
        self._finished_callbacks.append(callback)

    def start(self) -> None:
        """Reset the session and start the first level."""
        self.session.reset()
        self._finished = False
        logger.info("Starting autograder run with %d level(s)", len(self._levels))
        self._start_level()

    def tick(self, skip_requested: bool = False) -> None:
        if self._finished or self._controller is None:
            return
        self._controller.tick(skip_requested)

    def add_time_penalty(self, seconds: float) -> None:
        self.session.add_time_penalty(seconds)

    def handle_failure(self) -> bool:
        if self._controller is None:
            logger.error("handle_failure called before the run was started, ignored.")
            return False
        return self._controller.handle_failure()

    def handle_error(self) -> bool:
        """Record the active level as errored and end the run."""
        if self._controller is None:
            logger.error("handle_error called before the run was started, ignored.")
            return False
        if not self._controller.handle_error():
            return False
        self.finish_run()
        return True

    def advance_to_next_level(self) -> None:
        self._start_level()

    def finish_run(self) -> None:
        if self._finished:
            logger.error("finish_run called twice for the same run, second call ignored.")
            return
        self._finished = True
        summary = self.session.summary
        logger.info(
            "Autograder run finished: %d level(s), total score %.2f, total time %.2f s%s%s",
            len(summary.level_scores),
            summary.total_score,
            summary.total_time,
            ", required level failed" if summary.was_required_level_failed else "",
            ", error" if summary.was_error else "",
        )
        for callback in list(self._finished_callbacks):
            callback(summary)

    def _start_level(self) -> None:
        index = self.session.level_index
        level_info = self._levels[index]
        tasks = self._task_factory(index, level_info)
        self._controller = LevelRunController(
            self.session,
            level_info,
            tasks,
            transitions=self,
            telemetry=self._telemetry,
            clock=self._clock,
        )
        self._controller.handle_start(self._hud)
