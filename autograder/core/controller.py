from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, Optional, Protocol, Sequence, Tuple, cast

from autograder.core.bonus import TimeBonusTracker
from autograder.core.constants import AutograderConstants
from autograder.core.hud import AutograderHud
from autograder.core.levels import LevelInfo
from autograder.core.session import RunSession
from autograder.core.tasks import Task

logger = logging.getLogger(__name__)


class LevelState(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    FINISHED = "finished"
    ERRORED = "errored"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self is not LevelState.NOT_STARTED and self is not LevelState.RUNNING


class Telemetry(Protocol):
    def speed(self) -> float:
        """Current speed magnitude of the car in m/s."""
        ...


class LevelTransitions(Protocol):
    @property
    def level_count(self) -> int: ...

    def finish_run(self) -> None: ...

    def advance_to_next_level(self) -> None: ...


class LevelRunController:
    """Runs one timed autograder level.

    Tasks are completed strictly in order; each accepted completion credits the
    task's points. A periodic :meth:`tick` advances the clock, the time bonus
    window and the end-of-level checks. The level is finalized exactly once,
    after which the run either ends or moves on to the next level through
    ``transitions``.

    Misuse (completing a task that is not active, finishing twice) is logged
    and rejected without touching the recorded state.
    """

    def __init__(
        self,
        session: RunSession,
        level_info: LevelInfo,
        tasks: Sequence[Task],
        transitions: LevelTransitions,
        telemetry: Optional[Telemetry] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not tasks:
            raise ValueError(f"Level '{level_info.title}' has no tasks")
        if level_info.do_not_proceed_until_stopped and telemetry is None:
            raise ValueError(f"Level '{level_info.title}' waits for the car to stop but no telemetry was given")

        self._session = session
        self._level_index = session.level_index
        self._level_info = level_info
        self._tasks: Tuple[Task, ...] = tuple(tasks)
        self._transitions = transitions
        self._telemetry = telemetry
        self._clock = clock

        self._hud: Optional[AutograderHud] = None
        self._start_time: Optional[float] = None
        self._task_index = 0
        self._score = 0.0
        self._state = LevelState.NOT_STARTED
        self._bonus = TimeBonusTracker(level_info.time_bonuses, level_info.time_limit)

        for task in self._tasks:
            task.attach(self)
        session.begin_level(self)

    @property
    def level_index(self) -> int:
        return self._level_index

    @property
    def level_info(self) -> LevelInfo:
        return self._level_info

    @property
    def state(self) -> LevelState:
        return self._state

    @property
    def score(self) -> float:
        return self._score

    @property
    def start_time(self) -> Optional[float]:
        return self._start_time

    @property
    def task_index(self) -> int:
        return self._task_index

    @property
    def task_count(self) -> int:
        return len(self._tasks)

    @property
    def all_tasks_complete(self) -> bool:
        return self._task_index >= len(self._tasks)

    @property
    def current_task(self) -> Optional[Task]:
        """The task that must be completed next, or None once all are done."""
        if self.all_tasks_complete:
            return None
        return self._tasks[self._task_index]

    @property
    def bonus_index(self) -> int:
        return self._bonus.index

    def elapsed(self) -> float:
        """Seconds since :meth:`handle_start`, including the level's time penalty."""
        if self._start_time is None:
            return 0.0
        return self._time_since_start() + self._session.time_penalty

    def _time_since_start(self) -> float:
        if self._start_time is None:
            return 0.0
        return self._clock() - self._start_time

    def handle_start(self, hud: AutograderHud) -> bool:
        """Start the level clock, initialize the HUD and enable the first task."""
        if self._state is not LevelState.NOT_STARTED:
            logger.error("handle_start called for level '%s' in state %s, ignored.", self._level_info.title, self._state.value)
            return False

        info = self._level_info
        self._start_time = self._clock()
        self._hud = hud
        self._state = LevelState.RUNNING

        hud.set_level_info(self._level_index, info.title, info.description)
        hud.update_score(self._score, info.max_points)
        hud.update_time(0.0, info.time_limit)
        self._bonus.show(hud)

        self._tasks[0].enable()
        logger.info("Started level %d '%s' with %d task(s)", self._level_index, info.title, len(self._tasks))
        return True

    def complete_task(self, task: Task) -> bool:
        """Register that ``task`` was completed.

        Only the active task is accepted; anything else is logged and ignored.
        Returns True if the completion was accepted.
        """
        if self._state is not LevelState.RUNNING:
            logger.error(
                "complete_task called for task %r while level '%s' is %s. No action taken.",
                task, self._level_info.title, self._state.value,
            )
            return False
        if task is not self.current_task:
            logger.error("complete_task called for task %r, but this is not the active task. No action taken.", task)
            return False

        task.disable()
        self._score += task.points
        cast(AutograderHud, self._hud).update_score(self._score, self._level_info.max_points)
        self._task_index += 1

        if not self.all_tasks_complete:
            self._tasks[self._task_index].enable()
        elif self._level_info.do_not_proceed_until_stopped:
            logger.info("All tasks complete on level '%s', waiting for the car to stop", self._level_info.title)
        else:
            self._finish_level()
        return True

    def tick(self, skip_requested: bool = False) -> None:
        """Advance time-dependent state; called once per frame by the host."""
        if self._state is not LevelState.RUNNING:
            return

        task = self.current_task
        if task is not None:
            task.update()
            # The update may have completed the last task and finished the level.
            if self._state is not LevelState.RUNNING:
                return

        hud = cast(AutograderHud, self._hud)
        info = self._level_info
        elapsed = self.elapsed()
        hud.update_time(elapsed, info.time_limit)
        self._bonus.advance(elapsed, hud)

        if elapsed > info.time_limit:
            logger.info("Level '%s' ran out of time after %.2f s", info.title, elapsed)
            self._finish_level()
        elif info.do_not_proceed_until_stopped and self.all_tasks_complete and self._is_stopped():
            logger.info("Car stopped after completing level '%s'", info.title)
            self._finish_level()
        elif skip_requested:
            logger.info("Level '%s' skipped", info.title)
            self._finish_level()

    def handle_failure(self) -> bool:
        """End the level now, e.g. when the car leaves the track."""
        return self._finish_level()

    def handle_error(self) -> bool:
        """Record the level as-is and flag the run as errored.

        Unlike a normal finish this neither awards a time bonus nor decides
        the next step of the run; the caller is expected to end the run.
        """
        if self._state.is_terminal:
            logger.error("handle_error called for level '%s' which already ended (%s), ignored.", self._level_info.title, self._state.value)
            return False
        if self._start_time is None:
            logger.warning("handle_error called before level '%s' was started, recording zero elapsed time", self._level_info.title)

        self._state = LevelState.ERRORED
        # The time penalty only counts towards levels that finish normally.
        entry = self._session.record(self._score, self._time_since_start())
        self._session.summary.was_error = True
        self._session.end_level(self)
        logger.warning("Level %d '%s' ended with an error (score %.2f, time %.2f s)", self._level_index, self._level_info.title, entry.score, entry.time)
        return True

    def abandon(self) -> bool:
        """Drop the level without recording anything, e.g. when the run is restarted.

        The active task is disabled and later completions, ticks and
        failures are rejected.
        """
        if self._state.is_terminal:
            return False
        task = self.current_task
        if task is not None and self._state is LevelState.RUNNING:
            task.disable()
        self._state = LevelState.ABANDONED
        self._session.end_level(self)
        logger.info("Abandoned level %d '%s'", self._level_index, self._level_info.title)
        return True

    def _is_stopped(self) -> bool:
        return cast(Telemetry, self._telemetry).speed() < AutograderConstants.MAX_STOP_SPEED

    def _finish_level(self) -> bool:
        info = self._level_info
        if self._state.is_terminal:
            # Loading the next level can take several frames, so late triggers are expected to land here.
            logger.error("Attempted to finish level '%s' twice, second call ignored.", info.title)
            return False
        if self._state is LevelState.NOT_STARTED:
            logger.error("Attempted to finish level '%s' before it was started, call ignored.", info.title)
            return False

        self._state = LevelState.FINISHED

        if self.all_tasks_complete and self._bonus.has_schedule:
            self._score += self._bonus.current_points
            cast(AutograderHud, self._hud).update_score(self._score, info.max_points)

        entry = self._session.record(self._score, self.elapsed())
        self._session.end_level(self)
        logger.info("Finished level %d '%s': score %.2f / %.2f in %.2f s", self._level_index, info.title, entry.score, info.max_points, entry.time)

        if self._level_index == self._transitions.level_count - 1:
            self._transitions.finish_run()
        elif info.is_required and self._score < info.max_points:
            logger.info("Required level '%s' failed, ending run", info.title)
            self._session.summary.was_required_level_failed = True
            self._transitions.finish_run()
        else:
            self._session.level_index += 1
            self._transitions.advance_to_next_level()
        return True
