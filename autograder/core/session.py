from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from autograder.core.controller import LevelRunController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelScore:
    """Score and elapsed time recorded for one level attempt."""

    score: float
    time: float


@dataclass
class RunSummary:
    """Outcome of an autograder run, read by the summary screen once the run ends."""

    level_scores: List[LevelScore] = field(default_factory=list)
    was_error: bool = False
    was_required_level_failed: bool = False

    @property
    def total_score(self) -> float:
        return sum(entry.score for entry in self.level_scores)

    @property
    def total_time(self) -> float:
        return sum(entry.time for entry in self.level_scores)


class RunSession:
    """Run-scoped autograder state shared by consecutive level controllers.

    Holds the index of the level being attempted, one :class:`LevelScore` per
    attempted level, the accumulated time penalty and the run summary flags.
    At most one :class:`LevelRunController` is active at a time.
    """

    def __init__(self) -> None:
        self.level_index = 0
        self.time_penalty = 0.0
        self.summary = RunSummary()
        self._active_level: Optional[LevelRunController] = None

    @property
    def level_scores(self) -> List[LevelScore]:
        """Scores of every level attempted in this run, in order."""
        return self.summary.level_scores

    @property
    def active_level(self) -> Optional[LevelRunController]:
        return self._active_level

    def reset(self) -> None:
        """Start a fresh run: back to the first level with no recorded scores."""
        if self._active_level is not None:
            logger.warning("Run reset while level %d is still active, abandoning it", self.level_index)
            self._active_level.abandon()
        self.level_index = 0
        self.time_penalty = 0.0
        self.summary = RunSummary()
        self._active_level = None

    def record(self, score: float, time: float) -> LevelScore:
        entry = LevelScore(score=score, time=time)
        self.summary.level_scores.append(entry)
        return entry

    def add_time_penalty(self, seconds: float) -> None:
        """Add seconds to the elapsed time of the active level."""
        if seconds < 0:
            raise ValueError(f"Time penalty must not be negative, got {seconds}")
        self.time_penalty += seconds

    def begin_level(self, controller: LevelRunController) -> None:
        """Make ``controller`` the active level. Only one may be active at a time."""
        if self._active_level is not None and self._active_level is not controller:
            raise RuntimeError(f"Level {self.level_index} already has an active controller")
        if self._active_level is None:
            self.time_penalty = 0.0
        self._active_level = controller

    def end_level(self, controller: LevelRunController) -> None:
        if self._active_level is controller:
            self._active_level = None
