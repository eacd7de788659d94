from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

from autograder.core.hud import AutograderHud
from autograder.core.levels import TimeBonus

logger = logging.getLogger(__name__)


class TimeBonusTracker:
    """Tracks which time-bonus window is active as a level's clock runs.

    The active window is the earliest one whose threshold has not been
    exceeded yet. The index only moves forward and stops at the last window,
    so an open-ended (infinite) final window is never left.
    """

    def __init__(self, bonuses: Optional[Sequence[TimeBonus]], time_limit: float) -> None:
        self._bonuses: Tuple[TimeBonus, ...] = tuple(bonuses) if bonuses else ()
        self._time_limit = time_limit
        self._index = 0

    @property
    def has_schedule(self) -> bool:
        return bool(self._bonuses)

    @property
    def index(self) -> int:
        """Index of the active window (0-based)."""
        return self._index

    @property
    def current(self) -> Optional[TimeBonus]:
        if not self._bonuses:
            return None
        return self._bonuses[self._index]

    @property
    def current_points(self) -> float:
        """Bonus for the active window, or 0 when there is no schedule."""
        bonus = self.current
        return bonus.points if bonus is not None else 0.0

    def show(self, hud: AutograderHud) -> None:
        """Push the active window (or the plain time limit) to the HUD."""
        bonus = self.current
        if bonus is None:
            hud.set_max_time(self._time_limit)
        elif bonus.is_final:
            hud.set_time_bonus(self._time_limit, bonus.points, True)
        else:
            hud.set_time_bonus(bonus.threshold, bonus.points, False)

    def advance(self, elapsed: float, hud: AutograderHud) -> bool:
        """Move past every window whose threshold ``elapsed`` exceeds.

        The HUD is told about each newly active window. Returns True if the
        active window changed.
        """
        changed = False
        while self._index < len(self._bonuses) - 1 and elapsed > self._bonuses[self._index].threshold:
            self._index += 1
            changed = True
            logger.debug("Time bonus window %d active at %.2f s", self._index, elapsed)
            self.show(hud)
        return changed
