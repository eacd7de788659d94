"""HUD sink interface and a headless implementation."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class AutograderHud(Protocol):
    """One-way display sink. The controller never reads anything back."""

    def set_level_info(self, index: int, title: str, description: str) -> None: ...

    def update_score(self, current: float, maximum: float) -> None: ...

    def update_time(self, elapsed: float, limit: float) -> None: ...

    def set_time_bonus(self, threshold: float, bonus: float, is_final: bool) -> None: ...

    def set_max_time(self, limit: float) -> None: ...


class LoggingHud:
    """HUD for headless runs: writes every update to the log at DEBUG level."""

    def set_level_info(self, index: int, title: str, description: str) -> None:
        logger.debug("Level %d: %s (%s)", index, title, description)

    def update_score(self, current: float, maximum: float) -> None:
        logger.debug("Score %.2f / %.2f", current, maximum)

    def update_time(self, elapsed: float, limit: float) -> None:
        logger.debug("Time %.2f / %.2f", elapsed, limit)

    def set_time_bonus(self, threshold: float, bonus: float, is_final: bool) -> None:
        logger.debug("Time bonus %+.2f before %.2f s%s", bonus, threshold, " (final)" if is_final else "")

    def set_max_time(self, limit: float) -> None:
        logger.debug("Max time %.2f s", limit)
