"""Qt bridge for the autograder HUD."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject, Signal


class QtHud(QObject):
    """HUD sink that re-emits every update as a Qt signal.

    Widgets connect to the signals they care about; the controller only ever
    calls the plain methods below.
    """

    level_info_changed = Signal(int, str, str)
    score_changed = Signal(float, float)
    time_changed = Signal(float, float)
    time_bonus_changed = Signal(float, float, bool)
    max_time_changed = Signal(float)

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)

    def set_level_info(self, index: int, title: str, description: str) -> None:
        self.level_info_changed.emit(index, title, description)

    def update_score(self, current: float, maximum: float) -> None:
        self.score_changed.emit(float(current), float(maximum))

    def update_time(self, elapsed: float, limit: float) -> None:
        self.time_changed.emit(float(elapsed), float(limit))

    def set_time_bonus(self, threshold: float, bonus: float, is_final: bool) -> None:
        self.time_bonus_changed.emit(float(threshold), float(bonus), bool(is_final))

    def set_max_time(self, limit: float) -> None:
        self.max_time_changed.emit(float(limit))
