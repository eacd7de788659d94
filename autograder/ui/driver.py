"""QTimer-based host loop for an autograder run."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal

from autograder.core.constants import AutograderConstants
from autograder.core.runner import AutograderRunner
from autograder.core.session import RunSummary

logger = logging.getLogger(__name__)


class TickDriver(QObject):
    """Ticks an :class:`AutograderRunner` from the Qt event loop."""

    run_finished = Signal(object)

    def __init__(
        self,
        runner: AutograderRunner,
        interval_ms: int = AutograderConstants.TICK_INTERVAL_MS,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._runner = runner
        self._skip_requested = False
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self.tick)
        runner.add_finished_callback(self._on_run_finished)

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        """Start the run and begin ticking."""
        self._runner.start()
        if not self._runner.is_finished:
            self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def request_skip(self) -> None:
        """Skip the current level on the next tick (bound to the skip key)."""
        self._skip_requested = True

    def tick(self) -> None:
        skip, self._skip_requested = self._skip_requested, False
        self._runner.tick(skip_requested=skip)

    def _on_run_finished(self, summary: RunSummary) -> None:
        self._timer.stop()
        logger.info("Stopped ticking, run finished")
        self.run_finished.emit(summary)
