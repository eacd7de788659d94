"""Entry points for running the autograder under a Qt event loop."""

import logging
import sys
from typing import Optional, Sequence

from PySide6.QtCore import QCoreApplication

from autograder.core.controller import Telemetry
from autograder.core.hud import AutograderHud, LoggingHud
from autograder.core.levels import LevelInfo, LevelRepository
from autograder.core.runner import AutograderRunner, TaskFactory
from autograder.ui.driver import TickDriver


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run(
    task_factory: TaskFactory,
    telemetry: Optional[Telemetry] = None,
    hud: Optional[AutograderHud] = None,
    levels: Optional[Sequence[LevelInfo]] = None,
) -> int:
    """Play a lab from a Qt event loop until the run finishes.

    Levels default to the bundled ``data/levels`` files and the HUD to a
    :class:`LoggingHud`. Reuses the running Qt application if there is one.
    Returns the event loop's exit code.
    """
    configure_logging()
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)

    if levels is None:
        levels = LevelRepository().all()
    runner = AutograderRunner(levels, task_factory, hud or LoggingHud(), telemetry=telemetry)

    driver = TickDriver(runner)
    driver.run_finished.connect(lambda _summary: app.quit())
    driver.start()
    if runner.is_finished:
        return 0

    logging.info("Autograder running %d level(s), ticking every %d ms", runner.level_count, driver.interval_ms)
    return app.exec()
