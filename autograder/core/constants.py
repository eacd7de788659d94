"""Tunable constants for the autograder."""


class AutograderConstants:
    """Values shared by the level controller and the Qt driver."""

    # Below this speed (m/s) the car counts as stopped.
    MAX_STOP_SPEED = 0.1

    # Interval between controller ticks when driven by a QTimer.
    TICK_INTERVAL_MS = 16
