"""Shared fakes for the autograder tests."""

from __future__ import annotations

from typing import List, Tuple

import pytest

from autograder.core.session import RunSession


class FakeClock:
    """Manually advanced replacement for ``time.monotonic``."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingHud:
    def __init__(self) -> None:
        self.calls: List[Tuple] = []

    def set_level_info(self, index, title, description):
        self.calls.append(("set_level_info", index, title, description))

    def update_score(self, current, maximum):
        self.calls.append(("update_score", current, maximum))

    def update_time(self, elapsed, limit):
        self.calls.append(("update_time", elapsed, limit))

    def set_time_bonus(self, threshold, bonus, is_final):
        self.calls.append(("set_time_bonus", threshold, bonus, is_final))

    def set_max_time(self, limit):
        self.calls.append(("set_max_time", limit))

    def named(self, name: str) -> List[Tuple]:
        return [c for c in self.calls if c[0] == name]


class FakeTransitions:
    def __init__(self, level_count: int = 3) -> None:
        self.level_count = level_count
        self.finish_run_calls = 0
        self.advance_calls = 0

    def finish_run(self) -> None:
        self.finish_run_calls += 1

    def advance_to_next_level(self) -> None:
        self.advance_calls += 1


class FakeTelemetry:
    def __init__(self, speed: float = 0.0) -> None:
        self.current_speed = speed

    def speed(self) -> float:
        return self.current_speed


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def hud() -> RecordingHud:
    return RecordingHud()


@pytest.fixture()
def transitions() -> FakeTransitions:
    return FakeTransitions()


@pytest.fixture()
def telemetry() -> FakeTelemetry:
    return FakeTelemetry(speed=5.0)


@pytest.fixture()
def session() -> RunSession:
    return RunSession()
