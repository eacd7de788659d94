from __future__ import annotations

import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Tuple

import yaml


@dataclass(frozen=True)
class TimeBonus:
    """Points awarded for finishing a level before ``threshold`` seconds."""

    threshold: float
    points: float

    @property
    def is_final(self) -> bool:
        """True for the open-ended last window, which ends at the level time limit."""
        return math.isinf(self.threshold)


@dataclass(frozen=True)
class LevelInfo:
    title: str
    description: str
    max_points: float
    time_limit: float
    time_bonuses: Optional[Tuple[TimeBonus, ...]] = None
    is_required: bool = False
    do_not_proceed_until_stopped: bool = False


class LevelRepository:
    """Ordered autograder levels loaded from ``level<N>.yaml`` files."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = base_dir or Path(__file__).resolve().parent.parent / "data" / "levels"
        self._levels = self._load_levels()

    def __len__(self) -> int:
        return len(self._levels)

    def all(self) -> List[LevelInfo]:
        return list(self._levels)

    def get(self, index: int) -> LevelInfo:
        return self._levels[index]

    def _load_levels(self) -> List[LevelInfo]:
        base_dir = self._base_dir
        if not base_dir.exists():
            raise FileNotFoundError(f"Levels directory not found: {base_dir}")

        def _sort_key(p: Path) -> tuple[int, str]:
            m = re.match(r"^level(\d+)$", p.stem)
            if m:
                return (int(m.group(1)), p.stem)
            return (10**9, p.stem)

        levels: List[LevelInfo] = []
        for level_path in sorted(base_dir.glob("level*.yaml"), key=_sort_key):
            raw = yaml.safe_load(level_path.read_text(encoding="utf-8"))
            if not raw or not isinstance(raw, dict):
                raise ValueError(f"{level_path.name}: expected YAML mapping with 'title', 'max_points' and 'time_limit'")
            levels.append(parse_level(raw, level_path.name))

        if not levels:
            raise ValueError(f"No level files (level*.yaml) found in {base_dir}")
        return levels


def parse_level(raw: dict, source: str = "<level>") -> LevelInfo:
    """Build a :class:`LevelInfo` from one parsed YAML mapping.

    ``source`` is only used to prefix error messages.
    """
    title = raw.get("title")
    if not title or not isinstance(title, str):
        raise ValueError(f"{source}: missing or invalid 'title'")
    description = raw.get("description") or ""
    if not isinstance(description, str):
        raise ValueError(f"{source}: 'description' must be a string")

    max_points = _number(raw, "max_points", source)
    time_limit = _number(raw, "time_limit", source)
    if time_limit <= 0 or math.isinf(time_limit):
        raise ValueError(f"{source}: 'time_limit' must be a positive, finite number")

    return LevelInfo(
        title=title.strip(),
        description=description.strip(),
        max_points=max_points,
        time_limit=time_limit,
        time_bonuses=_parse_time_bonuses(raw.get("time_bonuses"), source),
        is_required=bool(raw.get("is_required", False)),
        do_not_proceed_until_stopped=bool(raw.get("do_not_proceed_until_stopped", False)),
    )


def _number(raw: dict, key: str, source: str) -> float:
    value = raw.get(key)
    if value is None:
        raise ValueError(f"{source}: missing '{key}'")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{source}: '{key}' must be a number")
    return float(value)


def _parse_time_bonuses(value: Any, source: str) -> Optional[Tuple[TimeBonus, ...]]:
    if value is None:
        return None
    if not isinstance(value, list) or not value:
        raise ValueError(f"{source}: 'time_bonuses' must be a non-empty list of [threshold, points] pairs")

    bonuses: List[TimeBonus] = []
    for i, item in enumerate(value):
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise ValueError(f"{source}: time_bonuses[{i}] must be a [threshold, points] pair")
        threshold, points = item
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
            raise ValueError(f"{source}: time_bonuses[{i}] threshold must be a number")
        if isinstance(points, bool) or not isinstance(points, (int, float)):
            raise ValueError(f"{source}: time_bonuses[{i}] points must be a number")
        bonus = TimeBonus(threshold=float(threshold), points=float(points))
        if bonus.is_final and i != len(value) - 1:
            raise ValueError(f"{source}: only the last time bonus may use an infinite threshold")
        if bonuses and bonus.threshold <= bonuses[-1].threshold:
            raise ValueError(f"{source}: time bonus thresholds must be strictly increasing")
        bonuses.append(bonus)
    return tuple(bonuses)
