"""XP-to-level curve and level progress. Pure functions, no side effects.

Level spans grow in brackets. Level 1 starts at 0 XP; every later threshold
is the sum of the spans below it:

    level 1          150 XP
    levels 2-9       200 XP each
    levels 10-19     500 XP each
    levels 20-29   1,000 XP each
    levels 30-49   5,000 XP each
    levels 50-89  10,000 XP each
    levels 90-99  50,000 XP each

Level 100 is the cap. XP past its threshold keeps the user at level 100.
"""

from __future__ import annotations

import bisect
import logging
import math
from dataclasses import asdict, dataclass

log = logging.getLogger(__name__)

MAX_LEVEL = 100

# Returned by get_xp_for_next_level() once MAX_LEVEL is reached.
NO_NEXT_LEVEL = 0

# (first_level, last_level, span) - contiguous over [1, MAX_LEVEL - 1]
LEVEL_BRACKETS: list[tuple[int, int, int]] = [
    (1, 1, 150),
    (2, 9, 200),
    (10, 19, 500),
    (20, 29, 1_000),
    (30, 49, 5_000),
    (50, 89, 10_000),
    (90, 99, 50_000),
]


def _build_thresholds() -> tuple[int, ...]:
    thresholds = [0]
    for first, last, span in LEVEL_BRACKETS:
        for _ in range(first, last + 1):
            thresholds.append(thresholds[-1] + span)
    return tuple(thresholds)


# LEVEL_THRESHOLDS[L - 1] is the total XP needed to enter level L.
LEVEL_THRESHOLDS: tuple[int, ...] = _build_thresholds()

XP_CAP: int = LEVEL_THRESHOLDS[MAX_LEVEL - 1]


@dataclass(frozen=True)
class LevelProgress:
    """Where a user stands inside their current level."""

    current_level: int
    progress_xp: int
    level_total_xp: int
    percentage: float
    xp_needed: int

    @property
    def is_max_level(self) -> bool:
        return self.current_level >= MAX_LEVEL

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class LevelUp:
    leveled_up: bool
    old_level: int
    new_level: int
    levels_gained: int


def clamp_xp(xp: int | float) -> int:
    """Coerce to a non-negative int, logging anything that had to change."""
    if isinstance(xp, float):
        if not math.isfinite(xp):
            log.warning("Non-finite XP value %r, treating as 0", xp)
            return 0
        xp = math.floor(xp)
    value = int(xp)
    if value < 0:
        log.warning("Negative XP value %d clamped to 0", value)
        return 0
    return value


def _clamp_level(level: int) -> int:
    value = int(level)
    if value < 1 or value > MAX_LEVEL:
        clamped = max(1, min(value, MAX_LEVEL))
        log.warning("Level %d outside [1, %d], clamped to %d", value, MAX_LEVEL, clamped)
        return clamped
    return value


def xp_required_for_level(level: int) -> int:
    """Total XP needed to enter a level. Level 1 needs 0."""
    return LEVEL_THRESHOLDS[_clamp_level(level) - 1]


def level_span(level: int) -> int:
    """XP between entering a level and entering the next one (0 at MAX_LEVEL)."""
    level = _clamp_level(level)
    if level >= MAX_LEVEL:
        return 0
    return LEVEL_THRESHOLDS[level] - LEVEL_THRESHOLDS[level - 1]


def calculate_level(xp: int | float) -> int:
    """Given total XP, return the current level (1-100, capped at 100)."""
    xp = clamp_xp(xp)
    return bisect.bisect_right(LEVEL_THRESHOLDS, xp)


def get_xp_for_next_level(xp: int | float) -> int:
    """XP still needed to reach the next level, or NO_NEXT_LEVEL at the cap."""
    xp = clamp_xp(xp)
    level = calculate_level(xp)
    if level >= MAX_LEVEL:
        return NO_NEXT_LEVEL
    return LEVEL_THRESHOLDS[level] - xp


def get_level_progress(xp: int | float) -> LevelProgress:
    """Return progress inside the current level.

    At MAX_LEVEL there is no next threshold: level_total_xp equals
    progress_xp and the percentage is pinned at 100.
    """
    xp = clamp_xp(xp)
    level = calculate_level(xp)
    progress_xp = xp - LEVEL_THRESHOLDS[level - 1]

    if level >= MAX_LEVEL:
        return LevelProgress(
            current_level=level,
            progress_xp=progress_xp,
            level_total_xp=progress_xp,
            percentage=100.0,
            xp_needed=NO_NEXT_LEVEL,
        )

    level_total_xp = LEVEL_THRESHOLDS[level] - LEVEL_THRESHOLDS[level - 1]
    percentage = min(100.0, progress_xp * 100 / level_total_xp)
    return LevelProgress(
        current_level=level,
        progress_xp=progress_xp,
        level_total_xp=level_total_xp,
        percentage=percentage,
        xp_needed=level_total_xp - progress_xp,
    )


def check_level_up(old_xp: int | float, new_xp: int | float) -> LevelUp:
    """Compare levels before and after an XP change."""
    old_level = calculate_level(old_xp)
    new_level = calculate_level(new_xp)
    return LevelUp(
        leveled_up=new_level > old_level,
        old_level=old_level,
        new_level=new_level,
        levels_gained=max(0, new_level - old_level),
    )
