"""Normalised user stats.

Records arrive with XP under ``total_xp`` or the legacy ``xp`` key. They are
normalised once here so callers read a single field.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from prodigy_levels.levels import LevelProgress, calculate_level, get_level_progress
from prodigy_levels.tiers import get_level_color, get_level_title

log = logging.getLogger(__name__)


def _coerce_xp(raw: Any) -> int:
    """Read an XP field as a non-negative int. Unreadable values become 0."""
    if raw is None or raw == "":
        return 0
    try:
        value = int(raw)
    except (TypeError, ValueError, OverflowError):
        try:
            number = float(raw)
        except (TypeError, ValueError):
            log.warning("Unreadable XP value %r, treating as 0", raw)
            return 0
        if not math.isfinite(number):
            log.warning("Non-finite XP value %r, treating as 0", raw)
            return 0
        value = math.floor(number)
    return max(0, value)


@dataclass(frozen=True)
class UserStats:
    user_id: int | None
    username: str
    total_xp: int

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "UserStats":
        """Build from a DB row or API payload."""
        raw_xp = record.get("total_xp")
        if raw_xp is None:
            raw_xp = record.get("xp")
        return cls(
            user_id=record.get("id"),
            username=str(record.get("username") or ""),
            total_xp=_coerce_xp(raw_xp),
        )

    @property
    def level(self) -> int:
        return calculate_level(self.total_xp)

    @property
    def title(self) -> str:
        return get_level_title(self.level)

    @property
    def color(self) -> str:
        return get_level_color(self.level)

    @property
    def progress(self) -> LevelProgress:
        return get_level_progress(self.total_xp)

    def to_dict(self) -> dict:
        progress = self.progress
        return {
            "id": self.user_id,
            "username": self.username,
            "total_xp": self.total_xp,
            "level": self.level,
            "title": self.title,
            "color": self.color,
            "progress_xp": progress.progress_xp,
            "level_total_xp": progress.level_total_xp,
            "percentage": progress.percentage,
            "xp_needed": progress.xp_needed,
        }
