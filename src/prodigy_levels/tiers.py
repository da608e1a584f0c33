"""Level titles and colour tokens.

Colour tokens are gradient pairs in Tailwind class form. They are opaque
here; display.py and badge.py decide how to render them.
"""

from __future__ import annotations

import logging

from prodigy_levels.levels import MAX_LEVEL

log = logging.getLogger(__name__)

TIERS: list[dict] = [
    {"tier": 1, "levels": (1, 4), "name": "Novice", "color": "from-gray-400 to-gray-500"},
    {"tier": 2, "levels": (5, 9), "name": "Beginner", "color": "from-green-400 to-green-500"},
    {"tier": 3, "levels": (10, 19), "name": "Developing", "color": "from-blue-400 to-blue-500"},
    {"tier": 4, "levels": (20, 29), "name": "Intermediate", "color": "from-yellow-500 to-green-500"},
    {"tier": 5, "levels": (30, 39), "name": "Experienced", "color": "from-green-500 to-blue-500"},
    {"tier": 6, "levels": (40, 49), "name": "Senior", "color": "from-blue-500 to-indigo-500"},
    {"tier": 7, "levels": (50, 59), "name": "Professional", "color": "from-indigo-500 to-purple-500"},
    {"tier": 8, "levels": (60, 69), "name": "Advanced", "color": "from-purple-500 to-purple-600"},
    {"tier": 9, "levels": (70, 79), "name": "Expert", "color": "from-orange-500 to-red-500"},
    {"tier": 10, "levels": (80, 89), "name": "Master", "color": "from-red-500 to-pink-500"},
    {"tier": 11, "levels": (90, 99), "name": "Grandmaster", "color": "from-yellow-500 to-orange-500"},
    {"tier": 12, "levels": (100, 100), "name": "Legendary Master", "color": "from-purple-600 to-pink-600"},
]


def tier_from_level(level: int) -> dict:
    """Return the tier row for a level. Out-of-range levels are clamped."""
    value = int(level)
    if value < 1 or value > MAX_LEVEL:
        log.warning("Level %d outside [1, %d] for tier lookup, clamping", value, MAX_LEVEL)
        value = max(1, min(value, MAX_LEVEL))
    for tier in TIERS:
        low, high = tier["levels"]
        if low <= value <= high:
            return tier
    return TIERS[-1]


def get_level_title(level: int) -> str:
    return tier_from_level(level)["name"]


def get_level_color(level: int) -> str:
    return tier_from_level(level)["color"]
