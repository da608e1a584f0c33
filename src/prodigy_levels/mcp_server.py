"""MCP server for prodigy-levels.

Exposes the leveling engine and stored user levels as MCP tools.
Run via: python3 -m prodigy_levels.mcp_server
"""
from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from prodigy_levels.errors import ProdigyError
from prodigy_levels.levels import MAX_LEVEL, get_level_progress, level_span, xp_required_for_level
from prodigy_levels.stats import UserStats
from prodigy_levels.tiers import TIERS, get_level_color, get_level_title

log = logging.getLogger(__name__)

mcp = FastMCP(name="prodigy-levels")


def _get_db():
    from prodigy_levels.config import get_db_path
    from prodigy_levels.db import Database
    return Database(get_db_path())


@mcp.tool()
def get_level(xp: int) -> dict[str, Any]:
    """Get level, title, colour and progress for an XP total."""
    progress = get_level_progress(xp)
    level = progress.current_level
    return {
        **progress.to_dict(),
        "is_max_level": progress.is_max_level,
        "title": get_level_title(level),
        "color": get_level_color(level),
    }


@mcp.tool()
def get_level_table() -> dict[str, Any]:
    """Get every tier with its level range and XP thresholds."""
    tiers = []
    for tier in TIERS:
        low, high = tier["levels"]
        tiers.append({
            "tier": tier["tier"], "name": tier["name"], "color": tier["color"],
            "min_level": low, "max_level": high,
            "starts_at_xp": xp_required_for_level(low),
            "xp_per_level": level_span(low),
        })
    return {"tiers": tiers, "max_level": MAX_LEVEL, "xp_cap": xp_required_for_level(MAX_LEVEL)}


@mcp.tool()
def get_user_level(username: str) -> dict[str, Any]:
    """Get a stored user's XP total and computed level."""
    db = _get_db()
    try:
        return UserStats.from_record(db.get_user_by_username(username)).to_dict()
    except ProdigyError as exc:
        log.info("get_user_level failed: %s", exc)
        return {"error": str(exc)}
    finally:
        db.close()


@mcp.tool()
def get_badge(username: str) -> dict[str, Any]:
    """Generate an SVG badge string showing a user's level."""
    db = _get_db()
    try:
        from prodigy_levels.badge import generate_badge_svg
        stats = UserStats.from_record(db.get_user_by_username(username))
        svg = generate_badge_svg(
            level=stats.level, title=stats.title, color=stats.color, total_xp=stats.total_xp,
        )
        return {"svg": svg, "level": stats.level, "title": stats.title, "total_xp": stats.total_xp}
    except ProdigyError as exc:
        log.info("get_badge failed: %s", exc)
        return {"error": str(exc)}
    finally:
        db.close()


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
