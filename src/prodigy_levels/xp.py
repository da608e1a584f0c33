"""XP awards for completed projects.

Awards add to a user's stored XP total. The level is recomputed from the
new total and a ``level_up`` activity entry is written when it rises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from prodigy_levels.db import Database
from prodigy_levels.errors import InvalidXPAmountError, XPRewardOutOfRangeError
from prodigy_levels.levels import LevelProgress, check_level_up, get_level_progress
from prodigy_levels.stats import UserStats

log = logging.getLogger(__name__)

# Project difficulty -> (min, max) XP a project may award
XP_LIMITS: dict[str, tuple[int, int]] = {
    "beginner": (50, 100),
    "intermediate": (100, 300),
    "advanced": (300, 600),
    "expert": (600, 1000),
}

DEFAULT_DIFFICULTY = "beginner"

# Flat awards for project participation
PROJECT_CREATE_XP = 100
PROJECT_JOIN_XP = 25


@dataclass
class XPAward:
    """Result of awarding XP to a user."""

    user_id: int
    username: str
    xp_awarded: int
    old_total_xp: int
    new_total_xp: int
    old_level: int
    new_level: int
    leveled_up: bool
    reason: str
    progress: LevelProgress


def get_xp_limits_for_difficulty(difficulty: str | None) -> tuple[int, int]:
    """Return (min, max) XP for a difficulty. Unknown values fall back to beginner."""
    key = (difficulty or "").strip().lower()
    if key not in XP_LIMITS:
        log.debug("Unknown difficulty %r, using %s limits", difficulty, DEFAULT_DIFFICULTY)
        return XP_LIMITS[DEFAULT_DIFFICULTY]
    return XP_LIMITS[key]


def validate_project_xp(difficulty: str | None, xp: int) -> int:
    """Check a project XP reward against the difficulty's range.

    Raises InvalidXPAmountError for negative amounts and
    XPRewardOutOfRangeError when the reward falls outside the range.
    """
    if xp < 0:
        raise InvalidXPAmountError(xp)
    low, high = get_xp_limits_for_difficulty(difficulty)
    if not low <= xp <= high:
        key = (difficulty or "").strip().lower()
        raise XPRewardOutOfRangeError(xp, key if key in XP_LIMITS else DEFAULT_DIFFICULTY, low, high)
    return xp


def award_xp(db: Database, user_id: int, amount: int, reason: str = "XP awarded") -> XPAward:
    """Add XP to a user and record a level-up in the activity feed.

    Raises UserNotFoundError for unknown users and InvalidXPAmountError for
    negative amounts.
    """
    if amount < 0:
        raise InvalidXPAmountError(amount)

    user = db.get_user(user_id)
    old_total, new_total = db.add_user_xp(user_id, amount)
    level_up = check_level_up(old_total, new_total)

    if level_up.leveled_up:
        db.add_activity(
            user_id,
            "level_up",
            f"Reached level {level_up.new_level}!",
            {
                "new_level": level_up.new_level,
                "old_level": level_up.old_level,
                "xp_gained": amount,
            },
        )
        log.info(
            "User %s leveled up: %d -> %d", user["username"], level_up.old_level, level_up.new_level
        )

    log.info("XP awarded: %d to user %s for %s", amount, user["username"], reason)

    return XPAward(
        user_id=user_id,
        username=user["username"],
        xp_awarded=amount,
        old_total_xp=old_total,
        new_total_xp=new_total,
        old_level=level_up.old_level,
        new_level=level_up.new_level,
        leveled_up=level_up.leveled_up,
        reason=reason,
        progress=get_level_progress(new_total),
    )


def get_user_xp_info(db: Database, user_id: int) -> UserStats:
    """Load a user's normalised XP stats."""
    return UserStats.from_record(db.get_user(user_id))


def award_project_created(db: Database, user_id: int, title: str) -> XPAward:
    """Award PROJECT_CREATE_XP to the creator of a new project."""
    award = award_xp(db, user_id, PROJECT_CREATE_XP, reason="Creating a new project")
    db.add_activity(
        user_id,
        "project_created",
        f'Created project "{title}"',
        {"project_title": title, "xp_earned": PROJECT_CREATE_XP},
    )
    return award


def award_project_joined(db: Database, user_id: int, title: str) -> XPAward:
    """Award PROJECT_JOIN_XP to a user joining a project."""
    award = award_xp(db, user_id, PROJECT_JOIN_XP, reason="Joining a project")
    db.add_activity(
        user_id,
        "project_joined",
        f'Joined project "{title}"',
        {"project_title": title, "xp_earned": PROJECT_JOIN_XP},
    )
    return award


def complete_project(
    db: Database,
    user_ids: list[int],
    xp_reward: int,
    title: str,
    difficulty: str | None = None,
) -> list[XPAward]:
    """Award a completed project's XP reward to every member.

    Duplicate ids are awarded once, in first-seen order. Every user is looked
    up before anyone is awarded, so an unknown id leaves all totals untouched.
    With a difficulty, the reward must lie inside its XP_LIMITS range.
    """
    if difficulty is not None:
        validate_project_xp(difficulty, xp_reward)
    elif xp_reward < 0:
        raise InvalidXPAmountError(xp_reward)

    members = list(dict.fromkeys(user_ids))
    for user_id in members:
        db.get_user(user_id)

    awards = []
    for user_id in members:
        award = award_xp(db, user_id, xp_reward, reason=f'Completed "{title}"')
        db.add_activity(
            user_id,
            "project_completed",
            f'Completed "{title}" and earned {xp_reward} XP!',
            {"project_title": title, "xp_earned": xp_reward, "difficulty": difficulty},
        )
        awards.append(award)

    log.info("Project %r completed by %d user(s), %d XP each", title, len(awards), xp_reward)
    return awards
