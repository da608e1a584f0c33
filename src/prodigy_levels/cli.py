"""CLI commands for prodigy-levels."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from prodigy_levels.badge import generate_badge_svg
from prodigy_levels.config import get_db_path, get_log_level
from prodigy_levels.db import Database
from prodigy_levels.display import (
    console,
    print_activity,
    print_award_result,
    print_badge_result,
    print_compact,
    print_level_info,
    print_level_table,
    print_profile,
    print_users,
)
from prodigy_levels.errors import ProdigyError
from prodigy_levels.stats import UserStats
from prodigy_levels.xp import (
    XP_LIMITS,
    XPAward,
    award_project_created,
    award_project_joined,
    award_xp,
    complete_project,
    get_xp_limits_for_difficulty,
    validate_project_xp,
)

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="prodigy-levels",
        description="ProdigyHub XP and level tools",
    )
    parser.add_argument("--db", default=None, help="Path to the SQLite database")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log at INFO level")
    subparsers = parser.add_subparsers(dest="command")

    level_p = subparsers.add_parser("level", help="Show level details for an XP total")
    level_p.add_argument("xp", type=int)
    level_p.add_argument("--compact", action="store_true", help="Navbar-style one-liner")
    subparsers.add_parser("table", help="Show all tiers and thresholds")

    user_p = subparsers.add_parser("user", help="Manage users")
    user_sub = user_p.add_subparsers(dest="user_command")
    user_add = user_sub.add_parser("add", help="Create a user")
    user_add.add_argument("username")
    user_add.add_argument("--email", default=None)
    user_add.add_argument("--xp", type=int, default=0, help="Starting XP")
    user_show = user_sub.add_parser("show", help="Show a user's profile")
    user_show.add_argument("username")
    user_sub.add_parser("list", help="List users by XP")

    award_p = subparsers.add_parser("award", help="Award XP to a user")
    award_p.add_argument("username")
    award_p.add_argument("amount", type=int)
    award_p.add_argument("--reason", default="XP awarded")
    award_p.add_argument(
        "--difficulty", choices=sorted(XP_LIMITS), default=None,
        help="Reject amounts outside a project difficulty's XP range",
    )

    project_p = subparsers.add_parser("project", help="Award project XP")
    project_sub = project_p.add_subparsers(dest="project_command")
    complete_p = project_sub.add_parser("complete", help="Award a completed project's XP to its members")
    complete_p.add_argument("title")
    complete_p.add_argument("xp_reward", type=int)
    complete_p.add_argument("usernames", nargs="+")
    complete_p.add_argument("--difficulty", choices=sorted(XP_LIMITS), default=None)
    create_p = project_sub.add_parser("create", help="Award the project creation bonus")
    create_p.add_argument("title")
    create_p.add_argument("username")
    join_p = project_sub.add_parser("join", help="Award the project join bonus")
    join_p.add_argument("title")
    join_p.add_argument("username")

    limits_p = subparsers.add_parser("limits", help="Show XP limits for a project difficulty")
    limits_p.add_argument("difficulty")

    badge_p = subparsers.add_parser("badge", help="Generate SVG level badge for a user")
    badge_p.add_argument("username")
    badge_p.add_argument("--output", "-o", default="prodigy-badge.svg", help="Output file path")

    activity_p = subparsers.add_parser("activity", help="Show a user's activity feed")
    activity_p.add_argument("username")
    activity_p.add_argument("--limit", type=int, default=20)
    return parser


def setup_logging(verbose: bool = False) -> None:
    level_name = "INFO" if verbose else get_log_level()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    command = args.command or "table"

    if command == "level":
        do_level(args.xp, compact=args.compact)
        return 0
    if command == "table":
        print_level_table()
        return 0
    if command == "limits":
        do_limits(args.difficulty)
        return 0

    db_path = Path(args.db).expanduser() if args.db else get_db_path()
    db = Database(db_path)
    try:
        if command == "user":
            user_cmd = getattr(args, "user_command", None)
            if user_cmd == "add":
                do_user_add(db, args.username, email=args.email, xp=args.xp)
            elif user_cmd == "show":
                do_user_show(db, args.username)
            else:
                do_user_list(db)
        elif command == "award":
            do_award(db, args.username, args.amount, reason=args.reason, difficulty=args.difficulty)
        elif command == "project":
            do_project(db, args)
        elif command == "badge":
            do_badge(db, args.username, output=args.output)
        elif command == "activity":
            do_activity(db, args.username, limit=args.limit)
    except ProdigyError as exc:
        log.debug("Command %s failed", command, exc_info=True)
        console.print(f"[red]{exc}[/]")
        return 1
    finally:
        db.close()
    return 0


def do_level(xp: int, compact: bool = False) -> None:
    if compact:
        print_compact(xp)
    else:
        print_level_info(xp)


def do_limits(difficulty: str) -> tuple[int, int]:
    low, high = get_xp_limits_for_difficulty(difficulty)
    console.print(f"  {difficulty}: {low}-{high} XP")
    return low, high


def do_user_add(db: Database, username: str, email: str | None = None, xp: int = 0) -> UserStats:
    stats = UserStats.from_record(db.create_user(username, email=email, total_xp=xp))
    log.info("Created user %s with %d XP", username, stats.total_xp)
    print_profile(stats)
    return stats


def do_user_show(db: Database, username: str) -> UserStats:
    stats = UserStats.from_record(db.get_user_by_username(username))
    print_profile(stats)
    return stats


def do_user_list(db: Database) -> list[UserStats]:
    users = [UserStats.from_record(row) for row in db.list_users()]
    if not users:
        console.print("  No users yet. Run [bold]prodigy-levels user add NAME[/] first.")
        return users
    print_users(users)
    return users


def do_award(
    db: Database,
    username: str,
    amount: int,
    reason: str = "XP awarded",
    difficulty: str | None = None,
) -> XPAward:
    """Award XP by username, optionally checked against a difficulty's range."""
    if difficulty is not None:
        validate_project_xp(difficulty, amount)
    user = db.get_user_by_username(username)
    award = award_xp(db, user["id"], amount, reason=reason)
    print_award_result(award)
    return award


def do_project_complete(
    db: Database,
    title: str,
    xp_reward: int,
    usernames: list[str],
    difficulty: str | None = None,
) -> list[XPAward]:
    user_ids = [db.get_user_by_username(name)["id"] for name in usernames]
    awards = complete_project(db, user_ids, xp_reward, title, difficulty=difficulty)
    for award in awards:
        print_award_result(award)
    return awards


def do_project(db: Database, args: argparse.Namespace) -> list[XPAward]:
    project_cmd = getattr(args, "project_command", None)
    if project_cmd == "complete":
        return do_project_complete(
            db, args.title, args.xp_reward, args.usernames, difficulty=args.difficulty,
        )
    if project_cmd not in ("create", "join"):
        console.print("  Usage: prodigy-levels project {complete,create,join} ...")
        return []
    user = db.get_user_by_username(args.username)
    if project_cmd == "create":
        award = award_project_created(db, user["id"], args.title)
    else:
        award = award_project_joined(db, user["id"], args.title)
    print_award_result(award)
    return [award]


def do_badge(db: Database, username: str, output: str = "prodigy-badge.svg") -> dict:
    """Generate an SVG badge for a user."""
    stats = UserStats.from_record(db.get_user_by_username(username))
    svg = generate_badge_svg(
        level=stats.level, title=stats.title, color=stats.color, total_xp=stats.total_xp,
    )
    output_path = Path(output)
    output_path.write_text(svg, encoding="utf-8")
    result = {"ok": True, "output": str(output_path.resolve()), "level": stats.level, "title": stats.title}
    print_badge_result(result)
    return result


def do_activity(db: Database, username: str, limit: int = 20) -> list[dict]:
    user = db.get_user_by_username(username)
    entries = db.get_activity(user["id"], limit=limit)
    print_activity(username, entries)
    return entries


def run() -> None:
    sys.exit(main())
