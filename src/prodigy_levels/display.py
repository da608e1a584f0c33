"""Rich terminal display for prodigy-levels."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from prodigy_levels.levels import (
    MAX_LEVEL,
    calculate_level,
    clamp_xp,
    get_level_progress,
    level_span,
    xp_required_for_level,
)
from prodigy_levels.stats import UserStats
from prodigy_levels.tiers import TIERS, get_level_color, get_level_title
from prodigy_levels.xp import XPAward

console = Console()

# Map tier gradient tokens from tiers.py to valid Rich color names
_COLOR_MAP: dict[str, str] = {
    "from-gray-400 to-gray-500": "grey62",
    "from-green-400 to-green-500": "green3",
    "from-blue-400 to-blue-500": "dodger_blue1",
    "from-yellow-500 to-green-500": "yellow3",
    "from-green-500 to-blue-500": "spring_green3",
    "from-blue-500 to-indigo-500": "royal_blue1",
    "from-indigo-500 to-purple-500": "slate_blue1",
    "from-purple-500 to-purple-600": "purple",
    "from-orange-500 to-red-500": "dark_orange",
    "from-red-500 to-pink-500": "red1",
    "from-yellow-500 to-orange-500": "gold1",
    "from-purple-600 to-pink-600": "magenta",
}


def _safe_color(color: str) -> str:
    """Map a tier colour token to a valid Rich color name."""
    return _COLOR_MAP.get(color, "white")


def format_number(n: int) -> str:
    """Format large numbers: 421543 -> '421.5K', 1200 -> '1,200', 1234567 -> '1.2M'."""
    if n >= 1_000_000:
        value = n / 1_000_000
        if value >= 100:
            return f"{value:.0f}M"
        return f"{value:.1f}M"
    if n >= 10_000:
        value = n / 1_000
        if value >= 1000:
            return f"{value:.0f}K"
        return f"{value:.1f}K"
    return f"{n:,}"


def _xp_bar(current: int, total: int, width: int = 20) -> str:
    """Render an XP progress bar as text: [████████░░░░░░░░░░░░]."""
    if total <= 0:
        return "[" + "█" * width + "]"
    ratio = max(0.0, min(current / total, 1.0))
    filled = int(ratio * width)
    empty = width - filled
    return "[" + "█" * filled + "░" * empty + "]"


def compact_text(xp: int, show_xp: bool = True) -> str:
    """Navbar badge markup: level number in tier colour, optionally the XP total."""
    shown_xp = clamp_xp(xp)
    level = calculate_level(shown_xp)
    color = _safe_color(get_level_color(level))
    text = f"[bold {color}]● {level}[/]"
    if show_xp:
        text += f" {shown_xp:,} XP"
    return text


def print_compact(xp: int, show_xp: bool = True) -> None:
    """Print the compact navbar display."""
    console.print(compact_text(xp, show_xp=show_xp))


def print_profile(stats: UserStats) -> None:
    """Print the full profile stat block with level, title and progress."""
    level = stats.level
    progress = stats.progress
    color = _safe_color(stats.color)

    lines: list[str] = []
    lines.append("")
    lines.append(f"  [bold {color}]Level {level} - {stats.title}[/]")
    lines.append(f"  {format_number(stats.total_xp)} XP")

    if progress.is_max_level:
        lines.append(f"  {_xp_bar(1, 1)} [bold yellow]MAX LEVEL REACHED![/]")
    else:
        bar = _xp_bar(progress.progress_xp, progress.level_total_xp)
        lines.append(
            f"  {bar} {format_number(progress.progress_xp)}/"
            f"{format_number(progress.level_total_xp)} XP ({progress.percentage:.0f}%)"
        )
        lines.append(f"  {format_number(progress.xp_needed)} XP to level {level + 1}")
    lines.append("")

    panel = Panel(
        "\n".join(lines),
        title=f"[bold]{stats.username or 'PRODIGYHUB'}[/]",
        box=box.ROUNDED,
        border_style=color,
        width=50,
    )
    console.print(panel)


def print_level_up(old_level: int, new_level: int) -> None:
    """Print the level-up toast."""
    old_color = _safe_color(get_level_color(old_level))
    new_color = _safe_color(get_level_color(new_level))
    lines = [
        "",
        "  [bold yellow]★ LEVEL UP! ★[/]",
        "",
        f"  [bold {old_color}]{old_level}[/]  →  [bold {new_color}]{new_level}[/]",
        f"  You are now a [bold {new_color}]{get_level_title(new_level)}[/]",
        "",
    ]
    panel = Panel(
        "\n".join(lines),
        title="[bold]Congratulations[/]",
        box=box.ROUNDED,
        border_style=new_color,
        width=50,
    )
    console.print(panel)


def print_level_info(xp: int) -> None:
    """Print level details for a raw XP value."""
    progress = get_level_progress(xp)
    level = progress.current_level
    color = _safe_color(get_level_color(level))

    table = Table(box=box.ROUNDED, border_style=color, show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Level", f"[{color}]{level}[/]")
    table.add_row("Title", get_level_title(level))
    table.add_row("Colour", get_level_color(level))
    table.add_row("Progress", f"{format_number(progress.progress_xp)}/{format_number(progress.level_total_xp)}")
    table.add_row("Percentage", f"{progress.percentage:.2f}%")
    if progress.is_max_level:
        table.add_row("Next Level", "MAX LEVEL")
    else:
        table.add_row("XP To Next", format_number(progress.xp_needed))
    console.print(table)


def print_level_table() -> None:
    """Print every tier with its level range and XP thresholds."""
    table = Table(
        title="Levels",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold",
    )
    table.add_column("Tier", justify="right")
    table.add_column("Title")
    table.add_column("Levels")
    table.add_column("Starts At", justify="right")
    table.add_column("XP / Level", justify="right")

    for tier in TIERS:
        low, high = tier["levels"]
        color = _safe_color(tier["color"])
        levels_text = str(low) if low == high else f"{low}-{high}"
        span = level_span(low)
        span_text = format_number(span) if low < MAX_LEVEL else "-"
        table.add_row(
            str(tier["tier"]),
            f"[bold {color}]{tier['name']}[/]",
            levels_text,
            format_number(xp_required_for_level(low)),
            span_text,
        )
    console.print(table)


def print_users(users: list[UserStats]) -> None:
    """Print a ranked table of users."""
    table = Table(title="Users", box=box.ROUNDED, show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("User")
    table.add_column("Level", justify="right")
    table.add_column("Title")
    table.add_column("XP", justify="right")

    for rank, stats in enumerate(users, start=1):
        color = _safe_color(stats.color)
        table.add_row(
            str(rank),
            stats.username,
            f"[bold {color}]{stats.level}[/]",
            stats.title,
            format_number(stats.total_xp),
        )
    console.print(table)


def print_activity(username: str, entries: list[dict]) -> None:
    """Print a user's activity feed."""
    if not entries:
        console.print(f"  No activity for {username} yet.")
        return
    table = Table(title=f"Activity: {username}", box=box.ROUNDED, header_style="bold")
    table.add_column("When")
    table.add_column("Type")
    table.add_column("Description")
    for entry in entries:
        table.add_row(entry.get("created_at") or "", entry["action_type"], entry.get("description") or "")
    console.print(table)


def print_award_result(award: XPAward) -> None:
    """Print the outcome of an XP award, followed by a toast on level-up."""
    console.print(
        f"  +{format_number(award.xp_awarded)} XP to [bold]{award.username}[/] "
        f"({award.reason}) - total {format_number(award.new_total_xp)} XP"
    )
    if award.leveled_up:
        print_level_up(award.old_level, award.new_level)


def print_badge_result(result: dict) -> None:
    """Print badge generation result."""
    lines: list[str] = []
    lines.append("")
    lines.append(f"  Badge saved to: [bold]{result.get('output', '')}[/]")
    lines.append(f"  Level {result.get('level', 1)} - {result.get('title', 'Novice')}")
    lines.append("")

    panel = Panel(
        "\n".join(lines),
        title="[bold]Badge Generated[/]",
        box=box.ROUNDED,
        border_style="green",
        width=50,
    )
    console.print(panel)
