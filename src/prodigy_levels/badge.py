"""SVG level badge generation.

Generates a shields.io-style flat badge showing level and title, filled with
the tier's gradient. Pure functions, no side effects.
"""

from __future__ import annotations

import re
from html import escape

# Tailwind colour name + shade -> hex, for the tokens used in tiers.py
_TAILWIND_HEX: dict[str, str] = {
    "gray-400": "9ca3af",
    "gray-500": "6b7280",
    "green-400": "4ade80",
    "green-500": "22c55e",
    "blue-400": "60a5fa",
    "blue-500": "3b82f6",
    "yellow-500": "eab308",
    "indigo-500": "6366f1",
    "purple-500": "a855f7",
    "purple-600": "9333ea",
    "orange-500": "f97316",
    "red-500": "ef4444",
    "pink-500": "ec4899",
    "pink-600": "db2777",
}

_FALLBACK_HEX = "6b7280"
_TOKEN_RE = re.compile(r"from-([a-z]+-\d{3})\s+to-([a-z]+-\d{3})")

_LABEL = "ProdigyHub"
_LABEL_BG = "555555"
_FONT_SIZE = 11
_FONT_FAMILY = "DejaVu Sans,Verdana,Geneva,sans-serif"


def _text_width(text: str) -> int:
    """Estimate pixel width of text at 11px DejaVu Sans."""
    widths = {
        "f": 4, "i": 4, "j": 4, "l": 4, "r": 4, "t": 5,
        "m": 10, "w": 9, "W": 10, "M": 10,
        " ": 4, ".": 4, ",": 4, ":": 4, "/": 5,
    }
    return sum(widths.get(ch, 7) for ch in text)


def gradient_hex(color: str) -> tuple[str, str]:
    """Resolve a 'from-X to-Y' colour token to a (start, end) hex pair.

    Unknown tokens and shades fall back to grey.
    """
    match = _TOKEN_RE.fullmatch(color.strip())
    if not match:
        return (_FALLBACK_HEX, _FALLBACK_HEX)
    start, end = match.groups()
    return (_TAILWIND_HEX.get(start, _FALLBACK_HEX), _TAILWIND_HEX.get(end, _FALLBACK_HEX))


def generate_badge_svg(level: int, title: str, color: str, total_xp: int = 0) -> str:
    """Generate a shields.io flat-style SVG badge string.

    Layout: [ProdigyHub | Lv.12 Developing]
    """
    raw_value = f"Lv.{level} {title}"
    value_text = escape(raw_value)
    start_hex, end_hex = gradient_hex(color)

    label_w = _text_width(_LABEL) + 20
    value_w = _text_width(raw_value) + 20
    total_w = label_w + value_w
    height = 20

    label_cx = label_w // 2
    value_cx = label_w + value_w // 2

    tooltip = f"ProdigyHub: Level {level} {title}"
    if total_xp > 0:
        tooltip += f" - {total_xp:,} XP"
    tooltip = escape(tooltip)

    svg = f'''<svg xmlns="http://www.w3.org/2000/svg" width="{total_w}" height="{height}" role="img" aria-label="{tooltip}">
  <title>{tooltip}</title>
  <linearGradient id="s" x2="0" y2="100%">
    <stop offset="0" stop-color="#bbb" stop-opacity=".1"/>
    <stop offset="1" stop-opacity=".1"/>
  </linearGradient>
  <linearGradient id="t" x2="100%" y2="0">
    <stop offset="0" stop-color="#{start_hex}"/>
    <stop offset="1" stop-color="#{end_hex}"/>
  </linearGradient>
  <clipPath id="r">
    <rect width="{total_w}" height="{height}" rx="3" fill="#fff"/>
  </clipPath>
  <g clip-path="url(#r)">
    <rect width="{label_w}" height="{height}" fill="#{_LABEL_BG}"/>
    <rect x="{label_w}" width="{value_w}" height="{height}" fill="url(#t)"/>
    <rect width="{total_w}" height="{height}" fill="url(#s)"/>
  </g>
  <g fill="#fff" text-anchor="middle" font-family="{_FONT_FAMILY}" text-rendering="geometricPrecision" font-size="{_FONT_SIZE}">
    <text aria-hidden="true" x="{label_cx}.5" y="15" fill="#010101" fill-opacity=".3">{_LABEL}</text>
    <text x="{label_cx}.5" y="14">{_LABEL}</text>
    <text aria-hidden="true" x="{value_cx}.5" y="15" fill="#010101" fill-opacity=".3">{value_text}</text>
    <text x="{value_cx}.5" y="14">{value_text}</text>
  </g>
</svg>
'''
    return svg
