"""Display helpers shared by the console views."""

from __future__ import annotations

import math
from typing import Optional

from .agents.views import normalize_platform

PLATFORM_LABELS = {"tiktok": "TikTok", "youtube": "YouTube", "instagram": "Instagram"}
PLATFORM_STYLES = {"tiktok": "bold cyan", "youtube": "bold red", "instagram": "bold magenta"}

HIGHLIGHT_STYLES = {
    "hook": "bold cyan",
    "punchline": "bold magenta",
    "key scene": "bold yellow",
    "viral moment": "bold red",
}


def _missing(value: Optional[float]) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def format_number(num: Optional[float]) -> str:
    """Compact count: 12500000 -> '12.5M', 3400 -> '3.4K'."""
    if _missing(num):
        return "0"
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    if num >= 1_000:
        return f"{num / 1_000:.1f}K"
    return str(num)


def format_duration(seconds: Optional[float]) -> str:
    """m:ss"""
    if _missing(seconds):
        return "0:00"
    mins, secs = divmod(int(seconds), 60)
    return f"{mins}:{secs:02d}"


def platform_label(platform: Optional[str]) -> str:
    return PLATFORM_LABELS.get(normalize_platform(platform), platform or "Unknown")


def platform_style(platform: Optional[str]) -> str:
    return PLATFORM_STYLES.get(normalize_platform(platform), "dim")


def highlight_style(highlight_type: Optional[str]) -> str:
    """Style for a highlight tag, matched case-insensitively."""
    return HIGHLIGHT_STYLES.get((highlight_type or "").strip().lower(), "dim")


def confidence_style(score: Optional[float]) -> str:
    pct = round((score or 0) * 100)
    if pct >= 80:
        return "bold cyan"
    if pct >= 60:
        return "bold yellow"
    return "bold red"
