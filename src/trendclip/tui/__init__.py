"""TUI components for TrendClip."""

from .dashboard import TrendClipDashboard
from .settings import SettingsScreen

__all__ = ["TrendClipDashboard", "SettingsScreen"]
