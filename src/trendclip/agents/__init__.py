"""Agent orchestration: normalization, projection, views, state and history."""

from .normalizer import decode_payload, normalize_result
from .orchestrator import TrendClipOrchestrator
from .projector import project_discovery, project_generation
from .session_history import SessionHistory
from .state import AppState, apply
from .views import filter_videos, normalize_platform, sort_videos

__all__ = [
    "TrendClipOrchestrator",
    "AppState",
    "apply",
    "SessionHistory",
    "decode_payload",
    "normalize_result",
    "project_discovery",
    "project_generation",
    "normalize_platform",
    "filter_videos",
    "sort_videos",
]
