"""TrendClip - trending short-form video discovery and clip generation.

Discover what is trending on TikTok, YouTube and Instagram, then ask the
clip generator agent for highlight clips of any video.
"""

__version__ = "1.0.0"

from .agent_client import AgentClient, AgentResponse
from .agents.orchestrator import TrendClipOrchestrator
from .config import Config
from .models.trends import (
    ArtifactFile,
    ClipSession,
    GeneratedClip,
    TrendingVideo,
    TrendSummary,
)

__all__ = [
    "AgentClient",
    "AgentResponse",
    "Config",
    "TrendClipOrchestrator",
    "TrendingVideo",
    "TrendSummary",
    "GeneratedClip",
    "ArtifactFile",
    "ClipSession",
]
