"""Data models for trend discovery and clip generation."""

from .payload import Payload, Structured, Unparsed
from .trends import (
    ArtifactFile,
    ClipPair,
    ClipSession,
    DiscoveryResult,
    GeneratedClip,
    GenerationResult,
    TrendingVideo,
    TrendSummary,
)

__all__ = [
    "Payload",
    "Structured",
    "Unparsed",
    "TrendingVideo",
    "TrendSummary",
    "GeneratedClip",
    "ArtifactFile",
    "ClipPair",
    "ClipSession",
    "DiscoveryResult",
    "GenerationResult",
]
