"""Domain types for trend discovery and clip generation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple


def as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return default
    if isinstance(value, float):
        # 1e5 -> "100000", not "100000.0"
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, int):
        return str(value)
    return default


def as_float(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool) or value is None:
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(result) or math.isinf(result):
        return default
    return result


def as_int(value: Any, default: int = 0) -> int:
    result = as_float(value, float(default))
    return int(result)


def as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def as_str_tuple(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(item for item in value if isinstance(item, str))


@dataclass(frozen=True)
class TrendingVideo:
    """Snapshot of a discovered video. Replaced wholesale on each discovery."""

    video_id: str
    title: str = ""
    creator_username: str = ""
    creator_display_name: str = ""
    thumbnail_url: str = ""
    video_url: str = ""
    view_count: int = 0
    like_count: int = 0
    share_count: int = 0
    comment_count: int = 0
    engagement_score: float = 0.0  # 0-100
    hashtags: Tuple[str, ...] = ()
    posted_date: str = ""
    duration_seconds: float = 0.0
    trending_rank: int = 0  # 1-based, 0 = unranked
    platform: str = ""

    @property
    def creator(self) -> str:
        return self.creator_display_name or self.creator_username or "Unknown Creator"

    @property
    def is_ranked(self) -> bool:
        return self.trending_rank > 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TrendingVideo:
        """Build from a loosely-typed mapping, substituting defaults."""
        return cls(
            video_id=as_str(data.get("video_id")),
            title=as_str(data.get("title")),
            creator_username=as_str(data.get("creator_username")),
            creator_display_name=as_str(data.get("creator_display_name")),
            thumbnail_url=as_str(data.get("thumbnail_url")),
            video_url=as_str(data.get("video_url")),
            view_count=as_int(data.get("view_count")),
            like_count=as_int(data.get("like_count")),
            share_count=as_int(data.get("share_count")),
            comment_count=as_int(data.get("comment_count")),
            engagement_score=min(max(as_float(data.get("engagement_score")), 0.0), 100.0),
            hashtags=as_str_tuple(data.get("hashtags")),
            posted_date=as_str(data.get("posted_date")),
            duration_seconds=as_float(data.get("duration_seconds")),
            trending_rank=as_int(data.get("trending_rank")),
            platform=as_str(data.get("platform")),
        )


@dataclass(frozen=True)
class TrendSummary:
    """Aggregate counts for one discovery result set."""

    total_videos: int = 0
    tiktok_count: int = 0
    youtube_count: int = 0
    instagram_count: int = 0
    trending_themes: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TrendSummary:
        return cls(
            total_videos=as_int(data.get("total_videos")),
            tiktok_count=as_int(data.get("tiktok_count")),
            youtube_count=as_int(data.get("youtube_count")),
            instagram_count=as_int(data.get("instagram_count")),
            trending_themes=as_str_tuple(data.get("trending_themes")),
        )


@dataclass(frozen=True)
class GeneratedClip:
    """A candidate highlight clip cut from a source video."""

    clip_id: str = ""
    source_video_id: str = ""
    clip_title: str = ""
    start_time: str = ""  # display string, e.g. "02:15"
    end_time: str = ""
    duration_seconds: float = 0.0
    aspect_ratio: str = ""
    target_platform: str = ""
    captions_included: bool = False
    clip_url: str = ""
    thumbnail_url: str = ""
    highlight_type: str = ""
    confidence_score: float = 0.0  # 0.0-1.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GeneratedClip:
        return cls(
            clip_id=as_str(data.get("clip_id")),
            source_video_id=as_str(data.get("source_video_id")),
            clip_title=as_str(data.get("clip_title")),
            start_time=as_str(data.get("start_time")),
            end_time=as_str(data.get("end_time")),
            duration_seconds=as_float(data.get("duration_seconds")),
            aspect_ratio=as_str(data.get("aspect_ratio")),
            target_platform=as_str(data.get("target_platform")),
            captions_included=as_bool(data.get("captions_included")),
            clip_url=as_str(data.get("clip_url")),
            thumbnail_url=as_str(data.get("thumbnail_url")),
            highlight_type=as_str(data.get("highlight_type")),
            confidence_score=min(max(as_float(data.get("confidence_score")), 0.0), 1.0),
        )


@dataclass(frozen=True)
class ArtifactFile:
    """A downloadable output returned alongside the clips."""

    file_url: str = ""
    name: Optional[str] = None
    format_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ArtifactFile:
        name = data.get("name")
        format_type = data.get("format_type")
        return cls(
            file_url=as_str(data.get("file_url")),
            name=name if isinstance(name, str) else None,
            format_type=format_type if isinstance(format_type, str) else None,
        )


@dataclass(frozen=True)
class ClipPair:
    """A clip and the artifact file at the same position, if any."""

    clip: GeneratedClip
    artifact: Optional[ArtifactFile] = None


def pair_clips(
    clips: Tuple[GeneratedClip, ...], artifacts: Tuple[ArtifactFile, ...]
) -> Tuple[Tuple[ClipPair, ...], Tuple[ArtifactFile, ...]]:
    """Pair clips with artifacts by index.

    Returns the pairs and any artifacts left over past the last clip.
    """
    pairs = tuple(
        ClipPair(clip, artifacts[i] if i < len(artifacts) else None)
        for i, clip in enumerate(clips)
    )
    return pairs, tuple(artifacts[len(clips):])


@dataclass(frozen=True)
class ClipSession:
    """One completed clip-generation result, stored in history."""

    id: str
    source_video_title: str
    pairs: Tuple[ClipPair, ...] = ()
    unpaired_artifacts: Tuple[ArtifactFile, ...] = ()
    total_clips: int = 0  # as declared by the agent, stored verbatim
    processing_summary: str = ""
    generated_at: str = ""

    @property
    def clips(self) -> Tuple[GeneratedClip, ...]:
        return tuple(p.clip for p in self.pairs)

    @property
    def artifact_files(self) -> Tuple[ArtifactFile, ...]:
        paired = tuple(p.artifact for p in self.pairs if p.artifact is not None)
        return paired + self.unpaired_artifacts

    @property
    def count_mismatch(self) -> bool:
        """True when the declared clip total disagrees with the clips received."""
        return self.total_clips != len(self.pairs)


@dataclass
class DiscoveryResult:
    """Projection of one discovery response."""

    videos: Tuple[TrendingVideo, ...] = ()
    summary: Optional[TrendSummary] = None  # None leaves the prior summary in place
    fetched_at: str = ""


@dataclass
class GenerationResult:
    """Projection of one clip-generation response."""

    clips: Tuple[GeneratedClip, ...] = ()
    artifact_files: Tuple[ArtifactFile, ...] = ()
    source_video_title: str = ""
    processing_summary: str = ""
    total_clips_generated: int = 0
