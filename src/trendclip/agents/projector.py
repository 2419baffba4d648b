"""Project normalized agent payloads onto domain types."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Tuple, Type, TypeVar

from ..models.trends import (
    ArtifactFile,
    DiscoveryResult,
    GeneratedClip,
    GenerationResult,
    TrendingVideo,
    TrendSummary,
    as_int,
    as_str,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", TrendingVideo, GeneratedClip, ArtifactFile)


def _project_list(value: Any, entity: Type[T]) -> Tuple[T, ...]:
    """Build entities from a list of mappings, skipping non-mapping items."""
    if not isinstance(value, (list, tuple)):
        if value is not None:
            logger.debug("Expected a list of %s, got %s", entity.__name__, type(value).__name__)
        return ()
    items = []
    for item in value:
        if isinstance(item, Mapping):
            items.append(entity.from_dict(item))
        else:
            logger.debug("Skipping malformed %s entry: %r", entity.__name__, item)
    return tuple(items)


def project_discovery(payload: Mapping[str, Any]) -> DiscoveryResult:
    """Extract trending videos, summary and fetch time from a discovery payload."""
    summary_raw = payload.get("summary")
    summary = TrendSummary.from_dict(summary_raw) if isinstance(summary_raw, Mapping) else None

    return DiscoveryResult(
        videos=_project_list(payload.get("trending_videos"), TrendingVideo),
        summary=summary,
        fetched_at=as_str(payload.get("fetched_at")),
    )


def project_generation(
    payload: Mapping[str, Any],
    module_outputs: Optional[Mapping[str, Any]],
    requested_video: TrendingVideo,
) -> GenerationResult:
    """Extract clips and metadata from a generation payload.

    Artifact files come from the call's side-channel outputs, not the result
    body. Missing titles and totals fall back to the requested video and the
    number of clips actually received.
    """
    clips = _project_list(payload.get("clips"), GeneratedClip)
    outputs = module_outputs if isinstance(module_outputs, Mapping) else {}
    artifacts = _project_list(outputs.get("artifact_files"), ArtifactFile)

    title = as_str(payload.get("source_video_title")) or requested_video.title

    total = payload.get("total_clips_generated")
    total_clips = as_int(total, len(clips)) if total is not None else len(clips)

    return GenerationResult(
        clips=clips,
        artifact_files=artifacts,
        source_video_title=title,
        processing_summary=as_str(payload.get("processing_summary")),
        total_clips_generated=total_clips,
    )
