"""Platform filtering and sorting for the trending video list.

These are pure functions over the current video tuple. They hold no state
and never mutate their input; callers recompute them on every render.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from ..models.trends import TrendingVideo

PLATFORM_FILTERS = ("all", "tiktok", "youtube", "instagram")
SORT_KEYS = ("trending", "views", "shares")
SORT_LABELS = {"trending": "Trending", "views": "Most Viewed", "shares": "Most Shared"}

# Unranked videos sort after every ranked one
UNRANKED_SENTINEL = 999_999

# Checked in order; first match wins
_PLATFORM_ALIASES = (
    ("tiktok", ("tiktok", "tik tok")),
    ("youtube", ("youtube", "yt")),
    ("instagram", ("instagram", "ig", "insta")),
)


def normalize_platform(platform: Optional[str]) -> str:
    """Map a free-form platform name onto the known platform family."""
    if not platform:
        return "unknown"
    p = platform.strip().lower()
    for canonical, aliases in _PLATFORM_ALIASES:
        if any(alias in p for alias in aliases):
            return canonical
    return p


def filter_videos(videos: Iterable[TrendingVideo], platform_filter: str) -> Tuple[TrendingVideo, ...]:
    """Keep videos on the given platform, or all of them for ``"all"``."""
    if platform_filter == "all":
        return tuple(videos)
    return tuple(v for v in videos if normalize_platform(v.platform) == platform_filter)


def _rank_key(video: TrendingVideo) -> int:
    return video.trending_rank if video.trending_rank > 0 else UNRANKED_SENTINEL


def sort_videos(videos: Iterable[TrendingVideo], sort_key: str) -> Tuple[TrendingVideo, ...]:
    """Stable sort: views and shares descending, trending rank ascending."""
    if sort_key == "views":
        return tuple(sorted(videos, key=lambda v: v.view_count, reverse=True))
    if sort_key == "shares":
        return tuple(sorted(videos, key=lambda v: v.share_count, reverse=True))
    if sort_key == "trending":
        return tuple(sorted(videos, key=_rank_key))
    raise ValueError(f"Unknown sort key: {sort_key!r}")


def visible_videos(
    videos: Iterable[TrendingVideo], platform_filter: str, sort_key: str
) -> Tuple[TrendingVideo, ...]:
    """The list as displayed: filtered, then sorted."""
    return sort_videos(filter_videos(videos, platform_filter), sort_key)
