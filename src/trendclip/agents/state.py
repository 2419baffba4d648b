"""Application state and the reducer that performs every transition.

``AppState`` is the single container for discovery, generation, selection,
history and message state. It is changed only by ``apply``, which handles
one action at a time on the event loop thread.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from ..config import CLIP_COUNT_OPTIONS, DEFAULT_CLIP_COUNT, TARGET_PLATFORMS
from ..models.trends import (
    ArtifactFile,
    ClipPair,
    ClipSession,
    DiscoveryResult,
    GeneratedClip,
    TrendingVideo,
    TrendSummary,
)
from ..sample_data import SAMPLE_FETCHED_AT, SAMPLE_SUMMARY, SAMPLE_VIDEOS, sample_session
from .session_history import SessionHistory
from .views import PLATFORM_FILTERS, SORT_KEYS, visible_videos

logger = logging.getLogger(__name__)

TABS = ("discover", "history")


class WorkflowStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class FailureKind(str, Enum):
    REMOTE = "remote"  # the agent answered but reported failure
    TRANSPORT = "transport"  # the call could not complete
    EMPTY = "empty"  # success flag set but nothing came back


class MessageKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass
class WorkflowState:
    status: WorkflowStatus = WorkflowStatus.IDLE
    agent_id: Optional[str] = None
    last_failure: Optional[FailureKind] = None

    @property
    def pending(self) -> bool:
        return self.status is WorkflowStatus.PENDING


@dataclass(frozen=True)
class StatusMessage:
    kind: MessageKind
    text: str
    seq: int


# ── Actions ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SetTab:
    tab: str


@dataclass(frozen=True)
class SetPlatformFilter:
    platform: str


@dataclass(frozen=True)
class SetSortKey:
    sort_key: str


@dataclass(frozen=True)
class SelectVideo:
    video: TrendingVideo


@dataclass(frozen=True)
class CloseDetail:
    pass


@dataclass(frozen=True)
class ClearSelection:
    pass


@dataclass(frozen=True)
class ToggleTargetPlatform:
    platform: str


@dataclass(frozen=True)
class SetIncludeCaptions:
    include: bool


@dataclass(frozen=True)
class SetClipCount:
    count: int


@dataclass(frozen=True)
class ToggleHistoryEntry:
    session_id: str


@dataclass(frozen=True)
class SetSampleData:
    enabled: bool


@dataclass(frozen=True)
class DiscoveryStarted:
    agent_id: str


@dataclass(frozen=True)
class DiscoveryCompleted:
    result: DiscoveryResult


@dataclass(frozen=True)
class GenerationStarted:
    agent_id: str
    video: TrendingVideo


@dataclass(frozen=True)
class GenerationCompleted:
    session: ClipSession


@dataclass(frozen=True)
class WorkflowFailed:
    workflow: str
    kind: FailureKind


@dataclass(frozen=True)
class WorkflowSettled:
    workflow: str


@dataclass(frozen=True)
class ShowMessage:
    kind: MessageKind
    text: str


@dataclass(frozen=True)
class DismissMessage:
    kind: MessageKind


@dataclass(frozen=True)
class ExpireMessage:
    kind: MessageKind
    seq: int


Action = Union[
    SetTab, SetPlatformFilter, SetSortKey, SelectVideo, CloseDetail, ClearSelection,
    ToggleTargetPlatform, SetIncludeCaptions, SetClipCount, ToggleHistoryEntry,
    SetSampleData, DiscoveryStarted, DiscoveryCompleted, GenerationStarted,
    GenerationCompleted, WorkflowFailed, WorkflowSettled, ShowMessage,
    DismissMessage, ExpireMessage,
]


# ── State ────────────────────────────────────────────────────────────


@dataclass
class AppState:
    """Everything the presentation layer reads."""

    active_tab: str = "discover"
    platform_filter: str = "all"
    sort_key: str = "trending"

    videos: Tuple[TrendingVideo, ...] = ()
    summary: Optional[TrendSummary] = None
    fetched_at: str = ""

    selected_video: Optional[TrendingVideo] = None
    show_detail: bool = False

    clip_pairs: Tuple[ClipPair, ...] = ()
    unpaired_artifacts: Tuple[ArtifactFile, ...] = ()
    clip_source_title: str = ""
    clip_processing_summary: str = ""
    show_clip_results: bool = False
    requested_video: Optional[TrendingVideo] = None

    target_platforms: Tuple[str, ...] = tuple(TARGET_PLATFORMS)
    include_captions: bool = True
    clip_count: int = DEFAULT_CLIP_COUNT

    history: SessionHistory = field(default_factory=SessionHistory)
    discovery: WorkflowState = field(default_factory=WorkflowState)
    generation: WorkflowState = field(default_factory=WorkflowState)
    messages: Dict[MessageKind, StatusMessage] = field(default_factory=dict)
    sample_data_on: bool = False
    message_seq: int = 0

    @property
    def visible_videos(self) -> Tuple[TrendingVideo, ...]:
        return visible_videos(self.videos, self.platform_filter, self.sort_key)

    @property
    def clips(self) -> Tuple[GeneratedClip, ...]:
        return tuple(p.clip for p in self.clip_pairs)

    @property
    def can_discover(self) -> bool:
        return not self.discovery.pending

    @property
    def can_generate(self) -> bool:
        return (
            self.selected_video is not None
            and bool(self.target_platforms)
            and not self.generation.pending
        )

    @property
    def active_agent_ids(self) -> Tuple[str, ...]:
        """Agents with a call in flight."""
        return tuple(
            wf.agent_id for wf in (self.discovery, self.generation)
            if wf.pending and wf.agent_id
        )

    def message(self, kind: MessageKind) -> Optional[str]:
        msg = self.messages.get(kind)
        return msg.text if msg else None

    def workflow(self, name: str) -> WorkflowState:
        if name == "discovery":
            return self.discovery
        if name == "generation":
            return self.generation
        raise ValueError(f"Unknown workflow: {name!r}")


def _clear_clip_results(state: AppState) -> None:
    state.clip_pairs = ()
    state.unpaired_artifacts = ()
    state.show_clip_results = False


def _check_option(value, options, label: str) -> None:
    if value not in options:
        raise ValueError(f"Invalid {label} {value!r}, expected one of {list(options)}")


def apply(state: AppState, action: Action) -> None:
    """Apply one action to ``state`` in place."""
    match action:
        case SetTab(tab=tab):
            _check_option(tab, TABS, "tab")
            state.active_tab = tab

        case SetPlatformFilter(platform=platform):
            _check_option(platform, PLATFORM_FILTERS, "platform filter")
            state.platform_filter = platform

        case SetSortKey(sort_key=sort_key):
            _check_option(sort_key, SORT_KEYS, "sort key")
            state.sort_key = sort_key

        case SelectVideo(video=video):
            state.selected_video = video
            state.show_detail = True
            _clear_clip_results(state)

        case CloseDetail():
            state.show_detail = False
            state.show_clip_results = False

        case ClearSelection():
            state.selected_video = None
            state.show_detail = False
            _clear_clip_results(state)

        case ToggleTargetPlatform(platform=platform):
            _check_option(platform, TARGET_PLATFORMS, "target platform")
            if platform in state.target_platforms:
                state.target_platforms = tuple(p for p in state.target_platforms if p != platform)
            else:
                state.target_platforms = state.target_platforms + (platform,)

        case SetIncludeCaptions(include=include):
            state.include_captions = bool(include)

        case SetClipCount(count=count):
            _check_option(count, CLIP_COUNT_OPTIONS, "clip count")
            state.clip_count = count

        case ToggleHistoryEntry(session_id=session_id):
            state.history.toggle_expanded(session_id)

        case SetSampleData(enabled=enabled):
            _apply_sample_data(state, enabled)

        case DiscoveryStarted(agent_id=agent_id):
            state.discovery = WorkflowState(WorkflowStatus.PENDING, agent_id)
            state.messages.clear()
            state.videos = ()
            _clear_clip_results(state)

        case DiscoveryCompleted(result=result):
            state.videos = result.videos
            if result.summary is not None:
                state.summary = result.summary
            state.fetched_at = result.fetched_at
            if result.videos:
                state.discovery.status = WorkflowStatus.SUCCEEDED
            else:
                state.discovery.status = WorkflowStatus.FAILED
                state.discovery.last_failure = FailureKind.EMPTY

        case GenerationStarted(agent_id=agent_id, video=video):
            state.generation = WorkflowState(WorkflowStatus.PENDING, agent_id)
            state.messages.clear()
            state.requested_video = video
            state.clip_source_title = ""
            state.clip_processing_summary = ""
            _clear_clip_results(state)

        case GenerationCompleted(session=session):
            if session.pairs:
                state.clip_pairs = session.pairs
                state.unpaired_artifacts = session.unpaired_artifacts
                state.clip_source_title = session.source_video_title
                state.clip_processing_summary = session.processing_summary
                state.show_clip_results = True
                state.history.prepend(session)
                state.generation.status = WorkflowStatus.SUCCEEDED
            else:
                state.generation.status = WorkflowStatus.FAILED
                state.generation.last_failure = FailureKind.EMPTY

        case WorkflowFailed(workflow=name, kind=kind):
            wf = state.workflow(name)
            wf.status = WorkflowStatus.FAILED
            wf.last_failure = kind

        case WorkflowSettled(workflow=name):
            state.workflow(name).status = WorkflowStatus.IDLE

        case ShowMessage(kind=kind, text=text):
            state.message_seq += 1
            state.messages[kind] = StatusMessage(kind, text, state.message_seq)

        case DismissMessage(kind=kind):
            state.messages.pop(kind, None)

        case ExpireMessage(kind=kind, seq=seq):
            current = state.messages.get(kind)
            if current is not None and current.seq == seq:
                del state.messages[kind]

        case _:
            raise TypeError(f"Unknown action: {action!r}")


def _apply_sample_data(state: AppState, enabled: bool) -> None:
    state.sample_data_on = enabled
    if enabled:
        state.videos = SAMPLE_VIDEOS
        state.summary = SAMPLE_SUMMARY
        state.fetched_at = SAMPLE_FETCHED_AT
        if not len(state.history):
            state.history.prepend(sample_session())
        return

    # Only remove what is still the seeded data
    if state.videos is SAMPLE_VIDEOS:
        state.videos = ()
    if state.summary is SAMPLE_SUMMARY:
        state.summary = None
    if state.fetched_at == SAMPLE_FETCHED_AT:
        state.fetched_at = ""
