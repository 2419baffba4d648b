"""Drives the discovery and generation workflows against the agents."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, Iterable, Optional, Set

from ..agent_client import AgentCallError, AgentTransport
from ..config import TARGET_PLATFORMS, Config
from ..models.trends import TrendingVideo
from .messages import MessageTimers
from .normalizer import normalize_result
from .projector import project_discovery, project_generation
from .session_history import build_session
from .state import (
    Action,
    AppState,
    ClearSelection,
    CloseDetail,
    DiscoveryCompleted,
    DiscoveryStarted,
    DismissMessage,
    ExpireMessage,
    FailureKind,
    GenerationCompleted,
    GenerationStarted,
    MessageKind,
    SelectVideo,
    SetClipCount,
    SetIncludeCaptions,
    SetPlatformFilter,
    SetSampleData,
    SetSortKey,
    SetTab,
    ShowMessage,
    ToggleHistoryEntry,
    ToggleTargetPlatform,
    WorkflowFailed,
    WorkflowSettled,
    apply,
)

logger = logging.getLogger(__name__)

EventCallback = Callable[..., None]

DISCOVERY_TASK = (
    "Find the top trending videos across TikTok, YouTube, and Instagram right now. "
    "Return comprehensive data for each trending video."
)

DISCOVERY_FAILED = "Failed to fetch trending videos. Please try again."
DISCOVERY_NETWORK_ERROR = "Network error. Please check your connection and try again."
DISCOVERY_EMPTY = "No trending videos found. Try again in a moment."
GENERATION_FAILED = "Failed to generate clips. Please try again."
GENERATION_NETWORK_ERROR = "Network error during clip generation. Please try again."
GENERATION_EMPTY = "No clips were generated for this video. Try different options."


def generation_task(
    video: TrendingVideo, target_platforms: Iterable[str], clip_count: int, include_captions: bool
) -> str:
    """Natural-language request for the clip generator."""
    names = ", ".join(TARGET_PLATFORMS.get(p, p) for p in target_platforms)
    captions = " with captions" if include_captions else " without captions"
    return (
        f"Analyze this video and generate optimized clips: Title: {video.title}, "
        f"Video ID: {video.video_id}, Platform: {video.platform}, "
        f"Duration: {video.duration_seconds:.15g}s. Target platforms: {names}. "
        f"Generate {clip_count} clip variations{captions}."
    )


def _message_delays(config: Config) -> Dict[MessageKind, float]:
    agents = config.agents
    return {
        MessageKind.SUCCESS: agents.success_message_delay,
        MessageKind.ERROR: agents.error_message_delay,
        MessageKind.INFO: agents.info_message_delay,
    }


class TrendClipOrchestrator:
    """Owns ``AppState`` and runs every transition through ``apply``.

    Each workflow allows one outstanding agent call. ``start_discovery`` and
    ``start_generation`` mark the workflow pending before returning, so the
    triggering control is disabled before the call resolves. Failures always
    end in an error message and an idle workflow; nothing is raised to the
    caller.
    """

    def __init__(
        self,
        config: Config,
        transport: AgentTransport,
        event_callback: Optional[EventCallback] = None,
    ):
        self.config = config
        self.transport = transport
        self.state = AppState()
        self.emit = event_callback or (lambda *_a, **_kw: None)
        self.timers = MessageTimers(
            _message_delays(config),
            on_expire=lambda kind, seq: self.dispatch(ExpireMessage(kind, seq)),
        )
        self._tasks: Set[asyncio.Task] = set()

    def reconfigure(self, config: Config, transport: AgentTransport) -> None:
        """Use new settings for subsequent calls and messages."""
        self.config = config
        self.transport = transport
        self.timers.delays = _message_delays(config)
        logger.info("Reconfigured: model=%s", config.llm.model)

    def dispatch(self, action: Action) -> None:
        apply(self.state, action)
        self.emit("state_changed", action)

    # ── Mutators ─────────────────────────────────────────────────────

    def set_tab(self, tab: str) -> None:
        self.dispatch(SetTab(tab))

    def set_platform_filter(self, platform: str) -> None:
        self.dispatch(SetPlatformFilter(platform))

    def set_sort_key(self, sort_key: str) -> None:
        self.dispatch(SetSortKey(sort_key))

    def select_video(self, video: TrendingVideo) -> None:
        self.dispatch(SelectVideo(video))

    def close_detail(self) -> None:
        self.dispatch(CloseDetail())

    def clear_selection(self) -> None:
        self.dispatch(ClearSelection())

    def toggle_target_platform(self, platform: str) -> None:
        self.dispatch(ToggleTargetPlatform(platform))

    def set_include_captions(self, include: bool) -> None:
        self.dispatch(SetIncludeCaptions(include))

    def set_clip_count(self, count: int) -> None:
        self.dispatch(SetClipCount(count))

    def toggle_history_entry(self, session_id: str) -> None:
        self.dispatch(ToggleHistoryEntry(session_id))

    def set_sample_data(self, enabled: bool) -> None:
        self.dispatch(SetSampleData(enabled))

    # ── Messages ─────────────────────────────────────────────────────

    def show_message(self, kind: MessageKind, text: str) -> None:
        """Show ``text``, replacing any message of the same kind."""
        self.dispatch(ShowMessage(kind, text))
        self.timers.arm(kind, self.state.messages[kind].seq)
        self.emit("message", kind, text)

    def dismiss_message(self, kind: MessageKind) -> None:
        self.timers.cancel(kind)
        self.dispatch(DismissMessage(kind))

    # ── Discovery ────────────────────────────────────────────────────

    def start_discovery(self) -> Optional[asyncio.Task]:
        """Begin a discovery call; returns ``None`` if one is already pending."""
        if not self.state.can_discover:
            logger.debug("Discovery already pending, ignoring request")
            return None
        loop = asyncio.get_running_loop()
        agent_id = self.config.agents.discovery_agent_id
        self.timers.cancel_all()
        self.dispatch(DiscoveryStarted(agent_id))
        self.emit("discovery_started", agent_id)
        return self._spawn(loop, self._complete_discovery(agent_id), "discovery")

    async def discover_trends(self) -> None:
        task = self.start_discovery()
        if task is not None:
            await task

    async def _complete_discovery(self, agent_id: str) -> None:
        try:
            try:
                response = await self.transport.call_agent(DISCOVERY_TASK, agent_id)
            except AgentCallError as e:
                logger.warning("Discovery transport failure: %s", e)
                self._fail("discovery", FailureKind.TRANSPORT, DISCOVERY_NETWORK_ERROR)
                return
            except Exception:
                logger.exception("Discovery call raised unexpectedly")
                self._fail("discovery", FailureKind.TRANSPORT, DISCOVERY_NETWORK_ERROR)
                return

            if not response or not response.success:
                error = getattr(response, "error", None)
                logger.warning("Discovery agent reported failure: %s", error)
                self._fail("discovery", FailureKind.REMOTE, error or DISCOVERY_FAILED)
                return

            result = project_discovery(normalize_result(response.result))
            self.dispatch(DiscoveryCompleted(result))
            if result.videos:
                logger.info("Discovered %d trending videos", len(result.videos))
                self.show_message(
                    MessageKind.SUCCESS,
                    f"Found {len(result.videos)} trending videos across platforms",
                )
            else:
                logger.info("Discovery succeeded with no videos")
                self.show_message(MessageKind.INFO, DISCOVERY_EMPTY)
        finally:
            self.dispatch(WorkflowSettled("discovery"))
            self.emit("discovery_complete", self.state.discovery)

    # ── Generation ───────────────────────────────────────────────────

    def start_generation(self) -> Optional[asyncio.Task]:
        """Begin clip generation for the selected video.

        Returns ``None`` without calling the agent when nothing is selected,
        no target platform is chosen, or a generation is already pending.
        """
        state = self.state
        if not state.can_generate:
            logger.debug("Generation unavailable (pending=%s, selected=%s, targets=%d)",
                         state.generation.pending, state.selected_video is not None,
                         len(state.target_platforms))
            return None

        loop = asyncio.get_running_loop()
        video = state.selected_video
        agent_id = self.config.agents.generation_agent_id
        message = generation_task(
            video, state.target_platforms, state.clip_count, state.include_captions
        )
        self.timers.cancel_all()
        self.dispatch(GenerationStarted(agent_id, video))
        self.emit("generation_started", video)
        return self._spawn(loop, self._complete_generation(agent_id, video, message), "generation")

    async def generate_clips(self) -> None:
        task = self.start_generation()
        if task is not None:
            await task

    async def _complete_generation(self, agent_id: str, video: TrendingVideo, message: str) -> None:
        try:
            try:
                response = await self.transport.call_agent(message, agent_id)
            except AgentCallError as e:
                logger.warning("Generation transport failure: %s", e)
                self._fail("generation", FailureKind.TRANSPORT, GENERATION_NETWORK_ERROR)
                return
            except Exception:
                logger.exception("Generation call raised unexpectedly")
                self._fail("generation", FailureKind.TRANSPORT, GENERATION_NETWORK_ERROR)
                return

            if not response or not response.success:
                error = getattr(response, "error", None)
                logger.warning("Clip generator reported failure: %s", error)
                self._fail("generation", FailureKind.REMOTE, error or GENERATION_FAILED)
                return

            result = project_generation(
                normalize_result(response.result), getattr(response, "module_outputs", None), video
            )
            if not result.clips:
                logger.info("Clip generator returned no clips for %s", video.video_id)
                self._fail("generation", FailureKind.EMPTY, GENERATION_EMPTY, MessageKind.INFO)
                return

            self.dispatch(GenerationCompleted(build_session(result)))
            logger.info("Generated %d clips for %s", len(result.clips), video.video_id)
            self.show_message(
                MessageKind.SUCCESS, f"Generated {len(result.clips)} clips successfully!"
            )
        finally:
            self.dispatch(WorkflowSettled("generation"))
            self.emit("generation_complete", self.state.generation)

    # ── Internals ────────────────────────────────────────────────────

    def _fail(
        self,
        workflow: str,
        kind: FailureKind,
        text: str,
        message_kind: MessageKind = MessageKind.ERROR,
    ) -> None:
        self.dispatch(WorkflowFailed(workflow, kind))
        self.show_message(message_kind, text)

    def _spawn(self, loop: asyncio.AbstractEventLoop, coro, name: str) -> asyncio.Task:
        task = loop.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait for every in-flight workflow to settle."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def close(self) -> None:
        """Cancel pending message timers."""
        self.timers.cancel_all()
