"""Tests for the discovery and generation workflows."""

import asyncio
import json

import pytest

from trendclip.agent_client import AgentCallError, AgentResponse
from trendclip.agents.orchestrator import (
    DISCOVERY_EMPTY,
    DISCOVERY_FAILED,
    DISCOVERY_NETWORK_ERROR,
    GENERATION_EMPTY,
    GENERATION_FAILED,
    GENERATION_NETWORK_ERROR,
    TrendClipOrchestrator,
    generation_task,
)
from trendclip.agents.state import FailureKind, MessageKind, WorkflowStatus
from trendclip.config import AgentsConfig, Config
from trendclip.models.trends import TrendingVideo


def _make_video(video_id: str = "yt_002", title: str = "Robot Chef") -> TrendingVideo:
    return TrendingVideo(video_id=video_id, title=title, platform="youtube", duration_seconds=720)


def _discovery_response(n: int = 2, with_summary: bool = True) -> AgentResponse:
    result = {
        "trending_videos": [
            {"video_id": f"v{i}", "title": f"Video {i}", "trending_rank": i + 1, "platform": "tiktok"}
            for i in range(n)
        ],
        "fetched_at": "2026-02-23T12:00:00Z",
    }
    if with_summary:
        result["summary"] = {"total_videos": n, "tiktok_count": n}
    return AgentResponse(success=True, result=json.dumps(result))


def _generation_response(n: int = 2, title: str = "Robot Chef") -> AgentResponse:
    result = {
        "source_video_title": title,
        "clips": [{"clip_id": f"c{i}", "clip_title": f"Clip {i}"} for i in range(n)],
        "total_clips_generated": n,
        "processing_summary": f"{n} clips",
    }
    return AgentResponse(
        success=True,
        result=result,
        module_outputs={"artifact_files": [{"file_url": f"https://files/c{i}.mp4"} for i in range(n)]},
    )


class FakeTransport:
    """Records calls and replays queued responses.

    With ``gated`` set, every call blocks until ``release()``.
    """

    def __init__(self, *responses, gated: bool = False):
        self.responses = list(responses)
        self.calls = []
        self.gated = gated
        self._gate = asyncio.Event()

    def release(self) -> None:
        self._gate.set()

    async def call_agent(self, message, agent_id):
        self.calls.append((message, agent_id))
        if self.gated:
            await self._gate.wait()
        response = self.responses.pop(0) if self.responses else None
        if isinstance(response, Exception):
            raise response
        return response


def _make_orchestrator(transport, **delays) -> TrendClipOrchestrator:
    events = []
    config = Config(agents=AgentsConfig(**delays))
    orch = TrendClipOrchestrator(config, transport, lambda name, *args: events.append(name))
    orch.events = events
    return orch


class TestGenerationTask:
    def test_message_text(self):
        text = generation_task(_make_video(), ["tiktok", "instagram_reels"], 5, True)
        assert text == (
            "Analyze this video and generate optimized clips: Title: Robot Chef, "
            "Video ID: yt_002, Platform: youtube, Duration: 720s. "
            "Target platforms: TikTok, Instagram Reels. "
            "Generate 5 clip variations with captions."
        )

    def test_without_captions(self):
        text = generation_task(_make_video(), ["youtube_shorts"], 3, False)
        assert text.endswith("Generate 3 clip variations without captions.")

    def test_long_duration_not_in_exponent_form(self):
        video = TrendingVideo(video_id="v", title="Marathon", duration_seconds=1234567)
        assert "Duration: 1234567s." in generation_task(video, ["tiktok"], 5, True)

    def test_fractional_duration(self):
        video = TrendingVideo(video_id="v", title="Short", duration_seconds=12.5)
        assert "Duration: 12.5s." in generation_task(video, ["tiktok"], 5, True)


class TestDiscovery:
    @pytest.mark.asyncio
    async def test_success(self):
        transport = FakeTransport(_discovery_response(2))
        orch = _make_orchestrator(transport)
        await orch.discover_trends()

        state = orch.state
        assert [v.video_id for v in state.videos] == ["v0", "v1"]
        assert state.summary.total_videos == 2
        assert state.fetched_at == "2026-02-23T12:00:00Z"
        assert state.message(MessageKind.SUCCESS) == "Found 2 trending videos across platforms"
        assert state.message(MessageKind.ERROR) is None
        assert state.discovery.status is WorkflowStatus.IDLE
        assert state.active_agent_ids == ()
        assert transport.calls[0][1] == "trend-discovery-manager"
        assert orch.events[-1] == "discovery_complete"
        orch.close()

    @pytest.mark.asyncio
    async def test_summary_kept_when_absent(self):
        transport = FakeTransport(_discovery_response(2), _discovery_response(3, with_summary=False))
        orch = _make_orchestrator(transport)
        await orch.discover_trends()
        await orch.discover_trends()
        assert len(orch.state.videos) == 3
        assert orch.state.summary.total_videos == 2
        orch.close()

    @pytest.mark.asyncio
    async def test_pending_is_observable_and_reentry_ignored(self):
        transport = FakeTransport(_discovery_response(1), gated=True)
        orch = _make_orchestrator(transport)

        task = orch.start_discovery()
        assert task is not None
        assert orch.state.discovery.pending
        assert not orch.state.can_discover
        assert orch.state.active_agent_ids == ("trend-discovery-manager",)

        assert orch.start_discovery() is None
        await asyncio.sleep(0)
        assert orch.start_discovery() is None

        transport.release()
        await task
        assert len(transport.calls) == 1
        assert not orch.state.discovery.pending
        orch.close()

    @pytest.mark.asyncio
    async def test_remote_error_surfaced_verbatim(self):
        orch = _make_orchestrator(FakeTransport(AgentResponse(success=False, error="quota exceeded")))
        await orch.discover_trends()
        assert orch.state.message(MessageKind.ERROR) == "quota exceeded"
        assert orch.state.discovery.last_failure is FailureKind.REMOTE
        assert orch.state.message(MessageKind.SUCCESS) is None
        orch.close()

    @pytest.mark.asyncio
    async def test_remote_error_without_message(self):
        orch = _make_orchestrator(FakeTransport(AgentResponse(success=False)))
        await orch.discover_trends()
        assert orch.state.message(MessageKind.ERROR) == DISCOVERY_FAILED
        orch.close()

    @pytest.mark.asyncio
    async def test_missing_response(self):
        orch = _make_orchestrator(FakeTransport())
        await orch.discover_trends()
        assert orch.state.message(MessageKind.ERROR) == DISCOVERY_FAILED
        assert orch.state.discovery.status is WorkflowStatus.IDLE
        orch.close()

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        orch = _make_orchestrator(FakeTransport(AgentCallError("connection reset")))
        await orch.discover_trends()
        assert orch.state.message(MessageKind.ERROR) == DISCOVERY_NETWORK_ERROR
        assert orch.state.discovery.last_failure is FailureKind.TRANSPORT
        assert orch.state.can_discover
        orch.close()

    @pytest.mark.asyncio
    async def test_unexpected_exception_not_raised(self):
        orch = _make_orchestrator(FakeTransport(RuntimeError("boom")))
        await orch.discover_trends()
        assert orch.state.message(MessageKind.ERROR) == DISCOVERY_NETWORK_ERROR
        assert orch.state.discovery.status is WorkflowStatus.IDLE
        orch.close()

    @pytest.mark.asyncio
    async def test_empty_result_is_informational(self):
        orch = _make_orchestrator(FakeTransport(_discovery_response(0, with_summary=False)))
        await orch.discover_trends()
        assert orch.state.videos == ()
        assert orch.state.message(MessageKind.INFO) == DISCOVERY_EMPTY
        assert orch.state.message(MessageKind.ERROR) is None
        assert orch.state.message(MessageKind.SUCCESS) is None
        assert orch.state.discovery.last_failure is FailureKind.EMPTY
        orch.close()

    @pytest.mark.asyncio
    async def test_unparseable_result(self):
        orch = _make_orchestrator(FakeTransport(AgentResponse(success=True, result="Sorry, no data.")))
        await orch.discover_trends()
        assert orch.state.videos == ()
        assert orch.state.message(MessageKind.INFO) == DISCOVERY_EMPTY
        orch.close()

    @pytest.mark.asyncio
    async def test_start_clears_messages(self):
        orch = _make_orchestrator(FakeTransport(_discovery_response(1)))
        orch.show_message(MessageKind.ERROR, "old failure")
        task = orch.start_discovery()
        assert orch.state.messages == {}
        assert not orch.timers.is_armed(MessageKind.ERROR)
        await task
        orch.close()


class TestGeneration:
    @pytest.mark.asyncio
    async def test_requires_selection(self):
        transport = FakeTransport(_generation_response())
        orch = _make_orchestrator(transport)
        assert orch.start_generation() is None
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_requires_target_platform(self):
        transport = FakeTransport(_generation_response())
        orch = _make_orchestrator(transport)
        orch.select_video(_make_video())
        for platform in ("tiktok", "youtube_shorts", "instagram_reels"):
            orch.toggle_target_platform(platform)
        assert orch.start_generation() is None
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_success_records_session(self):
        transport = FakeTransport(_generation_response(2))
        orch = _make_orchestrator(transport)
        orch.select_video(_make_video())
        orch.set_clip_count(3)
        await orch.generate_clips()

        state = orch.state
        assert [c.clip_id for c in state.clips] == ["c0", "c1"]
        assert state.clip_pairs[1].artifact.file_url == "https://files/c1.mp4"
        assert state.show_clip_results
        assert state.message(MessageKind.SUCCESS) == "Generated 2 clips successfully!"

        session = state.history.sessions[0]
        assert session.clips == state.clips
        assert session.source_video_title == "Robot Chef"
        assert session.total_clips == 2
        assert session.processing_summary == "2 clips"

        message, agent_id = transport.calls[0]
        assert agent_id == "clip-generator"
        assert "Generate 3 clip variations with captions." in message
        orch.close()

    @pytest.mark.asyncio
    async def test_prior_sessions_shift(self):
        transport = FakeTransport(_generation_response(1, "First"), _generation_response(2, "Second"))
        orch = _make_orchestrator(transport)
        orch.select_video(_make_video())
        await orch.generate_clips()
        first = orch.state.history.sessions[0]
        await orch.generate_clips()

        sessions = orch.state.history.sessions
        assert len(sessions) == 2
        assert sessions[0].source_video_title == "Second"
        assert sessions[1] is first
        orch.close()

    @pytest.mark.asyncio
    async def test_title_falls_back_to_requested_video(self):
        response = AgentResponse(success=True, result={"clips": [{"clip_id": "c0"}]})
        orch = _make_orchestrator(FakeTransport(response))
        orch.select_video(_make_video(title="Medieval Knight"))
        await orch.generate_clips()
        assert orch.state.clip_source_title == "Medieval Knight"
        assert orch.state.history.sessions[0].total_clips == 1
        orch.close()

    @pytest.mark.asyncio
    async def test_pending_and_double_trigger(self):
        transport = FakeTransport(_generation_response(1), gated=True)
        orch = _make_orchestrator(transport)
        orch.select_video(_make_video())

        task = orch.start_generation()
        assert orch.state.generation.pending
        assert not orch.state.can_generate
        assert orch.state.active_agent_ids == ("clip-generator",)
        assert orch.start_generation() is None

        transport.release()
        await task
        assert len(transport.calls) == 1
        assert orch.state.can_generate
        orch.close()

    @pytest.mark.asyncio
    async def test_discovery_and_generation_concurrent(self):
        transport = FakeTransport(_discovery_response(1), _generation_response(1), gated=True)
        orch = _make_orchestrator(transport)
        orch.select_video(_make_video())

        orch.start_discovery()
        orch.start_generation()
        assert orch.state.active_agent_ids == ("trend-discovery-manager", "clip-generator")

        transport.release()
        await orch.wait_idle()
        assert orch.state.active_agent_ids == ()
        assert len(transport.calls) == 2
        orch.close()

    @pytest.mark.asyncio
    async def test_empty_clips_is_informational(self):
        response = AgentResponse(success=True, result={"clips": [], "total_clips_generated": 0})
        orch = _make_orchestrator(FakeTransport(response))
        orch.select_video(_make_video())
        await orch.generate_clips()

        state = orch.state
        assert state.clips == ()
        assert not state.show_clip_results
        assert len(state.history) == 0
        assert state.message(MessageKind.INFO) == GENERATION_EMPTY
        assert state.message(MessageKind.ERROR) is None
        assert state.message(MessageKind.SUCCESS) is None
        assert state.generation.last_failure is FailureKind.EMPTY
        orch.close()

    @pytest.mark.asyncio
    async def test_remote_error(self):
        orch = _make_orchestrator(FakeTransport(AgentResponse(success=False, error="quota exceeded")))
        orch.select_video(_make_video())
        await orch.generate_clips()
        assert orch.state.message(MessageKind.ERROR) == "quota exceeded"
        assert len(orch.state.history) == 0
        orch.close()

    @pytest.mark.asyncio
    async def test_remote_error_without_message(self):
        orch = _make_orchestrator(FakeTransport(AgentResponse(success=False, error="")))
        orch.select_video(_make_video())
        await orch.generate_clips()
        assert orch.state.message(MessageKind.ERROR) == GENERATION_FAILED
        orch.close()

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        orch = _make_orchestrator(FakeTransport(AgentCallError("timeout")))
        orch.select_video(_make_video())
        await orch.generate_clips()
        assert orch.state.message(MessageKind.ERROR) == GENERATION_NETWORK_ERROR
        assert orch.state.generation.last_failure is FailureKind.TRANSPORT
        assert orch.state.generation.status is WorkflowStatus.IDLE
        orch.close()

    @pytest.mark.asyncio
    async def test_selecting_new_video_clears_clips(self):
        orch = _make_orchestrator(FakeTransport(_generation_response(2)))
        orch.select_video(_make_video())
        await orch.generate_clips()
        orch.select_video(_make_video("tt_004", "Makeup Hack"))
        assert orch.state.clips == ()
        assert len(orch.state.history) == 1
        orch.close()


class TestMessageTimers:
    @pytest.mark.asyncio
    async def test_success_message_expires(self):
        orch = _make_orchestrator(FakeTransport(), success_message_delay=0.05)
        orch.show_message(MessageKind.SUCCESS, "done")
        assert orch.timers.is_armed(MessageKind.SUCCESS)
        await asyncio.sleep(0.15)
        assert orch.state.message(MessageKind.SUCCESS) is None
        assert not orch.timers.is_armed(MessageKind.SUCCESS)

    @pytest.mark.asyncio
    async def test_error_outlives_success(self):
        orch = _make_orchestrator(FakeTransport(), success_message_delay=0.05, error_message_delay=0.5)
        orch.show_message(MessageKind.SUCCESS, "done")
        orch.show_message(MessageKind.ERROR, "failed")
        await asyncio.sleep(0.15)
        assert orch.state.message(MessageKind.SUCCESS) is None
        assert orch.state.message(MessageKind.ERROR) == "failed"
        orch.close()

    @pytest.mark.asyncio
    async def test_dismissed_timer_does_not_clear_next_message(self):
        orch = _make_orchestrator(FakeTransport(), success_message_delay=0.3)
        orch.show_message(MessageKind.SUCCESS, "first")
        await asyncio.sleep(0.15)
        orch.dismiss_message(MessageKind.SUCCESS)
        assert orch.state.message(MessageKind.SUCCESS) is None

        orch.show_message(MessageKind.SUCCESS, "second")
        await asyncio.sleep(0.25)
        assert orch.state.message(MessageKind.SUCCESS) == "second"

        await asyncio.sleep(0.2)
        assert orch.state.message(MessageKind.SUCCESS) is None

    @pytest.mark.asyncio
    async def test_replacing_message_restarts_timer(self):
        orch = _make_orchestrator(FakeTransport(), error_message_delay=0.3)
        orch.show_message(MessageKind.ERROR, "first")
        await asyncio.sleep(0.15)
        orch.show_message(MessageKind.ERROR, "second")
        await asyncio.sleep(0.25)
        assert orch.state.message(MessageKind.ERROR) == "second"
        orch.close()

    @pytest.mark.asyncio
    async def test_reconfigure_applies_new_delays(self):
        orch = _make_orchestrator(FakeTransport(), success_message_delay=5.0)
        transport = FakeTransport(_discovery_response(1))
        orch.reconfigure(Config(agents=AgentsConfig(success_message_delay=0.05)), transport)
        assert orch.transport is transport

        await orch.discover_trends()
        assert transport.calls
        await asyncio.sleep(0.15)
        assert orch.state.message(MessageKind.SUCCESS) is None

    @pytest.mark.asyncio
    async def test_close_cancels_timers(self):
        orch = _make_orchestrator(FakeTransport(), success_message_delay=0.05)
        orch.show_message(MessageKind.SUCCESS, "done")
        orch.close()
        await asyncio.sleep(0.1)
        assert orch.state.message(MessageKind.SUCCESS) == "done"
