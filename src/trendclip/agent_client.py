"""LiteLLM-backed agent transport for trend discovery and clip generation."""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

import litellm

from .config import LLM_TIMEOUT, MAX_TOKENS, TEMPERATURE, Config

logger = logging.getLogger(__name__)

# Known LiteLLM provider prefixes that handle their own routing
_KNOWN_PREFIXES = (
    "openai/", "ollama/", "azure/", "gemini/", "anthropic/",
    "xai/", "openrouter/", "groq/", "mistral/", "deepseek/",
)

# Model prefix → env var name (for providers that need it in the env)
_PREFIX_TO_ENV_VAR = {
    "openai/": "OPENAI_API_KEY",
    "anthropic/": "ANTHROPIC_API_KEY",
    "gemini/": "GEMINI_API_KEY",
    "xai/": "XAI_API_KEY",
    "openrouter/": "OPENROUTER_API_KEY",
    "groq/": "GROQ_API_KEY",
    "mistral/": "MISTRAL_API_KEY",
    "deepseek/": "DEEPSEEK_API_KEY",
}

# Models that don't use a prefix but can be identified by name start
_NAME_TO_ENV_VAR = {
    "gpt": "OPENAI_API_KEY",
    "o1": "OPENAI_API_KEY",
    "o3": "OPENAI_API_KEY",
    "o4": "OPENAI_API_KEY",
    "claude": "ANTHROPIC_API_KEY",
}

DISCOVERY_SYSTEM_PROMPT = """\
You are the Trend Discovery Manager. You coordinate TikTok, YouTube and \
Instagram research to find the videos trending right now.

Return ONLY valid JSON, no markdown fences:
{
    "trending_videos": [
        {
            "video_id": "tt_001",
            "title": "...",
            "creator_username": "@handle",
            "creator_display_name": "...",
            "thumbnail_url": "",
            "video_url": "",
            "view_count": 0,
            "like_count": 0,
            "share_count": 0,
            "comment_count": 0,
            "engagement_score": 0.0,
            "hashtags": ["#tag"],
            "posted_date": "YYYY-MM-DD",
            "duration_seconds": 0,
            "trending_rank": 1,
            "platform": "tiktok"
        }
    ],
    "summary": {
        "total_videos": 0,
        "tiktok_count": 0,
        "youtube_count": 0,
        "instagram_count": 0,
        "trending_themes": ["..."]
    },
    "fetched_at": "ISO-8601 timestamp"
}

engagement_score is 0-100. trending_rank starts at 1."""

GENERATION_SYSTEM_PROMPT = """\
You are the Clip Generator. Analyze the described video and propose short \
highlight clips optimized for the requested target platforms.

Return ONLY valid JSON, no markdown fences:
{
    "source_video_title": "...",
    "clips": [
        {
            "clip_id": "cl_001",
            "source_video_id": "...",
            "clip_title": "...",
            "start_time": "MM:SS",
            "end_time": "MM:SS",
            "duration_seconds": 30,
            "aspect_ratio": "9:16",
            "target_platform": "TikTok",
            "captions_included": true,
            "clip_url": "",
            "thumbnail_url": "",
            "highlight_type": "Hook | Punchline | Key Scene | Viral Moment",
            "confidence_score": 0.9
        }
    ],
    "total_clips_generated": 0,
    "processing_summary": "...",
    "artifact_files": [{"file_url": "...", "name": "...", "format_type": "mp4"}]
}

confidence_score is 0.0-1.0. artifact_files is optional and, when present, \
lists one file per clip in the same order."""


class AgentCallError(Exception):
    """The agent call itself could not complete (network, provider, timeout)."""


@dataclass
class AgentResponse:
    """Envelope returned by an agent call.

    ``result`` is the raw result body (string or mapping); ``module_outputs``
    carries side-channel outputs such as ``artifact_files``.
    """

    success: bool
    result: Any = None
    module_outputs: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None


class AgentTransport(Protocol):
    async def call_agent(self, message: str, agent_id: str) -> AgentResponse: ...


def _detect_env_var(model: str) -> str | None:
    """Detect the correct env var for a model string."""
    for prefix, env_var in _PREFIX_TO_ENV_VAR.items():
        if model.startswith(prefix):
            return env_var
    for name_start, env_var in _NAME_TO_ENV_VAR.items():
        if model.startswith(name_start):
            return env_var
    return None


def _set_provider_key(model: str, api_key: str) -> None:
    """Set API key in the correct env var for the model's provider.

    Several LiteLLM providers only read from env vars, not from the
    api_key parameter, so we set both.
    """
    env_var = _detect_env_var(model)
    if env_var:
        os.environ[env_var] = api_key


def _prepare_model(model: str, api_base: str | None) -> str:
    """Add openai/ prefix for custom base URLs with unknown model names."""
    if api_base and not any(model.startswith(p) for p in _KNOWN_PREFIXES):
        return f"openai/{model}"
    return model


def _should_pass_api_base(model: str, api_base: str | None) -> bool:
    """OpenRouter is routed internally by LiteLLM; never pass api_base for it."""
    if not api_base:
        return False
    return not model.startswith("openrouter/")


class AgentClient:
    """Runs the two agents as system-prompted LLM completions."""

    def __init__(self, config: Config):
        cfg = config.llm
        self.model = _prepare_model(cfg.model, cfg.api_base)
        self.api_key = cfg.api_key
        self.api_base = cfg.api_base
        self.prompts = {
            config.agents.discovery_agent_id: DISCOVERY_SYSTEM_PROMPT,
            config.agents.generation_agent_id: GENERATION_SYSTEM_PROMPT,
        }

        if self.api_key:
            _set_provider_key(self.model, self.api_key)

        litellm.suppress_debug_info = True
        logging.getLogger("LiteLLM").setLevel(logging.WARNING)
        logging.getLogger("litellm").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)

    async def call_agent(self, message: str, agent_id: str) -> AgentResponse:
        """Send ``message`` to the agent and wrap its reply in an envelope.

        Raises:
            AgentCallError: the completion request failed.
        """
        system_prompt = self.prompts.get(agent_id)
        if system_prompt is None:
            return AgentResponse(success=False, error=f"Unknown agent: {agent_id}")

        kwargs = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": message},
            ],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
            "timeout": LLM_TIMEOUT,
        }
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if _should_pass_api_base(self.model, self.api_base):
            kwargs["api_base"] = self.api_base

        logger.info("Calling agent %s (%s)", agent_id, self.model)
        try:
            response = await litellm.acompletion(**kwargs)
        except Exception as e:
            raise AgentCallError(f"Agent {agent_id} call failed: {e}") from e

        content = response.choices[0].message.content or ""
        return self._to_envelope(content)

    @classmethod
    def _to_envelope(cls, content: str) -> AgentResponse:
        """Lift ``artifact_files`` out of the reply into the side channel."""
        cleaned = cls._extract_json(content)
        if not cleaned:
            return AgentResponse(success=False, error="Agent returned an empty response.")

        try:
            data = json.loads(cleaned)
        except ValueError:
            return AgentResponse(success=True, result=cleaned)

        if isinstance(data, dict) and isinstance(data.get("artifact_files"), list):
            artifacts = data.pop("artifact_files")
            return AgentResponse(
                success=True,
                result=data,
                module_outputs={"artifact_files": artifacts},
            )
        return AgentResponse(success=True, result=cleaned)

    @staticmethod
    def _extract_json(text: str) -> str:
        """Strip markdown code fences if present."""
        match = re.search(r"```(?:json)?\s*\n?(.*?)```", text, re.DOTALL)
        if match:
            return match.group(1).strip()
        return text.strip()
