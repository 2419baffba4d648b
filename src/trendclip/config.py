"""Configuration management for TrendClip."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, model_validator

# ── Hardcoded defaults ─────────────────────────────────────────────────────
TEMPERATURE = 0.7
MAX_TOKENS = 4000
LLM_TIMEOUT = 120

SUCCESS_MESSAGE_DELAY = 5.0  # seconds
ERROR_MESSAGE_DELAY = 8.0
INFO_MESSAGE_DELAY = 5.0

CLIP_COUNT_OPTIONS = (3, 5, 7)
DEFAULT_CLIP_COUNT = 5
TARGET_PLATFORMS = {
    "tiktok": "TikTok",
    "youtube_shorts": "YouTube Shorts",
    "instagram_reels": "Instagram Reels",
}

DISCOVERY_AGENT_ID = "trend-discovery-manager"
GENERATION_AGENT_ID = "clip-generator"


class LLMConfig(BaseModel):
    """LLM provider backing the agents."""

    model: str = "gpt-4o-mini"
    api_key: Optional[str] = None
    api_base: Optional[str] = None


class AgentsConfig(BaseModel):
    """Agent identifiers and status message lifetimes."""

    discovery_agent_id: str = DISCOVERY_AGENT_ID
    generation_agent_id: str = GENERATION_AGENT_ID
    success_message_delay: float = SUCCESS_MESSAGE_DELAY
    error_message_delay: float = ERROR_MESSAGE_DELAY
    info_message_delay: float = INFO_MESSAGE_DELAY

    @model_validator(mode="after")
    def check_distinct_agents(self) -> AgentsConfig:
        if self.discovery_agent_id == self.generation_agent_id:
            raise ValueError("discovery_agent_id and generation_agent_id must differ")
        return self


class Config(BaseModel):
    """Top-level application configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    agents: AgentsConfig = Field(default_factory=AgentsConfig)

    @classmethod
    def load_from_file(cls, path: str | Path) -> Config:
        """Load config from a YAML file."""
        path = Path(path)
        if not path.exists():
            return cls()
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def save_to_file(self, path: str | Path) -> None:
        """Save config to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump()
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
