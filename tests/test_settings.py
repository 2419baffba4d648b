"""Tests for settings screen helpers."""

from unittest.mock import patch

from trendclip.config import Config
from trendclip.tui.settings import (
    PROVIDERS,
    SettingsScreen,
    _parse_seconds,
    agent_id_validator,
    mask_key,
)


class TestMaskKey:
    def test_unset(self):
        assert mask_key(None) == "not set"
        assert mask_key("") == "not set"

    def test_short_key_hidden(self):
        assert mask_key("abc123") == "***"

    def test_long_key_shows_ends(self):
        assert mask_key("sk-1234567890abcd") == "sk-1...abcd"


class TestParseSeconds:
    def test_valid(self):
        assert _parse_seconds("2.5") is True

    def test_rejects(self):
        assert isinstance(_parse_seconds("0"), str)
        assert isinstance(_parse_seconds("soon"), str)


class TestProviders:
    def test_local_provider_needs_no_key(self):
        local = [p for p in PROVIDERS if p.env_var is None]
        assert local and all(p.has_key for p in local)

    @patch.dict("os.environ", {"GROQ_API_KEY": "k"}, clear=True)
    def test_has_key_reads_environment(self):
        by_name = {p.name: p for p in PROVIDERS}
        assert by_name["Groq"].has_key
        assert not by_name["OpenAI"].has_key


class TestSettingsScreen:
    def test_edits_a_copy(self):
        cfg = Config()
        screen = SettingsScreen(cfg)
        screen.config.llm.model = "groq/llama-3.3-70b-versatile"
        assert cfg.llm.model == "gpt-4o-mini"


class TestAgentIdValidator:
    def test_accepts_distinct_id(self):
        assert agent_id_validator("clip-generator")("trend-scout") is True

    def test_rejects_other_agents_id(self):
        result = agent_id_validator("clip-generator")(" clip-generator ")
        assert isinstance(result, str)

    def test_rejects_blank(self):
        assert isinstance(agent_id_validator("clip-generator")("   "), str)
