"""Tests for display formatting helpers."""

from trendclip.formatting import (
    confidence_style,
    format_duration,
    format_number,
    highlight_style,
    platform_label,
)


class TestFormatNumber:
    def test_millions(self):
        assert format_number(12_500_000) == "12.5M"

    def test_thousands(self):
        assert format_number(3_400) == "3.4K"

    def test_small(self):
        assert format_number(999) == "999"

    def test_missing(self):
        assert format_number(None) == "0"
        assert format_number(float("nan")) == "0"


class TestFormatDuration:
    def test_minutes(self):
        assert format_duration(125) == "2:05"

    def test_under_a_minute(self):
        assert format_duration(34) == "0:34"

    def test_missing(self):
        assert format_duration(None) == "0:00"


class TestStyles:
    def test_platform_label(self):
        assert platform_label("tik tok") == "TikTok"
        assert platform_label("YouTube Shorts") == "YouTube"
        assert platform_label("Vimeo") == "Vimeo"
        assert platform_label(None) == "Unknown"

    def test_highlight_case_insensitive(self):
        assert highlight_style("Key Scene") == highlight_style("key scene")
        assert highlight_style("Viral Moment") == "bold red"
        assert highlight_style("montage") == "dim"
        assert highlight_style(None) == "dim"

    def test_confidence_bands(self):
        assert confidence_style(0.95) == "bold cyan"
        assert confidence_style(0.8) == "bold cyan"
        assert confidence_style(0.65) == "bold yellow"
        assert confidence_style(0.2) == "bold red"
        assert confidence_style(None) == "bold red"
