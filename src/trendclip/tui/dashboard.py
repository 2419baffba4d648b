"""Rich renderables for the TrendClip console."""

from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

from rich.console import Group
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..agents.state import AppState, MessageKind
from ..agents.views import SORT_LABELS
from ..formatting import (
    confidence_style,
    format_duration,
    format_number,
    highlight_style,
    platform_label,
    platform_style,
)

if TYPE_CHECKING:
    from ..config import Config
    from ..models.trends import ClipPair, ClipSession, TrendingVideo

_SPINNER = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"

_MESSAGE_STYLES = {
    MessageKind.ERROR: ("!", "bold red", "red"),
    MessageKind.INFO: ("i", "bold yellow", "yellow"),
    MessageKind.SUCCESS: ("✓", "bold green", "green"),
}


def agents_info(config: Config) -> Tuple[Tuple[str, str, str], ...]:
    """(agent id, name, purpose) for the status panel."""
    return (
        (
            config.agents.discovery_agent_id,
            "Trend Discovery Manager",
            "Coordinates TikTok, YouTube, Instagram research to discover trending content",
        ),
        (
            config.agents.generation_agent_id,
            "Clip Generator Agent",
            "Analyzes videos and generates optimized clips with captions for target platforms",
        ),
    )


class _Messages:
    def __init__(self, state: AppState) -> None:
        self.state = state

    def __rich__(self) -> Group:
        rows = []
        for kind, (icon, style, border) in _MESSAGE_STYLES.items():
            text = self.state.message(kind)
            if text:
                rows.append(Panel(Text(f"{icon} {text}", style=style), border_style=border, padding=(0, 1)))
        return Group(*rows)


class _AgentStatus:
    def __init__(self, state: AppState, config: Config) -> None:
        self.state = state
        self.config = config
        self._tick = 0

    def __rich__(self) -> Panel:
        self._tick += 1
        active = self.state.active_agent_ids
        table = Table.grid(padding=(0, 1))
        table.add_column(width=2)
        table.add_column()
        for agent_id, name, purpose in agents_info(self.config):
            if agent_id in active:
                marker = Text(_SPINNER[self._tick % len(_SPINNER)], style="bold magenta")
                label = Text(name, style="bold cyan")
            else:
                marker = Text("○", style="dim")
                label = Text(name, style="white")
            label.append(f"  {purpose}", style="dim")
            table.add_row(marker, label)
        return Panel(table, title="[bold]agent status[/bold]", border_style="blue", padding=(0, 1))


class _SummaryBar:
    def __init__(self, state: AppState) -> None:
        self.state = state

    def __rich__(self) -> Text:
        summary = self.state.summary
        text = Text()
        if summary is None:
            return text
        text.append(f"  {summary.total_videos}", style="bold white")
        text.append(" total ", style="dim")
        text.append(f"{summary.tiktok_count}", style="bold cyan")
        text.append(" TikTok ", style="dim")
        text.append(f"{summary.youtube_count}", style="bold red")
        text.append(" YouTube ", style="dim")
        text.append(f"{summary.instagram_count}", style="bold magenta")
        text.append(" Instagram", style="dim")
        if summary.trending_themes:
            text.append("  │ ", style="dim")
            text.append(" • ".join(summary.trending_themes[:5]), style="yellow")
        if self.state.fetched_at:
            text.append(f"  Updated: {self.state.fetched_at}", style="dim")
        return text


class _VideoTable:
    def __init__(self, state: AppState) -> None:
        self.state = state

    def __rich__(self) -> Panel:
        state = self.state
        videos = state.visible_videos
        title = (
            f"[bold]trending[/bold] ({len(videos)}) "
            f"[dim]filter:[/dim] {state.platform_filter}  "
            f"[dim]sort:[/dim] {SORT_LABELS[state.sort_key]}"
        )

        if state.discovery.pending:
            body = Text("  Discovering trends...", style="dim")
            return Panel(body, title=title, border_style="cyan", padding=(0, 0))
        if not videos:
            body = Text("  (no videos - run Discover or turn on sample data)", style="dim")
            return Panel(body, title=title, border_style="dim", padding=(0, 0))

        table = Table(expand=True, padding=(0, 1), show_edge=False, box=None)
        table.add_column("#", width=3, style="yellow")
        table.add_column("Platform", width=10)
        table.add_column("Title", ratio=1, no_wrap=True, overflow="ellipsis")
        table.add_column("Creator", width=16, no_wrap=True, overflow="ellipsis", style="dim")
        table.add_column("Views", justify="right", width=7)
        table.add_column("Likes", justify="right", width=7)
        table.add_column("Shares", justify="right", width=7)
        table.add_column("Eng.", justify="right", width=5, style="cyan")
        table.add_column("Len", justify="right", width=6, style="dim")

        for video in videos:
            table.add_row(
                f"{video.trending_rank}" if video.is_ranked else "",
                Text(platform_label(video.platform), style=platform_style(video.platform)),
                video.title or "Untitled",
                video.creator,
                format_number(video.view_count),
                format_number(video.like_count),
                format_number(video.share_count),
                f"{video.engagement_score:.1f}",
                format_duration(video.duration_seconds),
            )
        return Panel(table, title=title, border_style="cyan", padding=(0, 0))


def render_video_detail(state: AppState) -> Panel:
    video: TrendingVideo = state.selected_video
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold")
    grid.add_column()
    grid.add_row("Platform", Text(platform_label(video.platform), style=platform_style(video.platform)))
    grid.add_row("Creator", video.creator)
    grid.add_row("Duration", format_duration(video.duration_seconds))
    grid.add_row("Posted", video.posted_date or "-")
    grid.add_row(
        "Stats",
        f"{format_number(video.view_count)} views │ {format_number(video.like_count)} likes │ "
        f"{format_number(video.share_count)} shares │ {format_number(video.comment_count)} comments",
    )
    grid.add_row("Engagement", f"{video.engagement_score:.1f}")
    if video.hashtags:
        grid.add_row("Hashtags", Text(" ".join(video.hashtags), style="cyan"))
    grid.add_row("Targets", ", ".join(state.target_platforms) or "[red]none selected[/red]")
    grid.add_row("Captions", "ON" if state.include_captions else "OFF")
    grid.add_row("Clips", str(state.clip_count))
    return Panel(grid, title=f"[bold cyan]{video.title or 'Untitled'}[/bold cyan]", border_style="cyan")


def _clip_table(pairs: Tuple[ClipPair, ...]) -> Table:
    table = Table(expand=True, padding=(0, 1), show_edge=False, box=None)
    table.add_column("#", width=3, style="dim")
    table.add_column("Clip", ratio=1, no_wrap=True, overflow="ellipsis")
    table.add_column("Type", width=13)
    table.add_column("Range", width=13, style="dim")
    table.add_column("Len", justify="right", width=5)
    table.add_column("Ratio", width=5)
    table.add_column("Target", width=16)
    table.add_column("CC", width=2)
    table.add_column("Conf", justify="right", width=5)
    table.add_column("File", no_wrap=True, overflow="ellipsis", style="green")

    for i, pair in enumerate(pairs, start=1):
        clip = pair.clip
        table.add_row(
            str(i),
            clip.clip_title or f"Clip {i}",
            Text(clip.highlight_type, style=highlight_style(clip.highlight_type)),
            f"{clip.start_time or '0:00'}-{clip.end_time or '0:00'}",
            format_duration(clip.duration_seconds),
            clip.aspect_ratio,
            Text(platform_label(clip.target_platform), style=platform_style(clip.target_platform))
            if clip.target_platform else "",
            "CC" if clip.captions_included else "",
            Text(f"{clip.confidence_score:.0%}", style=confidence_style(clip.confidence_score)),
            pair.artifact.file_url if pair.artifact and pair.artifact.file_url else "",
        )
    return table


def render_clip_results(state: AppState) -> Panel:
    body = [_clip_table(state.clip_pairs)]
    if state.unpaired_artifacts:
        files = Text("\nAdditional files:\n", style="bold")
        for artifact in state.unpaired_artifacts:
            files.append(f"  {artifact.name or artifact.file_url}  {artifact.file_url}\n", style="green")
        body.append(files)
    if state.clip_processing_summary:
        body.append(Markdown(state.clip_processing_summary, style="dim"))
    title = f"[bold]clips[/bold] ({len(state.clip_pairs)}) - {state.clip_source_title}"
    return Panel(Group(*body), title=title, border_style="magenta")


def render_session(session: ClipSession, expanded: bool) -> Panel:
    header = Text()
    header.append(session.source_video_title or "Untitled", style="bold cyan")
    header.append(f"  {len(session.pairs)} clips", style="white")
    if session.count_mismatch:
        header.append(f" (agent reported {session.total_clips})", style="yellow")
    header.append(f"  {session.generated_at}", style="dim")
    if not expanded:
        return Panel(header, border_style="dim", padding=(0, 1))

    body = [header, _clip_table(session.pairs)]
    if session.processing_summary:
        body.append(Markdown(session.processing_summary, style="dim"))
    return Panel(Group(*body), border_style="magenta", padding=(0, 1))


def render_history(state: AppState) -> Panel:
    history = state.history
    if not len(history):
        body = Text(
            "  No clip history yet. Discover trending videos and generate clips; "
            "your sessions will appear here.",
            style="dim",
        )
        return Panel(body, title="[bold]clip history[/bold]", border_style="dim")
    panels = [render_session(s, s.id == history.expanded_id) for s in history.sessions]
    return Panel(Group(*panels), title=f"[bold]clip history[/bold] ({len(history)})", border_style="yellow")


class TrendClipDashboard:
    """Discover-tab layout: messages, agent status, summary, video list."""

    def __init__(self, state: AppState, config: Config) -> None:
        self.state = state
        self.messages = _Messages(state)
        self.agents = _AgentStatus(state, config)
        self.summary = _SummaryBar(state)
        self.videos = _VideoTable(state)

    def __rich__(self) -> Group:
        parts = [self.messages, self.agents, self.summary, self.videos]
        if self.state.show_detail and self.state.selected_video is not None:
            parts.append(render_video_detail(self.state))
        if self.state.show_clip_results and self.state.clip_pairs:
            parts.append(render_clip_results(self.state))
        return Group(*parts)
