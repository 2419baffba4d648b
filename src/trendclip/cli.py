"""CLI entry point for TrendClip."""

from __future__ import annotations

import asyncio
import logging
import warnings

import click
import questionary
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler

from .agent_client import AgentClient
from .agents.orchestrator import TrendClipOrchestrator
from .agents.state import MessageKind
from .agents.views import PLATFORM_FILTERS, SORT_KEYS, SORT_LABELS
from .config import CLIP_COUNT_OPTIONS, TARGET_PLATFORMS, Config
from .formatting import format_number, platform_label
from .tui.dashboard import TrendClipDashboard, render_history
from .tui.settings import MENU_STYLE, SettingsScreen

warnings.filterwarnings("ignore", category=ResourceWarning)

console = Console()

SETTINGS_FILE = "settings.yaml"


class TrendClipApp:
    """Menu loop over the orchestrator. Agent calls run in the background."""

    def __init__(self, cfg: Config, settings_path: str) -> None:
        self.cfg = cfg
        self.settings_path = settings_path
        self.orchestrator = TrendClipOrchestrator(cfg, AgentClient(cfg))
        self.dashboard = TrendClipDashboard(self.orchestrator.state, cfg)

    @property
    def state(self):
        return self.orchestrator.state

    def _render(self) -> None:
        console.clear()
        if self.state.active_tab == "history":
            console.print(render_history(self.state))
        else:
            console.print(self.dashboard)

    def _discover_choices(self) -> list:
        state = self.state
        pending = state.discovery.pending or state.generation.pending
        choices = [
            questionary.Choice(
                "  Discover trends",
                value="discover",
                disabled="running" if not state.can_discover else None,
            ),
            questionary.Choice(f"  Filter: {state.platform_filter}", value="filter"),
            questionary.Choice(f"  Sort: {SORT_LABELS[state.sort_key]}", value="sort"),
        ]
        if state.videos:
            choices.append(questionary.Choice("  Select video", value="select"))
        if state.selected_video is not None:
            choices += [
                questionary.Choice("  Clip options", value="options"),
                questionary.Choice(
                    f"  Generate {state.clip_count} clips",
                    value="generate",
                    disabled=None if state.can_generate else "unavailable",
                ),
                questionary.Choice("  Close video", value="close"),
            ]
        if pending:
            choices.append(questionary.Choice("  Watch progress", value="watch"))
        if state.messages:
            choices.append(questionary.Choice("  Dismiss messages", value="dismiss"))
        sample = "ON" if state.sample_data_on else "OFF"
        choices += [
            questionary.Choice("  Clip history", value="history"),
            questionary.Choice(f"  Sample data [{sample}]", value="sample"),
            questionary.Choice("  Settings", value="settings"),
            questionary.Choice("  Exit", value="exit"),
        ]
        return choices

    def _history_choices(self) -> list:
        history = self.state.history
        choices = []
        for session in history.sessions:
            mark = "▾" if session.id == history.expanded_id else "▸"
            choices.append(questionary.Choice(
                f"  {mark} {session.source_video_title[:50]} ({len(session.pairs)} clips)",
                value=session.id,
            ))
        choices.append(questionary.Choice("  ← Discover", value="_back"))
        return choices

    async def _ask(self, message: str, choices: list):
        return await questionary.select(message, choices=choices, style=MENU_STYLE).ask_async()

    async def _watch(self) -> None:
        """Show the live dashboard until in-flight workflows settle."""
        with Live(self.dashboard, console=console, refresh_per_second=4, screen=False):
            await self.orchestrator.wait_idle()

    async def _choose_video(self) -> None:
        videos = self.state.visible_videos
        choices = [
            questionary.Choice(
                f"  [{platform_label(v.platform)}] {(v.title or 'Untitled')[:55]} "
                f"({format_number(v.view_count)} views)",
                value=i,
            )
            for i, v in enumerate(videos)
        ]
        picked = await self._ask("Select a video:", choices)
        if picked is not None:
            self.orchestrator.select_video(videos[picked])

    async def _clip_options(self) -> None:
        state = self.state
        targets = await questionary.checkbox(
            "Target platforms:",
            choices=[
                questionary.Choice(label, value=key, checked=key in state.target_platforms)
                for key, label in TARGET_PLATFORMS.items()
            ],
            style=MENU_STYLE,
        ).ask_async()
        if targets is not None:
            for key in TARGET_PLATFORMS:
                if (key in targets) != (key in self.state.target_platforms):
                    self.orchestrator.toggle_target_platform(key)

        captions = await questionary.confirm(
            "Include captions?", default=state.include_captions, style=MENU_STYLE
        ).ask_async()
        if captions is not None:
            self.orchestrator.set_include_captions(captions)

        count = await self._ask(
            "Number of clips:", [questionary.Choice(str(n), value=n) for n in CLIP_COUNT_OPTIONS]
        )
        if count is not None:
            self.orchestrator.set_clip_count(count)

    async def _settings(self) -> None:
        self.cfg = await SettingsScreen(self.cfg).run()
        self.cfg.save_to_file(self.settings_path)
        self.orchestrator.reconfigure(self.cfg, AgentClient(self.cfg))
        self.dashboard = TrendClipDashboard(self.orchestrator.state, self.cfg)
        console.print(f"[green]Settings saved to {self.settings_path}[/green]")

    async def run(self) -> None:
        orch = self.orchestrator
        while True:
            self._render()

            if self.state.active_tab == "history":
                choice = await self._ask("Expand a session:", self._history_choices())
                if choice is None or choice == "_back":
                    orch.set_tab("discover")
                else:
                    orch.toggle_history_entry(choice)
                continue

            choice = await self._ask("What would you like to do?", self._discover_choices())
            if choice is None or choice == "exit":
                break
            elif choice == "discover":
                orch.start_discovery()
            elif choice == "filter":
                platform = await self._ask("Show platform:", list(PLATFORM_FILTERS))
                if platform:
                    orch.set_platform_filter(platform)
            elif choice == "sort":
                key = await self._ask(
                    "Sort by:", [questionary.Choice(SORT_LABELS[k], value=k) for k in SORT_KEYS]
                )
                if key:
                    orch.set_sort_key(key)
            elif choice == "select":
                await self._choose_video()
            elif choice == "options":
                await self._clip_options()
            elif choice == "generate":
                orch.start_generation()
            elif choice == "close":
                orch.clear_selection()
            elif choice == "watch":
                await self._watch()
            elif choice == "dismiss":
                for kind in MessageKind:
                    orch.dismiss_message(kind)
            elif choice == "history":
                orch.set_tab("history")
            elif choice == "sample":
                orch.set_sample_data(not self.state.sample_data_on)
            elif choice == "settings":
                await self._settings()

        if orch.state.discovery.pending or orch.state.generation.pending:
            console.print("[dim]Waiting for running agents to finish...[/dim]")
            await orch.wait_idle()
        orch.close()


@click.command()
@click.option("--settings", "settings_path", default=SETTINGS_FILE, show_default=True,
              help="YAML settings file.")
@click.option("--sample", is_flag=True, help="Start with sample data loaded.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging.")
def main(settings_path: str, sample: bool, verbose: bool) -> None:
    """Discover trending short-form videos and generate highlight clips."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    cfg = Config.load_from_file(settings_path)
    app = TrendClipApp(cfg, settings_path)
    if sample:
        app.orchestrator.set_sample_data(True)
    try:
        asyncio.run(app.run())
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")


if __name__ == "__main__":
    main()
