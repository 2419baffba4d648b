"""Interactive settings screen for the agent backend."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import questionary
from questionary import Style
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import Config

MENU_STYLE = Style([
    ("qmark", "fg:ansimagenta bold"),
    ("question", "bold"),
    ("answer", "fg:ansibrightcyan bold"),
    ("pointer", "fg:ansimagenta bold"),
    ("highlighted", "fg:ansibrightmagenta bold"),
    ("selected", "fg:ansibrightcyan"),
    ("disabled", "fg:ansibrightblack italic"),
])


@dataclass(frozen=True)
class Provider:
    name: str
    models: Tuple[str, ...]
    env_var: Optional[str] = None

    @property
    def has_key(self) -> bool:
        return self.env_var is None or bool(os.environ.get(self.env_var))


PROVIDERS = (
    Provider("OpenAI", ("gpt-4o-mini", "gpt-4o", "o3-mini"), "OPENAI_API_KEY"),
    Provider("Anthropic", ("anthropic/claude-haiku-4-5", "anthropic/claude-sonnet-4-5"),
             "ANTHROPIC_API_KEY"),
    Provider("Gemini", ("gemini/gemini-2.5-flash", "gemini/gemini-2.5-pro"), "GEMINI_API_KEY"),
    Provider("Groq", ("groq/llama-3.3-70b-versatile",), "GROQ_API_KEY"),
    Provider("OpenRouter", ("openrouter/auto",), "OPENROUTER_API_KEY"),
    Provider("Ollama (local)", ("ollama/llama3.2", "ollama/qwen2.5")),
)

_CUSTOM = "Custom model id..."


def mask_key(key: Optional[str]) -> str:
    if not key:
        return "not set"
    return f"{key[:4]}...{key[-4:]}" if len(key) > 12 else "***"


def _parse_seconds(text: str) -> bool | str:
    try:
        return float(text) > 0 or "Must be a positive number of seconds"
    except ValueError:
        return "Must be a number"


def agent_id_validator(other_id: str) -> Callable[[str], bool | str]:
    """Reject empty ids and the id already used by the other agent."""

    def validate(text: str) -> bool | str:
        text = text.strip()
        if not text:
            return "Agent id cannot be empty"
        if text == other_id:
            return "Discovery and generation agents need different ids"
        return True

    return validate


class SettingsScreen:
    """Edit the agent model, API key, agent ids and message lifetimes."""

    def __init__(self, config: Config) -> None:
        self.config = config.model_copy(deep=True)
        self.console = Console()

    def _summary_panel(self) -> Panel:
        llm, agents = self.config.llm, self.config.agents
        table = Table.grid(padding=(0, 3))
        table.add_column(style="bold")
        table.add_column(style="cyan")
        table.add_row("Model", llm.model)
        table.add_row("API key", mask_key(llm.api_key))
        table.add_row("API base", llm.api_base or "provider default")
        table.add_row("Discovery agent", agents.discovery_agent_id)
        table.add_row("Generation agent", agents.generation_agent_id)
        table.add_row(
            "Message lifetimes",
            f"success {agents.success_message_delay:g}s, error {agents.error_message_delay:g}s, "
            f"info {agents.info_message_delay:g}s",
        )
        return Panel(table, title="[bold magenta]settings[/bold magenta]", border_style="magenta",
                     padding=(1, 2))

    async def _pick_model(self) -> None:
        choices = [
            questionary.Choice(f"{'●' if p.has_key else '○'} {p.name}", value=p) for p in PROVIDERS
        ]
        provider = await questionary.select(
            "Provider (● = key found in environment):", choices=choices, style=MENU_STYLE
        ).ask_async()
        if provider is None:
            return

        model = await questionary.select(
            f"{provider.name} model:", choices=list(provider.models) + [_CUSTOM], style=MENU_STYLE
        ).ask_async()
        if model == _CUSTOM:
            model = await questionary.text(
                "Model id (LiteLLM format):", default=self.config.llm.model, style=MENU_STYLE
            ).ask_async()
        if not model:
            return

        self.config.llm.model = model
        if provider.env_var and not provider.has_key and not self.config.llm.api_key:
            await self._set_api_key()

    async def _set_api_key(self) -> None:
        key = await questionary.password("API key (blank keeps the current one):",
                                         style=MENU_STYLE).ask_async()
        if key:
            self.config.llm.api_key = key.strip()

    async def _set_api_base(self) -> None:
        base = await questionary.text(
            "API base URL (blank for provider default):",
            default=self.config.llm.api_base or "",
            style=MENU_STYLE,
        ).ask_async()
        if base is not None:
            self.config.llm.api_base = base.strip() or None

    async def _set_agent_ids(self) -> None:
        agents = self.config.agents
        fields = (("discovery_agent_id", "generation_agent_id", "Discovery agent id:"),
                  ("generation_agent_id", "discovery_agent_id", "Generation agent id:"))
        for field_name, other_name, label in fields:
            value = await questionary.text(
                label,
                default=getattr(agents, field_name),
                validate=agent_id_validator(getattr(agents, other_name)),
                style=MENU_STYLE,
            ).ask_async()
            if value:
                setattr(agents, field_name, value.strip())

    async def _set_lifetimes(self) -> None:
        agents = self.config.agents
        for kind in ("success", "error", "info"):
            field_name = f"{kind}_message_delay"
            value = await questionary.text(
                f"Seconds before {kind} messages clear:",
                default=f"{getattr(agents, field_name):g}",
                validate=_parse_seconds,
                style=MENU_STYLE,
            ).ask_async()
            if value:
                setattr(agents, field_name, float(value))

    async def run(self) -> Config:
        """Show the menu until Done; returns the edited copy."""
        actions = {
            "model": self._pick_model,
            "api_key": self._set_api_key,
            "api_base": self._set_api_base,
            "agents": self._set_agent_ids,
            "lifetimes": self._set_lifetimes,
        }
        while True:
            self.console.clear()
            self.console.print(self._summary_panel())
            choice = await questionary.select(
                "Change:",
                choices=[
                    questionary.Choice("Model / provider", value="model"),
                    questionary.Choice("API key", value="api_key"),
                    questionary.Choice("API base", value="api_base"),
                    questionary.Choice("Agent ids", value="agents"),
                    questionary.Choice("Message lifetimes", value="lifetimes"),
                    questionary.Choice("Done", value="_done"),
                ],
                style=MENU_STYLE,
            ).ask_async()
            if choice is None or choice == "_done":
                return self.config
            await actions[choice]()
