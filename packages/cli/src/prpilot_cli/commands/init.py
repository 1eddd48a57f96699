"""init command — interactive setup for a repository.

Writes .prpilot.yml with the team defaults and, optionally, an .mcp.json
entry so MCP clients opened in the repository pick up `prpilot serve`.
"""

from __future__ import annotations

import json
from pathlib import Path

import click
import yaml

from prpilot_cli.commands.common import LANGUAGE_CHOICE, TEMPLATE_CHOICE, console
from prpilot_core.config import DEFAULT_CONFIG, DEFAULT_CONFIG_FILE
from prpilot_core.errors import GitError
from prpilot_core.git.repository import GitRepository

MCP_CONFIG_FILE = ".mcp.json"


@click.command("init")
@click.option("--yes", "-y", is_flag=True, help="Accept every default without prompting.")
def init_cmd(yes: bool):
    """Set up prpilot for this repository."""
    console.print("\n[bold cyan]prpilot init[/bold cyan]: repository setup\n")

    detected_base = _detect_base_branch()
    if detected_base:
        console.print(f"[dim]Detected base branch: {detected_base}[/dim]")

    def ask(text, default, **kwargs):
        return default if yes else click.prompt(text, default=default, **kwargs)

    def confirm(text, default):
        return default if yes else click.confirm(text, default=default)

    config: dict = {
        "base_branch": ask("Base branch", detected_base or "main"),
        "template": ask("Description template", DEFAULT_CONFIG["template"], type=TEMPLATE_CHOICE),
        "language": ask("Description language", DEFAULT_CONFIG["language"], type=LANGUAGE_CHOICE),
        "add_reviewers": confirm("Request reviews from suggested contributors?", DEFAULT_CONFIG["add_reviewers"]),
    }
    if config["add_reviewers"]:
        config["max_reviewers"] = ask(
            "Maximum reviewers", DEFAULT_CONFIG["max_reviewers"], type=click.IntRange(1, 20)
        )
    config["draft"] = confirm("Open new PRs as drafts?", DEFAULT_CONFIG["draft"])

    _write_config(config)
    console.print(f"[green]Created {DEFAULT_CONFIG_FILE}[/green]")

    if confirm(f"\nAdd prpilot to {MCP_CONFIG_FILE} for MCP clients?", True):
        _write_mcp_config()
        console.print(f"[green]Updated {MCP_CONFIG_FILE}[/green]")

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Open or update the PR for this branch with: [bold]prpilot create[/bold]")


def _detect_base_branch() -> str | None:
    try:
        return GitRepository.discover().detect_base_branch()
    except GitError:
        return None


def _write_config(config: dict) -> None:
    """Write or update .prpilot.yml, preserving any existing keys."""
    path = Path(DEFAULT_CONFIG_FILE)
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))


def _write_mcp_config() -> None:
    """Add (or replace) the prpilot server entry in .mcp.json."""
    path = Path(MCP_CONFIG_FILE)
    existing: dict = {}
    if path.exists():
        existing = json.loads(path.read_text() or "{}")
    existing.setdefault("mcpServers", {})["prpilot"] = {"command": "prpilot", "args": ["serve"]}
    path.write_text(json.dumps(existing, indent=2) + "\n")
