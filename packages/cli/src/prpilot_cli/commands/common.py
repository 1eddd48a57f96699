"""Helpers shared by the CLI commands."""

from __future__ import annotations

import contextlib
import json

import click
from rich.console import Console

from prpilot_core.errors import PrPilotError

console = Console()

TEMPLATE_CHOICE = click.Choice(["standard", "detailed", "minimal"])
LANGUAGE_CHOICE = click.Choice(["en", "fr"])


def settings(ctx: click.Context, **overrides) -> dict:
    """Config loaded by the group, with non-None command options on top."""
    from prpilot_core.config import load_config

    config = (ctx.obj or {}).get("config")
    if config is None:
        config = load_config()
    merged = dict(config)
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return merged


@contextlib.contextmanager
def core_errors():
    """Turn prpilot_core failures and bad template values into a one-line click error."""
    try:
        yield
    except (PrPilotError, ValueError) as e:
        raise click.ClickException(str(e)) from e


def echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))
