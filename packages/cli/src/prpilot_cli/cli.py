"""CLI entry point for prpilot.

Commands:
  analyze    — commits, files and commit types of the current branch
  title      — conventional-commit title proposal
  describe   — markdown PR description from a template
  reviewers  — reviewer suggestions from the modified files' history
  review     — heuristic pre-review checklist
  create     — create, update or reopen the branch's pull request
  init       — write .prpilot.yml (and an MCP client entry)
  serve      — MCP server on stdio
"""

from __future__ import annotations

import importlib.metadata
import logging
import sys

import click

from prpilot_cli.commands.analyze import analyze_cmd, title_cmd
from prpilot_cli.commands.create import create_cmd
from prpilot_cli.commands.describe import describe_cmd
from prpilot_cli.commands.init import init_cmd
from prpilot_cli.commands.reviewers import review_cmd, reviewers_cmd
from prpilot_cli.commands.serve import serve_cmd

VERSION = importlib.metadata.version("prpilot")


@click.group()
@click.version_option(version=VERSION, prog_name="prpilot")
@click.option(
    "--config",
    "config_path",
    default=".prpilot.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRPILOT_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log each step to stderr.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Prepare GitHub pull requests from the current git branch."""
    from prpilot_core.config import load_config
    from prpilot_core.errors import ConfigError

    if verbose:
        logging.basicConfig(level=logging.INFO, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")

    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


main.add_command(analyze_cmd)
main.add_command(title_cmd)
main.add_command(describe_cmd)
main.add_command(reviewers_cmd)
main.add_command(review_cmd)
main.add_command(create_cmd)
main.add_command(init_cmd)
main.add_command(serve_cmd)
