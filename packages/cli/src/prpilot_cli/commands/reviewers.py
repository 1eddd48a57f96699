"""reviewers / review commands — reviewer suggestions and the pre-review checklist."""

from __future__ import annotations

import click
from rich.table import Table

from prpilot_cli.commands.common import console, core_errors, echo_json, settings
from prpilot_core.review import build_review
from prpilot_core.reviewers import suggest_reviewers


@click.command("reviewers")
@click.option("--base", "base_branch", default=None, help="Base branch. Auto-detected when omitted.")
@click.option("--limit", type=click.IntRange(1, 20), default=None, help="Maximum reviewers to suggest. [default: 3]")
@click.option("--json", "as_json", is_flag=True, help="Print the suggestions as JSON.")
@click.pass_context
def reviewers_cmd(ctx, base_branch: str | None, limit: int | None, as_json: bool):
    """Suggest reviewers from the git history of the modified files.

    Usernames are guessed from commit emails and names; they are not
    checked against GitHub.
    """
    config = settings(ctx, base_branch=base_branch, max_reviewers=limit)
    result = suggest_reviewers(config["max_reviewers"], config["base_branch"])

    if as_json:
        echo_json(result.to_dict())
        return

    console.print(f"\n[dim]{result.based_on}[/dim]")
    if not result.ok:
        console.print(f"[yellow]{result.error}[/yellow]")
        return

    table = Table(title="Suggested reviewers", show_header=True, header_style="bold cyan")
    table.add_column("Username", style="bold")
    table.add_column("Commits", justify="right")
    table.add_column("Email")
    for suggestion in result.suggestions:
        table.add_row(suggestion.author, str(suggestion.contributions), suggestion.email)
    console.print(table)


@click.command("review")
@click.option("--base", "base_branch", default=None, help="Base branch. Auto-detected when omitted.")
@click.pass_context
def review_cmd(ctx, base_branch: str | None):
    """Print a short heuristic review checklist for the current branch.

    Flags breaking changes, missing tests, debug statements, TODO/FIXME
    markers and suspected secrets, and ends with APPROVE or REQUEST_CHANGES.
    """
    config = settings(ctx, base_branch=base_branch)
    with core_errors():
        click.echo(build_review(config["base_branch"]))
