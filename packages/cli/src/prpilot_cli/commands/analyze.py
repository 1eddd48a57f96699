"""analyze / title commands — inspect the current branch."""

from __future__ import annotations

import click
from rich.table import Table

from prpilot_cli.commands.common import console, core_errors, echo_json, settings
from prpilot_core.analyzer import analyze_branch
from prpilot_core.title import infer_title


@click.command("analyze")
@click.option("--base", "base_branch", default=None, help="Base branch. Auto-detected when omitted.")
@click.option("--detailed/--quick", default=True, show_default=True, help="Scan the diff for breaking changes and tests.")
@click.option("--json", "as_json", is_flag=True, help="Print the analysis as JSON.")
@click.pass_context
def analyze_cmd(ctx, base_branch: str | None, detailed: bool, as_json: bool):
    """Show commits, changed files and commit types of the current branch."""
    config = settings(ctx, base_branch=base_branch)
    with core_errors():
        summary = analyze_branch(config["base_branch"], detailed=detailed)

    if as_json:
        echo_json(summary.to_dict())
        return

    console.print(
        f"\n[bold cyan]{summary.current_branch}[/bold cyan] → [bold]{summary.base_branch}[/bold]: "
        f"{summary.total_commits} commits, {summary.files_changed} files, "
        f"[green]+{summary.insertions}[/green] [red]-{summary.deletions}[/red]"
    )
    if summary.commit_types:
        console.print(f"  Commit types: {', '.join(sorted(summary.commit_types))}")
    if summary.has_breaking_change:
        console.print("  [red]Breaking changes detected[/red]")
    if summary.has_tests is False:
        console.print("  [yellow]No test files modified[/yellow]")

    if summary.commits:
        commit_table = Table(title="Commits", show_header=True, header_style="bold cyan")
        commit_table.add_column("Hash", width=8)
        commit_table.add_column("Message")
        commit_table.add_column("Author")
        for commit in summary.commits:
            commit_table.add_row(commit.short_hash, commit.message, commit.author_name)
        console.print(commit_table)

    if summary.files:
        file_table = Table(title="Files", show_header=True, header_style="bold cyan")
        file_table.add_column("File")
        file_table.add_column("+", justify="right", style="green")
        file_table.add_column("-", justify="right", style="red")
        for delta in summary.files:
            file_table.add_row(delta.path, str(delta.insertions), str(delta.deletions))
        console.print(file_table)


@click.command("title")
@click.option("--base", "base_branch", default=None, help="Base branch. Auto-detected when omitted.")
@click.option("--max-length", type=click.IntRange(1, 200), default=None, help="Truncate the title with '...'.")
@click.option("--json", "as_json", is_flag=True, help="Print type, scope, subject and title as JSON.")
@click.pass_context
def title_cmd(ctx, base_branch: str | None, max_length: int | None, as_json: bool):
    """Propose a conventional-commit title for the current branch."""
    config = settings(ctx, base_branch=base_branch, max_title_length=max_length)
    with core_errors():
        summary = analyze_branch(config["base_branch"], detailed=False)
    title = infer_title(summary.commit_messages, summary.file_paths, config["max_title_length"])

    if as_json:
        echo_json({"type": title.type, "scope": title.scope, "subject": title.subject, "title": title.rendered})
    else:
        click.echo(title.rendered)
