"""create command — create, update or reopen the branch's pull request."""

from __future__ import annotations

import click

from prpilot_cli.commands.common import LANGUAGE_CHOICE, TEMPLATE_CHOICE, console, core_errors, echo_json, settings
from prpilot_core.lifecycle import PROptions, create_or_update_pr

_ACTION_STYLE = {"created": "green", "reopened": "yellow", "updated": "cyan"}


@click.command("create")
@click.option("--base", "base_branch", default=None, help="Base branch. Auto-detected when omitted.")
@click.option("--template", type=TEMPLATE_CHOICE, default=None, help="Description layout. [default: standard]")
@click.option("--language", type=LANGUAGE_CHOICE, default=None, help="Description language. [default: en]")
@click.option("--stats/--no-stats", "include_stats", default=None, help="Include the change statistics line.")
@click.option("--max-title-length", type=click.IntRange(1, 200), default=None)
@click.option("--title", default=None, help="Use this title instead of the inferred one.")
@click.option(
    "--description",
    "description_file",
    type=click.File("r"),
    default=None,
    help="Read the PR description from a file ('-' for stdin) instead of a template.",
)
@click.option(
    "--review-file",
    type=click.File("r"),
    default=None,
    help="Markdown review to embed in the description as an AI Code Review section.",
)
@click.option("--draft/--ready", default=None, help="Open new PRs as drafts. [default: ready]")
@click.option("--reviewers/--no-reviewers", "add_reviewers", default=None, help="Request reviews from suggested contributors.")
@click.option("--max-reviewers", type=click.IntRange(1, 20), default=None)
@click.option("--token", default=None, help="GitHub token. Defaults to GITHUB_TOKEN or the gh CLI session.")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.pass_context
def create_cmd(
    ctx,
    base_branch: str | None,
    template: str | None,
    language: str | None,
    include_stats: bool | None,
    max_title_length: int | None,
    title: str | None,
    description_file,
    review_file,
    draft: bool | None,
    add_reviewers: bool | None,
    max_reviewers: int | None,
    token: str | None,
    as_json: bool,
):
    """Create the pull request for the current branch, or update it.

    An open PR for the same head and base is updated in place, a closed
    one is reopened. The branch must already be pushed to origin.

    \b
    Required:
      GITHUB_TOKEN   GitHub personal access or fine-grained token (or use gh CLI)
    """
    from prpilot_cli.auth import resolve_github_token

    config = settings(
        ctx,
        base_branch=base_branch,
        template=template,
        language=language,
        include_stats=include_stats,
        max_title_length=max_title_length,
        draft=draft,
        add_reviewers=add_reviewers,
        max_reviewers=max_reviewers,
    )

    github_token = resolve_github_token(token or config.get("github_token"))
    if not github_token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )

    review_text = review_file.read() if review_file else None
    options = PROptions(
        template=config["template"],
        language=config["language"],
        include_stats=config["include_stats"],
        max_title_length=config["max_title_length"],
        base_branch=config["base_branch"],
        draft=config["draft"],
        github_token=github_token,
        add_reviewers=config["add_reviewers"],
        max_reviewers=config["max_reviewers"],
        include_ai_review=review_text is not None,
        ai_review_text=review_text,
        title=title,
        description=description_file.read() if description_file else None,
    )

    with core_errors():
        result = create_or_update_pr(options)

    if as_json:
        echo_json(result.to_dict())
        return

    style = _ACTION_STYLE.get(result.action, "white")
    console.print(f"[{style}]PR #{result.number} {result.action}[/{style}]: {result.title}")
    console.print(f"  {result.url}")
    if result.reviewers_added:
        console.print(f"  Reviewers: {', '.join(result.reviewers_added)}")
    if result.reviewer_note:
        console.print(f"  [yellow]{result.reviewer_note}[/yellow]")
