"""describe command — render a markdown PR description."""

from __future__ import annotations

import click

from prpilot_cli.commands.common import LANGUAGE_CHOICE, TEMPLATE_CHOICE, core_errors, echo_json, settings
from prpilot_core.templates import generate_complete, generate_description


@click.command("describe")
@click.option("--base", "base_branch", default=None, help="Base branch. Auto-detected when omitted.")
@click.option("--template", type=TEMPLATE_CHOICE, default=None, help="Description layout. [default: standard]")
@click.option("--language", type=LANGUAGE_CHOICE, default=None, help="Description language. [default: en]")
@click.option("--title", default=None, help="Title shown by the minimal template.")
@click.option("--stats/--no-stats", "include_stats", default=None, help="Include the change statistics line.")
@click.option("--with-title", "with_title", is_flag=True, help="Also infer the PR title from the same analysis.")
@click.option("--max-title-length", type=click.IntRange(1, 200), default=None, help="Used with --with-title.")
@click.option("--json", "as_json", is_flag=True, help="Print {title, description} as JSON.")
@click.pass_context
def describe_cmd(
    ctx,
    base_branch: str | None,
    template: str | None,
    language: str | None,
    title: str | None,
    include_stats: bool | None,
    with_title: bool,
    max_title_length: int | None,
    as_json: bool,
):
    """Print a PR description for the current branch.

    The output is plain markdown so it can be piped into `gh pr create
    --body-file -` or edited before use.
    """
    config = settings(
        ctx,
        base_branch=base_branch,
        template=template,
        language=language,
        include_stats=include_stats,
        max_title_length=max_title_length,
    )

    with core_errors():
        if with_title or as_json:
            result = generate_complete(
                template=config["template"],
                language=config["language"],
                include_stats=config["include_stats"],
                max_title_length=config["max_title_length"],
                base_branch=config["base_branch"],
            )
        else:
            result = {
                "title": title,
                "description": generate_description(
                    title=title,
                    template=config["template"],
                    language=config["language"],
                    include_stats=config["include_stats"],
                    base_branch=config["base_branch"],
                ),
            }

    if as_json:
        echo_json(result)
    elif with_title:
        click.echo(f"{result['title']}\n\n{result['description']}")
    else:
        click.echo(result["description"])
