"""FastMCP server exposing the prpilot tools over stdio.

Each tool takes camelCase arguments, validates them through
``prpilot_cli.tools.dispatch`` and returns text (JSON for structured
results). Exceptions raised by a tool are reported by FastMCP as tool
errors, so a failing call never takes the server down. Logging goes to
stderr so stdout only ever carries protocol messages.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Literal, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from prpilot_core.git.repository import GitRepository
from prpilot_cli import tools

logger = logging.getLogger(__name__)

SERVER_NAME = "prpilot"

BaseBranch = Annotated[Optional[str], Field(description="Base branch (auto-detected if omitted)")]
Template = Literal["standard", "detailed", "minimal"]
Language = Literal["en", "fr"]
TitleLength = Annotated[Optional[int], Field(ge=1, le=200, description="Maximum title length")]
ReviewerLimit = Annotated[int, Field(ge=1, le=20)]


class RepositoryContext:
    """Holds the repository the tools run against, discovered on first use."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = root
        self._repo: GitRepository | None = None

    @property
    def repo(self) -> GitRepository:
        # lazy so the server can start outside a git repository
        if self._repo is None:
            self._repo = GitRepository.discover(self.root)
        return self._repo


def _without_none(arguments: dict) -> dict:
    return {key: value for key, value in arguments.items() if value is not None}


def register_tools(mcp: FastMCP, context: RepositoryContext) -> None:
    """Register the seven prpilot tools on ``mcp``."""

    def run(name: str, arguments: dict) -> str:
        logger.debug("Tool call %s %s", name, sorted(arguments))
        return tools.dispatch(name, _without_none(arguments), repo=context.repo)

    @mcp.tool(name="analyze_branch")
    def analyze_branch(baseBranch: BaseBranch = None, detailed: bool = True) -> str:
        """Analyze the current branch against its base: commits, changed files, line counts and commit types."""
        return run("analyze_branch", {"baseBranch": baseBranch, "detailed": detailed})

    @mcp.tool(name="generate_pr_title")
    def generate_pr_title(baseBranch: BaseBranch = None, maxLength: TitleLength = None) -> str:
        """Propose a conventional-commit PR title (type(scope): subject) for the current branch."""
        return run("generate_pr_title", {"baseBranch": baseBranch, "maxLength": maxLength})

    @mcp.tool(name="generate_pr_description")
    def generate_pr_description(
        baseBranch: BaseBranch = None,
        title: Optional[str] = None,
        template: Template = "standard",
        language: Language = "en",
        includeStats: bool = True,
    ) -> str:
        """Render a markdown PR description from a template (standard, detailed or minimal)."""
        return run(
            "generate_pr_description",
            {
                "baseBranch": baseBranch,
                "title": title,
                "template": template,
                "language": language,
                "includeStats": includeStats,
            },
        )

    @mcp.tool(name="generate_pr_complete")
    def generate_pr_complete(
        baseBranch: BaseBranch = None,
        template: Template = "standard",
        language: Language = "en",
        includeStats: bool = True,
        maxTitleLength: TitleLength = None,
    ) -> str:
        """Generate both the PR title and description from a single branch analysis."""
        return run(
            "generate_pr_complete",
            {
                "baseBranch": baseBranch,
                "template": template,
                "language": language,
                "includeStats": includeStats,
                "maxTitleLength": maxTitleLength,
            },
        )

    @mcp.tool(name="suggest_reviewers")
    def suggest_reviewers(baseBranch: BaseBranch = None, limit: ReviewerLimit = 3) -> str:
        """Suggest reviewers ranked by their git contributions to the modified files."""
        return run("suggest_reviewers", {"baseBranch": baseBranch, "limit": limit})

    @mcp.tool(name="review")
    def review(baseBranch: BaseBranch = None) -> str:
        """Produce a short heuristic review checklist (critical issues, suggestions, decision) for the branch."""
        return run("review", {"baseBranch": baseBranch})

    @mcp.tool(name="create_pr")
    def create_pr(
        baseBranch: BaseBranch = None,
        template: Template = "standard",
        language: Language = "en",
        includeStats: bool = True,
        maxTitleLength: TitleLength = None,
        draft: bool = False,
        githubToken: Annotated[Optional[str], Field(description="Falls back to GITHUB_TOKEN")] = None,
        addReviewers: bool = True,
        maxReviewers: ReviewerLimit = 3,
        includeAIReview: bool = False,
        aiReviewText: Annotated[Optional[str], Field(description="Review markdown to embed")] = None,
        title: Annotated[Optional[str], Field(description="Use this title instead of the inferred one")] = None,
        description: Annotated[Optional[str], Field(description="Use this description instead of a template")] = None,
    ) -> str:
        """Create the branch's GitHub pull request, or update/reopen the existing one, and request reviewers."""
        return run(
            "create_pr",
            {
                "baseBranch": baseBranch,
                "template": template,
                "language": language,
                "includeStats": includeStats,
                "maxTitleLength": maxTitleLength,
                "draft": draft,
                "githubToken": githubToken,
                "addReviewers": addReviewers,
                "maxReviewers": maxReviewers,
                "includeAIReview": includeAIReview,
                "aiReviewText": aiReviewText,
                "title": title,
                "description": description,
            },
        )

    logger.debug("Registered %d prpilot tools", len(tools.TOOL_NAMES))


def create_server(root: Path | None = None) -> FastMCP:
    """Create the FastMCP server with every prpilot tool registered."""
    mcp = FastMCP(name=SERVER_NAME)
    register_tools(mcp, RepositoryContext(root))
    logger.info("Server created: %s", SERVER_NAME)
    return mcp
