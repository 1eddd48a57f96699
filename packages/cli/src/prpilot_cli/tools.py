"""Tool argument models and dispatch used by the MCP server.

Arguments arrive as camelCase JSON objects and are shape-checked by
pydantic models; results are returned as text (JSON for structured data).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from prpilot_core.analyzer import analyze_branch
from prpilot_core.git.repository import GitRepository
from prpilot_core.lifecycle import PROptions, create_or_update_pr
from prpilot_core.review import build_review
from prpilot_core.reviewers import suggest_reviewers
from prpilot_core.templates import generate_complete, generate_description
from prpilot_core.title import generate_title

logger = logging.getLogger(__name__)

TemplateName = Literal["standard", "detailed", "minimal"]
LanguageName = Literal["en", "fr"]


class ToolInputError(ValueError):
    """Tool arguments failed validation."""


class _ToolArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    base_branch: Optional[str] = Field(None, alias="baseBranch", description="Base branch (auto-detected if omitted)")


class AnalyzeBranchArgs(_ToolArgs):
    detailed: bool = Field(True, description="Also scan the diff for breaking changes and test files")


class TitleArgs(_ToolArgs):
    max_length: Optional[int] = Field(None, alias="maxLength", ge=1, le=200, description="Maximum title length")


class DescriptionArgs(_ToolArgs):
    title: Optional[str] = Field(None, description="PR title shown by the minimal template")
    template: TemplateName = "standard"
    language: LanguageName = "en"
    include_stats: bool = Field(True, alias="includeStats")


class CompleteArgs(_ToolArgs):
    template: TemplateName = "standard"
    language: LanguageName = "en"
    include_stats: bool = Field(True, alias="includeStats")
    max_title_length: Optional[int] = Field(None, alias="maxTitleLength", ge=1, le=200)


class ReviewersArgs(_ToolArgs):
    limit: int = Field(3, ge=1, le=20, description="Maximum number of reviewers to suggest")


class ReviewArgs(_ToolArgs):
    pass


class CreatePRArgs(CompleteArgs):
    draft: bool = False
    github_token: Optional[str] = Field(None, alias="githubToken", description="Falls back to GITHUB_TOKEN")
    add_reviewers: bool = Field(True, alias="addReviewers")
    max_reviewers: int = Field(3, alias="maxReviewers", ge=1, le=20)
    include_ai_review: bool = Field(False, alias="includeAIReview")
    ai_review_text: Optional[str] = Field(None, alias="aiReviewText", description="Review markdown to embed")
    title: Optional[str] = Field(None, description="Use this title instead of the inferred one")
    description: Optional[str] = Field(None, description="Use this description instead of a template")


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _analyze_branch(args: AnalyzeBranchArgs, repo: GitRepository) -> str:
    return _to_json(analyze_branch(args.base_branch, detailed=args.detailed, repo=repo).to_dict())


def _generate_title(args: TitleArgs, repo: GitRepository) -> str:
    return generate_title(args.max_length, args.base_branch, repo=repo)


def _generate_description(args: DescriptionArgs, repo: GitRepository) -> str:
    return generate_description(
        title=args.title,
        template=args.template,
        language=args.language,
        include_stats=args.include_stats,
        base_branch=args.base_branch,
        repo=repo,
    )


def _generate_complete(args: CompleteArgs, repo: GitRepository) -> str:
    return _to_json(
        generate_complete(
            template=args.template,
            language=args.language,
            include_stats=args.include_stats,
            max_title_length=args.max_title_length,
            base_branch=args.base_branch,
            repo=repo,
        )
    )


def _suggest_reviewers(args: ReviewersArgs, repo: GitRepository) -> str:
    return _to_json(suggest_reviewers(args.limit, args.base_branch, repo=repo).to_dict())


def _review(args: ReviewArgs, repo: GitRepository) -> str:
    return build_review(args.base_branch, repo=repo)


def _create_pr(args: CreatePRArgs, repo: GitRepository) -> str:
    options = PROptions(
        template=args.template,
        language=args.language,
        include_stats=args.include_stats,
        max_title_length=args.max_title_length,
        base_branch=args.base_branch,
        draft=args.draft,
        github_token=args.github_token,
        add_reviewers=args.add_reviewers,
        max_reviewers=args.max_reviewers,
        include_ai_review=args.include_ai_review,
        ai_review_text=args.ai_review_text,
        title=args.title,
        description=args.description,
    )
    return _to_json(create_or_update_pr(options, repo=repo).to_dict())


# name -> (argument model, handler, description)
_REGISTRY: dict[str, tuple[type[_ToolArgs], Callable[..., str], str]] = {
    "analyze_branch": (
        AnalyzeBranchArgs,
        _analyze_branch,
        "Analyze the current branch against its base: commits, changed files, line counts and commit types.",
    ),
    "generate_pr_title": (
        TitleArgs,
        _generate_title,
        "Propose a conventional-commit PR title (type(scope): subject) for the current branch.",
    ),
    "generate_pr_description": (
        DescriptionArgs,
        _generate_description,
        "Render a markdown PR description from a template (standard, detailed or minimal).",
    ),
    "generate_pr_complete": (
        CompleteArgs,
        _generate_complete,
        "Generate both the PR title and description from a single branch analysis.",
    ),
    "suggest_reviewers": (
        ReviewersArgs,
        _suggest_reviewers,
        "Suggest reviewers ranked by their git contributions to the modified files.",
    ),
    "review": (
        ReviewArgs,
        _review,
        "Produce a short heuristic review checklist (critical issues, suggestions, decision) for the branch.",
    ),
    "create_pr": (
        CreatePRArgs,
        _create_pr,
        "Create the branch's GitHub pull request, or update/reopen the existing one, and request reviewers.",
    ),
}


TOOL_NAMES = tuple(_REGISTRY)


def _validation_message(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        location = ".".join(str(p) for p in err["loc"])
        parts.append(f"{location}: {err['msg']}" if location else err["msg"])
    return "Validation error: " + ", ".join(parts)


def dispatch(name: str, arguments: Optional[dict] = None, repo: Optional[GitRepository] = None) -> str:
    """Validate ``arguments`` for tool ``name``, run it and return its text result.

    Raises ToolInputError for unknown tools or invalid arguments; errors
    from the tool itself propagate unchanged.
    """
    entry = _REGISTRY.get(name)
    if entry is None:
        raise ToolInputError(f"Unknown tool: {name}")
    model, handler, _description = entry

    try:
        args = model.model_validate(arguments or {})
    except ValidationError as e:
        raise ToolInputError(_validation_message(e)) from e

    logger.info("Running tool %s", name)
    return handler(args, repo or GitRepository.discover())
