"""PR lifecycle orchestration: create, update or reopen the branch's pull request.

Flow:
    credential → origin remote → branches → remote branch check
    → title → description → create | reopen | update → reviewers → result

Each invocation decides its action exactly once from the existing PR:
    none   → create  → "created"
    closed → reopen  → "reopened"
    open   → update  → "updated"

Reviewer assignment runs after the PR exists and can only degrade the
result's ``reviewer_note``; it never changes ``action`` or ``state``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from prpilot_core.analyzer import analyze_branch
from prpilot_core.errors import MissingCredential, PrPilotError, PullRequestError
from prpilot_core.gh.pull_request import (
    ensure_remote_branch,
    find_existing_pull,
    get_authenticated_login,
    get_client,
    get_repo,
    parse_remote_url,
    request_reviewers,
)
from prpilot_core.git.repository import GitRepository
from prpilot_core.reviewers import DEFAULT_REVIEWER_LIMIT, suggest_reviewers
from prpilot_core.templates import humanize_commits, insert_review_section, render_description
from prpilot_core.title import infer_title

logger = logging.getLogger(__name__)

ACTION_CREATED = "created"
ACTION_REOPENED = "reopened"
ACTION_UPDATED = "updated"


@dataclass
class PROptions:
    template: str = "standard"
    language: str = "en"
    include_stats: bool = True
    max_title_length: int | None = None
    base_branch: str | None = None
    draft: bool = False
    github_token: str | None = None
    add_reviewers: bool = True
    max_reviewers: int = DEFAULT_REVIEWER_LIMIT
    include_ai_review: bool = False
    ai_review_text: str | None = None
    title: str | None = None
    description: str | None = None


@dataclass
class PRLifecycleResult:
    url: str
    number: int
    title: str
    state: str
    action: str  # "created" | "reopened" | "updated"
    reviewers_added: list[str] = field(default_factory=list)
    reviewers_requested: int = 0
    reviewer_note: str | None = None

    def to_dict(self) -> dict:
        data = {
            "url": self.url,
            "number": self.number,
            "title": self.title,
            "state": self.state,
            "action": self.action,
            "reviewersAdded": list(self.reviewers_added),
            "reviewersRequested": self.reviewers_requested,
        }
        if self.reviewer_note:
            data["reviewerNote"] = self.reviewer_note
        return data


def _resolve_token(options: PROptions) -> str:
    token = options.github_token or os.environ.get("GITHUB_TOKEN")
    if not token:
        raise MissingCredential(
            "GitHub token is required. Set GITHUB_TOKEN environment variable or pass it as parameter. "
            "Supports both personal access tokens (ghp_...) and fine-grained tokens (github_pat_...)."
        )
    return token


def _build_description(options: PROptions, summary, title: str) -> str:
    if options.description:
        description = options.description
        if options.ai_review_text:
            description = insert_review_section(description, options.ai_review_text, spliced=False)
            logger.info("Review appended to caller-supplied description")
        return description

    description = render_description(
        summary,
        template=options.template,
        language=options.language,
        title=title,
        include_stats=options.include_stats,
        changes=humanize_commits(summary, options.language),
    )
    if options.ai_review_text:
        description = insert_review_section(description, options.ai_review_text, spliced=True)
        logger.info("Review section inserted into generated description")
    elif options.include_ai_review:
        logger.warning("include_ai_review is set but no review text was supplied; skipping review section")
    return description


def _apply_state_transition(gh_repo, remote, current: str, base: str, title: str, body: str, draft: bool):
    existing = find_existing_pull(gh_repo, remote.owner, current, base)
    if existing is not None and existing.state == "closed" and existing.merged:
        # a merged PR cannot be reopened
        logger.info("PR #%d is already merged, opening a new one", existing.number)
        existing = None

    if existing is None:
        logger.info("Creating new PR %s -> %s", current, base)
        pr = gh_repo.create_pull(base=base, head=current, title=title, body=body, draft=draft)
        return pr, ACTION_CREATED

    if existing.state == "closed":
        logger.info("Reopening closed PR #%d", existing.number)
        existing.edit(title=title, body=body, state="open")
        return existing, ACTION_REOPENED

    logger.info("Updating existing PR #%d", existing.number)
    existing.edit(title=title, body=body)
    return existing, ACTION_UPDATED


def assign_reviewers(gh, pr, options: PROptions, base_branch: str, repo: GitRepository) -> tuple[list[str], int, str | None]:
    """Request reviews from the suggested contributors.

    Returns (logins GitHub accepted, number of logins requested, note).
    Never raises: every failure becomes the note.
    """
    try:
        suggestions = suggest_reviewers(options.max_reviewers, base_branch, repo=repo)
        if suggestions.error:
            return [], 0, f"{suggestions.based_on}: {suggestions.error}"
        if not suggestions.suggestions:
            return [], 0, f"{suggestions.based_on}. No reviewers could be suggested."

        me = get_authenticated_login(gh).lower()
        logins = [s.author for s in suggestions.suggestions if s.author.lower() != me]
        if not logins:
            return [], 0, (
                f"{suggestions.based_on}. All suggested reviewers filtered out (you are the only contributor)"
            )

        try:
            accepted = request_reviewers(pr, logins)
        except Exception as e:
            return [], len(logins), f"{suggestions.based_on}. GitHub API error: {e}"

        accepted_lower = {login.lower() for login in accepted}
        added = [login for login in logins if login.lower() in accepted_lower]
        missing = [login for login in logins if login.lower() not in accepted_lower]
        if not added:
            return [], len(logins), (
                f"{suggestions.based_on}. Attempted to add: {', '.join(logins)} - but GitHub couldn't add them."
            )
        if missing:
            return added, len(logins), (
                f"Partially successful: Added {', '.join(added)} but couldn't add {', '.join(missing)}"
            )
        return added, len(logins), None
    except Exception as e:
        return [], 0, f"Unexpected error: {e}"


def create_or_update_pr(
    options: PROptions | None = None,
    repo: GitRepository | None = None,
    github=None,
) -> PRLifecycleResult:
    """Create the branch's PR, or update/reopen the one that already exists.

    ``github`` lets callers inject a client; by default one is built from
    the resolved token and the origin host.
    """
    options = options or PROptions()
    repo = repo or GitRepository.discover()
    try:
        token = _resolve_token(options)
        remote = parse_remote_url(repo.remote_url("origin"))
        current = repo.current_branch()
        base = repo.detect_base_branch(options.base_branch)
        logger.info("Branch: %s -> %s (%s)", current, base, remote.full_name)

        gh = github or get_client(token, remote)
        gh_repo = get_repo(gh, remote)
        ensure_remote_branch(gh_repo, current)

        summary = analyze_branch(base, detailed=True, repo=repo)
        logger.info("Found %d commits, %d files changed", summary.total_commits, summary.files_changed)

        title = options.title or infer_title(
            summary.commit_messages, summary.file_paths, options.max_title_length
        ).rendered
        body = _build_description(options, summary, title)

        pr, action = _apply_state_transition(gh_repo, remote, current, base, title, body, options.draft)
        logger.info("PR %s: #%d", action, pr.number)

        result = PRLifecycleResult(
            url=pr.html_url,
            number=pr.number,
            title=pr.title,
            state=pr.state,
            action=action,
        )
    except PrPilotError:
        raise
    except Exception as e:
        raise PullRequestError(f"Error creating PR: {e}") from e

    if options.add_reviewers:
        added, requested, note = assign_reviewers(gh, pr, options, base, repo)
        result.reviewers_added = added
        result.reviewers_requested = requested
        result.reviewer_note = note
        if note:
            logger.warning("Reviewer assignment: %s", note)
        else:
            logger.info("Added %d reviewer(s): %s", len(added), ", ".join(added))

    return result
