"""Reviewer suggestions ranked from the git history of the modified files.

The GitHub username of each contributor is guessed from their commit
identity and never validated against the API, so wrong guesses are
expected; the lifecycle orchestrator reports them instead of failing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from prpilot_core.analyzer import analyze_branch
from prpilot_core.git.repository import GitRepository

logger = logging.getLogger(__name__)

MAX_FILES_ANALYZED = 10
DEFAULT_REVIEWER_LIMIT = 3

_NOREPLY_RE = re.compile(r"^(?:\d+\+)?(?P<username>[^@+]+)@users\.noreply\.[^@]+$", re.IGNORECASE)
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")
_NON_ALNUM_RUN_RE = re.compile(r"[^a-zA-Z0-9]+")
_WHITESPACE_RE = re.compile(r"\s+")
_MIN_USERNAME_LENGTH = 3


@dataclass
class ReviewerCandidate:
    display_name: str
    email: str
    contribution_count: int = 0


@dataclass
class ReviewerSuggestion:
    author: str  # probable GitHub username
    contributions: int
    reason: str
    email: str = ""

    def to_dict(self) -> dict:
        return {"author": self.author, "contributions": self.contributions, "reason": self.reason}


@dataclass
class ReviewersResult:
    """Suggestions plus a diagnostic; ``error`` is set when the result is degraded."""

    based_on: str
    suggestions: list[ReviewerSuggestion] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        data = {
            "suggestedReviewers": [s.to_dict() for s in self.suggestions],
            "basedOn": self.based_on,
        }
        if self.error:
            data["error"] = self.error
        return data


def resolve_username(email: str, name: str) -> str:
    """Guess a GitHub username from a commit identity.

    Priority (first success wins):
      1. GitHub no-reply address: ``[id+]username@users.noreply.<host>``
      2. email local part without non-alphanumerics, if at least 3 chars
      3. email local part with non-alphanumeric runs turned into hyphens
      4. display name without whitespace, if at least 3 chars
      5. display name with whitespace turned into hyphens
    """
    match = _NOREPLY_RE.match(email or "")
    if match:
        return match.group("username")

    local_part = (email or "").split("@", 1)[0]
    stripped = _NON_ALNUM_RE.sub("", local_part).lower()
    if len(stripped) >= _MIN_USERNAME_LENGTH:
        return stripped

    hyphenated = _NON_ALNUM_RUN_RE.sub("-", local_part).lower()
    if hyphenated:
        return hyphenated

    compact_name = _WHITESPACE_RE.sub("", name or "").lower()
    if len(compact_name) >= _MIN_USERNAME_LENGTH:
        return compact_name

    return _WHITESPACE_RE.sub("-", (name or "").strip()).lower()


def rank_contributors(histories: list[list[tuple[str, str]]]) -> tuple[list[ReviewerCandidate], int]:
    """Count commits per exact (name, email) pair.

    Returns candidates sorted by descending count (ties keep first-seen
    order) and the number of commits counted.
    """
    candidates: dict[tuple[str, str], ReviewerCandidate] = {}
    total = 0
    for history in histories:
        for name, email in history:
            if not name or not email:
                continue
            total += 1
            candidate = candidates.get((name, email))
            if candidate is None:
                candidate = candidates[(name, email)] = ReviewerCandidate(display_name=name, email=email)
            candidate.contribution_count += 1
    ranked = sorted(candidates.values(), key=lambda c: c.contribution_count, reverse=True)
    return ranked, total


def suggest_reviewers(
    limit: int = DEFAULT_REVIEWER_LIMIT,
    base_branch: str | None = None,
    repo: GitRepository | None = None,
) -> ReviewersResult:
    """Suggest reviewers for the current branch. Never raises."""
    try:
        repo = repo or GitRepository.discover()
        summary = analyze_branch(base_branch, detailed=False, repo=repo)
        files = summary.file_paths[:MAX_FILES_ANALYZED]

        if not files:
            return ReviewersResult(
                based_on="No files were modified in this branch",
                error="Cannot suggest reviewers without modified files",
            )

        ranked, total_commits = rank_contributors(repo.file_histories(files))
        based_on = f"Analysis of {total_commits} commits across {len(files)} modified files"

        if total_commits == 0:
            return ReviewersResult(
                based_on=based_on,
                error=(
                    f"No commit history found for the {len(files)} modified files. "
                    "They are probably new files with no previous contributors."
                ),
            )

        suggestions = [
            ReviewerSuggestion(
                author=resolve_username(c.email, c.display_name),
                contributions=c.contribution_count,
                reason=f"Contributed {c.contribution_count} times to modified files ({c.email})",
                email=c.email,
            )
            for c in ranked[:limit]
        ]
        return ReviewersResult(based_on=based_on, suggestions=suggestions)
    except Exception as e:
        logger.warning("Reviewer suggestion failed: %s", e)
        return ReviewersResult(based_on="Unable to determine reviewers", error=str(e))
