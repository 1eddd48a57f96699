"""Heuristic pre-review checklist for the current branch.

This is not a code review: it is a short, deterministic checklist built
from the branch summary and the full diff, meant as structured input for
whoever (or whatever) writes the actual review.
"""

from __future__ import annotations

import logging
import re

from prpilot_core.analyzer import analyze_branch
from prpilot_core.git.models import ChangeSummary
from prpilot_core.git.repository import GitRepository

logger = logging.getLogger(__name__)

MAX_REVIEW_LINES = 15
MAX_CRITICAL_ISSUES = 4
MAX_SUGGESTIONS = 3
LARGE_CHANGE_THRESHOLD = 300

DECISION_APPROVE = "APPROVE"
DECISION_REQUEST_CHANGES = "REQUEST_CHANGES"

_DEBUG_RE = re.compile(r"\bconsole\.log\(|\bprint\(")
_TODO_RE = re.compile(r"TODO|FIXME", re.IGNORECASE)
_SECRET_RE = re.compile(r"(AKIA[0-9A-Z]{16})|(\"?api[_-]?key\"?\s*[:=])|(\"?secret\"?\s*[:=])", re.IGNORECASE)


def find_critical_issues(summary: ChangeSummary, diff: str) -> list[str]:
    issues = []
    if summary.has_breaking_change:
        issues.append("Potential breaking change detected (`BREAKING CHANGE`)")
    if not summary.has_tests:
        issues.append("Missing or insufficient tests for modified areas")
    if _DEBUG_RE.search(diff):
        issues.append("Debug statements found (`console.log` / `print`)")
    if _TODO_RE.search(diff):
        issues.append("Leftover TODO/FIXME comments in changes")
    if _SECRET_RE.search(diff):
        issues.append("Possible secrets or API keys in diff")
    return issues


def find_suggestions(summary: ChangeSummary) -> list[str]:
    paths = summary.file_paths
    suggestions = []
    if summary.insertions - summary.deletions > LARGE_CHANGE_THRESHOLD and not summary.has_tests:
        suggestions.append("Add unit/integration tests for new logic")
    if any(p.endswith((".ts", ".tsx")) for p in paths):
        suggestions.append("Ensure strict typing and avoid `any` in new code")
    if not any("docs" in p or "README" in p for p in paths):
        suggestions.append("Update documentation if behavior or APIs changed")
    return suggestions


def render_review(summary: ChangeSummary, diff: str) -> str:
    """Markdown checklist of at most MAX_REVIEW_LINES lines; the decision is always kept."""
    issues = find_critical_issues(summary, diff)
    suggestions = find_suggestions(summary)

    issue_lines = [f"- {issue}" for issue in issues[:MAX_CRITICAL_ISSUES]] or ["- None"]
    # 9 fixed lines: summary pair, two header pairs, decision block
    room = MAX_REVIEW_LINES - 9 - len(issue_lines)
    suggestion_lines = [f"- {s}" for s in suggestions[: min(MAX_SUGGESTIONS, room)]] or ["- No additional suggestions"]

    lines = ["## Summary"]
    if issues:
        lines.append("Several blocking issues found; please address before merging.")
    else:
        lines.append("No blocking issues detected; changes look good overall.")
    lines += ["", "## Critical Issues", *issue_lines]
    lines += ["", "## Key Suggestions", *suggestion_lines]
    lines += ["", "## Decision"]
    if issues:
        lines.append(f"{DECISION_REQUEST_CHANGES} - Address critical issues above")
    else:
        lines.append(f"{DECISION_APPROVE} - Ship it")
    return "\n".join(lines)


def build_review(base_branch: str | None = None, repo: GitRepository | None = None) -> str:
    """Analyze the current branch and return its markdown review checklist."""
    repo = repo or GitRepository.discover()
    summary = analyze_branch(base_branch, detailed=True, repo=repo)
    diff = repo.diff(f"{summary.base_branch}...{summary.current_branch}")
    logger.debug("Reviewing %d files (%d diff chars)", summary.files_changed, len(diff))
    return render_review(summary, diff)
