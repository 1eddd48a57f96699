"""Conventional-commit title inference from commit messages and file paths."""

from __future__ import annotations

import re
from dataclasses import dataclass

from prpilot_core.analyzer import analyze_branch
from prpilot_core.git.repository import GitRepository

CONVENTIONAL_TYPES = ("feat", "fix", "docs", "style", "refactor", "perf", "test", "build", "ci", "chore")
MONOREPO_ROOTS = ("packages", "apps", "libs", "modules", "services")
_REJECTED_SCOPES = ("src", "lib")

# Fallback when no message carries a conventional prefix; checked in order.
_KEYWORD_TYPES = (
    (re.compile(r"fix|bug", re.IGNORECASE), "fix"),
    (re.compile(r"feat|feature", re.IGNORECASE), "feat"),
    (re.compile(r"refactor", re.IGNORECASE), "refactor"),
    (re.compile(r"test", re.IGNORECASE), "test"),
)

_PREFIX_RE = re.compile(r"^[a-z]+(?:\([^)]*\))?:\s*", re.IGNORECASE)
_SCOPE_INVALID_RE = re.compile(r"[^a-zA-Z0-9_-]")
_ELLIPSIS = "..."


@dataclass(frozen=True)
class ConventionalTitle:
    type: str
    subject: str
    rendered: str
    scope: str | None = None


def infer_type(messages: list[str]) -> str:
    for message in messages:
        lowered = message.lower()
        for commit_type in CONVENTIONAL_TYPES:
            if lowered.startswith(f"{commit_type}:") or lowered.startswith(f"{commit_type}("):
                return commit_type
            if commit_type == "feat" and lowered.startswith("feature"):
                return "feat"

    for pattern, commit_type in _KEYWORD_TYPES:
        if any(pattern.search(m) for m in messages):
            return commit_type
    return "chore"


def _sanitize_scope(segment: str) -> str:
    return _SCOPE_INVALID_RE.sub("-", segment).lower()


def infer_scope(paths: list[str]) -> str | None:
    """Scope from the first path yielding an acceptable directory name.

    Top-level files carry no scope. Inside a monorepo root (``packages/``,
    ``apps/``...) the package directory is used; ``src`` and ``lib`` are
    never scopes, so the scan moves on to the next path.
    """
    for path in paths:
        parts = path.split("/")
        if len(parts) < 2:
            continue

        first = parts[0].lower()
        if first in MONOREPO_ROOTS and len(parts) > 2:
            candidate = _sanitize_scope(parts[1])
            if candidate:
                return candidate

        candidate = _sanitize_scope(first)
        if candidate and candidate not in _REJECTED_SCOPES:
            return candidate
    return None


def infer_subject(messages: list[str]) -> str:
    first = messages[0] if messages else ""
    cleaned = _PREFIX_RE.sub("", first, count=1).strip()
    if not cleaned:
        return "update"
    return cleaned[0].lower() + cleaned[1:]


def render_title(commit_type: str, scope: str | None, subject: str, max_length: int | None = None) -> str:
    rendered = f"{commit_type}({scope}): {subject}" if scope else f"{commit_type}: {subject}"
    if not max_length or len(rendered) <= max_length:
        return rendered
    if max_length < len(_ELLIPSIS):
        return _ELLIPSIS[:max_length]

    # Keep max_length - 3 characters so the ellipsis fits even for limits below 6.
    allowed = max_length - len(_ELLIPSIS)
    return rendered[:allowed].rstrip() + _ELLIPSIS


def infer_title(commit_messages: list[str], file_paths: list[str], max_length: int | None = None) -> ConventionalTitle:
    commit_type = infer_type(commit_messages)
    scope = infer_scope(file_paths)
    subject = infer_subject(commit_messages)
    return ConventionalTitle(
        type=commit_type,
        scope=scope,
        subject=subject,
        rendered=render_title(commit_type, scope, subject, max_length),
    )


def generate_title(
    max_length: int | None = None,
    base_branch: str | None = None,
    repo: GitRepository | None = None,
) -> str:
    """Analyze the current branch and return its rendered conventional title."""
    summary = analyze_branch(base_branch, detailed=False, repo=repo)
    return infer_title(summary.commit_messages, summary.file_paths, max_length).rendered
