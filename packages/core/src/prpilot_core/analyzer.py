"""Branch change analysis: what a working branch adds on top of its base."""

from __future__ import annotations

import logging

from prpilot_core.errors import AnalysisError, PrPilotError
from prpilot_core.git.models import ChangeSummary
from prpilot_core.git.repository import GitRepository

logger = logging.getLogger(__name__)

# First matching prefix wins, so order matters.
_COMMIT_TYPE_PREFIXES = ("fix", "feat", "refactor", "docs", "test")
_BREAKING_MARKER = "BREAKING CHANGE"
_TEST_PATH_MARKERS = ("test", "spec")


def classify_commit(message: str) -> str:
    """Return the single type tag for a commit message (``other`` if none)."""
    lowered = message.lower()
    for prefix in _COMMIT_TYPE_PREFIXES:
        if lowered.startswith(prefix):
            return prefix
    return "other"


def analyze_branch(
    base_branch: str | None = None,
    detailed: bool = True,
    repo: GitRepository | None = None,
) -> ChangeSummary:
    """Summarise the commits and file changes between the base and the current branch.

    Commits come from ``base..current``; file deltas and the stat text come
    from the merge-base diff ``base...current``. A detailed analysis also
    scans the full diff for the breaking-change marker and flags test files.

    Raises NotAGitRepository or RevisionNotFound for invalid repositories or
    refs; any other failure is wrapped in AnalysisError.
    """
    repo = repo or GitRepository.discover()
    try:
        base = repo.detect_base_branch(base_branch)
        current = repo.current_branch()
        repo.verify_revision(base)

        commits = repo.log(f"{base}..{current}")
        merge_range = f"{base}...{current}"
        files = repo.diff_numstat(merge_range)
        raw_stat = repo.diff_stat(merge_range)

        summary = ChangeSummary.from_parts(
            current_branch=current,
            base_branch=base,
            commits=commits,
            files=files,
            commit_types={classify_commit(c.message) for c in commits},
            raw_diff_stat=raw_stat,
        )

        if detailed:
            full_diff = repo.diff(merge_range)
            summary.has_breaking_change = _BREAKING_MARKER in full_diff
            summary.has_tests = any(marker in f.path for f in files for marker in _TEST_PATH_MARKERS)
    except PrPilotError:
        raise
    except Exception as e:
        raise AnalysisError(f"Error analyzing branch: {e}") from e

    logger.debug(
        "Analyzed %s -> %s: %d commit(s), %d file(s)",
        summary.current_branch,
        summary.base_branch,
        summary.total_commits,
        summary.files_changed,
    )
    return summary
