"""Thin subprocess wrapper around the git executable.

A GitRepository is the explicit repository context every operation
receives. Its root is resolved once, when the object is built, by walking
up from the starting directory to the first one that contains ``.git``.
"""

from __future__ import annotations

import logging
import os
import subprocess
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from prpilot_core.errors import GitCommandError, GitError, NotAGitRepository, RevisionNotFound
from prpilot_core.git.models import CommitRecord, FileDelta

logger = logging.getLogger(__name__)

MAIN_BRANCH_ENV = "MAIN_BRANCH"
COMMON_BASE_BRANCHES = ("dev", "main", "master")
DEFAULT_BASE_BRANCH = "dev"

# Upper bound on git subprocesses running at the same time.
MAX_CONCURRENT_PROCESSES = 6

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = "%h%x1f%an%x1f%ae%x1f%aI%x1f%s%x1e"
_AUTHOR_FORMAT = "%an%x1f%ae"

_REVISION_ERRORS = (
    "unknown revision",
    "bad revision",
    "ambiguous argument",
    "needed a single revision",
    "bad default revision",
    "invalid object name",
)


def find_git_root(start: str | Path | None = None) -> Path:
    """Return the closest ancestor of ``start`` holding a ``.git`` entry.

    Falls back to ``start`` itself (the cwd by default) so git can report a
    proper "not a git repository" error on the first command.
    """
    start_dir = Path(start or os.getcwd()).resolve()
    for candidate in (start_dir, *start_dir.parents):
        if (candidate / ".git").exists():
            return candidate
    return start_dir


def _classify_failure(args: tuple[str, ...], stderr: str) -> GitError:
    message = stderr.strip() or f"git {' '.join(args)} failed"
    lowered = message.lower()
    if "not a git repository" in lowered:
        return NotAGitRepository(message)
    if any(marker in lowered for marker in _REVISION_ERRORS):
        return RevisionNotFound(message)
    return GitCommandError(message)


class GitRepository:
    """Read-only queries against one working copy."""

    def __init__(self, root: str | Path | None = None, git_binary: str = "git", timeout: int = 60):
        self.root = Path(root) if root is not None else find_git_root()
        self.git_binary = git_binary
        self.timeout = timeout

    @classmethod
    def discover(cls, start: str | Path | None = None) -> GitRepository:
        return cls(find_git_root(start))

    def __repr__(self) -> str:
        return f"GitRepository({str(self.root)!r})"

    # ------------------------------------------------------------------ #
    # Command execution                                                    #
    # ------------------------------------------------------------------ #

    def run(self, *args: str) -> str:
        """Run ``git <args>`` in the repository root and return stdout."""
        cmd = [self.git_binary, "-c", "core.quotepath=off", *args]
        logger.debug("Running %s in %s", " ".join(cmd), self.root)
        try:
            result = subprocess.run(
                cmd,
                cwd=self.root,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise GitCommandError(f"Cannot run {self.git_binary!r} in {self.root}: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(f"git {' '.join(args)} timed out after {self.timeout}s") from e

        if result.returncode != 0:
            raise _classify_failure(args, result.stderr)
        return result.stdout

    # ------------------------------------------------------------------ #
    # Branches                                                             #
    # ------------------------------------------------------------------ #

    def current_branch(self) -> str:
        return self.run("rev-parse", "--abbrev-ref", "HEAD").strip()

    def verify_revision(self, ref: str) -> None:
        """Raise RevisionNotFound unless ``ref`` resolves to a commit."""
        try:
            self.run("rev-parse", "--verify", f"{ref}^{{commit}}")
        except NotAGitRepository:
            raise
        except GitError as e:
            raise RevisionNotFound(f"Revision not found: {ref!r} ({e})") from e

    def local_branches(self) -> list[str]:
        out = self.run("for-each-ref", "--format=%(refname:short)", "refs/heads")
        return [line.strip() for line in out.splitlines() if line.strip()]

    def remote_branches(self) -> list[str]:
        out = self.run("for-each-ref", "--format=%(refname:short)", "refs/remotes")
        return [line.strip() for line in out.splitlines() if line.strip()]

    def remote_default_branch(self) -> str | None:
        """Return the branch origin/HEAD points at, or None when unset."""
        try:
            ref = self.run("symbolic-ref", "refs/remotes/origin/HEAD").strip()
        except GitError:
            return None
        return ref.removeprefix("refs/remotes/origin/") or None

    def remote_url(self, name: str = "origin") -> str:
        return self.run("remote", "get-url", name).strip()

    def detect_base_branch(self, override: str | None = None) -> str:
        """Resolve the branch the current work should merge into.

        Resolution order (stops at first success):
          1. ``override`` argument
          2. MAIN_BRANCH environment variable
          3. origin's symbolic default branch
          4. dev, main, master among local branches
          5. dev, main, master among origin's remote branches
          6. DEFAULT_BASE_BRANCH

        Never raises.
        """
        if override:
            return override

        env_branch = os.environ.get(MAIN_BRANCH_ENV)
        if env_branch:
            return env_branch

        default = self.remote_default_branch()
        if default:
            return default

        try:
            local = set(self.local_branches())
            for branch in COMMON_BASE_BRANCHES:
                if branch in local:
                    return branch

            remote = set(self.remote_branches())
            for branch in COMMON_BASE_BRANCHES:
                if f"origin/{branch}" in remote:
                    return branch
        except GitError as e:
            logger.debug("Branch listing failed while detecting base branch: %s", e)

        return DEFAULT_BASE_BRANCH

    # ------------------------------------------------------------------ #
    # History and diffs                                                    #
    # ------------------------------------------------------------------ #

    def log(self, rev_range: str) -> list[CommitRecord]:
        """Commits in ``rev_range``, newest first."""
        out = self.run("log", f"--format={_LOG_FORMAT}", rev_range, "--")
        commits = []
        for record in out.split(_RECORD_SEP):
            record = record.strip("\n")
            if not record:
                continue
            short_hash, name, email, date, subject = record.split(_FIELD_SEP, 4)
            commits.append(
                CommitRecord(
                    short_hash=short_hash,
                    message=subject,
                    author_name=name,
                    author_email=email or None,
                    date=date,
                )
            )
        return commits

    def diff_numstat(self, rev_range: str) -> list[FileDelta]:
        """Per-file insertion/deletion counts; binary files count as zero."""
        out = self.run("diff", "--numstat", "--no-renames", rev_range, "--")
        files = []
        for line in out.splitlines():
            parts = line.split("\t", 2)
            if len(parts) != 3:
                continue
            added, removed, path = parts
            insertions = int(added) if added.isdigit() else 0
            deletions = int(removed) if removed.isdigit() else 0
            files.append(
                FileDelta(
                    path=path,
                    total_changes=insertions + deletions,
                    insertions=insertions,
                    deletions=deletions,
                )
            )
        return files

    def diff_stat(self, rev_range: str) -> str:
        return self.run("diff", "--stat", rev_range, "--")

    def diff(self, rev_range: str) -> str:
        return self.run("diff", rev_range, "--")

    def file_history(self, path: str) -> list[tuple[str, str]]:
        """(author name, author email) for every commit touching ``path``, following renames."""
        out = self.run("log", "--follow", f"--format={_AUTHOR_FORMAT}", "--", path)
        authors = []
        for line in out.splitlines():
            if _FIELD_SEP not in line:
                continue
            name, email = line.split(_FIELD_SEP, 1)
            authors.append((name.strip(), email.strip()))
        return authors

    def file_histories(self, paths: list[str]) -> list[list[tuple[str, str]]]:
        """file_history for each path, fetched concurrently, returned in input order."""
        if not paths:
            return []
        with ThreadPoolExecutor(max_workers=min(MAX_CONCURRENT_PROCESSES, len(paths))) as pool:
            return list(pool.map(self.file_history, paths))
