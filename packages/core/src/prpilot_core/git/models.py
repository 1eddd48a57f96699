"""Value objects produced by the branch analyzer.

All of them are built fresh for each invocation and never cached.
``to_dict`` emits the camelCase keys the tool layer returns as JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CommitRecord:
    """One commit reachable from the current branch but not from the base."""

    short_hash: str
    message: str
    author_name: str
    date: str
    author_email: str | None = None

    def to_dict(self) -> dict:
        data = {
            "shortHash": self.short_hash,
            "message": self.message,
            "authorName": self.author_name,
            "date": self.date,
        }
        if self.author_email:
            data["authorEmail"] = self.author_email
        return data


@dataclass(frozen=True)
class FileDelta:
    """Change counts for one file. Binary files report zero for every count."""

    path: str
    total_changes: int = 0
    insertions: int = 0
    deletions: int = 0

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "totalChanges": self.total_changes,
            "insertions": self.insertions,
            "deletions": self.deletions,
        }


@dataclass
class ChangeSummary:
    """Structured divergence between the current branch and its base.

    ``files_changed`` always equals ``len(files)`` and ``insertions`` /
    ``deletions`` are the sums over ``files``; use ``from_parts`` to build
    one so the totals cannot drift from the file list.
    """

    current_branch: str
    base_branch: str
    total_commits: int
    commits: list[CommitRecord]
    files_changed: int
    insertions: int
    deletions: int
    files: list[FileDelta]
    commit_types: set[str] = field(default_factory=set)
    raw_diff_stat: str = ""
    has_breaking_change: bool | None = None  # only set by a detailed analysis
    has_tests: bool | None = None

    @classmethod
    def from_parts(
        cls,
        current_branch: str,
        base_branch: str,
        commits: list[CommitRecord],
        files: list[FileDelta],
        commit_types: set[str],
        raw_diff_stat: str = "",
    ) -> ChangeSummary:
        return cls(
            current_branch=current_branch,
            base_branch=base_branch,
            total_commits=len(commits),
            commits=list(commits),
            files_changed=len(files),
            insertions=sum(f.insertions for f in files),
            deletions=sum(f.deletions for f in files),
            files=list(files),
            commit_types=set(commit_types),
            raw_diff_stat=raw_diff_stat,
        )

    @property
    def commit_messages(self) -> list[str]:
        return [c.message for c in self.commits]

    @property
    def file_paths(self) -> list[str]:
        return [f.path for f in self.files]

    def to_dict(self) -> dict:
        data = {
            "currentBranch": self.current_branch,
            "baseBranch": self.base_branch,
            "totalCommits": self.total_commits,
            "commits": [c.to_dict() for c in self.commits],
            "filesChanged": self.files_changed,
            "insertions": self.insertions,
            "deletions": self.deletions,
            "files": [f.to_dict() for f in self.files],
            "commitTypeTags": sorted(self.commit_types),
            "rawDiffStat": self.raw_diff_stat,
        }
        if self.has_breaking_change is not None:
            data["hasBreakingChange"] = self.has_breaking_change
        if self.has_tests is not None:
            data["hasTests"] = self.has_tests
        return data
