"""Exception hierarchy shared by every prpilot operation.

Fatal conditions raise a PrPilotError subclass carrying an actionable
message. Reviewer resolution and reviewer assignment never raise; they
report degradations through fields on their result objects instead.
"""

from __future__ import annotations


class PrPilotError(Exception):
    """Base class for all errors raised by prpilot_core."""


class GitError(PrPilotError):
    """A git command failed."""


class NotAGitRepository(GitError):
    """The working directory is not inside a git repository."""


class RevisionNotFound(GitError):
    """A branch or revision could not be resolved."""


class GitCommandError(GitError):
    """Any other git failure (non-zero exit, missing binary)."""


class MissingCredential(PrPilotError):
    """No GitHub token was supplied or found in the environment."""


class InvalidRemoteUrl(PrPilotError):
    """The origin remote URL is neither an SSH nor an HTTPS GitHub URL."""


class BranchNotOnRemote(PrPilotError):
    """The current branch has not been pushed to the remote yet."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(
            f'Branch "{branch}" does not exist on remote. Please push your branch first:\n'
            f"  git push -u origin {branch}"
        )


class AnalysisError(PrPilotError):
    """Unexpected failure while analysing a branch."""


class PullRequestError(PrPilotError):
    """Unexpected failure while creating or updating a pull request."""


class ConfigError(PrPilotError):
    """The configuration file is not a YAML mapping."""
