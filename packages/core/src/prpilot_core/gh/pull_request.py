from __future__ import annotations

import re
from dataclasses import dataclass

from github import Github, GithubException

from prpilot_core.errors import BranchNotOnRemote, InvalidRemoteUrl

GITHUB_HOST = "github.com"

_SSH_URL_RE = re.compile(r"^(?:ssh://)?[\w.-]+@(?P<host>[^:/]+)(?::\d+)?[:/](?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?/?$")
_HTTPS_URL_RE = re.compile(r"^https?://(?:[^@/]+@)?(?P<host>[^/:]+)(?::\d+)?/(?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?/?$")


@dataclass(frozen=True)
class RemoteInfo:
    host: str
    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def api_base_url(self) -> str | None:
        """REST endpoint for GitHub Enterprise hosts; None means the public API."""
        if self.host == GITHUB_HOST:
            return None
        return f"https://{self.host}/api/v3"


def parse_remote_url(url: str) -> RemoteInfo:
    """Parse ``git@host:owner/repo.git`` or ``https://host/owner/repo[.git]``."""
    url = url.strip()
    for pattern in (_HTTPS_URL_RE, _SSH_URL_RE):
        match = pattern.match(url)
        if match:
            return RemoteInfo(host=match.group("host"), owner=match.group("owner"), repo=match.group("repo"))
    raise InvalidRemoteUrl(f"Cannot parse GitHub owner/repo from remote URL: {url!r}")


def get_client(token: str, remote: RemoteInfo | None = None) -> Github:
    if remote is not None and remote.api_base_url:
        return Github(token, base_url=remote.api_base_url)
    return Github(token)


def get_repo(gh: Github, remote: RemoteInfo):
    return gh.get_repo(remote.full_name)


def ensure_remote_branch(repo, branch: str) -> None:
    """Raise BranchNotOnRemote when ``branch`` was never pushed; other API errors propagate."""
    try:
        repo.get_branch(branch)
    except GithubException as e:
        if e.status == 404:
            raise BranchNotOnRemote(branch) from e
        raise


def find_existing_pull(repo, owner: str, head_branch: str, base_branch: str):
    """Return the open or closed PR for ``owner:head_branch`` into ``base_branch``, or None.

    When several match, the most recently updated one is used.
    """
    pulls = list(repo.get_pulls(state="all", head=f"{owner}:{head_branch}", base=base_branch))
    if not pulls:
        return None
    return max(pulls, key=lambda pr: pr.updated_at.timestamp() if pr.updated_at else 0.0)


def get_authenticated_login(gh: Github) -> str:
    return gh.get_user().login


def request_reviewers(pr, logins: list[str]) -> list[str]:
    """Ask GitHub to review ``pr`` and return the logins it actually holds as requested reviewers."""
    pr.create_review_request(reviewers=logins)
    users, _teams = pr.get_review_requests()
    return [user.login for user in users if getattr(user, "login", None)]
