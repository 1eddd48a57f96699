"""Shared fixtures: throwaway git repositories built with the real git binary."""

import os
import subprocess

import pytest

from prpilot_core.git.repository import GitRepository

DEFAULT_AUTHOR = ("Alice Martin", "alice@example.com")


class GitSandbox:
    """A real repository in tmp_path with helpers to script its history."""

    def __init__(self, root):
        self.root = root
        self.repo = GitRepository(root)

    def git(self, *args, author=DEFAULT_AUTHOR):
        name, email = author
        env = {
            **os.environ,
            "GIT_AUTHOR_NAME": name,
            "GIT_AUTHOR_EMAIL": email,
            "GIT_COMMITTER_NAME": name,
            "GIT_COMMITTER_EMAIL": email,
            "GIT_CONFIG_NOSYSTEM": "1",
            "HOME": str(self.root),
        }
        result = subprocess.run(
            ["git", *args], cwd=self.root, env=env, capture_output=True, text=True, check=True
        )
        return result.stdout

    def write(self, path, content):
        target = self.root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)

    def commit(self, message, files=None, author=DEFAULT_AUTHOR):
        for path, content in (files or {}).items():
            self.write(path, content)
        self.git("add", "-A")
        self.git("commit", "--allow-empty", "-m", message, author=author)

    def checkout(self, branch, create=False):
        if create:
            self.git("checkout", "-b", branch)
        else:
            self.git("checkout", branch)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("MAIN_BRANCH", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)


@pytest.fixture
def sandbox(tmp_path):
    """Repository with one commit on ``main`` and no remote."""
    box = GitSandbox(tmp_path)
    box.git("init", "-q")
    box.git("symbolic-ref", "HEAD", "refs/heads/main")
    box.commit("chore: initial commit", {"README.md": "# demo\n", "src/app.py": "print('hi')\n"})
    return box


@pytest.fixture
def feature_sandbox(sandbox):
    """``main`` plus a ``feature/login`` branch with two commits."""
    sandbox.checkout("feature/login", create=True)
    sandbox.commit("feat(auth): Add login form", {"packages/web/login.tsx": "export const Login = 1;\n"})
    sandbox.commit("fix: handle empty password", {"src/app.py": "print('hi')\nprint('login')\n"})
    return sandbox
