"""Tests for the branch change analyzer."""

from unittest.mock import MagicMock

import pytest

from prpilot_core.analyzer import analyze_branch, classify_commit
from prpilot_core.errors import AnalysisError, RevisionNotFound


class TestClassifyCommit:
    @pytest.mark.parametrize(
        "message, expected",
        [
            ("fix: crash on start", "fix"),
            ("feat(ui): button", "feat"),
            ("refactor: extract helper", "refactor"),
            ("docs: readme", "docs"),
            ("test: cover parser", "test"),
            ("Fix typo", "fix"),
            ("featuring a new flag", "feat"),
            ("chore: bump deps", "other"),
            ("", "other"),
        ],
    )
    def test_first_matching_prefix(self, message, expected):
        assert classify_commit(message) == expected


class TestAnalyzeBranch:
    def test_summary_of_feature_branch(self, feature_sandbox):
        summary = analyze_branch("main", repo=feature_sandbox.repo)

        assert summary.current_branch == "feature/login"
        assert summary.base_branch == "main"
        assert summary.total_commits == 2
        assert summary.files_changed == 2
        assert summary.files_changed == len(summary.files)
        assert summary.insertions == sum(f.insertions for f in summary.files)
        assert summary.deletions == sum(f.deletions for f in summary.files)
        assert summary.commit_types == {"feat", "fix"}
        assert "login.tsx" in summary.raw_diff_stat
        assert summary.has_breaking_change is False
        assert summary.has_tests is False

    def test_base_detected_when_omitted(self, feature_sandbox):
        assert analyze_branch(repo=feature_sandbox.repo).base_branch == "main"

    def test_quick_analysis_skips_diff_scan(self, feature_sandbox):
        summary = analyze_branch("main", detailed=False, repo=feature_sandbox.repo)
        assert summary.has_breaking_change is None
        assert summary.has_tests is None
        assert "hasTests" not in summary.to_dict()

    def test_breaking_change_and_tests_detected(self, feature_sandbox):
        feature_sandbox.commit(
            "feat: new api",
            {"tests/test_api.py": "# BREAKING CHANGE: v2 endpoints\n"},
        )
        summary = analyze_branch("main", repo=feature_sandbox.repo)
        assert summary.has_breaking_change is True
        assert summary.has_tests is True

    def test_spec_paths_count_as_tests(self, feature_sandbox):
        feature_sandbox.commit("test: login", {"web/login.spec.ts": "it('works')\n"})
        assert analyze_branch("main", repo=feature_sandbox.repo).has_tests is True

    def test_no_divergence_gives_empty_summary(self, sandbox):
        sandbox.checkout("empty", create=True)
        summary = analyze_branch("main", repo=sandbox.repo)
        assert summary.total_commits == 0
        assert summary.files == []
        assert summary.insertions == 0
        assert summary.commit_types == set()

    def test_missing_base_branch_raises(self, feature_sandbox):
        with pytest.raises(RevisionNotFound):
            analyze_branch("develop", repo=feature_sandbox.repo)

    def test_unexpected_failure_is_wrapped(self):
        repo = MagicMock()
        repo.detect_base_branch.return_value = "main"
        repo.current_branch.return_value = "topic"
        repo.log.side_effect = RuntimeError("boom")
        with pytest.raises(AnalysisError, match="Error analyzing branch: boom"):
            analyze_branch(repo=repo)

    def test_to_dict_uses_camel_case(self, feature_sandbox):
        data = analyze_branch("main", repo=feature_sandbox.repo).to_dict()
        assert data["currentBranch"] == "feature/login"
        assert data["totalCommits"] == 2
        assert data["commitTypeTags"] == ["feat", "fix"]
        assert data["hasBreakingChange"] is False
        assert {"shortHash", "message", "authorName"} <= set(data["commits"][0])
