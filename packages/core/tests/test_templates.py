"""Tests for markdown description templates and GIF selection."""

import random

import pytest

from prpilot_core.git.models import ChangeSummary, CommitRecord, FileDelta
from prpilot_core.templates import (
    GIF_CATEGORIES,
    generate_complete,
    generate_description,
    humanize_commit,
    insert_review_section,
    render_description,
    select_gif,
)


def make_summary(messages=("feat: add login",), paths=("src/login.py",), tags=None, **flags):
    commits = [CommitRecord(short_hash=f"abc{i}", message=m, author_name="Alice", date="2025-01-01") for i, m in enumerate(messages)]
    files = [FileDelta(path=p, total_changes=12, insertions=10, deletions=2) for p in paths]
    summary = ChangeSummary.from_parts(
        current_branch="feature/login",
        base_branch="main",
        commits=commits,
        files=files,
        commit_types=set(tags if tags is not None else {"feat"}),
    )
    summary.has_breaking_change = flags.get("breaking", False)
    summary.has_tests = flags.get("tests", False)
    return summary


class TestHumanizeCommit:
    @pytest.mark.parametrize(
        "message, expected",
        [
            ("feat(auth): OAuth login", "adds OAuth login"),
            ("fix: crash on start", "fixes crash on start"),
            ("remove: legacy flag", "removes legacy flag"),
            ("docs: usage", "documentation: usage"),
            ("Random message", "random message"),
        ],
    )
    def test_english(self, message, expected):
        assert humanize_commit(message, "en") == expected

    def test_french(self):
        assert humanize_commit("fix: plantage", "fr") == "corrige plantage"

    def test_only_first_rule_applies(self):
        assert humanize_commit("add: fix for parser") == "adds fix for parser"


class TestSelectGif:
    def test_breaking_change_wins(self):
        summary = make_summary(tags={"feat"}, breaking=True)
        assert select_gif(summary, random.Random(1)) in GIF_CATEGORIES["breaking"]

    def test_feature_before_fix(self):
        summary = make_summary(tags={"fix", "feat"})
        assert select_gif(summary, random.Random(1)) in GIF_CATEGORIES["feature"]

    def test_default_category(self):
        summary = make_summary(tags={"other"})
        assert select_gif(summary, random.Random(1)) in GIF_CATEGORIES["default"]


class TestRenderDescription:
    def test_standard_layout(self):
        body = render_description(make_summary(), rng=random.Random(0))
        assert body.startswith("## Description")
        assert "- adds add login" in body
        assert "**Stats:** 1 files changed, +10 -2 across 1 commits" in body
        assert "![PR GIF](" in body.splitlines()[-1]

    def test_stats_can_be_omitted(self):
        body = render_description(make_summary(), include_stats=False)
        assert "**Stats:**" not in body

    def test_minimal_starts_with_gif(self):
        body = render_description(make_summary(), template="minimal", title="feat: add login")
        assert body.startswith("![GIF](")
        assert "## feat: add login" in body
        assert "**Impact:** 1 files | +10 -2" in body

    def test_detailed_has_notes(self):
        body = render_description(make_summary(breaking=True, tests=True), template="detailed")
        assert "### 🚨 Important notes" in body
        assert "Breaking changes detected" in body
        assert "Tests included" in body

    def test_french(self):
        body = render_description(make_summary(), language="fr")
        assert "Que fait cette PR" in body

    def test_empty_branch_fallback(self):
        body = render_description(make_summary(messages=(), paths=()))
        assert "This PR contains 0 commits with 0 modified files." in body

    def test_implementation_details_from_paths(self):
        body = render_description(make_summary(paths=("web/components/Button.tsx", "pyproject.toml")))
        assert "User interface modifications" in body
        assert "Configuration updates" in body

    def test_implementation_details_from_keywords(self):
        body = render_description(make_summary(messages=("refactor: split parser",)))
        assert "- refactor: split parser" in body

    @pytest.mark.parametrize("kwargs", [{"template": "fancy"}, {"language": "de"}])
    def test_unknown_choice_rejected(self, kwargs):
        with pytest.raises(ValueError):
            render_description(make_summary(), **kwargs)


class TestInsertReviewSection:
    def test_spliced_before_first_image(self):
        result = insert_review_section("intro\n\n![PR GIF](x.gif)", "LGTM")
        assert result.index("## 🤖 AI Code Review") < result.index("![PR GIF]")
        assert result.endswith("![PR GIF](x.gif)")

    def test_spliced_without_image_appends(self):
        result = insert_review_section("intro", "LGTM")
        assert result.startswith("intro\n\n---")
        assert result.endswith("LGTM\n\n---")

    def test_appended_for_supplied_description(self):
        result = insert_review_section("mine ![img](a.png)", "LGTM", spliced=False)
        assert result.startswith("mine ![img](a.png)\n\n")
        assert result.rstrip("-\n").endswith("LGTM")


class TestGenerateFromRepository:
    def test_generate_description(self, feature_sandbox):
        body = generate_description(base_branch="main", repo=feature_sandbox.repo)
        assert "- fixes handle empty password" in body
        assert "- adds Add login form" in body

    def test_generate_complete(self, feature_sandbox):
        result = generate_complete(base_branch="main", max_title_length=12, repo=feature_sandbox.repo)
        assert set(result) == {"title", "description"}
        assert len(result["title"]) <= 12
        assert result["title"].endswith("...")
