"""Tests for configuration loading."""

import pytest

from prpilot_core.config import load_config
from prpilot_core.errors import ConfigError


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["base_branch"] is None
    assert config["template"] == "standard"
    assert config["language"] == "en"
    assert config["include_stats"] is True
    assert config["max_title_length"] is None
    assert config["add_reviewers"] is True
    assert config["max_reviewers"] == 3
    assert config["draft"] is False


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".pilot.yml"
    cfg.write_text("template: detailed\nlanguage: fr\nmax_reviewers: 5\n")
    config = load_config(config_path=str(cfg))
    assert config["template"] == "detailed"
    assert config["language"] == "fr"
    assert config["max_reviewers"] == 5
    assert config["draft"] is False


def test_empty_config_file(tmp_path):
    cfg = tmp_path / ".pilot.yml"
    cfg.write_text("")
    assert load_config(config_path=str(cfg))["template"] == "standard"


def test_non_mapping_config_rejected(tmp_path):
    cfg = tmp_path / ".pilot.yml"
    cfg.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        load_config(config_path=str(cfg))


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".pilot.yml"
    cfg.write_text("template: detailed\n")
    config = load_config(config_path=str(cfg), cli_overrides={"template": "minimal"})
    assert config["template"] == "minimal"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".pilot.yml"
    cfg.write_text("base_branch: develop\n")
    config = load_config(config_path=str(cfg), cli_overrides={"base_branch": None})
    assert config["base_branch"] == "develop"


def test_false_cli_override_still_applies(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"), cli_overrides={"add_reviewers": False})
    assert config["add_reviewers"] is False


def test_github_token_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["github_token"] == "gh-token"


def test_main_branch_left_to_base_branch_detection(monkeypatch, tmp_path):
    monkeypatch.setenv("MAIN_BRANCH", "trunk")
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert "main_branch" not in config
    assert config["base_branch"] is None


def test_defaults_not_shared_between_loads(tmp_path):
    config_a = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_a["template"] = "minimal"
    config_b = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config_b["template"] == "standard"
