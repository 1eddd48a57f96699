import os
from pathlib import Path
from typing import Optional

import yaml

from prpilot_core.errors import ConfigError

DEFAULT_CONFIG_FILE = ".prpilot.yml"

DEFAULT_CONFIG: dict = {
    "base_branch": None,  # None = detect (MAIN_BRANCH env, origin HEAD, dev/main/master)
    "template": "standard",
    "language": "en",
    "include_stats": True,
    "max_title_length": None,
    "add_reviewers": True,
    "max_reviewers": 3,
    "draft": False,
}


def load_config(config_path: str = DEFAULT_CONFIG_FILE, cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prpilot.yml in the current directory
      3. CLI argument overrides (None values are ignored)
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ConfigError(f"{config_path} must contain a mapping, got {type(file_config).__name__}")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Resolve environment-only settings
    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config
