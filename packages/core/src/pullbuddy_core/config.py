import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from pullbuddy_core.exceptions import ConfigurationError

DEFAULT_CONFIG: dict = {
    "cache_ttl": 300,  # seconds; 0 disables caching
    "history_days": 30,
    "recommend_count": 10,
    "pull_request_pages": 1,  # pages of page_size PRs scanned per repo; None = all
    "page_size": 100,
    "max_concurrency": 8,
    "request_timeout": 15,
    "exclude_target_pr": False,  # skip the PR under evaluation in the file-overlap scan
    "base_url": None,  # GitHub Enterprise API root, e.g. https://ghe.example.com/api/v3
}


def load_config(config_path: str = ".pullbuddy.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .pullbuddy.yml in the current directory
      3. CLI argument overrides
      4. Environment (GITHUB_TOKEN, PULLBUDDY_CACHE_TTL), including a local .env file
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    load_dotenv()

    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    ttl_override = os.environ.get("PULLBUDDY_CACHE_TTL")
    if ttl_override:
        try:
            config["cache_ttl"] = float(ttl_override)
        except ValueError:
            raise ConfigurationError(f"PULLBUDDY_CACHE_TTL must be a number of seconds, got {ttl_override!r}")

    return config


def require_github_token(config: dict) -> str:
    """Return the configured token or raise ConfigurationError."""
    token = config.get("github_token")
    if not token:
        raise ConfigurationError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )
    return token
