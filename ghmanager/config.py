"""
config.py

Responsibility: Load the optional YAML configuration file into a typed model.

Recognised top-level keys:
- token: str (GitHub token; GITHUB_TOKEN in the environment takes precedence)
- api_base: str
- author: str (default copyright holder for license files)
- branch: str (default branch for file writes)
- repo_defaults: dict (merged into the repository creation defaults)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ghmanager.github_client import DEFAULT_API_BASE

CONFIG_ENV_VAR = "GHMANAGER_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/ghmanager/config.yml")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Config:
    """Settings shared by the CLI and the manager."""

    token: str | None = None
    api_base: str = DEFAULT_API_BASE
    author: str | None = None
    branch: str = "main"
    repo_defaults: dict[str, Any] = field(default_factory=dict)


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    return str(value).strip() or None


def parse_config(text: str) -> Config:
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping/object at the top level.")

    defaults_raw = data.get("repo_defaults") or {}
    if not isinstance(defaults_raw, dict):
        raise ConfigError("`repo_defaults` must be an object/mapping when provided.")

    return Config(
        token=_optional_str(data, "token"),
        api_base=_optional_str(data, "api_base") or DEFAULT_API_BASE,
        author=_optional_str(data, "author"),
        branch=_optional_str(data, "branch") or "main",
        repo_defaults={str(k): v for k, v in defaults_raw.items()},
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """
    Load configuration from `config_path`, $GHMANAGER_CONFIG, or the default location.

    An explicitly named file must exist; a missing default file yields `Config()`.
    """
    explicit = config_path or os.environ.get(CONFIG_ENV_VAR)
    path = Path(explicit).expanduser() if explicit else DEFAULT_CONFIG_PATH.expanduser()
    if not path.exists():
        if explicit:
            raise ConfigError(f"Config file does not exist: {path}")
        return Config()
    try:
        return parse_config(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e
