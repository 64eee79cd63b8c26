#!/usr/bin/env python3
"""Settings loader for markov-words.

Settings come from ``markov_words/configs/app.yaml`` unless the
``MARKOV_WORDS_CONFIG`` environment variable points at another YAML file.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any
import os

import yaml

from .errors import ConfigurationError

PROJECT_ROOT = Path(__file__).resolve().parent
CONFIG_DIR = PROJECT_ROOT / "configs"
APP_CONFIG_PATH = CONFIG_DIR / "app.yaml"
CONFIG_ENV_VAR = "MARKOV_WORDS_CONFIG"


def config_path() -> Path:
    """Path of the YAML file settings are read from."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(os.path.expanduser(override))
    return APP_CONFIG_PATH


@lru_cache(maxsize=1)
def load_app_config() -> dict:
    path = config_path()
    if not path.exists():
        raise ConfigurationError(f"Missing app config: {path}")
    try:
        data = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read app config {path}: {e}") from e
    return data or {}


def reload_app_config() -> dict:
    """Drop the cached settings and read them again."""
    load_app_config.cache_clear()
    return load_app_config()


def get_setting(path: str, default: Any = None) -> Any:
    """Get nested setting by dotted path, e.g. ``generator.gram_size``."""
    current: Any = load_app_config()
    for part in path.split('.'):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def resolve_path(value: str | os.PathLike, base: Path | None = None) -> Path:
    """Expand ``~`` and anchor relative paths at ``base`` (the package directory by default)."""
    if value is None:
        raise ValueError("path value is required")
    path = Path(os.path.expanduser(str(value)))
    if not path.is_absolute():
        path = ((base or PROJECT_ROOT) / path).resolve()
    return path


__all__ = [
    "load_app_config",
    "reload_app_config",
    "get_setting",
    "resolve_path",
    "config_path",
    "PROJECT_ROOT",
    "APP_CONFIG_PATH",
    "CONFIG_ENV_VAR",
]
