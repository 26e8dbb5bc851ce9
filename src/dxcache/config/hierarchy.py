"""Configuration hierarchy — merges sources in priority order.

Precedence (later overrides earlier):
  1. Package defaults
  2. Global config   (~/.dxcache/config.yaml)
  3. Project config   (./dxcache.yaml, searched upward)
  4. Environment variables (DXCACHE_*)
  5. Runtime arguments
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from dxcache.config.defaults import get_defaults

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".dxcache" / "config.yaml"
_PROJECT_CONFIG_NAME = "dxcache.yaml"

# Map of environment variables to config keys
_ENV_MAP: dict[str, str] = {
    "DXCACHE_DIR": "cache_dir",
    "DXCACHE_DISABLED": "cache_disabled",
    "DXCACHE_TRANSLATION_PREFIX": "translation_prefix",
    "DXCACHE_MAX_TRANSLATION_ENTRIES": "max_translation_entries",
    "DXCACHE_MAX_MERGE_ENTRIES": "max_merge_entries",
    "DXCACHE_LOG_LEVEL": "log_level",
}

# Capacities; a non-integer value is dropped so lower layers apply
_INT_KEYS = frozenset({"max_translation_entries", "max_merge_entries"})

# Boolean env var values
_TRUTHY = {"1", "true", "yes", "on"}


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Load and merge configuration from all sources.

    Returns a merged dict with the final resolved values.
    """
    config = get_defaults()
    yaml_paths = [_GLOBAL_CONFIG_PATH, _find_project_config()]
    for path in yaml_paths:
        if path is not None:
            config.update(_load_yaml_config(path) or {})

    config.update(_load_env_vars())
    # None means "not given on the command line"
    config.update({k: v for k, v in runtime_overrides.items() if v is not None})
    return config


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Load a YAML config file if it exists."""
    if not path.exists() or not path.is_file():
        return None
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        if isinstance(data, dict):
            return data
        logger.warning("Config file %s is not a mapping, ignoring", path)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
    return None


def _find_project_config() -> Path | None:
    """Search for dxcache.yaml from cwd upward."""
    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / _PROJECT_CONFIG_NAME
        if candidate.exists():
            return candidate
    return None


def _load_env_vars() -> dict[str, Any]:
    """Read DXCACHE_* environment variables, skipping unparseable ones."""
    result: dict[str, Any] = {}
    for env_key, config_key in _ENV_MAP.items():
        value = os.environ.get(env_key)
        if value is None:
            continue
        try:
            result[config_key] = _coerce_env_value(config_key, value)
        except ValueError:
            logger.warning("Ignoring %s=%r: expected an integer", env_key, value)
    return result


def _coerce_env_value(key: str, value: str) -> Any:
    """Coerce an env var string; raises ValueError for a bad capacity."""
    if key == "cache_disabled":
        return value.strip().lower() in _TRUTHY
    if key in _INT_KEYS:
        return int(value)
    return value
