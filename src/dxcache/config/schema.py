"""Pydantic model for resolved cache configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from dxcache.config.defaults import (
    DEFAULT_CACHE_DIR,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_MERGE_ENTRIES,
    DEFAULT_MAX_TRANSLATION_ENTRIES,
    DEFAULT_TRANSLATION_PREFIX,
    validate_translation_prefix,
)


class CacheSettings(BaseModel):
    cache_dir: Path = DEFAULT_CACHE_DIR
    cache_disabled: bool = False
    translation_prefix: str = DEFAULT_TRANSLATION_PREFIX
    max_translation_entries: int = Field(default=DEFAULT_MAX_TRANSLATION_ENTRIES, ge=0)
    max_merge_entries: int = Field(default=DEFAULT_MAX_MERGE_ENTRIES, ge=0)
    log_level: str = DEFAULT_LOG_LEVEL

    @field_validator("cache_dir", mode="before")
    @classmethod
    def expand_user(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        return v

    @field_validator("translation_prefix")
    @classmethod
    def check_prefix(cls, v: str) -> str:
        return validate_translation_prefix(v)

    @field_validator("log_level")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.upper()

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> CacheSettings:
        """Build settings from a merged config dict, ignoring unknown keys."""
        known = {k: v for k, v in config.items() if k in cls.model_fields}
        return cls(**known)
