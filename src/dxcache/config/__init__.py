"""Configuration — package defaults, layered overrides and the settings model."""

from dxcache.config.hierarchy import load_config_hierarchy
from dxcache.config.schema import CacheSettings

__all__ = ["CacheSettings", "load_config_hierarchy"]
