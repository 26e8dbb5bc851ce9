"""Tests for config hierarchy."""

import pytest

from dxcache.config.hierarchy import (
    _coerce_env_value,
    _load_yaml_config,
    load_config_hierarchy,
)


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        "dxcache.config.hierarchy._GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml"
    )
    for name in (
        "DXCACHE_DIR",
        "DXCACHE_DISABLED",
        "DXCACHE_MAX_TRANSLATION_ENTRIES",
        "DXCACHE_MAX_MERGE_ENTRIES",
        "DXCACHE_TRANSLATION_PREFIX",
        "DXCACHE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfigHierarchy:
    def test_returns_defaults(self):
        config = load_config_hierarchy()
        assert config["max_merge_entries"] == 100
        assert config["translation_prefix"] == "c2d"

    def test_runtime_overrides(self):
        config = load_config_hierarchy(max_merge_entries=5, cache_dir="/tmp/x")
        assert config["max_merge_entries"] == 5
        assert config["cache_dir"] == "/tmp/x"

    def test_none_overrides_ignored(self):
        config = load_config_hierarchy(cache_dir=None)
        assert config["cache_dir"].endswith(".dxcache")

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("DXCACHE_DIR", "/var/cache/dx")
        assert load_config_hierarchy()["cache_dir"] == "/var/cache/dx"

    def test_runtime_beats_env(self, monkeypatch):
        monkeypatch.setenv("DXCACHE_DIR", "/var/cache/dx")
        assert load_config_hierarchy(cache_dir="/opt/dx")["cache_dir"] == "/opt/dx"

    def test_env_numeric_coercion(self, monkeypatch):
        monkeypatch.setenv("DXCACHE_MAX_TRANSLATION_ENTRIES", "10")
        config = load_config_hierarchy()
        assert config["max_translation_entries"] == 10
        assert isinstance(config["max_translation_entries"], int)

    def test_bad_env_int_falls_back(self, tmp_path, monkeypatch):
        (tmp_path / "dxcache.yaml").write_text("max_merge_entries: 8\n")
        monkeypatch.setenv("DXCACHE_MAX_MERGE_ENTRIES", "many")
        config = load_config_hierarchy()
        assert config["max_merge_entries"] == 8

    def test_bad_env_int_uses_default(self, monkeypatch):
        monkeypatch.setenv("DXCACHE_MAX_TRANSLATION_ENTRIES", "lots")
        assert load_config_hierarchy()["max_translation_entries"] == 3000

    def test_env_bool_coercion(self, monkeypatch):
        monkeypatch.setenv("DXCACHE_DISABLED", "true")
        assert load_config_hierarchy()["cache_disabled"] is True

    def test_project_config(self, tmp_path):
        (tmp_path / "dxcache.yaml").write_text("max_merge_entries: 8\n")
        assert load_config_hierarchy()["max_merge_entries"] == 8

    def test_project_config_found_upward(self, tmp_path, monkeypatch):
        (tmp_path / "dxcache.yaml").write_text("translation_prefix: zz\n")
        sub = tmp_path / "a" / "b"
        sub.mkdir(parents=True)
        monkeypatch.chdir(sub)
        assert load_config_hierarchy()["translation_prefix"] == "zz"

    def test_env_beats_project(self, tmp_path, monkeypatch):
        (tmp_path / "dxcache.yaml").write_text("max_merge_entries: 8\n")
        monkeypatch.setenv("DXCACHE_MAX_MERGE_ENTRIES", "9")
        assert load_config_hierarchy()["max_merge_entries"] == 9


class TestLoadYamlConfig:
    def test_loads_valid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("key: value\n")
        assert _load_yaml_config(path) == {"key": "value"}

    def test_missing_file(self, tmp_path):
        assert _load_yaml_config(tmp_path / "nope.yaml") is None

    def test_non_mapping_ignored(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        assert _load_yaml_config(path) is None

    def test_invalid_yaml_ignored(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("key: [unclosed\n")
        assert _load_yaml_config(path) is None


class TestCoerceEnvValue:
    def test_bool(self):
        assert _coerce_env_value("cache_disabled", "YES") is True
        assert _coerce_env_value("cache_disabled", "0") is False

    def test_int(self):
        assert _coerce_env_value("max_merge_entries", "42") == 42

    def test_bad_int_raises(self):
        with pytest.raises(ValueError):
            _coerce_env_value("max_merge_entries", "many")

    def test_plain_string(self):
        assert _coerce_env_value("cache_dir", "/x") == "/x"
