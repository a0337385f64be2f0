"""Tests for runtime configuration and its holder."""

import pytest

from starcounter.config import CONFIG_KEY, Settings, StarConfig
from starcounter.services.settings_store import ConfigHolder
from starcounter.services.store import MemoryStore


class TestSettings:
    """Test environment-driven settings."""

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_test")
        monkeypatch.setenv("STAR_CACHE_ENABLED", "false")
        monkeypatch.setenv("STAR_CACHE_DURATION_SECONDS", "60")
        monkeypatch.setenv("STAR_MAX_RETRY", "5")
        monkeypatch.setenv("GITHUB_API_URL", "https://ghe.example.com/api/v3/")

        s = Settings()

        assert s.github_token == "ghp_test"
        assert s.cache_enabled is False
        assert s.cache_duration_seconds == 60
        assert s.max_retry == 5
        assert s.github_api_url == "https://ghe.example.com/api/v3"

    def test_star_config_from_settings(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "")
        monkeypatch.setenv("STAR_MAX_CACHE_ENTRIES", "25")

        cfg = StarConfig.from_settings(Settings())

        assert cfg.github_token is None
        assert cfg.max_cache_entries == 25


class TestStarConfig:
    """Test StarConfig validation and serialization."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"cache_duration_seconds": 0},
            {"max_cache_entries": 0},
            {"max_retry": -1},
        ],
    )
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            StarConfig(**kwargs)

    def test_from_dict_fills_missing_and_ignores_unknown(self):
        defaults = StarConfig(max_retry=7)

        cfg = StarConfig.from_dict({"cache_enabled": False, "legacy": 1}, defaults)

        assert cfg.cache_enabled is False
        assert cfg.max_retry == 7

    def test_round_trip(self):
        cfg = StarConfig(github_token="t", max_cache_entries=10)

        assert StarConfig.from_dict(cfg.to_dict()) == cfg


class TestConfigHolder:
    """Test loading, updating and persisting the live configuration."""

    def test_uses_defaults_without_saved_config(self):
        defaults = StarConfig(max_retry=1)

        assert ConfigHolder(MemoryStore(), defaults).current is defaults

    def test_loads_saved_config(self):
        store = MemoryStore()
        store.set(CONFIG_KEY, {"max_cache_entries": 50})

        holder = ConfigHolder(store, StarConfig())

        assert holder.current.max_cache_entries == 50

    def test_invalid_saved_config_falls_back_to_defaults(self):
        store = MemoryStore()
        store.set(CONFIG_KEY, {"max_cache_entries": -3})
        defaults = StarConfig()

        assert ConfigHolder(store, defaults).current is defaults

    def test_update_swaps_and_persists(self):
        store = MemoryStore()
        holder = ConfigHolder(store, StarConfig(max_retry=4))
        before = holder.current

        after = holder.update(cache_duration_seconds=10, github_token="abc")

        assert holder.current is after
        assert before.cache_duration_seconds == 86400
        assert after.max_retry == 4
        assert store.get(CONFIG_KEY)["github_token"] == "abc"
        assert ConfigHolder(store, StarConfig()).current == after

    def test_invalid_update_keeps_current(self):
        store = MemoryStore()
        holder = ConfigHolder(store, StarConfig())
        before = holder.current

        with pytest.raises(ValueError):
            holder.update(max_cache_entries=0)

        assert holder.current is before
        assert store.get(CONFIG_KEY) is None
