"""
Unit tests for harvester.core.config.
"""

import pytest
from dataclasses import FrozenInstanceError
from pathlib import Path

from harvester.core.config import DEFAULT_USER_AGENT, HarvestConfig
from harvester.core.exceptions import ConfigurationError


class TestDefaults:
    """Test suite for default configuration."""

    def test_defaults(self):
        config = HarvestConfig()
        assert config.headless is False
        assert config.evasion_enabled is True
        assert config.user_agent == DEFAULT_USER_AGENT
        assert config.challenge_timeout_ms == 30_000
        assert config.scroll_interval_ms == 2_000
        assert config.detail_delay_ms == 1_000
        assert config.enhancement_cap == 20
        assert config.sort_key is None
        assert config.persist_partial is False
        assert config.run_deadline_s is None
        assert config.out_dir == Path("results")

    def test_frozen(self):
        config = HarvestConfig()
        with pytest.raises(FrozenInstanceError):
            config.headless = True


class TestValidation:
    """Test suite for __post_init__ validation."""

    @pytest.mark.parametrize("kwargs", [
        {"nav_timeout_ms": 0},
        {"challenge_timeout_ms": -1},
        {"scroll_interval_ms": -5},
        {"detail_delay_ms": -1},
        {"enhancement_cap": -1},
        {"run_deadline_s": 0},
        {"log_level": "LOUD"},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ConfigurationError):
            HarvestConfig(**kwargs)

    def test_all_problems_reported_together(self):
        with pytest.raises(ConfigurationError) as exc_info:
            HarvestConfig(nav_timeout_ms=0, detail_delay_ms=-1)
        message = str(exc_info.value)
        assert "nav_timeout_ms" in message
        assert "detail_delay_ms" in message

    def test_zero_cap_allowed(self):
        assert HarvestConfig(enhancement_cap=0).enhancement_cap == 0

    def test_unbounded_cap_allowed(self):
        assert HarvestConfig(enhancement_cap=None).enhancement_cap is None


class TestFromEnv:
    """Test suite for environment loading."""

    def test_empty_environment_gives_defaults(self, clean_env):
        config = HarvestConfig.from_env(clean_env)
        assert config.headless is False
        assert config.enhancement_cap == 20
        assert config.run_deadline_s is None

    def test_values_read_from_env_file(self, clean_env):
        clean_env.write_text(
            "HEADLESS=true\n"
            "EVASION_ENABLED=false\n"
            "SCROLL_INTERVAL_MS=500\n"
            "ENHANCEMENT_CAP=5\n"
            "SORT_KEY=name\n"
            "RUN_DEADLINE_S=90\n"
            "SITE=igdb\n"
            "OUT_DIR=out\n",
            "utf-8",
        )
        config = HarvestConfig.from_env(clean_env)
        assert config.headless is True
        assert config.evasion_enabled is False
        assert config.scroll_interval_ms == 500
        assert config.enhancement_cap == 5
        assert config.sort_key == "name"
        assert config.run_deadline_s == 90.0
        assert config.site == "igdb"
        assert config.out_dir == Path("out")

    @pytest.mark.parametrize("raw", ["none", "unbounded", "all", ""])
    def test_unbounded_cap(self, clean_env, monkeypatch, raw):
        monkeypatch.setenv("ENHANCEMENT_CAP", raw)
        assert HarvestConfig.from_env(clean_env).enhancement_cap is None

    @pytest.mark.parametrize("raw", ["FALSE", "No", "OFF", " false "])
    def test_false_values_any_case(self, clean_env, monkeypatch, raw):
        monkeypatch.setenv("HEADLESS", raw)
        monkeypatch.setenv("EVASION_ENABLED", raw)
        config = HarvestConfig.from_env(clean_env)
        assert config.headless is False
        assert config.evasion_enabled is False

    @pytest.mark.parametrize("raw", ["TRUE", "Yes", "1"])
    def test_true_values_any_case(self, clean_env, monkeypatch, raw):
        monkeypatch.setenv("HEADLESS", raw)
        assert HarvestConfig.from_env(clean_env).headless is True

    def test_unbounded_cap_any_case(self, clean_env, monkeypatch):
        monkeypatch.setenv("ENHANCEMENT_CAP", "NONE")
        assert HarvestConfig.from_env(clean_env).enhancement_cap is None

    def test_non_integer_rejected(self, clean_env, monkeypatch):
        monkeypatch.setenv("NAV_TIMEOUT_MS", "soon")
        with pytest.raises(ConfigurationError):
            HarvestConfig.from_env(clean_env)


class TestOverrides:
    """Test suite for with_overrides."""

    def test_none_values_ignored(self):
        config = HarvestConfig(sort_key="name").with_overrides(sort_key=None, headless=True)
        assert config.sort_key == "name"
        assert config.headless is True

    def test_overrides_validated(self):
        with pytest.raises(ConfigurationError):
            HarvestConfig().with_overrides(enhancement_cap=-3)

    def test_original_untouched(self):
        base = HarvestConfig()
        base.with_overrides(dedupe=True)
        assert base.dedupe is False
