"""Tests for persistent preferences (config.toml)."""

import argparse
import os
import stat
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from reclaim.core.config import (
    DEFAULTS,
    ENV_API_URL,
    apply_config_defaults,
    effective_config,
    load_config,
    save_config,
    validate_settings,
)
from reclaim.core.errors import ConfigurationError


class TestSaveLoadConfig:
    """Test config save/load roundtrip."""

    def test_save_and_load_roundtrip(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "reclaim" / "config.toml"
            with patch("reclaim.core.config._CONFIG_FILE", cfg_file):
                save_config({
                    "api_url": "https://recovery.example.com/api/",
                    "timeout": 12,
                    "log_level": "debug",
                    "log_file": "/tmp/reclaim.log",
                    "store_path": None,
                })
                loaded = load_config()
                assert loaded == {
                    "api_url": "https://recovery.example.com/api",
                    "timeout": 12.0,
                    "log_level": "DEBUG",
                    "log_file": "/tmp/reclaim.log",
                }

    def test_saved_file_is_owner_only(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "config.toml"
            with patch("reclaim.core.config._CONFIG_FILE", cfg_file):
                save_config({"timeout": 5})
            assert stat.S_IMODE(os.stat(cfg_file).st_mode) == 0o600

    def test_missing_file_returns_empty(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "nonexistent" / "config.toml"
            with patch("reclaim.core.config._CONFIG_FILE", cfg_file):
                assert load_config() == {}

    def test_unparsable_file_returns_empty(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "config.toml"
            cfg_file.write_text("api_url = [unterminated\n")
            with patch("reclaim.core.config._CONFIG_FILE", cfg_file):
                assert load_config() == {}

    def test_invalid_keys_skipped(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "config.toml"
            cfg_file.write_text('unknown_key = "value"\ntimeout = 3\n')
            with patch("reclaim.core.config._CONFIG_FILE", cfg_file):
                loaded = load_config()
                assert "unknown_key" not in loaded
                assert loaded["timeout"] == 3.0

    def test_invalid_values_skipped(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "config.toml"
            cfg_file.write_text(
                'api_url = "ftp://nope"\n'
                "timeout = -1\n"
                'log_level = "LOUD"\n'
                "redirect_delay = true\n"
            )
            with patch("reclaim.core.config._CONFIG_FILE", cfg_file):
                assert load_config() == {}


class TestEffectiveConfig:

    def test_env_overrides_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "config.toml"
            cfg_file.write_text('api_url = "http://file.example/api"\n')
            with patch("reclaim.core.config._CONFIG_FILE", cfg_file), \
                 patch.dict(os.environ, {ENV_API_URL: "https://env.example/api"}):
                assert effective_config()["api_url"] == "https://env.example/api"

    def test_defaults_without_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg_file = Path(tmpdir) / "config.toml"
            env = {k: v for k, v in os.environ.items() if k != ENV_API_URL}
            with patch("reclaim.core.config._CONFIG_FILE", cfg_file), \
                 patch.dict(os.environ, env, clear=True):
                assert effective_config() == DEFAULTS


class TestApplyConfigDefaults:
    """CLI flags win over the config file, which wins over built-in defaults."""

    def test_explicit_flag_wins(self):
        args = argparse.Namespace(api_url="http://flag/api", timeout=None)
        apply_config_defaults(args, {"api_url": "http://cfg/api", "timeout": 9.0})
        assert args.api_url == "http://flag/api"
        assert args.timeout == 9.0

    def test_builtin_defaults_fill_the_rest(self):
        args = argparse.Namespace()
        apply_config_defaults(args, {})
        for key, value in DEFAULTS.items():
            assert getattr(args, key) == value


class TestValidateSettings:

    def test_normalises_values(self):
        checked = validate_settings({"api_url": "http://host/api/", "log_level": "info", "timeout": 3})
        assert checked == {"api_url": "http://host/api", "log_level": "INFO", "timeout": 3.0}

    def test_invalid_value_raises(self):
        with pytest.raises(ConfigurationError):
            validate_settings({"timeout": 0})

    def test_unknown_key_raises(self):
        with pytest.raises(ValueError):
            validate_settings({"cipher": "AES"})
