"""Tests for configuration loading and saving."""

import logging

import pytest

from quickadd.config import Config, ConfigModel, get_config, load_config, save_config
from quickadd.exceptions import ConfigError


class TestConfigModel:
    """Test the configuration model."""

    def test_defaults(self):
        config = ConfigModel()
        assert config.use_emoji is True
        assert config.detect_before_parse is True
        assert config.datetime_format == "%Y-%m-%d %H:%M"

    def test_yaml_round_trip(self):
        config = ConfigModel(use_emoji=False, time_format="%I:%M %p")
        restored = ConfigModel.from_yaml(config.to_yaml())
        assert restored == config

    def test_unknown_keys_are_ignored(self, caplog):
        with caplog.at_level(logging.WARNING, logger="quickadd.config"):
            config = ConfigModel.from_yaml("use_emoji: false\ntheme: dark\n")
        assert config.use_emoji is False
        assert "theme" in caplog.text

    def test_non_mapping_is_rejected(self):
        with pytest.raises(ConfigError):
            ConfigModel.from_yaml("- just\n- a list\n")

    def test_empty_yaml_gives_defaults(self):
        assert ConfigModel.from_yaml("") == ConfigModel()


class TestConfigManager:
    """Test loading, caching and saving configuration files."""

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml")
        assert config == ConfigModel()

    def test_env_var_selects_default_path(self, tmp_path):
        assert Config.default_path() == tmp_path / "config.yaml"

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / "config.yaml"
        save_config(ConfigModel(show_badges=False), path)
        assert path.exists()
        assert load_config(path).show_badges is False

    def test_invalid_yaml_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("use_emoji: [unclosed\n")
        assert load_config(path) == ConfigModel()

    def test_invalid_yaml_strict_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("use_emoji: [unclosed\n")
        with pytest.raises(ConfigError) as excinfo:
            load_config(path, strict=True)
        assert excinfo.value.path == path

    def test_get_config_is_cached(self, tmp_path):
        save_config(ConfigModel(use_emoji=False))
        first = get_config()
        assert first.use_emoji is False
        assert get_config() is first

    def test_reload_reads_file_again(self):
        save_config(ConfigModel(use_emoji=False))
        assert get_config().use_emoji is False
        save_config(ConfigModel(use_emoji=True))
        assert Config.reload().use_emoji is True
