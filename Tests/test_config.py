"""
Tests for the picker configuration loader.
"""

from pathlib import Path

import pytest

from chat_pickers import config as picker_config
from chat_pickers.config import (
    DEFAULT_CONFIG_PATH,
    deep_merge_dicts,
    get_config_path,
    get_picker_setting,
    get_tenor_api_key,
    load_picker_config,
)


class TestConfigPath:

    def test_environment_override(self, tmp_path):
        assert get_config_path() == tmp_path / "config.toml"

    def test_default_location(self, monkeypatch):
        monkeypatch.delenv(picker_config.CONFIG_PATH_ENV_VAR)
        assert get_config_path() == DEFAULT_CONFIG_PATH
        assert DEFAULT_CONFIG_PATH.parts[-3:] == (".config", "chat_pickers", "config.toml")


class TestLoadPickerConfig:

    def test_missing_file_uses_defaults(self):
        config = load_picker_config()

        assert config["gif_picker"]["featured_limit"] == 24
        assert config["emoji_picker"]["vertical_align"] == "bottom"
        assert config["tenor"]["base_url"] == "https://tenor.googleapis.com/v2/"

    def test_user_values_merge_over_defaults(self, write_config):
        write_config('[gif_picker]\nsearch_limit = 12\n\n[tenor]\nlocale = "fr_FR"\n')

        config = load_picker_config()

        assert config["gif_picker"]["search_limit"] == 12
        assert config["gif_picker"]["featured_limit"] == 24
        assert config["tenor"]["locale"] == "fr_FR"
        assert config["tenor"]["client_key"] == "chat_pickers"

    def test_invalid_toml_falls_back_to_defaults(self, write_config):
        write_config("[gif_picker\nsearch_limit = ")

        assert load_picker_config()["gif_picker"]["search_limit"] == 48

    def test_result_is_cached_until_forced(self, write_config):
        first = load_picker_config()
        write_config("[gif_picker]\nsearch_limit = 5\n")
        picker_config._CONFIG_CACHE = first

        assert load_picker_config() is first
        assert load_picker_config(force_reload=True)["gif_picker"]["search_limit"] == 5

    def test_get_picker_setting_default_for_unknown_keys(self):
        assert get_picker_setting("gif_picker", "missing", "fallback") == "fallback"
        assert get_picker_setting("no_such_section", "key", 3) == 3


def test_deep_merge_dicts_leaves_inputs_untouched():
    base = {"a": {"x": 1, "y": 2}, "b": 1}
    update = {"a": {"y": 3}, "c": 4}

    merged = deep_merge_dicts(base, update)

    assert merged == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}
    assert base == {"a": {"x": 1, "y": 2}, "b": 1}


class TestTenorApiKey:

    def test_not_configured(self):
        assert get_tenor_api_key() is None

    def test_environment_wins(self, monkeypatch, write_config):
        write_config('[tenor]\napi_key = "from_file"\n')
        monkeypatch.setenv("TENOR_API_KEY", "from_env")

        assert get_tenor_api_key() == "from_env"

    def test_config_file_key(self, write_config):
        write_config('[tenor]\napi_key = "from_file"\n')

        assert get_tenor_api_key() == "from_file"

    def test_placeholder_is_ignored(self, write_config):
        write_config('[tenor]\napi_key = "<your-tenor-key>"\n')

        assert get_tenor_api_key() is None

    @pytest.mark.parametrize("value", ["12345", "true", "[1, 2]", "{ nested = 1 }"])
    def test_non_string_key_is_ignored(self, write_config, value):
        write_config(f"[tenor]\napi_key = {value}\n")

        assert get_tenor_api_key() is None

    def test_custom_environment_variable(self, monkeypatch, write_config):
        write_config('[tenor]\napi_key_env_var = "MY_GIF_KEY"\n')
        monkeypatch.setenv("MY_GIF_KEY", "custom")

        assert get_tenor_api_key() == "custom"
