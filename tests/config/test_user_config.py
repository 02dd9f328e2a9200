"""Tests for persisted parser settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from refdocs.config.user_config import (
    SETTINGS_HEADER,
    get_setting,
    list_settings,
    load_settings,
    set_setting,
)
from refdocs.core.errors import ConfigError, ErrorCode


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    return tmp_path / ".refdocs" / "settings.yaml"


class TestLoadSettings:
    def test_missing_file_is_empty(self, settings_file: Path) -> None:
        assert load_settings(settings_file) == {}

    def test_unknown_keys_dropped(self, settings_file: Path) -> None:
        """Keys outside the parser settings are ignored."""
        settings_file.parent.mkdir(parents=True)
        settings_file.write_text("namespace: WP\nbogus: 1\n")

        assert load_settings(settings_file) == {"namespace": "WP"}

    def test_non_mapping_rejected(self, settings_file: Path) -> None:
        settings_file.parent.mkdir(parents=True)
        settings_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError) as exc_info:
            load_settings(settings_file)
        assert exc_info.value.code is ErrorCode.CONFIG_PARSE_ERROR


class TestSetSetting:
    def test_set_then_get(self, settings_file: Path) -> None:
        """A set value is persisted and read back."""
        set_setting(settings_file, "version", "6.4")

        assert get_setting(settings_file, "version") == "6.4"
        assert settings_file.read_text().startswith(SETTINGS_HEADER)

    def test_set_keeps_other_keys(self, settings_file: Path) -> None:
        set_setting(settings_file, "namespace", "WP")
        set_setting(settings_file, "hook_prefix", "wp_")

        assert load_settings(settings_file) == {"namespace": "WP", "hook_prefix": "wp_"}

    def test_unknown_key_rejected(self, settings_file: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            set_setting(settings_file, "colour", "blue")
        assert exc_info.value.code is ErrorCode.CONFIG_UNKNOWN_KEY
        assert not settings_file.exists()


class TestListSettings:
    def test_defaults_filled_in(self, settings_file: Path) -> None:
        """Unset keys appear with their defaults."""
        set_setting(settings_file, "namespace", "WP")

        assert list_settings(settings_file) == {"hook_prefix": "", "namespace": "WP", "version": ""}

    def test_get_unknown_key(self, settings_file: Path) -> None:
        with pytest.raises(ConfigError):
            get_setting(settings_file, "nope")
