"""Persisted parser settings behind `refdocs config get|set|list`.

Settings are stored in .refdocs/settings.yaml. Only the keys of
ParserConfig are accepted; unset keys fall back to their defaults.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from refdocs.config.models import ParserConfig
from refdocs.core.errors import ConfigError

SETTINGS_HEADER = """\
# Parser settings for refdocs.
# Managed by: refdocs config set <key> <value>

"""


def _known_keys() -> list[str]:
    return list(ParserConfig.model_fields)


def load_settings(path: Path) -> dict[str, Any]:
    """Load persisted settings, ignoring unknown keys."""
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "expected a mapping")
    return {k: v for k, v in data.items() if k in _known_keys()}


def write_settings(path: Path, settings: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    content = SETTINGS_HEADER + yaml.dump(settings, default_flow_style=False, sort_keys=True)
    path.write_text(content)


def list_settings(path: Path) -> dict[str, Any]:
    """All settings with defaults filled in."""
    return ParserConfig(**load_settings(path)).model_dump()


def get_setting(path: Path, key: str) -> Any:
    if key not in _known_keys():
        raise ConfigError.unknown_key(key)
    return list_settings(path)[key]


def set_setting(path: Path, key: str, value: str) -> None:
    """Validate and persist a single setting."""
    if key not in _known_keys():
        raise ConfigError.unknown_key(key)
    settings = load_settings(path)
    settings[key] = value
    try:
        ParserConfig(**settings)
    except ValidationError as e:
        raise ConfigError.invalid_value(key, value, e.errors()[0]["msg"]) from e
    write_settings(path, settings)
