"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (REFDOCS__SECTION__KEY)
3. Persisted parser settings (.refdocs/settings.yaml, written by `config set`)
4. Repo config (.refdocs/config.yaml)
5. Global config (~/.config/refdocs/config.yaml)
6. Built-in defaults (lowest priority)
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from refdocs.config.models import (
    DatabaseConfig,
    ImporterConfig,
    LoggingConfig,
    ParserConfig,
    RefDocsConfig,
)
from refdocs.config.user_config import load_settings
from refdocs.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/refdocs/config.yaml").expanduser()


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source."""

    class RefDocsSettings(BaseSettings):
        """Root config. Env vars: REFDOCS__LOGGING__LEVEL, REFDOCS__IMPORTER__THROTTLE_EVERY, etc."""

        model_config = SettingsConfigDict(
            env_prefix="REFDOCS__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        importer: ImporterConfig = ImporterConfig()
        database: DatabaseConfig = DatabaseConfig()
        parser: ParserConfig = ParserConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml files
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return RefDocsSettings


def load_config(repo_root: Path | None = None, **kwargs: Any) -> RefDocsConfig:
    """Load config: defaults < global yaml < repo yaml < settings < env vars < kwargs.

    Args:
        repo_root: Directory holding .refdocs/. Defaults to current working directory.
        **kwargs: Override values (highest precedence).

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    repo_root = repo_root or Path.cwd()
    refdocs_dir = repo_root / ".refdocs"

    yaml_config = _load_yaml(GLOBAL_CONFIG_PATH)
    yaml_config = _deep_merge(yaml_config, _load_yaml(refdocs_dir / "config.yaml"))

    settings = load_settings(refdocs_dir / "settings.yaml")
    if settings:
        yaml_config = _deep_merge(yaml_config, {"parser": settings})

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings_obj = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return RefDocsConfig.model_validate(settings_obj.model_dump())


def get_database_path(repo_root: Path, config: RefDocsConfig | None = None) -> Path:
    """Resolve the SQLite path, anchoring relative paths at repo_root."""
    config = config or load_config(repo_root)
    path = Path(config.database.path).expanduser()
    if not path.is_absolute():
        path = repo_root / path
    return path
