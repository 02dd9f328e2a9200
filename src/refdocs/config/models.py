"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (REFDOCS__SECTION__KEY)
3. Repo YAML (.refdocs/config.yaml)
4. Global YAML (~/.config/refdocs/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    REFDOCS__<SECTION>__<KEY>=<VALUE>

Examples:
    REFDOCS__LOGGING__LEVEL=DEBUG
    REFDOCS__IMPORTER__THROTTLE_PAUSE_SEC=0
    REFDOCS__DATABASE__PATH=/var/lib/refdocs/refdocs.db
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        REFDOCS__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. INFO adds run summaries; DEBUG logs every unchanged item.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ImporterConfig(BaseModel):
    """Importer naming and pacing.

    Env vars:
        REFDOCS__IMPORTER__THROTTLE_EVERY: Entities per collection between pauses
        REFDOCS__IMPORTER__THROTTLE_PAUSE_SEC: Pause length (seconds)
        REFDOCS__IMPORTER__IMPORT_INTERNAL: Import @internal entities by default
    """

    post_type_class: str = "class"
    post_type_method: str = "method"
    post_type_function: str = "function"
    post_type_hook: str = "hook"
    taxonomy_file: str = "source-file"
    taxonomy_since_version: str = "since-version"
    taxonomy_package: str = "package"

    throttle_every: int = Field(
        default=10,
        description="Pause after this many entities in each collection. "
        "Only matters when the store is a rate-limited remote service.",
    )
    throttle_pause_sec: float = Field(
        default=3.0,
        description="Length of each throttle pause.",
    )
    import_internal: bool = Field(
        default=False,
        description="Import entities tagged @internal. @ignore always wins.",
    )

    @field_validator("throttle_every")
    @classmethod
    def validate_throttle_every(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"throttle_every must be >= 1, got {v}")
        return v

    @field_validator("throttle_pause_sec")
    @classmethod
    def validate_throttle_pause(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"throttle_pause_sec must be >= 0, got {v}")
        return v


class DatabaseConfig(BaseModel):
    """Content store connection configuration.

    Env vars:
        REFDOCS__DATABASE__PATH: SQLite file (relative paths resolve against the repo root)
        REFDOCS__DATABASE__BUSY_TIMEOUT_MS: SQLite busy timeout
    """

    path: str = Field(
        default=".refdocs/refdocs.db",
        description="SQLite database file holding items and terms.",
    )
    busy_timeout_ms: int = Field(
        default=30000,
        description="SQLite busy timeout (ms). How long to wait for locks.",
    )


class ParserConfig(BaseModel):
    """Settings handed to the external parser. Persisted by `refdocs config set`."""

    hook_prefix: str = ""
    namespace: str = ""
    version: str = ""


class RefDocsConfig(BaseModel):
    """Root configuration for refdocs.

    All settings can be configured via:
    1. Environment variables: REFDOCS__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    importer: ImporterConfig = Field(default_factory=ImporterConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)
