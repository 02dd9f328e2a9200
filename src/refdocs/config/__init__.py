"""Config module exports."""

from refdocs.config.loader import get_database_path, load_config
from refdocs.config.models import (
    DatabaseConfig,
    ImporterConfig,
    LoggingConfig,
    ParserConfig,
    RefDocsConfig,
)

__all__ = [
    "load_config",
    "get_database_path",
    "RefDocsConfig",
    "ImporterConfig",
    "DatabaseConfig",
    "LoggingConfig",
    "ParserConfig",
]
