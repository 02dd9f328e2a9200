"""Core module exports."""

from refdocs.core.errors import (
    ConfigError,
    ErrorCode,
    ItemUpsertError,
    ParseInputError,
    PreconditionError,
    RefDocsError,
    TermResolutionError,
)
from refdocs.core.logging import (
    clear_run_id,
    configure_logging,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "ItemUpsertError",
    "ParseInputError",
    "PreconditionError",
    "RefDocsError",
    "TermResolutionError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_run_id",
    "set_run_id",
]
