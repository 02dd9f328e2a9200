"""Structured logging for refdocs.

structlog builds every event; stdlib logging owns the handlers, so events
from libraries (sqlalchemy) reach the same outputs with the same format.

The import run id is bound in structlog's contextvars and merged into every
event logged while that run is active.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from refdocs.config.models import LoggingConfig, LogOutputConfig

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
]


def get_run_id() -> str | None:
    return structlog.contextvars.get_contextvars().get("run_id")


def set_run_id(run_id: str | None = None) -> str:
    """Bind (or generate) the id of the import run in progress."""
    rid = run_id or uuid4().hex[:12]
    structlog.contextvars.bind_contextvars(run_id=rid)
    return rid


def clear_run_id() -> None:
    structlog.contextvars.unbind_contextvars("run_id")


def _level(name: str) -> int:
    return logging.getLevelNamesMapping()[name.upper()]


def configure_logging(config: LoggingConfig | None = None, *, level: str | None = None) -> None:
    """Install one handler per configured output.

    Args:
        config: Root level and outputs. Defaults to console output on stderr.
        level: Replaces config.level, e.g. for a --verbose flag.
    """
    from refdocs.config.models import LoggingConfig

    config = config or LoggingConfig()
    if level is not None:
        config = config.model_copy(update={"level": level.upper()})
    root_level = _level(config.level)

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfigured once the CLI has loaded config
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(root_level)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    for output in config.outputs:
        root_logger.addHandler(_create_handler(output, config.level))


def _create_handler(output: LogOutputConfig, default_level: str) -> logging.Handler:
    handler: logging.Handler
    is_console = output.destination in ("stderr", "stdout")
    if output.destination == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    elif output.destination == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a")

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=is_console and sys.stderr.isatty(),
            pad_event_to=0,
            pad_level=False,
        )

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=_SHARED_PROCESSORS)
    )
    handler.setLevel(_level(output.level or default_level))
    return handler
