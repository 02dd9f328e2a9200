"""CLI utilities."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from refdocs.config import RefDocsConfig, get_database_path, load_config
from refdocs.core.errors import RefDocsError
from refdocs.core.logging import configure_logging
from refdocs.store import Database, SqlStore

_console: Console | None = None


def get_console() -> Console:
    global _console
    if _console is None:
        _console = Console(highlight=False)
    return _console


def load_cli_config(root: Path) -> RefDocsConfig:
    """Load config and apply its logging section.

    Config errors become click errors. The group's -v flag still forces DEBUG.
    """
    try:
        config = load_config(root)
    except RefDocsError as e:
        raise click.ClickException(e.message) from e
    ctx = click.get_current_context(silent=True)
    verbose = bool(ctx and (ctx.find_root().obj or {}).get("verbose"))
    configure_logging(config.logging, level="DEBUG" if verbose else None)
    return config


def open_store(
    root: Path,
    config: RefDocsConfig,
    db_path: Path | None = None,
    actor_login: str | None = None,
) -> SqlStore:
    """Open (and create if needed) the SQLite store for root."""
    path = db_path or get_database_path(root, config)
    db = Database(path, busy_timeout_ms=config.database.busy_timeout_ms)
    db.create_all()
    return SqlStore(db, actor_login=actor_login)


def settings_path(root: Path) -> Path:
    return root / ".refdocs" / "settings.yaml"
