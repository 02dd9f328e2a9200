"""refdocs config commands - get, set and list persisted parser settings."""

import json
from pathlib import Path

import click
from rich.table import Table

from refdocs.cli.utils import get_console, settings_path
from refdocs.config.user_config import get_setting, list_settings, set_setting
from refdocs.core.errors import RefDocsError

_root_option = click.option(
    "--root",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory holding .refdocs/ (default: current directory)",
)


@click.group()
def config_group() -> None:
    """Read and write parser settings."""


@config_group.command("get")
@click.argument("key")
@_root_option
def get_command(key: str, root: Path) -> None:
    """Print the value of KEY."""
    try:
        click.echo(get_setting(settings_path(root.resolve()), key))
    except RefDocsError as e:
        raise click.ClickException(e.message) from e


@config_group.command("set")
@click.argument("key")
@click.argument("value")
@_root_option
def set_command(key: str, value: str, root: Path) -> None:
    """Persist VALUE for KEY."""
    try:
        set_setting(settings_path(root.resolve()), key, value)
    except RefDocsError as e:
        raise click.ClickException(
            f"Could not set config value {value} for key {key}: {e.message}"
        ) from e
    click.echo(f"Config value {value} successfully set for key {key}.")


@config_group.command("list")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@_root_option
def list_command(fmt: str, root: Path) -> None:
    """List every setting with its current value."""
    try:
        settings = list_settings(settings_path(root.resolve()))
    except RefDocsError as e:
        raise click.ClickException(e.message) from e

    if fmt == "json":
        click.echo(json.dumps([{"key": k, "value": v} for k, v in settings.items()]))
        return

    table = Table("key", "value")
    for key, value in settings.items():
        table.add_row(key, str(value))
    get_console().print(table)
