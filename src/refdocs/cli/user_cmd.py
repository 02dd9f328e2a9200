"""refdocs user commands - manage who may run imports."""

from pathlib import Path

import click

from refdocs.cli.utils import load_cli_config, open_store


@click.group()
def user_group() -> None:
    """Manage import users."""


@user_group.command("add")
@click.argument("login")
@click.option("--db", "db_path", default=None, type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--root",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
def add_command(login: str, db_path: Path | None, root: Path) -> None:
    """Register LOGIN as an import user."""
    root = root.resolve()
    store = open_store(root, load_cli_config(root), db_path=db_path)
    actor = store.add_user(login)
    click.echo(f"User {actor.login} (id {actor.id}) can run imports.")
