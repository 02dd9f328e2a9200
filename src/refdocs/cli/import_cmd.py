"""refdocs import command - load a parser export into the store."""

import json
from pathlib import Path

import click

from refdocs.cli.utils import get_console, load_cli_config, open_store
from refdocs.core.errors import RefDocsError
from refdocs.core.formatting import format_import_summary, pluralize
from refdocs.importer import Importer
from refdocs.models import load_tree


@click.command()
@click.argument("file", type=click.Path(path_type=Path))
@click.option("--quick", is_flag=True, help="Skip the pauses between batches")
@click.option("--import-internal", is_flag=True, help="Also import entities tagged @internal")
@click.option("--user", "user", default=None, help="Login of the user the import runs as")
@click.option(
    "--db",
    "db_path",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="SQLite database (default: from config)",
)
@click.option(
    "--root",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory holding .refdocs/ (default: current directory)",
)
@click.option("--json", "as_json", is_flag=True, help="Output the summary as JSON")
def import_command(
    file: Path,
    quick: bool,
    import_internal: bool,
    user: str | None,
    db_path: Path | None,
    root: Path,
    as_json: bool,
) -> None:
    """Read a JSON export of parsed docblocks and import it.

    FILE is the parser's JSON output.
    """
    root = root.resolve()
    config = load_cli_config(root)

    try:
        files = load_tree(file)
        store = open_store(root, config, db_path=db_path, actor_login=user)
        result = Importer(store, config.importer).run(
            files,
            skip_throttle=quick,
            import_internal=import_internal or None,
        )
    except RefDocsError as e:
        raise click.ClickException(e.message) from e

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        console = get_console()
        console.print(
            f"Imported {pluralize(result.files, 'file')}: {format_import_summary(result)}"
        )
        for warning in result.warnings:
            console.print(f"[yellow]Warning:[/yellow] {warning}")
        for error in result.errors:
            console.print(f"[red]Error:[/red] {error}")

    if result.errors:
        raise SystemExit(1)
