"""refdocs CLI - refdocs command."""

import click

from refdocs import __version__
from refdocs.cli.config_cmd import config_group
from refdocs.cli.import_cmd import import_command
from refdocs.cli.user_cmd import user_group
from refdocs.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="refdocs")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """refdocs - import parsed documentation into a reference content store."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    # Baseline until the command loads config; logs only surface problems unless -v
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(import_command, name="import")
cli.add_command(config_group, name="config")
cli.add_command(user_group, name="user")


if __name__ == "__main__":
    cli()
