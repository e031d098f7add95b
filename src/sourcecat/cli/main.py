"""sourcecat CLI main entry point with global options."""

import click

from ..context import LOG_LEVEL_ENV, SourceCatContext
from ..log import LEVELS, configure_logging


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar=LOG_LEVEL_ENV,
    help=f"Log level for stderr diagnostics (or ${LOG_LEVEL_ENV})",
)
@click.pass_context
def cli(ctx, log_level):
    """sourcecat - read many sources as one ordered record stream."""
    ctx.ensure_object(SourceCatContext)
    ctx.obj.log_level = log_level.upper()
    configure_logging(ctx.obj.log_level)


# Register commands at module level so tests can import cli with commands attached
from .commands.cat import cat
from .commands.inspect import inspect
from .commands.types import types

cli.add_command(cat)
cli.add_command(inspect)
cli.add_command(types)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
