"""Types command - list the source types readers can be built for."""

import click

from ...context import pass_context


@click.command()
@pass_context
def types(ctx):
    """List registered source-type tags, one per line."""
    for tag in ctx.get_registry().tags():
        click.echo(tag)
