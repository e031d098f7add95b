"""Cat command - read every record of a spec and output NDJSON."""

import json
from itertools import islice
from pathlib import Path

import click

from ...config import load_spec
from ...context import pass_context
from ...counters import CounterSet
from ..helpers import dumps, fail


@click.command()
@click.argument(
    "spec_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "-n",
    "--limit",
    type=click.IntRange(min=0),
    default=None,
    help="Stop after N records",
)
@click.option(
    "--start",
    "start_position",
    default=None,
    help="Resume position as JSON (as printed by --progress)",
)
@click.option(
    "--progress",
    "show_progress",
    is_flag=True,
    help="Print the resume position as JSON on stderr when done",
)
@click.option(
    "--counters",
    "show_counters",
    is_flag=True,
    help="Print reader counters as JSON on stderr when done",
)
@click.option("--operation-name", default=None, help="Prefix for counter names")
@pass_context
def cat(
    ctx, spec_file, limit, start_position, show_progress, show_counters, operation_name
):
    """Read the source described by SPEC_FILE and print one JSON record per line.

    SPEC_FILE holds a JSON reader spec, for example a concatenation:

        {"@type": "concat", "sources": [
            {"spec": {"@type": "ndjson", "path": "jan.ndjson"}},
            {"spec": {"@type": "ndjson", "path": "feb.ndjson"}}]}

    Examples:
        sourcecat cat spec.json
        sourcecat cat spec.json -n 100 --progress
        sourcecat cat spec.json --start '{"index": 1, "inner": 2048}'
    """
    try:
        spec = load_spec(spec_file)
        start = json.loads(start_position) if start_position else None
        counters = CounterSet()
        reader = ctx.get_registry().create(
            spec,
            options={},
            counter_sink=counters,
            operation_name=operation_name,
        )

        with reader.iterator(start) as it:
            for record in islice(it, limit):
                click.echo(dumps(record))
            progress = it.get_progress()

        if show_progress:
            click.echo(dumps({"progress": progress}), err=True)
        if show_counters:
            click.echo(json.dumps(counters.snapshot(), sort_keys=True), err=True)

    except Exception as e:
        fail(e)
