"""Inspect command - show how a spec is parsed without reading any records."""

import json
from pathlib import Path

import click

from ...config import load_spec, parse_source_list, spec_type
from ...context import pass_context
from ...readers import compose_does_not_need_splitting, compose_metadata
from ..helpers import fail, to_jsonable

CONCAT_TYPE = "concat"


def _describe(spec, registry) -> dict:
    tag = spec_type(spec)
    result = {"type": tag, "registered": tag in registry}
    if tag != CONCAT_TYPE:
        return result

    sources = parse_source_list(spec)
    result["sources"] = [
        {
            "index": i,
            "type": s.type_tag,
            "registered": s.type_tag in registry,
            "codec": to_jsonable(s.codec),
            "base_specs": len(s.base_specs) if s.base_specs is not None else None,
            "metadata": to_jsonable(s.metadata),
            "does_not_need_splitting": s.does_not_need_splitting,
        }
        for i, s in enumerate(sources)
    ]
    result["metadata"] = to_jsonable(compose_metadata(sources))
    result["does_not_need_splitting"] = compose_does_not_need_splitting(sources)
    return result


def _fmt(value) -> str:
    return "?" if value is None else str(value).lower()


def _format_text(result: dict) -> str:
    lines = [f"Source: {result['type']}"]
    if not result["registered"]:
        lines.append("  (no reader registered for this type)")
    if "sources" not in result:
        return "\n".join(lines)

    lines.append("")
    lines.append(f"Sub-sources ({len(result['sources'])}):")
    for item in result["sources"]:
        meta = item["metadata"] or {}
        flag = "" if item["registered"] else "  [unregistered]"
        lines.append(f"  [{item['index']}] {item['type']}{flag}")
        lines.append(
            f"      size={_fmt(meta.get('estimated_size_bytes'))}"
            f" infinite={_fmt(meta.get('is_infinite'))}"
            f" sorted={_fmt(meta.get('produces_sorted_keys'))}"
            f" no_split={_fmt(item['does_not_need_splitting'])}"
        )

    meta = result["metadata"] or {}
    lines.append("")
    lines.append("Combined:")
    for key in ("estimated_size_bytes", "is_infinite", "produces_sorted_keys"):
        display_key = key.replace("_", " ").title()
        lines.append(f"  {display_key}: {_fmt(meta.get(key))}")
    lines.append(f"  Does Not Need Splitting: {_fmt(result['does_not_need_splitting'])}")
    return "\n".join(lines)


@click.command()
@click.argument(
    "spec_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@pass_context
def inspect(ctx, spec_file, output_format):
    """Show the sub-sources of SPEC_FILE and their combined metadata.

    No reader is opened; this only parses the spec.
    """
    try:
        result = _describe(load_spec(spec_file), ctx.get_registry())
    except Exception as e:
        fail(e)

    if output_format == "json":
        click.echo(json.dumps(result, indent=2))
    else:
        click.echo(_format_text(result))
