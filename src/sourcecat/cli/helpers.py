"""CLI helper utilities shared across commands."""

import json
import sys
from collections.abc import Mapping
from typing import Any, NoReturn

import click
from pydantic import BaseModel


def fail(message: Any) -> NoReturn:
    """Print an error to stderr and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def to_jsonable(value: Any) -> Any:
    """Convert models (positions, metadata) into plain JSON values.

    Models nested in mappings and lists are converted too, so a position
    wrapped in an output envelope stays a JSON object.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Mapping):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def dumps(value: Any) -> str:
    """Compact single-line JSON; non-JSON values fall back to str()."""
    return json.dumps(to_jsonable(value), ensure_ascii=False, default=str)
