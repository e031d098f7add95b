"""Config layer facade: spec parsing and loading."""

from . import properties
from .core import load_json, load_spec
from .spec import flatten_base_specs, parse_source, parse_source_list, spec_type

__all__ = [
    "flatten_base_specs",
    "load_json",
    "load_spec",
    "parse_source",
    "parse_source_list",
    "properties",
    "spec_type",
]
