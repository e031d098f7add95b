"""Deserialize configuration trees into source descriptors."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..coders import coder_from_spec
from ..errors import MalformedSpecError, SpecError, TypeMismatchError
from ..models import SourceDescriptor, SourceMetadata, thaw_tree
from .properties import CONCAT_SOURCE_SOURCES, OBJECT_TYPE_NAME, SOURCE_SPEC


def spec_type(spec: Mapping[str, Any]) -> str:
    """Return the source-type tag of ``spec``.

    Raises:
        TypeMismatchError: If spec is not a mapping or the tag is not a string
        MalformedSpecError: If the tag is missing
    """
    if not isinstance(spec, Mapping):
        raise TypeMismatchError(f"spec must be an object, got {type(spec).__name__}")
    tag = spec.get(OBJECT_TYPE_NAME)
    if tag is None:
        raise MalformedSpecError(f"spec is missing '{OBJECT_TYPE_NAME}'")
    if not isinstance(tag, str):
        raise TypeMismatchError(
            f"'{OBJECT_TYPE_NAME}' must be a string, got {type(tag).__name__}"
        )
    return tag


class _SourceEntry(BaseModel):
    """Wire shape of one source entry.

    Strict so that ``"true"`` or ``1`` never pass for a bool and ``True``
    never passes for an integer.
    """

    model_config = ConfigDict(strict=True, extra="ignore")

    spec: Dict[str, Any]
    encoding: Optional[Dict[str, Any]] = None
    base_specs: Optional[List[Dict[str, Any]]] = None
    produces_sorted_keys: Optional[bool] = None
    is_infinite: Optional[bool] = None
    estimated_size_bytes: Optional[int] = Field(default=None, ge=0)
    does_not_need_splitting: Optional[bool] = None


def _describe_errors(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"field '{loc}': {err['msg']}")
    return "; ".join(parts)


def _check_tags(entry: _SourceEntry) -> None:
    """Fail on a missing or bad type tag now rather than when the source is opened.

    The tag may come from a base spec, so it is checked on the merged view.
    """
    merged: Dict[str, Any] = {}
    for base in entry.base_specs or ():
        merged.update(base)
    merged.update(entry.spec)
    spec_type(merged)
    if entry.encoding is not None:
        coder_from_spec(entry.encoding)


def _parse_source(dictionary: Any, where: str) -> SourceDescriptor:
    if not isinstance(dictionary, Mapping):
        raise TypeMismatchError(
            f"{where} must be an object, got {type(dictionary).__name__}"
        )
    if dictionary.get(SOURCE_SPEC) is None:
        raise MalformedSpecError(f"{where} is missing required field '{SOURCE_SPEC}'")

    try:
        entry = _SourceEntry.model_validate(dict(dictionary))
    except ValidationError as e:
        raise TypeMismatchError(f"{where}: {_describe_errors(e)}") from e

    try:
        _check_tags(entry)
    except SpecError as e:
        raise type(e)(f"{where}: {e}") from e

    metadata = SourceMetadata(
        produces_sorted_keys=entry.produces_sorted_keys,
        is_infinite=entry.is_infinite,
        estimated_size_bytes=entry.estimated_size_bytes,
    )
    return SourceDescriptor(
        spec=entry.spec,
        codec=entry.encoding,
        base_specs=tuple(entry.base_specs) if entry.base_specs is not None else None,
        metadata=None if metadata.is_empty() else metadata,
        does_not_need_splitting=entry.does_not_need_splitting,
    )


def parse_source(dictionary: Mapping[str, Any]) -> SourceDescriptor:
    """Build a SourceDescriptor from one source entry.

    Optional keys that are absent stay absent (None) in the descriptor; the
    metadata group is only set if at least one of its fields was supplied.

    Args:
        dictionary: Source entry with a required ``spec`` key

    Returns:
        Immutable SourceDescriptor

    Raises:
        MalformedSpecError: If ``spec`` is missing or null, or no type tag is
            found in it or its base specs
        TypeMismatchError: If a present field has the wrong shape
        UnknownCoderError: If ``encoding`` names a coder that does not exist
    """
    return _parse_source(dictionary, "source")


def parse_source_list(
    dictionary: Mapping[str, Any], key: str = CONCAT_SOURCE_SOURCES
) -> Tuple[SourceDescriptor, ...]:
    """Parse the ordered list of source entries stored under ``key``.

    An absent key means zero sources and returns an empty tuple. The first
    bad entry aborts the whole list with the error it raised.
    """
    if not isinstance(dictionary, Mapping):
        raise TypeMismatchError(
            f"spec must be an object, got {type(dictionary).__name__}"
        )
    items = dictionary.get(key)
    if items is None:
        return ()
    if not isinstance(items, list):
        raise TypeMismatchError(
            f"field '{key}' must be a list, got {type(items).__name__}"
        )
    return tuple(
        _parse_source(item, f"{key}[{i}]") for i, item in enumerate(items)
    )


def flatten_base_specs(descriptor: SourceDescriptor) -> Dict[str, Any]:
    """Return the descriptor's spec with its base specs merged underneath.

    Later base specs override earlier ones and the spec overrides them all.
    """
    merged: Dict[str, Any] = {}
    for base in descriptor.base_specs or ():
        merged.update(base)
    merged.update(descriptor.spec)
    return thaw_tree(merged)


__all__ = ["flatten_base_specs", "parse_source", "parse_source_list", "spec_type"]
