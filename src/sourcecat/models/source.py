"""Source descriptor models."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator


def freeze_tree(value: Any) -> Any:
    """Deep read-only copy of a JSON-like tree.

    Mappings become ``MappingProxyType`` views over fresh dicts and lists become
    tuples, so nothing is shared with the tree that was passed in.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze_tree(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_tree(v) for v in value)
    return value


def thaw_tree(value: Any) -> Any:
    """Deep mutable copy of a tree: mappings become dicts, tuples become lists."""
    if isinstance(value, Mapping):
        return {k: thaw_tree(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw_tree(v) for v in value]
    return value


class SourceMetadata(BaseModel):
    """Optional facts about a source.

    Every field is tri-state: ``None`` means the configuration did not say,
    which is different from ``False``/``0``.
    """

    model_config = ConfigDict(frozen=True)

    produces_sorted_keys: Optional[bool] = None
    is_infinite: Optional[bool] = None
    estimated_size_bytes: Optional[int] = None

    def is_empty(self) -> bool:
        """True if no field was supplied."""
        return (
            self.produces_sorted_keys is None
            and self.is_infinite is None
            and self.estimated_size_bytes is None
        )


class SourceDescriptor(BaseModel):
    """Deserialized configuration of one source.

    ``spec`` identifies the source type (via its ``@type`` tag) and its
    parameters. Everything else is optional and stays ``None`` unless it was
    explicitly present in the configuration tree.

    ``spec``, ``codec`` and ``base_specs`` are deep-frozen on construction
    (see ``freeze_tree``); readers get a mutable copy from
    ``flatten_base_specs``.
    """

    model_config = ConfigDict(frozen=True)

    spec: Mapping[str, Any]
    codec: Optional[Mapping[str, Any]] = None
    base_specs: Optional[Tuple[Mapping[str, Any], ...]] = None
    metadata: Optional[SourceMetadata] = None
    does_not_need_splitting: Optional[bool] = None

    @field_validator("spec", "codec", "base_specs")
    @classmethod
    def _freeze(cls, value: Any) -> Any:
        return None if value is None else freeze_tree(value)

    @property
    def type_tag(self) -> Optional[str]:
        """Source-type tag of the spec, falling back to the last base spec with one."""
        tag = self.spec.get("@type")
        for base in reversed(self.base_specs or ()):
            if tag is not None:
                break
            tag = base.get("@type")
        return tag if isinstance(tag, str) else None


__all__ = ["SourceDescriptor", "SourceMetadata", "freeze_tree", "thaw_tree"]
