"""Coders: encode/decode records between bytes and Python values.

Only a handful of coders ship here. They exist so that readers can be built
from a spec end to end; the engine is free to pass its own coder objects as
long as they implement ``encode``/``decode``.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Dict, Type

from .config.properties import OBJECT_TYPE_NAME
from .errors import MalformedSpecError, TypeMismatchError, UnknownCoderError


class Coder(ABC):
    """Encodes values to bytes and decodes them back."""

    @abstractmethod
    def encode(self, value: Any) -> bytes: ...

    @abstractmethod
    def decode(self, data: bytes | str) -> Any: ...

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class JsonCoder(Coder):
    """One JSON document per record."""

    def encode(self, value: Any) -> bytes:
        return json.dumps(value, ensure_ascii=False).encode("utf-8")

    def decode(self, data: bytes | str) -> Any:
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return json.loads(data)


class StringUtf8Coder(Coder):
    def encode(self, value: Any) -> bytes:
        return str(value).encode("utf-8")

    def decode(self, data: bytes | str) -> Any:
        if isinstance(data, bytes):
            return data.decode("utf-8")
        return data


class BytesCoder(Coder):
    def encode(self, value: Any) -> bytes:
        return bytes(value)

    def decode(self, data: bytes | str) -> Any:
        if isinstance(data, str):
            return data.encode("utf-8")
        return data


CODERS: Dict[str, Type[Coder]] = {
    "json": JsonCoder,
    "string_utf8": StringUtf8Coder,
    "bytes": BytesCoder,
}


def coder_from_spec(spec: Mapping[str, Any]) -> Coder:
    """Build a coder from a codec spec such as ``{"@type": "json"}``.

    Raises:
        TypeMismatchError: If spec is not a mapping or the tag is not a string
        MalformedSpecError: If the spec has no type tag
        UnknownCoderError: If the tag does not name a known coder
    """
    if not isinstance(spec, Mapping):
        raise TypeMismatchError(
            f"codec spec must be an object, got {type(spec).__name__}"
        )
    if spec.get(OBJECT_TYPE_NAME) is None:
        raise MalformedSpecError(f"codec spec is missing '{OBJECT_TYPE_NAME}'")
    tag = spec[OBJECT_TYPE_NAME]
    if not isinstance(tag, str):
        raise TypeMismatchError(f"codec '{OBJECT_TYPE_NAME}' must be a string")
    coder_cls = CODERS.get(tag)
    if coder_cls is None:
        raise UnknownCoderError(
            f"Unknown coder type: {tag!r} (available: {', '.join(sorted(CODERS))})"
        )
    return coder_cls()


__all__ = [
    "BytesCoder",
    "CODERS",
    "Coder",
    "JsonCoder",
    "StringUtf8Coder",
    "coder_from_spec",
]
