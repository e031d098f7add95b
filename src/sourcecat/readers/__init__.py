"""Reader capabilities and the built-in reader implementations."""

from .base import Reader, ReaderFactory, ReaderIterator
from .concat import (
    ConcatIterator,
    ConcatReader,
    ConcatReaderFactory,
    ReaderState,
    compose_does_not_need_splitting,
    compose_metadata,
)
from .in_memory import InMemoryReader, InMemoryReaderFactory
from .ndjson import NdjsonReader, NdjsonReaderFactory

__all__ = [
    "ConcatIterator",
    "ConcatReader",
    "ConcatReaderFactory",
    "InMemoryReader",
    "InMemoryReaderFactory",
    "NdjsonReader",
    "NdjsonReaderFactory",
    "Reader",
    "ReaderFactory",
    "ReaderIterator",
    "ReaderState",
    "compose_does_not_need_splitting",
    "compose_metadata",
]
