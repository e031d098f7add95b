"""Concatenation reader: many sub-sources read as one ordered stream.

Sub-readers are built lazily, one at a time, through the reader registry.
Each sub-source may be of a different type; the spec of a concat source only
lists them::

    {
        "@type": "concat",
        "sources": [
            {"spec": {"@type": "ndjson", "path": "a.ndjson"}},
            {"spec": {"@type": "in_memory", "elements": [1, 2]},
             "estimated_size_bytes": 16}
        ]
    }
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence, Tuple

from ..coders import Coder, coder_from_spec
from ..config.properties import CONCAT_SOURCE_SOURCES
from ..config.spec import flatten_base_specs, parse_source_list
from ..counters import CounterSink
from ..models import (
    ConcatPosition,
    DynamicSplitResult,
    SourceDescriptor,
    SourceMetadata,
)
from .base import Reader, ReaderIterator

if TYPE_CHECKING:
    from ..registry import ReaderRegistry

logger = logging.getLogger(__name__)


def _all_true(flags: Sequence[Optional[bool]]) -> Optional[bool]:
    if all(f is True for f in flags):
        return True
    if any(f is False for f in flags):
        return False
    return None


def _any_true(flags: Sequence[Optional[bool]]) -> Optional[bool]:
    if any(f is True for f in flags):
        return True
    if all(f is False for f in flags):
        return False
    return None


def compose_metadata(sources: Sequence[SourceDescriptor]) -> Optional[SourceMetadata]:
    """Combine sub-source metadata into metadata for their concatenation.

    - estimated size: the sum, but only if every sub-source has an estimate
    - infinite: True if any sub-source is infinite
    - sorted keys: True only if every sub-source produces sorted keys. This
      does not make the concatenation globally sorted; key ranges may still
      overlap across sub-sources.

    Unknown inputs give unknown (None) outputs rather than guesses.
    """
    metas = [s.metadata or SourceMetadata() for s in sources]
    sizes = [m.estimated_size_bytes for m in metas]
    composed = SourceMetadata(
        produces_sorted_keys=_all_true([m.produces_sorted_keys for m in metas]),
        is_infinite=_any_true([m.is_infinite for m in metas]),
        estimated_size_bytes=(
            sum(sizes)  # type: ignore[arg-type]
            if all(s is not None for s in sizes)
            else None
        ),
    )
    return None if composed.is_empty() else composed


def compose_does_not_need_splitting(
    sources: Sequence[SourceDescriptor],
) -> Optional[bool]:
    """True only if no sub-source needs splitting."""
    return _all_true([s.does_not_need_splitting for s in sources])


def _coerce_position(position: Any) -> Optional[ConcatPosition]:
    if position is None or isinstance(position, ConcatPosition):
        return position
    if isinstance(position, Mapping):
        return ConcatPosition.model_validate(position)
    raise ValueError(f"Not a concat position: {position!r}")


class ReaderState(str, Enum):
    NOT_STARTED = "not_started"
    READING = "reading"
    EXHAUSTED = "exhausted"


class ConcatReader(Reader):
    """Reads each sub-source in order as one logical stream."""

    def __init__(
        self,
        registry: "ReaderRegistry",
        sources: Sequence[SourceDescriptor],
        coder: Optional[Coder] = None,
        options: Optional[Mapping[str, Any]] = None,
        execution_context: Any = None,
        counter_sink: Optional[CounterSink] = None,
        operation_name: Optional[str] = None,
    ):
        self.registry = registry
        self._sources: Tuple[SourceDescriptor, ...] = tuple(sources)
        self.coder = coder
        self.options = options
        self.execution_context = execution_context
        self.counter_sink = counter_sink
        self.operation_name = operation_name

    @property
    def sources(self) -> Tuple[SourceDescriptor, ...]:
        return self._sources

    @property
    def metadata(self) -> Optional[SourceMetadata]:
        return compose_metadata(self._sources)

    @property
    def does_not_need_splitting(self) -> Optional[bool]:
        return compose_does_not_need_splitting(self._sources)

    def iterator(self, start_position: Any = None) -> "ConcatIterator":
        return ConcatIterator(self, _coerce_position(start_position))

    def create_sub_reader(self, index: int) -> Reader:
        """Build the reader for sub-source ``index`` through the registry.

        A sub-source with its own codec gets a coder built from it; otherwise
        the coder this reader was created with is passed on.
        """
        descriptor = self._sources[index]
        coder = self.coder
        if descriptor.codec is not None:
            coder = coder_from_spec(descriptor.codec)
        return self.registry.create(
            flatten_base_specs(descriptor),
            coder=coder,
            options=self.options,
            execution_context=self.execution_context,
            counter_sink=self.counter_sink,
            operation_name=self.operation_name,
        )

    def __repr__(self) -> str:
        tags = [s.type_tag for s in self._sources]
        return f"ConcatReader(sources={tags})"


class ConcatIterator(ReaderIterator):
    """State machine over the sub-sources of a ConcatReader.

    ``index`` is the sub-source being read (READING), or the one that will be
    opened first (NOT_STARTED). Once EXHAUSTED it is the end index, or the
    sub-source that was open when the iterator failed or was closed. At most
    one sub-iterator is open at any time.
    """

    def __init__(self, reader: ConcatReader, start: Optional[ConcatPosition] = None):
        self._reader = reader
        self._end = len(reader.sources)
        self._state = ReaderState.NOT_STARTED
        self._index = 0
        self._start_inner: Any = None
        self._current: Optional[ReaderIterator] = None
        # Progress frozen by close() or a failed open.
        self._resume_at: Optional[ConcatPosition] = None
        if start is not None:
            if start.index > self._end:
                raise ValueError(
                    f"Start index {start.index} out of range "
                    f"for {self._end} sub-sources"
                )
            self._index = start.index
            self._start_inner = start.inner

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def index(self) -> int:
        return self._index

    @property
    def end_index(self) -> int:
        """Index of the first sub-source this iterator will not read."""
        return self._end

    def __next__(self) -> Any:
        while True:
            if self._state is ReaderState.EXHAUSTED:
                raise StopIteration
            if self._state is ReaderState.NOT_STARTED:
                self._open(self._index, self._start_inner)
                continue
            assert self._current is not None
            try:
                return next(self._current)
            except StopIteration:
                pass
            except Exception:
                self.close()
                raise
            self._open(self._index + 1, None)

    def _open(self, index: int, inner: Any) -> None:
        try:
            self._close_current()
            if index >= self._end:
                self._index = self._end
                self._state = ReaderState.EXHAUSTED
                logger.debug("Concat reader exhausted after %d sub-sources", self._end)
                return
            self._index = index
            reader = self._reader.create_sub_reader(index)
            self._current = reader.iterator(inner)
        except Exception:
            self._resume_at = ConcatPosition(index=index, inner=inner)
            self._state = ReaderState.EXHAUSTED
            logger.debug("Failed to open sub-source %d", index, exc_info=True)
            raise
        self._state = ReaderState.READING
        logger.debug(
            "Opened sub-source %d/%d (%s)",
            index + 1,
            self._end,
            self._reader.sources[index].type_tag,
        )

    def _close_current(self) -> None:
        current, self._current = self._current, None
        if current is not None:
            current.close()
            logger.debug("Closed sub-source %d", self._index)

    def close(self) -> None:
        """Close the open sub-reader, if any, and stop iterating.

        Progress is frozen at the point of closing so a checkpoint taken
        after an error or an abort resumes exactly there.
        """
        if self._state is not ReaderState.EXHAUSTED:
            self._resume_at = self.get_progress()
            self._state = ReaderState.EXHAUSTED
        self._close_current()

    def get_progress(self) -> ConcatPosition:
        """Position of the next record.

        Resuming there skips nothing and repeats nothing.
        """
        if self._state is ReaderState.NOT_STARTED:
            return ConcatPosition(index=self._index, inner=self._start_inner)
        if self._state is ReaderState.READING:
            assert self._current is not None
            return ConcatPosition(index=self._index, inner=self._current.get_progress())
        if self._resume_at is not None:
            return self._resume_at
        return ConcatPosition(index=self._end)

    def request_dynamic_split(self, position: Any) -> Optional[DynamicSplitResult]:
        """Try to end this iterator at ``position``; the rest becomes the residual.

        Splits are accepted at the start of any sub-source that has not been
        opened yet. A position inside the active sub-source is handed to its
        iterator. Everything else is rejected (None).
        """
        split = _coerce_position(position)
        if split is None:
            logger.debug("Rejecting split: no position given")
            return None

        if self._state is ReaderState.EXHAUSTED:
            logger.debug("Rejecting split at %s: iterator is exhausted", split)
            return None
        if split.index >= self._end:
            logger.debug(
                "Rejecting split at %s: at or past end index %d", split, self._end
            )
            return None
        if split.index < self._index:
            logger.debug("Rejecting split at %s: sub-source already read", split)
            return None

        if split.index == self._index:
            if self._state is not ReaderState.READING or split.inner is None:
                logger.debug(
                    "Rejecting split at %s: would leave nothing to read", split
                )
                return None
            assert self._current is not None
            inner = self._current.request_dynamic_split(split.inner)
            if inner is None:
                logger.debug("Rejecting split at %s: sub-reader refused", split)
                return None
            self._end = self._index + 1
            accepted = ConcatPosition(index=self._index, inner=inner.position)
            logger.debug(
                "Accepted split inside sub-source %d at %s", self._index, accepted
            )
            return DynamicSplitResult(position=accepted)

        if split.inner is not None:
            logger.debug(
                "Rejecting split at %s: unopened sub-sources split whole", split
            )
            return None
        self._end = split.index
        logger.debug("Accepted split before sub-source %d", split.index)
        return DynamicSplitResult(position=ConcatPosition(index=split.index))


class ConcatReaderFactory:
    """Creates a ConcatReader from a concat source spec."""

    def __init__(self, registry: "ReaderRegistry"):
        self.registry = registry

    @classmethod
    def with_registry(cls, registry: "ReaderRegistry") -> "ConcatReaderFactory":
        """Factory that builds sub-readers through ``registry``."""
        return cls(registry)

    @classmethod
    def with_default_registry(cls) -> "ConcatReaderFactory":
        """Factory that builds sub-readers through the process-wide registry."""
        from ..registry import default_registry

        return cls(default_registry())

    def create(
        self,
        spec: Mapping[str, Any],
        coder: Optional[Coder] = None,
        options: Optional[Mapping[str, Any]] = None,
        execution_context: Any = None,
        counter_sink: Optional[CounterSink] = None,
        operation_name: Optional[str] = None,
    ) -> ConcatReader:
        """Parse the sub-source list and return an unopened ConcatReader.

        Raises:
            MalformedSpecError: If a sub-source has no spec
            TypeMismatchError: If a sub-source field has the wrong shape
        """
        sources = parse_source_list(spec, CONCAT_SOURCE_SOURCES)
        logger.debug("Building concat reader over %d sub-sources", len(sources))
        return ConcatReader(
            self.registry,
            sources,
            coder=coder,
            options=options,
            execution_context=execution_context,
            counter_sink=counter_sink,
            operation_name=operation_name,
        )

    def __repr__(self) -> str:
        return f"ConcatReaderFactory(registry={self.registry.name!r})"


__all__ = [
    "ConcatIterator",
    "ConcatReader",
    "ConcatReaderFactory",
    "ReaderState",
    "compose_does_not_need_splitting",
    "compose_metadata",
]
