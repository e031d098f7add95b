"""Reader over records embedded directly in the spec."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from ..coders import Coder
from ..counters import CounterSink, counter_name
from ..errors import MalformedSpecError, TypeMismatchError
from ..models import DynamicSplitResult
from .base import Reader, ReaderIterator

ELEMENTS = "elements"
START_INDEX = "start_index"
END_INDEX = "end_index"


def _optional_index(spec: Mapping[str, Any], key: str) -> Optional[int]:
    value = spec.get(key)
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise TypeMismatchError(f"field '{key}' must be a non-negative integer")
    return value


class InMemoryReader(Reader):
    """Yields ``elements[start_index:end_index]``.

    With a coder, each element is an encoded string/bytes value and is
    decoded on the way out; without one, elements are returned as-is.
    """

    def __init__(
        self,
        elements: List[Any],
        start_index: Optional[int] = None,
        end_index: Optional[int] = None,
        coder: Optional[Coder] = None,
        counter_sink: Optional[CounterSink] = None,
        operation_name: Optional[str] = None,
    ):
        self.elements = list(elements)
        size = len(self.elements)
        self.start_index = 0 if start_index is None else min(start_index, size)
        self.end_index = size if end_index is None else min(end_index, size)
        if self.start_index > self.end_index:
            raise ValueError(
                f"start_index {self.start_index} is past end_index {self.end_index}"
            )
        self.coder = coder
        self.counter_sink = counter_sink
        self.operation_name = operation_name

    def iterator(self, start_position: Any = None) -> "InMemoryIterator":
        start = self.start_index if start_position is None else start_position
        if not isinstance(start, int) or isinstance(start, bool):
            raise ValueError(f"Not an in-memory position: {start!r}")
        if not self.start_index <= start <= self.end_index:
            raise ValueError(
                f"Position {start} outside [{self.start_index}, {self.end_index}]"
            )
        return InMemoryIterator(self, start)


class InMemoryIterator(ReaderIterator):
    def __init__(self, reader: InMemoryReader, start: int):
        self._reader = reader
        self._next = start
        self._end = reader.end_index

    def __next__(self) -> Any:
        if self._next >= self._end:
            raise StopIteration
        value = self._reader.elements[self._next]
        if self._reader.coder is not None:
            value = self._reader.coder.decode(value)
        self._next += 1
        if self._reader.counter_sink is not None:
            self._reader.counter_sink.add(
                counter_name(self._reader.operation_name, "ElementCount")
            )
        return value

    def get_progress(self) -> int:
        return self._next

    def request_dynamic_split(self, position: Any) -> Optional[DynamicSplitResult]:
        if not isinstance(position, int) or isinstance(position, bool):
            return None
        if not self._next < position < self._end:
            return None
        self._end = position
        return DynamicSplitResult(position=position)


class InMemoryReaderFactory:
    """Creates InMemoryReader from ``{"@type": "in_memory", "elements": [...]}``."""

    def create(
        self,
        spec: Mapping[str, Any],
        coder: Optional[Coder] = None,
        options: Optional[Mapping[str, Any]] = None,
        execution_context: Any = None,
        counter_sink: Optional[CounterSink] = None,
        operation_name: Optional[str] = None,
    ) -> InMemoryReader:
        if spec.get(ELEMENTS) is None:
            raise MalformedSpecError(f"in_memory spec is missing '{ELEMENTS}'")
        elements = spec[ELEMENTS]
        if not isinstance(elements, list):
            raise TypeMismatchError(f"field '{ELEMENTS}' must be a list")
        return InMemoryReader(
            elements,
            start_index=_optional_index(spec, START_INDEX),
            end_index=_optional_index(spec, END_INDEX),
            coder=coder,
            counter_sink=counter_sink,
            operation_name=operation_name,
        )


__all__ = ["InMemoryIterator", "InMemoryReader", "InMemoryReaderFactory"]
