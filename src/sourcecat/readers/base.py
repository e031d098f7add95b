"""Reader and factory capabilities every source type implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterator, Mapping, Optional, Protocol

from ..coders import Coder
from ..counters import CounterSink
from ..models import DynamicSplitResult, SourceMetadata


class ReaderIterator(ABC):
    """Stateful cursor over one reader's records.

    Iterators are single-use, driven by one thread, and must be closed.
    They are context managers so ``with reader.iterator() as it`` takes care
    of that.
    """

    def __iter__(self) -> Iterator[Any]:
        return self

    @abstractmethod
    def __next__(self) -> Any: ...

    def get_progress(self) -> Any:
        """Resume token for the next record, or None if not supported."""
        return None

    def request_dynamic_split(self, position: Any) -> Optional[DynamicSplitResult]:
        """Try to stop this iterator before ``position``.

        Returns the accepted split, or None if the split is rejected. Readers
        that cannot split keep this default.
        """
        return None

    def close(self) -> None:
        """Release any resources. Safe to call more than once."""

    def __enter__(self) -> "ReaderIterator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class Reader(ABC):
    """Produces an ordered sequence of decoded records from one source."""

    @abstractmethod
    def iterator(self, start_position: Any = None) -> ReaderIterator:
        """Open a new iterator, optionally resuming at ``start_position``."""

    @property
    def metadata(self) -> Optional[SourceMetadata]:
        return None


class ReaderFactory(Protocol):
    """Builds a reader from a source spec.

    ``coder`` decides the element type the reader decodes to and may be None
    for self-describing sources. ``options`` and ``execution_context`` are
    forwarded uninterpreted; ``counter_sink`` is shared and increment-only.
    """

    def create(
        self,
        spec: Mapping[str, Any],
        coder: Optional[Coder] = None,
        options: Optional[Mapping[str, Any]] = None,
        execution_context: Any = None,
        counter_sink: Optional[CounterSink] = None,
        operation_name: Optional[str] = None,
    ) -> Reader: ...


__all__ = ["Reader", "ReaderFactory", "ReaderIterator"]
