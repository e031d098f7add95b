"""Reader over a local newline-delimited JSON file."""

from __future__ import annotations

from pathlib import Path
from typing import Any, BinaryIO, Mapping, Optional

from ..coders import Coder, JsonCoder
from ..counters import CounterSink, counter_name
from ..errors import MalformedSpecError, SubReaderIOError, TypeMismatchError
from .base import Reader, ReaderIterator

PATH = "path"


class NdjsonReader(Reader):
    """Reads one record per non-blank line.

    Positions are byte offsets of the next line to read. Lines are decoded
    with the given coder, JSON by default.
    """

    def __init__(
        self,
        path: Path,
        coder: Optional[Coder] = None,
        counter_sink: Optional[CounterSink] = None,
        operation_name: Optional[str] = None,
    ):
        self.path = path
        self.coder = coder or JsonCoder()
        self.counter_sink = counter_sink
        self.operation_name = operation_name

    def iterator(self, start_position: Any = None) -> "NdjsonIterator":
        offset = 0 if start_position is None else start_position
        if not isinstance(offset, int) or isinstance(offset, bool) or offset < 0:
            raise ValueError(f"Not an NDJSON byte offset: {offset!r}")
        return NdjsonIterator(self, offset)

    def _count(self, name: str, delta: int = 1) -> None:
        if self.counter_sink is not None:
            self.counter_sink.add(counter_name(self.operation_name, name), delta)


class NdjsonIterator(ReaderIterator):
    def __init__(self, reader: NdjsonReader, offset: int):
        self._reader = reader
        self._offset = offset
        try:
            self._file: Optional[BinaryIO] = open(reader.path, "rb")
        except OSError as e:
            raise SubReaderIOError(f"Cannot open {reader.path}: {e}") from e
        try:
            self._file.seek(offset)
        except OSError as e:
            self.close()
            raise SubReaderIOError(
                f"Cannot seek {reader.path} to byte {offset}: {e}"
            ) from e

    def __next__(self) -> Any:
        while True:
            if self._file is None:
                raise StopIteration
            try:
                line = self._file.readline()
            except OSError as e:
                raise SubReaderIOError(f"Error reading {self._reader.path}: {e}") from e
            if not line:
                raise StopIteration

            self._reader._count("ByteCount", len(line))
            if not line.strip():
                self._offset += len(line)
                continue
            try:
                record = self._reader.coder.decode(line.rstrip(b"\r\n"))
            except ValueError as e:
                raise SubReaderIOError(
                    f"{self._reader.path}: bad record at byte {self._offset}: {e}"
                ) from e
            self._offset += len(line)
            self._reader._count("ElementCount")
            return record

    def get_progress(self) -> int:
        return self._offset

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


class NdjsonReaderFactory:
    """Creates NdjsonReader from ``{"@type": "ndjson", "path": "..."}``."""

    def create(
        self,
        spec: Mapping[str, Any],
        coder: Optional[Coder] = None,
        options: Optional[Mapping[str, Any]] = None,
        execution_context: Any = None,
        counter_sink: Optional[CounterSink] = None,
        operation_name: Optional[str] = None,
    ) -> NdjsonReader:
        if spec.get(PATH) is None:
            raise MalformedSpecError(f"ndjson spec is missing '{PATH}'")
        path = spec[PATH]
        if not isinstance(path, str) or not path:
            raise TypeMismatchError(f"field '{PATH}' must be a non-empty string")
        return NdjsonReader(
            Path(path).expanduser(),
            coder=coder,
            counter_sink=counter_sink,
            operation_name=operation_name,
        )


__all__ = ["NdjsonIterator", "NdjsonReader", "NdjsonReaderFactory"]
