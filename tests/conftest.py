"""Pytest configuration and shared fixtures."""

import json

import pytest
from click.testing import CliRunner

from sourcecat.cli import cli
from sourcecat.context import SourceCatContext
from sourcecat.counters import CounterSet
from sourcecat.log import reset_logging
from sourcecat.readers import InMemoryReaderFactory
from sourcecat.readers.base import Reader, ReaderIterator
from sourcecat.registry import ReaderRegistry, register_builtin_readers


class FailingIterator(ReaderIterator):
    """Yields ``elements`` then raises ``error``; records close() calls."""

    def __init__(self, elements, error, log):
        self._elements = list(elements)
        self._error = error
        self._next = 0
        self._log = log

    def __next__(self):
        if self._next < len(self._elements):
            value = self._elements[self._next]
            self._next += 1
            return value
        raise self._error

    def get_progress(self):
        return self._next

    def close(self):
        self._log.append("closed")


class FailingReader(Reader):
    def __init__(self, elements, error, log):
        self._elements = elements
        self._error = error
        self._log = log

    def iterator(self, start_position=None):
        self._log.append("opened")
        return FailingIterator(self._elements, self._error, self._log)


class FailingReaderFactory:
    """Factory for ``{"@type": "failing", "elements": [...]}`` readers.

    The iterator raises an OSError once its elements run out.
    """

    def __init__(self):
        self.log = []

    def create(self, spec, coder=None, options=None, execution_context=None,
               counter_sink=None, operation_name=None):
        return FailingReader(
            spec.get("elements", []), OSError("disk went away"), self.log
        )


class BrokenFactory:
    """Factory whose create() always blows up."""

    def create(self, spec, coder=None, options=None, execution_context=None,
               counter_sink=None, operation_name=None):
        raise RuntimeError("cannot connect")


class RecordingFactory:
    """Wraps the in-memory factory and records every create() call."""

    def __init__(self):
        self.calls = []
        self._inner = InMemoryReaderFactory()

    def create(self, spec, coder=None, options=None, execution_context=None,
               counter_sink=None, operation_name=None):
        self.calls.append(
            {
                "spec": dict(spec),
                "coder": coder,
                "options": options,
                "execution_context": execution_context,
                "counter_sink": counter_sink,
                "operation_name": operation_name,
            }
        )
        return self._inner.create(
            spec,
            coder=coder,
            options=options,
            execution_context=execution_context,
            counter_sink=counter_sink,
            operation_name=operation_name,
        )


@pytest.fixture(autouse=True)
def clean_logging():
    """Detach CLI log handlers so they never outlive a CliRunner stream."""
    yield
    reset_logging()


@pytest.fixture
def failing_factory():
    return FailingReaderFactory()


@pytest.fixture
def recording_factory():
    return RecordingFactory()


@pytest.fixture
def registry(failing_factory, recording_factory):
    """Fresh frozen registry with built-ins plus the test factories."""
    reg = register_builtin_readers(ReaderRegistry("test"))
    reg.register("failing", failing_factory)
    reg.register("broken", BrokenFactory())
    reg.register("recording", recording_factory)
    return reg.freeze()


@pytest.fixture
def counters():
    return CounterSet()


@pytest.fixture
def cli_runner():
    """Provide Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(cli_runner, registry):
    """Invoke the CLI with the test registry injected.

    Usage:
        result = invoke(["cat", "spec.json"])
        result.stdout, result.stderr, result.exit_code
    """

    def _invoke(args, input_data=None):
        return cli_runner.invoke(
            cli, args, input=input_data, obj=SourceCatContext(registry)
        )

    return _invoke


@pytest.fixture
def write_spec(tmp_path):
    """Write a spec dict to a JSON file and return its path as a string."""

    def _write(spec, name="spec.json"):
        path = tmp_path / name
        path.write_text(json.dumps(spec), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def write_ndjson(tmp_path):
    """Write records to an NDJSON file and return its path as a string."""

    def _write(records, name="data.ndjson"):
        path = tmp_path / name
        path.write_text(
            "".join(json.dumps(r) + "\n" for r in records), encoding="utf-8"
        )
        return str(path)

    return _write
