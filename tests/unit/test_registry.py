"""Tests for the reader registry."""

import pytest

from sourcecat.errors import (
    DuplicateRegistrationError,
    InvalidRegistrationError,
    MalformedSpecError,
    RegistryFrozenError,
    SubReaderConstructionError,
    TypeMismatchError,
    UnknownSourceTypeError,
)
from sourcecat.readers import ConcatReader, InMemoryReader, InMemoryReaderFactory
from sourcecat.registry import (
    ReaderRegistry,
    default_registry,
    reset_default_registry,
    spec_type,
)


def test_register_and_lookup():
    registry = ReaderRegistry()
    factory = InMemoryReaderFactory()

    registry.register("in_memory", factory)

    assert registry.lookup("in_memory") is factory
    assert "in_memory" in registry
    assert len(registry) == 1


def test_registration_order_is_irrelevant():
    a, b = InMemoryReaderFactory(), InMemoryReaderFactory()
    first = ReaderRegistry()
    first.register("a", a)
    first.register("b", b)
    second = ReaderRegistry()
    second.register("b", b)
    second.register("a", a)

    assert first.tags() == second.tags() == ("a", "b")
    assert first.lookup("a") is second.lookup("a")


def test_registering_same_factory_twice_is_a_no_op():
    registry = ReaderRegistry()
    factory = InMemoryReaderFactory()

    registry.register("in_memory", factory)
    registry.register("in_memory", factory)

    assert registry.lookup("in_memory") is factory


def test_registering_different_factory_under_same_tag_fails():
    registry = ReaderRegistry()
    original = InMemoryReaderFactory()
    registry.register("in_memory", original)

    with pytest.raises(DuplicateRegistrationError):
        registry.register("in_memory", InMemoryReaderFactory())

    assert registry.lookup("in_memory") is original


@pytest.mark.parametrize("tag", ["", "   ", None, 42])
def test_invalid_tags_are_rejected(tag):
    with pytest.raises(InvalidRegistrationError):
        ReaderRegistry().register(tag, InMemoryReaderFactory())


def test_factory_without_create_is_rejected():
    with pytest.raises(InvalidRegistrationError, match="create"):
        ReaderRegistry().register("thing", object())


def test_frozen_registry_rejects_registration():
    registry = ReaderRegistry()
    registry.register("in_memory", InMemoryReaderFactory())
    registry.freeze()

    assert registry.frozen
    with pytest.raises(RegistryFrozenError):
        registry.register("other", InMemoryReaderFactory())
    assert registry.tags() == ("in_memory",)


def test_freeze_is_idempotent():
    registry = ReaderRegistry()

    assert registry.freeze() is registry
    assert registry.freeze() is registry
    assert registry.frozen


def test_unknown_tag_fails_without_side_effects(registry):
    before = registry.tags()

    with pytest.raises(UnknownSourceTypeError) as excinfo:
        registry.lookup("parquet")
    with pytest.raises(UnknownSourceTypeError):
        registry.lookup("parquet")

    assert excinfo.value.tag == "parquet"
    assert "parquet" not in registry
    assert registry.tags() == before
    assert isinstance(registry.lookup("in_memory"), InMemoryReaderFactory)


def test_unknown_source_type_is_a_lookup_error(registry):
    with pytest.raises(LookupError):
        registry.create({"@type": "parquet"})


def test_create_dispatches_on_type_tag(registry):
    reader = registry.create({"@type": "in_memory", "elements": [1, 2]})

    assert isinstance(reader, InMemoryReader)
    with reader.iterator() as it:
        assert list(it) == [1, 2]


def test_create_concat_through_registry(registry):
    reader = registry.create({"@type": "concat", "sources": []})

    assert isinstance(reader, ConcatReader)
    assert reader.registry is registry


def test_create_forwards_context(registry, recording_factory, counters):
    options = {"project": "demo"}
    context = object()

    registry.create(
        {"@type": "recording", "elements": []},
        options=options,
        execution_context=context,
        counter_sink=counters,
        operation_name="read-step",
    )

    call = recording_factory.calls[0]
    assert call["options"] is options
    assert call["execution_context"] is context
    assert call["counter_sink"] is counters
    assert call["operation_name"] == "read-step"


def test_factory_failure_is_wrapped(registry):
    with pytest.raises(SubReaderConstructionError, match="cannot connect") as excinfo:
        registry.create({"@type": "broken"})

    assert excinfo.value.tag == "broken"
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_factory_spec_errors_pass_through(registry):
    with pytest.raises(MalformedSpecError, match="elements"):
        registry.create({"@type": "in_memory"})


def test_spec_without_type_is_malformed(registry):
    with pytest.raises(MalformedSpecError):
        registry.create({"elements": [1]})


@pytest.mark.parametrize("spec", [{"@type": 7}, "in_memory", None])
def test_spec_type_shape_errors(spec):
    with pytest.raises(TypeMismatchError):
        spec_type(spec)


def test_default_registry_is_built_once_and_frozen():
    reset_default_registry()
    try:
        registry = default_registry()

        assert registry is default_registry()
        assert registry.frozen
        assert set(registry.tags()) == {"concat", "in_memory", "ndjson"}
    finally:
        reset_default_registry()
