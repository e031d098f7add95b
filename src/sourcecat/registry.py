"""Reader registry: maps source-type tags to reader factories.

The registry has two phases. During initialization factories are registered
under string tags; after ``freeze()`` it is read-only and shared by every
reader in the process without locking.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any, Dict, Optional, Tuple

from .coders import Coder
from .config.spec import spec_type
from .counters import CounterSink
from .errors import (
    DuplicateRegistrationError,
    InvalidRegistrationError,
    RegistryFrozenError,
    SourceCatError,
    SubReaderConstructionError,
    UnknownSourceTypeError,
)
from .readers.base import Reader, ReaderFactory

logger = logging.getLogger(__name__)


class ReaderRegistry:
    """Registry of reader factories keyed by source-type tag."""

    def __init__(self, name: str = "readers"):
        self.name = name
        self._factories: Dict[str, ReaderFactory] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, tag: str, factory: ReaderFactory) -> ReaderFactory:
        """Register ``factory`` under ``tag``.

        Registering the same factory again under the same tag is a no-op.

        Raises:
            RegistryFrozenError: If the registry was already frozen
            InvalidRegistrationError: If tag is empty or factory has no create()
            DuplicateRegistrationError: If a different factory owns the tag
        """
        if self._frozen:
            raise RegistryFrozenError(
                f"[{self.name}] cannot register {tag!r}: registry is frozen"
            )
        if not isinstance(tag, str) or not tag.strip():
            raise InvalidRegistrationError(
                f"[{self.name}] tag must be a non-empty string, got {tag!r}"
            )
        if not callable(getattr(factory, "create", None)):
            raise InvalidRegistrationError(
                f"[{self.name}] factory for {tag!r} has no create() method"
            )

        existing = self._factories.get(tag)
        if existing is not None:
            if existing is factory:
                return factory
            raise DuplicateRegistrationError(
                f"[{self.name}] tag {tag!r} already registered to "
                f"{type(existing).__qualname__}"
            )

        self._factories[tag] = factory
        logger.debug("Registered %s reader factory %r", tag, factory)
        return factory

    def freeze(self) -> "ReaderRegistry":
        """Switch to the read-only phase."""
        if not self._frozen:
            self._frozen = True
            logger.info(
                "Reader registry %r frozen with tags: %s",
                self.name,
                ", ".join(self.tags()),
            )
        return self

    def lookup(self, tag: str) -> ReaderFactory:
        """Return the factory registered for ``tag``.

        Raises:
            UnknownSourceTypeError: If nothing is registered under tag
        """
        factory = self._factories.get(tag)
        if factory is None:
            raise UnknownSourceTypeError(tag, self.tags())
        return factory

    def create(
        self,
        spec: Mapping[str, Any],
        coder: Optional[Coder] = None,
        options: Optional[Mapping[str, Any]] = None,
        execution_context: Any = None,
        counter_sink: Optional[CounterSink] = None,
        operation_name: Optional[str] = None,
    ) -> Reader:
        """Build a reader for ``spec`` with the factory its tag selects.

        Errors raised by sourcecat itself (spec errors, nested lookups) pass
        through; anything else a factory raises is wrapped in
        SubReaderConstructionError.
        """
        tag = spec_type(spec)
        factory = self.lookup(tag)
        try:
            return factory.create(
                spec,
                coder=coder,
                options=options,
                execution_context=execution_context,
                counter_sink=counter_sink,
                operation_name=operation_name,
            )
        except SourceCatError:
            raise
        except Exception as e:
            raise SubReaderConstructionError(tag, str(e) or type(e).__name__) from e

    def tags(self) -> Tuple[str, ...]:
        return tuple(sorted(self._factories))

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and tag in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"ReaderRegistry({self.name!r}, {state}, tags={list(self.tags())})"


_DEFAULT: Optional[ReaderRegistry] = None
_DEFAULT_LOCK = threading.Lock()


def register_builtin_readers(registry: ReaderRegistry) -> ReaderRegistry:
    """Register the reader factories that ship with sourcecat."""
    from .readers.concat import ConcatReaderFactory
    from .readers.in_memory import InMemoryReaderFactory
    from .readers.ndjson import NdjsonReaderFactory

    registry.register("concat", ConcatReaderFactory.with_registry(registry))
    registry.register("in_memory", InMemoryReaderFactory())
    registry.register("ndjson", NdjsonReaderFactory())
    return registry


def default_registry() -> ReaderRegistry:
    """Return the process-wide registry, building and freezing it on first use."""
    global _DEFAULT
    if _DEFAULT is None:
        with _DEFAULT_LOCK:
            if _DEFAULT is None:
                _DEFAULT = register_builtin_readers(ReaderRegistry("default")).freeze()
    return _DEFAULT


def reset_default_registry() -> None:
    """Drop the cached default registry (primarily for tests)."""
    global _DEFAULT
    with _DEFAULT_LOCK:
        _DEFAULT = None


__all__ = [
    "ReaderRegistry",
    "default_registry",
    "register_builtin_readers",
    "reset_default_registry",
    "spec_type",
]
