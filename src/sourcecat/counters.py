"""Increment-only counter sink shared by readers."""

from __future__ import annotations

import threading
from typing import Dict, Optional, Protocol


class CounterSink(Protocol):
    """Anything readers can report counts into."""

    def add(self, name: str, delta: int = 1) -> None: ...


class CounterSet:
    """Thread-safe named counters that only ever go up.

    Several readers (one per work item) may report into the same set from
    different threads; each add() is a single locked increment.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._values: Dict[str, int] = {}

    def add(self, name: str, delta: int = 1) -> None:
        """Increment counter ``name`` by ``delta``.

        Args:
            name: Counter name
            delta: Non-negative amount to add

        Raises:
            ValueError: If delta is negative
        """
        if delta < 0:
            raise ValueError(f"Counter {name!r} is increment-only, got delta={delta}")
        with self._lock:
            self._values[name] = self._values.get(name, 0) + delta

    def get(self, name: str) -> int:
        with self._lock:
            return self._values.get(name, 0)

    def snapshot(self) -> Dict[str, int]:
        """Return a copy of all counters."""
        with self._lock:
            return dict(self._values)

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)


def counter_name(operation_name: Optional[str], name: str) -> str:
    """Prefix a counter name with the operation that owns it."""
    if operation_name:
        return f"{operation_name}-{name}"
    return name


__all__ = ["CounterSet", "CounterSink", "counter_name"]
