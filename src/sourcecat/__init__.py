"""sourcecat: read an ordered list of heterogeneous sources as one stream."""

from . import config
from .counters import CounterSet
from .errors import (
    MalformedSpecError,
    SourceCatError,
    SubReaderConstructionError,
    SubReaderIOError,
    TypeMismatchError,
    UnknownSourceTypeError,
)
from .models import ConcatPosition, SourceDescriptor, SourceMetadata
from .readers import ConcatReader, ConcatReaderFactory
from .registry import ReaderRegistry, default_registry

__all__ = [
    "__version__",
    "ConcatPosition",
    "ConcatReader",
    "ConcatReaderFactory",
    "CounterSet",
    "MalformedSpecError",
    "ReaderRegistry",
    "SourceCatError",
    "SourceDescriptor",
    "SourceMetadata",
    "SubReaderConstructionError",
    "SubReaderIOError",
    "TypeMismatchError",
    "UnknownSourceTypeError",
    "config",
    "default_registry",
]

__version__ = "0.1.0"
