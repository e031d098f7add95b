"""Pydantic models for source descriptors and reader positions."""

from .position import ConcatPosition, DynamicSplitResult
from .source import SourceDescriptor, SourceMetadata, freeze_tree, thaw_tree

__all__ = [
    "ConcatPosition",
    "DynamicSplitResult",
    "SourceDescriptor",
    "SourceMetadata",
    "freeze_tree",
    "thaw_tree",
]
