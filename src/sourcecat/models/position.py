"""Reader position and split result models."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ConcatPosition(BaseModel):
    """Resume point inside a concatenation of sub-sources.

    ``index`` is the sub-source to resume in; ``inner`` is that sub-reader's
    own resume token, or None to start the sub-source from its beginning.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    inner: Optional[Any] = None


class DynamicSplitResult(BaseModel):
    """An accepted split: the residual starts at ``position``."""

    model_config = ConfigDict(frozen=True)

    position: Any


__all__ = ["ConcatPosition", "DynamicSplitResult"]
