"""Loading reader specs from JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from ..errors import MalformedSpecError


def load_json(path: Path) -> Any:
    """Load and parse a JSON file."""
    return json.loads(path.read_text(encoding="utf-8"))


def load_spec(path: Path | str) -> Dict[str, Any]:
    """Load a reader spec (a JSON object) from ``path``.

    Raises:
        FileNotFoundError: If the file does not exist
        MalformedSpecError: If the file is not valid JSON or not an object
    """
    target = path if isinstance(path, Path) else Path(path)
    try:
        data = load_json(target)
    except json.JSONDecodeError as e:
        raise MalformedSpecError(f"{target}: invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedSpecError(
            f"{target}: spec must be a JSON object, got {type(data).__name__}"
        )
    return data


__all__ = ["load_json", "load_spec"]
