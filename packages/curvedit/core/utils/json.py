"""JSON utilities with numpy and Path support."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np


def _json_default(obj: Any) -> Any:
    """JSON serializer for types not supported by default.

    Handles:
    - pathlib.Path -> str
    - numpy arrays -> list
    - numpy scalars -> Python scalars
    """
    if isinstance(obj, Path):
        return str(obj)

    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)

    return str(obj)


def dumps(obj: Any) -> str:
    """Serialize object to pretty JSON, converting numpy values."""
    return json.dumps(obj, indent=2, ensure_ascii=False, default=_json_default)


def read_json(path: str | Path) -> dict[str, Any]:
    """Read and parse JSON file.

    Args:
        path: Input file path

    Returns:
        Parsed JSON as dictionary
    """
    data: Any = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Expected JSON object, got {type(data).__name__}")
    return data
