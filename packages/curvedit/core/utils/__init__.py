"""Shared utilities for curvedit."""

from curvedit.core.utils.json import dumps, read_json
from curvedit.core.utils.math import clamp, half_ceil, lerp

__all__ = [
    "clamp",
    "dumps",
    "half_ceil",
    "lerp",
    "read_json",
]
