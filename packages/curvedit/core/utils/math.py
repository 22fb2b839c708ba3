"""Math utilities for common operations."""

from __future__ import annotations

import math
from typing import TypeVar

import numpy as np

Number = TypeVar("Number", int, float, np.number)


def clamp(value: Number, min_val: Number, max_val: Number) -> Number:
    """Clamp value to range [min_val, max_val].

    The lower bound wins when the range is inverted, which matches how
    pixel-space drag bounds collapse when a widget is smaller than a handle.

    Args:
        value: Value to clamp
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        Clamped value
    """
    return max(min_val, min(max_val, value))


def lerp(a: Number, b: Number, t: float) -> float:
    """Linear interpolation between a and b.

    Args:
        a: Start value
        b: End value
        t: Interpolation factor [0, 1]

    Returns:
        Interpolated value
    """
    return float(a) + (float(b) - float(a)) * t


def half_ceil(size: float) -> int:
    """Return ceil(size / 2) as an int (handle glyph inset)."""
    return int(math.ceil(size * 0.5))
