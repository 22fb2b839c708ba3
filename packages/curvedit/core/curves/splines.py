"""Interpolation over ordered control points.

Two families of entry points share one set of formulas:

- single-sample queries (``linear_at``, ``catmull_rom_segment``,
  ``catmull_rom_at``, ``catmull_rom_scan``) used for scanning,
- dense tessellation (``tessellate_linear``, ``tessellate_catmull_rom``) used
  to build render paths, vectorized with numpy.

Catmull-Rom uses the standard Hermite form with tangents
``v0 = (p2 - p0) / 2`` and ``v1 = (p3 - p1) / 2``. Neighbour indices are
clamped into the value array, so the first and last values act as their own
virtual neighbours.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from curvedit.core.curves.models import ControlPoint, CurveType
from curvedit.core.utils.math import clamp, lerp

logger = logging.getLogger(__name__)

ClampRange = tuple[float, float]


def _bracket(t: float, points: Sequence[ControlPoint]) -> tuple[int | None, int | None]:
    """Indices of the points bracketing t.

    Returns (i0, i1) where i0 is the rightmost point with ``time <= t``
    (searched from the end) and i1 is the leftmost point with ``time > t``.
    Either may be None.
    """
    i0 = next((i for i in range(len(points) - 1, -1, -1) if points[i].time <= t), None)
    i1 = next((i for i, p in enumerate(points) if p.time > t), None)
    return i0, i1


def _apply_clamp(value: float, clamp_range: ClampRange | None) -> float:
    if clamp_range is None:
        return value
    return clamp(value, clamp_range[0], clamp_range[1])


def _check_divisions(divisions: int) -> None:
    if divisions < 1:
        raise ValueError(f"divisions must be >= 1, got {divisions}")


def _as_value_array(values: Sequence[float] | np.ndarray) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"values must be one-dimensional, got shape {arr.shape}")
    return arr


def linear_at(t: float, points: Sequence[ControlPoint]) -> float:
    """Linearly interpolate the curve value at time t.

    Args:
        t: Normalized time.
        points: Control points in time order.

    Returns:
        Interpolated value. Beyond the last point the last reached value is
        held; before the first point the first value is returned; a zero-width
        interval returns the left point's value.

    Raises:
        ValueError: If points is empty.

    Example:
        >>> pts = [ControlPoint(0.0, 0.0), ControlPoint(0.5, 30.0), ControlPoint(0.8, 50.0)]
        >>> round(linear_at(0.65, pts), 6)
        40.0
    """
    if not points:
        raise ValueError("points cannot be empty")

    i0, i1 = _bracket(t, points)
    if i0 is None:
        return points[0].value

    p0 = points[i0]
    if i1 is None:
        return p0.value

    p1 = points[i1]
    dt = p1.time - p0.time
    if dt == 0:
        logger.debug(f"Zero-width interval at t={t}, holding {p0.value}")
        return p0.value

    return lerp(p0.value, p1.value, (t - p0.time) / dt)


def catmull_rom_segment(
    index: int,
    local_t: float,
    values: Sequence[float] | np.ndarray,
) -> float | np.ndarray:
    """Evaluate the Catmull-Rom segment starting at ``index``.

    Args:
        index: Segment start; the segment runs from values[index] to
            values[index + 1].
        local_t: Position inside the segment in [0, 1].
        values: Scalars, or an (N, D) array of vectors.

    Returns:
        A float for scalar values, an array of length D for vectors.
        ``local_t`` of 0 and 1 return the segment endpoints exactly.

    Raises:
        ValueError: If values is empty.
    """
    arr = np.asarray(values, dtype=float)
    n = len(arr)
    if n == 0:
        raise ValueError("values cannot be empty")

    last = n - 1
    p0 = arr[clamp(index - 1, 0, last)]
    p1 = arr[clamp(index, 0, last)]
    p2 = arr[clamp(index + 1, 0, last)]
    p3 = arr[clamp(index + 2, 0, last)]

    if local_t == 0:
        result = p1
    elif local_t == 1:
        result = p2
    else:
        v0 = (p2 - p0) * 0.5
        v1 = (p3 - p1) * 0.5
        t2 = local_t * local_t
        t3 = t2 * local_t
        result = (
            (2.0 * p1 - 2.0 * p2 + v0 + v1) * t3
            + (-3.0 * p1 + 3.0 * p2 - 2.0 * v0 - v1) * t2
            + v0 * local_t
            + p1
        )

    if np.ndim(result) == 0:
        return float(result)
    return np.array(result)


def catmull_rom_at(t: float, values: Sequence[float] | np.ndarray) -> float | np.ndarray:
    """Evaluate a Catmull-Rom curve over evenly spaced values.

    The [0, 1] domain is split into ``N - 1`` equal sections, one per segment.
    Use ``catmull_rom_scan`` when control points are irregularly spaced.

    Args:
        t: Normalized time in [0, 1]; values outside are clamped.
        values: Scalars, or an (N, D) array of vectors.

    Returns:
        Interpolated value; t=0 and t=1 return the first and last values
        exactly.

    Raises:
        ValueError: If values is empty.
    """
    arr = np.asarray(values, dtype=float)
    n = len(arr)
    if n == 0:
        raise ValueError("values cannot be empty")

    sections = n - 1
    if sections == 0 or t <= 0.0:
        return catmull_rom_segment(0, 0.0, arr)
    if t >= 1.0:
        return catmull_rom_segment(sections - 1, 1.0, arr)

    scaled = t * sections
    index = min(int(scaled), sections - 1)
    return catmull_rom_segment(index, scaled - index, arr)


def catmull_rom_scan(t: float, points: Sequence[ControlPoint]) -> float:
    """Evaluate a Catmull-Rom curve through irregularly spaced points.

    The bracketing pair is found the same way as ``linear_at``; the position
    inside that pair becomes the local parameter of its segment. This is the
    same parameterization the tessellated render path uses.

    Raises:
        ValueError: If points is empty.
    """
    if not points:
        raise ValueError("points cannot be empty")

    i0, i1 = _bracket(t, points)
    if i0 is None:
        return points[0].value

    p0 = points[i0]
    if i1 is None:
        return p0.value

    dt = points[i1].time - p0.time
    if dt == 0:
        logger.debug(f"Zero-width interval at t={t}, holding {p0.value}")
        return p0.value

    values = [p.value for p in points]
    return float(catmull_rom_segment(i0, (t - p0.time) / dt, values))


def tessellate_catmull_rom(
    divisions: int,
    values: Sequence[float] | np.ndarray,
    clamp_range: ClampRange | None = None,
) -> np.ndarray:
    """Sample every Catmull-Rom segment ``divisions`` times.

    Segment i is sampled at local t = 1/divisions, 2/divisions, ..., 1; its
    final sample is exactly ``values[i + 1]``, which is also where segment
    i + 1 starts. The very first value is not emitted; renderers start their
    path at the first control point.

    Args:
        divisions: Samples per segment (>= 1).
        values: Scalar control values in order.
        clamp_range: Optional (min, max) applied to the output.

    Returns:
        Array of length ``(N - 1) * divisions``; empty for fewer than 2 values.

    Raises:
        ValueError: If divisions < 1 or values is not one-dimensional.
    """
    _check_divisions(divisions)
    arr = _as_value_array(values)
    n = len(arr)
    if n < 2:
        return np.empty(0, dtype=float)

    idx = np.arange(n - 1)
    p0 = arr[np.clip(idx - 1, 0, n - 1)]
    p1 = arr[idx]
    p2 = arr[idx + 1]
    p3 = arr[np.clip(idx + 2, 0, n - 1)]

    v0 = (p2 - p0) * 0.5
    v1 = (p3 - p1) * 0.5
    a = 2.0 * p1 - 2.0 * p2 + v0 + v1
    b = -3.0 * p1 + 3.0 * p2 - 2.0 * v0 - v1

    t = np.arange(1, divisions + 1, dtype=float) / divisions
    t2 = t * t
    t3 = t2 * t

    samples = a[:, None] * t3 + b[:, None] * t2 + v0[:, None] * t + p1[:, None]
    samples[:, -1] = p2

    out = samples.reshape(-1)
    if clamp_range is not None:
        out = np.clip(out, clamp_range[0], clamp_range[1])
    return out


def tessellate_linear(
    divisions: int,
    values: Sequence[float] | np.ndarray,
    clamp_range: ClampRange | None = None,
) -> np.ndarray:
    """Sample every straight segment ``divisions`` times.

    Same layout and endpoint guarantee as ``tessellate_catmull_rom``.
    """
    _check_divisions(divisions)
    arr = _as_value_array(values)
    n = len(arr)
    if n < 2:
        return np.empty(0, dtype=float)

    p1 = arr[:-1]
    p2 = arr[1:]
    t = np.arange(1, divisions + 1, dtype=float) / divisions

    samples = p1[:, None] + (p2 - p1)[:, None] * t
    samples[:, -1] = p2

    out = samples.reshape(-1)
    if clamp_range is not None:
        out = np.clip(out, clamp_range[0], clamp_range[1])
    return out


def tessellate_times(divisions: int, times: Sequence[float] | np.ndarray) -> np.ndarray:
    """Normalized times matching the samples of a tessellation.

    Segment i spans [times[i], times[i + 1]] and is split evenly.
    """
    _check_divisions(divisions)
    arr = _as_value_array(times)
    if len(arr) < 2:
        return np.empty(0, dtype=float)

    t0 = arr[:-1]
    dt = arr[1:] - t0
    t = np.arange(1, divisions + 1, dtype=float) / divisions

    samples = t0[:, None] + dt[:, None] * t
    samples[:, -1] = arr[1:]
    return samples.reshape(-1)


def tessellate(
    curve_type: CurveType,
    divisions: int,
    values: Sequence[float] | np.ndarray,
    clamp_range: ClampRange | None = None,
) -> np.ndarray:
    """Tessellate values with the given interpolation mode.

    Raises:
        NotImplementedError: For B-spline curves.
    """
    if curve_type == CurveType.LINEAR:
        return tessellate_linear(divisions, values, clamp_range)
    if curve_type == CurveType.CATMULL_ROM:
        return tessellate_catmull_rom(divisions, values, clamp_range)
    raise NotImplementedError(f"Curve type not implemented: {curve_type.value}")


def evaluate(
    curve_type: CurveType,
    t: float,
    points: Sequence[ControlPoint],
    clamp_range: ClampRange | None = None,
) -> float:
    """Evaluate a curve at time t with the given interpolation mode.

    Raises:
        ValueError: If points is empty.
        NotImplementedError: For B-spline curves.
    """
    if curve_type == CurveType.LINEAR:
        value = linear_at(t, points)
    elif curve_type == CurveType.CATMULL_ROM:
        value = catmull_rom_scan(t, points)
    else:
        raise NotImplementedError(f"Curve type not implemented: {curve_type.value}")

    return _apply_clamp(value, clamp_range)
