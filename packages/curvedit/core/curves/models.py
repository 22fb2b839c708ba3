"""Curve engine data models.

This module defines the primitives shared by every layer of the editor:
- ControlPoint: one (time, value) sample with an optional range value
- CurveType: interpolation mode of a curve
- Vec2 / AreaSize: pixel-space positions and sizes
- ScanResult: read-only answer of a hover query
- CurveChange: description of a model mutation for observers

Control points are mutable entities compared by identity; every other model
here is an immutable value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class CurveType(str, Enum):
    """Interpolation mode of a curve."""

    LINEAR = "linear"
    CATMULL_ROM = "catmull_rom"
    B_SPLINE = "b_spline"  # Reserved, not implemented


class DragTarget(str, Enum):
    """Which handle of a control point is being dragged."""

    VALUE = "value"
    RANGE = "range"


class ChangeKind(str, Enum):
    """Kind of mutation reported by a CurveChange."""

    ADDED = "added"
    INSERTED = "inserted"
    REMOVED = "removed"
    RESET = "reset"
    UPDATED = "updated"
    SETTINGS = "settings"
    LAYOUT = "layout"


@dataclass(eq=False)
class ControlPoint:
    """A single control point of a curve.

    Attributes:
        time: Normalized time, intended to lie in [0, 1].
        value: Primary value in the curve's [min_value, max_value] range.
        range_value: Secondary value drawn as a band curve. Defaults to
            ``value`` when omitted and is independent afterwards.

    Example:
        >>> p = ControlPoint(time=0.5, value=30.0)
        >>> p.range_value
        30.0
    """

    time: float
    value: float
    range_value: float | None = None

    def __post_init__(self) -> None:
        self.time = float(self.time)
        self.value = float(self.value)
        self.range_value = self.value if self.range_value is None else float(self.range_value)

    def copy(self) -> ControlPoint:
        """Return a new point with the same fields."""
        return ControlPoint(time=self.time, value=self.value, range_value=self.range_value)

    def label(self, *, use_range: bool = False) -> str:
        """Readout text drawn next to the handle."""
        value = self.range_value if use_range else self.value
        return format_readout(value, self.time)


def format_readout(value: float, time: float) -> str:
    """Format a (value, time) pair the way handle and scan labels show it."""
    return f"(v={value:.2f},t={time:.2f})"


@dataclass(frozen=True)
class Vec2:
    """Pixel-space position or offset."""

    x: float
    y: float

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)


@dataclass(frozen=True)
class AreaSize:
    """Pixel size of a drawable area."""

    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class ScanResult:
    """Answer of a scan (hover) query.

    Attributes:
        time: Normalized time under the pointer.
        value: Interpolated primary value.
        position: Pixel position of the value marker.
        range_value: Interpolated range value, when range mode is enabled.
        range_position: Pixel position of the range marker.
        is_empty: True when there is no active curve to scan.
    """

    time: float
    value: float
    position: Vec2
    range_value: float | None = None
    range_position: Vec2 | None = None
    is_empty: bool = False

    @classmethod
    def empty(cls) -> ScanResult:
        """Result for a model with no points (no active curve)."""
        return cls(time=0.0, value=0.0, position=Vec2(0.0, 0.0), is_empty=True)

    def label(self) -> str:
        return format_readout(self.value, self.time)

    def range_label(self) -> str | None:
        if self.range_value is None:
            return None
        return format_readout(self.range_value, self.time)


@dataclass(frozen=True)
class CurveChange:
    """Description of a single model mutation.

    Attributes:
        kind: What happened.
        index: Position of the affected point, when one is involved.
        point: The affected point, when one is involved.
        fields: Names of the fields whose value actually changed.
    """

    kind: ChangeKind
    index: int | None = None
    point: ControlPoint | None = None
    fields: frozenset[str] = field(default_factory=frozenset)

    @property
    def changed(self) -> bool:
        """True if the mutation had any observable effect."""
        if self.kind in (ChangeKind.UPDATED, ChangeKind.SETTINGS, ChangeKind.LAYOUT):
            return bool(self.fields)
        return True
