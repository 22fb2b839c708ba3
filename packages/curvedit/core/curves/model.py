"""Curve model: ordered control points, settings and editing sessions.

The model owns the ordered point collection of one curve and is the only
place that mutates it. Insertion order is time order; the model never
re-sorts. During a drag, a point's pixel X is confined between its
neighbours' pixel X, so it can never cross them.

Every mutation returns a CurveChange describing exactly what changed and
forwards it to listeners registered with ``subscribe``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from curvedit.core.curves import splines
from curvedit.core.curves.binding import CollectionAction, CollectionChange
from curvedit.core.curves.errors import PointNotFoundError
from curvedit.core.curves.geometry import CoordinateMapper
from curvedit.core.curves.models import (
    AreaSize,
    ChangeKind,
    ControlPoint,
    CurveChange,
    CurveType,
    DragTarget,
    ScanResult,
    Vec2,
)
from curvedit.core.utils.math import clamp

if TYPE_CHECKING:
    from curvedit.core.config.models import CurveSettings

logger = logging.getLogger(__name__)

ChangeListener = Callable[[CurveChange], None]


@dataclass(frozen=True)
class DragSession:
    """State of an active drag."""

    point: ControlPoint
    grab_offset: Vec2
    target: DragTarget


class CurveModel:
    """Ordered control points of one curve plus its editing state.

    Args:
        points: Initial points, in time order.
        min_value: Bottom of the value range.
        max_value: Top of the value range.
        curve_type: Interpolation mode.
        is_clamped: Clamp interpolated output to [min_value, max_value].
        is_range_enabled: Expose and evaluate the range value of each point.
        area_size: Current widget size in pixels.
        mapper: Coordinate mapper (default handle size when omitted).

    Example:
        >>> model = CurveModel(
        ...     [ControlPoint(0.0, 0.0), ControlPoint(1.0, 60.0)],
        ...     max_value=100.0,
        ...     area_size=AreaSize(110, 110),
        ... )
        >>> model.value_at(0.5)
        30.0
    """

    def __init__(
        self,
        points: Iterable[ControlPoint] = (),
        *,
        min_value: float = 0.0,
        max_value: float = 1.0,
        curve_type: CurveType = CurveType.LINEAR,
        is_clamped: bool = False,
        is_range_enabled: bool = False,
        area_size: AreaSize | None = None,
        mapper: CoordinateMapper | None = None,
    ) -> None:
        self._points: list[ControlPoint] = list(points)
        self._min_value = float(min_value)
        self._max_value = float(max_value)
        self._curve_type = CurveType(curve_type)
        self._is_clamped = is_clamped
        self._is_range_enabled = is_range_enabled
        self._area_size = self._floor_size(area_size or AreaSize(0.0, 0.0))
        self._mapper = mapper or CoordinateMapper()
        self._listeners: list[ChangeListener] = []
        self._drag: DragSession | None = None

    @classmethod
    def from_settings(
        cls,
        settings: CurveSettings,
        *,
        points: Iterable[ControlPoint] = (),
        area_size: AreaSize | None = None,
        mapper: CoordinateMapper | None = None,
    ) -> CurveModel:
        """Build a model from a CurveSettings config block."""
        return cls(
            points,
            min_value=settings.min_value,
            max_value=settings.max_value,
            curve_type=settings.curve_type,
            is_clamped=settings.clamp_enabled,
            is_range_enabled=settings.range_enabled,
            area_size=area_size,
            mapper=mapper,
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def points(self) -> tuple[ControlPoint, ...]:
        return tuple(self._points)

    @property
    def min_value(self) -> float:
        return self._min_value

    @property
    def max_value(self) -> float:
        return self._max_value

    @property
    def delta(self) -> float:
        return self._max_value - self._min_value

    @property
    def curve_type(self) -> CurveType:
        return self._curve_type

    @property
    def is_clamped(self) -> bool:
        return self._is_clamped

    @property
    def is_range_enabled(self) -> bool:
        return self._is_range_enabled

    @property
    def clamp_range(self) -> tuple[float, float] | None:
        """Output clamp bounds, or None when clamp mode is off."""
        if not self._is_clamped:
            return None
        return (self._min_value, self._max_value)

    @property
    def area_size(self) -> AreaSize:
        return self._area_size

    @property
    def mapper(self) -> CoordinateMapper:
        return self._mapper

    @property
    def is_laid_out(self) -> bool:
        """True once the widget has a usable control area and value range."""
        area = self._mapper.control_area_size(self._area_size)
        return area.width > 0 and area.height > 0 and self.delta > 0

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[ControlPoint]:
        return iter(list(self._points))

    def __contains__(self, point: object) -> bool:
        return any(p is point for p in self._points)

    def index_of(self, point: ControlPoint) -> int:
        """Index of ``point`` by identity.

        Raises:
            PointNotFoundError: If the point is not part of this curve.
        """
        for i, p in enumerate(self._points):
            if p is point:
                return i
        raise PointNotFoundError("point is not part of this curve")

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, change: CurveChange) -> CurveChange:
        if change.changed:
            for listener in list(self._listeners):
                listener(change)
        return change

    # ------------------------------------------------------------------
    # Collection mutations
    # ------------------------------------------------------------------

    def add(self, point: ControlPoint) -> CurveChange:
        """Append a point at the end of the curve."""
        self._points.append(point)
        return self._notify(CurveChange(ChangeKind.ADDED, len(self._points) - 1, point))

    def extend(self, points: Iterable[ControlPoint]) -> list[CurveChange]:
        return [self.add(p) for p in points]

    def insert(self, index: int, point: ControlPoint) -> CurveChange:
        """Insert a point at ``index``; the caller keeps time order.

        Raises:
            IndexError: If index is outside [0, len].
        """
        if not 0 <= index <= len(self._points):
            raise IndexError(f"insert index {index} out of range for {len(self._points)} points")
        self._points.insert(index, point)
        return self._notify(CurveChange(ChangeKind.INSERTED, index, point))

    def remove(self, point: ControlPoint) -> CurveChange:
        """Remove a point by identity."""
        return self.remove_at(self.index_of(point))

    def remove_at(self, index: int) -> CurveChange:
        """Remove the point at ``index``.

        Raises:
            IndexError: If index is out of range.
        """
        if not 0 <= index < len(self._points):
            raise IndexError(f"remove index {index} out of range for {len(self._points)} points")
        point = self._points.pop(index)
        if self._drag is not None and self._drag.point is point:
            logger.debug("Removed point was being dragged; ending drag")
            self._drag = None
        return self._notify(CurveChange(ChangeKind.REMOVED, index, point))

    def clear(self) -> CurveChange:
        """Remove every point."""
        self._points.clear()
        self._drag = None
        return self._notify(CurveChange(ChangeKind.RESET))

    def update_point(
        self,
        point: ControlPoint,
        *,
        time: float | None = None,
        value: float | None = None,
        range_value: float | None = None,
    ) -> CurveChange:
        """Write fields of a point, reporting only those that changed."""
        index = self.index_of(point)
        changed: set[str] = set()

        if time is not None and point.time != time:
            point.time = float(time)
            changed.add("time")
        if value is not None and point.value != value:
            point.value = float(value)
            changed.add("value")
        if range_value is not None and point.range_value != range_value:
            point.range_value = float(range_value)
            changed.add("range_value")

        return self._notify(CurveChange(ChangeKind.UPDATED, index, point, frozenset(changed)))

    def apply_collection_change(self, change: CollectionChange) -> list[CurveChange]:
        """Mirror one host collection notification."""
        if change.action == CollectionAction.ADD:
            return self.extend(change.items)

        if change.action == CollectionAction.INSERT:
            index = len(self._points) if change.index is None else change.index
            return [self.insert(index + offset, p) for offset, p in enumerate(change.items)]

        if change.action == CollectionAction.REMOVE:
            if change.index is None:
                return [self.remove(p) for p in change.items]
            # Removed items are contiguous from change.index
            return [self.remove_at(change.index) for _ in change.items]

        # RESET
        results = [self.clear()]
        results.extend(self.extend(change.items))
        return results

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def _settings_change(self, fields: set[str]) -> CurveChange:
        return self._notify(CurveChange(ChangeKind.SETTINGS, fields=frozenset(fields)))

    def set_curve_type(self, curve_type: CurveType | str) -> CurveChange:
        curve_type = CurveType(curve_type)
        fields = set()
        if curve_type != self._curve_type:
            self._curve_type = curve_type
            fields.add("curve_type")
        return self._settings_change(fields)

    def set_range(self, min_value: float, max_value: float) -> CurveChange:
        """Set the value range. Keeping min <= max is the caller's job."""
        fields = set()
        if min_value != self._min_value:
            self._min_value = float(min_value)
            fields.add("min_value")
        if max_value != self._max_value:
            self._max_value = float(max_value)
            fields.add("max_value")
        return self._settings_change(fields)

    def set_clamped(self, enabled: bool) -> CurveChange:
        fields = set()
        if enabled != self._is_clamped:
            self._is_clamped = enabled
            fields.add("is_clamped")
        return self._settings_change(fields)

    def set_range_enabled(self, enabled: bool) -> CurveChange:
        fields = set()
        if enabled != self._is_range_enabled:
            self._is_range_enabled = enabled
            fields.add("is_range_enabled")
            if not enabled and self._drag is not None and self._drag.target == DragTarget.RANGE:
                self._drag = None
        return self._settings_change(fields)

    @staticmethod
    def _floor_size(size: AreaSize) -> AreaSize:
        return AreaSize(max(0.0, float(size.width)), max(0.0, float(size.height)))

    def resize(self, area_size: AreaSize) -> CurveChange:
        """Update the widget size reported by the layout provider."""
        area_size = self._floor_size(area_size)
        fields = set()
        if area_size != self._area_size:
            self._area_size = area_size
            fields.add("area_size")
        return self._notify(CurveChange(ChangeKind.LAYOUT, fields=frozenset(fields)))

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def _pixel(self, time: float, value: float) -> Vec2:
        # A collapsed value range is mapped as a unit range instead of dividing by zero
        delta = self.delta if self.delta > 0 else 1.0
        return self._mapper.to_pixel(time, value, delta, self._area_size, origin=self._min_value)

    def pixel_position(self, point: ControlPoint) -> Vec2:
        """Pixel centre of a point's value handle."""
        return self._pixel(point.time, point.value)

    def range_pixel_position(self, point: ControlPoint) -> Vec2:
        """Pixel centre of a point's range handle (shares the owner's X)."""
        return self._pixel(point.time, point.range_value)

    def point_positions(self) -> list[Vec2]:
        return [self.pixel_position(p) for p in self._points]

    def range_positions(self) -> list[Vec2]:
        return [self.range_pixel_position(p) for p in self._points]

    def hit_test(self, pos: Vec2) -> tuple[ControlPoint, DragTarget] | None:
        """Topmost handle under ``pos``.

        Later points are painted over earlier ones, and a range handle is
        painted over its own value handle.
        """
        for point in reversed(self._points):
            range_center = self.range_pixel_position(point)
            if self._is_range_enabled and self._mapper.hit_test(range_center, pos):
                return point, DragTarget.RANGE
            if self._mapper.hit_test(self.pixel_position(point), pos):
                return point, DragTarget.VALUE
        return None

    # ------------------------------------------------------------------
    # Drag session
    # ------------------------------------------------------------------

    @property
    def dragging(self) -> ControlPoint | None:
        return self._drag.point if self._drag else None

    @property
    def drag_target(self) -> DragTarget | None:
        return self._drag.target if self._drag else None

    def begin_drag(
        self,
        point: ControlPoint,
        grab_offset: Vec2 = Vec2(0.0, 0.0),
        target: DragTarget = DragTarget.VALUE,
    ) -> None:
        """Start dragging a handle.

        Args:
            point: Point to drag.
            grab_offset: Pointer position minus the handle centre at capture.
            target: Which handle of the point is dragged.

        Raises:
            PointNotFoundError: If the point is not part of this curve.
            ValueError: If a range handle is dragged while range mode is off.
        """
        self.index_of(point)
        if target == DragTarget.RANGE and not self._is_range_enabled:
            raise ValueError("range handles are not enabled")
        self._drag = DragSession(point=point, grab_offset=grab_offset, target=target)
        logger.debug(f"Begin drag of {target.value} handle at index {self.index_of(point)}")

    def update_drag(self, pointer: Vec2) -> CurveChange | None:
        """Move the dragged handle to follow the pointer.

        Returns:
            The resulting change, or None when nothing is dragged or the
            widget is not laid out yet.
        """
        if self._drag is None:
            return None
        if not self.is_laid_out:
            logger.debug("Drag update ignored: widget not laid out")
            return None

        session = self._drag
        target = pointer - session.grab_offset
        if session.target == DragTarget.RANGE:
            return self._drag_range(session.point, target)
        return self._drag_value(session.point, target)

    def _drag_value(self, point: ControlPoint, target: Vec2) -> CurveChange:
        index = self.index_of(point)
        last = len(self._points) - 1
        prev_point = self._points[index - 1] if index > 0 else None
        next_point = self._points[index + 1] if index < last else None

        min_x = (
            self.pixel_position(prev_point).x
            if prev_point is not None
            else self._mapper.control_area_start().x
        )
        max_x = (
            self.pixel_position(next_point).x
            if next_point is not None
            else self._mapper.control_area_end(self._area_size).x
        )

        x = clamp(target.x, min_x, max_x)
        y = self._clamp_y(target.y)
        converted = self._mapper.to_value(
            Vec2(x, y), self._area_size, self.delta, origin=self._min_value
        )

        # Pixel round trips may drift by an ulp; the neighbours' times are the real bounds
        time = converted.time
        if prev_point is not None:
            time = max(time, prev_point.time)
        if next_point is not None:
            time = min(time, next_point.time)

        return self.update_point(point, time=time, value=converted.value)

    def _drag_range(self, point: ControlPoint, target: Vec2) -> CurveChange:
        x = self.pixel_position(point).x
        y = self._clamp_y(target.y)
        converted = self._mapper.to_value(
            Vec2(x, y), self._area_size, self.delta, origin=self._min_value
        )
        return self.update_point(point, range_value=converted.value)

    def _clamp_y(self, y: float) -> float:
        return clamp(y, self._mapper.compute_offset.y, self._mapper.limited_y(self._area_size))

    def end_drag(self) -> bool:
        """Stop dragging. Returns True if a drag was active."""
        was_dragging = self._drag is not None
        self._drag = None
        return was_dragging

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _range_points(self) -> list[ControlPoint]:
        return [ControlPoint(p.time, p.range_value) for p in self._points]

    def value_at(self, time: float) -> float:
        """Evaluate the curve at a normalized time.

        Raises:
            ValueError: If the curve has no points.
            NotImplementedError: For B-spline curves.
        """
        return splines.evaluate(self._curve_type, time, self._points, self.clamp_range)

    def range_value_at(self, time: float) -> float:
        """Evaluate the range band at a normalized time."""
        return splines.evaluate(self._curve_type, time, self._range_points(), self.clamp_range)

    def scan_at(self, pixel_x: float) -> ScanResult:
        """Read-only value query for the pixel column under the pointer.

        The column is clamped to the span between the first and last handle.
        Returns ``ScanResult.empty()`` when there is no curve to scan.
        """
        if not self._points or not self.is_laid_out:
            return ScanResult.empty()

        first_x = self.pixel_position(self._points[0]).x
        last_x = self.pixel_position(self._points[-1]).x
        x = clamp(pixel_x, first_x, last_x)
        time = self._mapper.time_at(x, self._area_size)

        value = self.value_at(time)
        position = Vec2(x, self._y_for(value))

        range_value = None
        range_position = None
        if self._is_range_enabled:
            range_value = self.range_value_at(time)
            range_position = Vec2(x, self._y_for(range_value))

        return ScanResult(
            time=time,
            value=value,
            position=position,
            range_value=range_value,
            range_position=range_position,
        )

    def _y_for(self, value: float) -> float:
        return self._mapper.y_for_value(value, self.delta, self._area_size, origin=self._min_value)
