"""Mapping between normalized curve-space and pixel-space.

Curve-space is (time, value) with time in [0, 1] and value in
[origin, origin + delta]. Pixel-space is the widget rectangle with Y growing
downward, so larger values render higher.

Every handle glyph is a square of ``handle_size`` pixels centred on its
point. The usable control area is inset by ``ceil(handle_size / 2)`` on each
edge and is one pixel smaller again to leave room for the border.
"""

from __future__ import annotations

from curvedit.core.curves.models import AreaSize, ControlPoint, Vec2
from curvedit.core.utils.math import clamp, half_ceil

HANDLE_SIZE = 9


class CoordinateMapper:
    """Pure pixel <-> curve-space conversions for one handle size.

    The mapper does not guard against an empty control area or a zero value
    range; callers check for a laid-out widget before converting.

    Example:
        >>> mapper = CoordinateMapper()
        >>> mapper.to_pixel(0.5, 50.0, 100.0, AreaSize(110, 110))
        Vec2(x=55.0, y=55.0)
    """

    def __init__(self, handle_size: float = HANDLE_SIZE) -> None:
        if handle_size <= 0:
            raise ValueError(f"handle_size must be > 0, got {handle_size}")
        self.handle_size = float(handle_size)
        self.half_size = self.handle_size * 0.5
        inset = float(half_ceil(self.handle_size))
        self.compute_offset = Vec2(inset, inset)
        self.render_offset = -self.compute_offset

    def __repr__(self) -> str:
        return f"CoordinateMapper(handle_size={self.handle_size:g})"

    # ------------------------------------------------------------------
    # Area geometry
    # ------------------------------------------------------------------

    def control_area_size(self, actual: AreaSize) -> AreaSize:
        """Usable drag area for a widget of the given size.

        Not-yet-laid-out widgets would produce negative sizes; those are
        floored at zero.
        """
        width = actual.width - self.handle_size - 1
        height = actual.height - self.handle_size - 1
        return AreaSize(max(0.0, width), max(0.0, height))

    def control_area_start(self) -> Vec2:
        return self.compute_offset

    def control_area_end(self, actual: AreaSize) -> Vec2:
        return Vec2(
            max(0.0, actual.width - self.compute_offset.x),
            max(0.0, actual.height - self.compute_offset.y),
        )

    def limited_y(self, actual: AreaSize) -> float:
        """Largest pixel Y a handle centre may take."""
        return actual.height - self.compute_offset.y

    def handle_rect(self, center: Vec2) -> tuple[Vec2, AreaSize]:
        """Top-left corner and size of the handle glyph drawn at ``center``."""
        return center + self.render_offset, AreaSize(self.handle_size, self.handle_size)

    def hit_test(self, center: Vec2, pos: Vec2) -> bool:
        """True if ``pos`` falls on the handle glyph drawn at ``center``."""
        top_left, size = self.handle_rect(center)
        return (
            top_left.x <= pos.x <= top_left.x + size.width
            and top_left.y <= pos.y <= top_left.y + size.height
        )

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    def to_pixel(
        self,
        time: float,
        value: float,
        delta: float,
        area_size: AreaSize,
        origin: float = 0.0,
    ) -> Vec2:
        """Convert a curve-space pair to the pixel centre of its handle.

        Args:
            time: Normalized time.
            value: Value in [origin, origin + delta].
            delta: Width of the value range (max - min).
            area_size: Actual widget size.
            origin: Value mapped to the bottom edge (the curve's min value).

        Returns:
            Pixel position, clamped into the widget and offset by the inset.
        """
        area = self.control_area_size(area_size)
        x = time * area.width
        y = area.height - ((value - origin) / delta * area.height)
        return Vec2(
            clamp(x, 0.0, area_size.width) + self.compute_offset.x,
            clamp(y, 0.0, area_size.height) + self.compute_offset.y,
        )

    def y_for_value(
        self, value: float, delta: float, area_size: AreaSize, origin: float = 0.0
    ) -> float:
        """Unclamped pixel Y of a value, used for tessellated path samples."""
        area = self.control_area_size(area_size)
        return area.height - (value - origin) / delta * area.height + self.compute_offset.y

    def to_value(
        self,
        pos: Vec2,
        area_size: AreaSize,
        delta: float,
        origin: float = 0.0,
    ) -> ControlPoint:
        """Convert a pixel position back to curve-space.

        Args:
            pos: Pixel position of a handle centre.
            area_size: Actual widget size.
            delta: Width of the value range (max - min).
            origin: Value mapped to the bottom edge (the curve's min value).

        Returns:
            A new ControlPoint carrying the converted time and value.
        """
        area = self.control_area_size(area_size)
        x = clamp(pos.x, self.compute_offset.x, area_size.width) - self.compute_offset.x
        y = clamp(pos.y, self.compute_offset.y, area_size.height) - self.compute_offset.y

        value = origin + (1.0 - y / area.height) * delta
        time = x / area.width
        return ControlPoint(time=time, value=value)

    def time_at(self, pixel_x: float, area_size: AreaSize) -> float:
        """Normalized time under a pixel column (no clamping)."""
        area = self.control_area_size(area_size)
        return (pixel_x - self.compute_offset.x) / area.width
