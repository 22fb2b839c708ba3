"""Render data for an external painter.

``build_frame`` turns the current model and scan state into plain geometry:
borders, grid, handle glyphs, curve polylines and the scan readout. Nothing
here draws; a presentation adapter strokes and fills what it receives.
"""

from __future__ import annotations

from dataclasses import dataclass

from curvedit.core.curves import splines
from curvedit.core.curves.model import CurveModel
from curvedit.core.curves.models import (
    AreaSize,
    ControlPoint,
    CurveType,
    DragTarget,
    ScanResult,
    Vec2,
)
from curvedit.core.utils.logging import get_renderer_logger, log_performance

renderer_log = get_renderer_logger()

DEFAULT_DIVISIONS = 256
DEFAULT_GRID_DIVISIONS = 5

# Distance between a marker and its readout label
_LABEL_GAP = 2.0
_LABEL_MARGIN = 3.0
_HANDLE_LABEL_OFFSET = Vec2(0.0, 4.0)


@dataclass(frozen=True)
class Rect:
    top_left: Vec2
    size: AreaSize


@dataclass(frozen=True)
class Line:
    start: Vec2
    end: Vec2


@dataclass(frozen=True)
class TextLabel:
    text: str
    position: Vec2


@dataclass(frozen=True)
class HandleGlyph:
    """A draggable handle square and its readout."""

    center: Vec2
    rect: Rect
    label: TextLabel
    is_captured: bool = False
    is_range: bool = False


@dataclass(frozen=True)
class ScanReadout:
    """Scan line, value markers and their labels."""

    result: ScanResult
    line: Line
    marker: Rect
    label: TextLabel
    range_marker: Rect | None = None
    range_label: TextLabel | None = None


@dataclass(frozen=True)
class RenderFrame:
    """Everything a painter needs for one frame."""

    area_size: AreaSize
    outer_rect: Rect
    control_rect: Rect
    grid_lines: tuple[Line, ...]
    handles: tuple[HandleGlyph, ...]
    curve_path: tuple[Vec2, ...]
    range_path: tuple[Vec2, ...]
    scan: ScanReadout | None
    min_label: TextLabel
    max_label: TextLabel


def _grid_lines(model: CurveModel, grid_divisions: int) -> tuple[Line, ...]:
    start = model.mapper.control_area_start()
    end = model.mapper.control_area_end(model.area_size)
    lines: list[Line] = []
    for i in range(1, grid_divisions):
        f = i / grid_divisions
        y = start.y + f * (end.y - start.y)
        lines.append(Line(Vec2(start.x, y), Vec2(end.x, y)))
    for i in range(1, grid_divisions):
        f = i / grid_divisions
        x = start.x + f * (end.x - start.x)
        lines.append(Line(Vec2(x, start.y), Vec2(x, end.y)))
    return tuple(lines)


def _handle(model: CurveModel, point: ControlPoint, *, is_range: bool) -> HandleGlyph:
    center = model.range_pixel_position(point) if is_range else model.pixel_position(point)
    top_left, size = model.mapper.handle_rect(center)
    target = DragTarget.RANGE if is_range else DragTarget.VALUE
    captured = model.dragging is point and model.drag_target == target
    return HandleGlyph(
        center=center,
        rect=Rect(top_left, size),
        label=TextLabel(point.label(use_range=is_range), center + _HANDLE_LABEL_OFFSET),
        is_captured=captured,
        is_range=is_range,
    )


def curve_path(
    model: CurveModel,
    values: list[float],
    positions: list[Vec2],
    divisions: int = DEFAULT_DIVISIONS,
) -> tuple[Vec2, ...]:
    """Pixel polyline of a curve through ``values``.

    Linear curves connect the handle centres. Catmull-Rom curves start at the
    first handle and continue through the tessellated samples, with each
    segment spread evenly between its two control times.

    Raises:
        NotImplementedError: For B-spline curves.
    """
    if not positions:
        return ()

    if model.curve_type == CurveType.LINEAR:
        return tuple(positions)
    if model.curve_type != CurveType.CATMULL_ROM:
        raise NotImplementedError(f"Curve type not implemented: {model.curve_type.value}")

    samples = splines.tessellate_catmull_rom(divisions, values, model.clamp_range)
    times = splines.tessellate_times(divisions, [p.time for p in model.points])

    area = model.mapper.control_area_size(model.area_size)
    offset = model.mapper.compute_offset
    path = [positions[0]]
    for t, v in zip(times, samples, strict=True):
        x = float(t) * area.width + offset.x
        y = model.mapper.y_for_value(float(v), model.delta, model.area_size, origin=model.min_value)
        path.append(Vec2(x, y))
    return tuple(path)


def _scan_readout(model: CurveModel, scan: ScanResult) -> ScanReadout:
    handle = model.mapper.handle_size
    x = scan.position.x
    line = Line(Vec2(x, 0.0), Vec2(x, model.area_size.height))

    top_left, size = model.mapper.handle_rect(scan.position)
    label = TextLabel(scan.label(), Vec2(x + _LABEL_GAP, scan.position.y + handle))

    range_marker = None
    range_label = None
    if scan.range_position is not None:
        r_top_left, r_size = model.mapper.handle_rect(scan.range_position)
        range_marker = Rect(r_top_left, r_size)
        range_label = TextLabel(
            scan.range_label() or "",
            Vec2(x + _LABEL_GAP, scan.range_position.y + handle),
        )

    return ScanReadout(
        result=scan,
        line=line,
        marker=Rect(top_left, size),
        label=label,
        range_marker=range_marker,
        range_label=range_label,
    )


@log_performance
def build_frame(
    model: CurveModel,
    scan: ScanResult | None = None,
    *,
    divisions: int = DEFAULT_DIVISIONS,
    grid_divisions: int = DEFAULT_GRID_DIVISIONS,
) -> RenderFrame:
    """Collect the render data of the current model state.

    Args:
        model: Curve to render.
        scan: Active scan readout, if a scan session is running.
        divisions: Samples per segment for Catmull-Rom paths.
        grid_divisions: Grid cells per axis.

    Returns:
        RenderFrame with paths left empty while the widget is not laid out.
    """
    area_size = model.area_size
    mapper = model.mapper
    start = mapper.control_area_start()
    end = mapper.control_area_end(area_size)

    points = model.points
    handles = [_handle(model, p, is_range=False) for p in points]
    if model.is_range_enabled:
        handles.extend(_handle(model, p, is_range=True) for p in points)

    path: tuple[Vec2, ...] = ()
    range_path: tuple[Vec2, ...] = ()
    readout = None
    if model.is_laid_out:
        path = curve_path(model, [p.value for p in points], model.point_positions(), divisions)
        if model.is_range_enabled:
            range_path = curve_path(
                model, [p.range_value for p in points], model.range_positions(), divisions
            )
        renderer_log.debug(f"Paths: {len(path)} curve samples, {len(range_path)} range samples")
        if scan is not None and not scan.is_empty:
            readout = _scan_readout(model, scan)

    label_x = mapper.half_size + _LABEL_MARGIN
    min_label = TextLabel(
        f"{model.min_value:g}",
        Vec2(label_x, end.y - mapper.handle_size - _LABEL_MARGIN),
    )
    max_label = TextLabel(f"{model.max_value:g}", Vec2(label_x, mapper.half_size + _LABEL_MARGIN))

    return RenderFrame(
        area_size=area_size,
        outer_rect=Rect(Vec2(0.0, 0.0), area_size),
        control_rect=Rect(start, AreaSize(max(0.0, end.x - start.x), max(0.0, end.y - start.y))),
        grid_lines=_grid_lines(model, grid_divisions),
        handles=tuple(handles),
        curve_path=path,
        range_path=range_path,
        scan=readout,
        min_label=min_label,
        max_label=max_label,
    )
