"""Pointer interaction for the curve editor.

Two independent sessions run on top of a CurveModel:

- drag: primary button pressed on a handle, moves it until release,
- scan: secondary button held anywhere, reads the curve value under the
  pointer without changing anything.

Releasing the button of one session never ends the other.
"""

from __future__ import annotations

import logging
from enum import Enum

from curvedit.core.curves.model import CurveModel
from curvedit.core.curves.models import DragTarget, ScanResult, Vec2

logger = logging.getLogger(__name__)


class PointerButton(str, Enum):
    """Pointer buttons the editor reacts to."""

    PRIMARY = "primary"
    SECONDARY = "secondary"


class InteractionController:
    """Translates raw pointer events into model drags and scan queries.

    Every handler returns True when the view needs repainting.

    Example:
        >>> from curvedit.core.curves.models import AreaSize, ControlPoint
        >>> model = CurveModel(
        ...     [ControlPoint(0.0, 0.0), ControlPoint(1.0, 60.0)],
        ...     max_value=100.0,
        ...     area_size=AreaSize(110, 110),
        ... )
        >>> controller = InteractionController(model)
        >>> controller.press(Vec2(55, 60), PointerButton.SECONDARY)
        True
        >>> controller.scan.value
        30.0
    """

    def __init__(self, model: CurveModel) -> None:
        self._model = model
        self._scanning = False
        self._scan: ScanResult | None = None
        self._scan_pointer: Vec2 | None = None

    @property
    def model(self) -> CurveModel:
        return self._model

    @property
    def is_dragging(self) -> bool:
        return self._model.dragging is not None

    @property
    def is_scanning(self) -> bool:
        return self._scanning

    @property
    def scan(self) -> ScanResult | None:
        """Latest scan readout while scanning, otherwise None."""
        return self._scan if self._scanning else None

    @property
    def scan_pointer(self) -> Vec2 | None:
        return self._scan_pointer if self._scanning else None

    def press(self, pos: Vec2, button: PointerButton) -> bool:
        """Handle a button press at ``pos``."""
        if button == PointerButton.SECONDARY:
            self._scanning = True
            self._refresh_scan(pos)
            return True

        hit = self._model.hit_test(pos)
        if hit is None:
            return False

        point, target = hit
        if target == DragTarget.RANGE:
            center = self._model.range_pixel_position(point)
        else:
            center = self._model.pixel_position(point)

        self._model.begin_drag(point, pos - center, target)
        self._model.update_drag(pos)
        return True

    def move(self, pos: Vec2, *, primary_held: bool = True, secondary_held: bool = False) -> bool:
        """Handle a pointer move with the current button states.

        A session whose button is no longer held ends here; this covers
        releases that happened outside the widget.
        """
        invalidate = False

        if self._model.dragging is not None:
            if primary_held:
                self._model.update_drag(pos)
            else:
                self._model.end_drag()
            invalidate = True

        if self._scanning:
            if secondary_held:
                self._refresh_scan(pos)
            else:
                self._end_scan()
            invalidate = True

        return invalidate

    def release(self, button: PointerButton) -> bool:
        """Handle a button release; only the matching session ends."""
        if button == PointerButton.PRIMARY:
            return self._model.end_drag()

        was_scanning = self._scanning
        self._end_scan()
        return was_scanning

    def release_all(self) -> bool:
        """End both sessions."""
        dragged = self._model.end_drag()
        scanned = self._scanning
        self._end_scan()
        return dragged or scanned

    def refresh(self) -> None:
        """Re-evaluate the scan readout after an external model change."""
        if self._scanning and self._scan_pointer is not None:
            self._refresh_scan(self._scan_pointer)

    def _refresh_scan(self, pos: Vec2) -> None:
        self._scan_pointer = pos
        self._scan = self._model.scan_at(pos.x)

    def _end_scan(self) -> None:
        self._scanning = False
        self._scan = None
        self._scan_pointer = None
