"""Curve model and interpolation engine."""

from curvedit.core.curves.binding import (
    CollectionAction,
    CollectionChange,
    ObservablePointList,
    bind,
)
from curvedit.core.curves.errors import CurveEditorError, PointNotFoundError, SettingLockedError
from curvedit.core.curves.geometry import HANDLE_SIZE, CoordinateMapper
from curvedit.core.curves.model import CurveModel
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

__all__ = [
    "HANDLE_SIZE",
    "AreaSize",
    "ChangeKind",
    "CollectionAction",
    "CollectionChange",
    "ControlPoint",
    "CoordinateMapper",
    "CurveChange",
    "CurveEditorError",
    "CurveModel",
    "CurveType",
    "DragTarget",
    "ObservablePointList",
    "PointNotFoundError",
    "ScanResult",
    "SettingLockedError",
    "Vec2",
    "bind",
]
