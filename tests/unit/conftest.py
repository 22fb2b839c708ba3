"""Shared pytest fixtures for unit tests.

The standard area is 110x110 px. With the default 9 px handle the control
area is 100x100 px starting at (5, 5), so over a 0-100 value range a point
(t, v) sits at pixel (5 + 100 * t, 105 - v).
"""

from __future__ import annotations

import pytest

from curvedit.core.curves.model import CurveModel
from curvedit.core.curves.models import AreaSize, ControlPoint, CurveType


@pytest.fixture
def area() -> AreaSize:
    """Widget size giving a 100x100 control area."""
    return AreaSize(110.0, 110.0)


@pytest.fixture
def demo_points() -> list[ControlPoint]:
    """The stock four-point demo curve."""
    return [
        ControlPoint(time=0.0, value=0.0),
        ControlPoint(time=0.5, value=30.0),
        ControlPoint(time=0.8, value=50.0),
        ControlPoint(time=1.0, value=60.0),
    ]


@pytest.fixture
def ramp_up_points() -> list[ControlPoint]:
    """Create ascending ramp points."""
    return [
        ControlPoint(time=0.0, value=0.0),
        ControlPoint(time=1.0, value=100.0),
    ]


@pytest.fixture
def demo_model(demo_points: list[ControlPoint], area: AreaSize) -> CurveModel:
    """Linear demo curve over [0, 100] in the standard area."""
    return CurveModel(demo_points, min_value=0.0, max_value=100.0, area_size=area)


@pytest.fixture
def catmull_model(demo_points: list[ControlPoint], area: AreaSize) -> CurveModel:
    """Catmull-Rom demo curve over [0, 100] in the standard area."""
    return CurveModel(
        demo_points,
        min_value=0.0,
        max_value=100.0,
        curve_type=CurveType.CATMULL_ROM,
        area_size=area,
    )
