"""Tests for CurveModel: collection, settings, drag and scan."""

from __future__ import annotations

import pytest

from curvedit.core.config.models import CurveSettings
from curvedit.core.curves.binding import CollectionAction, CollectionChange
from curvedit.core.curves.errors import PointNotFoundError
from curvedit.core.curves.geometry import CoordinateMapper
from curvedit.core.curves.model import CurveModel
from curvedit.core.curves.models import (
    AreaSize,
    ChangeKind,
    ControlPoint,
    CurveChange,
    CurveType,
    DragTarget,
    Vec2,
)


def assert_ordered(model: CurveModel) -> None:
    times = [p.time for p in model.points]
    assert times == sorted(times)


class TestCollection:
    """Tests for point collection mutations."""

    def test_add_appends_and_notifies(self, demo_model: CurveModel) -> None:
        """add() appends and reports the new index."""
        seen: list[CurveChange] = []
        demo_model.subscribe(seen.append)
        point = ControlPoint(1.0, 70.0)

        change = demo_model.add(point)

        assert change.kind == ChangeKind.ADDED
        assert change.index == 4
        assert demo_model.points[-1] is point
        assert seen == [change]

    def test_insert_at_index(self, demo_model: CurveModel) -> None:
        """insert() places the point at the given index."""
        point = ControlPoint(0.25, 10.0)
        change = demo_model.insert(1, point)
        assert change.kind == ChangeKind.INSERTED
        assert demo_model.index_of(point) == 1
        assert len(demo_model) == 5

    def test_insert_out_of_range_raises(self, demo_model: CurveModel) -> None:
        """Insert index must be within [0, len]."""
        with pytest.raises(IndexError):
            demo_model.insert(9, ControlPoint(0.5, 0.0))

    def test_remove_by_identity(self, demo_model: CurveModel) -> None:
        """remove() matches the exact point object."""
        target = demo_model.points[2]
        change = demo_model.remove(target)
        assert change.kind == ChangeKind.REMOVED
        assert change.index == 2
        assert target not in demo_model

    def test_remove_equal_copy_raises(self, demo_model: CurveModel) -> None:
        """A copy with equal fields is not the same point."""
        with pytest.raises(PointNotFoundError):
            demo_model.remove(demo_model.points[1].copy())

    def test_point_not_found_is_value_error(self, demo_model: CurveModel) -> None:
        """Unknown points raise a ValueError subclass."""
        with pytest.raises(ValueError, match="not part of this curve"):
            demo_model.index_of(ControlPoint(0.5, 30.0))

    def test_remove_at_out_of_range_raises(self, demo_model: CurveModel) -> None:
        """remove_at() checks its index."""
        with pytest.raises(IndexError):
            demo_model.remove_at(4)

    def test_clear(self, demo_model: CurveModel) -> None:
        """clear() empties the curve with a RESET change."""
        change = demo_model.clear()
        assert change.kind == ChangeKind.RESET
        assert len(demo_model) == 0

    def test_iteration_order(self, demo_model: CurveModel, demo_points: list[ControlPoint]) -> None:
        """Iteration follows insertion order."""
        assert list(demo_model) == demo_points


class TestUpdatePoint:
    """Tests for direct point updates."""

    def test_reports_changed_fields_only(self, demo_model: CurveModel) -> None:
        """Only fields whose value differs are listed."""
        point = demo_model.points[1]
        change = demo_model.update_point(point, time=0.5, value=35.0)
        assert change.fields == frozenset({"value"})
        assert point.value == 35.0

    def test_unchanged_update_does_not_notify(self, demo_model: CurveModel) -> None:
        """An update that changes nothing is silent."""
        seen: list[CurveChange] = []
        demo_model.subscribe(seen.append)
        change = demo_model.update_point(demo_model.points[1], value=30.0)
        assert not change.changed
        assert seen == []

    def test_unsubscribe(self, demo_model: CurveModel) -> None:
        """Unsubscribed listeners receive nothing."""
        seen: list[CurveChange] = []
        unsubscribe = demo_model.subscribe(seen.append)
        unsubscribe()
        demo_model.update_point(demo_model.points[1], value=12.0)
        assert seen == []


class TestCollectionMirroring:
    """Tests for apply_collection_change."""

    def test_add(self, demo_model: CurveModel) -> None:
        """ADD appends the items."""
        point = ControlPoint(1.0, 80.0)
        demo_model.apply_collection_change(CollectionChange(CollectionAction.ADD, 4, (point,)))
        assert demo_model.points[4] is point

    def test_insert(self, demo_model: CurveModel) -> None:
        """INSERT places items starting at the given index."""
        a = ControlPoint(0.1, 5.0)
        b = ControlPoint(0.2, 10.0)
        demo_model.apply_collection_change(CollectionChange(CollectionAction.INSERT, 1, (a, b)))
        assert demo_model.points[1] is a
        assert demo_model.points[2] is b

    def test_remove(self, demo_model: CurveModel) -> None:
        """REMOVE drops items starting at the given index."""
        second, third = demo_model.points[1:3]
        demo_model.apply_collection_change(
            CollectionChange(CollectionAction.REMOVE, 1, (second, third))
        )
        assert second not in demo_model
        assert third not in demo_model
        assert len(demo_model) == 2

    def test_remove_without_index(self, demo_model: CurveModel) -> None:
        """REMOVE without an index falls back to identity lookup."""
        target = demo_model.points[2]
        demo_model.apply_collection_change(
            CollectionChange(CollectionAction.REMOVE, None, (target,))
        )
        assert target not in demo_model
        assert len(demo_model) == 3

    def test_reset(self, demo_model: CurveModel) -> None:
        """RESET replaces the whole collection."""
        fresh = [ControlPoint(0.0, 1.0), ControlPoint(1.0, 2.0)]
        demo_model.apply_collection_change(
            CollectionChange(CollectionAction.RESET, None, tuple(fresh))
        )
        assert list(demo_model) == fresh


class TestSettings:
    """Tests for settings mutations."""

    def test_set_curve_type(self, demo_model: CurveModel) -> None:
        """Changing the type reports the field."""
        change = demo_model.set_curve_type("catmull_rom")
        assert change.kind == ChangeKind.SETTINGS
        assert change.fields == frozenset({"curve_type"})
        assert demo_model.curve_type == CurveType.CATMULL_ROM

    def test_same_curve_type_is_silent(self, demo_model: CurveModel) -> None:
        """Setting the current type changes nothing."""
        seen: list[CurveChange] = []
        demo_model.subscribe(seen.append)
        assert not demo_model.set_curve_type(CurveType.LINEAR).changed
        assert seen == []

    def test_set_range(self, demo_model: CurveModel) -> None:
        """Range changes move handles."""
        change = demo_model.set_range(0.0, 50.0)
        assert change.fields == frozenset({"max_value"})
        assert demo_model.delta == 50.0
        # value 30 of 50 sits 60% up the 100 px control area
        assert demo_model.pixel_position(demo_model.points[1]) == Vec2(55.0, pytest.approx(45.0))

    def test_collapsed_range_not_laid_out(self, demo_model: CurveModel) -> None:
        """A zero-width value range is placed as a unit range."""
        demo_model.set_range(50.0, 50.0)
        assert not demo_model.is_laid_out
        assert demo_model.pixel_position(demo_model.points[0]).x == 5.0

    def test_set_clamped(self, demo_model: CurveModel) -> None:
        """Clamp mode exposes the clamp range."""
        assert demo_model.clamp_range is None
        demo_model.set_clamped(True)
        assert demo_model.clamp_range == (0.0, 100.0)

    def test_resize_floors_negative(self, demo_model: CurveModel) -> None:
        """Layout sizes are floored at zero."""
        change = demo_model.resize(AreaSize(-5.0, 20.0))
        assert change.kind == ChangeKind.LAYOUT
        assert demo_model.area_size == AreaSize(0.0, 20.0)
        assert not demo_model.is_laid_out

    def test_from_settings(self, demo_points: list[ControlPoint], area: AreaSize) -> None:
        """A model built from settings carries them."""
        settings = CurveSettings(
            curve_type=CurveType.CATMULL_ROM,
            min_value=-10.0,
            max_value=10.0,
            clamp_enabled=True,
            range_enabled=True,
        )
        model = CurveModel.from_settings(
            settings, points=demo_points, area_size=area, mapper=CoordinateMapper(11)
        )
        assert model.curve_type == CurveType.CATMULL_ROM
        assert model.delta == 20.0
        assert model.clamp_range == (-10.0, 10.0)
        assert model.is_range_enabled
        assert model.mapper.handle_size == 11.0
        assert len(model) == 4


class TestHitTest:
    """Tests for handle hit testing."""

    def test_hits_value_handle(self, demo_model: CurveModel) -> None:
        """A click on a glyph hits its point."""
        point, target = demo_model.hit_test(Vec2(57.0, 73.0))
        assert point is demo_model.points[1]
        assert target == DragTarget.VALUE

    def test_miss(self, demo_model: CurveModel) -> None:
        """Empty space hits nothing."""
        assert demo_model.hit_test(Vec2(30.0, 20.0)) is None

    def test_range_handle_hit_when_enabled(self, demo_model: CurveModel) -> None:
        """Range handles are hit only in range mode."""
        point = demo_model.points[1]
        demo_model.update_point(point, range_value=80.0)
        assert demo_model.hit_test(Vec2(55.0, 25.0)) is None

        demo_model.set_range_enabled(True)
        assert demo_model.hit_test(Vec2(55.0, 25.0)) == (point, DragTarget.RANGE)

    def test_range_handle_on_top(self, demo_model: CurveModel) -> None:
        """Coinciding handles resolve to the range handle."""
        demo_model.set_range_enabled(True)
        assert demo_model.hit_test(Vec2(55.0, 75.0)) == (demo_model.points[1], DragTarget.RANGE)


class TestDrag:
    """Tests for drag sessions."""

    def test_monotonic_at_every_step(self, demo_model: CurveModel) -> None:
        """An interior point never crosses its neighbours."""
        point = demo_model.points[1]
        demo_model.begin_drag(point)
        for pointer in [
            Vec2(0.0, 75.0),
            Vec2(200.0, 75.0),
            Vec2(-50.0, -50.0),
            Vec2(85.0, 200.0),
            Vec2(60.0, 60.0),
            Vec2(54.9, 75.0),
            Vec2(1000.0, 0.0),
        ]:
            demo_model.update_drag(pointer)
            assert_ordered(demo_model)
            assert 0.0 <= point.time <= 0.8

    def test_drag_toward_previous_point_stops_at_it(self, demo_model: CurveModel) -> None:
        """Dragging the t=0.8 point left never takes it below t=0.5."""
        point = demo_model.points[2]
        demo_model.begin_drag(point)

        demo_model.update_drag(Vec2(55.0, 75.0))
        assert point.time >= 0.5
        demo_model.update_drag(Vec2(0.0, 75.0))

        assert point.time >= 0.5
        assert point.time == pytest.approx(0.5)
        assert point.value == pytest.approx(30.0)

    def test_first_point_bounded_by_area(self, demo_model: CurveModel) -> None:
        """The first point stops at the control area start and top."""
        point = demo_model.points[0]
        demo_model.begin_drag(point)
        demo_model.update_drag(Vec2(-100.0, 0.0))
        assert point.time == pytest.approx(0.0)
        assert point.value == pytest.approx(100.0)

    def test_last_point_bounded_by_area(self, demo_model: CurveModel) -> None:
        """The last point stops at the control area end and bottom."""
        point = demo_model.points[-1]
        demo_model.begin_drag(point)
        demo_model.update_drag(Vec2(500.0, 500.0))
        assert point.time == pytest.approx(1.0)
        assert point.value == pytest.approx(0.0)

    def test_grab_offset_applied(self, demo_model: CurveModel) -> None:
        """The handle keeps its offset from the pointer."""
        point = demo_model.points[1]
        demo_model.begin_drag(point, grab_offset=Vec2(2.0, -3.0))
        demo_model.update_drag(Vec2(62.0, 72.0))
        assert point.time == pytest.approx(0.55)
        assert point.value == pytest.approx(30.0)

    def test_update_notifies(self, demo_model: CurveModel) -> None:
        """A drag step reports the changed fields."""
        seen: list[CurveChange] = []
        demo_model.subscribe(seen.append)
        demo_model.begin_drag(demo_model.points[1])
        change = demo_model.update_drag(Vec2(65.0, 55.0))
        assert change is not None
        assert change.fields == frozenset({"time", "value"})
        assert seen == [change]

    def test_update_without_drag(self, demo_model: CurveModel) -> None:
        """No active drag means no change."""
        assert demo_model.update_drag(Vec2(55.0, 55.0)) is None

    def test_update_before_layout_ignored(self, demo_points: list[ControlPoint]) -> None:
        """Drag updates wait for a laid-out widget."""
        model = CurveModel(demo_points, max_value=100.0)
        model.begin_drag(demo_points[1])
        assert model.update_drag(Vec2(10.0, 10.0)) is None
        assert demo_points[1].time == 0.5

    def test_unknown_point_raises(self, demo_model: CurveModel) -> None:
        """Only points of this curve can be dragged."""
        with pytest.raises(ValueError):
            demo_model.begin_drag(ControlPoint(0.5, 30.0))

    def test_range_target_requires_range_mode(self, demo_model: CurveModel) -> None:
        """Range handles cannot be dragged while hidden."""
        with pytest.raises(ValueError, match="range handles are not enabled"):
            demo_model.begin_drag(demo_model.points[1], target=DragTarget.RANGE)

    def test_range_drag_moves_only_range_value(self, demo_model: CurveModel) -> None:
        """Range drags are vertical and leave time and value alone."""
        demo_model.set_range_enabled(True)
        point = demo_model.points[1]
        demo_model.begin_drag(point, target=DragTarget.RANGE)
        demo_model.update_drag(Vec2(0.0, 25.0))
        assert point.range_value == pytest.approx(80.0)
        assert point.time == 0.5
        assert point.value == 30.0

    def test_disabling_range_ends_range_drag(self, demo_model: CurveModel) -> None:
        """Hiding range handles drops their drag."""
        demo_model.set_range_enabled(True)
        demo_model.begin_drag(demo_model.points[1], target=DragTarget.RANGE)
        demo_model.set_range_enabled(False)
        assert demo_model.dragging is None

    def test_removing_dragged_point_ends_drag(self, demo_model: CurveModel) -> None:
        """A removed point cannot stay captured."""
        point = demo_model.points[1]
        demo_model.begin_drag(point)
        demo_model.remove(point)
        assert demo_model.dragging is None

    def test_end_drag(self, demo_model: CurveModel) -> None:
        """end_drag reports whether a drag was active."""
        demo_model.begin_drag(demo_model.points[1])
        assert demo_model.dragging is demo_model.points[1]
        assert demo_model.drag_target == DragTarget.VALUE
        assert demo_model.end_drag() is True
        assert demo_model.end_drag() is False


class TestScan:
    """Tests for scan queries."""

    def test_linear_scan(self, demo_model: CurveModel) -> None:
        """Pixel column 70 is t=0.65, v=40."""
        result = demo_model.scan_at(70.0)
        assert not result.is_empty
        assert result.time == pytest.approx(0.65)
        assert result.value == pytest.approx(40.0)
        assert result.position.x == 70.0
        assert result.position.y == pytest.approx(65.0)
        assert result.range_value is None

    def test_scan_clamped_to_curve_span(self, area: AreaSize) -> None:
        """Columns outside the first/last handle clamp to them."""
        points = [ControlPoint(0.2, 10.0), ControlPoint(0.6, 20.0)]
        model = CurveModel(points, max_value=100.0, area_size=area)
        assert model.scan_at(0.0).time == pytest.approx(0.2)
        assert model.scan_at(0.0).value == pytest.approx(10.0)
        assert model.scan_at(110.0).time == pytest.approx(0.6)

    def test_scan_does_not_mutate(self, demo_model: CurveModel) -> None:
        """Scanning leaves points untouched."""
        before = [(p.time, p.value) for p in demo_model.points]
        demo_model.scan_at(42.0)
        assert [(p.time, p.value) for p in demo_model.points] == before

    def test_empty_model_scan(self, area: AreaSize) -> None:
        """No points, no readout."""
        assert CurveModel(area_size=area).scan_at(50.0).is_empty

    def test_scan_before_layout(self, demo_points: list[ControlPoint]) -> None:
        """An unsized widget has nothing to scan."""
        assert CurveModel(demo_points, max_value=100.0).scan_at(50.0).is_empty

    def test_scan_with_range(self, demo_model: CurveModel) -> None:
        """Range mode adds the range readout."""
        demo_model.set_range_enabled(True)
        demo_model.update_point(demo_model.points[1], range_value=50.0)
        demo_model.update_point(demo_model.points[2], range_value=70.0)
        result = demo_model.scan_at(70.0)
        assert result.range_value == pytest.approx(60.0)
        assert result.range_position == Vec2(70.0, pytest.approx(45.0))

    def test_clamped_scan(self, area: AreaSize) -> None:
        """Clamp mode keeps scan values inside the range."""
        points = [ControlPoint(0.0, -20.0), ControlPoint(1.0, 120.0)]
        model = CurveModel(points, max_value=100.0, is_clamped=True, area_size=area)
        assert model.scan_at(5.0).value == 0.0
        assert model.scan_at(105.0).value == 100.0

    def test_catmull_rom_scan_hits_points(self, catmull_model: CurveModel) -> None:
        """The spline passes through each handle."""
        for point in catmull_model.points:
            x = catmull_model.pixel_position(point).x
            assert catmull_model.scan_at(x).value == pytest.approx(point.value)

    def test_value_at_empty_raises(self) -> None:
        """value_at needs at least one point."""
        with pytest.raises(ValueError, match="points cannot be empty"):
            CurveModel().value_at(0.5)

    def test_b_spline_not_implemented(self, demo_model: CurveModel) -> None:
        """B-spline evaluation is not available."""
        demo_model.set_curve_type(CurveType.B_SPLINE)
        with pytest.raises(NotImplementedError):
            demo_model.value_at(0.5)
