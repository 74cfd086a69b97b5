"""Tests for pointer event translation and coordinate normalization."""

from unittest.mock import MagicMock, call

import pytest

from museo_brush.coordinates import normalize, normalize_event
from museo_brush.engine import BrushEngine
from museo_brush.events import PointerAdapter
from museo_brush.surface import Surface
from museo_brush.types import Point, PointerEvent, PointerEventType, SurfaceRect


def _event(kind: PointerEventType, x: float, y: float) -> PointerEvent:
    return PointerEvent(type=kind, client_x=x, client_y=y)


@pytest.fixture
def spy_engine() -> MagicMock:
    """Engine spy bound to a 200x100 surface."""
    engine = MagicMock(spec=BrushEngine)
    engine.surface = Surface.new(200, 100)
    engine.draw.return_value = True
    return engine


class TestNormalize:
    """Client to surface coordinate conversion."""

    def test_identity_when_unscaled(self) -> None:
        rect = SurfaceRect(width=200, height=100)
        assert normalize(50, 25, rect, 200, 100) == Point(x=50, y=25)

    def test_offset_and_scale(self) -> None:
        # Displayed at half size, 10px from the left and 20px from the top
        rect = SurfaceRect(left=10, top=20, width=100, height=50)
        assert normalize(60, 45, rect, 200, 100) == Point(x=100, y=50)

    def test_no_rounding(self) -> None:
        rect = SurfaceRect(width=300, height=300)
        point = normalize(1, 1, rect, 200, 200)
        assert point.x == pytest.approx(2 / 3)

    def test_outside_rect_maps_outside_surface(self) -> None:
        rect = SurfaceRect(left=10, top=10, width=100, height=100)
        point = normalize(0, 120, rect, 100, 100)
        assert point == Point(x=-10, y=110)

    def test_normalize_event(self) -> None:
        rect = SurfaceRect(width=50, height=50)
        event = _event(PointerEventType.DOWN, 25, 10)
        assert normalize_event(event, rect, 100, 100) == Point(x=50, y=20)

    def test_rect_visibility(self) -> None:
        assert SurfaceRect(width=10, height=10).is_visible
        assert not SurfaceRect(width=0, height=10).is_visible


class TestPointerAdapter:
    """Pointer events map to exactly the right engine calls."""

    def test_default_rect_matches_surface(self, spy_engine: MagicMock) -> None:
        adapter = PointerAdapter(spy_engine)
        assert (adapter.rect.width, adapter.rect.height) == (200, 100)

    def test_down_draws_dot(self, spy_engine: MagicMock) -> None:
        adapter = PointerAdapter(spy_engine)
        assert adapter.pointer_down(_event(PointerEventType.DOWN, 10, 20))
        spy_engine.draw.assert_called_once_with(Point(x=10, y=20), None)
        assert adapter.is_drawing

    def test_move_continues_from_last_point(self, spy_engine: MagicMock) -> None:
        adapter = PointerAdapter(spy_engine)
        adapter.pointer_down(_event(PointerEventType.DOWN, 10, 20))
        adapter.pointer_move(_event(PointerEventType.MOVE, 15, 20))
        adapter.pointer_move(_event(PointerEventType.MOVE, 20, 25))
        assert spy_engine.draw.call_args_list == [
            call(Point(x=10, y=20), None),
            call(Point(x=15, y=20), Point(x=10, y=20)),
            call(Point(x=20, y=25), Point(x=15, y=20)),
        ]

    def test_move_without_down_does_not_draw(self, spy_engine: MagicMock) -> None:
        adapter = PointerAdapter(spy_engine)
        assert not adapter.pointer_move(_event(PointerEventType.MOVE, 15, 20))
        spy_engine.draw.assert_not_called()
        assert adapter.cursor_pos == (15, 20)

    def test_up_ends_stroke_once(self, spy_engine: MagicMock) -> None:
        adapter = PointerAdapter(spy_engine)
        adapter.pointer_down(_event(PointerEventType.DOWN, 10, 20))
        adapter.pointer_up(_event(PointerEventType.UP, 10, 20))
        spy_engine.end_stroke.assert_called_once_with()
        assert not adapter.is_drawing
        assert adapter.last_point is None

    def test_down_then_leave_ends_stroke_once(self, spy_engine: MagicMock) -> None:
        """A press that leaves the surface without moving still ends the stroke."""
        adapter = PointerAdapter(spy_engine)
        adapter.pointer_down(_event(PointerEventType.DOWN, 10, 20))
        adapter.pointer_leave(_event(PointerEventType.LEAVE, -1, 20))
        spy_engine.draw.assert_called_once()
        spy_engine.end_stroke.assert_called_once_with()
        assert adapter.cursor_pos is None

    def test_moves_after_up_do_not_draw(self, spy_engine: MagicMock) -> None:
        adapter = PointerAdapter(spy_engine)
        adapter.pointer_down(_event(PointerEventType.DOWN, 10, 20))
        adapter.pointer_up()
        adapter.pointer_move(_event(PointerEventType.MOVE, 50, 50))
        assert spy_engine.draw.call_count == 1

    def test_scaled_rect(self, spy_engine: MagicMock) -> None:
        rect = SurfaceRect(left=100, top=50, width=400, height=200)
        adapter = PointerAdapter(spy_engine, rect=rect)
        adapter.pointer_down(_event(PointerEventType.DOWN, 300, 150))
        spy_engine.draw.assert_called_once_with(Point(x=100, y=50), None)

    def test_update_rect(self, spy_engine: MagicMock) -> None:
        adapter = PointerAdapter(spy_engine)
        adapter.update_rect(SurfaceRect(width=100, height=50))
        adapter.pointer_down(_event(PointerEventType.DOWN, 50, 25))
        spy_engine.draw.assert_called_once_with(Point(x=100, y=50), None)

    def test_invisible_rect_ignores_events(self, spy_engine: MagicMock) -> None:
        adapter = PointerAdapter(spy_engine, rect=SurfaceRect(width=0, height=0))
        assert not adapter.pointer_down(_event(PointerEventType.DOWN, 10, 10))
        spy_engine.draw.assert_not_called()
        adapter.pointer_up()
        spy_engine.end_stroke.assert_called_once_with()


class TestStrokeEndCallbacks:
    """Callbacks fire after completed strokes."""

    def test_callback_after_stroke(self, spy_engine: MagicMock) -> None:
        on_end = MagicMock()
        adapter = PointerAdapter(spy_engine, on_stroke_end=on_end)
        adapter.pointer_down(_event(PointerEventType.DOWN, 10, 20))
        adapter.pointer_up()
        on_end.assert_called_once_with()

    def test_no_callback_without_stroke(self, spy_engine: MagicMock) -> None:
        on_end = MagicMock()
        adapter = PointerAdapter(spy_engine)
        adapter.add_stroke_end_callback(on_end)
        adapter.pointer_leave()
        on_end.assert_not_called()
        spy_engine.end_stroke.assert_called_once_with()


class TestDispatch:
    """Event routing."""

    def test_dispatch_sequence(self, spy_engine: MagicMock) -> None:
        adapter = PointerAdapter(spy_engine)
        events = [
            _event(PointerEventType.DOWN, 10, 10),
            _event(PointerEventType.MOVE, 20, 10),
            _event(PointerEventType.UP, 20, 10),
            _event(PointerEventType.LEAVE, 300, 10),
        ]
        results = [adapter.dispatch(event) for event in events]
        assert results == [True, True, False, False]
        assert spy_engine.draw.call_count == 2
        assert spy_engine.end_stroke.call_count == 2

    def test_event_type_values(self) -> None:
        assert PointerEventType("pointerdown") is PointerEventType.DOWN
        event = PointerEvent.model_validate({"type": "pointermove", "client_x": 1, "client_y": 2})
        assert event.type is PointerEventType.MOVE


class TestAdapterWithRealEngine:
    """End-to-end pointer input onto a surface."""

    def test_drag_paints_line(self) -> None:
        surface = Surface.new(100, 100)
        with BrushEngine(surface, {"size": 4, "color": "#FF0000"}) as engine:
            adapter = PointerAdapter(engine, rect=SurfaceRect(width=50, height=50))
            adapter.dispatch(_event(PointerEventType.DOWN, 5, 25))
            adapter.dispatch(_event(PointerEventType.MOVE, 45, 25))
            adapter.dispatch(_event(PointerEventType.UP, 45, 25))
            assert not engine.is_drawing
        assert surface.pixel(50, 50) == (255, 0, 0, 255)
